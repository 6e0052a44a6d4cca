"""
Learning rate policies for stochopt.

A policy maps the 1-based iteration number to a learning rate.

Available policies:
- FixedLR: constant rate
- WarmupLR: linear warmup then constant, linear or cosine decay
- CosineLR: cosine annealing with warmup and restarts
- StepDecayLR: multiply by gamma every step_size iterations

Example:
    >>> from stochopt.training.schedulers import create_lr_policy
    >>> policy = create_lr_policy('warmup', lr=0.1, warmup_steps=10, total_steps=100)
    >>> policy(5)
    0.05
"""

from .base import LearningRatePolicy, SchedulerSpec
from .constant import FixedLR
from .warmup import WarmupLR
from .cosine import CosineLR
from .step import StepDecayLR
from .factory import (
    create_lr_policy,
    create_lr_policy_from_config,
    create_lr_policy_from_spec,
    as_lr_policy,
    SCHEDULER_REGISTRY,
)

__all__ = [
    # Base
    'LearningRatePolicy',
    'SchedulerSpec',

    # Policies
    'FixedLR',
    'WarmupLR',
    'CosineLR',
    'StepDecayLR',

    # Factory
    'create_lr_policy',
    'create_lr_policy_from_config',
    'create_lr_policy_from_spec',
    'as_lr_policy',
    'SCHEDULER_REGISTRY',
]
