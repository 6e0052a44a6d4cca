"""
Learning rate policy factory and creation utilities.
"""

from numbers import Real
from typing import Any, Callable, Dict, Union

from .base import LearningRatePolicy, SchedulerSpec
from .constant import FixedLR
from .warmup import WarmupLR
from .cosine import CosineLR
from .step import StepDecayLR


# ============================================================================
# POLICY REGISTRY
# ============================================================================

SCHEDULER_REGISTRY = {
    'fixed': FixedLR,
    'constant': FixedLR,
    'warmup': WarmupLR,
    'cosine': CosineLR,
    'step': StepDecayLR,
}


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_lr_policy(name: str, **kwargs) -> LearningRatePolicy:
    """
    Create a learning rate policy by name.

    Args:
        name: Policy name ('fixed', 'warmup', 'cosine', 'step')
        **kwargs: Policy-specific arguments

    Example:
        >>> policy = create_lr_policy('cosine', lr=0.1, total_steps=1000)
        >>> policy(1)
    """
    name_lower = name.lower().strip()

    if name_lower not in SCHEDULER_REGISTRY:
        available = ', '.join(SCHEDULER_REGISTRY.keys())
        raise ValueError(
            f"Unknown learning rate policy: {name}. "
            f"Available policies: {available}"
        )

    return SCHEDULER_REGISTRY[name_lower](**kwargs)


def create_lr_policy_from_config(
    config: Union[float, Dict[str, Any]]
) -> LearningRatePolicy:
    """
    Create a learning rate policy from a number or configuration dictionary.

    A bare number gives a FixedLR.

    Example:
        >>> policy = create_lr_policy_from_config(0.01)
        >>> policy = create_lr_policy_from_config({
        ...     'name': 'warmup', 'lr': 0.1, 'warmup_steps': 10, 'total_steps': 100
        ... })
    """
    if isinstance(config, Real) and not isinstance(config, bool):
        return FixedLR(float(config))

    config = dict(config)

    # Support both 'name' and 'type'
    name = config.pop('name', None)
    type_name = config.pop('type', None)
    name = name or type_name
    if name is None:
        raise ValueError("Config must contain 'name' or 'type' key")

    return create_lr_policy(name, **config)


def create_lr_policy_from_spec(spec: SchedulerSpec) -> LearningRatePolicy:
    """
    Create a learning rate policy from SchedulerSpec.

    Only the fields the named policy accepts are passed on.
    """
    name = spec.name.lower().strip()
    kwargs: Dict[str, Any] = {'lr': spec.lr}

    if name in ('warmup', 'cosine'):
        kwargs.update(
            warmup_steps=spec.warmup_steps,
            total_steps=spec.total_steps,
            min_lr=spec.min_lr,
            warmup_init_lr=spec.warmup_init_lr,
        )

    kwargs.update(spec.config)
    return create_lr_policy(name, **kwargs)


def as_lr_policy(value: Union[float, Callable[[int], float], Dict[str, Any]]) -> LearningRatePolicy:
    """
    Coerce a number, config dict or callable into a learning rate policy.

    Example:
        >>> as_lr_policy(0.1)(5)
        0.1
        >>> as_lr_policy(lambda i: 1.0 / i)(4)
        0.25
    """
    if isinstance(value, (Real, dict)) and not isinstance(value, bool):
        return create_lr_policy_from_config(value)
    if callable(value):
        return value
    raise TypeError(f"Cannot use {type(value).__name__} as a learning rate policy")
