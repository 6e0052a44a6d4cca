"""
Training components for stochopt.

- updaters: first-order update rules (SGD, Adagrad, Adadelta, Adam, Adamax, RMSProp)
- schedulers: learning rate policies
- strategies: composable learning strategies and the Learner composite
- loop: the training loop engine
"""

from .updaters import (
    UpdateRule,
    UpdaterSpec,
    BaseUpdater,
    SGD,
    Adagrad,
    Adadelta,
    Adam,
    Adamax,
    RMSProp,
    create_updater,
    create_updater_from_config,
    create_updater_from_spec,
    UPDATER_REGISTRY,
)
from .schedulers import (
    FixedLR,
    WarmupLR,
    CosineLR,
    StepDecayLR,
    create_lr_policy,
    create_lr_policy_from_config,
    as_lr_policy,
)
from .strategies import (
    LearningStrategy,
    Learner,
    UpdateDriver,
    MaxIterations,
    TimeLimit,
    ConvergenceCheck,
    ValuePlateau,
    IterFunction,
    Tracer,
    LoggingTracer,
    ProgressTracer,
    make_learner,
    make_learner_from_config,
)
from .loop import LearnState, StopReason, LearningLoop, learn

__all__ = [
    # Updaters
    'UpdateRule',
    'UpdaterSpec',
    'BaseUpdater',
    'SGD',
    'Adagrad',
    'Adadelta',
    'Adam',
    'Adamax',
    'RMSProp',
    'create_updater',
    'create_updater_from_config',
    'create_updater_from_spec',
    'UPDATER_REGISTRY',

    # Schedulers
    'FixedLR',
    'WarmupLR',
    'CosineLR',
    'StepDecayLR',
    'create_lr_policy',
    'create_lr_policy_from_config',
    'as_lr_policy',

    # Strategies
    'LearningStrategy',
    'Learner',
    'UpdateDriver',
    'MaxIterations',
    'TimeLimit',
    'ConvergenceCheck',
    'ValuePlateau',
    'IterFunction',
    'Tracer',
    'LoggingTracer',
    'ProgressTracer',
    'make_learner',
    'make_learner_from_config',

    # Loop
    'LearnState',
    'StopReason',
    'LearningLoop',
    'learn',
]
