"""
stochopt: composable stochastic optimization.

Pull observations from a data source, ask an objective for a gradient,
apply a pluggable update rule and stop on composable conditions.

Example:
    >>> from stochopt import (
    ...     ModuleObjective, Adam, make_learner, learn, infinite_batches
    ... )
    >>> objective = ModuleObjective(nn.Linear(10, 1), nn.MSELoss())
    >>> learner = make_learner(Adam(), maxiter=2000)
    >>> state = learn(objective, learner, infinite_batches(X, y, size=20))
"""

__version__ = "0.1.0"

from .errors import (
    StochOptError,
    SizeMismatch,
    OutOfRange,
    ShapeMismatch,
    ObjectiveError,
    ObjectiveFailure,
)
from .data import (
    DataSubset,
    nobs,
    getobs,
    eachobs,
    shuffled,
    splitobs,
    eachbatch,
    infinite_obs,
    infinite_batches,
)
from .training import (
    SGD,
    Adagrad,
    Adadelta,
    Adam,
    Adamax,
    RMSProp,
    create_updater,
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
    LearnState,
    StopReason,
    LearningLoop,
    learn,
)
from .objectives import (
    QuadraticObjective,
    RosenbrockObjective,
    FunctionObjective,
    ModuleObjective,
)
from .utils import LearnerConfig, load_config, save_config, setup_logging, set_seed

__all__ = [
    '__version__',

    # Errors
    'StochOptError',
    'SizeMismatch',
    'OutOfRange',
    'ShapeMismatch',
    'ObjectiveError',
    'ObjectiveFailure',

    # Data
    'DataSubset',
    'nobs',
    'getobs',
    'eachobs',
    'shuffled',
    'splitobs',
    'eachbatch',
    'infinite_obs',
    'infinite_batches',

    # Update rules
    'SGD',
    'Adagrad',
    'Adadelta',
    'Adam',
    'Adamax',
    'RMSProp',
    'create_updater',

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

    # Objectives
    'QuadraticObjective',
    'RosenbrockObjective',
    'FunctionObjective',
    'ModuleObjective',

    # Utils
    'LearnerConfig',
    'load_config',
    'save_config',
    'setup_logging',
    'set_seed',
]
