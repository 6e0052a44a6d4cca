"""
Learning strategies for stochopt.

Available strategies:
- UpdateDriver: applies an update rule to the parameters
- MaxIterations, TimeLimit, ConvergenceCheck, ValuePlateau: stopping
- IterFunction, Tracer, LoggingTracer, ProgressTracer: observers
- Learner: ordered composite of any of the above
"""

from .base import LearningStrategy
from .gradient_descent import UpdateDriver
from .stopping import MaxIterations, TimeLimit, ConvergenceCheck, ValuePlateau
from .tracers import IterFunction, Tracer, LoggingTracer, ProgressTracer
from .learner import Learner, make_learner, make_learner_from_config

__all__ = [
    # Base
    'LearningStrategy',
    'Learner',

    # Update
    'UpdateDriver',

    # Stopping
    'MaxIterations',
    'TimeLimit',
    'ConvergenceCheck',
    'ValuePlateau',

    # Observers
    'IterFunction',
    'Tracer',
    'LoggingTracer',
    'ProgressTracer',

    # Construction
    'make_learner',
    'make_learner_from_config',
]
