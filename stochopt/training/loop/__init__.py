"""
Training loop for stochopt.
"""

from .state import LearnState, StopReason
from .engine import LearningLoop, learn

__all__ = [
    'LearnState',
    'StopReason',
    'LearningLoop',
    'learn',
]
