"""
Utilities for stochopt: configuration, logging and seeding.
"""

from .config import (
    LearnerConfig,
    load_config,
    save_config,
    merge_configs,
)
from .logging import ColoredFormatter, setup_logging
from .seeding import set_seed, make_generator

__all__ = [
    # Config
    'LearnerConfig',
    'load_config',
    'save_config',
    'merge_configs',

    # Logging
    'ColoredFormatter',
    'setup_logging',

    # Seeding
    'set_seed',
    'make_generator',
]
