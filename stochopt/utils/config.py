"""
Configuration management for stochopt.

A LearnerConfig describes a learner declaratively (update rule, learning
rate policy, stopping conditions, tracers) so it can be kept in YAML.
Callables such as convergence predicates cannot be serialized; they are
passed to `make_learner_from_config` alongside the config.

Example:
    >>> from stochopt.utils import LearnerConfig, load_config
    >>>
    >>> config = LearnerConfig(
    ...     update_rule={'name': 'adam', 'beta1': 0.8},
    ...     lr_policy=0.01,
    ...     maxiter=5000,
    ... )
    >>> save_config(config, 'configs/adam.yaml')
    >>> config = load_config('configs/adam.yaml')
"""

import logging
from dataclasses import dataclass, asdict, fields
from numbers import Real
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)


# ============================================================================
# LEARNER CONFIGURATION
# ============================================================================

@dataclass
class LearnerConfig:
    """
    Declarative learner configuration.

    Args:
        update_rule: Rule name, or dict with 'name' and hyperparameters
        lr_policy: Fixed learning rate, or dict with 'name' and policy args.
            None uses the update rule's default learning rate.
        maxiter: Stop after this many iterations
        time_limit: Stop after this many seconds
        converge_every: Evaluate the convergence predicate every N iterations
        log_every: Log progress every N iterations (None = no logging tracer)
        progress: Show a tqdm progress bar
        seed: Seed the global random sources before the run

    Example:
        >>> config = LearnerConfig(
        ...     update_rule='rmsprop',
        ...     lr_policy={'name': 'cosine', 'lr': 0.01, 'total_steps': 1000},
        ...     maxiter=1000,
        ...     log_every=100
        ... )
    """

    # Update rule
    update_rule: Union[str, Dict[str, Any]] = 'sgd'
    lr_policy: Optional[Union[float, Dict[str, Any]]] = None

    # Stopping
    maxiter: Optional[int] = None
    time_limit: Optional[float] = None
    converge_every: int = 1

    # Tracing
    log_every: Optional[int] = None
    progress: bool = False

    # Reproducibility
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate configuration."""
        if isinstance(self.update_rule, dict) and not (
            'name' in self.update_rule or 'type' in self.update_rule
        ):
            raise ValueError("update_rule dict must contain 'name' or 'type'")
        if isinstance(self.lr_policy, Real) and self.lr_policy < 0:
            raise ValueError(f"lr_policy must be non-negative, got {self.lr_policy}")
        if self.maxiter is not None and self.maxiter < 1:
            raise ValueError(f"maxiter must be positive, got {self.maxiter}")
        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError(f"time_limit must be positive, got {self.time_limit}")
        if self.converge_every < 1:
            raise ValueError(f"converge_every must be positive, got {self.converge_every}")
        if self.log_every is not None and self.log_every < 1:
            raise ValueError(f"log_every must be positive, got {self.log_every}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'LearnerConfig':
        """Create from dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(config_dict) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**config_dict)


# ============================================================================
# YAML UTILITIES
# ============================================================================

def load_config(config_path: Union[str, Path]) -> LearnerConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        LearnerConfig instance
    """
    with open(config_path, 'r') as f:
        config_dict = yaml.safe_load(f) or {}

    return LearnerConfig.from_dict(config_dict)


def save_config(config: LearnerConfig, config_path: Union[str, Path]) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: LearnerConfig instance
        config_path: Path to save YAML file
    """
    config_dict = config.to_dict()

    # Create directory if needed
    Path(config_path).parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Config saved to: {config_path}")


def merge_configs(base: LearnerConfig, override: Dict[str, Any]) -> LearnerConfig:
    """
    Merge override values into base config.

    Nested dicts (update_rule, lr_policy) are merged key by key.

    Example:
        >>> config = merge_configs(base, {'update_rule': {'beta1': 0.8}, 'maxiter': 100})
    """
    config_dict = base.to_dict()

    def deep_merge(d1, d2):
        for key, value in d2.items():
            if key in d1 and isinstance(d1[key], dict) and isinstance(value, dict):
                deep_merge(d1[key], value)
            else:
                d1[key] = value

    deep_merge(config_dict, override)

    return LearnerConfig.from_dict(config_dict)
