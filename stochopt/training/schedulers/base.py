"""Base classes and protocols for learning rate policies."""

from typing import Protocol, Dict, Any
from dataclasses import dataclass, field


class LearningRatePolicy(Protocol):
    """
    Protocol for learning rate policies.

    A policy is a pure function of the iteration number (1-based count of
    the update being computed); it holds no per-run state.
    """

    component_type: str = 'scheduler'
    component_name: str

    def __call__(self, iteration: int) -> float:
        """Learning rate for `iteration`."""
        ...


@dataclass
class SchedulerSpec:
    """Specification for creating a learning rate policy."""

    name: str
    lr: float = 1e-3
    warmup_steps: int = 0
    total_steps: int = 1000
    min_lr: float = 0.0
    warmup_init_lr: float = 0.0
    config: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'lr': self.lr,
            'warmup_steps': self.warmup_steps,
            'total_steps': self.total_steps,
            'min_lr': self.min_lr,
            'warmup_init_lr': self.warmup_init_lr,
            **self.config
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'SchedulerSpec':
        """Create from dictionary."""
        known_fields = {'name', 'lr', 'warmup_steps', 'total_steps', 'min_lr', 'warmup_init_lr'}
        spec_kwargs = {k: v for k, v in d.items() if k in known_fields}
        config_kwargs = {k: v for k, v in d.items() if k not in known_fields}
        if config_kwargs:
            spec_kwargs['config'] = config_kwargs
        return cls(**spec_kwargs)


def check_lr(lr: float) -> None:
    """Reject negative learning rates."""
    if lr < 0.0:
        raise ValueError(f"Invalid learning rate: {lr}")
