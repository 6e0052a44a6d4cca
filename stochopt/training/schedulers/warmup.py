"""Warmup learning rate policy with linear warmup and optional decay."""

import math

from .base import check_lr


class WarmupLR:
    """
    Learning rate with warmup and optional decay.

    Supports:
    - Linear warmup from `warmup_init_lr` to `lr`
    - Constant LR after warmup
    - Linear decay after warmup
    - Cosine decay after warmup

    Args:
        lr: Peak learning rate
        warmup_steps: Number of warmup iterations
        total_steps: Iteration at which decay reaches `min_lr`
        min_lr: Minimum learning rate (default: 0.0)
        warmup_init_lr: Initial warmup LR (default: 0.0)
        decay_style: Decay after warmup ('constant', 'linear', 'cosine')
    """

    component_type: str = 'scheduler'
    component_name: str = 'warmup'

    def __init__(
        self,
        lr: float,
        warmup_steps: int,
        total_steps: int,
        min_lr: float = 0.0,
        warmup_init_lr: float = 0.0,
        decay_style: str = 'cosine'
    ):
        check_lr(lr)
        if warmup_steps < 0:
            raise ValueError(f"Invalid warmup_steps: {warmup_steps}")
        if total_steps <= warmup_steps:
            raise ValueError(
                f"total_steps ({total_steps}) must exceed warmup_steps ({warmup_steps})"
            )
        if decay_style not in ('constant', 'linear', 'cosine'):
            raise ValueError(f"Unknown decay_style: {decay_style}")

        self.lr = lr
        self.warmup_steps = warmup_steps
        self.total_steps = total_steps
        self.min_lr = min_lr
        self.warmup_init_lr = warmup_init_lr
        self.decay_style = decay_style

    def get_lr_factor(self, step: int) -> float:
        """
        Compute the decay factor for an iteration past warmup.

        Args:
            step: Current iteration

        Returns:
            Multiplier in [0, 1] applied between min_lr and lr
        """
        if self.decay_style == 'constant':
            return 1.0

        progress = (step - self.warmup_steps) / (self.total_steps - self.warmup_steps)
        progress = min(progress, 1.0)

        if self.decay_style == 'linear':
            return max(0.0, 1.0 - progress)

        return 0.5 * (1.0 + math.cos(math.pi * progress))

    def __call__(self, iteration: int) -> float:
        # During warmup, interpolate from warmup_init_lr to lr
        if iteration <= self.warmup_steps:
            warmup_progress = iteration / self.warmup_steps
            return self.warmup_init_lr + (self.lr - self.warmup_init_lr) * warmup_progress

        return self.min_lr + (self.lr - self.min_lr) * self.get_lr_factor(iteration)

    def __repr__(self) -> str:
        return (
            f"WarmupLR("
            f"lr={self.lr}, "
            f"warmup_steps={self.warmup_steps}, "
            f"total_steps={self.total_steps}, "
            f"decay_style={self.decay_style})"
        )
