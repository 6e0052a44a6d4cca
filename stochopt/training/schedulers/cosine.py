"""Cosine annealing learning rate policy with warmup and restarts."""

import math

from .base import check_lr


class CosineLR:
    """
    Cosine annealing learning rate with optional warmup.

    Args:
        lr: Peak learning rate
        total_steps: Iterations over which to anneal
        warmup_steps: Number of warmup iterations (default: 0)
        min_lr: Minimum learning rate (default: 0.0)
        warmup_init_lr: Initial warmup LR (default: 0.0)
        num_cycles: Number of cosine cycles (default: 1)
    """

    component_type: str = 'scheduler'
    component_name: str = 'cosine'

    def __init__(
        self,
        lr: float,
        total_steps: int,
        warmup_steps: int = 0,
        min_lr: float = 0.0,
        warmup_init_lr: float = 0.0,
        num_cycles: int = 1
    ):
        check_lr(lr)
        if total_steps <= warmup_steps:
            raise ValueError(
                f"total_steps ({total_steps}) must exceed warmup_steps ({warmup_steps})"
            )
        if num_cycles < 1:
            raise ValueError(f"Invalid num_cycles: {num_cycles}")

        self.lr = lr
        self.total_steps = total_steps
        self.warmup_steps = warmup_steps
        self.min_lr = min_lr
        self.warmup_init_lr = warmup_init_lr
        self.num_cycles = num_cycles

    def get_lr_factor(self, step: int) -> float:
        """
        Compute cosine learning rate factor.

        Args:
            step: Current iteration

        Returns:
            Learning rate multiplier
        """
        progress = (step - self.warmup_steps) / (self.total_steps - self.warmup_steps)
        if progress >= 1.0:
            return 0.0

        # Apply cycles
        cosine_arg = math.pi * (progress * self.num_cycles % 1.0)
        return 0.5 * (1.0 + math.cos(cosine_arg))

    def __call__(self, iteration: int) -> float:
        if iteration <= self.warmup_steps:
            warmup_progress = iteration / self.warmup_steps
            return self.warmup_init_lr + (self.lr - self.warmup_init_lr) * warmup_progress

        return self.min_lr + (self.lr - self.min_lr) * self.get_lr_factor(iteration)

    def __repr__(self) -> str:
        return (
            f"CosineLR("
            f"lr={self.lr}, "
            f"total_steps={self.total_steps}, "
            f"warmup_steps={self.warmup_steps}, "
            f"num_cycles={self.num_cycles})"
        )
