"""Step decay learning rate policy."""

from .base import check_lr


class StepDecayLR:
    """
    Multiply the learning rate by `gamma` every `step_size` iterations.

    lr_t = lr * gamma ** ((t - 1) // step_size)

    Args:
        lr: Initial learning rate
        step_size: Iterations between decays
        gamma: Decay factor (default: 0.5)
    """

    component_type: str = 'scheduler'
    component_name: str = 'step'

    def __init__(self, lr: float, step_size: int, gamma: float = 0.5):
        check_lr(lr)
        if step_size < 1:
            raise ValueError(f"Invalid step_size: {step_size}")
        if not 0.0 < gamma <= 1.0:
            raise ValueError(f"Invalid gamma: {gamma}")
        self.lr = lr
        self.step_size = step_size
        self.gamma = gamma

    def __call__(self, iteration: int) -> float:
        return self.lr * self.gamma ** ((max(iteration, 1) - 1) // self.step_size)

    def __repr__(self) -> str:
        return f"StepDecayLR(lr={self.lr}, step_size={self.step_size}, gamma={self.gamma})"
