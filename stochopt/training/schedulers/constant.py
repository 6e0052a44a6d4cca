"""Fixed learning rate policy."""

from .base import check_lr


class FixedLR:
    """
    Constant learning rate.

    Args:
        lr: Learning rate returned for every iteration
    """

    component_type: str = 'scheduler'
    component_name: str = 'fixed'

    def __init__(self, lr: float):
        check_lr(lr)
        self.lr = float(lr)

    def __call__(self, iteration: int) -> float:
        return self.lr

    def __repr__(self) -> str:
        return f"FixedLR({self.lr})"
