"""Strategy that drives an update rule."""

import logging
from typing import Any, Callable, Optional, Union

import torch

from ...errors import ObjectiveError
from ..schedulers import as_lr_policy
from ..updaters import UpdateRule
from .base import LearningStrategy

logger = logging.getLogger(__name__)


class UpdateDriver(LearningStrategy):
    """
    Apply an update rule to the model's parameters on every iteration.

    Reads the gradient the objective stored in `model.grad`, asks the rule
    for a delta and adds it to `model.params()` in place. This is the only
    strategy that writes the parameters.

    Args:
        rule: Update rule (owns the accumulators for this run)
        lr_policy: Fixed learning rate, policy config dict, or callable of
            the iteration. Defaults to the rule's `default_lr`.

    Example:
        >>> driver = UpdateDriver(Adam(), lr_policy=0.01)
        >>> driver = UpdateDriver(SGD(), lr_policy=lambda i: 1.0 / i)
    """

    def __init__(
        self,
        rule: UpdateRule,
        lr_policy: Optional[Union[float, dict, Callable[[int], float]]] = None
    ):
        self.rule = rule
        self.lr_policy = as_lr_policy(rule.default_lr if lr_policy is None else lr_policy)
        self.last_lr: Optional[float] = None

    def update_hook(self, model: Any, iteration: int) -> None:
        grad = getattr(model, 'grad', None)
        if grad is None:
            raise ObjectiveError(
                f"{type(model).__name__} has no gradient at iteration {iteration}"
            )

        lr = float(self.lr_policy(iteration))
        if lr < 0.0:
            raise ValueError(f"Learning rate policy returned {lr} at iteration {iteration}")
        self.last_lr = lr

        params = model.params()
        delta = self.rule.update(params, grad, lr)
        with torch.no_grad():
            params.add_(delta.view_as(params))

    def __repr__(self) -> str:
        return f"UpdateDriver({self.rule!r}, lr_policy={self.lr_policy!r})"
