"""Objectives whose gradient comes from torch autograd."""

from typing import Any, Callable, Optional, Tuple

import torch
from torch import Tensor

from .base import BaseObjective


class FunctionObjective(BaseObjective):
    """
    Objective defined by a scalar function of the parameters and a batch.

    Args:
        fn: Callable `fn(params, batch) -> scalar tensor`, differentiable in params
        params: Initial parameters (copied and flattened)
        dtype: Parameter dtype (default: keep a floating input's dtype)

    Example:
        >>> def loss(theta, batch):
        ...     x, y = batch
        ...     return ((theta @ x - y) ** 2).mean()
        >>> objective = FunctionObjective(loss, torch.zeros(3))
    """

    def __init__(
        self,
        fn: Callable[[Tensor, Any], Tensor],
        params: Any,
        dtype: Optional[torch.dtype] = None
    ):
        params = torch.as_tensor(params, dtype=dtype)
        if not params.is_floating_point():
            params = params.to(torch.get_default_dtype())
        super().__init__(params.detach().reshape(-1).clone())
        self.fn = fn

    def _evaluate(self, batch: Any) -> Tuple[Tensor, Tensor]:
        theta = self._params.detach().requires_grad_(True)
        loss = self.fn(theta, batch)
        grad, = torch.autograd.grad(loss, theta)
        return loss.detach(), grad

    def loss(self, batch: Any = None) -> float:
        with torch.no_grad():
            return float(self.fn(self._params, batch))
