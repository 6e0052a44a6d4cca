"""Objective wrapping a torch.nn.Module and a loss function."""

from typing import Any, Callable, Optional, Tuple

import torch
import torch.nn as nn
from torch import Tensor

from .base import BaseObjective


class ModuleObjective(BaseObjective):
    """
    Fit an nn.Module to (inputs, targets) batches.

    The module's parameters are re-pointed at slices of one flat vector, so
    in-place updates to `params()` change the module directly.

    Batches follow the observation-last layout of stochopt.data: inputs of
    shape (features, batch) are transposed to (batch, features) before the
    forward pass. A single observation (a feature vector) is treated as a
    batch of one.

    Args:
        module: Model to fit
        loss_fn: Callable `loss_fn(output, target) -> scalar tensor`
        penalty: Optional callable `penalty(module) -> scalar tensor` added to the loss

    Example:
        >>> objective = ModuleObjective(nn.Linear(10, 1), nn.MSELoss())
        >>> learn(objective, make_learner(SGD(), maxiter=1000), infinite_batches(X, y, size=20))
    """

    def __init__(
        self,
        module: nn.Module,
        loss_fn: Callable[[Tensor, Tensor], Tensor],
        penalty: Optional[Callable[[nn.Module], Tensor]] = None
    ):
        parameters = [p for p in module.parameters() if p.requires_grad]
        if not parameters:
            raise ValueError("Module has no trainable parameters")

        flat = torch.cat([p.detach().reshape(-1) for p in parameters]).clone()
        offset = 0
        for p in parameters:
            n = p.numel()
            p.data = flat[offset:offset + n].view_as(p)
            offset += n

        super().__init__(flat)
        self.module = module
        self.loss_fn = loss_fn
        self.penalty = penalty
        self._parameters = parameters

    def _prepare(self, batch: Any) -> Tuple[Tensor, Tensor]:
        if not isinstance(batch, (tuple, list)) or len(batch) != 2:
            raise ValueError("ModuleObjective expects (inputs, targets) batches")
        x, y = batch

        x = torch.as_tensor(x, dtype=self._params.dtype)
        x = x.unsqueeze(0) if x.dim() <= 1 else x.movedim(-1, 0)

        y = torch.as_tensor(y)
        if y.is_floating_point():
            y = y.to(self._params.dtype)
        if y.dim() > 1:
            y = y.movedim(-1, 0)
        return x, y

    def _forward(self, batch: Any) -> Tensor:
        x, y = self._prepare(batch)
        output = self.module(x)
        if output.shape != y.shape and output.numel() == y.numel() and y.is_floating_point():
            output = output.reshape(y.shape)

        loss = self.loss_fn(output, y)
        if self.penalty is not None:
            loss = loss + self.penalty(self.module)
        return loss

    def _evaluate(self, batch: Any) -> Tuple[Tensor, Tensor]:
        self.module.zero_grad(set_to_none=True)
        loss = self._forward(batch)
        loss.backward()

        grad = torch.cat([
            p.grad.reshape(-1) if p.grad is not None else torch.zeros_like(p).reshape(-1)
            for p in self._parameters
        ])
        return loss.detach(), grad

    def loss(self, batch: Any = None) -> float:
        with torch.no_grad():
            return float(self._forward(batch))

    def __repr__(self) -> str:
        return f"ModuleObjective({type(self.module).__name__}, num_params={self._params.numel()})"
