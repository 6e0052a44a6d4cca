"""
Objective protocol and shared base class.

An objective owns the flat parameter vector being optimized. The training
loop hands it one batch per iteration; it computes the loss and gradient at
the current parameters and keeps the gradient in `grad` for the update
strategy to read, the way torch keeps `p.grad` next to a parameter.
"""

import math
from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, Tuple

import torch
from torch import Tensor

from ..errors import ObjectiveError


class Objective(Protocol):
    """Protocol for objectives driven by the training loop."""

    grad: Optional[Tensor]

    def params(self) -> Tensor:
        """Flat parameter vector, updated in place by the learner."""
        ...

    def value(self) -> Optional[float]:
        """Loss at the last evaluation."""
        ...

    def gradient(self, batch: Any) -> Tensor:
        """Evaluate at the current parameters and return the gradient."""
        ...


class BaseObjective(ABC):
    """
    Base class for objectives over a flat parameter vector.

    Subclasses implement `_evaluate(batch) -> (loss, grad)`.

    Raises:
        ObjectiveError: From `gradient` when the loss is not finite
    """

    def __init__(self, params: Tensor):
        if params.dim() != 1:
            raise ValueError(f"Parameters must be a flat vector, got shape {tuple(params.shape)}")
        self._params = params
        self.grad: Optional[Tensor] = None
        self._value: Optional[float] = None
        self.evaluations = 0

    def params(self) -> Tensor:
        return self._params

    def value(self) -> Optional[float]:
        return self._value

    def gradient(self, batch: Any = None) -> Tensor:
        loss, grad = self._evaluate(batch)
        loss = float(loss)
        if not math.isfinite(loss):
            raise ObjectiveError(f"Non-finite loss {loss} in {type(self).__name__}")

        self.evaluations += 1
        self._value = loss
        self.grad = grad.detach().reshape(-1)
        return self.grad

    def loss(self, batch: Any = None) -> float:
        """Loss at the current parameters, without touching `grad`."""
        return float(self._evaluate(batch)[0])

    @abstractmethod
    def _evaluate(self, batch: Any) -> Tuple[Tensor, Tensor]:
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(num_params={self._params.numel()})"
