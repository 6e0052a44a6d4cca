"""
Closed-form test objectives.

These ignore the batch they are given, which makes them handy for checking
update rules in isolation.
"""

from typing import Any, Optional, Tuple, Union

import torch
from torch import Tensor

from ..errors import ShapeMismatch
from .base import BaseObjective
from .autograd import FunctionObjective

TensorLike = Union[Tensor, Any]


class QuadraticObjective(BaseObjective):
    """
    Convex quadratic f(θ) = 0.5 (θ - θ*)ᵀ A (θ - θ*).

    Args:
        A: Symmetric positive definite matrix, or a vector holding its diagonal
        optimum: Minimizer θ*
        start: Initial parameters (default: zeros)
        dtype: Parameter dtype (default: float64)

    Example:
        >>> f = QuadraticObjective([1.0, 0.5], optimum=[1.0, -2.0])
        >>> f.gradient()
        tensor([-1.,  1.], dtype=torch.float64)
    """

    def __init__(
        self,
        A: TensorLike,
        optimum: TensorLike,
        start: Optional[TensorLike] = None,
        dtype: torch.dtype = torch.float64
    ):
        self.A = torch.as_tensor(A, dtype=dtype)
        self.optimum = torch.as_tensor(optimum, dtype=dtype).reshape(-1)
        n = self.optimum.numel()

        if self.A.dim() == 1 and self.A.numel() != n:
            raise ShapeMismatch(f"Diagonal of length {self.A.numel()} for {n} parameters")
        if self.A.dim() == 2 and tuple(self.A.shape) != (n, n):
            raise ShapeMismatch(f"Matrix of shape {tuple(self.A.shape)} for {n} parameters")
        if self.A.dim() not in (1, 2):
            raise ValueError(f"A must be a vector or a matrix, got {self.A.dim()} dims")

        if start is None:
            params = torch.zeros(n, dtype=dtype)
        else:
            params = torch.as_tensor(start, dtype=dtype).reshape(-1).clone()
            if params.numel() != n:
                raise ShapeMismatch(f"Start point has {params.numel()} entries, expected {n}")

        super().__init__(params)

    def _evaluate(self, batch: Any) -> Tuple[Tensor, Tensor]:
        diff = self._params - self.optimum
        grad = self.A * diff if self.A.dim() == 1 else self.A @ diff
        return 0.5 * diff.dot(grad), grad

    def distance(self) -> float:
        """Euclidean distance from the minimizer."""
        return (self._params - self.optimum).norm().item()


def rosenbrock(x: Tensor, batch: Any = None) -> Tensor:
    """Rosenbrock function, summed over consecutive coordinate pairs."""
    return (100.0 * (x[1:] - x[:-1] ** 2) ** 2 + (1.0 - x[:-1]) ** 2).sum()


class RosenbrockObjective(FunctionObjective):
    """
    Rosenbrock's banana function in `n` dimensions, minimized at all ones.

    Args:
        n: Number of parameters (at least 2)
        start: Initial parameters (default: -1.2, 1.0, -1.2, ...)
    """

    def __init__(self, n: int = 2, start: Optional[TensorLike] = None, dtype: torch.dtype = torch.float64):
        if n < 2:
            raise ValueError(f"Rosenbrock needs at least 2 parameters, got {n}")
        if start is None:
            start = torch.tensor([-1.2 if i % 2 == 0 else 1.0 for i in range(n)], dtype=dtype)
        super().__init__(rosenbrock, start, dtype=dtype)
        if self._params.numel() != n:
            raise ShapeMismatch(f"Start point has {self._params.numel()} entries, expected {n}")
        self.optimum = torch.ones(n, dtype=dtype)
