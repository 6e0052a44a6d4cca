"""
Base classes and protocols for update rules in stochopt.

An update rule turns a gradient into a parameter delta. It never writes the
parameters itself: the driving strategy applies `params += delta`. Each rule
owns its accumulators, which are created lazily on first use to match the
parameter vector and then persist until `reset()`.

Reusing one rule instance for a second run carries its accumulators over;
call `reset()` between runs, or build a fresh rule.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

import torch
from torch import Tensor

from ...errors import ShapeMismatch

logger = logging.getLogger(__name__)


# ============================================================================
# UPDATE RULE PROTOCOL
# ============================================================================

class UpdateRule(Protocol):
    """
    Protocol for update rule components.

    All update rules must implement this interface to be driven by
    UpdateDriver.
    """

    component_type: str = 'updater'
    component_name: str
    default_lr: float

    def update(self, params: Tensor, grad: Tensor, lr: float) -> Tensor:
        """
        Compute the parameter delta for one step.

        Args:
            params: Current parameter vector (read only)
            grad: Gradient with the same number of elements as params
            lr: Learning rate for this step

        Returns:
            Delta with the same shape as params
        """
        ...

    def reset(self) -> None:
        """Discard all accumulated state."""
        ...

    def state_dict(self) -> Dict[str, Any]:
        """
        Get the accumulated state for inspection.

        Returns:
            Dictionary of accumulators (tensors) and counters
        """
        ...


# ============================================================================
# UPDATE RULE SPECIFICATION
# ============================================================================

@dataclass
class UpdaterSpec:
    """
    Specification for creating an update rule.

    Hyperparameters left as None fall back to the rule's own defaults.

    Example:
        >>> spec = UpdaterSpec(name='adam', beta1=0.8, eps=1e-6)
    """

    name: str
    eps: Optional[float] = None

    # Decaying-average rules (Adadelta, RMSProp)
    rho: Optional[float] = None

    # Moment-based rules (Adam, Adamax)
    beta1: Optional[float] = None
    beta2: Optional[float] = None

    # Additional kwargs
    config: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert spec to dictionary, dropping unset hyperparameters."""
        values = {
            'name': self.name,
            'eps': self.eps,
            'rho': self.rho,
            'beta1': self.beta1,
            'beta2': self.beta2,
        }
        return {
            **{k: v for k, v in values.items() if v is not None},
            **self.config
        }

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'UpdaterSpec':
        """Create spec from dictionary."""
        known_fields = {'name', 'eps', 'rho', 'beta1', 'beta2'}

        spec_kwargs = {k: v for k, v in config.items() if k in known_fields}
        extra_kwargs = {k: v for k, v in config.items() if k not in known_fields}

        if extra_kwargs:
            spec_kwargs['config'] = extra_kwargs

        return cls(**spec_kwargs)


# ============================================================================
# BASE UPDATE RULE
# ============================================================================

class BaseUpdater(ABC):
    """
    Base class for update rules.

    Handles what every rule shares:
    - Lazy state creation on the first call
    - Gradient/parameter length checks
    - Skipping non-finite gradients

    Subclasses implement `_init_state` and `_delta`.

    Args:
        eps: Term for numerical stability
    """

    component_type: str = 'updater'
    component_name: str = 'base'
    default_lr: float = 1e-3

    def __init__(self, eps: float = 1e-8):
        if eps < 0.0:
            raise ValueError(f"Invalid eps: {eps}")
        self.eps = eps
        self.state: Dict[str, Any] = {}
        self.num_params: Optional[int] = None

    def update(self, params: Tensor, grad: Tensor, lr: float) -> Tensor:
        """Compute the delta for one step (see UpdateRule.update)."""
        if grad.numel() != params.numel():
            raise ShapeMismatch(
                f"Gradient has {grad.numel()} elements but parameters have "
                f"{params.numel()}"
            )

        if self.num_params is None:
            self.num_params = params.numel()
            self._init_state(params)
        elif grad.numel() != self.num_params:
            raise ShapeMismatch(
                f"{self.component_name} tracks {self.num_params} parameters, "
                f"got a gradient with {grad.numel()} elements"
            )

        grad = grad.detach().to(params).reshape(params.shape)

        # Check for NaN/Inf
        if not torch.isfinite(grad).all():
            logger.warning(f"Non-finite gradient in {self.component_name}, skipping")
            return torch.zeros_like(params)

        with torch.no_grad():
            return self._delta(grad, lr)

    def reset(self) -> None:
        """Discard all accumulated state."""
        self.state = {}
        self.num_params = None

    def state_dict(self) -> Dict[str, Any]:
        """Get accumulated state."""
        return dict(self.state)

    def _init_state(self, params: Tensor) -> None:
        """Create accumulators shaped like `params` (default: none)."""
        pass

    @abstractmethod
    def _delta(self, grad: Tensor, lr: float) -> Tensor:
        """Advance the state with `grad` and return the delta."""
        pass

    @staticmethod
    def _check_decay(name: str, value: float) -> None:
        if not 0.0 <= value < 1.0:
            raise ValueError(f"Invalid {name}: {value}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(eps={self.eps})"
