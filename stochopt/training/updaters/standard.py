"""
First-order update rules for stochopt.

This module provides:
- SGD: plain gradient step
- Adagrad: per-parameter rates from the running sum of squared gradients
- Adadelta: unit-corrected rates from decaying averages of gradients and deltas
- Adam: bias-corrected first and second moment estimates
- Adamax: Adam with an infinity-norm second moment
- RMSProp: per-parameter rates from a decaying average of squared gradients

Every rule returns a delta; nothing here writes the parameters.
"""

import torch
from torch import Tensor

from .base import BaseUpdater


# ============================================================================
# SGD
# ============================================================================

class SGD(BaseUpdater):
    """
    Stochastic Gradient Descent.

    delta = -lr * g

    Example:
        >>> rule = SGD()
        >>> delta = rule.update(params, grad, lr=0.1)
    """

    component_name: str = 'sgd'
    default_lr: float = 0.01

    def __init__(self):
        super().__init__(eps=0.0)

    def _delta(self, grad: Tensor, lr: float) -> Tensor:
        return grad.mul(-lr)

    def __repr__(self) -> str:
        return "SGD()"


# ============================================================================
# ADAGRAD
# ============================================================================

class Adagrad(BaseUpdater):
    """
    Adagrad: adaptive rates from accumulated squared gradients.

    s += g^2
    delta = -lr * g / (sqrt(s) + eps)

    Reference:
        "Adaptive Subgradient Methods for Online Learning and Stochastic
        Optimization" by Duchi et al.

    Args:
        eps: Term for numerical stability (default: 1e-8)
    """

    component_name: str = 'adagrad'
    default_lr: float = 0.01

    def __init__(self, eps: float = 1e-8):
        super().__init__(eps=eps)

    def _init_state(self, params: Tensor) -> None:
        self.state['sum_sq'] = torch.zeros_like(params)

    def _delta(self, grad: Tensor, lr: float) -> Tensor:
        sum_sq = self.state['sum_sq']
        sum_sq.addcmul_(grad, grad)
        denom = sum_sq.sqrt().add_(self.eps)
        return grad.div(denom).mul_(-lr)


# ============================================================================
# ADADELTA
# ============================================================================

class Adadelta(BaseUpdater):
    """
    Adadelta: step sizes from the ratio of RMS delta to RMS gradient.

    s = rho * s + (1 - rho) * g^2
    step = -sqrt(d + eps) / sqrt(s + eps) * g
    d = rho * d + (1 - rho) * step^2
    delta = lr * step

    The rule needs no learning rate; `lr` is a plain multiplier and the
    default of 1.0 gives Zeiler's formulation.

    Reference:
        "ADADELTA: An Adaptive Learning Rate Method" by Zeiler

    Args:
        rho: Decay of the running averages (default: 0.9)
        eps: Term for numerical stability (default: 1e-6)
    """

    component_name: str = 'adadelta'
    default_lr: float = 1.0

    def __init__(self, rho: float = 0.9, eps: float = 1e-6):
        self._check_decay('rho', rho)
        super().__init__(eps=eps)
        self.rho = rho

    def _init_state(self, params: Tensor) -> None:
        self.state['square_avg'] = torch.zeros_like(params)
        self.state['acc_delta'] = torch.zeros_like(params)

    def _delta(self, grad: Tensor, lr: float) -> Tensor:
        rho, eps = self.rho, self.eps
        square_avg = self.state['square_avg']
        acc_delta = self.state['acc_delta']

        square_avg.mul_(rho).addcmul_(grad, grad, value=1 - rho)
        std = square_avg.add(eps).sqrt_()
        step = acc_delta.add(eps).sqrt_().div_(std).mul_(grad).neg_()
        acc_delta.mul_(rho).addcmul_(step, step, value=1 - rho)

        return step.mul_(lr)

    def __repr__(self) -> str:
        return f"Adadelta(rho={self.rho}, eps={self.eps})"


# ============================================================================
# ADAM
# ============================================================================

class Adam(BaseUpdater):
    """
    Adam: bias-corrected first and second moment estimates.

    m = beta1 * m + (1 - beta1) * g
    v = beta2 * v + (1 - beta2) * g^2
    delta = -lr * m_hat / (sqrt(v_hat) + eps)

    Reference:
        "Adam: A Method for Stochastic Optimization" by Kingma & Ba

    Args:
        beta1: Decay of the first moment (default: 0.9)
        beta2: Decay of the second moment (default: 0.999)
        eps: Term for numerical stability (default: 1e-8)
    """

    component_name: str = 'adam'
    default_lr: float = 1e-3

    def __init__(self, beta1: float = 0.9, beta2: float = 0.999, eps: float = 1e-8):
        self._check_decay('beta1', beta1)
        self._check_decay('beta2', beta2)
        super().__init__(eps=eps)
        self.beta1 = beta1
        self.beta2 = beta2

    def _init_state(self, params: Tensor) -> None:
        self.state['step'] = 0
        self.state['exp_avg'] = torch.zeros_like(params)
        self.state['exp_avg_sq'] = torch.zeros_like(params)

    def _delta(self, grad: Tensor, lr: float) -> Tensor:
        beta1, beta2 = self.beta1, self.beta2
        exp_avg = self.state['exp_avg']
        exp_avg_sq = self.state['exp_avg_sq']
        self.state['step'] += 1
        step = self.state['step']

        # Update biased first moment estimate
        exp_avg.mul_(beta1).add_(grad, alpha=1 - beta1)

        # Update biased second raw moment estimate
        exp_avg_sq.mul_(beta2).addcmul_(grad, grad, value=1 - beta2)

        # Bias correction
        bias_correction1 = 1 - beta1 ** step
        bias_correction2 = 1 - beta2 ** step

        denom = exp_avg_sq.div(bias_correction2).sqrt_().add_(self.eps)
        return exp_avg.div(bias_correction1).div_(denom).mul_(-lr)

    def __repr__(self) -> str:
        return f"Adam(beta1={self.beta1}, beta2={self.beta2}, eps={self.eps})"


# ============================================================================
# ADAMAX
# ============================================================================

class Adamax(BaseUpdater):
    """
    Adamax: Adam with an exponentially weighted infinity norm.

    m = beta1 * m + (1 - beta1) * g
    u = max(beta2 * u, |g|)
    delta = -lr / (1 - beta1^t) * m / (u + eps)

    Reference:
        "Adam: A Method for Stochastic Optimization" by Kingma & Ba, sec. 7

    Args:
        beta1: Decay of the first moment (default: 0.9)
        beta2: Decay of the infinity norm (default: 0.999)
        eps: Term for numerical stability (default: 1e-8)
    """

    component_name: str = 'adamax'
    default_lr: float = 2e-3

    def __init__(self, beta1: float = 0.9, beta2: float = 0.999, eps: float = 1e-8):
        self._check_decay('beta1', beta1)
        self._check_decay('beta2', beta2)
        super().__init__(eps=eps)
        self.beta1 = beta1
        self.beta2 = beta2

    def _init_state(self, params: Tensor) -> None:
        self.state['step'] = 0
        self.state['exp_avg'] = torch.zeros_like(params)
        self.state['exp_inf'] = torch.zeros_like(params)

    def _delta(self, grad: Tensor, lr: float) -> Tensor:
        beta1, beta2 = self.beta1, self.beta2
        exp_avg = self.state['exp_avg']
        exp_inf = self.state['exp_inf']
        self.state['step'] += 1
        step = self.state['step']

        exp_avg.mul_(beta1).add_(grad, alpha=1 - beta1)
        torch.maximum(exp_inf.mul_(beta2), grad.abs(), out=exp_inf)

        step_size = lr / (1 - beta1 ** step)
        return exp_avg.div(exp_inf.add(self.eps)).mul_(-step_size)

    def __repr__(self) -> str:
        return f"Adamax(beta1={self.beta1}, beta2={self.beta2}, eps={self.eps})"


# ============================================================================
# RMSPROP
# ============================================================================

class RMSProp(BaseUpdater):
    """
    RMSProp: rates from a decaying average of squared gradients.

    s = rho * s + (1 - rho) * g^2
    delta = -lr * g / (sqrt(s) + eps)

    Args:
        rho: Decay of the running average (default: 0.9)
        eps: Term for numerical stability (default: 1e-8)
    """

    component_name: str = 'rmsprop'
    default_lr: float = 1e-3

    def __init__(self, rho: float = 0.9, eps: float = 1e-8):
        self._check_decay('rho', rho)
        super().__init__(eps=eps)
        self.rho = rho

    def _init_state(self, params: Tensor) -> None:
        self.state['square_avg'] = torch.zeros_like(params)

    def _delta(self, grad: Tensor, lr: float) -> Tensor:
        square_avg = self.state['square_avg']
        square_avg.mul_(self.rho).addcmul_(grad, grad, value=1 - self.rho)
        denom = square_avg.sqrt().add_(self.eps)
        return grad.div(denom).mul_(-lr)

    def __repr__(self) -> str:
        return f"RMSProp(rho={self.rho}, eps={self.eps})"
