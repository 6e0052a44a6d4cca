"""
Objectives: the loss and gradient providers the training loop drives.

- Objective: protocol (params, value, gradient)
- QuadraticObjective, RosenbrockObjective: closed-form test problems
- FunctionObjective: any differentiable scalar function (autograd)
- ModuleObjective: an nn.Module plus a loss function
"""

from .base import Objective, BaseObjective
from .autograd import FunctionObjective
from .analytic import QuadraticObjective, RosenbrockObjective, rosenbrock
from .module import ModuleObjective

__all__ = [
    'Objective',
    'BaseObjective',
    'FunctionObjective',
    'QuadraticObjective',
    'RosenbrockObjective',
    'rosenbrock',
    'ModuleObjective',
]
