"""
Update rules for stochopt.

This module provides first-order update rules with a unified interface:
- SGD: plain gradient step
- Adagrad: accumulated squared gradients
- Adadelta: RMS delta over RMS gradient
- Adam: bias-corrected moments
- Adamax: infinity-norm Adam
- RMSProp: decaying squared-gradient average

Example:
    >>> from stochopt.training.updaters import create_updater
    >>>
    >>> rule = create_updater('adam', beta1=0.9)
    >>> delta = rule.update(params, grad, lr=1e-3)
    >>> params += delta
    >>>
    >>> # From config
    >>> rule = create_updater_from_config({'name': 'rmsprop', 'rho': 0.95})
"""

from .base import (
    UpdateRule,
    UpdaterSpec,
    BaseUpdater,
)

from .standard import SGD, Adagrad, Adadelta, Adam, Adamax, RMSProp

from .factory import (
    create_updater,
    create_updater_from_config,
    create_updater_from_spec,
    UPDATER_REGISTRY
)


__all__ = [
    # Protocol and base classes
    'UpdateRule',
    'UpdaterSpec',
    'BaseUpdater',

    # Update rules
    'SGD',
    'Adagrad',
    'Adadelta',
    'Adam',
    'Adamax',
    'RMSProp',

    # Factory functions
    'create_updater',
    'create_updater_from_config',
    'create_updater_from_spec',

    # Registry
    'UPDATER_REGISTRY',
]
