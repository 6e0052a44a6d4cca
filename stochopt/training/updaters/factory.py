"""
Update rule factory and creation utilities.

This module provides functions for creating update rules from names,
config dictionaries and UpdaterSpec instances.
"""

import inspect
from typing import Any, Dict, Union

from .base import UpdateRule, UpdaterSpec
from .standard import SGD, Adagrad, Adadelta, Adam, Adamax, RMSProp


# ============================================================================
# UPDATE RULE REGISTRY
# ============================================================================

UPDATER_REGISTRY = {
    'sgd': SGD,
    'adagrad': Adagrad,
    'adadelta': Adadelta,
    'adam': Adam,
    'adamax': Adamax,
    'rmsprop': RMSProp,
    'rms_prop': RMSProp,
}


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_updater(name: str, **kwargs) -> UpdateRule:
    """
    Create an update rule by name.

    Args:
        name: Rule name ('sgd', 'adagrad', 'adadelta', 'adam', 'adamax', 'rmsprop')
        **kwargs: Rule-specific hyperparameters (eps, rho, beta1, beta2)

    Returns:
        A fresh update rule with empty state

    Example:
        >>> rule = create_updater('adam', beta1=0.8)
        >>> rule = create_updater('rmsprop', rho=0.95, eps=1e-6)
    """
    name_lower = name.lower().strip()

    if name_lower not in UPDATER_REGISTRY:
        available = ', '.join(UPDATER_REGISTRY.keys())
        raise ValueError(
            f"Unknown update rule: {name}. "
            f"Available update rules: {available}"
        )

    updater_class = UPDATER_REGISTRY[name_lower]

    accepted = set(inspect.signature(updater_class.__init__).parameters) - {'self'}
    unknown = set(kwargs) - accepted
    if unknown:
        raise ValueError(
            f"Unknown arguments for {name_lower}: {sorted(unknown)}. "
            f"Accepted: {sorted(accepted)}"
        )

    return updater_class(**kwargs)


def create_updater_from_config(config: Union[str, Dict[str, Any]]) -> UpdateRule:
    """
    Create an update rule from a name or configuration dictionary.

    Args:
        config: Rule name, or dict with 'name' (or 'type') and hyperparameters

    Example:
        >>> rule = create_updater_from_config({'name': 'adamax', 'beta2': 0.99})
        >>> rule = create_updater_from_config('adagrad')
    """
    if isinstance(config, str):
        return create_updater(config)

    config = dict(config)

    # Support both 'name' and 'type'
    name = config.pop('name', None)
    type_name = config.pop('type', None)
    name = name or type_name
    if name is None:
        raise ValueError("Config must contain 'name' or 'type' key")

    return create_updater(name, **config)


def create_updater_from_spec(spec: UpdaterSpec) -> UpdateRule:
    """
    Create an update rule from UpdaterSpec.

    Example:
        >>> spec = UpdaterSpec(name='adadelta', rho=0.95)
        >>> rule = create_updater_from_spec(spec)
    """
    return create_updater_from_config(spec.to_dict())
