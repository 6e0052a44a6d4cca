"""
Tests for update rules.

Tests cover:
- Protocol compliance
- One- and two-step formulas for every rule
- Lazy state creation, reset and shape checks
- Hyperparameter validation
- Config-driven creation
"""

import math

import pytest
import torch

from stochopt.errors import ShapeMismatch
from stochopt.training.updaters import (
    SGD,
    Adadelta,
    Adagrad,
    Adam,
    Adamax,
    RMSProp,
    UPDATER_REGISTRY,
    UpdaterSpec,
    create_updater,
    create_updater_from_config,
    create_updater_from_spec,
)


ALL_RULES = [SGD, Adagrad, Adadelta, Adam, Adamax, RMSProp]


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def params():
    return torch.tensor([1.0, -2.0, 0.5], dtype=torch.float64)


@pytest.fixture
def grad():
    return torch.tensor([0.5, -1.0, 2.0], dtype=torch.float64)


# ============================================================================
# TEST PROTOCOL COMPLIANCE
# ============================================================================

@pytest.mark.parametrize("rule_class", ALL_RULES)
def test_rule_is_updater_component(rule_class):
    rule = rule_class()
    assert rule.component_type == 'updater'
    assert rule.component_name in UPDATER_REGISTRY
    assert rule.default_lr > 0
    assert hasattr(rule, 'update')
    assert hasattr(rule, 'reset')
    assert hasattr(rule, 'state_dict')


@pytest.mark.parametrize("rule_class", ALL_RULES)
def test_update_returns_delta_without_touching_params(rule_class, params, grad):
    before = params.clone()
    delta = rule_class().update(params, grad, lr=0.1)
    assert delta.shape == params.shape
    assert torch.equal(params, before)


# ============================================================================
# TEST FORMULAS
# ============================================================================

def test_sgd_step(params, grad):
    delta = SGD().update(params, grad, lr=0.1)
    torch.testing.assert_close(delta, -0.1 * grad)


def test_adagrad_two_steps(params, grad):
    rule = Adagrad(eps=1e-8)
    first = rule.update(params, grad, lr=0.1)
    torch.testing.assert_close(first, -0.1 * grad / (grad.abs() + 1e-8))

    second = rule.update(params, grad, lr=0.1)
    torch.testing.assert_close(second, -0.1 * grad / (math.sqrt(2) * grad.abs() + 1e-8))
    torch.testing.assert_close(rule.state['sum_sq'], 2 * grad ** 2)


def test_adadelta_two_steps(params, grad):
    rho, eps = 0.9, 1e-6
    rule = Adadelta(rho=rho, eps=eps)

    s = (1 - rho) * grad ** 2
    step1 = -torch.sqrt(torch.tensor(eps, dtype=torch.float64)) / torch.sqrt(s + eps) * grad
    d = (1 - rho) * step1 ** 2
    torch.testing.assert_close(rule.update(params, grad, lr=1.0), step1)

    s = rho * s + (1 - rho) * grad ** 2
    step2 = -torch.sqrt(d + eps) / torch.sqrt(s + eps) * grad
    torch.testing.assert_close(rule.update(params, grad, lr=1.0), step2)


def test_adadelta_lr_scales_step(params, grad):
    full = Adadelta().update(params, grad, lr=1.0)
    half = Adadelta().update(params, grad, lr=0.5)
    torch.testing.assert_close(half, 0.5 * full)


def test_adam_two_steps(params, grad):
    b1, b2, eps, lr = 0.9, 0.999, 1e-8, 0.01
    rule = Adam(beta1=b1, beta2=b2, eps=eps)

    # first step: bias correction recovers g and g^2 exactly
    torch.testing.assert_close(rule.update(params, grad, lr=lr), -lr * grad / (grad.abs() + eps))

    g2 = 0.5 * grad
    m = b1 * (1 - b1) * grad + (1 - b1) * g2
    v = b2 * (1 - b2) * grad ** 2 + (1 - b2) * g2 ** 2
    m_hat = m / (1 - b1 ** 2)
    v_hat = v / (1 - b2 ** 2)
    torch.testing.assert_close(
        rule.update(params, g2, lr=lr),
        -lr * m_hat / (v_hat.sqrt() + eps)
    )
    assert rule.state['step'] == 2


def test_adamax_two_steps(params, grad):
    b1, b2, eps, lr = 0.9, 0.999, 1e-8, 0.002
    rule = Adamax(beta1=b1, beta2=b2, eps=eps)

    torch.testing.assert_close(rule.update(params, grad, lr=lr), -lr * grad / (grad.abs() + eps))

    g2 = torch.tensor([2.0, 0.1, -0.5], dtype=torch.float64)
    m = b1 * (1 - b1) * grad + (1 - b1) * g2
    u = torch.maximum(b2 * grad.abs(), g2.abs())
    expected = -lr / (1 - b1 ** 2) * m / (u + eps)
    torch.testing.assert_close(rule.update(params, g2, lr=lr), expected)
    torch.testing.assert_close(rule.state['exp_inf'], u)


def test_rmsprop_two_steps(params, grad):
    rho, eps, lr = 0.9, 1e-8, 0.01
    rule = RMSProp(rho=rho, eps=eps)

    s = (1 - rho) * grad ** 2
    torch.testing.assert_close(rule.update(params, grad, lr=lr), -lr * grad / (s.sqrt() + eps))

    s = rho * s + (1 - rho) * grad ** 2
    torch.testing.assert_close(rule.update(params, grad, lr=lr), -lr * grad / (s.sqrt() + eps))


def test_zero_gradient_first_step_is_finite(params):
    zero = torch.zeros_like(params)
    for rule_class in ALL_RULES:
        delta = rule_class().update(params, zero, lr=0.1)
        assert torch.isfinite(delta).all()
        assert torch.equal(delta, torch.zeros_like(params))


# ============================================================================
# TEST STATE
# ============================================================================

def test_state_created_lazily(params, grad):
    rule = Adam()
    assert rule.num_params is None
    assert rule.state_dict() == {}

    rule.update(params, grad, lr=0.1)
    assert rule.num_params == 3
    assert set(rule.state_dict()) == {'step', 'exp_avg', 'exp_avg_sq'}


def test_reset_discards_state(params, grad):
    rule = Adagrad()
    rule.update(params, grad, lr=0.1)
    rule.reset()
    assert rule.num_params is None

    # after reset the rule behaves like a fresh one
    torch.testing.assert_close(
        rule.update(params, grad, lr=0.1),
        Adagrad().update(params, grad, lr=0.1)
    )


def test_gradient_length_mismatch(params):
    with pytest.raises(ShapeMismatch):
        SGD().update(params, torch.zeros(4, dtype=torch.float64), lr=0.1)


def test_established_length_mismatch(params, grad):
    rule = RMSProp()
    rule.update(params, grad, lr=0.1)
    with pytest.raises(ShapeMismatch, match="tracks 3 parameters"):
        rule.update(torch.zeros(5), torch.zeros(5), lr=0.1)


def test_gradient_reshaped_to_params(params):
    grad = torch.ones(3, 1, dtype=torch.float64)
    delta = SGD().update(params, grad, lr=1.0)
    assert delta.shape == params.shape


def test_non_finite_gradient_skipped(params):
    rule = Adam()
    grad = torch.tensor([1.0, float('nan'), 0.0], dtype=torch.float64)
    delta = rule.update(params, grad, lr=0.1)
    assert torch.equal(delta, torch.zeros_like(params))


# ============================================================================
# TEST VALIDATION
# ============================================================================

@pytest.mark.parametrize("rule_class,kwargs", [
    (Adagrad, {'eps': -1.0}),
    (Adadelta, {'rho': 1.0}),
    (Adam, {'beta1': -0.1}),
    (Adam, {'beta2': 1.0}),
    (Adamax, {'beta1': 1.5}),
    (RMSProp, {'rho': -0.5}),
])
def test_invalid_hyperparameters(rule_class, kwargs):
    with pytest.raises(ValueError, match="Invalid"):
        rule_class(**kwargs)


# ============================================================================
# TEST FACTORY
# ============================================================================

@pytest.mark.parametrize("name,rule_class", [
    ('sgd', SGD),
    ('adagrad', Adagrad),
    ('adadelta', Adadelta),
    ('ADAM', Adam),
    ('adamax', Adamax),
    ('rmsprop', RMSProp),
    ('rms_prop', RMSProp),
])
def test_create_updater(name, rule_class):
    assert isinstance(create_updater(name), rule_class)


def test_create_updater_with_kwargs():
    rule = create_updater('adam', beta1=0.8, eps=1e-6)
    assert rule.beta1 == 0.8
    assert rule.eps == 1e-6


def test_create_updater_unknown_name():
    with pytest.raises(ValueError, match="Available update rules"):
        create_updater('lbfgs')


def test_create_updater_unknown_kwarg():
    with pytest.raises(ValueError, match="Unknown arguments"):
        create_updater('sgd', momentum=0.9)


def test_create_updater_from_config():
    rule = create_updater_from_config({'name': 'rmsprop', 'rho': 0.95})
    assert isinstance(rule, RMSProp)
    assert rule.rho == 0.95

    assert isinstance(create_updater_from_config('adagrad'), Adagrad)
    assert isinstance(create_updater_from_config({'type': 'adamax'}), Adamax)


def test_create_updater_from_config_with_name_and_type():
    rule = create_updater_from_config({'name': 'adam', 'type': 'adam', 'beta1': 0.8})
    assert isinstance(rule, Adam)
    assert rule.beta1 == 0.8


def test_create_updater_from_config_requires_name():
    with pytest.raises(ValueError, match="'name' or 'type'"):
        create_updater_from_config({'rho': 0.9})


def test_create_updater_from_spec():
    spec = UpdaterSpec(name='adadelta', rho=0.95)
    assert spec.to_dict() == {'name': 'adadelta', 'rho': 0.95}

    rule = create_updater_from_spec(spec)
    assert isinstance(rule, Adadelta)
    assert rule.rho == 0.95
    assert rule.eps == 1e-6


def test_spec_from_dict_keeps_extras():
    spec = UpdaterSpec.from_dict({'name': 'adam', 'beta1': 0.8, 'amsgrad': True})
    assert spec.beta1 == 0.8
    assert spec.config == {'amsgrad': True}
