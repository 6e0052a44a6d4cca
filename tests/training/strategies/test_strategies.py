"""
Tests for learning strategies and the Learner composite.

Tests cover:
- Default no-op hooks
- Fan-out order and stop aggregation in Learner
- UpdateDriver parameter updates and learning rate policies
- Stopping strategies
- Tracers
- make_learner and make_learner_from_config
"""

import logging

import pytest
import torch

from stochopt.errors import ObjectiveError
from stochopt.objectives import QuadraticObjective
from stochopt.training.schedulers import FixedLR
from stochopt.training.strategies import (
    ConvergenceCheck,
    IterFunction,
    Learner,
    LearningStrategy,
    LoggingTracer,
    MaxIterations,
    ProgressTracer,
    TimeLimit,
    Tracer,
    UpdateDriver,
    ValuePlateau,
    make_learner,
    make_learner_from_config,
)
from stochopt.training.updaters import SGD, Adadelta, Adam, RMSProp
from stochopt.utils import LearnerConfig


# ============================================================================
# FIXTURES
# ============================================================================

class Recorder(LearningStrategy):
    """Strategy that records every hook call into a shared log."""

    def __init__(self, name, log, stop_at=None):
        self.name = name
        self.log = log
        self.stop_at = stop_at

    def setup(self, model):
        self.log.append((self.name, 'setup'))

    def pre_hook(self, model, iteration):
        self.log.append((self.name, 'pre', iteration))

    def update_hook(self, model, iteration):
        self.log.append((self.name, 'update', iteration))

    def post_hook(self, model, iteration):
        self.log.append((self.name, 'post', iteration))

    def finished(self, model, iteration):
        self.log.append((self.name, 'finished', iteration))
        return self.stop_at is not None and iteration >= self.stop_at

    def teardown(self, model, state):
        self.log.append((self.name, 'teardown'))


class ValueSequence:
    """Model stand-in whose value() walks a fixed list."""

    def __init__(self, values):
        self.values = list(values)
        self.i = -1

    def value(self):
        self.i += 1
        return self.values[self.i]


@pytest.fixture
def quadratic():
    return QuadraticObjective([1.0, 2.0], optimum=[1.0, 1.0], start=[0.0, 0.0])


# ============================================================================
# TEST BASE STRATEGY
# ============================================================================

def test_default_hooks_are_noops():
    strategy = LearningStrategy()
    strategy.setup(None)
    strategy.pre_hook(None, 1)
    strategy.update_hook(None, 1)
    strategy.post_hook(None, 1)
    strategy.teardown(None, None)
    assert strategy.finished(None, 1) is False


# ============================================================================
# TEST LEARNER
# ============================================================================

def test_learner_fans_out_in_order():
    log = []
    learner = Learner(Recorder('a', log), Recorder('b', log))

    learner.setup(None)
    learner.pre_hook(None, 1)
    learner.update_hook(None, 1)
    learner.post_hook(None, 1)
    learner.teardown(None, None)

    assert log == [
        ('a', 'setup'), ('b', 'setup'),
        ('a', 'pre', 1), ('b', 'pre', 1),
        ('a', 'update', 1), ('b', 'update', 1),
        ('a', 'post', 1), ('b', 'post', 1),
        ('a', 'teardown'), ('b', 'teardown'),
    ]


def test_learner_finished_is_any_and_asks_everyone():
    log = []
    learner = Learner(Recorder('a', log, stop_at=1), Recorder('b', log))
    assert learner.finished(None, 1) is True
    assert ('b', 'finished', 1) in log


def test_learner_not_finished_when_no_child_stops():
    log = []
    learner = Learner(Recorder('a', log), Recorder('b', log))
    assert learner.finished(None, 5) is False


def test_empty_learner_never_finishes():
    assert Learner().finished(None, 100) is False


def test_nested_learners():
    log = []
    inner = Learner(Recorder('inner', log, stop_at=2))
    outer = Learner(Recorder('outer', log), inner)

    outer.post_hook(None, 1)
    assert log == [('outer', 'post', 1), ('inner', 'post', 1)]
    assert outer.finished(None, 1) is False
    assert outer.finished(None, 2) is True


def test_learner_container_behaviour():
    cap = MaxIterations(3)
    learner = Learner(UpdateDriver(SGD()))
    learner.append(cap)

    assert len(learner) == 2
    assert learner[1] is cap
    assert list(learner)[1] is cap


def test_learner_find_searches_nested():
    check = ConvergenceCheck(lambda model, i: False)
    learner = Learner(MaxIterations(3), Learner(Tracer(lambda m, i: i), check))
    assert learner.find(ConvergenceCheck) is check
    assert learner.find(TimeLimit) is None


def test_learner_rejects_non_strategies():
    with pytest.raises(TypeError, match="LearningStrategy"):
        Learner(object())


def test_learner_rejects_itself():
    learner = Learner()
    with pytest.raises(ValueError):
        learner.append(learner)


# ============================================================================
# TEST UPDATE DRIVER
# ============================================================================

def test_update_driver_applies_delta(quadratic):
    driver = UpdateDriver(SGD(), lr_policy=0.1)
    grad = quadratic.gradient(None).clone()
    before = quadratic.params().clone()

    driver.update_hook(quadratic, 1)

    torch.testing.assert_close(quadratic.params(), before - 0.1 * grad)
    assert driver.last_lr == 0.1


def test_update_driver_default_lr(quadratic):
    driver = UpdateDriver(SGD())
    assert isinstance(driver.lr_policy, FixedLR)
    assert driver.lr_policy(1) == SGD.default_lr


def test_update_driver_uses_policy_per_iteration(quadratic):
    seen = []

    def policy(iteration):
        seen.append(iteration)
        return 0.01

    driver = UpdateDriver(RMSProp(), lr_policy=policy)
    for i in (1, 2, 3):
        quadratic.gradient(None)
        driver.update_hook(quadratic, i)
    assert seen == [1, 2, 3]


def test_update_driver_without_gradient(quadratic):
    with pytest.raises(ObjectiveError, match="no gradient"):
        UpdateDriver(SGD()).update_hook(quadratic, 1)


def test_update_driver_negative_lr(quadratic):
    quadratic.gradient(None)
    driver = UpdateDriver(SGD(), lr_policy=lambda i: -1.0)
    with pytest.raises(ValueError):
        driver.update_hook(quadratic, 1)


# ============================================================================
# TEST STOPPING
# ============================================================================

def test_max_iterations():
    cap = MaxIterations(3)
    assert [cap.finished(None, i) for i in (1, 2, 3, 4)] == [False, False, True, True]


def test_max_iterations_validation():
    with pytest.raises(ValueError):
        MaxIterations(0)


def test_convergence_check_every():
    calls = []

    def predicate(model, iteration):
        calls.append(iteration)
        return iteration >= 4

    check = ConvergenceCheck(predicate, every=2)
    results = [check.finished(None, i) for i in range(1, 7)]

    assert calls == [2, 4, 6]
    assert results == [False, False, False, True, False, True]


def test_time_limit():
    ticks = iter([100.0, 100.5, 102.0])

    limit = TimeLimit(1.0, clock=lambda: next(ticks))
    limit.setup(None)
    assert limit.finished(None, 1) is False
    assert limit.finished(None, 2) is True


def test_time_limit_validation():
    with pytest.raises(ValueError):
        TimeLimit(0)


def test_value_plateau():
    plateau = ValuePlateau(patience=2, min_delta=0.1)
    plateau.setup(None)
    model = ValueSequence([5.0, 4.0, 3.95, 3.93, 1.0])

    assert plateau.finished(model, 1) is False   # 5.0 best
    assert plateau.finished(model, 2) is False   # 4.0 best
    assert plateau.finished(model, 3) is False   # 3.95, wait 1
    assert plateau.finished(model, 4) is True    # 3.93, wait 2


def test_value_plateau_resets_on_setup():
    plateau = ValuePlateau(patience=1)
    plateau.setup(None)
    plateau.finished(ValueSequence([1.0]), 1)
    plateau.setup(None)
    assert plateau.best == float('inf')
    assert plateau.wait == 0


# ============================================================================
# TEST TRACERS
# ============================================================================

def test_iter_function():
    seen = []
    f = IterFunction(lambda model, i: seen.append(i), every=3)
    for i in range(1, 10):
        f.post_hook(None, i)
    assert seen == [3, 6, 9]


def test_tracer_history(quadratic):
    tracer = Tracer(lambda model, i: model.params()[0].item(), every=2)
    tracer.setup(quadratic)
    for i in range(1, 5):
        quadratic.params()[0] = float(i)
        tracer.post_hook(quadratic, i)

    assert tracer.history == [(2, 2.0), (4, 4.0)]
    assert tracer.iterations() == [2, 4]
    assert tracer.values() == [2.0, 4.0]

    tracer.setup(quadratic)
    assert len(tracer) == 0


def test_logging_tracer(quadratic, caplog):
    quadratic.gradient(None)
    tracer = LoggingTracer(every=2)
    with caplog.at_level(logging.INFO, logger='stochopt'):
        tracer.post_hook(quadratic, 1)
        tracer.post_hook(quadratic, 2)
    messages = [r.getMessage() for r in caplog.records]
    assert len(messages) == 1
    assert 'iter' in messages[0]
    assert 'value' in messages[0]


def test_progress_tracer_closes_bar(quadratic):
    tracer = ProgressTracer(total=5, refresh_every=1)
    tracer.setup(quadratic)
    quadratic.gradient(None)
    tracer.post_hook(quadratic, 1)
    assert tracer.pbar.n == 1

    tracer.teardown(quadratic, None)
    assert tracer.pbar is None


# ============================================================================
# TEST CONSTRUCTION HELPERS
# ============================================================================

def test_make_learner_wraps_update_rules():
    learner = make_learner(Adam(), 'sgd')
    assert isinstance(learner[0], UpdateDriver)
    assert isinstance(learner[0].rule, Adam)
    assert isinstance(learner[1].rule, SGD)


def test_make_learner_option_order():
    learner = make_learner(
        SGD(),
        maxiter=10,
        converged=lambda m, i: False,
        oniter=lambda m, i: None,
        time_limit=5.0,
        converge_every=3,
    )
    kinds = [type(s) for s in learner]
    assert kinds == [UpdateDriver, MaxIterations, ConvergenceCheck, IterFunction, TimeLimit]
    assert learner.find(ConvergenceCheck).every == 3


def test_make_learner_without_options():
    learner = make_learner(SGD())
    assert len(learner) == 1


def test_make_learner_rejects_junk():
    with pytest.raises(TypeError):
        make_learner(42)


def test_make_learner_from_config():
    config = LearnerConfig(
        update_rule={'name': 'adam', 'beta1': 0.8},
        lr_policy=0.01,
        maxiter=100,
        log_every=10,
        progress=True,
    )
    learner = make_learner_from_config(config, converged=lambda m, i: False)

    driver = learner.find(UpdateDriver)
    assert isinstance(driver.rule, Adam)
    assert driver.rule.beta1 == 0.8
    assert driver.lr_policy(1) == 0.01
    assert learner.find(MaxIterations).n == 100
    assert learner.find(ConvergenceCheck) is not None
    assert learner.find(LoggingTracer).every == 10
    assert learner.find(ProgressTracer).total == 100


def test_make_learner_from_dict_config():
    learner = make_learner_from_config({'update_rule': 'rmsprop', 'lr_policy': None, 'maxiter': 5})
    driver = learner.find(UpdateDriver)
    assert isinstance(driver.rule, RMSProp)
    assert driver.lr_policy(1) == RMSProp.default_lr


@pytest.mark.parametrize("name,rule_class,expected_lr", [
    ('adadelta', Adadelta, 1.0),
    ('adam', Adam, 1e-3),
])
def test_make_learner_from_config_uses_rule_default_lr(name, rule_class, expected_lr):
    learner = make_learner_from_config({'update_rule': name, 'maxiter': 5})
    driver = learner.find(UpdateDriver)
    assert isinstance(driver.rule, rule_class)
    assert driver.lr_policy(1) == expected_lr
