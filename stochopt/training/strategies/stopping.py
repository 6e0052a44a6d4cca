"""
Stopping strategies.

Each implements `finished` only. The composite Learner stops as soon as any
of them returns True.
"""

import logging
import time
from typing import Any, Callable, Optional

from .base import LearningStrategy

logger = logging.getLogger(__name__)


class MaxIterations(LearningStrategy):
    """
    Stop after exactly `n` iterations.

    Args:
        n: Iteration cap (positive)
    """

    def __init__(self, n: int):
        if n < 1:
            raise ValueError(f"Invalid iteration cap: {n}")
        self.n = n

    def finished(self, model: Any, iteration: int) -> bool:
        if iteration >= self.n:
            logger.info(f"Reached maximum of {self.n} iterations")
            return True
        return False

    def __repr__(self) -> str:
        return f"MaxIterations({self.n})"


class TimeLimit(LearningStrategy):
    """
    Stop once `seconds` of wall-clock time have passed since setup.

    Args:
        seconds: Time budget (positive)
        clock: Monotonic clock returning seconds (default: time.monotonic)
    """

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        if seconds <= 0:
            raise ValueError(f"Invalid time limit: {seconds}")
        self.seconds = seconds
        self.clock = clock
        self.start: Optional[float] = None

    def setup(self, model: Any) -> None:
        self.start = self.clock()

    def elapsed(self) -> float:
        if self.start is None:
            return 0.0
        return self.clock() - self.start

    def finished(self, model: Any, iteration: int) -> bool:
        if self.start is None:
            self.start = self.clock()
        elapsed = self.elapsed()
        if elapsed >= self.seconds:
            logger.info(f"Time limit of {self.seconds}s reached after {iteration} iterations")
            return True
        return False

    def __repr__(self) -> str:
        return f"TimeLimit({self.seconds})"


class ConvergenceCheck(LearningStrategy):
    """
    Stop when a user predicate of `(model, iteration)` returns True.

    The predicate only runs on iterations divisible by `every`, so costly
    checks (full-data loss, parameter distance) can be throttled.

    Args:
        predicate: Callable returning True once converged
        every: Evaluate every N iterations (default: 1)

    Example:
        >>> check = ConvergenceCheck(lambda model, i: model.value() < 1e-6, every=10)
    """

    def __init__(self, predicate: Callable[[Any, int], bool], every: int = 1):
        if every < 1:
            raise ValueError(f"Invalid check interval: {every}")
        self.predicate = predicate
        self.every = every

    def finished(self, model: Any, iteration: int) -> bool:
        if iteration % self.every != 0:
            return False
        if self.predicate(model, iteration):
            logger.info(f"Converged at iteration {iteration}")
            return True
        return False

    def __repr__(self) -> str:
        return f"ConvergenceCheck(every={self.every})"


class ValuePlateau(LearningStrategy):
    """
    Stop when the objective value stops improving.

    Args:
        patience: Number of checks without improvement before stopping
        min_delta: Minimum decrease that counts as an improvement
        every: Check every N iterations (default: 1)
    """

    def __init__(self, patience: int, min_delta: float = 0.0, every: int = 1):
        if patience < 1:
            raise ValueError(f"Invalid patience: {patience}")
        if every < 1:
            raise ValueError(f"Invalid check interval: {every}")
        self.patience = patience
        self.min_delta = min_delta
        self.every = every
        self.best = float('inf')
        self.wait = 0

    def setup(self, model: Any) -> None:
        self.best = float('inf')
        self.wait = 0

    def finished(self, model: Any, iteration: int) -> bool:
        if iteration % self.every != 0:
            return False

        current = float(model.value())
        if current < self.best - self.min_delta:
            self.best = current
            self.wait = 0
            return False

        self.wait += 1
        if self.wait >= self.patience:
            logger.info(
                f"Objective plateaued at {self.best:.6g} "
                f"({self.wait} checks without improvement)"
            )
            return True
        return False

    def __repr__(self) -> str:
        return f"ValuePlateau(patience={self.patience}, min_delta={self.min_delta})"
