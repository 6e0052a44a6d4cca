"""
Observer strategies.

Tracers run in `post_hook`, after the parameters were updated, and never
request a stop.
"""

import logging
from typing import Any, Callable, List, Optional, Tuple

from tqdm import tqdm

from .base import LearningStrategy

logger = logging.getLogger(__name__)


class IterFunction(LearningStrategy):
    """
    Call `f(model, iteration)` every `every` iterations.

    Args:
        f: Callback; its return value is ignored
        every: Call interval (default: 1)
    """

    def __init__(self, f: Callable[[Any, int], Any], every: int = 1):
        if every < 1:
            raise ValueError(f"Invalid call interval: {every}")
        self.f = f
        self.every = every

    def post_hook(self, model: Any, iteration: int) -> None:
        if iteration % self.every == 0:
            self.f(model, iteration)

    def __repr__(self) -> str:
        return f"IterFunction(every={self.every})"


class Tracer(LearningStrategy):
    """
    Record `f(model, iteration)` every `every` iterations.

    Entries land in `history` as `(iteration, value)` pairs. The history is
    cleared when a new run starts.

    Example:
        >>> tracer = Tracer(lambda model, i: model.value(), every=10)
        >>> learn(model, make_learner(SGD(), tracer, maxiter=100), data)
        >>> tracer.values()[-1]
    """

    def __init__(self, f: Callable[[Any, int], Any], every: int = 1):
        if every < 1:
            raise ValueError(f"Invalid trace interval: {every}")
        self.f = f
        self.every = every
        self.history: List[Tuple[int, Any]] = []

    def setup(self, model: Any) -> None:
        self.history = []

    def post_hook(self, model: Any, iteration: int) -> None:
        if iteration % self.every == 0:
            self.history.append((iteration, self.f(model, iteration)))

    def iterations(self) -> List[int]:
        return [i for i, _ in self.history]

    def values(self) -> List[Any]:
        return [v for _, v in self.history]

    def __len__(self) -> int:
        return len(self.history)

    def __repr__(self) -> str:
        return f"Tracer(every={self.every}, recorded={len(self.history)})"


class LoggingTracer(LearningStrategy):
    """
    Log iteration, objective value and parameter norm every `every` iterations.

    Args:
        every: Logging interval (default: 100)
        level: Logging level (default: INFO)
    """

    def __init__(self, every: int = 100, level: int = logging.INFO):
        if every < 1:
            raise ValueError(f"Invalid logging interval: {every}")
        self.every = every
        self.level = level

    def post_hook(self, model: Any, iteration: int) -> None:
        if iteration % self.every != 0:
            return
        value = model.value()
        norm = model.params().norm().item()
        logger.log(
            self.level,
            f"iter {iteration:>8d} | value {value:.6g} | |params| {norm:.6g}"
        )

    def teardown(self, model: Any, state: Any) -> None:
        logger.log(self.level, f"Finished: {state}")

    def __repr__(self) -> str:
        return f"LoggingTracer(every={self.every})"


class ProgressTracer(LearningStrategy):
    """
    Show a tqdm progress bar with the current objective value.

    Args:
        total: Expected number of iterations (None for an open-ended bar)
        desc: Bar description
        refresh_every: Update the value shown every N iterations
    """

    def __init__(self, total: Optional[int] = None, desc: str = 'Learning', refresh_every: int = 10):
        self.total = total
        self.desc = desc
        self.refresh_every = refresh_every
        self.pbar: Optional[tqdm] = None

    def setup(self, model: Any) -> None:
        self.pbar = tqdm(total=self.total, desc=self.desc)

    def post_hook(self, model: Any, iteration: int) -> None:
        if self.pbar is None:
            return
        self.pbar.update(1)
        if iteration % self.refresh_every == 0:
            self.pbar.set_postfix({'value': f"{model.value():.4g}"})

    def teardown(self, model: Any, state: Any) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __repr__(self) -> str:
        return f"ProgressTracer(total={self.total})"
