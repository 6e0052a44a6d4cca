"""
Base class for learning strategies.

A strategy is a unit with lifecycle hooks that the training loop calls on
every iteration. Every hook defaults to a no-op so subclasses override only
what they need:

    setup(model)                      once, before the first iteration
    pre_hook(model, iteration)        before the gradient is computed
    update_hook(model, iteration)     after the gradient, to update parameters
    post_hook(model, iteration)       after the update
    finished(model, iteration)        True to request a stop
    teardown(model, state)            once, after the last iteration

`iteration` counts from 1. `model` is the objective being minimized (see
stochopt.objectives).
"""

from typing import Any


class LearningStrategy:
    """Base strategy class."""

    def setup(self, model: Any) -> None:
        """Called once before the first iteration."""
        pass

    def pre_hook(self, model: Any, iteration: int) -> None:
        """Called before the gradient is computed."""
        pass

    def update_hook(self, model: Any, iteration: int) -> None:
        """Called after the gradient is computed to update the parameters."""
        pass

    def post_hook(self, model: Any, iteration: int) -> None:
        """Called after the parameters were updated."""
        pass

    def finished(self, model: Any, iteration: int) -> bool:
        """Return True if this strategy wants the run to stop."""
        return False

    def teardown(self, model: Any, state: Any) -> None:
        """Called once after the last iteration, also when the run failed."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
