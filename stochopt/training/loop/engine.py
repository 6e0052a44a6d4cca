"""
Training loop engine.

Per iteration `i` (counting from 1) the loop:

1. pulls the next batch from the data stream
2. calls `learner.pre_hook(model, i)`
3. calls `model.gradient(batch)`
4. calls `learner.update_hook(model, i)`
5. calls `learner.post_hook(model, i)`
6. reads `model.value()`, records `i` as completed and stops if `learner.finished(model, i)`

The run also ends when a finite stream runs out, or when the objective
fails. Parameter updates made before a failure are kept.
"""

import logging
import time
from typing import Any, Iterable, Optional, Sequence, Union

from ...data.streams import is_infinite
from ...errors import ObjectiveError, ObjectiveFailure
from ..strategies import Learner, LearningStrategy
from .state import LearnState, StopReason

logger = logging.getLogger(__name__)


class LearningLoop:
    """
    Drive a learner over a data stream.

    Args:
        model: Objective exposing `params()`, `gradient(batch)` and `value()`
        learner: Strategy (usually a Learner) receiving the hooks
        data: DataSubset, batch sequence, infinite stream or any iterable

    Example:
        >>> loop = LearningLoop(objective, learner, infinite_batches(X, y, size=20))
        >>> state = loop.run()
        >>> state.reason
        <StopReason.CONVERGED_OR_LIMIT: 'converged_or_limit'>
    """

    def __init__(
        self,
        model: Any,
        learner: Union[LearningStrategy, Sequence[LearningStrategy]],
        data: Iterable[Any]
    ):
        if isinstance(learner, (list, tuple)):
            learner = Learner(*learner)
        if not isinstance(learner, LearningStrategy):
            raise TypeError(f"Expected a LearningStrategy, got {type(learner).__name__}")

        self.model = model
        self.learner = learner
        self.data = data
        self.state = LearnState()

    def run(self, raise_on_failure: bool = True) -> LearnState:
        """
        Run until a strategy requests a stop, the stream ends or the
        objective fails.

        Args:
            raise_on_failure: Raise ObjectiveFailure when the objective
                fails (default); otherwise return the stopped state

        Returns:
            Final LearnState
        """
        state = self.state = LearnState(running=True)
        failure: Optional[ObjectiveError] = None
        start = time.monotonic()

        logger.info(
            f"Starting run: {self.learner!r} on "
            f"{'infinite' if is_infinite(self.data) else 'finite'} stream"
        )

        try:
            self.learner.setup(self.model)
            stream = iter(self.data)
            iteration = 0
            while True:
                try:
                    batch = next(stream)
                except StopIteration:
                    state.reason = StopReason.STREAM_EXHAUSTED
                    break

                iteration += 1
                try:
                    self._step(batch, iteration)
                    value = self._current_value()
                except ObjectiveError as e:
                    failure = e
                    state.reason = StopReason.OBJECTIVE_FAILURE
                    state.detail = str(e)
                    logger.error(f"Objective failed at iteration {iteration}: {e}")
                    break

                state.iteration = iteration
                state.value = value

                if self.learner.finished(self.model, iteration):
                    state.reason = StopReason.CONVERGED_OR_LIMIT
                    break
        finally:
            state.running = False
            state.elapsed = time.monotonic() - start
            self.learner.teardown(self.model, state)

        if state.reason is not None:
            logger.info(
                f"Stopped after {state.iteration} iterations "
                f"({state.reason.value}, {state.elapsed:.2f}s)"
            )

        if failure is not None and raise_on_failure:
            raise ObjectiveFailure(state.detail, state=state) from failure

        return state

    def _step(self, batch: Any, iteration: int) -> None:
        self.learner.pre_hook(self.model, iteration)
        self._gradient(batch)
        self.learner.update_hook(self.model, iteration)
        self.learner.post_hook(self.model, iteration)

    def _gradient(self, batch: Any) -> None:
        try:
            self.model.gradient(batch)
        except ObjectiveError:
            raise
        except Exception as e:
            raise ObjectiveError(f"{type(e).__name__}: {e}") from e

    def _current_value(self) -> Optional[float]:
        value = getattr(self.model, 'value', None)
        if value is None:
            return None
        try:
            current = value()
        except ObjectiveError:
            raise
        except Exception as e:
            raise ObjectiveError(f"{type(e).__name__}: {e}") from e
        return None if current is None else float(current)


def learn(
    model: Any,
    learner: Union[LearningStrategy, Sequence[LearningStrategy]],
    data: Iterable[Any],
    raise_on_failure: bool = True
) -> LearnState:
    """
    Minimize `model` with `learner` over `data`.

    Parameters are updated in place. With an infinite stream, the learner
    must contain a stopping strategy (see make_learner).

    Raises:
        ObjectiveFailure: The objective failed and raise_on_failure is set;
            the final state is attached as `.state`

    Example:
        >>> state = learn(
        ...     objective,
        ...     make_learner(Adam(), maxiter=1000),
        ...     infinite_batches(X, y, size=20),
        ... )
    """
    return LearningLoop(model, learner, data).run(raise_on_failure=raise_on_failure)
