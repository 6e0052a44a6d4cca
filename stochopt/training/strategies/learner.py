"""
Learner: the composite strategy, and helpers to build one.

A Learner holds an ordered list of strategies and is itself a strategy.
Every hook fans out to the children in list order; `finished` is True when
any child asks to stop. Learners nest, so a prepared group of strategies can
be dropped into another learner as a single unit.

Example:
    >>> learner = make_learner(
    ...     Adam(),
    ...     Tracer(lambda model, i: model.value(), every=10),
    ...     maxiter=1000,
    ...     converged=lambda model, i: model.value() < 1e-6,
    ... )
    >>> state = learn(objective, learner, infinite_batches(X, y, size=20))
"""

import logging
from typing import Any, Callable, Iterator, List, Optional, Type, TypeVar, Union

from ...utils.config import LearnerConfig
from ...utils.seeding import set_seed
from ..updaters import create_updater, create_updater_from_config
from .base import LearningStrategy
from .gradient_descent import UpdateDriver
from .stopping import MaxIterations, TimeLimit, ConvergenceCheck
from .tracers import IterFunction, LoggingTracer, ProgressTracer

logger = logging.getLogger(__name__)

S = TypeVar('S', bound=LearningStrategy)


# ============================================================================
# COMPOSITE
# ============================================================================

class Learner(LearningStrategy):
    """
    Ordered composite of strategies.

    Hooks run in the order the strategies were added. `finished` asks every
    child (so stateful checks all see each iteration) and returns True if
    any of them answered True.

    Args:
        *strategies: Child strategies, including other Learners
    """

    def __init__(self, *strategies: LearningStrategy):
        self.strategies: List[LearningStrategy] = []
        for strategy in strategies:
            self.append(strategy)

    def append(self, strategy: LearningStrategy) -> 'Learner':
        """Add a strategy at the end of the dispatch order."""
        if not isinstance(strategy, LearningStrategy):
            raise TypeError(
                f"Expected a LearningStrategy, got {type(strategy).__name__}"
            )
        if strategy is self:
            raise ValueError("A Learner cannot contain itself")
        self.strategies.append(strategy)
        return self

    def find(self, cls: Type[S]) -> Optional[S]:
        """Return the first strategy of type `cls`, searching nested learners."""
        for strategy in self.strategies:
            if isinstance(strategy, cls):
                return strategy
            if isinstance(strategy, Learner):
                found = strategy.find(cls)
                if found is not None:
                    return found
        return None

    # ------------------------------------------------------------------
    # Hook fan-out
    # ------------------------------------------------------------------

    def setup(self, model: Any) -> None:
        for strategy in self.strategies:
            strategy.setup(model)

    def pre_hook(self, model: Any, iteration: int) -> None:
        for strategy in self.strategies:
            strategy.pre_hook(model, iteration)

    def update_hook(self, model: Any, iteration: int) -> None:
        for strategy in self.strategies:
            strategy.update_hook(model, iteration)

    def post_hook(self, model: Any, iteration: int) -> None:
        for strategy in self.strategies:
            strategy.post_hook(model, iteration)

    def finished(self, model: Any, iteration: int) -> bool:
        votes = [strategy.finished(model, iteration) for strategy in self.strategies]
        return any(votes)

    def teardown(self, model: Any, state: Any) -> None:
        for strategy in self.strategies:
            strategy.teardown(model, state)

    # ------------------------------------------------------------------
    # Container behaviour
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.strategies)

    def __iter__(self) -> Iterator[LearningStrategy]:
        return iter(self.strategies)

    def __getitem__(self, i: int) -> LearningStrategy:
        return self.strategies[i]

    def __repr__(self) -> str:
        inner = ', '.join(repr(s) for s in self.strategies)
        return f"Learner({inner})"


# ============================================================================
# CONSTRUCTION HELPERS
# ============================================================================

def _as_strategy(obj: Any) -> LearningStrategy:
    if isinstance(obj, LearningStrategy):
        return obj
    if isinstance(obj, str):
        return UpdateDriver(create_updater(obj))
    if getattr(obj, 'component_type', None) == 'updater':
        return UpdateDriver(obj)
    raise TypeError(
        f"Cannot use {type(obj).__name__} as a learning strategy; pass a "
        f"LearningStrategy, an update rule or an update rule name"
    )


def make_learner(
    *strategies: Any,
    maxiter: Optional[int] = None,
    converged: Optional[Callable[[Any, int], bool]] = None,
    oniter: Optional[Callable[[Any, int], Any]] = None,
    time_limit: Optional[float] = None,
    converge_every: int = 1
) -> Learner:
    """
    Build a Learner from strategies plus common stopping options.

    Positional arguments may be strategies, update rules (wrapped in an
    UpdateDriver with the rule's default learning rate) or update rule names.
    The options append, in this order: MaxIterations, ConvergenceCheck,
    IterFunction, TimeLimit.

    A learner with no stopping option never ends a run over an infinite
    stream on its own; pass `maxiter`, `converged` or `time_limit` for those.

    Args:
        *strategies: Strategies, update rules or rule names
        maxiter: Stop after this many iterations
        converged: Predicate of (model, iteration) that stops the run
        oniter: Callback of (model, iteration) run after every update
        time_limit: Stop after this many seconds
        converge_every: Evaluate `converged` every N iterations
    """
    learner = Learner(*(_as_strategy(s) for s in strategies))

    if maxiter is not None:
        learner.append(MaxIterations(maxiter))
    if converged is not None:
        learner.append(ConvergenceCheck(converged, every=converge_every))
    if oniter is not None:
        learner.append(IterFunction(oniter))
    if time_limit is not None:
        learner.append(TimeLimit(time_limit))

    return learner


def make_learner_from_config(
    config: Union[LearnerConfig, dict],
    converged: Optional[Callable[[Any, int], bool]] = None,
    oniter: Optional[Callable[[Any, int], Any]] = None
) -> Learner:
    """
    Build a Learner from a LearnerConfig (or its dict form).

    Seeds the global random sources when `config.seed` is set.

    Example:
        >>> config = load_config('configs/adam.yaml')
        >>> learner = make_learner_from_config(
        ...     config, converged=lambda model, i: model.value() < 1e-6
        ... )
    """
    if isinstance(config, dict):
        config = LearnerConfig.from_dict(config)

    if config.seed is not None:
        set_seed(config.seed)

    rule = create_updater_from_config(config.update_rule)
    learner = make_learner(
        UpdateDriver(rule, lr_policy=config.lr_policy),
        maxiter=config.maxiter,
        converged=converged,
        oniter=oniter,
        time_limit=config.time_limit,
        converge_every=config.converge_every,
    )

    if config.log_every is not None:
        learner.append(LoggingTracer(every=config.log_every))
    if config.progress:
        learner.append(ProgressTracer(total=config.maxiter))

    logger.debug(f"Built {learner!r} from config")
    return learner
