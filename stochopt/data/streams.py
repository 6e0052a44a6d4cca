"""
Observation streams consumed by the training loop.

Two kinds of stream exist and are told apart by the `infinite` attribute:

- Finite streams (DataSubset, BatchSequence) walk a fixed index sequence.
  They have a length, can be replayed, and the loop stops with
  STREAM_EXHAUSTED when they run out.
- Infinite streams (InfiniteObservations, InfiniteBatches) resample forever
  and have no length. Only the learner's stopping strategies end a run
  that consumes one.

Example:
    >>> for x, y in eachbatch(X, y, size=32):      # one epoch of batches
    ...     pass
    >>> stream = infinite_batches(X, y, size=20)    # endless random batches
    >>> xs, ys = next(iter(stream))
"""

import math
from abc import ABC, abstractmethod
from typing import Any, Iterator, Optional, Tuple

import torch

from .subset import DataSubset, as_subset


def is_infinite(stream: Any) -> bool:
    """Return True if `stream` never runs out on its own."""
    return bool(getattr(stream, 'infinite', False))


# ============================================================================
# FINITE BATCHES
# ============================================================================

class BatchSequence:
    """
    Consecutive batches over a DataSubset.

    Finite and replayable. The last batch may be smaller than `size` unless
    `drop_last` is set.

    Args:
        subset: Data to batch
        size: Observations per batch
        drop_last: Drop a trailing partial batch
    """

    infinite = False

    def __init__(self, subset: DataSubset, size: int, drop_last: bool = False):
        if size < 1:
            raise ValueError(f"Invalid batch size: {size}")
        self.subset = subset
        self.size = size
        self.drop_last = drop_last

    def __len__(self) -> int:
        if self.drop_last:
            return len(self.subset) // self.size
        return math.ceil(len(self.subset) / self.size)

    def __getitem__(self, i: int) -> Tuple[Any, ...]:
        if not 0 <= i < len(self):
            raise IndexError(f"Batch {i} out of range for {len(self)} batches")
        return self.subset[i * self.size:(i + 1) * self.size].extract()

    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        for i in range(len(self)):
            yield self[i]

    def __repr__(self) -> str:
        return f"BatchSequence(nbatches={len(self)}, size={self.size})"


def eachbatch(*data: Any, size: int, drop_last: bool = False) -> BatchSequence:
    """
    Iterate raw sources or a subset in consecutive batches.

    Example:
        >>> for xs, ys in eachbatch(X, y, size=20):
        ...     pass
    """
    return BatchSequence(as_subset(data), size, drop_last=drop_last)


# ============================================================================
# INFINITE RESAMPLING
# ============================================================================

class InfiniteStream(ABC):
    """
    Base class for endless random draws from a DataSubset.

    Each draw is independent and uniform with replacement. Iterating never
    raises StopIteration.
    """

    infinite = True

    def __init__(self, subset: DataSubset, generator: Optional[torch.Generator] = None):
        if len(subset) == 0:
            raise ValueError("Cannot stream from an empty DataSubset")
        self.subset = subset
        self.generator = generator

    @abstractmethod
    def draw(self) -> Tuple[Any, ...]:
        """Produce one random draw."""
        pass

    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        while True:
            yield self.draw()


class InfiniteObservations(InfiniteStream):
    """Endless single observations drawn at random."""

    def draw(self) -> Tuple[Any, ...]:
        return self.subset.random_obs(generator=self.generator)

    def __repr__(self) -> str:
        return f"InfiniteObservations({self.subset!r})"


class InfiniteBatches(InfiniteStream):
    """
    Endless fixed-size batches drawn at random.

    Args:
        subset: Data to sample from
        size: Observations per batch
        generator: Optional torch.Generator for reproducible draws
    """

    def __init__(
        self,
        subset: DataSubset,
        size: int,
        generator: Optional[torch.Generator] = None
    ):
        if size < 1:
            raise ValueError(f"Invalid batch size: {size}")
        super().__init__(subset, generator=generator)
        self.size = size

    def draw(self) -> Tuple[Any, ...]:
        return self.subset.random_batch(self.size, generator=self.generator)

    def __repr__(self) -> str:
        return f"InfiniteBatches({self.subset!r}, size={self.size})"


def infinite_obs(
    *data: Any,
    generator: Optional[torch.Generator] = None
) -> InfiniteObservations:
    """
    Endless random single observations from raw sources or a subset.

    Example:
        >>> learn(objective, learner, infinite_obs(X, y))
    """
    return InfiniteObservations(as_subset(data), generator=generator)


def infinite_batches(
    *data: Any,
    size: int = 1,
    generator: Optional[torch.Generator] = None
) -> InfiniteBatches:
    """
    Endless random batches of `size` observations from raw sources or a subset.

    Example:
        >>> learn(objective, learner, infinite_batches(X, y, size=20))
    """
    return InfiniteBatches(as_subset(data), size, generator=generator)
