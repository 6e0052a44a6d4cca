"""
Indexed views over one or more aligned data containers.

A DataSubset pairs a tuple of sources (inputs, targets, ...) with one shared
sequence of observation indices. Every access goes through that index
sequence, so shuffling, splitting and slicing only ever produce new index
sequences; the sources themselves are never copied or mutated.

Example:
    >>> X = np.random.rand(2, 4)
    >>> y = np.random.rand(4)
    >>> subset = eachobs(X, y)
    >>> len(subset)
    4
    >>> x2, y2 = subset[2]          # (X[:, 2], y[2])
    >>> for x, yi in subset:        # four tuples, in index order
    ...     pass
    >>> xs, ys = subset.random_batch(2)
"""

from typing import Any, Iterator, Optional, Sequence, Tuple, Union

import torch

from .base import Index, TupleStore, normalize_index


class DataSubset:
    """
    A view combining one or more observation sources under one index sequence.

    Sources must all report the same number of observations. Indices need
    not be contiguous or unique, but each must be a valid position in the
    sources. Observations come back as tuples with one entry per source.

    Iterating is finite and replayable: every pass walks `indices` in order.

    Args:
        source: A single container or a tuple of aligned containers
        indices: Positions into the sources (default: all of them, in order)

    Raises:
        SizeMismatch: If the sources disagree on their number of observations
        OutOfRange: If any index is not a valid position
    """

    infinite = False

    def __init__(self, source: Any, indices: Optional[Index] = None):
        if not isinstance(source, tuple):
            source = (source,)
        if not source:
            raise ValueError("DataSubset needs at least one source")

        self.source = source
        self._store = TupleStore(source)
        total = self._store.nobs()

        if indices is None:
            indices = range(total)
        else:
            indices = normalize_index(indices, total)
            if isinstance(indices, int):
                indices = (indices,)
            elif not isinstance(indices, range):
                indices = tuple(indices)

        self.indices: Union[range, Tuple[int, ...]] = indices

    # ------------------------------------------------------------------
    # Store protocol (lets a subset act as the source of another subset)
    # ------------------------------------------------------------------

    def nobs(self) -> int:
        return len(self.indices)

    def getobs(self, idx: Index) -> Tuple[Any, ...]:
        """Get observations by position within this subset."""
        idx = normalize_index(idx, len(self))
        if isinstance(idx, int):
            return self._store.getobs(self.indices[idx])
        return self._store.getobs([self.indices[i] for i in idx])

    # ------------------------------------------------------------------
    # Sequence behaviour
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.indices)

    def __getitem__(self, idx: Union[int, slice]) -> Union[Tuple[Any, ...], 'DataSubset']:
        """
        Index into the subset.

        An int returns the observation tuple at that position; a slice
        returns a new DataSubset over the selected positions.
        """
        if isinstance(idx, slice):
            return DataSubset(self.source, self.indices[idx])
        return self.getobs(idx)

    def at(self, i: int) -> Tuple[Any, ...]:
        """Return the observation tuple at position `i`."""
        return self.getobs(int(i))

    def __iter__(self) -> Iterator[Tuple[Any, ...]]:
        for index in self.indices:
            yield self._store.getobs(index)

    # ------------------------------------------------------------------
    # Materialization and sampling
    # ------------------------------------------------------------------

    def extract(self) -> Tuple[Any, ...]:
        """
        Materialize the whole subset.

        Returns:
            One container per source holding exactly this subset's
            observations, in index order (a copy, never a view)
        """
        return self._store.getobs(list(self.indices))

    def random_obs(self, generator: Optional[torch.Generator] = None) -> Tuple[Any, ...]:
        """Draw one observation uniformly at random (with replacement)."""
        self._check_not_empty()
        position = torch.randint(len(self), (1,), generator=generator).item()
        return self._store.getobs(self.indices[position])

    def random_batch(
        self,
        size: int,
        generator: Optional[torch.Generator] = None
    ) -> Tuple[Any, ...]:
        """
        Draw `size` observations independently and uniformly at random.

        Returns:
            One container per source, each holding `size` observations
        """
        if size < 1:
            raise ValueError(f"Invalid batch size: {size}")
        self._check_not_empty()
        positions = torch.randint(len(self), (size,), generator=generator).tolist()
        return self._store.getobs([self.indices[p] for p in positions])

    def shuffled(self, generator: Optional[torch.Generator] = None) -> 'DataSubset':
        """Return a new subset with the same indices in uniformly random order."""
        order = torch.randperm(len(self), generator=generator).tolist()
        return DataSubset(self.source, [self.indices[p] for p in order])

    def split(self, at: float = 0.7) -> Tuple['DataSubset', 'DataSubset']:
        """
        Partition the subset into two consecutive parts.

        Args:
            at: Fraction of observations that go to the first part
        """
        if not 0.0 < at < 1.0:
            raise ValueError(f"Invalid split fraction: {at}")
        cut = int(round(len(self) * at))
        return self[:cut], self[cut:]

    def _check_not_empty(self) -> None:
        if len(self) == 0:
            raise ValueError("Cannot sample from an empty DataSubset")

    def __repr__(self) -> str:
        kinds = ', '.join(type(s).__name__ for s in self.source)
        return f"DataSubset(({kinds}), nobs={len(self)})"


# ============================================================================
# CONSTRUCTION HELPERS
# ============================================================================

def as_subset(data: Sequence[Any]) -> DataSubset:
    """Turn positional data arguments into a DataSubset."""
    if len(data) == 1 and isinstance(data[0], DataSubset):
        return data[0]
    if not data:
        raise ValueError("No data given")
    return DataSubset(tuple(data) if len(data) > 1 else data[0])


def eachobs(*sources: Any) -> DataSubset:
    """
    View all observations of the given sources, in order.

    Example:
        >>> for x, y in eachobs(X, y):
        ...     pass
    """
    return as_subset(sources)


def shuffled(*data: Any, generator: Optional[torch.Generator] = None) -> DataSubset:
    """
    Shuffled view over raw sources or an existing subset.

    Example:
        >>> for x, y in shuffled(X, y):
        ...     pass
    """
    return as_subset(data).shuffled(generator=generator)


def splitobs(*data: Any, at: float = 0.7) -> Tuple[DataSubset, DataSubset]:
    """
    Split raw sources or a subset into two consecutive parts.

    Example:
        >>> train, test = splitobs(X, y, at=0.8)
    """
    return as_subset(data).split(at)
