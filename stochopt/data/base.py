"""
Observation store protocol and adapters for native containers.

An observation store is anything that knows how many observations it holds
and can hand out one of them, or a sub-container of several, by position.
Native containers are adapted on the fly:

- numpy arrays and torch tensors: observations live along the LAST axis, so
  a (features, n) matrix yields columns and a length-n vector yields scalars
- Python sequences (lists, ranges, ...): one element per observation
- tuples: several aligned containers that must agree on their count

Example:
    >>> X = np.random.rand(2, 4)
    >>> y = np.random.rand(4)
    >>> nobs(X), nobs(y)
    (4, 4)
    >>> getobs(X, 1)          # same as X[:, 1]
    >>> getobs((X, y), [0, 2]) # (X[:, [0, 2]], y[[0, 2]])
"""

from abc import ABC, abstractmethod
from typing import Any, List, Protocol, Sequence, Union, runtime_checkable

import numpy as np
import torch

from ..errors import OutOfRange, SizeMismatch


Index = Union[int, slice, range, Sequence[int], np.ndarray, torch.Tensor]


# ============================================================================
# STORE PROTOCOL
# ============================================================================

@runtime_checkable
class ObservationStore(Protocol):
    """
    Protocol for anything that can serve observations by position.

    `getobs` must be a pure projection: it never mutates the store.
    """

    def nobs(self) -> int:
        """Return the number of observations."""
        ...

    def getobs(self, idx: Index) -> Any:
        """
        Get observations by position.

        Args:
            idx: An int for a single observation, or a range/slice/sequence
                 of ints for a sub-container of the same kind
        """
        ...


def normalize_index(idx: Index, n: int) -> Union[int, range, List[int]]:
    """
    Validate an index against `n` observations.

    Returns an int, a range, or a list of ints. Slices are resolved against
    `n` the way Python resolves them. Anything outside [0, n) raises
    OutOfRange.
    """
    if isinstance(idx, (np.ndarray, torch.Tensor)):
        idx = idx.item() if idx.ndim == 0 else idx.tolist()

    if isinstance(idx, (bool, np.bool_)):
        raise TypeError(f"Invalid observation index: {idx!r}")

    if isinstance(idx, (int, np.integer)):
        i = int(idx)
        if not 0 <= i < n:
            raise OutOfRange(f"Index {i} out of range for {n} observations")
        return i

    if isinstance(idx, slice):
        return range(*idx.indices(n))

    if isinstance(idx, range):
        if len(idx) and (min(idx) < 0 or max(idx) >= n):
            raise OutOfRange(f"Range {idx} out of range for {n} observations")
        return idx

    indices = [int(i) for i in idx]
    bad = [i for i in indices if not 0 <= i < n]
    if bad:
        raise OutOfRange(
            f"Indices {bad[:5]} out of range for {n} observations"
        )
    return indices


# ============================================================================
# ADAPTERS
# ============================================================================

class BaseStore(ABC):
    """
    Abstract base for store adapters.

    Subclasses implement `nobs` and `_take`; index validation is shared.
    """

    def __init__(self, data: Any):
        self.data = data

    @abstractmethod
    def nobs(self) -> int:
        pass

    @abstractmethod
    def _take(self, idx: Union[int, range, List[int]]) -> Any:
        pass

    def getobs(self, idx: Index) -> Any:
        return self._take(normalize_index(idx, self.nobs()))

    def __len__(self) -> int:
        return self.nobs()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(nobs={self.nobs()})"


class ArrayStore(BaseStore):
    """
    Adapter for numpy arrays and torch tensors.

    The observation axis is the last axis. A contiguous range is served as a
    slice (a view for both numpy and torch); any other index list goes
    through advanced indexing, which copies.
    """

    def __init__(self, data: Union[np.ndarray, torch.Tensor]):
        if data.ndim == 0:
            raise TypeError("A 0-dimensional array holds no observations")
        super().__init__(data)

    def nobs(self) -> int:
        return self.data.shape[-1]

    def _take(self, idx):
        if isinstance(idx, int):
            # plain indexing on vectors so numpy hands back a scalar
            return self.data[idx] if self.data.ndim == 1 else self.data[..., idx]
        if isinstance(idx, range) and idx.step > 0:
            return self.data[..., idx.start:idx.start + len(idx) * idx.step:idx.step]
        if isinstance(idx, range):
            idx = list(idx)
        if not idx:
            return self.data[..., 0:0]
        return self.data[..., idx]


class SequenceStore(BaseStore):
    """Adapter for Python sequences: one element per observation."""

    def nobs(self) -> int:
        return len(self.data)

    def _take(self, idx):
        if isinstance(idx, int):
            return self.data[idx]
        return [self.data[i] for i in idx]


class TupleStore(BaseStore):
    """
    Adapter for a tuple of aligned containers.

    All members must report the same number of observations; observations
    come back as tuples with one entry per member.
    """

    def __init__(self, data: tuple):
        super().__init__(data)
        self.stores = tuple(as_store(member) for member in data)
        counts = [store.nobs() for store in self.stores]
        if len(set(counts)) > 1:
            raise SizeMismatch(
                f"Data containers disagree on number of observations: {counts}"
            )
        self._nobs = counts[0] if counts else 0

    def nobs(self) -> int:
        return self._nobs

    def _take(self, idx):
        return tuple(store.getobs(idx) for store in self.stores)


def as_store(data: Any) -> ObservationStore:
    """
    Adapt a container to the ObservationStore protocol.

    Objects that already implement the protocol are returned unchanged.

    Raises:
        TypeError: If the container type is not supported
        SizeMismatch: If a tuple's members disagree on their counts
    """
    if isinstance(data, tuple):
        return TupleStore(data)
    if isinstance(data, (np.ndarray, torch.Tensor)):
        return ArrayStore(data)
    if isinstance(data, ObservationStore):
        return data
    if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
        return SequenceStore(data)
    raise TypeError(
        f"Cannot use {type(data).__name__} as an observation store. "
        f"Supported: numpy arrays, torch tensors, sequences, tuples, "
        f"or objects implementing nobs()/getobs()"
    )


def nobs(data: Any) -> int:
    """Return the number of observations in `data`."""
    return as_store(data).nobs()


def getobs(data: Any, idx: Index) -> Any:
    """
    Get the observation(s) of `data` at `idx`.

    An int yields one observation (a column of a matrix, an element of a
    vector); a range, slice or sequence of ints yields a sub-container of
    the same kind.
    """
    return as_store(data).getobs(idx)
