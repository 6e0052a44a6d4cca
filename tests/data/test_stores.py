"""
Tests for observation stores.

Tests cover:
- Observation counts for arrays, tensors, sequences and tuples
- Single and multi-observation access along the last axis
- Index validation
- Custom stores implementing the protocol
"""

import numpy as np
import pytest
import torch

from stochopt.data import (
    ArrayStore,
    ObservationStore,
    SequenceStore,
    TupleStore,
    as_store,
    getobs,
    nobs,
    normalize_index,
)
from stochopt.errors import OutOfRange, SizeMismatch


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def X():
    """2 features x 4 observations."""
    return np.arange(8, dtype=np.float64).reshape(2, 4)


@pytest.fixture
def y():
    return np.array([10.0, 11.0, 12.0, 13.0])


class RangeStore:
    """Minimal user-defined store: observation i is i squared."""

    def __init__(self, n):
        self.n = n

    def nobs(self):
        return self.n

    def getobs(self, idx):
        idx = normalize_index(idx, self.n)
        if isinstance(idx, int):
            return idx * idx
        return [i * i for i in idx]


# ============================================================================
# TEST COUNTS
# ============================================================================

def test_nobs_matrix_uses_last_axis(X):
    assert nobs(X) == 4


def test_nobs_vector(y):
    assert nobs(y) == 4


def test_nobs_tensor():
    assert nobs(torch.zeros(3, 5, 7)) == 7


def test_nobs_list():
    assert nobs([1, 2, 3]) == 3


def test_nobs_tuple(X, y):
    assert nobs((X, y)) == 4


def test_nobs_tuple_mismatch_raises(X):
    with pytest.raises(SizeMismatch):
        nobs((X, np.zeros(3)))


def test_nobs_empty_vector():
    assert nobs(np.zeros(0)) == 0


# ============================================================================
# TEST ACCESS
# ============================================================================

def test_getobs_matrix_column(X):
    np.testing.assert_array_equal(getobs(X, 2), X[:, 2])


def test_getobs_vector_scalar(y):
    assert getobs(y, 1) == 11.0


def test_getobs_range_keeps_kind(X):
    sub = getobs(X, range(1, 3))
    assert isinstance(sub, np.ndarray)
    np.testing.assert_array_equal(sub, X[:, 1:3])


def test_getobs_slice(X):
    np.testing.assert_array_equal(getobs(X, slice(0, 4, 2)), X[:, [0, 2]])


def test_getobs_index_list(X):
    np.testing.assert_array_equal(getobs(X, [3, 0, 3]), X[:, [3, 0, 3]])


def test_getobs_empty_list(X):
    assert getobs(X, []).shape == (2, 0)


def test_getobs_tensor_index():
    t = torch.arange(5.0)
    assert torch.equal(getobs(t, torch.tensor([4, 1])), torch.tensor([4.0, 1.0]))


def test_getobs_list_source():
    assert getobs(['a', 'b', 'c'], 1) == 'b'
    assert getobs(['a', 'b', 'c'], [2, 0]) == ['c', 'a']


def test_getobs_tuple(X, y):
    x2, y2 = getobs((X, y), 2)
    np.testing.assert_array_equal(x2, X[:, 2])
    assert y2 == 12.0


def test_getobs_does_not_mutate(X):
    before = X.copy()
    getobs(X, [0, 1])
    np.testing.assert_array_equal(X, before)


# ============================================================================
# TEST INDEX VALIDATION
# ============================================================================

@pytest.mark.parametrize("idx", [4, -1, 100])
def test_getobs_out_of_range(X, idx):
    with pytest.raises(OutOfRange):
        getobs(X, idx)


def test_getobs_list_out_of_range(X):
    with pytest.raises(OutOfRange):
        getobs(X, [0, 4])


def test_out_of_range_is_index_error(y):
    with pytest.raises(IndexError):
        getobs(y, 10)


def test_bool_index_rejected(y):
    with pytest.raises(TypeError):
        getobs(y, True)


def test_normalize_slice():
    assert normalize_index(slice(None, None, -1), 3) == range(2, -1, -1)


# ============================================================================
# TEST ADAPTERS
# ============================================================================

def test_as_store_dispatch(X):
    assert isinstance(as_store(X), ArrayStore)
    assert isinstance(as_store([1, 2]), SequenceStore)
    assert isinstance(as_store((X, X)), TupleStore)


def test_as_store_rejects_strings():
    with pytest.raises(TypeError, match="observation store"):
        as_store("abc")


def test_zero_dim_array_rejected():
    with pytest.raises(TypeError):
        as_store(np.array(1.0))


def test_custom_store():
    store = RangeStore(5)
    assert isinstance(store, ObservationStore)
    assert as_store(store) is store
    assert nobs(store) == 5
    assert getobs((store, list('abcde')), 3) == (9, 'd')
