"""Data access for stochopt: observation stores, subsets and streams."""

# Observation stores
from .base import (
    ObservationStore,
    BaseStore,
    ArrayStore,
    SequenceStore,
    TupleStore,
    as_store,
    nobs,
    getobs,
    normalize_index,
)

# Subsets
from .subset import (
    DataSubset,
    as_subset,
    eachobs,
    shuffled,
    splitobs,
)

# Streams
from .streams import (
    BatchSequence,
    InfiniteStream,
    InfiniteObservations,
    InfiniteBatches,
    eachbatch,
    infinite_obs,
    infinite_batches,
    is_infinite,
)


__all__ = [
    # Stores
    'ObservationStore',
    'BaseStore',
    'ArrayStore',
    'SequenceStore',
    'TupleStore',
    'as_store',
    'nobs',
    'getobs',
    'normalize_index',

    # Subsets
    'DataSubset',
    'as_subset',
    'eachobs',
    'shuffled',
    'splitobs',

    # Streams
    'BatchSequence',
    'InfiniteStream',
    'InfiniteObservations',
    'InfiniteBatches',
    'eachbatch',
    'infinite_obs',
    'infinite_batches',
    'is_infinite',
]
