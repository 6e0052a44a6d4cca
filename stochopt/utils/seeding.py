"""Reproducibility helpers."""

import random

import numpy as np
import torch


def set_seed(seed: int) -> None:
    """
    Seed every random source stochopt draws from.

    Sampling in stochopt.data uses the global torch generator unless an
    explicit `generator` is passed; numpy and `random` are seeded as well
    for user code (data generation, custom strategies).
    """
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)


def make_generator(seed: int) -> torch.Generator:
    """Return a CPU torch.Generator seeded with `seed`."""
    generator = torch.Generator()
    generator.manual_seed(seed)
    return generator
