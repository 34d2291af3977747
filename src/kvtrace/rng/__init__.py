"""Deterministic random number generation for workload traces.

Layers, leaf-first:
    splitmix - seed expansion (one u64 -> four state words)
    xoshiro - xoshiro256++ generator over the expanded state
    sampler - unbiased bounded draws (Lemire multiply-and-reject)

Python 3.13+. Zero external dependencies.
"""

from .sampler import BoundedSampler, rejection_threshold
from .splitmix import SplitMix64, expand_seed, mix64
from .xoshiro import Xoshiro256PlusPlus, rotl64

__all__ = [
    "BoundedSampler",
    "SplitMix64",
    "Xoshiro256PlusPlus",
    "expand_seed",
    "mix64",
    "rejection_threshold",
    "rotl64",
]
