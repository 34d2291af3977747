"""SplitMix64 seed expansion.

Expands one 64-bit seed into the four-word state of the xoshiro generator.
Each output word is the Stafford Mix13 finalizer applied to a Weyl sequence
stepping by the golden gamma, so seeds differing by a single bit produce
decorrelated generator states.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from kvtrace.constants import GOLDEN_GAMMA, MIX_MULTIPLIER_1, MIX_MULTIPLIER_2, U64_MASK

__all__ = ["SplitMix64", "expand_seed", "mix64"]


def mix64(z: int) -> int:
    """Apply the SplitMix64 finalizer to one 64-bit word."""
    z = ((z ^ (z >> 30)) * MIX_MULTIPLIER_1) & U64_MASK
    z = ((z ^ (z >> 27)) * MIX_MULTIPLIER_2) & U64_MASK
    return z ^ (z >> 31)


class SplitMix64:
    """Weyl-sequence generator with a mixing finalizer.

    Example:
        >>> sm = SplitMix64(0)
        >>> hex(sm.next())
        '0xe220a8397b1dcdaf'
    """

    __slots__ = ("_state",)

    def __init__(self, seed: int) -> None:
        self._state = seed & U64_MASK

    def next(self) -> int:
        """Advance the accumulator and return the mixed word."""
        self._state = (self._state + GOLDEN_GAMMA) & U64_MASK
        return mix64(self._state)


def expand_seed(seed: int) -> tuple[int, int, int, int]:
    """Expand a seed into four generator state words.

    Seeds outside [0, 2**64) are reduced modulo 2**64.

    Args:
        seed: Any integer seed

    Returns:
        Four 64-bit words, in generator order s0..s3
    """
    sm = SplitMix64(seed)
    return (sm.next(), sm.next(), sm.next(), sm.next())
