"""xoshiro256++ pseudo-random generator.

Four 64-bit words of state, every word updated on every draw. The output
stream is bit-reproducible for a given initial state, so re-seeding with
the same value replays the same workload across processes.

Not a cryptographic generator.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from kvtrace.constants import (
    U8_MASK,
    U64_MASK,
    XOSHIRO_OUTPUT_ROTATION,
    XOSHIRO_SHIFT,
    XOSHIRO_STATE_ROTATION,
)

from .splitmix import expand_seed

__all__ = ["Xoshiro256PlusPlus", "rotl64"]


def rotl64(x: int, k: int) -> int:
    """Rotate a 64-bit word left by k bits."""
    return ((x << k) | (x >> (64 - k))) & U64_MASK


class Xoshiro256PlusPlus:
    """xoshiro256++ generator over four 64-bit words.

    State is owned by one run and mutated in place; instances are not
    thread-safe and must not be shared between runs.

    Example:
        >>> rng = Xoshiro256PlusPlus.from_seed(0)
        >>> rng.next_u64()
        5987356902031041503
    """

    __slots__ = ("_s0", "_s1", "_s2", "_s3")

    def __init__(self, state: tuple[int, int, int, int]) -> None:
        """Initialize from explicit state words.

        Args:
            state: Four words s0..s3; each is reduced to 64 bits

        Raises:
            ValueError: If the state is all zero (the generator's fixed point)
        """
        s0, s1, s2, s3 = (word & U64_MASK for word in state)
        if not (s0 | s1 | s2 | s3):
            msg = "xoshiro256++ state must not be all zero"
            raise ValueError(msg)
        self._s0 = s0
        self._s1 = s1
        self._s2 = s2
        self._s3 = s3

    @classmethod
    def from_seed(cls, seed: int) -> Xoshiro256PlusPlus:
        """Create a generator from a single seed via SplitMix64 expansion."""
        return cls(expand_seed(seed))

    @property
    def state(self) -> tuple[int, int, int, int]:
        """Current state words s0..s3."""
        return (self._s0, self._s1, self._s2, self._s3)

    def next_u64(self) -> int:
        """Return the next 64-bit output and advance the state."""
        s0, s1, s2, s3 = self._s0, self._s1, self._s2, self._s3
        result = (rotl64((s0 + s3) & U64_MASK, XOSHIRO_OUTPUT_ROTATION) + s0) & U64_MASK
        t = (s1 << XOSHIRO_SHIFT) & U64_MASK

        s2 ^= s0
        s3 ^= s1
        s1 ^= s2
        s0 ^= s3

        s2 ^= t
        s3 = rotl64(s3, XOSHIRO_STATE_ROTATION)

        self._s0, self._s1, self._s2, self._s3 = s0, s1, s2, s3
        return result

    def next_u8(self) -> int:
        """Return the low 8 bits of one 64-bit draw."""
        return self.next_u64() & U8_MASK

    def next_bool(self) -> bool:
        """Return the low bit of one 8-bit draw."""
        return bool(self.next_u8() & 1)
