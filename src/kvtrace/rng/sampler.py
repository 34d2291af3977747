"""Unbiased bounded sampling over xoshiro draws.

Implements Lemire's multiply-high-and-reject method: the raw draw ``x`` is
multiplied by the bound into a double-width product ``m``; the high half is
the result and the low half decides whether ``x`` fell into the short
boundary region that would bias small outputs. Rejection is exact for every
bound and costs close to one draw per call on average.

Python ints provide the double-width product directly, so no split
high/low multiplication is needed.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from kvtrace.constants import I64_MAX, I64_MIN, U8_MASK, U64_MASK, U64_MAX

from .xoshiro import Xoshiro256PlusPlus

__all__ = ["BoundedSampler", "rejection_threshold"]


def rejection_threshold(bound: int, mask: int) -> int:
    """Compute ``(2**w - bound) mod bound`` for a ``w``-bit mask.

    Mirrors the fixed-width sequence: one wrap-around negation, at most one
    subtraction, and a modulo only when the subtraction was not enough.
    """
    t = (-bound) & mask
    if t >= bound:
        t -= bound
        if t >= bound:
            t %= bound
    return t


class BoundedSampler:
    """Bounded integer draws from one xoshiro generator.

    The sampler owns its generator. Every randomized decision of a run goes
    through the same instance so that the draw order, and therefore the
    trace, is fixed by the seed.

    Example:
        >>> sampler = BoundedSampler.from_seed(1)
        >>> [sampler.uniform_below_u64(1000) for _ in range(3)]
        [811, 747, 100]
    """

    __slots__ = ("_rng",)

    def __init__(self, rng: Xoshiro256PlusPlus) -> None:
        self._rng = rng

    @classmethod
    def from_seed(cls, seed: int) -> BoundedSampler:
        """Create a sampler over a freshly seeded generator."""
        return cls(Xoshiro256PlusPlus.from_seed(seed))

    @property
    def rng(self) -> Xoshiro256PlusPlus:
        """Underlying generator."""
        return self._rng

    def raw_u64(self) -> int:
        """Unbounded 64-bit draw."""
        return self._rng.next_u64()

    def random_bool(self) -> bool:
        """Fair coin: low bit of one 8-bit draw."""
        return self._rng.next_bool()

    def uniform_below_u8(self, bound: int) -> int:
        """Uniform integer in ``[0, bound)`` from 8-bit draws.

        Args:
            bound: Exclusive upper bound, 1..255

        Returns:
            Unbiased value below bound

        Raises:
            ValueError: If bound is outside 1..255
        """
        if not 0 < bound <= U8_MASK:
            msg = f"8-bit bound must be in 1..255, got {bound}"
            raise ValueError(msg)

        m = self._rng.next_u8() * bound
        low = m & U8_MASK
        if low < bound:
            t = rejection_threshold(bound, U8_MASK)
            while low < t:
                m = self._rng.next_u8() * bound
                low = m & U8_MASK
        return m >> 8

    def uniform_below_u64(self, bound: int) -> int:
        """Uniform integer in ``[0, bound)`` from 64-bit draws.

        Args:
            bound: Exclusive upper bound, 1..2**64-1

        Returns:
            Unbiased value below bound

        Raises:
            ValueError: If bound is outside 1..2**64-1
        """
        if not 0 < bound <= U64_MAX:
            msg = f"64-bit bound must be in 1..2**64-1, got {bound}"
            raise ValueError(msg)

        m = self._rng.next_u64() * bound
        low = m & U64_MASK
        if low < bound:
            t = rejection_threshold(bound, U64_MASK)
            while low < t:
                m = self._rng.next_u64() * bound
                low = m & U64_MASK
        return m >> 64

    def uniform_at_most_u64(self, bound: int) -> int:
        """Uniform integer in ``[0, bound]``.

        ``bound == 2**64 - 1`` is a raw draw since ``bound + 1`` does not fit
        64 bits.
        """
        if bound == U64_MAX:
            return self._rng.next_u64()
        return self.uniform_below_u64(bound + 1)

    def uniform_range_i64(self, lo: int, hi: int) -> int:
        """Uniform signed 64-bit integer in ``[lo, hi]``.

        The span is computed in unsigned arithmetic so that ranges wider than
        ``I64_MAX`` do not overflow.

        Args:
            lo: Inclusive lower bound
            hi: Inclusive upper bound

        Returns:
            Value in [lo, hi]

        Raises:
            ValueError: If lo > hi or either bound is outside the signed 64-bit range
        """
        if not (I64_MIN <= lo <= I64_MAX and I64_MIN <= hi <= I64_MAX):
            msg = f"Range bounds must fit in a signed 64-bit integer: [{lo}, {hi}]"
            raise ValueError(msg)
        if lo > hi:
            msg = f"Empty range: lo ({lo}) > hi ({hi})"
            raise ValueError(msg)

        ulo = lo & U64_MASK
        width = (hi - lo) & U64_MASK
        value = (ulo + self.uniform_at_most_u64(width)) & U64_MASK
        return value - (1 << 64) if value > I64_MAX else value
