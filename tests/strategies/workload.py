"""Hypothesis strategies for seeds, bounds, key domains and workloads."""

from __future__ import annotations

from hypothesis import event
from hypothesis import strategies as st

from kvtrace.constants import I64_MAX, I64_MIN, U64_MAX

# =============================================================================
# INTEGERS
# =============================================================================

seeds = st.integers(min_value=0, max_value=U64_MAX)
"""Any 64-bit seed."""

u64_bounds = st.integers(min_value=1, max_value=U64_MAX)
"""Valid exclusive bounds for uniform_below_u64."""

u8_bounds = st.integers(min_value=1, max_value=255)
"""Valid exclusive bounds for uniform_below_u8."""

i64_values = st.integers(min_value=I64_MIN, max_value=I64_MAX)


@st.composite
def u64_bounds_by_magnitude(draw: st.DrawFn) -> int:
    """Bounds biased toward the regions where rejection matters.

    Events: bound_class={tiny,power_of_two,near_max,mid}
    """
    kind = draw(st.sampled_from(["tiny", "power_of_two", "near_max", "mid"]))
    event(f"bound_class={kind}")
    match kind:
        case "tiny":
            return draw(st.integers(min_value=1, max_value=16))
        case "power_of_two":
            return 1 << draw(st.integers(min_value=0, max_value=63))
        case "near_max":
            return U64_MAX - draw(st.integers(min_value=0, max_value=1 << 20))
        case _:
            return draw(st.integers(min_value=17, max_value=U64_MAX))


@st.composite
def i64_ranges(draw: st.DrawFn) -> tuple[int, int]:
    """Ordered (lo, hi) pairs over the full signed 64-bit range."""
    a = draw(i64_values)
    b = draw(i64_values)
    return (a, b) if a <= b else (b, a)


# =============================================================================
# WORKLOADS
# =============================================================================


@st.composite
def key_domains(draw: st.DrawFn, max_size: int = 64) -> tuple[int, int]:
    """Small inclusive key domains; small domains force duplicate draws."""
    lo = draw(st.integers(min_value=-1000, max_value=1000))
    size = draw(st.integers(min_value=1, max_value=max_size))
    return lo, lo + size - 1


op_counts = st.integers(min_value=0, max_value=300)
"""Step counts small enough for many examples per test."""


@st.composite
def oracle_key_lists(draw: st.DrawFn, lo: int = 1, hi: int = 1000) -> list[int]:
    """Distinct keys inside a domain, in insertion order."""
    return draw(st.lists(st.integers(min_value=lo, max_value=hi), unique=True, max_size=64))
