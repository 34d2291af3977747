"""Hypothesis strategies for kvtrace property-based testing.

Usage:
    from tests.strategies import seeds, u64_bounds, i64_ranges

Event-Emitting Strategies:
    u64_bounds_by_magnitude emits hypothesis.event() calls so coverage of
    the rejection-sampling regions is visible in --hypothesis-show-statistics.
"""

from .workload import (
    i64_ranges,
    i64_values,
    key_domains,
    op_counts,
    oracle_key_lists,
    seeds,
    u8_bounds,
    u64_bounds,
    u64_bounds_by_magnitude,
)

__all__ = [
    "i64_ranges",
    "i64_values",
    "key_domains",
    "op_counts",
    "oracle_key_lists",
    "seeds",
    "u8_bounds",
    "u64_bounds",
    "u64_bounds_by_magnitude",
]
