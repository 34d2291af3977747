"""Run configuration for a workload trace.

Provides a single frozen dataclass that encapsulates all parameters of one
trace run. The CLI, the session runner and the tests all construct runs
through it.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from kvtrace.constants import (
    DEFAULT_DATABASE,
    DEFAULT_OPS,
    DEFAULT_SEED,
    DEFAULT_TABLE,
    KEY_DOMAIN_MAX,
    KEY_DOMAIN_MIN,
    MAX_INSERT_RETRIES,
    U64_MASK,
)

__all__ = ["RunConfig"]


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Immutable configuration for one trace run.

    All fields have defaults matching the `kvtrace` command; constructing
    ``RunConfig()`` with no arguments reproduces its default run.

    Attributes:
        seed: Generator seed (default: 0xC0FFEE). Reduced modulo 2**64.
        ops: Number of driver steps (default: 60). Abandoned inserts count.
        key_min: Inclusive lower bound of the key domain (default: 1).
        key_max: Inclusive upper bound of the key domain (default: 1000).
        max_insert_retries: Redraws after a duplicate candidate before the
            insert step is abandoned (default: 10).
        check_search: Raise OracleMismatchError when a search outcome
            disagrees with the oracle (default: True). False records whatever
            the engine answers without checking it.
        database: Engine database name (default: "trace_db").
        table: Table name inside the database (default: "trace_t").

    Example:
        >>> config = RunConfig(seed=7, ops=12)
        >>> config.table_path
        'trace_db/trace_t'
    """

    seed: int = DEFAULT_SEED
    ops: int = DEFAULT_OPS
    key_min: int = KEY_DOMAIN_MIN
    key_max: int = KEY_DOMAIN_MAX
    max_insert_retries: int = MAX_INSERT_RETRIES
    check_search: bool = True
    database: str = DEFAULT_DATABASE
    table: str = DEFAULT_TABLE

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If ops or max_insert_retries is negative, the key
                domain is empty or does not fit a 32-bit key column, or a
                name is empty or contains '/'.
        """
        object.__setattr__(self, "seed", self.seed & U64_MASK)
        if self.ops < 0:
            msg = f"ops must be non-negative, got {self.ops}"
            raise ValueError(msg)
        if self.max_insert_retries < 0:
            msg = f"max_insert_retries must be non-negative, got {self.max_insert_retries}"
            raise ValueError(msg)
        if self.key_min > self.key_max:
            msg = f"key_min ({self.key_min}) must not exceed key_max ({self.key_max})"
            raise ValueError(msg)
        if self.key_min < -(1 << 31) or self.key_max >= 1 << 31:
            msg = "key domain must fit a 32-bit signed key column"
            raise ValueError(msg)
        for label, name in (("database", self.database), ("table", self.table)):
            if not name or "/" in name:
                msg = f"{label} name must be non-empty and must not contain '/': {name!r}"
                raise ValueError(msg)

    @property
    def table_path(self) -> str:
        """Fully qualified ``database/table`` name."""
        return f"{self.database}/{self.table}"
