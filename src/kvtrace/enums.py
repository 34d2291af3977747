"""Enumerations for kvtrace type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import IntEnum, StrEnum


class OpKind(StrEnum):
    """Kind of workload operation.

    Values are the trace line prefixes: str(OpKind.INSERT) == "I"
    """

    INSERT = "I"
    """Insert a key that the oracle reports absent."""

    DELETE = "D"
    """Delete a key picked from the oracle's present set."""

    SEARCH = "S"
    """Position a cursor at or after a key and record exact hits."""


class Action(IntEnum):
    """Action index drawn by the driver with uniform_below_u8(3)."""

    INSERT = 0
    DELETE = 1
    SEARCH = 2


class LockMode(StrEnum):
    """Table lock mode requested by a cursor."""

    INTENTION_SHARED = "IS"
    """Readers (the final scan)."""

    INTENTION_EXCLUSIVE = "IX"
    """Row writers (the workload cursor)."""

    SHARED = "S"
    EXCLUSIVE = "X"


class SearchMode(StrEnum):
    """Comparison used by Cursor.moveto()."""

    GE = "ge"
    """Land on the first row whose key is >= the search key."""

    G = "g"
    """Land on the first row whose key is > the search key."""

    LE = "le"
    """Land on the last row whose key is <= the search key."""

    L = "l"
    """Land on the last row whose key is < the search key."""


class MatchMode(StrEnum):
    """How Cursor.moveto() treats a search key that is not stored."""

    CLOSEST = "closest"
    """Position on the nearest row in the search direction."""

    EXACT = "exact"
    """Fail with RecordNotFoundError unless the key is stored."""


class IsolationLevel(StrEnum):
    """Transaction isolation level requested at begin."""

    READ_UNCOMMITTED = "read_uncommitted"
    READ_COMMITTED = "read_committed"
    REPEATABLE_READ = "repeatable_read"
    SERIALIZABLE = "serializable"


__all__ = [
    "Action",
    "IsolationLevel",
    "LockMode",
    "MatchMode",
    "OpKind",
    "SearchMode",
]
