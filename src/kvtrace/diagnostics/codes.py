"""Diagnostic codes and data structures.

Defines error codes and the structured diagnostic carried by kvtrace
exceptions.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Engine errors (reported by the storage engine)
        2000-2999: Workload errors (a driver step failed fatally)
        3000-3999: Verification errors (the final scan failed)
    """

    # Engine errors (1000-1999)
    DUPLICATE_KEY = 1001
    END_OF_INDEX = 1002
    RECORD_NOT_FOUND = 1003
    TABLE_NOT_FOUND = 1004
    TABLE_EXISTS = 1005
    DATABASE_NOT_FOUND = 1006
    CURSOR_NOT_POSITIONED = 1007
    CURSOR_CLOSED = 1008
    TRANSACTION_NOT_ACTIVE = 1009
    LOCK_MODE_INVALID = 1010
    ENGINE_NOT_STARTED = 1011
    KEY_OUT_OF_RANGE = 1012

    # Workload errors (2000-2999)
    INSERT_FAILED = 2001
    DELETE_LOOKUP_FAILED = 2002
    DELETE_FAILED = 2003
    SEARCH_FAILED = 2004

    # Verification errors (3000-3999)
    SCAN_FIRST_FAILED = 3001
    SCAN_READ_FAILED = 3002
    SCAN_NEXT_FAILED = 3003


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        key: Row key involved in the failure (None when not applicable)
        table: Fully qualified table name (None when not applicable)
        hint: Suggestion for locating the cause
    """

    code: DiagnosticCode
    message: str
    key: int | None = None
    table: str | None = None
    hint: str | None = None

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic as a compiler-style block.

        Example output:
            error[DUPLICATE_KEY]: Duplicate key 42
              = table: trace_db/trace_t
              = key: 42
              = help: The oracle believed the key was absent

        Returns:
            Formatted error message
        """
        lines = [f"error[{self.code.name}]: {self.message}"]
        if self.table is not None:
            lines.append(f"  = table: {self.table}")
        if self.key is not None:
            lines.append(f"  = key: {self.key}")
        if self.hint:
            lines.append(f"  = help: {self.hint}")
        return "\n".join(lines)
