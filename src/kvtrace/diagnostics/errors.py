"""kvtrace exception hierarchy with structured diagnostics.

All exceptions may carry a Diagnostic object for rich error information.

Hierarchy:
    KvTraceError
    ├─ EngineError (raised by the storage engine)
    │  ├─ DuplicateKeyError
    │  ├─ NoMoreRowsError
    │  │  ├─ EndOfIndexError
    │  │  └─ RecordNotFoundError
    │  ├─ TableNotFoundError
    │  ├─ TableExistsError
    │  ├─ DatabaseNotFoundError
    │  ├─ CursorStateError
    │  ├─ TransactionStateError
    │  ├─ LockModeError
    │  ├─ EngineNotStartedError
    │  └─ KeyRangeError
    ├─ WorkloadError (a driver step failed fatally)
    └─ VerificationError (the final scan failed)

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from kvtrace.enums import OpKind

__all__ = [
    "CursorStateError",
    "DatabaseNotFoundError",
    "DuplicateKeyError",
    "EndOfIndexError",
    "EngineError",
    "EngineNotStartedError",
    "KeyRangeError",
    "KvTraceError",
    "LockModeError",
    "NoMoreRowsError",
    "RecordNotFoundError",
    "TableExistsError",
    "TableNotFoundError",
    "TransactionStateError",
    "VerificationError",
    "WorkloadError",
]


class KvTraceError(Exception):
    """Base exception for all kvtrace errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize KvTraceError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)

    @property
    def summary(self) -> str:
        """One-line description without the diagnostic detail block."""
        if self.diagnostic is not None:
            return self.diagnostic.message
        return str(self)


class EngineError(KvTraceError):
    """Error reported by the storage engine."""


class DuplicateKeyError(EngineError):
    """Insert of a key that is already stored in the clustered index."""


class NoMoreRowsError(EngineError):
    """Cursor has no row to move to.

    "End of index" and "record not found" are equivalent for a scan: both
    mean the traversal is complete.
    """


class EndOfIndexError(NoMoreRowsError):
    """Cursor moved past the last row of the index."""


class RecordNotFoundError(NoMoreRowsError):
    """No row satisfies a positioning request."""


class TableNotFoundError(EngineError):
    """Table name does not exist."""


class TableExistsError(EngineError):
    """Table name is already taken."""


class DatabaseNotFoundError(EngineError):
    """Database name does not exist."""


class CursorStateError(EngineError):
    """Cursor is closed or not positioned on a row."""


class TransactionStateError(EngineError):
    """Transaction has already been committed or rolled back."""


class LockModeError(EngineError):
    """Cursor lock mode does not permit the requested operation."""


class EngineNotStartedError(EngineError):
    """Engine call before startup() or after shutdown()."""


class KeyRangeError(EngineError):
    """Key does not fit the key column's integer width."""


class WorkloadError(KvTraceError):
    """A driver step failed fatally.

    Attributes:
        kind: Operation that failed
        key: Key the operation was applied to
    """

    def __init__(self, message: str | Diagnostic, *, kind: OpKind, key: int) -> None:
        """Initialize WorkloadError.

        Args:
            message: Error message string OR Diagnostic object
            kind: Operation that failed
            key: Key the operation was applied to
        """
        super().__init__(message)
        self.kind = kind
        self.key = key


class VerificationError(KvTraceError):
    """The final scan could not read the engine's rows."""
