"""Diagnostic system for kvtrace errors.

Provides structured error diagnostics with codes, keys and hints.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import (
    CursorStateError,
    DatabaseNotFoundError,
    DuplicateKeyError,
    EndOfIndexError,
    EngineError,
    EngineNotStartedError,
    KeyRangeError,
    KvTraceError,
    LockModeError,
    NoMoreRowsError,
    RecordNotFoundError,
    TableExistsError,
    TableNotFoundError,
    TransactionStateError,
    VerificationError,
    WorkloadError,
)
from .templates import ErrorTemplate

__all__ = [
    "CursorStateError",
    "DatabaseNotFoundError",
    "Diagnostic",
    "DiagnosticCode",
    "DuplicateKeyError",
    "EndOfIndexError",
    "EngineError",
    "EngineNotStartedError",
    "ErrorTemplate",
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
