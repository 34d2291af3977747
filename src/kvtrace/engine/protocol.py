"""Storage engine capabilities consumed by the workload driver and verifier.

The core never constructs or inspects engine internals; it depends only on
these protocols. Any engine exposing a cursor over an integer-keyed
clustered index can be fuzzed by implementing them.

Error contract:
    Failures are raised as kvtrace.diagnostics.EngineError subclasses.
    Callers treat EndOfIndexError and RecordNotFoundError (both
    NoMoreRowsError) as "no more rows"; everything else is fatal.

Python 3.13+.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from kvtrace.enums import IsolationLevel, LockMode, MatchMode, SearchMode

__all__ = ["Cursor", "StorageEngine", "Transaction"]


@runtime_checkable
class Transaction(Protocol):
    """Unit of work. Context manager: rolls back if the block raises."""

    @property
    def is_active(self) -> bool:
        ...  # pragma: no cover  # Protocol stub - not executable

    def commit(self) -> None:
        ...  # pragma: no cover  # Protocol stub - not executable

    def rollback(self) -> None:
        ...  # pragma: no cover  # Protocol stub - not executable

    def __enter__(self) -> Self:
        ...  # pragma: no cover  # Protocol stub - not executable

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        ...  # pragma: no cover  # Protocol stub - not executable


@runtime_checkable
class Cursor(Protocol):
    """Positioned view over one table's clustered index.

    Context manager: closed when the block exits.
    """

    def lock(self, mode: LockMode) -> None:
        """Take a table lock for the lifetime of the cursor's transaction."""
        ...  # pragma: no cover  # Protocol stub - not executable

    def insert_row(self, key: int) -> None:
        """Insert one row; raises DuplicateKeyError if the key is stored."""
        ...  # pragma: no cover  # Protocol stub - not executable

    def set_match_mode(self, mode: MatchMode) -> None:
        ...  # pragma: no cover  # Protocol stub - not executable

    def moveto(self, key: int, mode: SearchMode) -> int:
        """Position the cursor relative to ``key``.

        Returns:
            0 if the cursor landed on ``key`` exactly, otherwise the sign of
            (landed key - search key)

        Raises:
            EndOfIndexError: No row satisfies the comparison
        """
        ...  # pragma: no cover  # Protocol stub - not executable

    def first(self) -> None:
        """Position on the smallest key; EndOfIndexError if the table is empty."""
        ...  # pragma: no cover  # Protocol stub - not executable

    def next(self) -> None:
        """Advance one row; EndOfIndexError past the last row."""
        ...  # pragma: no cover  # Protocol stub - not executable

    def read_row(self) -> int:
        """Key of the row under the cursor."""
        ...  # pragma: no cover  # Protocol stub - not executable

    def delete_row(self) -> None:
        """Delete the row under the cursor."""
        ...  # pragma: no cover  # Protocol stub - not executable

    def close(self) -> None:
        ...  # pragma: no cover  # Protocol stub - not executable

    def __enter__(self) -> Self:
        ...  # pragma: no cover  # Protocol stub - not executable

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        ...  # pragma: no cover  # Protocol stub - not executable


@runtime_checkable
class StorageEngine(Protocol):
    """Engine lifecycle, schema and handle factory."""

    def startup(self) -> None:
        ...  # pragma: no cover  # Protocol stub - not executable

    def shutdown(self) -> None:
        ...  # pragma: no cover  # Protocol stub - not executable

    def create_database(self, name: str) -> None:
        ...  # pragma: no cover  # Protocol stub - not executable

    def create_table(self, name: str, key_column: str) -> None:
        """Create ``name`` ("db/table") with an integer clustered primary key."""
        ...  # pragma: no cover  # Protocol stub - not executable

    def drop_table(self, name: str) -> None:
        ...  # pragma: no cover  # Protocol stub - not executable

    def begin_transaction(self, isolation: IsolationLevel) -> Transaction:
        ...  # pragma: no cover  # Protocol stub - not executable

    def open_cursor(self, table: str, tx: Transaction) -> Cursor:
        ...  # pragma: no cover  # Protocol stub - not executable
