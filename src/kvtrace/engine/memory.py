"""In-memory reference storage engine.

A small engine implementing the cursor capabilities over a sorted key list
per table, so traces can run without an external database. It models the
observable contract the driver relies on, not a B-tree:

- One integer clustered primary key per table (32-bit signed, like the
  ``c1 INT`` column the trace schema declares)
- Cursors position with GE/G/LE/L comparisons in closest or exact match mode
- Transactions keep an undo log; rollback restores the pre-transaction rows
- Lock modes are recorded per cursor; shared modes reject row writes

Isolation levels are accepted and recorded but not enforced: transactions
see each other's uncommitted rows.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right, insort
from dataclasses import dataclass, field
from typing import Self

from kvtrace.diagnostics import (
    CursorStateError,
    DatabaseNotFoundError,
    DuplicateKeyError,
    EndOfIndexError,
    EngineNotStartedError,
    ErrorTemplate,
    KeyRangeError,
    LockModeError,
    RecordNotFoundError,
    TableExistsError,
    TableNotFoundError,
    TransactionStateError,
)
from kvtrace.enums import IsolationLevel, LockMode, MatchMode, SearchMode

__all__ = ["MemoryCursor", "MemoryEngine", "MemoryTransaction"]

logger = logging.getLogger(__name__)

_I32_MIN = -(1 << 31)
_I32_MAX = (1 << 31) - 1

_WRITE_LOCKS = frozenset({LockMode.INTENTION_EXCLUSIVE, LockMode.EXCLUSIVE})


@dataclass(slots=True)
class _Table:
    """Rows of one table, kept sorted by key."""

    name: str
    key_column: str
    keys: list[int] = field(default_factory=list)

    def contains(self, key: int) -> bool:
        i = bisect_left(self.keys, key)
        return i < len(self.keys) and self.keys[i] == key

    def add(self, key: int) -> None:
        insort(self.keys, key)

    def remove(self, key: int) -> None:
        del self.keys[bisect_left(self.keys, key)]


class MemoryEngine:
    """Reference engine: databases, tables, transactions and cursors.

    Example:
        >>> engine = MemoryEngine()
        >>> engine.startup()
        >>> engine.create_database("db")
        >>> engine.create_table("db/t", "c1")
        >>> with engine.begin_transaction(IsolationLevel.REPEATABLE_READ) as tx:
        ...     with engine.open_cursor("db/t", tx) as cursor:
        ...         cursor.insert_row(5)
        ...     tx.commit()
        >>> engine.table_keys("db/t")
        [5]
    """

    def __init__(self) -> None:
        self._running = False
        self._databases: set[str] = set()
        self._tables: dict[str, _Table] = {}
        self._transactions: list[MemoryTransaction] = []
        self._next_tx_id = 1

    @property
    def is_running(self) -> bool:
        """True between startup() and shutdown()."""
        return self._running

    def _require_running(self) -> None:
        if not self._running:
            raise EngineNotStartedError(ErrorTemplate.engine_not_started())

    def startup(self) -> None:
        """Start the engine. Idempotent."""
        self._running = True
        logger.debug("MemoryEngine started")

    def shutdown(self) -> None:
        """Roll back active transactions and stop the engine.

        Table contents survive a shutdown/startup cycle.
        """
        for tx in list(self._transactions):
            logger.warning("Rolling back transaction %d left active at shutdown", tx.tx_id)
            tx.rollback()
        self._running = False
        logger.debug("MemoryEngine shut down")

    def create_database(self, name: str) -> None:
        """Create a database namespace. Existing databases are kept."""
        self._require_running()
        self._databases.add(name)
        logger.debug("Created database %s", name)

    def create_table(self, name: str, key_column: str) -> None:
        """Create ``db/table`` with an integer clustered primary key.

        Raises:
            DatabaseNotFoundError: If the database part does not exist
            TableExistsError: If the table already exists
        """
        self._require_running()
        database = name.split("/", 1)[0]
        if database not in self._databases:
            raise DatabaseNotFoundError(ErrorTemplate.database_not_found(database))
        if name in self._tables:
            raise TableExistsError(ErrorTemplate.table_exists(name))
        self._tables[name] = _Table(name=name, key_column=key_column)
        logger.debug("Created table %s (primary key %s)", name, key_column)

    def drop_table(self, name: str) -> None:
        """Drop a table and its rows.

        Raises:
            TableNotFoundError: If the table does not exist
        """
        self._require_running()
        if name not in self._tables:
            raise TableNotFoundError(ErrorTemplate.table_not_found(name))
        del self._tables[name]
        logger.debug("Dropped table %s", name)

    def begin_transaction(self, isolation: IsolationLevel) -> MemoryTransaction:
        """Begin a transaction."""
        self._require_running()
        tx = MemoryTransaction(self, self._next_tx_id, isolation)
        self._next_tx_id += 1
        self._transactions.append(tx)
        logger.debug("Began transaction %d (%s)", tx.tx_id, isolation)
        return tx

    def open_cursor(self, table: str, tx: MemoryTransaction) -> MemoryCursor:
        """Open a cursor on ``table`` inside ``tx``.

        Raises:
            TableNotFoundError: If the table does not exist
            TransactionStateError: If the transaction is no longer active
        """
        self._require_running()
        tx.require_active()
        try:
            tbl = self._tables[table]
        except KeyError:
            raise TableNotFoundError(ErrorTemplate.table_not_found(table)) from None
        cursor = MemoryCursor(tbl, tx)
        tx.attach(cursor)
        return cursor

    def table_keys(self, table: str) -> list[int]:
        """Current rows of a table in key order (introspection helper).

        Raises:
            TableNotFoundError: If the table does not exist
        """
        try:
            return list(self._tables[table].keys)
        except KeyError:
            raise TableNotFoundError(ErrorTemplate.table_not_found(table)) from None

    def _finish(self, tx: MemoryTransaction) -> None:
        self._transactions.remove(tx)


class MemoryTransaction:
    """Transaction with an undo log of row inserts and deletes."""

    def __init__(self, engine: MemoryEngine, tx_id: int, isolation: IsolationLevel) -> None:
        self._engine = engine
        self.tx_id = tx_id
        self.isolation = isolation
        self._state = "active"
        self._undo: list[tuple[bool, _Table, int]] = []
        self._cursors: list[MemoryCursor] = []

    @property
    def is_active(self) -> bool:
        """True until commit() or rollback()."""
        return self._state == "active"

    def require_active(self) -> None:
        """Raise TransactionStateError unless the transaction is active."""
        if not self.is_active:
            raise TransactionStateError(ErrorTemplate.transaction_not_active(self._state))

    def attach(self, cursor: MemoryCursor) -> None:
        self._cursors.append(cursor)

    def detach(self, cursor: MemoryCursor) -> None:
        if cursor in self._cursors:
            self._cursors.remove(cursor)

    def record(self, inserted: bool, table: _Table, key: int) -> None:
        """Append one row change to the undo log."""
        self._undo.append((inserted, table, key))

    def _close_cursors(self) -> None:
        for cursor in list(self._cursors):
            cursor.close()

    def commit(self) -> None:
        """Make the transaction's changes permanent and close its cursors."""
        self.require_active()
        self._close_cursors()
        self._state = "committed"
        logger.debug("Committed transaction %d (%d row changes)", self.tx_id, len(self._undo))
        self._undo.clear()
        self._engine._finish(self)  # noqa: SLF001 - engine owns the registry

    def rollback(self) -> None:
        """Undo the transaction's changes in reverse order and close its cursors."""
        self.require_active()
        self._close_cursors()
        for inserted, table, key in reversed(self._undo):
            if inserted:
                table.remove(key)
            else:
                table.add(key)
        self._state = "rolled_back"
        logger.debug("Rolled back transaction %d (%d row changes)", self.tx_id, len(self._undo))
        self._undo.clear()
        self._engine._finish(self)  # noqa: SLF001 - engine owns the registry

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Roll back if still active. Does not suppress exceptions."""
        if self.is_active:
            self.rollback()


class MemoryCursor:
    """Cursor over one table, positioned by key rather than by slot.

    Tracking the current key keeps the position valid when other cursors
    insert or delete rows around it.
    """

    def __init__(self, table: _Table, tx: MemoryTransaction) -> None:
        self._table = table
        self._tx = tx
        self._lock_mode: LockMode | None = None
        self._match_mode = MatchMode.CLOSEST
        self._current: int | None = None
        self._closed = False

    @property
    def lock_mode(self) -> LockMode | None:
        return self._lock_mode

    @property
    def is_positioned(self) -> bool:
        return self._current is not None

    def _require_open(self) -> None:
        if self._closed:
            raise CursorStateError(ErrorTemplate.cursor_closed(self._table.name))
        self._tx.require_active()

    def _require_writable(self) -> None:
        if self._lock_mode is not None and self._lock_mode not in _WRITE_LOCKS:
            raise LockModeError(
                ErrorTemplate.lock_mode_invalid(
                    self._table.name, str(self._lock_mode), str(LockMode.INTENTION_EXCLUSIVE)
                )
            )

    def _require_positioned(self) -> int:
        if self._current is None:
            raise CursorStateError(ErrorTemplate.cursor_not_positioned(self._table.name))
        if not self._table.contains(self._current):
            raise RecordNotFoundError(
                ErrorTemplate.record_not_found(self._table.name, self._current)
            )
        return self._current

    def _end_of_index(self) -> EndOfIndexError:
        self._current = None
        return EndOfIndexError(ErrorTemplate.end_of_index(self._table.name))

    def lock(self, mode: LockMode) -> None:
        """Take a table lock for this cursor."""
        self._require_open()
        self._lock_mode = mode

    def set_match_mode(self, mode: MatchMode) -> None:
        self._require_open()
        self._match_mode = mode

    def insert_row(self, key: int) -> None:
        """Insert one row. The cursor is left unpositioned.

        Raises:
            KeyRangeError: If the key does not fit 32 bits
            DuplicateKeyError: If the key is already stored
        """
        self._require_open()
        self._require_writable()
        if not _I32_MIN <= key <= _I32_MAX:
            raise KeyRangeError(ErrorTemplate.key_out_of_range(self._table.name, key))
        if self._table.contains(key):
            raise DuplicateKeyError(ErrorTemplate.duplicate_key(self._table.name, key))
        self._table.add(key)
        self._tx.record(True, self._table, key)
        self._current = None

    def moveto(self, key: int, mode: SearchMode) -> int:
        """Position relative to ``key``.

        Returns:
            0 on an exact match, else 1 if the cursor landed above ``key``
            and -1 if it landed below

        Raises:
            EndOfIndexError: If no row satisfies the comparison
            RecordNotFoundError: In exact match mode, if ``key`` is not stored
        """
        self._require_open()
        keys = self._table.keys
        match mode:
            case SearchMode.GE:
                i = bisect_left(keys, key)
            case SearchMode.G:
                i = bisect_right(keys, key)
            case SearchMode.LE:
                i = bisect_right(keys, key) - 1
            case SearchMode.L:
                i = bisect_left(keys, key) - 1
            case _:
                msg = f"Unknown search mode: {mode!r}"
                raise ValueError(msg)

        if not 0 <= i < len(keys):
            raise self._end_of_index()

        landed = keys[i]
        if self._match_mode is MatchMode.EXACT and landed != key:
            self._current = None
            raise RecordNotFoundError(ErrorTemplate.record_not_found(self._table.name, key))

        self._current = landed
        return (landed > key) - (landed < key)

    def first(self) -> None:
        """Position on the smallest key.

        Raises:
            EndOfIndexError: If the table is empty
        """
        self._require_open()
        if not self._table.keys:
            raise self._end_of_index()
        self._current = self._table.keys[0]

    def next(self) -> None:
        """Advance to the next larger key.

        Raises:
            CursorStateError: If the cursor is not positioned
            EndOfIndexError: If there is no larger key
        """
        self._require_open()
        if self._current is None:
            raise CursorStateError(ErrorTemplate.cursor_not_positioned(self._table.name))
        keys = self._table.keys
        i = bisect_right(keys, self._current)
        if i >= len(keys):
            raise self._end_of_index()
        self._current = keys[i]

    def read_row(self) -> int:
        """Key of the row under the cursor.

        Raises:
            CursorStateError: If the cursor is not positioned
            RecordNotFoundError: If the row was deleted since positioning
        """
        self._require_open()
        return self._require_positioned()

    def delete_row(self) -> None:
        """Delete the row under the cursor. The cursor is left unpositioned."""
        self._require_open()
        self._require_writable()
        key = self._require_positioned()
        self._table.remove(key)
        self._tx.record(False, self._table, key)
        self._current = None

    def close(self) -> None:
        """Close the cursor. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._current = None
        self._tx.detach(self)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Close the cursor. Does not suppress exceptions."""
        self.close()
