"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps messages testable and documents every failure mode in one place.
    """

    # ------------------------------------------------------------------
    # Engine
    # ------------------------------------------------------------------

    @staticmethod
    def duplicate_key(table: str, key: int) -> Diagnostic:
        """Insert of a key that is already stored.

        Args:
            table: Fully qualified table name
            key: The duplicate key

        Returns:
            Diagnostic for DUPLICATE_KEY
        """
        return Diagnostic(
            code=DiagnosticCode.DUPLICATE_KEY,
            message=f"Duplicate key {key}",
            key=key,
            table=table,
        )

    @staticmethod
    def end_of_index(table: str) -> Diagnostic:
        """Cursor moved past the last row.

        Returns:
            Diagnostic for END_OF_INDEX
        """
        return Diagnostic(
            code=DiagnosticCode.END_OF_INDEX,
            message="End of index",
            table=table,
        )

    @staticmethod
    def record_not_found(table: str, key: int | None = None) -> Diagnostic:
        """No row satisfies the positioning request.

        Returns:
            Diagnostic for RECORD_NOT_FOUND
        """
        return Diagnostic(
            code=DiagnosticCode.RECORD_NOT_FOUND,
            message="Record not found" if key is None else f"Record {key} not found",
            key=key,
            table=table,
        )

    @staticmethod
    def table_not_found(table: str) -> Diagnostic:
        """Table name does not exist.

        Returns:
            Diagnostic for TABLE_NOT_FOUND
        """
        return Diagnostic(
            code=DiagnosticCode.TABLE_NOT_FOUND,
            message=f"Table '{table}' not found",
            table=table,
            hint="Create the table before opening cursors on it",
        )

    @staticmethod
    def table_exists(table: str) -> Diagnostic:
        """Table name is already taken.

        Returns:
            Diagnostic for TABLE_EXISTS
        """
        return Diagnostic(
            code=DiagnosticCode.TABLE_EXISTS,
            message=f"Table '{table}' already exists",
            table=table,
        )

    @staticmethod
    def database_not_found(database: str) -> Diagnostic:
        """Database name does not exist.

        Returns:
            Diagnostic for DATABASE_NOT_FOUND
        """
        return Diagnostic(
            code=DiagnosticCode.DATABASE_NOT_FOUND,
            message=f"Database '{database}' not found",
            hint="Call create_database() before create_table()",
        )

    @staticmethod
    def cursor_not_positioned(table: str) -> Diagnostic:
        """Row access on a cursor that is not on a row.

        Returns:
            Diagnostic for CURSOR_NOT_POSITIONED
        """
        return Diagnostic(
            code=DiagnosticCode.CURSOR_NOT_POSITIONED,
            message="Cursor is not positioned on a row",
            table=table,
            hint="Call first() or moveto() before reading or deleting",
        )

    @staticmethod
    def cursor_closed(table: str) -> Diagnostic:
        """Use of a closed cursor.

        Returns:
            Diagnostic for CURSOR_CLOSED
        """
        return Diagnostic(
            code=DiagnosticCode.CURSOR_CLOSED,
            message="Cursor is closed",
            table=table,
        )

    @staticmethod
    def transaction_not_active(state: str) -> Diagnostic:
        """Use of a committed or rolled back transaction.

        Args:
            state: Current transaction state name

        Returns:
            Diagnostic for TRANSACTION_NOT_ACTIVE
        """
        return Diagnostic(
            code=DiagnosticCode.TRANSACTION_NOT_ACTIVE,
            message=f"Transaction is not active (state: {state})",
        )

    @staticmethod
    def lock_mode_invalid(table: str, held: str, requested: str) -> Diagnostic:
        """Write through a cursor that only holds a shared lock.

        Returns:
            Diagnostic for LOCK_MODE_INVALID
        """
        return Diagnostic(
            code=DiagnosticCode.LOCK_MODE_INVALID,
            message=f"Operation requires {requested} lock, cursor holds {held}",
            table=table,
            hint="Lock the cursor with IX or X before modifying rows",
        )

    @staticmethod
    def engine_not_started() -> Diagnostic:
        """Engine call before startup() or after shutdown().

        Returns:
            Diagnostic for ENGINE_NOT_STARTED
        """
        return Diagnostic(
            code=DiagnosticCode.ENGINE_NOT_STARTED,
            message="Engine is not running",
            hint="Call startup() first",
        )

    @staticmethod
    def key_out_of_range(table: str, key: int) -> Diagnostic:
        """Key does not fit the 32-bit integer key column.

        Returns:
            Diagnostic for KEY_OUT_OF_RANGE
        """
        return Diagnostic(
            code=DiagnosticCode.KEY_OUT_OF_RANGE,
            message=f"Key {key} does not fit a 32-bit integer column",
            key=key,
            table=table,
        )

    # ------------------------------------------------------------------
    # Workload
    # ------------------------------------------------------------------

    @staticmethod
    def insert_failed(key: int, cause: object) -> Diagnostic:
        """Engine rejected an insert of an oracle-absent key.

        Returns:
            Diagnostic for INSERT_FAILED
        """
        return Diagnostic(
            code=DiagnosticCode.INSERT_FAILED,
            message=f"Insert failed for key {key}: {cause}",
            key=key,
        )

    @staticmethod
    def delete_lookup_failed(key: int) -> Diagnostic:
        """Cursor did not land exactly on an oracle-present key.

        Returns:
            Diagnostic for DELETE_LOOKUP_FAILED
        """
        return Diagnostic(
            code=DiagnosticCode.DELETE_LOOKUP_FAILED,
            message=f"Delete lookup failed for key {key}",
            key=key,
            hint="The engine lost a row the oracle still holds",
        )

    @staticmethod
    def delete_failed(key: int, cause: object) -> Diagnostic:
        """Engine rejected the delete of the positioned row.

        Returns:
            Diagnostic for DELETE_FAILED
        """
        return Diagnostic(
            code=DiagnosticCode.DELETE_FAILED,
            message=f"Delete failed for key {key}: {cause}",
            key=key,
        )

    @staticmethod
    def search_failed(key: int, cause: object) -> Diagnostic:
        """Search positioning failed with something other than end of index.

        Returns:
            Diagnostic for SEARCH_FAILED
        """
        return Diagnostic(
            code=DiagnosticCode.SEARCH_FAILED,
            message=f"Search failed for key {key}: {cause}",
            key=key,
        )

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    @staticmethod
    def scan_failed(code: DiagnosticCode, step: str, cause: object) -> Diagnostic:
        """Final scan could not complete.

        Args:
            code: One of SCAN_FIRST_FAILED, SCAN_READ_FAILED, SCAN_NEXT_FAILED
            step: Human-readable cursor call ("Cursor first", "Read", ...)
            cause: Underlying engine error

        Returns:
            Diagnostic for the given scan code
        """
        return Diagnostic(code=code, message=f"{step} failed: {cause}")
