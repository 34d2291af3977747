"""Consistency verifier - end-to-end check of the engine against the oracle.

After the driver commits, the verifier opens its own read transaction and
cursor, scans every row in clustered-index order, and compares the scanned
keys with the oracle's final key set. It never consults the oracle while
scanning, so the scan is an independent witness of the engine's state.

"End of index" and "record not found" both end the scan; any other engine
error aborts verification.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kvtrace.diagnostics import (
    DiagnosticCode,
    EngineError,
    ErrorTemplate,
    NoMoreRowsError,
    VerificationError,
)
from kvtrace.enums import IsolationLevel, LockMode
from kvtrace.integrity import ConsistencyError, IntegrityContext

if TYPE_CHECKING:
    from kvtrace.engine import Cursor, StorageEngine
    from kvtrace.oracle import WorkloadOracle

__all__ = ["ConsistencyVerifier", "VerificationResult"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Outcome of comparing the final scan with the oracle.

    Attributes:
        scanned: Keys in the order the engine returned them
        missing: Keys the oracle holds but the scan did not return
        unexpected: Keys the scan returned but the oracle does not hold
        duplicates: Keys the scan returned more than once
    """

    scanned: tuple[int, ...]
    missing: frozenset[int] = frozenset()
    unexpected: frozenset[int] = frozenset()
    duplicates: frozenset[int] = frozenset()

    @property
    def ok(self) -> bool:
        """True if the scan equals the oracle's key set exactly."""
        return not (self.missing or self.unexpected or self.duplicates)

    @property
    def is_sorted(self) -> bool:
        """True if the scan was strictly ascending."""
        return all(a < b for a, b in zip(self.scanned, self.scanned[1:], strict=False))

    def raise_for_mismatch(self, seed: int | None = None) -> None:
        """Raise ConsistencyError unless the result is ok.

        Args:
            seed: Seed of the run, recorded in the error context for replay
        """
        if self.ok:
            return
        msg = (
            f"Final scan differs from oracle: missing={sorted(self.missing)} "
            f"unexpected={sorted(self.unexpected)} duplicates={sorted(self.duplicates)}"
        )
        raise ConsistencyError(
            msg,
            IntegrityContext(
                component="verifier",
                operation="scan",
                actual=f"{len(self.scanned)} keys scanned",
                seed=seed,
            ),
            missing=self.missing,
            unexpected=self.unexpected | self.duplicates,
        )


class ConsistencyVerifier:
    """Scan an engine table and compare it with an oracle.

    Args:
        engine: Started engine
        table: Fully qualified ``database/table`` name
    """

    def __init__(self, engine: StorageEngine, table: str) -> None:
        self._engine = engine
        self._table = table

    def scan(self) -> list[int]:
        """Read every row in index order through a fresh read transaction.

        Returns:
            Keys in engine order

        Raises:
            VerificationError: An engine call other than the terminating
                "no more rows" signal failed
        """
        with self._engine.begin_transaction(IsolationLevel.REPEATABLE_READ) as tx:
            with self._engine.open_cursor(self._table, tx) as cursor:
                cursor.lock(LockMode.INTENTION_SHARED)
                keys = self._read_all(cursor)
            tx.commit()
        logger.debug("Scanned %d rows from %s", len(keys), self._table)
        return keys

    @staticmethod
    def _read_all(cursor: Cursor) -> list[int]:
        keys: list[int] = []
        try:
            cursor.first()
        except NoMoreRowsError:
            return keys
        except EngineError as e:
            raise VerificationError(
                ErrorTemplate.scan_failed(DiagnosticCode.SCAN_FIRST_FAILED, "Cursor first", e.summary)
            ) from e

        while True:
            try:
                keys.append(cursor.read_row())
            except NoMoreRowsError:
                break
            except EngineError as e:
                raise VerificationError(
                    ErrorTemplate.scan_failed(DiagnosticCode.SCAN_READ_FAILED, "Read", e.summary)
                ) from e

            try:
                cursor.next()
            except NoMoreRowsError:
                break
            except EngineError as e:
                raise VerificationError(
                    ErrorTemplate.scan_failed(
                        DiagnosticCode.SCAN_NEXT_FAILED, "Cursor next", e.summary
                    )
                ) from e
        return keys

    def verify(self, oracle: WorkloadOracle) -> VerificationResult:
        """Scan the table and compare it with ``oracle``."""
        return self.compare(self.scan(), oracle)

    @staticmethod
    def compare(scanned: list[int], oracle: WorkloadOracle) -> VerificationResult:
        """Compare an already scanned key list with ``oracle``."""
        seen: set[int] = set()
        duplicates: set[int] = set()
        for key in scanned:
            if key in seen:
                duplicates.add(key)
            seen.add(key)

        expected = oracle.keys()
        result = VerificationResult(
            scanned=tuple(scanned),
            missing=frozenset(expected - seen),
            unexpected=frozenset(seen - expected),
            duplicates=frozenset(duplicates),
        )
        if not result.ok:
            logger.warning(
                "Verification mismatch: %d missing, %d unexpected, %d duplicated",
                len(result.missing),
                len(result.unexpected),
                len(result.duplicates),
            )
        return result
