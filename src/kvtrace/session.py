"""Trace session - engine lifecycle around one workload run.

A session starts the engine, creates the trace database and table, runs the
driver, scans the result with the verifier, then drops the table and shuts
the engine down. Cleanup runs even when the run aborts; a cleanup failure
never masks the error that aborted the run.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Self, TextIO

from kvtrace.config import RunConfig
from kvtrace.constants import KEY_COLUMN
from kvtrace.diagnostics import EngineError
from kvtrace.driver import OperationDriver, RunSummary
from kvtrace.engine import MemoryEngine
from kvtrace.trace import TraceWriter
from kvtrace.verifier import ConsistencyVerifier, VerificationResult

if TYPE_CHECKING:
    from kvtrace.engine import StorageEngine

__all__ = ["TraceResult", "TraceSession", "run_trace"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TraceResult:
    """Everything a completed run produced.

    Attributes:
        config: Configuration the run used
        summary: Driver counters
        verification: Final scan compared with the oracle
    """

    config: RunConfig
    summary: RunSummary
    verification: VerificationResult

    @property
    def final_keys(self) -> tuple[int, ...]:
        """Keys of the final scan, in engine order."""
        return self.verification.scanned


class TraceSession:
    """Context manager owning the engine for one run.

    Args:
        config: Run parameters
        engine: Engine to drive (default: a fresh MemoryEngine)

    Example:
        >>> import io
        >>> out = io.StringIO()
        >>> with TraceSession(RunConfig(ops=0)) as session:
        ...     result = session.run(TraceWriter(out))
        >>> out.getvalue()
        'seed=12648430 ops=0\\nfinal 0\\n'
    """

    def __init__(self, config: RunConfig | None = None, engine: StorageEngine | None = None) -> None:
        self._config = config if config is not None else RunConfig()
        self._engine: StorageEngine = engine if engine is not None else MemoryEngine()
        self._table_created = False

    @property
    def config(self) -> RunConfig:
        return self._config

    @property
    def engine(self) -> StorageEngine:
        return self._engine

    def __enter__(self) -> Self:
        self._engine.startup()
        try:
            self._engine.create_database(self._config.database)
            self._engine.create_table(self._config.table_path, KEY_COLUMN)
        except BaseException:
            self._engine.shutdown()
            raise
        self._table_created = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Drop the table and shut down. Does not suppress exceptions."""
        try:
            if self._table_created:
                self._engine.drop_table(self._config.table_path)
                self._table_created = False
        except EngineError:
            if exc_type is None:
                raise
            logger.exception("Dropping %s failed during abort", self._config.table_path)
        finally:
            self._engine.shutdown()

    def run(self, writer: TraceWriter) -> TraceResult:
        """Write the header, drive the workload, scan and write the final line.

        Raises:
            WorkloadError: A driver step failed
            OracleMismatchError: A search disagreed with the oracle
            VerificationError: The final scan failed
        """
        config = self._config
        writer.header(config.seed, config.ops)

        driver = OperationDriver(self._engine, config)
        summary = driver.run(writer.record)

        verifier = ConsistencyVerifier(self._engine, config.table_path)
        scanned = verifier.scan()
        writer.final(scanned)

        verification = verifier.compare(scanned, driver.oracle)
        logger.info(
            "Run complete: %d records, %d final keys, consistent=%s",
            summary.records,
            len(scanned),
            verification.ok,
        )
        return TraceResult(config=config, summary=summary, verification=verification)


def run_trace(
    config: RunConfig | None = None,
    stream: TextIO | None = None,
    *,
    engine: StorageEngine | None = None,
    strict: bool = True,
) -> TraceResult:
    """Run one complete trace session.

    Args:
        config: Run parameters (default: RunConfig())
        stream: Trace destination (default: sys.stdout)
        engine: Engine to drive (default: a fresh MemoryEngine)
        strict: Raise ConsistencyError when the final scan differs from the oracle

    Returns:
        The run's TraceResult
    """
    with TraceSession(config, engine) as session:
        result = session.run(TraceWriter(stream if stream is not None else sys.stdout))
    if strict:
        result.verification.raise_for_mismatch(result.config.seed)
    return result
