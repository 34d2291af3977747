"""Operation driver - the randomized Insert/Delete/Search workload.

Each step draws an action, applies it to the engine through one cursor, and
updates the oracle in lockstep. The draw order within a step is part of the
trace format: changing it changes every trace recorded for a seed.

Step semantics:
    Action: empty oracle forces Insert; otherwise uniform_below_u8(3)
        selects Insert (0), Delete (1) or Search (2).
    Insert: draw a domain key, redraw while present up to the retry budget,
        abandon the step if still present. Engine errors are fatal.
    Delete: pick a present key, position GE in closest-match mode, require
        an exact landing, delete the row. Engine errors are fatal.
    Search: draw a domain key; then on a coin flip replace it with a present
        key. Position GE; an exact landing is a hit, end of index a miss.
        Other engine errors are fatal.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kvtrace.config import RunConfig
from kvtrace.diagnostics import EndOfIndexError, EngineError, ErrorTemplate, WorkloadError
from kvtrace.enums import Action, IsolationLevel, LockMode, MatchMode, OpKind, SearchMode
from kvtrace.integrity import IntegrityContext, OracleMismatchError
from kvtrace.oracle import WorkloadOracle
from kvtrace.rng import BoundedSampler
from kvtrace.trace import TraceRecord

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from kvtrace.engine import Cursor, StorageEngine

__all__ = ["OperationDriver", "RunSummary"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunSummary:
    """Counters for one driver run.

    Attributes:
        steps: Steps executed, including abandoned inserts
        inserts: Successful inserts
        deletes: Successful deletes
        searches: Searches performed
        search_hits: Searches that landed exactly on their key
        skipped_inserts: Insert steps abandoned after exhausting retries
    """

    steps: int = 0
    inserts: int = 0
    deletes: int = 0
    searches: int = 0
    search_hits: int = 0
    skipped_inserts: int = 0

    @property
    def records(self) -> int:
        """Number of trace records emitted."""
        return self.inserts + self.deletes + self.searches


class OperationDriver:
    """Drive a seeded workload against a storage engine.

    The driver owns its sampler and oracle; nothing else mutates them.

    Args:
        engine: Started engine on which ``config.table_path`` exists
        config: Run parameters
        sampler: Override the sampler (default: seeded from ``config.seed``)
        oracle: Override the oracle (default: empty, over the config domain)

    Example:
        >>> from kvtrace.engine import MemoryEngine
        >>> engine = MemoryEngine()
        >>> engine.startup()
        >>> engine.create_database("trace_db")
        >>> engine.create_table("trace_db/trace_t", "c1")
        >>> driver = OperationDriver(engine, RunConfig(ops=5))
        >>> [r.to_line() for r in driver.iter_records()]
        ['I 549', 'D 549', 'I 403', 'D 403', 'I 13']
    """

    def __init__(
        self,
        engine: StorageEngine,
        config: RunConfig | None = None,
        *,
        sampler: BoundedSampler | None = None,
        oracle: WorkloadOracle | None = None,
    ) -> None:
        self._engine = engine
        self._config = config if config is not None else RunConfig()
        self._sampler = sampler if sampler is not None else BoundedSampler.from_seed(
            self._config.seed
        )
        self._oracle = oracle if oracle is not None else WorkloadOracle(
            self._config.key_min, self._config.key_max
        )
        self._summary = RunSummary()

    @property
    def config(self) -> RunConfig:
        return self._config

    @property
    def sampler(self) -> BoundedSampler:
        return self._sampler

    @property
    def oracle(self) -> WorkloadOracle:
        return self._oracle

    @property
    def summary(self) -> RunSummary:
        return self._summary

    def run(self, emit: Callable[[TraceRecord], None] | None = None) -> RunSummary:
        """Execute ``config.ops`` steps inside one transaction.

        Args:
            emit: Called with each record as soon as its step succeeds

        Returns:
            Summary counters for the run

        Raises:
            WorkloadError: An engine call failed; the transaction is rolled back
            OracleMismatchError: A search disagreed with the oracle
        """
        for record in self.iter_records():
            if emit is not None:
                emit(record)
        return self._summary

    def iter_records(self) -> Iterator[TraceRecord]:
        """Execute the run lazily, yielding each record as it is produced.

        The working transaction commits once the generator is exhausted.
        Abandoning the generator early rolls it back.
        """
        config = self._config
        logger.info("Driving %d ops (seed=%#x) on %s", config.ops, config.seed, config.table_path)
        with self._engine.begin_transaction(IsolationLevel.REPEATABLE_READ) as tx:
            with self._engine.open_cursor(config.table_path, tx) as cursor:
                cursor.lock(LockMode.INTENTION_EXCLUSIVE)
                for step in range(config.ops):
                    record = self.step(cursor, step)
                    if record is not None:
                        yield record
            tx.commit()
        logger.info(
            "Driver finished: %d inserts, %d deletes, %d searches (%d hits), %d skipped",
            self._summary.inserts,
            self._summary.deletes,
            self._summary.searches,
            self._summary.search_hits,
            self._summary.skipped_inserts,
        )

    def step(self, cursor: Cursor, step: int = 0) -> TraceRecord | None:
        """Execute one step.

        Args:
            cursor: Working cursor holding an IX lock
            step: Zero-based step index (diagnostics only)

        Returns:
            The record for the step, or None when an insert was abandoned
        """
        self._summary.steps += 1
        if not self._oracle:
            action = Action.INSERT
        else:
            action = Action(self._sampler.uniform_below_u8(len(Action)))

        match action:
            case Action.INSERT:
                return self._insert(cursor)
            case Action.DELETE:
                return self._delete(cursor)
            case Action.SEARCH:
                return self._search(cursor, step)

    def _draw_key(self) -> int:
        return self._sampler.uniform_range_i64(self._config.key_min, self._config.key_max)

    def _insert(self, cursor: Cursor) -> TraceRecord | None:
        key = self._draw_key()
        tries = 0
        while self._oracle.is_present(key) and tries < self._config.max_insert_retries:
            key = self._draw_key()
            tries += 1
        if self._oracle.is_present(key):
            logger.debug("Insert abandoned: %d redraws all hit present keys", tries)
            self._summary.skipped_inserts += 1
            return None

        try:
            cursor.insert_row(key)
        except EngineError as e:
            raise WorkloadError(
                ErrorTemplate.insert_failed(key, e.summary), kind=OpKind.INSERT, key=key
            ) from e

        self._oracle.insert(key)
        self._summary.inserts += 1
        return TraceRecord(OpKind.INSERT, key)

    def _delete(self, cursor: Cursor) -> TraceRecord:
        index, key = self._oracle.pick_random(self._sampler)

        cursor.set_match_mode(MatchMode.CLOSEST)
        try:
            cmp = cursor.moveto(key, SearchMode.GE)
        except EngineError as e:
            raise WorkloadError(
                ErrorTemplate.delete_lookup_failed(key), kind=OpKind.DELETE, key=key
            ) from e
        if cmp != 0:
            raise WorkloadError(
                ErrorTemplate.delete_lookup_failed(key), kind=OpKind.DELETE, key=key
            )

        try:
            cursor.delete_row()
        except EngineError as e:
            raise WorkloadError(
                ErrorTemplate.delete_failed(key, e.summary), kind=OpKind.DELETE, key=key
            ) from e

        self._oracle.remove_at(index)
        self._summary.deletes += 1
        return TraceRecord(OpKind.DELETE, key)

    def _search(self, cursor: Cursor, step: int) -> TraceRecord:
        key = self._draw_key()
        if self._oracle and self._sampler.random_bool():
            _, key = self._oracle.pick_random(self._sampler)

        cursor.set_match_mode(MatchMode.CLOSEST)
        try:
            found = cursor.moveto(key, SearchMode.GE) == 0
        except EndOfIndexError:
            found = False
        except EngineError as e:
            raise WorkloadError(
                ErrorTemplate.search_failed(key, e.summary), kind=OpKind.SEARCH, key=key
            ) from e

        expected = self._oracle.is_present(key)
        if self._config.check_search and found != expected:
            logger.warning("Search for %d returned found=%s, oracle says %s", key, found, expected)
            msg = f"Search for key {key} returned found={found}, oracle expects {expected}"
            raise OracleMismatchError(
                msg,
                IntegrityContext(
                    component="driver",
                    operation="search",
                    key=key,
                    expected=str(expected),
                    actual=str(found),
                    seed=self._config.seed,
                    step=step,
                ),
                key=key,
                found=found,
            )

        self._summary.searches += 1
        self._summary.search_hits += int(found)
        return TraceRecord(OpKind.SEARCH, key, found)
