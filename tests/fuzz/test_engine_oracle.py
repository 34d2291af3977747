"""State Machine Fuzzer for MemoryEngine using Oracle Testing.

This module implements differential fuzzing of the reference engine with
WorkloadOracle as the model. Hypothesis's RuleBasedStateMachine generates
sequences of cursor operations inside transactions; after every step the
engine's rows must equal the oracle's key set.

Key testing patterns:
- Insert of absent and present keys (duplicates must be rejected)
- Delete of a random present key through an exact-landing moveto
- Searches in every SearchMode, checked against a sorted-list model
- Commit and rollback cycles (rollback restores the last committed set)

Run with:
    pytest tests/fuzz/test_engine_oracle.py -m fuzz -v

Python 3.13+.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right

import pytest
from hypothesis import settings
from hypothesis import strategies as st
from hypothesis.stateful import (
    RuleBasedStateMachine,
    initialize,
    invariant,
    precondition,
    rule,
)

from kvtrace.diagnostics import DuplicateKeyError, EndOfIndexError
from kvtrace.engine import MemoryCursor, MemoryEngine, MemoryTransaction
from kvtrace.enums import IsolationLevel, LockMode, MatchMode, SearchMode
from kvtrace.oracle import WorkloadOracle

# Mark entire module as fuzz tests (excluded from normal test runs)
pytestmark = pytest.mark.fuzz

TABLE = "fuzz_db/fuzz_t"
KEY_MIN = 1
KEY_MAX = 64

domain_keys = st.integers(min_value=KEY_MIN, max_value=KEY_MAX)
probe_keys = st.integers(min_value=KEY_MIN - 2, max_value=KEY_MAX + 2)


def expected_landing(keys: list[int], key: int, mode: SearchMode) -> int | None:
    """Row a moveto should land on, computed from a sorted key list."""
    match mode:
        case SearchMode.GE:
            i = bisect_left(keys, key)
        case SearchMode.G:
            i = bisect_right(keys, key)
        case SearchMode.LE:
            i = bisect_right(keys, key) - 1
        case _:
            i = bisect_left(keys, key) - 1
    return keys[i] if 0 <= i < len(keys) else None


class EngineOracleStateMachine(RuleBasedStateMachine):
    """Differential state machine: MemoryEngine vs WorkloadOracle.

    Invariants:
    - Engine rows equal the oracle's keys after every rule
    - The committed snapshot is what a rollback restores
    """

    def __init__(self) -> None:
        super().__init__()
        self.engine = MemoryEngine()
        self.oracle = WorkloadOracle(KEY_MIN, KEY_MAX)
        self.committed: frozenset[int] = frozenset()
        self.tx: MemoryTransaction | None = None
        self.cursor: MemoryCursor | None = None

    @initialize()
    def init_engine(self) -> None:
        """Start the engine with an empty table and an open write cursor."""
        self.engine.startup()
        self.engine.create_database("fuzz_db")
        self.engine.create_table(TABLE, "c1")
        self._begin()

    def _begin(self) -> None:
        self.tx = self.engine.begin_transaction(IsolationLevel.REPEATABLE_READ)
        self.cursor = self.engine.open_cursor(TABLE, self.tx)
        self.cursor.lock(LockMode.INTENTION_EXCLUSIVE)

    @rule(key=domain_keys)
    def insert(self, key: int) -> None:
        """Insert a key; present keys must be rejected as duplicates."""
        assert self.cursor is not None
        if self.oracle.is_present(key):
            with pytest.raises(DuplicateKeyError):
                self.cursor.insert_row(key)
            return
        self.cursor.insert_row(key)
        self.oracle.insert(key)

    @precondition(lambda self: len(self.oracle) > 0)
    @rule(data=st.data())
    def delete(self, data: st.DataObject) -> None:
        """Delete a random present key the way the driver does."""
        assert self.cursor is not None
        index = data.draw(st.integers(min_value=0, max_value=len(self.oracle) - 1))
        key = list(self.oracle)[index]

        self.cursor.set_match_mode(MatchMode.CLOSEST)
        assert self.cursor.moveto(key, SearchMode.GE) == 0
        self.cursor.delete_row()
        assert self.oracle.remove_at(index) == key

    @rule(key=probe_keys, mode=st.sampled_from(list(SearchMode)))
    def search(self, key: int, mode: SearchMode) -> None:
        """Positioning agrees with the sorted-list model in every mode."""
        assert self.cursor is not None
        self.cursor.set_match_mode(MatchMode.CLOSEST)
        landing = expected_landing(self.oracle.sorted_keys(), key, mode)
        if landing is None:
            with pytest.raises(EndOfIndexError):
                self.cursor.moveto(key, mode)
            return
        sign = self.cursor.moveto(key, mode)
        assert self.cursor.read_row() == landing
        assert sign == (landing > key) - (landing < key)

    @rule()
    def commit(self) -> None:
        """Commit and continue in a fresh transaction."""
        assert self.tx is not None
        self.tx.commit()
        self.committed = self.oracle.keys()
        self._begin()

    @rule()
    def rollback(self) -> None:
        """Roll back; the oracle returns to the committed snapshot."""
        assert self.tx is not None
        self.tx.rollback()
        self.oracle = WorkloadOracle(KEY_MIN, KEY_MAX)
        for key in sorted(self.committed):
            self.oracle.insert(key)
        self._begin()

    @invariant()
    def rows_match_oracle(self) -> None:
        """Engine rows equal the oracle's keys."""
        if self.tx is None:
            return
        rows = self.engine.table_keys(TABLE)
        expected = self.oracle.sorted_keys()
        assert rows == expected, (
            f"Row mismatch: only_engine={set(rows) - set(expected)}, "
            f"only_oracle={set(expected) - set(rows)}"
        )

    def teardown(self) -> None:
        if self.tx is not None and self.tx.is_active:
            self.tx.rollback()
        self.engine.shutdown()


TestEngineOracle = EngineOracleStateMachine.TestCase
TestEngineOracle.settings = settings.get_profile("stateful_fuzz")
