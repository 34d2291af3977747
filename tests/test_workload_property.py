"""Property-based tests of whole workload runs against the reference engine.

Properties:
- Every run over any seed and domain ends with engine == oracle
- Trace records obey the oracle semantics line by line
- Runs are pure functions of their configuration
- Inserted keys cover the whole default domain across a handful of seeds
"""

from __future__ import annotations

import io

from hypothesis import event, given, settings

from kvtrace.config import RunConfig
from kvtrace.driver import OperationDriver
from kvtrace.engine import MemoryEngine
from kvtrace.enums import OpKind
from kvtrace.session import run_trace
from tests.strategies import key_domains, op_counts, seeds


def _driver(config: RunConfig) -> tuple[OperationDriver, MemoryEngine]:
    engine = MemoryEngine()
    engine.startup()
    engine.create_database(config.database)
    engine.create_table(config.table_path, "c1")
    return OperationDriver(engine, config), engine


class TestRunProperties:
    """Invariants that hold for every configuration."""

    @given(seed=seeds, ops=op_counts, domain=key_domains())
    def test_final_scan_matches_oracle(self, seed: int, ops: int, domain: tuple[int, int]) -> None:
        key_min, key_max = domain
        config = RunConfig(seed=seed, ops=ops, key_min=key_min, key_max=key_max)
        result = run_trace(config, io.StringIO())
        assert result.verification.ok
        assert result.verification.is_sorted
        assert all(key_min <= key <= key_max for key in result.final_keys)
        event(f"final_size={'empty' if not result.final_keys else 'nonempty'}")

    @given(seed=seeds, ops=op_counts, domain=key_domains(max_size=8))
    def test_records_follow_model(self, seed: int, ops: int, domain: tuple[int, int]) -> None:
        """Replay the trace into a plain set and check every line against it."""
        key_min, key_max = domain
        config = RunConfig(seed=seed, ops=ops, key_min=key_min, key_max=key_max)
        driver, engine = _driver(config)

        present: set[int] = set()
        for record in driver.iter_records():
            assert key_min <= record.key <= key_max
            match record.kind:
                case OpKind.INSERT:
                    assert record.key not in present
                    present.add(record.key)
                case OpKind.DELETE:
                    assert record.key in present
                    present.remove(record.key)
                case OpKind.SEARCH:
                    assert record.found == (record.key in present)

        assert sorted(present) == engine.table_keys(config.table_path)
        summary = driver.summary
        assert summary.steps == ops
        assert summary.inserts - summary.deletes == len(present)
        if summary.skipped_inserts:
            event("skipped_inserts")

    @given(seed=seeds, ops=op_counts)
    def test_deterministic(self, seed: int, ops: int) -> None:
        a, b = io.StringIO(), io.StringIO()
        run_trace(RunConfig(seed=seed, ops=ops), a)
        run_trace(RunConfig(seed=seed, ops=ops), b)
        assert a.getvalue() == b.getvalue()

    @given(seed=seeds)
    @settings(max_examples=25)
    def test_header_and_line_count(self, seed: int) -> None:
        out = io.StringIO()
        result = run_trace(RunConfig(seed=seed, ops=50), out)
        lines = out.getvalue().splitlines()
        assert lines[0] == f"seed={seed} ops=50"
        assert lines[-1].split()[:2] == ["final", str(len(result.final_keys))]
        assert len(lines) == result.summary.records + 2


class TestDomainCoverage:
    """The workload eventually inserts every key of the default domain."""

    def test_nine_seeds_cover_all_keys(self) -> None:
        inserted: set[int] = set()
        for seed in range(9):
            driver, _ = _driver(RunConfig(seed=seed, ops=3000))
            inserted.update(r.key for r in driver.iter_records() if r.kind is OpKind.INSERT)
        assert inserted == set(range(1, 1001))

    def test_single_seed_partial_coverage(self) -> None:
        """One 3000-step run reaches well over half of the domain."""
        driver, _ = _driver(RunConfig(seed=0, ops=3000))
        inserted = {r.key for r in driver.iter_records() if r.kind is OpKind.INSERT}
        assert len(inserted) == 639
