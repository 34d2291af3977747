"""Fuzz testing infrastructure for kvtrace.

This package contains:
- test_engine_oracle: State machine fuzzer comparing MemoryEngine with
  WorkloadOracle under inserts, deletes, searches, commits and rollbacks
- test_long_traces: Long seeded runs checked end to end

Everything here is marked ``fuzz`` and skipped unless run with ``-m fuzz``.

Python 3.13+.
"""
