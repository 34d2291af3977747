"""Quickstart example for kvtrace.

This example demonstrates running seeded traces, driving an engine step by
step, and catching engine/oracle disagreements.

Note: Examples write traces to in-memory streams for brevity. The
`kvtrace` command prints the same lines to stdout.
"""

import io

from kvtrace import (
    BoundedSampler,
    MemoryEngine,
    OperationDriver,
    RunConfig,
    WorkloadError,
    run_trace,
)
from kvtrace.enums import IsolationLevel, LockMode

# Example 1: The default trace, shortened
print("=" * 50)
print("Example 1: A Five-Step Trace")
print("=" * 50)

out = io.StringIO()
result = run_trace(RunConfig(seed=0xC0FFEE, ops=5), out)
print(out.getvalue(), end="")
# Output:
# seed=12648430 ops=5
# I 549
# D 549
# I 403
# D 403
# I 13
# final 1 13

print(f"Consistent: {result.verification.ok}")
# Output: Consistent: True

# Example 2: Same seed, same trace
print("\n" + "=" * 50)
print("Example 2: Reproducibility")
print("=" * 50)

first, second = io.StringIO(), io.StringIO()
run_trace(RunConfig(seed=42, ops=200), first)
run_trace(RunConfig(seed=42, ops=200), second)
print(f"Identical traces: {first.getvalue() == second.getvalue()}")
# Output: Identical traces: True

# Example 3: Small key domains force abandoned inserts
print("\n" + "=" * 50)
print("Example 3: A One-Key Domain")
print("=" * 50)

out = io.StringIO()
result = run_trace(RunConfig(seed=3, ops=8, key_min=1, key_max=1), out)
print(out.getvalue(), end="")
print(f"Abandoned inserts: {result.summary.skipped_inserts}")
# Output: Abandoned inserts: 4

# Example 4: Driving an engine directly
print("\n" + "=" * 50)
print("Example 4: OperationDriver Without a Session")
print("=" * 50)

engine = MemoryEngine()
engine.startup()
engine.create_database("demo")
engine.create_table("demo/t", "c1")

config = RunConfig(seed=7, ops=12, database="demo", table="t")
driver = OperationDriver(engine, config)
for record in driver.iter_records():
    print(record.to_line())
print(f"Engine rows: {engine.table_keys('demo/t')}")
print(f"Oracle keys: {driver.oracle.sorted_keys()}")
# Output:
# Engine rows: [6, 56, 98, 114, 121, 718, 983]
# Oracle keys: [6, 56, 98, 114, 121, 718, 983]

# Example 5: The sampler on its own
print("\n" + "=" * 50)
print("Example 5: Bounded Sampling")
print("=" * 50)

sampler = BoundedSampler.from_seed(1)
print([sampler.uniform_below_u64(1000) for _ in range(5)])
# Output: [811, 747, 100, 746, 184]
print([sampler.uniform_range_i64(-5, 5) for _ in range(5)])

# Example 6: An engine that drifts from the oracle
print("\n" + "=" * 50)
print("Example 6: Detecting a Bad Engine")
print("=" * 50)

engine = MemoryEngine()
engine.startup()
engine.create_database("trace_db")
engine.create_table("trace_db/trace_t", "c1")

# A row the workload does not know about
with engine.begin_transaction(IsolationLevel.REPEATABLE_READ) as tx:
    cursor = engine.open_cursor("trace_db/trace_t", tx)
    cursor.lock(LockMode.INTENTION_EXCLUSIVE)
    cursor.insert_row(549)
    tx.commit()

try:
    OperationDriver(engine, RunConfig(ops=5)).run()
except WorkloadError as e:
    print(f"Run aborted at {e.kind} {e.key}")
    print(e)
# Output: Run aborted at I 549

