#!/usr/bin/env python3
"""Workload Trace Fuzzer (Atheris).

Targets: kvtrace.session.run_trace, kvtrace.rng.BoundedSampler
Drives complete sessions with fuzzer-chosen seeds, step counts and key
domains against the reference engine, and checks sampler bounds directly.

Findings:
    - Any WorkloadError, VerificationError or integrity error from a run
    - Two runs of the same configuration producing different traces
    - A bounded draw outside its bound
"""

from __future__ import annotations

import atexit
import io
import json
import logging
import sys
from typing import TypeAlias

# --- Type Aliases ---
FuzzStats: TypeAlias = dict[str, int | str]

_fuzz_stats: FuzzStats = {"status": "incomplete", "iterations": 0, "findings": 0, "runs": 0}

def _emit_final_report() -> None:
    report = json.dumps(_fuzz_stats)
    print(f"\n[SUMMARY-JSON-BEGIN]{report}[SUMMARY-JSON-END]", file=sys.stderr)

atexit.register(_emit_final_report)

try:
    import atheris
except ImportError:
    print("atheris is required: pip install -e '.[fuzz]'", file=sys.stderr)
    sys.exit(1)

logging.getLogger("kvtrace").setLevel(logging.CRITICAL)

with atheris.instrument_imports(include=["kvtrace"]):
    from kvtrace.config import RunConfig
    from kvtrace.constants import U64_MAX
    from kvtrace.rng import BoundedSampler
    from kvtrace.session import run_trace

_MAX_OPS = 2000

def _finding(msg: str) -> None:
    raise RuntimeError(msg)

def _check_sampler(fdp: atheris.FuzzedDataProvider) -> None:
    sampler = BoundedSampler.from_seed(fdp.ConsumeIntInRange(0, U64_MAX))
    bound64 = fdp.ConsumeIntInRange(1, U64_MAX)
    bound8 = fdp.ConsumeIntInRange(1, 255)
    for _ in range(fdp.ConsumeIntInRange(1, 16)):
        value = sampler.uniform_below_u64(bound64)
        if not 0 <= value < bound64:
            _finding(f"uniform_below_u64({bound64}) returned {value}")
        value = sampler.uniform_below_u8(bound8)
        if not 0 <= value < bound8:
            _finding(f"uniform_below_u8({bound8}) returned {value}")

def _check_run(fdp: atheris.FuzzedDataProvider) -> None:
    seed = fdp.ConsumeIntInRange(0, U64_MAX)
    ops = fdp.ConsumeIntInRange(0, _MAX_OPS)
    if fdp.ConsumeBool():
        config = RunConfig(seed=seed, ops=ops)
    else:
        key_min = fdp.ConsumeIntInRange(-1000, 1000)
        key_max = key_min + fdp.ConsumeIntInRange(0, 63)
        config = RunConfig(seed=seed, ops=ops, key_min=key_min, key_max=key_max)

    first, second = io.StringIO(), io.StringIO()
    result = run_trace(config, first)
    run_trace(config, second)
    _fuzz_stats["runs"] = int(_fuzz_stats["runs"]) + 2

    if first.getvalue() != second.getvalue():
        _finding(f"Non-deterministic trace for seed={config.seed} ops={config.ops}")
    if not result.verification.is_sorted:
        _finding(f"Final scan out of order for seed={config.seed}: {result.final_keys}")

def test_one_input(data: bytes) -> None:
    """Atheris entry point: run one fuzzer-configured trace."""
    _fuzz_stats["iterations"] = int(_fuzz_stats["iterations"]) + 1
    _fuzz_stats["status"] = "running"

    fdp = atheris.FuzzedDataProvider(data)

    try:
        if fdp.ConsumeBool():
            _check_sampler(fdp)
        else:
            _check_run(fdp)
    except Exception:
        _fuzz_stats["findings"] = int(_fuzz_stats["findings"]) + 1
        raise

if __name__ == "__main__":
    atheris.Setup(sys.argv, test_one_input)
    atheris.Fuzz()
