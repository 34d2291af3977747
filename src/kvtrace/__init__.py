"""kvtrace - seed-reproducible workload traces for cursor-based key-value engines.

A deterministic Insert/Delete/Search workload generator paired with a model
oracle. A run drives a storage engine through its cursor API, tracks the
expected key set independently, and verifies the engine's final rows
against it.

Public API:
    run_trace - Run one complete session and write its trace
    RunConfig - Immutable run parameters
    TraceSession - Engine lifecycle around a run
    OperationDriver - The step loop
    ConsistencyVerifier - Final scan and comparison
    WorkloadOracle - Ground-truth key set
    BoundedSampler - Unbiased bounded draws over xoshiro256++
    MemoryEngine - In-memory reference engine

Exceptions:
    KvTraceError - Base exception class
    EngineError - Raised by the storage engine
    WorkloadError - A driver step failed fatally
    VerificationError - The final scan failed
    OracleMismatchError - Search outcome disagreed with the oracle
    ConsistencyError - Final scan disagreed with the oracle

Submodules:
    kvtrace.rng - SplitMix64 seed expansion, xoshiro256++, bounded sampling
    kvtrace.engine - Capability protocols and the reference engine
    kvtrace.diagnostics - Error types and diagnostic codes
    kvtrace.trace - Trace record formatting
"""

from .config import RunConfig
from .diagnostics import EngineError, KvTraceError, VerificationError, WorkloadError
from .driver import OperationDriver, RunSummary
from .engine import MemoryEngine
from .integrity import ConsistencyError, OracleMismatchError
from .oracle import WorkloadOracle
from .rng import BoundedSampler
from .session import TraceResult, TraceSession, run_trace
from .verifier import ConsistencyVerifier, VerificationResult

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("kvtrace")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "BoundedSampler",
    "ConsistencyError",
    "ConsistencyVerifier",
    "EngineError",
    "KvTraceError",
    "MemoryEngine",
    "OperationDriver",
    "OracleMismatchError",
    "RunConfig",
    "RunSummary",
    "TraceResult",
    "TraceSession",
    "VerificationError",
    "VerificationResult",
    "WorkloadError",
    "WorkloadOracle",
    "__version__",
    "run_trace",
]
