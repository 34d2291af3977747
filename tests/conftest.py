"""Pytest configuration for the kvtrace test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 200 examples (thorough property testing)
- ci: CI runs with 50 examples, derandomized (fast, reproducible feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- HYPOTHESIS_PROFILE env var -> explicit override
- CI=true environment variable -> "ci" profile
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/

Fuzzing Test Separation:
Tests marked with @pytest.mark.fuzz are excluded from normal test runs.
These are long differential state-machine runs, not unit tests.
Run them via: pytest -m fuzz
"""

from __future__ import annotations

import io

import pytest
from hypothesis import HealthCheck, Phase, Verbosity, settings

from kvtrace.config import RunConfig
from kvtrace.constants import KEY_COLUMN
from kvtrace.engine import MemoryEngine

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

# Development profile: thorough local testing (200 examples, silent)
settings.register_profile(
    "dev",
    max_examples=200,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    suppress_health_check=[HealthCheck.too_slow],
)

# CI profile: fast feedback (50 examples)
settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
    suppress_health_check=[HealthCheck.too_slow],
)

# Verbose profile: debug mode with progress visibility (100 examples)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
)

# Stateful fuzz profile: long rule sequences for the differential state
# machines under tests/fuzz (applied per test class, never loaded globally)
settings.register_profile(
    "stateful_fuzz",
    max_examples=500,
    stateful_step_count=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)


# =============================================================================
# AUTO-DETECT EXECUTION CONTEXT
# =============================================================================


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var
    3. Default to "dev" (local development)
    """
    import os

    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit

    if os.environ.get("CI") == "true":
        return "ci"

    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# FUZZING TEST SEPARATION
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register the 'fuzz' marker for intensive property tests."""
    config.addinivalue_line(
        "markers",
        "fuzz: Intensive property tests for fuzzing (excluded from normal test runs)",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip fuzz-marked tests unless explicitly requested.

    Behavior:
    - Normal test run (pytest tests/): Fuzz tests are SKIPPED
    - Explicit fuzz run (pytest -m fuzz): Fuzz tests run
    """
    marker_expr = config.getoption("-m", default="")
    if "fuzz" in str(marker_expr):
        return

    skip_fuzz = pytest.mark.skip(reason="Fuzzing test - run with: pytest -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)


# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture
def engine() -> MemoryEngine:
    """Started engine holding the default trace table."""
    eng = MemoryEngine()
    eng.startup()
    config = RunConfig()
    eng.create_database(config.database)
    eng.create_table(config.table_path, KEY_COLUMN)
    return eng


@pytest.fixture
def table_path() -> str:
    """Fully qualified name of the default trace table."""
    return RunConfig().table_path


@pytest.fixture
def out() -> io.StringIO:
    """In-memory trace stream."""
    return io.StringIO()
