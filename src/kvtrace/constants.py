"""Shared constants for kvtrace.

This module provides centralized configuration constants used across
the rng, oracle, driver and engine packages. Placing constants here avoids
circular imports and provides a single source of truth.

Constants are grouped by domain:
- Integer widths: Masks for fixed-width unsigned/signed arithmetic
- Generator constants: SplitMix64 finalizer and xoshiro shift and rotation amounts
- Workload defaults: Seed, step count, key domain, retry budget
- Engine names: Database and table used by a trace session

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Integer widths
    "U8_MASK",
    "U64_MASK",
    "U64_MAX",
    "I64_MIN",
    "I64_MAX",
    # Generator constants
    "GOLDEN_GAMMA",
    "MIX_MULTIPLIER_1",
    "MIX_MULTIPLIER_2",
    "XOSHIRO_OUTPUT_ROTATION",
    "XOSHIRO_SHIFT",
    "XOSHIRO_STATE_ROTATION",
    # Workload defaults
    "DEFAULT_SEED",
    "DEFAULT_OPS",
    "KEY_DOMAIN_MIN",
    "KEY_DOMAIN_MAX",
    "MAX_INSERT_RETRIES",
    # Engine names
    "DEFAULT_DATABASE",
    "DEFAULT_TABLE",
    "KEY_COLUMN",
]

# ============================================================================
# INTEGER WIDTHS
# ============================================================================
#
# Python ints are unbounded. Every generator step masks its intermediate
# results back to the declared width so the stream is bit-identical to a
# fixed-width implementation.

U8_MASK: int = 0xFF
U64_MASK: int = 0xFFFF_FFFF_FFFF_FFFF
U64_MAX: int = U64_MASK
I64_MIN: int = -(1 << 63)
I64_MAX: int = (1 << 63) - 1

# ============================================================================
# GENERATOR CONSTANTS
# ============================================================================

# Weyl increment for SplitMix64 (2^64 / golden ratio, forced odd).
GOLDEN_GAMMA: int = 0x9E37_79B9_7F4A_7C15

# SplitMix64 finalizer multipliers (Stafford "Mix13" variant).
MIX_MULTIPLIER_1: int = 0xBF58_476D_1CE4_E5B9
MIX_MULTIPLIER_2: int = 0x94D0_49BB_1331_11EB

# xoshiro256++ parameters: output scrambler rotation, s1 shift, s3 rotation.
XOSHIRO_OUTPUT_ROTATION: int = 23
XOSHIRO_SHIFT: int = 17
XOSHIRO_STATE_ROTATION: int = 45

# ============================================================================
# WORKLOAD DEFAULTS
# ============================================================================

DEFAULT_SEED: int = 0xC0FFEE
DEFAULT_OPS: int = 60

# Inclusive key domain. The oracle's presence table is sized to it.
KEY_DOMAIN_MIN: int = 1
KEY_DOMAIN_MAX: int = 1000

# Redraws allowed after the first duplicate candidate before an insert
# step is abandoned.
MAX_INSERT_RETRIES: int = 10

# ============================================================================
# ENGINE NAMES
# ============================================================================

DEFAULT_DATABASE: str = "trace_db"
DEFAULT_TABLE: str = "trace_t"
KEY_COLUMN: str = "c1"
