#!/usr/bin/env python3
"""Reproduce and document a trace failure.

This tool closes the feedback loop for fuzzing discoveries:
1. Replay a seed (and optional key domain) through a full session
2. Show the trace, or the full traceback if the run fails
3. Generate a GoldenTrace entry or a Hypothesis @example for regression tests

Usage:
    python scripts/repro.py 0xC0FFEE --ops 20
    python scripts/repro.py 7 --ops 12 --example
    python scripts/repro.py 3 --ops 8 --key-min 1 --key-max 1

Exit Codes:
    0   Run completed and the final scan matched the oracle
    1   Run failed (finding confirmed)
    2   Invalid arguments

Python 3.13+.
"""

from __future__ import annotations

import argparse
import io
import sys
import traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kvtrace import RunConfig


def _parse_int(text: str) -> int:
    try:
        return int(text, 0)
    except ValueError:
        msg = f"invalid integer: {text!r}"
        raise argparse.ArgumentTypeError(msg) from None


def _print_golden_entry(name: str, config: RunConfig, output: str) -> None:
    lines = output.splitlines()
    body, final = lines[1:-1], lines[-1]
    print("# Add this entry to GOLDEN_TRACES in tests/traces.py:")
    print(f'    "{name}": GoldenTrace(')
    print(f"        {config.seed:#x}, {config.ops}, {config.key_min}, {config.key_max},")
    print("        (")
    for line in body:
        print(f'            "{line}",')
    print("        ),")
    print(f'        "{final}",')
    print("    ),")


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Replay a seeded trace and generate regression test data.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Replay a seed and see the trace (or the full traceback):
  python scripts/repro.py 0xC0FFEE --ops 20

  # Generate a golden trace entry for tests/traces.py:
  python scripts/repro.py 7 --ops 12 --example

  # Replay a fuzzer finding over a small domain:
  python scripts/repro.py 12345 --ops 500 --key-min -3 --key-max 4
""",
    )
    parser.add_argument("seed", type=_parse_int, help="Seed to replay (decimal or 0x...)")
    parser.add_argument("--ops", type=_parse_int, default=60, help="Number of operations")
    parser.add_argument("--key-min", type=_parse_int, default=1, help="Inclusive key minimum")
    parser.add_argument("--key-max", type=_parse_int, default=1000, help="Inclusive key maximum")
    parser.add_argument(
        "--example",
        action="store_true",
        help="Output a GoldenTrace entry and @example decorator for copy-paste",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show run summary counters on success",
    )
    args = parser.parse_args()

    # Import inside function to report a broken package cleanly
    try:
        from kvtrace import RunConfig, run_trace
    except ImportError as e:
        print(f"[ERROR] Cannot import kvtrace: {e}", file=sys.stderr)
        return 2

    try:
        config = RunConfig(
            seed=args.seed, ops=args.ops, key_min=args.key_min, key_max=args.key_max
        )
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    print(f"[INFO] Reproducing: seed={config.seed:#x} ops={config.ops}")
    print(f"[INFO] Key domain: [{config.key_min}, {config.key_max}]")
    print()

    out = io.StringIO()
    try:
        result = run_trace(config, out)
    except Exception as e:
        print(out.getvalue(), end="")
        print()
        print(f"[FINDING] Run failed with {type(e).__name__}: {e}")
        print()
        print("Full traceback:")
        print("-" * 60)
        traceback.print_exc()
        print("-" * 60)
        print()
        print("Next steps:")
        print("  1. Add @example decorator to preserve this case:")
        print(f"     @example(seed={config.seed:#x}, ops={config.ops})")
        print("  2. Fix the engine or the driver")
        print("  3. Run: pytest -m fuzz (to verify fix)")
        return 1

    output = out.getvalue()
    if args.example:
        _print_golden_entry(f"seed_{config.seed:x}", config, output)
        print()
        print("# Or for hypothesis tests:")
        print(f"@example(seed={config.seed:#x}, ops={config.ops})")
        return 0

    print(output, end="")
    print()
    print("[OK] Final scan matches the oracle")

    if args.verbose:
        summary = result.summary
        print(f"     Steps: {summary.steps}")
        print(f"     Inserts: {summary.inserts}  Deletes: {summary.deletes}")
        print(f"     Searches: {summary.searches} ({summary.search_hits} hits)")
        print(f"     Abandoned inserts: {summary.skipped_inserts}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
