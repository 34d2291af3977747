"""Command-line front end: run one seeded trace and print it.

Usage:
    kvtrace [--seed N] [--ops N] [-v]

Exit Codes:
    0   Trace completed and the final scan matched the oracle
    1   Usage error, fatal engine error, or oracle/engine disagreement

Python 3.13+.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING, NoReturn

from kvtrace.config import RunConfig
from kvtrace.constants import DEFAULT_OPS, DEFAULT_SEED, U64_MAX
from kvtrace.diagnostics import KvTraceError
from kvtrace.integrity import DataIntegrityError
from kvtrace.session import run_trace

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["main", "parse_u64"]

logger = logging.getLogger(__name__)


class _TraceArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_u64(text: str) -> int:
    """Parse an unsigned 64-bit integer literal (decimal, 0x, 0o or 0b).

    Digit-group underscores and leading-zero decimals such as ``010`` are
    rejected; octal must be spelled ``0o10``.

    Raises:
        argparse.ArgumentTypeError: If the text is not an integer in [0, 2**64)
    """
    msg = f"invalid integer: {text!r}"
    if "_" in text:
        raise argparse.ArgumentTypeError(msg)
    try:
        value = int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(msg) from None
    if not 0 <= value <= U64_MAX:
        msg = f"value out of unsigned 64-bit range: {text!r}"
        raise argparse.ArgumentTypeError(msg)
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = _TraceArgumentParser(
        prog="kvtrace",
        allow_abbrev=False,
        description="Seeded Insert/Delete/Search trace against a key-value engine.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Trace lines:
  I <key>            successful insert
  D <key>            successful delete
  S <key> <0|1>      search, 1 if the key was found
  final <n> <k>...   rows of the final scan, in key order

Examples:
  kvtrace --seed 0xC0FFEE --ops 5
  kvtrace --seed=42 --ops=1000 -v
""",
    )
    parser.add_argument(
        "--seed",
        type=parse_u64,
        default=DEFAULT_SEED,
        metavar="N",
        help=f"Generator seed (default: {DEFAULT_SEED:#x})",
    )
    parser.add_argument(
        "--ops",
        type=parse_u64,
        default=DEFAULT_OPS,
        metavar="N",
        help=f"Number of operations (default: {DEFAULT_OPS})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log engine and driver activity to stderr",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = RunConfig(seed=args.seed, ops=args.ops)
    try:
        run_trace(config, sys.stdout)
    except KvTraceError as e:
        logger.debug("Run aborted", exc_info=True)
        print(e, file=sys.stderr)
        return 1
    except DataIntegrityError as e:
        logger.debug("Run failed verification", exc_info=True)
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
