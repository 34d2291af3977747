"""Trace records and their line format.

Every successful operation becomes one ASCII line:

    I <key>           insert
    D <key>           delete
    S <key> <0|1>     search, 1 on an exact hit
    final <n> <k>...  verifier scan, engine order

Traces are diffed byte-for-byte across runs, so formatting lives in one
place.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

from kvtrace.enums import OpKind

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ["TraceRecord", "TraceWriter", "format_final", "format_header"]


@dataclass(frozen=True, slots=True)
class TraceRecord:
    """One completed operation.

    Attributes:
        kind: Operation kind
        key: Key the operation applied to
        found: Search outcome; None for inserts and deletes
    """

    kind: OpKind
    key: int
    found: bool | None = None

    def __post_init__(self) -> None:
        if (self.kind is OpKind.SEARCH) != (self.found is not None):
            msg = f"found must be set for searches only, got {self.kind}/{self.found}"
            raise ValueError(msg)

    def to_line(self) -> str:
        """Render the record without the trailing newline."""
        if self.kind is OpKind.SEARCH:
            return f"{self.kind} {self.key} {int(bool(self.found))}"
        return f"{self.kind} {self.key}"


def format_header(seed: int, ops: int) -> str:
    """Run header line printed before the trace."""
    return f"seed={seed} ops={ops}"


def format_final(keys: Iterable[int]) -> str:
    """Final scan line: count followed by every key."""
    values = [str(key) for key in keys]
    return " ".join(["final", str(len(values)), *values])


class TraceWriter:
    """Write trace lines to a text stream.

    Lines are flushed as they are written so that a run aborted by a fatal
    engine error still leaves every completed operation in the output.
    """

    __slots__ = ("_lines", "_stream")

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._lines = 0

    @property
    def lines_written(self) -> int:
        return self._lines

    def _write(self, line: str) -> None:
        self._stream.write(line + "\n")
        self._stream.flush()
        self._lines += 1

    def header(self, seed: int, ops: int) -> None:
        self._write(format_header(seed, ops))

    def record(self, record: TraceRecord) -> None:
        self._write(record.to_line())

    def final(self, keys: Iterable[int]) -> None:
        self._write(format_final(keys))
