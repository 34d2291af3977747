"""Data integrity exceptions for oracle/engine disagreement.

These exceptions indicate that the storage engine and the workload oracle
disagree about which keys exist. They are findings, not engine errors: the
engine call itself succeeded but returned a state the model rules out.
They should propagate to the top level and fail the run.

Design:
    - NOT subclasses of KvTraceError (different error domain)
    - Carry diagnostic context for post-mortem analysis
    - Immutable after construction
    - @final decorator prevents subclassing

Hierarchy:
    DataIntegrityError (base - oracle/engine disagreement)
    ├─ ConsistencyError (final scan differs from oracle key set)
    ├─ ImmutabilityViolationError (mutation attempt on frozen error)
    └─ OracleMismatchError (search outcome differs from oracle membership)

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

__all__ = [
    "ConsistencyError",
    "DataIntegrityError",
    "ImmutabilityViolationError",
    "IntegrityContext",
    "OracleMismatchError",
]


@dataclass(frozen=True, slots=True)
class IntegrityContext:
    """Context for integrity error diagnosis.

    Attributes:
        component: Component that detected the disagreement (driver, verifier)
        operation: Operation being performed (search, scan)
        key: Key involved (optional)
        expected: What the oracle predicted (optional)
        actual: What the engine reported (optional)
        seed: Seed of the run, for replay (optional)
        step: Zero-based step index within the run (optional)
    """

    component: str
    operation: str
    key: int | None = None
    expected: str | None = None
    actual: str | None = None
    seed: int | None = None
    step: int | None = None


class DataIntegrityError(Exception):
    """Base exception for all oracle/engine disagreements.

    This exception is immutable after construction to prevent
    tampering with error evidence.

    Attributes:
        context: Structured diagnostic context for post-mortem analysis
    """

    __slots__ = ("_context", "_frozen")

    # Type annotations for __slots__ attributes (mypy requirement)
    _context: IntegrityContext | None
    _frozen: bool

    def __init__(
        self,
        message: str,
        context: IntegrityContext | None = None,
    ) -> None:
        """Initialize DataIntegrityError.

        Args:
            message: Human-readable error description
            context: Structured diagnostic context (optional)
        """
        super().__init__(message)
        object.__setattr__(self, "_context", context)
        object.__setattr__(self, "_frozen", True)

    # Python's exception handling sets these attributes when propagating exceptions.
    _PYTHON_EXCEPTION_ATTRS: frozenset[str] = frozenset(
        ("__traceback__", "__context__", "__cause__", "__suppress_context__", "__notes__")
    )

    def __setattr__(self, name: str, value: object) -> None:
        """Reject all attribute mutations after initialization.

        Raises:
            ImmutabilityViolationError: If attempting to modify after construction
        """
        if name in self._PYTHON_EXCEPTION_ATTRS:
            object.__setattr__(self, name, value)
            return
        if getattr(self, "_frozen", False):
            msg = f"Cannot modify integrity error attribute: {name}"
            raise ImmutabilityViolationError(msg)
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        """Reject all attribute deletions.

        Raises:
            ImmutabilityViolationError: Always
        """
        msg = f"Cannot delete integrity error attribute: {name}"
        raise ImmutabilityViolationError(msg)

    @property
    def context(self) -> IntegrityContext | None:
        """Structured diagnostic context."""
        return self._context

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{self.__class__.__name__}({self.args[0]!r}, context={self._context!r})"


@final
class ImmutabilityViolationError(DataIntegrityError):
    """Attempt to mutate a frozen DataIntegrityError."""


@final
class OracleMismatchError(DataIntegrityError):
    """Search outcome differs from the oracle's membership predicate.

    Raised by the driver when a Search lands (or fails to land) on a key
    whose presence the oracle predicts otherwise.

    Attributes:
        key: Search key
        found: Whether the engine reported an exact hit
    """

    __slots__ = ("_found", "_key")

    # Type annotations for __slots__ attributes (mypy requirement)
    _key: int
    _found: bool

    def __init__(
        self,
        message: str,
        context: IntegrityContext | None = None,
        *,
        key: int,
        found: bool,
    ) -> None:
        """Initialize OracleMismatchError.

        Args:
            message: Human-readable error description
            context: Structured diagnostic context (optional)
            key: Search key
            found: Whether the engine reported an exact hit
        """
        # Must set these before calling super().__init__ which freezes
        object.__setattr__(self, "_key", key)
        object.__setattr__(self, "_found", found)
        super().__init__(message, context)

    @property
    def key(self) -> int:
        """Search key."""
        return self._key

    @property
    def found(self) -> bool:
        """Whether the engine reported an exact hit."""
        return self._found

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"OracleMismatchError({self.args[0]!r}, key={self._key}, found={self._found})"


@final
class ConsistencyError(DataIntegrityError):
    """Final engine scan differs from the oracle's present-key set.

    Attributes:
        missing: Keys the oracle holds but the engine does not
        unexpected: Keys the engine holds but the oracle does not
    """

    __slots__ = ("_missing", "_unexpected")

    # Type annotations for __slots__ attributes (mypy requirement)
    _missing: frozenset[int]
    _unexpected: frozenset[int]

    def __init__(
        self,
        message: str,
        context: IntegrityContext | None = None,
        *,
        missing: frozenset[int] = frozenset(),
        unexpected: frozenset[int] = frozenset(),
    ) -> None:
        """Initialize ConsistencyError.

        Args:
            message: Human-readable error description
            context: Structured diagnostic context (optional)
            missing: Keys the oracle holds but the engine does not
            unexpected: Keys the engine holds but the oracle does not
        """
        # Must set these before calling super().__init__ which freezes
        object.__setattr__(self, "_missing", frozenset(missing))
        object.__setattr__(self, "_unexpected", frozenset(unexpected))
        super().__init__(message, context)

    @property
    def missing(self) -> frozenset[int]:
        """Keys the oracle holds but the engine does not."""
        return self._missing

    @property
    def unexpected(self) -> frozenset[int]:
        """Keys the engine holds but the oracle does not."""
        return self._unexpected

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"ConsistencyError({self.args[0]!r}, "
            f"missing={sorted(self._missing)}, "
            f"unexpected={sorted(self._unexpected)})"
        )
