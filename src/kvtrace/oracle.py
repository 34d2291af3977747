"""Workload oracle - ground truth of which keys currently exist.

The oracle is the model side of the differential test: the driver updates it
synchronously with every successful Insert and Delete, and the verifier's
final scan of the engine must equal its key set.

Storage:
    - A dense list of present keys. Random picks index into it and removals
      swap the victim with the last element, so both are O(1). Order is
      irrelevant; only membership and count matter.
    - A presence table over the key domain for O(1) membership. It is an
      instance field, so concurrent runs never share it.

Invariant: ``is_present(k)`` iff ``k`` occurs exactly once in the dense list.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from kvtrace.constants import KEY_DOMAIN_MAX, KEY_DOMAIN_MIN

if TYPE_CHECKING:
    from collections.abc import Iterator

    from kvtrace.rng import BoundedSampler

__all__ = ["WorkloadOracle"]


class WorkloadOracle:
    """Set of present keys with O(1) membership, random pick and removal.

    Example:
        >>> oracle = WorkloadOracle()
        >>> oracle.insert(7)
        >>> oracle.insert(3)
        >>> oracle.remove_at(0)
        7
        >>> oracle.sorted_keys()
        [3]
    """

    __slots__ = ("_keys", "_key_max", "_key_min", "_present")

    def __init__(self, key_min: int = KEY_DOMAIN_MIN, key_max: int = KEY_DOMAIN_MAX) -> None:
        """Initialize an empty oracle over ``[key_min, key_max]``.

        Raises:
            ValueError: If the domain is empty
        """
        if key_min > key_max:
            msg = f"Empty key domain: [{key_min}, {key_max}]"
            raise ValueError(msg)
        self._key_min = key_min
        self._key_max = key_max
        self._keys: list[int] = []
        self._present = bytearray(key_max - key_min + 1)

    @property
    def key_min(self) -> int:
        """Inclusive lower bound of the key domain."""
        return self._key_min

    @property
    def key_max(self) -> int:
        """Inclusive upper bound of the key domain."""
        return self._key_max

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, int) and self.is_present(key)

    def __iter__(self) -> Iterator[int]:
        return iter(tuple(self._keys))

    def is_present(self, key: int) -> bool:
        """Check membership. Keys outside the domain are never present."""
        if not self._key_min <= key <= self._key_max:
            return False
        return bool(self._present[key - self._key_min])

    def insert(self, key: int) -> None:
        """Record a key as present, appending it to the dense list.

        Raises:
            ValueError: If the key is outside the domain or already present
        """
        if not self._key_min <= key <= self._key_max:
            msg = f"Key {key} outside domain [{self._key_min}, {self._key_max}]"
            raise ValueError(msg)
        if self._present[key - self._key_min]:
            msg = f"Key {key} is already present"
            raise ValueError(msg)
        self._present[key - self._key_min] = 1
        self._keys.append(key)

    def pick_random(self, sampler: BoundedSampler) -> tuple[int, int]:
        """Choose a present key uniformly.

        Args:
            sampler: Sampler of the run (one ``uniform_below_u64`` draw)

        Returns:
            (index into the dense list, key)

        Raises:
            LookupError: If the oracle is empty
        """
        if not self._keys:
            msg = "Cannot pick from an empty oracle"
            raise LookupError(msg)
        index = sampler.uniform_below_u64(len(self._keys))
        return index, self._keys[index]

    def remove_at(self, index: int) -> int:
        """Swap-remove the key at ``index``.

        Returns:
            The removed key

        Raises:
            IndexError: If index is out of range
        """
        if not 0 <= index < len(self._keys):
            msg = f"Oracle index {index} out of range (size {len(self._keys)})"
            raise IndexError(msg)
        key = self._keys[index]
        last = self._keys.pop()
        if index < len(self._keys):
            self._keys[index] = last
        self._present[key - self._key_min] = 0
        return key

    def keys(self) -> frozenset[int]:
        """Snapshot of the present keys."""
        return frozenset(self._keys)

    def sorted_keys(self) -> list[int]:
        """Present keys in ascending order (engine scan order)."""
        return sorted(self._keys)
