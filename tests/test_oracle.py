"""Tests for WorkloadOracle."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kvtrace.oracle import WorkloadOracle
from kvtrace.rng import BoundedSampler
from tests.strategies import oracle_key_lists, seeds


class TestOracleBasics:
    """Membership, insertion and domain handling."""

    def test_starts_empty(self) -> None:
        oracle = WorkloadOracle()
        assert len(oracle) == 0
        assert oracle.keys() == frozenset()
        assert oracle.sorted_keys() == []

    def test_default_domain(self) -> None:
        oracle = WorkloadOracle()
        assert (oracle.key_min, oracle.key_max) == (1, 1000)

    def test_insert_then_present(self) -> None:
        oracle = WorkloadOracle()
        oracle.insert(42)
        assert oracle.is_present(42)
        assert 42 in oracle
        assert len(oracle) == 1

    def test_duplicate_insert_rejected(self) -> None:
        oracle = WorkloadOracle()
        oracle.insert(5)
        with pytest.raises(ValueError, match="already present"):
            oracle.insert(5)
        assert len(oracle) == 1

    @pytest.mark.parametrize("key", [0, 1001, -3])
    def test_insert_outside_domain_rejected(self, key: int) -> None:
        with pytest.raises(ValueError, match="outside domain"):
            WorkloadOracle().insert(key)

    @pytest.mark.parametrize("key", [0, 1001, -(1 << 40)])
    def test_outside_domain_never_present(self, key: int) -> None:
        assert not WorkloadOracle().is_present(key)

    def test_non_int_not_contained(self) -> None:
        oracle = WorkloadOracle()
        oracle.insert(1)
        assert "1" not in oracle

    def test_empty_domain_rejected(self) -> None:
        with pytest.raises(ValueError, match="Empty key domain"):
            WorkloadOracle(5, 4)

    def test_negative_domain(self) -> None:
        oracle = WorkloadOracle(-10, -1)
        oracle.insert(-10)
        oracle.insert(-1)
        assert oracle.sorted_keys() == [-10, -1]

    def test_iteration_is_snapshot(self) -> None:
        """Mutating while iterating does not disturb the iterator."""
        oracle = WorkloadOracle()
        for key in (1, 2, 3):
            oracle.insert(key)
        seen = []
        for key in oracle:
            seen.append(key)
            if key == 1:
                oracle.remove_at(0)
        assert seen == [1, 2, 3]


class TestSwapRemove:
    """remove_at moves the last key into the hole."""

    def test_remove_middle_moves_last(self) -> None:
        oracle = WorkloadOracle()
        for key in (10, 20, 30, 40):
            oracle.insert(key)
        assert oracle.remove_at(1) == 20
        assert list(oracle) == [10, 40, 30]
        assert not oracle.is_present(20)

    def test_remove_last(self) -> None:
        oracle = WorkloadOracle()
        for key in (10, 20):
            oracle.insert(key)
        assert oracle.remove_at(1) == 20
        assert list(oracle) == [10]

    def test_remove_only(self) -> None:
        oracle = WorkloadOracle()
        oracle.insert(9)
        assert oracle.remove_at(0) == 9
        assert len(oracle) == 0
        assert not oracle.is_present(9)

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_remove_out_of_range(self, index: int) -> None:
        oracle = WorkloadOracle()
        for key in (1, 2, 3):
            oracle.insert(key)
        with pytest.raises(IndexError):
            oracle.remove_at(index)
        assert len(oracle) == 3

    def test_reinsert_after_remove(self) -> None:
        oracle = WorkloadOracle()
        oracle.insert(7)
        oracle.remove_at(0)
        oracle.insert(7)
        assert oracle.is_present(7)


class TestPickRandom:
    """pick_random draws one index with uniform_below_u64."""

    def test_empty_raises(self) -> None:
        with pytest.raises(LookupError):
            WorkloadOracle().pick_random(BoundedSampler.from_seed(0))

    def test_pick_matches_sampler_draw(self) -> None:
        oracle = WorkloadOracle()
        for key in range(1, 11):
            oracle.insert(key)
        index, key = oracle.pick_random(BoundedSampler.from_seed(1))
        expected = BoundedSampler.from_seed(1).uniform_below_u64(10)
        assert index == expected
        assert key == list(oracle)[index]

    def test_single_key_always_picked(self) -> None:
        oracle = WorkloadOracle()
        oracle.insert(77)
        sampler = BoundedSampler.from_seed(3)
        assert all(oracle.pick_random(sampler) == (0, 77) for _ in range(10))


class TestOracleProperties:
    """Presence table and dense list stay consistent."""

    @given(keys=oracle_key_lists(), seed=seeds, removals=st.integers(0, 64))
    def test_presence_matches_dense_list(self, keys: list[int], seed: int, removals: int) -> None:
        oracle = WorkloadOracle()
        for key in keys:
            oracle.insert(key)
        sampler = BoundedSampler.from_seed(seed)
        removed = set()
        for _ in range(min(removals, len(keys))):
            index, key = oracle.pick_random(sampler)
            assert oracle.remove_at(index) == key
            removed.add(key)

        dense = list(oracle)
        assert len(dense) == len(set(dense)) == len(oracle)
        assert set(dense) == set(keys) - removed
        for key in range(1, 1001):
            assert oracle.is_present(key) == (key in set(dense))

    @given(keys=oracle_key_lists())
    def test_sorted_keys_sorted(self, keys: list[int]) -> None:
        oracle = WorkloadOracle()
        for key in keys:
            oracle.insert(key)
        assert oracle.sorted_keys() == sorted(keys)
        assert oracle.keys() == frozenset(keys)
