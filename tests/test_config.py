"""Tests for RunConfig validation."""

from __future__ import annotations

import dataclasses

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kvtrace.config import RunConfig


class TestRunConfigDefaults:
    """Defaults reproduce the `kvtrace` command with no flags."""

    def test_defaults(self) -> None:
        config = RunConfig()
        assert config.seed == 0xC0FFEE
        assert config.ops == 60
        assert (config.key_min, config.key_max) == (1, 1000)
        assert config.max_insert_retries == 10
        assert config.check_search is True
        assert config.table_path == "trace_db/trace_t"

    def test_frozen(self) -> None:
        config = RunConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.ops = 5  # type: ignore[misc]

    def test_replace_revalidates(self) -> None:
        with pytest.raises(ValueError, match="ops"):
            dataclasses.replace(RunConfig(), ops=-1)


class TestRunConfigValidation:
    """Invalid values fail at construction."""

    @given(seed=st.integers(min_value=-(1 << 80), max_value=1 << 80))
    def test_seed_reduced_to_64_bits(self, seed: int) -> None:
        assert RunConfig(seed=seed).seed == seed & ((1 << 64) - 1)

    def test_negative_ops(self) -> None:
        with pytest.raises(ValueError, match="ops must be non-negative"):
            RunConfig(ops=-1)

    def test_negative_retries(self) -> None:
        with pytest.raises(ValueError, match="max_insert_retries"):
            RunConfig(max_insert_retries=-1)

    def test_empty_domain(self) -> None:
        with pytest.raises(ValueError, match="must not exceed"):
            RunConfig(key_min=10, key_max=9)

    @pytest.mark.parametrize(
        ("key_min", "key_max"), [(-(1 << 31) - 1, 0), (0, 1 << 31)]
    )
    def test_domain_must_fit_32_bits(self, key_min: int, key_max: int) -> None:
        with pytest.raises(ValueError, match="32-bit"):
            RunConfig(key_min=key_min, key_max=key_max)

    def test_widest_domain_accepted(self) -> None:
        config = RunConfig(key_min=-(1 << 31), key_max=(1 << 31) - 1)
        assert config.key_max - config.key_min == (1 << 32) - 1

    @pytest.mark.parametrize(
        ("field", "value"),
        [("database", ""), ("database", "a/b"), ("table", ""), ("table", "x/y")],
    )
    def test_bad_names(self, field: str, value: str) -> None:
        with pytest.raises(ValueError, match=field):
            RunConfig(**{field: value})  # type: ignore[arg-type]

    def test_zero_ops_allowed(self) -> None:
        assert RunConfig(ops=0).ops == 0
