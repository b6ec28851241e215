"""Tests for SEED_GLOBAL parsing."""

import pytest
from dcurve.utils.random import MAX_SEED, read_seed_global


@pytest.mark.parametrize(
    "environ",
    [{}, {"SEED_GLOBAL": ""}, {"SEED_GLOBAL": "   "}],
    ids=["unset", "empty", "blank"],
)
def test_unset_gives_none(environ):
    assert read_seed_global(environ) is None


@pytest.mark.parametrize("raw", ["abc", "1.5", "-1", str(MAX_SEED + 1)])
def test_invalid_values_ignored(raw):
    assert read_seed_global({"SEED_GLOBAL": raw}) is None


@pytest.mark.parametrize("raw, expected", [("0", 0), (" 42 ", 42), (str(MAX_SEED), MAX_SEED)])
def test_valid_values(raw, expected):
    assert read_seed_global({"SEED_GLOBAL": raw}) == expected


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("SEED_GLOBAL", "17")
    assert read_seed_global() == 17

    monkeypatch.delenv("SEED_GLOBAL")
    assert read_seed_global() is None
