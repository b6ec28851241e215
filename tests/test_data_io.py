"""Tests for observation set I/O."""

import pandas as pd
import pytest
from dcurve.data.io import read_observations_csv


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "obs.csv"
    pd.DataFrame({"y": [0, 1, 1], "a": [0.1, 0.2, None], "b": ["x", "y", "z"]}).to_csv(
        path, index=False
    )
    return path


def test_reads_all_columns(csv_file):
    df = read_observations_csv(csv_file)
    assert list(df.columns) == ["y", "a", "b"]
    assert len(df) == 3
    assert df["a"].isna().sum() == 1


def test_usecols_subset(csv_file):
    df = read_observations_csv(csv_file, usecols=["y", "a"])
    assert list(df.columns) == ["y", "a"]


def test_usecols_absent_columns_skipped(csv_file):
    """Absent columns are left for the variable check to report."""
    df = read_observations_csv(csv_file, usecols=["y", "Marker9"])
    assert list(df.columns) == ["y"]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_observations_csv(tmp_path / "nope.csv")
