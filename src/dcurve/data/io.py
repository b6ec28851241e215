"""
Data I/O for observation sets.

Reads CSV files holding an outcome column and covariates / supplied risks.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)


def read_observations_csv(
    filepath: str | Path,
    *,
    usecols: Sequence[str] | None = None,
    low_memory: bool = False,
) -> pd.DataFrame:
    """
    Read an observation set from CSV.

    Args:
        filepath: Path to CSV file
        usecols: Optional subset of columns to load (all columns if None)
        low_memory: Whether to use low_memory mode for pd.read_csv (default: False)

    Returns:
        DataFrame with the selected columns

    Raises:
        FileNotFoundError: If filepath does not exist
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    logger.info(f"Reading CSV: {filepath}")

    if usecols is not None:
        header = pd.read_csv(filepath, nrows=0).columns
        # Missing columns are reported later as MissingVariable with full context
        usecols = [c for c in usecols if c in header]

    df = pd.read_csv(filepath, usecols=usecols, low_memory=low_memory)
    logger.info(f"Loaded {len(df):,} rows x {df.shape[1]} columns")
    return df
