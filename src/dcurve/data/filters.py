"""
Input validation and row filtering for observation sets.

Checks that every referenced column exists, removes rows with missing values
in those columns, and validates outcome coding and supplied risks before any
curve is computed.
"""

import logging
import warnings
from collections.abc import Sequence
from typing import Any

import numpy as np
import pandas as pd

from dcurve.errors import (
    IncompleteDataWarning,
    InvalidOutcome,
    InvalidRiskInput,
    MissingVariable,
)

logger = logging.getLogger(__name__)


def check_variables(data: pd.DataFrame, variables: Sequence[str]) -> None:
    """
    Raise MissingVariable if any variable is absent from ``data``.

    Args:
        data: Observation set
        variables: Column names referenced by the models
    """
    missing = [v for v in variables if v not in data.columns]
    if missing:
        raise MissingVariable(missing)


def complete_cases(
    data: pd.DataFrame,
    variables: Sequence[str],
) -> tuple[pd.DataFrame, dict[str, Any]]:
    """
    Restrict to the referenced columns and drop rows with any missing value.

    Rows are reindexed 0..n-1 so downstream index arrays address positions.

    Args:
        data: Observation set
        variables: Columns to keep and check

    Returns:
        (filtered_df, stats_dict) where stats_dict contains:
            - n_in: Input row count
            - n_removed: Rows dropped for missing data
            - n_out: Output row count

    Warns:
        IncompleteDataWarning when at least one row is dropped
    """
    check_variables(data, variables)

    df = data.loc[:, list(variables)]
    mask = df.notna().all(axis=1)
    n_removed = int((~mask).sum())

    if n_removed > 0:
        message = f"{n_removed} observation(s) with missing data removed"
        logger.warning(message)
        warnings.warn(message, IncompleteDataWarning, stacklevel=4)

    df = df.loc[mask].reset_index(drop=True)
    stats = {"n_in": len(data), "n_removed": n_removed, "n_out": len(df)}
    return df, stats


def coerce_outcome(values: pd.Series | np.ndarray, name: str = "outcome") -> np.ndarray:
    """
    Convert an outcome column to an int array of 0/1.

    Accepts booleans or numbers equal to 0 or 1.

    Raises:
        InvalidOutcome: If any value is not 0/1
    """
    arr = np.asarray(values)
    if arr.dtype == bool:
        return arr.astype(int)

    try:
        numeric = arr.astype(float)
    except (TypeError, ValueError) as e:
        raise InvalidOutcome(f"Outcome '{name}' must be coded 0/1 or boolean") from e

    if not np.isin(numeric, (0.0, 1.0)).all():
        bad = sorted(set(numeric[~np.isin(numeric, (0.0, 1.0))].tolist()))[:5]
        raise InvalidOutcome(f"Outcome '{name}' must be coded 0/1, found values {bad}")
    return numeric.astype(int)


def validate_fitted_risks(values: pd.Series | np.ndarray, name: str = "risk") -> np.ndarray:
    """
    Validate supplied risks and return them as a float array.

    Raises:
        InvalidRiskInput: If values are not numeric or fall outside [0, 1]
    """
    try:
        risk = np.asarray(values, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidRiskInput(f"Fitted risks in '{name}' must be numeric") from e

    if risk.size and (np.nanmin(risk) < 0.0 or np.nanmax(risk) > 1.0):
        raise InvalidRiskInput(
            f"When fitted_risk=True, all risks provided must be between 0 and 1 "
            f"(column '{name}' spans [{np.nanmin(risk):.4g}, {np.nanmax(risk):.4g}])."
        )
    return risk
