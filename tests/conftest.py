"""
Shared pytest fixtures for dcurve tests.
"""

import numpy as np
import pandas as pd
import pytest


def make_dca_data(n: int = 300, seed: int = 42, n_missing: int = 0) -> pd.DataFrame:
    """
    Simulated cohort with a binary outcome and a few covariates.

    Cancer risk rises with Marker1 and Age; Marker2 is noise.
    """
    rng = np.random.default_rng(seed)
    age = rng.normal(55, 10, size=n)
    female = rng.integers(0, 2, size=n)
    marker1 = rng.normal(0, 1, size=n)
    marker2 = rng.normal(0, 1, size=n)
    logit = -1.8 + 1.2 * marker1 + 0.03 * (age - 55)
    risk = 1 / (1 + np.exp(-logit))
    cancer = rng.binomial(1, risk)

    df = pd.DataFrame(
        {
            "Cancer": cancer,
            "Age": age,
            "Female": female,
            "Marker1": marker1,
            "Marker2": marker2,
            "true_risk": risk,
        }
    )
    if n_missing:
        df.loc[: n_missing - 1, "Marker1"] = np.nan
    return df


@pytest.fixture
def dca_data():
    """Reproducible simulated cohort (n=300)."""
    return make_dca_data()


@pytest.fixture
def dca_data_with_missing():
    """Simulated cohort whose first 7 rows lack Marker1."""
    return make_dca_data(n_missing=7)


@pytest.fixture
def separated_data():
    """100 observations, 20 events, risks that perfectly separate the classes."""
    outcome = np.array([1] * 20 + [0] * 80)
    return pd.DataFrame({"y": outcome, "risk": outcome.astype(float)})


@pytest.fixture
def small_thresholds():
    return np.array([0.0, 0.05, 0.1, 0.2, 0.3, 0.5])
