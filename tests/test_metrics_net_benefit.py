"""
Tests for the net benefit calculator.

Validates:
- Reference strategy curves (All / None)
- Strict classification at the threshold
- Zero-denominator handling (missing, never 0)
- Threshold validation
"""

import numpy as np
import pandas as pd
import pytest
from dcurve.errors import InvalidThresholds
from dcurve.metrics.net_benefit import (
    METRIC_COLUMNS,
    TABLE_COLUMNS,
    net_benefit_table,
    validate_thresholds,
)


@pytest.fixture
def random_inputs():
    rng = np.random.default_rng(7)
    d = rng.binomial(1, 0.3, size=200)
    y = np.clip(0.3 * d + rng.uniform(0, 0.7, size=200), 0, 1)
    return d, y


# =============================================================================
# Structure
# =============================================================================


def test_table_structure(random_inputs):
    d, y = random_inputs
    thresholds = np.linspace(0, 0.9, 10)
    tbl = net_benefit_table(d, y, thresholds)

    assert isinstance(tbl, pd.DataFrame)
    assert list(tbl.columns) == TABLE_COLUMNS
    assert len(tbl) == len(thresholds)
    np.testing.assert_array_equal(tbl["thresholds"].values, thresholds)


def test_duplicate_and_unsorted_thresholds_evaluated_independently(random_inputs):
    d, y = random_inputs
    tbl = net_benefit_table(d, y, [0.3, 0.1, 0.3])

    assert len(tbl) == 3
    assert tbl["thresholds"].tolist() == [0.3, 0.1, 0.3]
    pd.testing.assert_series_equal(
        tbl.iloc[0][METRIC_COLUMNS], tbl.iloc[2][METRIC_COLUMNS], check_names=False
    )


def test_idempotent(random_inputs):
    d, y = random_inputs
    t = np.linspace(0, 0.95, 20)
    pd.testing.assert_frame_equal(net_benefit_table(d, y, t), net_benefit_table(d, y, t))


# =============================================================================
# Formulas
# =============================================================================


def test_matches_rate_formulation(random_inputs):
    """NB = TPR*rho - FPR*(1-rho)*t/(1-t) and DP = TPR*rho."""
    d, y = random_inputs
    t = np.array([0.0, 0.1, 0.25, 0.5, 0.75])
    tbl = net_benefit_table(d, y, t)

    expected_nb = tbl["TPR"] * tbl["rho"] - tbl["FPR"] * (1 - tbl["rho"]) * (t / (1 - t))
    np.testing.assert_allclose(tbl["NB"], expected_nb, atol=1e-12)
    np.testing.assert_allclose(tbl["DP"], tbl["TPR"] * tbl["rho"], atol=1e-12)
    np.testing.assert_allclose(tbl["sNB"], tbl["NB"] / tbl["rho"], atol=1e-12)


def test_hand_computed_values():
    d = np.array([0, 0, 0, 1, 1])
    y = np.array([0.1, 0.4, 0.6, 0.3, 0.9])
    row = net_benefit_table(d, y, [0.25]).iloc[0]

    # high risk: 0.4, 0.6, 0.3, 0.9 -> TP=2, FP=2
    assert row["TPR"] == pytest.approx(1.0)
    assert row["FPR"] == pytest.approx(2 / 3)
    assert row["rho"] == pytest.approx(0.4)
    assert row["prob.high.risk"] == pytest.approx(0.8)
    assert row["DP"] == pytest.approx(0.4)
    # NB = 2/5 - 2/5 * (1/3)
    assert row["NB"] == pytest.approx(0.4 - 0.4 / 3)
    assert row["sNB"] == pytest.approx((0.4 - 0.4 / 3) / 0.4)


def test_strict_inequality_at_threshold():
    """Risk equal to the threshold is not high risk."""
    d = np.array([1, 0, 1, 0])
    y = np.array([0.2, 0.2, 0.5, 0.1])
    row = net_benefit_table(d, y, [0.2]).iloc[0]

    assert row["TPR"] == pytest.approx(0.5)
    assert row["FPR"] == pytest.approx(0.0)
    assert row["prob.high.risk"] == pytest.approx(0.25)


def test_threshold_zero_excludes_zero_risk():
    d = np.array([1, 0, 0, 0])
    y = np.array([0.7, 0.0, 0.3, 0.0])
    row = net_benefit_table(d, y, [0.0]).iloc[0]

    assert row["prob.high.risk"] == pytest.approx(0.5)
    assert row["NB"] == pytest.approx(0.25)


# =============================================================================
# Reference strategies
# =============================================================================


def test_treat_none_curve(random_inputs):
    d, _ = random_inputs
    t = np.linspace(0, 0.99, 25)
    tbl = net_benefit_table(d, np.zeros(len(d)), t)

    assert (tbl["TPR"] == 0).all()
    assert (tbl["FPR"] == 0).all()
    assert (tbl["prob.high.risk"] == 0).all()
    assert (tbl["NB"] == 0).all()
    assert (tbl["sNB"] == 0).all()


def test_treat_all_curve(random_inputs):
    d, _ = random_inputs
    t = np.linspace(0, 0.99, 25)
    tbl = net_benefit_table(d, np.ones(len(d)), t)

    assert (tbl["TPR"] == 1).all()
    assert (tbl["FPR"] == 1).all()
    assert (tbl["prob.high.risk"] == 1).all()
    np.testing.assert_allclose(tbl["DP"], tbl["rho"])
    rho = d.mean()
    np.testing.assert_allclose(tbl["NB"], rho - (1 - rho) * t / (1 - t))


def test_all_and_model_agree_at_zero_threshold(random_inputs):
    d, y = random_inputs
    y = np.clip(y, 0.01, 1.0)
    model = net_benefit_table(d, y, [0.0]).iloc[0]
    treat_all = net_benefit_table(d, np.ones(len(d)), [0.0]).iloc[0]
    assert model["prob.high.risk"] == treat_all["prob.high.risk"] == 1.0


def test_perfect_separation_scenario():
    """100 observations, 20 events, perfectly separating risks."""
    d = np.array([1] * 20 + [0] * 80)
    y = d.astype(float)
    tbl = net_benefit_table(d, y, [0.0, 0.5, 0.99])
    row = tbl.iloc[1]

    assert row["TPR"] == pytest.approx(1.0)
    assert row["FPR"] == pytest.approx(0.0)
    assert row["rho"] == pytest.approx(0.2)
    assert row["NB"] == pytest.approx(0.2)
    assert row["DP"] == pytest.approx(0.2)
    assert row["sNB"] == pytest.approx(1.0)


# =============================================================================
# Undefined metrics
# =============================================================================


def test_no_events_makes_tpr_nb_and_dp_missing():
    d = np.zeros(10, dtype=int)
    y = np.linspace(0, 0.9, 10)
    tbl = net_benefit_table(d, y, [0.1, 0.5])

    assert tbl["TPR"].isna().all()
    assert tbl["sNB"].isna().all()
    assert (tbl["rho"] == 0).all()
    assert tbl["FPR"].notna().all()
    assert tbl["NB"].isna().all()
    assert tbl["DP"].isna().all()
    assert (tbl["prob.high.risk"] > 0).all()


def test_no_non_events_makes_fpr_missing():
    d = np.ones(10, dtype=int)
    y = np.linspace(0, 0.9, 10)
    tbl = net_benefit_table(d, y, [0.1, 0.5])

    assert tbl["FPR"].isna().all()
    assert tbl["TPR"].notna().all()
    assert (tbl["rho"] == 1).all()
    assert tbl["NB"].isna().all()
    assert tbl["sNB"].isna().all()
    # DP only needs TPR
    assert tbl["DP"].notna().all()


def test_missing_risks_give_missing_metrics():
    d = np.array([0, 1, 0, 1])
    y = np.full(4, np.nan)
    tbl = net_benefit_table(d, y, [0.1, 0.2])

    for col in ["FPR", "TPR", "NB", "sNB", "prob.high.risk", "DP"]:
        assert tbl[col].isna().all()
    assert (tbl["rho"] == 0.5).all()


# =============================================================================
# Validation
# =============================================================================


@pytest.mark.parametrize("bad", [[1.0], [-0.1], [0.2, 1.5], [np.nan], []])
def test_invalid_thresholds(bad):
    with pytest.raises(InvalidThresholds):
        net_benefit_table(np.array([0, 1]), np.array([0.2, 0.8]), bad)


def test_validate_thresholds_returns_float_array():
    t = validate_thresholds([0, 0.5])
    assert t.dtype == float
    np.testing.assert_array_equal(t, [0.0, 0.5])


def test_length_mismatch():
    with pytest.raises(ValueError, match="Length mismatch"):
        net_benefit_table(np.array([0, 1, 1]), np.array([0.2, 0.8]), [0.5])


def test_empty_sample():
    with pytest.raises(ValueError, match="empty"):
        net_benefit_table(np.array([]), np.array([]), [0.5])
