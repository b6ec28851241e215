"""
Tests for the bootstrap engine.

Covers:
- Index draws (shape, range, seeding)
- Type-1 quantiles (observed values only, NaN handling)
- Keyed reduction of replicate tables
- Shared resamples across models
- Worker-count independence
"""

import numpy as np
import pandas as pd
import pytest
from dcurve.data.formula import ALL_LABEL, NONE_LABEL, parse_formula
from dcurve.metrics.bootstrap import (
    bootstrap_ci,
    bootstrap_replicates,
    draw_bootstrap_indices,
    replicate_table,
    summarize_bootstrap,
    type1_quantile,
)
from dcurve.metrics.net_benefit import CI_METRICS

THRESHOLDS = np.array([0.0, 0.1, 0.2, 0.4])


@pytest.fixture
def risk_data():
    """Observations with supplied risks."""
    rng = np.random.default_rng(3)
    d = rng.binomial(1, 0.25, size=120)
    risk = np.clip(0.25 * d + rng.uniform(0, 0.6, size=120), 0, 1)
    return pd.DataFrame({"y": d, "risk": risk})


@pytest.fixture
def risk_candidates():
    return [parse_formula("y ~ risk", fitted_risk=True), ALL_LABEL, NONE_LABEL]


class TestDrawBootstrapIndices:
    """Tests for draw_bootstrap_indices."""

    def test_shape_and_range(self):
        """Should return an (n_boot, n) matrix of valid positions."""
        idx = draw_bootstrap_indices(50, 20, seed=1)
        assert idx.shape == (20, 50)
        assert idx.min() >= 0
        assert idx.max() < 50

    def test_reproducibility(self):
        """Same seed, same draws."""
        np.testing.assert_array_equal(
            draw_bootstrap_indices(30, 10, seed=5), draw_bootstrap_indices(30, 10, seed=5)
        )

    def test_different_seeds_differ(self):
        a = draw_bootstrap_indices(30, 10, seed=5)
        b = draw_bootstrap_indices(30, 10, seed=6)
        assert not np.array_equal(a, b)

    def test_invalid_arguments(self):
        with pytest.raises(ValueError, match="empty"):
            draw_bootstrap_indices(0, 10)
        with pytest.raises(ValueError, match="n_boot"):
            draw_bootstrap_indices(10, 0)


class TestType1Quantile:
    """Tests for type1_quantile."""

    def test_returns_observed_value(self):
        values = np.array([0.13, 0.71, 0.42, 0.05, 0.99, 0.64])
        for q in (0.025, 0.1, 0.5, 0.9, 0.975):
            assert type1_quantile(values, q) in values

    def test_inverse_cdf_definition(self):
        """Median of 1..4 is the 2nd order statistic (no interpolation)."""
        assert type1_quantile([4, 1, 3, 2], 0.5) == 2.0
        assert type1_quantile(np.arange(1, 41), 0.025) == 1.0
        assert type1_quantile(np.arange(1, 41), 0.975) == 39.0

    def test_nan_excluded(self):
        assert type1_quantile([np.nan, 5.0, np.nan], 0.5) == 5.0

    def test_all_nan_gives_nan(self):
        assert np.isnan(type1_quantile([np.nan, np.nan], 0.5))
        assert np.isnan(type1_quantile([], 0.5))


class TestSummarizeBootstrap:
    """Tests for the keyed quantile reduction."""

    def test_bounds_per_key(self):
        replicates = pd.DataFrame(
            {
                "replicate": [0, 1, 2, 0, 1, 2],
                "model": ["m", "m", "m", "m", "m", "m"],
                "position": [0, 0, 0, 1, 1, 1],
                "NB": [0.1, 0.3, 0.2, np.nan, np.nan, np.nan],
            }
        )
        bounds = summarize_bootstrap(replicates, 0.5, metrics=["NB"])

        assert list(bounds.columns) == ["model", "position", "NB_lower", "NB_upper"]
        first = bounds.set_index("position").loc[0]
        assert first["NB_lower"] == 0.1
        assert first["NB_upper"] == 0.3
        second = bounds.set_index("position").loc[1]
        assert np.isnan(second["NB_lower"])
        assert np.isnan(second["NB_upper"])

    def test_order_independent(self):
        """Shuffling replicate rows does not change the bounds."""
        rng = np.random.default_rng(0)
        replicates = pd.DataFrame(
            {
                "model": np.repeat(["a", "b"], 50),
                "position": np.tile(np.arange(5), 20),
                "NB": rng.normal(size=100),
            }
        )
        shuffled = replicates.sample(frac=1.0, random_state=1)

        a = summarize_bootstrap(replicates, metrics=["NB"]).sort_values(["model", "position"])
        b = summarize_bootstrap(shuffled, metrics=["NB"]).sort_values(["model", "position"])
        pd.testing.assert_frame_equal(a.reset_index(drop=True), b.reset_index(drop=True))

    @pytest.mark.parametrize("level", [0.0, 1.0, 1.5, -0.2])
    def test_invalid_confidence_level(self, level):
        replicates = pd.DataFrame({"model": ["m"], "position": [0], "NB": [0.1]})
        with pytest.raises(ValueError, match="confidence_level"):
            summarize_bootstrap(replicates, level, metrics=["NB"])


class TestReplicates:
    """Tests for replicate evaluation."""

    def test_replicate_table_structure(self, risk_data, risk_candidates):
        idx = draw_bootstrap_indices(len(risk_data), 1, seed=0)[0]
        tbl = replicate_table(risk_candidates, risk_data, "y", idx, THRESHOLDS, replicate=7)

        assert len(tbl) == 3 * len(THRESHOLDS)
        assert (tbl["replicate"] == 7).all()
        assert list(dict.fromkeys(tbl["model"])) == ["y ~ risk", ALL_LABEL, NONE_LABEL]
        assert tbl["position"].tolist() == list(range(len(THRESHOLDS))) * 3

    def test_models_share_resamples(self, risk_data, risk_candidates):
        """Prevalence is identical across models within a replicate."""
        reps = bootstrap_replicates(
            risk_candidates, risk_data, "y", THRESHOLDS, n_boot=15, seed=2, n_jobs=1
        )
        per_rep = reps.groupby("replicate")["rho"].nunique()
        assert (per_rep == 1).all()

    def test_prevalence_varies_across_replicates(self, risk_data, risk_candidates):
        """Resampling is not stratified on outcome."""
        reps = bootstrap_replicates(
            risk_candidates, risk_data, "y", THRESHOLDS, n_boot=15, seed=2, n_jobs=1
        )
        assert reps["rho"].nunique() > 1

    def test_worker_count_does_not_change_results(self, risk_data, risk_candidates):
        serial = bootstrap_ci(
            risk_candidates, risk_data, "y", THRESHOLDS, n_boot=12, seed=4, n_jobs=1
        )
        parallel = bootstrap_ci(
            risk_candidates, risk_data, "y", THRESHOLDS, n_boot=12, seed=4, n_jobs=2
        )
        pd.testing.assert_frame_equal(serial, parallel)


class TestBootstrapCI:
    """Tests for bootstrap_ci bounds."""

    def test_columns_and_ordering(self, risk_data, risk_candidates):
        bounds = bootstrap_ci(
            risk_candidates, risk_data, "y", THRESHOLDS, n_boot=30, seed=0, n_jobs=1
        )

        assert len(bounds) == 3 * len(THRESHOLDS)
        for metric in CI_METRICS:
            lower = bounds[f"{metric}_lower"]
            upper = bounds[f"{metric}_upper"]
            ok = lower.isna() | upper.isna() | (lower <= upper)
            assert ok.all(), metric

    def test_reference_strategy_bounds(self, risk_data, risk_candidates):
        bounds = bootstrap_ci(
            risk_candidates, risk_data, "y", THRESHOLDS, n_boot=30, seed=0, n_jobs=1
        )
        treat_all = bounds[bounds["model"] == ALL_LABEL]
        treat_none = bounds[bounds["model"] == NONE_LABEL]

        assert (treat_all["TPR_lower"] == 1).all()
        assert (treat_all["TPR_upper"] == 1).all()
        assert (treat_all["prob.high.risk_lower"] == 1).all()
        assert (treat_none["NB_lower"] == 0).all()
        assert (treat_none["NB_upper"] == 0).all()
        assert (treat_none["DP_upper"] == 0).all()

    def test_reproducible(self, risk_data, risk_candidates):
        a = bootstrap_ci(risk_candidates, risk_data, "y", THRESHOLDS, n_boot=10, seed=9, n_jobs=1)
        b = bootstrap_ci(risk_candidates, risk_data, "y", THRESHOLDS, n_boot=10, seed=9, n_jobs=1)
        pd.testing.assert_frame_equal(a, b)

    def test_refits_model_per_replicate(self, dca_data):
        spec = parse_formula("Cancer ~ Marker1")
        bounds = bootstrap_ci(
            [spec, ALL_LABEL, NONE_LABEL],
            dca_data,
            "Cancer",
            THRESHOLDS,
            n_boot=10,
            seed=0,
            n_jobs=1,
        )
        model_rows = bounds[bounds["model"] == spec.name]
        assert model_rows["NB_lower"].notna().all()
        assert (model_rows["NB_lower"] <= model_rows["NB_upper"]).all()
