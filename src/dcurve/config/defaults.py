"""
Default configuration values for decision curve runs.

Single source of truth for default parameter values used by the schema,
the loader, and the CLI.
"""

from typing import Any, Literal, get_args

# Estimators available by name in the model registry
EstimatorName = Literal["logistic", "logistic_l2", "random_forest"]
VALID_ESTIMATORS = list(get_args(EstimatorName))

# Metrics that can be drawn on the y-axis of a decision curve plot
PlotMetric = Literal["NB", "sNB"]
VALID_PLOT_METRICS = list(get_args(PlotMetric))

# Default threshold grid: 0, 0.01, ..., 0.99 (threshold 1 is disallowed)
DEFAULT_THRESHOLD_CONFIG: dict[str, Any] = {
    "min": 0.0,
    "max": 0.99,
    "step": 0.01,
    "values": None,
}

DEFAULT_BOOTSTRAP_CONFIG: dict[str, Any] = {
    "confidence_intervals": 0.95,
    "n_boot": 500,
    "seed": 0,
    "n_jobs": -1,
}

DEFAULT_CV_CONFIG: dict[str, Any] = {
    "folds": 5,
    "random_state": 0,
    "n_jobs": -1,
}

DEFAULT_MODEL_CONFIG: dict[str, Any] = {
    "estimator": "logistic",
    "max_iter": 1000,
    "random_state": 0,
}

DEFAULT_OUTPUT_CONFIG: dict[str, Any] = {
    "outdir": "results",
    "prefix": "",
    "plot": False,
    "plot_metric": "sNB",
}
