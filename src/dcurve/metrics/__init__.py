"""Metrics module: net benefit, bootstrap bands, cost:benefit labels."""

from dcurve.metrics.bootstrap import (
    bootstrap_ci,
    bootstrap_replicates,
    draw_bootstrap_indices,
    replicate_table,
    summarize_bootstrap,
    type1_quantile,
)
from dcurve.metrics.costbenefit import (
    costbenefit_label,
    costbenefit_labels,
    threshold_to_costbenefit,
)
from dcurve.metrics.net_benefit import (
    CI_METRICS,
    METRIC_COLUMNS,
    TABLE_COLUMNS,
    net_benefit_table,
    validate_thresholds,
)

__all__ = [
    # Net benefit
    "METRIC_COLUMNS",
    "TABLE_COLUMNS",
    "CI_METRICS",
    "net_benefit_table",
    "validate_thresholds",
    # Bootstrap confidence bands
    "draw_bootstrap_indices",
    "type1_quantile",
    "replicate_table",
    "bootstrap_replicates",
    "summarize_bootstrap",
    "bootstrap_ci",
    # Cost:benefit labels
    "threshold_to_costbenefit",
    "costbenefit_label",
    "costbenefit_labels",
]
