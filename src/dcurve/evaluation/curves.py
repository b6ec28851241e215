"""
Decision curve assembly.

Builds the long-form derived curve table for one or more candidate models
plus the "All" and "None" reference strategies, optionally with pointwise
bootstrap confidence bands, and returns it in a result envelope together with
an immutable record of the invocation parameters.
"""

import logging
import math
import warnings
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field, replace
from typing import Any

import numpy as np
import pandas as pd
from sklearn.base import ClassifierMixin

from ..config.defaults import DEFAULT_BOOTSTRAP_CONFIG
from ..config.schema import CurveConfig, ThresholdConfig
from ..data.filters import coerce_outcome, complete_cases
from ..data.formula import ModelSpec, as_model_specs, referenced_variables
from ..errors import UndefinedMetricWarning
from ..metrics.bootstrap import KEY_COLUMNS, bootstrap_ci
from ..metrics.costbenefit import costbenefit_labels
from ..metrics.net_benefit import (
    CI_METRICS,
    METRIC_COLUMNS,
    TABLE_COLUMNS,
    net_benefit_table,
    validate_thresholds,
)
from ..models.registry import build_estimator
from ..models.risk import (
    Candidate,
    assign_risk,
    candidate_name,
    check_fitted_risk_spec,
    with_reference_strategies,
)

logger = logging.getLogger(__name__)

NO_CI = "none"


# =============================================================================
# Result envelope
# =============================================================================


@dataclass(frozen=True)
class CurveCall:
    """Parameters a curve computation was invoked with."""

    formula: tuple[str, ...]
    fitted_risk: bool
    thresholds: tuple[float, ...]
    confidence_intervals: float | str
    bootstraps: int
    estimator: str
    seed: int
    folds: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["formula"] = list(self.formula)
        out["thresholds"] = list(self.thresholds)
        return out


@dataclass
class DecisionCurveResult:
    """
    Output of a decision curve computation.

    Attributes:
        derived_data: Long-form table, one row per (model, threshold)
        confidence_intervals: Confidence level of the bands, or "none"
        call: Invocation parameters
        n_removed: Rows dropped for missing data
        fold_data: Per-fold tables (cross-validated curves only)
    """

    derived_data: pd.DataFrame
    confidence_intervals: float | str
    call: CurveCall
    n_removed: int = 0
    fold_data: pd.DataFrame | None = field(default=None, repr=False)

    @property
    def models(self) -> list[str]:
        return list(dict.fromkeys(self.derived_data["model"]))

    def curve(self, model: str) -> pd.DataFrame:
        """Rows of one model, in threshold order."""
        return self.derived_data.loc[self.derived_data["model"] == model].reset_index(drop=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "derived.data": self.derived_data,
            "confidence.intervals": self.confidence_intervals,
            "call": self.call.to_dict(),
        }


# =============================================================================
# Shared helpers
# =============================================================================


def normalize_confidence_level(confidence_intervals) -> float | None:
    """
    Interpret the confidence_intervals argument.

    ``None``, NaN and "none" disable the bands; a number must lie in (0, 1).
    """
    if confidence_intervals is None:
        return None
    if isinstance(confidence_intervals, str):
        if confidence_intervals.strip().lower() in (NO_CI, "na"):
            return None
        raise ValueError(
            f"confidence_intervals must be a number or 'none', got {confidence_intervals!r}"
        )
    level = float(confidence_intervals)
    if math.isnan(level):
        return None
    if not (0.0 < level < 1.0):
        raise ValueError(f"confidence_intervals must lie in (0, 1), got {level}")
    return level


def resolve_estimator(estimator: str | ClassifierMixin | None) -> tuple[ClassifierMixin, str]:
    """Estimator instance and the name recorded in the call."""
    if estimator is None:
        estimator = "logistic"
    if isinstance(estimator, str):
        return build_estimator(estimator), estimator
    return estimator, type(estimator).__name__


def prepare_observations(
    specs: Sequence[ModelSpec],
    data: pd.DataFrame,
) -> tuple[pd.DataFrame, np.ndarray, dict[str, Any]]:
    """
    Validate and clean the observation set for the given models.

    Returns:
        (complete-case frame, outcome array, filter stats)

    Raises:
        MissingVariable, InvalidOutcome, InvalidRiskInput
    """
    df, stats = complete_cases(data, referenced_variables(specs))
    if len(df) == 0:
        raise ValueError("No complete observations remain after removing missing data")
    outcome = specs[0].outcome
    d = coerce_outcome(df[outcome], name=outcome)

    for spec in specs:
        if spec.fitted_risk:
            logger.info(
                f"Fitted risks are provided for {spec.name!r}; no model fitting will be done. "
                "Bootstrap confidence intervals are conditional on the model used to fit risks."
            )
            check_fitted_risk_spec(spec, df)

    return df, d, stats


def point_estimates(
    candidates: Sequence[Candidate],
    train: pd.DataFrame,
    evaluate: pd.DataFrame,
    d: np.ndarray,
    thresholds: np.ndarray,
    estimator: ClassifierMixin | None = None,
) -> pd.DataFrame:
    """
    Metric rows of every candidate, built per model and concatenated.

    Returns:
        Long DataFrame with columns model, position, thresholds and metrics
    """
    tables = []
    for candidate in candidates:
        y = assign_risk(candidate, train, evaluate, estimator=estimator)
        tbl = net_benefit_table(d, y, thresholds, validate=False)
        tbl.insert(0, "position", np.arange(len(thresholds)))
        tbl.insert(0, "model", candidate_name(candidate))
        tables.append(tbl)
    return pd.concat(tables, ignore_index=True)


def finalize_table(table: pd.DataFrame, ci_columns: Sequence[str] = ()) -> pd.DataFrame:
    """Fix column order, append cost:benefit labels, drop the position key."""
    out = table.loc[:, [*TABLE_COLUMNS, "model", *ci_columns]]
    out["cost.benefit.ratio"] = costbenefit_labels(out["thresholds"])
    return out.reset_index(drop=True)


def warn_undefined(table: pd.DataFrame) -> None:
    """Warn when point estimates contain undefined (missing) cells."""
    n_missing = table[METRIC_COLUMNS].isna().to_numpy().sum()
    if n_missing:
        counts = table[METRIC_COLUMNS].isna().sum()
        detail = ", ".join(f"{m}={int(c)}" for m, c in counts.items() if c)
        message = f"{int(n_missing)} metric cell(s) undefined (zero denominator): {detail}"
        logger.warning(message)
        warnings.warn(message, UndefinedMetricWarning, stacklevel=3)


# =============================================================================
# Decision curves
# =============================================================================


def decision_curve(
    formula: "str | ModelSpec | Sequence[str | ModelSpec]",
    data: pd.DataFrame,
    *,
    fitted_risk: bool = False,
    thresholds=None,
    confidence_intervals=DEFAULT_BOOTSTRAP_CONFIG["confidence_intervals"],
    bootstraps: int = DEFAULT_BOOTSTRAP_CONFIG["n_boot"],
    estimator: str | ClassifierMixin | None = None,
    seed: int = DEFAULT_BOOTSTRAP_CONFIG["seed"],
    n_jobs: int = DEFAULT_BOOTSTRAP_CONFIG["n_jobs"],
) -> DecisionCurveResult:
    """
    Calculate decision curves for one or more risk models.

    Each model is fit on the complete-case data and scored on the same rows
    (or its supplied risks are used as-is), then net benefit and its companion
    metrics are computed at every threshold. "All" and "None" rows are always
    appended. With confidence intervals requested, every model is re-fit on
    each bootstrap resample (shared across models, not stratified on outcome)
    and pointwise quantile bounds are added.

    Args:
        formula: "outcome ~ x1 + x2", a ModelSpec, or a list of them sharing one outcome
        data: Observation set
        fitted_risk: Right-hand sides are columns of already-estimated risks
        thresholds: High-risk thresholds in [0, 1) (default 0, 0.01, ..., 0.99)
        confidence_intervals: Band level in (0, 1), or None / "none" to skip
        bootstraps: Number of bootstrap replicates
        estimator: Registry name or sklearn classifier with predict_proba
        seed: Random seed for the bootstrap draws
        n_jobs: joblib worker count for the replicates (-1 = all cores)

    Returns:
        DecisionCurveResult with columns thresholds, FPR, TPR, NB, sNB, rho,
        prob.high.risk, DP, model, [<metric>_lower, <metric>_upper ...],
        cost.benefit.ratio

    Raises:
        MissingVariable: A formula variable is absent from data
        InvalidRiskInput: Malformed fitted risks
        InvalidThresholds: A threshold outside [0, 1)
        InvalidOutcome: Outcome not coded 0/1

    Example:
        >>> result = decision_curve("Cancer ~ Age + Marker1", df, bootstraps=50)
        >>> result.models
        ['Cancer ~ Age + Marker1', 'All', 'None']
    """
    specs = as_model_specs(formula, fitted_risk=fitted_risk)
    if thresholds is None:
        thresholds = ThresholdConfig().to_array()
    grid = validate_thresholds(thresholds)
    level = normalize_confidence_level(confidence_intervals)
    if level is not None and bootstraps < 1:
        raise ValueError(f"bootstraps must be >= 1, got {bootstraps}")
    model, estimator_name = resolve_estimator(estimator)

    df, d, stats = prepare_observations(specs, data)
    candidates = with_reference_strategies(specs)
    logger.info(
        f"Computing decision curves for {len(specs)} model(s) on {len(df):,} observations "
        f"({int(d.sum())} events) at {len(grid)} thresholds"
    )

    table = point_estimates(candidates, df, df, d, grid, estimator=model)
    warn_undefined(table)

    ci_columns: list[str] = []
    if level is not None:
        bounds = bootstrap_ci(
            candidates,
            df,
            specs[0].outcome,
            grid,
            confidence_level=level,
            n_boot=bootstraps,
            seed=seed,
            estimator=model,
            n_jobs=n_jobs,
        )
        table = table.merge(bounds, on=KEY_COLUMNS, how="left", validate="one_to_one")
        ci_columns = [f"{m}_{side}" for m in CI_METRICS for side in ("lower", "upper")]

    call = CurveCall(
        formula=tuple(s.formula for s in specs),
        fitted_risk=any(s.fitted_risk for s in specs),
        thresholds=tuple(float(t) for t in grid),
        confidence_intervals=level if level is not None else NO_CI,
        bootstraps=int(bootstraps),
        estimator=estimator_name,
        seed=int(seed),
    )

    return DecisionCurveResult(
        derived_data=finalize_table(table, ci_columns),
        confidence_intervals=call.confidence_intervals,
        call=call,
        n_removed=stats["n_removed"],
    )


def decision_curve_from_config(config: CurveConfig, data: pd.DataFrame) -> DecisionCurveResult:
    """Run ``decision_curve`` with parameters taken from a CurveConfig."""
    result = decision_curve(
        config.formula,
        data,
        fitted_risk=config.fitted_risk,
        thresholds=config.thresholds.to_array(),
        confidence_intervals=config.bootstrap.confidence_intervals,
        bootstraps=config.bootstrap.n_boot,
        estimator=build_estimator(
            config.model.estimator,
            max_iter=config.model.max_iter,
            random_state=config.model.random_state,
        ),
        seed=config.bootstrap.seed,
        n_jobs=config.bootstrap.n_jobs,
    )
    # record the registry name, not the sklearn class
    result.call = replace(result.call, estimator=config.model.estimator)
    return result
