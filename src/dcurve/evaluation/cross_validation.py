"""
Cross-validated decision curves.

Partitions the complete-case observations into k folds, fits every model on
the complement of each fold, evaluates the curves on the held-out fold, and
averages each metric across folds at every (model, threshold) pair.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from sklearn.base import ClassifierMixin
from sklearn.model_selection import KFold

from ..config.defaults import DEFAULT_CV_CONFIG
from ..config.schema import CurveConfig, ThresholdConfig
from ..data.formula import ModelSpec, as_model_specs
from ..metrics.bootstrap import KEY_COLUMNS
from ..metrics.net_benefit import METRIC_COLUMNS, validate_thresholds
from ..models.registry import build_estimator
from ..models.risk import Candidate, with_reference_strategies
from .curves import (
    NO_CI,
    CurveCall,
    DecisionCurveResult,
    finalize_table,
    point_estimates,
    prepare_observations,
    resolve_estimator,
    warn_undefined,
)

logger = logging.getLogger(__name__)


def kfold_partition(n: int, folds: int, random_state: int = 0) -> list[np.ndarray]:
    """
    Randomly partition row positions 0..n-1 into ``folds`` disjoint folds.

    Fold sizes differ by at most one; every position appears in exactly one fold.

    Returns:
        List of sorted position arrays, one per fold
    """
    if folds < 2:
        raise ValueError(f"folds must be >= 2, got {folds}")
    if folds > n:
        raise ValueError(f"folds ({folds}) cannot exceed the number of observations ({n})")

    splitter = KFold(n_splits=folds, shuffle=True, random_state=random_state)
    return [np.sort(test_idx) for _, test_idx in splitter.split(np.zeros((n, 1)))]


def fold_table(
    candidates: Sequence[Candidate],
    data: pd.DataFrame,
    d: np.ndarray,
    test_idx: np.ndarray,
    thresholds: np.ndarray,
    estimator: ClassifierMixin | None = None,
    fold: int = 0,
) -> pd.DataFrame:
    """Curves of every candidate on one held-out fold, trained on its complement."""
    held_out = np.zeros(len(data), dtype=bool)
    held_out[test_idx] = True

    train = data.loc[~held_out].reset_index(drop=True)
    evaluate = data.loc[held_out].reset_index(drop=True)

    out = point_estimates(candidates, train, evaluate, d[held_out], thresholds, estimator)
    out.insert(0, "fold", fold)
    return out


def average_folds(folds_long: pd.DataFrame) -> pd.DataFrame:
    """
    Arithmetic mean of each metric across folds per (model, position).

    Undefined fold values are skipped; all-undefined gives NaN.
    """
    grouped = folds_long.groupby(KEY_COLUMNS, sort=False)
    means = grouped[METRIC_COLUMNS].mean()
    thresholds = grouped["thresholds"].first()
    return pd.concat([thresholds, means], axis=1).reset_index()


def cv_decision_curve(
    formula: "str | ModelSpec | Sequence[str | ModelSpec]",
    data: pd.DataFrame,
    *,
    folds: int = DEFAULT_CV_CONFIG["folds"],
    fitted_risk: bool = False,
    thresholds=None,
    estimator: str | ClassifierMixin | None = None,
    seed: int = DEFAULT_CV_CONFIG["random_state"],
    n_jobs: int = DEFAULT_CV_CONFIG["n_jobs"],
) -> DecisionCurveResult:
    """
    Calculate k-fold cross-validated decision curves.

    Args:
        formula: "outcome ~ x1 + x2", a ModelSpec, or a list of them sharing one outcome
        data: Observation set
        folds: Number of folds (2 <= folds <= n)
        fitted_risk: Right-hand sides are columns of already-estimated risks
        thresholds: High-risk thresholds in [0, 1) (default 0, 0.01, ..., 0.99)
        estimator: Registry name or sklearn classifier with predict_proba
        seed: Random seed for fold assignment
        n_jobs: joblib worker count for the folds (-1 = all cores)

    Returns:
        DecisionCurveResult whose derived_data holds fold-averaged metrics
        (no confidence bands) and whose fold_data holds the per-fold rows
    """
    specs = as_model_specs(formula, fitted_risk=fitted_risk)
    if thresholds is None:
        thresholds = ThresholdConfig().to_array()
    grid = validate_thresholds(thresholds)
    model, estimator_name = resolve_estimator(estimator)

    df, d, stats = prepare_observations(specs, data)
    partition = kfold_partition(len(df), folds, random_state=seed)
    candidates = with_reference_strategies(specs)
    logger.info(
        f"Cross-validating decision curves: {folds} folds, {len(specs)} model(s), "
        f"{len(df):,} observations"
    )

    tables = Parallel(n_jobs=n_jobs)(
        delayed(fold_table)(candidates, df, d, test_idx, grid, model, k)
        for k, test_idx in enumerate(partition)
    )
    folds_long = pd.concat(tables, ignore_index=True)

    averaged = average_folds(folds_long)
    warn_undefined(averaged)

    call = CurveCall(
        formula=tuple(s.formula for s in specs),
        fitted_risk=any(s.fitted_risk for s in specs),
        thresholds=tuple(float(t) for t in grid),
        confidence_intervals=NO_CI,
        bootstraps=0,
        estimator=estimator_name,
        seed=int(seed),
        folds=int(folds),
    )

    fold_data = folds_long.drop(columns="position")
    return DecisionCurveResult(
        derived_data=finalize_table(averaged),
        confidence_intervals=NO_CI,
        call=call,
        n_removed=stats["n_removed"],
        fold_data=fold_data,
    )


def cv_decision_curve_from_config(config: CurveConfig, data: pd.DataFrame) -> DecisionCurveResult:
    """Run ``cv_decision_curve`` with parameters taken from a CurveConfig."""
    result = cv_decision_curve(
        config.formula,
        data,
        folds=config.cv.folds,
        fitted_risk=config.fitted_risk,
        thresholds=config.thresholds.to_array(),
        estimator=build_estimator(
            config.model.estimator,
            max_iter=config.model.max_iter,
            random_state=config.model.random_state,
        ),
        seed=config.cv.random_state,
        n_jobs=config.cv.n_jobs,
    )
    result.call = replace(result.call, estimator=config.model.estimator)
    return result
