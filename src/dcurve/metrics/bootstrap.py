"""
Bootstrap confidence bands for decision curves.

Resamples observations with replacement (no stratification on outcome, so the
prevalence varies across replicates), re-fits every model on each replicate,
recomputes the full metric table, and reduces replicate values to pointwise
quantile bounds.

The same index matrix is shared by every model so that cross-model
contrasts stay paired within a replicate. Replicates run on a joblib worker
pool; results are collated by (model, threshold position), never by arrival
order.
"""

import logging
from collections.abc import Sequence

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from sklearn.base import ClassifierMixin

from ..data.filters import coerce_outcome
from ..models.risk import Candidate, assign_risk, candidate_name
from .net_benefit import CI_METRICS, net_benefit_table

logger = logging.getLogger(__name__)

KEY_COLUMNS = ["model", "position"]


def draw_bootstrap_indices(n: int, n_boot: int, seed: int = 0) -> np.ndarray:
    """
    Draw ``n_boot`` resamples of size ``n`` with replacement.

    Args:
        n: Sample size
        n_boot: Number of bootstrap replicates
        seed: Random seed

    Returns:
        Integer array of shape (n_boot, n); row b is the index set of replicate b
    """
    if n < 1:
        raise ValueError(f"Cannot bootstrap an empty sample (n={n})")
    if n_boot < 1:
        raise ValueError(f"n_boot must be >= 1, got {n_boot}")
    rng = np.random.default_rng(seed)
    return rng.integers(0, n, size=(n_boot, n))


def type1_quantile(values, q: float) -> float:
    """
    Quantile that always returns an observed value (inverse empirical CDF).

    NaN values are dropped first; an all-NaN input gives NaN.
    """
    v = np.asarray(values, dtype=float)
    v = v[~np.isnan(v)]
    if v.size == 0:
        return np.nan
    return float(np.quantile(v, q, method="inverted_cdf"))


def replicate_table(
    candidates: Sequence[Candidate],
    data: pd.DataFrame,
    outcome: str,
    indices: np.ndarray,
    thresholds: np.ndarray,
    estimator: ClassifierMixin | None = None,
    replicate: int = 0,
) -> pd.DataFrame:
    """
    Metric tables of every candidate on one resample.

    Models are fit and scored on the resampled rows.

    Returns:
        Long DataFrame with columns replicate, model, position, thresholds and
        one column per metric
    """
    sample = data.iloc[indices].reset_index(drop=True)
    d = coerce_outcome(sample[outcome], name=outcome)

    tables = []
    for candidate in candidates:
        y = assign_risk(candidate, sample, sample, estimator=estimator)
        tbl = net_benefit_table(d, y, thresholds, validate=False)
        tbl.insert(0, "position", np.arange(len(thresholds)))
        tbl.insert(0, "model", candidate_name(candidate))
        tables.append(tbl)

    out = pd.concat(tables, ignore_index=True)
    out.insert(0, "replicate", replicate)
    return out


def bootstrap_replicates(
    candidates: Sequence[Candidate],
    data: pd.DataFrame,
    outcome: str,
    thresholds: np.ndarray,
    n_boot: int = 500,
    seed: int = 0,
    estimator: ClassifierMixin | None = None,
    n_jobs: int = -1,
) -> pd.DataFrame:
    """
    Evaluate all candidates on ``n_boot`` shared resamples.

    Args:
        candidates: Models plus reference strategies
        data: Complete-case observation set (positional index)
        outcome: Outcome column name
        thresholds: Validated threshold grid
        n_boot: Number of replicates
        seed: Random seed for the index draws
        estimator: Classifier re-fit on each replicate
        n_jobs: joblib worker count (-1 = all cores)

    Returns:
        Long DataFrame of per-replicate metric values
    """
    indices = draw_bootstrap_indices(len(data), n_boot, seed)
    logger.info(
        f"Bootstrapping {n_boot} replicates x {len(candidates)} models "
        f"x {len(thresholds)} thresholds (n_jobs={n_jobs})"
    )

    tables = Parallel(n_jobs=n_jobs)(
        delayed(replicate_table)(candidates, data, outcome, idx, thresholds, estimator, b)
        for b, idx in enumerate(indices)
    )
    return pd.concat(tables, ignore_index=True)


def summarize_bootstrap(
    replicates: pd.DataFrame,
    confidence_level: float = 0.95,
    metrics: Sequence[str] = CI_METRICS,
) -> pd.DataFrame:
    """
    Reduce replicate values to pointwise lower/upper bounds.

    Groups by (model, position) and takes the ``alpha/2`` and ``1 - alpha/2``
    quantiles of each metric, ``alpha = 1 - confidence_level``. Undefined
    replicate values are excluded; a group with no defined value gets NaN
    bounds.

    Returns:
        DataFrame with columns model, position, and ``<metric>_lower`` /
        ``<metric>_upper`` for each metric
    """
    if not (0.0 < confidence_level < 1.0):
        raise ValueError(f"confidence_level must lie in (0, 1), got {confidence_level}")

    alpha = 1.0 - confidence_level
    grouped = replicates.groupby(KEY_COLUMNS, sort=False)

    bounds = {}
    for metric in metrics:
        n_undefined = int(replicates[metric].isna().sum())
        if n_undefined:
            logger.debug(f"{metric}: {n_undefined} undefined replicate cell(s) excluded")
        bounds[f"{metric}_lower"] = grouped[metric].agg(lambda s: type1_quantile(s, alpha / 2))
        bounds[f"{metric}_upper"] = grouped[metric].agg(
            lambda s: type1_quantile(s, 1 - alpha / 2)
        )

    return pd.DataFrame(bounds).reset_index()


def bootstrap_ci(
    candidates: Sequence[Candidate],
    data: pd.DataFrame,
    outcome: str,
    thresholds: np.ndarray,
    confidence_level: float = 0.95,
    n_boot: int = 500,
    seed: int = 0,
    estimator: ClassifierMixin | None = None,
    n_jobs: int = -1,
) -> pd.DataFrame:
    """Bootstrap bounds for every candidate, metric and threshold position."""
    replicates = bootstrap_replicates(
        candidates,
        data,
        outcome,
        thresholds,
        n_boot=n_boot,
        seed=seed,
        estimator=estimator,
        n_jobs=n_jobs,
    )
    return summarize_bootstrap(replicates, confidence_level)
