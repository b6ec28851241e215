"""
Net benefit calculations across a threshold sweep.

For an outcome vector ``d`` and a risk vector ``y``, every threshold ``t``
classifies observations with ``y > t`` (strict) as high risk and yields:

    TPR  = TP / count(d = 1)            FPR = FP / count(d = 0)
    rho  = count(d = 1) / n             prob.high.risk = (TP + FP) / n
    DP   = TP / n  (= TPR * rho)
    NB   = TP / n - FP / n * t / (1 - t)  (= TPR * rho - FPR * (1 - rho) * odds)
    sNB  = NB / rho

Zero denominators give NaN for that cell (missing, never 0). DP is missing
whenever TPR is, and NB whenever TPR or FPR is.

Reference:
    Vickers AJ, Elkin EB (2006). Decision curve analysis: a novel method
    for evaluating prediction models. Med Decis Making, 26(6):565-574.
    Kerr KF, Brown MD, Zhu K, Janes H (2016). Assessing the clinical impact of
    risk prediction models with decision curves. J Clin Oncol, 34(21):2534-2540.
"""

import numpy as np
import pandas as pd

from ..errors import InvalidThresholds

# Output column order of a metric table
METRIC_COLUMNS = ["FPR", "TPR", "NB", "sNB", "rho", "prob.high.risk", "DP"]
TABLE_COLUMNS = ["thresholds", *METRIC_COLUMNS]

# Metrics that receive bootstrap bounds, in output order
CI_METRICS = ["TPR", "FPR", "rho", "DP", "NB", "sNB", "prob.high.risk"]


def validate_thresholds(thresholds) -> np.ndarray:
    """
    Validate a threshold sequence and return it as a float array.

    Raises:
        InvalidThresholds: If empty, non-finite, or any value outside [0, 1)
    """
    t = np.atleast_1d(np.asarray(thresholds, dtype=float))
    if t.ndim != 1 or t.size == 0:
        raise InvalidThresholds("thresholds must be a non-empty 1-D sequence")
    bad = t[~np.isfinite(t) | (t < 0.0) | (t >= 1.0)]
    if bad.size:
        raise InvalidThresholds(
            f"thresholds must lie in [0, 1); got {bad[:5].tolist()}. "
            "A threshold of 1 gives an infinite cost:benefit ratio."
        )
    return t


def net_benefit_table(
    d: np.ndarray,
    y: np.ndarray,
    thresholds,
    validate: bool = True,
) -> pd.DataFrame:
    """
    Compute the full metric row for every threshold.

    Args:
        d: Binary outcomes (0/1 or bool)
        y: Predicted risks, index-aligned with ``d``
        thresholds: Threshold sequence (order and duplicates preserved)
        validate: Check thresholds lie in [0, 1) (callers that already
            validated the grid skip the check)

    Returns:
        DataFrame with one row per threshold and columns
        thresholds, FPR, TPR, NB, sNB, rho, prob.high.risk, DP

    Raises:
        InvalidThresholds: If a threshold lies outside [0, 1)
        ValueError: On length mismatch or empty input

    Example:
        >>> d = np.array([0, 0, 1, 1])
        >>> y = np.array([0.1, 0.6, 0.4, 0.9])
        >>> net_benefit_table(d, y, [0.5])[["TPR", "FPR"]].values.tolist()
        [[0.5, 0.5]]
    """
    d = np.asarray(d).astype(int)
    y = np.asarray(y, dtype=float)
    t = validate_thresholds(thresholds) if validate else np.asarray(thresholds, dtype=float)

    if len(d) != len(y):
        raise ValueError(f"Length mismatch: d has {len(d)} elements, y has {len(y)} elements")
    n = len(d)
    if n == 0:
        raise ValueError("Cannot compute net benefit on an empty sample")

    n1 = int(d.sum())
    n0 = n - n1
    rho = n1 / n

    if np.isnan(y).any():
        # Risks unavailable (model could not be fit on this sample)
        tp = np.full(t.shape, np.nan)
        fp = np.full(t.shape, np.nan)
    else:
        # count(y > t) = len - count(y <= t)
        tp = n1 - np.searchsorted(np.sort(y[d == 1]), t, side="right").astype(float)
        fp = n0 - np.searchsorted(np.sort(y[d == 0]), t, side="right").astype(float)

    tpr = tp / n1 if n1 > 0 else np.full(t.shape, np.nan)
    fpr = fp / n0 if n0 > 0 else np.full(t.shape, np.nan)

    odds = t / (1.0 - t)
    # DP = TPR * rho and NB = TPR * rho - FPR * (1 - rho) * odds are undefined
    # wherever TPR or FPR is
    dp = np.where(np.isnan(tpr), np.nan, tp / n)
    nb = np.where(np.isnan(tpr) | np.isnan(fpr), np.nan, tp / n - (fp / n) * odds)
    snb = nb / rho if rho > 0 else np.full(t.shape, np.nan)

    return pd.DataFrame(
        {
            "thresholds": t,
            "FPR": fpr,
            "TPR": tpr,
            "NB": nb,
            "sNB": snb,
            "rho": np.full(t.shape, rho),
            "prob.high.risk": (tp + fp) / n,
            "DP": dp,
        },
        columns=TABLE_COLUMNS,
    )
