"""
Decision curve summaries and persistence.

Summarizes where each model beats the reference strategies and writes a
result to disk as a curve CSV plus a JSON metadata file.
"""

import logging
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from ..data.formula import ALL_LABEL, NONE_LABEL
from ..utils.serialization import save_json
from .curves import DecisionCurveResult

logger = logging.getLogger(__name__)


def _range_string(thresholds: np.ndarray) -> str:
    if thresholds.size == 0:
        return "Never"
    return f"{thresholds.min():.3f}-{thresholds.max():.3f}"


def summarize_decision_curve(
    result: DecisionCurveResult,
    metric: str = "NB",
) -> pd.DataFrame:
    """
    Per-model summary of a decision curve.

    For every fitted model reports the threshold range where it beats
    "All" and "None" on ``metric`` and the area under its curve (trapezoid
    rule over sorted, de-duplicated thresholds, undefined cells dropped).

    Args:
        result: Output of decision_curve / cv_decision_curve
        metric: "NB" or "sNB"

    Returns:
        DataFrame with columns model, n_thresholds, beats_all_range,
        beats_none_range, integrated_<metric>, integrated_<metric>_all
    """
    if metric not in ("NB", "sNB"):
        raise ValueError(f"metric must be 'NB' or 'sNB', got '{metric}'")

    table = result.derived_data
    all_curve = result.curve(ALL_LABEL)
    none_curve = result.curve(NONE_LABEL)

    rows: list[dict[str, Any]] = []
    for model in result.models:
        if model in (ALL_LABEL, NONE_LABEL):
            continue
        curve = result.curve(model)
        thr = curve["thresholds"].to_numpy()
        value = curve[metric].to_numpy()

        beats_all = thr[value > all_curve[metric].to_numpy()]
        beats_none = thr[value > none_curve[metric].to_numpy()]

        integ = curve[["thresholds", metric]].dropna().drop_duplicates("thresholds")
        integ = integ.sort_values("thresholds")
        integ_all = all_curve[["thresholds", metric]].dropna().drop_duplicates("thresholds")
        integ_all = integ_all.sort_values("thresholds")

        rows.append(
            {
                "model": model,
                "n_thresholds": len(curve),
                "beats_all_range": _range_string(beats_all),
                "beats_none_range": _range_string(beats_none),
                f"integrated_{metric}": (
                    float(np.trapezoid(integ[metric], integ["thresholds"]))
                    if len(integ) > 1
                    else np.nan
                ),
                f"integrated_{metric}_all": (
                    float(np.trapezoid(integ_all[metric], integ_all["thresholds"]))
                    if len(integ_all) > 1
                    else np.nan
                ),
            }
        )

    summary = pd.DataFrame(rows)
    logger.debug(f"Summarized {len(summary)} model curve(s) on {metric} ({len(table)} rows)")
    return summary


def save_curve_results(
    result: DecisionCurveResult,
    out_dir: str | Path,
    prefix: str = "",
) -> dict[str, str]:
    """
    Write a decision curve result to ``out_dir``.

    Files:
        - ``{prefix}decision_curve.csv``: derived curve table (missing cells empty)
        - ``{prefix}decision_curve_folds.csv``: per-fold rows (cross-validated results)
        - ``{prefix}decision_curve_meta.json``: call record, CI level, removed rows

    Returns:
        Dict mapping file kind to written path
    """
    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)

    paths: dict[str, str] = {}

    csv_path = out_path / f"{prefix}decision_curve.csv"
    result.derived_data.to_csv(csv_path, index=False)
    paths["curve_csv"] = str(csv_path)

    if result.fold_data is not None:
        folds_path = out_path / f"{prefix}decision_curve_folds.csv"
        result.fold_data.to_csv(folds_path, index=False)
        paths["folds_csv"] = str(folds_path)

    meta = {
        "confidence_intervals": result.confidence_intervals,
        "call": result.call.to_dict(),
        "n_removed": result.n_removed,
        "models": result.models,
        "n_rows": len(result.derived_data),
    }
    json_path = out_path / f"{prefix}decision_curve_meta.json"
    save_json(meta, json_path)
    paths["meta_json"] = str(json_path)

    logger.info(f"Saved decision curve results to {csv_path}")
    return paths
