"""
Decision curve plotting.

Draws net benefit (or standardized net benefit) against the high-risk
threshold for every model in a result, with shaded bootstrap bands when the
result carries them.
"""

from collections.abc import Sequence

import matplotlib
import matplotlib.pyplot as plt
import numpy as np

from ..data.formula import ALL_LABEL, NONE_LABEL
from ..evaluation.curves import DecisionCurveResult

REFERENCE_STYLES = {
    ALL_LABEL: {"color": "gray", "linestyle": "--", "linewidth": 1.5},
    NONE_LABEL: {"color": "black", "linestyle": ":", "linewidth": 1.5},
}

METRIC_LABELS = {
    "NB": "Net Benefit",
    "sNB": "Standardized Net Benefit",
}


def apply_plot_metadata(
    fig: matplotlib.figure.Figure, meta_lines: Sequence[str] | None = None
) -> float:
    """
    Apply metadata text to bottom of figure.

    Args:
        fig: matplotlib figure object
        meta_lines: sequence of metadata strings to display

    Returns:
        Required bottom margin as fraction of figure height (0.0 to 1.0)
    """
    lines = [str(line) for line in (meta_lines or []) if line]
    if not lines:
        return 0.12

    fig.text(0.5, 0.005, "\n".join(lines), ha="center", va="bottom", fontsize=8, wrap=True)

    required_bottom = 0.12 + (0.022 * len(lines))
    return min(required_bottom, 0.30)


def plot_decision_curve(
    result: DecisionCurveResult,
    out_path: str,
    metric: str = "sNB",
    show_ci: bool = True,
    meta_lines: Sequence[str] | None = None,
) -> None:
    """
    Plot decision curves of every model in ``result``.

    Args:
        result: Output of decision_curve / cv_decision_curve
        out_path: Path to save plot
        metric: "NB" or "sNB" on the y-axis
        show_ci: Shade bootstrap bands when present
        meta_lines: Optional metadata lines to display at bottom
    """
    if metric not in METRIC_LABELS:
        raise ValueError(f"metric must be one of {list(METRIC_LABELS)}, got '{metric}'")

    matplotlib.use("Agg")

    fig, ax = plt.subplots(figsize=(10, 6))
    colors = plt.rcParams["axes.prop_cycle"].by_key()["color"]

    has_ci = f"{metric}_lower" in result.derived_data.columns
    values = []
    model_idx = 0
    for model in result.models:
        curve = result.curve(model).sort_values("thresholds", kind="stable")
        thr = curve["thresholds"].to_numpy()
        y = curve[metric].to_numpy(dtype=float)
        values.append(y)

        if model in REFERENCE_STYLES:
            ax.plot(thr, y, label=model, **REFERENCE_STYLES[model])
            continue

        color = colors[model_idx % len(colors)]
        model_idx += 1
        ax.plot(thr, y, color=color, linestyle="-", linewidth=2, label=model)
        if show_ci and has_ci:
            ax.fill_between(
                thr,
                curve[f"{metric}_lower"].to_numpy(dtype=float),
                curve[f"{metric}_upper"].to_numpy(dtype=float),
                color=color,
                alpha=0.2,
                linewidth=0,
            )

    ax.set_xlabel("High Risk Threshold", fontsize=12)
    ax.set_ylabel(METRIC_LABELS[metric], fontsize=12)
    ax.set_title("Decision Curve", fontsize=14)
    ax.legend(loc="upper right")
    ax.grid(True, alpha=0.3)

    # Treat-all curves dive steeply at high thresholds; clip to the model range
    finite = np.concatenate(values)
    finite = finite[np.isfinite(finite)]
    if finite.size:
        y_max = float(finite.max())
        y_min = max(float(finite.min()), -0.05 if metric == "NB" else -0.2)
        pad = 0.1 * (y_max - y_min) if y_max > y_min else 0.05
        ax.set_ylim(y_min - pad, y_max + pad)

    ax.axhline(y=0, color="gray", linestyle="-", linewidth=0.5, alpha=0.5)

    bottom_margin = apply_plot_metadata(fig, meta_lines)
    plt.subplots_adjust(left=0.15, right=0.9, top=0.85, bottom=bottom_margin)
    plt.savefig(out_path, dpi=150, bbox_inches="tight", pad_inches=0.3)
    plt.close(fig)
