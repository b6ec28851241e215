"""Decision curve assembly, cross-validation, and reporting."""

from dcurve.evaluation.cross_validation import (
    average_folds,
    cv_decision_curve,
    cv_decision_curve_from_config,
    fold_table,
    kfold_partition,
)
from dcurve.evaluation.curves import (
    CurveCall,
    DecisionCurveResult,
    decision_curve,
    decision_curve_from_config,
    normalize_confidence_level,
    point_estimates,
    prepare_observations,
)
from dcurve.evaluation.reports import save_curve_results, summarize_decision_curve

__all__ = [
    "CurveCall",
    "DecisionCurveResult",
    "decision_curve",
    "decision_curve_from_config",
    "normalize_confidence_level",
    "point_estimates",
    "prepare_observations",
    "cv_decision_curve",
    "cv_decision_curve_from_config",
    "kfold_partition",
    "fold_table",
    "average_folds",
    "save_curve_results",
    "summarize_decision_curve",
]
