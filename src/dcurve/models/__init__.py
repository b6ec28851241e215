"""Risk models: estimator registry and risk assignment."""

from dcurve.models.registry import (
    SKLEARN_VER,
    build_estimator,
    build_logistic_regression,
    build_random_forest,
)
from dcurve.models.risk import (
    Candidate,
    assign_risk,
    candidate_name,
    check_fitted_risk_spec,
    design_matrix,
    fit_predict_risk,
    with_reference_strategies,
)

__all__ = [
    "SKLEARN_VER",
    "build_estimator",
    "build_logistic_regression",
    "build_random_forest",
    "Candidate",
    "assign_risk",
    "candidate_name",
    "check_fitted_risk_spec",
    "design_matrix",
    "fit_predict_risk",
    "with_reference_strategies",
]
