"""Observation set handling: model specs, loading, validation."""

from dcurve.data.filters import (
    check_variables,
    coerce_outcome,
    complete_cases,
    validate_fitted_risks,
)
from dcurve.data.formula import (
    ALL_LABEL,
    NONE_LABEL,
    ModelSpec,
    as_model_specs,
    parse_formula,
    referenced_variables,
)
from dcurve.data.io import read_observations_csv

__all__ = [
    "ALL_LABEL",
    "NONE_LABEL",
    "ModelSpec",
    "parse_formula",
    "as_model_specs",
    "referenced_variables",
    "check_variables",
    "complete_cases",
    "coerce_outcome",
    "validate_fitted_risks",
    "read_observations_csv",
]
