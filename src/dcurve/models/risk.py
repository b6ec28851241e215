"""
Risk assignment for candidate models.

Produces a predicted probability of outcome = 1 for every evaluation row,
either by fitting a classifier on a training subset, by passing through a
column of supplied risks, or by the constant risks of the reference
strategies ("All" = 1, "None" = 0).
"""

import logging
from typing import Union

import numpy as np
import pandas as pd
from sklearn.base import ClassifierMixin, clone

from ..data.filters import coerce_outcome, validate_fitted_risks
from ..data.formula import ALL_LABEL, NONE_LABEL, ModelSpec
from ..errors import InvalidRiskInput
from .registry import build_estimator

logger = logging.getLogger(__name__)

# A candidate is a model spec or one of the reference strategy labels
Candidate = Union[ModelSpec, str]


def candidate_name(candidate: Candidate) -> str:
    """Value of the ``model`` column for a candidate."""
    return candidate.name if isinstance(candidate, ModelSpec) else str(candidate)


def with_reference_strategies(specs: list[ModelSpec]) -> list[Candidate]:
    """Candidates in output order: models, then "All", then "None"."""
    return [*specs, ALL_LABEL, NONE_LABEL]


def check_fitted_risk_spec(spec: ModelSpec, data: pd.DataFrame) -> None:
    """
    Validate a fitted-risk spec against the data.

    Raises:
        InvalidRiskInput: More than one risk column, or values outside [0, 1]
    """
    if len(spec.predictors) != 1:
        raise InvalidRiskInput(
            "When fitted_risk=True, there can only be one term (denoting the fitted "
            f"risks) on the right hand side of the formula, got {spec.formula!r}."
        )
    validate_fitted_risks(data[spec.predictors[0]], name=spec.predictors[0])


def design_matrix(
    train: pd.DataFrame,
    evaluate: pd.DataFrame,
    predictors: tuple[str, ...],
) -> tuple[np.ndarray, np.ndarray]:
    """
    Numeric design matrices for training and evaluation rows.

    Non-numeric predictors are one-hot encoded with the first level dropped;
    evaluation columns are aligned to the training levels (unseen levels
    encode as all zeros).
    """
    x_train = pd.get_dummies(train.loc[:, list(predictors)], drop_first=True, dtype=float)
    x_eval = pd.get_dummies(evaluate.loc[:, list(predictors)], dtype=float)
    x_eval = x_eval.reindex(columns=x_train.columns, fill_value=0.0)
    return x_train.to_numpy(dtype=float), x_eval.to_numpy(dtype=float)


def fit_predict_risk(
    spec: ModelSpec,
    train: pd.DataFrame,
    evaluate: pd.DataFrame,
    estimator: ClassifierMixin | None = None,
) -> np.ndarray:
    """
    Fit ``estimator`` on ``train`` and predict P(outcome = 1) for ``evaluate``.

    A training subset holding a single outcome class cannot be fit; the
    returned risks are then all NaN so the affected metrics are reported as
    missing.

    Args:
        spec: Model spec (outcome and predictor columns)
        train: Training rows
        evaluate: Rows to score
        estimator: Unfitted sklearn classifier (default: unpenalized logistic regression)

    Returns:
        Float array of predicted risks, one per evaluation row
    """
    y_train = coerce_outcome(train[spec.outcome], name=spec.outcome)
    if np.unique(y_train).size < 2:
        logger.debug(f"Cannot fit {spec.name!r}: training rows hold a single outcome class")
        return np.full(len(evaluate), np.nan)

    model = clone(estimator) if estimator is not None else build_estimator("logistic")
    x_train, x_eval = design_matrix(train, evaluate, spec.predictors)
    model.fit(x_train, y_train)

    pos_col = list(model.classes_).index(1)
    return model.predict_proba(x_eval)[:, pos_col].astype(float)


def assign_risk(
    candidate: Candidate,
    train: pd.DataFrame,
    evaluate: pd.DataFrame,
    estimator: ClassifierMixin | None = None,
) -> np.ndarray:
    """
    Risk assignment for one candidate over the evaluation rows.

    Args:
        candidate: ModelSpec, or "All" / "None"
        train: Training rows (unused for fitted risks and reference strategies)
        evaluate: Rows to score
        estimator: Classifier used when a model must be fitted

    Returns:
        Float array of risks in [0, 1] (NaN if the model could not be fit)
    """
    n = len(evaluate)
    if candidate == ALL_LABEL:
        return np.ones(n)
    if candidate == NONE_LABEL:
        return np.zeros(n)
    if not isinstance(candidate, ModelSpec):
        raise ValueError(f"Unknown candidate model: {candidate!r}")

    if candidate.fitted_risk:
        return evaluate[candidate.predictors[0]].to_numpy(dtype=float)
    return fit_predict_risk(candidate, train, evaluate, estimator=estimator)
