"""Estimator registry for risk models.

This module provides:
- Model instantiation by name (logistic regression, ridge logistic, random forest)
- sklearn version compatibility handling

References:
- scikit-learn 1.8+ deprecates penalty= in LogisticRegression (use C=np.inf / l1_ratio=)
"""

import re
from typing import Tuple

import numpy as np
import sklearn
from sklearn.base import ClassifierMixin
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression

from ..config.defaults import VALID_ESTIMATORS


# ----------------------------
# sklearn version compatibility
# ----------------------------
def _sklearn_version_tuple(ver: str) -> Tuple[int, int, int]:
    """Parse sklearn version string (robust to rc/dev suffixes)."""
    nums = re.findall(r"\d+", ver)
    nums = (nums + ["0", "0", "0"])[:3]
    return (int(nums[0]), int(nums[1]), int(nums[2]))


SKLEARN_VER = _sklearn_version_tuple(getattr(sklearn, "__version__", "0.0.0"))


# ----------------------------
# Model builders
# ----------------------------
def build_logistic_regression(
    max_iter: int = 1000,
    tol: float = 1e-6,
    random_state: int = 0,
    C: float | None = None,
) -> LogisticRegression:
    """Build Logistic Regression estimator (sklearn 1.8+ compatible).

    With ``C=None`` the fit is unpenalized, matching a binomial GLM with
    logit link. A finite ``C`` gives an L2-penalized fit.

    Args:
        max_iter: Maximum iterations
        tol: Convergence tolerance
        random_state: Random seed
        C: Inverse regularization strength (None for no penalty)

    Returns:
        Configured LogisticRegression estimator
    """
    lr_common = {
        "solver": "lbfgs",
        "max_iter": int(max_iter),
        "tol": float(tol),
        "random_state": int(random_state),
    }

    if C is not None:
        return LogisticRegression(C=float(C), **lr_common)

    # sklearn >=1.8 deprecates penalty=, no penalty is C=np.inf
    if SKLEARN_VER >= (1, 8, 0):
        return LogisticRegression(C=np.inf, **lr_common)
    else:
        return LogisticRegression(penalty=None, **lr_common)


def build_random_forest(
    n_estimators: int = 500,
    min_samples_leaf: int = 5,
    random_state: int = 0,
    n_jobs: int = 1,
) -> RandomForestClassifier:
    """Build Random Forest estimator.

    Leaves of at least ``min_samples_leaf`` observations keep predicted
    probabilities away from hard 0/1 votes.
    """
    return RandomForestClassifier(
        n_estimators=int(n_estimators),
        min_samples_leaf=int(min_samples_leaf),
        random_state=int(random_state),
        n_jobs=n_jobs,
    )


def build_estimator(
    name: str = "logistic",
    max_iter: int = 1000,
    random_state: int = 0,
) -> ClassifierMixin:
    """
    Instantiate a probabilistic classifier by registry name.

    Args:
        name: One of VALID_ESTIMATORS
        max_iter: Iteration cap for iterative solvers
        random_state: Random seed

    Returns:
        Unfitted sklearn classifier exposing predict_proba

    Raises:
        ValueError: If name is unknown
    """
    if name == "logistic":
        return build_logistic_regression(max_iter=max_iter, random_state=random_state)
    if name == "logistic_l2":
        return build_logistic_regression(max_iter=max_iter, random_state=random_state, C=1.0)
    if name == "random_forest":
        return build_random_forest(random_state=random_state)
    raise ValueError(f"Unknown estimator '{name}'. Valid: {', '.join(VALID_ESTIMATORS)}")
