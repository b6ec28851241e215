"""
dcurve: Decision curve analysis for binary-outcome risk prediction instruments

Estimates net benefit and standardized net benefit across a sweep of risk
thresholds for one or more prediction models, compared against the
"treat all" and "treat none" strategies, with bootstrap confidence bands
and a k-fold cross-validated variant.
"""

# Enable pandas Copy-on-Write for pandas 3.0 compatibility and better memory efficiency
# See: https://pandas.pydata.org/docs/user_guide/copy_on_write.html
import pandas as pd

pd.options.mode.copy_on_write = True

__version__ = "1.0.0"
__license__ = "MIT"

from dcurve import (  # noqa: E402
    config,
    data,
    errors,
    evaluation,
    metrics,
    models,
    utils,
)
from dcurve.evaluation import (  # noqa: E402
    DecisionCurveResult,
    cv_decision_curve,
    decision_curve,
)

__all__ = [
    "__version__",
    "config",
    "data",
    "errors",
    "evaluation",
    "metrics",
    "models",
    "utils",
    "DecisionCurveResult",
    "decision_curve",
    "cv_decision_curve",
]
