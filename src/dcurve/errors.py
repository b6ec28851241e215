"""
Error and warning taxonomy for decision curve computations.

Fatal conditions raise a ``DecisionCurveError`` subclass and abort the whole
computation. Non-fatal conditions are reported through ``warnings.warn`` with
one of the warning categories below; the computation continues.
"""


class DecisionCurveError(ValueError):
    """Base class for fatal decision curve errors."""

    pass


class MissingVariable(DecisionCurveError):
    """Raised when a formula variable is absent from the data."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"variable(s) {', '.join(self.missing)} not found in 'data'")


class InvalidRiskInput(DecisionCurveError):
    """Raised when fitted risks are malformed (several predictors or values outside [0, 1])."""

    pass


class InvalidThresholds(DecisionCurveError):
    """Raised when a threshold lies outside [0, 1)."""

    pass


class InvalidOutcome(DecisionCurveError):
    """Raised when the outcome column is not coded 0/1."""

    pass


class IncompleteDataWarning(UserWarning):
    """Rows with missing values were removed before analysis."""

    pass


class UndefinedMetricWarning(UserWarning):
    """A metric has a zero denominator for some cells and is reported as missing."""

    pass
