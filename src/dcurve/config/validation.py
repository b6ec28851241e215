"""
Configuration sanity checks.

Flags settings that are valid but likely unintended, with a strictness level
deciding whether they warn, raise, or pass silently.
"""

import warnings

from dcurve.config.schema import CurveConfig


class ConfigValidationError(Exception):
    """Raised when configuration validation fails in strict mode."""

    pass


class ConfigValidationWarning(UserWarning):
    """Warning for potential configuration issues."""

    pass


def validate_curve_config(config: CurveConfig, strictness: str = "warn"):
    """
    Validate a curve configuration for potential issues.

    Args:
        config: CurveConfig instance
        strictness: "off", "warn", or "error"
    """
    issues = []

    if config.bootstrap.confidence_intervals is not None and config.bootstrap.n_boot < 100:
        issues.append(
            f"bootstrap.n_boot={config.bootstrap.n_boot} is small; "
            "confidence bands will be unstable."
        )

    n_thresholds = len(config.thresholds.to_array())
    if n_thresholds > 10000:
        issues.append(
            f"Decision curves will be computed at {n_thresholds} thresholds. "
            "This may be slow. Consider a larger step size."
        )

    if config.fitted_risk and config.model.estimator != "logistic":
        issues.append(
            f"fitted_risk=True but model.estimator='{config.model.estimator}'. "
            "No model is fitted when risks are supplied; the estimator is ignored."
        )

    if config.fitted_risk and any(
        len(f.split("~", 1)[-1].split("+")) > 1 for f in config.formula
    ):
        issues.append("fitted_risk=True requires a single risk column on each formula's right side.")

    _handle_issues(issues, strictness, "Decision curve configuration")


def _handle_issues(issues: list[str], strictness: str, context: str):
    """Handle validation issues based on strictness level."""
    if not issues:
        return

    message = f"{context} issues:\n" + "\n".join(f"  - {issue}" for issue in issues)

    if strictness == "error":
        raise ConfigValidationError(message)
    elif strictness == "warn":
        warnings.warn(message, ConfigValidationWarning, stacklevel=3)
    # strictness == "off": do nothing
