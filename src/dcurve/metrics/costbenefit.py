"""
Cost:benefit labels for risk thresholds.

A threshold ``t`` implies the odds ``t / (1 - t)``: the number of false
positives one is willing to accept per true positive. The label renders those
odds as a reduced integer ratio ``p:q``.
"""

from fractions import Fraction

import numpy as np

# Largest denominator used when approximating the odds by a fraction
MAX_DENOMINATOR = 2000


def threshold_to_costbenefit(thresholds) -> np.ndarray:
    """Odds t / (1 - t) for each threshold."""
    t = np.asarray(thresholds, dtype=float)
    return t / (1.0 - t)


def costbenefit_label(threshold: float, max_denominator: int = MAX_DENOMINATOR) -> str:
    """
    Render the odds implied by a threshold as ``p:q`` in lowest terms.

    Args:
        threshold: Risk threshold in [0, 1)
        max_denominator: Bound on ``q`` for the rational approximation

    Returns:
        Label string, e.g. "1:3" for t = 0.25, "4:1" for t = 0.8

    Raises:
        ValueError: If threshold is outside [0, 1)

    Examples:
        >>> costbenefit_label(0.25)
        '1:3'
        >>> costbenefit_label(0.5)
        '1:1'
        >>> costbenefit_label(0.0)
        '0:1'
    """
    t = float(threshold)
    if not (0.0 <= t < 1.0):
        raise ValueError(f"threshold must lie in [0, 1), got {t}")

    frac = Fraction(t / (1.0 - t)).limit_denominator(max_denominator)
    return f"{frac.numerator}:{frac.denominator}"


def costbenefit_labels(thresholds, max_denominator: int = MAX_DENOMINATOR) -> list[str]:
    """Vector form of ``costbenefit_label``."""
    return [costbenefit_label(t, max_denominator) for t in np.asarray(thresholds, dtype=float)]
