"""
Model specifications for decision curves.

A model is described by an outcome column and one or more predictor columns,
written as an R-style formula string ``"outcome ~ x1 + x2"``. When
``fitted_risk`` is set, the single predictor column already holds predicted
risks and no model is fitted.
"""

from collections.abc import Sequence
from dataclasses import dataclass

# Labels reserved for the reference strategies
ALL_LABEL = "All"
NONE_LABEL = "None"


@dataclass(frozen=True)
class ModelSpec:
    """One candidate prediction model."""

    outcome: str
    predictors: tuple[str, ...]
    fitted_risk: bool = False
    label: str | None = None

    @property
    def formula(self) -> str:
        return f"{self.outcome} ~ {' + '.join(self.predictors)}"

    @property
    def name(self) -> str:
        """Model identifier used in the ``model`` column of the output."""
        return self.label if self.label is not None else self.formula

    @property
    def variables(self) -> list[str]:
        return [self.outcome, *self.predictors]


def parse_formula(
    formula: str,
    fitted_risk: bool = False,
    label: str | None = None,
) -> ModelSpec:
    """
    Parse ``"outcome ~ x1 + x2"`` into a ModelSpec.

    Args:
        formula: Formula string with exactly one ``~``
        fitted_risk: Whether the right-hand side is a column of supplied risks
        label: Optional display name (defaults to the normalized formula)

    Returns:
        ModelSpec

    Raises:
        ValueError: If the formula is malformed

    Example:
        >>> spec = parse_formula("Cancer ~ Age + Female")
        >>> spec.predictors
        ('Age', 'Female')
        >>> spec.name
        'Cancer ~ Age + Female'
    """
    if not isinstance(formula, str) or formula.count("~") != 1:
        raise ValueError(f"Formula must have the form 'outcome ~ predictors', got {formula!r}")

    lhs, rhs = (part.strip() for part in formula.split("~"))
    if not lhs or "+" in lhs:
        raise ValueError(f"Formula must have a single outcome on the left side: {formula!r}")

    predictors = tuple(tok.strip() for tok in rhs.split("+"))
    if not predictors or any(not p for p in predictors):
        raise ValueError(f"Formula has an empty predictor term: {formula!r}")
    if len(set(predictors)) != len(predictors):
        raise ValueError(f"Formula repeats a predictor: {formula!r}")
    if lhs in predictors:
        raise ValueError(f"Outcome '{lhs}' also appears as a predictor: {formula!r}")

    return ModelSpec(outcome=lhs, predictors=predictors, fitted_risk=fitted_risk, label=label)


def as_model_specs(
    formula: "str | ModelSpec | Sequence[str | ModelSpec]",
    fitted_risk: bool = False,
) -> list[ModelSpec]:
    """
    Normalize one or several formulas into a list of ModelSpec.

    All models must share one outcome column, and model names must be unique
    and distinct from the reference strategy labels.
    """
    items = [formula] if isinstance(formula, str | ModelSpec) else list(formula)
    if not items:
        raise ValueError("At least one formula is required")

    specs = [
        item if isinstance(item, ModelSpec) else parse_formula(item, fitted_risk=fitted_risk)
        for item in items
    ]

    outcomes = {s.outcome for s in specs}
    if len(outcomes) > 1:
        raise ValueError(f"All models must share one outcome, got {sorted(outcomes)}")

    names = [s.name for s in specs]
    if len(set(names)) != len(names):
        raise ValueError(f"Model names must be unique, got {names}")
    reserved = {ALL_LABEL, NONE_LABEL} & set(names)
    if reserved:
        raise ValueError(f"Model names {sorted(reserved)} are reserved for reference strategies")

    return specs


def referenced_variables(specs: Sequence[ModelSpec]) -> list[str]:
    """All columns referenced by the specs, in first-seen order."""
    seen: dict[str, None] = {}
    for spec in specs:
        for var in spec.variables:
            seen.setdefault(var, None)
    return list(seen)
