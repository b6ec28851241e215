"""
Configuration schema for decision curve runs.

Defines Pydantic models for every tunable parameter of a curve computation:
threshold grid, bootstrap bands, cross-validation, model fitting and output.
"""

from pathlib import Path

import numpy as np
from pydantic import BaseModel, Field, field_validator, model_validator

from .defaults import EstimatorName, PlotMetric

# ============================================================================
# Threshold Grid
# ============================================================================


class ThresholdConfig(BaseModel):
    """High-risk threshold grid.

    Either an explicit list of ``values`` or an evenly spaced grid from
    ``min`` to ``max`` (inclusive) with spacing ``step``.
    """

    min: float = Field(default=0.0, ge=0.0, lt=1.0)
    max: float = Field(default=0.99, ge=0.0, lt=1.0)
    step: float = Field(default=0.01, gt=0.0)
    values: list[float] | None = None

    @field_validator("values")
    @classmethod
    def validate_values(cls, v):
        if v is None:
            return v
        if len(v) == 0:
            raise ValueError("values must contain at least one threshold")
        bad = [t for t in v if not (0.0 <= t < 1.0)]
        if bad:
            raise ValueError(f"thresholds must lie in [0, 1): {bad}")
        return v

    @model_validator(mode="after")
    def validate_range(self):
        if self.values is None and self.min > self.max:
            raise ValueError(f"min ({self.min}) > max ({self.max})")
        return self

    def to_array(self) -> np.ndarray:
        """Materialize the threshold grid."""
        if self.values is not None:
            return np.asarray(self.values, dtype=float)
        n = int(np.floor((self.max - self.min) / self.step + 1e-9)) + 1
        # Rounding keeps grid points such as 0.29 exact enough for labeling
        return np.round(self.min + self.step * np.arange(n), 10)


# ============================================================================
# Bootstrap and Cross-Validation
# ============================================================================


class BootstrapConfig(BaseModel):
    """Bootstrap confidence band settings.

    ``confidence_intervals=None`` disables the bands.
    """

    confidence_intervals: float | None = Field(default=0.95, gt=0.0, lt=1.0)
    n_boot: int = Field(default=500, ge=1)
    seed: int = Field(default=0, ge=0)
    n_jobs: int = Field(default=-1, ge=-1)

    @field_validator("confidence_intervals", mode="before")
    @classmethod
    def parse_none(cls, v):
        if isinstance(v, str) and v.strip().lower() in ("none", "na", ""):
            return None
        return v


class CVConfig(BaseModel):
    """K-fold cross-validation settings."""

    folds: int = Field(default=5, ge=2)
    random_state: int = 0
    n_jobs: int = Field(default=-1, ge=-1)


# ============================================================================
# Model Fitting
# ============================================================================


class ModelConfig(BaseModel):
    """Risk model fitted for each formula (ignored when risks are supplied)."""

    estimator: EstimatorName = "logistic"
    max_iter: int = Field(default=1000, ge=1)
    random_state: int = 0


# ============================================================================
# Output
# ============================================================================


class OutputConfig(BaseModel):
    """Where and how results are written."""

    outdir: Path = Field(default=Path("results"))
    prefix: str = ""
    plot: bool = False
    plot_metric: PlotMetric = "sNB"


# ============================================================================
# Top-level Configuration
# ============================================================================


class CurveConfig(BaseModel):
    """Complete configuration of a decision curve run."""

    infile: Path | None = None
    formula: list[str] = Field(default_factory=list)
    fitted_risk: bool = False

    thresholds: ThresholdConfig = Field(default_factory=ThresholdConfig)
    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)
    cv: CVConfig = Field(default_factory=CVConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("formula", mode="before")
    @classmethod
    def coerce_formula_list(cls, v):
        if isinstance(v, str):
            return [v]
        return v
