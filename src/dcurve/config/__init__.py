"""Configuration management for dcurve."""

from dcurve.config.defaults import (
    DEFAULT_BOOTSTRAP_CONFIG,
    DEFAULT_CV_CONFIG,
    DEFAULT_MODEL_CONFIG,
    DEFAULT_OUTPUT_CONFIG,
    DEFAULT_THRESHOLD_CONFIG,
    VALID_ESTIMATORS,
    VALID_PLOT_METRICS,
)
from dcurve.config.loader import (
    apply_overrides,
    load_curve_config,
    load_yaml,
    print_config_summary,
    save_config,
)
from dcurve.config.schema import (
    BootstrapConfig,
    CurveConfig,
    CVConfig,
    ModelConfig,
    OutputConfig,
    ThresholdConfig,
)
from dcurve.config.validation import (
    ConfigValidationError,
    ConfigValidationWarning,
    validate_curve_config,
)

__all__ = [
    "VALID_ESTIMATORS",
    "VALID_PLOT_METRICS",
    "DEFAULT_THRESHOLD_CONFIG",
    "DEFAULT_BOOTSTRAP_CONFIG",
    "DEFAULT_CV_CONFIG",
    "DEFAULT_MODEL_CONFIG",
    "DEFAULT_OUTPUT_CONFIG",
    "load_curve_config",
    "load_yaml",
    "apply_overrides",
    "save_config",
    "print_config_summary",
    "CurveConfig",
    "ThresholdConfig",
    "BootstrapConfig",
    "CVConfig",
    "ModelConfig",
    "OutputConfig",
    "ConfigValidationError",
    "ConfigValidationWarning",
    "validate_curve_config",
]
