"""
Configuration loading and merging logic.

Supports:
1. Loading from YAML files (with ``_base`` inheritance)
2. CLI argument overrides (dot-notation: e.g., bootstrap.n_boot=200)
3. Validation through the Pydantic schema
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from dcurve.config.defaults import (
    DEFAULT_BOOTSTRAP_CONFIG,
    DEFAULT_CV_CONFIG,
    DEFAULT_MODEL_CONFIG,
    DEFAULT_OUTPUT_CONFIG,
    DEFAULT_THRESHOLD_CONFIG,
)
from dcurve.config.schema import CurveConfig


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overlay* into *base* (overlay wins on leaf conflicts).

    Returns a new dict; neither input is mutated.
    """
    merged = base.copy()
    for key, value in overlay.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_yaml(file_path: str | Path) -> dict[str, Any]:
    """Load configuration from YAML file.

    Supports a ``_base`` key: if present, the referenced YAML file is loaded
    first and the current file's values are deep-merged on top.  The ``_base``
    path is resolved relative to the directory containing *file_path*.
    """
    file_path = Path(file_path).resolve()
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    with open(file_path) as f:
        config_dict = yaml.safe_load(f) or {}

    base_ref = config_dict.pop("_base", None)
    if base_ref is not None:
        base_path = (file_path.parent / base_ref).resolve()
        base_dict = load_yaml(base_path)
        config_dict = _deep_merge(base_dict, config_dict)

    return config_dict


def resolve_paths_relative_to_config(
    config_dict: dict[str, Any], config_file: Path
) -> dict[str, Any]:
    """
    Resolve relative ``infile`` / ``output.outdir`` paths against the config file directory.

    Args:
        config_dict: Configuration dictionary
        config_file: Path to the config file

    Returns:
        Config dict with relative paths resolved
    """
    config_dir = Path(config_file).resolve().parent
    resolved = dict(config_dict)

    def resolve_value(value: Any) -> Any:
        if isinstance(value, str) and not Path(value).is_absolute():
            return str(config_dir / value)
        return value

    if "infile" in resolved:
        resolved["infile"] = resolve_value(resolved["infile"])
    output = resolved.get("output")
    if isinstance(output, dict) and "outdir" in output:
        resolved["output"] = {**output, "outdir": resolve_value(output["outdir"])}

    return resolved


def apply_overrides(config_dict: dict[str, Any], overrides: list[str]) -> dict[str, Any]:
    """
    Apply CLI overrides to config dictionary.

    Supports dot-notation for nested keys:
        bootstrap.n_boot=200 -> config_dict['bootstrap']['n_boot'] = 200
        thresholds.values=0.05,0.1 -> config_dict['thresholds']['values'] = [0.05, 0.1]

    Args:
        config_dict: Base configuration dictionary
        overrides: List of "key=value" or "nested.key=value" strings

    Returns:
        Updated config dictionary
    """
    # Keys that should always be lists
    LIST_KEYS = {
        "values",
        "formula",
    }

    # Keys that should always be strings (not parsed as int/float)
    STRING_KEYS = {
        "prefix",
    }

    for override in overrides:
        if "=" not in override:
            raise ValueError(f"Invalid override format: {override}. Expected 'key=value'")

        key_path, value_str = override.split("=", 1)
        keys = key_path.split(".")

        target = config_dict
        for key in keys[:-1]:
            if key not in target:
                target[key] = {}
            target = target[key]

        final_key = keys[-1]
        value = _parse_value(
            value_str,
            force_list=final_key in LIST_KEYS,
            force_string=final_key in STRING_KEYS,
        )
        target[final_key] = value

    return config_dict


def _parse_value(value_str: str, force_list: bool = False, force_string: bool = False) -> Any:
    """
    Parse string value to appropriate Python type.

    Args:
        value_str: String to parse
        force_list: If True, always return a list (for comma-separated or single values)
        force_string: If True, always return a string (skip int/float parsing)
    """
    if force_string:
        return value_str

    # Boolean
    if value_str.lower() in ("true", "yes"):
        return [True] if force_list else True
    if value_str.lower() in ("false", "no"):
        return [False] if force_list else False

    # None
    if value_str.lower() in ("none", "null"):
        return None

    # List (comma-separated) or forced list
    if "," in value_str or force_list:
        values = [v.strip() for v in value_str.split(",")]
        return [_parse_scalar(v) for v in values if v]

    return _parse_scalar(value_str)


def _parse_scalar(value_str: str) -> Any:
    try:
        return int(value_str)
    except ValueError:
        pass
    try:
        return float(value_str)
    except ValueError:
        pass
    return value_str


def load_curve_config(
    config_file: str | Path | None = None,
    overrides: list[str] | None = None,
) -> CurveConfig:
    """
    Load decision curve configuration from file and CLI overrides.

    Args:
        config_file: Path to YAML config file (optional)
        overrides: List of CLI overrides in "key=value" format (optional)

    Returns:
        Validated CurveConfig instance
    """
    config_dict: dict[str, Any] = {
        "thresholds": DEFAULT_THRESHOLD_CONFIG.copy(),
        "bootstrap": DEFAULT_BOOTSTRAP_CONFIG.copy(),
        "cv": DEFAULT_CV_CONFIG.copy(),
        "model": DEFAULT_MODEL_CONFIG.copy(),
        "output": DEFAULT_OUTPUT_CONFIG.copy(),
    }

    if config_file is not None:
        config_file_path = Path(config_file)
        file_config = load_yaml(config_file_path)
        file_config = resolve_paths_relative_to_config(file_config, config_file_path)
        config_dict = _deep_merge(config_dict, file_config)

    if overrides:
        config_dict = apply_overrides(config_dict, overrides)

    try:
        return CurveConfig(**config_dict)
    except ValidationError as e:
        raise ValueError(f"Invalid decision curve configuration:\n{e}") from e


def save_config(config: CurveConfig, output_path: str | Path):
    """Save configuration to YAML file."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.model_dump(mode="json")

    with open(output_path, "w") as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)


def print_config_summary(config: CurveConfig, logger=None):
    """Print human-readable configuration summary."""
    lines = []
    lines.append("=" * 80)
    lines.append("Configuration Summary")
    lines.append("=" * 80)

    config_dict = config.model_dump()

    def format_dict(d, indent=0):
        result = []
        for key, value in d.items():
            if isinstance(value, dict):
                result.append(f"{'  ' * indent}{key}:")
                result.extend(format_dict(value, indent + 1))
            else:
                result.append(f"{'  ' * indent}{key}: {value}")
        return result

    lines.extend(format_dict(config_dict))
    lines.append("=" * 80)

    summary = "\n".join(lines)

    if logger:
        logger.info(summary)
    else:
        print(summary)
