"""
Serialization utilities for results.
"""

import json
from pathlib import Path
from typing import Any

import numpy as np


def to_builtin(obj: Any) -> Any:
    """Convert numpy types to native Python types for JSON serialization.

    Non-finite floats become ``None`` so missing values stay missing in JSON.
    """
    if isinstance(obj, dict):
        return {k: to_builtin(v) for k, v in obj.items()}
    elif isinstance(obj, list | tuple):
        return [to_builtin(v) for v in obj]
    elif isinstance(obj, np.ndarray):
        return to_builtin(obj.tolist())
    elif isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating | float):
        return float(obj) if np.isfinite(obj) else None
    return obj


def save_json(obj: Any, path: str | Path, indent: int = 2):
    """Save object as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(to_builtin(obj), f, indent=indent, default=str)


def load_json(path: str | Path) -> Any:
    """Load JSON file."""
    with open(path) as f:
        return json.load(f)
