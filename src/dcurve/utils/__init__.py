"""Utility functions for dcurve."""

from dcurve.utils.logging import log_section, setup_logger, verbosity_to_level
from dcurve.utils.random import read_seed_global
from dcurve.utils.serialization import load_json, save_json, to_builtin

__all__ = [
    "setup_logger",
    "log_section",
    "verbosity_to_level",
    "read_seed_global",
    "save_json",
    "load_json",
    "to_builtin",
]
