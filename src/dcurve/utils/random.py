"""
Seed resolution for reproducible runs.

Bootstrap draws and fold assignment take explicit seeds. The SEED_GLOBAL
environment variable supplies that seed for command-line runs that do not
pass ``--seed``.
"""

import logging
import os

logger = logging.getLogger(__name__)

SEED_ENV_VAR = "SEED_GLOBAL"
MAX_SEED = 2**32 - 1


def read_seed_global(environ=None) -> int | None:
    """
    Parse SEED_GLOBAL from the environment.

    Args:
        environ: Mapping to read from (default: os.environ)

    Returns:
        The seed, or None if SEED_GLOBAL is unset, blank, non-integer or
        outside [0, 2^32-1].

    Examples:
        >>> read_seed_global({"SEED_GLOBAL": " 42 "})
        42
        >>> read_seed_global({}) is None
        True
    """
    environ = os.environ if environ is None else environ
    raw = environ.get(SEED_ENV_VAR, "").strip()
    if not raw:
        return None

    try:
        seed = int(raw)
    except ValueError:
        logger.warning(f"{SEED_ENV_VAR}='{raw}' is not an integer; ignoring")
        return None

    if not 0 <= seed <= MAX_SEED:
        logger.warning(f"{SEED_ENV_VAR}={seed} outside [0, {MAX_SEED}]; ignoring")
        return None
    return seed
