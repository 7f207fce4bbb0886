"""Helper functions for Parley."""

import os
import time
from pathlib import Path


def get_project_root() -> Path:
    """Return absolute project root path."""
    return Path(__file__).resolve().parents[3]


def get_config_dir() -> Path:
    """Return the config directory.

    Uses PARLEY_CONFIG_DIR when provided, otherwise defaults to project_root/config.
    """
    config_dir = os.getenv("PARLEY_CONFIG_DIR", "").strip()
    if config_dir:
        return Path(config_dir)
    return get_project_root() / "config"


def now_ms() -> int:
    """Current wall-clock time in integer milliseconds."""
    return int(time.time() * 1000)
