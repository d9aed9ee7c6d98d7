"""
Data Directory Management for Timer Start

This module defines where Timer Start keeps its files.
All paths are relative to DATA_ROOT (platform application-data directory by default).

Directory structure:
    <DATA_ROOT>/
    └── config.json    # User settings (see src.core.config)

Set TIMER_START_DATA_ROOT to use another directory (tests, development).
"""

import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

APP_NAME = "TimerStart"


def _get_default_data_root() -> Path:
    """Get the default data root path based on platform."""
    if sys.platform == "darwin":
        # macOS: Use Application Support
        return Path.home() / "Library" / "Application Support" / APP_NAME
    elif sys.platform == "win32":
        # Windows: Use AppData/Local
        appdata = os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local")
        return Path(appdata) / APP_NAME
    else:
        # Linux/other: Use XDG data home or ~/.local/share
        xdg_data = os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
        return Path(xdg_data) / APP_NAME


def get_data_root() -> Path:
    """Resolve the data root, honoring TIMER_START_DATA_ROOT."""
    override = os.environ.get("TIMER_START_DATA_ROOT")
    return Path(override) if override else _get_default_data_root()


DATA_ROOT: Path = get_data_root()


def ensure_data_root(root: Path | None = None) -> bool:
    """
    Ensure the data root exists.

    Args:
        root: Directory to create (defaults to DATA_ROOT)

    Returns:
        True if the directory was created, False if it already existed
    """
    root = root or DATA_ROOT
    created = not root.exists()
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create directory {root}: {e}")
        raise

    if created:
        logger.info(f"Created directory: {root}")
    return created


if __name__ == "__main__":
    import fire

    def show():
        """Show the configured data root."""
        return {"data_root": str(DATA_ROOT), "exists": DATA_ROOT.exists()}

    def init():
        """Create the data root."""
        return {"created": ensure_data_root()}

    fire.Fire({"show": show, "init": init})
