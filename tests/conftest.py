"""Shared test fixtures."""

from datetime import datetime
from pathlib import Path

import pytest

import src.core.config as config_module


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config file at a temporary directory and clear locale overrides."""
    config_path = tmp_path / "config.json"
    monkeypatch.setattr(config_module, "CONFIG_PATH", config_path)
    monkeypatch.delenv("TIMER_START_LOCALE", raising=False)
    return config_path


@pytest.fixture
def now() -> datetime:
    """Reference instant: Tuesday 10 March 2026, 14:00."""
    return datetime(2026, 3, 10, 14, 0, 0)
