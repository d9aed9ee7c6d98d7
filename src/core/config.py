"""
Configuration Management for Timer Start

This module handles persistent configuration storage for Timer Start settings.
Settings are stored in a JSON file at <DATA_ROOT>/config.json

Configuration schema:
    {
        "display": {
            "prefer_24_hour_time": false
        },
        "locale": null,
        "timer": {
            "default_start": "5 minutes",
            "recent_capacity": 10
        }
    }
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

from src.core.paths import DATA_ROOT, ensure_data_root
from src.parsing.errors import TimerStartError
from src.parsing.locales import available_locales, is_supported_locale
from src.parsing.matcher import parse_timer_start

logger = logging.getLogger(__name__)

# Config file path
CONFIG_PATH: Path = DATA_ROOT / "config.json"

FALLBACK_LOCALE = "en-US"

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "display": {
        "prefer_24_hour_time": False,  # Default: 12-hour clock with am/pm
    },
    "locale": None,  # None = TIMER_START_LOCALE or en-US
    "timer": {
        "default_start": "5 minutes",
        "recent_capacity": 10,
    },
}

MAX_RECENT_CAPACITY = 100


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, preferring values from override."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config() -> dict[str, Any]:
    """
    Load configuration from file, merging with defaults.

    Returns:
        Complete configuration dictionary with defaults for missing values.
    """
    if not CONFIG_PATH.exists():
        logger.debug(f"Config file not found, using defaults: {CONFIG_PATH}")
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(CONFIG_PATH) as f:
            user_config = json.load(f)

        if not isinstance(user_config, dict):
            logger.error(f"Config file must contain a JSON object: {CONFIG_PATH}")
            return copy.deepcopy(DEFAULT_CONFIG)

        # Merge with defaults to ensure all keys exist
        config = _deep_merge(DEFAULT_CONFIG, user_config)
        logger.debug(f"Loaded config from {CONFIG_PATH}")
        return config
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in config file: {e}")
        return copy.deepcopy(DEFAULT_CONFIG)
    except OSError as e:
        logger.error(f"Failed to load config: {e}")
        return copy.deepcopy(DEFAULT_CONFIG)


def save_config(config: dict[str, Any]) -> bool:
    """
    Save configuration to file.

    Args:
        config: Configuration dictionary to save

    Returns:
        True if saved successfully, False otherwise
    """
    try:
        # Ensure parent directory exists
        ensure_data_root(CONFIG_PATH.parent)

        with open(CONFIG_PATH, "w") as f:
            json.dump(config, f, indent=2)

        logger.info(f"Saved config to {CONFIG_PATH}")
        return True
    except (OSError, TypeError) as e:
        logger.error(f"Failed to save config: {e}")
        return False


def get_config_value(key_path: str, default: Any = None) -> Any:
    """
    Get a configuration value by dot-separated path.

    Args:
        key_path: Dot-separated path like "timer.default_start"
        default: Default value if key doesn't exist

    Returns:
        The configuration value or default
    """
    value = load_config()
    for key in key_path.split("."):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def set_config_value(key_path: str, value: Any) -> bool:
    """
    Set a configuration value by dot-separated path.

    Args:
        key_path: Dot-separated path like "display.prefer_24_hour_time"
        value: Value to set

    Returns:
        True if saved successfully, False otherwise
    """
    config = load_config()
    keys = key_path.split(".")

    # Navigate to the parent of the target key
    current = config
    for key in keys[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]

    current[keys[-1]] = value

    return save_config(config)


def get_locale() -> str:
    """
    Get the locale used for parsing and display.

    Checks config first, then falls back to the TIMER_START_LOCALE
    environment variable, then to en-US.
    """
    locale = get_config_value("locale")
    if locale:
        return locale

    return os.environ.get("TIMER_START_LOCALE") or FALLBACK_LOCALE


def get_prefer_24_hour_time() -> bool:
    """Get the 24-hour display preference."""
    return bool(get_config_value("display.prefer_24_hour_time", False))


def get_timer_config() -> dict[str, Any]:
    """Get timer settings, or the defaults if the section is malformed."""
    timer = get_config_value("timer", DEFAULT_CONFIG["timer"])
    if not isinstance(timer, dict):
        logger.warning(f"Invalid timer config {timer!r}, using defaults")
        return copy.deepcopy(DEFAULT_CONFIG["timer"])
    return timer


def is_valid_recent_capacity(capacity: Any) -> bool:
    """Whether capacity is an int (not a bool) between 1 and MAX_RECENT_CAPACITY."""
    return isinstance(capacity, int) and not isinstance(capacity, bool) and 1 <= capacity <= MAX_RECENT_CAPACITY


def validate_config(config: dict[str, Any]) -> list[str]:
    """
    Validate configuration values.

    Args:
        config: Configuration dictionary to validate

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    # Validate locale
    locale = config.get("locale")
    if locale is not None:
        if not isinstance(locale, str):
            errors.append(f"locale must be a string, got {type(locale).__name__}")
        elif not is_supported_locale(locale):
            errors.append(f"Unsupported locale: {locale}. Must be one of {available_locales()}")

    # Sections must be objects
    sections = {}
    for name in ("display", "timer"):
        section = config.get(name, {})
        if not isinstance(section, dict):
            errors.append(f"{name} must be an object, got {type(section).__name__}")
            section = {}
        sections[name] = section

    # Validate display preference
    prefer_24_hour = sections["display"].get("prefer_24_hour_time")
    if prefer_24_hour is not None and not isinstance(prefer_24_hour, bool):
        errors.append(f"prefer_24_hour_time must be a boolean, got {type(prefer_24_hour).__name__}")

    # Validate recent capacity
    capacity = sections["timer"].get("recent_capacity")
    if capacity is not None and not is_valid_recent_capacity(capacity):
        errors.append(f"Invalid recent_capacity: {capacity}. Must be 1-{MAX_RECENT_CAPACITY}")

    # Validate default start against the configured locale
    default_start = sections["timer"].get("default_start")
    if default_start is not None and not isinstance(default_start, str):
        errors.append(f"default_start must be a string, got {type(default_start).__name__}")
    elif default_start is not None:
        parse_locale = locale if isinstance(locale, str) and locale else FALLBACK_LOCALE
        try:
            parse_timer_start(default_start, parse_locale, bool(prefer_24_hour))
        except TimerStartError as e:
            errors.append(f"Invalid default_start: {default_start!r} ({e})")

    return errors


def reset_to_defaults() -> bool:
    """
    Reset configuration to default values.

    Returns:
        True if saved successfully
    """
    return save_config(copy.deepcopy(DEFAULT_CONFIG))


if __name__ == "__main__":
    import fire

    def show():
        """Show current configuration."""
        return load_config()

    def get(key_path: str):
        """Get a config value by path (e.g., 'timer.default_start')."""
        return get_config_value(key_path)

    def set_value(key_path: str, value: Any):
        """Set a config value by path."""
        return set_config_value(key_path, value)

    def reset():
        """Reset to default configuration."""
        return reset_to_defaults()

    def validate():
        """Validate current configuration."""
        errors = validate_config(load_config())
        return {"valid": len(errors) == 0, "errors": errors}

    fire.Fire(
        {
            "show": show,
            "get": get,
            "set": set_value,
            "reset": reset,
            "validate": validate,
        }
    )
