"""
Configuration Module
====================
Dict-based configuration for halmock.

Configuration is a plain dictionary. The active configuration is process
wide and is read by the expectation engine each time it needs a setting,
so a test suite can adjust it once in conftest.py.

Keys:
    verify_on_release: Raise MissingDoneError when the last handle on an
        unchecked queue is garbage collected (default: True)
    allow_real_delays: Honour DelayTransaction.wait() by really sleeping
        (default: True)
    log_level: Level of the "halmock" logger (default: "WARNING")

Functions:
    load_mock_config: Load configuration from a JSON file
    validate_config: Basic configuration validation
    configure: Update the active configuration
    get_config: Read the active configuration
    reset_config: Restore defaults

Module: halmock.config
Version: 1.0.0
"""

import json
import logging

from halmock.core.constants import DEFAULT_LOG_LEVEL
from halmock.utils.log import set_log_level


# Default values
DEFAULT_VERIFY_ON_RELEASE = True
DEFAULT_ALLOW_REAL_DELAYS = True

_DEFAULTS = {
    'verify_on_release': DEFAULT_VERIFY_ON_RELEASE,
    'allow_real_delays': DEFAULT_ALLOW_REAL_DELAYS,
    'log_level': DEFAULT_LOG_LEVEL,
}

_TYPES = {
    'verify_on_release': bool,
    'allow_real_delays': bool,
    'log_level': str,
}

# JSON files use camelCase keys
_FILE_KEYS = {
    'verifyOnRelease': 'verify_on_release',
    'allowRealDelays': 'allow_real_delays',
    'logLevel': 'log_level',
}

_active = dict(_DEFAULTS)


def default_config():
    """Return a fresh copy of the default configuration."""
    return dict(_DEFAULTS)


def load_mock_config(path="halmock.json"):
    """
    Load configuration from a JSON file.

    Args:
        path: Path to the JSON file (default: "halmock.json")

    Returns:
        Dictionary with every configuration key; missing keys take defaults

    Raises:
        OSError: If the file doesn't exist
        ValueError: If the JSON is malformed or the configuration is invalid

    Example halmock.json:
        {
            "verifyOnRelease": true,
            "allowRealDelays": false,
            "logLevel": "DEBUG"
        }
    """
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise OSError(f"Could not load halmock settings from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Invalid configuration in {path}: expected a JSON object")

    config = default_config()
    for file_key, value in data.items():
        if file_key not in _FILE_KEYS:
            raise ValueError(f"Unknown configuration key in {path}: {file_key}")
        config[_FILE_KEYS[file_key]] = value

    validate_config(config)
    return config


def validate_config(config):
    """
    Validate a configuration dictionary.

    Args:
        config: Configuration dict (may be partial)

    Returns:
        True if valid

    Raises:
        ValueError: On unknown keys, wrong value types or unknown log levels
    """
    for key, value in config.items():
        if key not in _TYPES:
            raise ValueError(f"Unknown configuration key: {key}")
        if not isinstance(value, _TYPES[key]):
            raise ValueError(
                f"{key} must be {_TYPES[key].__name__}, got {type(value).__name__}"
            )

    level = config.get('log_level')
    if level is not None and not isinstance(logging.getLevelName(level.upper()), int):
        raise ValueError(f"Unknown log level: {level}")

    return True


def configure(**overrides):
    """
    Update the active configuration.

    Args:
        **overrides: Keys to change

    Returns:
        Copy of the resulting active configuration

    Example:
        configure(allow_real_delays=False, log_level="DEBUG")
    """
    validate_config(overrides)
    _active.update(overrides)
    if 'log_level' in overrides:
        set_log_level(overrides['log_level'])
    return dict(_active)


def get_config(key=None):
    """
    Read the active configuration.

    Args:
        key: Optional single key to read

    Returns:
        The value for key, or a copy of the whole configuration
    """
    if key is not None:
        return _active[key]
    return dict(_active)


def reset_config():
    """Restore the default configuration."""
    _active.clear()
    _active.update(_DEFAULTS)
    set_log_level(DEFAULT_LOG_LEVEL)
