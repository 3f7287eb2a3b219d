"""Configuration loading for therapykit."""

import copy
import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from therapykit.config.types import DEFAULT_CONFIG, Config

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "THERAPYKIT_CONFIG"


class ConfigError(Exception):
    """Raised when a configuration or settings file cannot be read."""


def _get_user_config_path() -> Path:
    """Get path to the user config file.

    Returns:
        $THERAPYKIT_CONFIG if set, else ~/.config/therapykit/config.toml
        (under $XDG_CONFIG_HOME when that is set).
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)

    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "therapykit" / "config.toml"


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot read config from {path}: {e}") from e


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration with two-tier system.

    Priority (highest to lowest):
    1. User config file (explicit path, $THERAPYKIT_CONFIG, or ~/.config)
    2. Hardcoded DEFAULT_CONFIG

    Args:
        config_path: Optional explicit path. A missing explicit file is an
            error; a missing default-location file just means defaults.

    Returns:
        Configuration dictionary with both tiers merged.

    Raises:
        ConfigError: If the file exists but cannot be parsed, or an explicit
            path does not exist.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path is not None:
        logger.debug("load_config: explicit path=%s, exists=%s", config_path, config_path.exists())
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        return _deep_merge(config, _read_toml(config_path))

    user_path = _get_user_config_path()
    if user_path.exists():
        config = _deep_merge(config, _read_toml(user_path))
        logger.info("load_config: loaded user config from %s", user_path)
    else:
        logger.debug("load_config: no user config at %s, using defaults", user_path)

    return config
