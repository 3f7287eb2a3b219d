"""Configuration loading and caching for therapykit."""

from therapykit.config.types import (
    Config,
    DEFAULT_CONFIG,
    LoggingConfig,
    PercentageConfig,
    PresentationConfig,
)
from therapykit.config.loader import (
    CONFIG_ENV_VAR,
    ConfigError,
    _deep_merge,
    _get_user_config_path,
    load_config,
)
from therapykit.config.cache import clear_config_cache, get_config, set_config_path

__all__ = [
    # Types
    "Config",
    "DEFAULT_CONFIG",
    "LoggingConfig",
    "PercentageConfig",
    "PresentationConfig",
    # Loading
    "CONFIG_ENV_VAR",
    "ConfigError",
    "load_config",
    "_deep_merge",
    "_get_user_config_path",
    # Cache
    "get_config",
    "set_config_path",
    "clear_config_cache",
]
