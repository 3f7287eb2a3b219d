"""Process-wide configuration for therapykit.

The command line picks the config file once (``-c`` or the default search)
with set_config_path(); everything after that reads the same merged config
through get_config().
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from therapykit.config.types import Config

logger = logging.getLogger(__name__)

_cached_config: Config | None = None
_config_path: Path | None = None
_config_lock = threading.Lock()


def set_config_path(path: Path | None) -> None:
    """Choose the config file get_config() loads.

    Args:
        path: Explicit config file, or None for the default search
            ($THERAPYKIT_CONFIG, then the XDG location).
    """
    global _cached_config, _config_path
    with _config_lock:
        logger.debug("config: path set, path=%s", path)
        _config_path = path
        _cached_config = None


def get_config() -> Config:
    """Get the merged config, loading it on first use (thread-safe).

    Returns:
        Configuration dictionary with defaults applied.

    Raises:
        ConfigError: If the selected file is missing or invalid.
    """
    global _cached_config
    with _config_lock:
        if _cached_config is None:
            from therapykit.config.loader import load_config

            _cached_config = load_config(_config_path)
            logger.debug("config: loaded, path=%s", _config_path)
        return _cached_config


def clear_config_cache() -> None:
    """Forget the loaded config and the selected path (for testing)."""
    global _cached_config, _config_path
    with _config_lock:
        _cached_config = None
        _config_path = None
