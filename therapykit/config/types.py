"""Configuration type definitions and defaults for therapykit."""

from typing import TypedDict


class PresentationConfig(TypedDict):
    """Therapy settings screen settings."""

    mode: str  # "acceptance_flow", "settings" or "legacy_settings"


class PercentageConfig(TypedDict):
    """Percentage text field settings."""

    maximum_fraction_digits: int


class LoggingConfig(TypedDict, total=False):
    """Logging settings."""

    level: str  # DEBUG, INFO, WARNING, ERROR
    file: str  # Log file path; empty string disables file logging


class Config(TypedDict, total=False):
    """Full application configuration."""

    presentation: PresentationConfig
    percentage: PercentageConfig
    logging: LoggingConfig


DEFAULT_CONFIG: Config = {
    "presentation": {
        "mode": "settings",
    },
    "percentage": {
        "maximum_fraction_digits": 1,
    },
    "logging": {
        "level": "INFO",
        "file": "therapykit.log",
    },
}
