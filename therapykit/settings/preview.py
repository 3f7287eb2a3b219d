"""Preview therapy settings for therapykit.

Sample snapshot and view-models used by the command line preview and the
Tkinter window when no settings file is given, plus loading of settings
files (TOML) for previewing real profiles.
"""

from __future__ import annotations

import logging
import tomllib
from datetime import date
from pathlib import Path

from therapykit.config.loader import ConfigError
from therapykit.insulin.models import ExponentialInsulinModelPreset, InsulinModelSettings
from therapykit.settings.model import (
    UNITS_PER_HOUR,
    DailyValueSchedule,
    DoubleRange,
    GlucoseRangeSchedule,
    GlucoseThreshold,
    GlucoseUnit,
    Prescription,
    PumpSupportedIncrements,
    RepeatingScheduleValue,
    TherapySettings,
)
from therapykit.settings.view_model import PresentationMode, TherapySettingsViewModel

logger = logging.getLogger(__name__)

PREVIEW_SUPPORTED_BASAL_RATES = (0.2, 0.5, 0.75, 1.0)
PREVIEW_SUPPORTED_BOLUS_VOLUMES = (5.0, 10.0, 15.0)


def preview_therapy_settings() -> TherapySettings:
    """A partially configured profile: no carb ratios, empty sensitivities."""
    return TherapySettings(
        glucose_target_range_schedule=GlucoseRangeSchedule(
            unit=GlucoseUnit.MG_DL,
            items=(
                RepeatingScheduleValue(0, DoubleRange(80, 90)),
                RepeatingScheduleValue(1800, DoubleRange(90, 100)),
                RepeatingScheduleValue(3600, DoubleRange(100, 110)),
            ),
        ),
        pre_meal_target_range=DoubleRange(88, 99),
        workout_target_range=DoubleRange(99, 111),
        maximum_basal_rate_per_hour=5.0,
        maximum_bolus=4.0,
        suspend_threshold=GlucoseThreshold(GlucoseUnit.MG_DL, 60),
        insulin_sensitivity_schedule=DailyValueSchedule(
            items=(), unit=GlucoseUnit.MG_DL.sensitivity_unit,
        ),
        carb_ratio_schedule=None,
        basal_rate_schedule=DailyValueSchedule(
            items=(
                RepeatingScheduleValue(0, 0.2),
                RepeatingScheduleValue(1800, 0.75),
            ),
            unit=UNITS_PER_HOUR,
        ),
        insulin_model_settings=InsulinModelSettings.exponential(
            ExponentialInsulinModelPreset.HUMALOG_NOVOLOG_ADULT
        ),
    )


def preview_view_model(
    mode: PresentationMode,
    therapy_settings: TherapySettings | None = None,
) -> TherapySettingsViewModel:
    """View-model with the preview pump increments (and a prescription in the acceptance flow).

    Args:
        mode: Presentation mode to preview.
        therapy_settings: Snapshot to show. Defaults to preview_therapy_settings().
    """
    prescription = None
    if mode is PresentationMode.ACCEPTANCE_FLOW:
        prescription = Prescription("Dr. Sample Provider", date(2020, 7, 7))

    return TherapySettingsViewModel(
        mode=mode,
        therapy_settings=therapy_settings or preview_therapy_settings(),
        pump_supported_increments=PumpSupportedIncrements(
            basal_rates=PREVIEW_SUPPORTED_BASAL_RATES,
            bolus_volumes=PREVIEW_SUPPORTED_BOLUS_VOLUMES,
            maximum_basal_schedule_entry_count=24,
        ),
        prescription=prescription,
    )


def load_therapy_settings(path: Path) -> TherapySettings:
    """Load a therapy settings snapshot from a TOML file.

    Args:
        path: File with the tables understood by TherapySettings.from_config_dict().

    Returns:
        The loaded snapshot.

    Raises:
        ConfigError: If the file is missing, not valid TOML, or malformed.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot read therapy settings from {path}: {e}") from e

    try:
        settings = TherapySettings.from_config_dict(data)
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise ConfigError(f"Malformed therapy settings in {path}: {e}") from e

    logger.info("preview: loaded therapy settings, path=%s, fields=%s",
                path, sorted(data.keys()))
    return settings


__all__ = [
    "load_therapy_settings",
    "preview_therapy_settings",
    "preview_view_model",
]
