"""Shared pytest fixtures for therapykit tests.

This module provides reusable fixtures for:
- Therapy settings snapshots (full, partial, empty)
- View-models in each presentation mode
- Configuration files and cache reset
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from therapykit.insulin import ExponentialInsulinModelPreset, InsulinModelSettings
from therapykit.settings.model import (
    GRAMS_PER_UNIT,
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


# ============================================================================
# Therapy Settings Fixtures
# ============================================================================


@pytest.fixture
def full_settings() -> TherapySettings:
    """Snapshot with every therapy setting configured.

    Returns:
        TherapySettings in mg/dL with two-entry schedules.
    """
    return TherapySettings(
        glucose_target_range_schedule=GlucoseRangeSchedule(
            unit=GlucoseUnit.MG_DL,
            items=(
                RepeatingScheduleValue(0, DoubleRange(100, 110)),
                RepeatingScheduleValue(7 * 3600, DoubleRange(90, 100)),
            ),
        ),
        pre_meal_target_range=DoubleRange(80, 90),
        workout_target_range=DoubleRange(140, 160),
        maximum_basal_rate_per_hour=3.0,
        maximum_bolus=10.0,
        suspend_threshold=GlucoseThreshold(GlucoseUnit.MG_DL, 70),
        insulin_sensitivity_schedule=DailyValueSchedule(
            items=(
                RepeatingScheduleValue(0, 45),
                RepeatingScheduleValue(12 * 3600, 50),
            ),
            unit="mg/dL/U",
        ),
        carb_ratio_schedule=DailyValueSchedule(
            items=(
                RepeatingScheduleValue(0, 10),
                RepeatingScheduleValue(6 * 3600, 8),
                RepeatingScheduleValue(18 * 3600, 12),
            ),
            unit=GRAMS_PER_UNIT,
        ),
        basal_rate_schedule=DailyValueSchedule(
            items=(
                RepeatingScheduleValue(0, 0.8),
                RepeatingScheduleValue(4 * 3600, 1.1),
            ),
            unit=UNITS_PER_HOUR,
        ),
        insulin_model_settings=InsulinModelSettings.exponential(
            ExponentialInsulinModelPreset.FIASP
        ),
    )


@pytest.fixture
def pump_increments() -> PumpSupportedIncrements:
    return PumpSupportedIncrements(
        basal_rates=(0.05, 0.1, 0.5, 1.0, 1.5),
        bolus_volumes=(0.05, 0.1, 1.0),
    )


@pytest.fixture
def prescription() -> Prescription:
    return Prescription(provider_name="Dr. Jane Smith", date_prescribed=date(2020, 7, 7))


@pytest.fixture
def make_view_model(full_settings, pump_increments):
    """Factory for TherapySettingsViewModel with the full settings by default.

    Returns:
        Callable(mode, **overrides) -> TherapySettingsViewModel.
    """

    def _make(mode: PresentationMode, **overrides) -> TherapySettingsViewModel:
        kwargs = {
            "therapy_settings": full_settings,
            "pump_supported_increments": pump_increments,
        }
        kwargs.update(overrides)
        return TherapySettingsViewModel(mode, **kwargs)

    return _make


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def config_file(tmp_path) -> Path:
    """Create a temporary config.toml file.

    Returns:
        Path to temporary config file.
    """
    path = tmp_path / "config.toml"
    path.write_text(
        """
[presentation]
mode = "legacy_settings"

[percentage]
maximum_fraction_digits = 2

[logging]
level = "DEBUG"
file = ""
""",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def settings_file(tmp_path) -> Path:
    """Create a temporary therapy settings TOML file."""
    path = tmp_path / "therapy.toml"
    path.write_text(
        """
[glucose_target_range]
unit = "mmol/L"
items = [
    { start_time = 0, min = 5.5, max = 6.0 },
    { start_time = 21600, min = 5.0, max = 5.5 },
]

[correction_range_overrides]
pre_meal = [4.5, 5.0]

[delivery_limits]
maximum_basal_rate_per_hour = 2.5
maximum_bolus = 8.0

[suspend_threshold]
value = 4.0

[basal_rate]
items = [{ start_time = 0, value = 0.6 }]

[carb_ratio]
items = [{ start_time = 0, value = 12 }, { start_time = 43200, value = 15 }]

[insulin_model]
type = "walsh"
action_duration = 300
""",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def reset_config_cache():
    """Reset the config cache before and after each test."""
    from therapykit.config import clear_config_cache

    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def isolated_config_home(tmp_path, monkeypatch) -> Path:
    """Point the default config location at an empty temp directory."""
    monkeypatch.delenv("THERAPYKIT_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    return tmp_path / "xdg" / "therapykit" / "config.toml"
