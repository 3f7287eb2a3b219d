"""Therapy settings view-model for therapykit.

Owns the therapy settings snapshot shown by the settings screen and its
editors. Every save replaces the owned snapshot with an updated copy and
returns it, so editors receive their context explicitly instead of sharing
a global settings object.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from therapykit.settings.model import (
    DailyValueSchedule,
    DoubleRange,
    GlucoseRangeSchedule,
    GlucoseThreshold,
    Prescription,
    PumpSupportedIncrements,
    SupportedInsulinModelSettings,
    TherapySettings,
)
from therapykit.insulin.models import InsulinModelSettings
from therapykit.settings.registry import TherapySetting

logger = logging.getLogger(__name__)


class PresentationMode(Enum):
    """How the therapy settings screen is being presented.

    ACCEPTANCE_FLOW: first-run review of prescribed settings (onboarding).
    SETTINGS: interactive settings screen pushed onto an existing navigation stack.
    LEGACY_SETTINGS: settings screen that owns its own navigation container.
    """

    ACCEPTANCE_FLOW = "acceptance_flow"
    SETTINGS = "settings"
    LEGACY_SETTINGS = "legacy_settings"

    @property
    def allows_editing(self) -> bool:
        return self is not PresentationMode.ACCEPTANCE_FLOW

    @classmethod
    def from_name(cls, name: str) -> PresentationMode:
        """Look up a mode by value, accepting dashes for underscores.

        Raises:
            ValueError: If the name is not a known mode.
        """
        normalized = name.strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(mode.value for mode in cls)
            raise ValueError(f"Invalid presentation mode: {name}. Valid: {valid}") from None


class TherapySettingsViewModel:
    """Holds the therapy settings being reviewed and applies editor saves.

    Example:
        >>> vm = TherapySettingsViewModel(PresentationMode.SETTINGS, settings)
        >>> updated = vm.save_carb_ratio_schedule(schedule)
        >>> vm.reset()  # back to the snapshot given at construction
    """

    def __init__(
        self,
        mode: PresentationMode,
        therapy_settings: TherapySettings | None = None,
        pump_supported_increments: PumpSupportedIncrements | None = None,
        prescription: Prescription | None = None,
        supported_insulin_model_settings: SupportedInsulinModelSettings | None = None,
        did_save: Callable[[TherapySetting, TherapySettings], None] | None = None,
    ) -> None:
        """Initialize the view-model.

        Args:
            mode: Presentation mode, fixed for the lifetime of the screen.
            therapy_settings: Initial snapshot. Defaults to empty settings.
            pump_supported_increments: Pump delivery increments, if a pump is paired.
            prescription: Prescription under review (acceptance flow).
            supported_insulin_model_settings: Insulin models the user may choose.
            did_save: Optional callback after any setting is saved.
        """
        self._mode = mode
        self._initial_therapy_settings = therapy_settings or TherapySettings()
        self._therapy_settings = self._initial_therapy_settings
        self.pump_supported_increments = pump_supported_increments
        self.prescription = prescription
        self.supported_insulin_model_settings = (
            supported_insulin_model_settings or SupportedInsulinModelSettings()
        )
        self._did_save = did_save

    @property
    def mode(self) -> PresentationMode:
        return self._mode

    @property
    def therapy_settings(self) -> TherapySettings:
        """Current snapshot, including any saves since construction."""
        return self._therapy_settings

    def reset(self) -> None:
        """Discard every save and restore the snapshot given at construction."""
        changed = self._therapy_settings.diff(self._initial_therapy_settings)
        self._therapy_settings = self._initial_therapy_settings
        logger.info("view_model: reset, discarded=%s", sorted(changed))

    def save_correction_range(self, schedule: GlucoseRangeSchedule) -> TherapySettings:
        return self._save(TherapySetting.GLUCOSE_TARGET_RANGE, glucose_target_range_schedule=schedule)

    def save_correction_range_overrides(
        self,
        pre_meal: DoubleRange | None,
        workout: DoubleRange | None,
    ) -> TherapySettings:
        return self._save(
            TherapySetting.CORRECTION_RANGE_OVERRIDES,
            pre_meal_target_range=pre_meal,
            workout_target_range=workout,
        )

    def save_suspend_threshold(self, threshold: GlucoseThreshold) -> TherapySettings:
        return self._save(TherapySetting.SUSPEND_THRESHOLD, suspend_threshold=threshold)

    def save_basal_rates(self, schedule: DailyValueSchedule) -> TherapySettings:
        return self._save(TherapySetting.BASAL_RATE, basal_rate_schedule=schedule)

    def save_delivery_limits(
        self,
        maximum_basal_rate_per_hour: float | None,
        maximum_bolus: float | None,
    ) -> TherapySettings:
        return self._save(
            TherapySetting.DELIVERY_LIMITS,
            maximum_basal_rate_per_hour=maximum_basal_rate_per_hour,
            maximum_bolus=maximum_bolus,
        )

    def save_insulin_model(self, settings: InsulinModelSettings) -> TherapySettings:
        return self._save(TherapySetting.INSULIN_MODEL, insulin_model_settings=settings)

    def save_carb_ratio_schedule(self, schedule: DailyValueSchedule) -> TherapySettings:
        return self._save(TherapySetting.CARB_RATIO, carb_ratio_schedule=schedule)

    def save_insulin_sensitivity_schedule(self, schedule: DailyValueSchedule) -> TherapySettings:
        return self._save(TherapySetting.INSULIN_SENSITIVITY, insulin_sensitivity_schedule=schedule)

    def _save(self, setting: TherapySetting, **changes: object) -> TherapySettings:
        """Replace the owned snapshot and notify the did_save callback.

        Returns:
            The updated snapshot.
        """
        self._therapy_settings = self._therapy_settings.with_changes(**changes)
        logger.info("view_model: saved, setting=%s", setting.value)

        if self._did_save is not None:
            try:
                self._did_save(setting, self._therapy_settings)
            except Exception as e:
                logger.error("view_model: did_save callback failed: %s", e)
                raise

        return self._therapy_settings


__all__ = [
    "PresentationMode",
    "TherapySettingsViewModel",
]
