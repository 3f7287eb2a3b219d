"""Shared test helper classes and utilities.

This module contains classes and utilities that need to be imported
directly in test files (as opposed to pytest fixtures which are
auto-injected).
"""

from __future__ import annotations

from typing import Any, Callable

from therapykit.settings.model import (
    GRAMS_PER_UNIT,
    DailyValueSchedule,
    RepeatingScheduleValue,
    TherapySettings,
)
from therapykit.settings.view_model import PresentationMode


class SpyViewModel:
    """Minimal view-model satisfying TherapySettingsViewModelProtocol.

    Counts reset() calls and records saves, without keeping any history of
    snapshots, so tests can assert exactly what the presenter did.
    """

    def __init__(
        self,
        mode: PresentationMode,
        therapy_settings: TherapySettings | None = None,
        pump_supported_increments: Any = None,
        prescription: Any = None,
    ) -> None:
        self._mode = mode
        self._therapy_settings = therapy_settings or TherapySettings()
        self.pump_supported_increments = pump_supported_increments
        self.prescription = prescription
        self.reset_count = 0
        self.saved: list[tuple[str, Any]] = []

    @property
    def mode(self) -> PresentationMode:
        return self._mode

    @property
    def therapy_settings(self) -> TherapySettings:
        return self._therapy_settings

    def reset(self) -> None:
        self.reset_count += 1

    def save_carb_ratio_schedule(self, schedule: DailyValueSchedule) -> TherapySettings:
        self.saved.append(("carb_ratio", schedule))
        self._therapy_settings = self._therapy_settings.with_changes(carb_ratio_schedule=schedule)
        return self._therapy_settings

    def save_insulin_sensitivity_schedule(self, schedule: DailyValueSchedule) -> TherapySettings:
        self.saved.append(("insulin_sensitivity", schedule))
        self._therapy_settings = self._therapy_settings.with_changes(
            insulin_sensitivity_schedule=schedule
        )
        return self._therapy_settings


class RecordingView:
    """TherapySettingsViewProtocol implementation that records every call."""

    def __init__(self) -> None:
        self.on_edit_requested: Callable[[], None] | None = None
        self.on_done_requested: Callable[[], None] | None = None
        self.on_cancel_requested: Callable[[], None] | None = None
        self.on_back_requested: Callable[[], None] | None = None
        self.on_setting_selected: Callable[[Any], None] | None = None
        self.on_action_requested: Callable[[], None] | None = None

        self.screens: list[Any] = []
        self.destinations: list[Any] = []
        self.fallbacks: list[Any] = []
        self.dismiss_count = 0

    def display(self, screen: Any) -> None:
        self.screens.append(screen)

    def navigate(self, destination: Any) -> None:
        self.destinations.append(destination)

    def show_fallback(self, label: Any) -> None:
        self.fallbacks.append(label)

    def dismiss(self) -> None:
        self.dismiss_count += 1


def carb_ratio_schedule(*values: float) -> DailyValueSchedule:
    """Carb ratio schedule with one entry per value, an hour apart."""
    return DailyValueSchedule(
        items=tuple(
            RepeatingScheduleValue(hour * 3600, value) for hour, value in enumerate(values)
        ),
        unit=GRAMS_PER_UNIT,
    )
