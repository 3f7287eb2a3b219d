"""Therapy settings screen for therapykit.

Model, registry, view-model, render tree and presenter are GUI-agnostic.
The Tkinter adapter lives in therapykit.settings.window and is not imported
here, so importing this package never requires a Tk installation.
"""

from therapykit.settings.model import (
    DailyValueSchedule,
    DoubleRange,
    GlucoseRangeSchedule,
    GlucoseThreshold,
    GlucoseUnit,
    Prescription,
    PumpSupportedIncrements,
    RepeatingScheduleValue,
    SupportedInsulinModelSettings,
    TherapySettings,
)
from therapykit.settings.registry import (
    EditorRoute,
    SECTION_ORDER,
    SETTINGS,
    SettingDescriptor,
    TherapySetting,
    all_descriptors,
    descriptor_for,
    route_for,
)
from therapykit.settings.view_model import PresentationMode, TherapySettingsViewModel
from therapykit.settings.render import ActionButton, Screen, Section, build_screen
from therapykit.settings.presenter import (
    EditorDestination,
    FallbackLabel,
    PopNavigation,
    TherapySettingsPresenter,
)
from therapykit.settings.view import (
    TherapySettingsViewModelProtocol,
    TherapySettingsViewProtocol,
)
from therapykit.settings.text_view import TextTherapySettingsView

__all__ = [
    # Model
    "DailyValueSchedule",
    "DoubleRange",
    "GlucoseRangeSchedule",
    "GlucoseThreshold",
    "GlucoseUnit",
    "Prescription",
    "PumpSupportedIncrements",
    "RepeatingScheduleValue",
    "SupportedInsulinModelSettings",
    "TherapySettings",
    # Registry
    "EditorRoute",
    "SECTION_ORDER",
    "SETTINGS",
    "SettingDescriptor",
    "TherapySetting",
    "all_descriptors",
    "descriptor_for",
    "route_for",
    # View-model
    "PresentationMode",
    "TherapySettingsViewModel",
    # Render tree
    "ActionButton",
    "Screen",
    "Section",
    "build_screen",
    # Presenter
    "EditorDestination",
    "FallbackLabel",
    "PopNavigation",
    "TherapySettingsPresenter",
    # View
    "TextTherapySettingsView",
    "TherapySettingsViewModelProtocol",
    "TherapySettingsViewProtocol",
]
