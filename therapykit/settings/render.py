"""Render tree for the therapy settings screen.

build_screen() is a pure function from (view-model state, edit state,
action button) to a Screen: a tree of frozen dataclasses describing
sections, rows and buttons. Rendering adapters (text, tkinter) walk the
tree; nothing here knows about any GUI toolkit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Union

from therapykit.settings.model import (
    GRAMS_PER_UNIT,
    UNITS,
    UNITS_PER_HOUR,
    DailyValueSchedule,
    DoubleRange,
    Prescription,
    format_time_of_day,
)
from therapykit.settings.registry import (
    SECTION_ORDER,
    EditorRoute,
    TherapySetting,
    descriptor_for,
    route_for,
)
from therapykit.settings.view_model import PresentationMode

if TYPE_CHECKING:
    from therapykit.settings.view import TherapySettingsViewModelProtocol


SCREEN_TITLE = "Therapy Settings"
CORRECTION_RANGE_PLACEHOLDER = 'Tap "Edit" to add a Correction Range'
SUPPORT_TITLE = "Support"
SUPPORT_LINK_LABEL = "Get help with Therapy Settings"
SUPPORT_FOOTER = "Text description here."
MAXIMUM_BASAL_RATE_LABEL = "Maximum Basal Rate"
MAXIMUM_BOLUS_LABEL = "Maximum Bolus"


@dataclass(frozen=True)
class ActionButton:
    """Primary action shown at the bottom of the acceptance flow.

    Attributes:
        label: Button text.
        action: Called when the button is tapped.
    """

    label: str
    action: Callable[[], None]


class ButtonRole(Enum):
    """What a navigation-bar or list button does."""

    BACK = "back"
    CANCEL = "cancel"
    EDIT = "edit"
    DONE = "done"
    PRIMARY_ACTION = "primary_action"


class OverridePreset(Enum):
    """Temporary correction range presets, in display order."""

    PRE_MEAL = "Pre-Meal"
    WORKOUT = "Workout"


@dataclass(frozen=True)
class ButtonNode:
    role: ButtonRole
    label: str


@dataclass(frozen=True)
class NavigationLinkNode:
    """Link from a section to the setting's editor ("Edit <title>")."""

    label: str
    setting: TherapySetting
    route: EditorRoute | None


@dataclass(frozen=True)
class ScheduleValueRow:
    time_label: str
    start_time: float
    value: float
    unit: str


@dataclass(frozen=True)
class ScheduleRangeRow:
    time_label: str
    start_time: float
    minimum: float
    maximum: float
    unit: str


@dataclass(frozen=True)
class QuantityRow:
    """Labelled single value; value is None when it cannot be shown."""

    label: str
    value: float | None
    unit: str


@dataclass(frozen=True)
class OverrideRangeRow:
    preset: OverridePreset
    range: DoubleRange | None
    unit: str


@dataclass(frozen=True)
class TextRow:
    text: str
    detail: str = ""


@dataclass(frozen=True)
class PlaceholderRow:
    text: str


@dataclass(frozen=True)
class LinkRow:
    label: str
    target: str


Row = Union[
    ScheduleValueRow,
    ScheduleRangeRow,
    QuantityRow,
    OverrideRangeRow,
    TextRow,
    PlaceholderRow,
    LinkRow,
]


@dataclass(frozen=True)
class Section:
    """One list section: heading, explanation, value rows, optional edit link."""

    title: str
    descriptive_text: str
    rows: tuple[Row, ...] = ()
    setting: TherapySetting | None = None
    edit_link: NavigationLinkNode | None = None
    extra_space_above: bool = False
    footer: str | None = None


@dataclass(frozen=True)
class Screen:
    """Whole therapy settings screen.

    Attributes:
        title: Navigation bar title.
        mode: Presentation mode the screen was built for.
        sections: Sections in display order.
        leading_button: Cancel while editing, Back in legacy mode, else None.
        trailing_button: Edit or Done; None in the acceptance flow.
        back_button_hidden: Hide the host's own back button (while editing).
        wrapped_in_navigation: Screen provides its own navigation container.
        action_button: Primary action button (acceptance flow only).
    """

    title: str
    mode: PresentationMode
    sections: tuple[Section, ...]
    leading_button: ButtonNode | None = None
    trailing_button: ButtonNode | None = None
    back_button_hidden: bool = False
    wrapped_in_navigation: bool = False
    action_button: ButtonNode | None = None

    def section_for(self, setting: TherapySetting) -> Section | None:
        """Find the section for a setting, if it is on screen."""
        for section in self.sections:
            if section.setting is setting:
                return section
        return None


def format_prescription_text(prescription: Prescription) -> str:
    """Descriptive text for the prescription section."""
    prescribed = prescription.date_prescribed
    return (
        f"Submitted by {prescription.provider_name}, "
        f"{prescribed.month}/{prescribed.day}/{prescribed:%y}"
    )


def _schedule_value_rows(schedule: DailyValueSchedule, unit: str) -> tuple[Row, ...]:
    return tuple(
        ScheduleValueRow(
            time_label=format_time_of_day(item.start_time),
            start_time=item.start_time,
            value=item.value,
            unit=unit,
        )
        for item in schedule.items
    )


def _suspend_threshold_rows(vm: TherapySettingsViewModelProtocol) -> tuple[Row, ...]:
    settings = vm.therapy_settings
    unit = settings.glucose_unit
    if unit is None:
        return ()
    threshold = settings.suspend_threshold
    if threshold is None:
        return (QuantityRow(TherapySetting.SUSPEND_THRESHOLD.title, None, unit.value),)
    # Threshold unit may differ from the schedule unit
    return (QuantityRow(
        label=TherapySetting.SUSPEND_THRESHOLD.title,
        value=threshold.value,
        unit=threshold.unit.value,
    ),)


def _correction_range_rows(vm: TherapySettingsViewModelProtocol) -> tuple[Row, ...]:
    schedule = vm.therapy_settings.glucose_target_range_schedule
    if schedule is None:
        return (PlaceholderRow(CORRECTION_RANGE_PLACEHOLDER),)
    return tuple(
        ScheduleRangeRow(
            time_label=format_time_of_day(item.start_time),
            start_time=item.start_time,
            minimum=item.value.minimum,
            maximum=item.value.maximum,
            unit=schedule.unit.value,
        )
        for item in schedule.items
    )


def _correction_range_override_rows(vm: TherapySettingsViewModelProtocol) -> tuple[Row, ...]:
    settings = vm.therapy_settings
    if settings.glucose_unit is None:
        return ()
    ranges = {
        OverridePreset.PRE_MEAL: settings.pre_meal_target_range,
        OverridePreset.WORKOUT: settings.workout_target_range,
    }
    return tuple(
        OverrideRangeRow(preset=preset, range=ranges[preset], unit=settings.glucose_unit.value)
        for preset in OverridePreset
    )


def _basal_rate_rows(vm: TherapySettingsViewModelProtocol) -> tuple[Row, ...]:
    schedule = vm.therapy_settings.basal_rate_schedule
    if schedule is None or vm.pump_supported_increments is None:
        return ()
    return _schedule_value_rows(schedule, UNITS_PER_HOUR)


def _delivery_limit_rows(vm: TherapySettingsViewModelProtocol) -> tuple[Row, ...]:
    settings = vm.therapy_settings
    has_pump = vm.pump_supported_increments is not None
    return (
        QuantityRow(
            label=MAXIMUM_BASAL_RATE_LABEL,
            value=settings.maximum_basal_rate_per_hour if has_pump else None,
            unit=UNITS_PER_HOUR,
        ),
        QuantityRow(
            label=MAXIMUM_BOLUS_LABEL,
            value=settings.maximum_bolus if has_pump else None,
            unit=UNITS,
        ),
    )


def _insulin_model_rows(vm: TherapySettingsViewModelProtocol) -> tuple[Row, ...]:
    model_settings = vm.therapy_settings.insulin_model_settings
    if model_settings is None:
        return ()
    return (TextRow(text=model_settings.title, detail=model_settings.subtitle),)


def _carb_ratio_rows(vm: TherapySettingsViewModelProtocol) -> tuple[Row, ...]:
    schedule = vm.therapy_settings.carb_ratio_schedule
    if schedule is None:
        return ()
    return _schedule_value_rows(schedule, GRAMS_PER_UNIT)


def _insulin_sensitivity_rows(vm: TherapySettingsViewModelProtocol) -> tuple[Row, ...]:
    settings = vm.therapy_settings
    schedule = settings.insulin_sensitivity_schedule
    if schedule is None or settings.sensitivity_unit is None:
        return ()
    return _schedule_value_rows(schedule, settings.sensitivity_unit)


_ROW_BUILDERS: dict[TherapySetting, Callable[[TherapySettingsViewModelProtocol], tuple[Row, ...]]] = {
    TherapySetting.SUSPEND_THRESHOLD: _suspend_threshold_rows,
    TherapySetting.GLUCOSE_TARGET_RANGE: _correction_range_rows,
    TherapySetting.CORRECTION_RANGE_OVERRIDES: _correction_range_override_rows,
    TherapySetting.BASAL_RATE: _basal_rate_rows,
    TherapySetting.DELIVERY_LIMITS: _delivery_limit_rows,
    TherapySetting.INSULIN_MODEL: _insulin_model_rows,
    TherapySetting.CARB_RATIO: _carb_ratio_rows,
    TherapySetting.INSULIN_SENSITIVITY: _insulin_sensitivity_rows,
}


def build_setting_section(
    vm: TherapySettingsViewModelProtocol,
    setting: TherapySetting,
    is_editing: bool,
    extra_space_above: bool = False,
) -> Section:
    """Build the section for one therapy setting.

    Args:
        vm: View-model supplying the snapshot.
        setting: Setting to build (must be in SECTION_ORDER).
        is_editing: Add the "Edit <title>" link when True.
        extra_space_above: Leave a gap above the section.

    Returns:
        Section with one row per rendered value (possibly none).
    """
    descriptor = descriptor_for(setting)
    edit_link = None
    if is_editing:
        edit_link = NavigationLinkNode(
            label=f"Edit {descriptor.title}",
            setting=setting,
            route=route_for(setting),
        )
    return Section(
        title=descriptor.title,
        descriptive_text=descriptor.descriptive_text,
        rows=_ROW_BUILDERS[setting](vm),
        setting=setting,
        edit_link=edit_link,
        extra_space_above=extra_space_above,
    )


def _leading_button(mode: PresentationMode, is_editing: bool) -> ButtonNode | None:
    if not mode.allows_editing:
        return None
    if is_editing:
        return ButtonNode(ButtonRole.CANCEL, "Cancel")
    if mode is PresentationMode.LEGACY_SETTINGS:
        return ButtonNode(ButtonRole.BACK, "Back")
    return None


def _trailing_button(mode: PresentationMode, is_editing: bool) -> ButtonNode | None:
    if not mode.allows_editing:
        return None
    if is_editing:
        return ButtonNode(ButtonRole.DONE, "Done")
    return ButtonNode(ButtonRole.EDIT, "Edit")


def build_screen(
    vm: TherapySettingsViewModelProtocol,
    is_editing: bool = False,
    action_button: ActionButton | None = None,
) -> Screen:
    """Build the render tree for the therapy settings screen.

    Pure: equal inputs always produce equal trees.

    Args:
        vm: View-model supplying mode, snapshot, pump increments and prescription.
        is_editing: Current edit state (ignored in the acceptance flow).
        action_button: Primary action for the acceptance flow.

    Returns:
        The Screen render tree.
    """
    mode = vm.mode
    is_editing = is_editing and mode.allows_editing
    sections: list[Section] = []

    if mode is PresentationMode.ACCEPTANCE_FLOW and vm.prescription is not None:
        sections.append(Section(
            title="Prescription",
            descriptive_text=format_prescription_text(vm.prescription),
            extra_space_above=True,
        ))

    for setting in SECTION_ORDER:
        extra_space = setting is TherapySetting.SUSPEND_THRESHOLD and vm.prescription is None
        sections.append(build_setting_section(vm, setting, is_editing, extra_space))

    action_node = None
    if mode is PresentationMode.ACCEPTANCE_FLOW:
        if action_button is not None:
            action_node = ButtonNode(ButtonRole.PRIMARY_ACTION, action_button.label)
    else:
        sections.append(Section(
            title=SUPPORT_TITLE,
            descriptive_text="",
            rows=(LinkRow(SUPPORT_LINK_LABEL, "Therapy Settings Support"),),
            footer=SUPPORT_FOOTER,
        ))

    return Screen(
        title=SCREEN_TITLE,
        mode=mode,
        sections=tuple(sections),
        leading_button=_leading_button(mode, is_editing),
        trailing_button=_trailing_button(mode, is_editing),
        back_button_hidden=is_editing,
        wrapped_in_navigation=mode is PresentationMode.LEGACY_SETTINGS,
        action_button=action_node,
    )


__all__ = [
    "ActionButton",
    "ButtonNode",
    "ButtonRole",
    "CORRECTION_RANGE_PLACEHOLDER",
    "LinkRow",
    "NavigationLinkNode",
    "OverridePreset",
    "OverrideRangeRow",
    "PlaceholderRow",
    "QuantityRow",
    "Row",
    "SCREEN_TITLE",
    "ScheduleRangeRow",
    "ScheduleValueRow",
    "Screen",
    "Section",
    "TextRow",
    "build_screen",
    "build_setting_section",
    "format_prescription_text",
]
