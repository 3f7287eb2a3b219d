"""Therapy setting definitions for therapykit.

This module contains the settings schema:
- TherapySetting: Enum of the configurable therapy settings
- EditorRoute: Enum of the editor screens a setting can open
- SettingDescriptor: Dataclass describing one setting
- SETTINGS: Dictionary mapping TherapySetting to SettingDescriptor
- SECTION_ORDER: List defining the on-screen order of setting sections
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TherapySetting(Enum):
    """Configurable therapy settings."""

    GLUCOSE_TARGET_RANGE = "glucose_target_range"
    CORRECTION_RANGE_OVERRIDES = "correction_range_overrides"
    SUSPEND_THRESHOLD = "suspend_threshold"
    BASAL_RATE = "basal_rate"
    DELIVERY_LIMITS = "delivery_limits"
    INSULIN_MODEL = "insulin_model"
    CARB_RATIO = "carb_ratio"
    INSULIN_SENSITIVITY = "insulin_sensitivity"
    NONE = "none"

    @property
    def title(self) -> str:
        return SETTINGS[self].title

    @property
    def descriptive_text(self) -> str:
        return SETTINGS[self].descriptive_text


class EditorRoute(Enum):
    """Editor screens reachable from the therapy settings screen."""

    CORRECTION_RANGE_REVIEW = "correction_range_review"
    CORRECTION_RANGE_OVERRIDE_REVIEW = "correction_range_override_review"
    SUSPEND_THRESHOLD_REVIEW = "suspend_threshold_review"
    BASAL_RATES_REVIEW = "basal_rates_review"
    DELIVERY_LIMITS_REVIEW = "delivery_limits_review"
    CARB_RATIO_EDITOR = "carb_ratio_editor"
    INSULIN_SENSITIVITY_EDITOR = "insulin_sensitivity_editor"


@dataclass(frozen=True)
class SettingDescriptor:
    """Therapy setting definition.

    Attributes:
        setting: The TherapySetting enum value.
        title: Display name for the setting.
        descriptive_text: Explanation shown under the title.
        route: Editor screen for the setting, or None when it has no editor.
        requires_glucose_unit: The editor can only open once a glucose unit
            is known (from the correction range schedule).
    """

    setting: TherapySetting
    title: str
    descriptive_text: str
    route: EditorRoute | None = None
    requires_glucose_unit: bool = False

    @property
    def is_routable(self) -> bool:
        return self.route is not None


# Define available settings
SETTINGS: dict[TherapySetting, SettingDescriptor] = {
    TherapySetting.GLUCOSE_TARGET_RANGE: SettingDescriptor(
        setting=TherapySetting.GLUCOSE_TARGET_RANGE,
        title="Correction Range",
        descriptive_text=(
            "Correction Range is the glucose value (or range of values) that you want "
            "Loop to aim for in adjusting your basal insulin and helping you calculate "
            "your boluses."
        ),
        route=EditorRoute.CORRECTION_RANGE_REVIEW,
    ),
    TherapySetting.CORRECTION_RANGE_OVERRIDES: SettingDescriptor(
        setting=TherapySetting.CORRECTION_RANGE_OVERRIDES,
        title="Temporary Correction Ranges",
        descriptive_text=(
            "Temporary Correction Ranges allow you to temporarily adjust your treatment "
            "target ahead of a meal or during physical activity."
        ),
        route=EditorRoute.CORRECTION_RANGE_OVERRIDE_REVIEW,
    ),
    TherapySetting.SUSPEND_THRESHOLD: SettingDescriptor(
        setting=TherapySetting.SUSPEND_THRESHOLD,
        title="Glucose Safety Limit",
        descriptive_text=(
            "When current or forecasted glucose is below the glucose safety limit, Loop "
            "will not recommend a bolus, and will always recommend a temporary basal rate "
            "of 0 units per hour."
        ),
        route=EditorRoute.SUSPEND_THRESHOLD_REVIEW,
    ),
    TherapySetting.BASAL_RATE: SettingDescriptor(
        setting=TherapySetting.BASAL_RATE,
        title="Basal Rates",
        descriptive_text=(
            "Your Basal Rate of insulin is the number of units per hour that you want to "
            "use to cover your background insulin needs."
        ),
        route=EditorRoute.BASAL_RATES_REVIEW,
    ),
    TherapySetting.DELIVERY_LIMITS: SettingDescriptor(
        setting=TherapySetting.DELIVERY_LIMITS,
        title="Delivery Limits",
        descriptive_text=(
            "The maximum basal rate and maximum bolus limit how much insulin Loop can "
            "deliver at one time."
        ),
        route=EditorRoute.DELIVERY_LIMITS_REVIEW,
    ),
    TherapySetting.INSULIN_MODEL: SettingDescriptor(
        setting=TherapySetting.INSULIN_MODEL,
        title="Insulin Model",
        descriptive_text=(
            "Loop assumes that the insulin it has delivered is actively working to lower "
            "your glucose for the duration of the selected insulin model."
        ),
        # No insulin model editor screen exists yet
        route=None,
    ),
    TherapySetting.CARB_RATIO: SettingDescriptor(
        setting=TherapySetting.CARB_RATIO,
        title="Carb Ratios",
        descriptive_text=(
            "Your Carb Ratio is the number of grams of carbohydrate covered by one unit "
            "of insulin."
        ),
        route=EditorRoute.CARB_RATIO_EDITOR,
    ),
    TherapySetting.INSULIN_SENSITIVITY: SettingDescriptor(
        setting=TherapySetting.INSULIN_SENSITIVITY,
        title="Insulin Sensitivities",
        descriptive_text=(
            "Your Insulin Sensitivities refer to the drop in glucose expected from one "
            "unit of insulin."
        ),
        route=EditorRoute.INSULIN_SENSITIVITY_EDITOR,
        requires_glucose_unit=True,
    ),
    TherapySetting.NONE: SettingDescriptor(
        setting=TherapySetting.NONE,
        title="Therapy Setting",
        descriptive_text="This setting has no details.",
        route=None,
    ),
}

# On-screen order of the setting sections
SECTION_ORDER: list[TherapySetting] = [
    TherapySetting.SUSPEND_THRESHOLD,
    TherapySetting.GLUCOSE_TARGET_RANGE,
    TherapySetting.CORRECTION_RANGE_OVERRIDES,
    TherapySetting.BASAL_RATE,
    TherapySetting.DELIVERY_LIMITS,
    TherapySetting.INSULIN_MODEL,
    TherapySetting.CARB_RATIO,
    TherapySetting.INSULIN_SENSITIVITY,
]


def descriptor_for(setting: TherapySetting) -> SettingDescriptor:
    """Get the descriptor for a setting.

    Args:
        setting: Any TherapySetting, including NONE.

    Returns:
        The SettingDescriptor (a stub descriptor for NONE).
    """
    return SETTINGS[setting]


def route_for(setting: TherapySetting) -> EditorRoute | None:
    """Get the editor route for a setting.

    Args:
        setting: Any TherapySetting.

    Returns:
        The EditorRoute, or None when the setting has no editor screen.
    """
    return SETTINGS[setting].route


def all_descriptors() -> list[SettingDescriptor]:
    """Get descriptors for every displayed setting, in section order."""
    return [SETTINGS[setting] for setting in SECTION_ORDER]


__all__ = [
    "EditorRoute",
    "SECTION_ORDER",
    "SETTINGS",
    "SettingDescriptor",
    "TherapySetting",
    "all_descriptors",
    "descriptor_for",
    "route_for",
]
