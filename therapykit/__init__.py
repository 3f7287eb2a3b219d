"""therapykit - therapy settings screens independent of any GUI toolkit."""

__version__ = "0.1.0"

from therapykit.insulin import (  # noqa: E402
    InsulinModelInformation,
    InsulinModelSettings,
    InsulinType,
)
from therapykit.percentage import PercentageTextField  # noqa: E402
from therapykit.settings import (  # noqa: E402
    ActionButton,
    PresentationMode,
    TherapySetting,
    TherapySettings,
    TherapySettingsPresenter,
    TherapySettingsViewModel,
    build_screen,
)

__all__ = [
    "ActionButton",
    "InsulinModelInformation",
    "InsulinModelSettings",
    "InsulinType",
    "PercentageTextField",
    "PresentationMode",
    "TherapySetting",
    "TherapySettings",
    "TherapySettingsPresenter",
    "TherapySettingsViewModel",
    "build_screen",
]
