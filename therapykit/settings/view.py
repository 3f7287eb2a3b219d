"""Therapy settings view protocols for therapykit.

Defines the interfaces the presenter talks to:
- TherapySettingsViewModelProtocol: the settings collaborator (state + saves)
- TherapySettingsViewProtocol: any rendering adapter (text, Tkinter, ...)

This allows the presenter to work with any frontend without modification.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol

if TYPE_CHECKING:
    from therapykit.settings.model import (
        DailyValueSchedule,
        Prescription,
        PumpSupportedIncrements,
        TherapySettings,
    )
    from therapykit.settings.presenter import EditorDestination, FallbackLabel
    from therapykit.settings.registry import TherapySetting
    from therapykit.settings.render import Screen
    from therapykit.settings.view_model import PresentationMode


class TherapySettingsViewModelProtocol(Protocol):
    """Settings collaborator the therapy settings screen is bound to.

    The presenter only reads these attributes and calls reset() on Cancel.
    The save methods are handed to editor screens.
    """

    @property
    def mode(self) -> "PresentationMode":
        ...

    @property
    def therapy_settings(self) -> "TherapySettings":
        ...

    pump_supported_increments: "PumpSupportedIncrements | None"
    prescription: "Prescription | None"

    def reset(self) -> None:
        """Restore the snapshot the screen was opened with."""
        ...

    def save_carb_ratio_schedule(self, schedule: "DailyValueSchedule") -> "TherapySettings":
        ...

    def save_insulin_sensitivity_schedule(self, schedule: "DailyValueSchedule") -> "TherapySettings":
        ...


class TherapySettingsViewProtocol(Protocol):
    """Interface that any therapy settings frontend must implement.

    Callbacks:
        on_edit_requested: User tapped Edit.
        on_done_requested: User tapped Done.
        on_cancel_requested: User tapped Cancel.
        on_back_requested: User tapped Back.
        on_setting_selected: User tapped a setting's edit link (setting).
        on_action_requested: User tapped the primary action button.

    Example implementation:
        >>> class MyView:
        ...     def __init__(self):
        ...         self.on_edit_requested = None
        ...         ...
        ...
        ...     def display(self, screen: Screen) -> None:
        ...         # Draw sections, rows and buttons
        ...         ...
    """

    # Callbacks set by presenter
    on_edit_requested: Callable[[], None] | None
    on_done_requested: Callable[[], None] | None
    on_cancel_requested: Callable[[], None] | None
    on_back_requested: Callable[[], None] | None
    on_setting_selected: Callable[["TherapySetting"], None] | None
    on_action_requested: Callable[[], None] | None

    def display(self, screen: "Screen") -> None:
        """Show (or redraw) the screen.

        Called by the presenter on start and after every state change.

        Args:
            screen: Render tree to draw.
        """
        ...

    def navigate(self, destination: "EditorDestination") -> None:
        """Push the editor screen for a setting.

        Args:
            destination: Editor route plus the inputs the editor needs.
        """
        ...

    def show_fallback(self, label: "FallbackLabel") -> None:
        """Show a plain label for a setting that has no editor."""
        ...

    def dismiss(self) -> None:
        """Pop the therapy settings screen (legacy Back)."""
        ...
