"""Therapy settings presenter for therapykit.

Owns the edit-session state of the therapy settings screen and turns user
events (Edit, Done, Cancel, Back, setting selection, primary action) into
state changes, navigation results and redraws. Decoupled from any specific
GUI framework.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Union

from therapykit.settings.model import GlucoseUnit
from therapykit.settings.registry import EditorRoute, TherapySetting, descriptor_for
from therapykit.settings.render import ActionButton, Screen, build_screen
from therapykit.settings.view_model import PresentationMode

if TYPE_CHECKING:
    from therapykit.settings.view import (
        TherapySettingsViewModelProtocol,
        TherapySettingsViewProtocol,
    )

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditorDestination:
    """Editor screen to push for a setting, with everything it needs.

    Attributes:
        route: Editor screen identifier.
        setting: Setting being edited.
        mode: Presentation mode the editor inherits.
        view_model: Settings collaborator (review screens read and save through it).
        schedule: Schedule the editor starts from (schedule editors only).
        glucose_unit: Unit for glucose-valued editors.
        on_save: Saver the editor calls with its result, where one is bound.
    """

    route: EditorRoute
    setting: TherapySetting
    mode: PresentationMode
    view_model: Any
    schedule: Any = None
    glucose_unit: GlucoseUnit | None = None
    on_save: Callable[[Any], Any] | None = None


@dataclass(frozen=True)
class FallbackLabel:
    """Shown instead of navigating when a setting has no usable editor."""

    setting: TherapySetting
    text: str


@dataclass(frozen=True)
class PopNavigation:
    """Request to pop the therapy settings screen."""

    mode: PresentationMode


SelectionResult = Union[EditorDestination, FallbackLabel]


class TherapySettingsPresenter:
    """Presentation state machine for the therapy settings screen.

    States: the acceptance flow (no edit state), or settings/legacy settings
    each either editing or not. Events outside the allowed transitions are
    ignored, never raised.

    The view (if any) is accessed only through TherapySettingsViewProtocol,
    making it easy to swap GUI frameworks without changing this code.

    Example:
        >>> presenter = TherapySettingsPresenter(view_model)
        >>> presenter.tap_edit()
        >>> presenter.tap_cancel()  # calls view_model.reset() once
    """

    def __init__(
        self,
        view_model: "TherapySettingsViewModelProtocol",
        action_button: ActionButton | None = None,
        view: "TherapySettingsViewProtocol | None" = None,
    ) -> None:
        """Initialize the presenter.

        Args:
            view_model: Settings collaborator; its mode is fixed from here on.
            action_button: Primary action for the acceptance flow.
            view: Optional frontend implementing TherapySettingsViewProtocol.
        """
        self._view_model = view_model
        self._mode = view_model.mode
        self._action_button = action_button
        self._view = view
        self._is_editing = False

        if self._view is not None:
            self._view.on_edit_requested = self.tap_edit
            self._view.on_done_requested = self.tap_done
            self._view.on_cancel_requested = self.tap_cancel
            self._view.on_back_requested = self.tap_back
            self._view.on_setting_selected = self.select_setting
            self._view.on_action_requested = self.tap_primary_action

        logger.debug("presenter: initialized, mode=%s", self._mode.value)

    @property
    def mode(self) -> PresentationMode:
        return self._mode

    @property
    def is_editing(self) -> bool | None:
        """Current edit state; None in the acceptance flow, which has no edit state."""
        if not self._mode.allows_editing:
            return None
        return self._is_editing

    @property
    def view_model(self) -> "TherapySettingsViewModelProtocol":
        return self._view_model

    def render(self) -> Screen:
        """Build the render tree for the current state."""
        return build_screen(self._view_model, self._is_editing, self._action_button)

    def start(self) -> Screen:
        """Show the initial screen on the view (if any) and return it."""
        logger.info("presenter: starting, mode=%s", self._mode.value)
        return self._refresh()

    def tap_edit(self) -> bool:
        """Enter editing. Only allowed outside the acceptance flow.

        Returns:
            True if the state changed.
        """
        if not self._mode.allows_editing or self._is_editing:
            logger.debug("presenter: edit ignored, mode=%s, is_editing=%s",
                         self._mode.value, self._is_editing)
            return False

        self._is_editing = True
        logger.info("presenter: editing started")
        self._refresh()
        return True

    def tap_done(self) -> bool:
        """Leave editing without saving or validating anything.

        Returns:
            True if the state changed.
        """
        if not self._is_editing:
            logger.debug("presenter: done ignored, not editing")
            return False

        self._is_editing = False
        logger.info("presenter: editing finished")
        self._refresh()
        return True

    def tap_cancel(self) -> bool:
        """Leave editing and reset the view-model to its original snapshot.

        Returns:
            True if the state changed.
        """
        if not self._is_editing:
            logger.debug("presenter: cancel ignored, not editing")
            return False

        self._view_model.reset()
        self._is_editing = False
        logger.info("presenter: editing cancelled, settings reset")
        self._refresh()
        return True

    def tap_back(self) -> PopNavigation | None:
        """Pop the screen. Only legacy settings has a Back button, hidden while editing.

        Returns:
            PopNavigation if the screen should be popped, else None.
        """
        if self._mode is not PresentationMode.LEGACY_SETTINGS or self._is_editing:
            logger.debug("presenter: back suppressed, mode=%s, is_editing=%s",
                         self._mode.value, self._is_editing)
            return None

        logger.info("presenter: back, popping screen")
        if self._view is not None:
            self._view.dismiss()
        return PopNavigation(self._mode)

    def select_setting(self, setting: TherapySetting) -> SelectionResult:
        """Resolve the editor for a setting.

        Settings with no route (the insulin model, NONE), and the insulin
        sensitivity editor when no glucose unit is known, resolve to a plain
        label instead of navigating.

        Args:
            setting: Setting the user selected.

        Returns:
            EditorDestination to push, or FallbackLabel to show.
        """
        result = self.editor_for(setting)

        if isinstance(result, EditorDestination):
            logger.info("presenter: navigating, setting=%s, route=%s",
                        setting.value, result.route.value)
            if self._view is not None:
                self._view.navigate(result)
        else:
            logger.info("presenter: no editor, setting=%s", setting.value)
            if self._view is not None:
                self._view.show_fallback(result)

        return result

    def editor_for(self, setting: TherapySetting) -> SelectionResult:
        """Resolve a setting to its editor destination without side effects."""
        descriptor = descriptor_for(setting)
        settings = self._view_model.therapy_settings
        fallback = FallbackLabel(setting=setting, text=descriptor.title)

        if descriptor.route is None:
            return fallback
        if descriptor.requires_glucose_unit and settings.glucose_unit is None:
            return fallback

        if setting is TherapySetting.CARB_RATIO:
            return EditorDestination(
                route=descriptor.route,
                setting=setting,
                mode=self._mode,
                view_model=self._view_model,
                schedule=settings.carb_ratio_schedule,
                on_save=self._view_model.save_carb_ratio_schedule,
            )
        if setting is TherapySetting.INSULIN_SENSITIVITY:
            return EditorDestination(
                route=descriptor.route,
                setting=setting,
                mode=self._mode,
                view_model=self._view_model,
                schedule=settings.insulin_sensitivity_schedule,
                glucose_unit=settings.glucose_unit,
                on_save=self._view_model.save_insulin_sensitivity_schedule,
            )
        return EditorDestination(
            route=descriptor.route,
            setting=setting,
            mode=self._mode,
            view_model=self._view_model,
        )

    def tap_primary_action(self) -> bool:
        """Invoke the acceptance flow's primary action, if one was supplied.

        Returns:
            True if the action was invoked.

        Raises:
            Exception: Whatever the action raises is logged and re-raised.
        """
        if self._mode is not PresentationMode.ACCEPTANCE_FLOW or self._action_button is None:
            logger.debug("presenter: primary action ignored, mode=%s", self._mode.value)
            return False

        logger.info("presenter: primary action, label=%s", self._action_button.label)
        try:
            self._action_button.action()
        except Exception as e:
            logger.error("presenter: primary action failed: %s", e)
            raise
        return True

    def _refresh(self) -> Screen:
        screen = self.render()
        if self._view is not None:
            self._view.display(screen)
        return screen


__all__ = [
    "ActionButton",
    "EditorDestination",
    "FallbackLabel",
    "PopNavigation",
    "PresentationMode",
    "SelectionResult",
    "TherapySettingsPresenter",
]
