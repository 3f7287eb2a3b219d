"""Therapy settings window for therapykit.

This module provides a Tkinter implementation of the TherapySettingsViewProtocol.
It draws the render tree built by the presenter: a navigation bar with the
Back/Cancel and Edit/Done buttons, one labeled frame per section, and the
primary action button in the acceptance flow. Editor screens are not part of
this window; navigating to one shows its route in a dialog.
"""

from __future__ import annotations

import logging
import tkinter as tk
from tkinter import messagebox, ttk
from typing import TYPE_CHECKING, Callable

from therapykit.settings.components import (
    create_info_label,
    create_labeled_frame,
    create_link_button,
    create_navigation_bar,
    create_value_label,
)
from therapykit.settings.render import ButtonNode, ButtonRole, Screen, Section
from therapykit.settings.text_view import format_row

if TYPE_CHECKING:
    from therapykit.settings.presenter import EditorDestination, FallbackLabel
    from therapykit.settings.registry import TherapySetting
    from therapykit.settings.render import ActionButton
    from therapykit.settings.view import TherapySettingsViewModelProtocol

logger = logging.getLogger(__name__)


class TkinterTherapySettingsView:
    """Tkinter implementation of TherapySettingsViewProtocol.

    The whole content frame is rebuilt on every display() call; the render
    tree is small and rebuilding keeps the window a pure function of it.
    """

    # Window dimensions
    WINDOW_WIDTH = 460
    WINDOW_HEIGHT = 720

    def __init__(self) -> None:
        """Initialize the therapy settings view."""
        self._root: tk.Tk | None = None
        self._content: ttk.Frame | None = None
        self._screen: Screen | None = None

        # Callbacks (set by presenter)
        self.on_edit_requested: Callable[[], None] | None = None
        self.on_done_requested: Callable[[], None] | None = None
        self.on_cancel_requested: Callable[[], None] | None = None
        self.on_back_requested: Callable[[], None] | None = None
        self.on_setting_selected: Callable[["TherapySetting"], None] | None = None
        self.on_action_requested: Callable[[], None] | None = None

    def display(self, screen: Screen) -> None:
        """Show the screen, rebuilding the window content if it exists.

        Args:
            screen: Render tree to draw.
        """
        # Always store the screen (needed when the window is created later)
        self._screen = screen

        if self._root is None:
            return  # UI not ready, will be drawn in run()

        self._rebuild()

    def navigate(self, destination: "EditorDestination") -> None:
        self._show_message(
            destination.setting.title,
            f"Open editor: {destination.route.value}",
        )

    def show_fallback(self, label: "FallbackLabel") -> None:
        self._show_message(label.text, label.text)

    def dismiss(self) -> None:
        """Close the window."""
        if self._root is not None:
            self._root.quit()
            self._root.destroy()
        self._root = None
        self._content = None
        logger.debug("window: closed")

    def run(self) -> None:
        """Create the window and run its event loop (blocks until closed)."""
        self._root = tk.Tk()
        title = self._screen.title if self._screen is not None else "Therapy Settings"
        self._root.title(title)
        self._root.geometry(f"{self.WINDOW_WIDTH}x{self.WINDOW_HEIGHT}")

        self._content = self._create_scrollable_frame(self._root)
        self._root.protocol("WM_DELETE_WINDOW", self.dismiss)

        if self._screen is not None:
            self._rebuild()

        logger.info("window: created")
        self._root.mainloop()

    def _callback_for(self, button: ButtonNode) -> Callable[[], None]:
        callbacks = {
            ButtonRole.BACK: lambda: self._invoke(self.on_back_requested),
            ButtonRole.CANCEL: lambda: self._invoke(self.on_cancel_requested),
            ButtonRole.EDIT: lambda: self._invoke(self.on_edit_requested),
            ButtonRole.DONE: lambda: self._invoke(self.on_done_requested),
            ButtonRole.PRIMARY_ACTION: lambda: self._invoke(self.on_action_requested),
        }
        return callbacks[button.role]

    def _rebuild(self) -> None:
        """Destroy and redraw everything inside the content frame."""
        screen = self._screen
        for child in self._content.winfo_children():
            child.destroy()

        leading = trailing = None
        if screen.leading_button is not None:
            leading = (screen.leading_button.label, self._callback_for(screen.leading_button))
        if screen.trailing_button is not None:
            trailing = (screen.trailing_button.label, self._callback_for(screen.trailing_button))
        create_navigation_bar(self._content, screen.title, leading, trailing)

        for section in screen.sections:
            self._create_section(section)

        if screen.action_button is not None:
            ttk.Button(
                self._content,
                text=screen.action_button.label,
                command=self._callback_for(screen.action_button),
            ).pack(fill=tk.X, pady=(10, 0))

        logger.debug("window: rebuilt, sections=%d", len(screen.sections))

    def _create_section(self, section: Section) -> None:
        pady = (10, 10) if section.extra_space_above else (0, 10)
        frame = create_labeled_frame(self._content, section.title, pady=pady)

        if section.descriptive_text:
            create_info_label(frame, section.descriptive_text)
        for row in section.rows:
            create_value_label(frame, format_row(row))
        if section.edit_link is not None:
            setting = section.edit_link.setting
            create_link_button(
                frame,
                section.edit_link.label,
                lambda: self._invoke(self.on_setting_selected, setting),
            )
        if section.footer:
            create_info_label(frame, section.footer)

    def _invoke(self, callback: Callable[..., object] | None, *args: object) -> None:
        """Call a presenter callback; failures are reported, then re-raised to Tk."""
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.error("window: callback failed: %s", e)
            self._show_error(str(e))
            raise

    def _show_error(self, message: str) -> None:
        try:
            messagebox.showerror("Error", message)
        except tk.TclError as e:
            logger.warning("window: cannot show error dialog: %s", e)

    def _show_message(self, title: str, message: str) -> None:
        if self._root is None:
            return
        try:
            messagebox.showinfo(title, message)
        except tk.TclError as e:
            logger.warning("window: cannot show message %r: %s", title, e)

    def _create_scrollable_frame(self, parent: tk.Widget) -> ttk.Frame:
        """Create a scrollable area with canvas and inner frame.

        Args:
            parent: Parent widget.

        Returns:
            The inner frame to pack widgets into.
        """
        outer = ttk.Frame(parent)
        outer.pack(fill=tk.BOTH, expand=True)

        canvas = tk.Canvas(outer, highlightthickness=0)
        scrollbar = ttk.Scrollbar(outer, orient="vertical", command=canvas.yview)
        inner = ttk.Frame(canvas, padding="10")
        canvas_window = canvas.create_window((0, 0), window=inner, anchor="nw")

        def on_configure(event):
            canvas.configure(scrollregion=canvas.bbox("all"))

        inner.bind("<Configure>", on_configure)

        def on_canvas_configure(event):
            # Keep inner frame as wide as the canvas
            canvas.itemconfig(canvas_window, width=event.width)

        canvas.bind("<Configure>", on_canvas_configure)
        canvas.configure(yscrollcommand=scrollbar.set)

        scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
        canvas.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        return inner


def open_therapy_settings(
    view_model: "TherapySettingsViewModelProtocol",
    action_button: "ActionButton | None" = None,
) -> None:
    """Open the therapy settings window.

    Convenience function that creates the presenter and view, then runs the window.

    Args:
        view_model: Settings collaborator to display.
        action_button: Primary action for the acceptance flow.
    """
    from therapykit.settings.presenter import TherapySettingsPresenter

    view = TkinterTherapySettingsView()
    presenter = TherapySettingsPresenter(view_model, action_button=action_button, view=view)
    presenter.start()
    view.run()


__all__ = [
    "TkinterTherapySettingsView",
    "open_therapy_settings",
]
