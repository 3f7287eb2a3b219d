"""Plain-text implementation of TherapySettingsViewProtocol.

Renders the therapy settings render tree as lines of text. Used by the
command line preview and handy in tests, since every node type has a
stable one-line form.
"""

from __future__ import annotations

import logging
import sys
import textwrap
from typing import TYPE_CHECKING, Callable, TextIO

from therapykit.settings.render import (
    LinkRow,
    OverrideRangeRow,
    PlaceholderRow,
    QuantityRow,
    Row,
    ScheduleRangeRow,
    ScheduleValueRow,
    Screen,
    Section,
    TextRow,
)

if TYPE_CHECKING:
    from therapykit.settings.presenter import EditorDestination, FallbackLabel
    from therapykit.settings.registry import TherapySetting

logger = logging.getLogger(__name__)

WRAP_WIDTH = 72
NOT_SET = "--"


def _format_value(value: float | None) -> str:
    return NOT_SET if value is None else f"{value:g}"


def format_row(row: Row) -> str:
    """One-line text form of a value row."""
    if isinstance(row, ScheduleValueRow):
        return f"{row.time_label}  {_format_value(row.value)} {row.unit}"
    if isinstance(row, ScheduleRangeRow):
        return (
            f"{row.time_label}  {_format_value(row.minimum)}-{_format_value(row.maximum)} "
            f"{row.unit}"
        )
    if isinstance(row, QuantityRow):
        if row.value is None:
            return f"{row.label}: {NOT_SET}"
        return f"{row.label}: {_format_value(row.value)} {row.unit}"
    if isinstance(row, OverrideRangeRow):
        if row.range is None:
            return f"{row.preset.value}: {NOT_SET}"
        return (
            f"{row.preset.value}: {_format_value(row.range.minimum)}-"
            f"{_format_value(row.range.maximum)} {row.unit}"
        )
    if isinstance(row, TextRow):
        return f"{row.text} ({row.detail})" if row.detail else row.text
    if isinstance(row, PlaceholderRow):
        return row.text
    if isinstance(row, LinkRow):
        return f"{row.label} >"
    raise TypeError(f"Unknown row type: {type(row).__name__}")


def _section_lines(section: Section) -> list[str]:
    lines = [""] if section.extra_space_above else []
    lines.append(section.title.upper())
    if section.descriptive_text:
        lines.extend(
            "  " + line for line in textwrap.wrap(section.descriptive_text, WRAP_WIDTH)
        )
    lines.extend(f"  - {format_row(row)}" for row in section.rows)
    if section.edit_link is not None:
        lines.append(f"  [{section.edit_link.label}]")
    if section.footer:
        lines.append(f"  {section.footer}")
    return lines


def render_lines(screen: Screen) -> list[str]:
    """Render a Screen as a list of text lines."""
    leading = f"< {screen.leading_button.label}" if screen.leading_button else ""
    trailing = f"{screen.trailing_button.label} >" if screen.trailing_button else ""
    header = f"{leading:<12}{screen.title:^48}{trailing:>12}".rstrip()

    lines = [header, "=" * len(header)]
    for section in screen.sections:
        lines.extend(_section_lines(section))
        lines.append("")
    if screen.action_button is not None:
        lines.append(f"[[ {screen.action_button.label} ]]")
    return lines


class TextTherapySettingsView:
    """Text implementation of TherapySettingsViewProtocol.

    Writes each displayed screen to ``stream`` and records navigation
    results so callers (and tests) can inspect them.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        """Initialize the text view.

        Args:
            stream: Where to write screens. Defaults to stdout.
        """
        self._stream = stream if stream is not None else sys.stdout

        # Callbacks (set by presenter)
        self.on_edit_requested: Callable[[], None] | None = None
        self.on_done_requested: Callable[[], None] | None = None
        self.on_cancel_requested: Callable[[], None] | None = None
        self.on_back_requested: Callable[[], None] | None = None
        self.on_setting_selected: Callable[["TherapySetting"], None] | None = None
        self.on_action_requested: Callable[[], None] | None = None

        self.last_screen: Screen | None = None
        self.destinations: list["EditorDestination"] = []
        self.fallbacks: list["FallbackLabel"] = []
        self.dismissed = False

    def display(self, screen: Screen) -> None:
        self.last_screen = screen
        self._stream.write("\n".join(render_lines(screen)) + "\n")
        logger.debug("text_view: displayed %s sections", len(screen.sections))

    def navigate(self, destination: "EditorDestination") -> None:
        self.destinations.append(destination)
        self._stream.write(f"-> {destination.route.value}\n")

    def show_fallback(self, label: "FallbackLabel") -> None:
        self.fallbacks.append(label)
        self._stream.write(f"{label.text}\n")

    def dismiss(self) -> None:
        self.dismissed = True
        self._stream.write("<- back\n")


__all__ = [
    "TextTherapySettingsView",
    "format_row",
    "render_lines",
]
