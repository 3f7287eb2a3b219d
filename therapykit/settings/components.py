"""Reusable UI components for therapykit.

This module provides helper functions for creating consistent Tkinter UI elements:
- Labeled frames with standard padding (one per settings section)
- Informational and value labels
- Link-style buttons for "Edit <setting>" navigation
- Navigation bar rows with leading and trailing buttons

These helpers keep the Tkinter adapter in window.py short and ensure
consistent styling across sections.
"""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable


def create_labeled_frame(
    parent: tk.Widget,
    text: str,
    padding: str = "10",
    fill: str = tk.X,
    pady: tuple[int, int] = (0, 10),
) -> ttk.LabelFrame:
    """Create a labeled frame with standard styling.

    Args:
        parent: Parent widget.
        text: Frame label text.
        padding: Internal padding (default "10").
        fill: Fill direction (default X).
        pady: Vertical padding tuple (default (0, 10)).

    Returns:
        Configured LabelFrame widget.
    """
    frame = ttk.LabelFrame(parent, text=text, padding=padding)
    frame.pack(fill=fill, pady=pady)
    return frame


def create_info_label(
    parent: tk.Widget,
    text: str,
    foreground: str = "gray",
    justify: str = tk.LEFT,
    anchor: str = tk.W,
    wraplength: int = 380,
) -> ttk.Label:
    """Create an informational label with gray, wrapped text.

    Args:
        parent: Parent widget.
        text: Label text.
        foreground: Text color (default "gray").
        justify: Text justification (default LEFT).
        anchor: Widget anchor (default W).
        wraplength: Wrap width in pixels.

    Returns:
        Configured Label widget.
    """
    label = ttk.Label(
        parent,
        text=text,
        foreground=foreground,
        justify=justify,
        wraplength=wraplength,
    )
    label.pack(anchor=anchor)
    return label


def create_value_label(
    parent: tk.Widget,
    text: str,
    anchor: str = tk.W,
    pady: tuple[int, int] = (2, 0),
) -> ttk.Label:
    """Create a label for one rendered value row."""
    label = ttk.Label(parent, text=text)
    label.pack(anchor=anchor, pady=pady)
    return label


def create_link_button(
    parent: tk.Widget,
    text: str,
    command: Callable[[], None],
    anchor: str = tk.W,
    pady: tuple[int, int] = (5, 0),
) -> ttk.Button:
    """Create a button used as a navigation link.

    Args:
        parent: Parent widget.
        text: Link text, e.g. "Edit Carb Ratios".
        command: Called when clicked.
        anchor: Widget anchor (default W).
        pady: Vertical padding tuple.

    Returns:
        Configured Button widget.
    """
    button = ttk.Button(parent, text=text, command=command)
    button.pack(anchor=anchor, pady=pady)
    return button


def create_navigation_bar(
    parent: tk.Widget,
    title: str,
    leading: tuple[str, Callable[[], None]] | None = None,
    trailing: tuple[str, Callable[[], None]] | None = None,
) -> ttk.Frame:
    """Create a navigation bar: optional leading button, title, optional trailing button.

    Args:
        parent: Parent widget.
        title: Centered title text.
        leading: Optional (label, callback) for the left button.
        trailing: Optional (label, callback) for the right button.

    Returns:
        The navigation bar frame.
    """
    frame = ttk.Frame(parent)
    frame.pack(fill=tk.X, pady=(0, 10))

    if leading is not None:
        label, callback = leading
        ttk.Button(frame, text=label, command=callback).pack(side=tk.LEFT)
    if trailing is not None:
        label, callback = trailing
        ttk.Button(frame, text=label, command=callback).pack(side=tk.RIGHT)

    ttk.Label(frame, text=title, font=("TkDefaultFont", 12, "bold")).pack()
    return frame


__all__ = [
    "create_info_label",
    "create_labeled_frame",
    "create_link_button",
    "create_navigation_bar",
    "create_value_label",
]
