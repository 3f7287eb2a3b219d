"""Insulin type definitions for therapykit."""

from __future__ import annotations

from enum import IntEnum


class InsulinType(IntEnum):
    """Kinds of insulin a dose or pump reservoir can be associated with.

    Values are stable integers so they can be stored alongside doses.
    """

    NONE = 0
    RAPID_ACTING = 1
    FIASP = 2

    @property
    def title(self) -> str:
        return _TITLES[self]


_TITLES: dict[InsulinType, str] = {
    InsulinType.NONE: "No Associated Model",
    InsulinType.RAPID_ACTING: "Rapid Acting",
    InsulinType.FIASP: "Fiasp",
}


__all__ = ["InsulinType"]
