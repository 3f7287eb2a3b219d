"""Percentage text field for therapykit.

GUI-agnostic model of a text field that edits a fraction as a percentage:
the user types "12.5" and the field reports 0.125. Any frontend binds its
entry widget to ``value`` and calls end_editing()/return_pressed().
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Callable

logger = logging.getLogger(__name__)


class PercentageTextField:
    """Text field whose contents are a percentage.

    Attributes:
        value: Raw text in the field (None when empty).
        unit: Unit label shown after the field.
        placeholder: Hint shown while the field is empty.
        on_percentage_changed: Called with the field when editing ends or
            return is pressed.

    Example:
        >>> field = PercentageTextField()
        >>> field.percentage = 0.125
        >>> field.value
        '12.5'
    """

    unit = "%"
    placeholder = "Enter percentage"

    def __init__(
        self,
        value: str | None = None,
        maximum_fraction_digits: int = 1,
        on_percentage_changed: Callable[[PercentageTextField], None] | None = None,
    ) -> None:
        """Initialize the field.

        Args:
            value: Initial raw text.
            maximum_fraction_digits: Digits kept after the decimal point when
                formatting a percentage into the field.
            on_percentage_changed: Change notification callback.
        """
        self.value = value
        self.maximum_fraction_digits = maximum_fraction_digits
        self.on_percentage_changed = on_percentage_changed

    @property
    def maximum_fraction_digits(self) -> int:
        return self._maximum_fraction_digits

    @maximum_fraction_digits.setter
    def maximum_fraction_digits(self, digits: int) -> None:
        if digits < 0:
            raise ValueError(f"maximum_fraction_digits must be non-negative, got {digits}")
        self._maximum_fraction_digits = digits

    @property
    def percentage(self) -> float | None:
        """Field contents as a fraction (50 -> 0.5); None if empty or not a number."""
        if self.value is None:
            return None
        try:
            return float(self.value) / 100
        except ValueError:
            return None

    @percentage.setter
    def percentage(self, percentage: float | None) -> None:
        """Format a fraction into the field (None clears it).

        Raises:
            ValueError: If the fraction is infinite or NaN.
        """
        if percentage is None:
            self.value = None
        elif not math.isfinite(percentage):
            raise ValueError(f"percentage must be finite, got {percentage}")
        else:
            self.value = self._format(percentage * 100)

    def end_editing(self) -> None:
        """The user finished editing the field."""
        self._notify()

    def return_pressed(self) -> None:
        """The user pressed return in the field."""
        self._notify()

    def _format(self, number: float) -> str:
        """Format with at least one integer digit and no trailing fraction zeros."""
        quantum = Decimal(1).scaleb(-self._maximum_fraction_digits)
        rounded = Decimal(repr(number)).quantize(quantum, rounding=ROUND_HALF_EVEN)
        text = f"{rounded:f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        if text == "-0":
            text = "0"
        return text

    def _notify(self) -> None:
        logger.debug("percentage_field: changed, value=%s", self.value)
        if self.on_percentage_changed is not None:
            self.on_percentage_changed(self)


__all__ = ["PercentageTextField"]
