"""Insulin model definitions for therapykit.

This module contains:
- ExponentialInsulinModel: activity curve parameterised by duration and peak
- ExponentialInsulinModelPreset: the presets users pick from
- WalshInsulinModel: legacy model with a user-chosen action duration
- InsulinModelSettings: the user's insulin model selection
- InsulinModelInformation: maps an InsulinType to the model to use for it
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

import numpy as np

from therapykit.insulin.insulin_type import InsulinType


DEFAULT_DELAY_MINUTES = 10.0


@dataclass(frozen=True)
class ExponentialInsulinModel:
    """Exponential insulin activity curve.

    All times are in minutes. The curve starts after ``delay`` and reaches
    zero remaining effect at ``delay + action_duration``.
    """

    action_duration: float
    peak_activity_time: float
    delay: float = DEFAULT_DELAY_MINUTES

    def __post_init__(self) -> None:
        if not 0 < self.peak_activity_time < self.action_duration / 2:
            raise ValueError(
                f"Peak activity time must be positive and less than half the action "
                f"duration: peak={self.peak_activity_time}, duration={self.action_duration}"
            )

    @property
    def effect_duration(self) -> float:
        """Minutes from dose until the insulin has no remaining effect."""
        return self.action_duration + self.delay

    @property
    def _tau(self) -> float:
        peak, duration = self.peak_activity_time, self.action_duration
        return peak * (1 - peak / duration) / (1 - 2 * peak / duration)

    @property
    def _a(self) -> float:
        return 2 * self._tau / self.action_duration

    @property
    def _s(self) -> float:
        return 1 / (1 - self._a + (1 + self._a) * math.exp(-self.action_duration / self._tau))

    def percent_effect_remaining(self, minutes: float) -> float:
        """Fraction of a dose's glucose-lowering effect still to come.

        Args:
            minutes: Time since the dose was delivered.

        Returns:
            1.0 up to the end of the delay, 0.0 from the end of the effect
            duration, and the exponential curve in between.
        """
        t = minutes - self.delay
        if t <= 0:
            return 1.0
        if t >= self.action_duration:
            return 0.0

        tau, a, s = self._tau, self._a, self._s
        return 1 - s * (1 - a) * (
            (t ** 2 / (tau * self.action_duration * (1 - a)) - t / tau - 1) * math.exp(-t / tau) + 1
        )

    def effect_remaining_curve(self, minutes: np.ndarray) -> np.ndarray:
        """Vectorized percent_effect_remaining over an array of minutes since the dose.

        Args:
            minutes: Times since the dose, any shape.

        Returns:
            float64 array of the same shape with values in [0, 1].
        """
        t = np.asarray(minutes, dtype=np.float64) - self.delay
        inside = np.clip(t, 0.0, self.action_duration)

        tau, a, s = self._tau, self._a, self._s
        curve = 1 - s * (1 - a) * (
            (inside ** 2 / (tau * self.action_duration * (1 - a)) - inside / tau - 1)
            * np.exp(-inside / tau) + 1
        )
        curve = np.where(t <= 0, 1.0, curve)
        return np.where(t >= self.action_duration, 0.0, curve)


class ExponentialInsulinModelPreset(Enum):
    """Exponential model presets."""

    HUMALOG_NOVOLOG_ADULT = "humalog_novolog_adult"
    HUMALOG_NOVOLOG_CHILD = "humalog_novolog_child"
    FIASP = "fiasp"

    @property
    def model(self) -> ExponentialInsulinModel:
        return _PRESET_MODELS[self]

    @property
    def title(self) -> str:
        return _PRESET_TEXT[self][0]

    @property
    def subtitle(self) -> str:
        return _PRESET_TEXT[self][1]


_PRESET_MODELS: dict[ExponentialInsulinModelPreset, ExponentialInsulinModel] = {
    ExponentialInsulinModelPreset.HUMALOG_NOVOLOG_ADULT: ExponentialInsulinModel(360, 75),
    ExponentialInsulinModelPreset.HUMALOG_NOVOLOG_CHILD: ExponentialInsulinModel(360, 65),
    ExponentialInsulinModelPreset.FIASP: ExponentialInsulinModel(360, 55),
}

_PRESET_TEXT: dict[ExponentialInsulinModelPreset, tuple[str, str]] = {
    ExponentialInsulinModelPreset.HUMALOG_NOVOLOG_ADULT: (
        "Rapid-Acting – Adults",
        "Peak activity at 75 minutes for Humalog, Novolog or Apidra.",
    ),
    ExponentialInsulinModelPreset.HUMALOG_NOVOLOG_CHILD: (
        "Rapid-Acting – Children",
        "Peak activity at 65 minutes for Humalog, Novolog or Apidra in children.",
    ),
    ExponentialInsulinModelPreset.FIASP: (
        "Fiasp",
        "Peak activity at 55 minutes for Fiasp.",
    ),
}


@dataclass(frozen=True)
class WalshInsulinModel:
    """Legacy Walsh model; only the action duration (minutes) is configurable."""

    action_duration: float = 360.0

    @property
    def effect_duration(self) -> float:
        return self.action_duration


InsulinModel = Union[ExponentialInsulinModel, WalshInsulinModel]


@dataclass(frozen=True)
class InsulinModelSettings:
    """The user's insulin model selection: an exponential preset or Walsh.

    Exactly one of ``exponential_preset`` and ``walsh_model`` is set.
    """

    exponential_preset: ExponentialInsulinModelPreset | None = None
    walsh_model: WalshInsulinModel | None = None

    def __post_init__(self) -> None:
        if (self.exponential_preset is None) == (self.walsh_model is None):
            raise ValueError("Exactly one of exponential_preset or walsh_model must be set")

    @classmethod
    def exponential(cls, preset: ExponentialInsulinModelPreset) -> InsulinModelSettings:
        return cls(exponential_preset=preset)

    @classmethod
    def walsh(cls, model: WalshInsulinModel) -> InsulinModelSettings:
        return cls(walsh_model=model)

    @property
    def model(self) -> InsulinModel:
        if self.exponential_preset is not None:
            return self.exponential_preset.model
        return self.walsh_model

    @property
    def title(self) -> str:
        if self.exponential_preset is not None:
            return self.exponential_preset.title
        return "Walsh"

    @property
    def subtitle(self) -> str:
        if self.exponential_preset is not None:
            return self.exponential_preset.subtitle
        hours = self.walsh_model.action_duration / 60
        return f"Legacy model with a custom action duration of {hours:g} hours."

    @property
    def insulin_type(self) -> InsulinType:
        """Insulin type this selection implies (Fiasp, or rapid acting otherwise)."""
        if self.exponential_preset is ExponentialInsulinModelPreset.FIASP:
            return InsulinType.FIASP
        return InsulinType.RAPID_ACTING

    @classmethod
    def from_config_dict(cls, data: dict[str, Any]) -> InsulinModelSettings:
        """Create settings from ``{"type": "exponential", "preset": ...}`` or
        ``{"type": "walsh", "action_duration": ...}``.

        Raises:
            ValueError: If the type or preset is unknown.
        """
        model_type = data.get("type", "exponential")
        if model_type == "exponential":
            return cls.exponential(ExponentialInsulinModelPreset(data["preset"]))
        if model_type == "walsh":
            return cls.walsh(WalshInsulinModel(float(data.get("action_duration", 360.0))))
        raise ValueError(f"Unknown insulin model type: {model_type}")

    def to_config_dict(self) -> dict[str, Any]:
        if self.exponential_preset is not None:
            return {"type": "exponential", "preset": self.exponential_preset.value}
        return {"type": "walsh", "action_duration": self.walsh_model.action_duration}


class InsulinModelInformation:
    """Matches an InsulinType with the insulin model to use for it.

    Example:
        >>> info = InsulinModelInformation(default_model=WalshInsulinModel(300))
        >>> info.insulin_model_for(InsulinType.FIASP)  # the Fiasp preset model
    """

    def __init__(
        self,
        default_model: InsulinModel,
        rapid_acting_model: InsulinModel | None = None,
    ) -> None:
        """Initialize the lookup.

        Args:
            default_model: Model used when no insulin type is known.
            rapid_acting_model: Model for rapid-acting insulin. Defaults to the
                adult rapid-acting preset.
        """
        self.default_model = default_model
        self.rapid_acting_model = (
            rapid_acting_model
            if rapid_acting_model is not None
            else ExponentialInsulinModelPreset.HUMALOG_NOVOLOG_ADULT.model
        )

    def insulin_model_for(self, insulin_type: InsulinType | None) -> InsulinModel:
        """Return the model for an insulin type (default model when unknown)."""
        if insulin_type is None or insulin_type is InsulinType.NONE:
            return self.default_model
        if insulin_type is InsulinType.RAPID_ACTING:
            return self.rapid_acting_model
        return ExponentialInsulinModelPreset.FIASP.model


__all__ = [
    "DEFAULT_DELAY_MINUTES",
    "ExponentialInsulinModel",
    "ExponentialInsulinModelPreset",
    "InsulinModel",
    "InsulinModelInformation",
    "InsulinModelSettings",
    "WalshInsulinModel",
]
