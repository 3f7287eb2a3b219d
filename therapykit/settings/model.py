"""Therapy settings model for therapykit.

Provides immutable therapy-settings snapshots and the schedule value types
they are built from. This module is GUI-agnostic and never validates or
converts therapy values; presence or absence of each field is all the
screens look at.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from therapykit.insulin.models import InsulinModelSettings


SECONDS_PER_DAY = 24 * 60 * 60


class GlucoseUnit(Enum):
    """Glucose units a target schedule can be expressed in."""

    MG_DL = "mg/dL"
    MMOL_L = "mmol/L"

    @property
    def sensitivity_unit(self) -> str:
        """Unit of an insulin sensitivity expressed in this glucose unit."""
        return f"{self.value}/U"


# Display units for the non-glucose schedules
UNITS_PER_HOUR = "U/hr"
UNITS = "U"
GRAMS_PER_UNIT = "g/U"


def _config_table(config: dict[str, Any], key: str) -> dict[str, Any] | None:
    """Get an optional TOML table, rejecting scalars and arrays."""
    value = config.get(key)
    if value is not None and not isinstance(value, dict):
        raise TypeError(f"[{key}] must be a table, got {type(value).__name__}")
    return value


def _optional_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def format_time_of_day(seconds: float) -> str:
    """Format a schedule start time (seconds from midnight) as HH:MM.

    Args:
        seconds: Offset from midnight. Values past 24h wrap around.

    Returns:
        Zero-padded "HH:MM" label.
    """
    total_minutes = int(seconds % SECONDS_PER_DAY) // 60
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


@dataclass(frozen=True)
class DoubleRange:
    """Closed range of two floats."""

    minimum: float
    maximum: float

    @classmethod
    def from_config_value(cls, value: Any) -> DoubleRange:
        """Build a range from a ``[min, max]`` list or ``{min, max}`` table."""
        if isinstance(value, dict):
            return cls(float(value["min"]), float(value["max"]))
        minimum, maximum = value
        return cls(float(minimum), float(maximum))

    def to_config_value(self) -> list[float]:
        return [self.minimum, self.maximum]


@dataclass(frozen=True)
class RepeatingScheduleValue:
    """One schedule entry, active from ``start_time`` until the next entry.

    Attributes:
        start_time: Seconds from midnight.
        value: A float, or a DoubleRange for glucose target schedules.
    """

    start_time: float
    value: Any


@dataclass(frozen=True)
class DailyValueSchedule:
    """Time-of-day schedule of scalar values (basal, carb ratio, sensitivity)."""

    items: tuple[RepeatingScheduleValue, ...]
    unit: str

    def value_range(self) -> DoubleRange | None:
        """Smallest and largest scheduled value, or None for an empty schedule."""
        if not self.items:
            return None
        values = [item.value for item in self.items]
        return DoubleRange(min(values), max(values))

    @classmethod
    def from_config_dict(cls, data: dict[str, Any], unit: str) -> DailyValueSchedule:
        items = tuple(
            RepeatingScheduleValue(float(item["start_time"]), float(item["value"]))
            for item in data.get("items", [])
        )
        return cls(items=items, unit=data.get("unit", unit))

    def to_config_dict(self) -> dict[str, Any]:
        return {
            "unit": self.unit,
            "items": [
                {"start_time": item.start_time, "value": item.value}
                for item in self.items
            ],
        }


@dataclass(frozen=True)
class GlucoseRangeSchedule:
    """Time-of-day schedule of glucose target ranges (the correction range)."""

    unit: GlucoseUnit
    items: tuple[RepeatingScheduleValue, ...]

    def schedule_range(self) -> DoubleRange | None:
        """Lowest minimum and highest maximum across all entries."""
        if not self.items:
            return None
        return DoubleRange(
            min(item.value.minimum for item in self.items),
            max(item.value.maximum for item in self.items),
        )

    @classmethod
    def from_config_dict(cls, data: dict[str, Any]) -> GlucoseRangeSchedule:
        items = tuple(
            RepeatingScheduleValue(
                float(item["start_time"]),
                DoubleRange(float(item["min"]), float(item["max"])),
            )
            for item in data.get("items", [])
        )
        return cls(unit=GlucoseUnit(data.get("unit", GlucoseUnit.MG_DL.value)), items=items)

    def to_config_dict(self) -> dict[str, Any]:
        return {
            "unit": self.unit.value,
            "items": [
                {
                    "start_time": item.start_time,
                    "min": item.value.minimum,
                    "max": item.value.maximum,
                }
                for item in self.items
            ],
        }


@dataclass(frozen=True)
class GlucoseThreshold:
    """A single glucose value with its unit (the suspend threshold)."""

    unit: GlucoseUnit
    value: float


@dataclass(frozen=True)
class PumpSupportedIncrements:
    """Delivery increments the paired pump can actually dose."""

    basal_rates: tuple[float, ...]
    bolus_volumes: tuple[float, ...]
    maximum_basal_schedule_entry_count: int = 48


@dataclass(frozen=True)
class Prescription:
    """Clinician prescription the acceptance flow is reviewing."""

    provider_name: str
    date_prescribed: date


@dataclass(frozen=True)
class SupportedInsulinModelSettings:
    """Which optional insulin models the app build allows choosing."""

    fiasp_model_enabled: bool = True
    walsh_model_enabled: bool = True


@dataclass(frozen=True)
class TherapySettings:
    """Immutable therapy settings snapshot - every field may be absent.

    Use with_changes() to create modified copies (immutable pattern).

    Example:
        >>> settings = TherapySettings.from_config_dict(data)
        >>> updated = settings.with_changes(maximum_bolus=8.0)
        >>> settings.diff(updated)  # {"maximum_bolus"}
    """

    glucose_target_range_schedule: GlucoseRangeSchedule | None = None
    pre_meal_target_range: DoubleRange | None = None
    workout_target_range: DoubleRange | None = None
    maximum_basal_rate_per_hour: float | None = None
    maximum_bolus: float | None = None
    suspend_threshold: GlucoseThreshold | None = None
    insulin_sensitivity_schedule: DailyValueSchedule | None = None
    carb_ratio_schedule: DailyValueSchedule | None = None
    basal_rate_schedule: DailyValueSchedule | None = None
    insulin_model_settings: InsulinModelSettings | None = None

    @property
    def glucose_unit(self) -> GlucoseUnit | None:
        """Glucose unit of the correction range schedule, if there is one."""
        if self.glucose_target_range_schedule is None:
            return None
        return self.glucose_target_range_schedule.unit

    @property
    def sensitivity_unit(self) -> str | None:
        unit = self.glucose_unit
        return unit.sensitivity_unit if unit is not None else None

    def with_changes(self, **kwargs: Any) -> TherapySettings:
        """Create a new snapshot with specified fields changed.

        Args:
            **kwargs: Field names and new values.

        Returns:
            New TherapySettings with changes applied.
        """
        return replace(self, **kwargs)

    def diff(self, other: TherapySettings) -> set[str]:
        """Find fields that differ between this snapshot and another.

        Args:
            other: Another TherapySettings to compare against.

        Returns:
            Set of field names that have different values.
        """
        return {
            f.name for f in fields(self)
            if getattr(self, f.name) != getattr(other, f.name)
        }

    @classmethod
    def from_config_dict(cls, config: dict[str, Any]) -> TherapySettings:
        """Create snapshot from a TOML-shaped dictionary.

        Missing tables leave the matching field unset.

        Args:
            config: Dictionary with optional ``glucose_target_range``,
                ``correction_range_overrides``, ``suspend_threshold``,
                ``basal_rate``, ``delivery_limits``, ``insulin_model``,
                ``carb_ratio`` and ``insulin_sensitivity`` tables.

        Returns:
            New TherapySettings.

        Raises:
            KeyError: If a table is missing a required key.
            TypeError: If a table is not a table, or holds the wrong shape.
            ValueError: If a number or unit cannot be parsed.
        """
        from therapykit.insulin.models import InsulinModelSettings

        target = _config_table(config, "glucose_target_range")
        overrides = _config_table(config, "correction_range_overrides") or {}
        limits = _config_table(config, "delivery_limits") or {}
        threshold = _config_table(config, "suspend_threshold")
        sensitivity = _config_table(config, "insulin_sensitivity")
        carb_ratio = _config_table(config, "carb_ratio")
        basal = _config_table(config, "basal_rate")
        insulin_model = _config_table(config, "insulin_model")

        target_schedule = (
            GlucoseRangeSchedule.from_config_dict(target) if target is not None else None
        )
        glucose_unit = target_schedule.unit if target_schedule else GlucoseUnit.MG_DL

        return cls(
            glucose_target_range_schedule=target_schedule,
            pre_meal_target_range=(
                DoubleRange.from_config_value(overrides["pre_meal"])
                if "pre_meal" in overrides else None
            ),
            workout_target_range=(
                DoubleRange.from_config_value(overrides["workout"])
                if "workout" in overrides else None
            ),
            maximum_basal_rate_per_hour=_optional_float(limits.get("maximum_basal_rate_per_hour")),
            maximum_bolus=_optional_float(limits.get("maximum_bolus")),
            suspend_threshold=(
                GlucoseThreshold(
                    GlucoseUnit(threshold.get("unit", glucose_unit.value)),
                    float(threshold["value"]),
                )
                if threshold is not None else None
            ),
            insulin_sensitivity_schedule=(
                DailyValueSchedule.from_config_dict(sensitivity, glucose_unit.sensitivity_unit)
                if sensitivity is not None else None
            ),
            carb_ratio_schedule=(
                DailyValueSchedule.from_config_dict(carb_ratio, GRAMS_PER_UNIT)
                if carb_ratio is not None else None
            ),
            basal_rate_schedule=(
                DailyValueSchedule.from_config_dict(basal, UNITS_PER_HOUR)
                if basal is not None else None
            ),
            insulin_model_settings=(
                InsulinModelSettings.from_config_dict(insulin_model)
                if insulin_model is not None else None
            ),
        )

    def to_config_dict(self) -> dict[str, Any]:
        """Convert snapshot to a TOML-shaped dictionary (absent fields omitted)."""
        config: dict[str, Any] = {}
        if self.glucose_target_range_schedule is not None:
            config["glucose_target_range"] = self.glucose_target_range_schedule.to_config_dict()

        overrides = {}
        if self.pre_meal_target_range is not None:
            overrides["pre_meal"] = self.pre_meal_target_range.to_config_value()
        if self.workout_target_range is not None:
            overrides["workout"] = self.workout_target_range.to_config_value()
        if overrides:
            config["correction_range_overrides"] = overrides

        limits = {}
        if self.maximum_basal_rate_per_hour is not None:
            limits["maximum_basal_rate_per_hour"] = self.maximum_basal_rate_per_hour
        if self.maximum_bolus is not None:
            limits["maximum_bolus"] = self.maximum_bolus
        if limits:
            config["delivery_limits"] = limits

        if self.suspend_threshold is not None:
            config["suspend_threshold"] = {
                "unit": self.suspend_threshold.unit.value,
                "value": self.suspend_threshold.value,
            }
        if self.insulin_sensitivity_schedule is not None:
            config["insulin_sensitivity"] = self.insulin_sensitivity_schedule.to_config_dict()
        if self.carb_ratio_schedule is not None:
            config["carb_ratio"] = self.carb_ratio_schedule.to_config_dict()
        if self.basal_rate_schedule is not None:
            config["basal_rate"] = self.basal_rate_schedule.to_config_dict()
        if self.insulin_model_settings is not None:
            config["insulin_model"] = self.insulin_model_settings.to_config_dict()
        return config


__all__ = [
    "DailyValueSchedule",
    "DoubleRange",
    "GRAMS_PER_UNIT",
    "GlucoseRangeSchedule",
    "GlucoseThreshold",
    "GlucoseUnit",
    "Prescription",
    "PumpSupportedIncrements",
    "RepeatingScheduleValue",
    "SECONDS_PER_DAY",
    "SupportedInsulinModelSettings",
    "TherapySettings",
    "UNITS",
    "UNITS_PER_HOUR",
    "format_time_of_day",
]
