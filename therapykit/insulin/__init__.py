"""Insulin types and insulin models for therapykit.

This package provides:
- InsulinType: the insulin a dose is associated with
- Exponential and Walsh insulin models, with the exponential presets
- InsulinModelSettings: the insulin model selection shown on the settings screen
- InsulinModelInformation: InsulinType -> insulin model lookup
"""

from therapykit.insulin.insulin_type import InsulinType
from therapykit.insulin.models import (
    DEFAULT_DELAY_MINUTES,
    ExponentialInsulinModel,
    ExponentialInsulinModelPreset,
    InsulinModel,
    InsulinModelInformation,
    InsulinModelSettings,
    WalshInsulinModel,
)

__all__ = [
    "DEFAULT_DELAY_MINUTES",
    "ExponentialInsulinModel",
    "ExponentialInsulinModelPreset",
    "InsulinModel",
    "InsulinModelInformation",
    "InsulinModelSettings",
    "InsulinType",
    "WalshInsulinModel",
]
