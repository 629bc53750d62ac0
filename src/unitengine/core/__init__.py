"""Core primitives shared by the unit engine."""

from .settings import (
    CalendarSettings,
    Settings,
    StrideStyle,
    UnitSystem,
    get_settings,
    reset_settings,
    update_settings,
)

__all__ = [
    "CalendarSettings",
    "Settings",
    "StrideStyle",
    "UnitSystem",
    "get_settings",
    "reset_settings",
    "update_settings",
]
