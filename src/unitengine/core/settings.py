"""Process-wide settings: unit system, stride style and calendar.

Settings are stored as an immutable snapshot. Writers replace the snapshot
under a lock; readers take whatever snapshot was last written. Callers that
need a consistent view across a batch should call :func:`get_settings` once
and pass the result explicitly (every settings-dependent function accepts a
``settings=`` keyword).
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field, replace
from datetime import timezone, tzinfo
from enum import Enum
from functools import lru_cache
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


class UnitSystem(str, Enum):
    DEFAULT = "default"
    METRIC = "metric"
    IMPERIAL = "imperial"


class StrideStyle(str, Enum):
    """How strides are counted: same foot to same foot, or between feet."""

    SAME_FOOT = "same_foot"
    BETWEEN_FEET = "between_feet"

    @property
    def multiplier(self) -> int:
        return 2 if self is StrideStyle.SAME_FOOT else 1

ENV_UNIT_SYSTEM = "UNITENGINE_UNIT_SYSTEM"
ENV_STRIDE_STYLE = "UNITENGINE_STRIDE_STYLE"
ENV_FIRST_WEEKDAY = "UNITENGINE_FIRST_WEEKDAY"
ENV_TIMEZONE = "UNITENGINE_TIMEZONE"


@lru_cache(maxsize=None)
def _zone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


@dataclass(frozen=True)
class CalendarSettings:
    """Calendar rules used to interpret calendar-relative units.

    ``first_weekday`` follows :mod:`datetime` numbering (0 is Monday).
    """

    first_weekday: int = 0
    timezone: str = "UTC"

    def __post_init__(self) -> None:
        if not 0 <= self.first_weekday <= 6:
            raise ValueError(f"first_weekday must be in 0..6, got {self.first_weekday}")
        try:
            _zone(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone '{self.timezone}'") from exc

    @property
    def tzinfo(self) -> tzinfo:
        return _zone(self.timezone)


@dataclass(frozen=True)
class Settings:
    unit_system: UnitSystem = UnitSystem.DEFAULT
    stride_style: StrideStyle = StrideStyle.BETWEEN_FEET
    calendar: CalendarSettings = field(default_factory=CalendarSettings)

    def __post_init__(self) -> None:
        if not isinstance(self.unit_system, UnitSystem):
            object.__setattr__(self, "unit_system", UnitSystem(self.unit_system))
        if not isinstance(self.stride_style, StrideStyle):
            object.__setattr__(self, "stride_style", StrideStyle(self.stride_style))


_lock = threading.Lock()
_current: Optional[Settings] = None


def _env_enum(name: str, enum_type, default):
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return enum_type(raw.strip().lower())
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default.value)
        return default


def settings_from_env() -> Settings:
    """Build settings from ``UNITENGINE_*`` environment variables."""

    calendar = CalendarSettings()
    weekday_raw = os.getenv(ENV_FIRST_WEEKDAY)
    tz_raw = os.getenv(ENV_TIMEZONE)
    if weekday_raw:
        try:
            calendar = replace(calendar, first_weekday=int(weekday_raw))
        except ValueError:
            logger.warning("Ignoring invalid %s=%r", ENV_FIRST_WEEKDAY, weekday_raw)
    if tz_raw:
        try:
            calendar = replace(calendar, timezone=tz_raw.strip())
        except ValueError:
            logger.warning("Ignoring invalid %s=%r", ENV_TIMEZONE, tz_raw)

    return Settings(
        unit_system=_env_enum(ENV_UNIT_SYSTEM, UnitSystem, UnitSystem.DEFAULT),
        stride_style=_env_enum(ENV_STRIDE_STYLE, StrideStyle, StrideStyle.BETWEEN_FEET),
        calendar=calendar,
    )


def get_settings() -> Settings:
    """Return the current process-wide settings snapshot."""

    global _current
    snapshot = _current
    if snapshot is not None:
        return snapshot
    with _lock:
        if _current is None:
            _current = settings_from_env()
        return _current


def update_settings(**changes) -> Settings:
    """Atomically replace fields of the process-wide settings.

    Accepts ``unit_system``, ``stride_style`` and ``calendar``; plain strings
    are coerced to the matching enum. Changes only affect conversions made
    afterwards; values already converted by callers are not reinterpreted.
    """

    global _current
    base = get_settings()
    with _lock:
        base = _current or base
        updated = replace(base, **changes)
        _current = updated
    if updated != base:
        logger.info(
            "Settings updated: unit_system=%s stride_style=%s calendar=%s",
            updated.unit_system.value,
            updated.stride_style.value,
            updated.calendar,
        )
    return updated


def set_settings(settings: Settings) -> Settings:
    global _current
    with _lock:
        _current = settings
    return settings


def reset_settings() -> Settings:
    """Discard the current snapshot and reload from the environment."""

    global _current
    with _lock:
        _current = settings_from_env()
        return _current


def resolve_settings(settings: Optional[Settings]) -> Settings:
    return settings if settings is not None else get_settings()


_STRIDE_DESCRIPTIONS: Dict[StrideStyle, str] = {
    StrideStyle.SAME_FOOT: "Same foot (2x)",
    StrideStyle.BETWEEN_FEET: "Between feet (1x)",
}


def stride_style_descriptions() -> List[str]:
    return [_STRIDE_DESCRIPTIONS[style] for style in StrideStyle]


__all__ = [
    "CalendarSettings",
    "Settings",
    "StrideStyle",
    "UnitSystem",
    "get_settings",
    "reset_settings",
    "resolve_settings",
    "set_settings",
    "settings_from_env",
    "stride_style_descriptions",
    "update_settings",
]
