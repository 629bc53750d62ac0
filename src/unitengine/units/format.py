"""Rendering of numeric values in a unit's display style."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import List, Optional, Tuple

from unitengine.core.settings import Settings, resolve_settings

from .convert import convert
from .registry import UnitLike, UnitRegistry, resolve_registry
from .types import Unit, UnitFormat

logger = logging.getLogger(__name__)

PLACEHOLDER = "--"

_DIGITS = {
    UnitFormat.TIME: 0,
    UnitFormat.INTEGER: 0,
    UnitFormat.ONE_DIGIT: 1,
    UnitFormat.TWO_DIGIT: 2,
    UnitFormat.THREE_DIGIT: 3,
}

_NUMBER_SUFFIXES: Tuple[Tuple[float, str], ...] = ((1e3, "K"), (1e6, "M"), (1e9, "G"))
_BYTE_SUFFIXES = ("B", "KB", "MB", "GB", "TB")
_ATTACHED_ABBREVIATIONS = {"%"}


def _is_number(value: object) -> bool:
    try:
        return math.isfinite(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return False


def format_value(
    value: float,
    unit: UnitLike,
    *,
    add_abbr: bool = False,
    settings: Optional[Settings] = None,
    registry: Optional[UnitRegistry] = None,
) -> str:
    """Format ``value`` according to ``unit.format``.

    Non-finite values render as :data:`PLACEHOLDER`. The abbreviation is only
    appended when ``add_abbr`` is set.
    """

    unit = resolve_registry(registry).resolve(unit)
    if not _is_number(value):
        return PLACEHOLDER
    value = float(value)

    if unit.format is UnitFormat.DATE:
        text = _format_date(value, unit, resolve_settings(settings))
    elif (
        unit.enable_number_abbreviation
        and unit.format is not UnitFormat.TIME
        and abs(value) >= 1000
    ):
        text = _abbreviate(value)
    else:
        text = _format_number(value, unit)

    if add_abbr and text != PLACEHOLDER:
        return _append_abbr(text, unit)
    return text


def _format_number(value: float, unit: Unit) -> str:
    if unit.format is UnitFormat.TIME:
        return format_duration(value * unit.time_scale)
    if unit.format is UnitFormat.DOUBLE:
        return repr(value)
    return _fixed(value, _DIGITS[unit.format])


def _fixed(value: float, digits: int) -> str:
    text = f"{value:.{digits}f}"
    if text.startswith("-") and float(text) == 0:
        return text[1:]
    return text


def format_duration(seconds: float) -> str:
    """``H:MM:SS`` or ``M:SS``; sub-second parts are truncated."""

    if not _is_number(seconds):
        return PLACEHOLDER
    total = int(abs(seconds))
    sign = "-" if seconds < 0 and total > 0 else ""
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}:{minutes:02d}:{secs:02d}"
    return f"{sign}{minutes}:{secs:02d}"


def _format_date(timestamp: float, unit: Unit, settings: Settings) -> str:
    try:
        moment = datetime.fromtimestamp(timestamp, tz=settings.calendar.tzinfo)
    except (OverflowError, OSError, ValueError):
        logger.debug("Timestamp %r out of range for unit %s", timestamp, unit.key)
        return PLACEHOLDER
    return moment.strftime(unit.date_pattern or "%Y-%m-%d")


def _abbreviate(value: float) -> str:
    largest = _NUMBER_SUFFIXES[-1][1]
    for divisor, suffix in _NUMBER_SUFFIXES:
        scaled = value / divisor
        text = _fixed(scaled, 1)
        # decimals follow the rounded figure: 9960 reads 10K
        if abs(float(text)) >= 10:
            text = _fixed(scaled, 0)
        if abs(float(text)) < 1000 or suffix == largest:
            return f"{text}{suffix}"
    return _fixed(value, 0)  # pragma: no cover - loop always returns


def _append_abbr(text: str, unit: Unit) -> str:
    if not unit.abbr:
        return text
    if unit.abbr in _ATTACHED_ABBREVIATIONS:
        return f"{text}{unit.abbr}"
    return f"{text} {unit.abbr}"


def format_components(
    value: float,
    unit: UnitLike,
    *,
    add_abbr: bool = False,
    settings: Optional[Settings] = None,
    registry: Optional[UnitRegistry] = None,
) -> List[str]:
    """Split ``value`` into display components, major component first.

    Compound units (feet and inches) break the value into whole major units
    and a remainder expressed in the compound unit, recursively. Fraction units
    show the value followed by its fractional part in the fraction unit. Any
    other unit yields a single component.
    """

    registry = resolve_registry(registry)
    unit = registry.resolve(unit)
    if not _is_number(value):
        return [PLACEHOLDER]
    value = float(value)

    if unit.compound_unit:
        return _compound_components(value, unit, add_abbr, registry)
    if unit.fraction_unit:
        fraction = registry.get(unit.fraction_unit)
        whole = math.trunc(value)
        remainder = convert(value - whole, unit, fraction, registry=registry)
        return [
            format_value(value, unit, add_abbr=add_abbr, settings=settings, registry=registry),
            format_value(remainder, fraction, add_abbr=add_abbr, settings=settings, registry=registry),
        ]
    return [format_value(value, unit, add_abbr=add_abbr, settings=settings, registry=registry)]


def _compound_components(
    value: float, unit: Unit, add_abbr: bool, registry: UnitRegistry
) -> List[str]:
    levels = [unit]
    while levels[-1].compound_unit:
        levels.append(registry.get(levels[-1].compound_unit))
    leaf = levels[-1]

    # work in the smallest unit so rounding carries into the larger ones
    total = convert(abs(value), unit, leaf, registry=registry)
    digits = _DIGITS.get(leaf.format)
    if digits is not None:
        total = round(total, digits)

    parts: List[str] = []
    nonzero = False
    for level in levels[:-1]:
        per = round(convert(1.0, level, leaf, registry=registry), 9)
        count = math.floor(total / per + 1e-9)
        total = max(total - count * per, 0.0)
        nonzero = nonzero or count > 0
        text = str(count)
        parts.append(_append_abbr(text, level) if add_abbr else text)
    if digits is not None:
        total = round(total, digits)
    parts.append(format_value(total, leaf, add_abbr=add_abbr, registry=registry))

    if value < 0 and (nonzero or total > 0):
        parts[0] = f"-{parts[0]}"
    return parts


def format_converted(
    value: float,
    from_unit: UnitLike,
    to_unit: UnitLike,
    *,
    add_abbr: bool = True,
    settings: Optional[Settings] = None,
    registry: Optional[UnitRegistry] = None,
) -> str:
    converted = convert(value, from_unit, to_unit, registry=registry)
    return format_value(converted, to_unit, add_abbr=add_abbr, settings=settings, registry=registry)


def format_for_display(
    value: float,
    unit: UnitLike,
    *,
    add_abbr: bool = True,
    settings: Optional[Settings] = None,
    registry: Optional[UnitRegistry] = None,
) -> str:
    """Format a stored value in the unit selected by the unit system and stride style."""

    registry = resolve_registry(registry)
    settings = resolve_settings(settings)
    shown = registry.display_unit(unit, settings=settings)
    return format_converted(value, unit, shown, add_abbr=add_abbr, settings=settings, registry=registry)


def _byte_text(value: float, index: int) -> str:
    if index == 0:
        return _fixed(value, 0)
    return f"{value:.3g}" if abs(value) < 100 else _fixed(value, 0)


def format_bytes(count: float) -> str:
    """Render a byte count with the largest unit keeping the magnitude under 1024."""

    if not _is_number(count):
        return PLACEHOLDER
    value = float(count)
    index = 0
    while True:
        text = _byte_text(value, index)
        # 1023.99 KB rounds to 1024, which belongs to the next suffix
        if abs(float(text)) < 1024 or index == len(_BYTE_SUFFIXES) - 1:
            break
        value /= 1024.0
        index += 1
    return f"{text} {_BYTE_SUFFIXES[index]}"


__all__ = [
    "PLACEHOLDER",
    "format_bytes",
    "format_components",
    "format_converted",
    "format_duration",
    "format_for_display",
    "format_value",
]
