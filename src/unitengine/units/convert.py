"""Conversion between compatible units.

A value travels up the source unit's reference chain to its base unit,
optionally across a registered override between two base units, then down the
target unit's chain. Each step is either :class:`Linear` or
:class:`Reciprocal`; no rounding happens here.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from unitengine.core.settings import Settings, UnitSystem, resolve_settings

from .registry import UnitLike, UnitRegistry, resolve_registry
from .types import Unit

logger = logging.getLogger(__name__)


class IncompatibleUnitsError(ValueError):
    """Raised when two units share neither a base unit nor an override."""

    def __init__(self, source: str, target: str) -> None:
        super().__init__(f"Cannot convert '{source}' to '{target}'")
        self.source = source
        self.target = target


def can_convert(a: UnitLike, b: UnitLike, *, registry: Optional[UnitRegistry] = None) -> bool:
    registry = resolve_registry(registry)
    first = registry.terminus(a)
    second = registry.terminus(b)
    if first == second:
        return True
    return registry.override(first, second) is not None


def convert(
    value: float,
    from_unit: UnitLike,
    to_unit: UnitLike,
    *,
    registry: Optional[UnitRegistry] = None,
) -> float:
    """Convert ``value`` expressed in ``from_unit`` into ``to_unit``.

    Raises :class:`IncompatibleUnitsError` when the units cannot be converted
    and :class:`~unitengine.units.registry.UnknownUnitError` for unknown keys.
    """

    registry = resolve_registry(registry)
    source = registry.resolve(from_unit)
    target = registry.resolve(to_unit)
    if source == target:
        return float(value)

    source_base, up = registry.chain(source)
    target_base, down = registry.chain(target)

    result = float(value)
    for step in up:
        result = step.forward(result)

    if source_base != target_base:
        found = registry.override(source_base, target_base)
        if found is None:
            raise IncompatibleUnitsError(source.key, target.key)
        conversion, reversed_ = found
        result = conversion.inverse(result) if reversed_ else conversion.forward(result)

    for step in reversed(down):
        result = step.inverse(result)
    return result


def try_convert(
    value: float,
    from_unit: UnitLike,
    to_unit: UnitLike,
    *,
    registry: Optional[UnitRegistry] = None,
) -> Optional[float]:
    """Like :func:`convert` but returns ``None`` for incompatible units."""

    try:
        return convert(value, from_unit, to_unit, registry=registry)
    except IncompatibleUnitsError as exc:
        logger.debug("Conversion skipped: %s", exc)
        return None


def convert_keys(value: float, from_key: str, to_key: str) -> float:
    return convert(value, from_key, to_key)


def value_to_reference(value: float, unit: UnitLike, *, registry: Optional[UnitRegistry] = None) -> float:
    """Express ``value`` in the unit's direct reference unit."""

    unit = resolve_registry(registry).resolve(unit)
    return unit.conversion.forward(float(value))


def value_from_reference(value: float, unit: UnitLike, *, registry: Optional[UnitRegistry] = None) -> float:
    unit = resolve_registry(registry).resolve(unit)
    return unit.conversion.inverse(float(value))


def common_unit(
    a: UnitLike,
    b: UnitLike,
    *,
    settings: Optional[Settings] = None,
    registry: Optional[UnitRegistry] = None,
) -> Unit:
    """Pick the unit used to display values of both ``a`` and ``b``.

    Prefers the unit belonging to the configured unit system, otherwise the
    one registered first.
    """

    registry = resolve_registry(registry)
    first = registry.resolve(a)
    second = registry.resolve(b)
    if first == second:
        return first
    if not can_convert(first, second, registry=registry):
        raise IncompatibleUnitsError(first.key, second.key)

    system = resolve_settings(settings).unit_system
    if system is not UnitSystem.DEFAULT:
        matching = [unit for unit in (first, second) if unit.system is system]
        if len(matching) == 1:
            return matching[0]
    return min((first, second), key=registry.index_of)


# -- Activity helpers ---------------------------------------------------------
def kilojoules_from_watts(watts: float, seconds: float) -> float:
    return watts * seconds / 1000.0


def watts_from_kilojoules(kilojoules: float, seconds: float) -> float:
    if seconds == 0:
        return math.nan
    return kilojoules * 1000.0 / seconds


def steps_for_cadence(cadence: float, seconds: float) -> float:
    """Total steps for a cadence in steps per minute held for ``seconds``."""

    return cadence * seconds / 60.0


def cadence_for_steps(steps: float, seconds: float) -> float:
    if seconds == 0:
        return math.nan
    return steps / seconds * 60.0


__all__ = [
    "IncompatibleUnitsError",
    "cadence_for_steps",
    "can_convert",
    "common_unit",
    "convert",
    "convert_keys",
    "kilojoules_from_watts",
    "steps_for_cadence",
    "try_convert",
    "value_from_reference",
    "value_to_reference",
    "watts_from_kilojoules",
]
