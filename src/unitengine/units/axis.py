"""Nice axis steps ("knobs") for charting numeric ranges.

A step is nice when it is ``m * base**k`` with ``m`` taken from a short list of
round multipliers. For base 10 the multipliers are ``1, 2, 2.5, 5, 10``;
clock-like units use base 60 so steps land on whole minutes or hours.

Every result is bounded: ``n_knobs`` is capped at :data:`MAX_KNOBS` and ranges
wider than the float range are sized on a scaled copy instead of overflowing.
"""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .registry import UnitLike, UnitRegistry, resolve_registry

logger = logging.getLogger(__name__)

DEFAULT_STEP = 1.0
MAX_KNOBS = 1000

NICE_MULTIPLIERS: Dict[float, Tuple[float, ...]] = {
    10.0: (1.0, 2.0, 2.5, 5.0, 10.0),
    60.0: (1.0, 2.0, 5.0, 10.0, 15.0, 20.0, 30.0, 60.0),
}

# a nice step leaves at most n + 2 intervals once the range is snapped outward
_MAX_TICKS = MAX_KNOBS + 3


@dataclass(frozen=True)
class AxisScale:
    step: float
    min: float
    max: float

    @property
    def knobs(self) -> List[float]:
        first = round(self.min / self.step)
        count = _interval_count(first, round(self.max / self.step))
        return [_clean((first + i) * self.step) for i in range(count + 1)]


def _clean(value: float) -> float:
    # trims float noise such as 0.30000000000000004 without moving the grid
    return float(f"{value:.12g}")


def _interval_count(first: int, last: int) -> int:
    count = max(last - first, 0)
    if count > _MAX_TICKS:
        logger.debug("Axis asks for %d intervals, truncating to %d", count, _MAX_TICKS)
        return _MAX_TICKS
    return count


def nice_step(raw: float, base: float = 10.0) -> float:
    """Smallest nice number greater than or equal to ``raw``.

    Below the normal float range, or when the next nice number would overflow,
    ``raw`` itself is returned.
    """

    if not math.isfinite(raw) or raw <= 0:
        return DEFAULT_STEP
    multipliers = NICE_MULTIPLIERS.get(base)
    if multipliers is None or (base != 10.0 and raw < 1.0):
        base = 10.0
        multipliers = NICE_MULTIPLIERS[base]

    magnitude = base ** math.floor(math.log(raw, base))
    # log rounding can leave raw / magnitude just outside [1, base)
    if magnitude > raw:
        magnitude /= base
    elif magnitude * base <= raw:
        magnitude *= base
    if magnitude == 0.0:
        logger.debug("Axis step %r is subnormal, using it unrounded", raw)
        return raw
    normalized = raw / magnitude

    for multiplier in multipliers:
        if multiplier >= normalized * (1 - 1e-12):
            step = multiplier * magnitude
            return step if math.isfinite(step) else raw
    return raw  # pragma: no cover - last multiplier is base


def _prepare(n_knobs: int, x_min: float, x_max: float) -> Optional[Tuple[int, float, float]]:
    if not (math.isfinite(x_min) and math.isfinite(x_max)):
        return None
    n = min(max(int(n_knobs), 1), MAX_KNOBS)
    low, high = (x_min, x_max) if x_min <= x_max else (x_max, x_min)
    return n, low, high


def _step_for(n: int, low: float, high: float, base: float) -> float:
    span = high - low
    if span == 0:
        span = abs(high) or 1.0
        logger.debug("Degenerate axis range [%s, %s], using span %s", low, high, span)
    if math.isinf(span):
        # wider than the float range: size the step on the range divided by base
        factor = base if base in NICE_MULTIPLIERS else 10.0
        step = nice_step((high / factor - low / factor) / n, base) * factor
        return step if math.isfinite(step) else sys.float_info.max
    return nice_step(span / n, base)


def axis_knob_size(n_knobs: int, x_min: float, x_max: float, *, base: float = 10.0) -> float:
    """Step size giving roughly ``n_knobs`` intervals over ``[x_min, x_max]``."""

    prepared = _prepare(n_knobs, x_min, x_max)
    if prepared is None:
        logger.debug("Non-finite axis range [%s, %s], using default step", x_min, x_max)
        return DEFAULT_STEP
    return _step_for(*prepared, base)


def scale_axis(
    n_knobs: int,
    x_min: float,
    x_max: float,
    *,
    extend_to_knobs: bool = False,
    base: float = 10.0,
) -> AxisScale:
    """Compute the step and, when requested, the range snapped outward to it."""

    prepared = _prepare(n_knobs, x_min, x_max)
    if prepared is None:
        low = x_min if math.isfinite(x_min) else 0.0
        high = x_max if math.isfinite(x_max) else low
        return AxisScale(DEFAULT_STEP, min(low, high), max(low, high))

    n, low, high = prepared
    step = _step_for(n, low, high, base)
    if not extend_to_knobs:
        return AxisScale(step, low, high)

    first = math.floor(low / step)
    last = math.ceil(high / step)
    if first * step > low:
        first -= 1
    if last * step < high:
        last += 1
    if first == last:
        last += 1
    # snapping past the largest float cannot be represented, stay on the last finite multiple
    if not math.isfinite(first * step):
        first += 1
    if not math.isfinite(last * step):
        last -= 1
    return AxisScale(step, first * step, last * step)


def axis_knobs(
    n_knobs: int,
    x_min: float,
    x_max: float,
    *,
    extend_to_knobs: bool = False,
    base: float = 10.0,
) -> List[float]:
    """Tick values at multiples of the nice step inside (or covering) the range."""

    scale = scale_axis(n_knobs, x_min, x_max, extend_to_knobs=extend_to_knobs, base=base)
    if extend_to_knobs:
        return scale.knobs
    first = math.ceil(scale.min / scale.step - 1e-9)
    last = math.floor(scale.max / scale.step + 1e-9)
    if last < first:
        return []
    count = _interval_count(first, last)
    return [_clean((first + i) * scale.step) for i in range(count + 1)]


def unit_axis_knobs(
    unit: UnitLike,
    n_knobs: int,
    x_min: float,
    x_max: float,
    *,
    extend_to_knobs: bool = False,
    registry: Optional[UnitRegistry] = None,
) -> List[float]:
    """Ticks for values expressed in ``unit``, using the unit's axis base."""

    unit = resolve_registry(registry).resolve(unit)
    return axis_knobs(n_knobs, x_min, x_max, extend_to_knobs=extend_to_knobs, base=unit.axis_base)


def unit_axis_knob_size(
    unit: UnitLike,
    n_knobs: int,
    x_min: float,
    x_max: float,
    *,
    registry: Optional[UnitRegistry] = None,
) -> float:
    unit = resolve_registry(registry).resolve(unit)
    return axis_knob_size(n_knobs, x_min, x_max, base=unit.axis_base)


__all__ = [
    "AxisScale",
    "DEFAULT_STEP",
    "MAX_KNOBS",
    "NICE_MULTIPLIERS",
    "axis_knob_size",
    "axis_knobs",
    "nice_step",
    "scale_axis",
    "unit_axis_knob_size",
    "unit_axis_knobs",
]
