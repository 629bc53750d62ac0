"""Built-in unit table.

Each row is a :class:`~unitengine.units.types.Unit` record. The registry loads
the table once; adding a unit is a data change. Keys are persisted by callers
and must never be renamed.
"""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

from .types import (
    Conversion,
    Linear,
    Reciprocal,
    SumWeightBy,
    Unit,
    UnitFormat,
    UnitSystem,
)

MILE_IN_METERS = 1609.344
YARD_IN_METERS = 0.9144
FOOT_IN_METERS = 0.3048
NAUTICAL_MILE_IN_METERS = 1852.0
POUND_IN_KILOGRAMS = 0.45359237
US_GALLON_IN_LITERS = 3.785411784
AVGAS_KILOGRAMS_PER_LITER = 0.72

T = UnitFormat.TIME
I = UnitFormat.INTEGER
D1 = UnitFormat.ONE_DIGIT
D2 = UnitFormat.TWO_DIGIT
D3 = UnitFormat.THREE_DIGIT
DBL = UnitFormat.DOUBLE
DATE = UnitFormat.DATE

METRIC = UnitSystem.METRIC
IMPERIAL = UnitSystem.IMPERIAL


def _unit(
    key: str,
    display: str,
    abbr: str,
    reference: Optional[str] = None,
    scale: float = 1.0,
    *,
    offset: float = 0.0,
    fmt: UnitFormat = DBL,
    metric: Optional[str] = None,
    imperial: Optional[str] = None,
    **attrs,
) -> Unit:
    conversion: Conversion = Linear(scale, offset)
    return _build(key, display, abbr, reference, conversion, fmt, metric, imperial, attrs)


def _pace(
    key: str,
    display: str,
    abbr: str,
    meters: float,
    time_scale: float,
    *,
    metric: Optional[str] = None,
    imperial: Optional[str] = None,
) -> Unit:
    # time per distance: one unit of value covers ``meters`` in ``time_scale`` seconds
    conversion = Reciprocal(meters / time_scale)
    return _build(
        key,
        display,
        abbr,
        "mps",
        conversion,
        T,
        metric,
        imperial,
        {
            "time_scale": time_scale,
            "better_is_min": True,
            "sum_weight_by": SumWeightBy.DISTANCE,
        },
    )


def _build(key, display, abbr, reference, conversion, fmt, metric, imperial, attrs) -> Unit:
    siblings = dict(attrs.pop("siblings", {}))
    system = attrs.pop("system", UnitSystem.DEFAULT)
    if imperial:
        siblings["imperial"] = imperial
        system = METRIC
    if metric:
        siblings["metric"] = metric
        system = IMPERIAL
    return Unit(
        key=key,
        display=display,
        abbr=abbr,
        reference=reference,
        conversion=conversion,
        format=fmt,
        system=system,
        siblings=siblings,
        **attrs,
    )


_TIME = dict(sum_weight_by=SumWeightBy.TIME)

BUILTIN_UNITS: List[Unit] = [
    # -- Dimensionless and counts -------------------------------------------
    _unit("dimensionless", "Dimensionless", "", fmt=D2, enable_number_abbreviation=True),
    _unit("percent", "Percent", "%", "dimensionless", 0.01, fmt=D1),
    _unit("step", "Steps", "steps", fmt=I, enable_number_abbreviation=True),
    _unit("shots", "Shots", "shots", fmt=I),
    _unit("sampleCount", "Samples", "samples", fmt=I, enable_number_abbreviation=True),
    # -- Durations ------------------------------------------------------------
    _unit("second", "Seconds", "s", fmt=T, axis_base=60.0, better_is_min=True,
          aliases=("sec", "secs"), **_TIME),
    _unit("ms", "Milliseconds", "ms", "second", 0.001, fmt=I, better_is_min=True),
    _unit("minute", "Minutes", "min", "second", 60.0, fmt=T, axis_base=60.0,
          time_scale=60.0, better_is_min=True, aliases=("mins",)),
    _unit("hour", "Hours", "h", "second", 3600.0, fmt=T, axis_base=60.0,
          time_scale=3600.0, better_is_min=True, aliases=("hr", "hrs")),
    _unit("day", "Days", "d", "second", 86400.0, fmt=D1),
    _unit("year", "Years", "y", "second", 365.0 * 86400.0, fmt=D1),
    _unit("decimalhour", "Decimal Hours", "h", "second", 3600.0, fmt=D1,
          fraction_unit="minute"),
    _unit("hobbshour", "Hobbs Hours", "hobbs", "second", 3600.0, fmt=D1,
          fraction_unit="minute"),
    _unit("timeofday", "Time of Day", "", fmt=T, axis_base=60.0),
    # -- Calendar (values are POSIX timestamps) -------------------------------
    _unit("date", "Date", "", fmt=DATE, date_pattern="%a %d %b %Y"),
    _unit("dateshort", "Short Date", "", "date", fmt=DATE, date_pattern="%d %b"),
    _unit("datetime", "Date and Time", "", "date", fmt=DATE, date_pattern="%Y-%m-%d %H:%M"),
    _unit("datemonth", "Month", "", "date", fmt=DATE, date_pattern="%b %Y"),
    _unit("dateyear", "Year", "", "date", fmt=DATE, date_pattern="%Y"),
    _unit("weekly", "Weekly", "", "date", fmt=DATE, date_pattern="%d %b %Y"),
    _unit("monthly", "Monthly", "", "date", fmt=DATE, date_pattern="%b %Y"),
    _unit("yearly", "Yearly", "", "date", fmt=DATE, date_pattern="%Y"),
    # -- Distance -------------------------------------------------------------
    _unit("meter", "Meters", "m", fmt=I, imperial="foot", aliases=("metre", "metres")),
    _unit("kilometer", "Kilometers", "km", "meter", 1000.0, fmt=D2, imperial="mile",
          aliases=("kilometre", "kilometres")),
    _unit("centimeter", "Centimeters", "cm", "meter", 0.01, fmt=D1, imperial="inch"),
    _unit("millimeter", "Millimeters", "mm", "meter", 0.001, fmt=I, imperial="inch"),
    _unit("mile", "Miles", "mi", "meter", MILE_IN_METERS, fmt=D2, metric="kilometer"),
    _unit("yard", "Yards", "yd", "meter", YARD_IN_METERS, fmt=I, metric="meter",
          compound_unit="foot"),
    _unit("foot", "Feet", "ft", "meter", FOOT_IN_METERS, fmt=I, metric="meter",
          compound_unit="inch", aliases=("feet",)),
    _unit("inch", "Inches", "in", "meter", 0.0254, fmt=I, metric="centimeter"),
    _unit("nm", "Nautical Miles", "nm", "meter", NAUTICAL_MILE_IN_METERS, fmt=D2),
    _unit("stride", "Stride", "m", "meter", 1.0, fmt=D2, imperial="strideyd"),
    _unit("strideyd", "Stride", "yd", "meter", YARD_IN_METERS, fmt=D2, metric="stride"),
    _unit("development", "Development", "m", "meter", 1.0, fmt=D2),
    # -- Speed ----------------------------------------------------------------
    _unit("mps", "Meters per Second", "m/s", fmt=D1, **_TIME),
    _unit("kph", "Kilometers per Hour", "km/h", "mps", 1000.0 / 3600.0, fmt=D1,
          imperial="mph", aliases=("kmh",), **_TIME),
    _unit("mph", "Miles per Hour", "mph", "mps", MILE_IN_METERS / 3600.0, fmt=D1,
          metric="kph", **_TIME),
    _unit("knot", "Knots", "kt", "mps", NAUTICAL_MILE_IN_METERS / 3600.0, fmt=D1, **_TIME),
    _unit("mpm", "Meters per Minute", "m/min", "mps", 1.0 / 60.0, fmt=I, **_TIME),
    _unit("meterperhour", "Meters per Hour", "m/h", "mps", 1.0 / 3600.0, fmt=I,
          imperial="feetperhour", **_TIME),
    _unit("feetperhour", "Feet per Hour", "ft/h", "mps", FOOT_IN_METERS / 3600.0, fmt=I,
          metric="meterperhour", **_TIME),
    _unit("hmph", "Hectometers per Hour", "hm/h", "mps", 100.0 / 3600.0, fmt=D1,
          imperial="hydph", **_TIME),
    _unit("hydph", "Hundred Yards per Hour", "100yd/h", "mps", 100.0 * YARD_IN_METERS / 3600.0,
          fmt=D1, metric="hmph", **_TIME),
    _unit("centimetersPerMillisecond", "Centimeters per Millisecond", "cm/ms", "mps", 10.0,
          fmt=D2, **_TIME),
    # -- Pace -----------------------------------------------------------------
    _pace("minperkm", "Minutes per Kilometer", "min/km", 1000.0, 60.0, imperial="minpermile"),
    _pace("secperkm", "Seconds per Kilometer", "s/km", 1000.0, 1.0, imperial="secpermile"),
    _pace("minpermile", "Minutes per Mile", "min/mi", MILE_IN_METERS, 60.0, metric="minperkm"),
    _pace("secpermile", "Seconds per Mile", "s/mi", MILE_IN_METERS, 1.0, metric="secperkm"),
    _pace("min100m", "Minutes per 100 Meters", "min/100m", 100.0, 60.0, imperial="min100yd"),
    _pace("sec100m", "Seconds per 100 Meters", "s/100m", 100.0, 1.0, imperial="sec100yd"),
    _pace("min100yd", "Minutes per 100 Yards", "min/100yd", 100.0 * YARD_IN_METERS, 60.0,
          metric="min100m"),
    _pace("sec100yd", "Seconds per 100 Yards", "s/100yd", 100.0 * YARD_IN_METERS, 1.0,
          metric="sec100m"),
    # -- Cadence and rates ----------------------------------------------------
    _unit("stepsPerMinute", "Steps per Minute", "spm", fmt=I,
          siblings={"same_foot": "doubleStepsPerMinute"}, **_TIME),
    _unit("doubleStepsPerMinute", "Steps per Minute", "spm", "stepsPerMinute", 0.5, fmt=I,
          siblings={"between_feet": "stepsPerMinute"}, **_TIME),
    _unit("strideRate", "Stride Rate", "strides/min", "stepsPerMinute", 2.0, fmt=I, **_TIME),
    _unit("strokesPerMinute", "Strokes per Minute", "strokes/min", fmt=I, **_TIME),
    _unit("rpm", "Revolutions per Minute", "rpm", fmt=I, **_TIME),
    _unit("cpm", "Cycles per Minute", "cpm", "rpm", 1.0, fmt=I, **_TIME),
    _unit("cps", "Cycles per Second", "cps", "rpm", 60.0, fmt=D1, **_TIME),
    _unit("bpm", "Beats per Minute", "bpm", fmt=I, **_TIME),
    # -- Mass -----------------------------------------------------------------
    _unit("kilogram", "Kilograms", "kg", fmt=D1, imperial="pound", aliases=("kilo", "kilos")),
    _unit("gram", "Grams", "g", "kilogram", 0.001, fmt=I, imperial="ounce"),
    _unit("pound", "Pounds", "lb", "kilogram", POUND_IN_KILOGRAMS, fmt=I, metric="kilogram",
          compound_unit="ounce", aliases=("lbs",)),
    _unit("ounce", "Ounces", "oz", "kilogram", 0.028349523125, fmt=I, metric="gram"),
    _unit("stone", "Stone", "st", "kilogram", 14.0 * POUND_IN_KILOGRAMS, fmt=I,
          metric="kilogram", compound_unit="pound"),
    _unit("avgasKilogram", "Avgas Kilograms", "kg", fmt=D1, imperial="avgasPound"),
    _unit("avgasPound", "Avgas Pounds", "lb", "avgasKilogram", POUND_IN_KILOGRAMS, fmt=D1,
          metric="avgasKilogram"),
    # -- Temperature ----------------------------------------------------------
    _unit("celsius", "Celsius", "°C", fmt=D1, imperial="fahrenheit", aliases=("degC",),
          **_TIME),
    _unit("fahrenheit", "Fahrenheit", "°F", "celsius", 5.0 / 9.0, offset=-160.0 / 9.0, fmt=D1,
          metric="celsius", aliases=("degF",), **_TIME),
    _unit("kelvin", "Kelvin", "K", "celsius", 1.0, offset=-273.15, fmt=D1, **_TIME),
    # -- Energy, power, electric ----------------------------------------------
    _unit("joule", "Joules", "J", fmt=I, enable_number_abbreviation=True),
    _unit("kilojoule", "Kilojoules", "kJ", "joule", 1000.0, fmt=I,
          enable_number_abbreviation=True),
    _unit("kilocalorie", "Kilocalories", "kcal", "joule", 4184.0, fmt=I,
          enable_number_abbreviation=True, aliases=("calories", "cal")),
    _unit("watt", "Watts", "W", fmt=I, **_TIME),
    _unit("kilowatt", "Kilowatts", "kW", "watt", 1000.0, fmt=D2, **_TIME),
    _unit("volt", "Volts", "V", fmt=D2, **_TIME),
    # -- Data size ------------------------------------------------------------
    _unit("byte", "Bytes", "B", fmt=I, enable_number_abbreviation=True),
    _unit("kilobyte", "Kilobytes", "KB", "byte", 1024.0, fmt=D1),
    _unit("megabyte", "Megabytes", "MB", "byte", 1024.0**2, fmt=D1),
    _unit("gigabyte", "Gigabytes", "GB", "byte", 1024.0**3, fmt=D1),
    _unit("terabyte", "Terabytes", "TB", "byte", 1024.0**4, fmt=D1),
    # -- Volume and fuel ------------------------------------------------------
    _unit("liter", "Liters", "L", fmt=D1, imperial="usgallon", aliases=("litre", "litres")),
    _unit("milliliter", "Milliliters", "mL", "liter", 0.001, fmt=I),
    _unit("usgallon", "US Gallons", "gal", "liter", US_GALLON_IN_LITERS, fmt=D1,
          metric="liter", aliases=("gallon", "gallons")),
    _unit("lph", "Liters per Hour", "L/h", fmt=D1, imperial="gph", **_TIME),
    _unit("gph", "Gallons per Hour", "gal/h", "lph", US_GALLON_IN_LITERS, fmt=D1,
          metric="lph", **_TIME),
    _unit("kmperliter", "Kilometers per Liter", "km/L", fmt=D2, imperial="milepergallon"),
    Unit(
        key="literper100km",
        display="Liters per 100 Kilometers",
        abbr="L/100km",
        reference="kmperliter",
        conversion=Reciprocal(100.0),
        format=D2,
        system=METRIC,
        siblings={"imperial": "milepergallon"},
        better_is_min=True,
    ),
    _unit("milepergallon", "Miles per Gallon", "mpg", "kmperliter",
          MILE_IN_METERS / 1000.0 / US_GALLON_IN_LITERS, fmt=D2, metric="kmperliter"),
    _unit("nmpergallon", "Nautical Miles per Gallon", "nm/gal", "kmperliter",
          NAUTICAL_MILE_IN_METERS / 1000.0 / US_GALLON_IN_LITERS, fmt=D2),
    # -- Angles ---------------------------------------------------------------
    _unit("dd", "Decimal Degrees", "°", fmt=DBL, aliases=("degree", "degrees", "deg")),
    _unit("semicircle", "Semicircles", "sc", "dd", 180.0 / 2**31, fmt=I),
    _unit("radian", "Radians", "rad", "dd", 180.0 / math.pi, fmt=D3),
    _unit("revolution", "Revolutions", "rev", "dd", 360.0, fmt=D2),
]

# Conversions between base units that do not share a reference chain.
BUILTIN_OVERRIDES: List[Tuple[str, str, Conversion]] = [
    ("liter", "avgasKilogram", Linear(AVGAS_KILOGRAMS_PER_LITER)),
]


__all__ = ["BUILTIN_UNITS", "BUILTIN_OVERRIDES"]
