"""Unit catalog, conversion, formatting and axis utilities."""

from .types import (
    Linear,
    Reciprocal,
    StrideStyle,
    SumWeightBy,
    Unit,
    UnitFormat,
    UnitSystem,
)
from .registry import (
    RegistryError,
    UnitRegistry,
    UnknownUnitError,
    get_registry,
    lookup,
    match_free_text,
    resolve_any,
)
from .convert import (
    IncompatibleUnitsError,
    can_convert,
    common_unit,
    convert,
    try_convert,
)
from .format import (
    PLACEHOLDER,
    format_bytes,
    format_components,
    format_converted,
    format_for_display,
    format_value,
)
from .axis import AxisScale, axis_knob_size, axis_knobs, nice_step, scale_axis, unit_axis_knobs

__all__ = [
    "AxisScale",
    "IncompatibleUnitsError",
    "Linear",
    "PLACEHOLDER",
    "Reciprocal",
    "RegistryError",
    "StrideStyle",
    "SumWeightBy",
    "Unit",
    "UnitFormat",
    "UnitRegistry",
    "UnitSystem",
    "UnknownUnitError",
    "axis_knob_size",
    "axis_knobs",
    "can_convert",
    "common_unit",
    "convert",
    "format_bytes",
    "format_components",
    "format_converted",
    "format_for_display",
    "format_value",
    "get_registry",
    "lookup",
    "match_free_text",
    "nice_step",
    "resolve_any",
    "scale_axis",
    "try_convert",
    "unit_axis_knobs",
]
