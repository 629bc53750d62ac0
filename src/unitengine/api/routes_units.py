"""FastAPI router exposing unit lookup, conversion and formatting."""

from __future__ import annotations

import math
from typing import Dict, List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from unitengine.parser.units_text import parse_units_text
from unitengine.units.axis import MAX_KNOBS, axis_knobs, scale_axis, unit_axis_knobs
from unitengine.units.convert import convert
from unitengine.units.format import format_bytes, format_components, format_for_display, format_value
from unitengine.units.registry import get_registry
from unitengine.units.types import Unit


router = APIRouter(prefix="/v1/units", tags=["units"])


class UnitModel(BaseModel):
    key: str
    display: str
    abbr: str
    reference: Optional[str] = None
    terminus: Optional[str] = None
    format: str
    system: str
    axis_base: float
    better_is_min: bool
    fraction_unit: Optional[str] = None
    compound_unit: Optional[str] = None


def _unit_model(unit: Unit) -> UnitModel:
    registry = get_registry()
    terminus = registry.terminus(unit) if unit.key in registry else None
    return UnitModel(
        key=unit.key,
        display=unit.display,
        abbr=unit.abbr,
        reference=unit.reference,
        terminus=terminus,
        format=unit.format.value,
        system=unit.system.value,
        axis_base=unit.axis_base,
        better_is_min=unit.better_is_min,
        fraction_unit=unit.fraction_unit,
        compound_unit=unit.compound_unit,
    )


def _finite(value: float) -> Optional[float]:
    # JSON has no representation for inf/nan
    return value if math.isfinite(value) else None


@router.get("", response_model=List[UnitModel])
def list_units(
    compatible_with: Optional[str] = Query(default=None, description="Only units convertible with this key"),
) -> List[UnitModel]:
    registry = get_registry()
    if compatible_with:
        units = registry.compatible_units(registry.get(compatible_with))
    else:
        units = registry.units()
    return [_unit_model(unit) for unit in units]


class BytesResp(BaseModel):
    bytes: int
    text: str


@router.get("/bytes/{count}", response_model=BytesResp)
def bytes_text(count: int) -> BytesResp:
    return BytesResp(bytes=count, text=format_bytes(count))


@router.get("/{key}", response_model=UnitModel)
def get_unit(key: str) -> UnitModel:
    return _unit_model(get_registry().get(key))


class MatchReq(BaseModel):
    text: str = Field(default="", description="Abbreviation, display name or key")


class MatchResp(BaseModel):
    matched: bool
    unit: UnitModel


@router.post("/match", response_model=MatchResp)
def match_unit(req: MatchReq) -> MatchResp:
    registry = get_registry()
    found = registry.match_free_text(req.text)
    unit = found if found is not None else registry.resolve_any(req.text)
    return MatchResp(matched=found is not None, unit=_unit_model(unit))


class ConvertReq(BaseModel):
    value: float
    from_unit: str
    to_unit: str


class ConvertResp(BaseModel):
    value: Optional[float]
    from_unit: str
    to_unit: str
    text: str


@router.post("/convert", response_model=ConvertResp)
def convert_value(req: ConvertReq) -> ConvertResp:
    result = convert(req.value, req.from_unit, req.to_unit)
    return ConvertResp(
        value=_finite(result),
        from_unit=req.from_unit,
        to_unit=req.to_unit,
        text=format_value(result, req.to_unit, add_abbr=True),
    )


class FormatReq(BaseModel):
    value: float
    unit: str
    add_abbr: bool = True
    display: bool = Field(
        default=False,
        description="Convert to the unit selected by the current unit system and stride style first",
    )


class FormatResp(BaseModel):
    text: str
    components: List[str]


@router.post("/format", response_model=FormatResp)
def format_unit_value(req: FormatReq) -> FormatResp:
    registry = get_registry()
    unit = registry.get(req.unit)
    if not req.display:
        return FormatResp(
            text=format_value(req.value, unit, add_abbr=req.add_abbr),
            components=format_components(req.value, unit, add_abbr=req.add_abbr),
        )

    shown = registry.display_unit(unit)
    return FormatResp(
        text=format_for_display(req.value, unit, add_abbr=req.add_abbr),
        components=format_components(convert(req.value, unit, shown), shown, add_abbr=req.add_abbr),
    )


class AxisReq(BaseModel):
    x_min: float
    x_max: float
    n_knobs: int = Field(default=5, ge=0, le=MAX_KNOBS)
    extend_to_knobs: bool = False
    unit: Optional[str] = None
    base: float = 10.0


class AxisResp(BaseModel):
    step: float
    min: float
    max: float
    knobs: List[float]


@router.post("/axis", response_model=AxisResp)
def axis(req: AxisReq) -> AxisResp:
    base = req.base
    if req.unit:
        base = get_registry().get(req.unit).axis_base
        knobs = unit_axis_knobs(req.unit, req.n_knobs, req.x_min, req.x_max, extend_to_knobs=req.extend_to_knobs)
    else:
        knobs = axis_knobs(req.n_knobs, req.x_min, req.x_max, extend_to_knobs=req.extend_to_knobs, base=base)
    scale = scale_axis(req.n_knobs, req.x_min, req.x_max, extend_to_knobs=req.extend_to_knobs, base=base)
    return AxisResp(step=scale.step, min=scale.min, max=scale.max, knobs=knobs)


class UnitsTextReq(BaseModel):
    text: str = Field(default="", description="Multiline name: unit mapping")


class UnitsTextResp(BaseModel):
    units: Dict[str, str]
    warnings: List[str]


@router.post("/parse", response_model=UnitsTextResp)
def parse_units(req: UnitsTextReq) -> UnitsTextResp:
    result = parse_units_text(req.text)
    return UnitsTextResp(units=result.units, warnings=result.warnings)


__all__ = ["router"]
