"""Unit entity, enumerations and conversion variants."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Tuple, Union

from unitengine.core.settings import StrideStyle, UnitSystem


class UnitFormat(str, Enum):
    TIME = "time"
    INTEGER = "integer"
    ONE_DIGIT = "one_digit"
    TWO_DIGIT = "two_digit"
    THREE_DIGIT = "three_digit"
    DOUBLE = "double"
    DATE = "date"


class SumWeightBy(str, Enum):
    COUNT = "count"
    TIME = "time"
    DISTANCE = "distance"


@dataclass(frozen=True)
class Linear:
    """``reference = value * scale + offset``."""

    scale: float
    offset: float = 0.0

    def __post_init__(self) -> None:
        if self.scale == 0:
            raise ValueError("Linear conversion scale cannot be zero")

    def forward(self, value: float) -> float:
        return value * self.scale + self.offset

    def inverse(self, value: float) -> float:
        return (value - self.offset) / self.scale


@dataclass(frozen=True)
class Reciprocal:
    """``reference = scale / value``; used for pace against speed."""

    scale: float

    def __post_init__(self) -> None:
        if self.scale == 0:
            raise ValueError("Reciprocal conversion scale cannot be zero")

    def forward(self, value: float) -> float:
        return _reciprocal(self.scale, value)

    def inverse(self, value: float) -> float:
        # scale / (scale / x) == x, so the map is its own inverse
        return _reciprocal(self.scale, value)


Conversion = Union[Linear, Reciprocal]
IDENTITY = Linear(1.0)


def _reciprocal(scale: float, value: float) -> float:
    if value == 0:
        return float("inf")
    return scale / value


@dataclass(frozen=True)
class Unit:
    """A registered measurement unit.

    ``conversion`` maps a value expressed in this unit to the unit named by
    ``reference``. Base units have ``reference=None`` and the identity
    conversion. ``compound_unit`` and ``fraction_unit`` are keys of other
    registered units and are mutually exclusive.
    """

    key: str
    display: str
    abbr: str
    reference: Optional[str] = None
    conversion: Conversion = IDENTITY
    format: UnitFormat = UnitFormat.DOUBLE
    axis_base: float = 10.0
    sum_weight_by: SumWeightBy = SumWeightBy.COUNT
    fraction_unit: Optional[str] = None
    compound_unit: Optional[str] = None
    enable_number_abbreviation: bool = False
    system: UnitSystem = UnitSystem.DEFAULT
    siblings: Mapping[str, str] = field(default_factory=dict)
    time_scale: float = 1.0
    date_pattern: Optional[str] = None
    better_is_min: bool = False
    aliases: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Unit key cannot be empty")
        if self.fraction_unit and self.compound_unit:
            raise ValueError(
                f"Unit '{self.key}' cannot have both a fraction and a compound unit"
            )
        if not isinstance(self.format, UnitFormat):
            object.__setattr__(self, "format", UnitFormat(self.format))
        if not isinstance(self.system, UnitSystem):
            object.__setattr__(self, "system", UnitSystem(self.system))
        if not isinstance(self.sum_weight_by, SumWeightBy):
            object.__setattr__(self, "sum_weight_by", SumWeightBy(self.sum_weight_by))
        if self.reference is None and self.conversion != IDENTITY:
            raise ValueError(f"Base unit '{self.key}' must use the identity conversion")
        if self.format is UnitFormat.DATE and not self.date_pattern:
            raise ValueError(f"Date unit '{self.key}' requires a date_pattern")

    @property
    def scale(self) -> float:
        return self.conversion.scale

    @property
    def is_base(self) -> bool:
        return self.reference is None

    @property
    def is_reciprocal(self) -> bool:
        return isinstance(self.conversion, Reciprocal)

    def __hash__(self) -> int:
        return hash(self.key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Unit):
            return NotImplemented
        return self.key == other.key

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.abbr or self.key


__all__ = [
    "Conversion",
    "IDENTITY",
    "Linear",
    "Reciprocal",
    "StrideStyle",
    "SumWeightBy",
    "Unit",
    "UnitFormat",
    "UnitSystem",
]
