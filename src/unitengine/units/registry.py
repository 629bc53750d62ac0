"""Unit registry: lookup, free-text matching and sibling resolution."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from unitengine.core.settings import Settings, StrideStyle, UnitSystem, resolve_settings

from .types import Conversion, Unit

logger = logging.getLogger(__name__)

UnitLike = Union[Unit, str]
Chain = Tuple[str, Tuple[Conversion, ...]]

FALLBACK_UNIT_KEY = "dimensionless"


class UnknownUnitError(KeyError):
    """Raised when a unit key is not registered."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown unit '{self.key}'"


class RegistryError(ValueError):
    """Raised when unit definitions are inconsistent."""


class UnitRegistry:
    """Catalog of units keyed by their stable string key.

    Units are validated when loaded: references must exist, reference chains
    and compound/fraction chains must be acyclic. The terminus (base unit) and
    the conversion steps leading to it are precomputed for every unit.
    """

    def __init__(
        self,
        units: Iterable[Unit] = (),
        overrides: Iterable[Tuple[str, str, Conversion]] = (),
    ) -> None:
        self._units: Dict[str, Unit] = {}
        self._order: Dict[str, int] = {}
        self._chains: Dict[str, Chain] = {}
        self._overrides: Dict[Tuple[str, str], Conversion] = {}
        self._by_abbr: Dict[str, Unit] = {}
        self._by_display: Dict[str, Unit] = {}
        self._by_key: Dict[str, Unit] = {}
        self._by_alias: Dict[str, Unit] = {}

        self.load(units)
        for first, second, conversion in overrides:
            self.register_override(first, second, conversion)

    # ------------------------------------------------------------------
    def load(self, units: Iterable[Unit]) -> None:
        """Validate and add ``units`` as a single batch."""

        staged: Dict[str, Unit] = dict(self._units)
        batch: List[Unit] = []
        for unit in units:
            if unit.key in staged:
                raise RegistryError(f"Duplicate unit key '{unit.key}'")
            staged[unit.key] = unit
            batch.append(unit)

        chains: Dict[str, Chain] = {}
        for unit in batch:
            chains[unit.key] = _resolve_chain(unit, staged)
        for unit in batch:
            _check_display_chain(unit, staged)
            for sub_key in (unit.compound_unit, unit.fraction_unit):
                if sub_key is None:
                    continue
                sub_chain = chains.get(sub_key, self._chains.get(sub_key))
                if sub_chain is None or sub_chain[0] != chains[unit.key][0]:
                    raise RegistryError(
                        f"Unit '{unit.key}' uses '{sub_key}' which is not convertible to it"
                    )

        for unit in batch:
            self._order[unit.key] = len(self._units)
            self._units[unit.key] = unit
            self._chains[unit.key] = chains[unit.key]
            self._index(unit)

    def register(self, unit: Unit) -> None:
        self.load([unit])

    def register_override(self, first: str, second: str, conversion: Conversion) -> None:
        """Declare ``second = conversion(first)`` between two base units."""

        for key in (first, second):
            unit = self.get(key)
            if not unit.is_base:
                raise RegistryError(f"Override endpoints must be base units, '{key}' is not")
        if first == second:
            raise RegistryError("Override endpoints must differ")
        self._overrides[(first, second)] = conversion
        logger.debug("Registered conversion override %s -> %s", first, second)

    def _index(self, unit: Unit) -> None:
        # first registered unit wins on collisions
        if unit.abbr:
            self._by_abbr.setdefault(unit.abbr.casefold(), unit)
        self._by_display.setdefault(unit.display.casefold(), unit)
        self._by_key.setdefault(unit.key.casefold(), unit)
        for alias in unit.aliases:
            self._by_alias.setdefault(alias.casefold(), unit)

    # ------------------------------------------------------------------
    def lookup(self, key: str) -> Optional[Unit]:
        return self._units.get(key)

    def get(self, key: str) -> Unit:
        try:
            return self._units[key]
        except KeyError:
            raise UnknownUnitError(key) from None

    def resolve(self, unit: UnitLike) -> Unit:
        if isinstance(unit, Unit):
            return unit
        return self.get(unit)

    def match_free_text(self, text: Optional[str]) -> Optional[Unit]:
        """Resolve user text by abbreviation, then display name, then key."""

        if not text:
            return None
        needle = text.strip().casefold()
        if not needle:
            return None
        for index in (self._by_abbr, self._by_display, self._by_key, self._by_alias):
            unit = index.get(needle)
            if unit is not None:
                return unit
        return None

    def resolve_any(self, text: Optional[str]) -> Unit:
        """Like :meth:`match_free_text` but never fails.

        Unknown text yields an unregistered base unit labelled with the text so
        it can still be displayed; empty text yields the dimensionless unit.
        """

        unit = self.match_free_text(text)
        if unit is not None:
            return unit
        label = (text or "").strip()
        if not label:
            return self.get(FALLBACK_UNIT_KEY)
        logger.debug("No unit matches %r, using an ad-hoc unit", label)
        return Unit(key=label, display=label, abbr=label)

    # ------------------------------------------------------------------
    def chain(self, unit: UnitLike) -> Chain:
        unit = self.resolve(unit)
        known = self._chains.get(unit.key)
        if known is not None and self._units[unit.key] is unit:
            return known
        return _resolve_chain(unit, self._units)

    def terminus(self, unit: UnitLike) -> str:
        return self.chain(unit)[0]

    def override(self, first: str, second: str) -> Optional[Tuple[Conversion, bool]]:
        """Return the override between two base keys and whether it is reversed."""

        conversion = self._overrides.get((first, second))
        if conversion is not None:
            return conversion, False
        conversion = self._overrides.get((second, first))
        if conversion is not None:
            return conversion, True
        return None

    def index_of(self, unit: UnitLike) -> int:
        key = unit.key if isinstance(unit, Unit) else unit
        return self._order.get(key, len(self._order))

    def compatible_units(self, unit: UnitLike) -> List[Unit]:
        """All registered units convertible with ``unit``, in registration order."""

        terminus = self.terminus(unit)
        termini = {terminus}
        for first, second in self._overrides:
            if first == terminus:
                termini.add(second)
            elif second == terminus:
                termini.add(first)
        return [u for u in self if self._chains[u.key][0] in termini]

    # ------------------------------------------------------------------
    def unit_for_system(self, unit: UnitLike, system: UnitSystem) -> Unit:
        unit = self.resolve(unit)
        system = UnitSystem(system)
        if system is UnitSystem.DEFAULT:
            return unit
        return self._sibling(unit, system.value)

    def unit_for_stride_style(self, unit: UnitLike, style: StrideStyle) -> Unit:
        return self._sibling(self.resolve(unit), StrideStyle(style).value)

    def display_unit(self, unit: UnitLike, *, settings: Optional[Settings] = None) -> Unit:
        """Unit used to display ``unit`` under the given (or global) settings."""

        settings = resolve_settings(settings)
        shown = self.unit_for_system(unit, settings.unit_system)
        return self.unit_for_stride_style(shown, settings.stride_style)

    def _sibling(self, unit: Unit, target: str) -> Unit:
        key = unit.siblings.get(target)
        if key is None:
            return unit
        return self._units.get(key, unit)

    # ------------------------------------------------------------------
    def keys(self) -> List[str]:
        return list(self._units)

    def units(self) -> List[Unit]:
        return list(self._units.values())

    def __iter__(self) -> Iterator[Unit]:
        return iter(self._units.values())

    def __len__(self) -> int:
        return len(self._units)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, Unit):
            return key.key in self._units
        return key in self._units


def _resolve_chain(unit: Unit, units: Dict[str, Unit]) -> Chain:
    steps: List[Conversion] = []
    seen = {unit.key}
    current = unit
    while current.reference is not None:
        steps.append(current.conversion)
        parent = units.get(current.reference)
        if parent is None:
            raise RegistryError(
                f"Unit '{current.key}' references unknown unit '{current.reference}'"
            )
        if parent.key in seen:
            raise RegistryError(f"Reference cycle detected at unit '{unit.key}'")
        seen.add(parent.key)
        current = parent
    return current.key, tuple(steps)


def _check_display_chain(unit: Unit, units: Dict[str, Unit]) -> None:
    seen = {unit.key}
    current: Optional[Unit] = unit
    while current is not None:
        sub_key = current.compound_unit or current.fraction_unit
        if sub_key is None:
            return
        sub = units.get(sub_key)
        if sub is None:
            raise RegistryError(f"Unit '{current.key}' references unknown unit '{sub_key}'")
        if sub.key in seen:
            raise RegistryError(f"Compound/fraction cycle detected at unit '{unit.key}'")
        seen.add(sub.key)
        current = sub


_default_registry: Optional[UnitRegistry] = None
_default_lock = threading.Lock()


def get_registry() -> UnitRegistry:
    """Return the process-wide registry, building it once on first use."""

    global _default_registry
    registry = _default_registry
    if registry is not None:
        return registry
    with _default_lock:
        if _default_registry is None:
            from .catalog import BUILTIN_OVERRIDES, BUILTIN_UNITS

            _default_registry = UnitRegistry(BUILTIN_UNITS, BUILTIN_OVERRIDES)
            logger.info("Loaded %d built-in units", len(_default_registry))
        return _default_registry


def resolve_registry(registry: Optional[UnitRegistry]) -> UnitRegistry:
    return registry if registry is not None else get_registry()


def lookup(key: str) -> Optional[Unit]:
    return get_registry().lookup(key)


def match_free_text(text: Optional[str]) -> Optional[Unit]:
    return get_registry().match_free_text(text)


def resolve_any(text: Optional[str]) -> Unit:
    return get_registry().resolve_any(text)


__all__ = [
    "FALLBACK_UNIT_KEY",
    "RegistryError",
    "UnitLike",
    "UnitRegistry",
    "UnknownUnitError",
    "get_registry",
    "lookup",
    "match_free_text",
    "resolve_any",
    "resolve_registry",
]
