"""Parsing of human-entered ``series: unit`` declarations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
import re

from unitengine.units.registry import UnitRegistry, resolve_registry


_LINE_RE = re.compile(r"[^\r\n]+")
_TRAILING_PUNCT = re.compile(r"[\s,;]+$")


@dataclass(slots=True)
class UnitsTextResult:
    """Result of :func:`parse_units_text`.

    Attributes
    ----------
    units:
        Mapping from series name to the key of the resolved unit.
    warnings:
        Human-readable warnings for lines that were skipped.
    """

    units: Dict[str, str]
    warnings: List[str]


def _strip_inline_comment(text: str) -> str:
    if "#" not in text:
        return text
    return text.split("#", 1)[0]


def _split_first_colon(text: str) -> Tuple[str, str] | None:
    idx = text.find(":")
    if idx == -1:
        return None
    return text[:idx], text[idx + 1 :]


def parse_units_text(
    units_text: str | None,
    *,
    registry: Optional[UnitRegistry] = None,
) -> UnitsTextResult:
    """Parse multiline ``"series: unit"`` text into series -> unit key.

    Units are matched with :meth:`UnitRegistry.match_free_text`, so
    abbreviations (``km``), display names (``Miles``) and keys all work.
    Comments starting with ``#`` and trailing commas or semicolons are
    ignored. Malformed lines and unknown units never raise; they are reported
    in ``warnings``.
    """

    registry = resolve_registry(registry)
    units: Dict[str, str] = {}
    warnings: List[str] = []

    if not units_text:
        return UnitsTextResult(units, warnings)

    for line_no, match in enumerate(_LINE_RE.finditer(units_text), start=1):
        raw_line = match.group(0)
        stripped = raw_line.strip()

        if not stripped or stripped.startswith("#"):
            continue

        pair = _split_first_colon(stripped)
        if pair is None:
            warnings.append(f"Line {line_no}: missing ':' - ignored: {stripped!r}")
            continue

        name, unit_part = pair
        name = name.strip()
        unit_part = _TRAILING_PUNCT.sub("", _strip_inline_comment(unit_part).strip())

        if not name:
            warnings.append(f"Line {line_no}: empty series name.")
            continue
        if not unit_part:
            warnings.append(f"Line {line_no}: empty unit for {name!r}.")
            continue

        unit = registry.match_free_text(unit_part)
        if unit is None:
            warnings.append(f"Line {line_no}: unknown unit {unit_part!r} for {name!r}.")
            continue

        units[name] = unit.key

    return UnitsTextResult(units, warnings)


def iter_units_lines(
    units_text: str | None, *, registry: Optional[UnitRegistry] = None
) -> Iterable[Tuple[str, str]]:
    """Yield ``(series, unit_key)`` pairs, dropping warnings."""

    return parse_units_text(units_text, registry=registry).units.items()


__all__ = ["UnitsTextResult", "iter_units_lines", "parse_units_text"]
