"""Text parsers for unit declarations."""

from .units_text import UnitsTextResult, iter_units_lines, parse_units_text

__all__ = ["UnitsTextResult", "iter_units_lines", "parse_units_text"]
