"""unitengine - measurement units, conversion, formatting and chart axes."""

from . import core, stats, units
from .version import __version__

__all__ = ["core", "stats", "units", "__version__"]
