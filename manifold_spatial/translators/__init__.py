"""Coordinate-system translation strategies.

Implements the strategy pattern for WKT → PROJ.4 translation:
- CoordinateTranslator: abstract base class
- DirectTranslator: pyproj in-process translation (preferred)
- RoundTripTranslator: fiona side-car ``.prj`` round trip (fallback)

The active strategy is selected once via configuration and injected.
"""

from manifold_spatial.translators.base import CoordinateTranslator
from manifold_spatial.translators.factory import (
    AUTO,
    DIRECT,
    ROUND_TRIP,
    clear_translator_cache,
    get_translator,
    list_translators,
    register_translator,
    select_translator,
)

__all__ = [
    "AUTO",
    "DIRECT",
    "ROUND_TRIP",
    "CoordinateTranslator",
    "clear_translator_cache",
    "get_translator",
    "list_translators",
    "register_translator",
    "select_translator",
]
