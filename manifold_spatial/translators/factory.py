"""Translator factory: selects the coordinate translation strategy.

The factory maintains a registry of known strategies. Selection happens
once, at configuration time, and the chosen translator is injected into
the readers; nothing probes for pyproj or fiona inline.

Usage::

    from manifold_spatial.translators.factory import select_translator

    translator = select_translator("auto")
    descriptor = translator.translate(wkt)

``"auto"`` picks ``direct`` when pyproj is importable and falls back to
``round_trip`` (fiona) otherwise.
"""

from __future__ import annotations

import importlib.util
import logging
from typing import TYPE_CHECKING

from manifold_spatial.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from manifold_spatial.core.config import ExtractionConfig
    from manifold_spatial.translators.base import CoordinateTranslator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Strategy name constants
# ---------------------------------------------------------------------------

AUTO = "auto"
DIRECT = "direct"
ROUND_TRIP = "round_trip"

# ---------------------------------------------------------------------------
# Lazy-import strategy registry
# ---------------------------------------------------------------------------

# Each entry maps a strategy name to a callable returning the translator
# *class*, so that pyproj/fiona are only imported for the chosen strategy.

_TRANSLATOR_REGISTRY: dict[str, Callable[[], type[CoordinateTranslator]]] = {}

# Selected translator instances, keyed by the requested strategy name.
_TRANSLATOR_CACHE: dict[str, CoordinateTranslator] = {}


def _register_builtin_translators() -> None:
    """Register the built-in strategies (called once, lazily)."""

    def _direct() -> type[CoordinateTranslator]:
        from manifold_spatial.translators.direct import DirectTranslator

        return DirectTranslator

    def _round_trip() -> type[CoordinateTranslator]:
        from manifold_spatial.translators.round_trip import RoundTripTranslator

        return RoundTripTranslator

    _TRANSLATOR_REGISTRY[DIRECT] = _direct
    _TRANSLATOR_REGISTRY[ROUND_TRIP] = _round_trip


def _ensure_registry() -> None:
    """Initialise the strategy registry once (idempotent)."""
    if not _TRANSLATOR_REGISTRY:
        _register_builtin_translators()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def register_translator(
    name: str,
    loader: Callable[[], type[CoordinateTranslator]],
) -> None:
    """Register a custom translation strategy.

    Args:
        name: Strategy name (e.g. ``"gdal_osr"``).
        loader: Zero-argument callable returning the translator class.

    Raises:
        ConfigurationError: If the name is empty or reserved.
    """
    if not name or name == AUTO:
        msg = f"Translator name must be non-empty and not {AUTO!r}"
        raise ConfigurationError(msg)
    _ensure_registry()
    _TRANSLATOR_REGISTRY[name] = loader
    clear_translator_cache()
    logger.debug("Registered coordinate translator: %s", name)


def get_translator(name: str) -> CoordinateTranslator:
    """Create the translator registered under *name*.

    Raises:
        ConfigurationError: If no strategy is registered under *name*.
    """
    _ensure_registry()

    loader = _TRANSLATOR_REGISTRY.get(name)
    if loader is None:
        available = ", ".join(sorted(_TRANSLATOR_REGISTRY))
        msg = f"Unknown coordinate translator: {name!r}. Available: {available}"
        raise ConfigurationError(msg)

    return loader()()


def select_translator(strategy: str = AUTO) -> CoordinateTranslator:
    """Pick the translator for *strategy*, resolving ``"auto"`` by capability.

    The choice is made once per strategy name and cached for the process;
    later calls return the same instance without probing again.

    Raises:
        ConfigurationError: If *strategy* is unknown, or ``"auto"`` finds
            neither pyproj nor fiona installed.
    """
    cached = _TRANSLATOR_CACHE.get(strategy)
    if cached is not None:
        return cached

    if strategy != AUTO:
        translator = get_translator(strategy)
    elif importlib.util.find_spec("pyproj") is not None:
        translator = get_translator(DIRECT)
    elif importlib.util.find_spec("fiona") is not None:
        translator = get_translator(ROUND_TRIP)
    else:
        msg = "No coordinate translator available: install pyproj or fiona"
        raise ConfigurationError(msg)

    logger.info(
        "Coordinate translator selected | requested=%s | using=%s",
        strategy,
        translator.name,
    )
    _TRANSLATOR_CACHE[strategy] = translator
    return translator


def clear_translator_cache() -> None:
    """Forget previously selected translators (e.g. after re-registering)."""
    _TRANSLATOR_CACHE.clear()


def list_translators() -> list[str]:
    """Return the names of all registered strategies."""
    _ensure_registry()
    return sorted(_TRANSLATOR_REGISTRY)


def translator_for(config: ExtractionConfig | None = None) -> CoordinateTranslator:
    """Return the translator named by *config*, or the cached ``auto`` choice.

    Readers fall back to this when no translator is injected. Long-running
    callers can select one up front and pass it as ``translator=``.
    """
    if config is not None:
        return config.translator()
    return select_translator()
