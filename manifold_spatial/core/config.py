"""Extraction configuration loaded from environment variables.

All values have defaults matching the Manifold ODBC driver's usual
setup. ``from_env()`` validates eagerly and raises
``ConfigValidationError`` for any out-of-range or unparseable value, so
bad settings surface before a project is opened.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from manifold_spatial.core.constants import (
    DEFAULT_ALIAS_LENGTH,
    DEFAULT_ALIAS_MAX_ATTEMPTS,
    DEFAULT_PIXEL_COLUMN,
    ROW_ORDER_TOP_DOWN,
    ROW_ORDERS,
)
from manifold_spatial.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from manifold_spatial.source.connection import ConnectionOptions
    from manifold_spatial.translators.base import CoordinateTranslator

CRS_STRATEGIES = frozenset({"auto", "direct", "round_trip"})

MIN_ALIAS_LENGTH = 8
MAX_ALIAS_LENGTH = 64

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class ConfigValidationError(ConfigurationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
    """

    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ExtractionConfig:
    """Immutable extraction configuration.

    Attributes:
        crs_strategy: Coordinate translator to use (``auto``, ``direct``
            or ``round_trip``). ``auto`` prefers ``direct`` when pyproj
            is importable.
        allow_unknown_projection: Return an explicit unknown-projection
            marker instead of failing when WKT cannot be resolved.
        raster_row_order: ``top_down`` (first pixel is the top-left
            cell) or ``bottom_up``.
        pixel_column: Surface column holding pixel values.
        alias_length: Length of the synthetic geometry column name.
        alias_max_attempts: Attempts before alias generation gives up.
        unicode: ODBC ``Unicode`` flag.
        ansi: ODBC ``Ansi`` flag. Must stay off for the double-quoted
            ``CoordSys("..." AS COMPONENT)`` lookup to survive escaping.
        opengis: ODBC ``OpenGIS`` flag.
    """

    crs_strategy: str = "auto"
    allow_unknown_projection: bool = False
    raster_row_order: str = ROW_ORDER_TOP_DOWN
    pixel_column: str = DEFAULT_PIXEL_COLUMN
    alias_length: int = DEFAULT_ALIAS_LENGTH
    alias_max_attempts: int = DEFAULT_ALIAS_MAX_ATTEMPTS
    unicode: bool = True
    ansi: bool = False
    opengis: bool = True

    @classmethod
    def from_env(cls) -> ExtractionConfig:
        """Load and validate configuration from ``MANIFOLD_*`` variables.

        Raises:
            ConfigValidationError: If a value is out of range or cannot
                be parsed.
        """
        config = cls(
            crs_strategy=os.getenv("MANIFOLD_CRS_STRATEGY", "auto").strip().lower(),
            allow_unknown_projection=_env_bool("MANIFOLD_ALLOW_UNKNOWN_PROJECTION", False),
            raster_row_order=os.getenv("MANIFOLD_RASTER_ROW_ORDER", ROW_ORDER_TOP_DOWN)
            .strip()
            .lower(),
            pixel_column=os.getenv("MANIFOLD_PIXEL_COLUMN", DEFAULT_PIXEL_COLUMN),
            alias_length=_env_int("MANIFOLD_ALIAS_LENGTH", DEFAULT_ALIAS_LENGTH),
            alias_max_attempts=_env_int("MANIFOLD_ALIAS_MAX_ATTEMPTS", DEFAULT_ALIAS_MAX_ATTEMPTS),
            unicode=_env_bool("MANIFOLD_UNICODE", True),
            ansi=_env_bool("MANIFOLD_ANSI", False),
            opengis=_env_bool("MANIFOLD_OPENGIS", True),
        )
        _validate(config)
        return config

    def connection_options(self) -> ConnectionOptions:
        """Return the driver options carried by this configuration."""
        from manifold_spatial.source.connection import ConnectionOptions

        return ConnectionOptions(unicode=self.unicode, ansi=self.ansi, opengis=self.opengis)

    def translator(self) -> CoordinateTranslator:
        """Select the coordinate translator named by ``crs_strategy``."""
        from manifold_spatial.translators.factory import select_translator

        return select_translator(self.crs_strategy)


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigValidationError(key, raw, "must be a boolean (true/false, yes/no, on/off, 1/0)")


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigValidationError(key, raw, "must be an integer") from exc


def _validate(config: ExtractionConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.crs_strategy not in CRS_STRATEGIES:
        raise ConfigValidationError(
            "MANIFOLD_CRS_STRATEGY",
            config.crs_strategy,
            f"must be one of {sorted(CRS_STRATEGIES)}",
        )

    if config.raster_row_order not in ROW_ORDERS:
        raise ConfigValidationError(
            "MANIFOLD_RASTER_ROW_ORDER",
            config.raster_row_order,
            f"must be one of {sorted(ROW_ORDERS)}",
        )

    if not config.pixel_column.strip():
        raise ConfigValidationError(
            "MANIFOLD_PIXEL_COLUMN",
            config.pixel_column,
            "must not be empty",
        )

    if not MIN_ALIAS_LENGTH <= config.alias_length <= MAX_ALIAS_LENGTH:
        raise ConfigValidationError(
            "MANIFOLD_ALIAS_LENGTH",
            config.alias_length,
            f"must be between {MIN_ALIAS_LENGTH} and {MAX_ALIAS_LENGTH}",
        )

    if config.alias_max_attempts < 1:
        raise ConfigValidationError(
            "MANIFOLD_ALIAS_MAX_ATTEMPTS",
            config.alias_max_attempts,
            "must be >= 1",
        )
