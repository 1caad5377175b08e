"""Extraction exception taxonomy.

Every error raised by the extraction pipeline inherits from
``ExtractionError`` and carries structured context fields for logging
and operator diagnostics.

Taxonomy categories
-------------------
- ``SourceError``: connection and query execution failures.
- ``DataError``: the project returned data that cannot
  form a spatial object (empty, malformed, wrong kind, degenerate).
- ``EnvironmentCapabilityError``: projection or raster support missing.
- ``ConfigurationError``: invalid arguments or settings.

None of these are retried: they are deterministic structural failures.
Every exception exposes ``to_error_dict()`` for a stable payload.
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base exception for all extraction errors.

    Attributes:
        message: Human-readable error description.
        stage: Pipeline stage where the error occurred
            (e.g. ``"decode_geometry"``, ``"read_georeference"``).
        code: Machine-readable error code (e.g. ``"WKB_DECODE_FAILED"``).
        component: Drawing, table or surface name being extracted.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        component: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.component = component
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ConfigurationError):
            return "configuration"
        if isinstance(self, SourceError):
            return "source"
        if isinstance(self, DataError):
            return "data"
        if isinstance(self, EnvironmentCapabilityError):
            return "environment"
        return "extraction"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "component": self.component,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class SourceError(ExtractionError):
    """The data source could not be opened or queried."""


class DataError(ExtractionError):
    """The data returned cannot be assembled into a spatial object."""


class EnvironmentCapabilityError(ExtractionError):
    """A library capability the extraction depends on is missing."""


class ConfigurationError(ExtractionError):
    """Invalid topology kind, query override or configuration value."""

    default_stage = "config"
    default_code = "CONFIGURATION_INVALID"


# ---------------------------------------------------------------------------
# Concrete errors
# ---------------------------------------------------------------------------


class ConnectionOpenError(SourceError):
    """The connection provider could not open the project."""

    default_stage = "connect"
    default_code = "CONNECTION_FAILED"


class QueryError(SourceError):
    """A query failed in the driver or returned a malformed result.

    Attributes:
        query: The SQL text that was executed.
    """

    default_stage = "query"
    default_code = "QUERY_FAILED"

    def __init__(self, message: str = "", *, query: str = "", **kwargs: str) -> None:
        self.query = query
        super().__init__(message, **kwargs)


class EmptyResultError(DataError):
    """A spatial query returned no rows."""

    default_stage = "read_layer"
    default_code = "EMPTY_RESULT"


class DecodeError(DataError):
    """A WKB blob could not be decoded.

    Attributes:
        row_index: Zero-based row of the offending blob (-1 if unknown).
    """

    default_stage = "decode_geometry"
    default_code = "WKB_DECODE_FAILED"

    def __init__(self, message: str = "", *, row_index: int = -1, **kwargs: str) -> None:
        self.row_index = row_index
        super().__init__(message, **kwargs)


class TypeMismatchError(DataError):
    """A decoded geometry does not match the requested topology kind."""

    default_stage = "decode_geometry"
    default_code = "GEOMETRY_TYPE_MISMATCH"


class GeoreferenceError(DataError):
    """The raster probe row is missing or degenerate."""

    default_stage = "read_georeference"
    default_code = "GEOREFERENCE_INVALID"


class ProjectionError(EnvironmentCapabilityError):
    """Coordinate-system text could not be resolved to a projection."""

    default_stage = "resolve_projection"
    default_code = "PROJECTION_UNRESOLVED"


class CapabilityError(EnvironmentCapabilityError):
    """Raster support is not available in this environment."""

    default_stage = "read_surface"
    default_code = "CAPABILITY_UNAVAILABLE"


class AliasCollisionError(ConfigurationError):
    """No collision-free synthetic column name could be generated."""

    default_code = "ALIAS_COLLISION"
