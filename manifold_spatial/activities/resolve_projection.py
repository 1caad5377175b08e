"""Coordinate-system lookup and translation.

Reads a component's coordinate system as WKT through
``CoordSysToWKT(CoordSys("<component>" AS COMPONENT))`` and hands it to
the injected ``CoordinateTranslator``. The component name is embedded as
a double-quoted literal, which the driver only accepts with ANSI
escaping switched off (``ConnectionOptions.ansi=False``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from manifold_spatial.core.constants import CRS_COLUMN
from manifold_spatial.core.exceptions import ProjectionError
from manifold_spatial.models.projection import ProjectionDescriptor
from manifold_spatial.source.executor import execute_query
from manifold_spatial.utils.sql import quote_identifier, quote_literal

if TYPE_CHECKING:
    from manifold_spatial.translators.base import CoordinateTranslator

logger = logging.getLogger("manifold_spatial.activities.resolve_projection")


def build_coordinate_system_query(component: str) -> str:
    """Return the query that reads *component*'s coordinate system as WKT."""
    return (
        f"SELECT TOP 1 CoordSysToWKT(CoordSys({quote_literal(component)} AS COMPONENT)) "
        f"AS {quote_identifier(CRS_COLUMN)} FROM {quote_identifier(component)}"
    )


def read_coordinate_system(connection: Any, component: str) -> str:
    """Return the WKT of *component*'s coordinate system.

    Raises:
        ProjectionError: If the lookup returns no row or an empty value.
    """
    result = execute_query(connection, build_coordinate_system_query(component))
    if result.row_count < 1 or CRS_COLUMN not in result:
        msg = f"No coordinate system returned for {component!r}"
        raise ProjectionError(msg, component=component)

    wkt = result.column(CRS_COLUMN)[0]
    if wkt is None or not str(wkt).strip():
        msg = f"Coordinate system of {component!r} is empty"
        raise ProjectionError(msg, component=component)
    return str(wkt)


def resolve_projection(
    connection: Any,
    component: str,
    translator: CoordinateTranslator,
    *,
    allow_unknown_projection: bool = False,
) -> ProjectionDescriptor:
    """Read and translate *component*'s coordinate system.

    Args:
        connection: Open project connection.
        component: Drawing or surface name.
        translator: Strategy selected at configuration time.
        allow_unknown_projection: Return ``ProjectionDescriptor.unknown()``
            instead of raising when the projection cannot be resolved.

    Raises:
        ProjectionError: If resolution fails and unknown projections are
            not allowed.
    """
    try:
        wkt = read_coordinate_system(connection, component)
        descriptor = translator.translate(wkt)
    except ProjectionError as exc:
        exc.component = exc.component or component
        if not allow_unknown_projection:
            raise
        logger.warning(
            "Projection unresolved, continuing with unknown projection | component=%s | error=%s",
            component,
            exc,
        )
        return ProjectionDescriptor.unknown()

    logger.info(
        "Projection resolved | component=%s | strategy=%s | proj4=%s",
        component,
        descriptor.source,
        descriptor.proj4,
    )
    return descriptor
