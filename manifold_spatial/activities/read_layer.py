"""Drawing extraction activity.

Reads the objects of one topology kind from a Manifold drawing and
reconstructs them as a ``SpatialLayer``: shapely geometries paired
positionally with their attribute rows and tagged with the drawing's
projection. Non-spatial reads return the raw ``AttributeTable``.

Steps (spatial):
1. Probe the drawing's columns and drop intrinsic ``(I)`` columns.
2. Generate a collision-free alias and select ``CGeomWKB(Geom([ID]))``
   under it, filtered by ``IsArea/IsLine/IsPoint([ID])``.
3. Execute; zero rows is an error.
4. Resolve the projection, decode the WKB column, drop the alias.

The connection is scoped to the call and released on every exit path.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from manifold_spatial.activities.build_query import (
    build_projection,
    build_query,
    generate_alias,
)
from manifold_spatial.activities.decode_geometry import decode_geometries
from manifold_spatial.activities.resolve_projection import resolve_projection
from manifold_spatial.core.constants import DEFAULT_ALIAS_LENGTH, DEFAULT_ALIAS_MAX_ATTEMPTS
from manifold_spatial.core.exceptions import ConfigurationError, EmptyResultError, QueryError
from manifold_spatial.models.layer import AttributeTable, SpatialLayer
from manifold_spatial.models.topology import TopologyKind
from manifold_spatial.source.connection import scoped_connection
from manifold_spatial.source.executor import column_names, execute_query
from manifold_spatial.translators.factory import translator_for

if TYPE_CHECKING:
    from manifold_spatial.core.config import ExtractionConfig
    from manifold_spatial.source.connection import ConnectionOptions, ConnectionProvider
    from manifold_spatial.translators.base import CoordinateTranslator

logger = logging.getLogger("manifold_spatial.activities.read_layer")


def read_layer(
    provider: ConnectionProvider,
    locator: str,
    table: str,
    *,
    query: str | None = None,
    spatial: bool = False,
    topology: TopologyKind | str = TopologyKind.AREA,
    translator: CoordinateTranslator | None = None,
    options: ConnectionOptions | None = None,
    allow_unknown_projection: bool | None = None,
    config: ExtractionConfig | None = None,
) -> SpatialLayer | AttributeTable:
    """Read a drawing table, optionally reconstructing its geometry.

    Args:
        provider: Opens and releases the project connection.
        locator: Project locator handed to *provider* (e.g. a ``.map`` path).
        table: Drawing or table name.
        query: Literal query to run instead of the topology-filtered
            default. Only valid for non-spatial reads.
        spatial: Reconstruct geometry into a ``SpatialLayer``.
        topology: Kind of objects to select (``area``, ``line``, ``point``).
        translator: Coordinate translator; defaults to the one named by
            *config* (``auto`` when no config is given).
        options: Driver options; defaults to *config*'s.
        allow_unknown_projection: Continue with an unknown-projection
            marker instead of failing; defaults to *config*'s setting.
        config: Extraction configuration supplying the defaults above.

    Returns:
        A ``SpatialLayer`` when *spatial*, otherwise the query's
        ``AttributeTable``.

    Raises:
        ConfigurationError: Unknown topology, blank override, or an
            override combined with ``spatial=True``.
        ConnectionOpenError: If the project cannot be opened.
        QueryError: If a query fails.
        EmptyResultError: If a spatial query returns no rows.
        DecodeError: If a geometry blob is malformed.
        TypeMismatchError: If a geometry does not match *topology*.
        ProjectionError: If the projection cannot be resolved.
    """
    kind = TopologyKind.parse(topology)
    if spatial and query is not None:
        msg = (
            "A query override cannot be combined with spatial=True: the "
            "override cannot select the synthetic geometry column"
        )
        raise ConfigurationError(msg, component=table)
    if query is not None and not query.strip():
        msg = "Query override must not be empty"
        raise ConfigurationError(msg, component=table)

    if options is None and config is not None:
        options = config.connection_options()
    if allow_unknown_projection is None:
        allow_unknown_projection = config.allow_unknown_projection if config else False
    if spatial and translator is None:
        translator = translator_for(config)

    logger.info(
        "read_layer started | locator=%s | table=%s | topology=%s | spatial=%s",
        locator,
        table,
        kind.value,
        spatial,
    )

    with scoped_connection(provider, locator, options) as connection:
        if not spatial:
            result = execute_query(connection, build_query(table, kind, query=query))
            logger.info(
                "read_layer completed | table=%s | rows=%d | spatial=False",
                table,
                result.row_count,
            )
            return result

        columns = column_names(connection, table)
        alias = generate_alias(
            columns,
            length=config.alias_length if config else DEFAULT_ALIAS_LENGTH,
            max_attempts=config.alias_max_attempts if config else DEFAULT_ALIAS_MAX_ATTEMPTS,
        )
        sql = build_query(table, kind, projection=build_projection(columns, alias))
        result = execute_query(connection, sql)

        if result.row_count < 1:
            msg = f"Query on {table!r} returned no {kind.value} records; cannot build a layer"
            raise EmptyResultError(msg, component=table)
        if alias not in result:
            msg = f"Query on {table!r} did not return the geometry column {alias!r}"
            raise QueryError(msg, query=sql, component=table)

        projection = resolve_projection(
            connection,
            table,
            translator,  # type: ignore[arg-type]
            allow_unknown_projection=allow_unknown_projection,
        )
        collection = decode_geometries(
            result.column(alias), kind, projection, component=table
        )
        layer = SpatialLayer.from_collection(table, collection, result.without(alias))

    logger.info(
        "read_layer completed | table=%s | topology=%s | features=%d | columns=%d | proj4=%s",
        table,
        kind.value,
        len(layer),
        len(layer.attributes.columns),
        layer.projection,
    )
    return layer


def read_drawing_areas(
    provider: ConnectionProvider, locator: str, drawing: str, **kwargs: object
) -> SpatialLayer:
    """Read the areas of *drawing* as a polygon layer."""
    return read_layer(  # type: ignore[return-value]
        provider, locator, drawing, spatial=True, topology=TopologyKind.AREA, **kwargs
    )


def read_drawing_lines(
    provider: ConnectionProvider, locator: str, drawing: str, **kwargs: object
) -> SpatialLayer:
    """Read the lines of *drawing* as a line layer."""
    return read_layer(  # type: ignore[return-value]
        provider, locator, drawing, spatial=True, topology=TopologyKind.LINE, **kwargs
    )


def read_drawing_points(
    provider: ConnectionProvider, locator: str, drawing: str, **kwargs: object
) -> SpatialLayer:
    """Read the points of *drawing* as a point layer."""
    return read_layer(  # type: ignore[return-value]
        provider, locator, drawing, spatial=True, topology=TopologyKind.POINT, **kwargs
    )
