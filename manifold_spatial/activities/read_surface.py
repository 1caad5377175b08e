"""Surface (raster) extraction activity.

Rebuilds a Manifold surface as a georeferenced ``RasterGrid``:

1. Check that rasterio is available (fatal if not installed, a warning
   if installed but not yet loaded in-process).
2. Probe one row to confirm the pixel column exists.
3. Read the pixel column, the georeference probe and the coordinate
   system.
4. Build the grid skeleton and fill it row-major.

The connection is scoped to the call and released on every exit path.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from typing import TYPE_CHECKING

from manifold_spatial.activities.read_georeference import read_georeference
from manifold_spatial.activities.resolve_projection import resolve_projection
from manifold_spatial.core.constants import DEFAULT_PIXEL_COLUMN, ROW_ORDER_TOP_DOWN, ROW_ORDERS
from manifold_spatial.core.exceptions import (
    CapabilityError,
    ConfigurationError,
    GeoreferenceError,
)
from manifold_spatial.models.raster import RasterGrid
from manifold_spatial.source.connection import scoped_connection
from manifold_spatial.source.executor import execute_query
from manifold_spatial.translators.factory import translator_for
from manifold_spatial.utils.sql import quote_identifier

if TYPE_CHECKING:
    from manifold_spatial.core.config import ExtractionConfig
    from manifold_spatial.source.connection import ConnectionOptions, ConnectionProvider
    from manifold_spatial.translators.base import CoordinateTranslator

logger = logging.getLogger("manifold_spatial.activities.read_surface")

RASTER_MODULE = "rasterio"


def check_raster_support() -> None:
    """Ensure the raster stack is usable.

    Raises:
        CapabilityError: If rasterio is not installed.
    """
    if importlib.util.find_spec(RASTER_MODULE) is None:
        msg = "rasterio is not installed; install it to read Manifold surfaces"
        raise CapabilityError(msg)

    if RASTER_MODULE not in sys.modules:
        logger.warning(
            "rasterio is installed but not yet loaded in this process; loading it now"
        )
        try:
            importlib.import_module(RASTER_MODULE)
        except ImportError as exc:
            msg = f"rasterio is installed but failed to load: {exc}"
            raise CapabilityError(msg) from exc


def read_surface(
    provider: ConnectionProvider,
    locator: str,
    raster_name: str,
    *,
    translator: CoordinateTranslator | None = None,
    options: ConnectionOptions | None = None,
    allow_unknown_projection: bool | None = None,
    row_order: str | None = None,
    pixel_column: str | None = None,
    config: ExtractionConfig | None = None,
) -> RasterGrid:
    """Read a Manifold surface into a ``RasterGrid``.

    Args:
        provider: Opens and releases the project connection.
        locator: Project locator handed to *provider*.
        raster_name: Surface component name.
        translator: Coordinate translator; defaults to *config*'s.
        options: Driver options; defaults to *config*'s.
        allow_unknown_projection: Continue with an unknown-projection
            marker instead of failing; defaults to *config*'s setting.
        row_order: ``top_down`` or ``bottom_up`` pixel order.
        pixel_column: Column holding pixel values (``Height (I)``).
        config: Extraction configuration supplying the defaults above.

    Raises:
        CapabilityError: If rasterio is not available.
        ConfigurationError: If *row_order* is unknown.
        ConnectionOpenError: If the project cannot be opened.
        QueryError: If a query fails.
        GeoreferenceError: If the probe is missing or degenerate, the
            pixel column is absent, or the pixel count mismatches.
        ProjectionError: If the projection cannot be resolved.
    """
    if row_order is None:
        row_order = config.raster_row_order if config else ROW_ORDER_TOP_DOWN
    if row_order not in ROW_ORDERS:
        msg = f"Unknown raster row order: {row_order!r}. Expected one of {sorted(ROW_ORDERS)}"
        raise ConfigurationError(msg, component=raster_name)
    if pixel_column is None:
        pixel_column = config.pixel_column if config else DEFAULT_PIXEL_COLUMN
    if options is None and config is not None:
        options = config.connection_options()
    if allow_unknown_projection is None:
        allow_unknown_projection = config.allow_unknown_projection if config else False

    check_raster_support()
    if translator is None:
        translator = translator_for(config)

    logger.info(
        "read_surface started | locator=%s | raster=%s | row_order=%s",
        locator,
        raster_name,
        row_order,
    )

    table = quote_identifier(raster_name)
    with scoped_connection(provider, locator, options) as connection:
        probe = execute_query(connection, f"SELECT TOP 1 * FROM {table}")
        if pixel_column not in probe:
            msg = (
                f"Surface {raster_name!r} has no pixel column {pixel_column!r}; "
                f"columns: {', '.join(probe.columns)}"
            )
            raise GeoreferenceError(msg, component=raster_name)

        pixels = execute_query(
            connection, f"SELECT {quote_identifier(pixel_column)} FROM {table}"
        )
        georeference = read_georeference(connection, raster_name)
        projection = resolve_projection(
            connection,
            raster_name,
            translator,
            allow_unknown_projection=allow_unknown_projection,
        )
        try:
            grid = RasterGrid.from_values(
                georeference,
                projection,
                pixels.column(pixel_column),
                row_order=row_order,
            )
        except GeoreferenceError as exc:
            exc.component = raster_name
            raise

    logger.info(
        "read_surface completed | raster=%s | shape=%dx%d | extent=%s | proj4=%s",
        raster_name,
        *grid.shape,
        grid.extent,
        grid.projection,
    )
    return grid
