"""Raster georeference probe.

Asks the Manifold query engine for a surface's pixel origin, pixel
counts and pixel size in one ``TOP 1`` query and turns the row into a
``RasterGeoreference``.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any

from manifold_spatial.core.exceptions import GeoreferenceError
from manifold_spatial.models.raster import RasterGeoreference
from manifold_spatial.source.executor import execute_query
from manifold_spatial.utils.sql import quote_identifier

if TYPE_CHECKING:
    from manifold_spatial.models.raster import Extent

logger = logging.getLogger("manifold_spatial.activities.read_georeference")

GEOREFERENCE_FIELDS = ("xmin", "ymax", "ncol", "nrow", "dx", "dy")


def build_georeference_query(raster_name: str) -> str:
    """Return the single-row probe query for *raster_name*."""
    r = quote_identifier(raster_name)
    return (
        f"SELECT TOP 1 [Easting (I)] AS [xmin], [Northing (I)] AS [ymax], "
        f"PixelsByX({r}) AS [ncol], PixelsByY({r}) AS [nrow], "
        f"PixelWidth({r}) AS [dx], PixelHeight({r}) AS [dy] FROM {r}"
    )


def read_georeference(connection: Any, raster_name: str) -> RasterGeoreference:
    """Probe *raster_name* and return its georeference.

    Raises:
        GeoreferenceError: If the probe returns no row, a field is
            missing or non-numeric, or a dimension is non-positive.
        QueryError: If the probe query itself fails.
    """
    result = execute_query(connection, build_georeference_query(raster_name))
    if result.row_count < 1:
        msg = f"Georeference probe for {raster_name!r} returned no rows"
        raise GeoreferenceError(msg, component=raster_name)

    row = next(result.rows())
    lowered = {str(k).lower(): v for k, v in row.items()}
    missing = [name for name in GEOREFERENCE_FIELDS if lowered.get(name) is None]
    if missing:
        msg = f"Georeference probe for {raster_name!r} is missing {', '.join(missing)}"
        raise GeoreferenceError(msg, component=raster_name)

    try:
        georef = RasterGeoreference(
            xmin=_as_float(lowered["xmin"]),
            ymax=_as_float(lowered["ymax"]),
            ncol=_as_count(lowered["ncol"]),
            nrow=_as_count(lowered["nrow"]),
            dx=_as_float(lowered["dx"]),
            dy=_as_float(lowered["dy"]),
        )
    except GeoreferenceError as exc:
        exc.component = raster_name
        raise
    except (TypeError, ValueError) as exc:
        msg = f"Georeference probe for {raster_name!r} has non-numeric values: {exc}"
        raise GeoreferenceError(msg, component=raster_name) from exc

    logger.info(
        "Georeference read | raster=%s | origin=(%.6f, %.6f) | size=%dx%d | cell=(%g, %g)",
        raster_name,
        georef.xmin,
        georef.ymax,
        georef.ncol,
        georef.nrow,
        georef.dx,
        georef.dy,
    )
    return georef


def raster_extent(georeference: RasterGeoreference) -> Extent:
    """Return ``(xmin, ymin, xmax, ymax)`` using the top-row-centre convention."""
    return georeference.extent


def _as_float(value: Any) -> float:
    number = float(value)
    if not math.isfinite(number):
        msg = f"non-finite value {value!r}"
        raise ValueError(msg)
    return number


def _as_count(value: Any) -> int:
    number = _as_float(value)
    if not number.is_integer():
        msg = f"pixel count {value!r} is not a whole number"
        raise ValueError(msg)
    return int(number)
