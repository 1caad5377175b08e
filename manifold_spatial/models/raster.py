"""Raster surface models.

- ``RasterGeoreference``: probe-row origin, cell size and dimensions.
- ``RasterGrid``: georeferenced, read-only 2-D array of pixel values.

The Manifold probe reports ``Easting (I)``/``Northing (I)`` of the first
pixel. The vertical extent is derived as
``[ymax - (nrow - 1) * dy, ymax + dy]``, treating the probed northing
as the centre of the top row rather than the grid corner. The
horizontal extent has no such shift. If the driver ever reports the
top-left corner instead, grids built here sit half a cell high; the
convention is kept as-is until that is confirmed against Manifold.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from manifold_spatial.core.constants import ROW_ORDER_BOTTOM_UP, ROW_ORDER_TOP_DOWN
from manifold_spatial.core.exceptions import ConfigurationError, GeoreferenceError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from affine import Affine

    from manifold_spatial.models.projection import ProjectionDescriptor

logger = logging.getLogger("manifold_spatial.models.raster")

Extent = tuple[float, float, float, float]


@dataclass(frozen=True, slots=True)
class RasterGeoreference:
    """Spatial anchoring of a Manifold surface.

    Attributes:
        xmin: Easting of the first pixel (grid left edge).
        ymax: Northing of the first pixel (centre of the top row).
        ncol: Pixels along X.
        nrow: Pixels along Y.
        dx: Pixel width in map units.
        dy: Pixel height in map units.
    """

    xmin: float
    ymax: float
    ncol: int
    nrow: int
    dx: float
    dy: float

    def __post_init__(self) -> None:
        if self.ncol < 1 or self.nrow < 1:
            msg = f"Degenerate raster dimensions: ncol={self.ncol}, nrow={self.nrow}"
            raise GeoreferenceError(msg)
        if not self.dx > 0 or not self.dy > 0:
            msg = f"Non-positive pixel size: dx={self.dx}, dy={self.dy}"
            raise GeoreferenceError(msg)

    @property
    def extent(self) -> Extent:
        """Bounding extent ``(xmin, ymin, xmax, ymax)`` of the grid."""
        # ymax is the top-row centre, hence nrow - 1 below and one dy above.
        return (
            self.xmin,
            self.ymax - (self.nrow - 1) * self.dy,
            self.xmin + self.ncol * self.dx,
            self.ymax + self.dy,
        )

    @property
    def cell_count(self) -> int:
        """Total number of pixels."""
        return self.ncol * self.nrow


@dataclass(frozen=True, slots=True, eq=False)
class RasterGrid:
    """A georeferenced single-band raster.

    Attributes:
        georeference: Origin, cell size and dimensions.
        projection: Projection of the grid coordinates.
        values: Read-only ``(nrow, ncol)`` float64 array, top row first.
    """

    georeference: RasterGeoreference
    projection: ProjectionDescriptor
    values: np.ndarray

    @classmethod
    def from_values(
        cls,
        georeference: RasterGeoreference,
        projection: ProjectionDescriptor,
        values: Sequence[Any],
        *,
        row_order: str = ROW_ORDER_TOP_DOWN,
    ) -> RasterGrid:
        """Build a grid skeleton from *georeference* and fill it row-major.

        Args:
            georeference: Grid dimensions and origin.
            projection: Projection attached to the grid.
            values: Pixel values, one per cell, in row-major order.
            row_order: ``top_down`` when the first row of *values* is the
                northernmost; ``bottom_up`` when it is the southernmost.

        Raises:
            GeoreferenceError: If the value count does not match the grid
                or a value is not numeric.
            ConfigurationError: If *row_order* is not recognised.
        """
        if row_order not in (ROW_ORDER_TOP_DOWN, ROW_ORDER_BOTTOM_UP):
            msg = f"Unknown raster row order: {row_order!r}"
            raise ConfigurationError(msg)

        expected = georeference.cell_count
        if len(values) != expected:
            msg = (
                f"Pixel count {len(values)} does not match grid "
                f"{georeference.nrow} x {georeference.ncol} = {expected}"
            )
            raise GeoreferenceError(msg)

        try:
            flat = np.array([np.nan if v is None else v for v in values], dtype=np.float64)
        except (TypeError, ValueError) as exc:
            msg = f"Pixel values are not numeric: {exc}"
            raise GeoreferenceError(msg) from exc
        grid = flat.reshape(georeference.nrow, georeference.ncol)
        if row_order == ROW_ORDER_BOTTOM_UP:
            grid = np.flipud(grid).copy()
        grid.flags.writeable = False
        return cls(georeference=georeference, projection=projection, values=grid)

    @property
    def extent(self) -> Extent:
        """Bounding extent ``(xmin, ymin, xmax, ymax)``."""
        return self.georeference.extent

    @property
    def bounds(self) -> Extent:
        """Alias of ``extent`` matching rasterio's ``(left, bottom, right, top)``."""
        return self.extent

    @property
    def shape(self) -> tuple[int, int]:
        """Array shape ``(nrow, ncol)``."""
        return (self.georeference.nrow, self.georeference.ncol)

    @property
    def transform(self) -> Affine:
        """Affine transform mapping (col, row) to map coordinates."""
        from rasterio.transform import from_bounds

        return from_bounds(*self.extent, self.georeference.ncol, self.georeference.nrow)

    def write(self, path: Path | str) -> Path:
        """Write the grid as a single-band float64 GeoTIFF.

        Missing pixels are written as NaN and flagged as nodata.

        Returns:
            The path written.
        """
        from pathlib import Path

        import rasterio
        from rasterio.crs import CRS

        out_path = Path(path)
        crs = None if self.projection.is_unknown else CRS.from_string(self.projection.proj4)
        profile = {
            "driver": "GTiff",
            "height": self.georeference.nrow,
            "width": self.georeference.ncol,
            "count": 1,
            "dtype": "float64",
            "crs": crs,
            "transform": self.transform,
            "nodata": float("nan"),
        }
        with rasterio.open(out_path, "w", **profile) as dst:
            dst.write(self.values, 1)

        logger.info(
            "Surface written | path=%s | shape=%dx%d | crs=%s",
            out_path,
            self.georeference.nrow,
            self.georeference.ncol,
            self.projection,
        )
        return out_path
