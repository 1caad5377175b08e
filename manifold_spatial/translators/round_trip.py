"""Round-trip WKT → PROJ.4 translation through fiona.

Used where pyproj is not available. A single-point ESRI Shapefile is
written to a temporary directory, the WKT is written next to it as the
``.prj`` side-car, and the dataset is re-opened so that OGR resolves the
projection from the side-car. The resolved CRS is then formatted as a
PROJ.4 string. The temporary directory is removed on every exit path.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from manifold_spatial.core.exceptions import ProjectionError
from manifold_spatial.models.projection import ProjectionDescriptor, format_proj4
from manifold_spatial.translators.base import CoordinateTranslator

logger = logging.getLogger("manifold_spatial.translators.round_trip")

_LAYER_NAME = "crs_probe"
_SCHEMA = {"geometry": "Point", "properties": {"x": "int"}}


class RoundTripTranslator(CoordinateTranslator):
    """Resolve WKT by writing and re-reading a side-car ``.prj`` file."""

    name = "round_trip"

    def _translate(self, wkt: str) -> ProjectionDescriptor:
        import fiona
        from fiona.errors import FionaError

        with tempfile.TemporaryDirectory(prefix="manifold_crs_") as tmp:
            shp_path = Path(tmp) / f"{_LAYER_NAME}.shp"
            try:
                _write_probe(fiona, shp_path)
                shp_path.with_suffix(".prj").write_text(wkt, encoding="utf-8")
                with fiona.open(str(shp_path)) as src:
                    crs = src.crs
                    params = crs.to_dict() if crs else {}
            except (FionaError, OSError) as exc:
                msg = f"round_trip: cannot resolve coordinate system from side-car: {exc}"
                raise ProjectionError(msg) from exc

        proj4 = format_proj4(dict(params))
        if not proj4:
            msg = "round_trip: side-car projection could not be resolved"
            raise ProjectionError(msg)

        logger.debug("Translated WKT | strategy=round_trip | proj4=%s", proj4)
        return ProjectionDescriptor(proj4=proj4, source=self.name)


def _write_probe(fiona: object, shp_path: Path) -> None:
    """Write a one-feature point shapefile at *shp_path*."""
    from fiona.model import Feature

    record = Feature.from_dict(
        {
            "geometry": {"type": "Point", "coordinates": (1.0, 1.0)},
            "properties": {"x": 1},
        }
    )
    with fiona.open(  # type: ignore[attr-defined]
        str(shp_path), "w", driver="ESRI Shapefile", schema=_SCHEMA
    ) as dst:
        dst.write(record)
