"""Direct WKT → PROJ.4 translation through pyproj.

``pyproj.CRS.from_user_input`` accepts OGC WKT1, WKT2 and the ESRI
dialect Manifold emits for many of its coordinate systems.
"""

from __future__ import annotations

import logging
import warnings

from manifold_spatial.core.exceptions import ProjectionError
from manifold_spatial.models.projection import ProjectionDescriptor
from manifold_spatial.translators.base import CoordinateTranslator

logger = logging.getLogger("manifold_spatial.translators.direct")


class DirectTranslator(CoordinateTranslator):
    """Translate WKT with pyproj in-process."""

    name = "direct"

    def _translate(self, wkt: str) -> ProjectionDescriptor:
        from pyproj import CRS
        from pyproj.exceptions import CRSError

        try:
            crs = CRS.from_user_input(wkt)
        except CRSError as exc:
            msg = f"direct: cannot parse coordinate system WKT: {exc}"
            raise ProjectionError(msg) from exc

        # to_proj4 warns that PROJ.4 strings drop some WKT detail.
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            proj4 = crs.to_proj4()

        if not proj4:
            msg = f"direct: coordinate system {crs.name!r} has no PROJ.4 representation"
            raise ProjectionError(msg)

        logger.debug("Translated WKT | strategy=direct | crs=%s | proj4=%s", crs.name, proj4)
        return ProjectionDescriptor(proj4=proj4, source=self.name)
