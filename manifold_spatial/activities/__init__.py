"""Extraction activities.

- build_query: topology predicates, synthetic alias, select construction
- decode_geometry: WKB → shapely with topology checks
- resolve_projection: coordinate-system lookup and translation
- read_georeference: raster origin/size probe and extent
- read_layer: drawing extraction (areas, lines, points)
- read_surface: surface extraction into a raster grid
"""

from manifold_spatial.activities.read_layer import (
    read_drawing_areas,
    read_drawing_lines,
    read_drawing_points,
    read_layer,
)
from manifold_spatial.activities.read_surface import check_raster_support, read_surface

__all__ = [
    "check_raster_support",
    "read_drawing_areas",
    "read_drawing_lines",
    "read_drawing_points",
    "read_layer",
    "read_surface",
]
