"""Manifold project spatial extraction.

Reads drawings and surfaces from a Manifold GIS project through its SQL
interface, decoding WKB geometry, translating coordinate-system WKT to
PROJ.4 and rebuilding georeferenced raster grids.
"""

__version__ = "0.1.0"
