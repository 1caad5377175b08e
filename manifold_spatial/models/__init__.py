"""Data models.

Defines the data structures produced by the extraction pipeline:
- TopologyKind: area / line / point classification
- ProjectionDescriptor: portable PROJ.4 projection string
- AttributeTable, GeometryCollection, SpatialLayer: vector results
- RasterGeoreference, RasterGrid: raster results
"""

from manifold_spatial.models.layer import AttributeTable, GeometryCollection, SpatialLayer
from manifold_spatial.models.projection import ProjectionDescriptor
from manifold_spatial.models.raster import RasterGeoreference, RasterGrid
from manifold_spatial.models.topology import TopologyKind

__all__ = [
    "AttributeTable",
    "GeometryCollection",
    "ProjectionDescriptor",
    "RasterGeoreference",
    "RasterGrid",
    "SpatialLayer",
    "TopologyKind",
]
