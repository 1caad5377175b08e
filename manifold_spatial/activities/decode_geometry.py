"""WKB geometry decoding.

Decodes the WKB column of a drawing query into shapely geometries and
checks every one against the requested topology kind. Decoding is
all-or-nothing: a single malformed blob fails the extraction, because
the geometry count must equal the attribute row count.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from manifold_spatial.core.exceptions import DecodeError, TypeMismatchError
from manifold_spatial.models.layer import GeometryCollection
from manifold_spatial.models.topology import TopologyKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shapely.geometry.base import BaseGeometry

    from manifold_spatial.models.projection import ProjectionDescriptor

logger = logging.getLogger("manifold_spatial.activities.decode_geometry")

ACCEPTED_GEOMETRY_TYPES: dict[TopologyKind, frozenset[str]] = {
    TopologyKind.AREA: frozenset({"Polygon", "MultiPolygon"}),
    TopologyKind.LINE: frozenset({"LineString", "LinearRing", "MultiLineString"}),
    TopologyKind.POINT: frozenset({"Point", "MultiPoint"}),
}


def decode_geometries(
    blobs: Iterable[Any],
    kind: TopologyKind | str,
    projection: ProjectionDescriptor,
    *,
    component: str = "",
) -> GeometryCollection:
    """Decode WKB *blobs* into a ``GeometryCollection`` of *kind*.

    Args:
        blobs: WKB values in row order (bytes-like or hex strings).
        kind: Topology kind every geometry must have.
        projection: Projection to tag the collection with.
        component: Drawing name for error context.

    Raises:
        DecodeError: If any blob is missing or malformed.
        TypeMismatchError: If a geometry is not of *kind*.
    """
    kind = TopologyKind.parse(kind)
    accepted = ACCEPTED_GEOMETRY_TYPES[kind]

    geometries: list[BaseGeometry] = []
    for idx, blob in enumerate(blobs):
        geom = decode_wkb(blob, row_index=idx, component=component)
        if geom.geom_type not in accepted:
            msg = (
                f"Row {idx}: expected {kind.value} geometry "
                f"({', '.join(sorted(accepted))}), got {geom.geom_type}"
            )
            raise TypeMismatchError(msg, component=component)
        geometries.append(geom)

    logger.info(
        "Decoded geometries | component=%s | kind=%s | count=%d",
        component,
        kind.value,
        len(geometries),
    )
    return GeometryCollection(kind=kind, geometries=tuple(geometries), projection=projection)


def decode_wkb(blob: Any, *, row_index: int = -1, component: str = "") -> BaseGeometry:
    """Decode a single WKB value.

    Raises:
        DecodeError: If *blob* is ``None``, empty or not valid WKB.
    """
    from shapely import wkb
    from shapely.errors import ShapelyError

    if blob is None:
        msg = f"Row {row_index}: geometry is NULL"
        raise DecodeError(msg, row_index=row_index, component=component)

    try:
        payload = blob if isinstance(blob, str) else bytes(blob)
    except TypeError as exc:
        msg = f"Row {row_index}: geometry is not binary ({type(blob).__name__})"
        raise DecodeError(msg, row_index=row_index, component=component) from exc
    if not payload:
        msg = f"Row {row_index}: geometry blob is empty"
        raise DecodeError(msg, row_index=row_index, component=component)

    try:
        return wkb.loads(payload)
    except (ShapelyError, TypeError, ValueError) as exc:
        msg = f"Row {row_index}: malformed WKB: {exc}"
        raise DecodeError(msg, row_index=row_index, component=component) from exc
