"""Tabular and vector layer models.

- ``AttributeTable``: ordered, row-aligned column → values mapping.
- ``GeometryCollection``: decoded geometries of a single topology kind,
  tagged with their projection.
- ``SpatialLayer``: geometries paired positionally with attribute rows.
  This is the reconstructed drawing returned by ``read_layer``.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from manifold_spatial.core.exceptions import ConfigurationError, QueryError

if TYPE_CHECKING:
    from shapely.geometry.base import BaseGeometry

    from manifold_spatial.models.projection import ProjectionDescriptor
    from manifold_spatial.models.topology import TopologyKind


@dataclass(frozen=True, slots=True, eq=False)
class AttributeTable:
    """Ordered mapping of column name to column values.

    Every column holds exactly ``row_count`` values; the i-th value of
    each column belongs to the i-th row returned by the query.

    Attributes:
        data: Column name → tuple of values, in query column order.
    """

    data: dict[str, tuple[Any, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        lengths = {len(values) for values in self.data.values()}
        if len(lengths) > 1:
            msg = f"AttributeTable columns have unequal lengths: {sorted(lengths)}"
            raise QueryError(msg)

    @classmethod
    def from_rows(cls, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> AttributeTable:
        """Build a table from DB-API column names and row tuples.

        Raises:
            ConfigurationError: If a column name is duplicated (the
                result could not be addressed by name).
            QueryError: If a row has a different width than the header.
        """
        names = [str(c) for c in columns]
        seen: set[str] = set()
        for name in names:
            if name in seen:
                msg = f"Duplicate column name in query result: {name!r}"
                raise ConfigurationError(msg)
            seen.add(name)

        width = len(names)
        for idx, row in enumerate(rows):
            if len(row) != width:
                msg = f"Row {idx} has {len(row)} values, expected {width}"
                raise QueryError(msg)

        data = {name: tuple(row[pos] for row in rows) for pos, name in enumerate(names)}
        return cls(data=data)

    @property
    def columns(self) -> list[str]:
        """Column names in query order."""
        return list(self.data)

    @property
    def row_count(self) -> int:
        """Number of rows."""
        for values in self.data.values():
            return len(values)
        return 0

    def column(self, name: str) -> tuple[Any, ...]:
        """Return the values of column *name*.

        Raises:
            KeyError: If the column does not exist.
        """
        return self.data[name]

    def without(self, name: str) -> AttributeTable:
        """Return a copy of the table with column *name* removed."""
        return AttributeTable(data={k: v for k, v in self.data.items() if k != name})

    def rows(self) -> Iterator[dict[str, Any]]:
        """Iterate rows as ``{column: value}`` dicts."""
        for idx in range(self.row_count):
            yield {name: values[idx] for name, values in self.data.items()}

    def __len__(self) -> int:
        return self.row_count

    def __contains__(self, name: object) -> bool:
        return name in self.data


@dataclass(frozen=True, slots=True)
class GeometryCollection:
    """Decoded geometries of a single topology kind.

    Attributes:
        kind: Topology kind every geometry conforms to.
        geometries: Shapely geometries in query row order.
        projection: Projection the coordinates are expressed in.
    """

    kind: TopologyKind
    geometries: tuple[BaseGeometry, ...]
    projection: ProjectionDescriptor

    def __len__(self) -> int:
        return len(self.geometries)


@dataclass(frozen=True, slots=True)
class SpatialLayer:
    """A drawing reconstructed as geometries plus attributes.

    Attributes:
        name: Drawing or table name the layer was read from.
        kind: Topology kind (areas, lines or points).
        geometries: Shapely geometries, aligned with attribute rows.
        attributes: Attribute table with the synthetic geometry column removed.
        projection: Projection shared by all geometries.
    """

    name: str
    kind: TopologyKind
    geometries: tuple[BaseGeometry, ...]
    attributes: AttributeTable
    projection: ProjectionDescriptor

    def __post_init__(self) -> None:
        if self.attributes.row_count != len(self.geometries):
            msg = (
                f"Layer {self.name!r} has {len(self.geometries)} geometries but "
                f"{self.attributes.row_count} attribute rows"
            )
            raise QueryError(msg, component=self.name)

    @classmethod
    def from_collection(
        cls, name: str, collection: GeometryCollection, attributes: AttributeTable
    ) -> SpatialLayer:
        """Pair a decoded collection with its attribute rows."""
        return cls(
            name=name,
            kind=collection.kind,
            geometries=collection.geometries,
            attributes=attributes,
            projection=collection.projection,
        )

    def __len__(self) -> int:
        return len(self.geometries)

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """Union bounding box ``(minx, miny, maxx, maxy)`` of all geometries."""
        import shapely

        minx, miny, maxx, maxy = shapely.total_bounds(list(self.geometries)).tolist()
        return (minx, miny, maxx, maxy)

    def records(self) -> Iterator[tuple[BaseGeometry, dict[str, Any]]]:
        """Iterate ``(geometry, attributes)`` pairs in row order."""
        yield from zip(self.geometries, self.attributes.rows(), strict=True)

    @property
    def __geo_interface__(self) -> dict[str, Any]:
        """GeoJSON FeatureCollection view of the layer."""
        from shapely.geometry import mapping

        return {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "id": str(idx),
                    "geometry": mapping(geom),
                    "properties": props,
                }
                for idx, (geom, props) in enumerate(self.records())
            ],
        }
