"""Topology kinds of Manifold drawing objects."""

from __future__ import annotations

import enum

from manifold_spatial.core.exceptions import ConfigurationError


class TopologyKind(enum.Enum):
    """Classification of drawing objects.

    Values:
        AREA:  Polygons (Manifold areas).
        LINE:  Line strings.
        POINT: Points.
    """

    AREA = "area"
    LINE = "line"
    POINT = "point"

    @classmethod
    def parse(cls, value: TopologyKind | str) -> TopologyKind:
        """Coerce a member or case-insensitive name into a ``TopologyKind``.

        Raises:
            ConfigurationError: If *value* names no known kind.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        valid = ", ".join(kind.value for kind in cls)
        msg = f"Unknown topology kind: {value!r}. Expected one of: {valid}"
        raise ConfigurationError(msg)
