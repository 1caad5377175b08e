"""Topology-filtered query construction.

Builds the Manifold SQL that selects the objects of one topology kind
from a drawing table and appends each object's geometry as WKB under a
synthetic column alias that cannot collide with real attribute names.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from manifold_spatial.core.constants import (
    ALIAS_ALPHABET,
    DEFAULT_ALIAS_LENGTH,
    DEFAULT_ALIAS_MAX_ATTEMPTS,
    GEOMETRY_WKB_EXPRESSION,
    INTERNAL_COLUMN_MARKER,
)
from manifold_spatial.core.exceptions import AliasCollisionError, ConfigurationError
from manifold_spatial.models.topology import TopologyKind
from manifold_spatial.utils.sql import quote_identifier

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = [
    "build_projection",
    "build_query",
    "generate_alias",
    "is_internal_column",
    "quote_identifier",
    "topology_predicate",
]

_PREDICATES: dict[TopologyKind, str] = {
    TopologyKind.AREA: "IsArea([ID])",
    TopologyKind.LINE: "IsLine([ID])",
    TopologyKind.POINT: "IsPoint([ID])",
}


def topology_predicate(kind: TopologyKind | str) -> str:
    """Return the ``WHERE`` predicate selecting objects of *kind*.

    Raises:
        ConfigurationError: If *kind* is not a known topology kind.
    """
    return _PREDICATES[TopologyKind.parse(kind)]


def is_internal_column(name: str) -> bool:
    """Whether *name* is a Manifold intrinsic column such as ``Geom (I)``."""
    return INTERNAL_COLUMN_MARKER in name


def generate_alias(
    existing: Iterable[str],
    *,
    length: int = DEFAULT_ALIAS_LENGTH,
    max_attempts: int = DEFAULT_ALIAS_MAX_ATTEMPTS,
    rng: random.Random | None = None,
) -> str:
    """Generate a column alias absent from *existing*.

    Manifold compares identifiers case-insensitively, so the exclusion
    check does too.

    Args:
        existing: Column names the alias must not equal.
        length: Alias length in characters.
        max_attempts: Candidates to try before giving up.
        rng: Random source; defaults to ``random.SystemRandom()``.

    Raises:
        AliasCollisionError: If every candidate collided.
    """
    rng = rng or random.SystemRandom()
    taken = {name.lower() for name in existing}
    for _ in range(max_attempts):
        candidate = "".join(rng.choice(ALIAS_ALPHABET) for _ in range(length))
        if candidate.lower() not in taken:
            return candidate
    msg = f"Could not generate a unique column alias after {max_attempts} attempts"
    raise AliasCollisionError(msg)


def build_projection(columns: Iterable[str], alias: str) -> str:
    """Return the select list: real attribute columns then the WKB geometry.

    Intrinsic ``(I)`` columns are dropped; the geometry travels as
    ``CGeomWKB(Geom([ID])) AS [alias]``.
    """
    attributes = [quote_identifier(c) for c in columns if not is_internal_column(c)]
    attributes.append(f"{GEOMETRY_WKB_EXPRESSION} AS {quote_identifier(alias)}")
    return ", ".join(attributes)


def build_query(
    table: str,
    kind: TopologyKind | str,
    *,
    query: str | None = None,
    projection: str = "*",
) -> str:
    """Return *query* unchanged, or synthesise a topology-filtered select.

    Raises:
        ConfigurationError: If *kind* is unknown or *query* is blank.
    """
    predicate = topology_predicate(kind)
    if query is not None:
        if not query.strip():
            msg = "Query override must not be empty"
            raise ConfigurationError(msg, component=table)
        return query
    return f"SELECT {projection} FROM {quote_identifier(table)} WHERE {predicate}"
