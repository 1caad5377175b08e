"""Shared Manifold SQL constants, kept in one place.

Centralises column markers, SQL function fragments and the synthetic
alias alphabet used by the query builders and readers.
"""

from __future__ import annotations

import string

# ---------------------------------------------------------------------------
# Column conventions
# ---------------------------------------------------------------------------

INTERNAL_COLUMN_MARKER: str = " (I)"
"""Suffix Manifold appends to intrinsic (computed) columns, e.g. ``Geom (I)``."""

DEFAULT_PIXEL_COLUMN: str = "Height (I)"
"""Intrinsic surface column carrying the pixel value."""

CRS_COLUMN: str = "CRS"
"""Alias of the coordinate-system WKT column in the lookup query."""

# ---------------------------------------------------------------------------
# SQL fragments
# ---------------------------------------------------------------------------

GEOMETRY_WKB_EXPRESSION: str = "CGeomWKB(Geom([ID]))"
"""Projects each object's geometry as OGC well-known binary."""

# ---------------------------------------------------------------------------
# Synthetic alias
# ---------------------------------------------------------------------------

ALIAS_ALPHABET: str = string.ascii_lowercase + "123456789"
DEFAULT_ALIAS_LENGTH: int = 15
DEFAULT_ALIAS_MAX_ATTEMPTS: int = 32

# ---------------------------------------------------------------------------
# Raster row order
# ---------------------------------------------------------------------------

ROW_ORDER_TOP_DOWN: str = "top_down"
ROW_ORDER_BOTTOM_UP: str = "bottom_up"
ROW_ORDERS: frozenset[str] = frozenset({ROW_ORDER_TOP_DOWN, ROW_ORDER_BOTTOM_UP})
