"""Query execution over a DB-API connection.

The Manifold SQL dialect (``IsArea``, ``CGeomWKB``, ``PixelsByX`` ...)
is passed through verbatim; this module only runs the text and shapes
the cursor result into an ``AttributeTable``.
"""

from __future__ import annotations

import logging
from typing import Any

from manifold_spatial.core.exceptions import ExtractionError, QueryError
from manifold_spatial.models.layer import AttributeTable
from manifold_spatial.utils.sql import quote_identifier

logger = logging.getLogger("manifold_spatial.source.executor")


def execute_query(connection: Any, query: str) -> AttributeTable:
    """Execute *query* and return the full result as an ``AttributeTable``.

    Raises:
        QueryError: If the driver rejects the query or the result is malformed.
    """
    logger.debug("Executing query | sql=%s", query)
    cursor = connection.cursor()
    try:
        cursor.execute(query)
        description = cursor.description or ()
        columns = [column[0] for column in description]
        rows = cursor.fetchall() if columns else []
        return AttributeTable.from_rows(columns, [tuple(row) for row in rows])
    except ExtractionError as exc:
        if isinstance(exc, QueryError) and not exc.query:
            exc.query = query
        raise
    except Exception as exc:
        msg = f"Query failed: {exc}"
        raise QueryError(msg, query=query) from exc
    finally:
        cursor.close()


def column_names(connection: Any, table: str) -> list[str]:
    """Return the column names of *table* with a zero-row probe."""
    result = execute_query(connection, f"SELECT * FROM {quote_identifier(table)} WHERE 0 = 1")
    return result.columns
