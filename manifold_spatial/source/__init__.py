"""Data-source collaborators: connection scope and query execution."""

from manifold_spatial.source.connection import (
    ConnectionOptions,
    ConnectionProvider,
    DbApiConnectionProvider,
    scoped_connection,
)
from manifold_spatial.source.executor import column_names, execute_query

__all__ = [
    "ConnectionOptions",
    "ConnectionProvider",
    "DbApiConnectionProvider",
    "column_names",
    "execute_query",
    "scoped_connection",
]
