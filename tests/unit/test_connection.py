"""Tests for the connection scope and query executor.

Covers:
- ``scoped_connection`` releases the connection exactly once on success
  and on failure, and wraps provider failures in ConnectionOpenError
- ``DbApiConnectionProvider`` adapts a ``connect`` callable
- ``execute_query`` shapes cursor results and wraps driver errors
- ``column_names`` zero-row probe
"""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from manifold_spatial.core.exceptions import ConnectionOpenError, DecodeError, QueryError
from manifold_spatial.source.connection import (
    ConnectionOptions,
    DbApiConnectionProvider,
    scoped_connection,
)
from manifold_spatial.source.executor import column_names, execute_query
from tests.fakes import FakeConnection, FakeProvider


class TestConnectionOptions:
    """Driver flags."""

    def test_defaults(self) -> None:
        assert ConnectionOptions().as_driver_flags() == {
            "Unicode": "True",
            "Ansi": "False",
            "OpenGIS": "True",
        }


class TestScopedConnection:
    """Connection lifetime is bounded by the ``with`` block."""

    def test_closes_once_on_success(self) -> None:
        provider = FakeProvider([])
        with scoped_connection(provider, "project.map") as conn:
            assert conn is provider.connection
            assert provider.close_calls == 0
        assert provider.close_calls == 1
        assert provider.connection.closed

    def test_closes_once_on_failure(self) -> None:
        provider = FakeProvider([])
        with pytest.raises(RuntimeError), scoped_connection(provider, "project.map"):
            raise RuntimeError("boom")
        assert provider.close_calls == 1

    def test_close_failure_does_not_mask_error(self, caplog: pytest.LogCaptureFixture) -> None:
        provider = FakeProvider([], close_error=OSError("handle already released"))
        with (
            caplog.at_level(logging.WARNING, logger="manifold_spatial"),
            pytest.raises(DecodeError, match="bad blob"),
            scoped_connection(provider, "project.map"),
        ):
            raise DecodeError("bad blob")
        assert provider.close_calls == 1
        assert "Connection release failed" in caplog.text

    def test_close_failure_on_success_propagates(self) -> None:
        provider = FakeProvider([], close_error=OSError("handle already released"))
        with pytest.raises(OSError, match="already released"):
            with scoped_connection(provider, "project.map"):
                pass
        assert provider.close_calls == 1

    def test_default_options(self) -> None:
        provider = FakeProvider([])
        with scoped_connection(provider, "project.map"):
            pass
        assert provider.open_calls == [("project.map", ConnectionOptions())]

    def test_explicit_options_forwarded(self) -> None:
        provider = FakeProvider([])
        options = ConnectionOptions(ansi=True)
        with scoped_connection(provider, "p.map", options):
            pass
        assert provider.open_calls[0][1] is options

    def test_open_failure_wrapped(self) -> None:
        provider = FakeProvider([], open_error=OSError("no such file"))
        with pytest.raises(ConnectionOpenError, match="no such file") as exc_info:
            with scoped_connection(provider, "missing.map"):
                pytest.fail("body must not run")
        assert exc_info.value.stage == "connect"
        assert provider.close_calls == 0

    def test_connection_open_error_passes_through(self) -> None:
        original = ConnectionOpenError("driver missing")
        provider = FakeProvider([], open_error=original)
        with pytest.raises(ConnectionOpenError) as exc_info:
            with scoped_connection(provider, "p.map"):
                pass
        assert exc_info.value is original

    def test_none_connection_rejected(self) -> None:
        provider = DbApiConnectionProvider(lambda locator, options: None)
        with pytest.raises(ConnectionOpenError, match="no connection"):
            with scoped_connection(provider, "p.map"):
                pass


class TestDbApiConnectionProvider:
    """Adapter around a ``connect`` callable."""

    def test_open_and_close(self) -> None:
        conn = MagicMock()
        connect = MagicMock(return_value=conn)
        provider = DbApiConnectionProvider(connect)
        options = ConnectionOptions()

        with scoped_connection(provider, "p.map", options) as opened:
            assert opened is conn

        connect.assert_called_once_with("p.map", options)
        conn.close.assert_called_once_with()


class TestExecuteQuery:
    """Cursor results become AttributeTables."""

    def test_result_table(self) -> None:
        conn = FakeConnection([("FROM [t]", (["a", "b"], [(1, "x"), (2, "y")]))])
        table = execute_query(conn, "SELECT * FROM [t]")
        assert table.columns == ["a", "b"]
        assert table.column("a") == (1, 2)
        assert conn.cursors_closed == 1

    def test_no_description(self) -> None:
        conn = MagicMock()
        conn.cursor.return_value.description = None
        table = execute_query(conn, "UPDATE [t] SET [a] = 1")
        assert table.row_count == 0
        conn.cursor.return_value.fetchall.assert_not_called()

    def test_driver_error_wrapped(self) -> None:
        conn = FakeConnection([("FROM [t]", RuntimeError("syntax error"))])
        with pytest.raises(QueryError, match="syntax error") as exc_info:
            execute_query(conn, "SELECT * FROM [t]")
        assert exc_info.value.query == "SELECT * FROM [t]"
        assert conn.cursors_closed == 1

    def test_ragged_row_reports_query(self) -> None:
        conn = FakeConnection([("FROM [t]", (["a", "b"], [(1,)]))])
        with pytest.raises(QueryError) as exc_info:
            execute_query(conn, "SELECT * FROM [t]")
        assert exc_info.value.query == "SELECT * FROM [t]"


class TestColumnNames:
    """Zero-row column probe."""

    def test_probe(self) -> None:
        conn = FakeConnection([("WHERE 0 = 1", (["Name", "Geom (I)"], []))])
        assert column_names(conn, "Parcels") == ["Name", "Geom (I)"]
        assert conn.queries == ["SELECT * FROM [Parcels] WHERE 0 = 1"]
