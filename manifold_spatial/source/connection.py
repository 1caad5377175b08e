"""Connection provider contract and scoped acquisition.

Opening a Manifold project (assembling the ODBC connection string and
performing the driver handshake) belongs to the caller. The extraction
core only needs a provider that can ``open`` a locator and ``close``
what it opened. ``scoped_connection`` guarantees ``close`` runs exactly
once on every exit path after a successful ``open``.
"""

from __future__ import annotations

import abc
import contextlib
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from manifold_spatial.core.exceptions import ConnectionOpenError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

logger = logging.getLogger("manifold_spatial.source.connection")


@dataclass(frozen=True, slots=True)
class ConnectionOptions:
    """Encoding flags understood by the Manifold ODBC driver.

    Attributes:
        unicode: Return text columns as Unicode.
        ansi: ANSI SQL escaping. Leave off when queries embed
            double-quoted literals such as ``CoordSys("Drawing" AS COMPONENT)``.
        opengis: Expose OpenGIS geometry functions.
    """

    unicode: bool = True
    ansi: bool = False
    opengis: bool = True

    def as_driver_flags(self) -> dict[str, str]:
        """Return the flags as the driver's ``Unicode/Ansi/OpenGIS`` values."""
        return {
            "Unicode": str(self.unicode),
            "Ansi": str(self.ansi),
            "OpenGIS": str(self.opengis),
        }


class ConnectionProvider(abc.ABC):
    """Opens and releases DB-API connections to a project locator."""

    @abc.abstractmethod
    def open(self, locator: str, options: ConnectionOptions) -> Any:
        """Open a connection to *locator*.

        Raises:
            ConnectionOpenError: If the data source cannot be opened.
        """

    def close(self, connection: Any) -> None:
        """Release *connection*."""
        connection.close()


class DbApiConnectionProvider(ConnectionProvider):
    """Adapt a DB-API 2.0 ``connect`` callable into a provider.

    Example usage::

        provider = DbApiConnectionProvider(
            lambda locator, options: pyodbc.connect(build_dsn(locator, options))
        )
    """

    def __init__(self, connect: Callable[[str, ConnectionOptions], Any]) -> None:
        self._connect = connect

    def open(self, locator: str, options: ConnectionOptions) -> Any:
        return self._connect(locator, options)


@contextlib.contextmanager
def scoped_connection(
    provider: ConnectionProvider,
    locator: str,
    options: ConnectionOptions | None = None,
) -> Iterator[Any]:
    """Hold one connection for the duration of a ``with`` block.

    Raises:
        ConnectionOpenError: If the provider fails to open *locator*.
    """
    options = options or ConnectionOptions()
    try:
        connection = provider.open(locator, options)
    except ConnectionOpenError:
        raise
    except Exception as exc:
        msg = f"Cannot open data source {locator!r}: {exc}"
        raise ConnectionOpenError(msg) from exc

    if connection is None:
        msg = f"Cannot open data source {locator!r}: provider returned no connection"
        raise ConnectionOpenError(msg)

    logger.debug("Connection opened | locator=%s | flags=%s", locator, options.as_driver_flags())
    try:
        yield connection
    except BaseException:
        # The extraction error takes precedence over a failing release.
        try:
            provider.close(connection)
        except Exception:
            logger.warning(
                "Connection release failed during error handling | locator=%s",
                locator,
                exc_info=True,
            )
        else:
            logger.debug("Connection released | locator=%s", locator)
        raise
    provider.close(connection)
    logger.debug("Connection released | locator=%s", locator)
