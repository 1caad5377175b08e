"""CoordinateTranslator abstract base class.

Defines the contract every coordinate-system translation strategy must
implement. The readers interact only with this interface; which
strategy is behind it is decided once, at configuration time, by
``translators.factory.select_translator``.

Strategies:
    ``direct``: pyproj parses the WKT and emits PROJ.4.
    ``round_trip``: fiona writes a throwaway shapefile with the WKT as
        its ``.prj`` side-car and reads the resolved CRS back.

Both must return equivalent ``ProjectionDescriptor`` values for the same
WKT (see ``ProjectionDescriptor.equivalent``).
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from manifold_spatial.core.exceptions import ProjectionError

if TYPE_CHECKING:
    from manifold_spatial.models.projection import ProjectionDescriptor


class CoordinateTranslator(abc.ABC):
    """Abstract base class for WKT → PROJ.4 translation strategies.

    Example usage::

        translator = select_translator("auto")
        descriptor = translator.translate(wkt)
        print(descriptor.proj4)
    """

    #: Registry name of the strategy.
    name: str = ""

    def translate(self, wkt: str) -> ProjectionDescriptor:
        """Translate coordinate-system *wkt* into a ``ProjectionDescriptor``.

        Raises:
            ProjectionError: If *wkt* is empty or cannot be resolved.
        """
        if wkt is None or not str(wkt).strip():
            msg = f"{self.name}: coordinate system text is empty"
            raise ProjectionError(msg)
        return self._translate(str(wkt).strip())

    @abc.abstractmethod
    def _translate(self, wkt: str) -> ProjectionDescriptor:
        """Strategy-specific translation of non-empty *wkt*.

        Raises:
            ProjectionError: If the WKT cannot be resolved.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
