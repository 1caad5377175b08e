"""Portable projection descriptor (PROJ.4 string).

A ``ProjectionDescriptor`` is derived once per extraction from the
component's coordinate-system WKT and attached to every geometry
collection or raster grid produced by that extraction.

Two descriptors are *equivalent* when their re-parsed parameters match:
informational flags (``+type``, ``+no_defs``, ``+wktext``) are ignored,
numeric values are compared with a tolerance and an ``+init=epsg:NNNN``
shorthand is expanded through pyproj when it is importable.
"""

from __future__ import annotations

import importlib.util
import math
from dataclasses import dataclass

_IGNORED_KEYS = frozenset({"type", "no_defs", "wktext"})
_REL_TOLERANCE = 1e-9
_ABS_TOLERANCE = 1e-9

UNKNOWN_SOURCE = "unknown"


@dataclass(frozen=True, slots=True)
class ProjectionDescriptor:
    """A coordinate reference system as a PROJ.4 parameter string.

    Attributes:
        proj4: PROJ.4 string, e.g. ``"+proj=longlat +datum=WGS84 +no_defs"``.
            Empty for the unknown-projection marker.
        source: Name of the strategy that produced the descriptor.
    """

    proj4: str
    source: str = ""

    @classmethod
    def unknown(cls) -> ProjectionDescriptor:
        """Return the explicit unknown-projection marker."""
        return cls(proj4="", source=UNKNOWN_SOURCE)

    @property
    def is_unknown(self) -> bool:
        """Whether this is the unknown-projection marker."""
        return not self.proj4.strip()

    @property
    def parameters(self) -> dict[str, str | bool]:
        """Parse ``+key=value`` tokens; bare ``+flag`` tokens map to ``True``."""
        return parse_proj4(self.proj4)

    def equivalent(self, other: ProjectionDescriptor) -> bool:
        """Compare two descriptors by their re-parsed projection parameters."""
        if self.is_unknown or other.is_unknown:
            return self.is_unknown and other.is_unknown
        return _params_match(_normalised(self.proj4), _normalised(other.proj4))

    def __str__(self) -> str:
        return self.proj4 or "<unknown projection>"


def parse_proj4(proj4: str) -> dict[str, str | bool]:
    """Parse a PROJ.4 string into an ordered parameter mapping."""
    params: dict[str, str | bool] = {}
    for token in proj4.split():
        token = token.lstrip("+")
        if not token:
            continue
        key, sep, value = token.partition("=")
        params[key] = value if sep else True
    return params


def format_proj4(params: dict[str, object]) -> str:
    """Format a parameter mapping as a PROJ.4 string."""
    tokens: list[str] = []
    for key, value in params.items():
        if value is True:
            tokens.append(f"+{key}")
        elif value is False or value is None:
            continue
        else:
            tokens.append(f"+{key}={value}")
    return " ".join(tokens)


def _normalised(proj4: str) -> dict[str, str | bool]:
    params = parse_proj4(proj4)
    init = params.get("init")
    if isinstance(init, str) and importlib.util.find_spec("pyproj") is not None:
        from pyproj import CRS
        from pyproj.exceptions import CRSError

        try:
            expanded = CRS.from_user_input(init.upper()).to_proj4()
        except CRSError:
            # Unknown authority code: compare the unexpanded parameters.
            expanded = ""
        if expanded:
            params = parse_proj4(expanded)
    return {k: v for k, v in params.items() if k not in _IGNORED_KEYS}


def _params_match(left: dict[str, str | bool], right: dict[str, str | bool]) -> bool:
    if left.keys() != right.keys():
        return False
    return all(_values_match(left[key], right[key]) for key in left)


def _values_match(left: str | bool, right: str | bool) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return left == right
    try:
        return math.isclose(
            float(left), float(right), rel_tol=_REL_TOLERANCE, abs_tol=_ABS_TOLERANCE
        )
    except ValueError:
        pass
    if "," in left and "," in right:
        parts_l, parts_r = left.split(","), right.split(",")
        return len(parts_l) == len(parts_r) and all(
            _values_match(a, b) for a, b in zip(parts_l, parts_r, strict=True)
        )
    return left.lower() == right.lower()
