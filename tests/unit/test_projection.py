"""Tests for the ProjectionDescriptor model.

Covers:
- PROJ.4 parsing and formatting
- Unknown-projection marker
- Equivalence by re-parsed parameters (flags ignored, numeric tolerance,
  ``+init`` expansion)
"""

from __future__ import annotations

import pytest

from manifold_spatial.models.projection import (
    ProjectionDescriptor,
    format_proj4,
    parse_proj4,
)

UTM10 = "+proj=utm +zone=10 +datum=WGS84 +units=m +no_defs +type=crs"


class TestParseFormat:
    """String ↔ mapping conversion."""

    def test_parse(self) -> None:
        params = parse_proj4(UTM10)
        assert params["proj"] == "utm"
        assert params["zone"] == "10"
        assert params["no_defs"] is True
        assert list(params)[:2] == ["proj", "zone"]

    def test_parse_tolerates_extra_whitespace(self) -> None:
        assert parse_proj4("  +proj=longlat   + +datum=WGS84 ") == {
            "proj": "longlat",
            "datum": "WGS84",
        }

    def test_format_skips_false_and_none(self) -> None:
        proj4 = format_proj4({"proj": "longlat", "no_defs": True, "south": False, "x": None})
        assert proj4 == "+proj=longlat +no_defs"

    def test_format_numbers(self) -> None:
        assert format_proj4({"lat_0": 0, "k": 0.9996}) == "+lat_0=0 +k=0.9996"


class TestUnknown:
    """Explicit unknown-projection marker."""

    def test_marker(self) -> None:
        marker = ProjectionDescriptor.unknown()
        assert marker.is_unknown
        assert marker.source == "unknown"
        assert str(marker) == "<unknown projection>"

    def test_known_is_not_unknown(self) -> None:
        assert not ProjectionDescriptor(UTM10).is_unknown

    def test_unknown_only_equivalent_to_unknown(self) -> None:
        marker = ProjectionDescriptor.unknown()
        assert marker.equivalent(ProjectionDescriptor.unknown())
        assert not marker.equivalent(ProjectionDescriptor(UTM10))
        assert not ProjectionDescriptor(UTM10).equivalent(marker)


class TestEquivalent:
    """Descriptors compare by parameters, not text."""

    def test_identical(self) -> None:
        assert ProjectionDescriptor(UTM10).equivalent(ProjectionDescriptor(UTM10))

    def test_ignores_flags_and_order(self) -> None:
        left = ProjectionDescriptor("+proj=utm +zone=10 +datum=WGS84 +units=m")
        right = ProjectionDescriptor("+units=m +datum=WGS84 +zone=10 +proj=utm +wktext +no_defs")
        assert left.equivalent(right)

    def test_numeric_tolerance(self) -> None:
        left = ProjectionDescriptor("+proj=tmerc +k=0.9996 +lon_0=-123")
        right = ProjectionDescriptor("+proj=tmerc +k=0.99960000000001 +lon_0=-123.0")
        assert left.equivalent(right)

    def test_towgs84_lists(self) -> None:
        left = ProjectionDescriptor("+proj=longlat +towgs84=0,0,0,0,0,0,0")
        right = ProjectionDescriptor("+proj=longlat +towgs84=0.0,0,0,0,0,0,0.0")
        assert left.equivalent(right)

    def test_different_zone(self) -> None:
        other = UTM10.replace("zone=10", "zone=11")
        assert not ProjectionDescriptor(UTM10).equivalent(ProjectionDescriptor(other))

    def test_missing_parameter(self) -> None:
        left = ProjectionDescriptor("+proj=utm +zone=10 +datum=WGS84")
        right = ProjectionDescriptor("+proj=utm +zone=10")
        assert not left.equivalent(right)

    def test_case_insensitive_strings(self) -> None:
        left = ProjectionDescriptor("+proj=longlat +datum=wgs84")
        right = ProjectionDescriptor("+proj=longlat +datum=WGS84")
        assert left.equivalent(right)

    def test_init_shorthand_expanded(self) -> None:
        pytest.importorskip("pyproj")
        left = ProjectionDescriptor("+init=epsg:4326")
        right = ProjectionDescriptor("+proj=longlat +datum=WGS84 +no_defs +type=crs")
        assert left.equivalent(right)

    def test_unknown_init_code_not_equivalent(self) -> None:
        pytest.importorskip("pyproj")
        left = ProjectionDescriptor("+init=epsg:99999999")
        assert not left.equivalent(ProjectionDescriptor("+proj=longlat +datum=WGS84"))
        assert left.equivalent(ProjectionDescriptor("+init=EPSG:99999999"))
