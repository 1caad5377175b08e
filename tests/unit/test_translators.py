"""Tests for the coordinate translation strategies and their factory.

Covers:
- DirectTranslator (pyproj): WKT1 with and without authority codes
- RoundTripTranslator (fiona): side-car round trip, mocked and real
- Both strategies agree on the same WKT
- Factory: registry, ``auto`` selection by capability, custom strategies
"""

from __future__ import annotations

import sys
import unittest
from pathlib import Path
from types import ModuleType
from unittest.mock import MagicMock, patch

import pytest

from manifold_spatial.core.config import ExtractionConfig
from manifold_spatial.core.exceptions import ConfigurationError, ProjectionError
from manifold_spatial.models.projection import ProjectionDescriptor
from manifold_spatial.translators.base import CoordinateTranslator
from manifold_spatial.translators.direct import DirectTranslator
from manifold_spatial.translators.factory import (
    _TRANSLATOR_REGISTRY,
    DIRECT,
    ROUND_TRIP,
    clear_translator_cache,
    get_translator,
    list_translators,
    register_translator,
    select_translator,
    translator_for,
)
from manifold_spatial.translators.round_trip import RoundTripTranslator

_PLACEHOLDER_WKT = 'GEOGCS["WGS 84",DATUM["WGS_1984",SPHEROID["WGS 84",6378137,298.257223563]]]'
_FIND_SPEC = "manifold_spatial.translators.factory.importlib.util.find_spec"


class _FakeFionaError(Exception):
    pass


def _fake_fiona(crs: object) -> dict[str, ModuleType]:
    """Build stand-in ``fiona`` modules whose read-back CRS is *crs*."""
    fiona = MagicMock(name="fiona")
    src = MagicMock(name="collection")
    src.crs = crs
    fiona.open.return_value.__enter__.return_value = src
    errors = MagicMock(name="fiona.errors")
    errors.FionaError = _FakeFionaError
    model = MagicMock(name="fiona.model")
    return {"fiona": fiona, "fiona.errors": errors, "fiona.model": model}


class TestDirectTranslator:
    """pyproj in-process translation."""

    def test_wgs84(self, wgs84_wkt: str) -> None:
        descriptor = DirectTranslator().translate(wgs84_wkt)
        assert descriptor.source == "direct"
        params = descriptor.parameters
        assert params["proj"] == "longlat"
        assert params["datum"] == "WGS84"

    def test_projected_without_authority(self, utm10n_wkt: str) -> None:
        params = DirectTranslator().translate(utm10n_wkt).parameters
        assert params["proj"] in ("utm", "tmerc")
        assert params["units"] == "m"

    def test_surrounding_whitespace(self, wgs84_wkt: str) -> None:
        descriptor = DirectTranslator().translate(f"\n  {wgs84_wkt}  \n")
        assert descriptor.parameters["proj"] == "longlat"

    def test_invalid_wkt(self) -> None:
        with pytest.raises(ProjectionError, match="direct"):
            DirectTranslator().translate('PROJCS["broken",')

    @pytest.mark.parametrize("wkt", ["", "   ", None])
    def test_empty_wkt(self, wkt: str | None) -> None:
        with pytest.raises(ProjectionError, match="empty"):
            DirectTranslator().translate(wkt)  # type: ignore[arg-type]


class TestRoundTripTranslatorMocked:
    """Side-car round trip with fiona stubbed out."""

    def test_formats_read_back_crs(self) -> None:
        crs = MagicMock()
        crs.to_dict.return_value = {"proj": "longlat", "datum": "WGS84", "no_defs": True}
        modules = _fake_fiona(crs)
        with patch.dict(sys.modules, modules):
            descriptor = RoundTripTranslator().translate(_PLACEHOLDER_WKT)

        assert descriptor == ProjectionDescriptor(
            "+proj=longlat +datum=WGS84 +no_defs", source="round_trip"
        )

    def test_writes_probe_then_reads_back(self) -> None:
        crs = MagicMock()
        crs.to_dict.return_value = {"init": "epsg:4326"}
        modules = _fake_fiona(crs)
        with patch.dict(sys.modules, modules):
            RoundTripTranslator().translate(_PLACEHOLDER_WKT)

        open_calls = modules["fiona"].open.call_args_list
        assert len(open_calls) == 2
        assert open_calls[0].args[1] == "w"
        assert open_calls[0].kwargs["driver"] == "ESRI Shapefile"
        shp = Path(open_calls[1].args[0])
        assert shp.suffix == ".shp"
        assert not shp.parent.exists()

    def test_unresolved_crs(self) -> None:
        with patch.dict(sys.modules, _fake_fiona(None)), pytest.raises(
            ProjectionError, match="could not be resolved"
        ):
            RoundTripTranslator().translate(_PLACEHOLDER_WKT)

    def test_fiona_error_wrapped(self) -> None:
        modules = _fake_fiona(None)
        modules["fiona"].open.side_effect = _FakeFionaError("driver failure")
        with patch.dict(sys.modules, modules), pytest.raises(
            ProjectionError, match="driver failure"
        ) as exc_info:
            RoundTripTranslator().translate(_PLACEHOLDER_WKT)
        assert exc_info.value.stage == "resolve_projection"


class TestStrategiesAgree:
    """Direct and round-trip translation are equivalent for the same WKT."""

    def test_wgs84_equivalent(self, wgs84_wkt: str) -> None:
        pytest.importorskip("fiona")
        direct = DirectTranslator().translate(wgs84_wkt)
        round_trip = RoundTripTranslator().translate(wgs84_wkt)
        assert round_trip.source == "round_trip"
        assert direct.equivalent(round_trip)


class TestTranslatorFactory(unittest.TestCase):
    """Registry lookups and capability-driven selection."""

    def setUp(self) -> None:
        clear_translator_cache()

    def tearDown(self) -> None:
        _TRANSLATOR_REGISTRY.pop("fixed", None)
        clear_translator_cache()

    def test_builtin_strategies_listed(self) -> None:
        names = list_translators()
        assert DIRECT in names
        assert ROUND_TRIP in names
        assert names == sorted(names)

    def test_get_translator(self) -> None:
        assert isinstance(get_translator(DIRECT), DirectTranslator)
        assert isinstance(get_translator(ROUND_TRIP), RoundTripTranslator)

    def test_unknown_strategy(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            get_translator("gdal_osr")
        assert "Available" in str(ctx.exception)

    def test_register_custom(self) -> None:
        class _Fixed(CoordinateTranslator):
            name = "fixed"

            def _translate(self, wkt: str) -> ProjectionDescriptor:
                return ProjectionDescriptor("+proj=longlat", source=self.name)

        register_translator("fixed", lambda: _Fixed)
        assert select_translator("fixed").translate("X").source == "fixed"

    def test_register_reserved_name(self) -> None:
        for name in ("", "auto"):
            with self.assertRaises(ConfigurationError):
                register_translator(name, lambda: DirectTranslator)

    def test_auto_prefers_direct(self) -> None:
        with patch(_FIND_SPEC, return_value=object()):
            assert select_translator().name == DIRECT

    def test_auto_falls_back_to_round_trip(self) -> None:
        with patch(_FIND_SPEC, side_effect=lambda name: None if name == "pyproj" else object()):
            assert select_translator("auto").name == ROUND_TRIP

    def test_auto_without_any_backend(self) -> None:
        with patch(_FIND_SPEC, return_value=None), self.assertRaises(ConfigurationError):
            select_translator()

    def test_auto_choice_cached(self) -> None:
        with patch(_FIND_SPEC, return_value=object()) as mock_find:
            first = select_translator()
            second = translator_for()
        assert first is second
        assert mock_find.call_count == 1

    def test_register_clears_cache(self) -> None:
        with patch(_FIND_SPEC, return_value=object()):
            before = select_translator(DIRECT)
        register_translator(DIRECT, lambda: DirectTranslator)
        assert select_translator(DIRECT) is not before

    def test_translator_for_config(self) -> None:
        translator = translator_for(ExtractionConfig(crs_strategy="round_trip"))
        assert isinstance(translator, RoundTripTranslator)

    def test_translator_for_default(self) -> None:
        with patch(_FIND_SPEC, return_value=object()):
            assert isinstance(translator_for(), DirectTranslator)

    def test_repr(self) -> None:
        assert repr(DirectTranslator()) == "DirectTranslator(name='direct')"
