"""Shared pytest fixtures for the manifold_spatial test suite."""

from __future__ import annotations

import pytest

from tests.fakes import UTM10N_WKT, WGS84_WKT, FixedTranslator


@pytest.fixture()
def fixed_translator() -> FixedTranslator:
    """Translator that always resolves to WGS 84."""
    return FixedTranslator()


@pytest.fixture()
def wgs84_wkt() -> str:
    """OGC WKT1 for EPSG:4326 with authority codes."""
    return WGS84_WKT


@pytest.fixture()
def utm10n_wkt() -> str:
    """OGC WKT1 for UTM zone 10N without authority codes."""
    return UTM10N_WKT
