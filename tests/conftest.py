"""Shared pytest fixtures for the polygon-measure test suite."""

from pathlib import Path

import pytest

from polygon_measure.core.config import MeasureConfig
from polygon_measure.session import MeasurementSession

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


# ---------------------------------------------------------------------------
# Sample GeoJSON file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def geographic_geojson(data_dir: Path) -> Path:
    """Path to a single lon/lat polygon (~78 ha near Astana), no CRS block."""
    return data_dir / "01_geographic_field.geojson"


@pytest.fixture()
def named_crs_geojson(data_dir: Path) -> Path:
    """Path to a 1 km Web Mercator square declared as urn:ogc:def:crs:EPSG::3857."""
    return data_dir / "02_named_crs_web_mercator.geojson"


@pytest.fixture()
def multipolygon_geojson(data_dir: Path) -> Path:
    """Path to one MultiPolygon feature with 3 member polygons."""
    return data_dir / "03_multipolygon_three_parts.geojson"


@pytest.fixture()
def point_only_geojson(data_dir: Path) -> Path:
    """Path to a document with a single Point feature and no polygons."""
    return data_dir / "04_point_only.geojson"


@pytest.fixture()
def mercator_no_crs_geojson(data_dir: Path) -> Path:
    """Path to an undeclared polygon with Web Mercator magnitudes."""
    return data_dir / "05_mercator_no_crs.geojson"


@pytest.fixture()
def malformed_geojson(data_dir: Path) -> Path:
    """Path to a truncated, non-parseable JSON file."""
    return data_dir / "06_malformed.geojson"


@pytest.fixture()
def csv_file(data_dir: Path) -> Path:
    """Path to a file with an unsupported extension."""
    return data_dir / "07_not_geojson.csv"


# ---------------------------------------------------------------------------
# Session fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> MeasureConfig:
    """Default configuration (Web Mercator map, WGS 84, auto units)."""
    return MeasureConfig()


@pytest.fixture()
def session(config: MeasureConfig) -> MeasurementSession:
    """A fresh, empty measurement session."""
    return MeasurementSession(config)
