"""Shared constants used across the package.

Centralises CRS identifiers, Web Mercator extents and unit conversion
factors used by measurement, CRS detection and import.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Coordinate reference systems
# ---------------------------------------------------------------------------

GEOGRAPHIC_CRS: str = "EPSG:4326"
"""Geographic WGS 84 (longitude, latitude in degrees)."""

WEB_MERCATOR_CRS: str = "EPSG:3857"
"""Spherical (Web) Mercator, the working frame of tiled web maps."""

DEFAULT_MAP_PROJECTION: str = WEB_MERCATOR_CRS
"""Working map projection that imported polygons are reprojected into."""

DEFAULT_ELLIPSOID: str = "WGS84"
"""Reference ellipsoid name understood by ``pyproj.Geod``."""

# ---------------------------------------------------------------------------
# Coordinate bounds
# ---------------------------------------------------------------------------

MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

# Full extent of EPSG:3857 in metres
MERCATOR_MAX_X = 20_037_508.34
MERCATOR_MAX_Y = 20_048_966.1

# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------

SQ_METRES_PER_HECTARE = 10_000.0
SQ_METRES_PER_SQ_KM = 1_000_000.0
METRES_PER_KM = 1_000.0

AREA_UNITS: tuple[str, ...] = ("auto", "m2", "ha", "km2")
"""Recognised area unit selectors."""

LENGTH_UNITS: tuple[str, ...] = ("auto", "m", "km")
"""Recognised length unit selectors."""


def normalize_epsg(crs: str) -> str:
    """Return ``crs`` upper-cased and stripped (``"epsg:3857"`` -> ``"EPSG:3857"``)."""
    return crs.strip().upper()
