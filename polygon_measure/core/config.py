"""Measurement configuration loaded from environment variables.

All configuration values have sensible defaults: a Web Mercator working
map, WGS 84 geodesy and automatic unit selection.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range, so bad configuration is caught at startup
    rather than on the first import.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from polygon_measure.core.constants import (
    AREA_UNITS,
    DEFAULT_ELLIPSOID,
    DEFAULT_MAP_PROJECTION,
    GEOGRAPHIC_CRS,
    LENGTH_UNITS,
    normalize_epsg,
)
from polygon_measure.core.exceptions import ValidationError


class ConfigValidationError(ValidationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class MeasureConfig:
    """Immutable measurement configuration.

    Loaded once and handed to the session and the import pipeline.

    Attributes:
        map_projection: Working map frame imported polygons are reprojected into.
        geographic_crs: Geographic frame used for geodesic computations.
        ellipsoid: Reference ellipsoid name for ``pyproj.Geod``.
        area_unit: Initial area unit selector (``auto``, ``m2``, ``ha``, ``km2``).
        length_unit: Initial length unit selector (``auto``, ``m``, ``km``).
        crs_sample_max_features: Features inspected by the CRS heuristic.
        crs_sample_max_coords: Coordinate pairs sampled by the CRS heuristic.
    """

    map_projection: str = DEFAULT_MAP_PROJECTION
    geographic_crs: str = GEOGRAPHIC_CRS
    ellipsoid: str = DEFAULT_ELLIPSOID
    area_unit: str = "auto"
    length_unit: str = "auto"
    crs_sample_max_features: int = 10
    crs_sample_max_coords: int = 50

    @classmethod
    def from_env(cls) -> MeasureConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``CRS_SAMPLE_MAX_COORDS=abc``).
        """
        config = cls(
            map_projection=normalize_epsg(os.getenv("MAP_PROJECTION", DEFAULT_MAP_PROJECTION)),
            geographic_crs=normalize_epsg(os.getenv("GEOGRAPHIC_CRS", GEOGRAPHIC_CRS)),
            ellipsoid=os.getenv("ELLIPSOID", DEFAULT_ELLIPSOID).strip(),
            area_unit=os.getenv("AREA_UNIT", "auto").strip().lower(),
            length_unit=os.getenv("LENGTH_UNIT", "auto").strip().lower(),
            crs_sample_max_features=int(os.getenv("CRS_SAMPLE_MAX_FEATURES", "10")),
            crs_sample_max_coords=int(os.getenv("CRS_SAMPLE_MAX_COORDS", "50")),
        )
        _validate(config)
        return config


def _validate(config: MeasureConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not config.map_projection:
        raise ConfigValidationError("MAP_PROJECTION", config.map_projection, "must not be empty")

    if not config.geographic_crs:
        raise ConfigValidationError("GEOGRAPHIC_CRS", config.geographic_crs, "must not be empty")

    if not config.ellipsoid:
        raise ConfigValidationError("ELLIPSOID", config.ellipsoid, "must not be empty")

    if config.area_unit not in AREA_UNITS:
        raise ConfigValidationError(
            "AREA_UNIT",
            config.area_unit,
            f"must be one of {', '.join(AREA_UNITS)}",
        )

    if config.length_unit not in LENGTH_UNITS:
        raise ConfigValidationError(
            "LENGTH_UNIT",
            config.length_unit,
            f"must be one of {', '.join(LENGTH_UNITS)}",
        )

    if config.crs_sample_max_features < 1:
        raise ConfigValidationError(
            "CRS_SAMPLE_MAX_FEATURES",
            config.crs_sample_max_features,
            "must be >= 1",
        )

    if config.crs_sample_max_coords < 1:
        raise ConfigValidationError(
            "CRS_SAMPLE_MAX_COORDS",
            config.crs_sample_max_coords,
            "must be >= 1",
        )
