"""Geodesic measurement of polygons.

Converts polygons from the map frame to geographic coordinates and
computes their ellipsoidal area and per-edge geodesic lengths with
``pyproj.Geod`` (WGS 84 by default).

The package is split into focused modules:
- **_geodesic**: reprojection, area, edge lengths
- **_formatting**: unit selection and human-readable rendering
- **_labels**: overlay text and map-frame anchors
"""

from __future__ import annotations

from polygon_measure.measure._formatting import (
    AreaUnit,
    LengthUnit,
    format_area,
    format_length,
    parse_area_unit,
    parse_length_unit,
)
from polygon_measure.measure._geodesic import (
    MIN_DISTINCT_VERTICES,
    GeodesicError,
    compute_area,
    compute_edge_length,
    compute_edge_lengths,
    measure_polygon,
    to_geographic,
)
from polygon_measure.measure._labels import (
    AREA_LABEL_PREFIX,
    build_labels,
    interior_point,
    midpoint,
)

__all__ = [
    "AREA_LABEL_PREFIX",
    "MIN_DISTINCT_VERTICES",
    "AreaUnit",
    "GeodesicError",
    "LengthUnit",
    "build_labels",
    "compute_area",
    "compute_edge_length",
    "compute_edge_lengths",
    "format_area",
    "format_length",
    "interior_point",
    "measure_polygon",
    "midpoint",
    "parse_area_unit",
    "parse_length_unit",
    "to_geographic",
]
