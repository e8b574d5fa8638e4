"""Geodesic area and edge lengths on the reference ellipsoid.

Vertices expressed in a projected map frame are first reprojected to
the geographic frame (WGS 84 by default) with ``pyproj.Transformer``;
area and distances are then solved on the ellipsoid with ``pyproj.Geod``.
Planar arithmetic on projected coordinates is never used for a
measurement.

Ring convention: every ring is reduced to its open form of N unique
vertices (see ``open_ring``), and edge ``i`` runs from vertex ``i`` to
vertex ``(i + 1) % N``. A ring stored closed with N vertices therefore
yields N - 1 edges.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from polygon_measure.core.constants import (
    DEFAULT_ELLIPSOID,
    DEFAULT_MAP_PROJECTION,
    GEOGRAPHIC_CRS,
)
from polygon_measure.core.exceptions import PermanentError
from polygon_measure.models.measurement import MeasurementResult
from polygon_measure.models.polygon import open_ring

if TYPE_CHECKING:
    from pyproj import Geod, Transformer

    from polygon_measure.models.polygon import MapPolygon

logger = logging.getLogger("polygon_measure.measure")

# Fewer distinct vertices than this enclose no area
MIN_DISTINCT_VERTICES = 3


class GeodesicError(PermanentError):
    """Raised when vertices cannot be brought into the geographic frame."""

    default_stage = "measure"
    default_code = "GEODESIC_REPROJECTION_FAILED"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compute_area(
    ring: list[tuple[float, float]],
    source_crs: str = DEFAULT_MAP_PROJECTION,
    *,
    ellps: str = DEFAULT_ELLIPSOID,
    geographic_crs: str = GEOGRAPHIC_CRS,
) -> float:
    """Compute the ellipsoidal area enclosed by a ring.

    The ring is treated as implicitly closed and the result is
    insensitive to winding direction and to the starting vertex.

    Args:
        ring: Outer ring as ``(x, y)`` tuples in ``source_crs``, open or closed.
        source_crs: CRS of the vertices. Geographic input is used as-is.
        ellps: Reference ellipsoid name.
        geographic_crs: Geographic frame projected vertices are brought into.

    Returns:
        Area in square metres, always >= 0. A ring with fewer than three
        distinct vertices returns ``0.0``.

    Raises:
        GeodesicError: If the vertices cannot be reprojected.
    """
    vertices = open_ring(ring)
    if len(set(vertices)) < MIN_DISTINCT_VERTICES:
        return 0.0

    lonlat = to_geographic(vertices, source_crs, geographic_crs)
    lons = [c[0] for c in lonlat]
    lats = [c[1] for c in lonlat]

    # polygon_area_perimeter returns (signed area m2, perimeter m)
    area_m2, _perimeter = _geod(ellps).polygon_area_perimeter(lons, lats)
    return abs(float(area_m2))


def compute_edge_length(
    point_a: tuple[float, float],
    point_b: tuple[float, float],
    source_crs: str = DEFAULT_MAP_PROJECTION,
    *,
    ellps: str = DEFAULT_ELLIPSOID,
    geographic_crs: str = GEOGRAPHIC_CRS,
) -> float:
    """Return the geodesic distance in metres between two points.

    Coincident points return ``0.0``.

    Raises:
        GeodesicError: If the points cannot be reprojected.
    """
    (lon1, lat1), (lon2, lat2) = to_geographic([point_a, point_b], source_crs, geographic_crs)
    return _inverse_distance(_geod(ellps), lon1, lat1, lon2, lat2)


def compute_edge_lengths(
    ring: list[tuple[float, float]],
    source_crs: str = DEFAULT_MAP_PROJECTION,
    *,
    ellps: str = DEFAULT_ELLIPSOID,
    geographic_crs: str = GEOGRAPHIC_CRS,
) -> list[float]:
    """Return one geodesic length per edge of a cyclic ring, in ring order.

    The ring is reprojected once; edge ``i`` joins vertex ``i`` and
    vertex ``(i + 1) % N`` of the open ring.

    Raises:
        GeodesicError: If the vertices cannot be reprojected.
    """
    vertices = open_ring(ring)
    if not vertices:
        return []

    lonlat = to_geographic(vertices, source_crs, geographic_crs)
    geod = _geod(ellps)
    count = len(lonlat)
    lengths: list[float] = []
    for i in range(count):
        lon1, lat1 = lonlat[i]
        lon2, lat2 = lonlat[(i + 1) % count]
        lengths.append(_inverse_distance(geod, lon1, lat1, lon2, lat2))
    return lengths


def measure_polygon(
    polygon: MapPolygon,
    *,
    ellps: str = DEFAULT_ELLIPSOID,
    geographic_crs: str = GEOGRAPHIC_CRS,
) -> MeasurementResult:
    """Measure the outer ring of a polygon in its own CRS.

    Holes are not subtracted. The result reflects the coordinates at
    call time and must be recomputed after any vertex change.
    """
    area_m2 = compute_area(
        polygon.exterior_coords, polygon.crs, ellps=ellps, geographic_crs=geographic_crs
    )
    lengths = compute_edge_lengths(
        polygon.exterior_coords, polygon.crs, ellps=ellps, geographic_crs=geographic_crs
    )

    logger.debug(
        "Polygon measured | polygon=%s | crs=%s | vertices=%d | area=%.2f m2 | perimeter=%.2f m",
        polygon.name,
        polygon.crs,
        len(lengths),
        area_m2,
        sum(lengths),
    )
    return MeasurementResult(area_m2=area_m2, edge_lengths_m=tuple(lengths))


def to_geographic(
    coords: list[tuple[float, float]],
    source_crs: str,
    geographic_crs: str = GEOGRAPHIC_CRS,
) -> list[tuple[float, float]]:
    """Reproject ``(x, y)`` coordinates to geographic ``(lon, lat)`` degrees.

    Coordinates already in a geographic CRS are returned unchanged;
    projected ones are transformed into ``geographic_crs``.

    Raises:
        GeodesicError: If ``source_crs`` is unknown or a point fails to
            transform.
    """
    from pyproj.exceptions import CRSError, ProjError

    try:
        if _is_geographic(source_crs):
            return [(float(x), float(y)) for x, y in coords]
        transformer = _transformer(source_crs, geographic_crs)
        return [transformer.transform(x, y, errcheck=True) for x, y in coords]
    except (CRSError, ProjError) as exc:
        msg = (
            f"Cannot reproject {len(coords)} vertex(es) from {source_crs} "
            f"to {geographic_crs}: {exc}"
        )
        raise GeodesicError(msg) from exc


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _inverse_distance(geod: Geod, lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    if (lon1, lat1) == (lon2, lat2):
        return 0.0
    # Geod.inv returns (forward azimuth, back azimuth, distance m)
    _az12, _az21, distance = geod.inv(lon1, lat1, lon2, lat2)
    return abs(float(distance))


@lru_cache(maxsize=8)
def _geod(ellps: str) -> Geod:
    from pyproj import Geod

    return Geod(ellps=ellps)


@lru_cache(maxsize=32)
def _transformer(source_crs: str, target_crs: str) -> Transformer:
    from pyproj import Transformer

    return Transformer.from_crs(source_crs, target_crs, always_xy=True)


@lru_cache(maxsize=32)
def _is_geographic(crs: str) -> bool:
    from pyproj import CRS

    return bool(CRS.from_user_input(crs).is_geographic)
