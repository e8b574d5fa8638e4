"""Coordinate and geometry normalization for GeoJSON import.

Responsibilities:
- Convert raw coordinate arrays to clean ``(x, y)`` tuples
- Split Polygon / MultiPolygon geometries into per-polygon ring sets
"""

from __future__ import annotations

from typing import Any

from polygon_measure.import_geojson._validation import MalformedGeometryError
from polygon_measure.utils.geojson import is_number

POLYGON_TYPES = frozenset({"Polygon", "MultiPolygon"})

RingSet = list[list[tuple[float, float]]]


def coords_to_tuples(raw_coords: object) -> list[tuple[float, float]]:
    """Convert a GeoJSON position array to ``(x, y)`` tuples.

    Drops altitude (third element) if present.

    Raises:
        MalformedGeometryError: If the array or any position is malformed.
    """
    if not isinstance(raw_coords, list | tuple):
        msg = f"Malformed ring: expected a list of positions, got {type(raw_coords).__name__}"
        raise MalformedGeometryError(msg)
    coords: list[tuple[float, float]] = []
    for idx, c in enumerate(raw_coords):
        if not isinstance(c, list | tuple):
            msg = f"Malformed position at index {idx}: expected list, got {type(c).__name__}"
            raise MalformedGeometryError(msg)
        if len(c) < 2:
            msg = f"Malformed position at index {idx}: expected at least 2 elements, got {len(c)}"
            raise MalformedGeometryError(msg)
        if not (is_number(c[0]) and is_number(c[1])):
            msg = f"Malformed position at index {idx}: non-numeric value (x={c[0]!r}, y={c[1]!r})"
            raise MalformedGeometryError(msg)
        coords.append((float(c[0]), float(c[1])))
    return coords


def polygon_ring_sets(geometry: dict[str, Any]) -> list[RingSet]:
    """Return one ring set ``[exterior, *holes]`` per polygon in the geometry.

    A Polygon yields one ring set; a MultiPolygon yields one per member.
    Other geometry types yield an empty list.

    Raises:
        MalformedGeometryError: If the coordinate nesting is malformed.
    """
    geom_type = geometry.get("type")
    coords = geometry.get("coordinates")
    if geom_type not in POLYGON_TYPES:
        return []
    if not isinstance(coords, list):
        msg = f"{geom_type} coordinates must be a list, got {type(coords).__name__}"
        raise MalformedGeometryError(msg)

    polygons = [coords] if geom_type == "Polygon" else coords
    ring_sets: list[RingSet] = []
    for polygon in polygons:
        if not isinstance(polygon, list) or not polygon:
            msg = f"{geom_type} member must be a non-empty list of rings"
            raise MalformedGeometryError(msg)
        ring_sets.append([coords_to_tuples(ring) for ring in polygon])
    return ring_sets
