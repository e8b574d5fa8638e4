"""GeoJSON traversal helpers shared by CRS detection and import.

GeoJSON documents arrive in three shapes: a FeatureCollection, a single
Feature, or a bare geometry object. ``iter_features`` presents all
three as a sequence of feature dicts.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

GEOMETRY_TYPES = frozenset(
    {
        "Point",
        "MultiPoint",
        "LineString",
        "MultiLineString",
        "Polygon",
        "MultiPolygon",
        "GeometryCollection",
    }
)


def iter_features(document: object) -> Iterator[dict[str, Any]]:
    """Yield feature dicts from a GeoJSON document of any top-level shape.

    Non-dict entries of a FeatureCollection are skipped. Unknown
    top-level types yield nothing.
    """
    if not isinstance(document, dict):
        return
    doc_type = document.get("type")
    if doc_type == "FeatureCollection":
        features = document.get("features")
        if isinstance(features, list):
            for feature in features:
                if isinstance(feature, dict):
                    yield feature
    elif doc_type == "Feature":
        yield document
    elif doc_type in GEOMETRY_TYPES:
        yield {"type": "Feature", "geometry": document, "properties": {}}


def feature_geometry(feature: dict[str, Any]) -> dict[str, Any] | None:
    """Return the feature's geometry dict, or ``None`` for null geometry."""
    geometry = feature.get("geometry")
    return geometry if isinstance(geometry, dict) else None


def feature_properties(feature: dict[str, Any]) -> dict[str, object]:
    """Return a shallow copy of the feature's non-geometry attributes."""
    properties = feature.get("properties")
    if not isinstance(properties, dict):
        return {}
    return {str(k): v for k, v in properties.items()}


def is_number(value: object) -> bool:
    """True for int/float values, excluding ``bool``."""
    return isinstance(value, int | float) and not isinstance(value, bool)


def iter_positions(geometry: dict[str, Any]) -> Iterator[tuple[float, float]]:
    """Yield ``(x, y)`` pairs of a geometry for CRS sampling.

    Covers Point, MultiPoint, LineString, MultiLineString, the outer
    ring of a Polygon, every ring of every MultiPolygon member, and the
    members of a GeometryCollection. Malformed positions are skipped.
    """
    geom_type = geometry.get("type")
    coords = geometry.get("coordinates")

    if geom_type == "GeometryCollection":
        for member in geometry.get("geometries") or []:
            if isinstance(member, dict):
                yield from iter_positions(member)
        return

    if geom_type == "Point":
        rings: list[object] = [[coords]]
    elif geom_type in ("MultiPoint", "LineString"):
        rings = [coords]
    elif geom_type == "MultiLineString":
        rings = list(coords) if isinstance(coords, list) else []
    elif geom_type == "Polygon":
        rings = [coords[0]] if isinstance(coords, list) and coords else []
    elif geom_type == "MultiPolygon":
        rings = []
        for polygon in coords if isinstance(coords, list) else []:
            if isinstance(polygon, list):
                rings.extend(polygon)
    else:
        return

    for ring in rings:
        if not isinstance(ring, list):
            continue
        for position in ring:
            if (
                isinstance(position, list | tuple)
                and len(position) >= 2
                and is_number(position[0])
                and is_number(position[1])
            ):
                yield (float(position[0]), float(position[1]))
