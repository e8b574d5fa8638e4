"""Overlay label text and anchors for a measured polygon.

Anchors are expressed in the polygon's own CRS (the map frame), so the
map engine can place them without further transformation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from polygon_measure.measure._formatting import AreaUnit, LengthUnit, format_area, format_length
from polygon_measure.models.measurement import Label, PolygonLabels

if TYPE_CHECKING:
    from polygon_measure.models.measurement import MeasurementResult
    from polygon_measure.models.polygon import MapPolygon

AREA_LABEL_PREFIX = "Area: "


def build_labels(
    polygon: MapPolygon,
    result: MeasurementResult,
    *,
    area_unit: str | AreaUnit = AreaUnit.AUTO,
    length_unit: str | LengthUnit = LengthUnit.AUTO,
) -> PolygonLabels:
    """Build the area label and one edge label per measured edge.

    Args:
        polygon: The measured polygon.
        result: Its measurement, computed from the same vertices.
        area_unit: Area unit selector.
        length_unit: Length unit selector.
    """
    ring = polygon.ring
    area = Label(
        text=f"{AREA_LABEL_PREFIX}{format_area(result.area_m2, area_unit)}",
        position=interior_point(ring),
    )

    edges: list[Label] = []
    count = len(ring)
    for i, length in enumerate(result.edge_lengths_m[:count]):
        start = ring[i]
        end = ring[(i + 1) % count]
        edges.append(Label(text=format_length(length, length_unit), position=midpoint(start, end)))

    return PolygonLabels(area=area, edges=tuple(edges))


def midpoint(start: tuple[float, float], end: tuple[float, float]) -> tuple[float, float]:
    """Arithmetic midpoint of an edge in the map frame."""
    return ((start[0] + end[0]) / 2, (start[1] + end[1]) / 2)


def interior_point(ring: list[tuple[float, float]]) -> tuple[float, float]:
    """Return a point guaranteed to lie inside the ring.

    Degenerate rings (fewer than three vertices, or zero area) fall back
    to the vertex mean so a label can always be placed.
    """
    if not ring:
        return (0.0, 0.0)
    if len(ring) >= 3:
        from shapely.geometry import Polygon

        poly = Polygon(ring)
        if not poly.is_empty and poly.area > 0:
            point = poly.representative_point()
            return (point.x, point.y)
    xs = [c[0] for c in ring]
    ys = [c[1] for c in ring]
    return (sum(xs) / len(xs), sum(ys) / len(ys))
