"""Data models for measurement output.

A MeasurementResult is computed from a polygon snapshot and is never
cached across mutation of the polygon's vertices. Labels carry the text
and map-frame anchor that the map engine needs to place an overlay.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class MeasurementResult:
    """Geodesic measurement of a polygon's outer ring.

    Attributes:
        area_m2: Ellipsoidal area in square metres (always >= 0).
        edge_lengths_m: Geodesic length of each edge in metres, in ring order.
    """

    area_m2: float = 0.0
    edge_lengths_m: tuple[float, ...] = ()

    @property
    def edge_count(self) -> int:
        return len(self.edge_lengths_m)

    @property
    def perimeter_m(self) -> float:
        return sum(self.edge_lengths_m)

    def to_dict(self) -> dict[str, object]:
        return {
            "area_m2": self.area_m2,
            "edge_lengths_m": list(self.edge_lengths_m),
        }


@dataclass(frozen=True, slots=True)
class Label:
    """Text placed at a map coordinate."""

    text: str
    position: tuple[float, float]


@dataclass(frozen=True, slots=True)
class PolygonLabels:
    """The area label and one length label per edge, in ring order."""

    area: Label
    edges: tuple[Label, ...] = field(default_factory=tuple)
