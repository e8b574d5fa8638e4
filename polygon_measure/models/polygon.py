"""Data model for a polygon on the map.

A MapPolygon is a single polygon, either drawn by the user or extracted
from an imported GeoJSON document, together with the feature's
non-geometry attributes. It is the output of the import pipeline and the
input to geodesic measurement.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from polygon_measure.core.constants import DEFAULT_MAP_PROJECTION


@dataclass(frozen=True, slots=True)
class MapPolygon:
    """A single polygon with its attributes.

    Attributes:
        exterior_coords: Outer ring as list of ``(x, y)`` tuples in ``crs``.
            May be stored closed (first == last) or open.
        interior_coords: Hole rings. Carried through import, not measured.
        crs: Coordinate reference system of all rings (e.g. ``"EPSG:3857"``).
        properties: Non-geometry attributes of the source feature.
        source_file: Name of the imported file (empty for drawn polygons).
        feature_index: Zero-based index of the source feature in the document.
        part_index: Index within a decomposed MultiPolygon, ``None`` otherwise.
    """

    exterior_coords: list[tuple[float, float]] = field(default_factory=list)
    interior_coords: list[list[tuple[float, float]]] = field(default_factory=list)
    crs: str = DEFAULT_MAP_PROJECTION
    properties: dict[str, object] = field(default_factory=dict)
    source_file: str = ""
    feature_index: int = 0
    part_index: int | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialise to a JSON-compatible dict."""
        return {
            "exterior_coords": [list(c) for c in self.exterior_coords],
            "interior_coords": [[list(c) for c in ring] for ring in self.interior_coords],
            "crs": self.crs,
            "properties": dict(self.properties),
            "source_file": self.source_file,
            "feature_index": self.feature_index,
            "part_index": self.part_index,
        }

    def with_exterior(self, exterior_coords: list[tuple[float, float]]) -> MapPolygon:
        """Return a copy with the outer ring replaced (edit commit)."""
        return replace(self, exterior_coords=list(exterior_coords))

    @property
    def ring(self) -> list[tuple[float, float]]:
        """Outer ring in open form (closing duplicate removed)."""
        return open_ring(self.exterior_coords)

    @property
    def vertex_count(self) -> int:
        """Number of unique vertices in the outer ring."""
        return len(self.ring)

    @property
    def has_holes(self) -> bool:
        """Whether this polygon has interior (hole) rings."""
        return len(self.interior_coords) > 0

    @property
    def name(self) -> str:
        """Display name from the ``name`` attribute, or a positional fallback."""
        name = self.properties.get("name") or self.properties.get("Name")
        if name:
            return str(name)
        if self.part_index is not None:
            return f"Feature {self.feature_index} (part {self.part_index})"
        return f"Feature {self.feature_index}"


def open_ring(coords: list[tuple[float, float]]) -> list[tuple[float, float]]:
    """Return ``coords`` in open form: N unique vertices, edges wrap by modulo N.

    A single trailing vertex equal to the first is dropped; every other
    ring is returned unchanged.
    """
    ring = [(float(x), float(y)) for x, y in coords]
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring = ring[:-1]
    return ring
