"""Data model for a detected coordinate reference system.

A CRSGuess is produced once per imported document and applies to every
feature within it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class CRSDetectionMethod(enum.StrEnum):
    """How a CRSGuess was reached."""

    HINT = "hint"
    HEURISTIC = "heuristic"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class CRSGuess:
    """The coordinate reference system inferred for a GeoJSON document.

    Attributes:
        crs: EPSG identifier, e.g. ``"EPSG:4326"`` or ``"EPSG:3857"``.
        method: Which detection step produced the result.
        geographic_fraction: Share of sampled pairs within lon/lat bounds.
        mercator_fraction: Weighted Mercator score per sampled pair (may exceed 1).
        sample_count: Number of coordinate pairs the heuristic inspected.
        detail: Short human-readable explanation, for logs.
    """

    crs: str
    method: CRSDetectionMethod
    geographic_fraction: float = 0.0
    mercator_fraction: float = 0.0
    sample_count: int = 0
    detail: str = ""

    @property
    def is_fallback(self) -> bool:
        """True for the low-confidence WGS 84 default."""
        return self.method is CRSDetectionMethod.FALLBACK

    def to_dict(self) -> dict[str, object]:
        return {
            "crs": self.crs,
            "method": self.method.value,
            "geographic_fraction": self.geographic_fraction,
            "mercator_fraction": self.mercator_fraction,
            "sample_count": self.sample_count,
            "detail": self.detail,
        }
