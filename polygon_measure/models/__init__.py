"""Data models and schemas.

- MapPolygon: polygon rings in a CRS, with feature attributes
- MeasurementResult / Label / PolygonLabels: geodesic output and overlays
- CRSGuess: the CRS detected for an imported document
- ImportReport: JSON report of a measured session (pydantic)
"""

from polygon_measure.models.crs import CRSDetectionMethod, CRSGuess
from polygon_measure.models.measurement import Label, MeasurementResult, PolygonLabels
from polygon_measure.models.polygon import MapPolygon, open_ring

__all__ = [
    "CRSDetectionMethod",
    "CRSGuess",
    "Label",
    "MapPolygon",
    "MeasurementResult",
    "PolygonLabels",
    "open_ring",
]
