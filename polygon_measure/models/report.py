"""Pydantic report model for imported and measured polygons.

The report is the JSON audit record of a session: which CRS the
document was read in, and for each polygon its attributes, geodesic
measurements and rendered labels.

Units are explicit in field names: square metres and metres.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from polygon_measure.models.crs import CRSGuess
    from polygon_measure.session import MeasuredPolygon, MeasurementSession

SCHEMA_VERSION = "polygon-measure-report-v1"


class CRSReport(BaseModel):
    """How the document's CRS was determined."""

    crs: str = ""
    method: str = ""
    geographic_fraction: float = 0.0
    mercator_fraction: float = 0.0
    sample_count: int = 0
    detail: str = ""
    fallback: bool = False


class PolygonReport(BaseModel):
    """Measurement of one polygon.

    Attributes:
        polygon_id: Session-scoped polygon id.
        name: Display name (``name`` property or positional fallback).
        crs: CRS of ``coordinates``.
        coordinates: Outer ring in open form, ``[[x, y], ...]``.
        properties: Non-geometry attributes of the source feature.
        area_m2: Ellipsoidal area in square metres.
        perimeter_m: Sum of edge lengths in metres.
        edge_lengths_m: Geodesic edge lengths in ring order.
        area_label: Rendered area text.
        edge_labels: Rendered edge length texts.
    """

    polygon_id: int
    name: str = ""
    crs: str = ""
    coordinates: list[list[float]] = Field(default_factory=list)
    properties: dict[str, Any] = Field(default_factory=dict)
    area_m2: float = 0.0
    perimeter_m: float = 0.0
    edge_lengths_m: list[float] = Field(default_factory=list)
    area_label: str = ""
    edge_labels: list[str] = Field(default_factory=list)

    @classmethod
    def from_measured(cls, entry: MeasuredPolygon) -> PolygonReport:
        polygon = entry.polygon
        return cls(
            polygon_id=entry.polygon_id,
            name=polygon.name,
            crs=polygon.crs,
            coordinates=[list(c) for c in polygon.ring],
            properties=dict(polygon.properties),
            area_m2=entry.result.area_m2,
            perimeter_m=entry.result.perimeter_m,
            edge_lengths_m=list(entry.result.edge_lengths_m),
            area_label=entry.labels.area.text,
            edge_labels=[label.text for label in entry.labels.edges],
        )


class ImportReport(BaseModel):
    """Top-level report for one imported file."""

    schema_version: str = Field(default=SCHEMA_VERSION, alias="$schema")
    source_file: str = ""
    generated_at: str = ""
    area_unit: str = "auto"
    length_unit: str = "auto"
    crs: CRSReport = Field(default_factory=CRSReport)
    polygons: list[PolygonReport] = Field(default_factory=list)
    total_area_m2: float = 0.0

    model_config = {"populate_by_name": True}

    @classmethod
    def from_session(
        cls,
        session: MeasurementSession,
        *,
        crs_guess: CRSGuess | None = None,
        source_file: str = "",
        generated_at: str = "",
    ) -> ImportReport:
        """Build a report from every polygon in a session."""
        polygons = [PolygonReport.from_measured(entry) for entry in session.polygons]
        crs = CRSReport()
        if crs_guess is not None:
            crs = CRSReport(**crs_guess.to_dict(), fallback=crs_guess.is_fallback)
        return cls(
            source_file=source_file,
            generated_at=generated_at or datetime.now(UTC).isoformat(),
            area_unit=str(session.area_unit),
            length_unit=str(session.length_unit),
            crs=crs,
            polygons=polygons,
            total_area_m2=sum(p.area_m2 for p in polygons),
        )

    def to_json(self, *, indent: int = 2) -> str:
        """Serialise to JSON using the ``$schema`` alias."""
        return self.model_dump_json(indent=indent, by_alias=True)
