"""Tests for the Pydantic import report.

Covers:
- Report construction from a measured session
- JSON serialisation with the ``$schema`` alias
- Validation of round-tripped payloads
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from polygon_measure.import_geojson import import_file
from polygon_measure.models.crs import CRSDetectionMethod, CRSGuess
from polygon_measure.models.report import SCHEMA_VERSION, ImportReport, PolygonReport
from polygon_measure.session import MeasurementSession


@pytest.fixture()
def measured(session: MeasurementSession, multipolygon_geojson: Path) -> ImportReport:
    result = import_file(multipolygon_geojson, config=session.config)
    for polygon in result.polygons:
        session.add_polygon(polygon)
    return ImportReport.from_session(
        session,
        crs_guess=result.crs_guess,
        source_file=result.source_file,
        generated_at="2026-01-01T00:00:00+00:00",
    )


class TestImportReportFromSession:
    def test_header(self, measured: ImportReport) -> None:
        assert measured.schema_version == SCHEMA_VERSION
        assert measured.source_file == "03_multipolygon_three_parts.geojson"
        assert measured.generated_at == "2026-01-01T00:00:00+00:00"
        assert measured.area_unit == "auto"
        assert measured.length_unit == "auto"

    def test_crs_section(self, measured: ImportReport) -> None:
        assert measured.crs.crs == "EPSG:4326"
        assert measured.crs.method == "heuristic"
        assert measured.crs.sample_count == 15
        assert measured.crs.fallback is False

    def test_polygons(self, measured: ImportReport) -> None:
        assert [p.polygon_id for p in measured.polygons] == [1, 2, 3]
        first = measured.polygons[0]
        assert first.name == "Orchard Blocks"
        assert first.crs == "EPSG:3857"
        assert first.properties == {"name": "Orchard Blocks", "owner": "Farm Co", "rows": 42}
        assert len(first.coordinates) == 4
        assert len(first.edge_lengths_m) == 4
        assert len(first.edge_labels) == 4
        assert first.perimeter_m == pytest.approx(sum(first.edge_lengths_m))
        assert first.area_label.startswith("Area: ")

    def test_total_area(self, measured: ImportReport) -> None:
        assert measured.total_area_m2 == pytest.approx(sum(p.area_m2 for p in measured.polygons))
        assert measured.total_area_m2 == pytest.approx(3 * 779_000, rel=0.01)

    def test_units_follow_session(self, session: MeasurementSession) -> None:
        session.set_units(area_unit="ha", length_unit="km")
        report = ImportReport.from_session(session)
        assert report.area_unit == "ha"
        assert report.length_unit == "km"
        assert report.polygons == []
        assert report.crs.crs == ""

    def test_generated_at_defaults_to_now(self, session: MeasurementSession) -> None:
        report = ImportReport.from_session(session)
        assert report.generated_at.endswith("+00:00")


class TestImportReportSerialisation:
    def test_schema_alias_in_json(self, measured: ImportReport) -> None:
        data = json.loads(measured.to_json())
        assert data["$schema"] == SCHEMA_VERSION
        assert "schema_version" not in data

    def test_round_trip(self, measured: ImportReport) -> None:
        restored = ImportReport.model_validate_json(measured.to_json())
        assert restored == measured

    def test_populate_by_field_name(self) -> None:
        report = ImportReport(schema_version="custom")
        assert report.schema_version == "custom"

    def test_compact_json(self, measured: ImportReport) -> None:
        assert "\n" not in measured.to_json(indent=None)  # type: ignore[arg-type]


class TestPolygonReportValidation:
    def test_polygon_id_required(self) -> None:
        with pytest.raises(PydanticValidationError):
            PolygonReport()  # type: ignore[call-arg]

    def test_area_must_be_numeric(self) -> None:
        with pytest.raises(PydanticValidationError):
            PolygonReport(polygon_id=1, area_m2="large")  # type: ignore[arg-type]


class TestCRSSection:
    def test_fallback_flagged(self, session: MeasurementSession) -> None:
        guess = CRSGuess(crs="EPSG:4326", method=CRSDetectionMethod.FALLBACK)
        report = ImportReport.from_session(session, crs_guess=guess)
        assert report.crs.method == "fallback"
        assert report.crs.fallback is True

    def test_no_guess(self, session: MeasurementSession) -> None:
        report = ImportReport.from_session(session)
        assert report.crs.crs == ""
        assert report.crs.fallback is False
        assert report.polygons == []
        assert report.total_area_m2 == 0.0
