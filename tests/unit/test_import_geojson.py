"""Unit tests for the GeoJSON import pipeline.

Covers parsing, CRS handling, polygon filtering, MultiPolygon
decomposition, per-feature skipping and the import error kinds.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from polygon_measure.core.config import MeasureConfig
from polygon_measure.import_geojson import (
    DocumentImportError,
    ImportErrorKind,
    MalformedGeometryError,
    MalformedJSONError,
    NoPolygonsFoundError,
    ReprojectionFailedError,
    coords_to_tuples,
    import_document,
    load_document,
    parse_document,
    polygon_ring_sets,
)
from polygon_measure.measure import compute_area, measure_polygon
from polygon_measure.models.crs import CRSDetectionMethod

SQUARE = [[71.44, 51.16], [71.45, 51.16], [71.45, 51.17], [71.44, 51.17], [71.44, 51.16]]
HOLE = [[71.442, 51.162], [71.444, 51.162], [71.444, 51.164], [71.442, 51.164], [71.442, 51.162]]

# 71.44 degrees east in EPSG:3857 metres
SQUARE_X0_MERCATOR = 7_952_664.43


def _feature(geometry: dict | None, **properties: object) -> dict:
    return {"type": "Feature", "geometry": geometry, "properties": properties}


def _collection(*features: dict, crs: str | None = None) -> str:
    doc: dict = {"type": "FeatureCollection", "features": list(features)}
    if crs is not None:
        doc["crs"] = {"type": "name", "properties": {"name": crs}}
    return json.dumps(doc)


def _polygon(*rings: list) -> dict:
    return {"type": "Polygon", "coordinates": list(rings)}


# ===========================================================================
# Parsing
# ===========================================================================


class TestParseDocument:
    def test_object_root(self) -> None:
        assert parse_document('{"type": "FeatureCollection"}') == {"type": "FeatureCollection"}

    def test_bytes_input(self) -> None:
        assert parse_document(b'{"type": "Feature"}') == {"type": "Feature"}

    def test_truncated_json(self) -> None:
        with pytest.raises(MalformedJSONError, match="Not valid JSON"):
            parse_document('{"type": "FeatureCollection", "features": [')

    @pytest.mark.parametrize("raw", ["[]", "42", '"text"', "null"])
    def test_non_object_root(self, raw: str) -> None:
        with pytest.raises(MalformedJSONError, match="root must be an object"):
            parse_document(raw)


# ===========================================================================
# Normalization
# ===========================================================================


class TestCoordsToTuples:
    def test_drops_altitude(self) -> None:
        assert coords_to_tuples([[1, 2, 99], [3.5, 4.5, 0]]) == [(1.0, 2.0), (3.5, 4.5)]

    @pytest.mark.parametrize(
        "raw",
        [None, "1,2", [[1]], [["a", 2]], [[True, 2]], [5]],
        ids=["none", "string", "short", "text", "bool", "scalar"],
    )
    def test_malformed(self, raw: object) -> None:
        with pytest.raises(MalformedGeometryError):
            coords_to_tuples(raw)


class TestPolygonRingSets:
    def test_polygon_with_hole(self) -> None:
        ring_sets = polygon_ring_sets(_polygon(SQUARE, HOLE))
        assert len(ring_sets) == 1
        assert len(ring_sets[0]) == 2

    def test_multipolygon_members(self) -> None:
        geometry = {"type": "MultiPolygon", "coordinates": [[SQUARE], [SQUARE, HOLE]]}
        ring_sets = polygon_ring_sets(geometry)
        assert [len(rs) for rs in ring_sets] == [1, 2]

    def test_other_geometry_types_yield_nothing(self) -> None:
        assert polygon_ring_sets({"type": "LineString", "coordinates": SQUARE}) == []

    @pytest.mark.parametrize(
        "geometry",
        [
            {"type": "Polygon", "coordinates": None},
            {"type": "Polygon", "coordinates": "x"},
            {"type": "MultiPolygon", "coordinates": [[]]},
            {"type": "MultiPolygon", "coordinates": ["x"]},
        ],
        ids=["null", "string", "empty-member", "bad-member"],
    )
    def test_malformed_nesting(self, geometry: dict) -> None:
        with pytest.raises(MalformedGeometryError):
            polygon_ring_sets(geometry)


# ===========================================================================
# Pipeline
# ===========================================================================


class TestLoadDocument:
    def test_geographic_polygon_reprojected_to_map_frame(self, config: MeasureConfig) -> None:
        result = load_document(_collection(_feature(_polygon(SQUARE))), config=config)
        assert len(result.polygons) == 1
        polygon = result.polygons[0]
        assert polygon.crs == "EPSG:3857"
        assert polygon.exterior_coords[0][0] == pytest.approx(SQUARE_X0_MERCATOR, rel=1e-6)
        assert result.crs_guess is not None
        assert result.crs_guess.crs == "EPSG:4326"

    def test_area_survives_reprojection(self, config: MeasureConfig) -> None:
        polygon = import_document(_collection(_feature(_polygon(SQUARE))), config=config)[0]
        original = compute_area([tuple(c) for c in SQUARE], "EPSG:4326")
        assert compute_area(polygon.exterior_coords, polygon.crs) == pytest.approx(
            original, rel=1e-6
        )

    def test_declared_map_crs_is_not_reprojected(self, config: MeasureConfig) -> None:
        ring = [[0.0, 0.0], [1000.0, 0.0], [1000.0, 1000.0], [0.0, 1000.0], [0.0, 0.0]]
        result = load_document(
            _collection(_feature(_polygon(ring)), crs="EPSG:3857"), config=config
        )
        assert result.polygons[0].exterior_coords == [tuple(c) for c in ring]
        assert result.crs_guess.method is CRSDetectionMethod.HINT

    def test_declared_projected_name_reprojected(self, config: MeasureConfig) -> None:
        ring = [
            [500000.0, 5800000.0],
            [501000.0, 5800000.0],
            [501000.0, 5801000.0],
            [500000.0, 5801000.0],
            [500000.0, 5800000.0],
        ]
        result = load_document(
            _collection(_feature(_polygon(ring)), crs="WGS 84 / UTM zone 33N"), config=config
        )
        assert result.crs_guess.crs == "EPSG:32633"
        polygon = result.polygons[0]
        assert polygon.crs == "EPSG:3857"
        assert compute_area(polygon.exterior_coords, polygon.crs) == pytest.approx(
            1_000_000.0, rel=0.01
        )

    def test_custom_map_projection(self) -> None:
        config = MeasureConfig(map_projection="EPSG:4326")
        polygon = import_document(_collection(_feature(_polygon(SQUARE))), config=config)[0]
        assert polygon.crs == "EPSG:4326"
        assert polygon.exterior_coords == [tuple(c) for c in SQUARE]

    def test_holes_carried_through(self, config: MeasureConfig) -> None:
        polygon = import_document(_collection(_feature(_polygon(SQUARE, HOLE))), config=config)[0]
        assert polygon.has_holes
        assert len(polygon.interior_coords[0]) == len(HOLE)

    def test_properties_and_provenance(self, config: MeasureConfig) -> None:
        polygon = load_document(
            _collection(_feature(_polygon(SQUARE), name="North Field", crop="wheat")),
            config=config,
            source_filename="fields.geojson",
        ).polygons[0]
        assert polygon.properties == {"name": "North Field", "crop": "wheat"}
        assert polygon.name == "North Field"
        assert polygon.source_file == "fields.geojson"
        assert polygon.feature_index == 0
        assert polygon.part_index is None

    def test_multipolygon_decomposed_with_copied_properties(self, config: MeasureConfig) -> None:
        geometry = {"type": "MultiPolygon", "coordinates": [[SQUARE], [SQUARE], [SQUARE]]}
        polygons = import_document(
            _collection(_feature(geometry, name="Blocks", rows=3)), config=config
        )
        assert len(polygons) == 3
        assert [p.part_index for p in polygons] == [0, 1, 2]
        assert all(p.properties == {"name": "Blocks", "rows": 3} for p in polygons)
        polygons[0].properties["rows"] = 99
        assert polygons[1].properties["rows"] == 3

    def test_non_polygon_features_ignored(self, config: MeasureConfig) -> None:
        result = load_document(
            _collection(
                _feature({"type": "Point", "coordinates": [71.44, 51.16]}),
                _feature({"type": "LineString", "coordinates": SQUARE}),
                _feature(None),
                _feature(_polygon(SQUARE), name="kept"),
            ),
            config=config,
        )
        assert [p.name for p in result.polygons] == ["kept"]
        assert result.polygons[0].feature_index == 3
        assert result.skipped_features == 0

    def test_feature_order_preserved(self, config: MeasureConfig) -> None:
        multi = {"type": "MultiPolygon", "coordinates": [[SQUARE], [SQUARE]]}
        polygons = import_document(
            _collection(
                _feature(_polygon(SQUARE), name="a"),
                _feature(multi, name="b"),
                _feature(_polygon(SQUARE), name="c"),
            ),
            config=config,
        )
        assert [(p.name, p.part_index) for p in polygons] == [
            ("a", None),
            ("b", 0),
            ("b", 1),
            ("c", None),
        ]

    def test_malformed_feature_skipped(
        self, config: MeasureConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        bad = {"type": "Polygon", "coordinates": [[["x", "y"], [1, 2], [3, 4]]]}
        with caplog.at_level(logging.WARNING, logger="polygon_measure.import_geojson"):
            result = load_document(
                _collection(_feature(bad), _feature(_polygon(SQUARE), name="good")),
                config=config,
            )
        assert [p.name for p in result.polygons] == ["good"]
        assert result.skipped_features == 1
        assert "Skipping malformed feature" in caplog.text

    def test_degenerate_ring_imported_with_zero_area(
        self, config: MeasureConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        sliver = [[10.0, 10.0], [11.0, 10.0], [10.0, 10.0]]
        with caplog.at_level(logging.WARNING, logger="polygon_measure.import_geojson"):
            result = load_document(
                _collection(_feature(_polygon(sliver), name="sliver")), config=config
            )
        assert [p.name for p in result.polygons] == ["sliver"]
        assert result.skipped_features == 0
        assert measure_polygon(result.polygons[0]).area_m2 == 0.0
        assert "Degenerate ring imported" in caplog.text

    def test_degenerate_ring_kept_beside_valid_polygon(self, config: MeasureConfig) -> None:
        sliver = [[71.44, 51.16], [71.45, 51.16], [71.44, 51.16]]
        result = load_document(
            _collection(_feature(_polygon(sliver)), _feature(_polygon(SQUARE))), config=config
        )
        assert len(result.polygons) == 2
        assert [p.feature_index for p in result.polygons] == [0, 1]

    def test_self_intersecting_polygon_imported_with_warning(
        self, config: MeasureConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        bowtie = [[71.44, 51.16], [71.45, 51.17], [71.45, 51.16], [71.44, 51.17], [71.44, 51.16]]
        with caplog.at_level(logging.WARNING, logger="polygon_measure.import_geojson"):
            polygons = import_document(_collection(_feature(_polygon(bowtie))), config=config)
        assert len(polygons) == 1
        assert "Invalid polygon geometry" in caplog.text

    def test_single_feature_document(self, config: MeasureConfig) -> None:
        raw = json.dumps(_feature(_polygon(SQUARE), name="solo"))
        assert [p.name for p in import_document(raw, config=config)] == ["solo"]

    def test_bare_geometry_document(self, config: MeasureConfig) -> None:
        polygons = import_document(json.dumps(_polygon(SQUARE)), config=config)
        assert len(polygons) == 1
        assert polygons[0].name == "Feature 0"

    def test_default_config(self) -> None:
        polygons = import_document(_collection(_feature(_polygon(SQUARE))))
        assert polygons[0].crs == "EPSG:3857"


class TestLoadDocumentErrors:
    def test_malformed_json(self) -> None:
        with pytest.raises(MalformedJSONError) as exc_info:
            load_document('{"type": ')
        err = exc_info.value
        assert err.kind is ImportErrorKind.MALFORMED_JSON
        assert err.category == "validation"
        assert err.user_message == "The file is not valid GeoJSON"

    def test_no_polygons(self) -> None:
        raw = _collection(_feature({"type": "Point", "coordinates": [71.44, 51.16]}))
        with pytest.raises(NoPolygonsFoundError) as exc_info:
            load_document(raw, source_filename="wells.geojson")
        assert exc_info.value.kind is ImportErrorKind.NO_POLYGONS_FOUND
        assert "wells.geojson" in exc_info.value.message

    def test_empty_collection(self) -> None:
        with pytest.raises(NoPolygonsFoundError):
            load_document(_collection())

    def test_only_malformed_features(self) -> None:
        bad = {"type": "Polygon", "coordinates": "nope"}
        with pytest.raises(NoPolygonsFoundError):
            load_document(_collection(_feature(bad)))

    def test_unknown_declared_crs(self) -> None:
        raw = _collection(_feature(_polygon(SQUARE)), crs="EPSG:999999")
        with pytest.raises(ReprojectionFailedError) as exc_info:
            load_document(raw)
        err = exc_info.value
        assert err.kind is ImportErrorKind.REPROJECTION_FAILED
        assert err.category == "permanent"
        assert "EPSG:999999" in err.message

    def test_unknown_crs_fails_before_polygon_filtering(self) -> None:
        raw = _collection(
            _feature({"type": "Point", "coordinates": [1.0, 2.0]}), crs="EPSG:999999"
        )
        with pytest.raises(ReprojectionFailedError):
            load_document(raw)

    def test_all_import_errors_share_base(self) -> None:
        with pytest.raises(DocumentImportError):
            load_document("not json")


class TestLoadDocumentFiles:
    """End-to-end runs over the shared sample documents."""

    def test_geographic_field(self, geographic_geojson: Path, config: MeasureConfig) -> None:
        text = geographic_geojson.read_text(encoding="utf-8")
        polygons = import_document(text, config=config)
        assert len(polygons) == 1
        area = compute_area(polygons[0].exterior_coords, polygons[0].crs)
        assert area == pytest.approx(778_000, rel=0.01)

    def test_named_crs(self, named_crs_geojson: Path, config: MeasureConfig) -> None:
        result = load_document(named_crs_geojson.read_text(encoding="utf-8"), config=config)
        assert result.crs_guess.method is CRSDetectionMethod.HINT
        assert result.polygons[0].exterior_coords[0] == (7953000.0, 6649000.0)

    def test_multipolygon(self, multipolygon_geojson: Path, config: MeasureConfig) -> None:
        polygons = import_document(multipolygon_geojson.read_text(encoding="utf-8"), config=config)
        assert len(polygons) == 3
        assert all(p.properties["owner"] == "Farm Co" for p in polygons)

    def test_undeclared_mercator(
        self, mercator_no_crs_geojson: Path, config: MeasureConfig
    ) -> None:
        result = load_document(mercator_no_crs_geojson.read_text(encoding="utf-8"), config=config)
        assert result.crs_guess.crs == "EPSG:3857"
        assert result.crs_guess.method is CRSDetectionMethod.HEURISTIC
        area = compute_area(result.polygons[0].exterior_coords, result.polygons[0].crs)
        assert area == pytest.approx(120_000, rel=0.02)

    def test_point_only(self, point_only_geojson: Path) -> None:
        with pytest.raises(NoPolygonsFoundError):
            load_document(point_only_geojson.read_text(encoding="utf-8"))

    def test_malformed(self, malformed_geojson: Path) -> None:
        with pytest.raises(MalformedJSONError):
            load_document(malformed_geojson.read_text(encoding="utf-8"))
