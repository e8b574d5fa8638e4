"""GeoJSON import pipeline.

Turns raw GeoJSON text into polygons in the working map projection,
ready to be added to the map and measured.

The pipeline is split into focused stages:
- **_validation**: file extension, JSON parsing, ring checks, error kinds
- **_normalization**: raw positions → tuples, Polygon/MultiPolygon ring sets
- **_reprojection**: detected CRS → working map projection via pyproj
- **_file_input**: whole-file reads, sync and async

Pipeline:
1. Parse text (``MalformedJSONError`` on failure, nothing imported)
2. Detect the document CRS once (``polygon_measure.crs_detect``)
3. Reproject into the map projection (``ReprojectionFailedError``)
4. Keep Polygon / MultiPolygon only (``NoPolygonsFoundError`` if none)
5. Decompose each MultiPolygon into one polygon per member, each with a
   copy of the feature's properties

A feature with malformed coordinates is logged and skipped; one bad
feature does not fail the remaining ones. A ring with fewer than three
distinct points is still a polygon: it is imported with a warning and
measures as zero area.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from polygon_measure.core.config import MeasureConfig
from polygon_measure.crs_detect import detect_crs
from polygon_measure.import_geojson._file_input import read_document, read_document_async
from polygon_measure.import_geojson._normalization import (
    POLYGON_TYPES,
    coords_to_tuples,
    polygon_ring_sets,
)
from polygon_measure.import_geojson._reprojection import check_transform, reproject_ring_set
from polygon_measure.import_geojson._validation import (
    ALLOWED_EXTENSIONS,
    DocumentImportError,
    FileReadError,
    ImportErrorKind,
    MalformedGeometryError,
    MalformedJSONError,
    NoPolygonsFoundError,
    ReprojectionFailedError,
    UnsupportedFileTypeError,
    check_shapely_validity,
    parse_document,
    validate_extension,
    validate_ring,
)
from polygon_measure.models.polygon import MapPolygon
from polygon_measure.utils.geojson import feature_geometry, feature_properties, iter_features

if TYPE_CHECKING:
    from pathlib import Path

    from polygon_measure.models.crs import CRSGuess

logger = logging.getLogger("polygon_measure.import_geojson")

__all__ = [
    "ALLOWED_EXTENSIONS",
    "POLYGON_TYPES",
    "DocumentImportError",
    "FileReadError",
    "ImportErrorKind",
    "ImportResult",
    "MalformedGeometryError",
    "MalformedJSONError",
    "NoPolygonsFoundError",
    "ReprojectionFailedError",
    "UnsupportedFileTypeError",
    "coords_to_tuples",
    "import_document",
    "import_file",
    "import_file_async",
    "load_document",
    "parse_document",
    "polygon_ring_sets",
    "read_document",
    "read_document_async",
    "validate_extension",
]


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Polygons imported from one document and the CRS they came from."""

    polygons: list[MapPolygon] = field(default_factory=list)
    crs_guess: CRSGuess | None = None
    source_file: str = ""
    skipped_features: int = 0


def load_document(
    raw: str | bytes,
    *,
    config: MeasureConfig | None = None,
    source_filename: str = "",
) -> ImportResult:
    """Run the full import pipeline on raw GeoJSON text.

    Args:
        raw: Document text.
        config: Measurement configuration (map projection, sampling limits).
        source_filename: Original file name, recorded on each polygon.

    Returns:
        An ``ImportResult`` with polygons in ``config.map_projection``.

    Raises:
        MalformedJSONError: If the text is not a JSON object.
        ReprojectionFailedError: If the detected CRS cannot be transformed.
        NoPolygonsFoundError: If no Polygon / MultiPolygon survives.
    """
    config = config or MeasureConfig()
    document = parse_document(raw)

    crs_guess = detect_crs(
        document,
        max_features=config.crs_sample_max_features,
        max_coords=config.crs_sample_max_coords,
        source_filename=source_filename,
    )
    check_transform(crs_guess.crs, config.map_projection)

    polygons: list[MapPolygon] = []
    skipped = 0
    for idx, feature in enumerate(iter_features(document)):
        geometry = feature_geometry(feature)
        if geometry is None or geometry.get("type") not in POLYGON_TYPES:
            continue

        try:
            ring_sets = polygon_ring_sets(geometry)
        except MalformedGeometryError as exc:
            skipped += 1
            logger.warning(
                "Skipping malformed feature | file=%s | feature=%d | error=%s",
                source_filename,
                idx,
                exc,
            )
            continue

        is_multi = geometry.get("type") == "MultiPolygon"
        properties = feature_properties(feature)
        for part_idx, ring_set in enumerate(ring_sets):
            part_index = part_idx if is_multi else None
            display_name = f"{source_filename or 'document'}#{idx}" + (
                f".{part_idx}" if is_multi else ""
            )
            projected = reproject_ring_set(ring_set, crs_guess.crs, config.map_projection)
            if validate_ring(ring_set[0], display_name):
                check_shapely_validity(projected[0], projected[1:], display_name)
            polygons.append(
                MapPolygon(
                    exterior_coords=projected[0],
                    interior_coords=projected[1:],
                    crs=config.map_projection,
                    properties=dict(properties),
                    source_file=source_filename,
                    feature_index=idx,
                    part_index=part_index,
                )
            )

    if not polygons:
        msg = f"No Polygon or MultiPolygon geometry found in {source_filename or 'document'}"
        raise NoPolygonsFoundError(msg)

    logger.info(
        "Imported document | file=%s | crs=%s | method=%s | polygons=%d | skipped=%d",
        source_filename,
        crs_guess.crs,
        crs_guess.method,
        len(polygons),
        skipped,
    )
    return ImportResult(
        polygons=polygons,
        crs_guess=crs_guess,
        source_file=source_filename,
        skipped_features=skipped,
    )


def import_document(
    raw: str | bytes,
    *,
    config: MeasureConfig | None = None,
    source_filename: str = "",
) -> list[MapPolygon]:
    """Import raw GeoJSON text and return the ordered polygons.

    See ``load_document`` for the pipeline and the errors raised.
    """
    return load_document(raw, config=config, source_filename=source_filename).polygons


def import_file(path: Path | str, *, config: MeasureConfig | None = None) -> ImportResult:
    """Read and import a ``.geojson`` / ``.json`` file.

    Raises:
        UnsupportedFileTypeError: If the extension is not allowed.
        FileReadError: If the file cannot be read.
        DocumentImportError: Any pipeline error from ``load_document``.
    """
    from pathlib import Path

    path = Path(path)
    text = read_document(path)
    return load_document(text, config=config, source_filename=path.name)


async def import_file_async(
    path: Path | str, *, config: MeasureConfig | None = None
) -> ImportResult:
    """Async variant of ``import_file``; only the read is off-loaded."""
    from pathlib import Path

    path = Path(path)
    text = await read_document_async(path)
    return load_document(text, config=config, source_filename=path.name)
