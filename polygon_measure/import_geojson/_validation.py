"""Validation helpers and error kinds for GeoJSON import.

Responsibilities:
- File extension check (before any read)
- JSON parsing of the raw document text
- Polygon ring sanity checks and shapely validity warnings
"""

from __future__ import annotations

import enum
import json
import logging
from pathlib import PurePath
from typing import Any

from polygon_measure.core.exceptions import (
    PermanentError,
    PolygonMeasureError,
    TransientError,
    ValidationError,
)

logger = logging.getLogger("polygon_measure.import_geojson")

ALLOWED_EXTENSIONS = frozenset({".geojson", ".json"})

# Fewer distinct points than this cannot bound a polygon
MIN_RING_POINTS = 3


# ---------------------------------------------------------------------------
# Exceptions (public API, re-exported from __init__)
# ---------------------------------------------------------------------------


class ImportErrorKind(enum.StrEnum):
    MALFORMED_JSON = "MalformedJSON"
    REPROJECTION_FAILED = "ReprojectionFailed"
    NO_POLYGONS_FOUND = "NoPolygonsFound"
    UNSUPPORTED_FILE_TYPE = "UnsupportedFileType"
    FILE_READ_ERROR = "FileReadError"


class DocumentImportError(PolygonMeasureError):
    """Base class for failures importing a GeoJSON document.

    Every subclass is recoverable at the UI boundary: it becomes a short
    notice (``user_message``) and the session stays usable.
    """

    default_stage = "import_geojson"
    kind: ImportErrorKind
    notice: str = "Import failed"

    @property
    def user_message(self) -> str:
        """Short, non-technical notice text."""
        return self.notice


class MalformedJSONError(DocumentImportError, ValidationError):
    """The document text is not valid JSON (or not a JSON object)."""

    default_code = "GEOJSON_MALFORMED"
    kind = ImportErrorKind.MALFORMED_JSON
    notice = "The file is not valid GeoJSON"


class ReprojectionFailedError(DocumentImportError, PermanentError):
    """The projection engine rejected a coordinate transform."""

    default_code = "GEOJSON_REPROJECTION_FAILED"
    kind = ImportErrorKind.REPROJECTION_FAILED
    notice = "The file's coordinates could not be reprojected"


class NoPolygonsFoundError(DocumentImportError, ValidationError):
    """The document is valid but holds no Polygon or MultiPolygon geometry."""

    default_code = "GEOJSON_NO_POLYGONS"
    kind = ImportErrorKind.NO_POLYGONS_FOUND
    notice = "No polygons found in the file"


class UnsupportedFileTypeError(DocumentImportError, ValidationError):
    """The file extension is not ``.geojson`` or ``.json``."""

    default_code = "FILE_TYPE_UNSUPPORTED"
    kind = ImportErrorKind.UNSUPPORTED_FILE_TYPE
    notice = "Please choose a .geojson or .json file"


class FileReadError(DocumentImportError, TransientError):
    """The file could not be read."""

    default_code = "FILE_READ_FAILED"
    kind = ImportErrorKind.FILE_READ_ERROR
    notice = "The file could not be read"


class MalformedGeometryError(ValidationError):
    """A single feature's coordinates are malformed; the feature is skipped."""

    default_stage = "import_geojson"
    default_code = "GEOJSON_GEOMETRY_MALFORMED"


# ---------------------------------------------------------------------------
# File and document validation
# ---------------------------------------------------------------------------


def validate_extension(filename: str) -> None:
    """Reject files whose extension is not ``.geojson`` or ``.json``.

    Raises:
        UnsupportedFileTypeError: If the extension (case-insensitive) is
            not allowed.
    """
    suffix = PurePath(filename).suffix.lower()
    if suffix not in ALLOWED_EXTENSIONS:
        msg = (
            f"Unsupported file type '{suffix or '(none)'}' for {filename}: "
            f"expected one of {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )
        raise UnsupportedFileTypeError(msg)


def parse_document(raw: str | bytes) -> dict[str, Any]:
    """Parse raw document text into a JSON object.

    Raises:
        MalformedJSONError: If the text is not JSON, or the root is not
            an object. The underlying parser message is preserved.
    """
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as exc:
        msg = f"Not valid JSON: {exc}"
        raise MalformedJSONError(msg) from exc

    if not isinstance(document, dict):
        msg = f"GeoJSON root must be an object, got {type(document).__name__}"
        raise MalformedJSONError(msg)
    return document


# ---------------------------------------------------------------------------
# Ring validation
# ---------------------------------------------------------------------------


def validate_ring(coords: list[tuple[float, float]], display_name: str) -> bool:
    """Return ``True`` if the ring has at least three distinct points.

    Short rings are still imported and measure as zero area; the warning
    points the user at them in the source data.
    """
    distinct = set(coords)
    if len(distinct) < MIN_RING_POINTS:
        logger.warning(
            "Degenerate ring imported with zero area | polygon=%s | distinct_points=%d",
            display_name,
            len(distinct),
        )
        return False
    return True


def check_shapely_validity(
    exterior: list[tuple[float, float]],
    interior: list[list[tuple[float, float]]],
    display_name: str,
) -> None:
    """Log a warning for self-intersecting or otherwise invalid polygons.

    Invalid polygons are still imported; the warning carries shapely's
    explanation so the user can correct the source data.
    """
    from shapely.geometry import Polygon
    from shapely.validation import explain_validity

    try:
        poly = Polygon(exterior, interior)
    except (ValueError, TypeError) as exc:
        logger.warning(
            "Cannot build polygon for validity check | polygon=%s | error=%s", display_name, exc
        )
        return

    if not poly.is_valid:
        logger.warning(
            "Invalid polygon geometry imported as-is | polygon=%s | reason=%s",
            display_name,
            explain_validity(poly),
        )
