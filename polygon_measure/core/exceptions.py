"""Error taxonomy shared by measurement, import and session code.

Every error raised by the package derives from ``PolygonMeasureError``.
The concrete classes live next to the code that raises them:

- ``polygon_measure.import_geojson``: ``DocumentImportError`` and its five
  kinds (malformed JSON, reprojection failure, no polygons, unsupported
  file type, file read failure) plus the per-feature
  ``MalformedGeometryError``
- ``polygon_measure.measure``: ``GeodesicError`` when vertices cannot be
  brought into the geographic frame
- ``polygon_measure.session``: ``UnknownPolygonError`` for stale polygon ids
- ``polygon_measure.core.config``: ``ConfigValidationError``

Each concrete class also derives from one category base below, which
decides whether re-running the same operation can help:

- ``ValidationError``: the document, file name or setting is wrong.
- ``TransientError``: the file system refused a read; trying again may work.
- ``PermanentError``: the CRS pair cannot be related by the projection engine.

``to_error_dict()`` gives the stable key set the CLI logs before printing
its one-line notice.
"""

from __future__ import annotations


class PolygonMeasureError(Exception):
    """Base class for errors raised while importing or measuring polygons.

    Attributes:
        message: Detail appended to the user notice, e.g. the JSON parser
            message or the failing CRS pair.
        stage: Package area that failed: ``"import_geojson"``,
            ``"measure"``, ``"session"`` or ``"config"``.
        code: Stable code such as ``"GEOJSON_MALFORMED"``.
        retryable: Whether repeating the import or measurement may succeed.
        correlation_id: Measurement session id, when one is involved.
    """

    #: Stage used when the raiser passes none.
    default_stage: str = ""
    #: Code used when the raiser passes none.
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """``validation``, ``transient`` or ``permanent``, from the category base."""
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(PolygonMeasureError):
    """The input itself is unusable, e.g. a bad file type or setting. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(PolygonMeasureError):
    """A file read failed for reasons outside the document; may succeed on retry."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(PolygonMeasureError):
    """The coordinates cannot be related between CRSs. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]
