"""Measurement session: the state behind one map view.

A session owns everything that used to live in process-wide state: the
selected units, the current interaction mode, and the measured polygons
with their labels. Sessions are independent, so several can coexist in
one process (or one test run).

Measurements are read-after-write: they are computed from the
coordinates handed to ``add_polygon`` / ``commit_edit`` at the moment
the geometry change is committed, never from a timer.
"""

from __future__ import annotations

import enum
import itertools
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from polygon_measure.core.config import MeasureConfig
from polygon_measure.core.exceptions import ValidationError
from polygon_measure.import_geojson import import_file, load_document
from polygon_measure.measure import (
    AreaUnit,
    LengthUnit,
    build_labels,
    measure_polygon,
    parse_area_unit,
    parse_length_unit,
)

if TYPE_CHECKING:
    from pathlib import Path

    from polygon_measure.import_geojson import ImportResult
    from polygon_measure.models.measurement import MeasurementResult, PolygonLabels
    from polygon_measure.models.polygon import MapPolygon

logger = logging.getLogger("polygon_measure.session")

_session_ids = itertools.count(1)


class UnknownPolygonError(ValidationError):
    """Raised when a polygon id is not part of the session."""

    default_stage = "session"
    default_code = "POLYGON_NOT_FOUND"


class InteractionMode(enum.StrEnum):
    """Exclusive editing modes of the map."""

    IDLE = "idle"
    DRAW = "draw"
    MODIFY = "modify"


@dataclass(frozen=True, slots=True)
class MeasuredPolygon:
    """A polygon with the measurement and labels computed from it."""

    polygon_id: int
    polygon: MapPolygon
    result: MeasurementResult
    labels: PolygonLabels


class MeasurementSession:
    """Units, interaction mode and measured polygons for one map view."""

    def __init__(self, config: MeasureConfig | None = None) -> None:
        self.config = config or MeasureConfig()
        self.session_id = f"session-{next(_session_ids)}"
        self._area_unit = parse_area_unit(self.config.area_unit)
        self._length_unit = parse_length_unit(self.config.length_unit)
        self._mode = InteractionMode.IDLE
        self._entries: dict[int, MeasuredPolygon] = {}
        self._next_id = 1

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def area_unit(self) -> AreaUnit:
        return self._area_unit

    @property
    def length_unit(self) -> LengthUnit:
        return self._length_unit

    @property
    def mode(self) -> InteractionMode:
        return self._mode

    @property
    def polygon_count(self) -> int:
        return len(self._entries)

    @property
    def polygons(self) -> list[MeasuredPolygon]:
        """Measured polygons in insertion order."""
        return list(self._entries.values())

    def get(self, polygon_id: int) -> MeasuredPolygon:
        """Return a measured polygon by id.

        Raises:
            UnknownPolygonError: If the id is not in the session.
        """
        try:
            return self._entries[polygon_id]
        except KeyError:
            msg = f"Polygon {polygon_id} is not part of {self.session_id}"
            raise UnknownPolygonError(msg, correlation_id=self.session_id) from None

    # ------------------------------------------------------------------
    # Interaction mode
    # ------------------------------------------------------------------

    def toggle_draw(self) -> InteractionMode:
        """Enter draw mode, or leave it if already drawing."""
        self._mode = (
            InteractionMode.IDLE if self._mode is InteractionMode.DRAW else InteractionMode.DRAW
        )
        return self._mode

    def toggle_edit(self) -> InteractionMode:
        """Enter modify mode, or leave it if already editing."""
        self._mode = (
            InteractionMode.IDLE if self._mode is InteractionMode.MODIFY else InteractionMode.MODIFY
        )
        return self._mode

    def cancel(self) -> None:
        """Leave any interaction mode."""
        self._mode = InteractionMode.IDLE

    # ------------------------------------------------------------------
    # Polygons
    # ------------------------------------------------------------------

    def add_polygon(self, polygon: MapPolygon) -> MeasuredPolygon:
        """Measure a polygon and add it to the session."""
        polygon_id = self._next_id
        self._next_id += 1
        entry = self._measure(polygon_id, polygon)
        self._entries[polygon_id] = entry
        logger.info(
            "Polygon added | session=%s | polygon_id=%d | area=%.2f m2 | edges=%d",
            self.session_id,
            polygon_id,
            entry.result.area_m2,
            entry.result.edge_count,
        )
        return entry

    def complete_draw(self, polygon: MapPolygon) -> MeasuredPolygon:
        """Add a freshly drawn polygon and leave draw mode."""
        entry = self.add_polygon(polygon)
        self._mode = InteractionMode.IDLE
        return entry

    def commit_edit(
        self, polygon_id: int, exterior_coords: list[tuple[float, float]]
    ) -> MeasuredPolygon:
        """Replace a polygon's outer ring with the committed coordinates and re-measure.

        Args:
            polygon_id: Id returned when the polygon was added.
            exterior_coords: Final outer ring from the edit-commit payload,
                in the polygon's CRS.

        Raises:
            UnknownPolygonError: If the id is not in the session.
        """
        current = self.get(polygon_id)
        entry = self._measure(polygon_id, current.polygon.with_exterior(exterior_coords))
        self._entries[polygon_id] = entry
        logger.info(
            "Polygon edited | session=%s | polygon_id=%d | area=%.2f m2 | edges=%d",
            self.session_id,
            polygon_id,
            entry.result.area_m2,
            entry.result.edge_count,
        )
        return entry

    def remove_polygon(self, polygon_id: int) -> None:
        """Remove a polygon from the session.

        Raises:
            UnknownPolygonError: If the id is not in the session.
        """
        self.get(polygon_id)
        del self._entries[polygon_id]

    def clear_all(self) -> None:
        """Remove every polygon and leave any interaction mode."""
        removed = len(self._entries)
        self._entries.clear()
        self._mode = InteractionMode.IDLE
        logger.info("Session cleared | session=%s | removed=%d", self.session_id, removed)

    # ------------------------------------------------------------------
    # Units
    # ------------------------------------------------------------------

    def set_units(
        self,
        *,
        area_unit: str | AreaUnit | None = None,
        length_unit: str | LengthUnit | None = None,
    ) -> list[MeasuredPolygon]:
        """Change unit selection and relabel every polygon.

        Unrecognised selectors fall back to ``auto``. Measurements are not
        recomputed; only the label text changes.
        """
        if area_unit is not None:
            self._area_unit = parse_area_unit(area_unit)
        if length_unit is not None:
            self._length_unit = parse_length_unit(length_unit)

        for polygon_id, entry in list(self._entries.items()):
            self._entries[polygon_id] = MeasuredPolygon(
                polygon_id=polygon_id,
                polygon=entry.polygon,
                result=entry.result,
                labels=self._labels(entry.polygon, entry.result),
            )
        return self.polygons

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def import_text(self, raw: str | bytes, *, source_filename: str = "") -> list[MeasuredPolygon]:
        """Import GeoJSON text and add every resulting polygon.

        Nothing is added if the pipeline raises.
        """
        result = load_document(raw, config=self.config, source_filename=source_filename)
        return self._add_imported(result)

    def import_path(self, path: Path | str) -> list[MeasuredPolygon]:
        """Read, import and add every polygon of a GeoJSON file."""
        result = import_file(path, config=self.config)
        return self._add_imported(result)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _add_imported(self, result: ImportResult) -> list[MeasuredPolygon]:
        return [self.add_polygon(polygon) for polygon in result.polygons]

    def _measure(self, polygon_id: int, polygon: MapPolygon) -> MeasuredPolygon:
        result = measure_polygon(
            polygon,
            ellps=self.config.ellipsoid,
            geographic_crs=self.config.geographic_crs,
        )
        return MeasuredPolygon(
            polygon_id=polygon_id,
            polygon=polygon,
            result=result,
            labels=self._labels(polygon, result),
        )

    def _labels(self, polygon: MapPolygon, result: MeasurementResult) -> PolygonLabels:
        return build_labels(
            polygon,
            result,
            area_unit=self._area_unit,
            length_unit=self._length_unit,
        )
