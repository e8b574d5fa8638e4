"""Reprojection of imported rings into the working map projection."""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from polygon_measure.core.constants import normalize_epsg
from polygon_measure.import_geojson._validation import ReprojectionFailedError

if TYPE_CHECKING:
    from pyproj import Transformer

    from polygon_measure.import_geojson._normalization import RingSet


def reproject_ring_set(ring_set: RingSet, source_crs: str, target_crs: str) -> RingSet:
    """Transform every ring of a ring set from ``source_crs`` to ``target_crs``.

    Identical CRSs return the rings unchanged.

    Raises:
        ReprojectionFailedError: If either CRS is unknown to the projection
            engine or a position cannot be transformed.
    """
    if normalize_epsg(source_crs) == normalize_epsg(target_crs):
        return [list(ring) for ring in ring_set]

    from pyproj.exceptions import CRSError, ProjError

    try:
        transformer = _transformer(normalize_epsg(source_crs), normalize_epsg(target_crs))
        return [
            [transformer.transform(x, y, errcheck=True) for x, y in ring] for ring in ring_set
        ]
    except (CRSError, ProjError) as exc:
        msg = f"Cannot reproject from {source_crs} to {target_crs}: {exc}"
        raise ReprojectionFailedError(msg) from exc


def check_transform(source_crs: str, target_crs: str) -> None:
    """Fail early if the projection engine cannot relate the two CRSs.

    Raises:
        ReprojectionFailedError: If either CRS is unknown.
    """
    if normalize_epsg(source_crs) == normalize_epsg(target_crs):
        return

    from pyproj.exceptions import CRSError, ProjError

    try:
        _transformer(normalize_epsg(source_crs), normalize_epsg(target_crs))
    except (CRSError, ProjError) as exc:
        msg = f"Cannot reproject from {source_crs} to {target_crs}: {exc}"
        raise ReprojectionFailedError(msg) from exc


@lru_cache(maxsize=32)
def _transformer(source_crs: str, target_crs: str) -> Transformer:
    from pyproj import Transformer

    return Transformer.from_crs(source_crs, target_crs, always_xy=True)
