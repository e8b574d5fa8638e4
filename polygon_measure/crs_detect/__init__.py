"""CRS detection for GeoJSON documents.

Classifies the coordinate reference system of a GeoJSON document once
per document, so every feature is reprojected from the same frame.

Detection order, first success wins:
- **_hint**: an explicit named-CRS declaration (EPSG code, alias or
  registered PROJ name)
- **_heuristic**: coordinate-magnitude scoring of a bounded sample
- fallback: geographic WGS 84, logged as a low-confidence guess

Inconclusive detection is never an error.
"""

from __future__ import annotations

import logging

from polygon_measure.core.constants import GEOGRAPHIC_CRS
from polygon_measure.crs_detect._constants import DEFAULT_MAX_COORDS, DEFAULT_MAX_FEATURES
from polygon_measure.crs_detect._heuristic import (
    HeuristicScore,
    sample_coordinates,
    score_coordinates,
)
from polygon_measure.crs_detect._hint import extract_crs_name, resolve_crs_name
from polygon_measure.models.crs import CRSDetectionMethod, CRSGuess

logger = logging.getLogger("polygon_measure.crs_detect")

__all__ = [
    "DEFAULT_MAX_COORDS",
    "DEFAULT_MAX_FEATURES",
    "HeuristicScore",
    "detect_crs",
    "extract_crs_name",
    "resolve_crs_name",
    "sample_coordinates",
    "score_coordinates",
]


def detect_crs(
    document: object,
    *,
    max_features: int = DEFAULT_MAX_FEATURES,
    max_coords: int = DEFAULT_MAX_COORDS,
    source_filename: str = "",
) -> CRSGuess:
    """Infer the CRS of a parsed GeoJSON document.

    Args:
        document: Parsed GeoJSON (FeatureCollection, Feature or geometry).
        max_features: Features the heuristic may inspect.
        max_coords: Coordinate pairs the heuristic may sample.
        source_filename: File name, for log context only.

    Returns:
        A ``CRSGuess``. Never raises for unrecognised or empty input;
        such documents fall back to ``EPSG:4326``.
    """
    name = extract_crs_name(document)
    if name is not None:
        resolved = resolve_crs_name(name)
        if resolved is not None:
            logger.info(
                "CRS from declaration | file=%s | declared=%s | crs=%s",
                source_filename,
                name,
                resolved,
            )
            return CRSGuess(
                crs=resolved,
                method=CRSDetectionMethod.HINT,
                detail=f"declared CRS name '{name}'",
            )
        logger.warning(
            "Unrecognised CRS declaration, inspecting coordinates | file=%s | declared=%s",
            source_filename,
            name,
        )

    samples = sample_coordinates(document, max_features=max_features, max_coords=max_coords)
    score = score_coordinates(samples)

    if score.crs is not None:
        logger.info(
            "CRS from coordinates | file=%s | crs=%s | rule=%s | samples=%d | "
            "geographic=%.2f | mercator=%.2f",
            source_filename,
            score.crs,
            score.rule,
            score.sample_count,
            score.geographic_fraction,
            score.mercator_fraction,
        )
        return CRSGuess(
            crs=score.crs,
            method=CRSDetectionMethod.HEURISTIC,
            geographic_fraction=score.geographic_fraction,
            mercator_fraction=score.mercator_fraction,
            sample_count=score.sample_count,
            detail=f"coordinate heuristic ({score.rule})",
        )

    logger.warning(
        "CRS detection inconclusive, assuming %s | file=%s | rule=%s | samples=%d | "
        "geographic=%.2f | mercator=%.2f | mean_magnitude=%.1f",
        GEOGRAPHIC_CRS,
        source_filename,
        score.rule,
        score.sample_count,
        score.geographic_fraction,
        score.mercator_fraction,
        score.mean_magnitude,
    )
    return CRSGuess(
        crs=GEOGRAPHIC_CRS,
        method=CRSDetectionMethod.FALLBACK,
        geographic_fraction=score.geographic_fraction,
        mercator_fraction=score.mercator_fraction,
        sample_count=score.sample_count,
        detail=f"fallback ({score.rule})",
    )
