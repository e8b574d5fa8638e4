"""Coordinate-magnitude heuristic for undeclared CRSs.

Geographic coordinates never exceed 180 in absolute value, while Web
Mercator coordinates are metres and routinely reach millions. Sampled
pairs are scored against both frames:

- geographic-compatible: ``-180 <= x <= 180`` and ``-90 <= y <= 90``;
- Mercator-compatible: inside the EPSG:3857 full extent. Each such pair
  adds a small base weight, plus a heavier weight when the pair could
  not possibly be geographic.

Geographic data thus scores a Mercator fraction of about 0.1, while
projected data scores above 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import islice
from typing import TYPE_CHECKING

from polygon_measure.core.constants import (
    GEOGRAPHIC_CRS,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MERCATOR_MAX_X,
    MERCATOR_MAX_Y,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    WEB_MERCATOR_CRS,
)
from polygon_measure.crs_detect._constants import (
    DEFAULT_MAX_COORDS,
    DEFAULT_MAX_FEATURES,
    GEOGRAPHIC_MAX_MERCATOR_FRACTION,
    GEOGRAPHIC_MIN_FRACTION,
    MERCATOR_BASE_WEIGHT,
    MERCATOR_MIN_FRACTION,
    MERCATOR_PROJECTED_WEIGHT,
    PROJECTED_MEAN_MAGNITUDE,
)
from polygon_measure.utils.geojson import feature_geometry, iter_features, iter_positions

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class HeuristicScore:
    """Scores of a coordinate sample.

    Attributes:
        crs: The inferred CRS, or ``None`` when inconclusive.
        geographic_fraction: Share of pairs within lon/lat bounds.
        mercator_fraction: Weighted Mercator score per pair.
        mean_magnitude: Mean absolute value over all sampled numbers.
        sample_count: Number of pairs scored.
        rule: Which decision rule fired (``"geographic"``, ``"mercator"``,
            ``"magnitude"``, ``"inconclusive"`` or ``"empty"``).
    """

    crs: str | None
    geographic_fraction: float
    mercator_fraction: float
    mean_magnitude: float
    sample_count: int
    rule: str


def sample_coordinates(
    document: object,
    *,
    max_features: int = DEFAULT_MAX_FEATURES,
    max_coords: int = DEFAULT_MAX_COORDS,
) -> list[tuple[float, float]]:
    """Collect up to ``max_coords`` pairs from the first ``max_features`` features."""
    samples: list[tuple[float, float]] = []
    for feature in islice(iter_features(document), max_features):
        geometry = feature_geometry(feature)
        if geometry is None:
            continue
        remaining = max_coords - len(samples)
        samples.extend(islice(iter_positions(geometry), remaining))
        if len(samples) >= max_coords:
            break
    return samples


def score_coordinates(samples: Sequence[tuple[float, float]]) -> HeuristicScore:
    """Apply the decision rules to a coordinate sample.

    Rules, first match wins: mostly geographic and barely Mercator ->
    WGS 84; strongly Mercator -> Web Mercator; large mean magnitude ->
    Web Mercator; otherwise inconclusive (``crs`` is ``None``).
    """
    if not samples:
        return HeuristicScore(None, 0.0, 0.0, 0.0, 0, "empty")

    geographic = 0
    mercator = 0.0
    magnitude_total = 0.0
    for x, y in samples:
        if MIN_LONGITUDE <= x <= MAX_LONGITUDE and MIN_LATITUDE <= y <= MAX_LATITUDE:
            geographic += 1
        if abs(x) <= MERCATOR_MAX_X and abs(y) <= MERCATOR_MAX_Y:
            mercator += MERCATOR_BASE_WEIGHT
            if abs(x) > MAX_LONGITUDE or abs(y) > MAX_LATITUDE:
                mercator += MERCATOR_PROJECTED_WEIGHT
        magnitude_total += abs(x) + abs(y)

    count = len(samples)
    geo_fraction = geographic / count
    merc_fraction = mercator / count
    mean_magnitude = magnitude_total / (2 * count)

    if geo_fraction > GEOGRAPHIC_MIN_FRACTION and merc_fraction < GEOGRAPHIC_MAX_MERCATOR_FRACTION:
        crs, rule = GEOGRAPHIC_CRS, "geographic"
    elif merc_fraction > MERCATOR_MIN_FRACTION:
        crs, rule = WEB_MERCATOR_CRS, "mercator"
    elif mean_magnitude > PROJECTED_MEAN_MAGNITUDE:
        crs, rule = WEB_MERCATOR_CRS, "magnitude"
    else:
        crs, rule = None, "inconclusive"

    return HeuristicScore(crs, geo_fraction, merc_fraction, mean_magnitude, count, rule)
