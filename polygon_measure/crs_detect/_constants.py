"""Shared constants for CRS detection."""

from __future__ import annotations

import re

from polygon_measure.core.constants import GEOGRAPHIC_CRS, WEB_MERCATOR_CRS

# "EPSG:3857", "epsg 4326", "urn:ogc:def:crs:EPSG::3857", "urn:ogc:def:crs:EPSG:6.6:4326"
EPSG_CODE_RE = re.compile(r"EPSG[\s:_\-]*(?:\d+\.\d+(?:\.\d+)*[\s:_\-]+)?(\d+)", re.IGNORECASE)

# Codes that name Web Mercator under a non-canonical identifier
WEB_MERCATOR_ALIAS_CODES = frozenset({900913, 3785, 102100, 102113})

# Known names, compared after upper-casing and dropping spaces, "_" and "-"
CRS_NAME_ALIASES: dict[str, str] = {
    "WGS84": GEOGRAPHIC_CRS,
    "CRS84": GEOGRAPHIC_CRS,
    "GEOGRAPHIC": GEOGRAPHIC_CRS,
    "WEBMERCATOR": WEB_MERCATOR_CRS,
    "SPHERICALMERCATOR": WEB_MERCATOR_CRS,
    "PSEUDOMERCATOR": WEB_MERCATOR_CRS,
    "GOOGLE": WEB_MERCATOR_CRS,
    "WGS84/PSEUDOMERCATOR": WEB_MERCATOR_CRS,
}

# Characters ignored when comparing names against the alias table
ALIAS_SEPARATOR_RE = re.compile(r"[\s_\-]+")

# Sampling limits
DEFAULT_MAX_FEATURES = 10
DEFAULT_MAX_COORDS = 50

# Heuristic weights and thresholds
MERCATOR_BASE_WEIGHT = 0.1
MERCATOR_PROJECTED_WEIGHT = 1.0
GEOGRAPHIC_MIN_FRACTION = 0.8
GEOGRAPHIC_MAX_MERCATOR_FRACTION = 0.3
MERCATOR_MIN_FRACTION = 0.8
PROJECTED_MEAN_MAGNITUDE = 1000.0
