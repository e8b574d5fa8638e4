"""Explicit CRS declarations in a GeoJSON document.

Handles the named-CRS member of GeoJSON 2008 documents::

    "crs": {"type": "name", "properties": {"name": "urn:ogc:def:crs:EPSG::3857"}}

and the older ``{"type": "EPSG", "properties": {"code": 3857}}`` form.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from polygon_measure.core.constants import WEB_MERCATOR_CRS
from polygon_measure.crs_detect._constants import (
    ALIAS_SEPARATOR_RE,
    CRS_NAME_ALIASES,
    EPSG_CODE_RE,
    WEB_MERCATOR_ALIAS_CODES,
)

logger = logging.getLogger("polygon_measure.crs_detect")


def extract_crs_name(document: object) -> str | None:
    """Return the declared CRS name of a document, or ``None`` if absent."""
    if not isinstance(document, dict):
        return None
    crs = document.get("crs")
    if not isinstance(crs, dict):
        return None
    properties = crs.get("properties")
    if not isinstance(properties, dict):
        return None

    name = properties.get("name")
    if isinstance(name, str) and name.strip():
        return name.strip()

    code = properties.get("code")
    if isinstance(code, int | str) and str(code).strip():
        return f"EPSG:{str(code).strip()}"
    return None


def resolve_crs_name(name: str) -> str | None:
    """Map a declared CRS name to an ``EPSG:<code>`` identifier.

    An EPSG code anywhere in the name wins. Otherwise the name (or the
    last segment of an OGC URN) must equal a known alias, and failing
    that it is looked up in the PROJ database by name. Returns ``None``
    when the name is not recognised.

    Examples:
        >>> resolve_crs_name("urn:ogc:def:crs:EPSG::3857")
        'EPSG:3857'
        >>> resolve_crs_name("urn:ogc:def:crs:OGC:1.3:CRS84")
        'EPSG:4326'
    """
    match = EPSG_CODE_RE.search(name)
    if match:
        code = int(match.group(1))
        if code in WEB_MERCATOR_ALIAS_CODES:
            return WEB_MERCATOR_CRS
        return f"EPSG:{code}"

    for candidate in (name, name.rsplit(":", 1)[-1]):
        key = ALIAS_SEPARATOR_RE.sub("", candidate).upper()
        if key in CRS_NAME_ALIASES:
            return CRS_NAME_ALIASES[key]

    if not name.strip():
        return None
    return _lookup_crs_name(name.strip())


@lru_cache(maxsize=64)
def _lookup_crs_name(name: str) -> str | None:
    """Resolve a CRS by its registered name, e.g. ``WGS 84 / UTM zone 33N``."""
    from pyproj import CRS
    from pyproj.exceptions import CRSError

    try:
        code = CRS.from_user_input(name).to_epsg()
    except CRSError as exc:
        logger.debug("CRS name not in PROJ database | name=%s | error=%s", name, exc)
        return None
    if code is None:
        logger.debug("CRS name has no EPSG equivalent | name=%s", name)
        return None
    if code in WEB_MERCATOR_ALIAS_CODES:
        return WEB_MERCATOR_CRS
    return f"EPSG:{code}"
