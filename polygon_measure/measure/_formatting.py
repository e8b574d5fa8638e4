"""Human-readable rendering of areas and lengths.

Pure functions over non-negative real numbers. Unrecognised unit
selectors fall back to automatic selection; formatting never raises.
"""

from __future__ import annotations

import enum

from polygon_measure.core.constants import METRES_PER_KM, SQ_METRES_PER_HECTARE, SQ_METRES_PER_SQ_KM


class AreaUnit(enum.StrEnum):
    AUTO = "auto"
    SQUARE_METRES = "m2"
    HECTARES = "ha"
    SQUARE_KILOMETRES = "km2"


class LengthUnit(enum.StrEnum):
    AUTO = "auto"
    METRES = "m"
    KILOMETRES = "km"


def parse_area_unit(unit: str | AreaUnit | None) -> AreaUnit:
    """Return the matching ``AreaUnit``, or ``AUTO`` for anything unrecognised."""
    try:
        return AreaUnit(str(unit).strip().lower())
    except ValueError:
        return AreaUnit.AUTO


def parse_length_unit(unit: str | LengthUnit | None) -> LengthUnit:
    """Return the matching ``LengthUnit``, or ``AUTO`` for anything unrecognised."""
    try:
        return LengthUnit(str(unit).strip().lower())
    except ValueError:
        return LengthUnit.AUTO


def format_area(area: float, unit: str | AreaUnit = AreaUnit.AUTO) -> str:
    """Render an area in square metres.

    ``m2`` renders whole square metres; ``ha`` and ``km2`` render three
    decimals. ``auto`` picks km² above 1,000,000 m², hectares above
    10,000 m², and square metres otherwise.

    Examples:
        >>> format_area(15_000)
        '1.500 ha'
        >>> format_area(500, "m2")
        '500 m²'
    """
    selected = parse_area_unit(unit)
    if selected is AreaUnit.AUTO:
        if area > SQ_METRES_PER_SQ_KM:
            selected = AreaUnit.SQUARE_KILOMETRES
        elif area > SQ_METRES_PER_HECTARE:
            selected = AreaUnit.HECTARES
        else:
            selected = AreaUnit.SQUARE_METRES

    if selected is AreaUnit.SQUARE_KILOMETRES:
        return f"{area / SQ_METRES_PER_SQ_KM:.3f} km²"
    if selected is AreaUnit.HECTARES:
        return f"{area / SQ_METRES_PER_HECTARE:.3f} ha"
    return f"{area:.0f} m²"


def format_length(length: float, unit: str | LengthUnit = LengthUnit.AUTO) -> str:
    """Render a length in metres with three decimals.

    ``auto`` picks kilometres above 1000 m and metres otherwise.
    """
    selected = parse_length_unit(unit)
    if selected is LengthUnit.AUTO:
        selected = LengthUnit.KILOMETRES if length > METRES_PER_KM else LengthUnit.METRES

    if selected is LengthUnit.KILOMETRES:
        return f"{length / METRES_PER_KM:.3f} km"
    return f"{length:.3f} m"
