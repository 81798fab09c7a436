"""Position unit conversion.

Positions are stored as multiples of 1/6U so half-unit (3 internal units)
and third-unit (2 internal units) placement never needs float comparison.

    | Human | Internal |
    |-------|----------|
    | U1    | 6        |
    | U1½   | 9        |
    | U2    | 12       |
"""

from __future__ import annotations

from rackplan.config import LAYOUT_RULES, UNITS_PER_U


def to_internal(human_u: float) -> int:
    """Convert a rack-unit value (e.g. 1, 1.5, 2) to internal units."""
    return int(round(human_u * UNITS_PER_U))


def to_human(internal: int) -> float:
    """Convert internal units back to rack units."""
    return internal / UNITS_PER_U


def height_to_internal(u_height: float) -> int:
    """Device height in U → internal units (0.5U → 3)."""
    return int(round(u_height * UNITS_PER_U))


def rack_bounds(rack_height: int) -> tuple[int, int]:
    """Closed internal interval a rack-level device may occupy."""
    return LAYOUT_RULES.min_position, LAYOUT_RULES.max_top(rack_height)


def is_half_unit_multiple(value: float) -> bool:
    """True if *value* lies on the half-unit grid."""
    return (value * 2) == int(value * 2)
