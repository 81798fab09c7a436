"""Shared layout constants for the placement engine, history and migration.

These values describe the rack model: how many internal units make up one
rack unit, the rack sizes a document may declare, and the schema version
stamped onto migrated documents.  The **placer** (which compares positions)
and the **migration** layer (which rescales legacy positions) both derive
their numbers from this single source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutRules:
    """Physical and schema rules for rack layouts.

    Heights are in rack units (U) unless noted otherwise.
    """

    units_per_u: int = 6
    """Internal units per rack unit.  6 is the LCM of 2 and 3, so both
    half-unit and third-unit positions are exact integers."""

    min_rack_height: int = 1
    max_rack_height: int = 100

    min_device_height: float = 0.5
    max_device_height: float = 50

    allowed_rack_widths: tuple[int, ...] = (10, 19, 21, 23)
    """Rack width classes in inches."""

    max_racks: int = 10

    max_history_depth: int = 50
    """Undo entries kept before the oldest is dropped."""

    current_version: str = "1.1.0"
    """Schema version stamped on documents that needed migration."""

    position_rescale_version: str = "0.7.0"
    """Documents older than this store positions in whole rack units."""

    # ── Derived helpers ────────────────────────────────────────────

    @property
    def min_position(self) -> int:
        """Lowest internal position a rack-level device may start at (U1)."""
        return self.units_per_u

    def max_top(self, rack_height: int) -> int:
        """Highest internal unit a rack-level device may occupy.

        The top of U``N`` is ``N * units_per_u + units_per_u - 1``.
        """
        return rack_height * self.units_per_u + (self.units_per_u - 1)


# Shared rule set.
LAYOUT_RULES = LayoutRules()

UNITS_PER_U = LAYOUT_RULES.units_per_u
MAX_HISTORY_DEPTH = LAYOUT_RULES.max_history_depth
CURRENT_VERSION = LAYOUT_RULES.current_version

DEFAULT_LAYOUT_NAME = "Racky McRackface"
DEFAULT_RACK_HEIGHT = 42
DEFAULT_RACK_WIDTH = 19
