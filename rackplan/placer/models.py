"""Placer result types."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from rackplan.layout.models import PlacedDevice


@dataclass(frozen=True)
class URange:
    """Closed interval of internal units occupied by a device."""

    bottom: int
    top: int


class PlacementCheck(enum.Enum):
    """Why a placement was accepted or rejected.  Returned, never raised."""

    OK = "ok"
    OUT_OF_BOUNDS = "out_of_bounds"
    COLLISION = "collision"
    NOT_FOUND = "not_found"             # unknown device, type or container

    @property
    def ok(self) -> bool:
        return self is PlacementCheck.OK


@dataclass
class PlacementResult:
    """Outcome of an editor placement or move, for UI feedback."""

    check: PlacementCheck
    device: PlacedDevice | None = None

    @property
    def ok(self) -> bool:
        return self.check.ok

    @property
    def reason(self) -> str:
        return self.check.value

    def __bool__(self) -> bool:
        return self.ok


@dataclass
class MoveResult:
    """Result of searching for the next position in a direction."""

    success: bool
    new_position: int | None
    reason: str                         # "moved" | "at_boundary" | "no_valid_position"


@dataclass(frozen=True)
class BlockedRange:
    """Range held by a half-depth device on the opposite face, in rack units."""

    bottom: float
    top: float
    slot_position: str | None = None
