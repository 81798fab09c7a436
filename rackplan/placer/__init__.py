"""Placer — decides where devices may go in a rack.

Submodules:
  models      Result types (PlacementCheck, PlacementResult, MoveResult, URange).
  geometry    Interval overlap, face/depth matrix, half-width slots.
  engine      Rack-level checks, collision listing, drop positions, snapping.
  containers  Child placement inside container slots.
  movement    Keyboard-style step up/down to the next valid position.
  blocked     Opposite-face hints for half-depth devices.
"""

from .models import PlacementCheck, PlacementResult, MoveResult, URange, BlockedRange
from .geometry import (
    device_range, ranges_overlap, faces_collide, slots_overlap, is_container_child,
)
from .engine import (
    check_placement, can_place, find_collisions,
    find_valid_drop_positions, snap_to_nearest_valid_position,
)
from .containers import can_place_in_container, get_container_children
from .movement import find_next_valid_position, can_move_up, can_move_down
from .blocked import get_blocked_slots, is_position_blocked, would_overlap_blocked

__all__ = [
    # Models
    "PlacementCheck", "PlacementResult", "MoveResult", "URange", "BlockedRange",
    # Geometry
    "device_range", "ranges_overlap", "faces_collide", "slots_overlap",
    "is_container_child",
    # Engine
    "check_placement", "can_place", "find_collisions",
    "find_valid_drop_positions", "snap_to_nearest_valid_position",
    # Containers
    "can_place_in_container", "get_container_children",
    # Movement
    "find_next_valid_position", "can_move_up", "can_move_down",
    # Blocked slots
    "get_blocked_slots", "is_position_blocked", "would_overlap_blocked",
]
