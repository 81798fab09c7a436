"""Rack-level placement engine — bounds, collisions, valid drop positions.

All functions are pure: they read a ``Rack`` and a device-type catalog
(a list of ``DeviceType`` or a slug → ``DeviceType`` mapping) and never
mutate either.  Rejections are reported as ``PlacementCheck`` values.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from rackplan.catalog.models import DeviceType
from rackplan.config import UNITS_PER_U
from rackplan.layout.models import PlacedDevice, Rack
from rackplan.units import height_to_internal, rack_bounds

from .geometry import (
    catalog_map, device_range, effective_slot, faces_collide,
    is_container_child, ranges_overlap, slots_overlap,
)
from .models import PlacementCheck, URange


log = logging.getLogger(__name__)


# ── Collision ──────────────────────────────────────────────────────


def _conflicts(
    target: URange, face: str, is_full_depth: bool, slot_position: str,
    device: PlacedDevice, device_type: DeviceType,
) -> bool:
    if not ranges_overlap(target, device_range(device.position, device_type.u_height)):
        return False
    if not faces_collide(face, device.face, is_full_depth, device_type.full_depth):
        return False
    return slots_overlap(slot_position, effective_slot(device, device_type))


def _iter_conflicts(
    rack: Rack,
    catalog: Iterable[DeviceType],
    u_height: float,
    position: int,
    exclude_index: int | None,
    face: str,
    is_full_depth: bool,
    slot_position: str,
):
    types = catalog_map(catalog)
    target = device_range(position, u_height)
    for i, device in enumerate(rack.devices):
        if i == exclude_index or is_container_child(device):
            continue
        dt = types.get(device.device_type)
        if dt is None:
            continue
        if _conflicts(target, face, is_full_depth, slot_position or "full", device, dt):
            yield device


def check_placement(
    rack: Rack,
    catalog: Iterable[DeviceType],
    u_height: float,
    position: int,
    exclude_index: int | None = None,
    face: str = "front",
    is_full_depth: bool = True,
    slot_position: str = "full",
) -> PlacementCheck:
    """Check whether an object of *u_height* fits at internal *position*.

    *exclude_index* skips one entry of ``rack.devices`` (the device being
    moved).  Container children never take part in rack-level checks.
    """
    min_pos, max_top = rack_bounds(rack.height)
    top = position + height_to_internal(u_height) - 1
    if position < min_pos or top > max_top:
        log.debug("Out of bounds: %s at %d in rack %s", u_height, position, rack.id)
        return PlacementCheck.OUT_OF_BOUNDS

    blocker = next(_iter_conflicts(
        rack, catalog, u_height, position, exclude_index,
        face, is_full_depth, slot_position,
    ), None)
    if blocker is not None:
        log.debug("Collision at %d in rack %s with %s", position, rack.id, blocker.id)
        return PlacementCheck.COLLISION
    return PlacementCheck.OK


def can_place(
    rack: Rack,
    catalog: Iterable[DeviceType],
    u_height: float,
    position: int,
    exclude_index: int | None = None,
    face: str = "front",
    is_full_depth: bool = True,
    slot_position: str = "full",
) -> bool:
    return check_placement(
        rack, catalog, u_height, position, exclude_index,
        face, is_full_depth, slot_position,
    ) is PlacementCheck.OK


def find_collisions(
    rack: Rack,
    catalog: Iterable[DeviceType],
    u_height: float,
    position: int,
    exclude_index: int | None = None,
    face: str = "front",
    is_full_depth: bool = True,
    slot_position: str = "full",
) -> list[PlacedDevice]:
    """All rack-level devices the object would collide with, in rack order."""
    return list(_iter_conflicts(
        rack, catalog, u_height, position, exclude_index,
        face, is_full_depth, slot_position,
    ))


# ── Drop positions ─────────────────────────────────────────────────


def find_valid_drop_positions(
    rack: Rack,
    catalog: Iterable[DeviceType],
    u_height: float,
    face: str = "front",
    is_full_depth: bool = True,
    slot_position: str = "full",
    step: int = UNITS_PER_U,
) -> list[int]:
    """Ascending internal positions where the object can be placed.

    Scans from U1 every *step* internal units up to the highest bottom
    position at which the object still fits.
    """
    types = catalog_map(catalog)
    min_pos, max_top = rack_bounds(rack.height)
    max_pos = max_top - height_to_internal(u_height) + 1
    return [
        p for p in range(min_pos, max_pos + 1, max(step, 1))
        if can_place(rack, types, u_height, p, None, face, is_full_depth, slot_position)
    ]


def pointer_to_position(
    rack: Rack, pointer_y: float, unit_pixel_height: float,
) -> int:
    """Map a pointer y coordinate (0 = top of the drawn rack) to an internal
    position on the whole-U grid, clamped to the rack."""
    row = math.floor(pointer_y / unit_pixel_height)
    if rack.desc_units:
        unit = row + 1
    else:
        unit = rack.height - row
    unit = min(max(unit, 1), rack.height)
    return unit * UNITS_PER_U


def snap_to_nearest_valid_position(
    rack: Rack,
    catalog: Iterable[DeviceType],
    u_height: float,
    pointer_y: float,
    unit_pixel_height: float,
    face: str = "front",
    is_full_depth: bool = True,
    slot_position: str = "full",
) -> int | None:
    """Nearest valid internal position to the pointer, or ``None``.

    Searches outward from the unit under the pointer, trying the lower
    neighbour before the upper one at each distance.
    """
    types = catalog_map(catalog)
    min_pos, max_top = rack_bounds(rack.height)
    max_pos = max_top - height_to_internal(u_height) + 1
    if max_pos < min_pos:
        return None

    target = min(pointer_to_position(rack, pointer_y, unit_pixel_height), max_pos)
    target = max(target, min_pos)

    for distance in range(0, rack.height + 1):
        offsets = (0,) if distance == 0 else (-distance, distance)
        for offset in offsets:
            p = target + offset * UNITS_PER_U
            if p < min_pos or p > max_pos:
                continue
            if can_place(rack, types, u_height, p, None, face, is_full_depth, slot_position):
                return p
    return None
