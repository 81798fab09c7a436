"""Keyboard movement — find the next valid position up or down the rack."""

from __future__ import annotations

from collections.abc import Iterable

from rackplan.catalog.models import DeviceType
from rackplan.layout.models import Rack
from rackplan.units import rack_bounds, to_internal

from .engine import can_place
from .geometry import catalog_map, effective_slot
from .models import MoveResult


def find_next_valid_position(
    rack: Rack,
    catalog: Iterable[DeviceType],
    index: int,
    direction: int,
    step_u: float | None = None,
) -> MoveResult:
    """Step the device at *index* by its own height (or *step_u*) in
    *direction* (+1 up, -1 down), leapfrogging occupied positions."""
    if not 0 <= index < len(rack.devices):
        return MoveResult(False, None, "no_valid_position")
    device = rack.devices[index]
    types = catalog_map(catalog)
    dt = types.get(device.device_type)
    if dt is None or device.container_id is not None:
        return MoveResult(False, None, "no_valid_position")

    increment = to_internal(step_u) if step_u else dt.height_internal
    min_pos, max_top = rack_bounds(rack.height)
    max_pos = max_top - dt.height_internal + 1

    if direction > 0 and device.position >= max_pos:
        return MoveResult(False, None, "at_boundary")
    if direction < 0 and device.position <= min_pos:
        return MoveResult(False, None, "at_boundary")

    slot = effective_slot(device, dt)
    step = increment if direction > 0 else -increment
    position = device.position + step
    while min_pos <= position <= max_pos:
        if can_place(rack, types, dt.u_height, position, index,
                     device.face, dt.full_depth, slot):
            return MoveResult(True, position, "moved")
        position += step

    return MoveResult(False, None, "no_valid_position")


def can_move_up(rack: Rack, catalog: Iterable[DeviceType], index: int) -> bool:
    return find_next_valid_position(rack, catalog, index, 1).success


def can_move_down(rack: Rack, catalog: Iterable[DeviceType], index: int) -> bool:
    return find_next_valid_position(rack, catalog, index, -1).success
