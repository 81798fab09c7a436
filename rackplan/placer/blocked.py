"""Blocked-slot hints for renderers.

A half-depth device mounted on one face leaves the other face free, but a
renderer showing that other face still wants to shade the rails it holds.
"""

from __future__ import annotations

from collections.abc import Iterable

from rackplan.catalog.models import DeviceType
from rackplan.layout.models import Rack
from rackplan.units import to_human

from .geometry import catalog_map
from .models import BlockedRange


def get_blocked_slots(
    rack: Rack, view: str, catalog: Iterable[DeviceType],
) -> list[BlockedRange]:
    """Ranges (in rack units) held by half-depth devices on the face opposite *view*."""
    types = catalog_map(catalog)
    blocked = []
    for device in rack.devices:
        if device.face == view or device.face == "both" or device.container_id:
            continue
        dt = types.get(device.device_type)
        if dt is None or dt.full_depth:
            continue
        bottom = to_human(device.position)
        blocked.append(BlockedRange(
            bottom=bottom,
            top=bottom + dt.u_height - 1,
            slot_position=device.slot_position if dt.half_width else None,
        ))
    return blocked


def is_position_blocked(blocked: list[BlockedRange], position: float) -> bool:
    return any(r.bottom <= position <= r.top for r in blocked)


def would_overlap_blocked(
    blocked: list[BlockedRange], position: float, u_height: float,
) -> bool:
    top = position + u_height - 1
    return any(position <= r.top and top >= r.bottom for r in blocked)
