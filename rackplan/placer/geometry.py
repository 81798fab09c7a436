"""Low-level interval and face/depth helpers for the placer."""

from __future__ import annotations

from collections.abc import Iterable

from rackplan.catalog.models import DeviceType
from rackplan.layout.models import PlacedDevice
from rackplan.units import height_to_internal

from .models import URange


def device_range(position: int, u_height: float) -> URange:
    """Internal-unit range of a device with its bottom at *position*."""
    return URange(position, position + height_to_internal(u_height) - 1)


def ranges_overlap(a: URange, b: URange) -> bool:
    """Closed-interval intersection.  Adjacent ranges (a.top + 1 == b.bottom)
    do not overlap."""
    return a.bottom <= b.top and a.top >= b.bottom


def faces_collide(
    face_a: str, face_b: str,
    full_depth_a: bool = True, full_depth_b: bool = True,
) -> bool:
    """Face/depth collision matrix.

    ``both`` conflicts with everything and the same face always conflicts.
    Front against rear conflicts only if either device is full depth: two
    half-depth devices share the rails but not the depth.
    """
    if face_a == "both" or face_b == "both":
        return True
    if face_a == face_b:
        return True
    return full_depth_a or full_depth_b


def slots_overlap(slot_a: str | None, slot_b: str | None) -> bool:
    """Half-width slot overlap.  ``full`` (or unset) overlaps everything."""
    a = slot_a or "full"
    b = slot_b or "full"
    if a == "full" or b == "full":
        return True
    return a == b


def effective_slot(device: PlacedDevice, device_type: DeviceType) -> str:
    """Slot a placed device really occupies; full width unless its type is half width."""
    if device_type.half_width and device.slot_position in ("left", "right"):
        return device.slot_position
    return "full"


def is_container_child(device: PlacedDevice) -> bool:
    """Children live in their container's collision space, not the rack's."""
    return device.container_id is not None


def catalog_map(catalog: Iterable[DeviceType]) -> dict[str, DeviceType]:
    if isinstance(catalog, dict):
        return catalog
    return {dt.slug: dt for dt in catalog}
