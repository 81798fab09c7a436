"""Raw layout mutations used by commands.

These bypass placement validation: callers (the editor) check with the
placement engine first, and commands replay them on undo/redo.  A missing
rack or device here is a programmer error and raises ``LookupError``.
"""

from __future__ import annotations

from rackplan.catalog.models import DeviceType

from .models import Layout, PlacedDevice, Rack


def require_rack(layout: Layout, rack_id: str) -> Rack:
    rack = layout.get_rack(rack_id)
    if rack is None:
        raise LookupError(f"Rack not found: {rack_id}")
    return rack


def device_index(rack: Rack, device_id: str) -> int:
    """Index of a placed device in ``rack.devices``, or -1."""
    for i, d in enumerate(rack.devices):
        if d.id == device_id:
            return i
    return -1


def require_device(rack: Rack, device_id: str) -> PlacedDevice:
    idx = device_index(rack, device_id)
    if idx < 0:
        raise LookupError(f"Device {device_id} not found in rack {rack.id}")
    return rack.devices[idx]


def insert_device(rack: Rack, device: PlacedDevice, index: int | None = None) -> int:
    """Insert *device* (appended by default). Returns its index."""
    if index is None or index >= len(rack.devices):
        rack.devices.append(device)
        return len(rack.devices) - 1
    rack.devices.insert(max(index, 0), device)
    return max(index, 0)


def remove_device(rack: Rack, device_id: str) -> tuple[int, PlacedDevice]:
    """Remove a device by id. Returns (former index, device)."""
    idx = device_index(rack, device_id)
    if idx < 0:
        raise LookupError(f"Device {device_id} not found in rack {rack.id}")
    return idx, rack.devices.pop(idx)


def update_device(rack: Rack, device_id: str, **changes) -> None:
    device = require_device(rack, device_id)
    for key, value in changes.items():
        setattr(device, key, value)


def _ids_removed_with_type(rack: Rack, slug: str) -> set[str]:
    """Ids of *slug* placements in *rack* plus the children they contain."""
    ids = {d.id for d in rack.devices if d.device_type == slug}
    ids |= {d.id for d in rack.devices if d.container_id in ids}
    return ids


def placed_devices_for_type(layout: Layout, slug: str) -> list[tuple[str, int, PlacedDevice]]:
    """Every placement of *slug*, and every child inside one, as
    (rack_id, index, device) in layout order."""
    found = []
    for rack in layout.racks:
        ids = _ids_removed_with_type(rack, slug)
        for i, d in enumerate(rack.devices):
            if d.id in ids:
                found.append((rack.id, i, d))
    return found


def add_device_type(layout: Layout, device_type: DeviceType, index: int | None = None) -> None:
    if layout.get_device_type(device_type.slug) is not None:
        raise ValueError(f"Duplicate device type slug: {device_type.slug}")
    if index is None or index >= len(layout.device_types):
        layout.device_types.append(device_type)
    else:
        layout.device_types.insert(index, device_type)


def remove_device_type(layout: Layout, slug: str) -> int:
    """Remove a device type, every placement of it and any children those
    placements contain. Returns its former index."""
    idx = next((i for i, dt in enumerate(layout.device_types) if dt.slug == slug), -1)
    if idx < 0:
        raise LookupError(f"Device type not found: {slug}")
    layout.device_types.pop(idx)
    for rack in layout.racks:
        ids = _ids_removed_with_type(rack, slug)
        rack.devices = [d for d in rack.devices if d.id not in ids]
    return idx
