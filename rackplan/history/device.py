"""Commands for placed devices.

Devices are addressed by ``(rack_id, device_id)`` so a command stays valid
when other commands shift list indices.  Everything a command restores on
undo is deep-copied when the command is built.
"""

from __future__ import annotations

import copy

from rackplan.layout import operations as ops
from rackplan.layout.models import Layout, PlacedDevice

from .command import Command


def _normalize_text(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def create_place_device_command(
    layout: Layout,
    rack_id: str,
    device: PlacedDevice,
    device_name: str = "device",
) -> Command:
    placed = copy.deepcopy(device)

    def do():
        ops.insert_device(ops.require_rack(layout, rack_id), placed)

    def undo():
        rack = ops.require_rack(layout, rack_id)
        if ops.device_index(rack, placed.id) >= 0:
            ops.remove_device(rack, placed.id)

    return Command("PLACE_DEVICE", f"Place {device_name}", do, undo)


def create_move_device_command(
    layout: Layout,
    rack_id: str,
    device_id: str,
    old_position: int,
    new_position: int,
    device_name: str = "device",
) -> Command:
    def do():
        ops.update_device(ops.require_rack(layout, rack_id), device_id, position=new_position)

    def undo():
        ops.update_device(ops.require_rack(layout, rack_id), device_id, position=old_position)

    return Command("MOVE_DEVICE", f"Move {device_name}", do, undo)


def create_remove_device_command(
    layout: Layout,
    rack_id: str,
    device_id: str,
    device_name: str = "device",
) -> Command:
    """Remove a device, and its children when it is a container.

    Undo reinserts every removed entry at its original index.
    """
    rack = ops.require_rack(layout, rack_id)
    removed = [
        (i, copy.deepcopy(d)) for i, d in enumerate(rack.devices)
        if d.id == device_id or d.container_id == device_id
    ]
    if not any(d.id == device_id for _, d in removed):
        raise LookupError(f"Device {device_id} not found in rack {rack_id}")

    def do():
        r = ops.require_rack(layout, rack_id)
        for _, d in reversed(removed):
            ops.remove_device(r, d.id)

    def undo():
        r = ops.require_rack(layout, rack_id)
        for i, d in removed:
            ops.insert_device(r, copy.deepcopy(d), i)

    return Command("REMOVE_DEVICE", f"Remove {device_name}", do, undo)


def _field_command(
    type_: str, description: str,
    layout: Layout, rack_id: str, device_id: str,
    field_name: str, old, new,
) -> Command:
    def do():
        ops.update_device(ops.require_rack(layout, rack_id), device_id, **{field_name: new})

    def undo():
        ops.update_device(ops.require_rack(layout, rack_id), device_id, **{field_name: old})

    return Command(type_, description, do, undo)


def create_update_device_face_command(
    layout: Layout, rack_id: str, device_id: str,
    old_face: str, new_face: str, device_name: str = "device",
) -> Command:
    return _field_command(
        "UPDATE_DEVICE_FACE", f"Flip {device_name}",
        layout, rack_id, device_id, "face", old_face, new_face,
    )


def create_update_device_name_command(
    layout: Layout, rack_id: str, device_id: str,
    old_name: str | None, new_name: str | None, device_type_name: str = "device",
) -> Command:
    new_name = _normalize_text(new_name)
    return _field_command(
        "UPDATE_DEVICE_NAME", f"Rename {new_name or device_type_name}",
        layout, rack_id, device_id, "name", old_name, new_name,
    )


def create_update_device_slot_position_command(
    layout: Layout, rack_id: str, device_id: str,
    old_slot: str | None, new_slot: str, device_name: str = "device",
) -> Command:
    return _field_command(
        "UPDATE_DEVICE_SLOT_POSITION", f"Move {device_name} to {new_slot} slot",
        layout, rack_id, device_id, "slot_position", old_slot, new_slot,
    )


def create_update_device_notes_command(
    layout: Layout, rack_id: str, device_id: str,
    old_values: dict, new_values: dict, device_name: str = "device",
) -> Command:
    """Update free-form metadata (``notes``, ``ip``) on a placed device."""
    before = {k: old_values.get(k) for k in new_values}
    after = {k: _normalize_text(v) for k, v in new_values.items()}

    def do():
        ops.update_device(ops.require_rack(layout, rack_id), device_id, **after)

    def undo():
        ops.update_device(ops.require_rack(layout, rack_id), device_id, **before)

    return Command("UPDATE_DEVICE_NOTES", f"Edit {device_name} details", do, undo)
