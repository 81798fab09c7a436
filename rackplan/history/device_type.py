"""Commands for the layout's device-type catalog."""

from __future__ import annotations

import copy
import dataclasses

from rackplan.catalog.models import DeviceType
from rackplan.layout import operations as ops
from rackplan.layout.models import Layout

from .command import Command


_TYPE_FIELDS = {f.name for f in dataclasses.fields(DeviceType)} - {"slug", "extra"}


def _apply(device_type: DeviceType, values: dict) -> None:
    for key, value in values.items():
        if key in _TYPE_FIELDS:
            setattr(device_type, key, copy.deepcopy(value))
        elif value is None:
            device_type.extra.pop(key, None)
        else:
            device_type.extra[key] = copy.deepcopy(value)


def _require_type(layout: Layout, slug: str) -> DeviceType:
    dt = layout.get_device_type(slug)
    if dt is None:
        raise LookupError(f"Device type not found: {slug}")
    return dt


def create_add_device_type_command(layout: Layout, device_type: DeviceType) -> Command:
    added = copy.deepcopy(device_type)

    def do():
        ops.add_device_type(layout, copy.deepcopy(added))

    def undo():
        ops.remove_device_type(layout, added.slug)

    return Command("ADD_DEVICE_TYPE", f"Add {added.display_name}", do, undo)


def create_update_device_type_command(
    layout: Layout, slug: str, updates: dict,
) -> Command:
    """Update fields of a device type.  The slug itself never changes."""
    dt = _require_type(layout, slug)
    before = {
        k: copy.deepcopy(getattr(dt, k) if k in _TYPE_FIELDS else dt.extra.get(k))
        for k in updates
    }
    after = copy.deepcopy(updates)

    def do():
        _apply(_require_type(layout, slug), after)

    def undo():
        _apply(_require_type(layout, slug), before)

    return Command("UPDATE_DEVICE_TYPE", f"Update {slug}", do, undo)


def create_delete_device_type_command(layout: Layout, slug: str) -> Command:
    """Delete a device type and every placed instance of it in every rack.
    Children inside a deleted container go with it.

    Undo restores the type at its catalog index and each instance at its
    original rack index with its position, face and name intact.
    """
    dt = _require_type(layout, slug)
    type_index = layout.device_types.index(dt)
    saved_type = copy.deepcopy(dt)
    instances = [
        (rack_id, i, copy.deepcopy(d))
        for rack_id, i, d in ops.placed_devices_for_type(layout, slug)
    ]

    def do():
        ops.remove_device_type(layout, slug)

    def undo():
        ops.add_device_type(layout, copy.deepcopy(saved_type), type_index)
        for rack_id, i, d in instances:
            ops.insert_device(ops.require_rack(layout, rack_id), copy.deepcopy(d), i)

    return Command("DELETE_DEVICE_TYPE", f"Delete {saved_type.display_name}", do, undo)
