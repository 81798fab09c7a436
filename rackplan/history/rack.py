"""Commands for racks."""

from __future__ import annotations

import copy

from rackplan.layout import operations as ops
from rackplan.layout.models import Layout, Rack

from .command import Command


# Fields a rack update may touch; devices go through device commands.
RACK_SETTINGS = (
    "name", "height", "width", "position", "desc_units", "show_rear",
    "form_factor", "starting_unit", "notes",
)


def _apply(rack: Rack, values: dict) -> None:
    for key, value in values.items():
        if key not in RACK_SETTINGS:
            raise KeyError(f"Not a rack setting: {key}")
        setattr(rack, key, value)


def _rack_index(layout: Layout, rack_id: str) -> int:
    for i, r in enumerate(layout.racks):
        if r.id == rack_id:
            return i
    raise LookupError(f"Rack not found: {rack_id}")


def create_update_rack_command(
    layout: Layout, rack_id: str, before: dict, after: dict,
) -> Command:
    before = dict(before)
    after = dict(after)

    def do():
        _apply(ops.require_rack(layout, rack_id), after)

    def undo():
        _apply(ops.require_rack(layout, rack_id), before)

    return Command("UPDATE_RACK", "Update rack settings", do, undo)


def create_replace_rack_command(layout: Layout, rack_id: str, new_rack: Rack) -> Command:
    old = copy.deepcopy(ops.require_rack(layout, rack_id))
    new = copy.deepcopy(new_rack)

    def swap(current_id: str, rack: Rack):
        layout.racks[_rack_index(layout, current_id)] = copy.deepcopy(rack)

    return Command(
        "REPLACE_RACK", "Replace rack",
        lambda: swap(old.id, new),
        lambda: swap(new.id, old),
    )


def create_clear_rack_command(layout: Layout, rack_id: str) -> Command:
    saved = copy.deepcopy(ops.require_rack(layout, rack_id).devices)
    n = len(saved)

    def do():
        ops.require_rack(layout, rack_id).devices = []

    def undo():
        ops.require_rack(layout, rack_id).devices = copy.deepcopy(saved)

    noun = "device" if n == 1 else "devices"
    return Command("CLEAR_RACK", f"Clear rack ({n} {noun})", do, undo)


def create_add_rack_command(layout: Layout, rack: Rack) -> Command:
    added = copy.deepcopy(rack)

    def do():
        layout.racks.append(copy.deepcopy(added))

    def undo():
        layout.racks.pop(_rack_index(layout, added.id))

    return Command("ADD_RACK", f"Add {added.name}", do, undo)


def create_delete_rack_command(layout: Layout, rack_id: str) -> Command:
    """Delete a rack and drop it from any rack group; empty groups go too."""
    index = _rack_index(layout, rack_id)
    saved = copy.deepcopy(layout.racks[index])
    saved_groups = copy.deepcopy(layout.rack_groups)

    def do():
        layout.racks.pop(_rack_index(layout, rack_id))
        groups = []
        for g in layout.rack_groups:
            g.rack_ids = [rid for rid in g.rack_ids if rid != rack_id]
            if g.rack_ids:
                groups.append(g)
        layout.rack_groups = groups

    def undo():
        layout.racks.insert(index, copy.deepcopy(saved))
        layout.rack_groups = copy.deepcopy(saved_groups)

    return Command("DELETE_RACK", f"Delete {saved.name}", do, undo)
