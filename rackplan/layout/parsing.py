"""Layout parsing — convert validated document dicts into Layout dataclasses.

Input is expected to have passed migration; these functions do not
re-check invariants.
"""

from __future__ import annotations

from rackplan.catalog.loader import parse_device_type

from .models import Layout, LayoutSettings, PlacedDevice, Rack, RackGroup


_DEVICE_FIELDS = {
    "id", "device_type", "position", "face", "name", "notes", "ip",
    "slot_position", "container_id", "slot_id",
}
_RACK_FIELDS = {
    "id", "name", "height", "width", "position", "desc_units", "show_rear",
    "form_factor", "starting_unit", "devices", "notes",
}
_LAYOUT_FIELDS = {"version", "name", "racks", "device_types", "rack_groups", "settings"}


def _extra(data: dict, known: set[str]) -> dict:
    return {k: v for k, v in data.items() if k not in known}


def parse_placed_device(data: dict) -> PlacedDevice:
    return PlacedDevice(
        id=data["id"],
        device_type=data["device_type"],
        position=int(data["position"]),
        face=data.get("face", "front"),
        name=data.get("name"),
        notes=data.get("notes"),
        ip=data.get("ip"),
        slot_position=data.get("slot_position"),
        container_id=data.get("container_id"),
        slot_id=data.get("slot_id"),
        extra=_extra(data, _DEVICE_FIELDS),
    )


def parse_rack(data: dict) -> Rack:
    return Rack(
        id=data["id"],
        name=data["name"],
        height=int(data["height"]),
        width=int(data.get("width", 19)),
        position=int(data.get("position", 0)),
        desc_units=bool(data.get("desc_units", False)),
        show_rear=bool(data.get("show_rear", True)),
        form_factor=data.get("form_factor", "4-post-cabinet"),
        starting_unit=int(data.get("starting_unit", 1)),
        devices=[parse_placed_device(d) for d in data.get("devices", [])],
        notes=data.get("notes"),
        extra=_extra(data, _RACK_FIELDS),
    )


def parse_rack_group(data: dict) -> RackGroup:
    return RackGroup(
        id=data["id"],
        rack_ids=list(data["rack_ids"]),
        name=data.get("name"),
        layout_preset=data.get("layout_preset"),
    )


def parse_settings(data: dict | None) -> LayoutSettings:
    data = data or {}
    return LayoutSettings(
        display_mode=data.get("display_mode", "label"),
        show_labels_on_images=bool(data.get("show_labels_on_images", False)),
        extra=_extra(data, {"display_mode", "show_labels_on_images"}),
    )


def parse_layout(data: dict) -> Layout:
    """Parse a validated layout document into a Layout."""
    return Layout(
        version=data["version"],
        name=data["name"],
        racks=[parse_rack(r) for r in data["racks"]],
        device_types=[parse_device_type(dt) for dt in data.get("device_types", [])],
        rack_groups=[parse_rack_group(g) for g in data.get("rack_groups") or []],
        settings=parse_settings(data.get("settings")),
        extra=_extra(data, _LAYOUT_FIELDS),
    )
