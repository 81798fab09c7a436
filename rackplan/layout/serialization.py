"""Layout serialization — convert Layout to the JSON document format."""

from __future__ import annotations

import json
from typing import Any

from rackplan.catalog.serialization import device_type_to_dict

from .models import Layout, LayoutSettings, PlacedDevice, Rack, RackGroup


def placed_device_to_dict(d: PlacedDevice) -> dict:
    out: dict[str, Any] = {
        "id": d.id,
        "device_type": d.device_type,
        "position": d.position,
        "face": d.face,
        **({"name": d.name} if d.name else {}),
        **({"notes": d.notes} if d.notes else {}),
        **({"ip": d.ip} if d.ip else {}),
        **({"slot_position": d.slot_position} if d.slot_position else {}),
        **({"container_id": d.container_id} if d.container_id is not None else {}),
        **({"slot_id": d.slot_id} if d.slot_id is not None else {}),
    }
    for key, value in d.extra.items():
        out.setdefault(key, value)
    return out


def rack_to_dict(r: Rack) -> dict:
    out: dict[str, Any] = {
        "id": r.id,
        "name": r.name,
        "height": r.height,
        "width": r.width,
        "position": r.position,
        "desc_units": r.desc_units,
        "show_rear": r.show_rear,
        "form_factor": r.form_factor,
        "starting_unit": r.starting_unit,
        "devices": [placed_device_to_dict(d) for d in r.devices],
        **({"notes": r.notes} if r.notes else {}),
    }
    for key, value in r.extra.items():
        out.setdefault(key, value)
    return out


def rack_group_to_dict(g: RackGroup) -> dict:
    return {
        "id": g.id,
        "rack_ids": list(g.rack_ids),
        **({"name": g.name} if g.name is not None else {}),
        **({"layout_preset": g.layout_preset} if g.layout_preset else {}),
    }


def settings_to_dict(s: LayoutSettings) -> dict:
    return {
        "display_mode": s.display_mode,
        "show_labels_on_images": s.show_labels_on_images,
        **s.extra,
    }


def layout_to_dict(layout: Layout) -> dict:
    """Convert a Layout to a JSON-serializable document."""
    out: dict[str, Any] = {
        "version": layout.version,
        "name": layout.name,
        "racks": [rack_to_dict(r) for r in layout.racks],
        "device_types": [device_type_to_dict(dt) for dt in layout.device_types],
        "settings": settings_to_dict(layout.settings),
    }
    # Only include rack_groups if present
    if layout.rack_groups:
        out["rack_groups"] = [rack_group_to_dict(g) for g in layout.rack_groups]
    for key, value in layout.extra.items():
        out.setdefault(key, value)
    return out


def dump_layout_json(layout: Layout, indent: int = 2) -> str:
    return json.dumps(layout_to_dict(layout), indent=indent, ensure_ascii=False)
