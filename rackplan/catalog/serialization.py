"""Catalog serialization — convert dataclasses to JSON-safe dicts."""

from __future__ import annotations

from typing import Any

from .models import CatalogResult, DeviceType, Slot


def catalog_to_dict(result: CatalogResult) -> dict:
    """Serialize a CatalogResult to a JSON-safe dict for the web API."""
    return {
        "ok": result.ok,
        "device_type_count": len(result.device_types),
        "packs": [
            {
                "id": p.id,
                "title": p.title,
                "devices": [device_type_to_dict(dt) for dt in p.devices],
            }
            for p in result.packs
        ],
        "errors": [{"slug": e.slug, "field": e.field, "message": e.message}
                   for e in result.errors],
    }


def slot_to_dict(s: Slot) -> dict:
    d: dict[str, Any] = {"id": s.id, "position": list(s.position)}
    if s.name is not None:
        d["name"] = s.name
    if s.width_fraction is not None:
        d["width_fraction"] = s.width_fraction
    if s.height_units is not None:
        d["height_units"] = s.height_units
    if s.accepts:
        d["accepts"] = list(s.accepts)
    return d


def device_type_to_dict(dt: DeviceType) -> dict:
    """Serialize a DeviceType to a JSON-safe dict, omitting unset fields."""
    d: dict[str, Any] = {
        "slug": dt.slug,
        "u_height": dt.u_height,
        "category": dt.category,
        "colour": dt.colour,
    }

    # Optional fields
    for key in ("manufacturer", "model", "is_full_depth", "weight",
                "weight_unit", "slot_width"):
        value = getattr(dt, key)
        if value is not None:
            d[key] = value
    if dt.slots:
        d["slots"] = [slot_to_dict(s) for s in dt.slots]

    # Passthrough fields the model does not interpret
    for key, value in dt.extra.items():
        d.setdefault(key, value)

    return d
