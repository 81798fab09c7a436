"""Layout factories — fresh layouts, racks, placed devices and device types."""

from __future__ import annotations

import re
import uuid

from rackplan.catalog.models import CATEGORY_COLOURS, DeviceType, Slot
from rackplan.config import (
    CURRENT_VERSION, DEFAULT_LAYOUT_NAME, DEFAULT_RACK_HEIGHT, DEFAULT_RACK_WIDTH,
)

from .models import Layout, LayoutSettings, PlacedDevice, Rack


def generate_id() -> str:
    """Random identifier for racks, groups and placed devices."""
    return str(uuid.uuid4())


def slugify(text: str) -> str:
    """Lowercase, hyphen-separated, no leading/trailing/double hyphens."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower().strip()).strip("-")
    return slug[:100].rstrip("-")


def generate_device_slug(
    manufacturer: str | None, model: str | None, name: str | None = None,
) -> str:
    """Slug from manufacturer + model, falling back to the display name."""
    if manufacturer and model:
        slug = slugify(f"{manufacturer} {model}")
    else:
        slug = slugify(model or name or "")
    return slug or f"device-{uuid.uuid4().hex[:8]}"


def create_layout(name: str = DEFAULT_LAYOUT_NAME) -> Layout:
    """New layout: one default rack, empty device catalog."""
    return Layout(
        version=CURRENT_VERSION,
        name=name,
        racks=[create_rack(name, DEFAULT_RACK_HEIGHT, rack_id="rack-1")],
        device_types=[],
        settings=LayoutSettings(display_mode="label", show_labels_on_images=False),
    )


def create_rack(
    name: str,
    height: int,
    *,
    width: int = DEFAULT_RACK_WIDTH,
    form_factor: str = "4-post-cabinet",
    desc_units: bool = False,
    starting_unit: int = 1,
    show_rear: bool = True,
    position: int = 0,
    rack_id: str | None = None,
) -> Rack:
    return Rack(
        id=rack_id or generate_id(),
        name=name,
        height=height,
        width=width,
        position=position,
        desc_units=desc_units,
        show_rear=show_rear,
        form_factor=form_factor,
        starting_unit=starting_unit,
        devices=[],
    )


def create_device(
    device_type: str,
    position: int,
    face: str = "front",
    name: str | None = None,
    **kwargs,
) -> PlacedDevice:
    """Placed device with a generated id. Extra keyword args set optional fields."""
    return PlacedDevice(
        id=kwargs.pop("id", None) or generate_id(),
        device_type=device_type,
        position=position,
        face=face,
        name=name,
        **kwargs,
    )


def create_device_type(
    name: str,
    u_height: float,
    category: str,
    colour: str | None = None,
    *,
    manufacturer: str | None = None,
    model: str | None = None,
    is_full_depth: bool | None = None,
    weight: float | None = None,
    weight_unit: str | None = None,
    slot_width: int | None = None,
    slots: list[Slot] | None = None,
) -> DeviceType:
    """Device type with an auto-generated slug.

    Shelves default to full depth when depth is not given explicitly.
    """
    if is_full_depth is None and category == "shelf":
        is_full_depth = True
    return DeviceType(
        slug=generate_device_slug(manufacturer, model, name),
        u_height=u_height,
        category=category,
        colour=colour or CATEGORY_COLOURS.get(category, CATEGORY_COLOURS["other"]),
        manufacturer=manufacturer,
        model=model or name,
        is_full_depth=is_full_depth,
        weight=weight,
        weight_unit=weight_unit,
        slot_width=slot_width,
        slots=slots,
    )
