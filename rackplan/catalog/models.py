"""Catalog dataclasses — typed representations of device types and brand packs."""

from __future__ import annotations

from dataclasses import dataclass, field

from rackplan.units import height_to_internal


DEVICE_CATEGORIES = (
    "server", "network", "patch-panel", "power", "storage", "kvm",
    "av-media", "cooling", "shelf", "blank", "cable-management", "other",
)

# Default colour per category (muted palette, readable on dark backgrounds)
CATEGORY_COLOURS: dict[str, str] = {
    "server": "#4A7A8A",
    "network": "#7B6BA8",
    "storage": "#3D7A4A",
    "power": "#A84A4A",
    "kvm": "#A87A4A",
    "av-media": "#A85A7A",
    "cooling": "#8A8A4A",
    "shelf": "#6272A4",
    "blank": "#44475A",
    "cable-management": "#6272A4",
    "patch-panel": "#6272A4",
    "other": "#6272A4",
}

WEIGHT_UNITS = ("kg", "lb")


@dataclass
class Slot:
    """A named sub-position inside a container device type."""
    id: str
    position: tuple[int, int] = (0, 0)      # (row, col) in the container grid
    name: str | None = None
    width_fraction: float | None = None     # 0.5 = half the container width
    height_units: float | None = None
    accepts: list[str] | None = None        # allowed child categories


@dataclass
class DeviceType:
    slug: str
    u_height: float                         # rack units, multiple of 0.5
    category: str
    colour: str
    manufacturer: str | None = None
    model: str | None = None
    is_full_depth: bool | None = None       # None means full depth
    weight: float | None = None
    weight_unit: str | None = None
    slot_width: int | None = None           # 1 = half width, 2 = full width
    slots: list[Slot] | None = None
    extra: dict = field(default_factory=dict)   # passthrough document fields

    @property
    def height_internal(self) -> int:
        return height_to_internal(self.u_height)

    @property
    def full_depth(self) -> bool:
        return self.is_full_depth is not False

    @property
    def half_width(self) -> bool:
        return self.slot_width == 1

    @property
    def is_container(self) -> bool:
        return bool(self.slots)

    @property
    def display_name(self) -> str:
        return self.model or self.slug

    def get_slot(self, slot_id: str) -> Slot | None:
        for s in self.slots or ():
            if s.id == slot_id:
                return s
        return None


@dataclass
class BrandPack:
    id: str
    title: str
    devices: list[DeviceType]
    source_file: str = ""


@dataclass
class ValidationError:
    slug: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.slug}] {self.field}: {self.message}"


@dataclass
class CatalogResult:
    """Result of loading the brand packs — device types + any validation errors."""
    packs: list[BrandPack]
    errors: list[ValidationError]

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0

    @property
    def device_types(self) -> list[DeviceType]:
        return [dt for p in self.packs for dt in p.devices]
