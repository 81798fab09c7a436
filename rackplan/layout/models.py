"""Layout dataclasses — the document aggregate the editor mutates."""

from __future__ import annotations

from dataclasses import dataclass, field

from rackplan.catalog.models import DeviceType


DEVICE_FACES = ("front", "rear", "both")
SLOT_POSITIONS = ("left", "right", "full")
FORM_FACTORS = ("2-post", "4-post", "4-post-cabinet", "wall-mount", "open-frame")
DISPLAY_MODES = ("label", "image", "image-label")
RACK_GROUP_PRESETS = ("bayed", "row", "custom")


@dataclass
class PlacedDevice:
    """A device instance in a rack.

    ``position`` is in internal units.  Rack-level devices use absolute
    positions (6 = U1); container children are relative to the container
    base and start at 0.
    """
    id: str
    device_type: str                    # DeviceType slug
    position: int
    face: str = "front"                 # "front" | "rear" | "both"
    name: str | None = None
    notes: str | None = None
    ip: str | None = None
    slot_position: str | None = None    # "left" | "right" | "full"
    container_id: str | None = None     # parent PlacedDevice id
    slot_id: str | None = None          # Slot id within the parent
    extra: dict = field(default_factory=dict)

    @property
    def is_child(self) -> bool:
        return self.container_id is not None


@dataclass
class Rack:
    id: str
    name: str
    height: int                         # rack units
    width: int = 19                     # inches
    position: int = 0                   # order on the canvas
    desc_units: bool = False            # True = U1 at the top
    show_rear: bool = True
    form_factor: str = "4-post-cabinet"
    starting_unit: int = 1
    devices: list[PlacedDevice] = field(default_factory=list)
    notes: str | None = None
    extra: dict = field(default_factory=dict)


@dataclass
class RackGroup:
    id: str
    rack_ids: list[str]
    name: str | None = None
    layout_preset: str | None = None    # "bayed" | "row" | "custom"


@dataclass
class LayoutSettings:
    display_mode: str = "label"
    show_labels_on_images: bool = False
    extra: dict = field(default_factory=dict)


@dataclass
class Layout:
    version: str
    name: str
    racks: list[Rack]
    device_types: list[DeviceType] = field(default_factory=list)
    rack_groups: list[RackGroup] = field(default_factory=list)
    settings: LayoutSettings = field(default_factory=LayoutSettings)
    extra: dict = field(default_factory=dict)

    def get_rack(self, rack_id: str) -> Rack | None:
        return next((r for r in self.racks if r.id == rack_id), None)

    def get_device_type(self, slug: str) -> DeviceType | None:
        return next((dt for dt in self.device_types if dt.slug == slug), None)
