"""Pydantic models for the layout document.

Unknown fields are kept (``extra="allow"``) so documents written by newer
versions survive a load/save round trip.  Cross-record checks (unique
slugs, container references, rack groups) live in the migration stages.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from rackplan.catalog.models import DEVICE_CATEGORIES


Slug = Annotated[str, StringConstraints(min_length=1, max_length=100,
                                         pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")]
HexColour = Annotated[str, StringConstraints(pattern=r"^#[0-9a-fA-F]{6}$")]

Category = Literal[DEVICE_CATEGORIES]  # type: ignore[valid-type]
Face = Literal["front", "rear", "both"]
SlotPosition = Literal["left", "right", "full"]
FormFactor = Literal["2-post", "4-post", "4-post-cabinet", "wall-mount", "open-frame"]
DisplayMode = Literal["label", "image", "image-label"]
GroupPreset = Literal["bayed", "row", "custom"]


class _Doc(BaseModel):
    model_config = ConfigDict(extra="allow")


class SlotModel(_Doc):
    id: str = Field(min_length=1)
    name: Optional[str] = None
    position: Optional[dict | list] = None
    width_fraction: Optional[float] = Field(default=None, gt=0, le=1)
    height_units: Optional[float] = Field(default=None, gt=0)
    accepts: Optional[list[Category]] = None


class DeviceTypeModel(_Doc):
    slug: Slug
    u_height: float = Field(ge=0.5, le=50)
    category: Category
    colour: HexColour
    manufacturer: Optional[str] = Field(default=None, max_length=100)
    model: Optional[str] = Field(default=None, max_length=100)
    is_full_depth: Optional[bool] = None
    weight: Optional[float] = Field(default=None, gt=0)
    weight_unit: Optional[Literal["kg", "lb"]] = None
    slot_width: Optional[Literal[1, 2]] = None
    slots: Optional[list[SlotModel]] = None

    @field_validator("u_height")
    @classmethod
    def _half_unit(cls, v: float) -> float:
        if (v * 2) != int(v * 2):
            raise ValueError("Height must be a multiple of 0.5U")
        return v


class PlacedDeviceModel(_Doc):
    id: str = Field(min_length=1)
    device_type: Slug
    position: int = Field(ge=0)
    face: Face = "front"
    name: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = Field(default=None, max_length=1000)
    ip: Optional[str] = None
    slot_position: Optional[SlotPosition] = None
    container_id: Optional[str] = None
    slot_id: Optional[str] = None


class RackModel(_Doc):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=100)
    height: int = Field(ge=1, le=100)
    width: Literal[10, 19, 21, 23] = 19
    position: int = Field(default=0, ge=0)
    desc_units: bool = False
    show_rear: bool = True
    form_factor: FormFactor = "4-post-cabinet"
    starting_unit: int = Field(default=1, ge=1)
    devices: list[PlacedDeviceModel] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=1000)


class RackGroupModel(_Doc):
    id: str = Field(min_length=1)
    name: Optional[str] = Field(default=None, max_length=100)
    rack_ids: list[str] = Field(min_length=1)
    layout_preset: Optional[GroupPreset] = None


class SettingsModel(_Doc):
    display_mode: DisplayMode = "label"
    show_labels_on_images: bool = False


class LayoutModel(_Doc):
    version: str
    name: str = Field(min_length=1, max_length=100)
    racks: list[RackModel] = Field(min_length=1)
    device_types: list[DeviceTypeModel] = Field(default_factory=list)
    rack_groups: Optional[list[RackGroupModel]] = None
    settings: SettingsModel = Field(default_factory=SettingsModel)
