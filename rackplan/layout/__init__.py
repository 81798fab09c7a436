"""Layout document — dataclasses, factories, parsing, and serialization."""

from .models import (
    PlacedDevice, Rack, RackGroup, LayoutSettings, Layout,
    DEVICE_FACES, SLOT_POSITIONS, FORM_FACTORS, DISPLAY_MODES, RACK_GROUP_PRESETS,
)
from .factory import (
    create_layout, create_rack, create_device, create_device_type,
    generate_id, generate_device_slug, slugify,
)
from .parsing import parse_layout
from .serialization import layout_to_dict, dump_layout_json

__all__ = [
    # Models
    "PlacedDevice", "Rack", "RackGroup", "LayoutSettings", "Layout",
    "DEVICE_FACES", "SLOT_POSITIONS", "FORM_FACTORS", "DISPLAY_MODES",
    "RACK_GROUP_PRESETS",
    # Factories
    "create_layout", "create_rack", "create_device", "create_device_type",
    "generate_id", "generate_device_slug", "slugify",
    # Parsing / Serialization
    "parse_layout", "layout_to_dict", "dump_layout_json",
]
