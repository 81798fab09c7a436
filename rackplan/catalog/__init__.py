"""Device catalog — load, validate, query, and serialize brand packs."""

from .models import (
    Slot, DeviceType, BrandPack, ValidationError, CatalogResult,
    CATEGORY_COLOURS, DEVICE_CATEGORIES,
)
from .loader import (
    load_catalog, get_device_type, find_device_type,
    parse_device_type, validate_device_type, PACKS_DIR,
)
from .serialization import catalog_to_dict, device_type_to_dict

__all__ = [
    # Models
    "Slot", "DeviceType", "BrandPack", "ValidationError", "CatalogResult",
    "CATEGORY_COLOURS", "DEVICE_CATEGORIES",
    # Loader
    "load_catalog", "get_device_type", "find_device_type",
    "parse_device_type", "validate_device_type", "PACKS_DIR",
    # Serialization
    "catalog_to_dict", "device_type_to_dict",
]
