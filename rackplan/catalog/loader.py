"""Catalog loader — reads brand packs from packs/*.json, parses and validates them."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from rackplan.units import is_half_unit_multiple

from .models import (
    DEVICE_CATEGORIES, WEIGHT_UNITS,
    BrandPack, CatalogResult, DeviceType, Slot, ValidationError,
)


log = logging.getLogger("rackplan.catalog")

PACKS_DIR = Path(__file__).resolve().parent / "packs"

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
HEX_COLOUR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")

_KNOWN_FIELDS = {
    "slug", "u_height", "category", "colour", "manufacturer", "model",
    "is_full_depth", "weight", "weight_unit", "slot_width", "slots",
}


# ── Validation ─────────────────────────────────────────────────────

def validate_device_type(dt: DeviceType) -> list[ValidationError]:
    """Run all validation checks on a single device type."""
    errs: list[ValidationError] = []
    slug = dt.slug

    if not SLUG_PATTERN.match(slug or ""):
        errs.append(ValidationError(slug, "slug",
                                    "Must be lowercase with single hyphens only"))

    if dt.u_height < 0.5 or dt.u_height > 50:
        errs.append(ValidationError(slug, "u_height", "Must be between 0.5 and 50"))
    elif not is_half_unit_multiple(dt.u_height):
        errs.append(ValidationError(slug, "u_height", "Must be a multiple of 0.5U"))

    if dt.category not in DEVICE_CATEGORIES:
        errs.append(ValidationError(slug, "category", f"Unknown category '{dt.category}'"))

    if not HEX_COLOUR_PATTERN.match(dt.colour or ""):
        errs.append(ValidationError(slug, "colour", f"Invalid hex colour '{dt.colour}'"))

    if dt.weight_unit is not None and dt.weight_unit not in WEIGHT_UNITS:
        errs.append(ValidationError(slug, "weight_unit", f"Unknown unit '{dt.weight_unit}'"))

    if dt.slot_width is not None and dt.slot_width not in (1, 2):
        errs.append(ValidationError(slug, "slot_width", "Must be 1 or 2"))

    # Slot IDs unique, allow-lists reference real categories
    seen: set[str] = set()
    for slot in dt.slots or ():
        if slot.id in seen:
            errs.append(ValidationError(slug, f"slots.{slot.id}", "Duplicate slot ID"))
        seen.add(slot.id)
        for cat in slot.accepts or ():
            if cat not in DEVICE_CATEGORIES:
                errs.append(ValidationError(slug, f"slots.{slot.id}.accepts",
                                            f"Unknown category '{cat}'"))

    return errs


# ── Parsing ────────────────────────────────────────────────────────

def parse_slot(data: dict) -> Slot:
    pos = data.get("position", [0, 0])
    if isinstance(pos, dict):
        pos = [pos.get("row", 0), pos.get("col", 0)]
    return Slot(
        id=data["id"],
        position=(int(pos[0]), int(pos[1])),
        name=data.get("name"),
        width_fraction=data.get("width_fraction"),
        height_units=data.get("height_units"),
        accepts=list(data["accepts"]) if data.get("accepts") else None,
    )


def parse_device_type(data: dict) -> DeviceType:
    """Build a DeviceType from a document / brand-pack dict."""
    return DeviceType(
        slug=data["slug"],
        u_height=float(data["u_height"]),
        category=data["category"],
        colour=data["colour"],
        manufacturer=data.get("manufacturer"),
        model=data.get("model"),
        is_full_depth=data.get("is_full_depth"),
        weight=data.get("weight"),
        weight_unit=data.get("weight_unit"),
        slot_width=data.get("slot_width"),
        slots=[parse_slot(s) for s in data["slots"]] if data.get("slots") else None,
        extra={k: v for k, v in data.items() if k not in _KNOWN_FIELDS},
    )


# ── Public API ─────────────────────────────────────────────────────

def load_catalog(packs_dir: Path | None = None) -> CatalogResult:
    """Load all packs/*.json brand packs, parse and validate.

    Returns a CatalogResult with packs and any validation errors.
    Device types that fail to parse are skipped (error recorded).
    Device types that parse but have validation issues are still included.
    """
    d = packs_dir or PACKS_DIR
    packs: list[BrandPack] = []
    errors: list[ValidationError] = []

    json_files = sorted(d.glob("*.json"))
    if not json_files:
        errors.append(ValidationError("_catalog", "files", f"No .json files found in {d}"))
        return CatalogResult(packs=packs, errors=errors)

    for path in json_files:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            errors.append(ValidationError(path.stem, "json", f"Parse error: {exc}"))
            continue
        except OSError as exc:
            errors.append(ValidationError(path.stem, "file", f"Read error: {exc}"))
            continue

        devices: list[DeviceType] = []
        for i, entry in enumerate(raw.get("devices", [])):
            try:
                dt = parse_device_type(entry)
            except (KeyError, TypeError, ValueError) as exc:
                errors.append(ValidationError(
                    entry.get("slug", f"{path.stem}[{i}]") if isinstance(entry, dict) else f"{path.stem}[{i}]",
                    "parse", f"Missing/invalid field: {exc}"))
                continue
            errors.extend(validate_device_type(dt))
            devices.append(dt)

        packs.append(BrandPack(
            id=raw.get("id", path.stem),
            title=raw.get("title", path.stem),
            devices=devices,
            source_file=str(path),
        ))

    # Check for duplicate slugs across packs
    slug_counts: dict[str, int] = {}
    for pack in packs:
        for dt in pack.devices:
            slug_counts[dt.slug] = slug_counts.get(dt.slug, 0) + 1
    for slug, count in slug_counts.items():
        if count > 1:
            errors.append(ValidationError(slug, "slug", f"Duplicate slug (appears {count} times)"))

    log.debug("Loaded %d brand packs (%d errors)", len(packs), len(errors))
    return CatalogResult(packs=packs, errors=errors)


def get_device_type(
    catalog: list[DeviceType] | CatalogResult, slug: str,
) -> DeviceType | None:
    """Look up a device type by slug. Returns None if not found."""
    types = catalog.device_types if isinstance(catalog, CatalogResult) else catalog
    for dt in types:
        if dt.slug == slug:
            return dt
    return None


def find_device_type(
    slug: str,
    layout_types: list[DeviceType],
    brand_catalog: CatalogResult | None = None,
) -> DeviceType | None:
    """Resolve a slug against the layout first, then the brand packs."""
    found = get_device_type(layout_types, slug)
    if found is None and brand_catalog is not None:
        found = get_device_type(brand_catalog, slug)
    return found
