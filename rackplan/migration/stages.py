"""Migration stages.

Each stage takes the raw document dict (already deep-copied by the
caller), and either normalizes it in place or raises a ``MigrationError``
subclass listing every offending field.  The order matters: structure,
legacy shape, position rescaling, schema + references, rack groups.
"""

from __future__ import annotations

import logging
from collections import Counter

from pydantic import ValidationError as PydanticValidationError

from rackplan.config import LAYOUT_RULES, UNITS_PER_U
from rackplan.layout.factory import generate_id

from .errors import FieldError, LayoutValidationError, ReferenceIntegrityError
from .schema import LayoutModel
from .versions import is_older


log = logging.getLogger("rackplan.migration")


# ── 1. Structure ───────────────────────────────────────────────────


def check_structure(raw) -> None:
    """The document must be a mapping holding a ``racks`` list or a legacy
    ``rack`` mapping; device lists must be lists of mappings."""
    if not isinstance(raw, dict):
        raise LayoutValidationError([FieldError("", "Layout must be an object")])

    errors: list[FieldError] = []
    if "racks" in raw:
        if not isinstance(raw["racks"], list):
            errors.append(FieldError("racks", "Must be a list"))
            racks = []
        else:
            racks = list(enumerate(raw["racks"]))
        prefix = "racks"
    elif "rack" in raw:
        if not isinstance(raw["rack"], dict):
            raise LayoutValidationError([FieldError("rack", "Must be an object")])
        racks = [(None, raw["rack"])]
        prefix = "rack"
    else:
        raise LayoutValidationError([FieldError("racks", "Field required")])

    for i, rack in racks:
        path = prefix if i is None else f"{prefix}.{i}"
        if not isinstance(rack, dict):
            errors.append(FieldError(path, "Rack must be an object"))
            continue
        devices = rack.get("devices", [])
        if not isinstance(devices, list):
            errors.append(FieldError(f"{path}.devices", "Must be a list"))
            continue
        for j, d in enumerate(devices):
            if not isinstance(d, dict):
                errors.append(FieldError(f"{path}.devices.{j}", "Device must be an object"))

    for key in ("device_types", "rack_groups"):
        if raw.get(key) is not None and not isinstance(raw[key], list):
            errors.append(FieldError(key, "Must be a list"))

    if errors:
        raise LayoutValidationError(errors)


# ── 2. Legacy shape ────────────────────────────────────────────────


def promote_legacy_shape(raw: dict) -> bool:
    """Promote a single ``rack`` to ``racks=[rack]`` and fill in missing
    rack and device ids.  Returns True if anything changed."""
    changed = False
    if "racks" not in raw and "rack" in raw:
        raw["racks"] = [raw.pop("rack")]
        log.info("Promoted single-rack document to multi-rack shape")
        changed = True

    for rack in raw["racks"]:
        if not rack.get("id"):
            rack["id"] = generate_id()
            changed = True
        rack.pop("view", None)
        for d in rack.get("devices", []):
            if not d.get("id"):
                d["id"] = generate_id()
                changed = True
    return changed


# ── 3. Position rescaling ──────────────────────────────────────────


def _rack_level(rack: dict) -> list[dict]:
    return [d for d in rack.get("devices", []) if not d.get("container_id")]


def _looks_like_whole_units(rack: dict) -> bool:
    positions = [d.get("position") for d in _rack_level(rack)]
    positions = [p for p in positions if isinstance(p, (int, float))]
    if not positions:
        return False
    height = rack.get("height")
    if not isinstance(height, int):
        return False
    return min(positions) < UNITS_PER_U and all(1 <= p <= height for p in positions)


def rescale_positions(raw: dict) -> bool:
    """Multiply rack-level positions up to internal units.

    Documents older than the rescale version are always rescaled.  Newer
    documents are rescaled per rack when every rack-level position fits the
    rack as a whole-U value and at least one sits below U1.  Container
    children are never touched.  Returns True if any position changed.
    """
    if is_older(raw.get("version"), LAYOUT_RULES.position_rescale_version):
        for rack in raw["racks"]:
            for d in _rack_level(rack):
                if isinstance(d.get("position"), (int, float)):
                    d["position"] = int(round(d["position"] * UNITS_PER_U))
        log.info("Rescaled positions from version %s", raw.get("version") or "unversioned")
        return True

    changed = False
    for rack in raw["racks"]:
        if _looks_like_whole_units(rack):
            for d in _rack_level(rack):
                d["position"] = int(round(d["position"] * UNITS_PER_U))
            log.warning(
                "Rack %s of version %s document has whole-U positions; rescaled",
                rack.get("id"), raw.get("version"),
            )
            changed = True
    return changed


# ── 4. Schema + references ─────────────────────────────────────────


def _loc_to_path(loc) -> str:
    return ".".join(str(p) for p in loc)


def parse_schema(raw: dict) -> LayoutModel:
    try:
        return LayoutModel.model_validate(raw)
    except PydanticValidationError as exc:
        raise LayoutValidationError([
            FieldError(_loc_to_path(e["loc"]), e["msg"]) for e in exc.errors()
        ]) from exc


def check_references(doc: LayoutModel) -> None:
    """Unique slugs and rack ids; container children reference an existing
    container in the same rack and one of its slots; one nesting level."""
    errors: list[FieldError] = []

    for slug, n in Counter(dt.slug for dt in doc.device_types).items():
        if n > 1:
            errors.append(FieldError("device_types", f"Duplicate device type slug: {slug}"))
    for rack_id, n in Counter(r.id for r in doc.racks).items():
        if n > 1:
            errors.append(FieldError("racks", f"Duplicate rack id: {rack_id}"))

    types = {dt.slug: dt for dt in doc.device_types}
    for ri, rack in enumerate(doc.racks):
        by_id = {}
        for di, d in enumerate(rack.devices):
            if d.id in by_id:
                errors.append(FieldError(f"racks.{ri}.devices.{di}.id",
                                         f"Duplicate device id: {d.id}"))
            by_id[d.id] = d

        for di, d in enumerate(rack.devices):
            if d.container_id is None:
                continue
            path = f"racks.{ri}.devices.{di}"
            parent = by_id.get(d.container_id)
            if parent is None:
                errors.append(FieldError(f"{path}.container_id",
                                         f"Container {d.container_id} not found in rack {rack.id}"))
                continue
            if parent.container_id is not None:
                errors.append(FieldError(f"{path}.container_id",
                                         f"Container {parent.id} is itself nested"))
                continue
            parent_type = types.get(parent.device_type)
            if parent_type is None or not parent_type.slots:
                errors.append(FieldError(f"{path}.container_id",
                                         f"Device {parent.id} is not a container"))
                continue
            if d.slot_id is None:
                errors.append(FieldError(f"{path}.slot_id", "Container child needs a slot_id"))
            elif d.slot_id not in {s.id for s in parent_type.slots}:
                errors.append(FieldError(f"{path}.slot_id",
                                         f"Slot {d.slot_id!r} not declared by {parent_type.slug}"))
            child_type = types.get(d.device_type)
            if child_type is not None and child_type.slots:
                errors.append(FieldError(f"{path}.device_type",
                                         "Containers cannot be placed inside containers"))

    if errors:
        raise ReferenceIntegrityError(errors)


# ── 5. Rack groups ─────────────────────────────────────────────────


def check_rack_groups(doc: LayoutModel) -> None:
    """Group members must exist; bayed groups need equal rack heights."""
    errors: list[FieldError] = []
    racks = {r.id: r for r in doc.racks}
    for gi, group in enumerate(doc.rack_groups or []):
        missing = [rid for rid in group.rack_ids if rid not in racks]
        if missing:
            errors.append(FieldError(
                f"rack_groups.{gi}.rack_ids",
                f"Rack group {group.name or group.id!r} references unknown racks: {', '.join(missing)}",
            ))
            continue
        if group.layout_preset == "bayed":
            heights = {racks[rid].height for rid in group.rack_ids}
            if len(heights) > 1:
                errors.append(FieldError(
                    f"rack_groups.{gi}.rack_ids",
                    f"Bayed group {group.name or group.id!r} mixes rack heights {sorted(heights)}",
                ))
    if errors:
        raise LayoutValidationError(errors)
