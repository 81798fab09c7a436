"""Layout editor — validated, recorded actions on one Layout.

The editor is the single writer: every action is checked against the
placement engine, wrapped in a command and run through the HistoryStore.
Rejected placements leave the layout untouched and say why.
"""

from __future__ import annotations

import copy
import logging

from rackplan.catalog.loader import find_device_type
from rackplan.catalog.models import CatalogResult, DeviceType
from rackplan.config import LAYOUT_RULES, DEFAULT_LAYOUT_NAME, DEFAULT_RACK_WIDTH
from rackplan.history import (
    HistoryStore,
    create_place_device_command, create_move_device_command,
    create_remove_device_command, create_update_device_face_command,
    create_update_device_name_command, create_update_device_slot_position_command,
    create_update_device_notes_command,
    create_add_device_type_command, create_update_device_type_command,
    create_delete_device_type_command,
    create_update_rack_command, create_replace_rack_command,
    create_clear_rack_command, create_add_rack_command, create_delete_rack_command,
    create_update_settings_command,
)
from rackplan.layout import operations as ops
from rackplan.layout.factory import create_device, create_layout, create_rack
from rackplan.layout.models import Layout, PlacedDevice, Rack
from rackplan.migration import validate_and_migrate_layout
from rackplan.placer import (
    PlacementCheck, PlacementResult,
    can_place_in_container, check_placement, find_next_valid_position,
)
from rackplan.placer.geometry import effective_slot
from rackplan.units import rack_bounds


log = logging.getLogger("rackplan.editor")


def _valid_rack_size(height: int, width: int) -> bool:
    return (LAYOUT_RULES.min_rack_height <= height <= LAYOUT_RULES.max_rack_height
            and width in LAYOUT_RULES.allowed_rack_widths)


class LayoutEditor:
    """Recorded editing actions over a Layout."""

    def __init__(
        self,
        layout: Layout | None = None,
        history: HistoryStore | None = None,
        brand_catalog: CatalogResult | None = None,
    ):
        self.layout = layout or create_layout()
        self.history = history or HistoryStore()
        self.brand_catalog = brand_catalog

    # ── Lookups ────────────────────────────────────────────────────

    def get_device_type(self, slug: str) -> DeviceType | None:
        return find_device_type(slug, self.layout.device_types, self.brand_catalog)

    def _locate(self, rack_id: str, device_id: str) -> tuple[Rack, int, PlacedDevice] | None:
        rack = self.layout.get_rack(rack_id)
        if rack is None:
            return None
        idx = ops.device_index(rack, device_id)
        if idx < 0:
            return None
        return rack, idx, rack.devices[idx]

    def _ensure_in_layout(self, dt: DeviceType) -> DeviceType:
        """Brand-pack types are copied into the layout on first use.
        Returns the layout's own copy; the brand catalog is never shared."""
        existing = self.layout.get_device_type(dt.slug)
        if existing is not None:
            return existing
        merged = copy.deepcopy(dt)
        ops.add_device_type(self.layout, merged)
        log.debug("Merged brand-pack type %s into layout", dt.slug)
        return merged

    # ── Placement ──────────────────────────────────────────────────

    def place_device(
        self,
        rack_id: str,
        slug: str,
        position: int,
        face: str | None = None,
        name: str | None = None,
        slot_position: str | None = None,
    ) -> PlacementResult:
        """Place a device at an internal *position*.

        Without an explicit *face*, full-depth devices take ``both`` and
        half-depth devices ``front``.
        """
        rack = self.layout.get_rack(rack_id)
        dt = self.get_device_type(slug)
        if rack is None or dt is None:
            return PlacementResult(PlacementCheck.NOT_FOUND)

        if face is None:
            face = "both" if dt.full_depth else "front"
        slot = slot_position if dt.half_width and slot_position else "full"

        check = check_placement(
            rack, self._catalog_for(dt), dt.u_height, position,
            face=face, is_full_depth=dt.full_depth, slot_position=slot,
        )
        if not check.ok:
            return PlacementResult(check)

        dt = self._ensure_in_layout(dt)
        device = create_device(
            slug, position, face, name,
            slot_position=slot_position if dt.half_width else None,
        )
        self.history.execute(create_place_device_command(
            self.layout, rack_id, device, dt.display_name))
        return PlacementResult(PlacementCheck.OK, ops.require_device(rack, device.id))

    def place_in_container(
        self,
        rack_id: str,
        container_id: str,
        slug: str,
        slot_id: str,
        local_position: int = 0,
        name: str | None = None,
    ) -> PlacementResult:
        """Place a child in a container slot.  The child takes the
        container's face."""
        found = self._locate(rack_id, container_id)
        child_type = self.get_device_type(slug)
        if found is None or child_type is None:
            return PlacementResult(PlacementCheck.NOT_FOUND)
        rack, _, container = found
        container_type = self.get_device_type(container.device_type)
        if container_type is None or not container_type.is_container:
            return PlacementResult(PlacementCheck.NOT_FOUND)

        if not can_place_in_container(
            rack, self._catalog_for(child_type), container, container_type,
            child_type, slot_id, local_position,
        ):
            return PlacementResult(self._container_reason(container_type, child_type, local_position))

        child_type = self._ensure_in_layout(child_type)
        device = create_device(
            slug, local_position, container.face, name,
            container_id=container.id, slot_id=slot_id,
        )
        self.history.execute(create_place_device_command(
            self.layout, rack_id, device, child_type.display_name))
        return PlacementResult(PlacementCheck.OK, ops.require_device(rack, device.id))

    def move_device(self, rack_id: str, device_id: str, new_position: int) -> PlacementResult:
        found = self._locate(rack_id, device_id)
        if found is None:
            return PlacementResult(PlacementCheck.NOT_FOUND)
        rack, idx, device = found
        dt = self.get_device_type(device.device_type)
        if dt is None:
            return PlacementResult(PlacementCheck.NOT_FOUND)
        if device.position == new_position:
            return PlacementResult(PlacementCheck.OK, device)

        if device.container_id is not None:
            parent = self._locate(rack_id, device.container_id)
            parent_type = self.get_device_type(parent[2].device_type) if parent else None
            if parent_type is None:
                return PlacementResult(PlacementCheck.NOT_FOUND)
            if not can_place_in_container(
                rack, self.layout.device_types, parent[2], parent_type, dt,
                device.slot_id, new_position, exclude_device_id=device.id,
            ):
                return PlacementResult(self._container_reason(parent_type, dt, new_position))
        else:
            check = check_placement(
                rack, self.layout.device_types, dt.u_height, new_position, idx,
                device.face, dt.full_depth, effective_slot(device, dt),
            )
            if not check.ok:
                return PlacementResult(check)

        self.history.execute(create_move_device_command(
            self.layout, rack_id, device_id, device.position, new_position,
            device.name or dt.display_name))
        return PlacementResult(PlacementCheck.OK, device)

    def nudge_device(self, rack_id: str, device_id: str, direction: int) -> PlacementResult:
        """Move a rack-level device to the next free position up (+1) or down (-1)."""
        found = self._locate(rack_id, device_id)
        if found is None:
            return PlacementResult(PlacementCheck.NOT_FOUND)
        rack, idx, _ = found
        move = find_next_valid_position(rack, self.layout.device_types, idx, direction)
        if not move.success:
            check = (PlacementCheck.OUT_OF_BOUNDS if move.reason == "at_boundary"
                     else PlacementCheck.COLLISION)
            return PlacementResult(check)
        return self.move_device(rack_id, device_id, move.new_position)

    def remove_device(self, rack_id: str, device_id: str) -> bool:
        found = self._locate(rack_id, device_id)
        if found is None:
            return False
        _, _, device = found
        dt = self.get_device_type(device.device_type)
        label = device.name or (dt.display_name if dt else device.device_type)
        self.history.execute(create_remove_device_command(self.layout, rack_id, device_id, label))
        return True

    def set_device_face(self, rack_id: str, device_id: str, face: str) -> PlacementResult:
        """Flip a rack-level device; rejected if the new face collides."""
        found = self._locate(rack_id, device_id)
        if found is None:
            return PlacementResult(PlacementCheck.NOT_FOUND)
        rack, idx, device = found
        dt = self.get_device_type(device.device_type)
        if dt is None or device.container_id is not None:
            return PlacementResult(PlacementCheck.NOT_FOUND)
        if device.face == face:
            return PlacementResult(PlacementCheck.OK, device)

        check = check_placement(
            rack, self.layout.device_types, dt.u_height, device.position, idx,
            face, dt.full_depth, effective_slot(device, dt),
        )
        if not check.ok:
            return PlacementResult(check)
        self.history.execute(create_update_device_face_command(
            self.layout, rack_id, device_id, device.face, face,
            device.name or dt.display_name))
        return PlacementResult(PlacementCheck.OK, device)

    def set_device_slot_position(self, rack_id: str, device_id: str, slot_position: str) -> PlacementResult:
        found = self._locate(rack_id, device_id)
        if found is None:
            return PlacementResult(PlacementCheck.NOT_FOUND)
        rack, idx, device = found
        dt = self.get_device_type(device.device_type)
        if dt is None or not dt.half_width:
            return PlacementResult(PlacementCheck.NOT_FOUND)

        check = check_placement(
            rack, self.layout.device_types, dt.u_height, device.position, idx,
            device.face, dt.full_depth, slot_position,
        )
        if not check.ok:
            return PlacementResult(check)
        self.history.execute(create_update_device_slot_position_command(
            self.layout, rack_id, device_id, device.slot_position, slot_position,
            device.name or dt.display_name))
        return PlacementResult(PlacementCheck.OK, device)

    def rename_device(self, rack_id: str, device_id: str, name: str | None) -> bool:
        found = self._locate(rack_id, device_id)
        if found is None:
            return False
        device = found[2]
        dt = self.get_device_type(device.device_type)
        self.history.execute(create_update_device_name_command(
            self.layout, rack_id, device_id, device.name, name,
            dt.display_name if dt else device.device_type))
        return True

    def update_device_notes(self, rack_id: str, device_id: str, **values) -> bool:
        """Set ``notes`` and/or ``ip`` on a placed device."""
        found = self._locate(rack_id, device_id)
        if found is None:
            return False
        unknown = set(values) - {"notes", "ip"}
        if unknown:
            raise TypeError(f"Unsupported device fields: {', '.join(sorted(unknown))}")
        device = found[2]
        old = {k: getattr(device, k) for k in values}
        self.history.execute(create_update_device_notes_command(
            self.layout, rack_id, device_id, old, values, device.name or device.device_type))
        return True

    # ── Device types ───────────────────────────────────────────────

    def add_device_type(self, device_type: DeviceType) -> bool:
        if self.layout.get_device_type(device_type.slug) is not None:
            return False
        self.history.execute(create_add_device_type_command(self.layout, device_type))
        return True

    def update_device_type(self, slug: str, **updates) -> bool:
        if self.layout.get_device_type(slug) is None:
            return False
        self.history.execute(create_update_device_type_command(self.layout, slug, updates))
        return True

    def delete_device_type(self, slug: str) -> bool:
        if self.layout.get_device_type(slug) is None:
            return False
        self.history.execute(create_delete_device_type_command(self.layout, slug))
        return True

    # ── Racks ──────────────────────────────────────────────────────

    def add_rack(self, name: str, height: int, **kwargs) -> Rack | None:
        if len(self.layout.racks) >= LAYOUT_RULES.max_racks:
            log.debug("Rack limit (%d) reached", LAYOUT_RULES.max_racks)
            return None
        if not _valid_rack_size(height, kwargs.get("width", DEFAULT_RACK_WIDTH)):
            return None
        kwargs.setdefault("position", len(self.layout.racks))
        rack = create_rack(name, height, **kwargs)
        self.history.execute(create_add_rack_command(self.layout, rack))
        return self.layout.get_rack(rack.id)

    def update_rack(self, rack_id: str, **changes) -> bool:
        """Change rack settings.

        Refused when the size is outside the allowed range, when shrinking
        would cut off a placed device, or when a height change would leave
        a bayed group with mixed heights.
        """
        rack = self.layout.get_rack(rack_id)
        if rack is None:
            return False
        new_height = changes.get("height", rack.height)
        if not _valid_rack_size(new_height, changes.get("width", rack.width)):
            return False
        if new_height < rack.height:
            _, max_top = rack_bounds(new_height)
            for d in rack.devices:
                dt = self.get_device_type(d.device_type)
                if d.container_id is None and dt and d.position + dt.height_internal - 1 > max_top:
                    return False
        if new_height != rack.height and self._breaks_bayed_group(rack_id, new_height):
            return False
        before = {k: getattr(rack, k) for k in changes}
        self.history.execute(create_update_rack_command(self.layout, rack_id, before, changes))
        return True

    def replace_rack(self, rack_id: str, new_rack: Rack) -> bool:
        if self.layout.get_rack(rack_id) is None:
            return False
        self.history.execute(create_replace_rack_command(self.layout, rack_id, new_rack))
        return True

    def clear_rack(self, rack_id: str) -> bool:
        if self.layout.get_rack(rack_id) is None:
            return False
        self.history.execute(create_clear_rack_command(self.layout, rack_id))
        return True

    def delete_rack(self, rack_id: str) -> bool:
        """Delete a rack; the last rack of a layout cannot be deleted."""
        if self.layout.get_rack(rack_id) is None or len(self.layout.racks) <= 1:
            return False
        self.history.execute(create_delete_rack_command(self.layout, rack_id))
        return True

    # ── Settings ───────────────────────────────────────────────────

    def update_settings(self, **changes) -> None:
        before = {k: getattr(self.layout.settings, k, self.layout.settings.extra.get(k))
                  for k in changes}
        self.history.execute(create_update_settings_command(self.layout, before, changes))

    # ── History ────────────────────────────────────────────────────

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    # ── Whole-layout replacement ───────────────────────────────────

    def new_layout(self, name: str = DEFAULT_LAYOUT_NAME) -> Layout:
        self.layout = create_layout(name)
        self.history.clear()
        return self.layout

    def load_document(self, document: dict) -> Layout:
        """Replace the layout with a migrated document.  Raises MigrationError."""
        self.layout = validate_and_migrate_layout(document)
        self.history.clear()
        log.info("Loaded layout %r (%d racks)", self.layout.name, len(self.layout.racks))
        return self.layout

    # ── Internals ──────────────────────────────────────────────────

    def _breaks_bayed_group(self, rack_id: str, new_height: int) -> bool:
        """True if another member of a bayed group holding *rack_id* keeps a
        different height."""
        for group in self.layout.rack_groups:
            if group.layout_preset != "bayed" or rack_id not in group.rack_ids:
                continue
            for other_id in group.rack_ids:
                other = self.layout.get_rack(other_id)
                if other_id != rack_id and other is not None and other.height != new_height:
                    return True
        return False

    def _catalog_for(self, dt: DeviceType) -> list[DeviceType]:
        """Layout types plus *dt*, which may still live only in a brand pack."""
        if self.layout.get_device_type(dt.slug) is None:
            return [*self.layout.device_types, copy.deepcopy(dt)]
        return self.layout.device_types

    @staticmethod
    def _container_reason(
        container_type: DeviceType, child_type: DeviceType, local_position: int,
    ) -> PlacementCheck:
        top = local_position + child_type.height_internal - 1
        if local_position < 0 or top > container_type.height_internal - 1:
            return PlacementCheck.OUT_OF_BOUNDS
        return PlacementCheck.COLLISION
