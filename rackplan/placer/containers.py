"""Container hierarchy rules — placement of children inside container slots.

Children live in their container's own coordinate space: positions are
internal units relative to the container base, starting at 0.  They are
invisible to rack-level collision and only collide with siblings in the
same container *and* the same slot.  Nesting is single-level.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from rackplan.catalog.models import DeviceType
from rackplan.layout.models import PlacedDevice, Rack

from .geometry import catalog_map, device_range, ranges_overlap


log = logging.getLogger(__name__)


def get_container_children(rack: Rack, container_id: str) -> list[PlacedDevice]:
    """Placed devices whose parent is *container_id*, in rack order."""
    return [d for d in rack.devices if d.container_id == container_id]


def can_place_in_container(
    rack: Rack,
    catalog: Iterable[DeviceType],
    container: PlacedDevice,
    container_type: DeviceType,
    child_type: DeviceType,
    slot_id: str,
    local_position: int,
    exclude_device_id: str | None = None,
) -> bool:
    """True if *child_type* fits at *local_position* in *slot_id* of *container*."""
    slot = container_type.get_slot(slot_id)
    if slot is None:
        log.debug("Container %s has no slot %r", container.id, slot_id)
        return False
    if child_type.is_container:
        log.debug("Rejecting nested container %s", child_type.slug)
        return False
    if slot.accepts and child_type.category not in slot.accepts:
        log.debug("Slot %r of %s does not accept %s", slot_id, container.id, child_type.category)
        return False

    target = device_range(local_position, child_type.u_height)
    if target.bottom < 0 or target.top > container_type.height_internal - 1:
        return False

    types = catalog_map(catalog)
    for sibling in get_container_children(rack, container.id):
        if sibling.id == exclude_device_id or sibling.slot_id != slot_id:
            continue
        st = types.get(sibling.device_type)
        if st is None:
            continue
        if ranges_overlap(target, device_range(sibling.position, st.u_height)):
            return False
    return True
