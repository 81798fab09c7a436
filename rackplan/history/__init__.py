"""Command & history — reversible mutations of a Layout.

Submodules:
  command      The Command record (type, description, timestamp, execute, undo).
  store        HistoryStore: bounded undo/redo stacks.
  device       Place / move / remove / update placed devices.
  device_type  Add / update / delete device types (delete cascades).
  rack         Update / replace / clear / add / delete racks.
  settings     Display settings.
"""

from .command import Command
from .store import HistoryStore
from .device import (
    create_place_device_command, create_move_device_command,
    create_remove_device_command, create_update_device_face_command,
    create_update_device_name_command, create_update_device_slot_position_command,
    create_update_device_notes_command,
)
from .device_type import (
    create_add_device_type_command, create_update_device_type_command,
    create_delete_device_type_command,
)
from .rack import (
    create_update_rack_command, create_replace_rack_command,
    create_clear_rack_command, create_add_rack_command, create_delete_rack_command,
)
from .settings import create_update_settings_command

__all__ = [
    "Command", "HistoryStore",
    # Devices
    "create_place_device_command", "create_move_device_command",
    "create_remove_device_command", "create_update_device_face_command",
    "create_update_device_name_command", "create_update_device_slot_position_command",
    "create_update_device_notes_command",
    # Device types
    "create_add_device_type_command", "create_update_device_type_command",
    "create_delete_device_type_command",
    # Racks
    "create_update_rack_command", "create_replace_rack_command",
    "create_clear_rack_command", "create_add_rack_command", "create_delete_rack_command",
    # Settings
    "create_update_settings_command",
]
