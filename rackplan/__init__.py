"""rackplan — rack layout planning: placement rules, undoable editing, and
document migration for equipment racks."""

__version__ = "0.1.0"
