"""Layout document acceptance — validation and migration.

Every externally supplied document goes through
``validate_and_migrate_layout`` before it becomes a ``Layout``.  The input
is never modified and never partially accepted.
"""

from __future__ import annotations

import copy
import json
import logging

from rackplan.config import CURRENT_VERSION
from rackplan.layout.models import Layout
from rackplan.layout.parsing import parse_layout

from .errors import FieldError, MigrationError, LayoutValidationError, ReferenceIntegrityError
from .stages import (
    check_structure, promote_legacy_shape, rescale_positions,
    parse_schema, check_references, check_rack_groups,
)
from .versions import compare_versions


log = logging.getLogger("rackplan.migration")


def validate_and_migrate_layout(document) -> Layout:
    """Run every stage on a copy of *document* and return the Layout.

    Raises a ``MigrationError`` subclass on the first failing stage.
    The version is stamped to the current one only when the shape was
    promoted or positions were rescaled.
    """
    raw = copy.deepcopy(document)
    check_structure(raw)
    promoted = promote_legacy_shape(raw)
    rescaled = rescale_positions(raw)
    original_version = raw.get("version")
    if promoted or rescaled:
        raw["version"] = CURRENT_VERSION

    doc = parse_schema(raw)
    check_references(doc)
    check_rack_groups(doc)

    layout = parse_layout(doc.model_dump(exclude_none=True))
    if layout.version != original_version:
        log.info("Migrated layout %r from %s to %s",
                 layout.name, original_version or "unversioned", layout.version)
    return layout


def load_layout_json(text: str | bytes) -> Layout:
    """Decode a JSON document and run it through migration."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LayoutValidationError([FieldError("", f"Invalid JSON: {exc}")]) from exc
    return validate_and_migrate_layout(document)


__all__ = [
    "validate_and_migrate_layout", "load_layout_json",
    "check_structure", "promote_legacy_shape", "rescale_positions",
    "parse_schema", "check_references", "check_rack_groups",
    "compare_versions",
    "FieldError", "MigrationError", "LayoutValidationError", "ReferenceIntegrityError",
]
