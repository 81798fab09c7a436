"""
Layout storage — each saved layout is one JSON document on disk.

Layouts are identified by a slug id and stored under
  $RACKPLAN_DATA_DIR/<layout_id>.json      (default: ./data)

Every document is run through migration before it is written, so the
files on disk are always in the current schema.  Reading does not
re-migrate; callers that need a Layout pass the result through
``validate_and_migrate_layout``.
"""

from __future__ import annotations

import json
import logging
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rackplan.layout.factory import slugify as _slug
from rackplan.layout.serialization import layout_to_dict
from rackplan.migration import validate_and_migrate_layout


log = logging.getLogger("rackplan.storage")

LAYOUT_ID_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*[a-z0-9]$|^[a-z0-9]$")


def data_dir() -> Path:
    """Storage root, from ``RACKPLAN_DATA_DIR`` (read on every call)."""
    return Path(os.environ.get("RACKPLAN_DATA_DIR", "data")).resolve()


def slugify(name: str) -> str:
    """Layout name → storage id ("My Home Lab!" → "my-home-lab")."""
    return _slug(name) or "untitled"


def is_valid_layout_id(layout_id: str) -> bool:
    return bool(LAYOUT_ID_PATTERN.match(layout_id or ""))


def _path(layout_id: str) -> Path:
    if not is_valid_layout_id(layout_id):
        raise ValueError(f"Invalid layout id: {layout_id!r}")
    return data_dir() / f"{layout_id}.json"


def list_layouts() -> list[dict]:
    """List saved layouts, most recently modified first.  Unreadable
    files are skipped."""
    root = data_dir()
    if not root.exists():
        return []
    items = []
    for p in root.glob("*.json"):
        if not is_valid_layout_id(p.stem):
            continue
        try:
            doc = json.loads(p.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            log.warning("Skipping unreadable layout file %s", p.name)
            continue
        racks = doc.get("racks") or ([doc["rack"]] if isinstance(doc.get("rack"), dict) else [])
        mtime = p.stat().st_mtime
        items.append({
            "id": p.stem,
            "name": doc.get("name", p.stem),
            "version": doc.get("version", ""),
            "rack_count": len(racks),
            "device_count": sum(len(r.get("devices", [])) for r in racks if isinstance(r, dict)),
            "updated_at": datetime.fromtimestamp(mtime, timezone.utc).isoformat(),
            "_mtime": mtime,
        })
    items.sort(key=lambda i: i["_mtime"], reverse=True)
    for i in items:
        del i["_mtime"]
    return items


def get_layout(layout_id: str) -> dict | None:
    """Raw stored document, or None if missing."""
    p = _path(layout_id)
    if not p.exists():
        return None
    return json.loads(p.read_text(encoding="utf-8"))


def save_layout(document: Any, layout_id: str | None = None) -> tuple[str, dict]:
    """Migrate and write a document.  Returns ``(layout_id, stored_doc)``.

    The id defaults to the slugified layout name.  Raises ``MigrationError``
    if the document is rejected; nothing is written in that case.
    """
    layout = validate_and_migrate_layout(document)
    layout_id = layout_id or slugify(layout.name)
    stored = layout_to_dict(layout)

    p = _path(layout_id)
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_suffix(".json.tmp")
    tmp.write_text(json.dumps(stored, indent=2, ensure_ascii=False), encoding="utf-8")
    tmp.replace(p)
    log.info("Saved layout %s (%s)", layout_id, layout.name)
    return layout_id, stored


def delete_layout(layout_id: str) -> bool:
    """Delete a stored layout.  Returns True if it existed."""
    p = _path(layout_id)
    if p.exists():
        p.unlink()
        log.info("Deleted layout %s", layout_id)
        return True
    return False
