"""
FastAPI web server — layout persistence and validation API.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from fastapi import Body, FastAPI, HTTPException, Path as PathParam
from fastapi.middleware.cors import CORSMiddleware

from rackplan import storage
from rackplan.catalog import catalog_to_dict, load_catalog
from rackplan.config import CURRENT_VERSION
from rackplan.layout.serialization import layout_to_dict
from rackplan.migration import MigrationError, validate_and_migrate_layout


log = logging.getLogger("rackplan.web")

# ── .env loader ────────────────────────────────────────────────────

ENV_PREFIX = "RACKPLAN_"


def _load_env(root: Path | None = None):
    """Pick up ``RACKPLAN_*`` settings from .env files at the project root.
    Variables already set in the environment win."""
    root = root or Path(__file__).resolve().parents[2]
    for p in (root / ".env", root / ".env.local"):
        if not p.exists():
            continue
        for raw in p.read_text(encoding="utf-8").splitlines():
            key, sep, value = raw.strip().partition("=")
            key = key.strip()
            if not sep or not key.startswith(ENV_PREFIX):
                continue
            os.environ.setdefault(key, value.strip().strip("\"'"))

_load_env()

# ── App ────────────────────────────────────────────────────────────

app = FastAPI(title="rackplan")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

LAYOUT_ID_RE = storage.LAYOUT_ID_PATTERN.pattern


def _rejected(exc: MigrationError) -> HTTPException:
    log.info("Rejected layout: %s", exc)
    return HTTPException(400, exc.to_dict())


# ── Routes ─────────────────────────────────────────────────────────

@app.get("/api/health")
def health():
    return {"status": "ok", "version": CURRENT_VERSION}


@app.get("/api/catalog")
def get_catalog():
    """Brand-pack device types available for placement."""
    return catalog_to_dict(load_catalog())


@app.get("/api/layouts")
def list_layouts():
    return {"layouts": storage.list_layouts()}


@app.post("/api/layouts/validate")
def validate_layout(document: Any = Body(...)):
    """Run a document through migration without saving it."""
    try:
        layout = validate_and_migrate_layout(document)
    except MigrationError as exc:
        raise _rejected(exc)
    return {"valid": True, "layout": layout_to_dict(layout)}


@app.get("/api/layouts/{layout_id}")
def get_layout(layout_id: str = PathParam(pattern=LAYOUT_ID_RE)):
    doc = storage.get_layout(layout_id)
    if doc is None:
        raise HTTPException(404, f"Layout not found: {layout_id}")
    return doc


@app.put("/api/layouts/{layout_id}")
def put_layout(layout_id: str = PathParam(pattern=LAYOUT_ID_RE), document: Any = Body(...)):
    existed = storage.get_layout(layout_id) is not None
    try:
        _, stored = storage.save_layout(document, layout_id)
    except MigrationError as exc:
        raise _rejected(exc)
    return {"id": layout_id, "created": not existed, "layout": stored}


@app.delete("/api/layouts/{layout_id}")
def delete_layout(layout_id: str = PathParam(pattern=LAYOUT_ID_RE)):
    if not storage.delete_layout(layout_id):
        raise HTTPException(404, f"Layout not found: {layout_id}")
    return {"status": "ok"}


# ── Entry point ────────────────────────────────────────────────────

def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    uvicorn.run("rackplan.web.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
