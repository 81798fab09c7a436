"""
rackplan — entry point.

Usage:
    python -m rackplan serve                     # start web server on :8000
    python -m rackplan serve --port 3000
    python -m rackplan migrate layout.json       # print migrated document
    python -m rackplan migrate old.json --out new.json
"""

import logging
import sys
from pathlib import Path


USAGE = (
    "Usage: python -m rackplan serve [--port PORT] [--host HOST]\n"
    "       python -m rackplan migrate FILE [--out FILE]"
)


def _option(args: list[str], name: str, default=None):
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _migrate(args: list[str]) -> int:
    from rackplan.layout.serialization import dump_layout_json
    from rackplan.migration import MigrationError, load_layout_json

    if not args or args[0].startswith("--"):
        print(USAGE)
        return 1
    src = Path(args[0])
    try:
        layout = load_layout_json(src.read_text(encoding="utf-8"))
    except OSError as exc:
        print(f"Cannot read {src}: {exc}")
        return 1
    except MigrationError as exc:
        print(f"{src}: rejected")
        for err in exc.errors:
            print(f"  {err}")
        return 2

    text = dump_layout_json(layout)
    out = _option(args, "--out")
    if out:
        Path(out).write_text(text, encoding="utf-8")
        print(f"Wrote {out} (version {layout.version})")
    else:
        print(text)
    return 0


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = sys.argv[1:]
    cmd = args[0] if args else "serve"

    if cmd == "serve":
        port = int(_option(args, "--port", 8000))
        host = _option(args, "--host", "127.0.0.1")

        from rackplan.web.server import main as serve
        serve(host=host, port=port)
    elif cmd == "migrate":
        sys.exit(_migrate(args[1:]))
    else:
        print(f"Unknown command: {cmd}")
        print(USAGE)
        sys.exit(1)


if __name__ == "__main__":
    main()
