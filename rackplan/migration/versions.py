"""Schema version comparison."""

from __future__ import annotations

import re


def parse_version(version: str | None) -> tuple[int, int, int]:
    """``"0.6.2"`` → ``(0, 6, 2)``.  Missing or garbled parts count as 0,
    pre-release suffixes (``1.0.0-beta``) are ignored."""
    if not version:
        return (0, 0, 0)
    parts = []
    for piece in str(version).split(".")[:3]:
        m = re.match(r"\d+", piece.strip().lstrip("v"))
        parts.append(int(m.group()) if m else 0)
    while len(parts) < 3:
        parts.append(0)
    return tuple(parts)  # type: ignore[return-value]


def compare_versions(a: str | None, b: str | None) -> int:
    """-1, 0 or 1 as *a* is older than, equal to or newer than *b*."""
    va, vb = parse_version(a), parse_version(b)
    return (va > vb) - (va < vb)


def is_older(version: str | None, than: str) -> bool:
    return compare_versions(version, than) < 0
