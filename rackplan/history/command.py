"""The reversible Command unit recorded by the history store."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Command:
    """A recorded, reversible mutation.

    ``type`` is a stable tag (``"PLACE_DEVICE"``, ``"UPDATE_RACK"``, ...),
    ``description`` is the human label shown as "Undo: <description>".
    The callables close over copies of whatever state they need, captured
    when the command was built.
    """
    type: str
    description: str
    do: Callable[[], None] = field(repr=False)
    undo_fn: Callable[[], None] = field(repr=False)
    timestamp: int = field(default_factory=now_ms)

    def execute(self) -> None:
        self.do()

    def undo(self) -> None:
        self.undo_fn()
