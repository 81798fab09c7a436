"""Bounded undo/redo history."""

from __future__ import annotations

import logging

from rackplan.config import MAX_HISTORY_DEPTH

from .command import Command


log = logging.getLogger(__name__)


class HistoryStore:
    """Two stacks of commands with strict LIFO replay.

    Executing a new command clears the redo stack.  When the undo stack
    grows past *max_depth* the oldest entry is dropped.  Undo and redo on
    an empty stack return ``False`` and change nothing.
    """

    def __init__(self, max_depth: int = MAX_HISTORY_DEPTH):
        self.max_depth = max_depth
        self._undo: list[Command] = []
        self._redo: list[Command] = []

    def execute(self, command: Command) -> None:
        command.execute()
        self._undo.append(command)
        self._redo.clear()
        if len(self._undo) > self.max_depth:
            dropped = self._undo.pop(0)
            log.debug("History full, dropped %s", dropped.type)
        log.info("Executed %s: %s", command.type, command.description)

    def undo(self) -> bool:
        if not self._undo:
            return False
        command = self._undo.pop()
        command.undo()
        self._redo.append(command)
        log.info("Undid %s", command.type)
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        command = self._redo.pop()
        command.execute()
        self._undo.append(command)
        log.info("Redid %s", command.type)
        return True

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_description(self) -> str | None:
        return f"Undo: {self._undo[-1].description}" if self._undo else None

    @property
    def redo_description(self) -> str | None:
        return f"Redo: {self._redo[-1].description}" if self._redo else None

    @property
    def history_length(self) -> int:
        return len(self._undo)
