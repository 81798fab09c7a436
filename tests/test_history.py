"""Tests for the HistoryStore undo/redo stacks."""

from __future__ import annotations

import unittest

from rackplan.config import MAX_HISTORY_DEPTH
from rackplan.history import Command, HistoryStore


def recording_command(name: str, log: list[str], state: list[str] | None = None) -> Command:
    """Command that appends to *log* on every execute/undo."""
    def do():
        log.append(f"execute:{name}")
        if state is not None:
            state.append(name)

    def undo():
        log.append(f"undo:{name}")
        if state is not None:
            state.remove(name)

    return Command("TEST", name, do, undo)


class TestExecute(unittest.TestCase):

    def test_execute_runs_and_records(self):
        log: list[str] = []
        store = HistoryStore()
        store.execute(recording_command("a", log))
        self.assertEqual(log, ["execute:a"])
        self.assertTrue(store.can_undo)
        self.assertFalse(store.can_redo)
        self.assertEqual(store.history_length, 1)

    def test_new_command_clears_redo(self):
        log: list[str] = []
        store = HistoryStore()
        store.execute(recording_command("a", log))
        store.undo()
        self.assertTrue(store.can_redo)
        store.execute(recording_command("b", log))
        self.assertFalse(store.can_redo)
        self.assertFalse(store.redo())

    def test_depth_limit_drops_oldest(self):
        log: list[str] = []
        store = HistoryStore()
        for i in range(MAX_HISTORY_DEPTH + 5):
            store.execute(recording_command(f"c{i}", log))
        self.assertEqual(store.history_length, MAX_HISTORY_DEPTH)
        while store.undo():
            pass
        self.assertEqual(log[-1], "undo:c5")

    def test_custom_depth(self):
        store = HistoryStore(max_depth=2)
        for i in range(3):
            store.execute(recording_command(f"c{i}", []))
        self.assertEqual(store.history_length, 2)

    def test_timestamp_is_epoch_ms(self):
        cmd = recording_command("a", [])
        self.assertIsInstance(cmd.timestamp, int)
        self.assertGreater(cmd.timestamp, 1_600_000_000_000)


class TestUndoRedo(unittest.TestCase):

    def test_empty_stacks_return_false(self):
        store = HistoryStore()
        self.assertFalse(store.undo())
        self.assertFalse(store.redo())

    def test_undo_then_redo(self):
        log: list[str] = []
        store = HistoryStore()
        store.execute(recording_command("a", log))
        self.assertTrue(store.undo())
        self.assertFalse(store.can_undo)
        self.assertTrue(store.can_redo)
        self.assertTrue(store.redo())
        self.assertEqual(log, ["execute:a", "undo:a", "execute:a"])

    def test_descriptions(self):
        store = HistoryStore()
        self.assertIsNone(store.undo_description)
        store.execute(recording_command("Place Server", []))
        store.execute(recording_command("Move Server", []))
        self.assertEqual(store.undo_description, "Undo: Move Server")
        store.undo()
        self.assertEqual(store.redo_description, "Redo: Move Server")
        self.assertEqual(store.undo_description, "Undo: Place Server")

    def test_clear(self):
        store = HistoryStore()
        store.execute(recording_command("a", []))
        store.execute(recording_command("b", []))
        store.undo()
        store.clear()
        self.assertFalse(store.can_undo)
        self.assertFalse(store.can_redo)
        self.assertEqual(store.history_length, 0)


class TestOrdering(unittest.TestCase):

    def test_undo_all_then_redo_all_restores_state(self):
        state: list[str] = []
        store = HistoryStore()
        for name in ("a", "b", "c"):
            store.execute(recording_command(name, [], state))
        after = list(state)
        for _ in range(3):
            store.undo()
        self.assertEqual(state, [])
        for _ in range(3):
            store.redo()
        self.assertEqual(state, after)

    def test_interleaved_replay_order(self):
        log: list[str] = []
        store = HistoryStore()
        store.execute(recording_command("a", log))
        store.execute(recording_command("b", log))
        store.undo()
        store.undo()
        store.redo()
        store.execute(recording_command("c", log))
        store.undo()
        store.undo()
        store.redo()
        store.redo()
        self.assertEqual(log, [
            "execute:a", "execute:b",
            "undo:b", "undo:a",
            "execute:a",
            "execute:c",
            "undo:c", "undo:a",
            "execute:a", "execute:c",
        ])

    def test_rapid_alternation(self):
        state: list[str] = []
        store = HistoryStore()
        store.execute(recording_command("a", [], state))
        for _ in range(25):
            store.undo()
            store.redo()
        self.assertEqual(state, ["a"])
        self.assertEqual(store.history_length, 1)

    def test_past_either_end(self):
        store = HistoryStore()
        store.execute(recording_command("a", []))
        self.assertTrue(store.undo())
        self.assertFalse(store.undo())
        self.assertTrue(store.redo())
        self.assertFalse(store.redo())


if __name__ == "__main__":
    unittest.main()
