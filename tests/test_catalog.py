"""Tests for the brand-pack catalog."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from rackplan.catalog import (
    CATEGORY_COLOURS, DeviceType, Slot,
    device_type_to_dict, find_device_type, get_device_type,
    load_catalog, parse_device_type, validate_device_type,
)
from rackplan.layout.factory import create_device_type


class TestBundledPacks(unittest.TestCase):

    def test_packs_load_cleanly(self):
        result = load_catalog()
        self.assertTrue(result.ok, [str(e) for e in result.errors])
        self.assertEqual({p.id for p in result.packs}, {"apc", "deskpi", "ubiquiti"})
        ups = get_device_type(result, "apc-smt1500rmi2uc")
        self.assertEqual(ups.u_height, 2)
        self.assertTrue(ups.full_depth)

    def test_deskpi_shelf_is_container(self):
        shelf = get_device_type(load_catalog(), "deskpi-rackmate-shelf-2u")
        self.assertTrue(shelf.is_container)
        self.assertEqual([s.id for s in shelf.slots], ["left", "right"])
        self.assertEqual(shelf.get_slot("right").position, (0, 1))


class TestLoaderErrors(unittest.TestCase):

    def write_pack(self, d: Path, name: str, devices) -> None:
        (d / f"{name}.json").write_text(json.dumps({"id": name, "devices": devices}),
                                        encoding="utf-8")

    def test_duplicate_slugs_across_packs(self):
        with tempfile.TemporaryDirectory() as tmp:
            d = Path(tmp)
            entry = {"slug": "same-box", "u_height": 1, "category": "server", "colour": "#112233"}
            self.write_pack(d, "a", [entry])
            self.write_pack(d, "b", [entry])
            result = load_catalog(d)
        self.assertFalse(result.ok)
        self.assertEqual([(e.slug, e.field) for e in result.errors], [("same-box", "slug")])

    def test_bad_json_and_missing_fields(self):
        with tempfile.TemporaryDirectory() as tmp:
            d = Path(tmp)
            (d / "broken.json").write_text("{nope", encoding="utf-8")
            self.write_pack(d, "partial", [{"slug": "no-height", "category": "server"}])
            result = load_catalog(d)
        fields = {(e.slug, e.field) for e in result.errors}
        self.assertIn(("broken", "json"), fields)
        self.assertIn(("no-height", "parse"), fields)
        self.assertEqual(result.device_types, [])

    def test_empty_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            result = load_catalog(Path(tmp))
        self.assertEqual(result.errors[0].field, "files")


class TestValidation(unittest.TestCase):

    def fields(self, dt: DeviceType) -> set[str]:
        return {e.field for e in validate_device_type(dt)}

    def test_valid_type(self):
        dt = DeviceType("ok-box", 1.5, "storage", "#3D7A4A")
        self.assertEqual(validate_device_type(dt), [])

    def test_bad_values(self):
        dt = DeviceType("Bad--Slug", 0.75, "toaster", "blue",
                        weight_unit="stone", slot_width=3)
        self.assertEqual(self.fields(dt),
                         {"slug", "u_height", "category", "colour", "weight_unit", "slot_width"})

    def test_height_range(self):
        self.assertIn("u_height", self.fields(DeviceType("tall", 60, "server", "#000000")))

    def test_slot_checks(self):
        dt = DeviceType("shelf", 2, "shelf", "#6272A4", slots=[
            Slot("left", accepts=["server"]),
            Slot("left"),
            Slot("right", accepts=["spaceship"]),
        ])
        self.assertEqual(self.fields(dt), {"slots.left", "slots.right.accepts"})


class TestLookupAndSerialization(unittest.TestCase):

    def test_layout_types_win(self):
        catalog = load_catalog()
        custom = DeviceType("apc-smt1500rmi2uc", 3, "power", "#000000")
        self.assertIs(find_device_type("apc-smt1500rmi2uc", [custom], catalog), custom)
        self.assertEqual(find_device_type("apc-ap7920b", [custom], catalog).u_height, 1)
        self.assertIsNone(find_device_type("apc-ap7920b", [custom]))

    def test_dict_omits_unset_fields(self):
        d = device_type_to_dict(DeviceType("bare", 1, "other", "#6272A4"))
        self.assertEqual(d, {"slug": "bare", "u_height": 1, "category": "other",
                             "colour": "#6272A4"})

    def test_passthrough_fields_survive(self):
        raw = {"slug": "fan-tray", "u_height": 1, "category": "cooling",
               "colour": "#8A8A4A", "airflow": "front-to-rear",
               "slots": [{"id": "a", "position": {"row": 1, "col": 0}}]}
        dt = parse_device_type(raw)
        self.assertEqual(dt.extra, {"airflow": "front-to-rear"})
        self.assertEqual(dt.slots[0].position, (1, 0))
        out = device_type_to_dict(dt)
        self.assertEqual(out["airflow"], "front-to-rear")
        self.assertEqual(out["slots"], [{"id": "a", "position": [1, 0]}])


class TestFactory(unittest.TestCase):

    def test_slug_and_colour_defaults(self):
        dt = create_device_type("Media Box", 1, "av-media", manufacturer="Acme", model="Box 9000")
        self.assertEqual(dt.slug, "acme-box-9000")
        self.assertEqual(dt.colour, CATEGORY_COLOURS["av-media"])

    def test_shelves_default_full_depth(self):
        self.assertTrue(create_device_type("Shelf", 2, "shelf").is_full_depth)
        self.assertIsNone(create_device_type("Router", 1, "network").is_full_depth)


if __name__ == "__main__":
    unittest.main()
