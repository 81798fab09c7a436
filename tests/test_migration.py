"""Tests for layout document validation and migration."""

from __future__ import annotations

import copy
import json
import unittest

from rackplan.config import CURRENT_VERSION, UNITS_PER_U
from rackplan.layout import dump_layout_json, layout_to_dict
from rackplan.migration import (
    LayoutValidationError, MigrationError, ReferenceIntegrityError,
    check_structure, compare_versions, load_layout_json, promote_legacy_shape,
    rescale_positions, validate_and_migrate_layout,
)
from tests.rack_fixture import make_document


def legacy_document() -> dict:
    return {
        "version": "0.6.0",
        "name": "Old Lab",
        "rack": {
            "name": "Old Rack",
            "height": 42,
            "width": 19,
            "position": 0,
            "desc_units": False,
            "form_factor": "4-post-cabinet",
            "starting_unit": 1,
            "view": "front",
            "devices": [
                {"id": "srv", "device_type": "server-1u", "position": 10, "face": "front"},
            ],
        },
        "device_types": [
            {"slug": "server-1u", "u_height": 1, "category": "server", "colour": "#4A7A8A"},
        ],
        "settings": {"display_mode": "label", "show_labels_on_images": False},
    }


class TestVersions(unittest.TestCase):

    def test_compare(self):
        self.assertEqual(compare_versions("0.6.9", "0.7.0"), -1)
        self.assertEqual(compare_versions("0.7.0", "0.7.0"), 0)
        self.assertEqual(compare_versions("0.10.0", "0.7.0"), 1)
        self.assertEqual(compare_versions("1.0.0-beta", "1.0.0"), 0)
        self.assertEqual(compare_versions(None, "0.7.0"), -1)


class TestStructure(unittest.TestCase):

    def test_rejects_non_mapping(self):
        with self.assertRaises(LayoutValidationError):
            check_structure([1, 2, 3])

    def test_requires_racks(self):
        with self.assertRaises(LayoutValidationError) as ctx:
            check_structure({"name": "x"})
        self.assertEqual(ctx.exception.errors[0].path, "racks")

    def test_bad_device_entries_are_attributed(self):
        doc = make_document()
        doc["racks"][0]["devices"].append("not a device")
        with self.assertRaises(LayoutValidationError) as ctx:
            check_structure(doc)
        self.assertEqual(ctx.exception.errors[0].path, "racks.0.devices.3")


class TestLegacyPromotion(unittest.TestCase):

    def test_single_rack_promoted_with_id(self):
        raw = legacy_document()
        self.assertTrue(promote_legacy_shape(raw))
        self.assertNotIn("rack", raw)
        self.assertEqual(len(raw["racks"]), 1)
        self.assertTrue(raw["racks"][0]["id"])
        self.assertNotIn("view", raw["racks"][0])

    def test_missing_device_ids_generated(self):
        raw = make_document()
        del raw["racks"][0]["devices"][0]["id"]
        self.assertTrue(promote_legacy_shape(raw))
        self.assertTrue(raw["racks"][0]["devices"][0]["id"])

    def test_current_shape_untouched(self):
        self.assertFalse(promote_legacy_shape(make_document()))


class TestRescale(unittest.TestCase):

    def test_legacy_version_rescaled(self):
        raw = legacy_document()
        promote_legacy_shape(raw)
        self.assertTrue(rescale_positions(raw))
        self.assertEqual(raw["racks"][0]["devices"][0]["position"], 10 * UNITS_PER_U)

    def test_children_never_rescaled(self):
        raw = make_document(version="0.5.0")
        for d in raw["racks"][0]["devices"]:
            if not d.get("container_id"):
                d["position"] //= UNITS_PER_U
        self.assertTrue(rescale_positions(raw))
        positions = {d["id"]: d["position"] for d in raw["racks"][0]["devices"]}
        self.assertEqual(positions, {"d1": 6, "d2": 24, "d3": 0})

    def test_heuristic_for_small_positions(self):
        raw = make_document()
        raw["racks"][0]["devices"][0]["position"] = 1
        raw["racks"][0]["devices"][1]["position"] = 4
        with self.assertLogs("rackplan.migration", "WARNING"):
            self.assertTrue(rescale_positions(raw))
        self.assertEqual(raw["racks"][0]["devices"][0]["position"], 6)
        self.assertEqual(raw["racks"][0]["devices"][1]["position"], 24)
        self.assertEqual(raw["racks"][0]["devices"][2]["position"], 0)

    def test_heuristic_leaves_internal_positions(self):
        self.assertFalse(rescale_positions(make_document()))


class TestValidateAndMigrate(unittest.TestCase):

    def test_legacy_document_scenario(self):
        layout = validate_and_migrate_layout(legacy_document())
        self.assertEqual(layout.version, CURRENT_VERSION)
        self.assertEqual(len(layout.racks), 1)
        self.assertEqual(layout.racks[0].devices[0].position, 10 * UNITS_PER_U)
        self.assertNotIn("view", layout_to_dict(layout)["racks"][0])

    def test_current_document_keeps_version(self):
        layout = validate_and_migrate_layout(make_document(version="1.0.3"))
        self.assertEqual(layout.version, "1.0.3")
        self.assertEqual(layout.racks[0].devices[2].container_id, "d2")

    def test_input_not_modified(self):
        doc = legacy_document()
        before = copy.deepcopy(doc)
        validate_and_migrate_layout(doc)
        self.assertEqual(doc, before)

    def test_unknown_fields_survive(self):
        doc = make_document(connections=[{"id": "c1"}])
        doc["racks"][0]["devices"][0]["asset_tag"] = "A-001"
        doc["device_types"][0]["airflow"] = "front-to-rear"
        out = layout_to_dict(validate_and_migrate_layout(doc))
        self.assertEqual(out["connections"], [{"id": "c1"}])
        self.assertEqual(out["racks"][0]["devices"][0]["asset_tag"], "A-001")
        self.assertEqual(out["device_types"][0]["airflow"], "front-to-rear")

    def test_round_trip_is_stable(self):
        first = layout_to_dict(validate_and_migrate_layout(make_document()))
        second = layout_to_dict(validate_and_migrate_layout(first))
        self.assertEqual(first, second)

    def test_json_helpers(self):
        layout = load_layout_json(json.dumps(make_document()))
        again = load_layout_json(dump_layout_json(layout))
        self.assertEqual(layout_to_dict(layout), layout_to_dict(again))
        with self.assertRaises(LayoutValidationError):
            load_layout_json("{not json")


class TestSchemaErrors(unittest.TestCase):

    def assertRejected(self, doc, error_type, path_fragment):
        with self.assertRaises(error_type) as ctx:
            validate_and_migrate_layout(doc)
        paths = [e.path for e in ctx.exception.errors]
        self.assertTrue(any(path_fragment in p for p in paths), paths)
        self.assertIsInstance(ctx.exception, MigrationError)
        return ctx.exception

    def test_rack_height(self):
        doc = make_document()
        doc["racks"][0]["height"] = 0
        self.assertRejected(doc, LayoutValidationError, "racks.0.height")

    def test_rack_width(self):
        doc = make_document()
        doc["racks"][0]["width"] = 20
        self.assertRejected(doc, LayoutValidationError, "racks.0.width")

    def test_u_height_grid(self):
        doc = make_document()
        doc["device_types"][0]["u_height"] = 0.75
        self.assertRejected(doc, LayoutValidationError, "device_types.0.u_height")

    def test_bad_slug_and_colour(self):
        doc = make_document()
        doc["device_types"][0]["slug"] = "Bad Slug"
        doc["device_types"][1]["colour"] = "red"
        err = self.assertRejected(doc, LayoutValidationError, "device_types.0.slug")
        self.assertIn("device_types.1.colour", [e.path for e in err.errors])

    def test_error_payload(self):
        doc = make_document()
        doc["racks"][0]["devices"][0]["face"] = "sideways"
        err = self.assertRejected(doc, LayoutValidationError, "racks.0.devices.0.face")
        payload = err.to_dict()
        self.assertEqual(payload["error"], "LayoutValidationError")
        self.assertTrue(payload["details"])


class TestReferences(unittest.TestCase):

    def assertIntegrity(self, doc, path_fragment):
        with self.assertRaises(ReferenceIntegrityError) as ctx:
            validate_and_migrate_layout(doc)
        paths = [e.path for e in ctx.exception.errors]
        self.assertTrue(any(path_fragment in p for p in paths), paths)

    def test_duplicate_slugs(self):
        doc = make_document()
        doc["device_types"].append(dict(doc["device_types"][0]))
        self.assertIntegrity(doc, "device_types")

    def test_duplicate_rack_ids(self):
        doc = make_document()
        doc["racks"].append(dict(doc["racks"][0], devices=[]))
        self.assertIntegrity(doc, "racks")

    def test_missing_container(self):
        doc = make_document()
        doc["racks"][0]["devices"][2]["container_id"] = "ghost"
        self.assertIntegrity(doc, "racks.0.devices.2.container_id")

    def test_container_must_be_container_type(self):
        doc = make_document()
        doc["racks"][0]["devices"][2]["container_id"] = "d1"
        self.assertIntegrity(doc, "racks.0.devices.2.container_id")

    def test_unknown_slot(self):
        doc = make_document()
        doc["racks"][0]["devices"][2]["slot_id"] = "middle"
        self.assertIntegrity(doc, "racks.0.devices.2.slot_id")

    def test_single_level_nesting(self):
        doc = make_document()
        doc["racks"][0]["devices"].append({
            "id": "d4", "device_type": "mini-pc", "position": 0, "face": "both",
            "container_id": "d3", "slot_id": "left",
        })
        self.assertIntegrity(doc, "racks.0.devices.3.container_id")


class TestRackGroups(unittest.TestCase):

    def two_racks(self, second_height: int) -> dict:
        doc = make_document()
        doc["racks"].append({
            "id": "rack-2", "name": "Second", "height": second_height, "width": 19,
            "position": 1, "desc_units": False, "form_factor": "4-post-cabinet",
            "starting_unit": 1, "devices": [],
        })
        return doc

    def test_bayed_needs_equal_heights(self):
        doc = self.two_racks(24)
        doc["rack_groups"] = [{"id": "g", "rack_ids": ["rack-1", "rack-2"], "layout_preset": "bayed"}]
        with self.assertRaises(LayoutValidationError) as ctx:
            validate_and_migrate_layout(doc)
        self.assertEqual(ctx.exception.errors[0].path, "rack_groups.0.rack_ids")

    def test_row_allows_mixed_heights(self):
        doc = self.two_racks(24)
        doc["rack_groups"] = [{"id": "g", "rack_ids": ["rack-1", "rack-2"], "layout_preset": "row"}]
        layout = validate_and_migrate_layout(doc)
        self.assertEqual(layout.rack_groups[0].rack_ids, ["rack-1", "rack-2"])

    def test_bayed_equal_heights_ok(self):
        doc = self.two_racks(12)
        doc["rack_groups"] = [{"id": "g", "rack_ids": ["rack-1", "rack-2"], "layout_preset": "bayed"}]
        self.assertEqual(len(validate_and_migrate_layout(doc).rack_groups), 1)

    def test_unknown_member(self):
        doc = make_document()
        doc["rack_groups"] = [{"id": "g", "rack_ids": ["rack-9"]}]
        with self.assertRaises(LayoutValidationError):
            validate_and_migrate_layout(doc)


if __name__ == "__main__":
    unittest.main()
