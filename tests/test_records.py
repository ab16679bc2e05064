import json
import tempfile
import unittest
from pathlib import Path

from hull_identity.core.canon.models import Manufacturer, ManufacturerRef
from hull_identity.records import (
    coalesce,
    dependent_from_row,
    iter_paths,
    load_dependents,
    load_manufacturers,
    load_raw_records,
    normalize_id,
    optional_string,
    raw_record_from_row,
)


class TestValueHelpers(unittest.TestCase):
    def test_optional_string(self):
        self.assertEqual(optional_string("Aurora"), "Aurora")
        self.assertEqual(optional_string(7), "7")
        self.assertIsNone(optional_string("  "))
        self.assertIsNone(optional_string(True))
        self.assertIsNone(optional_string(None))

    def test_coalesce(self):
        self.assertEqual(coalesce(None, "", "b", "c"), "b")
        self.assertIsNone(coalesce(None, ""))

    def test_normalize_id(self):
        self.assertEqual(normalize_id({"id": 3}), "3")
        self.assertEqual(normalize_id("A"), "A")
        self.assertIsNone(normalize_id({}))


class TestRowConversion(unittest.TestCase):
    def test_export_row(self):
        record = raw_record_from_row(
            {
                "UUID": "abc",
                "Name": "Aurora MR",
                "ClassName": "RSI_Aurora_MR",
                "manufacturer": {"Code": "RSI", "Name": "Roberts Space Industries"},
                "Role": "Starter",
                "Size": "small",
            }
        )
        self.assertEqual(record.id, "abc")
        self.assertEqual(record.name, "Aurora MR")
        self.assertEqual(record.class_name, "RSI_Aurora_MR")
        self.assertEqual(record.manufacturer, ManufacturerRef(code="RSI", name="Roberts Space Industries"))
        self.assertEqual(record.hull_class, "Starter")
        self.assertEqual(record.size, "small")

    def test_cms_row(self):
        record = raw_record_from_row(
            {"id": 12, "external_id": "RSI_AURORA_MR", "manufacturer": "RSI", "manufacturer_id": 3}
        )
        self.assertEqual(record.id, "12")
        self.assertEqual(record.external_id, "RSI_AURORA_MR")
        self.assertEqual(record.manufacturer, ManufacturerRef(code="RSI", id="3"))

    def test_row_without_manufacturer(self):
        self.assertIsNone(raw_record_from_row({"id": "n", "name": "Nomad"}).manufacturer)

    def test_dependent_rows(self):
        nested = dependent_from_row({"id": "s1", "ship_variant": {"id": "A"}}, "ship_stats")
        self.assertEqual(nested.variant_ref, "A")
        self.assertEqual(nested.collection, "ship_stats")
        by_external = dependent_from_row({"id": "s2", "ship_variant_external_id": "RSI_AURORA_MR"}, "ship_stats")
        self.assertEqual(by_external.variant_ref, "RSI_AURORA_MR")
        item = dependent_from_row(
            {"id": "i1", "ship_variant": "C", "profile": "PAINT", "livery": "Nightfall", "qty": 2},
            "installed_items",
        )
        self.assertEqual((item.profile, item.livery), ("PAINT", "Nightfall"))
        self.assertEqual(item.payload["qty"], 2)

    def test_dependent_without_id(self):
        with self.assertLogs("hull_identity.records", level="WARNING"):
            self.assertIsNone(dependent_from_row({"ship_variant": "A"}, "ship_stats"))


class TestLoaders(unittest.TestCase):
    def _write(self, tmp: Path, name: str, payload) -> Path:
        path = tmp / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def test_load_raw_records_wrapped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self._write(Path(tmpdir), "variants.json", {"data": [{"id": "A", "name": "Aurora MR"}, "junk"]})
            records = load_raw_records(path)
        self.assertEqual([r.id for r in records], ["A"])

    def test_load_rejects_non_array(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self._write(Path(tmpdir), "variants.json", "not rows")
            with self.assertRaises(ValueError):
                load_raw_records(path)

    def test_load_dependents_uses_stem(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self._write(Path(tmpdir), "hardpoints.json", [{"id": "h1", "ship_variant": "A"}])
            records = load_dependents(path)
        self.assertEqual(records[0].collection, "hardpoints")

    def test_load_manufacturers(self):
        rows = [{"id": 42, "code": "AEGS", "name": "Aegis Dynamics"}, {"id": 9, "name": "No code"}]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self._write(Path(tmpdir), "manufacturers.json", rows)
            with self.assertLogs("hull_identity.records", level="WARNING"):
                directory = load_manufacturers(path)
        expected = Manufacturer(code="AEGS", name="Aegis Dynamics")
        self.assertEqual(directory, {"42": expected, "AEGS": expected})

    def test_iter_paths(self):
        self.assertEqual(
            list(iter_paths(["ship_stats=dump/a.json", "dump/hardpoints.json"])),
            [("ship_stats", Path("dump/a.json")), ("hardpoints", Path("dump/hardpoints.json"))],
        )


if __name__ == "__main__":
    unittest.main()
