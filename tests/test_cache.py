"""
Tests for the TLE cache: keyed merge, lookup and snapshot persistence.

Run with:
    python -m pytest tests/test_cache.py -v
"""

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from pydantic import ValidationError

from config import FALLBACK_TLE_TEXT
from tle_catalog.cache import TLECache, load_tle_cache
from tle_catalog.exceptions import CatalogEntryNotFound
from tle_catalog.tle_parser import TLEParser, parse_tle_batch

ISS_NAME = "ISS (ZARYA)"
ISS_LINE1 = "1 25544U 98067A   20045.18587073  .00000950  00000-0  25302-4 0  9990"
ISS_LINE2 = "2 25544  51.6443 242.0161 0004885 264.6060 207.3845 15.49165514212791"

GRUS_NAME = "GRUS-1A"
GRUS_LINE1 = "1 43890U 18111Q   20044.88470557  .00000320  00000-0  36258-4 0  9993"
GRUS_LINE2 = "2 43890  97.7009 312.6237 0003899   7.8254 352.3026 14.92889838 61757"


class TestCacheMerge(unittest.TestCase):
    """Upsert semantics of the cache merger"""

    def setUp(self):
        parser = TLEParser()
        self.iss = parser.parse_tle(ISS_LINE1, ISS_LINE2, ISS_NAME)
        self.grus = parser.parse_tle(GRUS_LINE1, GRUS_LINE2, GRUS_NAME)
        self.cache = TLECache(last_bulk_update=0)

    def test_merge_appends_new_records(self):
        self.cache.merge([self.iss, self.grus], now=100)

        self.assertEqual(len(self.cache), 2)
        self.assertIn(25544, self.cache)
        self.assertEqual(self.cache.last_bulk_update, 100)
        self.assertEqual([r.catalog_number for r in self.cache], [25544, 43890])

    def test_merge_is_idempotent(self):
        """Test merging a batch twice only advances last_bulk_update"""
        self.cache.merge([self.iss, self.grus], now=100)
        first = self.cache.records

        self.cache.merge([self.iss, self.grus], now=200)

        self.assertEqual(self.cache.records, first)
        self.assertEqual(self.cache.last_bulk_update, 200)

    def test_merge_replaces_existing_entry(self):
        """Test an existing catalog number is replaced, not duplicated"""
        self.cache.merge([self.iss, self.grus], now=100)
        newer = self.iss.model_copy(update={"mean_motion": 15.5, "revolution_number": 21300})

        self.cache.merge([newer], now=200)

        self.assertEqual(len(self.cache), 2)
        self.assertIs(self.cache.get_tle(25544), newer)
        self.assertEqual(self.cache.records[0].revolution_number, 21300)
        self.assertEqual(self.iss.revolution_number, 21279)

    def test_later_duplicate_in_batch_wins(self):
        newer = self.iss.model_copy(update={"element_set_number": 1})
        self.cache.merge([self.iss, newer], now=1)
        self.assertEqual(len(self.cache), 1)
        self.assertEqual(self.cache.get_tle(25544).element_set_number, 1)

    def test_merge_stamps_current_time(self):
        with mock.patch("tle_catalog.cache.time.time", return_value=1718748281.9):
            self.cache.merge([self.iss])
        self.assertEqual(self.cache.last_bulk_update, 1718748281)

    def test_get_missing(self):
        with self.assertRaises(CatalogEntryNotFound) as ctx:
            self.cache.get_tle(99999)
        self.assertIsInstance(ctx.exception, KeyError)
        self.assertEqual(ctx.exception.catalog_number, 99999)
        self.assertIn("99999", str(ctx.exception))

    def test_records_are_immutable(self):
        with self.assertRaises(ValidationError):
            self.iss.mean_motion = 1.0


class TestCacheUpdate(unittest.TestCase):
    def test_update_merges_successes_and_reports_failures(self):
        broken = f"BROKEN\n{ISS_LINE1.replace('25544U', '25A44U')}\n{ISS_LINE2}\n"
        cache = TLECache(last_bulk_update=0)

        result = cache.update(lambda: FALLBACK_TLE_TEXT + broken)

        self.assertEqual(len(result.records), 9)
        self.assertEqual(len(result.failures), 1)
        self.assertEqual(len(cache), 9)
        self.assertGreater(cache.last_bulk_update, 0)
        self.assertIs(cache.last_result, result)

    def test_new_cache_has_never_merged(self):
        cache = TLECache()
        self.assertEqual(cache.last_bulk_update, 0)
        self.assertIsNone(cache.last_result)


class TestSnapshot(unittest.TestCase):
    """Snapshot files round-trip through JSON"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "output" / "cache.json"
        self.cache = TLECache(parse_tle_batch(FALLBACK_TLE_TEXT).records, last_bulk_update=1718748281)

    def tearDown(self):
        self.tmp.cleanup()

    def test_round_trip(self):
        self.cache.to_file(self.path)
        loaded = TLECache.from_file(self.path)

        self.assertEqual(loaded.last_bulk_update, 1718748281)
        self.assertEqual(loaded.records, self.cache.records)

    def test_snapshot_uses_json_names(self):
        self.cache.to_file(self.path)
        data = json.loads(self.path.read_text())

        self.assertEqual(set(data), {"last_bulk_update", "tles"})
        first = data["tles"][0]
        self.assertEqual(first["name"], "NOAA 15")
        self.assertEqual(first["satellite_number"], 25338)
        self.assertEqual(first["element_number"], 999)
        self.assertIn("epoch", first)
        self.assertIn("date_time", first)

    def test_load_existing_snapshot_skips_fetch(self):
        self.cache.to_file(self.path)
        fetcher = mock.Mock()

        cache = load_tle_cache(self.path, fetcher=fetcher)

        fetcher.assert_not_called()
        self.assertEqual(len(cache), 9)
        self.assertIsNone(cache.last_result)

    def test_load_missing_snapshot_bootstraps(self):
        fetcher = mock.Mock(return_value=FALLBACK_TLE_TEXT)

        cache = load_tle_cache(self.path, fetcher=fetcher)

        fetcher.assert_called_once_with()
        self.assertEqual(len(cache), 9)
        self.assertFalse(self.path.exists())

    def test_bootstrap_keeps_rejected_records(self):
        broken = f"BROKEN\n{ISS_LINE1.replace('25544U', '25A44U')}\n{ISS_LINE2}\n"

        cache = load_tle_cache(self.path, fetcher=lambda: FALLBACK_TLE_TEXT + broken)

        self.assertEqual(len(cache), 9)
        self.assertEqual(len(cache.last_result.failures), 1)
        self.assertEqual(cache.last_result.failures[0].index, 9)
        self.assertEqual(cache.last_result.failures[0].error.field, "catalog_number")

    def test_load_without_path_bootstraps(self):
        cache = load_tle_cache(None, fetcher=lambda: FALLBACK_TLE_TEXT)
        self.assertEqual(cache.get_tle(25338).name, "NOAA 15")

    def test_corrupt_snapshot(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text('{"last_bulk_update": "soon", "tles": []}')
        with self.assertRaises(ValidationError):
            TLECache.from_file(self.path)


if __name__ == "__main__":
    unittest.main()
