"""
Tests for the favourites manager.
"""
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from shared.kv_store import JsonFileStore
from shared.models import fallback_tracks
from player.favourites_manager import FavouritesManager
from fakes import MemoryStore


class TestFavouritesManager(unittest.TestCase):
    def setUp(self):
        self.store = MemoryStore()
        self.favourites = FavouritesManager(self.store)

    def test_toggle_twice_restores_previous_state(self):
        self.assertTrue(self.favourites.toggle("aurora-echoes"))
        self.assertTrue(self.favourites.is_favourite("aurora-echoes"))
        self.assertFalse(self.favourites.toggle("aurora-echoes"))
        self.assertFalse(self.favourites.is_favourite("aurora-echoes"))
        self.assertEqual(json.loads(self.store.values["liked-songs"]), [])

    def test_every_change_is_persisted(self):
        self.favourites.add("b")
        self.favourites.add("a")
        self.assertEqual(self.store.writes, 2)
        self.assertEqual(json.loads(self.store.values["liked-songs"]), ["a", "b"])

    def test_noop_changes_are_not_written(self):
        self.favourites.remove("missing")
        self.favourites.add("a")
        self.favourites.add("a")
        self.assertEqual(self.store.writes, 1)

    def test_persisted_set_is_restored(self):
        store = MemoryStore({"liked-songs": '["aurora-echoes"]'})
        favourites = FavouritesManager(store)
        self.assertTrue(favourites.is_favourite("aurora-echoes"))
        self.assertEqual(favourites.size(), 1)

    def test_corrupt_data_starts_empty(self):
        for raw in ("{not json", '{"a": 1}', "42"):
            favourites = FavouritesManager(MemoryStore({"liked-songs": raw}))
            self.assertEqual(favourites.get_all(), [])

    def test_non_string_entries_are_dropped(self):
        favourites = FavouritesManager(MemoryStore({"liked-songs": '["a", 3, null, "b"]'}))
        self.assertEqual(favourites.get_all(), ["a", "b"])

    def test_favourite_tracks_follow_catalog_order(self):
        tracks = fallback_tracks()
        self.favourites.add("luminous-trails")
        self.favourites.add("sunset-drive")
        self.favourites.add("not-in-catalog")

        result = self.favourites.favourite_tracks(tracks)
        self.assertEqual([t.id for t in result], ["sunset-drive", "luminous-trails"])
        self.assertTrue(self.favourites.is_favourite("not-in-catalog"))

    def test_change_callback(self):
        callback = MagicMock()
        self.favourites.add_change_callback(callback)
        self.favourites.toggle("a")
        self.favourites.toggle("a")
        self.assertEqual(callback.call_count, 2)

    def test_failing_callback_does_not_break_toggle(self):
        self.favourites.add_change_callback(MagicMock(side_effect=RuntimeError("boom")))
        self.assertTrue(self.favourites.toggle("a"))


class TestJsonFileStore(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "nested" / "store.json"

    def tearDown(self):
        self.tmp.cleanup()

    def test_values_survive_a_new_instance(self):
        FavouritesManager(JsonFileStore(self.path)).add("aurora-echoes")

        favourites = FavouritesManager(JsonFileStore(self.path))
        self.assertTrue(favourites.is_favourite("aurora-echoes"))

    def test_missing_file_reads_as_empty(self):
        self.assertIsNone(JsonFileStore(self.path).get("liked-songs"))

    def test_unreadable_file_reads_as_empty(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("garbage", encoding="utf-8")
        store = JsonFileStore(self.path)
        self.assertIsNone(store.get("liked-songs"))

        store.set("liked-songs", "[]")
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), {"liked-songs": "[]"})


if __name__ == '__main__':
    unittest.main()
