"""
Tests for catalog search filtering.
"""
import unittest

from shared.models import Track, fallback_tracks
from player.search import filter_tracks, normalize_query


class TestFilterTracks(unittest.TestCase):
    def setUp(self):
        self.tracks = fallback_tracks()

    def test_matches_artist(self):
        result = filter_tracks(self.tracks, "neon")
        self.assertEqual([t.id for t in result], ["sunset-drive"])

    def test_matches_title_case_insensitively(self):
        result = filter_tracks(self.tracks, "MIDNIGHT")
        self.assertEqual([t.id for t in result], ["midnight-canvas"])

    def test_blank_query_returns_everything_in_order(self):
        for query in ("", "   ", None):
            result = filter_tracks(self.tracks, query)
            self.assertEqual([t.id for t in result], [t.id for t in self.tracks])

    def test_order_is_preserved(self):
        result = filter_tracks(self.tracks, "bloom")
        self.assertEqual([t.id for t in result], ["opalescent-sky", "luminous-trails"])

    def test_surrounding_whitespace_is_ignored(self):
        self.assertEqual(len(filter_tracks(self.tracks, "  synth lab ")), 1)

    def test_no_match(self):
        self.assertEqual(filter_tracks(self.tracks, "polka"), [])

    def test_unicode_casefold(self):
        tracks = [Track(id="strasse", title="Straße", artist="Kraft")]
        self.assertEqual(len(filter_tracks(tracks, "STRASSE")), 1)

    def test_normalize_query(self):
        self.assertEqual(normalize_query("  Hello "), "hello")
        self.assertEqual(normalize_query(None), "")


if __name__ == '__main__':
    unittest.main()
