"""
Tests for the manifest builder and demo song generation.
"""
import json
import tempfile
import unittest
from pathlib import Path

from shared.constants import MANIFEST_PALETTE
from setup_tool.audio import AudioProcessor, DemoSong
from setup_tool.manifest import build_manifest, scan_songs


class TestManifest(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.songs = Path(self.tmp.name)
        AudioProcessor.write_sine_wave(self.songs / 'night_owl - slow burn.wav', 1, 440)
        AudioProcessor.write_sine_wave(self.songs / 'interlude.wav', 1, 220, fade=True)
        (self.songs / 'cover.png').write_bytes(b'\x89PNG')

    def tearDown(self):
        self.tmp.cleanup()

    def test_scan_songs(self):
        tracks = scan_songs(self.songs)

        self.assertEqual([t.title for t in tracks], ['Interlude', 'Slow Burn'])
        first, second = tracks
        self.assertEqual(first.artist, 'Unknown Artist')
        self.assertEqual(second.artist, 'Night Owl')
        self.assertEqual(second.src, 'songs/night_owl - slow burn.wav')
        self.assertAlmostEqual(first.duration, 1.0, places=1)
        self.assertEqual([t.accent for t in tracks], MANIFEST_PALETTE[:2])

    def test_build_manifest_writes_file(self):
        manifest = build_manifest(self.songs)

        written = json.loads((self.songs / 'manifest.json').read_text(encoding='utf-8'))
        self.assertEqual(written, manifest)
        self.assertIn('generatedAt', written)
        self.assertEqual(len(written['songs']), 2)
        self.assertEqual(written['songs'][0]['id'], 'interlude-wav')

    def test_build_manifest_custom_output(self):
        output = self.songs / 'out' / 'list.json'
        output.parent.mkdir()
        build_manifest(self.songs, output)
        self.assertTrue(output.exists())


class TestAudioProcessor(unittest.TestCase):
    def test_supported_formats(self):
        self.assertTrue(AudioProcessor.is_supported_format('a.MP3'))
        self.assertFalse(AudioProcessor.is_supported_format('a.txt'))

    def test_envelope(self):
        self.assertEqual(AudioProcessor.envelope(0.75, 10, fade=True), 0.5)
        self.assertEqual(AudioProcessor.envelope(5, 10, fade=True), 1.0)
        self.assertEqual(AudioProcessor.envelope(0, 10, fade=False), 1.0)

    def test_unreadable_file_has_zero_duration(self):
        with tempfile.NamedTemporaryFile(suffix='.mp3') as f:
            f.write(b'not audio')
            f.flush()
            self.assertEqual(AudioProcessor.read_duration(f.name), 0)

    def test_generate_demo_songs(self):
        with tempfile.TemporaryDirectory() as tmp:
            written = AudioProcessor.generate_demo_songs(tmp, [DemoSong('blip', 1, 440, False)])
            self.assertEqual([p.name for p in written], ['blip.wav'])
            self.assertAlmostEqual(AudioProcessor.read_duration(str(written[0])), 1.0, places=1)


if __name__ == '__main__':
    unittest.main()
