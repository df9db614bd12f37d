"""
Tests for the setup tool command line.
"""
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from setup_tool.audio import AudioProcessor
from setup_tool.cli import cli


class TestSetupCli(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()
        self.tmp = tempfile.TemporaryDirectory()
        self.env = {'TUNENOODLE_CONFIG_DIR': self.tmp.name, 'TUNENOODLE_PROVIDER': ''}

    def tearDown(self):
        self.tmp.cleanup()

    def test_init_local_writes_config(self):
        result = self.runner.invoke(
            cli, ['init', '--provider', 'local', '--endpoint', '/srv/music', '--bucket', 'songs'],
            env=self.env)

        self.assertEqual(result.exit_code, 0, result.output)
        config = json.loads((Path(self.tmp.name) / 'config.json').read_text(encoding='utf-8'))
        self.assertEqual(config['provider'], 'local')
        self.assertEqual(config['endpoint'], '/srv/music')

    def test_status_unconfigured(self):
        result = self.runner.invoke(cli, ['status'], env=self.env)
        self.assertEqual(result.exit_code, 0)
        self.assertIn('Not configured', result.output)

    @patch('setup_tool.cli.load_player_config', return_value=None)
    def test_catalog_lists_demo_songs(self, mock_config):
        result = self.runner.invoke(cli, ['catalog'])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('Aurora Echoes', result.output)
        self.assertIn('5 songs', result.output)
        self.assertIn('--:--', result.output)

    def test_build_manifest(self):
        songs = Path(self.tmp.name) / 'songs'
        AudioProcessor.write_sine_wave(songs / 'tone.wav', 1, 440)

        result = self.runner.invoke(cli, ['build-manifest', str(songs)])

        self.assertEqual(result.exit_code, 0, result.output)
        manifest = json.loads((songs / 'manifest.json').read_text(encoding='utf-8'))
        self.assertEqual(manifest['songs'][0]['title'], 'Tone')


if __name__ == '__main__':
    unittest.main()
