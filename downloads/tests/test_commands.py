import json
import os
import subprocess
import tempfile
import time
from io import StringIO
from pathlib import Path
from unittest.mock import patch

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings


def fake_download(cmd, **kwargs):
    template = cmd[cmd.index('-o') + 1]
    Path(template.replace('%(title)s', 'Test Video').replace('%(ext)s', 'mp3')).write_bytes(b'data')
    return subprocess.CompletedProcess(cmd, 0, stdout='', stderr='')


class CommandTestCase(TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.download_dir = Path(self._tmp.name)
        self.settings_override = override_settings(GATEWAY_DOWNLOAD_DIR=self._tmp.name)
        self.settings_override.enable()

    def tearDown(self):
        self.settings_override.disable()
        self._tmp.cleanup()


class FetchCommandTest(CommandTestCase):
    @patch('downloads.service.ytdlp.subprocess.run', side_effect=fake_download)
    def test_download_json(self, mock_run):
        out = StringIO()
        call_command('fetch', 'https://valid.example/x', '--json', stdout=out)

        result = json.loads(out.getvalue())
        self.assertTrue(result['success'])
        self.assertTrue(Path(result['path']).exists())
        self.assertTrue(result['filename'].endswith('.mp3'))

    @patch('downloads.service.ytdlp.subprocess.run', side_effect=fake_download)
    def test_download_text(self, mock_run):
        out = StringIO()
        call_command('fetch', 'https://valid.example/x', stdout=out)
        self.assertIn('Download complete', out.getvalue())

    @patch('downloads.service.ytdlp.subprocess.run')
    def test_info(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            [], 0, stdout=json.dumps({'title': 'Test Video', 'uploader': 'Someone'}), stderr=''
        )
        out = StringIO()

        call_command('fetch', 'https://valid.example/x', '--info', stdout=out)

        self.assertIn('Title: Test Video', out.getvalue())
        self.assertIn('--dump-json', mock_run.call_args[0][0])

    def test_invalid_url(self):
        with self.assertRaises(CommandError):
            call_command('fetch', 'ftp://x', stdout=StringIO())

    def test_unsupported_format(self):
        with self.assertRaises(CommandError):
            call_command('fetch', 'https://valid.example/x', '--type', 'video', '--format', 'mp3', stdout=StringIO())

    @patch('downloads.service.ytdlp.subprocess.run')
    def test_failure_json(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess([], 1, stdout='', stderr='ERROR: nope')
        out = StringIO()

        call_command('fetch', 'https://valid.example/x', '--json', stdout=out)

        self.assertEqual(json.loads(out.getvalue()), {'success': False, 'error': 'ERROR: nope'})


class CleanupDownloadsCommandTest(CommandTestCase):
    def _make_old(self, name):
        path = self.download_dir / name
        path.write_bytes(b'data')
        two_hours_ago = time.time() - 2 * 60 * 60
        os.utime(path, (two_hours_ago, two_hours_ago))
        return path

    def test_nothing_to_do(self):
        out = StringIO()
        call_command('cleanup_downloads', '--force', stdout=out)
        self.assertIn('No files older than', out.getvalue())

    def test_dry_run_keeps_files(self):
        path = self._make_old('old.mp3')
        out = StringIO()

        call_command('cleanup_downloads', '--dry-run', '--max-age', '60', stdout=out)

        self.assertIn('DRY RUN', out.getvalue())
        self.assertTrue(path.exists())

    def test_force_deletes(self):
        old = self._make_old('old.mp3')
        new = self.download_dir / 'new.mp3'
        new.write_bytes(b'data')
        out = StringIO()

        call_command('cleanup_downloads', '--force', '--max-age', '60', stdout=out)

        self.assertFalse(old.exists())
        self.assertTrue(new.exists())
        self.assertIn('Deleted 1 of 1', out.getvalue())

    @patch('builtins.input', return_value='n')
    def test_confirmation_declined(self, mock_input):
        path = self._make_old('old.mp3')
        out = StringIO()

        call_command('cleanup_downloads', '--max-age', '60', stdout=out)

        self.assertIn('Cancelled', out.getvalue())
        self.assertTrue(path.exists())
