"""
Tests for service/gateway.py
"""

import subprocess
import tempfile
from pathlib import Path
from unittest.mock import patch

from django.test import TestCase, override_settings

from downloads.service.errors import AmbiguousArtifact, ArtifactNotFound, ExternalToolFailure
from downloads.service.gateway import download_media, ensure_download_dir


def fake_ytdlp(ext, titles=('Test Video',), returncode=0, stderr='', partial=False):
    """Stand-in for subprocess.run that writes what yt-dlp would have written."""

    def run(cmd, **kwargs):
        template = cmd[cmd.index('-o') + 1]
        for title in titles:
            path = template.replace('%(title)s', title).replace('%(ext)s', ext)
            if partial:
                path += '.part'
            Path(path).write_bytes(b'fake media data')
        return subprocess.CompletedProcess(cmd, returncode, stdout='', stderr=stderr)

    return run


class DownloadMediaTest(TestCase):
    """Tests for the download pipeline"""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.download_dir = Path(self._tmp.name) / 'downloads'
        self.settings_override = override_settings(GATEWAY_DOWNLOAD_DIR=str(self.download_dir))
        self.settings_override.enable()

    def tearDown(self):
        self.settings_override.disable()
        self._tmp.cleanup()

    def test_ensure_download_dir_creates_it(self):
        self.assertFalse(self.download_dir.exists())
        self.assertEqual(ensure_download_dir(), self.download_dir)
        self.assertTrue(self.download_dir.is_dir())

    @patch('downloads.service.ytdlp.subprocess.run')
    def test_audio_download(self, mock_run):
        mock_run.side_effect = fake_ytdlp('mp3')

        artifact = download_media('https://valid.example/watch?v=abc123', 'audio', 'mp3', '192')

        self.assertTrue(artifact.path.exists())
        self.assertEqual(artifact.path.parent, self.download_dir)
        self.assertTrue(artifact.filename.startswith('Test Video_'))
        self.assertIn(artifact.token, artifact.filename)
        self.assertTrue(artifact.filename.endswith('.mp3'))

        cmd = mock_run.call_args[0][0]
        self.assertIn('-x', cmd)
        self.assertEqual(cmd[cmd.index('--audio-quality') + 1], '192')

    @patch('downloads.service.ytdlp.subprocess.run')
    def test_video_download(self, mock_run):
        mock_run.side_effect = fake_ytdlp('mp4')

        artifact = download_media('https://valid.example/x', 'video', 'mp4', '720')

        self.assertEqual(artifact.path.suffix, '.mp4')
        cmd = mock_run.call_args[0][0]
        self.assertEqual(cmd[cmd.index('-f') + 1], 'best[height<=720]')

    @patch('downloads.service.ytdlp.subprocess.run')
    def test_tool_failure_purges_partials(self, mock_run):
        mock_run.side_effect = fake_ytdlp(
            'webm', returncode=1, stderr='ERROR: unable to download', partial=True
        )

        with self.assertRaises(ExternalToolFailure) as ctx:
            download_media('https://valid.example/x', 'video', 'mp4', 'best')

        self.assertEqual(str(ctx.exception), 'ERROR: unable to download')
        self.assertEqual(list(self.download_dir.iterdir()), [])

    @patch('downloads.service.ytdlp.subprocess.run')
    def test_success_without_file(self, mock_run):
        mock_run.side_effect = fake_ytdlp('mp3', titles=())

        with self.assertRaises(ArtifactNotFound):
            download_media('https://valid.example/x', 'audio', 'mp3', '320')

    @patch('downloads.service.ytdlp.subprocess.run')
    def test_success_with_only_partial_file_purges_it(self, mock_run):
        mock_run.side_effect = fake_ytdlp('mp4', partial=True)

        with self.assertRaises(ArtifactNotFound):
            download_media('https://valid.example/x', 'video', 'mp4', 'best')

        self.assertEqual(list(self.download_dir.iterdir()), [])

    @patch('downloads.service.ytdlp.subprocess.run')
    def test_ambiguous_output_is_purged(self, mock_run):
        mock_run.side_effect = fake_ytdlp('mp4', titles=('Part 1', 'Part 2'))

        with self.assertRaises(AmbiguousArtifact):
            download_media('https://valid.example/x', 'video', 'mp4', 'best')

        self.assertEqual(list(self.download_dir.iterdir()), [])

    @patch('downloads.service.ytdlp.subprocess.run')
    def test_other_requests_files_untouched(self, mock_run):
        self.download_dir.mkdir(parents=True)
        other = self.download_dir / 'Other_1600000000000-zzzzzzzz.mp3'
        other.write_bytes(b'in flight')
        mock_run.side_effect = fake_ytdlp('mp3', returncode=1, stderr='boom')

        with self.assertRaises(ExternalToolFailure):
            download_media('https://valid.example/x', 'audio', 'mp3', '320')

        self.assertTrue(other.exists())

    @patch('downloads.service.ytdlp.subprocess.run')
    def test_logger(self, mock_run):
        mock_run.side_effect = fake_ytdlp('mp3')
        logs = []

        download_media('https://valid.example/x', 'audio', 'mp3', '320', logger=logs.append)

        self.assertTrue(any('Executing' in m for m in logs))
        self.assertTrue(any('Downloaded file' in m for m in logs))
