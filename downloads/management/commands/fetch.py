"""
Django management command for fetching media from the command line.

Runs the same yt-dlp pipeline as the API. Downloaded files stay in the
download directory; nothing schedules their deletion, so remove them
yourself or let the periodic sweep / cleanup_downloads handle them.
"""

import json

from django.core.management.base import BaseCommand, CommandError

from downloads.service.constants import (
    AUDIO_FORMATS,
    BEST_QUALITY,
    DEFAULT_AUDIO_FORMAT,
    DEFAULT_AUDIO_QUALITY,
    DEFAULT_VIDEO_FORMAT,
    MEDIA_KIND_AUDIO,
    MEDIA_KINDS,
    VIDEO_FORMATS,
)
from downloads.service.errors import GatewayError
from downloads.service.gateway import download_media
from downloads.service.metadata import fetch_video_info
from downloads.service.validate import validate_quality, validate_url


class Command(BaseCommand):
    help = 'Show info for a video URL or download it into the gateway download directory'

    def add_arguments(self, parser):
        parser.add_argument('url', type=str, help='Video page URL')
        parser.add_argument(
            '--type',
            type=str,
            default=MEDIA_KIND_AUDIO,
            choices=MEDIA_KINDS,
            help='Media type to download (default: audio)',
        )
        parser.add_argument(
            '--format',
            type=str,
            default=None,
            help=(
                f'Audio codec ({", ".join(AUDIO_FORMATS)}) or video container '
                f'({", ".join(VIDEO_FORMATS)}); default mp3 / mp4'
            ),
        )
        parser.add_argument(
            '--quality',
            type=str,
            default=None,
            help="Audio bitrate (default 320) or video height / 'best' (default best)",
        )
        parser.add_argument(
            '--info', action='store_true', help='Only print metadata, do not download'
        )
        parser.add_argument('--verbose', action='store_true', help='Enable verbose output')
        parser.add_argument('--json', action='store_true', help='Output result as JSON')

    def handle(self, *args, **options):
        media_kind = options['type']
        output_json = options['json']
        logger = self.stdout.write if options['verbose'] and not output_json else None

        if media_kind == MEDIA_KIND_AUDIO:
            fmt = options['format'] or DEFAULT_AUDIO_FORMAT
            allowed = AUDIO_FORMATS
            quality = options['quality'] or DEFAULT_AUDIO_QUALITY
        else:
            fmt = options['format'] or DEFAULT_VIDEO_FORMAT
            allowed = VIDEO_FORMATS
            quality = options['quality'] or BEST_QUALITY

        if fmt not in allowed:
            raise CommandError(f'Unsupported {media_kind} format: {fmt}')

        try:
            url = validate_url(options['url'])
            if options['info']:
                info = fetch_video_info(url, logger=logger)
                self._write_info(info, output_json)
                return

            quality = validate_quality(media_kind, quality)
            artifact = download_media(url, media_kind, fmt, quality, logger=logger)
        except GatewayError as e:
            if output_json:
                self.stdout.write(json.dumps({'success': False, 'error': str(e)}, indent=2))
                return
            raise CommandError(str(e))

        if output_json:
            output = {'success': True, 'path': str(artifact.path), **artifact.as_dict()}
            self.stdout.write(json.dumps(output, indent=2))
        else:
            self.stdout.write(self.style.SUCCESS('✓ Download complete'))
            self.stdout.write(f'  File: {artifact.filename}')
            self.stdout.write(f'  Path: {artifact.path}')
            self.stdout.write(f'  Size: {artifact.size_mb}')

    def _write_info(self, info, output_json):
        if output_json:
            self.stdout.write(json.dumps(info, indent=2))
            return

        self.stdout.write(f'Title: {info["title"]}')
        self.stdout.write(f'Uploader: {info["uploader"]}')
        self.stdout.write(f'Duration: {info["duration"]}')
        self.stdout.write(f'Views: {info["view_count"]}')
        if info['description']:
            self.stdout.write(f'Description: {info["description"]}')
        if info['formats']:
            self.stdout.write('Formats:')
            for fmt in info['formats']:
                self.stdout.write(
                    f'  {fmt["format_id"]:>8}  {fmt["ext"] or "":5} '
                    f'{fmt["quality"] or "":12} {fmt["filesize"]}'
                )
