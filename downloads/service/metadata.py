"""
Metadata queries.

Asks yt-dlp for a video's JSON description without downloading it and
reduces it to the fields the API exposes.
"""

import json

from downloads.service.constants import DESCRIPTION_MAX_CHARS, INFO_MAX_FORMATS
from downloads.service.errors import MetadataParseFailure
from downloads.service.ytdlp import run_ytdlp


def format_size_mb(size_bytes):
    """Format a byte count as 'X.XX MB'."""
    return f'{size_bytes / (1024 * 1024):.2f} MB'


def truncate_description(description):
    """Cut a description to DESCRIPTION_MAX_CHARS characters plus '...'."""
    if not description:
        return ''
    if len(description) <= DESCRIPTION_MAX_CHARS:
        return description
    return description[:DESCRIPTION_MAX_CHARS] + '...'


def summarize_format(fmt):
    size = fmt.get('filesize') or fmt.get('filesize_approx')
    return {
        'format_id': fmt.get('format_id'),
        'ext': fmt.get('ext'),
        'quality': fmt.get('format_note'),
        'filesize': format_size_mb(size) if size else 'Unknown',
    }


def summarize_info(info):
    """
    Reduce yt-dlp's info dict to the public metadata object.

    Args:
        info: Parsed output of yt-dlp --dump-json

    Returns:
        dict with keys: title, duration, uploader, view_count, thumbnail,
        description, formats
    """
    formats = info.get('formats') or []
    return {
        'title': info.get('title'),
        'duration': info.get('duration_string'),
        'uploader': info.get('uploader'),
        'view_count': info.get('view_count'),
        'thumbnail': info.get('thumbnail'),
        'description': truncate_description(info.get('description')),
        'formats': [summarize_format(f) for f in formats[:INFO_MAX_FORMATS]],
    }


def fetch_video_info(url, logger=None):
    """
    Fetch metadata for a URL without downloading it.

    Args:
        url: Validated source URL
        logger: Optional callable(str) for logging

    Returns:
        dict: see summarize_info

    Raises:
        ExternalToolFailure: yt-dlp exited non-zero
        MetadataParseFailure: yt-dlp printed something other than a JSON object
    """
    result = run_ytdlp(['--dump-json', '--no-download', '--no-playlist', '--', url], logger=logger)

    try:
        info = json.loads(result.stdout)
    except (TypeError, ValueError):
        raise MetadataParseFailure()

    if not isinstance(info, dict):
        raise MetadataParseFailure()

    return summarize_info(info)
