"""
Request parameter validation.
"""

import re
from urllib.parse import urlparse

from downloads.service.constants import BEST_QUALITY, MEDIA_KIND_AUDIO, MEDIA_KIND_VIDEO
from downloads.service.errors import InvalidParameter, InvalidUrl, MissingParameter

AUDIO_QUALITY_RE = re.compile(r'^\d{1,4}[kK]?$')
VIDEO_HEIGHT_RE = re.compile(r'^\d{1,5}$')


def validate_url(raw):
    """
    Validate the target URL of a request.

    Args:
        raw: Raw query parameter value (may be None)

    Returns:
        str: The URL, stripped of surrounding whitespace

    Raises:
        MissingParameter: No URL supplied
        InvalidUrl: Not an absolute http(s) URL
    """
    if raw is None or not raw.strip():
        raise MissingParameter()

    url = raw.strip()
    try:
        parsed = urlparse(url)
    except ValueError:
        raise InvalidUrl()

    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise InvalidUrl()

    return url


def validate_quality(media_kind, raw):
    """
    Validate a quality selector.

    Audio takes a yt-dlp --audio-quality value (a VBR level or a bitrate,
    e.g. '5', '192', '320K'). Video takes 'best' or a maximum height.
    """
    quality = (raw or '').strip()

    if media_kind == MEDIA_KIND_AUDIO:
        if AUDIO_QUALITY_RE.match(quality):
            return quality
        raise InvalidParameter(f'Invalid audio quality: {raw!r}')

    if media_kind == MEDIA_KIND_VIDEO:
        if quality == BEST_QUALITY:
            return quality
        if VIDEO_HEIGHT_RE.match(quality) and int(quality) > 0:
            return quality
        raise InvalidParameter(f"Invalid video quality: {raw!r} (use 'best' or a height like 720)")

    raise ValueError(f'Unknown media kind: {media_kind}')
