"""
Download command builder.

Turns (url, media kind, format, quality) into the yt-dlp arguments for a
download. The final filename is chosen by yt-dlp from the video title, so
every plan embeds a unique token in the output template; the artifact
locator finds the file again by that token.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from nanoid import generate

from downloads.service.config import get_download_dir
from downloads.service.constants import (
    BEST_QUALITY,
    DEFAULT_AUDIO_FORMAT,
    DEFAULT_AUDIO_QUALITY,
    MEDIA_KIND_AUDIO,
    MEDIA_KIND_VIDEO,
)

TOKEN_ALPHABET = '0123456789abcdefghijklmnopqrstuvwxyz'
TOKEN_RANDOM_SIZE = 8


@dataclass
class DownloadPlan:
    """A planned yt-dlp download"""

    url: str
    media_kind: str
    format: str
    quality: str
    token: str
    output_template: str
    args: List[str] = field(default_factory=list)


def new_token():
    """
    Generate a correlation token: '<epoch millis>-<random>'.

    The random part keeps tokens unique for requests arriving in the same
    millisecond.
    """
    millis = int(time.time() * 1000)
    return f'{millis}-{generate(TOKEN_ALPHABET, TOKEN_RANDOM_SIZE)}'


def output_template(download_dir, token):
    """yt-dlp -o template: '<dir>/%(title)s_<token>.%(ext)s'"""
    return str(Path(download_dir) / f'%(title)s_{token}.%(ext)s')


def audio_args(fmt, quality):
    args = ['-x', '--audio-format', fmt]
    if fmt == DEFAULT_AUDIO_FORMAT:
        args.extend(['--audio-quality', quality or DEFAULT_AUDIO_QUALITY])
    return args


def video_args(fmt, quality):
    if quality == BEST_QUALITY:
        return ['-f', f'best[ext={fmt}]']
    return ['-f', f'best[height<={quality}]']


def build_download_plan(
    url: str,
    media_kind: str,
    fmt: str,
    quality: str,
    download_dir: Optional[Path] = None,
    token: Optional[str] = None,
) -> DownloadPlan:
    """
    Plan a yt-dlp download. Nothing is executed here.

    Args:
        url: Validated source URL
        media_kind: 'audio' or 'video'
        fmt: Audio codec (e.g. 'mp3') or video container (e.g. 'mp4')
        quality: Audio bitrate/VBR level, or 'best' / max height for video
        download_dir: Output directory (default from settings)
        token: Correlation token (generated when omitted)

    Returns:
        DownloadPlan
    """
    if media_kind == MEDIA_KIND_AUDIO:
        selection = audio_args(fmt, quality)
    elif media_kind == MEDIA_KIND_VIDEO:
        selection = video_args(fmt, quality)
    else:
        raise ValueError(f'Unknown media kind: {media_kind}')

    if download_dir is None:
        download_dir = get_download_dir()
    if token is None:
        token = new_token()

    template = output_template(download_dir, token)
    args = [*selection, '--no-playlist', '-o', template, '--', url]

    return DownloadPlan(
        url=url,
        media_kind=media_kind,
        format=fmt,
        quality=quality,
        token=token,
        output_template=template,
        args=args,
    )
