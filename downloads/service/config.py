"""
Configuration adapter for gateway settings.

Centralizes access to Django settings so the service layer, the views
and the management commands agree on the same values.
"""

import shlex
from pathlib import Path

from django.conf import settings


def get_download_dir():
    """Get the transient download directory as a Path"""
    return Path(settings.GATEWAY_DOWNLOAD_DIR)


def get_ytdlp_path():
    """Get the yt-dlp executable (name on PATH or absolute path)"""
    return settings.GATEWAY_YTDLP_PATH


def get_ytdlp_timeout():
    """
    Get the yt-dlp timeout in seconds.

    Returns:
        int | None: None means wait for the process indefinitely
    """
    timeout = settings.GATEWAY_YTDLP_TIMEOUT
    if not timeout:
        return None
    return int(timeout)


def get_cleanup_delay():
    """Seconds between the end of a transfer and deletion of the file"""
    return int(settings.GATEWAY_CLEANUP_DELAY)


def get_stale_max_age():
    """Minutes after which a file in the download directory counts as abandoned"""
    return int(settings.GATEWAY_STALE_MAX_AGE)


def get_ytdlp_global_args():
    """
    Get arguments passed to every yt-dlp invocation.

    Combines the proxy setting with the free-form extra args string.

    Returns:
        list: yt-dlp command-line arguments

    Example:
        >>> # GATEWAY_YTDLP_PROXY='socks5://127.0.0.1:9050'
        >>> # GATEWAY_YTDLP_EXTRA_ARGS='--sleep-interval 2 --no-mtime'
        >>> get_ytdlp_global_args()
        ['--proxy', 'socks5://127.0.0.1:9050', '--sleep-interval', '2', '--no-mtime']
    """
    args = []
    if settings.GATEWAY_YTDLP_PROXY:
        args.extend(['--proxy', settings.GATEWAY_YTDLP_PROXY])
    if settings.GATEWAY_YTDLP_EXTRA_ARGS:
        args.extend(shlex.split(settings.GATEWAY_YTDLP_EXTRA_ARGS))
    return args
