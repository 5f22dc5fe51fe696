"""
Main download entrypoint.

Provides a single function to download a URL into the transient
directory and return the resulting artifact, used by both the API and
the CLI.
"""

from downloads.service.artifacts import locate_artifact, purge_token
from downloads.service.command import build_download_plan
from downloads.service.config import get_download_dir
from downloads.service.errors import AmbiguousArtifact, ArtifactNotFound, ExternalToolFailure
from downloads.service.ytdlp import run_ytdlp


def ensure_download_dir():
    """Create the download directory if needed and return it."""
    download_dir = get_download_dir()
    download_dir.mkdir(parents=True, exist_ok=True)
    return download_dir


def download_media(url, media_kind, fmt, quality, logger=None):
    """
    Download a URL with yt-dlp and locate the file it produced.

    Blocks until yt-dlp exits.

    Args:
        url: Validated source URL
        media_kind: 'audio' or 'video'
        fmt: Audio codec or video container
        quality: Quality selector (see command.build_download_plan)
        logger: Optional callable(str) for logging

    Returns:
        Artifact

    Raises:
        ExternalToolFailure: yt-dlp failed
        ArtifactNotFound: yt-dlp succeeded but wrote no matching file
        AmbiguousArtifact: Several files matched the request token
    """

    def log(message):
        if logger:
            logger(message)

    download_dir = ensure_download_dir()
    plan = build_download_plan(url, media_kind, fmt, quality, download_dir=download_dir)
    log(f'Downloading {media_kind} ({fmt}, quality {quality}) from {url} [token {plan.token}]')

    try:
        run_ytdlp(plan.args, logger=logger)
        artifact = locate_artifact(plan.token, download_dir)
    except (ExternalToolFailure, ArtifactNotFound, AmbiguousArtifact):
        removed = purge_token(plan.token, download_dir)
        if removed:
            log(f'Removed {removed} leftover file(s) for token {plan.token}')
        raise

    log(f'Downloaded file: {artifact.filename} ({artifact.size_mb})')
    return artifact
