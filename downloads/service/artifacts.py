"""
Artifacts in the download directory.

yt-dlp names its output from the video metadata, so the gateway never
knows a filename in advance: it finds the file again by the token it put
in the output template, hands it out once, and deletes it shortly after.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import List

from django.utils import timezone

from downloads.service.config import get_download_dir
from downloads.service.constants import DOWNLOAD_URL_PREFIX, PARTIAL_SUFFIXES
from downloads.service.errors import AmbiguousArtifact, ArtifactNotFound, NotFound
from downloads.service.metadata import format_size_mb


@dataclass
class Artifact:
    """A file produced by yt-dlp, waiting for delivery and deletion"""

    filename: str
    path: Path
    size_bytes: int
    created_at: datetime
    token: str = ''

    @classmethod
    def from_path(cls, path, token=''):
        path = Path(path)
        stat = path.stat()
        # st_birthtime only exists on some platforms
        created = getattr(stat, 'st_birthtime', None) or stat.st_ctime
        return cls(
            filename=path.name,
            path=path,
            size_bytes=stat.st_size,
            created_at=datetime.fromtimestamp(created, tz=timezone.get_current_timezone()),
            token=token,
        )

    @property
    def size_mb(self):
        return format_size_mb(self.size_bytes)

    @property
    def download_url(self):
        return f'{DOWNLOAD_URL_PREFIX}{self.filename}'

    def as_dict(self):
        return {
            'filename': self.filename,
            'size': self.size_mb,
            'created': self.created_at.isoformat(),
            'download_url': self.download_url,
        }


def _resolve_dir(download_dir):
    return Path(download_dir) if download_dir is not None else get_download_dir()


def is_partial(path):
    return Path(path).suffix in PARTIAL_SUFFIXES


def find_token_files(token, download_dir=None):
    """Return every file in the download directory whose name contains the token."""
    directory = _resolve_dir(download_dir)
    if not token or not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if token in p.name and p.is_file())


def locate_artifact(token, download_dir=None):
    """
    Find the file yt-dlp wrote for a request.

    Args:
        token: Correlation token embedded in the output template
        download_dir: Directory to search (default from settings)

    Returns:
        Artifact

    Raises:
        ArtifactNotFound: No complete file carries the token
        AmbiguousArtifact: More than one complete file carries the token
    """
    matches = [p for p in find_token_files(token, download_dir) if not is_partial(p)]

    if not matches:
        raise ArtifactNotFound()
    if len(matches) > 1:
        raise AmbiguousArtifact(token, [p.name for p in matches])

    return Artifact.from_path(matches[0], token=token)


def list_artifacts(download_dir=None) -> List[Artifact]:
    """
    List every file currently in the download directory.

    Returns:
        list[Artifact] sorted by filename; empty when the directory is missing
    """
    directory = _resolve_dir(download_dir)
    if not directory.is_dir():
        return []

    artifacts = []
    for path in sorted(directory.iterdir()):
        if not path.is_file():
            continue
        try:
            artifacts.append(Artifact.from_path(path))
        except FileNotFoundError:
            # Deleted by a cleanup task while we were listing
            continue
    return artifacts


def resolve_artifact_path(name, download_dir=None) -> Path:
    """
    Map a client-supplied filename to a file inside the download directory.

    Raises:
        NotFound: The name is empty, points outside the directory, or no
            such file exists
    """
    if not name or name in ('.', '..') or '/' in name or '\\' in name or '\x00' in name:
        raise NotFound()

    directory = _resolve_dir(download_dir)
    path = directory / name
    if path.resolve().parent != directory.resolve() or not path.is_file():
        raise NotFound()
    return path


def delete_artifact(name, download_dir=None):
    """
    Delete a file from the download directory.

    Raises:
        NotFound: No such file
    """
    path = resolve_artifact_path(name, download_dir)
    try:
        path.unlink()
    except FileNotFoundError:
        raise NotFound()


def remove_if_exists(path):
    """
    Delete a file if it is still there.

    Returns:
        bool: True if a file was removed
    """
    path = Path(path)
    if not path.exists():
        return False
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


def purge_token(token, download_dir=None):
    """
    Remove every file carrying a token, including partial downloads.

    Returns:
        int: Number of files removed
    """
    return sum(1 for p in find_token_files(token, download_dir) if remove_if_exists(p))


def find_stale_artifacts(max_age_minutes, download_dir=None, now=None) -> List[Artifact]:
    """
    Find files older than max_age_minutes (by modification time).

    These are files whose scheduled cleanup never ran, e.g. because the
    huey consumer was down.
    """
    now = now or timezone.now()
    cutoff = now - timedelta(minutes=max_age_minutes)

    stale = []
    for artifact in list_artifacts(download_dir):
        try:
            mtime = artifact.path.stat().st_mtime
        except FileNotFoundError:
            continue
        if datetime.fromtimestamp(mtime, tz=timezone.get_current_timezone()) < cutoff:
            stale.append(artifact)
    return stale
