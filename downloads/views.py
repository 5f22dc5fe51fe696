import logging
import unicodedata
from urllib.parse import quote

from django.http import FileResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods
from django.views.static import serve

from downloads.service.artifacts import delete_artifact, list_artifacts
from downloads.service.config import get_download_dir
from downloads.service.constants import (
    BEST_QUALITY,
    DEFAULT_AUDIO_FORMAT,
    DEFAULT_AUDIO_QUALITY,
    DEFAULT_VIDEO_FORMAT,
    MEDIA_KIND_AUDIO,
    MEDIA_KIND_VIDEO,
)
from downloads.service.errors import GatewayError
from downloads.service.gateway import download_media
from downloads.service.metadata import fetch_video_info
from downloads.service.validate import validate_quality, validate_url
from downloads.tasks import schedule_cleanup

logger = logging.getLogger(__name__)


def attachment_disposition(filename):
    """
    Content-Disposition for a download.

    Always carries a plain filename="..." (non-ASCII characters folded or
    dropped); the exact name follows as filename*= when they differ.
    """
    fallback = unicodedata.normalize('NFKD', filename).encode('ascii', 'ignore').decode('ascii')
    fallback = ''.join('_' if c in '"\\' or not c.isprintable() else c for c in fallback).strip()
    if not fallback or fallback.startswith('.'):
        fallback = f'download{fallback}'

    disposition = f'attachment; filename="{fallback}"'
    if fallback != filename:
        disposition += f"; filename*=utf-8''{quote(filename)}"
    return disposition


class ArtifactResponse(FileResponse):
    """
    Streams a downloaded file as an attachment and schedules its deletion.

    The WSGI server calls close() once the transfer is over, whether the
    client read everything or went away halfway.
    """

    def __init__(self, artifact, stream, *args, **kwargs):
        self.artifact = artifact
        self._cleanup_scheduled = False
        super().__init__(stream, *args, as_attachment=True, filename=artifact.filename, **kwargs)
        self['Content-Disposition'] = attachment_disposition(artifact.filename)

    def close(self):
        try:
            super().close()
        finally:
            if not self._cleanup_scheduled:
                self._cleanup_scheduled = True
                try:
                    schedule_cleanup(self.artifact.path)
                except Exception:
                    logger.exception('Could not schedule cleanup of %s', self.artifact.path)


def _error_response(error, context):
    """Serialize a failure as {"error": message} with its status code."""
    status = getattr(error, 'status_code', 500)
    if status >= 500:
        logger.error('%s error: %s', context, error)
    else:
        logger.info('%s rejected: %s', context, error)
    return JsonResponse({'error': str(error)}, status=status)


def home_view(request):
    """Capability listing."""
    return JsonResponse(
        {
            'message': 'YT-DLP API Server is Running!',
            'endpoints': {
                '/api/info?url=VIDEO_URL': 'Get video information',
                '/api/download/mp3?url=VIDEO_URL&quality=320': 'Download as MP3',
                '/api/download/mp4?url=VIDEO_URL&quality=best': 'Download as MP4',
                '/api/files': 'List downloaded files',
                'DELETE /api/files/<filename>': 'Delete a downloaded file',
            },
            'note': 'Downloaded files are removed shortly after they are delivered',
        }
    )


@require_GET
def info_view(request):
    """
    Video metadata without downloading.

    Params:
        url (required): Video page URL

    Returns:
        JSON metadata object, or {"error": ...}
    """
    try:
        url = validate_url(request.GET.get('url'))
        logger.info('Getting info for: %s', url)
        info = fetch_video_info(url, logger=logger.info)
    except GatewayError as e:
        return _error_response(e, 'Info')
    return JsonResponse(info)


def _download(request, media_kind, fmt, default_quality, context):
    try:
        url = validate_url(request.GET.get('url'))
        quality = validate_quality(media_kind, request.GET.get('quality') or default_quality)
        logger.info('Downloading %s: %s', fmt.upper(), url)
        artifact = download_media(url, media_kind, fmt, quality, logger=logger.info)
    except GatewayError as e:
        return _error_response(e, context)

    try:
        stream = open(artifact.path, 'rb')
    except OSError as e:
        schedule_cleanup(artifact.path, delay=0)
        return _error_response(e, context)

    try:
        return ArtifactResponse(artifact, stream)
    except Exception:
        stream.close()
        schedule_cleanup(artifact.path, delay=0)
        raise


@require_GET
def download_mp3_view(request):
    """
    Download audio as MP3.

    Params:
        url (required): Video page URL
        quality (optional): Bitrate or VBR level (default: 320)

    Returns:
        The MP3 file as an attachment, or {"error": ...}
    """
    return _download(request, MEDIA_KIND_AUDIO, DEFAULT_AUDIO_FORMAT, DEFAULT_AUDIO_QUALITY, 'MP3 download')


@require_GET
def download_mp4_view(request):
    """
    Download video as MP4.

    Params:
        url (required): Video page URL
        quality (optional): 'best' or maximum height, e.g. 720 (default: best)

    Returns:
        The video file as an attachment, or {"error": ...}
    """
    return _download(request, MEDIA_KIND_VIDEO, DEFAULT_VIDEO_FORMAT, BEST_QUALITY, 'MP4 download')


@require_GET
def files_view(request):
    """List files currently in the download directory."""
    try:
        artifacts = list_artifacts()
    except OSError as e:
        return _error_response(e, 'File listing')
    return JsonResponse({'files': [a.as_dict() for a in artifacts]})


@csrf_exempt
@require_http_methods(['DELETE'])
def file_delete_view(request, filename):
    """Delete a file from the download directory."""
    try:
        delete_artifact(filename)
    except (GatewayError, OSError) as e:
        return _error_response(e, 'Delete')

    logger.info('Deleted %s', filename)
    return JsonResponse({'message': 'File deleted successfully'})


@require_GET
def artifact_file_view(request, filename):
    """Serve a file from the download directory."""
    return serve(request, filename, document_root=str(get_download_dir()))
