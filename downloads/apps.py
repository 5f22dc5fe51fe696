import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class DownloadsConfig(AppConfig):
    name = 'downloads'
    default_auto_field = 'django.db.models.BigAutoField'

    def ready(self):
        """Log where files go and which yt-dlp runs"""
        from downloads.service.config import get_download_dir, get_ytdlp_path

        logger.info('Download directory: %s', get_download_dir().resolve())
        logger.info('yt-dlp: %s', get_ytdlp_path())
