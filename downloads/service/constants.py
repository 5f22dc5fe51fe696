"""
Media format constants.

Centralized definitions of formats, defaults and limits.
"""

MEDIA_KIND_AUDIO = 'audio'
MEDIA_KIND_VIDEO = 'video'
MEDIA_KINDS = [MEDIA_KIND_AUDIO, MEDIA_KIND_VIDEO]

# Codecs yt-dlp's --audio-format accepts
AUDIO_FORMATS = ['mp3', 'm4a', 'aac', 'flac', 'opus', 'vorbis', 'wav', 'alac']

# Container extensions usable in a best[ext=...] selector
VIDEO_FORMATS = ['mp4', 'webm', 'mkv', 'mov', 'flv']

DEFAULT_AUDIO_FORMAT = 'mp3'
DEFAULT_AUDIO_QUALITY = '320'
DEFAULT_VIDEO_FORMAT = 'mp4'
BEST_QUALITY = 'best'

# /api/info limits
DESCRIPTION_MAX_CHARS = 200
INFO_MAX_FORMATS = 10

# Leftovers yt-dlp writes while a download is in flight
PARTIAL_SUFFIXES = ['.part', '.ytdl', '.temp']

# Public URL prefix for files in the download directory
DOWNLOAD_URL_PREFIX = '/downloads/'
