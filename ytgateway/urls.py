"""
URL configuration for the ytdlp-gateway project.
"""

from django.urls import path

from downloads.views import (
    artifact_file_view,
    download_mp3_view,
    download_mp4_view,
    file_delete_view,
    files_view,
    home_view,
    info_view,
)

urlpatterns = [
    # Capability listing
    path('', home_view, name='home'),
    # JSON API
    path('api/info', info_view, name='info'),
    path('api/download/mp3', download_mp3_view, name='download_mp3'),
    path('api/download/mp4', download_mp4_view, name='download_mp4'),
    path('api/files', files_view, name='files'),
    path('api/files/<str:filename>', file_delete_view, name='file_delete'),
    # Transient files
    path('downloads/<str:filename>', artifact_file_view, name='artifact_file'),
]
