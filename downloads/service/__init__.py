"""
Service layer for the download gateway.

Plain functions around the yt-dlp binary and the download directory,
independent of the HTTP layer. These functions are used by:
- The JSON API views (downloads/views.py)
- The huey cleanup tasks (downloads/tasks.py)
- The management commands (management/commands/fetch.py, cleanup_downloads.py)
"""
