"""
Runs the yt-dlp executable.

yt-dlp is always started with an argument vector, never through a shell,
so URLs and format selectors reach it verbatim.
"""

import subprocess

from downloads.service.config import get_ytdlp_global_args, get_ytdlp_path, get_ytdlp_timeout
from downloads.service.errors import ExternalToolFailure


def build_command(args):
    """
    Build the full argv for a yt-dlp invocation.

    Args:
        args: Operation-specific arguments (from the command builder)

    Returns:
        list: [executable, *global args, *args]
    """
    return [get_ytdlp_path(), *get_ytdlp_global_args(), *args]


def run_ytdlp(args, logger=None):
    """
    Run yt-dlp and wait for it to exit.

    Args:
        args: Operation-specific arguments
        logger: Optional callable(str) for logging

    Returns:
        subprocess.CompletedProcess with text stdout/stderr

    Raises:
        ExternalToolFailure: yt-dlp could not be started, timed out,
            or exited non-zero (message taken from its stderr)
    """

    def log(message):
        if logger:
            logger(message)

    cmd = build_command(args)
    timeout = get_ytdlp_timeout()

    log(f'Executing: {subprocess.list2cmdline(cmd)}')

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except (FileNotFoundError, PermissionError) as e:
        raise ExternalToolFailure(f'Could not run yt-dlp ({cmd[0]}): {e}')
    except subprocess.TimeoutExpired:
        raise ExternalToolFailure(f'yt-dlp timed out after {timeout} seconds')

    if result.returncode != 0:
        stderr = (result.stderr or '').strip()
        log(f'yt-dlp exited with status {result.returncode}')
        raise ExternalToolFailure(stderr or f'yt-dlp exited with status {result.returncode}')

    return result
