"""
Background cleanup of the download directory.

Files handed out by the API are deleted a few seconds after the transfer
ends. A periodic sweep removes anything whose scheduled deletion never ran.
"""

import logging

from huey import crontab
from huey.contrib.djhuey import periodic_task, task

from downloads.service.artifacts import find_stale_artifacts, remove_if_exists
from downloads.service.config import get_cleanup_delay, get_stale_max_age

logger = logging.getLogger(__name__)


@task()
def delete_artifact_later(path):
    """Delete a delivered file if it still exists."""
    try:
        removed = remove_if_exists(path)
    except OSError as e:
        logger.warning('Cleanup of %s failed: %s', path, e)
        return False

    if removed:
        logger.info('Cleaned up %s', path)
    return removed


def schedule_cleanup(path, delay=None):
    """
    Schedule deletion of a file.

    Args:
        path: File to delete
        delay: Seconds to wait (default GATEWAY_CLEANUP_DELAY)

    Returns:
        huey Result; call .revoke() on it to cancel the deletion
    """
    if delay is None:
        delay = get_cleanup_delay()
    logger.debug('Scheduling cleanup of %s in %ss', path, delay)
    return delete_artifact_later.schedule(args=(str(path),), delay=delay)


@periodic_task(crontab(minute='*/10'))
def sweep_stale_artifacts():
    """Remove files older than GATEWAY_STALE_MAX_AGE minutes."""
    removed = 0
    for artifact in find_stale_artifacts(get_stale_max_age()):
        try:
            if remove_if_exists(artifact.path):
                removed += 1
        except OSError as e:
            logger.warning('Could not remove stale file %s: %s', artifact.path, e)

    if removed:
        logger.info('Swept %d stale file(s) from the download directory', removed)
    return removed
