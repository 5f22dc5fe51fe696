"""
Management command to clean up abandoned downloads.

Finds and removes files left in the download directory whose scheduled
deletion never ran (huey consumer down, server restarted mid-transfer).
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from downloads.service.artifacts import find_stale_artifacts, remove_if_exists
from downloads.service.config import get_download_dir, get_stale_max_age


class Command(BaseCommand):
    help = 'Clean up abandoned files from the download directory'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without actually deleting',
        )
        parser.add_argument(
            '--force', action='store_true', help='Delete files without confirmation'
        )
        parser.add_argument(
            '--max-age',
            type=int,
            default=None,
            help='Maximum age in minutes before a file counts as abandoned '
            '(default: GATEWAY_STALE_MAX_AGE)',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        force = options['force']
        max_age_minutes = options['max_age']
        if max_age_minutes is None:
            max_age_minutes = get_stale_max_age()

        download_dir = get_download_dir()
        stale = find_stale_artifacts(max_age_minutes)

        if not stale:
            self.stdout.write(
                self.style.SUCCESS(
                    f'No files older than {max_age_minutes} minutes in {download_dir}'
                )
            )
            return

        now = timezone.now()
        plural = 's' if len(stale) != 1 else ''
        self.stdout.write(f'\nFound {len(stale)} abandoned file{plural} in {download_dir}:')
        self.stdout.write('=' * 80)

        total_size = 0
        for artifact in stale:
            total_size += artifact.size_bytes
            age_str = str(now - artifact.created_at).split('.')[0]
            self.stdout.write(f'{artifact.filename:50} | Age: {age_str:15} | {artifact.size_mb}')

        self.stdout.write('=' * 80)
        self.stdout.write(f'Total size: {total_size / (1024 * 1024):.1f} MB\n')

        if dry_run:
            self.stdout.write(self.style.WARNING(f'\nDRY RUN: Would delete {len(stale)} file{plural}'))
            self.stdout.write('Run without --dry-run to actually delete')
            return

        if not force:
            response = input(f'\nDelete these {len(stale)} file{plural}? [y/N]: ')
            if response.lower() != 'y':
                self.stdout.write('Cancelled')
                return

        deleted_count = 0
        for artifact in stale:
            try:
                if remove_if_exists(artifact.path):
                    self.stdout.write(self.style.SUCCESS(f'✓ Deleted: {artifact.filename}'))
                    deleted_count += 1
            except OSError as e:
                self.stdout.write(self.style.ERROR(f'✗ Failed to delete {artifact.filename}: {e}'))

        self.stdout.write(
            self.style.SUCCESS(f'\n✓ Deleted {deleted_count} of {len(stale)} file{plural}')
        )
