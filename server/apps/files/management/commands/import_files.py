"""Management command to place local files into the tree."""

import logging
from pathlib import Path
from typing import Any
from uuid import UUID

from django.core.management.base import BaseCommand, CommandError

from server.apps.files.exceptions import ConflictError, HierarchyError
from server.apps.files.logic.hierarchy import get_hierarchy_service

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Copy local files into blob storage and record them."""

    help = 'Import local files into a directory (or the root level)'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            'paths',
            nargs='+',
            type=Path,
            help='Local files to import',
        )
        parser.add_argument(
            '--directory',
            type=UUID,
            default=None,
            help='Target directory ID (default: root level)',
        )
        parser.add_argument(
            '--skip-existing',
            action='store_true',
            help='Skip files whose storage path is taken instead of failing',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the import command.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If a file cannot be imported.
        """
        service = get_hierarchy_service()
        directory_id = options['directory']

        imported = 0
        skipped = 0

        for local_path in options['paths']:
            if not local_path.is_file():
                raise CommandError(f'Not a file: {local_path}')

            try:
                with local_path.open('rb') as source:
                    file_instance = service.place_file(
                        source,
                        local_path.name,
                        directory_id=directory_id,
                    )
            except ConflictError as exc:
                if not options['skip_existing']:
                    raise CommandError(str(exc)) from exc
                self.stderr.write(f'Skipped {local_path}: {exc}')
                skipped += 1
                continue
            except HierarchyError as exc:
                raise CommandError(str(exc)) from exc

            imported += 1
            self.stdout.write(
                f'Imported {local_path} -> {file_instance.storage_path} '
                f'({file_instance.pk})',
            )

        logger.info('Imported %d files, skipped %d', imported, skipped)
        self.stdout.write(
            self.style.SUCCESS(f'Imported {imported} files, {skipped} skipped'),
        )
