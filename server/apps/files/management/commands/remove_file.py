"""Management command to delete a file and its blob."""

from typing import Any
from uuid import UUID

from django.core.management.base import BaseCommand, CommandError

from server.apps.files.exceptions import HierarchyError
from server.apps.files.logic.hierarchy import get_hierarchy_service


class Command(BaseCommand):
    """Delete a file: blob first, then its record."""

    help = 'Delete a file by ID'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument('file_id', type=UUID, help='File ID')

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the command.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If the file does not exist.
        """
        service = get_hierarchy_service()
        try:
            service.delete_file(options['file_id'])
        except HierarchyError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(self.style.SUCCESS(f'Deleted file {options["file_id"]}'))
