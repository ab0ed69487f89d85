"""Management command to create a directory in the tree."""

from typing import Any
from uuid import UUID

from django.core.management.base import BaseCommand, CommandError

from server.apps.files.exceptions import HierarchyError
from server.apps.files.logic.hierarchy import get_hierarchy_service


class Command(BaseCommand):
    """Create a directory record and its physical directory."""

    help = 'Create a directory, optionally under a parent directory'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument('name', help='Directory name')
        parser.add_argument(
            '--parent',
            type=UUID,
            default=None,
            help='Parent directory ID (default: top level)',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the command.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If the directory cannot be created.
        """
        service = get_hierarchy_service()
        try:
            directory = service.create_directory(
                options['name'],
                parent_id=options['parent'],
            )
        except HierarchyError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(
            self.style.SUCCESS(f'Created directory {directory.name}: {directory.pk}'),
        )
