"""Management command to print the directory tree."""

from typing import Any

from django.core.management.base import BaseCommand

from server.apps.files.logic.hierarchy import get_hierarchy_service


class Command(BaseCommand):
    """Print every directory with its display path, depth first."""

    help = 'Print directory display paths in depth-first order'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--ids',
            action='store_true',
            help='Print directory IDs next to the paths',
        )
        parser.add_argument(
            '--files',
            action='store_true',
            help='Also list files, newest first',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        service = get_hierarchy_service()

        for display_path in service.flatten_to_paths():
            if options['ids']:
                self.stdout.write(f'{display_path.id}  {display_path.path}/')
            else:
                self.stdout.write(f'{display_path.path}/')

        if options['files']:
            for file_instance in service.list_files():
                self.stdout.write(
                    f'{file_instance.storage_path}  '
                    f'{file_instance.original_name} '
                    f'({file_instance.size_bytes} bytes)',
                )
