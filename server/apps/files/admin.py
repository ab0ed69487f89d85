"""Django admin configuration for files app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.files.models import Directory, File


def _format_bytes(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 KB').
    """
    if size_bytes < 1024:
        return f'{size_bytes} B'
    if size_bytes < 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / 1024:.1f} KB'
    if size_bytes < 1024 * 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / (1024 * 1024):.1f} MB'
    return f'{size_bytes / (1024 * 1024 * 1024):.1f} GB'


class FileInline(admin.TabularInline):  # type: ignore[type-arg]
    """Read-only list of files placed in a directory."""

    model = File
    extra = 0
    can_delete = False
    show_change_link = True
    fields = ['original_name', 'mime_type', 'size_bytes', 'uploaded_at']
    readonly_fields = fields

    def has_add_permission(
        self,
        request: HttpRequest,
        obj: Directory | None = None,
    ) -> bool:
        """Disallow adding files without a blob."""
        return False


@admin.register(Directory)
class DirectoryAdmin(admin.ModelAdmin[Directory]):
    """Admin interface for Directory model.

    Directories are created through HierarchyService so that the
    physical directory exists as well; the admin only browses them.
    """

    list_display = [
        'name',
        'parent',
        'children_count',
        'created_at',
    ]

    list_filter = [
        'created_at',
    ]

    search_fields = [
        'name',
    ]

    readonly_fields = [
        'id',
        'name',
        'parent',
        'created_at',
    ]

    inlines = [FileInline]

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Disallow creating directories outside HierarchyService."""
        return False

    def children_count(self, obj: Directory) -> int:
        """Count of direct child directories.

        Args:
            obj: Directory instance.

        Returns:
            Number of child directories.
        """
        return obj.children.count()
    children_count.short_description = 'Subdirectories'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[Directory]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('parent')


@admin.register(File)
class FileAdmin(admin.ModelAdmin[File]):
    """Admin interface for File model.

    Deleting a record here removes its blob first, via the
    pre_delete signal handler.
    """

    list_display = [
        'original_name',
        'directory',
        'size_display',
        'mime_type',
        'uploaded_at',
    ]

    list_filter = [
        'mime_type',
        'uploaded_at',
    ]

    search_fields = [
        'original_name',
        'storage_path',
        'checksum_sha256',
    ]

    readonly_fields = [
        'id',
        'original_name',
        'storage_path',
        'directory',
        'size_bytes',
        'mime_type',
        'checksum_sha256',
        'uploaded_at',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('id', 'original_name', 'directory', 'storage_path'),
        }),
        ('Metadata', {
            'fields': (
                'size_bytes',
                'mime_type',
                'checksum_sha256',
            ),
        }),
        ('Timestamps', {
            'fields': ('uploaded_at',),
        }),
    )

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Disallow creating records without a blob."""
        return False

    def size_display(self, obj: File) -> str:
        """Display file size in human-readable format.

        Args:
            obj: File instance.

        Returns:
            Formatted size string (e.g., '1.5 MB', '234 KB').
        """
        return _format_bytes(obj.size_bytes)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('directory')
