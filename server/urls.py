"""
Main URL mapping configuration file.

Only the admin is routed here: directory and file operations are
exposed through ``HierarchyService`` and the management commands.
"""

from django.contrib import admin
from django.urls import path

urlpatterns = [
    path('admin/', admin.site.urls),
]
