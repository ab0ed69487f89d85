"""Directory tree settings."""

from server.settings.components import config

# Levels of children/files expanded in tree listings
HIERARCHY_TREE_DEPTH = config('HIERARCHY_TREE_DEPTH', cast=int, default=1)

# Upper bound on ancestor chain length, guards against parent cycles
HIERARCHY_MAX_DEPTH = config('HIERARCHY_MAX_DEPTH', cast=int, default=64)
