"""Main settings file of the project.

This file uses ``django-split-settings`` to compose settings from
the ``components`` and ``environments`` packages.

Use ``DJANGO_ENV`` environment variable to select the environment:
``development`` (default) or ``production``.
"""

from os import environ

from split_settings.tools import include, optional

# Managing environment via `DJANGO_ENV` variable:
environ.setdefault('DJANGO_ENV', 'development')
_ENV = environ['DJANGO_ENV']

_base_settings = (
    'components/common.py',
    'components/logging.py',
    'components/storages.py',
    'components/hierarchy.py',
    # Select the right env:
    'environments/{0}.py'.format(_ENV),
    # Optionally override some settings:
    optional('environments/local.py'),
)

# Include settings:
include(*_base_settings)
