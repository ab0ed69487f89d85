"""Settings for local development and tests."""

from server.settings.components.common import SECRET_KEY

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '[::1]']

# Throwaway key so the test suite runs without a `config/.env` file
SECRET_KEY = SECRET_KEY or 'django-insecure-development-only-key'  # noqa: S105
