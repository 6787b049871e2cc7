"""Production settings for the court booking project.

This module extends the base settings with production specific
configuration. Ensure that sensitive values are provided via environment
variables; the database is expected to be PostgreSQL so that row locks
(`SELECT ... FOR UPDATE`) back the slot claims.
"""

from .base import *  # noqa: F401,F403

# Never run with debug enabled in production
DEBUG = False

# Allowed hosts should be defined explicitly via environment variable
ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', '').split(',')  # noqa: F405

DATABASES['default']['ENGINE'] = os.environ.get(  # noqa: F405
    'DB_ENGINE', 'django.db.backends.postgresql'
)

# Configure secure proxies and cookies
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
