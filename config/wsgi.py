"""WSGI entry point for the court booking API.

Production servers (gunicorn, uWSGI) load ``application`` from here. The
settings default to production; ``manage.py`` keeps using development
settings.
"""

import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.prod')

application = get_wsgi_application()
