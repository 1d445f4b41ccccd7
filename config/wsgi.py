"""WSGI entry point for the coworking booking service.

Used by Django's runserver and production WSGI servers (e.g. gunicorn).
The booking event stream holds one worker thread per connected client,
so run threaded workers when serving it over WSGI.
"""

import os
from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_wsgi_application()
