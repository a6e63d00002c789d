"""WSGI config for the room reservations project.

Exposes the WSGI application for Django's runserver and production WSGI
servers such as gunicorn.
"""

import os
from django.core.wsgi import get_wsgi_application  # type: ignore

# Production servers set DJANGO_SETTINGS_MODULE to config.settings.prod
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_wsgi_application()
