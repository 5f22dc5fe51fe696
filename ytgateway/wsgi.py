"""
WSGI config for the ytdlp-gateway project.

Exposes the WSGI callable as a module-level variable named ``application``.
Serve with any WSGI server, e.g.:

    gunicorn ytgateway.wsgi --timeout 0

The huey consumer must run alongside it so downloaded files get cleaned up:

    python manage.py run_huey
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'ytgateway.settings')

application = get_wsgi_application()
