"""WSGI config for the themabinti backend."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'themabinti.settings')

application = get_wsgi_application()
