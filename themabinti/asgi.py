"""ASGI config for the themabinti backend."""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'themabinti.settings')

application = get_asgi_application()
