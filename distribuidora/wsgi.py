import os
from django.core.wsgi import get_wsgi_application

# DJANGO_ENV: development | production (por defecto development)
env = os.getenv("DJANGO_ENV", "development").strip().lower()

# Ejemplo: DJANGO_ENV=production → distribuidora/settings/production.py
os.environ.setdefault("DJANGO_SETTINGS_MODULE", f"distribuidora.settings.{env}")

application = get_wsgi_application()
