import os
from django.core.asgi import get_asgi_application

# tomamos el entorno de ejecución.
env = os.getenv("DJANGO_ENV", "development").strip().lower()

os.environ.setdefault("DJANGO_SETTINGS_MODULE", f"distribuidora.settings.{env}")

application = get_asgi_application()
