# apps/app_log/apps.py
"""
Configuración de la aplicación app_log.
El handler de logging a BD se engancha desde settings.LOGGING.
"""

from django.apps import AppConfig


class AppLogConfig(AppConfig):
    name = "apps.app_log"
    verbose_name = "Observabilidad (Logs)"
