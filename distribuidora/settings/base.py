from pathlib import Path
import os

# -------------------------------------------------------------------
# BASE
# -------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent.parent  # .../project_root
DEBUG = False  # se sobreescribe en cada entorno
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "insecure-dev-key")  # prod: siempre por env

ALLOWED_HOSTS = []  # se sobreescribe por entorno

# -------------------------------------------------------------------
# APPS
# -------------------------------------------------------------------
INSTALLED_APPS = [
    # Django core
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Apps del proyecto
    "apps.catalog",
    "apps.customers",
    "apps.pedidos",
    "apps.sales",
    "apps.payments",
    "apps.reports",
    "apps.app_log",
]

# -------------------------------------------------------------------
# MIDDLEWARE
# -------------------------------------------------------------------
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "distribuidora.urls"

# -------------------------------------------------------------------
# TEMPLATES (solo admin)
# -------------------------------------------------------------------
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# -------------------------------------------------------------------
# I18N / ZONA HORARIA
# -------------------------------------------------------------------
LANGUAGE_CODE = "es-ar"
TIME_ZONE = "America/Argentina/Tucuman"
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"

# -------------------------------------------------------------------
# PEDIDOS / VENTAS / PAGOS
# -------------------------------------------------------------------
# Tolerancia para comparar pagado vs. total (estado_pago y sobrepago)
ORDERS_PAYMENT_EPSILON = os.environ.get("ORDERS_PAYMENT_EPSILON", "0.005")
# Tipo de pago de la venta generada al convertir un pedido
ORDERS_DEFAULT_TIPO_PAGO = os.environ.get("ORDERS_DEFAULT_TIPO_PAGO", "credito")

# -------------------------------------------------------------------
# LOGGING
# -------------------------------------------------------------------
APP_LOG_ENABLE_DB = os.environ.get(
    "APP_LOG_ENABLE_DB", "1") == "1"        # BD AppLog

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,

    "formatters": {
        "line": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },

    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "line"},

        # BD → AppLog (tolera arranque sin migraciones)
        "applog_db": {
            "level": "WARNING",
            "class": "apps.app_log.logging_handler.AppLogDBHandler",
        },
    },

    "loggers": {
        "django.request": {
            "handlers": ["console"]
            + (["applog_db"] if APP_LOG_ENABLE_DB else []),
            "level": "ERROR",
            "propagate": False,
        },

        # Logs de negocio (pedidos, ventas, stock, pagos)
        "apps": {
            "handlers": ["console"]
            + (["applog_db"] if APP_LOG_ENABLE_DB else []),
            "level": "INFO",
            "propagate": False,
        },
    },
}
