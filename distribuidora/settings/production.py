from .base import *
import dj_database_url  # DATABASE_URL

DEBUG = False
ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "").split(
    ",")  # ej: "miapp.com,.onrender.com"

# DB real (Postgres)
DATABASES = {
    "default": dj_database_url.config(conn_max_age=600, ssl_require=True)
}

STATIC_ROOT = BASE_DIR / "staticfiles"

CSRF_TRUSTED_ORIGINS = [origin for origin in os.environ.get(
    "CSRF_TRUSTED_ORIGINS", "").split(",") if origin]

SECURE_SSL_REDIRECT = os.getenv(
    "SECURE_SSL_REDIRECT", "true").lower() == "true"
SESSION_COOKIE_SECURE = os.getenv(
    "SESSION_COOKIE_SECURE", "true").lower() == "true"
CSRF_COOKIE_SECURE = os.getenv("CSRF_COOKIE_SECURE", "true").lower() == "true"
