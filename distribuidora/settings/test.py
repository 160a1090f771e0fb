from .base import *

DEBUG = False
ALLOWED_HOSTS = ["testserver"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Los tests que necesitan AppLog lo consultan explícitamente
APP_LOG_ENABLE_DB = False
LOGGING["loggers"]["apps"]["handlers"] = ["console"]
LOGGING["loggers"]["django.request"]["handlers"] = ["console"]
