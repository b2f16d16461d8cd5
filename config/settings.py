"""Django settings for the book club backend.

Every deployment-specific value can be overridden with an environment
variable of the same (or the documented) name.
"""

import os
from datetime import timedelta
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-bookclub-development-only")
DEBUG = os.environ.get("DJANGO_DEBUG", "false").lower() in ("1", "true", "yes")
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "bookclub.apps.BookclubConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DATABASE_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
MEDIA_URL = "media/"
MEDIA_ROOT = os.environ.get("MEDIA_ROOT", str(BASE_DIR / "media"))

DEFAULT_FROM_EMAIL = os.environ.get("BOOKCLUB_FROM_EMAIL", "bookclub@localhost")

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "bookclub.handlers.authentication.AccessTokenAuthentication",
        "rest_framework.authentication.SessionAuthentication",
    ],
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "bookclub": {
            "handlers": ["console"],
            "level": os.environ.get("BOOKCLUB_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}

# Book club

BOOKCLUB_BASE_URL = os.environ.get("BOOKCLUB_BASE_URL", "http://localhost:8000")
BOOKCLUB_AUTHOR_TIME_ZONE = os.environ.get("BOOKCLUB_AUTHOR_TIME_ZONE", "Europe/Amsterdam")
BOOKCLUB_SESSION_CALL_URL_TEMPLATE = os.environ.get(
    "BOOKCLUB_SESSION_CALL_URL_TEMPLATE", "https://meet.jit.si/bookclub-{session_id}"
)
# How long a session that already started is still listed as upcoming.
BOOKCLUB_UPCOMING_SESSION_GRACE_PERIOD = timedelta(
    minutes=int(os.environ.get("BOOKCLUB_UPCOMING_SESSION_GRACE_PERIOD_MINUTES", "0"))
)

LEANPUB_BASE_URL = os.environ.get("LEANPUB_BASE_URL", "https://leanpub.com")
LEANPUB_BOOK_SLUG = os.environ.get("LEANPUB_BOOK_SLUG", "")
LEANPUB_API_KEY = os.environ.get("LEANPUB_API_KEY", "")
LEANPUB_TIMEOUT = float(os.environ.get("LEANPUB_TIMEOUT", "10.0"))
