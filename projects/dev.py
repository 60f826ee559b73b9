"""
Django settings for testing and development purposes
"""
from __future__ import annotations

from pathlib import Path

# Build paths inside the project like this: BASE_DIR / {dir_name} /
BASE_DIR = Path(__file__).resolve().parents[1]


DEBUG = True

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": "dev.db",
        "USER": "",
        "PASSWORD": "",
        "HOST": "",
        "PORT": "",
    }
}

INSTALLED_APPS = (
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.messages",
    "django.contrib.sessions",
    "django.contrib.staticfiles",
    # Admin
    "django.contrib.admin",
    # Mistakebook Apps
    "mistakebook_tagging.core.tagging.apps.TaggingConfig",
    "mistakebook.apps.notebook.apps.NotebookConfig",
)

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ]
        },
    },
]

ROOT_URLCONF = "projects.urls"

SECRET_KEY = "insecure-secret-key"

STATIC_URL = "/static/"

TIME_ZONE = "Asia/Taipei"
USE_TZ = True

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {"class": "logging.StreamHandler"},
    },
    "loggers": {
        "mistakebook": {"handlers": ["console"], "level": "INFO"},
        "mistakebook_tagging": {"handlers": ["console"], "level": "INFO"},
    },
}

# Imports run on a worker in production; run them inline when developing.
CELERY_TASK_ALWAYS_EAGER = True

# mistakebook-tagging configuration, see mistakebook_tagging/core/tagging/conf.py
MISTAKEBOOK_TAGGING = {
    "DEFAULT_GRADE_ORDER": 99,
    "MAX_TAGS_PER_ITEM": 5,
}
