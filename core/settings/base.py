"""
Base Django settings for the Lunaris portal.

Environment modules (local, dev, prod, test) import everything from here and
override database, Redis, CORS and logging.
"""

from datetime import timedelta
from pathlib import Path

from celery.schedules import crontab
from decouple import config, Csv

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = config("SECRET_KEY", default="dev-only-not-secure")
DEBUG = config("DEBUG", cast=bool, default=False)
ALLOWED_HOSTS = config("DJANGO_ALLOWED_HOSTS", cast=Csv(), default="localhost,127.0.0.1")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "corsheaders",
    "rest_framework",
    "rest_framework_simplejwt",
    "rest_framework_simplejwt.token_blacklist",
    "drf_spectacular",
    "strawberry_django",
    "channels",
    "apps.accounts",
    "apps.dashboards",
    "apps.adaccounts",
    "apps.billing",
    "apps.strategies",
    "apps.notifications",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "apps.accounts.middleware.DeactivatedAccountMiddleware",
]

ROOT_URLCONF = "core.urls"

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

WSGI_APPLICATION = "core.wsgi.application"
ASGI_APPLICATION = "core.asgi.application"

# SQLite unless an environment module says otherwise
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

AUTH_USER_MODEL = "accounts.User"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
]

LANGUAGE_CODE = "pt-br"
TIME_ZONE = "America/Sao_Paulo"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST framework
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "rest_framework_simplejwt.authentication.JWTAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.IsAuthenticated",
    ),
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=config("JWT_ACCESS_MINUTES", cast=int, default=60)),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=config("JWT_REFRESH_DAYS", cast=int, default=7)),
    "ROTATE_REFRESH_TOKENS": True,
    "BLACKLIST_AFTER_ROTATION": True,
    "AUTH_HEADER_TYPES": ("Bearer",),
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Lunaris Portal API",
    "DESCRIPTION": "Agency portal: clients, dashboards, payments and strategies",
    "VERSION": "1.0.0",
}

CORS_ALLOWED_ORIGINS = config(
    "CORS_ALLOWED_ORIGINS",
    cast=Csv(),
    default="http://localhost:5173,http://127.0.0.1:5173"
)

# Redis
REDIS_HOST = config("REDIS_HOST", default="localhost")

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

CHANNEL_LAYERS = {
    "default": {
        "BACKEND": "channels.layers.InMemoryChannelLayer",
    },
}

# Celery
CELERY_BROKER_URL = config("CELERY_BROKER_URL", default=f"redis://{REDIS_HOST}:6379/0")
CELERY_RESULT_BACKEND = config("CELERY_RESULT_BACKEND", default=f"redis://{REDIS_HOST}:6379/1")
CELERY_RESULT_SERIALIZER = 'json'
CELERY_TASK_SERIALIZER = 'json'
CELERY_TIMEZONE = TIME_ZONE

SHEETS_SYNC_SCHEDULE_HOUR = config("SHEETS_SYNC_SCHEDULE_HOUR", cast=int, default=3)

CELERY_BEAT_SCHEDULE = {
    'sync-all-dashboards': {
        'task': 'apps.dashboards.tasks.sync_all_dashboards',
        'schedule': crontab(hour=SHEETS_SYNC_SCHEDULE_HOUR, minute=0),
    },
}

# Google Sheets ingestion
SHEETS_EXPORT_URL = config(
    "SHEETS_EXPORT_URL",
    default="https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv&gid={gid}",
)
SHEETS_FETCH_TIMEOUT = config("SHEETS_FETCH_TIMEOUT", cast=int, default=30)
SUMMARY_CACHE_TIMEOUT = config("SUMMARY_CACHE_TIMEOUT", cast=int, default=600)

# Object storage (Google Cloud Storage)
STRATEGY_BUCKET = config("STRATEGY_BUCKET", default="lunaris-strategy-documents")
AVATAR_BUCKET = config("AVATAR_BUCKET", default="lunaris-avatars")
STRATEGY_MAX_UPLOAD_SIZE = 10 * 1024 * 1024
AVATAR_MAX_UPLOAD_SIZE = 2 * 1024 * 1024
SIGNED_URL_EXPIRATION = config("SIGNED_URL_EXPIRATION", cast=int, default=300)
GCP_PROJECT_ID = config("GCP_PROJECT_ID", default="lunaris-portal")

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
        },
        'apps': {
            'handlers': ['console'],
            'level': config("APPS_LOG_LEVEL", default="INFO"),
        },
    },
}
