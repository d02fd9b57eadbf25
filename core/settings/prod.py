from .base import *
from decouple import config, Csv

DEBUG = False
ALLOWED_HOSTS = config("DJANGO_ALLOWED_HOSTS", cast=Csv(), default="*")

# CORS - restrictive
CORS_ALLOWED_ORIGINS = config(
    "CORS_ALLOWED_ORIGINS",
    cast=Csv(),
    default="https://lunaris.com.br,https://app.lunaris.com.br"
)
CORS_ALLOW_CREDENTIALS = True

# DB (Cloud SQL MySQL - Production HA)
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.mysql",
        "NAME": config("DB_NAME"),
        "USER": config("DB_USER"),
        "PASSWORD": config("DB_PASSWORD"),
        "HOST": config("DB_HOST"),  # Cloud SQL HA instance
        "PORT": config("DB_PORT", default="3306"),
        "OPTIONS": {
            "charset": "utf8mb4",
            "init_command": "SET sql_mode='STRICT_TRANS_TABLES'",
        },
        "CONN_MAX_AGE": 600,  # Connection pooling
    }
}

# Redis (Memorystore - Production HA)
REDIS_HOST = config("REDIS_HOST")
BROKER_DB = config("CELERY_BROKER_DB", cast=int, default=0)
RESULT_DB = config("CELERY_RESULT_DB", cast=int, default=1)
CACHE_DB = config("DJANGO_CACHE_DB", cast=int, default=2)

CELERY_BROKER_URL = f"redis://{REDIS_HOST}:6379/{BROKER_DB}"
CELERY_RESULT_BACKEND = f"redis://{REDIS_HOST}:6379/{RESULT_DB}"

# Cache - Production optimized
CACHES = {
    "default": {
        "BACKEND": "django_redis.cache.RedisCache",
        "LOCATION": f"redis://{REDIS_HOST}:6379/{CACHE_DB}",
        "OPTIONS": {
            "CLIENT_CLASS": "django_redis.client.DefaultClient",
            "CONNECTION_POOL_KWARGS": {"max_connections": 50}
        },
        "TIMEOUT": config("DJANGO_CACHE_TIMEOUT", cast=int, default=3600),
    }
}

# Security - Production hardened
SECRET_KEY = config("SECRET_KEY")
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SECURE_CONTENT_TYPE_NOSNIFF = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

# GCP Production Logging
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'stackdriver': {
            '()': 'core.cloud_logging.cloud_logging_handler',
            'level': 'WARNING',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['stackdriver'],
            'level': 'WARNING',
            'propagate': False,
        },
        'apps': {
            'handlers': ['stackdriver'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}

# Static files (Cloud Storage)
STORAGES = {
    "default": {"BACKEND": "storages.backends.gcloud.GoogleCloudStorage"},
    "staticfiles": {"BACKEND": "storages.backends.gcloud.GoogleCloudStorage"},
}
GS_BUCKET_NAME = config("GS_BUCKET_NAME")
STATIC_URL = f"https://storage.googleapis.com/{GS_BUCKET_NAME}/static/"
STATIC_ROOT = "/app/staticfiles"


# Channel layers for GCP
CHANNEL_LAYERS = {
    "default": {
        "BACKEND": "channels_redis.core.RedisChannelLayer",
        "CONFIG": {
            "hosts": [(REDIS_HOST, 6379)],
            "capacity": 1500,
            "expiry": 10,
        },
    },
}

CSRF_TRUSTED_ORIGINS = [
    'https://*.run.app',
    'https://*.lunaris.com.br'
]

GCP_PROJECT_ID = config("GCP_PROJECT_ID", default="lunaris-portal")
STRATEGY_BUCKET = config("STRATEGY_BUCKET")
AVATAR_BUCKET = config("AVATAR_BUCKET")
