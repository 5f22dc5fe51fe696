"""
Django settings for the ytdlp-gateway project.

Every value can be overridden through environment variables (optionally loaded
from a .env file in the project root).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in ('1', 'true', 'yes', 'on')


def _env_int(name, default=None):
    value = os.environ.get(name)
    if value in (None, ''):
        return default
    return int(value)


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-ytdlp-gateway-dev-key')

DEBUG = _env_bool('DJANGO_DEBUG', False)

ALLOWED_HOSTS = [h for h in os.environ.get('DJANGO_ALLOWED_HOSTS', '*').split(',') if h]

INSTALLED_APPS = [
    'huey.contrib.djhuey',
    'downloads',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'ytgateway.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'ytgateway.urls'

WSGI_APPLICATION = 'ytgateway.wsgi.application'

# No models; the database only exists so the test runner has somewhere to point.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('DJANGO_TIME_ZONE', 'UTC')
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Gateway settings
GATEWAY_DOWNLOAD_DIR = os.environ.get('GATEWAY_DOWNLOAD_DIR', '/tmp/downloads')
GATEWAY_YTDLP_PATH = os.environ.get('GATEWAY_YTDLP_PATH', 'yt-dlp')
GATEWAY_YTDLP_TIMEOUT = _env_int('GATEWAY_YTDLP_TIMEOUT')
GATEWAY_YTDLP_PROXY = os.environ.get('GATEWAY_YTDLP_PROXY', '')
GATEWAY_YTDLP_EXTRA_ARGS = os.environ.get('GATEWAY_YTDLP_EXTRA_ARGS', '')
GATEWAY_CLEANUP_DELAY = _env_int('GATEWAY_CLEANUP_DELAY', 5)
GATEWAY_STALE_MAX_AGE = _env_int('GATEWAY_STALE_MAX_AGE', 60)
GATEWAY_CORS_ALLOW_ORIGIN = os.environ.get('GATEWAY_CORS_ALLOW_ORIGIN', '*')

# Huey runs the deferred cleanup. Start the consumer with: python manage.py run_huey
HUEY = {
    'huey_class': 'huey.SqliteHuey',
    'name': 'ytgateway',
    'filename': os.environ.get('GATEWAY_HUEY_DB', str(BASE_DIR / 'huey.sqlite3')),
    # Delayed cleanups live in the SQLite schedule, so a run_huey consumer
    # still executes them when immediate mode is switched on.
    'immediate': _env_bool('GATEWAY_HUEY_IMMEDIATE', False),
    'immediate_use_memory': False,
    'consumer': {
        'workers': 1,
        'worker_type': 'thread',
    },
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '[{asctime}] {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'downloads': {
            'handlers': ['console'],
            'level': os.environ.get('GATEWAY_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}
