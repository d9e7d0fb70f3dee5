"""
Django settings for the toclinker_tool.

This file contains only the configuration needed by the JSON API. The
project has no database models, templates or static files: every request
is resolved from its own inputs plus the upstream pages it fetches.

Please consult the Django documentation for additional configuration
options: https://docs.djangoproject.com/en/4.2/ref/settings/
"""

from __future__ import annotations

import os
from pathlib import Path

from django.core.exceptions import ImproperlyConfigured

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-change-me')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.getenv('DJANGO_DEBUG', 'false').lower() == 'true'

RUNNING_TESTS = os.getenv('PYTEST_CURRENT_TEST') is not None
if RUNNING_TESTS:
    DEBUG = True

if not DEBUG and SECRET_KEY == 'django-insecure-change-me' and not RUNNING_TESTS:
    raise ImproperlyConfigured('DJANGO_SECRET_KEY must be set when DEBUG is False.')

ALLOWED_HOSTS: list[str] = [
    host.strip()
    for host in os.getenv('DJANGO_ALLOWED_HOSTS', '127.0.0.1,localhost').split(',')
    if host.strip()
]

# Application definition
INSTALLED_APPS = [
    'toclinker',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'toclinker_tool.urls'

WSGI_APPLICATION = 'toclinker_tool.wsgi.application'

# No persistence: titles, candidates and results live for one request.
DATABASES: dict[str, dict[str, object]] = {}

# Internationalization
# https://docs.djangoproject.com/en/4.2/topics/i18n/

LANGUAGE_CODE = 'en-us'

TIME_ZONE = 'UTC'

USE_I18N = False

USE_TZ = True

# Security headers
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'
SECURE_REFERRER_POLICY = 'strict-origin-when-cross-origin'
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
USE_X_FORWARDED_HOST = True

if not DEBUG:
    SECURE_SSL_REDIRECT = os.getenv('DJANGO_SECURE_SSL_REDIRECT', 'true').lower() == 'true'
    SECURE_HSTS_SECONDS = int(os.getenv('DJANGO_SECURE_HSTS_SECONDS', '31536000'))
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
else:
    SECURE_SSL_REDIRECT = False

# Title resolution engine and upstream collaborators
TOCLINKER_ENGINE_CONFIG = os.getenv('TOCLINKER_ENGINE_CONFIG') or None
TOCLINKER_FETCH_TIMEOUT = float(os.getenv('TOCLINKER_FETCH_TIMEOUT', '15'))
TOCLINKER_SEARCH_TIMEOUT = float(os.getenv('TOCLINKER_SEARCH_TIMEOUT', '15'))
TOCLINKER_SITEMAP_TIMEOUT = float(os.getenv('TOCLINKER_SITEMAP_TIMEOUT', '10'))
TOCLINKER_NOTION_API_URL = os.getenv('TOCLINKER_NOTION_API_URL', 'https://api.notion.com/v1/search')
TOCLINKER_NOTION_VERSION = os.getenv('TOCLINKER_NOTION_VERSION', '2022-06-28')


log_level = os.getenv('DJANGO_LOG_LEVEL', 'INFO').upper()
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': log_level,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': log_level,
            'propagate': False,
        },
        # Handled by the root console handler.
        'toclinker': {
            'level': os.getenv('TOCLINKER_LOG_LEVEL', log_level).upper(),
            'propagate': True,
        },
    },
}
