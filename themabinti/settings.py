"""
Django settings for the themabinti backend.

Every value can be overridden from the environment; a local .env file is
loaded first so development setups don't need to export anything.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


def env(name, default=None, *fallbacks):
    """Read an environment variable, trying legacy names before the default."""
    for key in (name, *fallbacks):
        value = os.environ.get(key)
        if value not in (None, ''):
            return value
    return default


def env_bool(name, default=False):
    return str(env(name, default)).strip().lower() in ('1', 'true', 'yes', 'on')


def env_list(name, default=''):
    return [item.strip() for item in str(env(name, default)).split(',') if item.strip()]


SECRET_KEY = env('DJANGO_SECRET_KEY', 'django-insecure-themabinti-dev-key')

DEBUG = env_bool('DJANGO_DEBUG', False)

ALLOWED_HOSTS = env_list('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver')


INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'corsheaders',
    'rest_framework',
    'payments',
    'sellerpackages',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'themabinti.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'themabinti.wsgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': env('DATABASE_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'Africa/Nairobi'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'


# Caches. The M-Pesa token and payment statuses live in their own aliases so
# a deployment can point them at a shared store (Redis) without touching the
# default cache.
REDIS_URL = env('REDIS_URL')

if REDIS_URL:
    _shared_cache = {
        'BACKEND': 'django.core.cache.backends.redis.RedisCache',
        'LOCATION': REDIS_URL,
    }
    CACHES = {
        'default': _shared_cache,
        'mpesa': dict(_shared_cache, KEY_PREFIX='mpesa'),
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'themabinti-default',
        },
        'mpesa': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'themabinti-mpesa',
            'OPTIONS': {'MAX_ENTRIES': 100000},
        },
    }


# Django REST framework. The M-Pesa endpoints are called by the gateway and
# by anonymous buyers, so no session auth (and no CSRF enforcement) applies.
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': ['rest_framework.permissions.AllowAny'],
    'DEFAULT_RENDERER_CLASSES': ['rest_framework.renderers.JSONRenderer'],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
        'rest_framework.parsers.FormParser',
    ],
    'UNAUTHENTICATED_USER': None,
}


# CORS. An empty FRONTEND_ORIGINS keeps the API open to every origin.
CORS_ALLOWED_ORIGINS = env_list('FRONTEND_ORIGINS')
CORS_ALLOW_ALL_ORIGINS = not CORS_ALLOWED_ORIGINS


# M-Pesa (Daraja) configuration
MPESA_CONSUMER_KEY = env('MPESA_CONSUMER_KEY', '', 'CONSUMER_KEY')
MPESA_CONSUMER_SECRET = env('MPESA_CONSUMER_SECRET', '', 'CONSUMER_SECRET')
MPESA_SHORTCODE = env('MPESA_SHORTCODE', '', 'SHORTCODE')
MPESA_PASSKEY = env('MPESA_PASSKEY', '', 'PASSKEY')
MPESA_TILL_NUMBER = env('MPESA_TILL_NUMBER', '', 'TILL_NUMBER')
MPESA_CALLBACK_URL = env('MPESA_CALLBACK_URL', '', 'CALLBACK_URL')

MPESA_OAUTH_URL = env(
    'MPESA_OAUTH_URL',
    'https://api.safaricom.co.ke/oauth/v1/generate?grant_type=client_credentials',
)
MPESA_STKPUSH_URL = env(
    'MPESA_STKPUSH_URL',
    'https://api.safaricom.co.ke/mpesa/stkpush/v1/processrequest',
)

# Seconds before an outbound Daraja call is abandoned.
MPESA_TIMEOUT = float(env('MPESA_TIMEOUT', 15))
# Seconds shaved off the reported token lifetime.
MPESA_TOKEN_SAFETY_MARGIN = int(env('MPESA_TOKEN_SAFETY_MARGIN', 300))

MPESA_TRANSACTION_TYPE = env('MPESA_TRANSACTION_TYPE', 'CustomerBuyGoodsOnline')
MPESA_ACCOUNT_REFERENCE = env('MPESA_ACCOUNT_REFERENCE', 'themabinti.com')
MPESA_TRANSACTION_DESC = env('MPESA_TRANSACTION_DESC', 'Payment to themabinti.com')

MPESA_TOKEN_CACHE = 'mpesa'
MPESA_STATUS_CACHE = 'mpesa'

# Callback source verification; both checks are skipped when unset.
MPESA_CALLBACK_ALLOWED_IPS = env_list('MPESA_CALLBACK_ALLOWED_IPS')
MPESA_CALLBACK_TOKEN = env('MPESA_CALLBACK_TOKEN', '')


LOG_LEVEL = env('LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}
