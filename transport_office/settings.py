"""
Django settings for transport_office project.
"""

import os
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-change-this-in-production')

# SECURITY WARNING: don't run with debug turned on in production!
# Default to False for security - must explicitly set DEBUG=True in development
DEBUG = os.getenv('DEBUG', 'False') == 'True'

# True under `manage.py test` and pytest
TESTING = len(sys.argv) > 1 and sys.argv[1] == 'test' or 'pytest' in sys.modules

ALLOWED_HOSTS = os.getenv('ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',')

# Application definition
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'corsheaders',
    'authentication',
    'reference_data',
    'suppliers',
    'orders',
    'notifications',
    'admin_panel',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',  # Static file serving (must be after SecurityMiddleware)
    'corsheaders.middleware.CorsMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'transport_office.middleware.RateLimitMiddleware',  # Rate limiting middleware
]

ROOT_URLCONF = 'transport_office.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'transport_office.wsgi.application'


# ============================================================================
# DATABASE CONFIGURATION
# ============================================================================

import dj_database_url

# Priority 1: Use DATABASE_URL if provided (Railway, Heroku, etc.)
# Priority 2: Fall back to individual environment variables
# Priority 3: Use SQLite for local development
if 'DATABASE_URL' in os.environ:
    DATABASES = {
        'default': dj_database_url.config(
            default=os.environ['DATABASE_URL'],
            conn_max_age=300,
            conn_health_checks=True,
            ssl_require=not DEBUG,
        )
    }
elif os.getenv('DB_NAME'):
    db_host = os.getenv('DB_HOST', 'localhost')
    is_local = db_host in ['localhost', '127.0.0.1', '::1']
    ssl_mode = 'prefer' if (DEBUG or is_local) else 'require'

    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.getenv('DB_NAME', 'transport_office'),
            'USER': os.getenv('DB_USER', 'postgres'),
            'PASSWORD': os.getenv('DB_PASSWORD', 'postgres'),
            'HOST': db_host,
            'PORT': os.getenv('DB_PORT', '5432'),
            'CONN_MAX_AGE': 300,
            'CONN_HEALTH_CHECKS': True,
            'OPTIONS': {
                'sslmode': ssl_mode,
                'connect_timeout': 10,
            }
        }
    }
else:
    # SQLite for local development (no PostgreSQL required)
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }
    if not TESTING:
        print("📦 Using SQLite for local development")

# Transient database errors (dropped connections, failovers) are retried this many times
DB_RETRY_ATTEMPTS = int(os.getenv('DB_RETRY_ATTEMPTS', '3'))
DB_RETRY_BACKOFF_SECONDS = float(os.getenv('DB_RETRY_BACKOFF_SECONDS', '0.5'))

# Custom User Model
AUTH_USER_MODEL = 'authentication.CustomUser'

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator',
    },
]

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'Asia/Kolkata'
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# WhiteNoise configuration for static file serving
STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': (
            'django.contrib.staticfiles.storage.StaticFilesStorage'
            if TESTING else
            'whitenoise.storage.CompressedManifestStaticFilesStorage'
        ),
    },
}

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# REST Framework settings
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'authentication.authentication.JWTAuthentication',
        'rest_framework.authentication.SessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_PAGINATION_CLASS': 'rest_framework.pagination.PageNumberPagination',
    'PAGE_SIZE': 20,
}

# CORS settings
CORS_ALLOW_ALL_ORIGINS = os.getenv('CORS_ALLOW_ALL_ORIGINS', 'False') == 'True'

if not CORS_ALLOW_ALL_ORIGINS:
    CORS_ALLOWED_ORIGINS = os.getenv(
        'CORS_ALLOWED_ORIGINS',
        'http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000'
    ).split(',')

CORS_ALLOW_CREDENTIALS = True

CORS_ALLOW_METHODS = [
    'DELETE',
    'GET',
    'OPTIONS',
    'PATCH',
    'POST',
    'PUT',
]

CORS_ALLOW_HEADERS = [
    'accept',
    'accept-encoding',
    'authorization',
    'content-type',
    'dnt',
    'origin',
    'user-agent',
    'x-csrftoken',
    'x-requested-with',
]

# Cache settings
# Using LocMemCache for development, can be upgraded to Redis in production
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'transport-office-cache',
        'TIMEOUT': 300,
        'OPTIONS': {
            'MAX_ENTRIES': 1000,
            'CULL_FREQUENCY': 3,
        }
    }
}


# ============================================================================
# RATE LIMITING CONFIGURATION
# ============================================================================

RATELIMIT_USE_CACHE = 'default'

# Rate limiting is switched off for test runs so repeated logins don't trip it
RATELIMIT_ENABLE = not TESTING

RATELIMIT_VIEW = 'django_ratelimit.views.ratelimited'

# LocMemCache is per-process; acceptable for a single server
SILENCED_SYSTEM_CHECKS = ['django_ratelimit.E003', 'django_ratelimit.W001']


# ============================================================================
# TRANSPORT OFFICE SETTINGS
# ============================================================================

# Country calling code prefixed to supplier phone numbers in wa.me links
WHATSAPP_COUNTRY_CODE = os.getenv('WHATSAPP_COUNTRY_CODE', '91')

# Footer of the WhatsApp order message
TRANSPORT_OFFICE_NAME = os.getenv('TRANSPORT_OFFICE_NAME', 'Transport Office')
TRANSPORT_OFFICE_CONTACTS = os.getenv('TRANSPORT_OFFICE_CONTACTS', '').split(',') if os.getenv('TRANSPORT_OFFICE_CONTACTS') else []

# Allow sending an already broadcast (submitted) order to additional suppliers
ALLOW_INCREMENTAL_FANOUT = os.getenv('ALLOW_INCREMENTAL_FANOUT', 'True') == 'True'

# Clients poll the notification feed at this interval
NOTIFICATION_POLL_INTERVAL_SECONDS = int(os.getenv('NOTIFICATION_POLL_INTERVAL_SECONDS', '30'))

# Merged notification feeds are cached per role and user for this long
NOTIFICATION_FEED_CACHE_TIMEOUT = int(os.getenv('NOTIFICATION_FEED_CACHE_TIMEOUT', '300'))


# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================

# All logs stream to stdout for the platform to capture

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '[{levelname}] {asctime} {module} - {message}',
            'style': '{',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
            'level': 'INFO',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'django.request': {
            'handlers': ['console'],
            'level': 'ERROR',
            'propagate': False,
        },
        'django.server': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'transport_office': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'authentication': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'reference_data': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'suppliers': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'orders': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'notifications': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'admin_panel': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
}


# ============================================================================
# PRODUCTION SECURITY SETTINGS
# ============================================================================

# Apply security settings only when DEBUG is False (production/staging)
if not DEBUG and not TESTING:
    # Redirect all HTTP requests to HTTPS
    SECURE_SSL_REDIRECT = True

    SESSION_COOKIE_SECURE = True
    CSRF_COOKIE_SECURE = True

    # HTTP Strict Transport Security for 1 year
    SECURE_HSTS_SECONDS = 31536000
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_HSTS_PRELOAD = True

    SECURE_CONTENT_TYPE_NOSNIFF = True
    X_FRAME_OPTIONS = 'DENY'

    # Trust X-Forwarded-* headers from the proxy/load balancer
    SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
    USE_X_FORWARDED_HOST = True
    USE_X_FORWARDED_PORT = True

    print("🔒 Production security settings enabled")
elif not TESTING:
    print("⚠️  Development mode - security settings disabled")


# ============================================================================
# SENTRY ERROR TRACKING
# ============================================================================

if not DEBUG and not TESTING and os.getenv('SENTRY_DSN'):
    import sentry_sdk
    from sentry_sdk.integrations.django import DjangoIntegration

    sentry_sdk.init(
        dsn=os.getenv('SENTRY_DSN'),
        integrations=[
            DjangoIntegration(),
        ],
        traces_sample_rate=0.0,
        send_default_pii=False,
        environment=os.getenv('DJANGO_ENVIRONMENT', 'production'),
        release=os.getenv('SENTRY_RELEASE', None),
        max_breadcrumbs=20,
    )

    print("📊 Sentry error tracking enabled")
