# core/settings.py
import os
from pathlib import Path
from dotenv import load_dotenv
import dj_database_url

# ========================= LOAD ENV =========================
# Load .env locally only
if not os.getenv('RENDER'):
    load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "fallback_dev_secret_key")

# ========================= DEBUG / ALLOWED HOSTS =========================
if os.getenv('RENDER'):
    DEBUG = os.getenv("DEBUG", "False") == "True"
    ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", ".onrender.com").split(",")
    CSRF_TRUSTED_ORIGINS = [f"https://{host.lstrip('.')}" for host in ALLOWED_HOSTS]

    CSRF_COOKIE_SECURE = True
    SESSION_COOKIE_SECURE = True
    SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
else:
    DEBUG = os.getenv("DEBUG", "True") == "True"
    ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0', 'testserver']
    CSRF_TRUSTED_ORIGINS = [
        'http://localhost:8000',
        'http://127.0.0.1:8000',
    ]

# ========================= DATABASE =========================
DATABASES = {
    'default': dj_database_url.config(
        default=f'sqlite:///{BASE_DIR / "db.sqlite3"}',
        conn_max_age=600
    )
}

# ========================= MOCK USER =========================
# Authentication is mocked: every page acts on behalf of this account.
MOCK_USER_ID = os.getenv('MOCK_USER_ID', '550e8400-e29b-41d4-a716-446655440001')
MOCK_USER_EMAIL = os.getenv('MOCK_USER_EMAIL', 'user1@example.com')
MOCK_USER_NAME = os.getenv('MOCK_USER_NAME', 'Mihailo')
MOCK_SUBSCRIPTION_ID = os.getenv('MOCK_SUBSCRIPTION_ID', 'sub-1')
MOCK_SUBSCRIPTION_PRICE = int(os.getenv('MOCK_SUBSCRIPTION_PRICE', 2500))  # cents

# ========================= CANCELLATION FLOW =========================
DOWNSELL_DISCOUNT_CENTS = int(os.getenv('DOWNSELL_DISCOUNT_CENTS', 1000))
DOWNSELL_DURATION_MONTHS = int(os.getenv('DOWNSELL_DURATION_MONTHS', 6))

# ========================= RATE LIMIT =========================
CANCEL_API_RATELIMIT = os.getenv('CANCEL_API_RATELIMIT', '30/m')
RATELIMIT_ENABLE = os.getenv('RATELIMIT_ENABLE', 'True') == 'True'
RATELIMIT_VIEW = 'billing.views.rate_limit_exceeded_view'

# ========================= INSTALLED APPS =========================
INSTALLED_APPS = [
    # Django
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third-party
    'django_htmx',
    'auditlog',
    'django_ratelimit',

    # Local
    'users',
    'billing',
    'dashboard',
]

# ========================= MIDDLEWARE =========================
MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'django_htmx.middleware.HtmxMiddleware',
    'auditlog.middleware.AuditlogMiddleware',
    'django_ratelimit.middleware.RatelimitMiddleware',
]

ROOT_URLCONF = 'core.urls'
WSGI_APPLICATION = 'core.wsgi.application'
ASGI_APPLICATION = 'core.asgi.application'

# ========================= TEMPLATES =========================
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
                "core.context_processors.site_name",
            ],
        },
    },
]

# ========================= AUTH USER =========================
AUTH_USER_MODEL = 'users.UserAccount'

# ========================= STATIC =========================
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# ========================= CACHES (for django-ratelimit) =========================
REDIS_URL = os.getenv("REDIS_URL")

if REDIS_URL:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.redis.RedisCache",
            "LOCATION": f"{REDIS_URL}/1",
        }
    }
else:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        }
    }
    # Per-process counters are fine for local runs
    SILENCED_SYSTEM_CHECKS = ['django_ratelimit.E003', 'django_ratelimit.W001']

# ========================= DEFAULT AUTO FIELD =========================
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

USE_TZ = True
TIME_ZONE = 'UTC'

# ========================= LOGGING =========================
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'django.template': {
            'handlers': ['console'],
            'level': 'INFO', # hides variable lookup failures
            'propagate': False,
        },
        'billing': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'users': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}

# ========================= DYNAMIC SITE INFO =========================
SITE_NAME = os.getenv("SITE_NAME", "CancelFlow")
