"""
Configurações específicas para testes - Imobiliária API
=======================================================
"""

import tempfile

from .settings import *  # noqa: F401,F403

# Database para testes
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}


# Desabilitar migrações para acelerar testes
class DisableMigrations:
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


MIGRATION_MODULES = DisableMigrations()

# Email backend para testes
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

# Cache em memória para testes
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# Logging simplificado para testes
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "loggers": {
        "": {
            "handlers": ["null"],
        },
    },
}

DEBUG = False

SECRET_KEY = "test-secret-key-for-testing-only"

# Media files para testes
MEDIA_ROOT = tempfile.mkdtemp(prefix="imobiliaria_test_media_")

# Configurações de password hashers mais rápidas para testes
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

SIMPLE_JWT.update(  # noqa: F405
    {
        "SIGNING_KEY": SECRET_KEY,
        "REFRESH_TOKEN_LIFETIME": timedelta(days=1),  # noqa: F405
    }
)

# Desabilitar rate limiting nos testes
REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    "DEFAULT_THROTTLE_CLASSES": [],
}

CORS_ALLOW_ALL_ORIGINS = True

# Uploads com timeout curto nos testes
UPLOAD_TIMEOUT_SECONDS = 5
