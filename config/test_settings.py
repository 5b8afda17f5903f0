"""
Settings used by the test suite.

Provides the environment the main settings module insists on, then switches
to SQLite, a local memory cache and a fast password hasher.
"""
import os
import tempfile

os.environ.setdefault("SECRET_KEY", "supchaissac-test-secret-key")
os.environ.setdefault("DEBUG", "True")
os.environ.setdefault("ALLOWED_HOSTS", "testserver,localhost,127.0.0.1")
os.environ.setdefault("CACHE_BACKEND", "locmem")
os.environ.setdefault("DB_ENGINE", "sqlite")
os.environ.setdefault("HEALTHCHECK_TOKEN", "test-health-token")

from .settings import *  # noqa: E402,F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

MEDIA_ROOT = tempfile.mkdtemp(prefix="supchaissac-media-")
