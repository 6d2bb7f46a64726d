"""
Test settings – SQLite in-memory database, no external services.

pytest picks this module up through ``DJANGO_SETTINGS_MODULE`` in
``pyproject.toml``.
"""
import os

# base.py reads SECRET_KEY without a default
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from .base import *  # noqa: F401, F403, E402

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

LOGGING["root"]["level"] = "WARNING"  # noqa: F405
