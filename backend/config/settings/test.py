"""
Test settings.

SQLite in-memory database and dummy secrets so the suite runs without services.
"""

from .base import *  # noqa: F403
from .base import settings

DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

settings.STRIPE_SECRET_KEY = "sk_test_dummy"
settings.STRIPE_WEBHOOK_SECRET = "whsec_test_dummy"
settings.STYTCH_PROJECT_ID = "project-test-00000000-0000-0000-0000-000000000000"
settings.STYTCH_SECRET = "secret-test-dummy"
settings.FRONTEND_URL = "https://studynest.test"
