"""
Development settings for EntitlementService.
"""

import os

from .base import *  # noqa: F403, F401

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

# Database - PostgreSQL by default, DB_ENGINE=sqlite for a local file
if os.environ.get("DB_ENGINE") == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
        }
    }

# Cheaper hashing for local work unless overridden
LICENSING["KEY_HASH_ROUNDS"] = int(os.environ.get("LICENSE_KEY_HASH_ROUNDS", "10"))  # noqa: F405
