"""
Expose the ORM models to Django's app registry.
"""
from accounts.infrastructure.models import *  # noqa: F401,F403
