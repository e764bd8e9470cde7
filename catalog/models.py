"""
Expose the ORM models to Django's app registry.
"""
from catalog.infrastructure.models import *  # noqa: F401,F403
