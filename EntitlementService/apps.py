"""
App configuration for the License Entitlement Service.
"""
import logging
import os
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)

SKIP_COMMANDS = {
    "migrate",
    "makemigrations",
    "collectstatic",
    "shell",
    "check",
    "createsuperuser",
}


class EntitlementServiceConfig(AppConfig):
    """App configuration for EntitlementService."""

    name = "EntitlementService"
    verbose_name = "License Entitlement Service"

    def ready(self):
        """Register event handlers and set up tracing once apps are loaded."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()

        if len(sys.argv) > 1 and sys.argv[1] in SKIP_COMMANDS:
            return

        # Django's autoreloader runs ready() in both the watcher and the server process
        if os.environ.get("RUN_MAIN") == "false":
            return

        if not getattr(self, "_observability_ready", False):
            from core.instrumentation import setup_opentelemetry

            setup_opentelemetry()
            self._observability_ready = True
            logger.info("Observability setup complete")
