"""
Event handlers for domain events.

These handlers process domain events asynchronously for side effects
like audit logging and business metrics.
"""

import logging

from core.domain.events import DomainEvent, EventHandler
from core.metrics import (
    feature_violations_total,
    features_restored_total,
    features_suspended_total,
    licenses_activated_total,
    licenses_expired_total,
    licenses_issued_total,
    licenses_upgraded_total,
)
from entitlements.domain.events import FeatureRestored, FeatureSuspended, FeatureViolationRecorded
from licenses.domain.events import (
    LicenseActivated,
    LicenseExpired,
    LicenseIssued,
    LicenseUpgraded,
)

logger = logging.getLogger(__name__)

AUDITED_EVENTS = (
    LicenseIssued,
    LicenseActivated,
    LicenseUpgraded,
    LicenseExpired,
    FeatureViolationRecorded,
    FeatureSuspended,
    FeatureRestored,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes every domain event to the audit logger as structured JSON.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )


class BusinessMetricsEventHandler(EventHandler):
    """Event handler that turns domain events into Prometheus counters."""

    async def handle(self, event: DomainEvent) -> None:
        if isinstance(event, LicenseIssued):
            licenses_issued_total.labels(
                package_tier=event.package_tier, license_mode=event.license_mode
            ).inc()
        elif isinstance(event, LicenseActivated):
            licenses_activated_total.labels(license_mode=event.license_mode).inc()
        elif isinstance(event, LicenseUpgraded):
            licenses_upgraded_total.labels(
                package_tier=event.package_tier, license_mode=event.license_mode
            ).inc()
        elif isinstance(event, LicenseExpired):
            licenses_expired_total.inc()
        elif isinstance(event, FeatureViolationRecorded):
            feature_violations_total.inc()
        elif isinstance(event, FeatureSuspended):
            features_suspended_total.inc()
        elif isinstance(event, FeatureRestored):
            features_restored_total.inc()


audit_handler = AuditLogEventHandler()
metrics_handler = BusinessMetricsEventHandler()


# Register event handlers
def register_event_handlers(bus=None):
    """Register all event handlers with the event bus."""
    if bus is None:
        from core.infrastructure.events import event_bus as bus

    for event_type in AUDITED_EVENTS:
        bus.subscribe(event_type, audit_handler)
        bus.subscribe(event_type, metrics_handler)

    logger.info("Event handlers registered")
