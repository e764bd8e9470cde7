"""
Persistence of read-time status normalization.

Handlers that load a key normalize its status first. When that changes
the key (for example an annual key whose expiry has passed) the new
status is written back and an event is published.
"""
import logging

from core.domain.events import EventBus
from core.domain.value_objects import LicenseStatus
from licenses.domain.events import LicenseExpired
from licenses.domain.license_key import LicenseKey
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


async def publish_status_change(event_bus: EventBus, before: LicenseKey, after: LicenseKey) -> None:
    """Publish the event matching a normalized status change."""
    if after.status == LicenseStatus.EXPIRED and before.status != LicenseStatus.EXPIRED:
        await event_bus.publish(
            LicenseExpired(aggregate_id=str(after.id), expires_at=after.expires_at)
        )


async def persist_refreshed(
    license_key_repository: LicenseKeyRepository,
    event_bus: EventBus,
    before: LicenseKey,
    after: LicenseKey,
) -> LicenseKey:
    """
    Save a key whose status was normalized, if it changed.

    Args:
        license_key_repository: Repository to save through
        event_bus: Bus for the resulting event
        before: Key as loaded
        after: Key after ``refresh_status``

    Returns:
        The stored key (``before`` unchanged if nothing moved)
    """
    if after is before:
        return before
    saved = await license_key_repository.save(after)
    logger.info(
        "License status normalized",
        extra={
            "license_key_id": str(after.id),
            "previous_status": before.status.value,
            "status": after.status.value,
        },
    )
    await publish_status_change(event_bus, before, after)
    return saved
