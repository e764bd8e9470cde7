"""
LicenseKey model.
"""
import uuid

from django.db import models
from django.utils import timezone

LICENSE_MODE_CHOICES = [
    ("perpetual", "Perpetual"),
    ("annual", "Annual"),
]

LICENSE_STATUS_CHOICES = [
    ("inactive", "Inactive"),
    ("active", "Active"),
    ("expired", "Expired"),
    ("suspended", "Suspended"),
]

PACKAGE_TIER_CHOICES = [
    ("basic", "Basic"),
    ("standard", "Standard"),
    ("premium", "Premium"),
]


class LicenseKey(models.Model):
    """
    One owner's license for one product.

    Feature grants are stored as JSON arrays on the row so the whole
    aggregate is read and written as a unit. ``version`` guards
    concurrent read-modify-write cycles.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey("accounts.Account", on_delete=models.CASCADE, related_name="license_keys")
    product = models.ForeignKey("catalog.Product", on_delete=models.PROTECT, related_name="license_keys")
    verification_hash = models.CharField(max_length=128, help_text="bcrypt hash of the license secret")
    package_tier = models.CharField(max_length=20, choices=PACKAGE_TIER_CHOICES)
    license_mode = models.CharField(max_length=20, choices=LICENSE_MODE_CHOICES)
    status = models.CharField(max_length=20, choices=LICENSE_STATUS_CHOICES, default="inactive", db_index=True)
    issued_duration = models.PositiveIntegerField(default=0)
    activated_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    allowed_features = models.JSONField(default=list, blank=True)
    disabled_features = models.JSONField(default=list, blank=True)
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "license_keys"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["owner", "product"], name="unique_license_per_owner_product"),
        ]
        indexes = [
            models.Index(fields=["owner", "product"]),
            models.Index(fields=["status", "expires_at"]),
        ]

    def __str__(self):
        return f"{self.owner_id} - {self.product_id} ({self.status})"
