"""
Product and Feature models.
"""
import uuid

from django.db import models

PACKAGE_TIER_CHOICES = [
    ("basic", "Basic"),
    ("standard", "Standard"),
    ("premium", "Premium"),
]


class Product(models.Model):
    """
    Represents a product that can be licensed.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, unique=True, help_text="Product display name")
    description = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Feature(models.Model):
    """
    A product feature, available from one package tier.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="features")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    package_tier = models.CharField(max_length=20, choices=PACKAGE_TIER_CHOICES, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "features"
        unique_together = [["product", "name"]]
        ordering = ["created_at", "name"]
        indexes = [
            models.Index(fields=["product", "package_tier"]),
        ]

    def __str__(self):
        return f"{self.product.name} - {self.name} ({self.package_tier})"
