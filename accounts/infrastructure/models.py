"""
Account and ProductLicense models.
"""
import uuid

from django.db import models


class Account(models.Model):
    """
    A license owner.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(max_length=150, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "accounts"
        ordering = ["username"]

    def __str__(self):
        return self.username


class ProductLicense(models.Model):
    """
    Records the raw license secret issued to an account for a product.

    Written in the same transaction as the license key it belongs to.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name="product_licenses")
    product = models.ForeignKey(
        "catalog.Product", on_delete=models.CASCADE, related_name="product_licenses"
    )
    license_secret = models.CharField(max_length=64, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "account_product_licenses"
        unique_together = [["account", "product"]]
        ordering = ["created_at"]

    def __str__(self):
        return f"{self.account.username} - {self.product.name}"
