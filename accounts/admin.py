"""
Django admin configuration for accounts app.
"""
from django.contrib import admin

from accounts.infrastructure.models import Account, ProductLicense


class ProductLicenseInline(admin.TabularInline):
    """Read-only list of products the account holds a license for."""

    model = ProductLicense
    extra = 0
    fields = ["product", "created_at"]
    readonly_fields = ["product", "created_at"]
    can_delete = False

    def has_add_permission(self, request, obj=None):
        """Secrets are only written by license issuance."""
        return False


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    """Admin interface for Account model."""

    list_display = ["username", "license_count", "created_at"]
    search_fields = ["username"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [ProductLicenseInline]

    def license_count(self, obj):
        """Display number of licensed products."""
        return obj.product_licenses.count()

    license_count.short_description = "Licenses"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).prefetch_related("product_licenses")
