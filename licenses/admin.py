"""
Django admin configuration for licenses app.
"""
import json

from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import LicenseKey


@admin.register(LicenseKey)
class LicenseKeyAdmin(admin.ModelAdmin):
    """Admin interface for LicenseKey model."""

    list_display = [
        "id",
        "owner",
        "product",
        "package_tier",
        "license_mode",
        "status_display",
        "expires_at",
        "created_at",
    ]
    list_filter = ["status", "license_mode", "package_tier", "created_at"]
    search_fields = ["owner__username", "product__name"]
    readonly_fields = [
        "id",
        "verification_hash",
        "version",
        "created_at",
        "updated_at",
        "allowed_features_display",
        "disabled_features_display",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "owner", "product", "package_tier", "license_mode", "status"),
            },
        ),
        (
            "Duration",
            {
                "fields": ("issued_duration", "activated_at", "expires_at"),
            },
        ),
        (
            "Features",
            {
                "fields": ("allowed_features_display", "disabled_features_display"),
            },
        ),
        (
            "Internals",
            {
                "fields": ("verification_hash", "version", "created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def status_display(self, obj):
        """Display status with color coding."""
        colors = {
            "active": "green",
            "inactive": "gray",
            "suspended": "orange",
            "expired": "red",
        }
        color = colors.get(obj.status, "black")
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color,
            obj.status.upper(),
        )

    status_display.short_description = "Status"

    def _json_block(self, value):
        if value:
            return format_html(
                '<pre style="background: #f5f5f5; padding: 10px; '
                'border-radius: 4px; overflow-x: auto;">{}</pre>',
                json.dumps(value, indent=2),
            )
        return "-"

    def allowed_features_display(self, obj):
        """Display allowed feature grants."""
        return self._json_block(obj.allowed_features)

    allowed_features_display.short_description = "Allowed features"

    def disabled_features_display(self, obj):
        """Display disabled feature records."""
        return self._json_block(obj.disabled_features)

    disabled_features_display.short_description = "Disabled features"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("owner", "product")
