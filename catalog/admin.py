"""
Django admin configuration for catalog app.
"""

from django.contrib import admin

from catalog.infrastructure.models import Feature, Product


class FeatureInline(admin.TabularInline):
    """Inline features on the product page."""

    model = Feature
    extra = 0
    fields = ["name", "package_tier", "description"]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product model."""

    list_display = ["name", "feature_count", "created_at"]
    list_filter = ["created_at", "updated_at"]
    search_fields = ["name"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [FeatureInline]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "name", "description"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def feature_count(self, obj):
        """Display number of features for this product."""
        return obj.features.count()

    feature_count.short_description = "Features"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).prefetch_related("features")


@admin.register(Feature)
class FeatureAdmin(admin.ModelAdmin):
    """Admin interface for Feature model."""

    list_display = ["name", "product", "package_tier", "created_at"]
    list_filter = ["package_tier", "product"]
    search_fields = ["name", "product__name"]
    readonly_fields = ["id", "created_at", "updated_at"]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("product")
