"""
Serializers for Feature API endpoints.
"""

from rest_framework import serializers


class FeatureOwnerRequestSerializer(serializers.Serializer):
    """Serializer for feature usage and restore requests."""

    username = serializers.CharField(max_length=150)


class FeatureUsageResponseSerializer(serializers.Serializer):
    """Serializer for an accepted feature usage."""

    license_key_id = serializers.UUIDField()
    feature_id = serializers.UUIDField()
    outcome = serializers.CharField()
    usage_count = serializers.IntegerField(allow_null=True)
    limit = serializers.IntegerField(allow_null=True)


class FeatureRestoreResponseSerializer(serializers.Serializer):
    """Serializer for a restored feature."""

    license_key_id = serializers.UUIDField()
    feature_id = serializers.UUIDField()
    limit = serializers.IntegerField(allow_null=True)
    license_status = serializers.CharField()
