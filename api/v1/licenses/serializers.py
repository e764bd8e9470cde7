"""
Serializers for License API endpoints.
"""

from rest_framework import serializers

from licenses.domain.license_key import FeatureGrantRequest

PACKAGE_TIERS = ["basic", "standard", "premium"]
LICENSE_MODES = ["perpetual", "annual"]


class FeatureGrantRequestSerializer(serializers.Serializer):
    """Serializer for a requested feature grant."""

    feature_id = serializers.UUIDField()
    limit = serializers.IntegerField(min_value=0, allow_null=True, required=False, default=None)


class GrantListMixin:
    """Turns validated grant dicts into domain requests."""

    def grant_requests(self):
        grants = self.validated_data.get("allowed_features")
        if grants is None:
            return None
        return [FeatureGrantRequest(feature_id=g["feature_id"], limit=g.get("limit")) for g in grants]


class IssueLicenseRequestSerializer(GrantListMixin, serializers.Serializer):
    """Serializer for issue license request."""

    username = serializers.CharField(max_length=150)
    product_id = serializers.UUIDField()
    package_tier = serializers.ChoiceField(choices=PACKAGE_TIERS)
    license_mode = serializers.ChoiceField(choices=LICENSE_MODES)
    issued_duration = serializers.IntegerField(min_value=0)
    allowed_features = FeatureGrantRequestSerializer(many=True, required=False)


class ActivateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for activate license request."""

    username = serializers.CharField(max_length=150)
    product_name = serializers.CharField(max_length=255)
    license_key = serializers.CharField(max_length=64)


class UpgradeLicenseRequestSerializer(GrantListMixin, serializers.Serializer):
    """Serializer for upgrade license request."""

    package_tier = serializers.ChoiceField(choices=PACKAGE_TIERS)
    license_mode = serializers.ChoiceField(choices=LICENSE_MODES)
    added_duration = serializers.IntegerField(min_value=0)
    allowed_features = FeatureGrantRequestSerializer(many=True, required=False)


class FeatureGrantSerializer(serializers.Serializer):
    """Serializer for FeatureGrantDTO."""

    feature_id = serializers.UUIDField()
    limit = serializers.IntegerField(allow_null=True)
    usage_count = serializers.IntegerField()
    status = serializers.CharField()
    consecutive_violations = serializers.IntegerField()
    first_used_at = serializers.DateTimeField(allow_null=True)
    last_used_at = serializers.DateTimeField(allow_null=True)
    last_violation_at = serializers.DateTimeField(allow_null=True)


class DisabledFeatureSerializer(serializers.Serializer):
    """Serializer for DisabledFeatureDTO."""

    feature_id = serializers.UUIDField()
    limit = serializers.IntegerField(allow_null=True)


class LicenseKeySummarySerializer(serializers.Serializer):
    """Serializer for LicenseKeySummaryDTO."""

    id = serializers.UUIDField()
    owner_id = serializers.UUIDField()
    owner_username = serializers.CharField()
    product_id = serializers.UUIDField()
    product_name = serializers.CharField()
    package_tier = serializers.CharField()
    license_mode = serializers.CharField()
    is_perpetual = serializers.BooleanField()
    status = serializers.CharField()
    issued_duration = serializers.IntegerField()
    activated_at = serializers.DateTimeField(allow_null=True)
    expires_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    allowed_features = FeatureGrantSerializer(many=True)
    disabled_features = DisabledFeatureSerializer(many=True)


class IssueLicenseResponseSerializer(serializers.Serializer):
    """Serializer for issue license response."""

    license = LicenseKeySummarySerializer()
    license_secret = serializers.CharField()


class ActivationResultSerializer(serializers.Serializer):
    """Serializer for activate license response."""

    license_key_id = serializers.UUIDField()
    status = serializers.CharField()
    activated_at = serializers.DateTimeField(allow_null=True)
    expires_at = serializers.DateTimeField(allow_null=True)


class LicenseCheckSerializer(serializers.Serializer):
    """Serializer for check license response."""

    license_key_id = serializers.UUIDField()
    product_name = serializers.CharField()
    status = serializers.CharField()
    expires_at = serializers.DateTimeField(allow_null=True)
