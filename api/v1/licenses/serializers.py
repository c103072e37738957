"""
Serializers for license endpoints.
"""

from rest_framework import serializers

from core.domain.value_objects import LicenseTier
from licenses.domain.license import DEFAULT_VALID_DAYS

TIER_CHOICES = [tier.value for tier in LicenseTier]


class IssueLicenseRequestSerializer(serializers.Serializer):
    """Serializer for issuing a license to the caller."""

    tier = serializers.ChoiceField(choices=TIER_CHOICES)
    valid_days = serializers.IntegerField(required=False, default=0, min_value=0)
    hardware_id = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )

    def validate_valid_days(self, value):
        """Zero means the default validity."""
        return value or DEFAULT_VALID_DAYS


class LicenseSerializer(serializers.Serializer):
    """Serializer for LicenseDTO."""

    id = serializers.UUIDField()
    user_id = serializers.UUIDField()
    license_key = serializers.CharField()
    tier = serializers.CharField()
    status = serializers.CharField()
    max_sources = serializers.IntegerField()
    max_tables = serializers.IntegerField()
    max_throughput = serializers.IntegerField()
    features = serializers.ListField(child=serializers.CharField())
    hardware_id = serializers.CharField(allow_null=True)
    issued_at = serializers.DateTimeField()
    expires_at = serializers.DateTimeField()
    revoked_at = serializers.DateTimeField(allow_null=True)


class ActivationSerializer(serializers.Serializer):
    """Serializer for ActivationDTO."""

    id = serializers.UUIDField()
    license_id = serializers.UUIDField()
    hardware_id = serializers.CharField()
    hostname = serializers.CharField()
    platform = serializers.CharField()
    version = serializers.CharField()
    ip_address = serializers.CharField(allow_null=True)
    activated_at = serializers.DateTimeField()
    last_seen_at = serializers.DateTimeField()
    deactivated_at = serializers.DateTimeField(allow_null=True)
    is_active = serializers.BooleanField()
