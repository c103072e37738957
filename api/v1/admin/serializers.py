"""
Serializers for admin endpoints.
"""

from rest_framework import serializers

from api.v1.licenses.serializers import TIER_CHOICES, LicenseSerializer
from core.domain.value_objects import LicenseStatus
from licenses.application.queries.license_queries import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from licenses.domain.license import DEFAULT_VALID_DAYS


class LicenseListParamsSerializer(serializers.Serializer):
    """Query parameters for the admin license listing."""

    page = serializers.IntegerField(required=False, default=1, min_value=1)
    limit = serializers.IntegerField(
        required=False, default=DEFAULT_PAGE_SIZE, min_value=1, max_value=MAX_PAGE_SIZE
    )
    tier = serializers.ChoiceField(choices=TIER_CHOICES, required=False)
    status = serializers.ChoiceField(
        choices=[status.value for status in LicenseStatus], required=False
    )


class LicensePageSerializer(serializers.Serializer):
    """Serializer for LicensePageDTO."""

    licenses = LicenseSerializer(many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    limit = serializers.IntegerField()


class GenerateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for issuing a license to any user."""

    user_id = serializers.UUIDField()
    tier = serializers.ChoiceField(choices=TIER_CHOICES)
    valid_days = serializers.IntegerField(required=False, default=0, min_value=0)
    hardware_id = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )

    def validate_valid_days(self, value):
        """Zero means the default validity."""
        return value or DEFAULT_VALID_DAYS
