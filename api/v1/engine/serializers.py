"""
Serializers for engine-facing license endpoints.
"""

from rest_framework import serializers

from api.v1.licenses.serializers import ActivationSerializer, LicenseSerializer


class ValidateLicenseRequestSerializer(serializers.Serializer):
    """license_id accepts the license id or its key."""

    license_id = serializers.CharField(max_length=100)
    hardware_id = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class ValidateLicenseResponseSerializer(serializers.Serializer):
    valid = serializers.BooleanField()
    license = LicenseSerializer()


class ActivateRequestSerializer(serializers.Serializer):
    """Serializer for an engine activation request."""

    license_key = serializers.CharField(max_length=100)
    hardware_id = serializers.CharField(max_length=255)
    hostname = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    platform = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    version = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")


class ActivateResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    created = serializers.BooleanField()
    slots_remaining = serializers.IntegerField(allow_null=True)
    activation = ActivationSerializer()


class DeactivateRequestSerializer(serializers.Serializer):
    """license_id accepts the license id or its key."""

    license_id = serializers.CharField(max_length=100)
    hardware_id = serializers.CharField(max_length=255)


class DeactivateResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    deactivated = serializers.BooleanField()
