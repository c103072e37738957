"""
Serializers for account and token endpoints.
"""

from rest_framework import serializers


class RegisterRequestSerializer(serializers.Serializer):
    """Serializer for register request."""

    email = serializers.EmailField(max_length=255)
    password = serializers.CharField(max_length=128, trim_whitespace=False)
    name = serializers.CharField(max_length=255)
    company = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class LoginRequestSerializer(serializers.Serializer):
    """Serializer for login request."""

    email = serializers.EmailField(max_length=255)
    password = serializers.CharField(max_length=128, trim_whitespace=False)


class RefreshTokenRequestSerializer(serializers.Serializer):
    """Serializer for refresh and logout requests."""

    refresh_token = serializers.CharField(max_length=255)


class UserSerializer(serializers.Serializer):
    """Serializer for UserDTO."""

    id = serializers.UUIDField()
    email = serializers.EmailField()
    name = serializers.CharField()
    company = serializers.CharField()
    role = serializers.CharField()
    email_verified = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    last_login_at = serializers.DateTimeField(allow_null=True)


class TokenPairSerializer(serializers.Serializer):
    """Serializer for TokenPairDTO."""

    access_token = serializers.CharField()
    refresh_token = serializers.CharField()
    token_type = serializers.CharField()
    expires_at = serializers.DateTimeField()


class AuthResultSerializer(serializers.Serializer):
    """Serializer for register and login responses."""

    user = UserSerializer()
    tokens = TokenPairSerializer()
