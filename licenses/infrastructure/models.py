"""
License Django ORM model.

Domain entities are in licenses.domain.license.
"""
import uuid

from django.db import models
from django.utils import timezone

from licenses.domain.license import hash_license_key


class License(models.Model):
    """
    A tier grant owned by a user.

    hardware_id is null until the first validation binds it.
    """

    TIER_CHOICES = [
        ("community", "Community"),
        ("trial", "Trial"),
        ("pro", "Pro"),
        ("enterprise", "Enterprise"),
    ]

    STATUS_CHOICES = [
        ("active", "Active"),
        ("expired", "Expired"),
        ("revoked", "Revoked"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        "accounts.User", on_delete=models.CASCADE, related_name="licenses"
    )
    license_key = models.CharField(max_length=100, unique=True)
    key_hash = models.CharField(
        max_length=64, db_index=True, help_text="Hashed version for secure lookup"
    )
    tier = models.CharField(max_length=20, choices=TIER_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    max_sources = models.IntegerField(default=1, help_text="0 means unlimited")
    max_tables = models.IntegerField(default=10, help_text="0 means unlimited")
    max_throughput = models.IntegerField(default=1000, help_text="0 means unlimited")
    features = models.JSONField(default=list, blank=True)
    hardware_id = models.CharField(max_length=255, null=True, blank=True)
    issued_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField()
    revoked_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "status"]),
            models.Index(fields=["status", "expires_at"]),
            models.Index(fields=["tier"]),
        ]

    def __str__(self):
        return f"{self.license_key} ({self.tier})"

    def save(self, *args, **kwargs):
        """Keep the lookup hash in step with the key."""
        if self.license_key and not self.key_hash:
            self.key_hash = hash_license_key(self.license_key)
        super().save(*args, **kwargs)
