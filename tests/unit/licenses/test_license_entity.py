"""
Unit tests for License entity.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.value_objects import LicenseStatus, LicenseTier
from licenses.domain.license import License
from licenses.domain.tiers import UNLIMITED, limits_for, parse_tier


class TestLicenseCreation:
    """Tests for License.create."""

    def test_create_from_tier_catalog(self):
        license = License.create(user_id=uuid.uuid4(), tier=LicenseTier.PRO)

        limits = limits_for(LicenseTier.PRO)
        assert license.status == LicenseStatus.ACTIVE
        assert license.max_sources == limits.max_sources
        assert license.max_tables == limits.max_tables
        assert license.max_throughput == limits.max_throughput
        assert "mongodb" in license.features
        assert license.license_key.startswith("PRO-")
        assert license.hardware_id is None

    def test_enterprise_is_unlimited(self):
        license = License.create(user_id=uuid.uuid4(), tier=LicenseTier.ENTERPRISE)

        assert license.max_sources == UNLIMITED
        assert license.has_feature("ha")

    def test_expiry_follows_valid_days(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        license = License.create(
            user_id=uuid.uuid4(), tier=LicenseTier.TRIAL, valid_days=14, now=now
        )

        assert license.expires_at == now + timedelta(days=14)

    def test_rejects_non_positive_validity(self):
        with pytest.raises(ValueError):
            License.create(user_id=uuid.uuid4(), tier=LicenseTier.COMMUNITY, valid_days=0)

    def test_keys_are_unique(self):
        user_id = uuid.uuid4()
        keys = {License.create(user_id=user_id, tier=LicenseTier.PRO).license_key for _ in range(20)}
        assert len(keys) == 20

    def test_parse_tier(self):
        assert parse_tier(" Enterprise ") == LicenseTier.ENTERPRISE
        with pytest.raises(ValueError):
            parse_tier("platinum")


class TestLicenseLifecycle:
    """Tests for status transitions."""

    def test_effective_status_expired_after_expiry(self):
        license = License.create(user_id=uuid.uuid4(), tier=LicenseTier.COMMUNITY, valid_days=1)
        later = license.expires_at + timedelta(seconds=1)

        assert license.status == LicenseStatus.ACTIVE
        assert license.effective_status(later) == LicenseStatus.EXPIRED
        assert not license.is_valid(later)

    def test_revoked_wins_over_expired(self):
        license = License.create(user_id=uuid.uuid4(), tier=LicenseTier.COMMUNITY, valid_days=1)
        revoked = license.revoke()

        assert revoked.effective_status(license.expires_at + timedelta(days=1)) == (
            LicenseStatus.REVOKED
        )

    def test_revoke_is_idempotent(self):
        license = License.create(user_id=uuid.uuid4(), tier=LicenseTier.COMMUNITY)
        first_at = datetime(2026, 3, 1, tzinfo=timezone.utc)

        once = license.revoke(at=first_at)
        twice = once.revoke(at=first_at + timedelta(hours=1))

        assert twice.revoked_at == first_at
        assert twice.status == LicenseStatus.REVOKED

    def test_mark_expired_keeps_revocation(self):
        license = License.create(user_id=uuid.uuid4(), tier=LicenseTier.COMMUNITY).revoke()

        assert license.mark_expired().status == LicenseStatus.REVOKED


class TestHardwareBinding:
    """Tests for one-way hardware binding."""

    def test_bind_unbound_license(self):
        license = License.create(user_id=uuid.uuid4(), tier=LicenseTier.COMMUNITY)

        bound = license.bind_hardware("hw-1")

        assert bound.is_bound_to("hw-1")

    def test_rebinding_same_hardware_is_noop(self):
        license = License.create(
            user_id=uuid.uuid4(), tier=LicenseTier.COMMUNITY, hardware_id="hw-1"
        )

        assert license.bind_hardware("hw-1") is license

    def test_cannot_rebind_to_other_hardware(self):
        license = License.create(
            user_id=uuid.uuid4(), tier=LicenseTier.COMMUNITY, hardware_id="hw-1"
        )

        with pytest.raises(ValueError):
            license.bind_hardware("hw-2")
