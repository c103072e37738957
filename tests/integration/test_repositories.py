"""
Integration tests for repository implementations.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync

from accounts.domain.refresh_token import RefreshToken
from activations.domain.activation import Activation
from core.domain.exceptions import ActivationNotFoundError, QuotaExceededError
from core.domain.value_objects import LicenseStatus, LicenseTier
from licenses.domain.license import License
from licenses.domain.services import QuotaPolicy
from telemetry.domain.telemetry_record import TelemetryRecord
from telemetry.infrastructure.models import TelemetryRecord as TelemetryRecordModel


@pytest.mark.django_db
@pytest.mark.integration
class TestUserRepository:
    """Integration tests for UserRepository."""

    def test_find_by_email_is_case_insensitive(self, user_repository, db_user):
        found = async_to_sync(user_repository.find_by_email)("OWNER@example.com")

        assert found is not None
        assert found.id == db_user.id

    def test_exists(self, user_repository, db_user):
        assert async_to_sync(user_repository.exists)(db_user.id) is True
        assert async_to_sync(user_repository.exists)(uuid.uuid4()) is False


@pytest.mark.django_db
@pytest.mark.integration
class TestRefreshTokenRepository:
    """Integration tests for RefreshTokenRepository."""

    def test_consume_is_single_use(self, refresh_token_repository, db_user):
        token = RefreshToken.create(db_user.id, timedelta(days=1))
        async_to_sync(refresh_token_repository.save)(token)

        first = async_to_sync(refresh_token_repository.consume)(token.token)
        second = async_to_sync(refresh_token_repository.consume)(token.token)

        assert first is not None
        assert first.user_id == db_user.id
        assert second is None

    def test_revoked_token_cannot_be_consumed(self, refresh_token_repository, db_user):
        token = RefreshToken.create(db_user.id, timedelta(days=1))
        async_to_sync(refresh_token_repository.save)(token)

        assert async_to_sync(refresh_token_repository.revoke)(token.token) is True
        assert async_to_sync(refresh_token_repository.consume)(token.token) is None


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseRepository:
    """Integration tests for LicenseRepository."""

    def test_save_and_find(self, license_repository, db_license):
        by_id = async_to_sync(license_repository.find_by_id)(db_license.id)
        by_key = async_to_sync(license_repository.find_by_key)(db_license.license_key)

        assert by_id.id == db_license.id
        assert by_key.id == db_license.id
        assert by_id.tier == LicenseTier.COMMUNITY
        assert by_id.features == db_license.features

    def test_bind_hardware_is_one_way(self, license_repository, db_license):
        first = async_to_sync(license_repository.bind_hardware)(db_license.id, "hw-1")
        second = async_to_sync(license_repository.bind_hardware)(db_license.id, "hw-2")

        assert first.hardware_id == "hw-1"
        assert second.hardware_id == "hw-1"

    def test_revoke_is_idempotent(self, license_repository, db_license):
        at = datetime.now(timezone.utc)

        revoked, changed = async_to_sync(license_repository.revoke)(db_license.id, at)
        again, changed_again = async_to_sync(license_repository.revoke)(
            db_license.id, at + timedelta(hours=1)
        )

        assert changed is True
        assert changed_again is False
        assert again.revoked_at == revoked.revoked_at
        assert again.status == LicenseStatus.REVOKED

    def test_expire_overdue(self, license_repository, db_user, make_license):
        past = datetime.now(timezone.utc) - timedelta(days=10)
        overdue = async_to_sync(license_repository.save)(
            License.create(user_id=db_user.id, tier=LicenseTier.TRIAL, valid_days=1, now=past)
        )
        current = make_license(db_user)

        expired = async_to_sync(license_repository.expire_overdue)(datetime.now(timezone.utc))

        assert [license.id for license in expired] == [overdue.id]
        reloaded = async_to_sync(license_repository.find_by_id)(current.id)
        assert reloaded.status == LicenseStatus.ACTIVE

    def test_list_all_filters_and_pages(self, license_repository, db_user, make_license):
        for _ in range(3):
            make_license(db_user, tier=LicenseTier.PRO)
        make_license(db_user, tier=LicenseTier.COMMUNITY)

        page, total = async_to_sync(license_repository.list_all)(
            page=1, limit=2, tier="pro", status=None
        )

        assert total == 3
        assert len(page) == 2
        assert all(license.tier == LicenseTier.PRO for license in page)


@pytest.mark.django_db
@pytest.mark.integration
class TestActivationRepository:
    """Integration tests for ActivationRepository."""

    def _admit(self, license):
        return lambda count, already: QuotaPolicy.ensure_can_activate(license, count, already)

    def test_upsert_creates_then_refreshes(self, activation_repository, db_license):
        first = Activation.create(license_id=db_license.id, hardware_id="hw-1", version="1.0")
        later = Activation.create(
            license_id=db_license.id,
            hardware_id="hw-1",
            version="1.1",
            now=first.last_seen_at + timedelta(minutes=5),
        )

        created, was_created = async_to_sync(activation_repository.upsert_active)(
            first, self._admit(db_license)
        )
        refreshed, refreshed_created = async_to_sync(activation_repository.upsert_active)(
            later, self._admit(db_license)
        )

        assert was_created is True
        assert refreshed_created is False
        assert refreshed.id == created.id
        assert refreshed.version == "1.1"
        assert refreshed.last_seen_at == later.last_seen_at
        assert len(async_to_sync(activation_repository.find_active_by_license)(db_license.id)) == 1

    def test_quota_rejects_new_hardware(self, activation_repository, db_license):
        async_to_sync(activation_repository.upsert_active)(
            Activation.create(license_id=db_license.id, hardware_id="hw-1"),
            self._admit(db_license),
        )

        with pytest.raises(QuotaExceededError):
            async_to_sync(activation_repository.upsert_active)(
                Activation.create(license_id=db_license.id, hardware_id="hw-2"),
                self._admit(db_license),
            )

    def test_deactivate_frees_slot(self, activation_repository, db_license):
        activation, _ = async_to_sync(activation_repository.upsert_active)(
            Activation.create(license_id=db_license.id, hardware_id="hw-1"),
            self._admit(db_license),
        )
        now = datetime.now(timezone.utc)

        released, changed = async_to_sync(activation_repository.deactivate)(activation.id, now)
        _, changed_again = async_to_sync(activation_repository.deactivate)(activation.id, now)
        replacement, created = async_to_sync(activation_repository.upsert_active)(
            Activation.create(license_id=db_license.id, hardware_id="hw-2"),
            self._admit(db_license),
        )

        assert changed is True
        assert changed_again is False
        assert not released.is_active
        assert created is True
        assert replacement.hardware_id == "hw-2"

    def test_reactivating_released_hardware_creates_new_row(
        self, activation_repository, db_license
    ):
        activation, _ = async_to_sync(activation_repository.upsert_active)(
            Activation.create(license_id=db_license.id, hardware_id="hw-1"),
            self._admit(db_license),
        )
        async_to_sync(activation_repository.deactivate_by_hardware)(
            db_license.id, "hw-1", datetime.now(timezone.utc)
        )

        again, created = async_to_sync(activation_repository.upsert_active)(
            Activation.create(license_id=db_license.id, hardware_id="hw-1"),
            self._admit(db_license),
        )

        assert created is True
        assert again.id != activation.id
        assert len(async_to_sync(activation_repository.find_all_by_license)(db_license.id)) == 2

    def test_deactivate_unknown(self, activation_repository):
        with pytest.raises(ActivationNotFoundError):
            async_to_sync(activation_repository.deactivate)(
                uuid.uuid4(), datetime.now(timezone.utc)
            )

    def test_touch_never_moves_backwards(self, activation_repository, db_license):
        activation, _ = async_to_sync(activation_repository.upsert_active)(
            Activation.create(license_id=db_license.id, hardware_id="hw-1"),
            self._admit(db_license),
        )

        async_to_sync(activation_repository.touch)(
            db_license.id, "hw-1", activation.last_seen_at - timedelta(hours=1)
        )

        stored = async_to_sync(activation_repository.find_by_id)(activation.id)
        assert stored.last_seen_at == activation.last_seen_at


@pytest.mark.django_db
@pytest.mark.integration
class TestTelemetryRepository:
    """Integration tests for TelemetryRepository."""

    def test_same_hour_reports_collapse_to_one_row(self, telemetry_repository):
        hour = datetime(2026, 4, 1, 10, tzinfo=timezone.utc)
        async_to_sync(telemetry_repository.upsert)(
            TelemetryRecord.create(
                "lic-1", "hw-1", timestamp=hour + timedelta(minutes=5), events_processed=100
            )
        )
        stored = async_to_sync(telemetry_repository.upsert)(
            TelemetryRecord.create(
                "lic-1", "hw-1", timestamp=hour + timedelta(minutes=50), events_processed=250
            )
        )

        rows = async_to_sync(telemetry_repository.find_for_hour)("lic-1", "hw-1", hour)
        assert len(rows) == 1
        assert rows[0].events_processed == 250
        assert stored.events_processed == 250

    def test_different_hours_are_kept(self, telemetry_repository):
        hour = datetime(2026, 4, 1, 10, tzinfo=timezone.utc)
        for offset in (0, 1):
            async_to_sync(telemetry_repository.upsert)(
                TelemetryRecord.create("lic-1", "hw-1", timestamp=hour + timedelta(hours=offset))
            )

        assert TelemetryRecordModel.objects.filter(license_id="lic-1").count() == 2

    def test_totals_since(self, telemetry_repository):
        now = datetime.now(timezone.utc)
        for hardware_id, events in (("hw-1", 10), ("hw-2", 20)):
            async_to_sync(telemetry_repository.upsert)(
                TelemetryRecord.create(
                    "lic-1", hardware_id, timestamp=now, events_processed=events, error_count=1
                )
            )
        async_to_sync(telemetry_repository.upsert)(
            TelemetryRecord.create("lic-other", "hw-3", timestamp=now, events_processed=999)
        )

        totals = async_to_sync(telemetry_repository.totals_since)(
            ["lic-1"], now - timedelta(hours=1)
        )

        assert totals.events_processed == 30
        assert totals.error_count == 2
        assert totals.distinct_hardware == 2
