"""
Integration tests for application handlers against the database.
"""

from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync

from accounts.application.commands.auth_commands import (
    LoginCommand,
    LogoutCommand,
    RefreshTokensCommand,
    RegisterUserCommand,
)
from accounts.application.handlers.auth_handlers import (
    LoginHandler,
    LogoutHandler,
    RefreshTokensHandler,
    RegisterUserHandler,
)
from activations.application.commands.activation_commands import (
    DeactivateActivationCommand,
    DeactivateByHardwareCommand,
    RecordActivationCommand,
)
from activations.application.handlers.activation_handlers import (
    DeactivateActivationHandler,
    DeactivateByHardwareHandler,
    RecordActivationHandler,
)
from core.domain.exceptions import (
    BadRequestError,
    ForbiddenError,
    HardwareMismatchError,
    InvalidCredentialsError,
    LicenseExpiredError,
    LicenseNotFoundError,
    LicenseRevokedError,
    QuotaExceededError,
    UserExistsError,
)
from core.domain.value_objects import LicenseStatus, LicenseTier, UserRole
from licenses.application.commands.license_commands import (
    IssueLicenseCommand,
    RevokeLicenseCommand,
    ValidateLicenseCommand,
)
from licenses.application.handlers.license_handlers import (
    IssueLicenseHandler,
    RevokeLicenseHandler,
    ValidateLicenseHandler,
)
from licenses.domain.license import License
from telemetry.application.commands.telemetry_commands import RecordTelemetryCommand
from telemetry.application.handlers.record_telemetry_handler import RecordTelemetryHandler
from telemetry.application.handlers.usage_handlers import (
    GetActiveInstancesHandler,
    GetDashboardStatsHandler,
    GetUsageHistoryHandler,
)
from telemetry.application.queries.usage_queries import (
    GetActiveInstancesQuery,
    GetDashboardStatsQuery,
    GetUsageHistoryQuery,
)


@pytest.fixture
def expired_license(db_user, license_repository):
    past = datetime.now(timezone.utc) - timedelta(days=30)
    license = License.create(user_id=db_user.id, tier=LicenseTier.PRO, valid_days=1, now=past)
    return async_to_sync(license_repository.save)(license)


@pytest.mark.django_db
@pytest.mark.integration
class TestValidateLicenseHandler:
    """Integration tests for ValidateLicenseHandler."""

    def _validate(self, license_repository, ref, hardware_id=None):
        handler = ValidateLicenseHandler(license_repository)
        return async_to_sync(handler.handle)(
            ValidateLicenseCommand(license_ref=ref, hardware_id=hardware_id)
        )

    def test_binds_hardware_on_first_use(self, license_repository, db_license):
        license = self._validate(license_repository, str(db_license.id), "hw-1")

        assert license.hardware_id == "hw-1"
        stored = async_to_sync(license_repository.find_by_id)(db_license.id)
        assert stored.hardware_id == "hw-1"

    def test_accepts_license_key_reference(self, license_repository, db_license):
        license = self._validate(license_repository, db_license.license_key, "hw-1")

        assert license.id == db_license.id

    def test_same_hardware_validates_again(self, license_repository, db_license):
        self._validate(license_repository, str(db_license.id), "hw-1")

        license = self._validate(license_repository, str(db_license.id), "hw-1")

        assert license.is_bound_to("hw-1")

    def test_other_hardware_is_rejected(self, license_repository, db_license):
        self._validate(license_repository, str(db_license.id), "hw-1")

        with pytest.raises(HardwareMismatchError):
            self._validate(license_repository, str(db_license.id), "hw-2")

    def test_without_hardware_leaves_license_unbound(self, license_repository, db_license):
        license = self._validate(license_repository, str(db_license.id))

        assert not license.is_bound

    def test_bound_license_without_hardware_is_mismatch(self, license_repository, db_license):
        self._validate(license_repository, str(db_license.id), "hw-1")

        with pytest.raises(HardwareMismatchError):
            self._validate(license_repository, str(db_license.id))

    def test_unknown_license(self, license_repository, db):
        with pytest.raises(LicenseNotFoundError):
            self._validate(license_repository, "lic-123", "hw-1")

    def test_revoked_license(self, license_repository, db_license):
        async_to_sync(license_repository.revoke)(db_license.id, datetime.now(timezone.utc))

        with pytest.raises(LicenseRevokedError):
            self._validate(license_repository, str(db_license.id), "hw-1")

    def test_expired_license_is_marked_expired(self, license_repository, expired_license):
        with pytest.raises(LicenseExpiredError):
            self._validate(license_repository, str(expired_license.id), "hw-1")

        stored = async_to_sync(license_repository.find_by_id)(expired_license.id)
        assert stored.status == LicenseStatus.EXPIRED
        assert stored.hardware_id is None


@pytest.mark.django_db
@pytest.mark.integration
class TestIssueAndRevokeLicense:
    """Integration tests for IssueLicenseHandler and RevokeLicenseHandler."""

    def test_issue_uses_tier_catalog(self, license_repository, user_repository, db_user):
        handler = IssueLicenseHandler(license_repository, user_repository)

        dto = async_to_sync(handler.handle)(
            IssueLicenseCommand(user_id=db_user.id, tier="enterprise", valid_days=30)
        )

        assert dto.tier == "enterprise"
        assert dto.max_sources == 0
        assert dto.license_key.startswith("ENT-")
        assert dto.status == "active"

    def test_issue_unknown_tier(self, license_repository, user_repository, db_user):
        handler = IssueLicenseHandler(license_repository, user_repository)

        with pytest.raises(BadRequestError):
            async_to_sync(handler.handle)(IssueLicenseCommand(user_id=db_user.id, tier="gold"))

    def test_revoke_is_idempotent(self, license_repository, db_license):
        handler = RevokeLicenseHandler(license_repository)

        first = async_to_sync(handler.handle)(RevokeLicenseCommand(license_id=db_license.id))
        second = async_to_sync(handler.handle)(RevokeLicenseCommand(license_id=db_license.id))

        assert first.status == "revoked"
        assert second.status == "revoked"
        assert second.revoked_at == first.revoked_at

    def test_revoke_requires_ownership(self, license_repository, db_license, db_other_user):
        handler = RevokeLicenseHandler(license_repository)

        with pytest.raises(ForbiddenError):
            async_to_sync(handler.handle)(
                RevokeLicenseCommand(
                    license_id=db_license.id,
                    requested_by=db_other_user.id,
                    requester_role=UserRole.USER.value,
                )
            )

    def test_admin_may_revoke_any_license(self, license_repository, db_license, db_admin):
        handler = RevokeLicenseHandler(license_repository)

        dto = async_to_sync(handler.handle)(
            RevokeLicenseCommand(
                license_id=db_license.id,
                requested_by=db_admin.id,
                requester_role=UserRole.ADMIN.value,
            )
        )

        assert dto.status == "revoked"


@pytest.mark.django_db
@pytest.mark.integration
class TestActivationHandlers:
    """Integration tests for activation handlers."""

    def _activate(self, license_repository, activation_repository, ref, hardware_id, **extra):
        handler = RecordActivationHandler(license_repository, activation_repository)
        return async_to_sync(handler.handle)(
            RecordActivationCommand(license_ref=ref, hardware_id=hardware_id, **extra)
        )

    def test_first_activation_takes_the_only_slot(
        self, license_repository, activation_repository, db_license
    ):
        result = self._activate(
            license_repository, activation_repository, db_license.license_key, "hw-1"
        )

        assert result.created is True
        assert result.slots_remaining == 0
        assert result.activation.is_active

    def test_second_hardware_exceeds_quota(
        self, license_repository, activation_repository, db_license
    ):
        self._activate(license_repository, activation_repository, str(db_license.id), "hw-1")

        with pytest.raises(QuotaExceededError):
            self._activate(license_repository, activation_repository, str(db_license.id), "hw-2")

    def test_repeat_activation_refreshes(
        self, license_repository, activation_repository, db_license
    ):
        first = self._activate(
            license_repository, activation_repository, str(db_license.id), "hw-1", version="1.0"
        )
        again = self._activate(
            license_repository, activation_repository, str(db_license.id), "hw-1", version="1.1"
        )

        assert again.created is False
        assert again.activation.id == first.activation.id
        assert again.activation.version == "1.1"

    def test_unlimited_license(
        self, license_repository, activation_repository, db_user, make_license
    ):
        license = make_license(db_user, tier=LicenseTier.ENTERPRISE)

        for index in range(5):
            result = self._activate(
                license_repository, activation_repository, str(license.id), f"hw-{index}"
            )

        assert result.created is True
        assert result.slots_remaining is None

    def test_revoked_license_cannot_activate(
        self, license_repository, activation_repository, db_license
    ):
        async_to_sync(license_repository.revoke)(db_license.id, datetime.now(timezone.utc))

        with pytest.raises(LicenseRevokedError):
            self._activate(license_repository, activation_repository, str(db_license.id), "hw-1")

    def test_missing_hardware_id(self, license_repository, activation_repository, db_license):
        with pytest.raises(BadRequestError):
            self._activate(license_repository, activation_repository, str(db_license.id), "  ")

    def test_deactivation_frees_slot(
        self, license_repository, activation_repository, db_license
    ):
        first = self._activate(
            license_repository, activation_repository, str(db_license.id), "hw-1"
        )
        handler = DeactivateActivationHandler(license_repository, activation_repository)

        released = async_to_sync(handler.handle)(
            DeactivateActivationCommand(activation_id=first.activation.id)
        )
        second = self._activate(
            license_repository, activation_repository, str(db_license.id), "hw-2"
        )

        assert released.is_active is False
        assert second.created is True

    def test_deactivate_by_hardware(self, license_repository, activation_repository, db_license):
        self._activate(license_repository, activation_repository, str(db_license.id), "hw-1")
        handler = DeactivateByHardwareHandler(license_repository, activation_repository)
        command = DeactivateByHardwareCommand(license_ref=str(db_license.id), hardware_id="hw-1")

        released = async_to_sync(handler.handle)(command)
        nothing = async_to_sync(handler.handle)(command)

        assert released.hardware_id == "hw-1"
        assert nothing is None

    def test_deactivation_requires_ownership(
        self, license_repository, activation_repository, db_license, db_other_user
    ):
        first = self._activate(
            license_repository, activation_repository, str(db_license.id), "hw-1"
        )
        handler = DeactivateActivationHandler(license_repository, activation_repository)

        with pytest.raises(ForbiddenError):
            async_to_sync(handler.handle)(
                DeactivateActivationCommand(
                    activation_id=first.activation.id,
                    requested_by=db_other_user.id,
                    requester_role=UserRole.USER.value,
                )
            )


@pytest.mark.django_db
@pytest.mark.integration
class TestAuthHandlers:
    """Integration tests for account handlers."""

    def test_register_issues_tokens(self, user_repository, token_service):
        handler = RegisterUserHandler(user_repository, token_service)

        result = async_to_sync(handler.handle)(
            RegisterUserCommand(email="new@example.com", password="long-enough-1", name="New")
        )

        assert result.user.email == "new@example.com"
        assert result.user.role == UserRole.USER.value
        assert result.tokens.access_token
        assert result.tokens.refresh_token

    def test_register_duplicate_email(self, user_repository, token_service, db_user):
        handler = RegisterUserHandler(user_repository, token_service)

        with pytest.raises(UserExistsError):
            async_to_sync(handler.handle)(
                RegisterUserCommand(email="Owner@Example.com", password="long-enough-1", name="X")
            )

    def test_register_short_password(self, user_repository, token_service):
        handler = RegisterUserHandler(user_repository, token_service)

        with pytest.raises(BadRequestError):
            async_to_sync(handler.handle)(
                RegisterUserCommand(email="new@example.com", password="short", name="New")
            )

    def test_login(self, user_repository, token_service, db_user, user_password):
        handler = LoginHandler(user_repository, token_service)

        result = async_to_sync(handler.handle)(
            LoginCommand(email=str(db_user.email), password=user_password)
        )

        assert result.user.id == db_user.id
        assert result.user.last_login_at is not None
        claims = token_service.validate_token(result.tokens.access_token)
        assert claims.user_id() == db_user.id

    def test_login_wrong_password(self, user_repository, token_service, db_user):
        handler = LoginHandler(user_repository, token_service)

        with pytest.raises(InvalidCredentialsError):
            async_to_sync(handler.handle)(
                LoginCommand(email=str(db_user.email), password="wrong-password")
            )

    def test_refresh_token_is_single_use(
        self, user_repository, refresh_token_repository, token_service, db_user, user_password
    ):
        login = async_to_sync(LoginHandler(user_repository, token_service).handle)(
            LoginCommand(email=str(db_user.email), password=user_password)
        )
        handler = RefreshTokensHandler(user_repository, refresh_token_repository, token_service)
        command = RefreshTokensCommand(refresh_token=login.tokens.refresh_token)

        pair = async_to_sync(handler.handle)(command)

        assert pair.refresh_token != login.tokens.refresh_token
        with pytest.raises(InvalidCredentialsError):
            async_to_sync(handler.handle)(command)

    def test_logout_revokes_refresh_token(
        self, user_repository, refresh_token_repository, token_service, db_user, user_password
    ):
        login = async_to_sync(LoginHandler(user_repository, token_service).handle)(
            LoginCommand(email=str(db_user.email), password=user_password)
        )

        async_to_sync(LogoutHandler(refresh_token_repository).handle)(
            LogoutCommand(refresh_token=login.tokens.refresh_token)
        )

        refresh = RefreshTokensHandler(user_repository, refresh_token_repository, token_service)
        with pytest.raises(InvalidCredentialsError):
            async_to_sync(refresh.handle)(
                RefreshTokensCommand(refresh_token=login.tokens.refresh_token)
            )


@pytest.mark.django_db
@pytest.mark.integration
class TestTelemetryHandlers:
    """Integration tests for ingestion and usage aggregation."""

    @pytest.fixture
    def record_handler(self, license_repository, activation_repository, telemetry_repository):
        return RecordTelemetryHandler(
            license_repository, activation_repository, telemetry_repository
        )

    def test_unknown_license_is_still_recorded(self, record_handler, telemetry_repository):
        result = async_to_sync(record_handler.handle)(
            RecordTelemetryCommand(license_id="lic-123", hardware_id="hw-1", events_processed=5)
        )

        assert result.validation.valid is False
        assert result.validation.code == "LICENSE_NOT_FOUND"
        assert result.recorded.events_processed == 5
        rows = async_to_sync(telemetry_repository.find_for_hour)(
            "lic-123", "hw-1", result.recorded.hour_bucket
        )
        assert len(rows) == 1

    def test_valid_license_binds_hardware(self, record_handler, license_repository, db_license):
        result = async_to_sync(record_handler.handle)(
            RecordTelemetryCommand(license_id=str(db_license.id), hardware_id="hw-1")
        )

        assert result.validation.valid is True
        stored = async_to_sync(license_repository.find_by_id)(db_license.id)
        assert stored.hardware_id == "hw-1"

    def test_revoked_license_is_recorded_unvalidated(
        self, record_handler, license_repository, db_license
    ):
        async_to_sync(license_repository.revoke)(db_license.id, datetime.now(timezone.utc))

        result = async_to_sync(record_handler.handle)(
            RecordTelemetryCommand(license_id=str(db_license.id), hardware_id="hw-1")
        )

        assert result.validation.valid is False
        assert result.validation.code == "LICENSE_REVOKED"

    def test_hourly_event_count_is_not_a_throughput_violation(self, record_handler, db_license):
        result = async_to_sync(record_handler.handle)(
            RecordTelemetryCommand(
                license_id=str(db_license.id),
                hardware_id="hw-1",
                events_processed=db_license.max_throughput * 60,
                sources_active=1,
                tables_tracked=5,
            )
        )

        assert result.validation.valid is True
        assert result.validation.quota_violations == []

    def test_reported_sources_over_limit_are_flagged(self, record_handler, db_license):
        result = async_to_sync(record_handler.handle)(
            RecordTelemetryCommand(
                license_id=str(db_license.id), hardware_id="hw-1", sources_active=3
            )
        )

        assert [v.resource for v in result.validation.quota_violations] == ["sources"]

    def test_missing_hardware_id(self, record_handler, db):
        with pytest.raises(BadRequestError):
            async_to_sync(record_handler.handle)(
                RecordTelemetryCommand(license_id="lic-123", hardware_id="")
            )

    def test_dashboard_stats(
        self, record_handler, license_repository, telemetry_repository, db_user, db_license
    ):
        for hardware_id, events, errors in (
            ("hw-1", 5000, 5),
            ("hw-2", 3000, 3),
            ("hw-3", 2000, 2),
        ):
            async_to_sync(record_handler.handle)(
                RecordTelemetryCommand(
                    license_id=str(db_license.id),
                    hardware_id=hardware_id,
                    events_processed=events,
                    error_count=errors,
                )
            )
        handler = GetDashboardStatsHandler(license_repository, telemetry_repository)

        stats = async_to_sync(handler.handle)(GetDashboardStatsQuery(user_id=db_user.id))

        assert stats.total_licenses == 1
        assert stats.active_licenses == 1
        assert stats.active_instances == 3
        assert stats.total_events_processed == 10000
        assert stats.total_errors == 10

    def test_dashboard_counts_reports_filed_under_license_key(
        self, record_handler, license_repository, telemetry_repository, db_user, db_license
    ):
        async_to_sync(record_handler.handle)(
            RecordTelemetryCommand(
                license_id=db_license.license_key, hardware_id="hw-1", events_processed=42
            )
        )
        handler = GetDashboardStatsHandler(license_repository, telemetry_repository)

        stats = async_to_sync(handler.handle)(GetDashboardStatsQuery(user_id=db_user.id))

        assert stats.total_events_processed == 42

    def test_dashboard_counts_reports_with_uppercase_license_id(
        self, record_handler, license_repository, telemetry_repository, db_user, db_license
    ):
        result = async_to_sync(record_handler.handle)(
            RecordTelemetryCommand(
                license_id=str(db_license.id).upper(), hardware_id="hw-1", events_processed=500
            )
        )
        handler = GetDashboardStatsHandler(license_repository, telemetry_repository)

        stats = async_to_sync(handler.handle)(GetDashboardStatsQuery(user_id=db_user.id))

        assert result.validation.valid is True
        assert result.recorded.license_id == str(db_license.id)
        assert stats.total_events_processed == 500

    def test_dashboard_without_licenses(self, license_repository, telemetry_repository, db_user):
        handler = GetDashboardStatsHandler(license_repository, telemetry_repository)

        stats = async_to_sync(handler.handle)(GetDashboardStatsQuery(user_id=db_user.id))

        assert stats.total_licenses == 0
        assert stats.total_events_processed == 0

    @pytest.mark.parametrize("days", [None, "abc", "0", "-3"])
    def test_usage_history_falls_back_to_a_week(
        self, record_handler, license_repository, telemetry_repository, db_user, db_license, days
    ):
        now = datetime.now(timezone.utc)
        for age in (timedelta(days=2), timedelta(days=10)):
            async_to_sync(record_handler.handle)(
                RecordTelemetryCommand(
                    license_id=str(db_license.id),
                    hardware_id="hw-1",
                    timestamp=int((now - age).timestamp()),
                    events_processed=1,
                )
            )
        handler = GetUsageHistoryHandler(license_repository, telemetry_repository)

        points = async_to_sync(handler.handle)(GetUsageHistoryQuery(user_id=db_user.id, days=days))

        assert len(points) == 1

    def test_usage_history_honours_days(
        self, record_handler, license_repository, telemetry_repository, db_user, db_license
    ):
        now = datetime.now(timezone.utc)
        for age in (timedelta(days=2), timedelta(days=10)):
            async_to_sync(record_handler.handle)(
                RecordTelemetryCommand(
                    license_id=str(db_license.id),
                    hardware_id="hw-1",
                    timestamp=int((now - age).timestamp()),
                )
            )
        handler = GetUsageHistoryHandler(license_repository, telemetry_repository)

        points = async_to_sync(handler.handle)(GetUsageHistoryQuery(user_id=db_user.id, days="30"))

        assert len(points) == 2
        assert points[0].timestamp < points[1].timestamp

    def test_active_instances_liveness(
        self,
        license_repository,
        activation_repository,
        telemetry_repository,
        db_user,
        db_license,
    ):
        activate = RecordActivationHandler(license_repository, activation_repository)
        result = async_to_sync(activate.handle)(
            RecordActivationCommand(
                license_ref=str(db_license.id), hardware_id="hw-1", hostname="node-1"
            )
        )
        seen = result.activation.last_seen_at
        handler = GetActiveInstancesHandler(
            license_repository, activation_repository, telemetry_repository
        )
        query = GetActiveInstancesQuery(user_id=db_user.id)

        online = async_to_sync(handler.handle)(query, now=seen + timedelta(minutes=4))
        offline = async_to_sync(handler.handle)(query, now=seen + timedelta(minutes=6))

        assert [instance.status for instance in online] == ["online"]
        assert [instance.status for instance in offline] == ["offline"]
        assert online[0].hostname == "node-1"
        assert online[0].license_tier == "community"

    def test_deactivated_instances_are_hidden(
        self, license_repository, activation_repository, telemetry_repository, db_user, db_license
    ):
        activate = RecordActivationHandler(license_repository, activation_repository)
        async_to_sync(activate.handle)(
            RecordActivationCommand(license_ref=str(db_license.id), hardware_id="hw-1")
        )
        deactivate = DeactivateByHardwareHandler(license_repository, activation_repository)
        async_to_sync(deactivate.handle)(
            DeactivateByHardwareCommand(license_ref=str(db_license.id), hardware_id="hw-1")
        )
        handler = GetActiveInstancesHandler(
            license_repository, activation_repository, telemetry_repository
        )

        instances = async_to_sync(handler.handle)(GetActiveInstancesQuery(user_id=db_user.id))

        assert instances == []
