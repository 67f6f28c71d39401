# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for the vacation request lifecycle service."""

import threading
import uuid
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from src.exceptions import ErrorCode, StorageError, VacationServiceError
from src.models import User, UserRole, VacationRequest, VacationStatus
from src.repositories import user_repository
from src.schemas.settings import SettingsUpdate, WeekendPolicyUpdate
from src.services import settings_service
from src.services.vacation_service import VacationService, reject_overlapping

TODAY = date(2024, 1, 1)


@pytest.fixture
def service(db_session):
    return VacationService(db_session, today=lambda: TODAY)


def balance_of(db_session, user_id) -> int:
    return user_repository.get_balance(db_session, user_id)


class TestSubmit:
    """Tests for VacationService.submit."""

    def test_submit_weekdays(self, service, test_user):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024", "Ski trip")

        assert request.status == VacationStatus.PENDING
        assert request.total_days == 5
        assert request.start_date == date(2024, 1, 15)
        assert request.end_date == date(2024, 1, 19)
        assert request.reason == "Ski trip"
        assert request.reviewed_by is None

    def test_submit_does_not_touch_balance(self, db_session, service, test_user):
        service.submit(test_user.id, "15/01/2024", "19/01/2024")
        assert balance_of(db_session, test_user.id) == 25

    def test_weekend_only_request_has_zero_days(self, service, test_user):
        request = service.submit(test_user.id, "20/01/2024", "21/01/2024")

        assert request.total_days == 0
        assert request.status == VacationStatus.PENDING

    def test_uses_current_weekend_policy(self, db_session, service, test_user):
        settings_service.update_settings(
            db_session,
            SettingsUpdate(weekend_policy=WeekendPolicyUpdate(exclude_weekends=False)),
        )
        request = service.submit(test_user.id, "15/01/2024", "21/01/2024")
        assert request.total_days == 7

    def test_end_before_start(self, service, test_user):
        with pytest.raises(VacationServiceError) as exc_info:
            service.submit(test_user.id, "19/01/2024", "15/01/2024")
        assert exc_info.value.code == ErrorCode.INVALID_DATE_RANGE

    def test_malformed_date(self, service, test_user):
        with pytest.raises(VacationServiceError) as exc_info:
            service.submit(test_user.id, "2024-01-15", "19/01/2024")
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR

    def test_start_in_past(self, test_user, db_session):
        service = VacationService(db_session, today=lambda: date(2024, 1, 16))
        with pytest.raises(VacationServiceError) as exc_info:
            service.submit(test_user.id, "15/01/2024", "19/01/2024")
        assert exc_info.value.code == ErrorCode.DATE_IN_PAST

    def test_start_today_allowed(self, test_user, db_session):
        service = VacationService(db_session, today=lambda: date(2024, 1, 15))
        request = service.submit(test_user.id, "15/01/2024", "15/01/2024")
        assert request.total_days == 1

    def test_insufficient_balance(self, make_user, service, db_session):
        user = make_user(balance=3)
        with pytest.raises(VacationServiceError) as exc_info:
            service.submit(user.id, "15/01/2024", "19/01/2024")

        error = exc_info.value
        assert error.code == ErrorCode.INSUFFICIENT_BALANCE
        assert error.details == {"requested": 5, "available": 3}
        assert db_session.query(VacationRequest).count() == 0

    def test_request_equal_to_balance_allowed(self, make_user, service):
        user = make_user(balance=5)
        request = service.submit(user.id, "15/01/2024", "19/01/2024")
        assert request.total_days == 5

    def test_unknown_user(self, service, db_session):
        with pytest.raises(VacationServiceError) as exc_info:
            service.submit(uuid.uuid4(), "15/01/2024", "19/01/2024")
        assert exc_info.value.code == ErrorCode.USER_NOT_FOUND

    def test_blank_reason_stored_as_none(self, service, test_user):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024", "   ")
        assert request.reason is None

    def test_reason_too_long(self, service, test_user):
        with pytest.raises(VacationServiceError) as exc_info:
            service.submit(test_user.id, "15/01/2024", "19/01/2024", "x" * 501)
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR

    def test_overlap_allowed_by_default(self, service, test_user):
        service.submit(test_user.id, "15/01/2024", "19/01/2024")
        second = service.submit(test_user.id, "19/01/2024", "23/01/2024")
        assert second.status == VacationStatus.PENDING

    def test_overlap_rejected_with_blocking_hook(self, db_session, test_user):
        service = VacationService(
            db_session, on_overlap=reject_overlapping, today=lambda: TODAY
        )
        service.submit(test_user.id, "15/01/2024", "19/01/2024")

        with pytest.raises(VacationServiceError) as exc_info:
            service.submit(test_user.id, "19/01/2024", "23/01/2024")
        assert exc_info.value.code == ErrorCode.OVERLAPPING_REQUEST
        assert db_session.query(VacationRequest).count() == 1

    def test_overlap_hook_receives_submission(self, db_session, test_user):
        calls = []
        service = VacationService(
            db_session,
            on_overlap=lambda *args: calls.append(args),
            today=lambda: TODAY,
        )
        service.submit(test_user.id, "15/01/2024", "19/01/2024")
        service.submit(test_user.id, "17/01/2024", "18/01/2024")

        assert calls == [(test_user.id, date(2024, 1, 17), date(2024, 1, 18))]

    def test_rejected_request_does_not_overlap(
        self, db_session, test_user, admin_user
    ):
        service = VacationService(
            db_session, on_overlap=reject_overlapping, today=lambda: TODAY
        )
        first = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        service.reject(first.id, admin_user.id)

        second = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        assert second.status == VacationStatus.PENDING


class TestApprove:
    """Tests for VacationService.approve."""

    def test_approve_deducts_balance(self, db_session, service, test_user, admin_user):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")

        approved = service.approve(request.id, admin_user.id)

        assert approved.status == VacationStatus.APPROVED
        assert approved.reviewed_by == admin_user.id
        assert approved.reviewed_at is not None
        assert balance_of(db_session, test_user.id) == 20

    def test_approve_twice(self, db_session, service, test_user, admin_user):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        service.approve(request.id, admin_user.id)

        with pytest.raises(VacationServiceError) as exc_info:
            service.approve(request.id, admin_user.id)

        assert exc_info.value.code == ErrorCode.REQUEST_ALREADY_PROCESSED
        assert balance_of(db_session, test_user.id) == 20

    def test_approve_rejected_request(self, db_session, service, test_user, admin_user):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        service.reject(request.id, admin_user.id)

        with pytest.raises(VacationServiceError) as exc_info:
            service.approve(request.id, admin_user.id)

        assert exc_info.value.code == ErrorCode.REQUEST_ALREADY_PROCESSED
        assert balance_of(db_session, test_user.id) == 25

    def test_approve_unknown_request(self, service, admin_user):
        with pytest.raises(VacationServiceError) as exc_info:
            service.approve(uuid.uuid4(), admin_user.id)
        assert exc_info.value.code == ErrorCode.REQUEST_NOT_FOUND

    def test_approve_floors_balance_at_zero(
        self, db_session, service, test_user, admin_user
    ):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        user_repository.set_balance(db_session, test_user.id, 2)
        db_session.commit()

        approved = service.approve(request.id, admin_user.id)

        assert approved.status == VacationStatus.APPROVED
        assert balance_of(db_session, test_user.id) == 0

    def test_zero_day_request_leaves_balance(
        self, db_session, service, test_user, admin_user
    ):
        request = service.submit(test_user.id, "20/01/2024", "21/01/2024")
        service.approve(request.id, admin_user.id)
        assert balance_of(db_session, test_user.id) == 25

    def test_storage_failure_rolls_back_status(
        self, db_session, service, test_user, admin_user, monkeypatch
    ):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        request_id = request.id

        def fail(*args, **kwargs):
            raise OperationalError("UPDATE users", {}, Exception("disk I/O error"))

        monkeypatch.setattr(user_repository, "deduct_balance", fail)

        with pytest.raises(StorageError) as exc_info:
            service.approve(request_id, admin_user.id)

        assert exc_info.value.code == ErrorCode.INTERNAL_ERROR
        assert service.get(request_id).status == VacationStatus.PENDING
        assert balance_of(db_session, test_user.id) == 25

    def test_concurrent_approvals_do_not_lose_updates(
        self, db_session, session_factory, service, test_user, admin_user
    ):
        first = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        second = service.submit(test_user.id, "22/01/2024", "24/01/2024")
        request_ids = [first.id, second.id]
        user_id = test_user.id
        admin_id = admin_user.id
        # Release the fixture session's lock before the workers start
        db_session.commit()

        errors = []
        barrier = threading.Barrier(len(request_ids))

        def approve(request_id):
            session = session_factory()
            try:
                barrier.wait()
                VacationService(session).approve(request_id, admin_id)
            except Exception as e:  # noqa: BLE001
                errors.append(e)
            finally:
                session.close()

        threads = [threading.Thread(target=approve, args=(rid,)) for rid in request_ids]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert balance_of(db_session, user_id) == 25 - 5 - 3

    def test_concurrent_double_approval_succeeds_once(
        self, db_session, session_factory, service, test_user, admin_user
    ):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        request_id = request.id
        user_id = test_user.id
        admin_id = admin_user.id
        db_session.commit()

        outcomes = []
        barrier = threading.Barrier(2)

        def approve():
            session = session_factory()
            try:
                barrier.wait()
                VacationService(session).approve(request_id, admin_id)
                outcomes.append("approved")
            except VacationServiceError as e:
                outcomes.append(e.code)
            finally:
                session.close()

        threads = [threading.Thread(target=approve) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert outcomes.count("approved") == 1
        assert ErrorCode.REQUEST_ALREADY_PROCESSED in outcomes
        assert balance_of(db_session, user_id) == 20

    def test_open_read_does_not_block_approval(
        self, db_session, session_factory, service, test_user, admin_user
    ):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        request_id = request.id
        user_id = test_user.id
        admin_id = admin_user.id
        db_session.commit()

        reader = session_factory()
        errors = []

        def approve():
            session = session_factory()
            try:
                VacationService(session).approve(request_id, admin_id)
            except Exception as e:  # noqa: BLE001
                errors.append(e)
            finally:
                session.close()

        try:
            # Reader keeps its transaction open while the approval runs
            assert [r.id for r in VacationService(reader).list_pending()] == [
                request_id
            ]
            thread = threading.Thread(target=approve)
            thread.start()
            thread.join(timeout=10)

            assert not thread.is_alive()
            assert errors == []
        finally:
            reader.close()

        assert service.get(request_id).status == VacationStatus.APPROVED
        assert balance_of(db_session, user_id) == 20


class TestReject:
    """Tests for VacationService.reject."""

    def test_reject_keeps_balance(self, db_session, service, test_user, admin_user):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")

        rejected = service.reject(request.id, admin_user.id, "Team offsite that week")

        assert rejected.status == VacationStatus.REJECTED
        assert rejected.rejection_reason == "Team offsite that week"
        assert rejected.reviewed_by == admin_user.id
        assert balance_of(db_session, test_user.id) == 25

    def test_reject_without_reason(self, service, test_user, admin_user):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        rejected = service.reject(request.id, admin_user.id)
        assert rejected.rejection_reason is None

    def test_reject_approved_request(self, db_session, service, test_user, admin_user):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        service.approve(request.id, admin_user.id)

        with pytest.raises(VacationServiceError) as exc_info:
            service.reject(request.id, admin_user.id)

        assert exc_info.value.code == ErrorCode.REQUEST_ALREADY_PROCESSED
        assert service.get(request.id).status == VacationStatus.APPROVED
        assert balance_of(db_session, test_user.id) == 20

    def test_reject_unknown_request_with_long_reason(self, service, admin_user):
        with pytest.raises(VacationServiceError) as exc_info:
            service.reject(uuid.uuid4(), admin_user.id, "x" * 600)
        assert exc_info.value.code == ErrorCode.REQUEST_NOT_FOUND

    def test_reject_reason_too_long(self, service, test_user, admin_user):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")

        with pytest.raises(VacationServiceError) as exc_info:
            service.reject(request.id, admin_user.id, "x" * 501)

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
        assert service.get(request.id).status == VacationStatus.PENDING

    def test_reject_reason_trimmed_before_length_check(
        self, service, test_user, admin_user
    ):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        reason = "y" * 495 + " " * 10

        rejected = service.reject(request.id, admin_user.id, reason)

        assert rejected.rejection_reason == "y" * 495


class TestCancel:
    """Tests for VacationService.cancel."""

    def test_cancel_pending_deletes(self, db_session, service, test_user):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")

        service.cancel(request.id, test_user.id)

        assert db_session.query(VacationRequest).count() == 0
        assert balance_of(db_session, test_user.id) == 25

    def test_cancel_other_users_request(self, make_user, service, test_user):
        other = make_user(name="Other", email="other@example.com")
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")

        with pytest.raises(VacationServiceError) as exc_info:
            service.cancel(request.id, other.id)

        assert exc_info.value.code == ErrorCode.FORBIDDEN
        assert service.get(request.id).status == VacationStatus.PENDING

    def test_cancel_approved(self, db_session, service, test_user, admin_user):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        service.approve(request.id, admin_user.id)

        with pytest.raises(VacationServiceError) as exc_info:
            service.cancel(request.id, test_user.id)

        assert exc_info.value.code == ErrorCode.CANNOT_CANCEL_APPROVED
        assert service.get(request.id).status == VacationStatus.APPROVED
        assert balance_of(db_session, test_user.id) == 20

    def test_cancel_rejected(self, service, test_user, admin_user):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        service.reject(request.id, admin_user.id, "No")

        with pytest.raises(VacationServiceError) as exc_info:
            service.cancel(request.id, test_user.id)

        assert exc_info.value.code == ErrorCode.CANNOT_CANCEL_REJECTED
        stored = service.get(request.id)
        assert stored.status == VacationStatus.REJECTED
        assert stored.rejection_reason == "No"

    def test_cancel_missing(self, service, test_user):
        with pytest.raises(VacationServiceError) as exc_info:
            service.cancel(uuid.uuid4(), test_user.id)
        assert exc_info.value.code == ErrorCode.REQUEST_NOT_FOUND


class TestQueries:
    """Tests for the read operations."""

    def test_get_includes_user_name(self, service, test_user):
        request = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        assert service.get(request.id).user_name == "Test User"

    def test_list_for_user_filters(self, make_user, service, test_user, admin_user):
        other = make_user(name="Other", email="other@example.com")
        first = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        service.submit(test_user.id, "05/02/2024", "06/02/2024")
        service.submit(test_user.id, "07/01/2025", "08/01/2025")
        service.submit(other.id, "15/01/2024", "19/01/2024")
        service.approve(first.id, admin_user.id)

        assert len(service.list_for_user(test_user.id)) == 3
        approved = service.list_for_user(test_user.id, VacationStatus.APPROVED)
        assert [r.id for r in approved] == [first.id]
        assert len(service.list_for_user(test_user.id, year=2024)) == 2
        assert len(service.list_for_user(test_user.id, year=2025)) == 1
        assert (
            len(service.list_for_user(test_user.id, VacationStatus.PENDING, 2024)) == 1
        )

    def test_list_pending_excludes_reviewed(self, service, test_user, admin_user):
        first = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        second = service.submit(test_user.id, "05/02/2024", "06/02/2024")
        service.approve(first.id, admin_user.id)

        assert [r.id for r in service.list_pending()] == [second.id]

    def test_list_team_only_approved(self, service, test_user, admin_user):
        first = service.submit(test_user.id, "15/01/2024", "19/01/2024")
        service.submit(test_user.id, "22/01/2024", "23/01/2024")
        service.approve(first.id, admin_user.id)

        team = service.list_team(1, 2024)
        assert [r.id for r in team] == [first.id]
        assert team[0].user_name == "Test User"

    @pytest.mark.parametrize("month,year", [(0, 2024), (13, 2024), (1, 1999), (1, 2101)])
    def test_list_team_validates_month(self, service, month, year):
        with pytest.raises(VacationServiceError) as exc_info:
            service.list_team(month, year)
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR

    def test_monthly_stats_validates_month(self, service):
        with pytest.raises(VacationServiceError) as exc_info:
            service.monthly_stats(2024, 13)
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR


class TestEndToEnd:
    """Full lifecycle scenarios."""

    def test_submit_approve_and_double_approve(self, db_session, make_user, service):
        user = make_user(balance=25)
        admin = make_user(name="Boss", email="boss@example.com", role=UserRole.ADMIN)

        request = service.submit(user.id, "15/01/2024", "19/01/2024")
        assert request.total_days == 5
        assert request.status == VacationStatus.PENDING

        approved = service.approve(request.id, admin.id)
        assert approved.status == VacationStatus.APPROVED
        assert balance_of(db_session, user.id) == 20

        with pytest.raises(VacationServiceError) as exc_info:
            service.approve(request.id, admin.id)
        assert exc_info.value.code == ErrorCode.REQUEST_ALREADY_PROCESSED
        assert balance_of(db_session, user.id) == 20

        stored = db_session.get(User, user.id)
        assert stored.vacation_balance == 20

    def test_weekend_request_is_created_pending(self, service, test_user):
        request = service.submit(test_user.id, "20/01/2024", "21/01/2024")
        assert request.total_days == 0
        assert service.get(request.id).status == VacationStatus.PENDING
