# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Vacation request lifecycle: submit, approve, reject, cancel and reporting."""

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, date, datetime

from sqlalchemy.orm import Session

from src.database import storage_errors, transaction
from src.exceptions import (
    ErrorCode,
    VacationServiceError,
    insufficient_balance_error,
    validation_error,
)
from src.models import VacationRequest, VacationStatus
from src.models.vacation_request import REASON_MAX_LENGTH
from src.repositories import user_repository, vacation_repository
from src.schemas.vacation import MonthlyStats
from src.services import settings_service
from src.services.business_days import compute_business_days, parse_request_date

logger = logging.getLogger(__name__)

# Called with (user_id, start, end) when a submission overlaps an existing
# pending or approved request. Raise to block the submission.
OverlapHook = Callable[[uuid.UUID, date, date], None]


def allow_overlapping(user_id: uuid.UUID, start: date, end: date) -> None:
    """Default overlap hook: log and accept, leaving the call to the reviewer."""
    logger.warning(
        f"User {user_id} submitted {start}..{end} overlapping an existing request"
    )


def reject_overlapping(user_id: uuid.UUID, start: date, end: date) -> None:
    """Overlap hook that blocks overlapping submissions."""
    raise VacationServiceError(
        ErrorCode.OVERLAPPING_REQUEST,
        "Request overlaps with an existing vacation",
        {"start_date": start.isoformat(), "end_date": end.isoformat()},
    )


def utc_today() -> date:
    """Today's date in UTC."""
    return datetime.now(UTC).date()


def _clean_text(value: str | None, field: str) -> str | None:
    """Trim free text; empty becomes None."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if len(value) > REASON_MAX_LENGTH:
        raise validation_error(
            f"{field} must be at most {REASON_MAX_LENGTH} characters"
        )
    return value


class VacationService:
    """Service for the vacation request lifecycle.

    Status flow is PENDING → APPROVED | REJECTED. Only pending requests can
    be reviewed or cancelled, and cancelling deletes the request.
    """

    def __init__(
        self,
        db: Session,
        on_overlap: OverlapHook = allow_overlapping,
        today: Callable[[], date] = utc_today,
    ) -> None:
        """Initialize the service.

        Args:
            db: Database session.
            on_overlap: Hook invoked when a submission overlaps an existing
                pending or approved request.
            today: Clock used for the no-retroactive-requests check.
        """
        self.db = db
        self.on_overlap = on_overlap
        self.today = today

    # --- Commands ---

    def submit(
        self,
        user_id: uuid.UUID,
        raw_start: str,
        raw_end: str,
        reason: str | None = None,
    ) -> VacationRequest:
        """Submit a new vacation request.

        The balance is only checked here, not reserved. It is deducted when
        the request is approved.

        Args:
            user_id: The requesting user.
            raw_start: Start date as DD/MM/YYYY.
            raw_end: End date as DD/MM/YYYY.
            reason: Optional free-text reason.

        Returns:
            The persisted pending request.

        Raises:
            VacationServiceError: VALIDATION_ERROR, INVALID_DATE_RANGE,
                DATE_IN_PAST, USER_NOT_FOUND, INSUFFICIENT_BALANCE, or
                whatever the overlap hook raises.
        """
        start = parse_request_date(raw_start)
        end = parse_request_date(raw_end)

        if end < start:
            raise VacationServiceError(
                ErrorCode.INVALID_DATE_RANGE,
                "End date must be on or after start date",
            )
        if start < self.today():
            raise VacationServiceError(
                ErrorCode.DATE_IN_PAST, "Start date cannot be in the past"
            )

        reason = _clean_text(reason, "reason")

        with storage_errors(self.db):
            policy = settings_service.get_weekend_policy(self.db)
        # May be zero when the whole range falls on excluded days; still accepted
        total_days = compute_business_days(start, end, policy)

        with transaction(self.db):
            user = user_repository.get_by_id(self.db, user_id)
            if user is None:
                raise VacationServiceError(
                    ErrorCode.USER_NOT_FOUND, f"User {user_id} not found"
                )
            if total_days > user.vacation_balance:
                raise insufficient_balance_error(total_days, user.vacation_balance)

            if vacation_repository.has_overlap(self.db, user_id, start, end):
                self.on_overlap(user_id, start, end)

            request = vacation_repository.create(
                self.db,
                VacationRequest(
                    user_id=user_id,
                    start_date=start,
                    end_date=end,
                    total_days=total_days,
                    status=VacationStatus.PENDING,
                    reason=reason,
                ),
            )

        self.db.refresh(request)
        logger.info(
            f"Vacation request {request.id} submitted by {user_id}: "
            f"{start}..{end} ({total_days} days)"
        )
        return request

    def approve(self, request_id: uuid.UUID, reviewer_id: uuid.UUID) -> VacationRequest:
        """Approve a pending request and deduct its days from the owner's balance.

        The status change and the deduction commit together or not at all.
        The balance is not rechecked here; it is floored at zero instead.

        Raises:
            VacationServiceError: REQUEST_NOT_FOUND, REQUEST_ALREADY_PROCESSED.
        """
        with transaction(self.db):
            request = self._get_pending(request_id, VacationStatus.APPROVED)
            # Lock the owner row so concurrent approvals serialize on it
            user_repository.get_by_id(self.db, request.user_id, for_update=True)

            if not vacation_repository.update_status(
                self.db, request_id, VacationStatus.APPROVED, reviewer_id
            ):
                raise self._already_processed(request_id)

            new_balance = user_repository.deduct_balance(
                self.db, request.user_id, request.total_days
            )

        self.db.refresh(request)
        logger.info(
            f"Vacation request {request_id} approved by {reviewer_id}; "
            f"balance of {request.user_id} is now {new_balance}"
        )
        return request

    def reject(
        self,
        request_id: uuid.UUID,
        reviewer_id: uuid.UUID,
        reason: str | None = None,
    ) -> VacationRequest:
        """Reject a pending request. No balance effect.

        Raises:
            VacationServiceError: REQUEST_NOT_FOUND, REQUEST_ALREADY_PROCESSED,
                VALIDATION_ERROR for an over-long reason.
        """
        with transaction(self.db):
            self._get_pending(request_id, VacationStatus.REJECTED)
            reason = _clean_text(reason, "rejection reason")
            if not vacation_repository.update_status(
                self.db,
                request_id,
                VacationStatus.REJECTED,
                reviewer_id,
                rejection_reason=reason,
            ):
                raise self._already_processed(request_id)

        request = self.get(request_id)
        logger.info(f"Vacation request {request_id} rejected by {reviewer_id}")
        return request

    def cancel(self, request_id: uuid.UUID, caller_id: uuid.UUID) -> None:
        """Cancel (delete) one of the caller's own pending requests.

        Raises:
            VacationServiceError: REQUEST_NOT_FOUND, FORBIDDEN,
                CANNOT_CANCEL_APPROVED, CANNOT_CANCEL_REJECTED.
        """
        with transaction(self.db):
            request = vacation_repository.get_by_id(self.db, request_id)
            if request is None:
                raise self._not_found(request_id)
            if request.user_id != caller_id:
                raise VacationServiceError(
                    ErrorCode.FORBIDDEN, "You can only cancel your own requests"
                )
            if request.status == VacationStatus.APPROVED:
                raise VacationServiceError(
                    ErrorCode.CANNOT_CANCEL_APPROVED, "Cannot cancel approved request"
                )
            if request.status == VacationStatus.REJECTED:
                raise VacationServiceError(
                    ErrorCode.CANNOT_CANCEL_REJECTED, "Cannot cancel rejected request"
                )
            vacation_repository.delete(self.db, request)

        logger.info(f"Vacation request {request_id} cancelled by {caller_id}")

    # --- Queries ---

    def get(self, request_id: uuid.UUID) -> VacationRequest:
        """Get a request by ID."""
        with storage_errors(self.db):
            request = vacation_repository.get_by_id(self.db, request_id)
        if request is None:
            raise self._not_found(request_id)
        return request

    def list_for_user(
        self,
        user_id: uuid.UUID,
        status: VacationStatus | None = None,
        year: int | None = None,
    ) -> list[VacationRequest]:
        """List a user's requests, newest first."""
        with storage_errors(self.db):
            return vacation_repository.list_by_user(self.db, user_id, status, year)

    def list_pending(self) -> list[VacationRequest]:
        """List the review queue, oldest first."""
        with storage_errors(self.db):
            return vacation_repository.list_pending(self.db)

    def list_team(self, month: int, year: int) -> list[VacationRequest]:
        """List approved vacations intersecting a month."""
        _validate_month(month, year)
        with storage_errors(self.db):
            return vacation_repository.list_team(self.db, month, year)

    def monthly_stats(self, year: int, month: int) -> MonthlyStats:
        """Aggregate requests by creation month."""
        _validate_month(month, year)
        with storage_errors(self.db):
            return vacation_repository.monthly_stats(self.db, year, month)

    # --- Helpers ---

    def _get_pending(
        self, request_id: uuid.UUID, target: VacationStatus
    ) -> VacationRequest:
        request = vacation_repository.get_by_id(self.db, request_id)
        if request is None:
            raise self._not_found(request_id)
        if not request.status.can_transition_to(target):
            raise self._already_processed(request_id)
        return request

    @staticmethod
    def _not_found(request_id: uuid.UUID) -> VacationServiceError:
        return VacationServiceError(
            ErrorCode.REQUEST_NOT_FOUND, f"Vacation request {request_id} not found"
        )

    @staticmethod
    def _already_processed(request_id: uuid.UUID) -> VacationServiceError:
        return VacationServiceError(
            ErrorCode.REQUEST_ALREADY_PROCESSED,
            f"Vacation request {request_id} has already been processed",
        )


def _validate_month(month: int, year: int) -> None:
    if month < 1 or month > 12:
        raise validation_error("month must be between 1 and 12")
    if year < 2000 or year > 2100:
        raise validation_error("invalid year")
