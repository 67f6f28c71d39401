# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Vacation request persistence and queries.

Functions here flush but never commit; callers own the transaction.
"""

import calendar
import uuid
from datetime import date, datetime

from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload

from src.models import VacationRequest, VacationStatus
from src.models.base import utcnow
from src.schemas.vacation import MonthlyStats

# Statuses that still hold (or may hold) days; rejected requests never block
ACTIVE_STATUSES = (VacationStatus.PENDING, VacationStatus.APPROVED)


def create(db: Session, request: VacationRequest) -> VacationRequest:
    """Add a new request and flush to assign defaults."""
    db.add(request)
    db.flush()
    return request


def get_by_id(db: Session, request_id: uuid.UUID) -> VacationRequest | None:
    """Get a request by ID with its owner loaded.

    Always reloads from the store, since status changes are written with
    bulk UPDATE statements that bypass the identity map.
    """
    return (
        db.query(VacationRequest)
        .options(joinedload(VacationRequest.user))
        .populate_existing()
        .filter(VacationRequest.id == request_id)
        .first()
    )


def list_by_user(
    db: Session,
    user_id: uuid.UUID,
    status: VacationStatus | None = None,
    year: int | None = None,
) -> list[VacationRequest]:
    """Get a user's requests, newest first.

    The year filter applies to the vacation start date.
    """
    query = (
        db.query(VacationRequest)
        .options(joinedload(VacationRequest.user))
        .filter(VacationRequest.user_id == user_id)
    )
    if status:
        query = query.filter(VacationRequest.status == status)
    if year:
        query = query.filter(
            VacationRequest.start_date >= date(year, 1, 1),
            VacationRequest.start_date <= date(year, 12, 31),
        )
    return query.order_by(VacationRequest.created_at.desc()).all()


def list_pending(db: Session) -> list[VacationRequest]:
    """Get all pending requests, oldest first."""
    return (
        db.query(VacationRequest)
        .options(joinedload(VacationRequest.user))
        .filter(VacationRequest.status == VacationStatus.PENDING)
        .order_by(VacationRequest.created_at.asc())
        .all()
    )


def list_team(db: Session, month: int, year: int) -> list[VacationRequest]:
    """Get approved requests that intersect the given month."""
    month_start = date(year, month, 1)
    month_end = date(year, month, calendar.monthrange(year, month)[1])
    return (
        db.query(VacationRequest)
        .options(joinedload(VacationRequest.user))
        .filter(
            VacationRequest.status == VacationStatus.APPROVED,
            VacationRequest.start_date <= month_end,
            VacationRequest.end_date >= month_start,
        )
        .order_by(VacationRequest.start_date.asc())
        .all()
    )


def has_overlap(db: Session, user_id: uuid.UUID, start: date, end: date) -> bool:
    """Check for a pending or approved request sharing a day with [start, end].

    Both ranges are closed, so touching endpoints count as overlapping.
    """
    count = (
        db.query(func.count(VacationRequest.id))
        .filter(
            VacationRequest.user_id == user_id,
            VacationRequest.status.in_(ACTIVE_STATUSES),
            VacationRequest.start_date <= end,
            VacationRequest.end_date >= start,
        )
        .scalar()
    )
    return bool(count)


def update_status(
    db: Session,
    request_id: uuid.UUID,
    status: VacationStatus,
    reviewed_by: uuid.UUID,
    rejection_reason: str | None = None,
) -> bool:
    """Move a pending request to a terminal status.

    The update is conditional on the row still being pending, so two
    reviewers racing on the same request cannot both succeed.

    Returns:
        True if the row was transitioned, False if it was missing or
        no longer pending.
    """
    now = utcnow()
    count = (
        db.query(VacationRequest)
        .filter(
            VacationRequest.id == request_id,
            VacationRequest.status == VacationStatus.PENDING,
        )
        .update(
            {
                VacationRequest.status: status,
                VacationRequest.reviewed_by: reviewed_by,
                VacationRequest.reviewed_at: now,
                VacationRequest.rejection_reason: rejection_reason,
                VacationRequest.updated_at: now,
            },
            synchronize_session=False,
        )
    )
    return count == 1


def delete(db: Session, request: VacationRequest) -> None:
    """Delete a request."""
    db.delete(request)
    db.flush()


def monthly_stats(db: Session, year: int, month: int) -> MonthlyStats:
    """Aggregate requests created within the given calendar month."""
    month_start = datetime(year, month, 1)
    if month == 12:
        next_month = datetime(year + 1, 1, 1)
    else:
        next_month = datetime(year, month + 1, 1)

    def count_status(status: VacationStatus):
        return func.coalesce(
            func.sum(case((VacationRequest.status == status, 1), else_=0)), 0
        )

    row = (
        db.query(
            func.count(VacationRequest.id).label("submitted"),
            count_status(VacationStatus.APPROVED).label("approved"),
            count_status(VacationStatus.REJECTED).label("rejected"),
            count_status(VacationStatus.PENDING).label("pending"),
            func.coalesce(
                func.sum(
                    case(
                        (
                            VacationRequest.status == VacationStatus.APPROVED,
                            VacationRequest.total_days,
                        ),
                        else_=0,
                    )
                ),
                0,
            ).label("days_used"),
        )
        .filter(
            VacationRequest.created_at >= month_start,
            VacationRequest.created_at < next_month,
        )
        .one()
    )

    return MonthlyStats(
        year=year,
        month=month,
        submitted=row.submitted or 0,
        approved=int(row.approved),
        rejected=int(row.rejected),
        pending=int(row.pending),
        days_used=int(row.days_used),
    )
