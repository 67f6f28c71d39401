# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Vacation request model."""

from __future__ import annotations

import uuid as uuid_lib
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin
from src.models.enums import VacationStatus

if TYPE_CHECKING:
    from src.models.user import User

REASON_MAX_LENGTH = 500


class VacationRequest(Base, TimestampMixin):
    """A request for a range of vacation days."""

    __tablename__ = "vacation_requests"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_vacation_range"),
        CheckConstraint("total_days >= 0", name="ck_vacation_total_days"),
        Index("ix_vacation_requests_user_status", "user_id", "status"),
        Index("ix_vacation_requests_created_at", "created_at"),
    )

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    user_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    # Computed once at submission from the policy snapshot; never recomputed
    total_days: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[VacationStatus] = mapped_column(
        Enum(VacationStatus, values_callable=lambda e: [m.value for m in e]),
        default=VacationStatus.PENDING,
        nullable=False,
    )
    reason: Mapped[str | None] = mapped_column(
        String(REASON_MAX_LENGTH), nullable=True
    )

    # Review metadata
    reviewed_by: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(
        String(REASON_MAX_LENGTH), nullable=True
    )

    # Relationships
    user: Mapped[User] = relationship(
        "User",
        foreign_keys=[user_id],
        back_populates="vacation_requests",
    )

    @property
    def user_name(self) -> str | None:
        return self.user.name if self.user else None
