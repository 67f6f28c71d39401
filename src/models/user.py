# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User model holding the vacation balance."""

from __future__ import annotations

import uuid as uuid_lib
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, Enum, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin
from src.models.enums import UserRole

if TYPE_CHECKING:
    from src.models.vacation_request import VacationRequest


class User(Base, TimestampMixin):
    """Employee or admin with a remaining vacation entitlement."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("vacation_balance >= 0", name="ck_users_balance_non_negative"),
    )

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, values_callable=lambda e: [m.value for m in e]),
        default=UserRole.EMPLOYEE,
        nullable=False,
    )
    vacation_balance: Mapped[int] = mapped_column(Integer, default=25, nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    vacation_requests: Mapped[list[VacationRequest]] = relationship(
        "VacationRequest",
        foreign_keys="[VacationRequest.user_id]",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
