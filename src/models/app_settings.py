# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Singleton application settings model (the vacation policy record)."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, utcnow

SETTINGS_ID = "settings"


class AppSettings(Base):
    """Application-wide vacation policy.

    Exactly one row exists, keyed by SETTINGS_ID. It is created on first
    access and updated in place.
    """

    __tablename__ = "settings"

    id: Mapped[str] = mapped_column(String(20), primary_key=True, default=SETTINGS_ID)
    # Stored as JSON, parsed through schemas.settings.WeekendPolicy
    weekend_policy: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    newsletter: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    default_vacation_days: Mapped[int] = mapped_column(
        Integer, default=25, nullable=False
    )
    vacation_reset_month: Mapped[int] = mapped_column(
        Integer, default=1, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )
