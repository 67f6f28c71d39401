# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database models package."""

from src.models.app_settings import SETTINGS_ID, AppSettings
from src.models.base import Base, TimestampMixin
from src.models.enums import NewsletterFrequency, UserRole, VacationStatus
from src.models.user import User
from src.models.vacation_request import VacationRequest

__all__ = [
    "SETTINGS_ID",
    "AppSettings",
    "Base",
    "NewsletterFrequency",
    "TimestampMixin",
    "User",
    "UserRole",
    "VacationRequest",
    "VacationStatus",
]
