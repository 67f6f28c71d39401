# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Pydantic schemas package."""

from src.schemas.common import ErrorResponse, HealthResponse
from src.schemas.settings import (
    NewsletterConfig,
    NewsletterUpdate,
    SettingsResponse,
    SettingsUpdate,
    WeekendPolicy,
    WeekendPolicyUpdate,
)
from src.schemas.user import BalanceUpdate, ResetBalancesResponse, UserBalanceResponse
from src.schemas.vacation import (
    MonthlyStats,
    TeamVacationResponse,
    VacationReject,
    VacationRequestCreate,
    VacationRequestResponse,
)

__all__ = [
    "BalanceUpdate",
    "ErrorResponse",
    "HealthResponse",
    "MonthlyStats",
    "NewsletterConfig",
    "NewsletterUpdate",
    "ResetBalancesResponse",
    "SettingsResponse",
    "SettingsUpdate",
    "TeamVacationResponse",
    "UserBalanceResponse",
    "VacationReject",
    "VacationRequestCreate",
    "VacationRequestResponse",
    "WeekendPolicy",
    "WeekendPolicyUpdate",
]
