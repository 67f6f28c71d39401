# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Vacation request schemas."""

import datetime
import uuid

from pydantic import BaseModel, Field

from src.models.enums import VacationStatus


class VacationRequestCreate(BaseModel):
    """Schema for submitting a vacation request.

    Dates are DD/MM/YYYY text and are parsed by the service, so format
    errors come back as VALIDATION_ERROR rather than a schema error. The
    reason length is checked by the service after trimming.
    """

    start_date: str = Field(..., max_length=20, examples=["15/01/2024"])
    end_date: str = Field(..., max_length=20, examples=["19/01/2024"])
    reason: str | None = None


class VacationReject(BaseModel):
    """Schema for rejecting a vacation request."""

    reason: str | None = None


class VacationRequestResponse(BaseModel):
    """Schema for vacation request response."""

    id: uuid.UUID
    user_id: uuid.UUID
    user_name: str | None = None
    start_date: datetime.date
    end_date: datetime.date
    total_days: int
    status: VacationStatus
    reason: str | None
    reviewed_by: uuid.UUID | None
    reviewed_at: datetime.datetime | None
    rejection_reason: str | None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = {"from_attributes": True}


class TeamVacationResponse(BaseModel):
    """Simplified approved vacation for the team calendar."""

    id: uuid.UUID
    user_id: uuid.UUID
    user_name: str | None
    start_date: datetime.date
    end_date: datetime.date
    total_days: int

    model_config = {"from_attributes": True}


class MonthlyStats(BaseModel):
    """Aggregated vacation request statistics for one month."""

    year: int
    month: int
    submitted: int = 0
    approved: int = 0
    rejected: int = 0
    pending: int = 0
    days_used: int = 0
