# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User balance schemas."""

import uuid

from pydantic import BaseModel, Field

from src.models.enums import UserRole


class UserBalanceResponse(BaseModel):
    """Balance-relevant projection of a user."""

    id: uuid.UUID
    name: str
    email: str
    role: UserRole
    vacation_balance: int

    model_config = {"from_attributes": True}


class BalanceUpdate(BaseModel):
    """Schema for a manual balance edit by an admin.

    Negative values are checked by the service so they surface as
    VALIDATION_ERROR like every other engine error.
    """

    vacation_balance: int = Field(..., le=10000)


class ResetBalancesResponse(BaseModel):
    """Result of resetting all employee balances."""

    users_updated: int
    new_balance: int
    message: str
