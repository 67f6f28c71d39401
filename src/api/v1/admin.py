# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Admin API endpoints: review queue, settings, balances and statistics."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.api.deps import get_current_admin, get_db, get_vacation_service
from src.models import User
from src.schemas.settings import SettingsResponse, SettingsUpdate
from src.schemas.user import BalanceUpdate, ResetBalancesResponse, UserBalanceResponse
from src.schemas.vacation import MonthlyStats, VacationReject, VacationRequestResponse
from src.services import balance_service, settings_service
from src.services.vacation_service import VacationService

router = APIRouter()


# --- Review queue ---


@router.get("/vacations/pending", response_model=list[VacationRequestResponse])
def list_pending(
    service: VacationService = Depends(get_vacation_service),
    admin: User = Depends(get_current_admin),
) -> list[VacationRequestResponse]:
    """List pending vacation requests, oldest first."""
    return [VacationRequestResponse.model_validate(r) for r in service.list_pending()]


@router.put("/vacations/{request_id}/approve", response_model=VacationRequestResponse)
def approve_vacation(
    request_id: uuid.UUID,
    service: VacationService = Depends(get_vacation_service),
    admin: User = Depends(get_current_admin),
) -> VacationRequestResponse:
    """Approve a pending request and deduct the owner's balance."""
    request = service.approve(request_id, admin.id)
    return VacationRequestResponse.model_validate(request)


@router.put("/vacations/{request_id}/reject", response_model=VacationRequestResponse)
def reject_vacation(
    request_id: uuid.UUID,
    data: VacationReject | None = None,
    service: VacationService = Depends(get_vacation_service),
    admin: User = Depends(get_current_admin),
) -> VacationRequestResponse:
    """Reject a pending request."""
    reason = data.reason if data else None
    request = service.reject(request_id, admin.id, reason)
    return VacationRequestResponse.model_validate(request)


# --- Statistics ---


@router.get("/stats/monthly", response_model=MonthlyStats)
def monthly_stats(
    year: int,
    month: int,
    service: VacationService = Depends(get_vacation_service),
    admin: User = Depends(get_current_admin),
) -> MonthlyStats:
    """Aggregate requests created in a calendar month."""
    return service.monthly_stats(year, month)


# --- Settings ---


@router.get("/settings", response_model=SettingsResponse)
def get_settings(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> SettingsResponse:
    """Get the vacation policy settings."""
    return settings_service.to_response(settings_service.get_settings(db))


@router.put("/settings", response_model=SettingsResponse)
def update_settings(
    data: SettingsUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> SettingsResponse:
    """Update the vacation policy settings."""
    return settings_service.to_response(settings_service.update_settings(db, data))


# --- Balances ---


@router.put("/users/{user_id}/balance", response_model=UserBalanceResponse)
def update_balance(
    user_id: uuid.UUID,
    data: BalanceUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> UserBalanceResponse:
    """Set a user's vacation balance."""
    user = balance_service.update_balance(db, user_id, data.vacation_balance)
    return UserBalanceResponse.model_validate(user)


@router.post("/users/reset-balances", response_model=ResetBalancesResponse)
def reset_balances(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> ResetBalancesResponse:
    """Reset all employee balances to the default from settings."""
    count, new_balance = balance_service.reset_all_balances(db)
    return ResetBalancesResponse(
        users_updated=count,
        new_balance=new_balance,
        message=f"Reset vacation balance to {new_balance} days for {count} employees",
    )


@router.get("/users/low-balance", response_model=list[UserBalanceResponse])
def low_balance_users(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> list[UserBalanceResponse]:
    """List users running low on vacation days."""
    users = balance_service.get_low_balance_users(db)
    return [UserBalanceResponse.model_validate(u) for u in users]
