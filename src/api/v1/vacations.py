# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Vacation request API endpoints for employees."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.deps import get_current_user, get_vacation_service
from src.models import User, VacationStatus
from src.schemas.vacation import (
    TeamVacationResponse,
    VacationRequestCreate,
    VacationRequestResponse,
)
from src.services.vacation_service import VacationService

router = APIRouter()


@router.post(
    "",
    response_model=VacationRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_vacation(
    data: VacationRequestCreate,
    service: VacationService = Depends(get_vacation_service),
    current_user: User = Depends(get_current_user),
) -> VacationRequestResponse:
    """Submit a vacation request for the current user."""
    request = service.submit(
        current_user.id, data.start_date, data.end_date, data.reason
    )
    return VacationRequestResponse.model_validate(request)


@router.get("", response_model=list[VacationRequestResponse])
def list_my_vacations(
    vacation_status: VacationStatus | None = Query(None, alias="status"),
    year: int | None = None,
    service: VacationService = Depends(get_vacation_service),
    current_user: User = Depends(get_current_user),
) -> list[VacationRequestResponse]:
    """List the current user's vacation requests."""
    requests = service.list_for_user(current_user.id, vacation_status, year)
    return [VacationRequestResponse.model_validate(r) for r in requests]


@router.get("/team", response_model=list[TeamVacationResponse])
def list_team_vacations(
    month: int,
    year: int,
    service: VacationService = Depends(get_vacation_service),
    current_user: User = Depends(get_current_user),
) -> list[TeamVacationResponse]:
    """List approved team vacations for a month."""
    requests = service.list_team(month, year)
    return [TeamVacationResponse.model_validate(r) for r in requests]


@router.get("/{request_id}", response_model=VacationRequestResponse)
def get_vacation(
    request_id: uuid.UUID,
    service: VacationService = Depends(get_vacation_service),
    current_user: User = Depends(get_current_user),
) -> VacationRequestResponse:
    """Get one of the current user's vacation requests."""
    request = service.get(request_id)
    if request.user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vacation request not found",
        )
    return VacationRequestResponse.model_validate(request)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_vacation(
    request_id: uuid.UUID,
    service: VacationService = Depends(get_vacation_service),
    current_user: User = Depends(get_current_user),
) -> None:
    """Cancel a pending vacation request."""
    service.cancel(request_id, current_user.id)
