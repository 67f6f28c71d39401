# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""API dependencies for dependency injection."""

import uuid
from collections.abc import Generator

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from src.config import get_settings
from src.database import SessionLocal
from src.models import User
from src.repositories import user_repository
from src.services.vacation_service import (
    VacationService,
    allow_overlapping,
    reject_overlapping,
)


def get_db() -> Generator[Session]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    db: Session = Depends(get_db),
    x_user_id: str | None = Header(default=None),
) -> User:
    """Resolve the caller from the X-User-Id header.

    Authentication happens upstream; the header carries an already
    authenticated identity.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        user_id = uuid.UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user identity",
        ) from None

    user = user_repository.get_by_id(db, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return user


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """Get current user and verify they are an admin."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


def get_vacation_service(db: Session = Depends(get_db)) -> VacationService:
    """Build the vacation service with the configured overlap policy."""
    settings = get_settings()
    on_overlap = (
        reject_overlapping if settings.BLOCK_OVERLAPPING_REQUESTS else allow_overlapping
    )
    return VacationService(db, on_overlap=on_overlap)
