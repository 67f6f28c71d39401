# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Administrative vacation balance operations."""

import logging
import uuid

from sqlalchemy.orm import Session

from src.database import storage_errors, transaction
from src.exceptions import ErrorCode, VacationServiceError, validation_error
from src.models import User
from src.repositories import user_repository
from src.services import settings_service

logger = logging.getLogger(__name__)

# Users at or below this many days are reported as running low
LOW_BALANCE_THRESHOLD = 5


def get_user(db: Session, user_id: uuid.UUID) -> User:
    """Get a user or raise USER_NOT_FOUND."""
    with storage_errors(db):
        user = user_repository.get_by_id(db, user_id)
    if user is None:
        raise VacationServiceError(ErrorCode.USER_NOT_FOUND, f"User {user_id} not found")
    return user


def update_balance(db: Session, user_id: uuid.UUID, balance: int) -> User:
    """Set a user's balance by hand (admin edit)."""
    if balance < 0:
        raise validation_error("vacation balance cannot be negative")

    with transaction(db):
        user_repository.set_balance(db, user_id, balance)

    user = get_user(db, user_id)
    logger.info(f"Vacation balance of {user_id} set to {balance}")
    return user


def reset_all_balances(db: Session) -> tuple[int, int]:
    """Reset every employee balance to the configured default.

    Returns:
        Tuple of (users updated, new balance).
    """
    with storage_errors(db):
        default_days = settings_service.get_settings(db).default_vacation_days
    if default_days < 0:
        raise validation_error("default vacation days cannot be negative")

    with transaction(db):
        count = user_repository.update_all_balances(db, default_days)

    logger.info(f"Reset vacation balance to {default_days} days for {count} employees")
    return count, default_days


def get_low_balance_users(
    db: Session, threshold: int = LOW_BALANCE_THRESHOLD
) -> list[User]:
    """Get users whose remaining balance is at or below the threshold."""
    with storage_errors(db):
        return user_repository.list_low_balance(db, threshold)
