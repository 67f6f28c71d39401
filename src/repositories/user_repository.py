# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User lookups and the vacation balance ledger.

Balance writes flush but never commit, so they can share a transaction
with a request status change.
"""

import uuid

from sqlalchemy import case
from sqlalchemy.orm import Session

from src.exceptions import ErrorCode, VacationServiceError
from src.models import User, UserRole
from src.models.base import utcnow


def _user_not_found(user_id: uuid.UUID) -> VacationServiceError:
    return VacationServiceError(
        ErrorCode.USER_NOT_FOUND, f"User {user_id} not found"
    )


def get_by_id(
    db: Session, user_id: uuid.UUID, for_update: bool = False
) -> User | None:
    """Get a user by ID, optionally locking the row for the transaction."""
    query = db.query(User).filter(User.id == user_id)
    if for_update:
        query = query.with_for_update().populate_existing()
    return query.first()


def get_balance(db: Session, user_id: uuid.UUID) -> int:
    """Get the remaining vacation balance of a user."""
    balance = db.query(User.vacation_balance).filter(User.id == user_id).scalar()
    if balance is None:
        raise _user_not_found(user_id)
    return balance


def set_balance(db: Session, user_id: uuid.UUID, balance: int) -> None:
    """Write a new balance, floored at zero."""
    count = (
        db.query(User)
        .filter(User.id == user_id)
        .update(
            {User.vacation_balance: max(0, balance), User.updated_at: utcnow()},
            synchronize_session=False,
        )
    )
    if count == 0:
        raise _user_not_found(user_id)
    _refresh_balance(db, user_id)


def deduct_balance(db: Session, user_id: uuid.UUID, days: int) -> int:
    """Subtract days from a balance in a single statement, floored at zero.

    The read-modify-write happens inside the store, so a concurrent
    deduction cannot be lost between reading and writing the balance.

    Returns:
        The new balance.
    """
    remaining = User.vacation_balance - days
    count = (
        db.query(User)
        .filter(User.id == user_id)
        .update(
            {
                User.vacation_balance: case((remaining < 0, 0), else_=remaining),
                User.updated_at: utcnow(),
            },
            synchronize_session=False,
        )
    )
    if count == 0:
        raise _user_not_found(user_id)
    return _refresh_balance(db, user_id)


def update_all_balances(
    db: Session, balance: int, role: UserRole = UserRole.EMPLOYEE
) -> int:
    """Set the balance of every user with the given role. Returns count updated."""
    count = (
        db.query(User)
        .filter(User.role == role)
        .update(
            {User.vacation_balance: max(0, balance), User.updated_at: utcnow()},
            synchronize_session=False,
        )
    )
    db.expire_all()
    return count


def list_low_balance(db: Session, threshold: int) -> list[User]:
    """Get users whose balance is at or below the threshold."""
    return (
        db.query(User)
        .filter(User.vacation_balance <= threshold)
        .order_by(User.vacation_balance.asc(), User.name.asc())
        .all()
    )


def _refresh_balance(db: Session, user_id: uuid.UUID) -> int:
    # Reload so an identity-mapped User reflects the UPDATE above
    user = db.query(User).populate_existing().filter(User.id == user_id).one()
    return user.vacation_balance
