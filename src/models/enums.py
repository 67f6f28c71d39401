# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Enumeration types for database models."""

from enum import Enum


class UserRole(str, Enum):
    """User role enumeration."""

    EMPLOYEE = "employee"
    ADMIN = "admin"


class VacationStatus(str, Enum):
    """Vacation request status enumeration.

    Status flow:
        PENDING → APPROVED
            ↓
        REJECTED

    APPROVED and REJECTED are terminal. A PENDING request may also be
    cancelled, which deletes it.
    """

    PENDING = "pending"  # Awaiting review
    APPROVED = "approved"  # Balance deducted
    REJECTED = "rejected"  # No balance effect

    @property
    def is_terminal(self) -> bool:
        return self is not VacationStatus.PENDING

    def can_transition_to(self, target: "VacationStatus") -> bool:
        """Return True if moving from this status to target is allowed."""
        return self is VacationStatus.PENDING and target.is_terminal


class NewsletterFrequency(str, Enum):
    """Newsletter frequency enumeration."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
