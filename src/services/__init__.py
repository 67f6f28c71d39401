# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Services package."""
from src.services import (
    balance_service,
    business_days,
    settings_service,
    vacation_service,
)

__all__ = [
    "balance_service",
    "business_days",
    "settings_service",
    "vacation_service",
]
