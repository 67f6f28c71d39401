# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Repositories package."""
from src.repositories import user_repository, vacation_repository

__all__ = [
    "user_repository",
    "vacation_repository",
]
