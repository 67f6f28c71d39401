# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Main API router for v1 endpoints."""

from fastapi import APIRouter

from src.api.v1 import admin, vacations

api_router = APIRouter()

# Vacation routes
api_router.include_router(vacations.router, prefix="/vacations", tags=["vacations"])

# Admin routes
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
