# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.config import get_settings
from src.database import engine
from src.exceptions import ErrorCategory, ErrorCode, VacationServiceError
from src.models import Base
from src.schemas.common import ErrorResponse, HealthResponse

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

CATEGORY_STATUS = {
    ErrorCategory.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.BUSINESS_RULE: status.HTTP_409_CONFLICT,
    ErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCategory.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCategory.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for_error(error: VacationServiceError) -> int:
    """Map an engine error to an HTTP status code."""
    if error.code == ErrorCode.INSUFFICIENT_BALANCE:
        return status.HTTP_422_UNPROCESSABLE_CONTENT
    return CATEGORY_STATUS[error.category]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Ensuring database schema...")
    Base.metadata.create_all(bind=engine)

    yield

    logger.info("Shutting down...")
    engine.dispose()


app = FastAPI(
    title="VacayTrack",
    description="Vacation request and balance management",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(VacationServiceError)
async def vacation_error_handler(
    request: Request, exc: VacationServiceError
) -> JSONResponse:
    """Render engine errors as {code, message, details}."""
    status_code = status_for_error(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    body = ErrorResponse(**exc.to_dict())
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy")


# Import and include API router after it's created
from src.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
