# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Settings service: the single mutable vacation policy record."""

import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy.orm import Session

from src.database import transaction
from src.models import SETTINGS_ID, AppSettings
from src.schemas.settings import (
    NewsletterConfig,
    SettingsResponse,
    SettingsUpdate,
    WeekendPolicy,
)

logger = logging.getLogger(__name__)

DEFAULT_VACATION_DAYS = 25
DEFAULT_RESET_MONTH = 1


def parse_weekend_policy(raw: dict[str, Any] | None) -> WeekendPolicy:
    """Parse a stored weekend policy, falling back to the default policy."""
    if not raw:
        return WeekendPolicy()
    try:
        return WeekendPolicy.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Invalid stored weekend policy, using default: {e}")
        return WeekendPolicy()


def parse_newsletter_config(raw: dict[str, Any] | None) -> NewsletterConfig:
    """Parse a stored newsletter config, falling back to the default config."""
    if not raw:
        return NewsletterConfig()
    try:
        return NewsletterConfig.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Invalid stored newsletter config, using default: {e}")
        return NewsletterConfig()


def get_settings(db: Session) -> AppSettings:
    """Get the settings row, creating it with defaults on first access."""
    settings = db.query(AppSettings).filter(AppSettings.id == SETTINGS_ID).first()
    if settings:
        return settings

    with transaction(db):
        # Another writer may have created the row since the read above
        settings = db.get(AppSettings, SETTINGS_ID)
        if settings is None:
            settings = AppSettings(
                id=SETTINGS_ID,
                weekend_policy=WeekendPolicy().model_dump(mode="json"),
                newsletter=NewsletterConfig().model_dump(mode="json"),
                default_vacation_days=DEFAULT_VACATION_DAYS,
                vacation_reset_month=DEFAULT_RESET_MONTH,
            )
            db.add(settings)
            logger.info("Created default settings")
    db.refresh(settings)
    return settings


def get_weekend_policy(db: Session) -> WeekendPolicy:
    """Get a snapshot of the current weekend policy."""
    return parse_weekend_policy(get_settings(db).weekend_policy)


def to_response(settings: AppSettings) -> SettingsResponse:
    """Build the API view of the settings row."""
    return SettingsResponse(
        weekend_policy=parse_weekend_policy(settings.weekend_policy),
        newsletter=parse_newsletter_config(settings.newsletter),
        default_vacation_days=settings.default_vacation_days,
        vacation_reset_month=settings.vacation_reset_month,
        updated_at=settings.updated_at,
    )


def update_settings(db: Session, data: SettingsUpdate) -> AppSettings:
    """Apply a partial settings update in place."""
    settings = get_settings(db)

    with transaction(db):
        if data.weekend_policy is not None:
            policy = parse_weekend_policy(settings.weekend_policy)
            changes = data.weekend_policy.model_dump(exclude_none=True)
            policy = policy.model_copy(update=changes)
            # Reassign so the JSON column is flagged dirty
            settings.weekend_policy = policy.model_dump(mode="json")

        if data.newsletter is not None:
            newsletter = parse_newsletter_config(settings.newsletter)
            changes = data.newsletter.model_dump(exclude_none=True)
            newsletter = newsletter.model_copy(update=changes)
            settings.newsletter = newsletter.model_dump(mode="json")

        if data.default_vacation_days is not None:
            settings.default_vacation_days = data.default_vacation_days
        if data.vacation_reset_month is not None:
            settings.vacation_reset_month = data.vacation_reset_month

    db.refresh(settings)
    logger.info(
        f"Settings updated: weekend_policy={settings.weekend_policy}, "
        f"default_vacation_days={settings.default_vacation_days}"
    )
    return settings
