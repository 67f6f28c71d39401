# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Settings (vacation policy) schemas."""

import datetime

from pydantic import BaseModel, Field, field_validator

from src.models.enums import NewsletterFrequency

# 0 = Sunday, 6 = Saturday
WeekdayIndex = int
DEFAULT_EXCLUDED_DAYS: list[WeekdayIndex] = [0, 6]


def _validate_weekdays(days: list[int]) -> list[int]:
    invalid = [d for d in days if d < 0 or d > 6]
    if invalid:
        raise ValueError(f"Weekday indices must be between 0 and 6: {invalid}")
    return sorted(set(days))


class WeekendPolicy(BaseModel):
    """Which weekdays are excluded from business day counts."""

    exclude_weekends: bool = True
    excluded_days: list[WeekdayIndex] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_DAYS)
    )

    @field_validator("excluded_days")
    @classmethod
    def validate_excluded_days(cls, v: list[int]) -> list[int]:
        """Validate weekday range and drop duplicates."""
        return _validate_weekdays(v)

    def is_day_excluded(self, weekday: WeekdayIndex) -> bool:
        """Check if a weekday index (0 = Sunday) is excluded."""
        return self.exclude_weekends and weekday in self.excluded_days


class NewsletterConfig(BaseModel):
    """Newsletter scheduling settings."""

    enabled: bool = False
    frequency: NewsletterFrequency = NewsletterFrequency.MONTHLY
    day_of_month: int = Field(default=1, ge=1, le=28)
    last_sent_at: datetime.datetime | None = None


class SettingsResponse(BaseModel):
    """Response schema for application settings."""

    weekend_policy: WeekendPolicy
    newsletter: NewsletterConfig
    default_vacation_days: int
    vacation_reset_month: int
    updated_at: datetime.datetime


class WeekendPolicyUpdate(BaseModel):
    """Schema for updating the weekend policy."""

    exclude_weekends: bool | None = None
    excluded_days: list[WeekdayIndex] | None = None

    @field_validator("excluded_days")
    @classmethod
    def validate_excluded_days(cls, v: list[int] | None) -> list[int] | None:
        """Validate weekday range and drop duplicates."""
        if v is None:
            return v
        return _validate_weekdays(v)


class NewsletterUpdate(BaseModel):
    """Schema for updating newsletter settings."""

    enabled: bool | None = None
    frequency: NewsletterFrequency | None = None
    day_of_month: int | None = Field(None, ge=1, le=28)


class SettingsUpdate(BaseModel):
    """Schema for updating application settings."""

    weekend_policy: WeekendPolicyUpdate | None = None
    newsletter: NewsletterUpdate | None = None
    default_vacation_days: int | None = Field(None, ge=0, le=365)
    vacation_reset_month: int | None = Field(None, ge=1, le=12)
