# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Business day calculation and request date parsing."""

import re
from datetime import date, timedelta

from src.exceptions import validation_error
from src.schemas.settings import WeekendPolicy

# D/M/YYYY or DD/MM/YYYY
REQUEST_DATE_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


def weekday_index(day: date) -> int:
    """Return the weekday index with 0 = Sunday ... 6 = Saturday.

    Python's date.weekday() starts at Monday = 0, so shift by one.
    """
    return (day.weekday() + 1) % 7


def compute_business_days(start: date, end: date, policy: WeekendPolicy) -> int:
    """Count business days in the inclusive range [start, end].

    The caller guarantees start <= end. A range lying entirely on excluded
    weekdays yields 0.

    Args:
        start: First day of the range.
        end: Last day of the range (inclusive).
        policy: Weekend policy snapshot.

    Returns:
        Number of days not excluded by the policy.
    """
    if not policy.exclude_weekends:
        return (end - start).days + 1

    count = 0
    current = start
    while current <= end:
        if not policy.is_day_excluded(weekday_index(current)):
            count += 1
        current += timedelta(days=1)

    return count


def parse_request_date(text: str) -> date:
    """Parse a DD/MM/YYYY date string.

    Day and month may be one or two digits, the year must have four.

    Raises:
        VacationServiceError: VALIDATION_ERROR for any other shape or an
            impossible calendar date.
    """
    if not isinstance(text, str):
        raise validation_error("invalid date format, expected DD/MM/YYYY")

    match = REQUEST_DATE_PATTERN.match(text.strip())
    if not match:
        raise validation_error(
            f"invalid date format '{text}', expected DD/MM/YYYY"
        )

    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise validation_error(f"invalid date '{text}': {e}") from e
