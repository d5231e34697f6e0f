"""Date manipulation utilities"""

import calendar
import re
from datetime import date, timedelta
from typing import Optional

from coverage_gateway.domain.exceptions import InvalidMonthKeyError

MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")
DAY_NUMBER_PATTERN = re.compile(r"\d{1,2}")


def parse_month_key(month_key: str) -> date:
    """Convert a YYYY-MM reporting month key to the first day of that month"""
    match = MONTH_KEY_PATTERN.match(month_key or "")
    if not match:
        raise InvalidMonthKeyError(f"Invalid month key: {month_key!r}")

    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise InvalidMonthKeyError(f"Month out of range in key: {month_key!r}")

    return date(year, month, 1)


def month_key_for(day: date) -> str:
    """Reporting month key (YYYY-MM) containing the given date"""
    return day.strftime("%Y-%m")


def days_in_month(month_date: date) -> int:
    return calendar.monthrange(month_date.year, month_date.month)[1]


def extract_day_number(date_label: str) -> Optional[int]:
    """
    Best-effort day-of-month lookup in a free-text label.

    Takes the first 1-2 digit run ("26 февраля" -> 26). Returns None when
    nothing is found or the number is not a plausible day (1..31).
    """
    match = DAY_NUMBER_PATTERN.search(date_label)
    if not match:
        return None

    day = int(match.group(0))
    if day < 1 or day > 31:
        return None

    return day


def shift_day_in_month(month_date: date, day: int, days: int) -> date:
    """Date for `day` of the month shifted by `days`; days past month end roll over"""
    return date(month_date.year, month_date.month, 1) + timedelta(days=day - 1 + days)


def format_day_month(value: date) -> str:
    """Format as DD.MM"""
    return value.strftime("%d.%m")
