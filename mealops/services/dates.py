"""Date-only helpers for week-based meal planning.

All values are calendar dates with no time component, so there is no
timezone handling anywhere in here.
"""
from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Optional

DATE_ONLY_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
WEEK_DAYS = 7


def format_date_only(value: date) -> str:
    return value.isoformat()


def parse_date_only(value: str) -> Optional[date]:
    """Parse ``YYYY-MM-DD``; None for anything else, including impossible dates like 2024-02-30."""
    if not isinstance(value, str) or not DATE_ONLY_RE.match(value):
        return None
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return None
    # Round-trip must be exact
    return parsed if format_date_only(parsed) == value else None


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def is_within_week(value: date, week_start: date) -> bool:
    """True if ``value`` falls in the closed 7-day window starting at ``week_start``."""
    return 0 <= (value - week_start).days <= WEEK_DAYS - 1


def week_start_for(value: date) -> date:
    """Monday of the week containing ``value``."""
    return value - timedelta(days=value.weekday())
