"""Date parsing utilities for report periods."""

from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = (
    "this-month",
    "this-year",
    "this-week",
    "last-month",
    "last-year",
    "last-week",
)


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and the
    relative forms "today", "yesterday", "tomorrow" and
    "this|last|next week|month|year" (each resolving to the first day of
    that period).

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    fixed = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in fixed:
        return fixed[date_str]

    parts = date_str.split()
    if len(parts) == 2 and parts[0] in ("last", "this", "next"):
        offset = {"last": -1, "this": 0, "next": 1}[parts[0]]
        unit = parts[1]
        if unit == "week":
            return today - timedelta(days=today.weekday()) + timedelta(weeks=offset)
        if unit == "month":
            return today.replace(day=1) + relativedelta(months=offset)
        if unit == "year":
            return today.replace(month=1, day=1) + relativedelta(years=offset)

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get inclusive start and end dates for a named period.

    Current periods ("this-*") end today; previous periods end on their last day.

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower().replace("_", "-")
    today = today or date.today()

    if period not in PERIODS:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}"
        )

    which, unit = period.split("-")
    start = parse_date(f"this {unit}", today=today)
    if which == "this":
        return (start, today)

    previous_start = parse_date(f"last {unit}", today=today)
    return (previous_start, start - timedelta(days=1))


def start_of_year(today: Optional[date] = None) -> date:
    """First day of the current year."""
    return (today or date.today()).replace(month=1, day=1)


def day_bounds(
    start_date: Optional[date], end_date: Optional[date]
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Convert an inclusive date range into half-open datetime bounds.

    The end bound is midnight after ``end_date`` so that timestamps anywhere on
    the end date are included when filtering with ``< end``.
    """
    start = datetime.combine(start_date, time.min) if start_date else None
    end = datetime.combine(end_date + timedelta(days=1), time.min) if end_date else None
    return start, end
