from __future__ import annotations

from datetime import date, datetime, timedelta

from birthday_tracker.date_logic import coerce_date

DAYS_THRESHOLD = 28

TODAY_TEXT = "Today! 🎉"
TOMORROW_TEXT = "Tomorrow"
IN_DAYS_TEXT = "In {days} days"
IN_ONE_MONTH_TEXT = "In 1 month"
IN_MONTHS_TEXT = "In {months} months"


def _check_days(days_until: int) -> None:
    if days_until < 0:
        raise ValueError(f"days_until must be non-negative, got {days_until}")


def calculate_months_between(days_until: int, today: date | datetime) -> int:
    """Count calendar-month boundaries crossed between ``today`` and ``today + days_until``.

    Only year and month are compared, so month lengths and year rollover
    come out right: November 20 to January 5 crosses two boundaries.
    """
    _check_days(days_until)
    current = coerce_date(today)
    target = current + timedelta(days=days_until)

    cursor = (current.year, current.month)
    months = 0
    while cursor < (target.year, target.month):
        year, month = cursor
        cursor = (year + 1, 1) if month == 12 else (year, month + 1)
        months += 1
    return months


def format_proximity_label(days_until: int, today: date | datetime) -> str:
    _check_days(days_until)
    if days_until == 0:
        return TODAY_TEXT
    if days_until == 1:
        return TOMORROW_TEXT
    if days_until <= DAYS_THRESHOLD:
        return IN_DAYS_TEXT.format(days=days_until)

    # 29 or 30 days can still land inside a 31-day month.
    months = calculate_months_between(days_until, today)
    if months <= 1:
        return IN_ONE_MONTH_TEXT
    return IN_MONTHS_TEXT.format(months=months)
