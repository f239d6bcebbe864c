from __future__ import annotations

import re
from datetime import date, datetime

from birthday_tracker.models import DEFAULT_LEAP_DAY_RULE

LEAP_DAY_RULES = ("mar1", "feb28")

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


DateLike = date | datetime | str


class InvalidBirthdayError(ValueError):
    pass


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def validate_month_day(month: int, day: int) -> None:
    if month < 1 or month > 12:
        raise InvalidBirthdayError(f"Invalid month: {month}")

    if day < 1 or day > 31:
        raise InvalidBirthdayError(f"Invalid day: {day}")

    try:
        date(2000, month, day)
    except ValueError as exc:
        raise InvalidBirthdayError(f"Invalid month/day combination: {month:02d}-{day:02d}") from exc


def coerce_date(value: DateLike) -> date:
    """Return the calendar date for ``value``, dropping any time of day.

    Strings must be ISO ``YYYY-MM-DD``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        match = re.fullmatch(r"(\d{4})-(\d{2})-(\d{2})", value.strip())
        if not match:
            raise InvalidBirthdayError(f"Invalid date: {value!r}, expected YYYY-MM-DD")
        year, month, day = (int(piece) for piece in match.groups())
        validate_month_day(month, day)
        try:
            return date(year, month, day)
        except ValueError as exc:
            raise InvalidBirthdayError(f"Invalid date: {value!r}") from exc
    raise InvalidBirthdayError(f"Expected a date, got {type(value).__name__}")


def _check_rule(leap_day_rule: str) -> None:
    if leap_day_rule not in LEAP_DAY_RULES:
        raise InvalidBirthdayError(f"Unsupported leap day rule: {leap_day_rule}")


def birthday_date_for_year(birth_date: date, year: int, leap_day_rule: str = DEFAULT_LEAP_DAY_RULE) -> date:
    _check_rule(leap_day_rule)
    if birth_date.month == 2 and birth_date.day == 29 and not is_leap_year(year):
        if leap_day_rule == "feb28":
            return date(year, 2, 28)
        return date(year, 3, 1)
    return date(year, birth_date.month, birth_date.day)


def next_birthday(birth_date: DateLike, today: date | datetime, leap_day_rule: str = DEFAULT_LEAP_DAY_RULE) -> date:
    birth = coerce_date(birth_date)
    current = coerce_date(today)

    this_year = birthday_date_for_year(birth, current.year, leap_day_rule)
    if this_year >= current:
        return this_year
    return birthday_date_for_year(birth, current.year + 1, leap_day_rule)


def days_until_birthday(birth_date: DateLike, today: date | datetime, leap_day_rule: str = DEFAULT_LEAP_DAY_RULE) -> int:
    current = coerce_date(today)
    nxt = next_birthday(birth_date, current, leap_day_rule)
    return (nxt - current).days


def calculate_age(birth_date: DateLike, today: date | datetime, leap_day_rule: str = DEFAULT_LEAP_DAY_RULE) -> int:
    """Completed years of age on ``today``.

    A birthday falling on ``today`` counts as reached.
    """
    birth = coerce_date(birth_date)
    current = coerce_date(today)
    if current < birth:
        raise InvalidBirthdayError(
            f"Reference date {current.isoformat()} is before birth date {birth.isoformat()}"
        )

    age = current.year - birth.year
    if current < birthday_date_for_year(birth, current.year, leap_day_rule):
        age -= 1
    return age


def turning_age(birth_date: DateLike, birthday_occurrence: date) -> int:
    birth = coerce_date(birth_date)
    if birthday_occurrence < birth:
        raise InvalidBirthdayError(
            f"Birthday occurrence {birthday_occurrence.isoformat()} is before birth date {birth.isoformat()}"
        )
    return birthday_occurrence.year - birth.year


def format_birthday(birth_date: DateLike) -> str:
    birth = coerce_date(birth_date)
    return f"{MONTH_NAMES[birth.month - 1]} {birth.day}"


def sort_by_upcoming_birthday(records, today: date | datetime, leap_day_rule: str = DEFAULT_LEAP_DAY_RULE) -> list:
    """Return a new list ordered by days until each record's next birthday.

    Records only need a ``birth_date`` attribute. The sort is stable, so
    records sharing a birthday keep their input order.
    """
    current = coerce_date(today)
    return sorted(
        records,
        key=lambda record: days_until_birthday(record.birth_date, current, leap_day_rule),
    )
