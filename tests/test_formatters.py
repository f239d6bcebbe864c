from datetime import date

import pytest

from birthday_tracker.formatters import calculate_months_between, format_proximity_label


def test_months_between_same_month_is_zero() -> None:
    assert calculate_months_between(0, date(2026, 1, 15)) == 0
    assert calculate_months_between(10, date(2026, 1, 15)) == 0


def test_months_between_counts_calendar_boundaries() -> None:
    today = date(2026, 1, 15)

    assert calculate_months_between(30, today) == 1
    assert calculate_months_between(60, today) == 2
    assert calculate_months_between(365, today) == 12


def test_months_between_handles_year_rollover() -> None:
    assert calculate_months_between(46, date(2026, 11, 20)) == 2


def test_months_between_rejects_negative_days() -> None:
    with pytest.raises(ValueError):
        calculate_months_between(-1, date(2026, 1, 15))


def test_label_today_and_tomorrow() -> None:
    today = date(2026, 1, 29)

    assert format_proximity_label(0, today) == "Today! 🎉"
    assert format_proximity_label(1, today) == "Tomorrow"


def test_label_in_days_up_to_threshold() -> None:
    today = date(2026, 1, 29)

    assert format_proximity_label(2, today) == "In 2 days"
    assert format_proximity_label(17, today) == "In 17 days"
    assert format_proximity_label(28, today) == "In 28 days"


def test_label_switches_to_months_after_threshold() -> None:
    today = date(2026, 1, 15)

    assert format_proximity_label(29, today) == "In 1 month"
    assert format_proximity_label(30, today) == "In 1 month"
    assert format_proximity_label(60, today) == "In 2 months"


def test_label_past_threshold_within_same_month_reads_one_month() -> None:
    assert calculate_months_between(29, date(2026, 1, 1)) == 0
    assert format_proximity_label(29, date(2026, 1, 1)) == "In 1 month"


def test_label_rejects_negative_days() -> None:
    with pytest.raises(ValueError):
        format_proximity_label(-3, date(2026, 1, 15))
