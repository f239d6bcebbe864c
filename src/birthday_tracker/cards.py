from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from birthday_tracker.date_logic import (
    InvalidBirthdayError,
    coerce_date,
    days_until_birthday,
    format_birthday,
    next_birthday,
    turning_age,
)
from birthday_tracker.formatters import format_proximity_label
from birthday_tracker.models import DEFAULT_LEAP_DAY_RULE, BirthRecord

SOON_THRESHOLD_DAYS = 7

URGENCY_MARKERS = {
    "today": "🎂 ",
    "soon": "⏰ ",
    "later": "",
}


@dataclass(frozen=True)
class BirthdayCard:
    display_name: str
    group_name: str | None
    birthday_text: str
    proximity_label: str
    days_until: int
    urgency: str


def _urgency(days_until: int) -> str:
    if days_until == 0:
        return "today"
    if days_until <= SOON_THRESHOLD_DAYS:
        return "soon"
    return "later"


def build_card(
    person: BirthRecord,
    today: date,
    leap_day_rule: str = DEFAULT_LEAP_DAY_RULE,
    *,
    current_person_id: str | None = None,
    group_name: str | None = None,
) -> BirthdayCard:
    if coerce_date(today) < coerce_date(person.birth_date):
        raise InvalidBirthdayError(f"{person.person_id} has a birth date after {today}")

    days_until = days_until_birthday(person.birth_date, today, leap_day_rule)

    display_name = "Me" if person.person_id == current_person_id else person.full_name
    if person.show_age:
        occurrence = next_birthday(person.birth_date, today, leap_day_rule)
        display_name = f"{display_name} ({turning_age(person.birth_date, occurrence)})"

    return BirthdayCard(
        display_name=display_name,
        group_name=group_name,
        birthday_text=format_birthday(person.birth_date),
        proximity_label=format_proximity_label(days_until, today),
        days_until=days_until,
        urgency=_urgency(days_until),
    )


def render_card(card: BirthdayCard) -> str:
    lines = [f"{URGENCY_MARKERS[card.urgency]}{card.display_name}"]
    if card.group_name:
        lines.append(f"   {card.group_name}")
    lines.append(f"   {card.birthday_text} | {card.proximity_label}")
    return "\n".join(lines)


def _render_cards(cards: list[BirthdayCard]) -> str:
    return "\n\n".join(render_card(card) for card in cards)


def member_count_text(count: int) -> str:
    return "1 member" if count == 1 else f"{count} members"


def render_group_listing(group_name: str, cards: list[BirthdayCard]) -> str:
    header = f"{group_name}\n{member_count_text(len(cards))}"
    if not cards:
        return f"{header}\n\nNo members in this group yet."
    return f"{header}\n\n{_render_cards(cards)}"


def render_people_listing(cards: list[BirthdayCard]) -> str:
    if not cards:
        return "People\n\nNo people found in your groups yet."
    return f"People\n\n{_render_cards(cards)}"
