from __future__ import annotations

import logging
import os
import tempfile
import tomllib
from datetime import date
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from birthday_tracker.date_logic import LEAP_DAY_RULES, InvalidBirthdayError, coerce_date
from birthday_tracker.models import DEFAULT_LEAP_DAY_RULE, AppConfig, BirthRecord, Group

LOGGER = logging.getLogger(__name__)


def _toml_escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _toml_string_list(values: list[str]) -> str:
    return "[" + ", ".join(f'"{_toml_escape(value)}"' for value in values) + "]"


def _validate_timezone(value: str) -> str:
    timezone = value.strip()
    if not timezone:
        raise ValueError("timezone must not be empty")
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {timezone}") from exc
    return timezone


def _validate_groups(groups: list[Group]) -> list[Group]:
    validated: list[Group] = []
    seen: set[str] = set()
    for group in groups:
        group_id = group.group_id.strip()
        name = group.name.strip()
        if not group_id:
            raise ValueError("group id must not be empty")
        if not name:
            raise ValueError(f"group {group_id} must have a name")
        if group_id in seen:
            raise ValueError(f"Duplicate group id: {group_id}")
        seen.add(group_id)
        validated.append(Group(group_id=group_id, name=name))
    return validated


def _validate_person(person: BirthRecord, known_groups: set[str]) -> BirthRecord:
    person_id = person.person_id.strip()
    if not person_id:
        raise ValueError("person id must not be empty")

    name = person.name.strip()
    if not name:
        raise ValueError(f"person {person_id} must have a name")

    try:
        birth_date = coerce_date(person.birth_date)
    except InvalidBirthdayError as exc:
        raise ValueError(f"person {person_id}: {exc}") from exc

    group_ids: list[str] = []
    for group_id in person.group_ids:
        if group_id not in known_groups:
            raise ValueError(f"person {person_id} references unknown group: {group_id}")
        if group_id not in group_ids:
            group_ids.append(group_id)

    if not isinstance(person.show_age, bool):
        raise ValueError(f"person {person_id}: show_age must be true or false")

    surname = person.surname.strip() if person.surname else None
    return BirthRecord(
        person_id=person_id,
        name=name,
        birth_date=birth_date,
        surname=surname or None,
        group_ids=group_ids,
        show_age=person.show_age,
    )


def validate_config(config: AppConfig) -> AppConfig:
    timezone = _validate_timezone(config.timezone)

    leap_day_rule = config.leap_day_rule.strip().lower()
    if leap_day_rule not in LEAP_DAY_RULES:
        raise ValueError(f"leap_day_rule must be one of {sorted(LEAP_DAY_RULES)}")

    groups = _validate_groups(config.groups)
    known_groups = {group.group_id for group in groups}

    people: list[BirthRecord] = []
    seen: set[str] = set()
    for person in config.people:
        validated = _validate_person(person, known_groups)
        if validated.person_id in seen:
            raise ValueError(f"Duplicate person id: {validated.person_id}")
        seen.add(validated.person_id)
        people.append(validated)

    return AppConfig(
        timezone=timezone,
        leap_day_rule=leap_day_rule,
        people=people,
        groups=groups,
    )


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("rb") as file_obj:
        data = tomllib.load(file_obj)

    groups = [
        Group(group_id=str(row.get("id", "")), name=str(row.get("name", "")))
        for row in data.get("groups", [])
    ]

    people: list[BirthRecord] = []
    for row in data.get("people", []):
        raw_birth_date = row.get("birth_date")
        if raw_birth_date is None:
            raise ValueError(f"person {row.get('id', '?')} is missing birth_date")
        # tomllib yields a date for bare TOML dates and a str for quoted ones
        if not isinstance(raw_birth_date, (date, str)):
            raise ValueError(f"person {row.get('id', '?')}: birth_date must be a date or a YYYY-MM-DD string")
        people.append(
            BirthRecord(
                person_id=str(row.get("id", "")),
                name=str(row.get("name", "")),
                birth_date=raw_birth_date,
                surname=str(row["surname"]) if row.get("surname") is not None else None,
                group_ids=[str(v) for v in row.get("group_ids", [])],
                show_age=row.get("show_age", False),
            )
        )

    config = AppConfig(
        timezone=str(data.get("timezone", "")),
        leap_day_rule=str(data.get("leap_day_rule", DEFAULT_LEAP_DAY_RULE)),
        people=people,
        groups=groups,
    )
    return validate_config(config)


def render_config(config: AppConfig) -> str:
    validated = validate_config(config)

    lines: list[str] = [
        f'timezone = "{_toml_escape(validated.timezone)}"',
        f'leap_day_rule = "{validated.leap_day_rule}"',
        "",
        '# leap_day_rule: "mar1" or "feb28", where Feb 29 birthdays fall in non-leap years.',
        "",
    ]

    for group in validated.groups:
        lines.append("[[groups]]")
        lines.append(f'id = "{_toml_escape(group.group_id)}"')
        lines.append(f'name = "{_toml_escape(group.name)}"')
        lines.append("")

    for person in validated.people:
        lines.append("[[people]]")
        lines.append(f'id = "{_toml_escape(person.person_id)}"')
        lines.append(f'name = "{_toml_escape(person.name)}"')
        if person.surname is not None:
            lines.append(f'surname = "{_toml_escape(person.surname)}"')
        lines.append(f"birth_date = {person.birth_date.isoformat()}")
        lines.append(f"group_ids = {_toml_string_list(person.group_ids)}")
        lines.append(f"show_age = {'true' if person.show_age else 'false'}")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def save_config_atomic(path: Path, config: AppConfig) -> None:
    rendered = render_config(config)
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        delete=False,
    ) as temp_file:
        temp_file.write(rendered)
        temp_name = temp_file.name

    os.replace(temp_name, path)


def ensure_default_config(path: Path) -> None:
    if path.exists():
        return

    default_config = AppConfig(
        timezone="UTC",
        leap_day_rule=DEFAULT_LEAP_DAY_RULE,
        people=[],
        groups=[],
    )
    save_config_atomic(path, default_config)
    LOGGER.info("Wrote empty roster to %s", path)
