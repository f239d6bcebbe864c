from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


DEFAULT_LEAP_DAY_RULE = "mar1"


@dataclass(frozen=True)
class BirthRecord:
    person_id: str
    name: str
    birth_date: date
    surname: str | None = None
    group_ids: list[str] = field(default_factory=list)
    show_age: bool = False

    @property
    def full_name(self) -> str:
        if self.surname:
            return f"{self.name} {self.surname}"
        return self.name


@dataclass(frozen=True)
class Group:
    group_id: str
    name: str


@dataclass(frozen=True)
class AppConfig:
    timezone: str
    leap_day_rule: str
    people: list[BirthRecord]
    groups: list[Group]
