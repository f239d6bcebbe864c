from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from birthday_tracker.models import BirthRecord, Group


@dataclass(frozen=True)
class GroupedPerson:
    record: BirthRecord
    group_names: tuple[str, ...]
    group_ids: tuple[str, ...]

    @property
    def birth_date(self) -> date:
        return self.record.birth_date


def normalize_name(name: str) -> str:
    pieces = name.strip().lower().split()
    return " ".join(pieces)


def find_group(groups: list[Group], query: str) -> Group | None:
    wanted = query.strip()
    for group in groups:
        if group.group_id == wanted:
            return group

    wanted_name = normalize_name(wanted)
    for group in groups:
        if normalize_name(group.name) == wanted_name:
            return group
    return None


def members_of_group(group: Group, people: list[BirthRecord]) -> list[BirthRecord]:
    return [person for person in people if group.group_id in person.group_ids]


def groups_for_person(person_id: str, groups: list[Group], people: list[BirthRecord]) -> list[Group]:
    for person in people:
        if person.person_id == person_id:
            return [group for group in groups if group.group_id in person.group_ids]
    return []


def people_in_shared_groups(person_id: str, groups: list[Group], people: list[BirthRecord]) -> list[GroupedPerson]:
    """Everyone sharing at least one group with ``person_id``, excluding that person.

    Each person appears once, tagged with every shared group in group order.
    """
    names_by_person: dict[str, list[str]] = {}
    ids_by_person: dict[str, list[str]] = {}
    records: dict[str, BirthRecord] = {}

    for group in groups_for_person(person_id, groups, people):
        for member in members_of_group(group, people):
            if member.person_id == person_id:
                continue
            records.setdefault(member.person_id, member)
            names_by_person.setdefault(member.person_id, []).append(group.name)
            ids_by_person.setdefault(member.person_id, []).append(group.group_id)

    return [
        GroupedPerson(
            record=record,
            group_names=tuple(names_by_person[key]),
            group_ids=tuple(ids_by_person[key]),
        )
        for key, record in records.items()
    ]
