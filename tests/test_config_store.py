from datetime import date
from pathlib import Path

import pytest

from birthday_tracker.config_store import ensure_default_config, load_config, save_config_atomic
from birthday_tracker.models import AppConfig, BirthRecord, Group


def _write(path: Path, text: str) -> None:
    path.write_text(text.strip() + "\n", encoding="utf-8")


def test_roundtrip_config(tmp_path: Path) -> None:
    path = tmp_path / "birthdays.toml"
    config = AppConfig(
        timezone="Europe/Madrid",
        leap_day_rule="mar1",
        people=[
            BirthRecord(
                person_id="ana",
                name="Ana",
                surname='Ruiz "La Jefa"',
                birth_date=date(1988, 2, 29),
                group_ids=["family"],
                show_age=True,
            ),
            BirthRecord(person_id="leo", name="Leo", birth_date=date(1995, 11, 20)),
        ],
        groups=[Group(group_id="family", name="Family")],
    )

    save_config_atomic(path, config)
    loaded = load_config(path)

    assert loaded == config


def test_load_accepts_quoted_iso_birth_date(tmp_path: Path) -> None:
    path = tmp_path / "birthdays.toml"
    _write(
        path,
        """
timezone = "UTC"

[[people]]
id = "ana"
name = "Ana"
birth_date = "1990-02-15"
""",
    )

    loaded = load_config(path)

    assert loaded.leap_day_rule == "mar1"
    assert loaded.people[0].birth_date == date(1990, 2, 15)
    assert loaded.people[0].group_ids == []


def test_invalid_birth_date_rejected(tmp_path: Path) -> None:
    path = tmp_path / "birthdays.toml"
    _write(
        path,
        """
timezone = "UTC"

[[people]]
id = "ana"
name = "Ana"
birth_date = "1990-02-30"
""",
    )

    with pytest.raises(ValueError):
        load_config(path)


def test_missing_birth_date_rejected(tmp_path: Path) -> None:
    path = tmp_path / "birthdays.toml"
    _write(
        path,
        """
timezone = "UTC"

[[people]]
id = "ana"
name = "Ana"
""",
    )

    with pytest.raises(ValueError):
        load_config(path)


def test_unknown_group_rejected(tmp_path: Path) -> None:
    path = tmp_path / "birthdays.toml"
    _write(
        path,
        """
timezone = "UTC"

[[people]]
id = "ana"
name = "Ana"
birth_date = 1990-02-15
group_ids = ["family"]
""",
    )

    with pytest.raises(ValueError, match="unknown group"):
        load_config(path)


def test_duplicate_person_id_rejected(tmp_path: Path) -> None:
    path = tmp_path / "birthdays.toml"
    config = AppConfig(
        timezone="UTC",
        leap_day_rule="mar1",
        people=[
            BirthRecord(person_id="ana", name="Ana", birth_date=date(1990, 2, 15)),
            BirthRecord(person_id="ana", name="Ana B", birth_date=date(1991, 3, 16)),
        ],
        groups=[],
    )

    with pytest.raises(ValueError, match="Duplicate person id"):
        save_config_atomic(path, config)
    assert not path.exists()


def test_invalid_leap_day_rule_rejected(tmp_path: Path) -> None:
    path = tmp_path / "birthdays.toml"
    _write(path, 'timezone = "UTC"\nleap_day_rule = "feb30"')

    with pytest.raises(ValueError, match="leap_day_rule"):
        load_config(path)


def test_unknown_timezone_rejected(tmp_path: Path) -> None:
    path = tmp_path / "birthdays.toml"
    _write(path, 'timezone = "Mars/Olympus_Mons"')

    with pytest.raises(ValueError, match="timezone"):
        load_config(path)


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.toml")


def test_ensure_default_config_creates_empty_roster(tmp_path: Path) -> None:
    path = tmp_path / "config" / "birthdays.toml"

    ensure_default_config(path)
    loaded = load_config(path)

    assert loaded.timezone == "UTC"
    assert loaded.leap_day_rule == "mar1"
    assert loaded.people == []
    assert loaded.groups == []


def test_ensure_default_config_keeps_existing_file(tmp_path: Path) -> None:
    path = tmp_path / "birthdays.toml"
    _write(path, 'timezone = "Europe/Madrid"\nleap_day_rule = "feb28"')

    ensure_default_config(path)

    assert load_config(path).leap_day_rule == "feb28"


def test_integer_birth_date_rejected(tmp_path: Path) -> None:
    path = tmp_path / "birthdays.toml"
    _write(
        path,
        """
timezone = "UTC"

[[people]]
id = "ana"
name = "Ana"
birth_date = 19900215
""",
    )

    with pytest.raises(ValueError, match="birth_date"):
        load_config(path)


def test_compact_birth_date_string_rejected(tmp_path: Path) -> None:
    path = tmp_path / "birthdays.toml"
    _write(
        path,
        """
timezone = "UTC"

[[people]]
id = "ana"
name = "Ana"
birth_date = "19900215"
""",
    )

    with pytest.raises(ValueError, match="YYYY-MM-DD"):
        load_config(path)


def test_show_age_must_be_boolean(tmp_path: Path) -> None:
    path = tmp_path / "birthdays.toml"
    _write(
        path,
        """
timezone = "UTC"

[[people]]
id = "ana"
name = "Ana"
birth_date = 1990-02-15
show_age = "false"
""",
    )

    with pytest.raises(ValueError, match="show_age"):
        load_config(path)
