# tests/test_time_model.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

import pytest

from dayplan.schedule import time_model as tm


@dataclass
class Slot:
    start_time: str
    end_time: str
    date: str = "2024-05-01"
    title: str = ""


def test_time_to_minutes() -> None:
    assert tm.time_to_minutes("00:00") == 0
    assert tm.time_to_minutes("09:30") == 570
    assert tm.time_to_minutes("23:59") == 1439


def test_minutes_round_trip_for_every_minute_of_the_day() -> None:
    for m in range(tm.MINUTES_PER_DAY):
        t = tm.minutes_to_time(m)
        assert tm.time_to_minutes(tm.minutes_to_time(tm.time_to_minutes(t))) == m
        assert tm.minutes_to_time(tm.time_to_minutes(t)) == t


@pytest.mark.parametrize(
    ("a", "b", "expected"),
    [
        (("09:00", "10:00"), ("09:30", "10:30"), True),
        (("09:00", "10:00"), ("08:00", "09:01"), True),
        (("09:00", "12:00"), ("10:00", "11:00"), True),
        (("09:00", "10:00"), ("09:00", "10:00"), True),
        (("09:00", "10:00"), ("10:00", "11:00"), False),
        (("10:00", "11:00"), ("09:00", "10:00"), False),
        (("09:00", "10:00"), ("13:00", "14:00"), False),
    ],
)
def test_check_time_conflict_same_day(a, b, expected) -> None:
    ta, tb = Slot(*a), Slot(*b)
    assert tm.check_time_conflict(ta, tb) is expected
    assert tm.check_time_conflict(tb, ta) is expected


def test_check_time_conflict_different_days_never_conflict() -> None:
    a = Slot("09:00", "10:00", date="2024-05-01")
    b = Slot("09:00", "10:00", date="2024-05-02")
    assert tm.check_time_conflict(a, b) is False


def test_duration_and_formatting() -> None:
    assert tm.calculate_duration("09:00", "10:30") == 90
    assert tm.calculate_duration("10:30", "09:00") == -90
    assert tm.format_duration(90) == "1h 30m"
    assert tm.format_duration(45) == "45m"
    assert tm.format_duration(120) == "2h"
    assert tm.format_duration(0) == "0m"


def test_sort_tasks_by_time_is_stable_and_does_not_mutate() -> None:
    first = Slot("09:00", "09:30", title="first")
    late = Slot("14:00", "15:00", title="late")
    second = Slot("09:00", "09:15", title="second")
    tasks = [late, first, second]

    out = tm.sort_tasks_by_time(tasks)

    assert [t.title for t in out] == ["first", "second", "late"]
    assert [t.title for t in tasks] == ["late", "first", "second"]


def test_format_time_12h() -> None:
    assert tm.format_time("00:05") == "12:05 AM"
    assert tm.format_time("09:00") == "9:00 AM"
    assert tm.format_time("12:00") == "12:00 PM"
    assert tm.format_time("23:59") == "11:59 PM"


def test_generate_time_slots() -> None:
    slots = tm.generate_time_slots()
    assert len(slots) == 24
    assert slots[0] == "00:00"
    assert slots[13] == "13:00"
    assert slots[-1] == "23:00"


def test_validation_helpers() -> None:
    assert tm.is_valid_time("07:45")
    assert not tm.is_valid_time("24:00")
    assert not tm.is_valid_time("7:45")
    assert not tm.is_valid_time("")
    assert not tm.is_valid_time("09:00\n")
    assert tm.is_valid_date("2024-02-29")
    assert not tm.is_valid_date("2023-02-29")
    assert not tm.is_valid_date("20240501")
    assert not tm.is_valid_date("tomorrow")
    assert not tm.is_valid_date("2024-W18-3")
    assert not tm.is_valid_date("2024-05-01\n")


def test_day_navigation_rollover() -> None:
    assert tm.get_next_day("2024-02-28") == "2024-02-29"
    assert tm.get_next_day("2023-02-28") == "2023-03-01"
    assert tm.get_next_day("2024-12-31") == "2025-01-01"
    assert tm.get_previous_day("2024-03-01") == "2024-02-29"
    assert tm.get_previous_day("2025-01-01") == "2024-12-31"


def test_is_today() -> None:
    today = date.today()
    assert tm.get_today_date_string() == today.isoformat()
    assert tm.is_today(today.isoformat())
    assert not tm.is_today((today + timedelta(days=1)).isoformat())
