# src/dayplan/schedule/time_model.py

"""
Wall-clock time helpers for the day planner.

Everything here is pure: "HH:MM" strings (24-hour) and "YYYY-MM-DD" local dates in,
plain values out. Malformed input is the caller's problem (parsing raises ValueError).
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, timedelta
from typing import Protocol, TypeVar

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"([01][0-9]|2[0-3]):([0-5][0-9])")
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class Timed(Protocol):
    start_time: str
    end_time: str


class Scheduled(Timed, Protocol):
    date: str


T = TypeVar("T", bound=Timed)


def time_to_minutes(time: str) -> int:
    hours, minutes = time.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def check_time_conflict(a: Scheduled, b: Scheduled) -> bool:
    """
    True if both tasks sit on the same date and their [start, end) intervals intersect.

    Back-to-back tasks (a ends exactly when b starts) do not conflict.
    """
    if a.date != b.date:
        return False
    start_a = time_to_minutes(a.start_time)
    end_a = time_to_minutes(a.end_time)
    start_b = time_to_minutes(b.start_time)
    end_b = time_to_minutes(b.end_time)
    return start_a < end_b and start_b < end_a


def calculate_duration(start: str, end: str) -> int:
    # Negative when inverted; ordering is validated by the caller.
    return time_to_minutes(end) - time_to_minutes(start)


def format_duration(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def sort_tasks_by_time(tasks: Iterable[T]) -> list[T]:
    return sorted(tasks, key=lambda t: time_to_minutes(t.start_time))


def format_time(time: str) -> str:
    """"13:05" -> "1:05 PM", "00:30" -> "12:30 AM"."""
    hours, minutes = (int(p) for p in time.split(":"))
    period = "AM" if hours < 12 else "PM"
    display = hours % 12 or 12
    return f"{display}:{minutes:02d} {period}"


def generate_time_slots() -> list[str]:
    return [f"{hour:02d}:00" for hour in range(24)]


def is_valid_time(text: str) -> bool:
    return isinstance(text, str) and _TIME_RE.fullmatch(text) is not None


def is_valid_date(text: str) -> bool:
    # fromisoformat alone also takes week dates ("2024-W18-3") and "20240501".
    if not isinstance(text, str) or _DATE_RE.fullmatch(text) is None:
        return False
    try:
        date.fromisoformat(text)
    except ValueError:
        return False
    return True


# ---- calendar dates ----


def get_today_date_string() -> str:
    return date.today().isoformat()


def is_today(day: str) -> bool:
    return day == get_today_date_string()


def get_next_day(day: str) -> str:
    return (date.fromisoformat(day) + timedelta(days=1)).isoformat()


def get_previous_day(day: str) -> str:
    return (date.fromisoformat(day) - timedelta(days=1)).isoformat()
