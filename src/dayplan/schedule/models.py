# src/dayplan/schedule/models.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .time_model import is_valid_date, is_valid_time

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Task:
    """
    A time-boxed activity on a single calendar date.

    Times are wall-clock "HH:MM" strings and the interval is half-open [start, end).
    `category` holds the category's color token (weak reference, may dangle).
    `color` is cosmetic only and never takes part in conflict detection.
    """

    id: str
    title: str
    description: str
    start_time: str
    end_time: str
    date: str
    category: str
    completed: bool = False
    color: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "date": self.date,
            "category": self.category,
            "completed": self.completed,
        }
        if self.color is not None:
            out["color"] = self.color
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        """Build a Task from its stored form. Raises ValueError on missing or malformed core fields."""
        try:
            task_id = str(raw["id"])
            start_time = str(raw["startTime"])
            end_time = str(raw["endTime"])
            date = str(raw["date"])
        except KeyError as e:
            raise ValueError(f"task is missing field {e.args[0]!r}") from e

        if not is_valid_time(start_time) or not is_valid_time(end_time):
            raise ValueError(f"task {task_id} has invalid times {start_time!r}-{end_time!r}")
        if not is_valid_date(date):
            raise ValueError(f"task {task_id} has invalid date {date!r}")
        completed = raw.get("completed", False)
        if not isinstance(completed, bool):
            raise ValueError(f"task {task_id} has non-boolean completed {completed!r}")

        color = raw.get("color")
        return cls(
            id=task_id,
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            start_time=start_time,
            end_time=end_time,
            date=date,
            category=str(raw.get("category") or ""),
            completed=completed,
            color=str(color) if color is not None else None,
        )


@dataclass(slots=True)
class Category:
    id: str
    name: str
    color: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Category:
        try:
            return cls(id=str(raw["id"]), name=str(raw["name"]), color=str(raw["color"]))
        except KeyError as e:
            raise ValueError(f"category is missing field {e.args[0]!r}") from e


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="work", name="Work", color="#3f51b5"),
    Category(id="personal", name="Personal", color="#4caf50"),
    Category(id="health", name="Health", color="#f44336"),
    Category(id="learning", name="Learning", color="#ff9800"),
    Category(id="other", name="Other", color="#9e9e9e"),
)


def default_categories() -> list[Category]:
    """Fresh copies of the seed categories (callers may mutate them)."""
    return [Category(id=c.id, name=c.name, color=c.color) for c in DEFAULT_CATEGORIES]


def tasks_from_raw(raw: Any) -> list[Task] | None:
    """
    Decode a stored task collection.

    Returns None if the value is not a list at all; bad entries inside a list are skipped.
    """
    if not isinstance(raw, list):
        return None
    out: list[Task] = []
    for item in raw:
        if not isinstance(item, dict):
            logger.warning("Skipping stored task of type %s", type(item).__name__)
            continue
        try:
            out.append(Task.from_dict(item))
        except ValueError as e:
            logger.warning("Skipping malformed stored task: %s", e)
    return out


def categories_from_raw(raw: Any) -> list[Category] | None:
    if not isinstance(raw, list):
        return None
    out: list[Category] = []
    for item in raw:
        if not isinstance(item, dict):
            logger.warning("Skipping stored category of type %s", type(item).__name__)
            continue
        try:
            out.append(Category.from_dict(item))
        except ValueError as e:
            logger.warning("Skipping malformed stored category: %s", e)
    return out
