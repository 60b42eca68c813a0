# src/dayplan/schedule/task_store.py

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field, replace
from typing import Any

from ..core.ports import KeyValueStore
from .models import (
    Category,
    Task,
    categories_from_raw,
    default_categories,
    tasks_from_raw,
)
from .time_model import check_time_conflict, get_today_date_string, sort_tasks_by_time

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
CATEGORIES_KEY = "categories"


@dataclass
class SchedulerState:
    tasks: list[Task] = field(default_factory=list)
    categories: list[Category] = field(default_factory=default_categories)
    selected_date: str = field(default_factory=get_today_date_string)
    error: str | None = None
    loading: bool = True


def conflict_message(other: Task) -> str:
    return f'Time slot overlaps with another task: "{other.title}"'


class TaskStore:
    """
    Day-planner engine: tasks, categories, selected date and the last error.

    Invariant: no two tasks on the same date have overlapping [start, end) intervals.
    add_task/edit_task enforce it with a guarded commit:
    - scan the other tasks for a conflict,
    - on conflict: leave state untouched, set `error`, return None,
    - otherwise: commit, clear `error`, persist the full task list.

    Failures are reported through `error`, never raised. Persistence is best-effort:
    a failing save is logged and in-memory state is kept.

    Thread-safety:
    - every operation runs under a single re-entrant lock
    """

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        tasks_key: str = TASKS_KEY,
        categories_key: str = CATEGORIES_KEY,
        selected_date: str | None = None,
    ) -> None:
        self._storage = storage
        self._tasks_key = tasks_key
        self._categories_key = categories_key
        self._lock = threading.RLock()
        self._state = SchedulerState()
        if selected_date is not None:
            self._state.selected_date = selected_date

    # ---- read side ----

    @property
    def tasks(self) -> list[Task]:
        with self._lock:
            return [replace(t) for t in self._state.tasks]

    @property
    def categories(self) -> list[Category]:
        with self._lock:
            return [replace(c) for c in self._state.categories]

    @property
    def selected_date(self) -> str:
        return self._state.selected_date

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def loading(self) -> bool:
        return self._state.loading

    def get_task(self, task_id: str) -> Task | None:
        with self._lock:
            idx = self._index_of(task_id)
            return replace(self._state.tasks[idx]) if idx is not None else None

    def tasks_for_date(self, day: str) -> list[Task]:
        """Tasks on `day`, ordered by start time (display order)."""
        with self._lock:
            return sort_tasks_by_time(replace(t) for t in self._state.tasks if t.date == day)

    def find_category(self, token: str) -> Category | None:
        """Resolve a task's category reference (color token); None if it dangles."""
        with self._lock:
            for c in self._state.categories:
                if c.color == token:
                    return replace(c)
        return None

    # ---- lifecycle ----

    def initialize_from_storage(self) -> None:
        """
        (Re)load tasks and categories from storage.

        Missing or unparseable values fall back to an empty task list and the default
        categories. Anything not yet persisted in memory is discarded.
        """
        with self._lock:
            tasks = tasks_from_raw(self._load(self._tasks_key))
            categories = categories_from_raw(self._load(self._categories_key))

            self._state.tasks = tasks if tasks is not None else []
            self._state.categories = categories if categories is not None else default_categories()
            self._state.loading = False
            logger.info(
                "TaskStore initialized tasks=%d categories=%d selected=%s",
                len(self._state.tasks),
                len(self._state.categories),
                self._state.selected_date,
            )

    # ---- tasks ----

    def add_task(
        self,
        *,
        title: str,
        start_time: str,
        end_time: str,
        category: str,
        description: str = "",
        date: str | None = None,
        completed: bool = False,
        color: str | None = None,
    ) -> Task | None:
        """Create a task on `date` (default: selected date). Returns None on conflict."""
        with self._lock:
            candidate = Task(
                id=uuid.uuid4().hex,
                title=title,
                description=description,
                start_time=start_time,
                end_time=end_time,
                date=date or self._state.selected_date,
                category=category,
                completed=completed,
                color=color,
            )
            if self._reject_on_conflict(candidate, exclude_id=None):
                return None

            self._state.tasks.append(candidate)
            self._state.error = None
            self._persist_tasks()
            logger.debug(
                "Task added id=%s date=%s %s-%s",
                candidate.id,
                candidate.date,
                candidate.start_time,
                candidate.end_time,
            )
            return replace(candidate)

    def edit_task(self, task: Task) -> Task | None:
        """
        Replace the stored task with the same id (full replace, position kept).

        Returns None on conflict (error set) or when the id is unknown (error untouched).
        """
        with self._lock:
            idx = self._index_of(task.id)
            if idx is None:
                logger.warning("edit_task: unknown task id=%s", task.id)
                return None

            candidate = replace(task)
            if self._reject_on_conflict(candidate, exclude_id=candidate.id):
                return None

            self._state.tasks[idx] = candidate
            self._state.error = None
            self._persist_tasks()
            logger.debug("Task edited id=%s", candidate.id)
            return replace(candidate)

    def delete_task(self, task_id: str) -> None:
        with self._lock:
            before = len(self._state.tasks)
            self._state.tasks = [t for t in self._state.tasks if t.id != task_id]
            self._state.error = None
            self._persist_tasks()
            if len(self._state.tasks) != before:
                logger.debug("Task deleted id=%s", task_id)

    def toggle_task_completion(self, task_id: str) -> None:
        with self._lock:
            idx = self._index_of(task_id)
            if idx is None:
                return
            task = self._state.tasks[idx]
            task.completed = not task.completed
            self._persist_tasks()

    # ---- categories ----

    def add_category(self, category: Category) -> None:
        with self._lock:
            self._state.categories.append(replace(category))
            self._persist_categories()

    def edit_category(self, category: Category) -> None:
        with self._lock:
            self._state.categories = [
                replace(category) if c.id == category.id else c for c in self._state.categories
            ]
            self._persist_categories()

    def delete_category(self, category_id: str) -> None:
        # Tasks keep pointing at the removed color token.
        with self._lock:
            self._state.categories = [c for c in self._state.categories if c.id != category_id]
            self._persist_categories()

    # ---- selection / error ----

    def set_selected_date(self, day: str) -> None:
        with self._lock:
            self._state.selected_date = day

    def set_error(self, message: str) -> None:
        with self._lock:
            self._state.error = message

    def clear_error(self) -> None:
        with self._lock:
            self._state.error = None

    # ---- low-level helpers ----

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._state.tasks):
            if t.id == task_id:
                return i
        return None

    def _reject_on_conflict(self, candidate: Task, *, exclude_id: str | None) -> bool:
        for existing in self._state.tasks:
            if exclude_id is not None and existing.id == exclude_id:
                continue
            if check_time_conflict(existing, candidate):
                self._state.error = conflict_message(existing)
                logger.info(
                    "Rejected %s-%s on %s: overlaps task id=%s",
                    candidate.start_time,
                    candidate.end_time,
                    candidate.date,
                    existing.id,
                )
                return True
        return False

    def _load(self, key: str) -> Any | None:
        try:
            return self._storage.load(key)
        except Exception:
            logger.exception("Failed to load %r from storage; using defaults.", key)
            return None

    def _save(self, key: str, value: Any) -> None:
        try:
            self._storage.save(key, value)
        except Exception:
            logger.exception("Failed to save %r to storage.", key)

    def _persist_tasks(self) -> None:
        self._save(self._tasks_key, [t.to_dict() for t in self._state.tasks])

    def _persist_categories(self) -> None:
        self._save(self._categories_key, [c.to_dict() for c in self._state.categories])
