# src/dayplan/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite key-value store into the TaskStore and loads persisted state.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..schedule.task_store import TaskStore
from ..storage.sqlite_store import SqliteKeyValueStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = SqliteKeyValueStore(settings.store_path)
    store = TaskStore(
        storage,
        tasks_key=settings.tasks_key,
        categories_key=settings.categories_key,
    )
    store.initialize_from_storage()

    return AppState(settings=settings, storage=storage, store=store)
