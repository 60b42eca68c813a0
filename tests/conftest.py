# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from dayplan.core.state import AppState
from dayplan.schedule.task_store import TaskStore

from .fakes import FakeKeyValueStore

DAY = "2024-05-01"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI layer.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="dayplan-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        store_path=tmp_path / "dayplan.sqlite3",
        tasks_key="tasks",
        categories_key="categories",
    )


@pytest.fixture()
def kv() -> FakeKeyValueStore:
    return FakeKeyValueStore()


@pytest.fixture()
def store(kv: FakeKeyValueStore) -> TaskStore:
    s = TaskStore(kv, selected_date=DAY)
    s.initialize_from_storage()
    return s


@pytest.fixture()
def state(settings: SimpleNamespace, kv: FakeKeyValueStore, store: TaskStore) -> AppState:
    return AppState(settings=settings, storage=kv, store=store)
