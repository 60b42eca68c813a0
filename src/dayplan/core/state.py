# src/dayplan/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..schedule.task_store import TaskStore
from .ports import KeyValueStore


@dataclass
class AppState:
    # Settings object (real Settings or a test stand-in with the same attributes).
    settings: Any

    storage: KeyValueStore
    store: TaskStore
