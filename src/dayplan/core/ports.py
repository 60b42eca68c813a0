# src/dayplan/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The scheduling engine depends on Protocols instead of concrete implementations.
This keeps storage swappable and makes testing easier.
"""

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """
    Durable key-value persistence for JSON-compatible values.

    - load() returns None when the key is missing or the stored value can't be parsed.
    - save() is best-effort; callers don't wait for confirmation beyond the call itself.
    """

    def load(self, key: str) -> Any | None: ...

    def save(self, key: str, value: Any) -> None: ...
