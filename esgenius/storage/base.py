"""
``DataStore`` — the capability shared by local and server-backed entry stores.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DataStore(Protocol):
    async def save_data(self, entry: dict[str, Any]) -> dict[str, Any]:
        """Persist one entry and return it as stored."""
        ...

    async def get_stored_data(self) -> list[dict[str, Any]]:
        """Every stored entry; an empty list when nothing is stored."""
        ...
