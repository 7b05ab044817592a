"""
Local persistence — a key/value store standing in for browser local storage,
and the ``DataStore`` that keeps ESG entries in it.

Keys: ``esgData`` (JSON list of entries), ``approvedUsers`` (JSON list of
user records) and ``currentUser`` (plain identifier). Values are strings,
as in browser storage. Read-modify-write on ``esgData`` is not atomic; one
writer per store is assumed.
"""

from __future__ import annotations

import json
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

ESG_DATA_KEY = "esgData"
APPROVED_USERS_KEY = "approvedUsers"
CURRENT_USER_KEY = "currentUser"
DEFAULT_USER = "defaultUser"


class LocalStorage:
    """String key/value store persisted as one JSON object on disk.

    With no ``path`` the store lives in memory only.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else None
        self._memory: dict[str, str] = {}

    def _load(self) -> dict[str, str]:
        if self.path is None:
            return dict(self._memory)
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Local storage at %s unreadable, treating as empty: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Local storage at %s is not an object, treating as empty", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, data: dict[str, str]) -> None:
        if self.path is None:
            self._memory = data
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)


class LocalDataStore:
    """Append-only ESG entry list kept in :class:`LocalStorage`."""

    def __init__(self, storage: LocalStorage | None = None):
        self.storage = storage or LocalStorage()

    def _read_list(self, key: str) -> list[dict[str, Any]]:
        raw = self.storage.get_item(key)
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except ValueError as exc:
            logger.error("Error getting stored data under %s: %s", key, exc)
            return []
        if not isinstance(items, list):
            logger.error("Stored data under %s is not a list", key)
            return []
        return [item for item in items if isinstance(item, dict)]

    @staticmethod
    def _new_id(existing: list[dict[str, Any]]) -> str:
        taken = {str(item.get("id")) for item in existing}
        candidate = int(time.time() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def current_user(self) -> str:
        return self.storage.get_item(CURRENT_USER_KEY) or DEFAULT_USER

    def set_current_user(self, identifier: str | None) -> None:
        if identifier:
            self.storage.set_item(CURRENT_USER_KEY, identifier)
        else:
            self.storage.remove_item(CURRENT_USER_KEY)

    async def save_data(self, entry: dict[str, Any]) -> dict[str, Any]:
        """Append ``entry`` with ``id``, ``createdAt`` and ``createdBy`` filled in."""
        existing = self._read_list(ESG_DATA_KEY)
        stored = {
            **entry,
            "id": str(entry["id"]) if entry.get("id") else self._new_id(existing),
            "createdAt": entry.get("createdAt") or datetime.now(timezone.utc).isoformat(),
            "createdBy": entry.get("createdBy") or self.current_user(),
        }
        existing.append(stored)
        self.storage.set_item(ESG_DATA_KEY, json.dumps(existing))
        logger.debug("Stored local ESG entry %s", stored["id"])
        return stored

    async def get_stored_data(self) -> list[dict[str, Any]]:
        return self._read_list(ESG_DATA_KEY)

    def get_approved_users(self) -> list[dict[str, Any]]:
        return self._read_list(APPROVED_USERS_KEY)
