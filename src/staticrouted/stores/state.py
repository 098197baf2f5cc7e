"""JSON backed observable state store.

Values live under ``values``; ``notifications`` holds a counter per key that
is bumped by :meth:`StateFile.notify` so watchers see a change even when the
value itself did not move.  Writers serialise on a lock file and replace the
whole document atomically, so readers never need the lock.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from static_routes.exceptions import PersistenceFailed
from static_routes.stores import StateStore

from .locking import FileLock, atomic_write, lock_path_for

LOG = logging.getLogger(__name__)


class StateFile(StateStore):
    def __init__(self, path: Path, lock_timeout: Optional[float] = 5.0) -> None:
        self._path = Path(path)
        self._lock_timeout = lock_timeout

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Dict[str, Dict[str, Any]]:
        try:
            text = self._path.read_text()
        except FileNotFoundError:
            return {"values": {}, "notifications": {}}
        except OSError as exc:
            raise PersistenceFailed(f"cannot read {self._path}: {exc}") from exc

        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as exc:
            raise PersistenceFailed(f"cannot parse {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceFailed(f"{self._path} must contain a JSON object")

        values = data.get("values")
        notifications = data.get("notifications")
        return {
            "values": values if isinstance(values, dict) else {},
            "notifications": notifications if isinstance(notifications, dict) else {},
        }

    def _update(self, mutate) -> None:
        with FileLock(lock_path_for(self._path), timeout=self._lock_timeout):
            data = self._load()
            mutate(data)
            try:
                atomic_write(self._path, json.dumps(data, indent=2, sort_keys=True))
            except OSError as exc:
                raise PersistenceFailed(f"cannot write {self._path}: {exc}") from exc

    def get(self, key: str) -> Optional[Any]:
        return self._load()["values"].get(key)

    def set(self, key: str, value: Any) -> None:
        def _set(data):
            data["values"][key] = value

        self._update(_set)

    def remove(self, key: str) -> None:
        def _remove(data):
            data["values"].pop(key, None)

        self._update(_remove)

    def notify(self, key: str) -> None:
        def _notify(data):
            counters = data["notifications"]
            counters[key] = int(counters.get(key, 0)) + 1

        self._update(_notify)
        LOG.debug("notified %s", key)

    def snapshot(self) -> Dict[str, Tuple[Any, int]]:
        """Return ``key -> (value, notification counter)`` for change detection."""

        data = self._load()
        values = data["values"]
        counters = data["notifications"]
        return {
            key: (values.get(key), int(counters.get(key, 0)))
            for key in set(values) | set(counters)
        }
