"""State file watcher."""

from __future__ import annotations

import logging
import re
import time
from threading import Event, Thread
from typing import Any, Dict, List, Sequence, Tuple

from static_routes.exceptions import PersistenceFailed
from static_routes.keys import WATCH_PATTERNS
from static_routes_agent import ChangeAggregator

from staticrouted.stores import StateFile

LOG = logging.getLogger(__name__)


class StateFileWatcher(Thread):
    """Poll the state file and publish batches of changed keys.

    The first poll reports every matching key, which seeds the aggregator
    with all known services at startup.  When ``retry_interval`` is non-zero
    the watcher also asks the aggregator to retry unconverged services at
    that cadence.  All reconciliation happens on this thread, one batch at a
    time.
    """

    def __init__(
        self,
        aggregator: ChangeAggregator,
        store: StateFile,
        interval: float,
        stop_event: Event,
        patterns: Sequence[str] = WATCH_PATTERNS,
        retry_interval: float = 0.0,
    ) -> None:
        super().__init__(daemon=True)
        self._aggregator = aggregator
        self._store = store
        self._interval = interval
        self._stop_event = stop_event
        self._patterns = [re.compile(p) for p in patterns]
        self._retry_interval = retry_interval
        self._last_retry = time.monotonic()
        self._state: Dict[str, Tuple[Any, int]] = {}

    def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.poll()
                self.maybe_retry()
            except Exception:  # pragma: no cover - logged below
                LOG.exception("state watcher encountered an error")
            self._stop_event.wait(self._interval)

    def _matches(self, key: str) -> bool:
        return any(p.match(key) for p in self._patterns)

    def poll(self) -> List[str]:
        try:
            current = self._store.snapshot()
        except PersistenceFailed as exc:
            LOG.warning("failed to read state file %s: %s", self._store.path, exc)
            return []

        changed = sorted(
            key
            for key in set(current) | set(self._state)
            if self._matches(key) and current.get(key) != self._state.get(key)
        )
        self._state = current

        if changed:
            LOG.debug("state keys changed: %s", changed)
            self._aggregator.handle_keys(changed)
        return changed

    def maybe_retry(self) -> List[str]:
        if not self._retry_interval:
            return []
        now = time.monotonic()
        if now - self._last_retry < self._retry_interval:
            return []
        self._last_retry = now
        return self._aggregator.retry_pending()
