"""Handler registry dispatching service events."""

from __future__ import annotations

from typing import Dict, Set

from .events import ServiceChanged
from .handlers import ServiceHandler


class HandlerRegistry:
    """Dispatch service events to registered handlers."""

    def __init__(self) -> None:
        self._handlers: Dict[str, ServiceHandler] = {}

    def register(self, name: str, handler: ServiceHandler) -> None:
        if name in self._handlers:
            raise ValueError(f"handler '{name}' already registered")
        self._handlers[name] = handler

    def handle(self, event: ServiceChanged) -> None:
        if not isinstance(event, ServiceChanged):
            raise TypeError(f"Unsupported event type: {type(event)!r}")
        for handler in self._handlers.values():
            handler.on_service_changed(event.service_id)

    def pending_services(self) -> Set[str]:
        pending: Set[str] = set()
        for handler in self._handlers.values():
            pending |= handler.pending_services()
        return pending
