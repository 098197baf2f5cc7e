"""Abstract interfaces for the stores the reconciler reads and writes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ContextManager, Dict, List, Optional, Sequence

from .routes import DesiredRoute, Service


class PreferencesStore(ABC):
    """The configuration database holding desired routes per service.

    Every access must happen inside :meth:`locked` so readers observe a
    snapshot that is consistent with concurrent writers.
    """

    @abstractmethod
    def locked(self) -> ContextManager[None]:
        """Hold the cross-process lock for the duration of the block."""

    @abstractmethod
    def services(self) -> List[Service]:
        """Return the known services in service order."""

    @abstractmethod
    def desired_routes(self, service_id: str) -> Optional[List[DesiredRoute]]:
        """Return configured routes, or ``None`` when the service has none."""

    @abstractmethod
    def all_routes(self) -> Optional[Dict[str, List[DesiredRoute]]]:
        """Return every configured route list keyed by service ID."""

    @abstractmethod
    def set_routes(self, service_id: str, routes: Sequence[DesiredRoute]) -> None:
        """Replace and commit the configured routes for ``service_id``."""

    def service_by_name(self, name: str) -> Optional[Service]:
        folded = name.casefold()
        return next((s for s in self.services() if s.name.casefold() == folded), None)


class StateStore(ABC):
    """Observable key/value state with change notifications."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the value stored at ``key``."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Atomically replace the value stored at ``key``."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Drop ``key`` from the store."""

    @abstractmethod
    def notify(self, key: str) -> None:
        """Signal watchers that ``key`` changed without changing its value."""
