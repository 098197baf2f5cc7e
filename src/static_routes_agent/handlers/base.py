"""Abstract interfaces for service-aware handlers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Set


class ServiceHandler(ABC):
    """Base class for handlers managed by :class:`HandlerRegistry`."""

    @abstractmethod
    def on_service_changed(self, service_id: str) -> None:
        """Bring ``service_id`` in line with its desired state."""

    def pending_services(self) -> Set[str]:
        """Services this handler could not converge and wants retried."""

        return set()
