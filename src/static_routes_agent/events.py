"""Event primitives consumed by the handler registry."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceChanged:
    """Signals that the routes of a service must be reconciled.

    Handlers re-read the full desired and observed state themselves, so the
    event only carries the service identifier.
    """

    service_id: str
