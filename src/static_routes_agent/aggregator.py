"""Collapse batches of changed state keys into per-service events."""

from __future__ import annotations

import logging
from typing import Iterable, List

from static_routes.exceptions import StaticRouteError
from static_routes.keys import service_id_from_key

from .events import ServiceChanged
from .registry import HandlerRegistry

LOG = logging.getLogger(__name__)


def services_from_keys(keys: Iterable[str]) -> List[str]:
    """Return the distinct service IDs referenced by ``keys``.

    Keys that do not follow the ``<Setup|State>:/Network/Service/<id>`` shape
    are ignored.
    """

    found = (service_id_from_key(key) for key in keys)
    return list(dict.fromkeys(sid for sid in found if sid))


class ChangeAggregator:
    """Reconcile every service touched by a batch exactly once."""

    def __init__(self, registry: HandlerRegistry) -> None:
        self._registry = registry

    def handle_keys(self, keys: Iterable[str]) -> List[str]:
        services = services_from_keys(keys)
        if services:
            LOG.debug("change batch touches services %s", services)
        self._dispatch(services)
        return services

    def retry_pending(self) -> List[str]:
        services = sorted(self._registry.pending_services())
        if services:
            LOG.info("retrying unconverged services %s", services)
        self._dispatch(services)
        return services

    def _dispatch(self, services: Iterable[str]) -> None:
        for service_id in services:
            try:
                self._registry.handle(ServiceChanged(service_id))
            except StaticRouteError as exc:
                LOG.error("reconciliation of service %s aborted: %s", service_id, exc)
