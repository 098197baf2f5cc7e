"""Adapter between the static route reconciler and the registry contract."""

from __future__ import annotations

from typing import Set

from static_routes.reconciler import StaticRouteReconciler

from .base import ServiceHandler


class ReconcilerAdapter(ServiceHandler):
    """Wrap :class:`~static_routes.reconciler.StaticRouteReconciler`."""

    def __init__(self, reconciler: StaticRouteReconciler) -> None:
        self._reconciler = reconciler

    @property
    def reconciler(self) -> StaticRouteReconciler:
        return self._reconciler

    def on_service_changed(self, service_id: str) -> None:
        self._reconciler.reconcile(service_id)

    def pending_services(self) -> Set[str]:
        return self._reconciler.unconverged


def build_reconciler_adapter(reconciler: StaticRouteReconciler) -> ReconcilerAdapter:
    """Helper mirroring the builder pattern used for other handlers."""

    return ReconcilerAdapter(reconciler)
