"""Static route reconciliation.

For one service the reconciler compares three things:

* the routes configured in the preferences store;
* the routes it previously installed (the *active* snapshot persisted in the
  state store under ``State:/<namespace>/Service/<id>``); and
* the gateways the service currently has for IPv4 and IPv6.

It then issues the minimal set of route additions and removals and writes the
resulting active snapshot back.  A failed mutation never aborts the pass: the
route is simply left unconverged and retried the next time the service is
reconciled, either because a relevant change notification arrived or because
the daemon's retry timer fired.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from .context import RouteContext
from .exceptions import RouteError
from .gateway import GatewayResolver
from .keys import active_routes_key, service_state_key
from .routes import ActiveRouteEntry, AddressFamily, DesiredRoute

LOG = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Summary of one reconciliation pass."""

    service_id: str
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    forgotten: List[str] = field(default_factory=list)

    @property
    def mutations(self) -> int:
        return len(self.added) + len(self.removed) + len(self.failed)

    @property
    def converged(self) -> bool:
        return not self.failed


class StaticRouteReconciler:
    """Converge the kernel routing table on the configured static routes."""

    def __init__(
        self,
        context: RouteContext,
        resolver: Optional[GatewayResolver] = None,
    ) -> None:
        self._context = context
        self._resolver = resolver or GatewayResolver()
        self._unconverged: Set[str] = set()

    @property
    def unconverged(self) -> Set[str]:
        """Services whose last pass failed or left a mutation pending."""

        return set(self._unconverged)

    # ------------------------------------------------------------------
    # Store access
    # ------------------------------------------------------------------
    def _load_desired(self, service_id: str) -> Optional[List[DesiredRoute]]:
        preferences = self._context.preferences
        with preferences.locked():
            return preferences.desired_routes(service_id)

    def load_active(self, service_id: str) -> Dict[str, ActiveRouteEntry]:
        key = active_routes_key(self._context.namespace, service_id)
        raw = self._context.state.get(key)
        if not isinstance(raw, dict):
            return {}

        active: Dict[str, ActiveRouteEntry] = {}
        for route_key, value in raw.items():
            try:
                entry = ActiveRouteEntry.from_dict(value)
            except (TypeError, ValueError, AttributeError):
                LOG.warning(
                    "dropping malformed active route %s for service %s", route_key, service_id
                )
                continue
            active[entry.key] = entry
        return active

    def _store_active(self, service_id: str, active: Dict[str, ActiveRouteEntry]) -> None:
        key = active_routes_key(self._context.namespace, service_id)
        self._context.state.set(
            key, {route_key: entry.to_dict() for route_key, entry in active.items()}
        )

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------
    def _mutate(self, add: bool, destination: str, router: str, service_id: str) -> bool:
        mutator = self._context.mutator
        try:
            if add:
                mutator.add(destination, router)
            else:
                mutator.remove(destination, router)
        except RouteError as exc:
            LOG.error(
                "failed to %s route %s -> %s for service %s: %s",
                "add" if add else "remove",
                destination,
                router,
                service_id,
                exc,
            )
            return False
        return True

    def reconcile(self, service_id: str) -> Optional[ReconcileResult]:
        """Run one reconciliation pass for ``service_id``.

        Returns ``None`` when the service has no configured routes; its active
        snapshot is left untouched in that case.  Preferences and state store
        errors propagate and abort the pass before any route is changed.
        """

        try:
            desired = self._load_desired(service_id)
        except Exception:
            self._unconverged.add(service_id)
            raise
        if desired is None:
            LOG.debug("no static routes configured for service %s", service_id)
            self._unconverged.discard(service_id)
            return None

        result = ReconcileResult(service_id=service_id)
        state = self._context.state
        try:
            active = self.load_active(service_id)
            gateways = self._resolver.resolve(
                state.get(service_state_key(service_id, AddressFamily.IPV4)),
                state.get(service_state_key(service_id, AddressFamily.IPV6)),
            )
        except Exception:
            self._unconverged.add(service_id)
            raise
        candidates = dict(active)

        for route in desired:
            router = gateways.router_for(route.family)
            if not router:
                result.skipped.append(route.key)
                continue

            key = route.key
            current = active.get(key)
            if current is not None and current.router == router:
                candidates.pop(key, None)
                continue

            if current is not None:
                LOG.info(
                    "removing old route %s -> %s for service %s",
                    current.destination,
                    current.router,
                    service_id,
                )
                if self._mutate(False, current.destination, current.router, service_id):
                    del active[key]
                    result.removed.append(key)
                else:
                    result.failed.append(key)
                candidates.pop(key, None)

            LOG.info(
                "adding route %s -> %s for service %s", route.destination, router, service_id
            )
            if self._mutate(True, route.destination, router, service_id):
                active[key] = ActiveRouteEntry.for_route(route, router)
                candidates.pop(key, None)
                result.added.append(key)
            else:
                result.failed.append(key)

        for key, entry in candidates.items():
            LOG.info(
                "removing route %s -> %s for service %s",
                entry.destination,
                entry.router,
                service_id,
            )
            if self._mutate(False, entry.destination, entry.router, service_id):
                active.pop(key, None)
                result.removed.append(key)
            elif not gateways.router_for(entry.family):
                # The kernel drops the route together with the interface
                LOG.info(
                    "forgetting route %s -> %s for service %s, gateway is gone",
                    entry.destination,
                    entry.router,
                    service_id,
                )
                active.pop(key, None)
                result.forgotten.append(key)
            else:
                result.failed.append(key)

        try:
            self._store_active(service_id, active)
        except Exception:
            self._unconverged.add(service_id)
            raise

        if result.converged:
            self._unconverged.discard(service_id)
        else:
            self._unconverged.add(service_id)

        LOG.debug(
            "service %s reconciled: +%d -%d failed=%d skipped=%d",
            service_id,
            len(result.added),
            len(result.removed),
            len(result.failed),
            len(result.skipped),
        )
        return result
