from pathlib import Path

import pytest

from static_routes import RouteContext, StaticRouteReconciler, parse_destination
from static_routes.keys import active_routes_key, service_state_key
from static_routes.mutator import RouteMutator
from static_routes.routes import AddressFamily, DesiredRoute
from static_routes_agent import HandlerRegistry, ServiceChanged
from static_routes_agent.handlers import build_reconciler_adapter
from staticrouted.stores import PreferencesFile, StateFile


class NullMutator(RouteMutator):
    def apply(self, action, destination, gateway):
        pass


def build_reconciler(tmp_path: Path) -> StaticRouteReconciler:
    preferences = PreferencesFile(tmp_path / "preferences.yaml")
    state = StateFile(tmp_path / "state.json")
    preferences.set_routes(
        "svc-a", [DesiredRoute.from_destination(parse_destination("10.200.0.0/24"))]
    )
    state.set(service_state_key("svc-a", AddressFamily.IPV4), {"Router": "192.0.2.1"})
    context = RouteContext(preferences=preferences, state=state, mutator=NullMutator())
    return StaticRouteReconciler(context)


def test_registry_dispatches_events(tmp_path: Path):
    reconciler = build_reconciler(tmp_path)
    registry = HandlerRegistry()
    registry.register("reconciler", build_reconciler_adapter(reconciler))

    registry.handle(ServiceChanged(service_id="svc-a"))

    state = StateFile(tmp_path / "state.json")
    active = state.get(active_routes_key("org.staticroutes.StaticRoutes", "svc-a"))
    assert list(active) == ["IPv4/10.200.0.0/24"]
    assert registry.pending_services() == set()


def test_registry_rejects_duplicate_registration(tmp_path: Path):
    registry = HandlerRegistry()
    adapter = build_reconciler_adapter(build_reconciler(tmp_path))

    registry.register("reconciler", adapter)

    with pytest.raises(ValueError):
        registry.register("reconciler", adapter)


def test_registry_rejects_unknown_events():
    registry = HandlerRegistry()

    with pytest.raises(TypeError):
        registry.handle("svc-a")  # type: ignore[arg-type]
