import time
from pathlib import Path
from threading import Event

from static_routes.keys import active_routes_key
from static_routes_agent import ChangeAggregator, HandlerRegistry
from static_routes_agent.handlers import ServiceHandler
from staticrouted.stores import StateFile
from staticrouted.watchers.file import StateFileWatcher


class RecordingHandler(ServiceHandler):
    def __init__(self):
        self.calls: list[str] = []
        self.pending: set[str] = set()

    def on_service_changed(self, service_id: str) -> None:
        self.calls.append(service_id)

    def pending_services(self):
        return set(self.pending)


def build_watcher(tmp_path: Path, handler: RecordingHandler, retry_interval: float = 0.0):
    state = StateFile(tmp_path / "state.json")
    registry = HandlerRegistry()
    registry.register("recorder", handler)
    watcher = StateFileWatcher(
        aggregator=ChangeAggregator(registry),
        store=state,
        interval=0.1,
        stop_event=Event(),
        retry_interval=retry_interval,
    )
    return watcher, state


def test_first_poll_seeds_every_known_service(tmp_path: Path):
    handler = RecordingHandler()
    watcher, state = build_watcher(tmp_path, handler)
    state.set("State:/Network/Service/svc-a/IPv4", {"Router": "192.0.2.1"})
    state.set("State:/Network/Service/svc-a/IPv6", {"Router": "fe80::1"})
    state.set("State:/Network/Service/svc-b/IPv4", {"Router": "198.51.100.1"})
    state.set(active_routes_key("org.staticroutes.StaticRoutes", "svc-c"), {})

    watcher.poll()

    assert sorted(handler.calls) == ["svc-a", "svc-b"]

    handler.calls.clear()
    watcher.poll()
    assert handler.calls == []


def test_changes_and_notifications_are_published(tmp_path: Path):
    handler = RecordingHandler()
    watcher, state = build_watcher(tmp_path, handler)
    state.set("State:/Network/Service/svc-a/IPv4", {"Router": "192.0.2.1"})
    watcher.poll()
    handler.calls.clear()

    state.set("State:/Network/Service/svc-a/IPv4", {"Router": "192.0.2.2"})
    state.notify("Setup:/Network/Service/svc-a/IPv4")
    state.notify("Setup:/Network/Service/svc-b/IPv6")
    watcher.poll()

    assert sorted(handler.calls) == ["svc-a", "svc-b"]

    handler.calls.clear()
    state.remove("State:/Network/Service/svc-a/IPv4")
    watcher.poll()
    assert handler.calls == ["svc-a"]


def test_own_state_writes_do_not_trigger(tmp_path: Path):
    handler = RecordingHandler()
    watcher, state = build_watcher(tmp_path, handler)
    watcher.poll()

    state.set(active_routes_key("org.staticroutes.StaticRoutes", "svc-a"), {"x": {}})

    assert watcher.poll() == []
    assert handler.calls == []


def test_corrupt_state_file_is_skipped(tmp_path: Path):
    handler = RecordingHandler()
    watcher, state = build_watcher(tmp_path, handler)
    state.path.write_text("{broken")

    assert watcher.poll() == []


def test_retry_timer_replays_pending_services(tmp_path: Path):
    handler = RecordingHandler()
    handler.pending = {"svc-a"}
    watcher, _ = build_watcher(tmp_path, handler, retry_interval=0.05)

    time.sleep(0.1)
    assert watcher.maybe_retry() == ["svc-a"]
    assert handler.calls == ["svc-a"]
    assert watcher.maybe_retry() == []


def test_retry_timer_disabled(tmp_path: Path):
    handler = RecordingHandler()
    handler.pending = {"svc-a"}
    watcher, _ = build_watcher(tmp_path, handler)

    assert watcher.maybe_retry() == []
