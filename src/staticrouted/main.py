"""Entry point for the static route daemon."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from pathlib import Path
from threading import Event

from static_routes import RouteContext, StaticRouteReconciler
from static_routes.mutator import CommandRouteMutator, NetlinkRouteMutator, RouteMutator
from static_routes_agent import ChangeAggregator, HandlerRegistry
from static_routes_agent.handlers import build_reconciler_adapter

from .config import AgentConfig, DaemonConfig, load_config
from .stores import PreferencesFile, StateFile
from .watchers import StateFileWatcher

LOG = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def build_mutator(daemon: DaemonConfig) -> RouteMutator:
    if daemon.mutator == "netlink":
        return NetlinkRouteMutator()
    return CommandRouteMutator(daemon.route_command, timeout=daemon.command_timeout)


def build_context(config: AgentConfig) -> RouteContext:
    return RouteContext(
        preferences=PreferencesFile(
            config.stores.preferences, lock_timeout=config.daemon.lock_timeout
        ),
        state=StateFile(config.stores.state, lock_timeout=config.daemon.lock_timeout),
        mutator=build_mutator(config.daemon),
        namespace=config.daemon.namespace,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the static route daemon")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("/etc/staticroutes/staticrouted.yaml"),
        help="Path to the daemon configuration file",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    config = load_config(args.config)
    context = build_context(config)

    registry = HandlerRegistry()
    registry.register(
        "reconciler", build_reconciler_adapter(StaticRouteReconciler(context))
    )
    aggregator = ChangeAggregator(registry)

    stop_event = Event()

    watchers = []
    for watcher_cfg in config.watchers:
        if watcher_cfg.type == "file":
            watcher = StateFileWatcher(
                aggregator=aggregator,
                store=context.state,
                interval=watcher_cfg.interval,
                stop_event=stop_event,
                retry_interval=config.daemon.retry_interval,
            )
        else:
            raise ValueError(f"unsupported watcher type '{watcher_cfg.type}'")
        watchers.append(watcher)

    if len(watchers) > 1:
        raise ValueError("only one watcher may drive the reconciler")
    if not watchers:
        LOG.warning("no watchers configured; daemon will idle")

    for watcher in watchers:
        # Seed every known service before waiting for changes
        try:
            watcher.poll()
        except Exception:  # pragma: no cover - logged inside watcher
            LOG.exception("initial poll failed for state file %s", config.stores.state)
        watcher.start()

    def _shutdown(signum, frame):  # pragma: no cover - signal handler
        LOG.info("received signal %s, shutting down", signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    try:
        while not stop_event.is_set():
            stop_event.wait(1.0)
    except KeyboardInterrupt:  # pragma: no cover - fallback if signal not set
        stop_event.set()

    for watcher in watchers:
        watcher.join()

    LOG.info("staticrouted stopped")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
