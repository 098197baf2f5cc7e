"""YAML configuration loader for the static route daemon."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import yaml

from static_routes.keys import DEFAULT_NAMESPACE, WATCH_PATTERNS, active_routes_key
from static_routes.mutator import DEFAULT_ROUTE_COMMAND
from static_routes_agent.config_extensions import (
    DEFAULT_PREFERENCES_FILE,
    DEFAULT_STATE_FILE,
)

MUTATOR_TYPES = ("command", "netlink")


@dataclass
class DaemonConfig:
    namespace: str = DEFAULT_NAMESPACE
    mutator: str = "command"
    route_command: str = DEFAULT_ROUTE_COMMAND
    command_timeout: Optional[float] = None
    lock_timeout: Optional[float] = 5.0
    retry_interval: float = 60.0


@dataclass
class StoreConfig:
    preferences: Path = Path(DEFAULT_PREFERENCES_FILE)
    state: Path = Path(DEFAULT_STATE_FILE)


@dataclass
class WatcherConfig:
    type: str
    interval: float = 2.0
    options: dict = field(default_factory=dict)


@dataclass
class AgentConfig:
    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    stores: StoreConfig = field(default_factory=StoreConfig)
    watchers: Sequence[WatcherConfig] = field(default_factory=list)


def _optional_float(section: dict, key: str, default: Optional[float]) -> Optional[float]:
    if key not in section:
        return default
    value = section[key]
    return None if value is None else float(value)


def _parse_daemon(section: dict) -> DaemonConfig:
    mutator = str(section.get("mutator", "command")).lower()
    if mutator not in MUTATOR_TYPES:
        raise ValueError(f"Unsupported mutator '{mutator}'")

    namespace = str(section.get("namespace", DEFAULT_NAMESPACE))
    if not namespace or any(
        re.match(pattern, active_routes_key(namespace, "service"))
        for pattern in WATCH_PATTERNS
    ):
        raise ValueError(f"Namespace '{namespace}' collides with watched service keys")

    retry_interval = float(section.get("retry_interval", 60.0))
    if retry_interval < 0:
        raise ValueError("'retry_interval' must not be negative")

    return DaemonConfig(
        namespace=namespace,
        mutator=mutator,
        route_command=str(section.get("route_command", DEFAULT_ROUTE_COMMAND)),
        command_timeout=_optional_float(section, "command_timeout", None),
        lock_timeout=_optional_float(section, "lock_timeout", 5.0),
        retry_interval=retry_interval,
    )


def _parse_stores(section: dict) -> StoreConfig:
    return StoreConfig(
        preferences=Path(section.get("preferences", DEFAULT_PREFERENCES_FILE)),
        state=Path(section.get("state", DEFAULT_STATE_FILE)),
    )


def _parse_watchers(entries: Iterable[dict]) -> List[WatcherConfig]:
    watchers: List[WatcherConfig] = []
    for entry in entries:
        options = entry.get("options", {})
        if not isinstance(options, dict):
            raise ValueError("watcher 'options' must be a mapping if provided")
        watchers.append(
            WatcherConfig(
                type=str(entry["type"]),
                interval=float(entry.get("interval", entry.get("poll_interval", 2.0))),
                options=options,
            )
        )
    return watchers


def load_config(path: Path) -> AgentConfig:
    data = yaml.safe_load(path.read_text())
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Daemon configuration must be a mapping")

    daemon_section = data.get("daemon", {})
    if not isinstance(daemon_section, dict):
        raise ValueError("'daemon' section must be a mapping")

    stores_section = data.get("stores", {})
    if not isinstance(stores_section, dict):
        raise ValueError("'stores' section must be a mapping")

    watchers_section = data.get("watchers", [{"type": "file"}])
    if not isinstance(watchers_section, list):
        raise ValueError("'watchers' section must be a list")

    return AgentConfig(
        daemon=_parse_daemon(daemon_section),
        stores=_parse_stores(stores_section),
        watchers=_parse_watchers(watchers_section),
    )
