"""YAML backed configuration database.

The file lists the network services in service order and the static routes
configured for each of them::

    services:
      - id: 4F0A6C2E-0E61-4D3A-9A4B-6D3E1D9C8B10
        name: Ethernet
    static_routes:
      4F0A6C2E-0E61-4D3A-9A4B-6D3E1D9C8B10:
        - addressFamily: IPv4
          address: 10.20.0.0
          prefixLength: 16

The file is re-read on every access so that changes made by other processes
are picked up; callers hold :meth:`PreferencesFile.locked` around each access.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

import yaml

from static_routes.exceptions import PersistenceFailed
from static_routes.routes import DesiredRoute, Service
from static_routes.stores import PreferencesStore

from .locking import FileLock, atomic_write, lock_path_for

LOG = logging.getLogger(__name__)


class PreferencesFile(PreferencesStore):
    def __init__(self, path: Path, lock_timeout: Optional[float] = 5.0) -> None:
        self._path = Path(path)
        self._lock_timeout = lock_timeout

    @property
    def path(self) -> Path:
        return self._path

    @contextmanager
    def locked(self) -> Iterator[None]:
        with FileLock(lock_path_for(self._path), timeout=self._lock_timeout):
            yield

    def _load(self) -> dict:
        try:
            text = self._path.read_text()
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise PersistenceFailed(f"cannot read {self._path}: {exc}") from exc

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise PersistenceFailed(f"cannot parse {self._path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise PersistenceFailed(f"{self._path} must contain a mapping")
        return data

    def _save(self, data: dict) -> None:
        try:
            atomic_write(self._path, yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
        except OSError as exc:
            raise PersistenceFailed(f"cannot write {self._path}: {exc}") from exc

    @staticmethod
    def _parse_routes(service_id: str, entries) -> List[DesiredRoute]:
        if not isinstance(entries, list):
            LOG.warning("routes for service %s are not a list; ignoring them", service_id)
            return []
        routes: List[DesiredRoute] = []
        for entry in entries:
            try:
                routes.append(DesiredRoute.from_dict(entry))
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                LOG.warning("skipping malformed route %r for service %s: %s", entry, service_id, exc)
        return routes

    def services(self) -> List[Service]:
        services: List[Service] = []
        for entry in self._load().get("services") or []:
            if not isinstance(entry, dict) or "id" not in entry:
                continue
            service_id = str(entry["id"])
            services.append(Service(id=service_id, name=str(entry.get("name", service_id))))
        return services

    def all_routes(self) -> Optional[Dict[str, List[DesiredRoute]]]:
        static_routes = self._load().get("static_routes")
        if not isinstance(static_routes, dict):
            return None
        return {
            str(service_id): self._parse_routes(str(service_id), entries)
            for service_id, entries in static_routes.items()
        }

    def desired_routes(self, service_id: str) -> Optional[List[DesiredRoute]]:
        static_routes = self._load().get("static_routes")
        if not isinstance(static_routes, dict):
            return None
        entries = static_routes.get(service_id)
        if entries is None:
            return None
        return self._parse_routes(service_id, entries)

    def set_routes(self, service_id: str, routes: Sequence[DesiredRoute]) -> None:
        data = self._load()
        static_routes = data.get("static_routes")
        if not isinstance(static_routes, dict):
            static_routes = {}
            data["static_routes"] = static_routes
        static_routes[service_id] = [route.to_dict() for route in routes]
        self._save(data)
        LOG.debug("stored %d routes for service %s", len(routes), service_id)
