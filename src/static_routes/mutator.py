"""Kernel route mutation backends."""

from __future__ import annotations

import ipaddress
import logging
import socket
import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

import pyroute2

from .exceptions import Killed, NetlinkFailed, NonZeroExit, SpawnFailed, Timeout

LOG = logging.getLogger(__name__)

DEFAULT_ROUTE_COMMAND = "/sbin/route"


class RouteAction(Enum):
    ADD = "add"
    REMOVE = "delete"


class RouteMutator(ABC):
    """Install or remove a single route toward ``gateway``."""

    @abstractmethod
    def apply(self, action: RouteAction, destination: str, gateway: str) -> None:
        """Apply ``action`` for ``destination`` (``address/prefix``).

        Raises a :class:`~static_routes.exceptions.RouteError` subclass when
        the kernel did not accept the change.
        """

    def add(self, destination: str, gateway: str) -> None:
        self.apply(RouteAction.ADD, destination, gateway)

    def remove(self, destination: str, gateway: str) -> None:
        self.apply(RouteAction.REMOVE, destination, gateway)


class CommandRouteMutator(RouteMutator):
    """Run ``route <add|delete> <destination> <gateway>`` and wait for it.

    Only a zero exit status counts as success.  ``timeout`` bounds the wait;
    with ``None`` a hung command blocks the caller indefinitely.
    """

    def __init__(
        self,
        command: str = DEFAULT_ROUTE_COMMAND,
        timeout: Optional[float] = None,
    ) -> None:
        self._command = command
        self._timeout = timeout

    @property
    def command(self) -> str:
        return self._command

    def apply(self, action: RouteAction, destination: str, gateway: str) -> None:
        argv = [self._command, action.value, destination, gateway]
        LOG.debug("running %s", " ".join(argv))
        try:
            result = subprocess.run(
                argv,
                stdout=subprocess.DEVNULL,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            raise Timeout(self._command, self._timeout) from None
        except OSError as exc:
            raise SpawnFailed(self._command, exc) from exc

        if result.returncode < 0:
            raise Killed(self._command, -result.returncode)
        if result.returncode != 0:
            raise NonZeroExit(self._command, result.returncode)


class NetlinkRouteMutator(RouteMutator):
    """Program routes directly over rtnetlink using pyroute2."""

    def apply(self, action: RouteAction, destination: str, gateway: str) -> None:
        network = ipaddress.ip_network(destination, strict=False)
        family = socket.AF_INET if network.version == 4 else socket.AF_INET6
        command = "add" if action is RouteAction.ADD else "del"
        LOG.debug("netlink route %s %s via %s", command, destination, gateway)
        try:
            with pyroute2.IPRoute() as ipr:
                ipr.route(
                    command,
                    dst=str(network.network_address),
                    dst_len=network.prefixlen,
                    gateway=gateway,
                    family=family,
                )
        except pyroute2.NetlinkError as exc:
            raise NetlinkFailed(exc.code, str(exc)) from exc
