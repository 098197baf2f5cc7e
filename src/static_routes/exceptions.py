"""Exception hierarchy shared by the static route engine and its tools."""

from __future__ import annotations

from typing import Optional


class StaticRouteError(Exception):
    """Base class for every error raised by this package."""


class InvalidAddress(StaticRouteError):
    def __init__(self, text: str) -> None:
        super().__init__(f'bad address format "{text}"')
        self.text = text


class UnknownService(StaticRouteError):
    def __init__(self, name: str) -> None:
        super().__init__(f"cannot find service {name}")
        self.name = name


class NoSuchRoute(StaticRouteError):
    def __init__(self, destination: str, service: str) -> None:
        super().__init__(f"no such route {destination} for service {service}")
        self.destination = destination
        self.service = service


class LockUnavailable(StaticRouteError):
    """The cross-process lock guarding a store could not be acquired."""


class PersistenceFailed(StaticRouteError):
    """A store could not be read from or written to disk."""


class RouteError(StaticRouteError):
    """A single kernel route mutation failed.

    The reconciler never aborts a pass because of one of these; the route is
    left unconverged and retried on the next pass for the service.
    """


class SpawnFailed(RouteError):
    def __init__(self, command: str, reason: OSError) -> None:
        super().__init__(f"unable to spawn {command} - {reason}")
        self.command = command
        self.reason = reason


class Killed(RouteError):
    def __init__(self, command: str, signal: int) -> None:
        super().__init__(f"{command} appears to have been killed - signal {signal}")
        self.command = command
        self.signal = signal


class NonZeroExit(RouteError):
    def __init__(self, command: str, code: int) -> None:
        super().__init__(f"{command} failed with code {code}")
        self.command = command
        self.code = code


class Timeout(RouteError):
    def __init__(self, command: str, seconds: Optional[float]) -> None:
        super().__init__(f"{command} did not exit within {seconds}s")
        self.command = command
        self.seconds = seconds


class NetlinkFailed(RouteError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"netlink request failed with code {code}: {message}")
        self.code = code
