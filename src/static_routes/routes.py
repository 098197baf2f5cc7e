"""Data structures for static routes.

These light-weight dataclasses describe destinations, configured routes and
the routes the reconciler believes are installed in the kernel.  Persisted
representations use plain mappings with camelCase keys; conversion happens in
the ``from_dict``/``to_dict`` helpers so the reconciliation logic only ever
sees typed records.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional


class AddressFamily(Enum):
    """Address families a static route can be configured for."""

    IPV4 = "IPv4"
    IPV6 = "IPv6"

    @property
    def width(self) -> int:
        return 32 if self is AddressFamily.IPV4 else 128

    @classmethod
    def parse(cls, value: Any) -> Optional["AddressFamily"]:
        """Return the family named by ``value`` or ``None`` if unknown."""

        for family in cls:
            if family.value == value:
                return family
        return None


def route_key(family: AddressFamily, address: str, prefix_length: int) -> str:
    return f"{family.value}/{address}/{prefix_length}"


@dataclass(frozen=True)
class Destination:
    """A canonical route destination.

    Attributes
    ----------
    family:
        IPv4 or IPv6.
    network_address:
        Packed address bytes, already masked to ``prefix_length`` bits.
    prefix_length:
        Number of network bits, within ``[0, family.width]``.
    """

    family: AddressFamily
    network_address: bytes
    prefix_length: int

    @property
    def address(self) -> str:
        return str(ipaddress.ip_address(self.network_address))

    def __str__(self) -> str:
        return f"{self.address}/{self.prefix_length}"


@dataclass(frozen=True)
class DesiredRoute:
    """A configured static route for one service."""

    family: AddressFamily
    address: str
    prefix_length: int

    @property
    def key(self) -> str:
        return route_key(self.family, self.address, self.prefix_length)

    @property
    def destination(self) -> str:
        return f"{self.address}/{self.prefix_length}"

    @classmethod
    def from_destination(cls, destination: Destination) -> "DesiredRoute":
        return cls(
            family=destination.family,
            address=destination.address,
            prefix_length=destination.prefix_length,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DesiredRoute":
        family = AddressFamily.parse(data.get("addressFamily"))
        if family is None:
            raise ValueError(f"unsupported address family {data.get('addressFamily')!r}")
        address = data.get("address")
        if not isinstance(address, str) or not address:
            raise ValueError("route entry missing 'address'")
        return cls(family=family, address=address, prefix_length=int(data["prefixLength"]))

    def to_dict(self) -> dict:
        return {
            "addressFamily": self.family.value,
            "address": self.address,
            "prefixLength": self.prefix_length,
        }


@dataclass(frozen=True)
class ActiveRouteEntry:
    """A route the reconciler last successfully installed."""

    family: AddressFamily
    address: str
    prefix_length: int
    router: str

    @property
    def key(self) -> str:
        return route_key(self.family, self.address, self.prefix_length)

    @property
    def destination(self) -> str:
        return f"{self.address}/{self.prefix_length}"

    @classmethod
    def for_route(cls, route: DesiredRoute, router: str) -> "ActiveRouteEntry":
        return cls(
            family=route.family,
            address=route.address,
            prefix_length=route.prefix_length,
            router=router,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ActiveRouteEntry":
        family = AddressFamily.parse(data.get("addressFamily"))
        address = data.get("address")
        router = data.get("router")
        prefix_length = data.get("prefixLength")
        if family is None or not address or not router or prefix_length is None:
            raise ValueError(f"incomplete active route entry {dict(data)!r}")
        return cls(
            family=family,
            address=str(address),
            prefix_length=int(prefix_length),
            router=str(router),
        )

    def to_dict(self) -> dict:
        return {
            "addressFamily": self.family.value,
            "address": self.address,
            "prefixLength": self.prefix_length,
            "router": self.router,
        }


@dataclass(frozen=True)
class ServiceGatewaySet:
    """Next hops currently available to a service, per address family."""

    ipv4_router: Optional[str] = None
    ipv6_router: Optional[str] = None

    def router_for(self, family: AddressFamily) -> Optional[str]:
        if family is AddressFamily.IPV4:
            return self.ipv4_router
        return self.ipv6_router


@dataclass(frozen=True)
class Service:
    """A network service as listed in the configuration database."""

    id: str
    name: str
