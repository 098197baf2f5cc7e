"""Derive the current next hop of a service from its live network state.

Some link types publish the router in a structured ``Router`` field, others
only embed it in the ``NetworkSignature`` string
(``IPv4.Router=192.0.2.1;IPv4.RouterHardwareAddress=...``).  Both are handled
by an ordered list of strategies; the first one returning a value wins.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from .routes import AddressFamily, ServiceGatewaySet

LOG = logging.getLogger(__name__)


class RouterFieldStrategy:
    """Use the explicit ``Router`` field of the state record."""

    def resolve(self, family: AddressFamily, state: Mapping[str, Any]) -> Optional[str]:
        router = state.get("Router")
        if isinstance(router, str) and router:
            return router
        return None


class NetworkSignatureStrategy:
    """Scan ``NetworkSignature`` for a ``<Family>.Router=<value>`` token."""

    def resolve(self, family: AddressFamily, state: Mapping[str, Any]) -> Optional[str]:
        signature = state.get("NetworkSignature")
        if not isinstance(signature, str):
            return None
        prefix = f"{family.value}.Router="
        for token in signature.split(";"):
            if token.startswith(prefix):
                return token[len(prefix):]
        return None


DEFAULT_STRATEGIES = (RouterFieldStrategy(), NetworkSignatureStrategy())


class GatewayResolver:
    def __init__(self, strategies: Sequence = DEFAULT_STRATEGIES) -> None:
        self._strategies = tuple(strategies)

    def resolve_family(self, family: AddressFamily, state: Any) -> Optional[str]:
        if not isinstance(state, Mapping):
            return None
        for strategy in self._strategies:
            router = strategy.resolve(family, state)
            if router:
                LOG.debug(
                    "%s router %s found by %s", family.value, router, type(strategy).__name__
                )
                return router
        return None

    def resolve(self, ipv4_state: Any, ipv6_state: Any) -> ServiceGatewaySet:
        return ServiceGatewaySet(
            ipv4_router=self.resolve_family(AddressFamily.IPV4, ipv4_state),
            ipv6_router=self.resolve_family(AddressFamily.IPV6, ipv6_state),
        )


def resolve_gateways(ipv4_state: Any, ipv6_state: Any) -> ServiceGatewaySet:
    """Resolve both families with the default strategy order."""

    return GatewayResolver().resolve(ipv4_state, ipv6_state)
