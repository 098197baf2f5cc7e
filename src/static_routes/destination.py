"""Parse user supplied ``address[/prefix]`` strings into destinations."""

from __future__ import annotations

import ipaddress
import re
from typing import Optional, Tuple, Union

from .exceptions import InvalidAddress
from .routes import AddressFamily, Destination

_PREFIX_RE = re.compile(r"\s*([+-]?\d+)")


def _split(text: str) -> Tuple[str, Optional[int]]:
    address, sep, suffix = text.partition("/")
    if not sep:
        return address, None
    match = _PREFIX_RE.match(suffix)
    if match is None:
        return address, None
    return address, int(match.group(1))


def _parse_address(
    text: str,
) -> Tuple[AddressFamily, Union[ipaddress.IPv4Address, ipaddress.IPv6Address]]:
    try:
        return AddressFamily.IPV4, ipaddress.IPv4Address(text)
    except ValueError:
        pass
    # Scoped literals (fe80::1%en0) name an interface, not a destination.
    if "%" not in text:
        try:
            return AddressFamily.IPV6, ipaddress.IPv6Address(text)
        except ValueError:
            pass
    raise InvalidAddress(text)


def parse_destination(text: str) -> Destination:
    """Parse ``text`` into a masked :class:`Destination`.

    A missing or unparsable prefix selects the full width of the family, and
    out of range prefixes are clamped.  Host bits are always zeroed so that
    ``192.168.5.37/24`` and ``192.168.5.0/24`` compare equal.

    Raises :class:`InvalidAddress` when the address is neither IPv4 nor IPv6.
    """

    address_text, prefix = _split(text)
    try:
        family, address = _parse_address(address_text)
    except InvalidAddress:
        raise InvalidAddress(text) from None

    if prefix is None:
        prefix = family.width
    prefix = max(0, min(prefix, family.width))

    network = ipaddress.ip_network(f"{address}/{prefix}", strict=False)
    return Destination(
        family=family,
        network_address=network.network_address.packed,
        prefix_length=prefix,
    )
