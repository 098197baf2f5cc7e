"""Observable state store key layout."""

from __future__ import annotations

import re
from typing import Optional

from .routes import AddressFamily

DEFAULT_NAMESPACE = "org.staticroutes.StaticRoutes"

SETUP_SERVICE_PATTERN = r"^Setup:/Network/Service/.*"
STATE_SERVICE_PATTERN = r"^State:/Network/Service/.*"
WATCH_PATTERNS = (SETUP_SERVICE_PATTERN, STATE_SERVICE_PATTERN)

_SERVICE_KEY_RE = re.compile(r"^(?:Setup|State):/Network/Service/([^/]+)(?:/|$)")


def service_state_key(service_id: str, family: AddressFamily) -> str:
    return f"State:/Network/Service/{service_id}/{family.value}"


def service_setup_key(service_id: str, family: AddressFamily) -> str:
    return f"Setup:/Network/Service/{service_id}/{family.value}"


def active_routes_key(namespace: str, service_id: str) -> str:
    return f"State:/{namespace}/Service/{service_id}"


def service_id_from_key(key: str) -> Optional[str]:
    """Return the service ID embedded in ``key`` or ``None``."""

    match = _SERVICE_KEY_RE.match(key)
    if match is None:
        return None
    return match.group(1)
