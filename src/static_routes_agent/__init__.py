"""Event plumbing between state watchers and the static route reconciler.

Watchers report batches of changed state keys to a
:class:`~static_routes_agent.aggregator.ChangeAggregator`, which reduces them
to service identifiers and publishes one
:class:`~static_routes_agent.events.ServiceChanged` event per service through
the :class:`~static_routes_agent.registry.HandlerRegistry`.
"""

from .aggregator import ChangeAggregator  # noqa: F401
from .events import ServiceChanged  # noqa: F401
from .registry import HandlerRegistry  # noqa: F401

__all__ = [
    "ChangeAggregator",
    "HandlerRegistry",
    "ServiceChanged",
]
