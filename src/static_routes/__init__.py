"""Static route reconciliation engine.

This package keeps administrator-defined static routes, bound to named
network services, installed in the kernel routing table while the network
configuration changes underneath them.  It is self-contained and pure Python
apart from the mutation backends so the core algorithm can be exercised in
unit tests without touching the host routing table.

The building blocks are:

* :func:`static_routes.destination.parse_destination` to turn
  ``address[/prefix]`` strings into masked destinations;
* :mod:`static_routes.gateway` to find the current next hop of a service;
* :mod:`static_routes.mutator` to add or remove one kernel route; and
* :class:`static_routes.reconciler.StaticRouteReconciler`, which diffs
  desired, installed and reachable routes and converges them.
"""

from .context import RouteContext  # noqa: F401
from .destination import parse_destination  # noqa: F401
from .reconciler import StaticRouteReconciler  # noqa: F401

__all__ = ["RouteContext", "StaticRouteReconciler", "parse_destination"]
