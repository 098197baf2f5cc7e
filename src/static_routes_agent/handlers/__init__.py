"""Handlers exposed to the registry."""

from .base import ServiceHandler  # noqa: F401
from .reconciler_adapter import ReconcilerAdapter, build_reconciler_adapter  # noqa: F401

__all__ = [
    "ServiceHandler",
    "ReconcilerAdapter",
    "build_reconciler_adapter",
]
