"""Runtime context handed to the reconciler."""

from __future__ import annotations

from dataclasses import dataclass

from .keys import DEFAULT_NAMESPACE
from .mutator import RouteMutator
from .stores import PreferencesStore, StateStore


@dataclass
class RouteContext:
    """Handles built once at startup and shared by every reconciliation pass."""

    preferences: PreferencesStore
    state: StateStore
    mutator: RouteMutator
    namespace: str = DEFAULT_NAMESPACE
