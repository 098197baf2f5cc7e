"""File backed implementations of the preferences and state stores."""

from .preferences import PreferencesFile  # noqa: F401
from .state import StateFile  # noqa: F401

__all__ = ["PreferencesFile", "StateFile"]
