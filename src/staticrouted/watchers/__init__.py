"""Watcher implementations used by the static route daemon."""

from .file import StateFileWatcher  # noqa: F401

__all__ = ["StateFileWatcher"]
