"""Service layer for the strategy host.

This package exposes the modular services the runner is built on.
"""

from .event_bus import EventBus  # noqa: F401
