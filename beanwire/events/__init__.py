"""
Event System Module

Lifecycle events published by the controller around startup and shutdown.
"""

from .event_bus import (
    EventBus,
    EventHandler,
    LifecycleEvent,
    ContextStartedEvent,
    ContextClosingEvent,
    ContextClosedEvent
)

__all__ = [
    "EventBus",
    "EventHandler",
    "LifecycleEvent",
    "ContextStartedEvent",
    "ContextClosingEvent",
    "ContextClosedEvent"
]
