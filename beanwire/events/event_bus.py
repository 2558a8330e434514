#!/usr/bin/env python3

"""
Lifecycle Event Bus

Synchronous publish/subscribe for context lifecycle notifications. Handlers run
on the publishing thread, in subscription order; a failing handler is logged
and does not stop the others.
"""

import logging
import threading
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..functional import Result, Success, Failure

logger = logging.getLogger(__name__)


@dataclass
class LifecycleEvent(ABC):
    """Base class for all lifecycle events"""
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: float = field(default_factory=time.time)
    source: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    @abstractmethod
    def event_type(self) -> str:
        pass


@dataclass
class ContextStartedEvent(LifecycleEvent):
    """Fired once every entry has been wired"""
    entry_names: List[str] = field(default_factory=list)

    @property
    def event_type(self) -> str:
        return "context.started"


@dataclass
class ContextClosingEvent(LifecycleEvent):
    """Fired before teardown begins; entries are still resolvable"""

    @property
    def event_type(self) -> str:
        return "context.closing"


@dataclass
class ContextClosedEvent(LifecycleEvent):
    """Fired after teardown with the final outcome"""
    inactive: bool = True
    teardown_failures: List[str] = field(default_factory=list)

    @property
    def event_type(self) -> str:
        return "context.closed"


EventHandler = Callable[[LifecycleEvent], Any]


class EventBus:
    """Routes lifecycle events to subscribed handlers"""

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe to events of a specific type"""
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Handler subscribed to {event_type}")

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        with self._lock:
            try:
                self._handlers.get(event_type, []).remove(handler)
                logger.debug(f"Handler unsubscribed from {event_type}")
            except ValueError:
                logger.warning(f"Handler not found for {event_type}")

    def handler_count(self, event_type: str) -> int:
        with self._lock:
            return len(self._handlers.get(event_type, []))

    def publish(self, event: LifecycleEvent) -> Result[int, Exception]:
        """Deliver event to its handlers; Success carries the delivery count.

        Handlers may return a Result; a Failure is logged like a raised
        exception. The first handler error becomes the Failure value once all
        handlers have run.
        """
        with self._lock:
            handlers = list(self._handlers.get(event.event_type, []))

        delivered = 0
        first_error: Optional[Exception] = None

        for handler in handlers:
            try:
                outcome = handler(event)
                if isinstance(outcome, Result) and outcome.is_failure():
                    raise RuntimeError(str(outcome.get_error()))
                delivered += 1
            except Exception as e:
                logger.error(f"Handler failed for {event.event_type}: {e}")
                if first_error is None:
                    first_error = e

        logger.debug(f"Event published: {event.event_type} (ID: {event.event_id}, "
                     f"handlers: {delivered}/{len(handlers)})")

        if first_error is not None:
            return Failure(first_error)
        return Success(delivered)
