#!/usr/bin/env python3

"""
Lifecycle Controller

Owns one registry from wiring to teardown:

    NOT_STARTED -> ACTIVE -> CLOSING -> CLOSED

close_and_report() performs teardown exactly once no matter how many threads
(main flow, signal-triggered shutdown thread, exit hook) call it; every caller
gets the same outcome. await_close() blocks on the latched ShutdownSignal, so
waiting after close has completed returns immediately.
"""

import asyncio
import logging
import signal
import threading
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence

from ..config.schema import ContainerConfig, ContextSource
from ..errors import AlreadyClosedError, WiringError
from ..events import EventBus, LifecycleEvent, ContextStartedEvent, ContextClosingEvent, ContextClosedEvent
from ..functional import Result, Success, Failure
from ..registry import EntrySpec, Registry
from .latch import ShutdownSignal
from .shutdown_hook import DEFAULT_SIGNALS, ShutdownHook

logger = logging.getLogger(__name__)

CloseListener = Callable[[Optional[Registry]], Any]


class LifecycleState(Enum):
    """Context lifecycle states, forward transitions only"""
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    CLOSING = "closing"
    CLOSED = "closed"


class LifecycleController:
    """Starts a registry and closes it exactly once"""

    def __init__(self, name: str = "context", event_bus: Optional[EventBus] = None):
        self.name = name
        self.event_bus = event_bus or EventBus()
        self._state = LifecycleState.NOT_STARTED
        self._registry: Optional[Registry] = None
        self._lock = threading.Lock()
        self._close_claimed = False
        self._starting = False
        self._closing_thread: Optional[int] = None
        self._signal = ShutdownSignal()
        self._close_listeners: List[CloseListener] = []
        self._shutdown_hook: Optional[ShutdownHook] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> LifecycleState:
        with self._lock:
            return self._state

    @property
    def registry(self) -> Optional[Registry]:
        return self._registry

    @property
    def is_active(self) -> bool:
        registry = self._registry
        return registry is not None and registry.is_active

    @property
    def shutdown_signal(self) -> ShutdownSignal:
        return self._signal

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def start(self, config: ContextSource) -> Result[Registry, WiringError]:
        """Build and wire a registry from a ContainerConfig or entry specs.

        Factories run without the controller lock, so they may read ``state``.
        A close claimed while wiring is in progress wins: the fresh registry
        is torn down and AlreadyClosedError returned.
        """
        with self._lock:
            if self._close_claimed:
                return Failure(AlreadyClosedError(f"Context '{self.name}' is already closed"))
            if self._starting or self._state is not LifecycleState.NOT_STARTED:
                return Failure(WiringError(f"Context '{self.name}' is already started"))
            self._starting = True

        try:
            logger.info(f"Starting context '{self.name}'")
            registry_result = self._to_specs(config).flat_map(Registry.from_specs)
        finally:
            with self._lock:
                self._starting = False

        if registry_result.is_failure():
            logger.error(f"Context '{self.name}' failed to start: {registry_result.get_error()}")
            return Failure(registry_result.get_error())
        registry = registry_result.get_value()

        with self._lock:
            closed_meanwhile = self._close_claimed
            if not closed_meanwhile:
                self._registry = registry
                self._state = LifecycleState.ACTIVE

        if closed_meanwhile:
            logger.warning(f"Context '{self.name}' was closed while starting, tearing down")
            registry.close()
            return Failure(AlreadyClosedError(f"Context '{self.name}' is already closed"))

        self._publish(ContextStartedEvent(source=self.name, entry_names=registry.wiring_order))
        logger.info(f"✅ Context '{self.name}' active")
        return Success(registry)

    @staticmethod
    def _to_specs(config: ContextSource) -> Result[List[EntrySpec], WiringError]:
        if isinstance(config, ContainerConfig):
            return config.to_specs()
        specs = list(config)
        for spec in specs:
            if not isinstance(spec, EntrySpec):
                return Failure(WiringError(f"Expected EntrySpec, got {type(spec).__qualname__}"))
        return Success(specs)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def add_close_listener(self, listener: CloseListener) -> None:
        """Register a callback run after registry teardown, before waiters are released"""
        self._close_listeners.append(listener)

    def close_and_report(self) -> bool:
        """Close the registry once and return whether it ended inactive.

        Callers that lose the race block until the winning call has latched
        the outcome, so all of them observe the final state.
        """
        with self._lock:
            performer = not self._close_claimed
            if performer:
                self._close_claimed = True
                self._closing_thread = threading.get_ident()
                registry = self._registry
                if registry is not None:
                    self._state = LifecycleState.CLOSING
            elif self._closing_thread == threading.get_ident():
                # Re-entered from a close listener or event handler
                return not self.is_active

        if not performer:
            return self._signal.wait()

        failures: List[str] = []
        try:
            logger.info(f"Shutting down context '{self.name}' ...")
            if registry is not None:
                self._publish(ContextClosingEvent(source=self.name))
                report_result = registry.close()
                if report_result.is_success():
                    failures = sorted(report_result.get_value().failures)
            self._run_close_listeners(registry)
        finally:
            outcome = registry is None or not registry.is_active
            with self._lock:
                self._state = LifecycleState.CLOSED
            logger.info(f"Shutdown completed with "
                        f"{'OK/inactive' if outcome else 'FAIL/still active'}.")
            self._publish(ContextClosedEvent(
                source=self.name,
                inactive=outcome,
                teardown_failures=failures
            ))
            self._signal.set(outcome)

        return outcome

    def _run_close_listeners(self, registry: Optional[Registry]) -> None:
        for listener in list(self._close_listeners):
            try:
                listener(registry)
            except Exception as e:
                logger.error(f"Close listener failed: {e}")

    def await_close(self, timeout: Optional[float] = None) -> bool:
        """Block until close_and_report() completed and return its outcome.

        Raises:
            TimeoutError: timeout given and elapsed first
        """
        return self._signal.wait(timeout)

    async def await_close_async(self) -> bool:
        """Await the close outcome without parking a thread; cancellable"""
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def _resolve(outcome: bool) -> None:
            if not future.done():
                future.set_result(outcome)

        def _on_closed(outcome: bool) -> None:
            loop.call_soon_threadsafe(_resolve, outcome)

        self._signal.add_callback(_on_closed)
        try:
            return await future
        finally:
            self._signal.remove_callback(_on_closed)

    # ------------------------------------------------------------------
    # Shutdown triggers
    # ------------------------------------------------------------------

    def register_shutdown_hook(self,
                               signals: Sequence[signal.Signals] = DEFAULT_SIGNALS,
                               at_exit: bool = True) -> ShutdownHook:
        """Close the context on SIGINT/SIGTERM and at interpreter exit"""
        if self._shutdown_hook is None:
            self._shutdown_hook = ShutdownHook(self.close_and_report, signals=signals, at_exit=at_exit)
            self._shutdown_hook.install()
        return self._shutdown_hook

    def unregister_shutdown_hook(self) -> None:
        if self._shutdown_hook is not None:
            self._shutdown_hook.uninstall()
            self._shutdown_hook = None

    def _publish(self, event: LifecycleEvent) -> None:
        result = self.event_bus.publish(event)
        if result.is_failure():
            logger.warning(f"Listener error on {event.event_type}: {result.get_error()}")

    def __enter__(self) -> 'LifecycleController':
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close_and_report()
        self.unregister_shutdown_hook()
        return False

    def __repr__(self) -> str:
        return f"LifecycleController(name={self.name!r}, state={self.state.value})"
