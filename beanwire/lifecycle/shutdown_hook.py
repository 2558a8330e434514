#!/usr/bin/env python3

"""
Process Shutdown Hook

Runs a close action when the process receives SIGINT/SIGTERM or exits
normally. Signal handlers only hand the action to a dedicated thread; the
action itself must be idempotent because both triggers can fire.
"""

import atexit
import logging
import signal
import threading
from typing import Any, Callable, Dict, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownHook:
    """Binds a close action to OS signals and interpreter exit"""

    def __init__(self,
                 action: Callable[[], Any],
                 signals: Sequence[signal.Signals] = DEFAULT_SIGNALS,
                 at_exit: bool = True,
                 thread_name: str = "beanwire-shutdown"):
        self._action = action
        self._signals = tuple(signals)
        self._at_exit = at_exit
        self._thread_name = thread_name
        self._previous: Dict[signal.Signals, Any] = {}
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._installed = False
        self.reason: Optional[str] = None

    @property
    def installed_signals(self) -> Sequence[signal.Signals]:
        return tuple(self._previous)

    @property
    def thread(self) -> Optional[threading.Thread]:
        return self._thread

    def install(self) -> None:
        """Install signal handlers and the exit hook.

        Signal handlers can only be installed from the main thread; elsewhere
        the signals are skipped with a warning and only the exit hook is used.
        """
        if self._installed:
            return

        for sig in self._signals:
            try:
                self._previous[sig] = signal.signal(sig, self._handle_signal)
            except ValueError as e:
                logger.warning(f"Cannot install handler for {sig.name}: {e}")
                break

        if self._at_exit:
            atexit.register(self._run_at_exit)

        self._installed = True
        installed = [sig.name for sig in self._previous]
        logger.info(f"Shutdown hook installed (signals: {installed}, at_exit: {self._at_exit})")

    def uninstall(self) -> None:
        """Restore previous signal handlers and drop the exit hook"""
        if not self._installed:
            return
        self._restore_signals()
        if self._at_exit:
            atexit.unregister(self._run_at_exit)
        self._installed = False
        logger.debug("Shutdown hook uninstalled")

    def trigger(self, reason: str = "manual") -> threading.Thread:
        """Run the action on the shutdown thread; later triggers reuse it"""
        with self._lock:
            if self._thread is None:
                self.reason = reason
                self._thread = threading.Thread(
                    target=self._action,
                    name=self._thread_name
                )
                self._thread.start()
                logger.info(f"Shutdown triggered ({reason})")
            return self._thread

    def _handle_signal(self, signum: int, frame: Any) -> None:
        name = signal.Signals(signum).name
        logger.info(f"Signal {name} received, initiating shutdown...")
        # A second signal falls through to the previous handler
        self._restore_signals()
        self.trigger(name)

    def _restore_signals(self) -> None:
        for sig, previous in list(self._previous.items()):
            try:
                signal.signal(sig, previous)
            except (ValueError, TypeError) as e:
                logger.warning(f"Cannot restore handler for {sig.name}: {e}")
        self._previous.clear()

    def _run_at_exit(self) -> None:
        logger.debug("Interpreter exit, running shutdown action")
        self._action()
