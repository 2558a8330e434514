#!/usr/bin/env python3

"""
One-Shot Latch

A value that can be set at most once and releases every past and future
waiter. Used as the shutdown signal between the close path and await_close().
"""

import logging
import threading
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class OneShotLatch(Generic[T]):
    """Single-assignment value with blocking and callback observation"""

    def __init__(self):
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._value: Optional[T] = None
        self._callbacks: List[Callable[[T], None]] = []

    def set(self, value: T) -> bool:
        """Latch value; returns False if the latch was already set"""
        with self._lock:
            if self._event.is_set():
                return False
            self._value = value
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            self._run_callback(callback, value)
        return True

    def is_set(self) -> bool:
        return self._event.is_set()

    @property
    def value(self) -> Optional[T]:
        """Latched value, or None while unset"""
        return self._value

    def wait(self, timeout: Optional[float] = None) -> T:
        """Block until set and return the value.

        Raises:
            TimeoutError: timeout elapsed before the latch was set
        """
        if not self._event.wait(timeout):
            raise TimeoutError(f"Latch not set within {timeout}s")
        return self._value

    def add_callback(self, callback: Callable[[T], None]) -> None:
        """Run callback with the value once set; immediately if already set"""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
            value = self._value
        self._run_callback(callback, value)

    def remove_callback(self, callback: Callable[[T], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    @staticmethod
    def _run_callback(callback: Callable[[T], None], value: T) -> None:
        try:
            callback(value)
        except Exception as e:
            logger.error(f"Latch callback failed: {e}")


class ShutdownSignal(OneShotLatch[bool]):
    """Latch carrying whether the registry ended inactive"""
