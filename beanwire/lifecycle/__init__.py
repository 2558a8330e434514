"""
Lifecycle Module

Context startup, exactly-once shutdown and shutdown signaling.
"""

from .controller import LifecycleController, LifecycleState
from .latch import OneShotLatch, ShutdownSignal
from .shutdown_hook import ShutdownHook

__all__ = [
    "LifecycleController",
    "LifecycleState",
    "OneShotLatch",
    "ShutdownSignal",
    "ShutdownHook"
]
