"""
beanwire

Object-wiring container with ordered lifecycle hooks and graceful shutdown
signaling.
"""

from .errors import (
    WiringError,
    NotFoundError,
    ClosedError,
    AlreadyClosedError,
    CycleError,
    MissingDependencyError,
    DuplicateEntryError,
    FactoryError,
    TypeMismatchError,
    ConfigError
)
from .functional import Result, Success, Failure
from .registry import EntrySpec, ObjectEntry, Registry, TeardownReport
from .config import ContainerConfig, EntryConfig, load_config
from .events import EventBus, ContextStartedEvent, ContextClosingEvent, ContextClosedEvent
from .lifecycle import LifecycleController, LifecycleState, OneShotLatch, ShutdownSignal, ShutdownHook

__version__ = "0.1.0"

__all__ = [
    "WiringError",
    "NotFoundError",
    "ClosedError",
    "AlreadyClosedError",
    "CycleError",
    "MissingDependencyError",
    "DuplicateEntryError",
    "FactoryError",
    "TypeMismatchError",
    "ConfigError",
    "Result",
    "Success",
    "Failure",
    "EntrySpec",
    "ObjectEntry",
    "Registry",
    "TeardownReport",
    "ContainerConfig",
    "EntryConfig",
    "load_config",
    "EventBus",
    "ContextStartedEvent",
    "ContextClosingEvent",
    "ContextClosedEvent",
    "LifecycleController",
    "LifecycleState",
    "OneShotLatch",
    "ShutdownSignal",
    "ShutdownHook"
]
