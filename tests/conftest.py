#!/usr/bin/env python3

"""
Test Configuration and Fixtures

Provides shared fixtures for unit, integration and end-to-end tests.
"""

import signal
from pathlib import Path

import pytest

from beanwire.events import EventBus
from beanwire.lifecycle import LifecycleController

from tests.test_utils import CallLog, recording_spec

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def call_log():
    """Ordered record of factory/init/teardown calls"""
    return CallLog()


@pytest.fixture
def chain_specs(call_log):
    """A <- B <- C, declared out of order"""
    return [
        recording_spec(call_log, "c", ["b"]),
        recording_spec(call_log, "a"),
        recording_spec(call_log, "b", ["a"]),
    ]


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def controller(event_bus):
    """Lifecycle controller that is always closed after the test"""
    ctl = LifecycleController(name="test", event_bus=event_bus)
    yield ctl
    ctl.unregister_shutdown_hook()
    ctl.close_and_report()


@pytest.fixture(autouse=True)
def restore_signal_handlers():
    """Put SIGINT/SIGTERM handlers back if a test left its own installed"""
    saved = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
    yield
    for sig, handler in saved.items():
        if signal.getsignal(sig) is not handler and handler is not None:
            signal.signal(sig, handler)


# Markers for different test types
def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "slow: Slow running tests")
    config.addinivalue_line("markers", "lifecycle: Lifecycle controller tests")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test file location"""
    for item in items:
        path = item.path.parent.name
        if path == "unit":
            item.add_marker(pytest.mark.unit)
        elif path == "integration":
            item.add_marker(pytest.mark.integration)
        elif path == "e2e":
            item.add_marker(pytest.mark.e2e)
        elif path == "property_based":
            item.add_marker(pytest.mark.property)

        if "close" in item.name or "shutdown" in item.name:
            item.add_marker(pytest.mark.lifecycle)
