"""
Registry Module

Named object container with dependency-ordered wiring and reverse teardown.
"""

from .entry import EntrySpec, ObjectEntry, TeardownReport
from .ordering import wiring_order, validate_graph
from .registry import Registry

__all__ = [
    "EntrySpec",
    "ObjectEntry",
    "TeardownReport",
    "Registry",
    "wiring_order",
    "validate_graph"
]
