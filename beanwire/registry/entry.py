#!/usr/bin/env python3

"""
Entry Specifications

EntrySpec describes how to build one named object; ObjectEntry is the wired
record the registry keeps for it.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

TeardownHook = Callable[[Any], None]
InitHook = Callable[[Any], None]

# Conventional teardown methods, checked in order when no hook is declared
TEARDOWN_METHODS = ("dispose", "cleanup")


@dataclass
class EntrySpec:
    """Declaration of a named object and the entries it is built from.

    ``dependencies`` are resolved in order and passed positionally to
    ``factory``. ``properties`` maps an attribute to the name of another entry
    and is injected after construction, through ``set_<attribute>`` when the
    instance has such a method. ``values`` are literal attributes injected the
    same way.
    """
    name: str
    factory: Callable[..., Any]
    dependencies: List[str] = field(default_factory=list)
    properties: Dict[str, str] = field(default_factory=dict)
    values: Dict[str, Any] = field(default_factory=dict)
    init: Optional[InitHook] = None
    teardown: Optional[TeardownHook] = None

    @property
    def edges(self) -> List[str]:
        """All entry names this spec needs, constructor dependencies first"""
        edges = list(self.dependencies)
        for ref in self.properties.values():
            if ref not in edges:
                edges.append(ref)
        return edges


@dataclass
class ObjectEntry:
    """A wired object owned by a registry"""
    name: str
    instance: Any
    dependencies: List[str] = field(default_factory=list)
    teardown: Optional[TeardownHook] = None

    def run_teardown(self) -> bool:
        """Runs the teardown hook; returns False when the entry has none"""
        hook = self.teardown or infer_teardown(self.instance)
        if hook is None:
            return False
        hook(self.instance)
        return True


@dataclass
class TeardownReport:
    """Outcome of Registry.close()"""
    torn_down: List[str] = field(default_factory=list)
    failures: Dict[str, Exception] = field(default_factory=dict)
    already_closed: bool = False

    @property
    def clean(self) -> bool:
        return not self.failures


def infer_teardown(instance: Any) -> Optional[TeardownHook]:
    for method_name in TEARDOWN_METHODS:
        method = getattr(instance, method_name, None)
        if callable(method):
            return lambda _instance, _method=method: _method()
    return None


def inject_attribute(instance: Any, attribute: str, value: Any) -> None:
    """Setter injection: prefers set_<attribute>() over plain assignment"""
    setter = getattr(instance, f"set_{attribute}", None)
    if callable(setter):
        setter(value)
    else:
        setattr(instance, attribute, value)
