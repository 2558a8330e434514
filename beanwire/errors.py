#!/usr/bin/env python3

"""
Wiring Error Taxonomy

Errors carried on the failure side of registry, controller and loader Results.
They are exceptions so that ``Failure.get_or_raise()`` can raise them as-is.
"""

from typing import List, Sequence, Tuple


class WiringError(Exception):
    """Base class for every container error"""


class NotFoundError(WiringError):
    """Requested name is not present in the registry"""

    def __init__(self, name: str):
        super().__init__(f"No entry named '{name}'")
        self.name = name


class ClosedError(WiringError):
    """Registry was used after teardown started"""

    def __init__(self, name: str = ""):
        message = "Registry is closed"
        if name:
            message = f"Cannot resolve '{name}': registry is closed"
        super().__init__(message)
        self.name = name


class AlreadyClosedError(WiringError):
    """Lifecycle operation attempted after the context was closed"""


class CycleError(WiringError):
    """Dependency graph contains a cycle"""

    def __init__(self, cycle: Sequence[str]):
        super().__init__(f"Circular dependency detected: {' -> '.join(cycle)}")
        self.cycle: List[str] = list(cycle)


class MissingDependencyError(WiringError):
    """An entry references a name that was never declared"""

    def __init__(self, missing: Sequence[Tuple[str, str]]):
        details = ", ".join(f"'{entry}' needs '{dep}'" for entry, dep in missing)
        super().__init__(f"Undeclared dependencies: {details}")
        self.missing: List[Tuple[str, str]] = list(missing)


class DuplicateEntryError(WiringError):
    """The same name was declared more than once"""

    def __init__(self, names: Sequence[str]):
        super().__init__(f"Duplicate entry names: {sorted(set(names))}")
        self.names = sorted(set(names))


class FactoryError(WiringError):
    """A factory, injection step or init hook raised while wiring an entry"""

    def __init__(self, name: str, cause: BaseException):
        super().__init__(f"Failed to wire '{name}': {cause}")
        self.name = name
        self.cause = cause


class TypeMismatchError(WiringError):
    """Resolved instance is not of the requested type"""

    def __init__(self, name: str, expected: type, actual: type):
        super().__init__(
            f"Entry '{name}' is {actual.__qualname__}, expected {expected.__qualname__}"
        )
        self.name = name
        self.expected = expected
        self.actual = actual


class ConfigError(WiringError):
    """Configuration source could not be read, parsed or validated"""
