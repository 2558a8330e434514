#!/usr/bin/env python3

"""
Object Registry

Holds named objects, wires them in dependency order and tears them down in
reverse. The entry set is fixed once wiring succeeds; after close() every
resolution fails with ClosedError.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from ..errors import ClosedError, FactoryError, NotFoundError, TypeMismatchError, WiringError
from ..functional import Result, Success, Failure
from .entry import EntrySpec, ObjectEntry, TeardownReport, inject_attribute
from .ordering import wiring_order

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Registry:
    """Named object container with ordered wiring and teardown"""

    def __init__(self):
        self._entries: Dict[str, ObjectEntry] = {}
        self._order: List[str] = []
        self._lock = threading.RLock()
        self._wired = False
        self._closing = False
        self._closed = False

    @classmethod
    def from_specs(cls, specs: Sequence[EntrySpec]) -> Result['Registry', WiringError]:
        return cls().wire_all(specs)

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def wire_all(self, specs: Sequence[EntrySpec]) -> Result['Registry', WiringError]:
        """Instantiate and inject every spec in dependency order.

        The graph is validated before any factory runs, so a CycleError,
        MissingDependencyError or DuplicateEntryError leaves nothing built.
        If a factory, injection or init hook raises, the entries wired so far
        are torn down in reverse order and a FactoryError is returned.
        """
        specs = list(specs)
        with self._lock:
            if self._closing or self._closed:
                return Failure(ClosedError())
            if self._wired:
                return Failure(WiringError("Registry is already wired"))

            order_result = wiring_order(specs)
            if order_result.is_failure():
                logger.error(f"Wiring aborted: {order_result.get_error()}")
                return Failure(order_result.get_error())

            by_name = {spec.name: spec for spec in specs}
            for name in order_result.get_value():
                entry_result = self._wire_entry(by_name[name])
                if entry_result.is_failure():
                    self._rollback()
                    return Failure(entry_result.get_error())
                self._entries[name] = entry_result.get_value()
                self._order.append(name)

            self._wired = True
            logger.info(f"Wired {len(self._order)} entries: {self._order}")
            return Success(self)

    def _wire_entry(self, spec: EntrySpec) -> Result[ObjectEntry, WiringError]:
        try:
            args = [self._entries[dep].instance for dep in spec.dependencies]
            instance = spec.factory(*args)

            for attribute, ref in spec.properties.items():
                inject_attribute(instance, attribute, self._entries[ref].instance)
            for attribute, value in spec.values.items():
                inject_attribute(instance, attribute, value)

            if spec.init is not None:
                spec.init(instance)

        except Exception as e:
            logger.error(f"Failed to wire entry '{spec.name}': {e}")
            return Failure(FactoryError(spec.name, e))

        logger.debug(f"Wired entry: {spec.name} ({type(instance).__qualname__})")
        return Success(ObjectEntry(
            name=spec.name,
            instance=instance,
            dependencies=spec.edges,
            teardown=spec.teardown
        ))

    def _rollback(self) -> None:
        partial = self._teardown_entries()
        logger.warning(f"Rolled back partially wired entries: {partial.torn_down}")
        self._entries.clear()
        self._order.clear()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, name: str, expected_type: Optional[Type[T]] = None) -> Result[Any, WiringError]:
        """Look up a wired object by name"""
        with self._lock:
            if self._closing or self._closed:
                return Failure(ClosedError(name))

            entry = self._entries.get(name)
            if entry is None:
                return Failure(NotFoundError(name))

            instance = entry.instance
            if expected_type is not None and not isinstance(instance, expected_type):
                return Failure(TypeMismatchError(name, expected_type, type(instance)))

            return Success(instance)

    def contains(self, name: str) -> bool:
        with self._lock:
            return name in self._entries

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._entries)

    @property
    def wiring_order(self) -> List[str]:
        with self._lock:
            return list(self._order)

    @property
    def is_active(self) -> bool:
        """True from successful wiring until teardown has fully completed"""
        with self._lock:
            return self._wired and not self._closed

    @property
    def is_closed(self) -> bool:
        with self._lock:
            return self._closed

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> Result[TeardownReport, WiringError]:
        """Tear entries down in reverse wiring order, then mark closed.

        A second call is a no-op reporting ``already_closed``. Teardown hook
        failures are logged and recorded without stopping the remaining hooks.
        Hooks run without the registry lock; other threads resolving meanwhile
        get ClosedError while ``is_active`` stays true until teardown is done.
        """
        with self._lock:
            if self._closing or self._closed:
                logger.debug("Registry close requested again, ignoring")
                return Success(TeardownReport(already_closed=True))
            self._closing = True

        # entry set is frozen once _closing is set
        report = self._teardown_entries()

        with self._lock:
            self._entries.clear()
            self._closed = True

        if report.clean:
            logger.info(f"Registry closed ({len(report.torn_down)} teardown hooks run)")
        else:
            logger.warning(f"Registry closed with {len(report.failures)} teardown failures: "
                           f"{sorted(report.failures)}")
        return Success(report)

    def _teardown_entries(self) -> TeardownReport:
        report = TeardownReport()
        for name in reversed(self._order):
            entry = self._entries[name]
            try:
                if entry.run_teardown():
                    report.torn_down.append(name)
                    logger.debug(f"Tore down entry: {name}")
            except Exception as e:
                logger.error(f"Error tearing down entry {name}: {e}")
                report.failures[name] = e
        return report

    def __repr__(self) -> str:
        state = "closed" if self._closed else ("active" if self._wired else "new")
        return f"Registry({state}, entries={self._order})"
