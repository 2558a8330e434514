#!/usr/bin/env python3

"""
Dependency Ordering

Validates an entry graph and computes the wiring order with Kahn's algorithm.
Ties are broken by declaration order so the result is deterministic.
"""

import logging
from collections import Counter, deque
from typing import Dict, List, Sequence

from ..errors import CycleError, DuplicateEntryError, MissingDependencyError, WiringError
from ..functional import Result, Success, Failure
from .entry import EntrySpec

logger = logging.getLogger(__name__)


def validate_graph(specs: Sequence[EntrySpec]) -> Result[Dict[str, EntrySpec], WiringError]:
    """Checks names are unique and every edge points at a declared entry"""
    counts = Counter(spec.name for spec in specs)
    duplicates = [name for name, count in counts.items() if count > 1]
    if duplicates:
        return Failure(DuplicateEntryError(duplicates))

    by_name = {spec.name: spec for spec in specs}
    missing = [
        (spec.name, dep)
        for spec in specs
        for dep in spec.edges
        if dep not in by_name
    ]
    if missing:
        return Failure(MissingDependencyError(missing))

    return Success(by_name)


def wiring_order(specs: Sequence[EntrySpec]) -> Result[List[str], WiringError]:
    """Returns entry names so that each one follows everything it depends on"""
    validated = validate_graph(specs)
    if validated.is_failure():
        return Failure(validated.get_error())
    by_name = validated.get_value()

    in_degree: Dict[str, int] = {spec.name: 0 for spec in specs}
    dependents: Dict[str, List[str]] = {spec.name: [] for spec in specs}
    for spec in specs:
        for dep in spec.edges:
            dependents[dep].append(spec.name)
            in_degree[spec.name] += 1

    ready = deque(spec.name for spec in specs if in_degree[spec.name] == 0)
    order: List[str] = []

    while ready:
        current = ready.popleft()
        order.append(current)
        for dependent in dependents[current]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                ready.append(dependent)

    if len(order) != len(specs):
        remaining = [spec.name for spec in specs if in_degree[spec.name] > 0]
        cycle = find_cycle(remaining, by_name)
        logger.debug(f"Unorderable entries: {remaining}")
        return Failure(CycleError(cycle))

    return Success(order)


def find_cycle(candidates: Sequence[str], by_name: Dict[str, EntrySpec]) -> List[str]:
    """Walks edges among candidates until a name repeats.

    Every candidate left over by Kahn's algorithm has an unprocessed edge into
    another candidate, so the walk always closes a loop.
    """
    remaining = set(candidates)
    path: List[str] = []
    seen: Dict[str, int] = {}
    current = candidates[0]

    while current not in seen:
        seen[current] = len(path)
        path.append(current)
        current = next(dep for dep in by_name[current].edges if dep in remaining)

    return path[seen[current]:] + [current]
