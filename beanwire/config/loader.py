#!/usr/bin/env python3

"""
Configuration Loading

A configuration source is either a JSON file (possibly importing other JSON
files) or a Python provider reference 'module:attribute'. Loading is a chain
of small Result-returning steps: read -> validate -> resolve imports.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, List, Set, Tuple

from pydantic import ValidationError

from ..errors import ConfigError
from ..functional import Result, Success, Failure, traverse
from ..registry import EntrySpec
from .schema import ContainerConfig, ContextSource, REFERENCE_PATTERN, import_reference

logger = logging.getLogger(__name__)


def load_config(source: str) -> Result[ContextSource, ConfigError]:
    """Load a container description from a file path or provider reference"""
    path = Path(source)
    if path.is_file():
        logger.info(f"Loading container configuration from '{path}'")
        return load_config_file(path)

    if REFERENCE_PATTERN.match(source):
        logger.info(f"Loading container configuration from provider '{source}'")
        return load_provider(source)

    return Failure(ConfigError(f"Configuration source not found: {source}"))


def load_config_file(path: Path) -> Result[ContainerConfig, ConfigError]:
    """Load a JSON file and everything it imports, imports first.

    A file imported along several paths contributes its entries once, at the
    position of its first import.
    """
    return _load_with_imports(Path(path).resolve(), (), set())


def _load_with_imports(path: Path,
                       stack: Tuple[Path, ...],
                       visited: Set[Path]) -> Result[ContainerConfig, ConfigError]:
    if path in stack:
        chain = " -> ".join(p.name for p in stack + (path,))
        return Failure(ConfigError(f"Configuration import cycle: {chain}"))

    if path in visited:
        logger.debug(f"{path.name} already merged, skipping repeated import")
        return Success(ContainerConfig())
    visited.add(path)

    config_result = _read_config_file(path).flat_map(_validate_config_dict)
    if config_result.is_failure():
        return config_result
    config = config_result.get_value()

    if not config.imports:
        return Success(config)

    imported = traverse(
        config.imports,
        lambda name: _load_with_imports((path.parent / name).resolve(), stack + (path,), visited)
    )
    if imported.is_failure():
        return Failure(imported.get_error())

    entries: List[dict] = []
    for imported_config in imported.get_value():
        entries.extend(entry.model_dump() for entry in imported_config.entries)
    entries.extend(entry.model_dump() for entry in config.entries)

    logger.debug(f"Merged {len(config.imports)} imports into {path.name}")
    return _validate_config_dict({"entries": entries}).map_error(
        lambda e: ConfigError(f"{path.name}: {e}")
    )


def _read_config_file(path: Path) -> Result[dict, ConfigError]:
    """Read and parse a JSON configuration file"""
    if not path.is_file():
        return Failure(ConfigError(f"Configuration file not found: {path}"))

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        return Failure(ConfigError(f"Cannot read {path}: {e}"))

    if not isinstance(data, dict):
        return Failure(ConfigError(f"{path}: top level must be an object"))

    return Success(data)


def _validate_config_dict(data: Mapping) -> Result[ContainerConfig, ConfigError]:
    try:
        return Success(ContainerConfig.model_validate(dict(data)))
    except ValidationError as e:
        return Failure(ConfigError(f"Invalid configuration: {e}"))


def load_provider(reference: str) -> Result[ContextSource, ConfigError]:
    """Resolve a provider returning a ContainerConfig, a mapping or EntrySpecs.

    The referenced attribute may be the value itself or a zero-argument
    callable producing it.
    """
    provider_result = import_reference(reference)
    if provider_result.is_failure():
        return provider_result

    provided = provider_result.get_value()
    if callable(provided) and not isinstance(provided, type):
        try:
            provided = provided()
        except Exception as e:
            return Failure(ConfigError(f"Provider '{reference}' failed: {e}"))

    return _coerce_provided(reference, provided)


def _coerce_provided(reference: str, provided: Any) -> Result[ContextSource, ConfigError]:
    if isinstance(provided, ContainerConfig):
        return Success(provided)

    if isinstance(provided, Mapping):
        return _validate_config_dict(provided)

    if isinstance(provided, (list, tuple)) and all(isinstance(spec, EntrySpec) for spec in provided):
        return Success(list(provided))

    return Failure(ConfigError(
        f"Provider '{reference}' returned {type(provided).__qualname__}; "
        f"expected ContainerConfig, mapping or list of EntrySpec"
    ))
