#!/usr/bin/env python3

"""
Container Configuration Schema

Pydantic models for the JSON container description. Each entry names its
factory as ``module.path:attribute`` and lists the entries it depends on;
to_specs() turns the validated document into EntrySpecs for the registry.
"""

import functools
import importlib
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import ConfigError, WiringError
from ..functional import Result, Success, Failure, traverse
from ..registry import EntrySpec

logger = logging.getLogger(__name__)

REFERENCE_PATTERN = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_][\w.]*$")


class EntryConfig(BaseModel):
    """One named object in the container description"""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, description="Unique entry name")
    factory: str = Field(..., description="Callable reference, 'module.path:attribute'")
    depends_on: List[str] = Field(default_factory=list, description="Entries passed positionally to the factory")
    kwargs: Dict[str, Any] = Field(default_factory=dict, description="Literal keyword arguments for the factory")
    properties: Dict[str, str] = Field(default_factory=dict, description="Attribute -> entry name, injected after construction")
    values: Dict[str, Any] = Field(default_factory=dict, description="Attribute -> literal value, injected after construction")
    init_method: Optional[str] = Field(default=None, description="Method called once the entry is wired")
    destroy_method: Optional[str] = Field(default=None, description="Method called at teardown")

    @field_validator("factory")
    @classmethod
    def check_factory(cls, value: str) -> str:
        if not REFERENCE_PATTERN.match(value):
            raise ValueError(f"factory must look like 'module.path:attribute', got '{value}'")
        return value

    def to_spec(self) -> Result[EntrySpec, WiringError]:
        target_result = import_reference(self.factory)
        if target_result.is_failure():
            return Failure(target_result.get_error())

        target = target_result.get_value()
        if not callable(target):
            return Failure(ConfigError(f"Factory '{self.factory}' of entry '{self.name}' is not callable"))

        factory = functools.partial(target, **self.kwargs) if self.kwargs else target
        return Success(EntrySpec(
            name=self.name,
            factory=factory,
            dependencies=list(self.depends_on),
            properties=dict(self.properties),
            values=dict(self.values),
            init=_method_caller(self.init_method) if self.init_method else None,
            teardown=_method_caller(self.destroy_method) if self.destroy_method else None
        ))


class ContainerConfig(BaseModel):
    """Validated container description"""
    model_config = ConfigDict(extra="forbid")

    imports: List[str] = Field(default_factory=list, description="Other configuration files, relative to this one")
    entries: List[EntryConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_names(self) -> 'ContainerConfig':
        seen = set()
        duplicates = set()
        for entry in self.entries:
            if entry.name in seen:
                duplicates.add(entry.name)
            seen.add(entry.name)
        if duplicates:
            raise ValueError(f"duplicate entry names: {sorted(duplicates)}")
        return self

    @property
    def entry_names(self) -> List[str]:
        return [entry.name for entry in self.entries]

    def to_specs(self) -> Result[List[EntrySpec], WiringError]:
        return traverse(self.entries, lambda entry: entry.to_spec())


ContextSource = Union[ContainerConfig, Sequence[EntrySpec]]


def import_reference(reference: str) -> Result[Any, ConfigError]:
    """Import the object named by 'module.path:attribute.path'"""
    module_name, _, attribute_path = reference.partition(":")
    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        return Failure(ConfigError(f"Cannot import module '{module_name}': {e}"))

    for attribute in attribute_path.split("."):
        try:
            target = getattr(target, attribute)
        except AttributeError:
            return Failure(ConfigError(f"'{module_name}' has no attribute '{attribute_path}'"))

    logger.debug(f"Resolved reference {reference}")
    return Success(target)


def _method_caller(method_name: str) -> Callable[[Any], Any]:
    def _call(instance: Any) -> Any:
        return getattr(instance, method_name)()
    _call.__name__ = method_name
    return _call
