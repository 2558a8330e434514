"""
Configuration Module

JSON container descriptions and Python providers, validated with pydantic.
"""

from .schema import (
    ContainerConfig,
    EntryConfig,
    ContextSource,
    import_reference
)
from .loader import (
    load_config,
    load_config_file,
    load_provider
)

__all__ = [
    "ContainerConfig",
    "EntryConfig",
    "ContextSource",
    "import_reference",
    "load_config",
    "load_config_file",
    "load_provider"
]
