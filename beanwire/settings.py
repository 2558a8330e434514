#!/usr/bin/env python3

"""
Runtime Settings

Process-level toggles for the driver, read from the environment and
overridden by command line flags.
"""

import logging
import os
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "BEANWIRE_"
ENV_WAIT_FOR_CLOSE = f"{ENV_PREFIX}WAIT_FOR_CLOSE"
ENV_EXIT_ZERO = f"{ENV_PREFIX}EXIT_ZERO"
ENV_LOG_LEVEL = f"{ENV_PREFIX}LOG_LEVEL"

FALSE_VALUES = {"", "0", "false", "no", "off"}
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'


@dataclass(frozen=True)
class RuntimeSettings:
    """Driver settings with default values"""
    # Block until the context has been closed by a shutdown trigger
    wait_for_close: bool = False
    # Finish with an explicit sys.exit(0) after normal completion
    exit_zero: bool = False
    logging_level: str = "INFO"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'RuntimeSettings':
        """Build settings from BEANWIRE_* variables; presence turns a toggle on"""
        environ = os.environ if environ is None else environ
        level = environ.get(ENV_LOG_LEVEL, cls.logging_level).upper()
        if level not in VALID_LOG_LEVELS:
            logger.warning(f"Ignoring invalid {ENV_LOG_LEVEL}={level!r}")
            level = cls.logging_level
        return cls(
            wait_for_close=_toggle(environ, ENV_WAIT_FOR_CLOSE),
            exit_zero=_toggle(environ, ENV_EXIT_ZERO),
            logging_level=level
        )

    def merge(self, **overrides: Any) -> 'RuntimeSettings':
        """Return a copy with every non-None override applied"""
        updates = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **updates)


def _toggle(environ: Mapping[str, str], name: str) -> bool:
    if name not in environ:
        return False
    return environ[name].strip().lower() not in FALSE_VALUES


def setup_logging(level: str = "INFO", format_string: Optional[str] = None) -> None:
    """Configure root logging for the driver process"""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string or LOG_FORMAT,
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    logger.debug(f"Logging configured at {level} level")
