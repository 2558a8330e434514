"""
Functional Utilities Module

Result monad used for error propagation throughout the container.
"""

from .result import (
    Result,
    Success,
    Failure,
    from_callable,
    sequence,
    traverse,
    log_result
)

__all__ = [
    "Result",
    "Success",
    "Failure",
    "from_callable",
    "sequence",
    "traverse",
    "log_result"
]
