#!/usr/bin/env python3

"""
Result Monad

Composable success/failure values used across the container instead of
raising through every layer. The failure side is normally a WiringError.
"""

from typing import TypeVar, Generic, Callable, Optional, Any, Iterable, List
from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')
F = TypeVar('F')


class Result(Generic[T, E], ABC):
    """Abstract base class for Result monad."""

    @abstractmethod
    def map(self, func: Callable[[T], U]) -> 'Result[U, E]':
        """Applies func to the success value, preserves failure."""
        pass

    @abstractmethod
    def flat_map(self, func: Callable[[T], 'Result[U, E]']) -> 'Result[U, E]':
        """Chains a Result-returning function."""
        pass

    @abstractmethod
    def map_error(self, func: Callable[[E], F]) -> 'Result[T, F]':
        pass

    @abstractmethod
    def is_success(self) -> bool:
        pass

    @abstractmethod
    def is_failure(self) -> bool:
        pass

    @abstractmethod
    def get_value(self) -> Optional[T]:
        """Returns the success value if present, None otherwise."""
        pass

    @abstractmethod
    def get_error(self) -> Optional[E]:
        """Returns the error if present, None otherwise."""
        pass

    @abstractmethod
    def get_or_raise(self) -> T:
        """Returns the success value or raises the error."""
        pass

    def get_or_else(self, default: T) -> T:
        return self.get_value() if self.is_success() else default

    def fold(self, on_success: Callable[[T], U], on_failure: Callable[[E], U]) -> U:
        """Applies one of two functions based on success/failure."""
        if self.is_success():
            return on_success(self.get_value())
        return on_failure(self.get_error())

    def foreach(self, action: Callable[[T], Any]) -> 'Result[T, E]':
        """Performs side effect on success value, returns unchanged Result."""
        if self.is_success():
            action(self.get_value())
        return self


@dataclass(frozen=True)
class Success(Result[T, E]):
    """Represents a successful computation result."""
    value: T

    def map(self, func: Callable[[T], U]) -> Result[U, E]:
        try:
            return Success(func(self.value))
        except Exception as e:
            logger.debug(f"Exception in Success.map: {e}")
            return Failure(e)

    def flat_map(self, func: Callable[[T], Result[U, E]]) -> Result[U, E]:
        try:
            return func(self.value)
        except Exception as e:
            logger.debug(f"Exception in Success.flat_map: {e}")
            return Failure(e)

    def map_error(self, func: Callable[[E], F]) -> Result[T, F]:
        return Success(self.value)

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def get_value(self) -> Optional[T]:
        return self.value

    def get_error(self) -> Optional[E]:
        return None

    def get_or_raise(self) -> T:
        return self.value

    def __repr__(self) -> str:
        return f"Success({self.value!r})"


@dataclass(frozen=True)
class Failure(Result[T, E]):
    """Represents a failed computation result."""
    error: E

    def map(self, func: Callable[[T], U]) -> Result[U, E]:
        return Failure(self.error)

    def flat_map(self, func: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return Failure(self.error)

    def map_error(self, func: Callable[[E], F]) -> Result[T, F]:
        try:
            return Failure(func(self.error))
        except Exception as e:
            logger.debug(f"Exception in Failure.map_error: {e}")
            return Failure(e)

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def get_value(self) -> Optional[T]:
        return None

    def get_error(self) -> Optional[E]:
        return self.error

    def get_or_raise(self) -> T:
        if isinstance(self.error, BaseException):
            raise self.error
        raise RuntimeError(f"Operation failed: {self.error}")

    def __repr__(self) -> str:
        return f"Failure({self.error!r})"


def from_callable(func: Callable[[], T],
                  error_mapper: Optional[Callable[[Exception], E]] = None) -> Result[T, E]:
    """Creates Result from callable that might raise exception."""
    try:
        return Success(func())
    except Exception as e:
        if error_mapper:
            return Failure(error_mapper(e))
        return Failure(e)


def sequence(results: Iterable[Result[T, E]]) -> Result[List[T], E]:
    """Converts Results to a Result of list. Fails on the first Failure."""
    values = []
    for result in results:
        if result.is_failure():
            return Failure(result.get_error())
        values.append(result.get_value())
    return Success(values)


def traverse(items: Iterable[T], func: Callable[[T], Result[U, E]]) -> Result[List[U], E]:
    """Maps func over items, stopping at the first Failure."""
    values = []
    for item in items:
        result = func(item)
        if result.is_failure():
            return Failure(result.get_error())
        values.append(result.get_value())
    return Success(values)


def log_result(result: Result[T, E], success_msg: str = "Operation succeeded",
               error_msg: str = "Operation failed") -> Result[T, E]:
    """Logs the Result and returns it unchanged."""
    if result.is_success():
        logger.info(f"{success_msg}: {result.get_value()}")
    else:
        logger.error(f"{error_msg}: {result.get_error()}")
    return result
