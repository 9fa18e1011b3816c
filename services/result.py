"""
Result type for consistent error handling across services.

This module provides a simple Result[T] type that allows services to return
success/failure states without raising exceptions, so callers such as a
presentation layer can branch on the outcome.

Usage:
    # Returning success
    return Result.ok(stats)

    # Returning failure
    return Result.fail("Player p9 not found", code=PLAYER_NOT_FOUND)

    # Checking results
    if result.success:
        render(result.value)
    else:
        print(f"Error ({result.error_code}): {result.error}")
"""

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    A simple result type for service method return values.

    Attributes:
        success: Whether the operation succeeded
        value: The return value if successful
        error: Error message if failed (None if successful)
        error_code: Optional error code for programmatic error handling
    """

    success: bool
    value: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str, code: str | None = None) -> "Result[T]":
        return cls(success=False, error=error, error_code=code)

    def __bool__(self) -> bool:
        return self.success

    def unwrap(self) -> T:
        """
        Get the value, raising ValueError if the result is a failure.

        Raises:
            ValueError: If the result is a failure
        """
        if not self.success:
            raise ValueError(f"Cannot unwrap failed result: {self.error}")
        return self.value  # type: ignore

    def unwrap_or(self, default: T) -> T:
        return self.value if self.success else default  # type: ignore

    def map(self, fn: Callable[[T], "Result"]) -> "Result":
        """Chain an operation on a successful result; failures pass through unchanged."""
        if not self.success:
            return self
        return fn(self.value)
