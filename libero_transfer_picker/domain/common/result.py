"""Result types for provider access without exceptions crossing the adapter seam."""

from enum import Enum
from typing import Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorType(str, Enum):
    """Error categories reported by providers and stores."""

    DATA_NOT_FOUND = "data_not_found"
    DATA_ACCESS_ERROR = "data_access_error"
    MALFORMED_INPUT = "malformed_input"


class DomainError(BaseModel):
    """Structured error information for callers and report sinks."""

    error_type: ErrorType = Field(..., description="Standardized error type")
    message: str = Field(..., min_length=1, description="Human-readable error message")
    details: Optional[Dict] = Field(None, description="Additional error context")

    @classmethod
    def data_not_found(
        cls, message: str, details: Optional[Dict] = None
    ) -> "DomainError":
        """Create a data not found error."""
        return cls(
            error_type=ErrorType.DATA_NOT_FOUND, message=message, details=details
        )

    @classmethod
    def data_access_error(
        cls, message: str, details: Optional[Dict] = None
    ) -> "DomainError":
        """Create an error for unreadable or undecodable sources."""
        return cls(
            error_type=ErrorType.DATA_ACCESS_ERROR, message=message, details=details
        )

    @classmethod
    def malformed_input(
        cls, message: str, details: Optional[Dict] = None
    ) -> "DomainError":
        """Create an error for input that indicates a caller or config bug."""
        return cls(
            error_type=ErrorType.MALFORMED_INPUT, message=message, details=details
        )


class Result(Generic[T]):
    """
    Either a success value or a DomainError.

    Providers return these so that the orchestration service decides what a
    missing file or an unreadable document means for the run.
    """

    def __init__(
        self,
        value: Optional[T] = None,
        error: Optional[DomainError] = None,
        _allow_none: bool = False,
    ):
        if value is not None and error is not None:
            raise ValueError("Result cannot have both value and error")
        if not _allow_none and value is None and error is None:
            raise ValueError("Result must have either value or error")

        self._value = value
        self._error = error

    @property
    def value(self) -> T:
        """Get the success value. Raises error if result is failure."""
        if self._error is not None:
            raise ValueError(
                f"Cannot access value on failed result: {self._error.message}"
            )
        return self._value

    @property
    def error(self) -> DomainError:
        """Get the error. Raises error if result is success."""
        if self._error is None:
            raise ValueError("Cannot access error on successful result")
        return self._error

    @property
    def is_success(self) -> bool:
        return self._error is None

    @property
    def is_failure(self) -> bool:
        return self._error is not None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        """Create a successful result."""
        return cls(value=value, _allow_none=True)

    @classmethod
    def failure(cls, error: DomainError) -> "Result[T]":
        """Create a failed result."""
        return cls(error=error)
