"""Common domain types and utilities."""

from .result import DomainError, ErrorType, Result

__all__ = [
    "Result",
    "DomainError",
    "ErrorType",
]
