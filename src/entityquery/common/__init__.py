"""Common exceptions for entityquery.

Exception Design:
    The exception system uses error codes for categorization rather than
    numerous specific exception classes. Everything the engine raises on
    its own behalf inherits from EntityQueryError. Failures reported by the
    database (missing rows, constraint violations, transport errors) are
    SQLAlchemy exceptions and pass through untouched.
"""

from entityquery.common.exceptions import (
    ConfigurationError,
    EntityQueryError,
    ErrorCode,
    ValidationError,
    configuration_error,
    unknown_column_error,
    validation_error,
)

__all__ = [
    "EntityQueryError",
    "ConfigurationError",
    "ValidationError",
    "ErrorCode",
    "configuration_error",
    "unknown_column_error",
    "validation_error",
]
