from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for entityquery operations.

    The engine raises very few exception classes and categorizes failures
    with these codes instead. Database failures (constraint violations,
    lost connections, missing rows) are not wrapped: they reach the caller
    as the SQLAlchemy exceptions the connection raised.

    Attributes:
        CONFIG_*: Programmer/configuration errors (1xxx)
        VALIDATION_*: Invalid metadata or values (2xxx)
    """
    # Configuration errors (1xxx)
    CONFIG_ERROR = "CONFIG_001"
    UNKNOWN_COLUMN = "CONFIG_002"
    MISSING_PREDICATE = "CONFIG_003"
    MISSING_ENTITY = "CONFIG_004"
    MISSING_CONNECTION = "CONFIG_005"
    MISSING_RELATION = "CONFIG_006"
    UNSUPPORTED_ON_JOIN = "CONFIG_007"
    MISSING_VALUE = "CONFIG_008"

    # Validation errors (2xxx)
    VALIDATION_ERROR = "VALIDATION_001"
    INVALID_VALUE = "VALIDATION_002"


class EntityQueryError(Exception):
    """Base exception for all entityquery errors.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFIG_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
        }


class ConfigurationError(EntityQueryError):
    """Programmer error in how a query or entity is configured.

    Never retried: the same query fails the same way every time.
    """


class ValidationError(EntityQueryError, ValueError):
    """A scalar value could not be bound to a typed column."""


def configuration_error(
    message: str,
    error_code: ErrorCode = ErrorCode.CONFIG_ERROR,
    table: Optional[str] = None,
    **kwargs
) -> ConfigurationError:
    """Create a configuration error.

    Args:
        message: Error message
        error_code: A CONFIG_* error code
        table: Table of the query node that is misconfigured
        **kwargs: Additional error details

    Returns:
        ConfigurationError with the given code
    """
    details = kwargs.get("details", {})
    if table:
        details["table"] = table

    return ConfigurationError(
        message=message,
        error_code=error_code,
        details=details,
        **{k: v for k, v in kwargs.items() if k != "details"}
    )


def unknown_column_error(column: str, table: str, usage: str) -> ConfigurationError:
    """Create the error raised when a mask, predicate or order-by names a missing column.

    Args:
        column: The column name as referenced by the caller
        table: Table the column was resolved against
        usage: Where the reference came from ("mask", "predicate", "order_by")
    """
    return configuration_error(
        f"Unknown column '{column}' referenced by {usage} on table '{table}'",
        error_code=ErrorCode.UNKNOWN_COLUMN,
        table=table,
        details={"column": column, "usage": usage},
    )


def validation_error(
    message: str,
    field: Optional[str] = None,
    value: Any = None,
    **kwargs
) -> ValidationError:
    """Create a validation error.

    Args:
        message: Error message
        field: Field that failed validation
        value: Invalid value
        **kwargs: Additional error details
    """
    details = kwargs.get("details", {})
    if field:
        details["field"] = field
    if value is not None:
        details["value"] = str(value)

    return ValidationError(
        message=message,
        error_code=ErrorCode.INVALID_VALUE,
        details=details,
        **{k: v for k, v in kwargs.items() if k != "details"}
    )
