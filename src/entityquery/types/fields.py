"""Typed column bindings.

A binding ties one column name to one attribute of a live entity instance.
The engine reads bindings to collect write values and writes through them
when materializing result rows, so it never needs to introspect entity
classes. ``None`` is SQL NULL in both directions.

Example:
    >>> class Tag:
    ...     def __init__(self):
    ...         self.id = None
    ...         self.label = None
    ...     def fields(self):
    ...         return {"id": IntType(self, "id"), "label": StringType(self, "label")}
    >>> tag = Tag()
    >>> tag.fields()["id"].scan(7)
    >>> tag.id
    7
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, ClassVar, Optional

from entityquery.common.exceptions import validation_error
from entityquery.constants.sql import ColumnType


class BaseType(ABC):
    """Binding between a column and one attribute of an entity instance.

    Attributes:
        kind: Column kind this binding accepts
    """
    kind: ClassVar[ColumnType]

    def __init__(self, target: Any, attribute: str):
        self._target = target
        self._attribute = attribute

    def value(self) -> Optional[Any]:
        """Current nullable scalar, normalized for writing."""
        current = getattr(self._target, self._attribute)
        return None if current is None else self.coerce(current)

    def scan(self, value: Optional[Any]) -> None:
        """Store a scanned nullable scalar on the entity."""
        setattr(self._target, self._attribute, None if value is None else self.coerce(value))

    @abstractmethod
    def coerce(self, value: Any) -> Any:
        """Convert a non-null value to this binding's Python type.

        Raises:
            ValidationError: If the value cannot represent this column kind
        """

    def _reject(self, value: Any):
        return validation_error(
            f"Cannot bind {type(value).__name__} value to {self.kind.value} column",
            field=self._attribute,
            value=value,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({type(self._target).__name__}.{self._attribute})"


class IntType(BaseType):
    kind = ColumnType.INT

    def coerce(self, value: Any) -> int:
        if isinstance(value, bool):
            raise self._reject(value)
        if isinstance(value, int):
            return int(value)
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise self._reject(value)


class FloatType(BaseType):
    kind = ColumnType.REAL

    def coerce(self, value: Any) -> float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        raise self._reject(value)


class StringType(BaseType):
    kind = ColumnType.TEXT

    def coerce(self, value: Any) -> str:
        if isinstance(value, str):
            return value
        raise self._reject(value)


class BoolType(BaseType):
    kind = ColumnType.BOOL

    def coerce(self, value: Any) -> bool:
        # SQLite hands booleans back as 0/1
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        raise self._reject(value)


class TimeType(BaseType):
    """Timestamp binding.

    Values are kept timezone-aware. Naive datetimes, which is what SQLite
    returns, are taken to be UTC; aware values are written as UTC.
    """
    kind = ColumnType.DATETIME

    def coerce(self, value: Any) -> datetime:
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value)
            except ValueError:
                raise self._reject(value)
        if not isinstance(value, datetime):
            raise self._reject(value)
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class _Slot:
    value: Any = None


def _make(binding_type, value: Any) -> Any:
    slot = _Slot()
    binding = binding_type(slot, "value")
    binding.scan(value)
    return slot.value


def make_int(value: Any) -> int:
    return _make(IntType, value)


def make_float(value: Any) -> float:
    return _make(FloatType, value)


def make_string(value: Any) -> str:
    return _make(StringType, value)


def make_bool(value: Any) -> bool:
    return _make(BoolType, value)


def make_time(value: Any) -> datetime:
    """Normalize a timestamp the way ``TimeType`` stores it (aware, UTC)."""
    return _make(TimeType, value)
