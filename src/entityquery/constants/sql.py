"""SQL and query-related constants.

This module contains the fundamental enums shared by the metadata model,
the statement builder and the execution engine. It has no dependencies on
other entityquery modules.
"""

from enum import Enum


class QueryType(str, Enum):
    """Statement kinds produced by the query builder.

    Used to tag log records, spans and metrics with the operation that
    produced them.
    """

    SELECT = "SELECT"
    COUNT = "COUNT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class Order(str, Enum):
    """Sort direction for ``Query.order_by``."""

    ASC = "ASC"
    DESC = "DESC"


class ColumnType(str, Enum):
    """Scalar SQL kinds a column definition can declare.

    Each kind pairs with exactly one typed binding:

    - INT: ``IntType`` (Python ``int``)
    - REAL: ``FloatType`` (Python ``float``)
    - TEXT: ``StringType`` (Python ``str``)
    - BOOL: ``BoolType`` (Python ``bool``)
    - DATETIME: ``TimeType`` (timezone-aware ``datetime``)
    """

    INT = "INT"
    REAL = "REAL"
    TEXT = "TEXT"
    BOOL = "BOOL"
    DATETIME = "DATETIME"


# Primary key column used when metadata does not name one
DEFAULT_PRIMARY_KEY = "id"

# Suffix of foreign-key columns generated by ``relations_to``
FOREIGN_KEY_SUFFIX = "_id"
