"""Constants module for entityquery.

This module contains all constant values and enumerations used throughout
the package. It is the bottom layer and imports nothing else from
entityquery.

Organization:
    - sql: statement kinds, sort order and column kinds
"""

from entityquery.constants.sql import (
    DEFAULT_PRIMARY_KEY,
    FOREIGN_KEY_SUFFIX,
    ColumnType,
    Order,
    QueryType,
)

__all__ = [
    "QueryType",
    "Order",
    "ColumnType",
    "DEFAULT_PRIMARY_KEY",
    "FOREIGN_KEY_SUFFIX",
]
