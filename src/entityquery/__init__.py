from entityquery.__version__ import __version__

from entityquery.operations import Query
from entityquery.types import (
    BaseType,
    BoolType,
    ColumnDefinition,
    EntityMetadata,
    FieldMask,
    FloatType,
    IntType,
    MaskMode,
    StringType,
    TimeType,
    make_bool,
    make_float,
    make_int,
    make_string,
    make_time,
    new_exclude_mask,
    new_include_mask,
    relations_to,
)
from entityquery.protocols import Entity
from entityquery.constants import ColumnType, Order
from entityquery.query_builder import column

# Exceptions (public API)
from entityquery.common.exceptions import (
    ConfigurationError,
    EntityQueryError,
    ErrorCode,
    ValidationError,
)
from sqlalchemy.exc import NoResultFound

from entityquery.compute import create_engine, transaction


__all__ = [
    "__version__",

    "Query",
    "Entity",

    # Masks
    "FieldMask",
    "MaskMode",
    "new_include_mask",
    "new_exclude_mask",

    # Metadata
    "ColumnDefinition",
    "EntityMetadata",
    "ColumnType",
    "relations_to",

    # Bindings
    "BaseType",
    "IntType",
    "FloatType",
    "StringType",
    "BoolType",
    "TimeType",
    "make_int",
    "make_float",
    "make_string",
    "make_bool",
    "make_time",

    # Predicates and ordering
    "column",
    "Order",

    # Exceptions (public API)
    "EntityQueryError",
    "ConfigurationError",
    "ValidationError",
    "ErrorCode",
    "NoResultFound",

    # Connections
    "create_engine",
    "transaction",
]
