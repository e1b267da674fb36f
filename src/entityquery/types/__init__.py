"""Type definitions for entityquery.

This module provides the value types the engine is driven by: field masks,
entity metadata and the typed bindings entities expose.
"""

from .base import EQBaseModel
from .fields import (
    BaseType,
    BoolType,
    FloatType,
    IntType,
    StringType,
    TimeType,
    make_bool,
    make_float,
    make_int,
    make_string,
    make_time,
)
from .mask import FieldMask, MaskMode, new_exclude_mask, new_include_mask
from .metadata import ColumnDefinition, EntityMetadata, relations_to

__all__ = [
    'EQBaseModel',
    # Masks
    'FieldMask',
    'MaskMode',
    'new_include_mask',
    'new_exclude_mask',
    # Metadata
    'ColumnDefinition',
    'EntityMetadata',
    'relations_to',
    # Bindings
    'BaseType',
    'IntType',
    'FloatType',
    'StringType',
    'BoolType',
    'TimeType',
    'make_int',
    'make_float',
    'make_string',
    'make_bool',
    'make_time',
]
