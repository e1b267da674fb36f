"""Declarative entity metadata.

Each entity type describes its storage once, as an immutable
``EntityMetadata`` value: table name, column definitions, relations to
other tables and a factory for blank instances. The engine consults this
value on every operation and never inspects entity classes directly.

Example:
    >>> metadata = EntityMetadata(
    ...     table="cbsd",
    ...     properties={
    ...         "id": ColumnDefinition(sql_type=ColumnType.INT),
    ...         "network_id": ColumnDefinition(sql_type=ColumnType.TEXT),
    ...         "state_id": ColumnDefinition(sql_type=ColumnType.INT, nullable=True),
    ...     },
    ...     relations=relations_to("state"),
    ...     create_object=Cbsd,
    ... )
"""

import re
from typing import Any, Callable, Dict, List, Optional

from pydantic import Field, field_validator, model_validator

from entityquery.constants.sql import DEFAULT_PRIMARY_KEY, FOREIGN_KEY_SUFFIX, ColumnType
from entityquery.types.base import EQBaseModel

_IDENTIFIER = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')


def _check_identifier(value: str, kind: str) -> str:
    if not _IDENTIFIER.match(value):
        raise ValueError(
            f"Invalid {kind}: '{value}'. "
            f"Must start with letter or underscore, and contain only alphanumeric or underscore."
        )
    return value


class ColumnDefinition(EQBaseModel):
    """Definition of one column of an entity table.

    Attributes:
        sql_type: Scalar kind of the column
        nullable: Whether the column accepts SQL NULL
        unique: Whether the column carries a UNIQUE constraint
        has_default: Whether the database supplies a value when the column
            is left out of an INSERT
        default_value: The value the database supplies; required when
            ``has_default`` is set
    """
    sql_type: ColumnType
    nullable: bool = False
    unique: bool = False
    has_default: bool = False
    default_value: Optional[Any] = None

    @model_validator(mode='after')
    def validate_default(self):
        """Ensure a declared default carries its value."""
        if self.has_default and self.default_value is None:
            raise ValueError("has_default requires a default_value")
        return self


class EntityMetadata(EQBaseModel):
    """Static description of one storage entity.

    Attributes:
        table: Table name
        properties: Column name to definition, in declaration order
        relations: Related table name to the local foreign-key column that
            references that table's primary key
        create_object: Zero-argument factory returning a blank instance
        primary_key: Name of the primary-key column
    """
    table: str = Field(..., min_length=1, max_length=128)
    properties: Dict[str, ColumnDefinition] = Field(..., min_length=1)
    relations: Dict[str, str] = Field(default_factory=dict)
    create_object: Callable[[], Any]
    primary_key: str = DEFAULT_PRIMARY_KEY

    @field_validator('table')
    @classmethod
    def validate_table(cls, v: str) -> str:
        return _check_identifier(v, "table name")

    @field_validator('properties')
    @classmethod
    def validate_properties(cls, v: Dict[str, ColumnDefinition]) -> Dict[str, ColumnDefinition]:
        for name in v:
            _check_identifier(name, "column name")
        return v

    @field_validator('relations', mode='before')
    @classmethod
    def default_relations(cls, v: Optional[Dict[str, str]]) -> Dict[str, str]:
        return {} if v is None else v

    @model_validator(mode='after')
    def validate_references(self):
        """Primary key and foreign keys must be declared columns."""
        if self.primary_key not in self.properties:
            raise ValueError(
                f"Primary key '{self.primary_key}' is not a column of table '{self.table}'"
            )
        for related_table, column in self.relations.items():
            if column not in self.properties:
                raise ValueError(
                    f"Relation to '{related_table}' uses column '{column}' "
                    f"which is not a column of table '{self.table}'"
                )
        return self

    @property
    def columns(self) -> List[str]:
        """Column names in declaration order."""
        return list(self.properties)

    def has_column(self, name: str) -> bool:
        return name in self.properties

    def foreign_key_to(self, table: str) -> Optional[str]:
        """Local column referencing ``table``'s primary key, if related."""
        return self.relations.get(table)


def relations_to(*tables: str) -> Dict[str, str]:
    """Relation map using the ``<table>_id`` foreign-key naming convention.

    Example:
        >>> relations_to("some", "other")
        {'some': 'some_id', 'other': 'other_id'}
    """
    return {table: f"{table}{FOREIGN_KEY_SUFFIX}" for table in tables}
