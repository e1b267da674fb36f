"""Mapping of entity metadata onto SQLAlchemy tables.

The engine builds a typed ``sa.Table`` for each entity it touches so that
SQLAlchemy applies dialect-specific bind and result processing (booleans
and timestamps on SQLite, for instance). The same tables can be used to
provision a schema.
"""

from typing import Any, Dict, Optional

import sqlalchemy as sa
from sqlalchemy.types import TypeEngine

from entityquery.constants.sql import ColumnType
from entityquery.types.metadata import ColumnDefinition, EntityMetadata


def _sql_type(column_type: ColumnType) -> TypeEngine:
    if column_type == ColumnType.INT:
        # SQLite only autoincrements INTEGER PRIMARY KEY columns
        return sa.BigInteger().with_variant(sa.Integer(), "sqlite")
    if column_type == ColumnType.REAL:
        return sa.Float()
    if column_type == ColumnType.TEXT:
        return sa.Text()
    if column_type == ColumnType.BOOL:
        return sa.Boolean()
    if column_type == ColumnType.DATETIME:
        return sa.DateTime(timezone=True)
    raise ValueError(f"Unsupported column type: {column_type}")


def _server_default(definition: ColumnDefinition) -> Optional[Any]:
    if not definition.has_default:
        return None
    value = definition.default_value
    if isinstance(value, bool):
        return sa.true() if value else sa.false()
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def build_table(metadata: EntityMetadata, registry: Optional[sa.MetaData] = None) -> sa.Table:
    """Create the ``sa.Table`` described by ``metadata``.

    Args:
        metadata: Entity metadata
        registry: SQLAlchemy ``MetaData`` to attach the table to. A private
            one is created when omitted.

    Returns:
        Table with one typed column per property, the primary key, NOT NULL
        and UNIQUE constraints and server defaults.
    """
    registry = registry if registry is not None else sa.MetaData()
    columns = []
    for name, definition in metadata.properties.items():
        is_primary_key = name == metadata.primary_key
        columns.append(
            sa.Column(
                name,
                _sql_type(definition.sql_type),
                primary_key=is_primary_key,
                nullable=definition.nullable and not is_primary_key,
                unique=definition.unique or None,
                server_default=_server_default(definition),
                autoincrement=is_primary_key and definition.sql_type == ColumnType.INT,
            )
        )
    return sa.Table(metadata.table, registry, *columns)


class TableRegistry:
    """Tables for the entities of one statement, keyed by table name."""

    def __init__(self):
        self._metadata = sa.MetaData()
        self._tables: Dict[str, sa.Table] = {}

    def table_for(self, metadata: EntityMetadata) -> sa.Table:
        table = self._tables.get(metadata.table)
        if table is None:
            table = build_table(metadata, self._metadata)
            self._tables[metadata.table] = table
        return table
