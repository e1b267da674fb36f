"""Helpers for writing predicates.

Predicates are ordinary SQLAlchemy boolean clauses; nothing here is
required. ``column`` only saves spelling out a lightweight table when a
filter has to name a joined table's column.
"""

from typing import Mapping, Optional

import sqlalchemy as sa
from sqlalchemy.sql import visitors
from sqlalchemy.sql.elements import ClauseElement, ColumnClause


def column(name: str) -> ColumnClause:
    """Column clause for ``"column"`` or table-qualified ``"table.column"``.

    Example:
        >>> str(column("some.id") == 100)
        'some.id = :id_1'
    """
    table_name, _, column_name = name.rpartition(".")
    if not table_name:
        return sa.column(column_name)
    return sa.table(table_name, sa.column(column_name)).c[column_name]


def bind_columns(predicate: Optional[ClauseElement], tables: Mapping[str, sa.Table]) -> Optional[ClauseElement]:
    """Copy of ``predicate`` with table-qualified columns moved onto ``tables``.

    A predicate may name ``some.id`` through any table object called
    ``some``. Statements must see the statement's own ``Table`` instead,
    otherwise SQLAlchemy adds the foreign table object as an extra FROM
    entry. Unqualified and literal columns are left as they are.
    """
    if predicate is None:
        return None

    def replace(element, **kw):
        if not isinstance(element, ColumnClause) or element.is_literal:
            return None
        table = tables.get(getattr(element.table, "name", None))
        if table is None or element.table is table:
            return None
        return table.c[element.name]

    return visitors.replacement_traverse(predicate, {}, replace)
