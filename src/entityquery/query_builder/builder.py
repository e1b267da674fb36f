"""Rendering of queries into SQLAlchemy statements.

``StatementBuilder`` turns a ``Query`` join tree into a SQLAlchemy Core
statement. It does not execute anything; ``entityquery.compute`` runs the
statements and materializes the rows.

Join rendering follows the emission order of
``entityquery.operations.tree.join_edges``: a child's nested joins are
attached to the child before the child is attached to its parent. The
resulting FROM clause nests accordingly, for example::

    some LEFT OUTER JOIN (other JOIN another ON another.other_id = other.id)
        ON some.id = other.some_id

so an unmatched optional join takes its whole subtree with it.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import sqlalchemy as sa
from sqlalchemy.sql.expression import Delete, Insert, Select, Update
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.selectable import FromClause

from entityquery.common.exceptions import ErrorCode, configuration_error, unknown_column_error
from entityquery.constants.sql import Order
from entityquery.operations.query import Query
from entityquery.operations.tree import join_edges, preorder
from entityquery.query_builder.predicates import bind_columns
from entityquery.query_builder.tables import TableRegistry
from entityquery.query_builder.validation import check_mask, check_predicate, check_tree
from entityquery.types.fields import BaseType


@dataclass
class SelectPlan:
    """A rendered SELECT and how to read its rows back.

    Attributes:
        statement: The SELECT statement
        nodes: Query nodes in materialization (pre-)order
        layout: For each selected column, in order, the index of its node in
            ``nodes`` and the column name
    """
    statement: Select
    nodes: List[Query]
    layout: List[Tuple[int, str]]


@dataclass
class InsertPlan:
    """A rendered INSERT.

    Attributes:
        statement: The INSERT statement
        primary_key: Name of the primary-key column
        generated_key: True when the database assigns the primary key
        key: The primary key already on the entity, when not generated
    """
    statement: Insert
    primary_key: str
    generated_key: bool
    key: Optional[int]


class StatementBuilder:
    """Builds SELECT, COUNT, INSERT, UPDATE and DELETE statements from queries.

    A builder instance holds the tables of one statement; create a new one
    per statement.
    """

    def __init__(self):
        self._tables = TableRegistry()

    # Reads

    def build_select(self, query: Query) -> SelectPlan:
        """Render the joined SELECT for ``fetch`` and ``list``."""
        nodes = preorder(query)
        check_tree(query, nodes)

        columns: List[ColumnElement] = []
        layout: List[Tuple[int, str]] = []
        for index, node in enumerate(nodes):
            table = self._table(node)
            for name in node.metadata.columns:
                if node.mask.participates(name):
                    columns.append(table.c[name])
                    layout.append((index, name))

        if not columns:
            raise configuration_error(
                "Field masks exclude every column; nothing to select",
                table=query.table_name,
            )

        statement = (
            sa.select(*columns)
            .select_from(self._render_from(query))
            .set_label_style(sa.LABEL_STYLE_TABLENAME_PLUS_COL)
        )
        if query.predicate is not None:
            statement = statement.where(self._bind(query.predicate, nodes))

        if query.ordering is not None:
            name, order = query.ordering
            column = self._resolve_order_column(query, nodes, name)
            statement = statement.order_by(column.desc() if order == Order.DESC else column.asc())

        limit, offset = query.pagination
        if limit is not None:
            statement = statement.limit(limit)
        if offset is not None:
            statement = statement.offset(offset)

        return SelectPlan(statement=statement, nodes=nodes, layout=layout)

    def build_count(self, query: Query) -> Select:
        """Render ``SELECT count(*)`` over the same FROM/JOIN/WHERE.

        The field masks and pagination are ignored.
        """
        nodes = preorder(query)
        check_tree(query, nodes)

        statement = sa.select(sa.func.count()).select_from(self._render_from(query))
        if query.predicate is not None:
            statement = statement.where(self._bind(query.predicate, nodes))
        return statement

    # Writes

    def build_insert(self, query: Query) -> InsertPlan:
        """Render the INSERT of the root entity.

        Columns in the mask are written with their bound value, NULL
        included. Columns outside the mask are left to the database: the
        primary key is generated, defaulted columns take their default and
        nullable columns stay NULL.

        Raises:
            ConfigurationError: If a NOT NULL column without a default is
                outside the mask, or the query has joins
        """
        self._check_write(query, "insert")
        metadata = query.metadata
        bindings = self._bindings(query)

        values = {}
        for name, definition in metadata.properties.items():
            if query.mask.participates(name):
                values[name] = bindings[name].value()
            elif name == metadata.primary_key or definition.has_default or definition.nullable:
                continue
            else:
                raise configuration_error(
                    f"Column '{name}' is NOT NULL, has no default and is excluded from the insert",
                    error_code=ErrorCode.MISSING_VALUE,
                    table=metadata.table,
                )

        generated_key = metadata.primary_key not in values
        return InsertPlan(
            statement=self._table(query).insert().values(values),
            primary_key=metadata.primary_key,
            generated_key=generated_key,
            key=None if generated_key else values[metadata.primary_key],
        )

    def build_update(self, query: Query) -> Update:
        """Render the UPDATE of the columns in the mask.

        Raises:
            ConfigurationError: Without a predicate, or when the mask leaves
                nothing to set
        """
        self._check_write(query, "update")
        if query.predicate is None:
            raise configuration_error(
                "Update requires a where() predicate",
                error_code=ErrorCode.MISSING_PREDICATE,
                table=query.table_name,
            )
        check_predicate(query.predicate, [query])

        bindings = self._bindings(query)
        values = {
            name: bindings[name].value()
            for name in query.metadata.columns
            if query.mask.participates(name)
        }
        if not values:
            raise configuration_error(
                "Field mask leaves no column to update",
                table=query.table_name,
            )
        return self._table(query).update().where(self._bind(query.predicate, [query])).values(values)

    def build_delete(self, query: Query) -> Delete:
        """Render the DELETE of rows matching the predicate.

        Raises:
            ConfigurationError: Without an entity or a predicate
        """
        self._check_write(query, "delete")
        if query.predicate is None:
            raise configuration_error(
                "Delete requires a where() predicate",
                error_code=ErrorCode.MISSING_PREDICATE,
                table=query.table_name,
            )
        check_predicate(query.predicate, [query])
        return self._table(query).delete().where(self._bind(query.predicate, [query]))

    # Helpers

    def _table(self, node: Query) -> sa.Table:
        return self._tables.table_for(node.metadata)

    def _bind(self, predicate: ColumnElement, nodes: List[Query]) -> ColumnElement:
        return bind_columns(predicate, {node.table_name: self._table(node) for node in nodes})

    def _render_from(self, root: Query) -> FromClause:
        nodes = preorder(root)
        subtrees: Dict[int, FromClause] = {}

        def subtree(node: Query) -> FromClause:
            if id(node) not in subtrees:
                subtrees[id(node)] = self._table(node)
            return subtrees[id(node)]

        # nullable() on the top-level query marks its most recent join
        last_join = root.joins[-1] if root.is_nullable and root.joins else None

        for parent, child in join_edges(root):
            subtrees[id(parent)] = subtree(parent).join(
                subtree(child),
                self._join_condition(parent, child, nodes),
                isouter=child.is_nullable or child is last_join,
            )
        return subtree(root)

    def _join_condition(self, parent: Query, child: Query, nodes: List[Query]) -> ColumnElement:
        """Explicit child predicate, else the relation declared in metadata."""
        if child.predicate is not None:
            return self._bind(child.predicate, nodes)

        parent_table = self._table(parent)
        child_table = self._table(child)
        parent_meta = parent.metadata
        child_meta = child.metadata

        foreign_key = child_meta.foreign_key_to(parent_meta.table)
        if foreign_key is not None:
            return parent_table.c[parent_meta.primary_key] == child_table.c[foreign_key]

        foreign_key = parent_meta.foreign_key_to(child_meta.table)
        if foreign_key is not None:
            return parent_table.c[foreign_key] == child_table.c[child_meta.primary_key]

        raise configuration_error(
            f"No relation between '{parent_meta.table}' and '{child_meta.table}'; "
            f"declare one in metadata or give the join a where() condition",
            error_code=ErrorCode.MISSING_RELATION,
            table=child_meta.table,
        )

    def _resolve_order_column(self, root: Query, nodes: List[Query], name: str) -> ColumnElement:
        table_name, _, column_name = name.rpartition(".")
        table_name = table_name or root.table_name
        for node in nodes:
            if node.table_name == table_name:
                if not node.metadata.has_column(column_name):
                    break
                return self._table(node).c[column_name]
        raise unknown_column_error(name, table_name, "order_by")

    def _check_write(self, query: Query, operation: str) -> None:
        if query.joins:
            raise configuration_error(
                f"Joins are only supported by reads, not by {operation}",
                error_code=ErrorCode.UNSUPPORTED_ON_JOIN,
                table=query.table_name,
            )
        check_mask(query)

    def _bindings(self, query: Query) -> Dict[str, BaseType]:
        """Bindings of the root entity, checked against its metadata."""
        bindings = query.entity.fields()
        columns = set(query.metadata.columns)
        if set(bindings) != columns:
            raise configuration_error(
                f"Entity bindings {sorted(bindings)} do not match metadata columns {sorted(columns)}",
                table=query.table_name,
            )
        return bindings
