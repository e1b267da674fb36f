"""Configuration checks run before a statement is rendered.

Every column a query names (in a mask, a predicate or the ordering) must
be a column of an entity in the query's join tree. Predicates are not
parsed: their SQLAlchemy element tree is only walked to collect column
references, and literal SQL (``text()``, ``literal_column``) is trusted.
"""

from typing import Dict, List, Optional

from sqlalchemy.sql import visitors
from sqlalchemy.sql.elements import ClauseElement, ColumnClause

from entityquery.common.exceptions import ErrorCode, configuration_error, unknown_column_error
from entityquery.operations.query import Query
from entityquery.types.metadata import EntityMetadata


def check_mask(node: Query) -> None:
    metadata = node.metadata
    for name in sorted(node.mask.names):
        if not metadata.has_column(name):
            raise unknown_column_error(name, metadata.table, "mask")


def check_predicate(predicate: Optional[ClauseElement], nodes: List[Query]) -> None:
    """Reject column references that no entity of ``nodes`` declares."""
    if predicate is None:
        return
    by_table: Dict[str, EntityMetadata] = {node.table_name: node.metadata for node in nodes}
    for element in visitors.iterate(predicate):
        if not isinstance(element, ColumnClause) or element.is_literal:
            continue
        table = getattr(element.table, "name", None)
        if table is not None:
            metadata = by_table.get(table)
            if metadata is None or not metadata.has_column(element.name):
                raise unknown_column_error(f"{table}.{element.name}", table, "predicate")
        elif not any(metadata.has_column(element.name) for metadata in by_table.values()):
            raise unknown_column_error(element.name, nodes[0].table_name, "predicate")


def check_nested(node: Query) -> None:
    """Ordering and pagination belong to the top-level query only."""
    if node.has_pagination:
        raise configuration_error(
            "order_by, limit and offset are only supported on the top-level query",
            error_code=ErrorCode.UNSUPPORTED_ON_JOIN,
            table=node.table_name,
        )


def check_unique_tables(nodes: List[Query]) -> None:
    seen = set()
    for node in nodes:
        if node.table_name in seen:
            raise configuration_error(
                f"Table '{node.table_name}' appears more than once in the join tree",
                error_code=ErrorCode.UNSUPPORTED_ON_JOIN,
                table=node.table_name,
            )
        seen.add(node.table_name)


def check_tree(root: Query, nodes: List[Query]) -> None:
    """Validate a whole join tree given in pre-order."""
    check_unique_tables(nodes)
    for node in nodes:
        check_mask(node)
        if node is not root:
            check_nested(node)
    check_predicate(root.predicate, nodes)
    for node in nodes[1:]:
        check_predicate(node.predicate, nodes)
