"""Declarative query description and fluent builder.

A ``Query`` accumulates a root entity, a field mask, a predicate,
ordering/pagination and a tree of joined sub-queries. Executing it renders
a SQLAlchemy statement, runs it on the bound connection and materializes
the rows back into entity instances.

Example:
    >>> from entityquery import FieldMask, Order, Query, column
    >>> rows = (
    ...     Query()
    ...     .with_connection(conn)
    ...     .from_(Cbsd())
    ...     .select(FieldMask.exclude())
    ...     .where(column("network_id") == "net")
    ...     .join(
    ...         Query()
    ...         .from_(Grant())
    ...         .select(FieldMask.include("id", "state_id"))
    ...         .nullable()
    ...     )
    ...     .order_by("id", Order.ASC)
    ...     .limit(10)
    ...     .list()
    ... )
    >>> for cbsd, grant in rows:
    ...     ...

A query is configured once and executed once; it is not safe to share
between threads.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from sqlalchemy.engine import Connection
from sqlalchemy.sql.elements import ClauseElement

from entityquery.common.exceptions import ErrorCode, configuration_error
from entityquery.constants.sql import Order
from entityquery.protocols.entity import Entity
from entityquery.types.mask import FieldMask
from entityquery.types.metadata import EntityMetadata

if TYPE_CHECKING:
    from entityquery.compute.sql_engine import SQLEngine


class Query:
    """Node of a join tree and entry point for executing it.

    The top-level query carries the connection, ordering and pagination.
    Joined queries carry their own entity, mask, nested joins, an optional
    predicate used as the join condition and the nullable flag.
    """

    def __init__(self):
        self._entity: Optional[Entity] = None
        self._mask: FieldMask = FieldMask.exclude()
        self._predicate: Optional[ClauseElement] = None
        self._joins: List["Query"] = []
        self._nullable: bool = False
        self._order: Optional[Tuple[str, Order]] = None
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None
        self._connection: Optional[Connection] = None
        self._execution_options: Dict[str, Any] = {}

    # Construction

    def with_connection(self, connection: Connection) -> "Query":
        """Bind the transaction-scoped connection statements run on."""
        self._connection = connection
        return self

    def with_execution_options(self, **options: Any) -> "Query":
        """Execution options forwarded to the connection (timeouts, etc.)."""
        self._execution_options.update(options)
        return self

    def from_(self, entity: Entity) -> "Query":
        """Set the root entity; its current values are the write payload."""
        self._entity = entity
        return self

    def select(self, mask: FieldMask) -> "Query":
        """Set the projection (reads) or column set (writes)."""
        self._mask = mask
        return self

    def where(self, predicate: ClauseElement) -> "Query":
        """Set the filter, or the join condition when this query is joined.

        The predicate is any SQLAlchemy boolean clause; it is handed to the
        statement unmodified.
        """
        self._predicate = predicate
        return self

    def join(self, child: "Query") -> "Query":
        """Append a joined sub-query."""
        self._joins.append(child)
        return self

    def nullable(self) -> "Query":
        """Make a join optional (LEFT OUTER).

        On a query passed to ``join`` this marks that query itself. On the
        top-level query it marks the most recently added join, so
        ``root.join(child).nullable()`` and ``root.join(child.nullable())``
        render the same SQL.
        """
        self._nullable = True
        return self

    def order_by(self, column: str, order: Order = Order.ASC) -> "Query":
        """Sort by a root column, or ``"table.column"`` of a joined table."""
        self._order = (column, Order(order))
        return self

    def limit(self, limit: int) -> "Query":
        if limit < 0:
            raise configuration_error(f"Limit must be non-negative, got {limit}")
        self._limit = limit
        return self

    def offset(self, offset: int) -> "Query":
        if offset < 0:
            raise configuration_error(f"Offset must be non-negative, got {offset}")
        self._offset = offset
        return self

    # Read-only view used by the statement builder

    @property
    def entity(self) -> Optional[Entity]:
        return self._entity

    @property
    def metadata(self) -> EntityMetadata:
        if self._entity is None:
            raise configuration_error(
                "Query has no entity; call from_() first",
                error_code=ErrorCode.MISSING_ENTITY,
            )
        return self._entity.get_metadata()

    @property
    def table_name(self) -> str:
        return self.metadata.table

    @property
    def mask(self) -> FieldMask:
        return self._mask

    @property
    def predicate(self) -> Optional[ClauseElement]:
        return self._predicate

    @property
    def joins(self) -> List["Query"]:
        return self._joins

    @property
    def is_nullable(self) -> bool:
        return self._nullable

    @property
    def ordering(self) -> Optional[Tuple[str, Order]]:
        return self._order

    @property
    def pagination(self) -> Tuple[Optional[int], Optional[int]]:
        """(limit, offset)"""
        return self._limit, self._offset

    @property
    def has_pagination(self) -> bool:
        return self._order is not None or self._limit is not None or self._offset is not None

    # Execution

    def _engine(self) -> "SQLEngine":
        from entityquery.compute.sql_engine import SQLEngine

        if self._connection is None:
            raise configuration_error(
                "Query has no connection; call with_connection() first",
                error_code=ErrorCode.MISSING_CONNECTION,
            )
        return SQLEngine(self._connection, execution_options=self._execution_options)

    def fetch(self) -> List[Entity]:
        """Fetch one logical row as ``[root, *joined entities]``.

        Raises:
            sqlalchemy.exc.NoResultFound: If no row matches
        """
        return self._engine().fetch(self)

    def list(self) -> List[List[Entity]]:
        """Fetch every matching row, honoring ordering and pagination."""
        return self._engine().list(self)

    def count(self) -> int:
        """Count matching rows, ignoring mask and pagination."""
        return self._engine().count(self)

    def insert(self) -> int:
        """Insert the root entity and return its primary key."""
        return self._engine().insert(self)

    def update(self) -> int:
        """Update rows matching ``where`` and return the affected count."""
        return self._engine().update(self)

    def delete(self) -> int:
        """Delete rows matching ``where`` and return the affected count."""
        return self._engine().delete(self)

    def to_sql(self) -> str:
        """Render the SELECT this query would run, for inspection."""
        from entityquery.query_builder.builder import StatementBuilder

        plan = StatementBuilder().build_select(self)
        dialect = self._connection.dialect if self._connection is not None else None
        return str(plan.statement.compile(dialect=dialect))

    def __repr__(self) -> str:
        table = self._entity.get_metadata().table if self._entity is not None else None
        return f"Query(table={table!r}, joins={len(self._joins)}, nullable={self._nullable})"
