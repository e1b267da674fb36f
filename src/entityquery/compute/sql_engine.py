"""Execution of rendered queries on a SQLAlchemy connection.

``SQLEngine`` is the only place statements touch the database. Every
execution runs inside an OpenTelemetry span, scopes the logging query
context, records statement metrics and, when enabled, emits one DEBUG
record with the rendered SQL. Failures are recorded on the span and in the
error counter and re-raised as the connection raised them; the engine does
not log them.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from sqlalchemy.engine import Connection, CursorResult
from sqlalchemy.exc import NoResultFound
from sqlalchemy.sql.base import Executable

from entityquery.compute.materializer import RowMaterializer
from entityquery.constants.sql import QueryType
from entityquery.logging import get_logger, query_context
from entityquery.monitoring.metrics import MetricsCollector, StatementMetrics, get_metrics_collector
from entityquery.operations.query import Query
from entityquery.protocols.entity import Entity
from entityquery.query_builder.builder import StatementBuilder
from entityquery.settings import EntityQuerySettings, get_settings
from entityquery.utils.decorators import traced

logger = get_logger(__name__)

T = TypeVar("T")

Consume = Callable[[CursorResult], Tuple[T, int]]


class SQLEngine:
    """Runs one ``Query`` operation on a caller-owned connection.

    The engine never begins, commits or rolls back; the caller's
    transaction decides what is atomic.

    Example:
        >>> with transaction(engine) as conn:
        ...     SQLEngine(conn).insert(Query().from_(tag))
    """

    def __init__(
        self,
        connection: Connection,
        settings: Optional[EntityQuerySettings] = None,
        builder: Optional[StatementBuilder] = None,
        metrics: Optional[MetricsCollector] = None,
        execution_options: Optional[Dict[str, Any]] = None,
    ):
        self._connection = connection
        self.settings = settings or get_settings()
        self._builder = builder or StatementBuilder()
        self._metrics = metrics or get_metrics_collector()
        self._execution_options = dict(execution_options or {})

    # Reads

    def fetch(self, query: Query) -> List[Entity]:
        """Materialize the first matching row.

        Raises:
            NoResultFound: If no row matches
        """
        plan = self._builder.build_select(query)
        row = self._run(
            QueryType.SELECT,
            query.table_name,
            plan.statement,
            lambda result: _rows_and_count(result.first()),
        )
        if row is None:
            raise NoResultFound("No row was found when one was required")
        return RowMaterializer(plan).materialize(row)

    def list(self, query: Query) -> List[List[Entity]]:
        plan = self._builder.build_select(query)
        rows = self._run(
            QueryType.SELECT,
            query.table_name,
            plan.statement,
            lambda result: _all_rows(result.all()),
        )
        return RowMaterializer(plan).materialize_all(rows)

    def count(self, query: Query) -> int:
        statement = self._builder.build_count(query)
        return self._run(
            QueryType.COUNT,
            query.table_name,
            statement,
            lambda result: (int(result.scalar_one()), 1),
        )

    # Writes

    def insert(self, query: Query) -> int:
        """Insert the root entity and return its primary key."""
        plan = self._builder.build_insert(query)

        def consume(result: CursorResult) -> Tuple[int, int]:
            if plan.generated_key:
                return result.inserted_primary_key[0], result.rowcount
            return plan.key, result.rowcount

        return self._run(QueryType.INSERT, query.table_name, plan.statement, consume)

    def update(self, query: Query) -> int:
        statement = self._builder.build_update(query)
        return self._run(QueryType.UPDATE, query.table_name, statement, _affected)

    def delete(self, query: Query) -> int:
        statement = self._builder.build_delete(query)
        return self._run(QueryType.DELETE, query.table_name, statement, _affected)

    # Execution

    @property
    def dialect(self) -> str:
        return self._connection.dialect.name

    def render(self, statement: Executable) -> str:
        """SQL text of ``statement`` in the connection's dialect, with placeholders."""
        return str(statement.compile(dialect=self._connection.dialect))

    def _span_attributes(self, operation: QueryType, table: str, statement: Executable) -> Dict[str, Any]:
        return {
            "db.system": self.dialect,
            "db.operation": operation.value,
            "db.sql.table": table,
            "db.statement": self.settings.truncate_statement(self.render(statement)),
        }

    @traced(
        span_name="entityquery.statement",
        attribute_getter=lambda self, operation, table, statement, consume: self._span_attributes(
            operation, table, statement
        ),
    )
    def _run(self, operation: QueryType, table: str, statement: Executable, consume: Consume) -> T:
        start_time = time.perf_counter()
        with query_context(table, operation.value):
            try:
                result = self._connection.execute(
                    statement,
                    execution_options=self._execution_options or None,
                )
                value, rows = consume(result)
            except Exception:
                self._record(operation, table, 0, time.perf_counter() - start_time, success=False)
                raise

            duration = time.perf_counter() - start_time
            self._record(operation, table, rows, duration, success=True)

            if self.settings.log_statements and logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Statement executed",
                    extra={
                        "db.operation": operation.value,
                        "db.sql.table": table,
                        "db.statement": self.settings.truncate_statement(self.render(statement)),
                        "rows": rows,
                        "duration.seconds": f"{duration:.6f}",
                    },
                )
        return value

    def _record(self, operation: QueryType, table: str, rows: int, duration: float, success: bool) -> None:
        self._metrics.record_statement(
            StatementMetrics(
                operation=operation.value,
                table_name=table,
                rows=rows,
                duration_seconds=duration,
                success=success,
                dialect=self.dialect,
            )
        )


def _rows_and_count(row: Any) -> Tuple[Any, int]:
    return row, 0 if row is None else 1


def _all_rows(rows: List[Any]) -> Tuple[List[Any], int]:
    return rows, len(rows)


def _affected(result: CursorResult) -> Tuple[int, int]:
    return result.rowcount, result.rowcount
