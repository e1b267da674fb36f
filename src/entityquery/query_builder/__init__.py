"""SQL statement construction for queries.

This package maps entity metadata onto SQLAlchemy tables, validates the
columns a query references and renders SELECT, COUNT, INSERT, UPDATE and
DELETE statements.
"""

from entityquery.query_builder.builder import InsertPlan, SelectPlan, StatementBuilder
from entityquery.query_builder.predicates import column
from entityquery.query_builder.tables import TableRegistry, build_table

__all__ = [
    "StatementBuilder",
    "SelectPlan",
    "InsertPlan",
    "TableRegistry",
    "build_table",
    "column",
]
