"""Statement execution and row materialization."""

from entityquery.compute.connection import create_engine, transaction
from entityquery.compute.materializer import RowMaterializer
from entityquery.compute.sql_engine import SQLEngine

__all__ = [
    "SQLEngine",
    "RowMaterializer",
    "create_engine",
    "transaction",
]
