"""Query description module.

This module provides the ``Query`` join-tree node with its fluent builder
API, and the traversal orders the renderer and the materializer rely on.
Queries are pure description until executed; SQL generation lives in
``entityquery.query_builder`` and execution in ``entityquery.compute``.
"""

from entityquery.operations.query import Query
from entityquery.operations.tree import join_edges, preorder

__all__ = [
    "Query",
    "preorder",
    "join_edges",
]
