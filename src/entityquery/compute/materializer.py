"""Conversion of result rows into entity instances."""

from typing import Iterable, List, Sequence

from entityquery.protocols.entity import Entity
from entityquery.query_builder.builder import SelectPlan


class RowMaterializer:
    """Builds ``[root, *joined entities]`` lists from the rows of a ``SelectPlan``.

    Every node of the join tree yields a fresh entity from its metadata
    factory, in pre-order. Selected columns are scanned into those entities
    by position. Columns outside the masks keep the factory defaults, so an
    unmatched optional join comes back as a blank entity whose selected
    columns are all ``None``.
    """

    def __init__(self, plan: SelectPlan):
        self._plan = plan

    def materialize(self, row: Sequence) -> List[Entity]:
        entities = [node.metadata.create_object() for node in self._plan.nodes]
        bindings = [entity.fields() for entity in entities]
        for value, (index, column) in zip(row, self._plan.layout):
            bindings[index][column].scan(value)
        return entities

    def materialize_all(self, rows: Iterable[Sequence]) -> List[List[Entity]]:
        return [self.materialize(row) for row in rows]
