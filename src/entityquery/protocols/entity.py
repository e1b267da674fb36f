"""Entity protocol.

Anything exposing metadata and typed bindings can be queried; the engine
never needs to know concrete entity types.
"""

from typing import TYPE_CHECKING, Dict, Protocol, runtime_checkable

if TYPE_CHECKING:
    from entityquery.types.fields import BaseType
    from entityquery.types.metadata import EntityMetadata


@runtime_checkable
class Entity(Protocol):
    """Contract every storage entity implements.

    Example:
        ```python
        class Grant:
            METADATA = EntityMetadata(table="grant", ...)

            def __init__(self, id=None, cbsd_id=None):
                self.id = id
                self.cbsd_id = cbsd_id

            def get_metadata(self) -> EntityMetadata:
                return self.METADATA

            def fields(self) -> Dict[str, BaseType]:
                return {"id": IntType(self, "id"), "cbsd_id": IntType(self, "cbsd_id")}
        ```
    """

    def get_metadata(self) -> "EntityMetadata":
        """Static description of the entity's table."""
        ...

    def fields(self) -> Dict[str, "BaseType"]:
        """Column name to binding over this instance's attributes."""
        ...
