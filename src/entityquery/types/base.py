"""Base model class for all entityquery models with serialization support."""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class EQBaseModel(BaseModel):
    """Base model for all entityquery models.

    Models are immutable: metadata and masks are built once and shared by
    every query that uses them.
    """
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary for serialization.

        Recursively converts nested EQBaseModel instances and enums, and
        drops callables (such as entity factories) that have no serialized
        form.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        data = self.model_dump(by_alias=False, exclude_none=True)

        def convert_nested(obj):
            if isinstance(obj, EQBaseModel):
                return obj.to_dict()
            elif isinstance(obj, dict):
                return {k: convert_nested(v) for k, v in obj.items() if not callable(v)}
            elif isinstance(obj, (list, tuple)):
                return [convert_nested(item) for item in obj]
            elif isinstance(obj, (set, frozenset)):
                return sorted(convert_nested(item) for item in obj)
            elif isinstance(obj, Enum):
                return obj.value
            return obj

        return convert_nested(data)
