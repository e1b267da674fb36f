"""Field masks controlling which columns an operation touches."""

from enum import Enum
from typing import FrozenSet

from pydantic import Field

from entityquery.types.base import EQBaseModel


class MaskMode(str, Enum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


class FieldMask(EQBaseModel):
    """Include or exclude set of column names.

    A mask is in exactly one mode. In include mode only the named columns
    participate; in exclude mode every column except the named ones does.
    The same mask drives SELECT projections and INSERT/UPDATE column sets.

    Example:
        >>> FieldMask.include("id", "name").participates("name")
        True
        >>> FieldMask.exclude("id").participates("id")
        False
        >>> FieldMask.exclude().participates("anything")
        True
    """
    mode: MaskMode
    names: FrozenSet[str] = Field(default_factory=frozenset)

    @classmethod
    def include(cls, *names: str) -> "FieldMask":
        return cls(mode=MaskMode.INCLUDE, names=frozenset(names))

    @classmethod
    def exclude(cls, *names: str) -> "FieldMask":
        return cls(mode=MaskMode.EXCLUDE, names=frozenset(names))

    def participates(self, column: str) -> bool:
        """Return True if ``column`` takes part in the operation."""
        named = column in self.names
        return named if self.mode == MaskMode.INCLUDE else not named


def new_include_mask(*names: str) -> FieldMask:
    """Mask selecting only ``names``."""
    return FieldMask.include(*names)


def new_exclude_mask(*names: str) -> FieldMask:
    """Mask selecting every column except ``names``."""
    return FieldMask.exclude(*names)
