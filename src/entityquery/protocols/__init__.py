"""Protocol definitions for entityquery.

Protocols provide type-safe interfaces without requiring inheritance,
following Python's structural subtyping (duck typing with type hints).
"""

from .entity import Entity

__all__ = [
    "Entity",
]
