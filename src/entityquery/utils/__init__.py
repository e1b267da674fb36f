"""Utility helpers for entityquery."""

from entityquery.utils.decorators import traced

__all__ = [
    "traced",
]
