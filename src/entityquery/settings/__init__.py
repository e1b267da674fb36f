"""Settings module for entityquery, built on Pydantic Settings.

Configuration Sources (precedence order):
    1. Environment variables prefixed ``ENTITYQUERY_`` (highest priority)
    2. A ``.env`` file in the working directory
    3. Default values in code (lowest priority)

Quick Start:
    >>> from entityquery.settings import get_settings
    >>> settings = get_settings()
    >>> settings.database_url
    'sqlite+pysqlite:///:memory:'
"""

from .main import EntityQuerySettings, _reload_settings, get_settings

__all__ = [
    "EntityQuerySettings",
    "get_settings",
]
