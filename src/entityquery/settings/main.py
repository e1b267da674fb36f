from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class EntityQuerySettings(BaseSettings):
    """Runtime configuration for entityquery.

    Values come from ``ENTITYQUERY_*`` environment variables or a ``.env``
    file, falling back to the defaults below. The engine itself only reads
    the logging-related fields; ``database_url``, ``echo_sql`` and
    ``pool_pre_ping`` feed ``entityquery.compute.connection.create_engine``.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENTITYQUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    database_url: str = Field(
        default="sqlite+pysqlite:///:memory:",
        description="SQLAlchemy URL of the database used by create_engine()",
    )
    echo_sql: bool = Field(
        default=False,
        description="Pass echo=True to SQLAlchemy so every statement is echoed by its own logger",
    )
    pool_pre_ping: bool = Field(
        default=True,
        description="Verify pooled connections before handing them out",
    )
    log_level: str = Field(
        default="INFO",
        description="Level used by setup_logging() for the entityquery logger hierarchy",
    )
    log_statements: bool = Field(
        default=True,
        description="Emit a DEBUG record with the rendered SQL of every executed statement",
    )
    statement_log_length: int = Field(
        default=500,
        ge=50,
        le=10000,
        description="Maximum number of SQL characters kept in log records and span attributes",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that the level is a standard logging level name."""
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}. Use one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    def truncate_statement(self, statement: str) -> str:
        """Shorten SQL for logs and span attributes."""
        limit = self.statement_log_length
        return statement if len(statement) <= limit else f"{statement[:limit - 3]}..."


@lru_cache(maxsize=1)
def get_settings() -> EntityQuerySettings:
    """Return the process-wide settings, loading them on first use."""
    return EntityQuerySettings()


def _reload_settings() -> EntityQuerySettings:
    """Drop the cached settings and load them again from the environment."""
    get_settings.cache_clear()
    return get_settings()
