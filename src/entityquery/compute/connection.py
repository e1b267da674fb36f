"""Engine and transaction helpers.

Applications that already own a SQLAlchemy engine do not need this module;
any ``Connection`` can be handed to ``Query.with_connection``.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import sqlalchemy as sa
from sqlalchemy.engine import Connection, Engine

from entityquery.logging import get_logger
from entityquery.settings import EntityQuerySettings, get_settings

logger = get_logger(__name__)


def create_engine(settings: Optional[EntityQuerySettings] = None, **kwargs) -> Engine:
    """Create a SQLAlchemy engine from settings.

    Args:
        settings: Settings to use; the process-wide settings when omitted
        **kwargs: Extra keyword arguments for ``sqlalchemy.create_engine``

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    settings = settings or get_settings()
    options = {
        "echo": settings.echo_sql,
        "pool_pre_ping": settings.pool_pre_ping,
    }
    options.update(kwargs)
    engine = sa.create_engine(settings.database_url, **options)
    logger.info("Created SQL engine", extra={"db.system": engine.dialect.name})
    return engine


@contextmanager
def transaction(engine: Engine) -> Iterator[Connection]:
    """Yield a connection inside a transaction.

    The transaction commits when the block exits normally and rolls back
    when it raises; the exception propagates.

    Example:
        >>> with transaction(engine) as conn:
        ...     Query().with_connection(conn).from_(tag).insert()
    """
    with engine.begin() as conn:
        yield conn
