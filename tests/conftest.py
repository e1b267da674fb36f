"""Shared fixtures: an in-memory SQLite database and per-test transactions."""

import pytest
import sqlalchemy as sa
from sqlalchemy.pool import StaticPool

from entityquery import FieldMask, Query
from entityquery.query_builder import build_table
from entityquery.settings import EntityQuerySettings

from tests.models import ALL_MODELS


@pytest.fixture(scope="session")
def engine():
    """SQLite engine with every test table created once."""
    engine = sa.create_engine(
        "sqlite+pysqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    schema = sa.MetaData()
    for model in ALL_MODELS:
        build_table(model.METADATA, schema)
    schema.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def connection(engine):
    """Connection inside a transaction that is rolled back after the test."""
    with engine.connect() as conn:
        trans = conn.begin()
        try:
            yield conn
        finally:
            trans.rollback()


@pytest.fixture
def insert(connection):
    """Insert entities with every column written."""

    def _insert(*entities):
        for entity in entities:
            Query().with_connection(connection).from_(entity).select(FieldMask.exclude()).insert()

    return _insert


@pytest.fixture
def settings():
    return EntityQuerySettings(_env_file=None)
