"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import os
import pytest

from tests.mocks.launchpad_mocks import (
    MockLLMProvider,
    RecordingChannel,
    build_test_context,
    make_sqlite_database,
    make_test_config,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring database (deselect with '-m \"not db\"')"
    )


@pytest.fixture
def database():
    """Fresh in-memory SQLite database with all tables."""
    db = make_sqlite_database()
    yield db
    db.dispose()


@pytest.fixture
def llm():
    return MockLLMProvider()


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def config():
    return make_test_config()


@pytest.fixture
def context(config, database, llm, channel):
    """Sync-mode AppContext wired to the fakes above."""
    return build_test_context(config=config, llm=llm, channel=channel, database=database)


@pytest.fixture(scope="session")
def test_database():
    """
    Session-scoped PostgreSQL (pgvector) database URL.

    Uses TEST_DATABASE_URL when set, otherwise starts a container with
    testcontainers. Skips when neither is available.
    """
    external_url = os.environ.get("TEST_DATABASE_URL")
    if external_url:
        from tests import check_db_available
        if check_db_available():
            yield external_url
            return
        pytest.skip("External database not available")

    try:
        from testcontainers.postgres import PostgresContainer
    except ImportError:
        pytest.skip("testcontainers not installed")

    try:
        postgres = PostgresContainer(
            image="pgvector/pgvector:pg16",
            username="testuser",
            password="testpass",
            dbname="launchpad_test",
        )
        postgres.start()
    except Exception as e:
        pytest.skip(f"Could not start PostgreSQL container: {e}")

    try:
        yield postgres.get_connection_url()
    finally:
        postgres.stop()


@pytest.fixture
def pg_database(test_database):
    """Database on PostgreSQL with the vector extension and fresh tables."""
    from sqlalchemy import create_engine
    from database.database import Database
    from database.init_db import init_db
    from database.models import Base

    engine = create_engine(test_database)
    Base.metadata.drop_all(engine)

    db = Database(engine=engine)
    init_db(db)
    yield db

    Base.metadata.drop_all(engine)
    db.dispose()
