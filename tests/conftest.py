"""Shared pytest fixtures for all test suites."""

import itertools
import os
from collections.abc import Callable, Iterator
from datetime import datetime, timezone

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

from backend.reflow.config import Settings, get_settings
from backend.reflow.db.engine import get_store
from backend.reflow.db.inmemory import InMemoryItineraryStore
from backend.reflow.db.models import Base


@pytest.fixture(autouse=True)
def clear_cached_singletons() -> Iterator[None]:
    """Reset cached settings and store between tests."""
    get_settings.cache_clear()
    get_store.cache_clear()
    yield
    get_settings.cache_clear()
    get_store.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Default settings with no database configured."""
    return Settings(database_url=None)


@pytest.fixture
def store() -> InMemoryItineraryStore:
    """Fresh in-memory itinerary store."""
    return InMemoryItineraryStore()


@pytest.fixture
def fixed_now() -> datetime:
    """Deterministic reflow timestamp."""
    return datetime(2025, 6, 10, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    """Deterministic id factory yielding new-1, new-2, ..."""
    counter = itertools.count(1)
    return lambda: f"new-{next(counter)}"


@pytest.fixture
def postgres_engine() -> Iterator[Engine]:
    """Create engine for PostgreSQL integration tests.

    Requires TEST_DATABASE_URL (or DATABASE_URL, which the root conftest
    moves there) to be a real PostgreSQL connection string. Tests using this
    fixture should be marked with @pytest.mark.postgres.

    Usage:
        @pytest.mark.postgres
        def test_something(postgres_engine):
            with Session(postgres_engine) as session:
                # ... test code
    """
    database_url = os.getenv("TEST_DATABASE_URL")
    if not database_url:
        pytest.skip("TEST_DATABASE_URL not set - skipping postgres test")

    if not database_url.startswith(("postgresql://", "postgresql+psycopg2://")):
        pytest.skip(f"TEST_DATABASE_URL is not PostgreSQL: {database_url}")

    engine = create_engine(database_url, poolclass=NullPool, echo=False)
    Base.metadata.create_all(engine)

    yield engine

    # Cleanup: drop all tables
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def postgres_session_factory(postgres_engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to the PostgreSQL test engine."""
    return sessionmaker(bind=postgres_engine, expire_on_commit=False)
