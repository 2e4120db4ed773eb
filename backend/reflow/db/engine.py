"""Database engine, session factory, and store selection."""

from functools import lru_cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from backend.reflow.config import Settings, get_settings
from backend.reflow.db.inmemory import InMemoryItineraryStore
from backend.reflow.db.repositories import ItineraryStore
from backend.reflow.db.seed_dev import seed_dev_trip
from backend.reflow.db.sql_repositories import SqlItineraryStore


def create_engine_from_settings(settings: Settings) -> Engine:
    """Create SQLAlchemy engine from settings.

    Raises:
        ValueError: If DATABASE_URL is unset or empty.
    """
    if not settings.database_url:
        raise ValueError(
            "DATABASE_URL must be set to a valid connection string. "
            "Please configure the database_url setting."
        )

    return create_engine(settings.database_url, pool_pre_ping=True, echo=False)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create sessionmaker for creating database sessions.

    Args:
        engine: SQLAlchemy engine

    Returns:
        Sessionmaker bound to the engine
    """
    return sessionmaker(bind=engine, expire_on_commit=False)


def create_store(settings: Settings) -> ItineraryStore:
    """Build the itinerary store configured by settings.

    Uses the SQL store when DATABASE_URL is set, otherwise an in-memory store.
    With SEED_DEV_DATA set, the dev trip is written if it is missing.
    """
    store: ItineraryStore
    if not settings.database_url:
        store = InMemoryItineraryStore()
    else:
        engine = create_engine_from_settings(settings)
        store = SqlItineraryStore(create_session_factory(engine))

    if settings.seed_dev_data:
        seed_dev_trip(store)
    return store


@lru_cache
def get_store() -> ItineraryStore:
    """FastAPI dependency returning the process-wide itinerary store."""
    return create_store(get_settings())
