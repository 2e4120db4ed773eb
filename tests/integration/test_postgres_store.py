"""PostgreSQL-specific integration tests for the JSONB-backed itinerary store.

These tests require a real PostgreSQL instance and check that the document
and lock columns are created as JSONB and round-trip through the store.

Run with: TEST_DATABASE_URL='postgresql://...' pytest -m postgres
"""

import pytest
from sqlalchemy import Engine, text
from sqlalchemy.orm import Session, sessionmaker

from backend.reflow.db.sql_repositories import SqlItineraryStore
from backend.reflow.errors import VersionConflict
from backend.reflow.models import Activity, Coordinate, Day, Itinerary, Place, TimeSlot


def make_itinerary() -> Itinerary:
    """Helper to create a one-activity itinerary."""
    activity = Activity(
        id="a1",
        place=Place(
            id="p1",
            name="Pantheon",
            category="sight",
            coordinate=Coordinate(lat=41.8986, lng=12.4769),
        ),
        time_slot=TimeSlot(start="10:00", end="11:00"),
        duration_minutes=60,
        cost_estimate=5.0,
    )
    return Itinerary(days=[Day(activities=[activity])])


@pytest.mark.postgres
def test_document_columns_are_jsonb(postgres_engine: Engine) -> None:
    """Test that data and locks are stored as JSONB on PostgreSQL."""
    with postgres_engine.connect() as conn:
        rows = conn.execute(
            text(
                "SELECT column_name, data_type FROM information_schema.columns "
                "WHERE table_name = 'itinerary_version' "
                "AND column_name IN ('data', 'locks')"
            )
        ).all()

    assert dict(rows) == {"data": "jsonb", "locks": "jsonb"}


@pytest.mark.postgres
def test_round_trip_with_locks(postgres_session_factory: sessionmaker[Session]) -> None:
    """Test that a version and its lock record read back unchanged."""
    store = SqlItineraryStore(postgres_session_factory)
    itinerary = make_itinerary()

    store.put("pg-trip", 1, itinerary)
    store.put("pg-trip", 2, itinerary, locked_activity_ids=["a1"])

    assert store.latest_version("pg-trip") == 2
    assert store.get("pg-trip", 1) == itinerary
    record = store.get_record("pg-trip", 2)
    assert record is not None and record.locks is not None
    assert record.locks.locked_activity_ids == ("a1",)


@pytest.mark.postgres
def test_stale_write_conflicts(postgres_session_factory: sessionmaker[Session]) -> None:
    """Test compare-and-set against the PostgreSQL unique constraint path."""
    store = SqlItineraryStore(postgres_session_factory)
    store.put("pg-trip", 1, make_itinerary())

    with pytest.raises(VersionConflict) as exc_info:
        store.put("pg-trip", 1, make_itinerary())

    assert exc_info.value.latest_version == 1
