"""Integration tests for the dev seeding helper."""

from datetime import datetime

from backend.reflow.config import Settings
from backend.reflow.db.engine import create_store
from backend.reflow.db.inmemory import InMemoryItineraryStore
from backend.reflow.db.seed_dev import DEV_TRIP_ID, build_dev_itinerary, seed_dev_trip
from backend.reflow.models import ChangeSet
from backend.reflow.orchestration.change_set import ChangeSetProcessor


def test_dev_trip_id_is_fixed() -> None:
    """Test that local requests can rely on the dev trip id."""
    assert DEV_TRIP_ID == "dev-trip"


def test_seed_writes_version_one(store: InMemoryItineraryStore) -> None:
    """Test that seeding an empty store creates the dev trip at version 1."""
    assert seed_dev_trip(store) is True

    assert store.latest_version(DEV_TRIP_ID) == 1
    assert store.get(DEV_TRIP_ID, 1) == build_dev_itinerary()


def test_seed_is_idempotent(store: InMemoryItineraryStore) -> None:
    """Test that seeding twice leaves the existing trip untouched."""
    seed_dev_trip(store)
    store.put(DEV_TRIP_ID, 2, build_dev_itinerary())

    assert seed_dev_trip(store) is False
    assert store.latest_version(DEV_TRIP_ID) == 2


def test_create_store_seeds_when_enabled() -> None:
    """Test that SEED_DEV_DATA seeds the store on creation."""
    seeded = create_store(Settings(database_url=None, seed_dev_data=True))
    plain = create_store(Settings(database_url=None))

    assert seeded.latest_version(DEV_TRIP_ID) == 1
    assert plain.latest_version(DEV_TRIP_ID) is None


def test_dev_itinerary_reflows_cleanly(settings: Settings, fixed_now: datetime) -> None:
    """Test that the seeded trip is a valid reflow input that keeps its booking."""
    itinerary = build_dev_itinerary()

    result = ChangeSetProcessor(settings).apply(itinerary, ChangeSet(), now=fixed_now)

    eiffel = result.itinerary.days[0].activities[0]
    assert eiffel.id == "dev-eiffel"
    assert eiffel.time_slot == itinerary.days[0].activities[0].time_slot
    assert result.summary.locks_preserved == 1
