"""Dev seeding helper: a small Paris trip to reflow against locally."""

from backend.reflow.db.repositories import ItineraryStore
from backend.reflow.models import Activity, Coordinate, Day, Itinerary, Place, TimeSlot
from backend.reflow.models.common import parse_clock
from backend.reflow.planning.schedule import from_minutes, to_minutes

# Fixed trip id so local requests can target /trips/dev-trip/reflow
DEV_TRIP_ID = "dev-trip"


def _activity(
    activity_id: str,
    name: str,
    category: str,
    coordinate: tuple[float, float],
    start: str,
    duration: int,
    cost: float | None = None,
    locked: bool = False,
) -> Activity:
    start_time = parse_clock(start)
    return Activity(
        id=activity_id,
        place=Place(
            id=f"place-{activity_id}",
            name=name,
            category=category,
            coordinate=Coordinate(lat=coordinate[0], lng=coordinate[1]),
            source="seed",
        ),
        time_slot=TimeSlot(start=start_time, end=from_minutes(to_minutes(start_time) + duration)),
        duration_minutes=duration,
        cost_estimate=cost,
        locked=locked,
    )


def build_dev_itinerary() -> Itinerary:
    """Two Paris days with one locked booking on the first."""
    day_one = [
        _activity("dev-eiffel", "Eiffel Tower", "landmark", (48.8584, 2.2945), "09:00", 120,
                  cost=29.0, locked=True),
        _activity("dev-louvre", "Louvre Museum", "museum", (48.8606, 2.3376), "11:30", 180,
                  cost=22.0),
        _activity("dev-orsay", "Musee d'Orsay", "museum", (48.8600, 2.3266), "15:00", 120,
                  cost=16.0),
    ]
    day_two = [
        _activity("dev-sacre-coeur", "Sacre-Coeur", "landmark", (48.8867, 2.3431), "09:00", 90),
        _activity("dev-notre-dame", "Notre-Dame", "landmark", (48.8530, 2.3499), "11:00", 60),
    ]
    return Itinerary(
        days=[
            Day(activities=day_one, notes="Museums", total_budget=100.0),
            Day(activities=day_two, notes="Churches"),
        ]
    )


def seed_dev_trip(store: ItineraryStore) -> bool:
    """Seed the dev trip at version 1.

    This function is idempotent - safe to run multiple times. Nothing is
    written when the trip already has a version.

    Returns:
        True if version 1 was written
    """
    latest = store.latest_version(DEV_TRIP_ID)
    if latest is not None:
        print(f"Dev trip already exists at version {latest}")
        return False

    print(f"Creating dev trip {DEV_TRIP_ID}...")
    store.put(DEV_TRIP_ID, 1, build_dev_itinerary())
    print("Dev seeding complete")
    return True


if __name__ == "__main__":
    from backend.reflow.config import get_settings
    from backend.reflow.db.engine import create_store

    seed_dev_trip(create_store(get_settings()))
