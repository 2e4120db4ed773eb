"""Repository protocol interfaces for versioned itinerary storage."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from backend.reflow.models.itinerary import Itinerary


@dataclass(frozen=True)
class LockRecord:
    """Lock ids requested by the reflow that produced a version."""

    locked_activity_ids: tuple[str, ...]
    recorded_at: datetime


@dataclass
class ItineraryVersionRecord:
    """One immutable stored version of a trip's itinerary."""

    trip_id: str
    version: int
    itinerary: Itinerary
    locks: LockRecord | None
    created_at: datetime


class ItineraryStore(Protocol):
    """Versioned document store for itineraries.

    Versions are immutable once written. ``put`` is a compare-and-set on the
    latest version so at most one writer commits each version.
    """

    def get(self, trip_id: str, version: int) -> Itinerary | None:
        """Get the itinerary at a specific version.

        Args:
            trip_id: Trip identifier
            version: Version number (>= 1)

        Returns:
            Itinerary or None if the trip/version does not exist
        """
        ...

    def get_record(self, trip_id: str, version: int) -> ItineraryVersionRecord | None:
        """Get a stored version together with its lock record.

        Args:
            trip_id: Trip identifier
            version: Version number (>= 1)

        Returns:
            Version record or None if not found
        """
        ...

    def latest_version(self, trip_id: str) -> int | None:
        """Get the latest committed version number.

        Args:
            trip_id: Trip identifier

        Returns:
            Latest version or None if the trip has no versions
        """
        ...

    def put(
        self,
        trip_id: str,
        version: int,
        itinerary: Itinerary,
        locked_activity_ids: Sequence[str] = (),
    ) -> None:
        """Write a new version.

        Succeeds only when ``version`` is exactly one past the latest stored
        version (or 1 for a new trip).

        Args:
            trip_id: Trip identifier
            version: Version number to write
            itinerary: Itinerary document
            locked_activity_ids: Lock ids recorded with this version

        Raises:
            VersionConflict: If the latest stored version is not version - 1
        """
        ...

    def ping(self) -> None:
        """Check store reachability; raises on failure."""
        ...
