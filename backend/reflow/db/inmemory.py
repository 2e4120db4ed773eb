"""In-memory implementation of the itinerary store."""

import threading
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from backend.reflow.db.repositories import ItineraryVersionRecord, LockRecord
from backend.reflow.errors import VersionConflict
from backend.reflow.models.itinerary import Itinerary


class InMemoryItineraryStore:
    """In-memory implementation of ItineraryStore.

    Documents are stored as JSON-compatible dicts and re-validated on read,
    so callers never share object references with the store.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._versions: dict[str, dict[int, tuple[dict[str, Any], LockRecord | None, datetime]]] = {}

    def get(self, trip_id: str, version: int) -> Itinerary | None:
        """Get the itinerary at a specific version."""
        record = self.get_record(trip_id, version)
        return record.itinerary if record else None

    def get_record(self, trip_id: str, version: int) -> ItineraryVersionRecord | None:
        """Get a stored version together with its lock record."""
        with self._lock:
            data = self._versions.get(trip_id, {}).get(version)

        if data is None:
            return None

        document, locks, created_at = data
        return ItineraryVersionRecord(
            trip_id=trip_id,
            version=version,
            itinerary=Itinerary.model_validate(document),
            locks=locks,
            created_at=created_at,
        )

    def latest_version(self, trip_id: str) -> int | None:
        """Get the latest committed version number."""
        with self._lock:
            versions = self._versions.get(trip_id)
            return max(versions) if versions else None

    def put(
        self,
        trip_id: str,
        version: int,
        itinerary: Itinerary,
        locked_activity_ids: Sequence[str] = (),
    ) -> None:
        """Write a new version (compare-and-set on the latest version)."""
        document = itinerary.model_dump(mode="json", by_alias=True)
        now = datetime.now(timezone.utc)
        locks = LockRecord(tuple(locked_activity_ids), now) if locked_activity_ids else None

        with self._lock:
            versions = self._versions.setdefault(trip_id, {})
            latest = max(versions) if versions else None
            expected = (latest or 0) + 1

            if version != expected:
                raise VersionConflict(trip_id, version - 1, latest)

            versions[version] = (document, locks, now)

    def ping(self) -> None:
        """In-memory store is always reachable."""
        return None
