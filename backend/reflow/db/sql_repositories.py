"""SQL implementation of the itinerary store."""

from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from backend.reflow.db.models import ItineraryVersion
from backend.reflow.db.repositories import ItineraryVersionRecord, LockRecord
from backend.reflow.errors import VersionConflict
from backend.reflow.models.itinerary import Itinerary


def _latest_version(session: Session, trip_id: str) -> int | None:
    return session.scalar(
        select(func.max(ItineraryVersion.version)).where(ItineraryVersion.trip_id == trip_id)
    )


class SqlItineraryStore:
    """SQL implementation of ItineraryStore.

    Each call runs in its own session. The (trip_id, version) unique
    constraint makes concurrent writers of the same version fail at commit.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get(self, trip_id: str, version: int) -> Itinerary | None:
        """Get the itinerary at a specific version."""
        record = self.get_record(trip_id, version)
        return record.itinerary if record else None

    def get_record(self, trip_id: str, version: int) -> ItineraryVersionRecord | None:
        """Get a stored version together with its lock record."""
        with self._session_factory() as session:
            row = session.scalars(
                select(ItineraryVersion).where(
                    ItineraryVersion.trip_id == trip_id,
                    ItineraryVersion.version == version,
                )
            ).first()

            if row is None:
                return None

            locks = None
            if row.locks:
                locks = LockRecord(
                    locked_activity_ids=tuple(row.locks.get("lockedActivityIds", [])),
                    recorded_at=datetime.fromisoformat(row.locks["recordedAt"]),
                )

            return ItineraryVersionRecord(
                trip_id=row.trip_id,
                version=row.version,
                itinerary=Itinerary.model_validate(row.data),
                locks=locks,
                created_at=row.created_at,
            )

    def latest_version(self, trip_id: str) -> int | None:
        """Get the latest committed version number."""
        with self._session_factory() as session:
            return _latest_version(session, trip_id)

    def put(
        self,
        trip_id: str,
        version: int,
        itinerary: Itinerary,
        locked_activity_ids: Sequence[str] = (),
    ) -> None:
        """Write a new version (compare-and-set on the latest version)."""
        now = datetime.now(timezone.utc)
        locks = None
        if locked_activity_ids:
            locks = {
                "lockedActivityIds": list(locked_activity_ids),
                "recordedAt": now.isoformat(),
            }

        with self._session_factory() as session:
            latest = _latest_version(session, trip_id)
            if version != (latest or 0) + 1:
                raise VersionConflict(trip_id, version - 1, latest)

            session.add(
                ItineraryVersion(
                    trip_id=trip_id,
                    version=version,
                    data=itinerary.model_dump(mode="json", by_alias=True),
                    locks=locks,
                    created_at=now,
                )
            )

            try:
                session.commit()
            except IntegrityError as e:
                # A concurrent writer committed this version first
                session.rollback()
                raise VersionConflict(trip_id, version - 1, _latest_version(session, trip_id)) from e

    def ping(self) -> None:
        """Run a trivial query against the database."""
        with self._session_factory() as session:
            session.execute(text("SELECT 1"))
