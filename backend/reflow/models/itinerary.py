"""Itinerary models - the versioned trip document."""

from collections.abc import Iterator
from datetime import datetime

from pydantic import Field

from backend.reflow.models.common import CamelModel, Place, TimeSlot


class Activity(CamelModel):
    """Single scheduled stop in a day."""

    id: str = Field(..., min_length=1)
    place: Place
    time_slot: TimeSlot
    duration_minutes: int = Field(..., gt=0)
    locked: bool = False
    cost_estimate: float | None = Field(default=None, ge=0)
    notes: str = ""

    @property
    def category(self) -> str:
        return self.place.category


class Day(CamelModel):
    """One calendar day of the trip; list position is the schedule order."""

    activities: list[Activity] = Field(default_factory=list)
    notes: str = ""
    total_budget: float | None = Field(default=None, ge=0)


class Itinerary(CamelModel):
    """Root document for one trip.

    The number of days is fixed for the trip; reflow never adds or removes days.
    """

    days: list[Day]
    reflow_count: int = Field(default=0, ge=0)
    last_reflowed_at: datetime | None = None

    def iter_activities(self) -> Iterator[tuple[int, Activity]]:
        """Yield (day_index, activity) for every activity in calendar order."""
        for day_index, day in enumerate(self.days):
            for activity in day.activities:
                yield day_index, activity

    def find_activity(self, activity_id: str) -> Activity | None:
        """Look up an activity by id across all days."""
        for _, activity in self.iter_activities():
            if activity.id == activity_id:
                return activity
        return None
