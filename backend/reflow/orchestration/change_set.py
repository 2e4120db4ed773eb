"""Change-set processing: remove, modify, add, then reorder and reschedule each day.

The processor is a pure function of (itinerary, change set, injected id
factory and clock). It works on a deep copy and never mutates its input.
"""

import logging
import uuid
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, time

from backend.reflow.config import Settings, get_settings
from backend.reflow.errors import InvalidChangeSet
from backend.reflow.models.change_set import (
    ActivityPatch,
    AddedActivity,
    Annotate,
    ChangeSet,
    Recategorize,
    ReflowPreferences,
    RenameActivity,
    Reprice,
    Reschedule,
)
from backend.reflow.models.common import Coordinate, Place, TimeSlot, parse_clock
from backend.reflow.models.itinerary import Activity, Day, Itinerary
from backend.reflow.models.reflow import ChangeSummary
from backend.reflow.models.violations import Violation, ViolationKind, ViolationSeverity
from backend.reflow.planning.geo import path_length_km
from backend.reflow.planning.route import optimize_route
from backend.reflow.planning.schedule import (
    fits_before_anchors,
    from_minutes,
    schedule_day,
    to_minutes,
)
from backend.reflow.verification.budget import enforce_budget

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


@dataclass
class ProcessResult:
    """Outcome of applying a change set."""

    itinerary: Itinerary
    summary: ChangeSummary
    warnings: list[Violation] = field(default_factory=list)


def apply_patch(activity: Activity, patch: ActivityPatch) -> Activity:
    """Return a copy of activity with one field-level patch applied."""
    if isinstance(patch, RenameActivity):
        place = activity.place.model_copy(update={"name": patch.name})
        return activity.model_copy(update={"place": place})
    if isinstance(patch, Recategorize):
        place = activity.place.model_copy(update={"category": patch.category})
        return activity.model_copy(update={"place": place})
    if isinstance(patch, Reschedule):
        return activity.model_copy(update={"duration_minutes": patch.duration_minutes})
    if isinstance(patch, Reprice):
        return activity.model_copy(update={"cost_estimate": patch.cost_estimate})
    if isinstance(patch, Annotate):
        return activity.model_copy(update={"notes": patch.notes})
    raise TypeError(f"Unsupported patch type: {type(patch).__name__}")


class ChangeSetProcessor:
    """Applies a change set to an itinerary and re-optimizes every day."""

    def __init__(
        self,
        settings: Settings | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._id_factory = id_factory or self._default_id

    def _default_id(self) -> str:
        return f"{self._settings.activity_id_prefix}_{uuid.uuid4().hex[:12]}"

    def apply(
        self,
        itinerary: Itinerary,
        change_set: ChangeSet,
        preferences: ReflowPreferences | None = None,
        *,
        now: datetime,
    ) -> ProcessResult:
        """Apply change_set to itinerary.

        Args:
            itinerary: Current itinerary (not mutated)
            change_set: Edits to apply
            preferences: Optimization preferences (defaults to optimize_route=True)
            now: Timestamp recorded as last_reflowed_at

        Returns:
            ProcessResult with the new itinerary, counts, and advisory warnings

        Raises:
            InvalidChangeSet: If the input is malformed (nothing is applied)
            BudgetExceeded: If a budget ceiling is exceeded after applying changes
        """
        preferences = preferences or ReflowPreferences()
        self.validate(itinerary, change_set)

        work = itinerary.model_copy(deep=True)
        locked_ids = set(change_set.locked_activity_ids) | {
            a.id for _, a in work.iter_activities() if a.locked
        }

        day_start, buffer_minutes, day_end = self._time_settings(change_set)
        summary = ChangeSummary()
        warnings: list[Violation] = []

        # 1. Remove
        removed_ids = set(change_set.removed_activities)
        for day in work.days:
            kept = [a for a in day.activities if a.id not in removed_ids]
            summary.removed += len(day.activities) - len(kept)
            day.activities = kept

        # 2. Modify (locked targets are silently ignored)
        patches: dict[str, list[ActivityPatch]] = {}
        for modification in change_set.modified_activities:
            patches.setdefault(modification.id, []).extend(modification.changes)

        ignored: list[str] = []
        for day in work.days:
            for i, activity in enumerate(day.activities):
                if activity.id not in patches:
                    continue
                if activity.id in locked_ids:
                    ignored.append(activity.id)
                    continue
                for patch in patches[activity.id]:
                    activity = apply_patch(activity, patch)
                day.activities[i] = activity
                summary.modified += 1

        if ignored:
            warnings.append(
                Violation(
                    kind=ViolationKind.LOCK,
                    code="LOCKED_MODIFICATION_IGNORED",
                    message="Modifications targeting locked activities were ignored.",
                    severity=ViolationSeverity.ADVISORY,
                    affected_activity_ids=ignored,
                )
            )

        # 3. Add
        used_ids = {a.id for _, a in itinerary.iter_activities()}
        for added in change_set.added_activities:
            activity = self._new_activity(added, used_ids, day_start)
            used_ids.add(activity.id)
            work.days[added.day_index].activities.append(activity)
            summary.added += 1

        # 4. Route + schedule per day
        def feasible(order: list[Activity]) -> bool:
            return fits_before_anchors(
                order, locked_ids, day_start=day_start, buffer_minutes=buffer_minutes
            )

        new_days: list[Day] = []
        travel_km = 0.0
        for day_index, day in enumerate(work.days):
            activities = day.activities
            if preferences.optimize_route:
                activities = optimize_route(activities, locked_ids, feasible)

            result = schedule_day(
                activities,
                locked_ids,
                day_start=day_start,
                buffer_minutes=buffer_minutes,
                day_end=day_end,
                day_index=day_index,
            )
            warnings.extend(result.warnings)
            new_days.append(day.model_copy(update={"activities": result.activities}))
            travel_km += path_length_km([a.place.coordinate for a in result.activities])

        reflowed = Itinerary(
            days=new_days,
            reflow_count=itinerary.reflow_count + 1,
            last_reflowed_at=now,
        )

        # Post-step: whole-trip budget
        enforce_budget(reflowed, change_set.budget_constraints)

        summary.locks_preserved = sum(1 for _, a in reflowed.iter_activities() if a.id in locked_ids)
        summary.travel_distance_km = round(travel_km, 2)

        logger.debug(
            "Change set applied",
            extra={"structured": summary.model_dump()},
        )

        return ProcessResult(itinerary=reflowed, summary=summary, warnings=warnings)

    def validate(self, itinerary: Itinerary, change_set: ChangeSet) -> None:
        """Reject malformed input before anything is applied.

        Raises:
            InvalidChangeSet: Naming the offending field
        """
        id_counts = Counter(a.id for _, a in itinerary.iter_activities())
        duplicates = sorted(i for i, n in id_counts.items() if n > 1)
        if duplicates:
            raise InvalidChangeSet("itinerary.days", f"duplicate activity ids: {duplicates}")

        num_days = len(itinerary.days)
        for i, added in enumerate(change_set.added_activities):
            if not 0 <= added.day_index < num_days:
                raise InvalidChangeSet(
                    f"addedActivities[{i}].dayIndex",
                    f"day index {added.day_index} out of range for {num_days} day(s)",
                )

        removed_ids = set(change_set.removed_activities)
        limit = self._settings.max_activities_per_day
        for day_index, day in enumerate(itinerary.days):
            remaining = sum(1 for a in day.activities if a.id not in removed_ids)
            incoming = sum(1 for a in change_set.added_activities if a.day_index == day_index)
            if incoming and remaining + incoming > limit:
                raise InvalidChangeSet(
                    "addedActivities",
                    f"day {day_index} would hold {remaining + incoming} activities (max {limit})",
                )

    def _time_settings(self, change_set: ChangeSet) -> tuple[time, int, time | None]:
        constraints = change_set.time_constraints
        day_start = parse_clock(self._settings.default_day_start)
        buffer_minutes = self._settings.default_buffer_minutes
        day_end = None

        if constraints is not None:
            if constraints.start_time is not None:
                day_start = constraints.start_time
            if constraints.buffer_minutes is not None:
                buffer_minutes = constraints.buffer_minutes
            day_end = constraints.end_time

        return day_start, buffer_minutes, day_end

    def _new_activity(self, added: AddedActivity, used_ids: set[str], day_start: time) -> Activity:
        activity_id = self._id_factory()
        if activity_id in used_ids:
            raise ValueError(f"Id factory produced an id already in use: {activity_id}")

        place = Place(
            id=added.place_id or f"place_{activity_id}",
            name=added.name,
            category=added.category,
            coordinate=Coordinate(lat=added.location.lat, lng=added.location.lng),
            source=added.source,
        )
        # Placeholder slot; the scheduler overwrites it
        start = to_minutes(day_start)
        slot = TimeSlot(start=day_start, end=from_minutes(start + added.duration_minutes))

        return Activity(
            id=activity_id,
            place=place,
            time_slot=slot,
            duration_minutes=added.duration_minutes,
            locked=False,
            cost_estimate=added.cost_estimate,
            notes=f"Added during reflow at {added.location.name}",
        )
