"""Sequential time-slot assignment for one day."""

import logging
from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import time

from backend.reflow.models.common import TimeSlot, format_clock
from backend.reflow.models.itinerary import Activity
from backend.reflow.models.violations import Violation, ViolationKind, ViolationSeverity

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


@dataclass
class ScheduleResult:
    """Scheduled activities plus advisory warnings."""

    activities: list[Activity]
    warnings: list[Violation] = field(default_factory=list)


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    """Clock time for an absolute minute offset, wrapping past midnight."""
    minutes %= MINUTES_PER_DAY
    return time(minutes // 60, minutes % 60)


def _interval(slot: TimeSlot) -> tuple[int, int]:
    start, end = to_minutes(slot.start), to_minutes(slot.end)
    if end < start:
        end += MINUTES_PER_DAY
    return start, end


def fits_before_anchors(
    activities: list[Activity],
    locked_ids: Collection[str],
    *,
    day_start: time,
    buffer_minutes: int,
) -> bool:
    """Whether every unlocked run finishes, plus buffer, by the next anchor's start.

    Simulates the cursor exactly as schedule_day does. Unlocked activities
    after the last anchor are unconstrained.
    """
    cursor = to_minutes(day_start)
    pending_end: int | None = None

    for activity in activities:
        if activity.id in locked_ids:
            start, end = _interval(activity.time_slot)
            if pending_end is not None and pending_end > start:
                return False
            cursor = max(cursor, end + buffer_minutes)
            pending_end = None
            continue

        cursor += activity.duration_minutes + buffer_minutes
        pending_end = cursor

    return True


def schedule_day(
    activities: list[Activity],
    locked_ids: Collection[str],
    *,
    day_start: time,
    buffer_minutes: int,
    day_end: time | None = None,
    day_index: int = 0,
) -> ScheduleResult:
    """Assign start/end times to activities in their final order.

    Locked activities keep their slot and only push the cursor forward to
    their end plus buffer. Unlocked activities are packed at the cursor.
    The cursor never moves backwards, so a locked slot ending before the
    cursor can leave overlapping slots; those are reported as warnings.

    Args:
        activities: Day's activities in final (post-route) order
        locked_ids: Ids whose existing slots must be kept
        day_start: Initial cursor time
        buffer_minutes: Gap inserted after every activity
        day_end: Optional soft end of day; overruns produce warnings
        day_index: Day position, used in warning details

    Returns:
        ScheduleResult with new Activity objects and any warnings
    """
    cursor = to_minutes(day_start)
    scheduled: list[Activity] = []
    intervals: list[tuple[str, int, int]] = []
    warnings: list[Violation] = []
    past_midnight: list[str] = []
    over_day_end: list[str] = []

    for activity in activities:
        if activity.id in locked_ids:
            start, end = _interval(activity.time_slot)
            cursor = max(cursor, end + buffer_minutes)
            scheduled.append(activity)
            intervals.append((activity.id, start, end))
            continue

        start = cursor
        end = start + activity.duration_minutes
        slot = TimeSlot(start=from_minutes(start), end=from_minutes(end))
        scheduled.append(activity.model_copy(update={"time_slot": slot}))
        intervals.append((activity.id, start, end))
        cursor = end + buffer_minutes

        if end >= MINUTES_PER_DAY:
            past_midnight.append(activity.id)
        if day_end is not None and end > to_minutes(day_end):
            over_day_end.append(activity.id)

    warnings.extend(_overlap_warnings(intervals, day_index))

    if past_midnight:
        warnings.append(
            Violation(
                kind=ViolationKind.SCHEDULE,
                code="SCHEDULE_PAST_MIDNIGHT",
                message="Some activities run past midnight and wrap to the next day's clock.",
                severity=ViolationSeverity.ADVISORY,
                affected_activity_ids=past_midnight,
                details={"day_index": day_index},
            )
        )

    if over_day_end and day_end is not None:
        end_label = format_clock(day_end)
        warnings.append(
            Violation(
                kind=ViolationKind.SCHEDULE,
                code="DAY_END_EXCEEDED",
                message="Some activities end after the requested end of day.",
                severity=ViolationSeverity.ADVISORY,
                affected_activity_ids=over_day_end,
                details={"day_index": day_index, "end_time": end_label},
            )
        )

    if warnings:
        logger.info(
            "Day %d scheduled with %d warning(s)",
            day_index,
            len(warnings),
            extra={"structured": {"day_index": day_index, "codes": [w.code for w in warnings]}},
        )

    return ScheduleResult(activities=scheduled, warnings=warnings)


def _overlap_warnings(intervals: list[tuple[str, int, int]], day_index: int) -> list[Violation]:
    """One advisory warning per pair of overlapping slots."""
    warnings: list[Violation] = []
    ordered = sorted(intervals, key=lambda item: (item[1], item[2]))

    for i, (first_id, first_start, first_end) in enumerate(ordered):
        for second_id, second_start, second_end in ordered[i + 1 :]:
            if second_start >= first_end:
                break
            warnings.append(
                Violation(
                    kind=ViolationKind.SCHEDULE,
                    code="OVERLAPPING_SLOTS",
                    message="Two activities have overlapping time slots.",
                    severity=ViolationSeverity.ADVISORY,
                    affected_activity_ids=[first_id, second_id],
                    details={
                        "day_index": day_index,
                        "first": _label(first_start, first_end),
                        "second": _label(second_start, second_end),
                    },
                )
            )

    return warnings


def _label(start: int, end: int) -> dict[str, str]:
    return {"start": format_clock(from_minutes(start)), "end": format_clock(from_minutes(end))}
