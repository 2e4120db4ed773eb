"""Models package - re-exports for convenience."""

from backend.reflow.models.change_set import (
    ActivityModification,
    ActivityPatch,
    AddedActivity,
    AddedLocation,
    Annotate,
    BudgetConstraints,
    ChangeSet,
    Recategorize,
    ReflowPreferences,
    RenameActivity,
    Reprice,
    Reschedule,
    TimeConstraints,
)
from backend.reflow.models.common import ClockTime, Coordinate, Place, TimeSlot
from backend.reflow.models.itinerary import Activity, Day, Itinerary
from backend.reflow.models.reflow import (
    ChangeSummary,
    ItineraryVersionResponse,
    ReflowErrorBody,
    ReflowErrorResponse,
    ReflowRequest,
    ReflowResponse,
)
from backend.reflow.models.violations import Violation, ViolationKind, ViolationSeverity

__all__ = [
    # Common
    "ClockTime",
    "Coordinate",
    "Place",
    "TimeSlot",
    # Itinerary
    "Itinerary",
    "Day",
    "Activity",
    # Change set
    "ChangeSet",
    "ActivityModification",
    "ActivityPatch",
    "RenameActivity",
    "Recategorize",
    "Reschedule",
    "Reprice",
    "Annotate",
    "AddedActivity",
    "AddedLocation",
    "BudgetConstraints",
    "TimeConstraints",
    "ReflowPreferences",
    # Reflow envelopes
    "ReflowRequest",
    "ReflowResponse",
    "ReflowErrorBody",
    "ReflowErrorResponse",
    "ChangeSummary",
    "ItineraryVersionResponse",
    # Violations
    "Violation",
    "ViolationKind",
    "ViolationSeverity",
]
