"""Reflow request/response envelopes."""

from typing import Any

from pydantic import Field

from backend.reflow.models.change_set import ChangeSet, ReflowPreferences
from backend.reflow.models.common import CamelModel
from backend.reflow.models.itinerary import Itinerary
from backend.reflow.models.violations import Violation


class ReflowRequest(CamelModel):
    """Request body for POST /trips/{trip_id}/reflow."""

    base_version: int = Field(..., ge=1)
    change_set: ChangeSet = Field(default_factory=ChangeSet)
    preferences: ReflowPreferences = Field(default_factory=ReflowPreferences)


class ChangeSummary(CamelModel):
    """Counts of what a reflow actually applied."""

    modified: int = 0
    removed: int = 0
    added: int = 0
    locks_preserved: int = 0
    # Total haversine distance of the reflowed day orders, all days
    travel_distance_km: float = 0.0


class ReflowResponse(CamelModel):
    """Successful reflow result."""

    success: bool = True
    itinerary: Itinerary
    version: int
    change_summary: ChangeSummary
    warnings: list[Violation] = Field(default_factory=list)


class ReflowErrorBody(CamelModel):
    """Error detail for a rejected reflow."""

    kind: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ReflowErrorResponse(CamelModel):
    """Rejected reflow; carries the unsaved itinerary when one was computed."""

    success: bool = False
    error: ReflowErrorBody
    attempted_itinerary: Itinerary | None = None


class ItineraryVersionResponse(CamelModel):
    """Response for GET /trips/{trip_id}/itinerary[/{version}]."""

    trip_id: str
    version: int
    itinerary: Itinerary
