"""Violation models - constraint violations and warnings found during reflow."""

from enum import Enum
from typing import Any

from pydantic import Field

from backend.reflow.models.common import CamelModel

# JSON-serializable value types for violation details
JsonValue = str | int | float | bool | None | dict[str, Any] | list[Any]


class ViolationSeverity(str, Enum):
    """Severity levels for constraint violations."""

    ADVISORY = "advisory"
    BLOCKING = "blocking"


class ViolationKind(str, Enum):
    """Categories of reflow constraints."""

    BUDGET = "budget"
    SCHEDULE = "schedule"
    LOCK = "lock"


class Violation(CamelModel):
    """A constraint violation detected during reflow.

    Blocking violations reject the whole reflow; advisory ones are returned
    to the caller as warnings alongside the new itinerary.
    """

    kind: ViolationKind
    code: str  # Machine-usable short code, e.g., "OVER_BUDGET_TOTAL"
    message: str  # Human-readable description (1-2 sentences)
    severity: ViolationSeverity
    affected_activity_ids: list[str] = Field(default_factory=list)
    details: dict[str, JsonValue] = Field(default_factory=dict)
