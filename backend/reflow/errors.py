"""Reflow error kinds.

Each error carries a stable ``kind`` string used by the HTTP layer and logs.
Anything not derived from ReflowError is unexpected and propagates as-is.
"""

from typing import Any

from backend.reflow.models.itinerary import Itinerary
from backend.reflow.models.violations import Violation


class ReflowError(Exception):
    """Base class for expected reflow failures."""

    kind = "reflow_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def details(self) -> dict[str, Any]:
        """Machine-readable error details."""
        return {}


class InvalidChangeSet(ReflowError):
    """Malformed change-set input, detected before any mutation."""

    kind = "invalid_change_set"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.reason = message

    def details(self) -> dict[str, Any]:
        return {"field": self.field, "reason": self.reason}


class BudgetExceeded(ReflowError):
    """A budget ceiling was exceeded; the whole reflow is rejected."""

    kind = "budget_exceeded"

    def __init__(
        self,
        scope: str,
        overage: float,
        violations: list[Violation],
        attempted: Itinerary | None = None,
    ) -> None:
        super().__init__(f"Budget exceeded for {scope} by {overage:g}")
        self.scope = scope
        self.overage = overage
        self.violations = violations
        self.attempted = attempted

    def details(self) -> dict[str, Any]:
        return {
            "scope": self.scope,
            "overage": self.overage,
            "violations": [v.model_dump(mode="json", by_alias=True) for v in self.violations],
        }


class VersionConflict(ReflowError):
    """The stored latest version moved past the caller's base version."""

    kind = "version_conflict"

    def __init__(self, trip_id: str, base_version: int, latest_version: int | None) -> None:
        super().__init__(
            f"Trip {trip_id} is at version {latest_version}, not base version {base_version}"
        )
        self.trip_id = trip_id
        self.base_version = base_version
        self.latest_version = latest_version

    def details(self) -> dict[str, Any]:
        return {
            "tripId": self.trip_id,
            "baseVersion": self.base_version,
            "latestVersion": self.latest_version,
        }


class NotFound(ReflowError):
    """Trip or version does not exist in the store."""

    kind = "not_found"

    def __init__(self, trip_id: str, version: int | None = None) -> None:
        if version is None:
            message = f"Trip {trip_id} not found"
        else:
            message = f"Trip {trip_id} has no version {version}"
        super().__init__(message)
        self.trip_id = trip_id
        self.version = version

    def details(self) -> dict[str, Any]:
        return {"tripId": self.trip_id, "version": self.version}
