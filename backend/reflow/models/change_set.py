"""Change-set models - the edits applied in one reflow."""

from typing import Annotated, Literal

from pydantic import ConfigDict, Field, field_validator

from backend.reflow.models.common import CamelModel, ClockTime, coerce_clock


class _Patch(CamelModel):
    """Base for field-level activity patches; unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")


class RenameActivity(_Patch):
    """Replace the display name of the activity's place."""

    op: Literal["rename"] = "rename"
    name: str = Field(..., min_length=1)


class Recategorize(_Patch):
    """Move the activity into another category."""

    op: Literal["recategorize"] = "recategorize"
    category: str = Field(..., min_length=1)


class Reschedule(_Patch):
    """Change the requested duration; the slot is recomputed by the scheduler."""

    op: Literal["reschedule"] = "reschedule"
    duration_minutes: int = Field(..., gt=0)


class Reprice(_Patch):
    """Set or clear the cost estimate."""

    op: Literal["reprice"] = "reprice"
    cost_estimate: float | None = Field(..., ge=0)


class Annotate(_Patch):
    """Replace the activity's free-text notes."""

    op: Literal["annotate"] = "annotate"
    notes: str


ActivityPatch = Annotated[
    RenameActivity | Recategorize | Reschedule | Reprice | Annotate,
    Field(discriminator="op"),
]


class ActivityModification(CamelModel):
    """Patches targeting one existing activity."""

    id: str = Field(..., min_length=1)
    changes: list[ActivityPatch] = Field(..., min_length=1)

    @field_validator("changes", mode="before")
    @classmethod
    def wrap_single_patch(cls, v: object) -> object:
        """Accept a single patch object as shorthand for a one-element list."""
        if isinstance(v, dict):
            return [v]
        return v


class AddedLocation(CamelModel):
    """Location of a newly added activity."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    name: str


class AddedActivity(CamelModel):
    """A new activity to insert into a day."""

    name: str = Field(..., min_length=1)
    location: AddedLocation
    category: str = Field(..., min_length=1)
    duration_minutes: int = Field(default=120, gt=0)
    day_index: int
    cost_estimate: float | None = Field(default=None, ge=0)
    place_id: str | None = None
    source: str = "user"


class BudgetConstraints(CamelModel):
    """Optional spend ceilings in the trip currency."""

    max_total: float | None = Field(default=None, ge=0)
    max_per_category: dict[str, Annotated[float, Field(ge=0)]] | None = None


class TimeConstraints(CamelModel):
    """Scheduling knobs; unset values fall back to settings."""

    start_time: ClockTime | None = None
    end_time: ClockTime | None = None
    buffer_minutes: int | None = Field(default=None, ge=0)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_hhmm(cls, v: object) -> object:
        """Require strict HH:MM clock strings."""
        return coerce_clock(v)


class ChangeSet(CamelModel):
    """Caller-supplied description of edits to apply in one reflow."""

    locked_activity_ids: list[str] = Field(default_factory=list)
    modified_activities: list[ActivityModification] = Field(default_factory=list)
    removed_activities: list[str] = Field(default_factory=list)
    added_activities: list[AddedActivity] = Field(default_factory=list)
    budget_constraints: BudgetConstraints | None = None
    time_constraints: TimeConstraints | None = None


class ReflowPreferences(CamelModel):
    """Caller preferences for the optimization pass."""

    optimize_route: bool = True
