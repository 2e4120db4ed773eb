"""Common types shared across all models."""

from datetime import time
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel


def format_clock(value: time) -> str:
    """Render a wall-clock time as HH:MM."""
    return value.strftime("%H:%M")


def parse_clock(value: str) -> time:
    """Parse an HH:MM string into a time.

    Raises:
        ValueError: If the string is not a valid 24h HH:MM clock value
    """
    parts = value.split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"expected HH:MM, got {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"clock value out of range: {value!r}")
    return time(hours, minutes)


def coerce_clock(value: object) -> object:
    """Before-validator for clock fields: HH:MM strings or whole-minute times.

    Raises:
        ValueError: If a string is not strict HH:MM or a time carries seconds
    """
    if isinstance(value, str):
        return parse_clock(value)
    if isinstance(value, time) and (value.second or value.microsecond):
        raise ValueError(f"clock values must be whole minutes, got {value.isoformat()}")
    return value


# Wall-clock-of-day, serialized as "HH:MM" on the wire
ClockTime = Annotated[time, PlainSerializer(format_clock, return_type=str)]


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinate(CamelModel):
    """Geographic coordinates (WGS84)."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class TimeSlot(CamelModel):
    """Time slot in local wall-clock time."""

    start: ClockTime
    end: ClockTime

    @field_validator("start", "end", mode="before")
    @classmethod
    def parse_hhmm(cls, v: object) -> object:
        """Slots are stored as HH:MM, so anything finer is rejected."""
        return coerce_clock(v)


class Place(CamelModel):
    """Place payload from the place-search collaborator.

    Treated as opaque: the engine replaces a Place with a modified copy
    but never edits one in place.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str
    coordinate: Coordinate
    source: str = "user"
