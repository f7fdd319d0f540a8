"""Data models for recurring-event materialization."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
)

from .datetime_utils import combine, first_of_month, last_of_month, parse_date, parse_time
from .exceptions import InvalidDefinitionError, InvalidWindowError


class ParticipantStatus(str, Enum):
    """Participation status stored for each event participant."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class Classification(str, Enum):
    """Viewer-relative role of an event, used to choose its display colour."""

    OWNED = "owned"
    PARTICIPATING = "participating"
    OTHER = "other"


class Participant(BaseModel):
    """Event participant as embedded in a store event row.

    The calendar query only selects ``user_id``, so ``status`` is optional;
    list and detail queries nest the user as ``{"user": {"id": ...}}``.
    """

    user_id: str = Field(..., description="Participant user identity")
    status: Optional[ParticipantStatus] = Field(
        default=None, description="Participation status, None when not selected"
    )

    model_config = ConfigDict(extra="ignore")

    @field_validator("user_id", mode="before")
    @classmethod
    def _coerce_user_id(cls, value: Any) -> Any:
        if value is None:
            return value
        return str(value)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Participant":
        """Build a participant from a store row, accepting a nested ``user``."""
        return cls.model_validate(_normalize_participant(record))


def _normalize_participant(record: Any) -> Any:
    """Lift a nested ``user.id`` into ``user_id`` for list/detail query rows."""
    if not isinstance(record, Mapping) or "user_id" in record:
        return record
    data = dict(record)
    user = data.get("user")
    if isinstance(user, Mapping) and user.get("id") is not None:
        data["user_id"] = user["id"]
    return data


class EventDefinition(BaseModel):
    """Stored description of a one-time or weekly-recurring event.

    Field aliases accept store column names directly (``date``, ``time``,
    ``event_participants``) so rows can be validated without renaming.
    The model accepts rows as stored; weekday domain checks happen in the
    occurrence generator, which is the only consumer that needs them.
    """

    # Core properties
    id: str = Field(..., description="Event ID")
    title: str = Field(..., description="Event title")
    description: Optional[str] = Field(default=None, description="Event description")
    location: str = Field(default="", description="Free-text location")
    created_by: str = Field(..., description="Owner user identity")

    # Schedule
    start_date: date = Field(
        ..., validation_alias=AliasChoices("start_date", "date"), description="Start date"
    )
    start_time: time = Field(
        ..., validation_alias=AliasChoices("start_time", "time"), description="Start time"
    )
    has_end_time: bool = Field(default=False, description="Gate for end_time")
    end_time: Optional[time] = Field(default=None, description="End time, same day as start")
    end_date: Optional[date] = Field(default=None, description="Explicit end date")

    # Recurrence
    is_recurring: bool = Field(default=False, description="Weekly recurrence flag")
    weekday: Optional[int] = Field(default=None, description="Recurrence weekday, Sunday=0")

    participants: list[Participant] = Field(
        default_factory=list,
        validation_alias=AliasChoices("participants", "event_participants"),
        description="Participants with status",
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("id", "created_by", mode="before")
    @classmethod
    def _coerce_identity(cls, value: Any) -> Any:
        if value is None:
            return value
        return str(value)

    @field_validator("location", mode="before")
    @classmethod
    def _null_location(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("start_date", mode="before")
    @classmethod
    def _parse_start_date(cls, value: Any) -> date:
        return parse_date(value)

    @field_validator("end_date", mode="before")
    @classmethod
    def _parse_end_date(cls, value: Any) -> Optional[date]:
        if value is None or value == "":
            return None
        return parse_date(value)

    @field_validator("start_time", mode="before")
    @classmethod
    def _parse_start_time(cls, value: Any) -> time:
        return parse_time(value)

    @field_validator("end_time", mode="before")
    @classmethod
    def _parse_end_time(cls, value: Any) -> Optional[time]:
        if value is None or value == "":
            return None
        return parse_time(value)

    @field_validator("is_recurring", "has_end_time", mode="before")
    @classmethod
    def _null_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("participants", mode="before")
    @classmethod
    def _parse_participants(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [_normalize_participant(item) for item in value]
        return value

    @classmethod
    def from_record(cls, record: Union["EventDefinition", Mapping[str, Any]]) -> "EventDefinition":
        """Validate a raw store row (or pass through an existing definition).

        Raises:
            InvalidDefinitionError: If the row is missing fields or has
                values that cannot be parsed
        """
        if isinstance(record, cls):
            return record
        if not isinstance(record, Mapping):
            raise InvalidDefinitionError(f"Unsupported event record type: {type(record).__name__}")
        try:
            return cls.model_validate(dict(record))
        except ValidationError as exc:
            record_id = record.get("id")
            raise InvalidDefinitionError(
                f"Invalid event record {record_id!r}: {exc.error_count()} validation error(s)",
                definition_id=str(record_id) if record_id is not None else None,
            ) from exc

    def start_instant(self, on: Optional[date] = None) -> datetime:
        """Combine ``start_time`` with ``on`` (defaults to ``start_date``)."""
        return combine(on or self.start_date, self.start_time)

    def end_instant(self, on: Optional[date] = None) -> Optional[datetime]:
        """Combine ``end_time`` with ``on`` when the end time is enabled."""
        if not self.has_end_time or self.end_time is None:
            return None
        return combine(on or self.start_date, self.end_time)


class Occurrence(BaseModel):
    """One concrete calendar appearance of an event definition."""

    id: str = Field(..., description="Derived occurrence identity")
    definition_id: str = Field(..., description="Source event definition ID")
    title: str = Field(..., description="Display title")
    start: datetime = Field(..., description="Naive start instant")
    end: Optional[datetime] = Field(default=None, description="Naive end instant")
    occurrence_date: date = Field(..., description="Calendar date of this occurrence")
    classification: Classification = Field(
        default=Classification.OTHER, description="Viewer-relative role"
    )
    color: str = Field(default="", description="Render colour")
    is_recurring: bool = Field(default=False, description="Generated from a recurring series")

    model_config = ConfigDict(frozen=True)

    @field_serializer("start", "end", when_used="unless-none")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime fields to ISO format."""
        return dt.isoformat()

    def to_calendar_dict(self) -> dict[str, Any]:
        """Serialize to the event-object shape consumed by the calendar widget."""
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat() if self.end is not None else None,
            "backgroundColor": self.color,
            "borderColor": self.color,
            "extendedProps": {
                "type": self.classification.value,
                "originalId": self.definition_id,
            },
        }


@dataclass(frozen=True)
class VisibleWindow:
    """Date range currently rendered by the calendar view.

    The range is half-open, ``[start, end)``, which is how calendar widgets
    report their visible dates. A window whose ``end`` equals its ``start``
    covers that single day. Datetimes are truncated to their date and ISO
    strings are parsed. Windows compare and hash by value.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        try:
            start = parse_date(self.start)
            end = parse_date(self.end)
        except ValueError as exc:
            raise InvalidWindowError(f"Invalid window bounds: {exc}") from exc
        if end < start:
            raise InvalidWindowError(f"Window end {end} is before start {start}")
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @classmethod
    def coerce(cls, value: Union["VisibleWindow", tuple, list, Mapping[str, Any]]) -> "VisibleWindow":
        """Accept a window, a ``(start, end)`` pair or a ``{"start", "end"}`` mapping."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(value["start"], value["end"])
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return cls(value[0], value[1])
        raise InvalidWindowError(f"Cannot build a visible window from {value!r}")

    @property
    def last_visible_day(self) -> date:
        """Last day actually shown, accounting for the exclusive end."""
        if self.end == self.start:
            return self.start
        return self.end - timedelta(days=1)

    def expanded(self) -> tuple[date, date]:
        """Whole-month boundary used for recurrence generation (inclusive).

        Runs from the first of the month of ``start`` through the last of the
        month of ``end``. The exclusive end still widens the boundary, so a
        view ending on the 1st also generates that month.
        """
        return first_of_month(self.start), last_of_month(self.end)


class ParticipantSummary(BaseModel):
    """Participant counts by status, as shown on the event detail view."""

    accepted: int = 0
    pending: int = 0
    declined: int = 0

    @property
    def total(self) -> int:
        return self.accepted + self.pending + self.declined


class PartitionResult(BaseModel):
    """Events split into not-yet-ended and ended lists, each sorted by start."""

    current: list[EventDefinition] = Field(default_factory=list)
    past: list[EventDefinition] = Field(default_factory=list)
