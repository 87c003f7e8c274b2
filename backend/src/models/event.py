"""Event records for the show timeline.

The host application hands over loosely shaped records (``time_offset`` vs
``timeOffset``, ``type`` vs ``element_type`` vs ``category``...).  They are
normalized once, here, into ``TimelineEvent`` so the engine only ever sees a
single shape.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from config import DEFAULT_DURATION_SECONDS
from timeline.errors import MissingTemporalDescriptor


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; aware datetimes are returned unchanged."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class TemporalDescriptor:
    """When an event happens: an absolute start time or a signed offset in seconds."""
    start_time: Optional[datetime] = None
    time_offset: Optional[int] = None

    def __post_init__(self):
        """Validate descriptor data."""
        if self.start_time is not None and self.time_offset is not None:
            raise ValueError("descriptor must carry either start_time or time_offset, not both")
        if self.start_time is not None:
            object.__setattr__(self, "start_time", ensure_utc(self.start_time))

    @property
    def is_empty(self) -> bool:
        return self.start_time is None and self.time_offset is None

    @property
    def is_offset(self) -> bool:
        return self.time_offset is not None

    def resolve(self, reference_instant: datetime, event_id: str = "unknown") -> datetime:
        """
        Resolve to an absolute instant.

        Args:
            reference_instant: Instant that ``time_offset`` is relative to
            event_id: Used in the error raised for an empty descriptor

        Returns:
            Absolute, timezone-aware instant

        Raises:
            MissingTemporalDescriptor: if neither field is set
        """
        if self.time_offset is not None:
            return ensure_utc(reference_instant) + timedelta(seconds=self.time_offset)
        if self.start_time is not None:
            return self.start_time
        raise MissingTemporalDescriptor(event_id)

    def shifted(self, seconds: float) -> "TemporalDescriptor":
        """Return a descriptor moved by ``seconds``, keeping its kind."""
        if self.time_offset is not None:
            return TemporalDescriptor(time_offset=int(round(self.time_offset + seconds)))
        if self.start_time is not None:
            return TemporalDescriptor(start_time=self.start_time + timedelta(seconds=seconds))
        return self


@dataclass(frozen=True)
class TimelineEvent:
    """A schedulable unit rendered on the timeline."""
    id: str
    title: str
    descriptor: TemporalDescriptor
    type_hint: str = ""
    explicit_lane: Optional[str] = None
    duration_seconds: int = 0
    notes: Optional[str] = None
    components: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate event data."""
        if not self.id:
            raise ValueError("event id cannot be empty")
        if self.duration_seconds < 0:
            raise ValueError(f"duration_seconds must be >= 0, got {self.duration_seconds}")

    @property
    def render_duration_seconds(self) -> int:
        """Duration used for drawing; a zero duration falls back to the default."""
        if self.duration_seconds > 0:
            return self.duration_seconds
        return DEFAULT_DURATION_SECONDS

    def with_descriptor(self, descriptor: TemporalDescriptor) -> "TimelineEvent":
        return replace(self, descriptor=descriptor)


# Accepted spellings per field, in priority order (first non-empty wins)
_FIELD_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "title": ("title", "name"),
    "typeHint": ("typeHint", "type_hint", "element_type", "elementType", "type", "category"),
    "explicitLane": ("explicitLane", "explicit_lane", "lane"),
    "startTime": ("startTime", "start_time"),
    "timeOffset": ("timeOffset", "time_offset"),
    "durationSeconds": ("durationSeconds", "duration_seconds", "duration"),
    "notes": ("notes", "description"),
}


def _component_label(component: Any) -> Optional[str]:
    if isinstance(component, str):
        return component.strip() or None
    if isinstance(component, dict):
        for key in ("name", "label", "title"):
            value = component.get(key)
            if value:
                return str(value)
    return None


class EventRecord(BaseModel):
    """Event as received from the host, with synonyms folded into one field each."""
    id: str = Field(..., description="Opaque unique identifier")
    title: str = Field(default="Untitled", description="Short display string")
    type_hint: Optional[str] = Field(None, alias="typeHint", description="Free-text classification")
    explicit_lane: Optional[str] = Field(None, alias="explicitLane", description="Lane id override")
    start_time: Optional[datetime] = Field(None, alias="startTime", description="Absolute start time")
    time_offset: Optional[float] = Field(None, alias="timeOffset", description="Seconds relative to the reference instant")
    duration_seconds: Optional[float] = Field(None, ge=0.0, alias="durationSeconds", description="Duration in seconds")
    notes: Optional[str] = Field(None, description="Display-only notes")
    components: List[str] = Field(default_factory=list, description="Attachment labels")

    class Config:
        populate_by_name = True  # Allow both field names and aliases

    @model_validator(mode="before")
    @classmethod
    def fold_synonyms(cls, data: Any) -> Any:
        """Collapse the host's alternative field names into the canonical aliases."""
        if not isinstance(data, dict):
            return data

        folded: Dict[str, Any] = {}
        for canonical, names in _FIELD_SYNONYMS.items():
            for name in names:
                value = data.get(name)
                if value is None or (isinstance(value, str) and not value.strip()):
                    continue
                folded[canonical] = value
                break

        if "id" in data and data["id"] is not None:
            folded["id"] = str(data["id"])
        if data.get("components"):
            folded["components"] = [
                label for label in (_component_label(c) for c in data["components"]) if label
            ]
        return folded

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Interpret naive timestamps as UTC."""
        return ensure_utc(v) if v is not None else v

    def to_event(self) -> TimelineEvent:
        """Build the normalized engine record; a time offset wins over a start time."""
        if self.time_offset is not None:
            descriptor = TemporalDescriptor(time_offset=int(round(self.time_offset)))
        elif self.start_time is not None:
            descriptor = TemporalDescriptor(start_time=self.start_time)
        else:
            descriptor = TemporalDescriptor()

        return TimelineEvent(
            id=self.id,
            title=self.title,
            descriptor=descriptor,
            type_hint=self.type_hint or "",
            explicit_lane=self.explicit_lane,
            duration_seconds=int(round(self.duration_seconds or 0)),
            notes=self.notes,
            components=tuple(self.components),
        )


def normalize_records(records: List[Dict[str, Any]]) -> List[TimelineEvent]:
    """Normalize a list of raw host records, preserving order."""
    return [EventRecord.model_validate(record).to_event() for record in records]


class TimelineEventDTO(BaseModel):
    """Pydantic model for TimelineEvent API responses."""
    id: str
    title: str
    type_hint: str = Field(..., alias="typeHint")
    explicit_lane: Optional[str] = Field(None, alias="explicitLane")
    start_time: Optional[datetime] = Field(None, alias="startTime")
    time_offset: Optional[int] = Field(None, alias="timeOffset")
    duration_seconds: int = Field(..., alias="durationSeconds")
    notes: Optional[str] = None
    components: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True

    @classmethod
    def from_event(cls, event: TimelineEvent) -> "TimelineEventDTO":
        return cls(
            id=event.id,
            title=event.title,
            type_hint=event.type_hint,
            explicit_lane=event.explicit_lane,
            start_time=event.descriptor.start_time,
            time_offset=event.descriptor.time_offset,
            duration_seconds=event.duration_seconds,
            notes=event.notes,
            components=list(event.components),
        )
