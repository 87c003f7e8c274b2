"""Unit tests for event record normalization."""
from datetime import datetime, timedelta, timezone

import pytest

from models.event import (
    EventRecord,
    TemporalDescriptor,
    TimelineEvent,
    TimelineEventDTO,
    normalize_records,
)
from timeline.errors import MissingTemporalDescriptor

REF = datetime(2024, 1, 1, 19, 0, tzinfo=timezone.utc)


def test_synonyms_are_folded():
    """Test snake_case and legacy field names map onto one event shape."""
    event = EventRecord.model_validate({
        "id": 7,
        "name": "Kickoff",
        "element_type": "talent",
        "time_offset": "120",
        "duration": 30,
        "description": "Coin toss first",
        "lane": "talent",
    }).to_event()

    assert event.id == "7"
    assert event.title == "Kickoff"
    assert event.type_hint == "talent"
    assert event.descriptor == TemporalDescriptor(time_offset=120)
    assert event.duration_seconds == 30
    assert event.notes == "Coin toss first"
    assert event.explicit_lane == "talent"


def test_type_hint_priority_skips_empty_values():
    """Test the first non-empty type field wins."""
    record = EventRecord.model_validate({
        "id": "a",
        "element_type": "",
        "type": "audio",
        "category": "sponsor",
        "timeOffset": 0,
    })
    assert record.type_hint == "audio"


def test_offset_wins_over_start_time():
    """Test a record carrying both times resolves through its offset."""
    event = EventRecord.model_validate({
        "id": "a",
        "startTime": "2024-01-01T21:00:00Z",
        "timeOffset": -60,
    }).to_event()

    assert event.descriptor.is_offset
    assert event.descriptor.start_time is None
    assert event.descriptor.resolve(REF) == REF - timedelta(seconds=60)


def test_missing_time_gives_empty_descriptor():
    """Test an event without any time is kept but cannot be resolved."""
    event = EventRecord.model_validate({"id": "a", "title": "TBD"}).to_event()

    assert event.descriptor.is_empty
    with pytest.raises(MissingTemporalDescriptor, match="Event a has neither"):
        event.descriptor.resolve(REF, event.id)


def test_naive_start_time_is_utc():
    """Test naive timestamps are interpreted as UTC."""
    event = EventRecord.model_validate({"id": "a", "start_time": "2024-01-01T19:30:00"}).to_event()
    assert event.descriptor.start_time == REF + timedelta(minutes=30)
    assert event.descriptor.start_time.tzinfo is not None


def test_defaults_and_components():
    """Test default title, duration fallback and component labels."""
    event = EventRecord.model_validate({
        "id": "a",
        "timeOffset": 0,
        "components": ["Mic", {"name": "Lower third"}, {"label": "Sting"}, {}],
    }).to_event()

    assert event.title == "Untitled"
    assert event.duration_seconds == 0
    assert event.render_duration_seconds == 60
    assert event.components == ("Mic", "Lower third", "Sting")


def test_normalize_records_preserves_order():
    """Test bulk normalization keeps host order."""
    events = normalize_records([
        {"id": "b", "timeOffset": 60},
        {"id": "a", "timeOffset": 0},
    ])
    assert [event.id for event in events] == ["b", "a"]


def test_validation():
    """Test invalid records are rejected."""
    with pytest.raises(ValueError, match="either start_time or time_offset"):
        TemporalDescriptor(start_time=REF, time_offset=0)

    with pytest.raises(ValueError, match="event id cannot be empty"):
        TimelineEvent(id="", title="x", descriptor=TemporalDescriptor(time_offset=0))

    with pytest.raises(ValueError, match="duration_seconds must be >= 0"):
        TimelineEvent(id="a", title="x", descriptor=TemporalDescriptor(time_offset=0), duration_seconds=-1)

    with pytest.raises(ValueError):
        EventRecord.model_validate({"id": "a", "timeOffset": 0, "durationSeconds": -5})


def test_descriptor_shift_keeps_kind():
    """Test shifting keeps offsets as offsets and start times as start times."""
    assert TemporalDescriptor(time_offset=10).shifted(60) == TemporalDescriptor(time_offset=70)
    assert TemporalDescriptor(start_time=REF).shifted(-30) == TemporalDescriptor(
        start_time=REF - timedelta(seconds=30)
    )
    assert TemporalDescriptor().shifted(60).is_empty


def test_dto_uses_camel_case():
    """Test the API DTO serializes with camelCase aliases."""
    event = TimelineEvent(
        id="a",
        title="Intro",
        descriptor=TemporalDescriptor(time_offset=-300),
        type_hint="talent",
        duration_seconds=45,
    )
    data = TimelineEventDTO.from_event(event).model_dump(by_alias=True)

    assert data["timeOffset"] == -300
    assert data["startTime"] is None
    assert data["typeHint"] == "talent"
    assert data["durationSeconds"] == 45
