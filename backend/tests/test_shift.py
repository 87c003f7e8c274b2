"""Unit tests for bulk shifting and interval snapping."""
from datetime import datetime, timedelta, timezone

import pytest

from models.event import TemporalDescriptor, TimelineEvent
from timeline.errors import InvalidConfiguration
from timeline.shift import shift_events, snap_to_interval

REF = datetime(2024, 1, 1, 19, 0, tzinfo=timezone.utc)


@pytest.fixture
def events():
    return [
        TimelineEvent(id="a", title="A", descriptor=TemporalDescriptor(time_offset=0)),
        TimelineEvent(id="b", title="B", descriptor=TemporalDescriptor(start_time=REF + timedelta(minutes=10))),
        TimelineEvent(id="c", title="C", descriptor=TemporalDescriptor()),
    ]


def test_shift_all(events):
    """Test every timed event moves and untimed events are left alone."""
    shifted = shift_events(events, 5)

    assert shifted[0].descriptor == TemporalDescriptor(time_offset=300)
    assert shifted[1].descriptor == TemporalDescriptor(start_time=REF + timedelta(minutes=15))
    assert shifted[2] is events[2]
    assert [event.id for event in shifted] == ["a", "b", "c"]


def test_shift_selected(events):
    """Test only selected events move."""
    shifted = shift_events(events, -2, scope="selected", selected_ids=["a"])

    assert shifted[0].descriptor.time_offset == -120
    assert shifted[1] is events[1]


def test_shift_after(events):
    """Test only events starting at or after the cut-off move."""
    shifted = shift_events(
        events, 1, scope="after", after=REF + timedelta(minutes=5), reference_instant=REF
    )

    assert shifted[0] is events[0]
    assert shifted[1].descriptor.start_time == REF + timedelta(minutes=11)


def test_shift_argument_validation(events):
    """Test unknown scopes and missing scope arguments raise."""
    with pytest.raises(InvalidConfiguration, match="shift scope"):
        shift_events(events, 1, scope="before")
    with pytest.raises(InvalidConfiguration, match="at least one event id"):
        shift_events(events, 1, scope="selected")
    with pytest.raises(InvalidConfiguration, match="after"):
        shift_events(events, 1, scope="after", reference_instant=REF)


@pytest.mark.parametrize("instant, interval, expected", [
    ("19:07:40", "5", "19:10:00"),
    ("19:07:40", "30s", "19:07:30"),
    ("19:07:50", "30s", "19:08:00"),
    ("19:52:00", "15", "19:45:00"),
    ("19:53:00", "15", "20:00:00"),
    ("19:02:10", "1", "19:02:00"),
])
def test_snap_to_interval(instant, interval, expected):
    """Test rounding to the nearest interval boundary."""
    def at(text):
        hour, minute, second = (int(part) for part in text.split(":"))
        return REF.replace(hour=hour, minute=minute, second=second)

    assert snap_to_interval(at(instant), interval) == at(expected)
