"""Unit tests for the layout engine."""
from datetime import datetime, timedelta, timezone

import pytest

from models.event import TemporalDescriptor, TimelineEvent
from models.view_state import TimelineViewState
from timeline.layout import (
    Box,
    canvas_size,
    compute_lane_positions,
    find_overlaps,
    layout,
)

REF = datetime(2024, 1, 1, 19, 0, tzinfo=timezone.utc)


def make_event(event_id, seconds=0, type_hint="", duration=0) -> TimelineEvent:
    descriptor = TemporalDescriptor(time_offset=seconds) if seconds is not None else TemporalDescriptor()
    return TimelineEvent(
        id=event_id,
        title=event_id.upper(),
        descriptor=descriptor,
        type_hint=type_hint,
        duration_seconds=duration,
    )


def test_horizontal_box_geometry():
    """Test x from the time mapper, y from the lane row with padding."""
    state = TimelineViewState(reference_instant=REF)
    result = layout([make_event("a", 600), make_event("s", 0, "sponsor_read")], state)

    assert result.boxes["a"] == Box(x=220, y=45, width=100, height=50, lane_id="production_cue")
    assert result.boxes["s"] == Box(x=120, y=105, width=100, height=50, lane_id="sponsor_read")


def test_minimum_block_size():
    """Test short blocks are floored to 100 px, long ones follow their duration."""
    state = TimelineViewState(reference_instant=REF)
    result = layout([make_event("short", 0, duration=5), make_event("long", 0, duration=1200)], state)

    assert result.boxes["short"].width == 100
    assert result.boxes["long"].width == 200
    assert layout([make_event("z", 0, duration=300)], state.with_zoom(5.0)).boxes["z"].width == 250


def test_vertical_box_geometry():
    """Test vertical lanes are equal columns right of the ruler."""
    state = TimelineViewState(reference_instant=REF, orientation="vertical")
    box = layout([make_event("a", 600)], state).boxes["a"]
    column = (1200 - 120) / 7

    assert box.x == pytest.approx(125)
    assert box.width == pytest.approx(column - 10)
    assert box.y == 140
    assert box.height == 60


def test_events_without_time_are_skipped():
    """Test one bad event does not abort the whole layout."""
    state = TimelineViewState(reference_instant=REF)
    result = layout([make_event("a", 0), make_event("bad", None), make_event("c", 60)], state)

    assert result.skipped == ["bad"]
    assert set(result.boxes) == {"a", "c"}


def test_overlapping_events_are_not_stacked():
    """Test overlapping events in one lane keep their own boxes on the same row."""
    state = TimelineViewState(reference_instant=REF)
    result = layout([make_event("a", 0), make_event("b", 30), make_event("c", 3600)], state)

    assert result.boxes["a"].y == result.boxes["b"].y
    assert result.boxes["b"].x == 125
    assert find_overlaps(result) == [("a", "b")]


def test_lane_positions():
    """Test lanes stack in registry order below the time header."""
    rows = compute_lane_positions(TimelineViewState(reference_instant=REF))
    assert [row.offset for row in rows] == [40, 100, 160, 220, 280, 340, 400]
    assert rows[0].lane.id == "production_cue"
    assert rows[-1].lane.id == "misc"


def test_lane_position_lookup():
    """Test a laid-out lane row is found by id."""
    result = layout([make_event("s", 0, "sponsor_read")], TimelineViewState(reference_instant=REF))
    position = result.lane_position("sponsor_read")
    assert position.offset == 100
    assert position.lane.display_name == "Sponsor Reads"
    assert result.lane_position("nope") is None


def test_canvas_size():
    """Test the canvas covers the window and never shrinks below 1000 px."""
    state = TimelineViewState(reference_instant=REF)
    assert canvas_size(state) == (1920, 460)
    assert canvas_size(state.with_zoom(0.5)) == (1020, 460)

    short = state.with_window(REF, REF + timedelta(hours=1))
    assert canvas_size(short) == (1000, 460)
    assert canvas_size(short.toggled()) == (1200, 1000)


def test_box_contains():
    """Test hit testing on box edges."""
    box = Box(x=10, y=10, width=100, height=50, lane_id="audio")
    assert box.contains(10, 10)
    assert box.contains(110, 60)
    assert not box.contains(111, 30)


def test_overlapping_sponsor_reads():
    """Test two overlapping sponsor reads share the sponsor row as two boxes."""
    state = TimelineViewState(reference_instant=REF)
    result = layout(
        [make_event("r1", 0, "sponsor_read", 120), make_event("r2", 60, "Sponsor Read", 120)],
        state,
    )

    assert result.skipped == []
    assert result.boxes["r1"].lane_id == result.boxes["r2"].lane_id == "sponsor_read"
    assert result.boxes["r1"].y == result.boxes["r2"].y == 105
    assert find_overlaps(result) == [("r1", "r2")]
