"""Unit tests for view state and interval parsing."""
import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from models.view_state import (
    GAME_SCALE,
    IntervalSpec,
    Orientation,
    SEASON_SCALE,
    TimelineViewState,
)
from timeline.errors import InvalidConfiguration

REF = datetime(2024, 1, 1, 19, 0, tzinfo=timezone.utc)


def test_interval_parsing():
    """Test 's' suffix means seconds and bare numbers mean minutes."""
    assert IntervalSpec.parse("30s") == IntervalSpec(30, "seconds")
    assert IntervalSpec.parse("15s").seconds == 15
    assert IntervalSpec.parse("15").seconds == 900
    assert IntervalSpec.parse(" 60 ").seconds == 3600
    assert IntervalSpec.parse(5).unit == "minutes"
    assert str(IntervalSpec.parse("30s")) == "30s"
    assert str(IntervalSpec.parse("5")) == "5"


@pytest.mark.parametrize("text", ["0", "-5", "0s", "abc", "", "s", "nan", "inf", True])
def test_invalid_intervals_rejected(text):
    """Test zero, negative and unparseable intervals raise."""
    with pytest.raises(InvalidConfiguration):
        IntervalSpec.parse(text)


def test_default_state():
    """Test defaults: zoom 1, horizontal, 5 minute interval, 3 hour window."""
    state = TimelineViewState(reference_instant=REF)

    assert state.zoom_level == 1.0
    assert state.orientation == Orientation.HORIZONTAL
    assert state.interval == IntervalSpec(5, "minutes")
    assert state.timeline_start == REF
    assert state.timeline_end == REF + timedelta(hours=3)
    assert state.scale is GAME_SCALE
    assert state.pixels_per_unit == 10
    assert state.total_units == 180


def test_state_normalizes_inputs():
    """Test string orientation/interval and naive datetimes are normalized."""
    state = TimelineViewState(
        reference_instant=datetime(2024, 1, 1, 19, 0),
        orientation="VERTICAL",
        interval="30s",
    )
    assert state.orientation == Orientation.VERTICAL
    assert state.interval == IntervalSpec(30, "seconds")
    assert state.reference_instant == REF


def test_state_validation():
    """Test invalid zoom, orientation and window raise."""
    with pytest.raises(InvalidConfiguration, match="zoom_level must be positive"):
        TimelineViewState(reference_instant=REF, zoom_level=0)

    with pytest.raises(InvalidConfiguration, match="orientation"):
        TimelineViewState(reference_instant=REF, orientation="diagonal")

    with pytest.raises(InvalidConfiguration, match="timeline_end must be after"):
        TimelineViewState(reference_instant=REF, timeline_start=REF, timeline_end=REF)


def test_state_is_immutable():
    """Test mutations return new states and leave the original untouched."""
    state = TimelineViewState(reference_instant=REF)
    zoomed = state.with_zoom(2.0)

    assert zoomed.zoom_level == 2.0
    assert state.zoom_level == 1.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.zoom_level = 3.0


def test_zoom_steps_are_clamped():
    """Test zoom in/out multiply by 1.2 within [0.5, 5]."""
    state = TimelineViewState(reference_instant=REF)
    assert state.zoomed_in().zoom_level == pytest.approx(1.2)
    assert state.zoomed_out().zoom_level == pytest.approx(1 / 1.2)
    assert state.with_zoom(4.5).zoomed_in().zoom_level == 5.0
    assert state.with_zoom(0.55).zoomed_out().zoom_level == 0.5


def test_orientation_and_interval_changes():
    """Test toggling orientation and replacing the interval."""
    state = TimelineViewState(reference_instant=REF)
    assert state.toggled().orientation == Orientation.VERTICAL
    assert state.toggled().toggled().orientation == Orientation.HORIZONTAL
    assert state.with_interval("15s").interval.seconds == 15

    window = state.with_window(REF - timedelta(hours=2), REF + timedelta(hours=1))
    assert window.total_units == 180


def test_season_scale():
    """Test the day-based scale used by the season view."""
    state = TimelineViewState(
        reference_instant=REF,
        timeline_start=REF,
        timeline_end=REF + timedelta(days=28),
        scale=SEASON_SCALE,
    )
    assert state.total_units == 28
    assert state.pixels_per_unit == 120
    assert state.pixels_per_second == pytest.approx(120 / 86400)
