"""Unit tests for lane classification."""
import pytest

from models.event import TemporalDescriptor, TimelineEvent
from timeline.lanes import (
    AUDIO,
    DEFAULT_PALETTE,
    GRAPHICS,
    LANE_ORDER,
    PERMANENT_MARKERS,
    PRODUCTION_CUES,
    SPONSOR_READS,
    TALENT,
    classify,
    classify_hint,
    get_lane,
    lane_ids,
    palette_for,
)


def make_event(type_hint="", explicit_lane=None) -> TimelineEvent:
    return TimelineEvent(
        id="e1",
        title="Cue",
        descriptor=TemporalDescriptor(time_offset=0),
        type_hint=type_hint,
        explicit_lane=explicit_lane,
    )


@pytest.mark.parametrize("hint, expected", [
    ("sponsor_read", SPONSOR_READS),
    ("Sponsor Read - Halftime", SPONSOR_READS),
    ("permanent_marker", PERMANENT_MARKERS),
    ("TALENT intro", TALENT),
    ("graphics_lower_third", GRAPHICS),
    ("audio_sting", AUDIO),
    ("production_cue", PRODUCTION_CUES),
])
def test_classify_hint_keywords(hint, expected):
    """Test keyword matching is case-insensitive substring matching."""
    assert classify_hint(hint) is expected


@pytest.mark.parametrize("hint", ["", None, "weather", "misc"])
def test_unmatched_hints_default_to_production_cues(hint):
    """Test anything unmatched lands in Production Cues, never in Misc."""
    assert classify_hint(hint) is PRODUCTION_CUES


def test_first_matching_rule_wins():
    """Test rule order decides between several matching keywords."""
    assert classify_hint("sponsor graphic") is SPONSOR_READS
    assert classify_hint("talent audio") is TALENT
    # "audio" is checked before "production"
    assert classify_hint("production_cue_with_audio_cue") is AUDIO


def test_explicit_lane_overrides_hint():
    """Test a registered explicit lane wins over the type hint."""
    assert classify(make_event(type_hint="sponsor_read", explicit_lane="talent")) is TALENT


def test_unknown_explicit_lane_falls_back_to_hint():
    """Test an unregistered explicit lane is ignored."""
    assert classify(make_event(type_hint="audio", explicit_lane="nonsense")) is AUDIO
    assert classify(make_event(explicit_lane="")) is PRODUCTION_CUES


def test_lane_registry_order():
    """Test lanes keep their fixed stacking order."""
    assert lane_ids() == [
        "production_cue",
        "sponsor_read",
        "permanent_marker",
        "talent",
        "graphics",
        "audio",
        "misc",
    ]
    assert len(LANE_ORDER) == 7
    assert all(lane.render_height == 60 for lane in LANE_ORDER)
    assert get_lane("graphics") is GRAPHICS
    assert get_lane("unknown") is None
    assert get_lane(None) is None


def test_palettes():
    """Test per-lane block palettes and the default palette."""
    assert palette_for(SPONSOR_READS).border == "#2196f3"
    assert palette_for(PERMANENT_MARKERS).background == "#fff9c4"
    assert palette_for(PRODUCTION_CUES) == DEFAULT_PALETTE
