"""Lane registry and event-to-lane classification."""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from config import LANE_HEIGHT
from models.event import TimelineEvent


@dataclass(frozen=True)
class Lane:
    """A named visual track."""
    id: str
    display_name: str
    color: str
    render_height: float = LANE_HEIGHT


@dataclass(frozen=True)
class BlockPalette:
    """Fill, border and text colours for blocks drawn in a lane."""
    background: str
    border: str
    text: str


PRODUCTION_CUES = Lane("production_cue", "Production Cues", "#4338ca")
SPONSOR_READS = Lane("sponsor_read", "Sponsor Reads", "#0891b2")
PERMANENT_MARKERS = Lane("permanent_marker", "Permanent Markers", "#ca8a04")
TALENT = Lane("talent", "Talent", "#15803d")
GRAPHICS = Lane("graphics", "Graphics", "#b91c1c")
AUDIO = Lane("audio", "Audio", "#7e22ce")
MISC = Lane("misc", "Misc", "#737373")

# Stacking order (top to bottom in horizontal mode, left to right in vertical mode)
LANE_ORDER: Tuple[Lane, ...] = (
    PRODUCTION_CUES,
    SPONSOR_READS,
    PERMANENT_MARKERS,
    TALENT,
    GRAPHICS,
    AUDIO,
    MISC,
)

LANES_BY_ID: Dict[str, Lane] = {lane.id: lane for lane in LANE_ORDER}

DEFAULT_LANE = PRODUCTION_CUES

# Checked in order; "sponsor" must be tested before any broader keyword.
# Exact ids such as "sponsor_read" contain their keyword, so they need no separate case.
CLASSIFICATION_RULES: Tuple[Tuple[str, Lane], ...] = (
    ("sponsor", SPONSOR_READS),
    ("permanent", PERMANENT_MARKERS),
    ("talent", TALENT),
    ("graphic", GRAPHICS),
    ("audio", AUDIO),
    ("production", PRODUCTION_CUES),
)

BLOCK_PALETTES: Dict[str, BlockPalette] = {
    SPONSOR_READS.id: BlockPalette("#e3f2fd", "#2196f3", "#0d47a1"),
    PERMANENT_MARKERS.id: BlockPalette("#fff9c4", "#fbc02d", "#f57f17"),
    TALENT.id: BlockPalette("#e8f5e9", "#4caf50", "#1b5e20"),
    GRAPHICS.id: BlockPalette("#f3e5f5", "#9c27b0", "#4a148c"),
    AUDIO.id: BlockPalette("#ffebee", "#f44336", "#b71c1c"),
}
DEFAULT_PALETTE = BlockPalette("#f5f5f5", "#9e9e9e", "#212121")
DRAGGING_PALETTE = BlockPalette("#bbdefb", "#1976d2", "#0d47a1")


def get_lane(lane_id: Optional[str]) -> Optional[Lane]:
    """Look up a registered lane by id."""
    if not lane_id:
        return None
    return LANES_BY_ID.get(lane_id)


def classify_hint(hint: Optional[str]) -> Lane:
    """
    Map a free-text type hint to a lane.

    Matching is case-insensitive substring matching over ``CLASSIFICATION_RULES``;
    anything unmatched (including empty or None) lands in Production Cues.
    """
    text = (hint or "").lower()
    for keyword, lane in CLASSIFICATION_RULES:
        if keyword in text:
            return lane
    return DEFAULT_LANE


def classify(event: TimelineEvent) -> Lane:
    """
    Resolve the lane an event renders in.

    Args:
        event: Normalized timeline event

    Returns:
        The explicit lane when it names a registered lane, otherwise the lane
        derived from the type hint. Never None.
    """
    explicit = get_lane(event.explicit_lane)
    if explicit is not None:
        return explicit
    return classify_hint(event.type_hint)


def palette_for(lane: Lane) -> BlockPalette:
    return BLOCK_PALETTES.get(lane.id, DEFAULT_PALETTE)


def lane_ids() -> List[str]:
    return [lane.id for lane in LANE_ORDER]
