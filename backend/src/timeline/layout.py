"""Layout engine: turns events + view state into draw geometry."""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from config import (
    LANE_HEADER_WIDTH,
    LANE_PADDING,
    MIN_BLOCK_HEIGHT,
    MIN_BLOCK_WIDTH,
    MIN_CANVAS_WIDTH,
    TIME_HEADER_HEIGHT,
    VERTICAL_CANVAS_WIDTH,
)
from models.event import TimelineEvent
from models.view_state import Orientation, TimelineViewState
from timeline.errors import MissingTemporalDescriptor
from timeline.lanes import LANE_ORDER, Lane, classify
from timeline.time_mapper import duration_to_pixels, to_pixels
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Box:
    """Bounding box of an event block, in canvas pixels."""
    x: float
    y: float
    width: float
    height: float
    lane_id: str

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height

    def time_start(self, orientation: Orientation) -> float:
        return self.x if orientation == Orientation.HORIZONTAL else self.y

    def time_extent(self, orientation: Orientation) -> float:
        return self.width if orientation == Orientation.HORIZONTAL else self.height


@dataclass(frozen=True)
class LanePosition:
    """Where a lane sits across the time axis (row in horizontal mode, column in vertical)."""
    lane: Lane
    offset: float
    size: float


@dataclass
class TimelineLayout:
    """Result of one layout pass."""
    orientation: Orientation
    lanes: List[LanePosition]
    boxes: Dict[str, Box] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)
    width: float = 0.0
    height: float = 0.0

    def lane_position(self, lane_id: str) -> Optional[LanePosition]:
        for position in self.lanes:
            if position.lane.id == lane_id:
                return position
        return None


def min_block_size(orientation: Orientation) -> float:
    return MIN_BLOCK_WIDTH if orientation == Orientation.HORIZONTAL else MIN_BLOCK_HEIGHT


def compute_lane_positions(state: TimelineViewState) -> List[LanePosition]:
    """
    Walk the lane priority order once and accumulate each lane's offset.

    Horizontal lanes are rows below the time header, each ``render_height`` tall.
    Vertical lanes split the canvas width right of the ruler into equal columns.
    """
    positions: List[LanePosition] = []
    if state.orientation == Orientation.HORIZONTAL:
        current = TIME_HEADER_HEIGHT
        for lane in LANE_ORDER:
            positions.append(LanePosition(lane=lane, offset=current, size=lane.render_height))
            current += lane.render_height
    else:
        column_width = (VERTICAL_CANVAS_WIDTH - LANE_HEADER_WIDTH) / len(LANE_ORDER)
        for index, lane in enumerate(LANE_ORDER):
            positions.append(LanePosition(
                lane=lane,
                offset=LANE_HEADER_WIDTH + index * column_width,
                size=column_width,
            ))
    return positions


def canvas_size(state: TimelineViewState) -> Tuple[float, float]:
    """(width, height) of the full canvas for the current window and zoom."""
    axis_length = state.total_units * state.pixels_per_unit
    if state.orientation == Orientation.HORIZONTAL:
        width = max(LANE_HEADER_WIDTH + axis_length, MIN_CANVAS_WIDTH)
        height = TIME_HEADER_HEIGHT + sum(lane.render_height for lane in LANE_ORDER)
        return width, height
    return VERTICAL_CANVAS_WIDTH, max(TIME_HEADER_HEIGHT + axis_length, MIN_CANVAS_WIDTH)


def layout_event(
    event: TimelineEvent,
    state: TimelineViewState,
    lane_positions: Dict[str, LanePosition],
) -> Box:
    """
    Compute the box of a single event.

    Raises:
        MissingTemporalDescriptor: if the event has no time
    """
    lane = classify(event)
    position = lane_positions[lane.id]
    start = to_pixels(event.descriptor, state, event.id)
    along = max(duration_to_pixels(event.render_duration_seconds, state), min_block_size(state.orientation))
    across_start = position.offset + LANE_PADDING
    across_size = position.size - 2 * LANE_PADDING

    if state.orientation == Orientation.HORIZONTAL:
        return Box(x=start, y=across_start, width=along, height=across_size, lane_id=lane.id)
    return Box(x=across_start, y=start, width=across_size, height=along, lane_id=lane.id)


def layout(events: Iterable[TimelineEvent], state: TimelineViewState) -> TimelineLayout:
    """
    Lay out every event for the given view state.

    Events that cannot be placed (no start time and no offset) are skipped and
    reported in ``TimelineLayout.skipped``; the rest are still laid out.
    Overlapping events in one lane keep their own boxes; nothing is stacked.

    Args:
        events: Events in host order (later events paint on top)
        state: View state

    Returns:
        TimelineLayout with boxes keyed by event id
    """
    lanes = compute_lane_positions(state)
    by_id = {position.lane.id: position for position in lanes}
    width, height = canvas_size(state)
    result = TimelineLayout(orientation=state.orientation, lanes=lanes, width=width, height=height)

    for event in events:
        try:
            result.boxes[event.id] = layout_event(event, state, by_id)
        except MissingTemporalDescriptor as e:
            logger.warning(f"Skipping event in layout: {e}")
            result.skipped.append(event.id)

    logger.debug(
        f"Laid out {len(result.boxes)} events ({len(result.skipped)} skipped), "
        f"orientation={state.orientation.value}, zoom={state.zoom_level:.2f}"
    )
    return result


def find_overlaps(layout_result: TimelineLayout) -> List[Tuple[str, str]]:
    """Pairs of event ids whose boxes overlap along the time axis within one lane."""
    orientation = layout_result.orientation
    by_lane: Dict[str, List[Tuple[str, Box]]] = {}
    for event_id, box in layout_result.boxes.items():
        by_lane.setdefault(box.lane_id, []).append((event_id, box))

    overlaps: List[Tuple[str, str]] = []
    for items in by_lane.values():
        items.sort(key=lambda item: item[1].time_start(orientation))
        for i, (first_id, first) in enumerate(items):
            first_end = first.time_start(orientation) + first.time_extent(orientation)
            for second_id, second in items[i + 1:]:
                if second.time_start(orientation) >= first_end:
                    break
                overlaps.append((first_id, second_id))
    return overlaps
