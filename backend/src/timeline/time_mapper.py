"""Conversion between event times and pixel coordinates along the time axis."""
from datetime import datetime, timedelta
from typing import Iterable, Tuple

from config import LANE_HEADER_WIDTH, TIME_HEADER_HEIGHT
from models.event import TemporalDescriptor, TimelineEvent, ensure_utc
from models.view_state import Orientation, TimelineViewState
from timeline.errors import MissingTemporalDescriptor
from utils.logger import get_logger

logger = get_logger(__name__)


def axis_inset(state: TimelineViewState) -> float:
    """Pixels reserved before the time axis starts (lane headers or the time header)."""
    if state.orientation == Orientation.HORIZONTAL:
        return LANE_HEADER_WIDTH
    return TIME_HEADER_HEIGHT


def instant_to_pixels(instant: datetime, state: TimelineViewState) -> float:
    """Pixel coordinate of an absolute instant along the time axis."""
    elapsed = (ensure_utc(instant) - state.timeline_start).total_seconds()
    return axis_inset(state) + elapsed / state.scale.unit_seconds * state.pixels_per_unit


def to_pixels(descriptor: TemporalDescriptor, state: TimelineViewState, event_id: str = "unknown") -> float:
    """
    Map a temporal descriptor to a pixel coordinate.

    Args:
        descriptor: Start time or offset of the event
        state: Current view state
        event_id: Reported when the descriptor is empty

    Returns:
        Pixel coordinate (x in horizontal mode, y in vertical mode)

    Raises:
        MissingTemporalDescriptor: if the descriptor carries no time at all
    """
    return instant_to_pixels(descriptor.resolve(state.reference_instant, event_id), state)


def to_seconds_from_start(pixels: float, state: TimelineViewState) -> float:
    return (pixels - axis_inset(state)) / state.pixels_per_unit * state.scale.unit_seconds


def to_instant(pixels: float, state: TimelineViewState) -> datetime:
    """Inverse of ``instant_to_pixels``."""
    return state.timeline_start + timedelta(seconds=to_seconds_from_start(pixels, state))


def to_offset(pixels: float, state: TimelineViewState) -> float:
    """
    Map a pixel coordinate back to seconds relative to the reference instant.

    This is the algebraic inverse of ``to_pixels`` for offset descriptors:
    ``to_pixels(TemporalDescriptor(time_offset=to_offset(p)))`` gives back ``p``
    up to float rounding.
    """
    start_shift = (state.timeline_start - state.reference_instant).total_seconds()
    return to_seconds_from_start(pixels, state) + start_shift


def duration_to_pixels(seconds: float, state: TimelineViewState) -> float:
    return seconds / state.scale.unit_seconds * state.pixels_per_unit


def compute_timeline_window(
    events: Iterable[TimelineEvent],
    reference_instant: datetime,
    padding_before: timedelta,
    padding_after: timedelta,
) -> Tuple[datetime, datetime]:
    """
    Visible time range for a set of events.

    Args:
        events: Events to cover
        reference_instant: Instant offsets are relative to
        padding_before: Space kept ahead of the earliest event
        padding_after: Space kept after the latest event end

    Returns:
        (start, end) of the window. Events without a time are ignored; with
        nothing to cover the window is centred on the reference instant.
    """
    reference_instant = ensure_utc(reference_instant)
    earliest = None
    latest = None
    for event in events:
        try:
            start = event.descriptor.resolve(reference_instant, event.id)
        except MissingTemporalDescriptor:
            continue
        end = start + timedelta(seconds=event.render_duration_seconds)
        earliest = start if earliest is None or start < earliest else earliest
        latest = end if latest is None or end > latest else latest

    if earliest is None:
        logger.debug("No timed events, centring window on reference instant")
        return reference_instant - padding_before, reference_instant + padding_after
    return earliest - padding_before, latest + padding_after
