"""Show timeline API routes."""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Body, HTTPException, Query, status
from fastapi.responses import Response
from pydantic import BaseModel, Field, ValidationError

from config import (
    DEFAULT_INTERVAL,
    DEFAULT_ORIENTATION,
    DEFAULT_ZOOM_LEVEL,
    GAME_PADDING_AFTER_MINUTES,
    GAME_PADDING_BEFORE_MINUTES,
    SEASON_PADDING_DAYS,
)
from models.event import TemporalDescriptor, TimelineEventDTO, ensure_utc, normalize_records
from models.store import GameTimeline
from models.timeline_repository import (
    delete_timeline,
    get_timeline,
    has_timeline,
    save_timeline,
    update_event,
)
from models.view_state import GAME_SCALE, SEASON_SCALE, TimelineViewState
from timeline.errors import UnknownEventError
from timeline.layout import TimelineLayout, find_overlaps, layout
from timeline.render import RecordingSurface, render_timeline
from timeline.ruler import Gridline, gridlines
from timeline.shift import shift_events, snap_to_interval
from timeline.svg_surface import SvgSurface
from timeline.time_mapper import compute_timeline_window
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/timeline", tags=["timeline"])

# Season view defaults to one gridline per day
SEASON_DEFAULT_INTERVAL = "1440"


class TimelineUpload(BaseModel):
    """Request body for replacing a game's events."""
    reference_instant: datetime = Field(..., alias="referenceInstant", description="Instant offsets are relative to")
    events: List[Dict[str, Any]] = Field(default_factory=list, description="Host event records")

    class Config:
        populate_by_name = True


class EventMove(BaseModel):
    """Request body for persisting a drag commit."""
    time_offset: Optional[float] = Field(None, alias="timeOffset", description="New offset in seconds")
    start_time: Optional[datetime] = Field(None, alias="startTime", description="New absolute start time")
    snap: Optional[str] = Field(None, description="Interval to snap to, e.g. '30s' or '5'")

    class Config:
        populate_by_name = True


class ShiftRequest(BaseModel):
    """Request body for a bulk time shift."""
    minutes: float = Field(..., description="Signed shift in minutes")
    scope: str = Field("all", description="'all', 'selected' or 'after'")
    event_ids: Optional[List[str]] = Field(None, alias="eventIds", description="Ids for the 'selected' scope")
    after: Optional[datetime] = Field(None, description="Cut-off instant for the 'after' scope")

    class Config:
        populate_by_name = True


def _require_timeline(game_id: str) -> GameTimeline:
    timeline = get_timeline(game_id)
    if timeline is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Timeline for game {game_id} not found"
        )
    return timeline


def _http_error(e: Exception, action: str, game_id: str) -> HTTPException:
    """Translate an engine or validation error into an HTTPException."""
    if isinstance(e, UnknownEventError):
        logger.warning(f"{action} failed for game {game_id}: {e}")
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, ValidationError):
        logger.error(f"Pydantic validation error while trying to {action} for game {game_id}: {e}")
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Validation error: {str(e)}"
        )
    if isinstance(e, ValueError):
        logger.error(f"Validation error while trying to {action} for game {game_id}: {e}")
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid request: {str(e)}"
        )
    logger.error(f"Unexpected error while trying to {action} for game {game_id}: {e}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {str(e)}"
    )


def build_view_state(
    timeline: GameTimeline,
    orientation: str,
    zoom: float,
    interval: Optional[str],
    view: str,
) -> TimelineViewState:
    """
    View state for a stored timeline.

    The game view pads the events by 2 h before / 1 h after on the minute scale;
    the season view pads by 14 days each side on the day scale.
    """
    if view == "season":
        padding = timedelta(days=SEASON_PADDING_DAYS)
        start, end = compute_window(timeline, padding, padding)
        scale = SEASON_SCALE
        interval = interval or SEASON_DEFAULT_INTERVAL
    else:
        start, end = compute_window(
            timeline,
            timedelta(minutes=GAME_PADDING_BEFORE_MINUTES),
            timedelta(minutes=GAME_PADDING_AFTER_MINUTES),
        )
        scale = GAME_SCALE
        interval = interval or DEFAULT_INTERVAL

    return TimelineViewState(
        reference_instant=timeline.reference_instant,
        zoom_level=zoom,
        orientation=orientation,
        interval=interval,
        timeline_start=start,
        timeline_end=end,
        scale=scale,
    )


def compute_window(timeline: GameTimeline, before: timedelta, after: timedelta):
    return compute_timeline_window(timeline.events, timeline.reference_instant, before, after)


def _gridline_to_dict(line: Gridline) -> Dict[str, Any]:
    return {
        "position": line.position,
        "isMajor": line.is_major,
        "instant": line.instant,
        "label": line.label,
    }


def layout_to_dict(
    game_id: str,
    state: TimelineViewState,
    result: TimelineLayout,
    lines: List[Gridline],
    overlaps: List[Tuple[str, str]],
) -> Dict[str, Any]:
    """Serialize a layout pass with camelCase keys."""
    return {
        "gameId": game_id,
        "orientation": state.orientation.value,
        "zoomLevel": state.zoom_level,
        "interval": str(state.interval),
        "view": state.scale.name,
        "timelineStart": state.timeline_start,
        "timelineEnd": state.timeline_end,
        "width": result.width,
        "height": result.height,
        "lanes": [
            {
                "id": position.lane.id,
                "displayName": position.lane.display_name,
                "color": position.lane.color,
                "offset": position.offset,
                "size": position.size,
            }
            for position in result.lanes
        ],
        "boxes": {
            event_id: {
                "x": box.x,
                "y": box.y,
                "width": box.width,
                "height": box.height,
                "laneId": box.lane_id,
            }
            for event_id, box in result.boxes.items()
        },
        "gridlines": [_gridline_to_dict(line) for line in lines],
        "skipped": list(result.skipped),
        "overlaps": [list(pair) for pair in overlaps],
    }


def _log_overlaps(game_id: str, result: TimelineLayout, overlaps: List[Tuple[str, str]]) -> None:
    for first, second in overlaps:
        position = result.lane_position(result.boxes[first].lane_id)
        logger.warning(
            f"Overlapping events in game {game_id}, lane {position.lane.display_name}: "
            f"{first} overlaps {second}"
        )


@router.put("/{game_id}/events")
async def put_timeline_events(game_id: str, upload: TimelineUpload = Body(...)):
    """
    Replace the events of a game.

    Args:
        game_id: ID of the game
        upload: Reference instant and host event records

    Returns:
        JSON with the number of stored events

    Raises:
        400 for invalid records (empty id, duplicate ids, both time fields on a descriptor)
        422 if Pydantic validation fails
    """
    logger.info(f"Storing {len(upload.events)} events for game_id: {game_id}")

    try:
        events = normalize_records(upload.events)
        timeline = GameTimeline(game_id=game_id, reference_instant=upload.reference_instant, events=events)
        save_timeline(timeline)
    except Exception as e:
        raise _http_error(e, "store events", game_id)

    untimed = [event.id for event in events if event.descriptor.is_empty]
    if untimed:
        logger.warning(f"Game {game_id} has {len(untimed)} events without a time: {untimed}")

    return {
        "gameId": game_id,
        "referenceInstant": timeline.reference_instant,
        "eventCount": len(events),
    }


@router.get("/{game_id}/events")
async def get_timeline_events(game_id: str):
    """Get the normalized events of a game, in paint order."""
    logger.info(f"Getting events for game_id: {game_id}")
    timeline = _require_timeline(game_id)
    return {
        "gameId": game_id,
        "referenceInstant": timeline.reference_instant,
        "events": [TimelineEventDTO.from_event(event).model_dump(by_alias=True) for event in timeline.events],
    }


@router.get("/{game_id}/layout")
async def get_timeline_layout(
    game_id: str,
    orientation: str = Query(DEFAULT_ORIENTATION, description="'horizontal' or 'vertical'"),
    zoom: float = Query(DEFAULT_ZOOM_LEVEL, gt=0.0, description="Zoom level (1.0 = 10 px per minute)"),
    interval: Optional[str] = Query(None, description="Gridline interval, e.g. '30s' or '15'"),
    view: str = Query("game", pattern="^(game|season)$", description="'game' or 'season'"),
    draw_commands: bool = Query(False, alias="drawCommands", description="Include recorded draw commands"),
):
    """
    Lay out a game's timeline.

    Returns:
        JSON with lanes, boxes keyed by event id, gridlines, skipped event ids,
        overlapping pairs and the canvas size

    Raises:
        404 if the game has no timeline
        400 for an invalid orientation or interval
    """
    logger.info(
        f"Computing layout for game_id: {game_id} "
        f"(orientation={orientation}, zoom={zoom}, interval={interval}, view={view})"
    )
    timeline = _require_timeline(game_id)

    try:
        state = build_view_state(timeline, orientation, zoom, interval, view)
        result = layout(timeline.events, state)
        lines = gridlines(state)
    except Exception as e:
        raise _http_error(e, "compute layout", game_id)

    overlaps = find_overlaps(result)
    _log_overlaps(game_id, result, overlaps)
    response = layout_to_dict(game_id, state, result, lines, overlaps)

    if draw_commands:
        surface = RecordingSurface(result.width, result.height)
        render_timeline(surface, result, lines, timeline.events, state)
        response["drawCommands"] = [
            {"kind": command.kind, "params": command.params} for command in surface.commands
        ]

    logger.info(
        f"Layout for game {game_id}: {len(result.boxes)} boxes, "
        f"{len(result.skipped)} skipped, {len(lines)} gridlines"
    )
    return response


@router.get("/{game_id}/render.svg")
async def render_timeline_svg(
    game_id: str,
    orientation: str = Query(DEFAULT_ORIENTATION, description="'horizontal' or 'vertical'"),
    zoom: float = Query(DEFAULT_ZOOM_LEVEL, gt=0.0, description="Zoom level (1.0 = 10 px per minute)"),
    interval: Optional[str] = Query(None, description="Gridline interval, e.g. '30s' or '15'"),
    view: str = Query("game", pattern="^(game|season)$", description="'game' or 'season'"),
):
    """Render a game's timeline as an SVG document."""
    logger.info(f"Rendering SVG for game_id: {game_id}")
    timeline = _require_timeline(game_id)

    try:
        state = build_view_state(timeline, orientation, zoom, interval, view)
        result = layout(timeline.events, state)
        surface = SvgSurface(result.width, result.height)
        render_timeline(surface, result, gridlines(state), timeline.events, state)
    except Exception as e:
        raise _http_error(e, "render timeline", game_id)

    return Response(content=surface.to_svg(), media_type="image/svg+xml")


@router.patch("/{game_id}/events/{event_id}")
async def move_timeline_event(game_id: str, event_id: str, move: EventMove = Body(...)):
    """
    Persist a drag commit for one event.

    Exactly one of ``timeOffset`` / ``startTime`` must be given. With ``snap``
    the new time is rounded to the nearest interval boundary first.

    Raises:
        404 if the game or event is unknown
        400 if neither or both time fields are given, or the snap interval is invalid
    """
    logger.info(f"Moving event {event_id} in game_id: {game_id}, move={move}")
    timeline = _require_timeline(game_id)

    try:
        if (move.time_offset is None) == (move.start_time is None):
            raise ValueError("exactly one of timeOffset or startTime is required")

        event = next((e for e in timeline.events if e.id == event_id), None)
        if event is None:
            raise UnknownEventError(event_id)

        reference = timeline.reference_instant
        if move.start_time is not None:
            start = ensure_utc(move.start_time)
            if move.snap:
                start = snap_to_interval(start, move.snap)
            descriptor = TemporalDescriptor(start_time=start)
        else:
            offset = move.time_offset
            if move.snap:
                snapped = snap_to_interval(reference + timedelta(seconds=offset), move.snap)
                offset = (snapped - reference).total_seconds()
            descriptor = TemporalDescriptor(time_offset=int(round(offset)))

        moved = event.with_descriptor(descriptor)
        update_event(timeline, moved)
    except Exception as e:
        raise _http_error(e, "move event", game_id)

    logger.info(
        f"Committed move of {event_id} in game {game_id}: "
        f"{descriptor.start_time.isoformat() if descriptor.start_time else f'{descriptor.time_offset:+d}s'}"
    )
    return {
        "gameId": game_id,
        "event": TimelineEventDTO.from_event(moved).model_dump(by_alias=True),
    }


@router.post("/{game_id}/shift")
async def shift_timeline_events(game_id: str, request: ShiftRequest = Body(...)):
    """
    Shift a group of events earlier or later.

    Returns:
        JSON with the number of shifted events and the updated events
    """
    logger.info(f"Shifting events in game_id: {game_id}, request={request}")
    timeline = _require_timeline(game_id)

    try:
        known = {event.id for event in timeline.events}
        for event_id in request.event_ids or []:
            if event_id not in known:
                raise UnknownEventError(event_id)

        shifted = shift_events(
            timeline.events,
            request.minutes,
            scope=request.scope,
            selected_ids=request.event_ids,
            after=request.after,
            reference_instant=timeline.reference_instant,
        )
    except Exception as e:
        raise _http_error(e, "shift events", game_id)

    changed = sum(1 for old, new in zip(timeline.events, shifted) if old is not new)
    timeline.events = shifted
    return {
        "gameId": game_id,
        "shiftedCount": changed,
        "events": [TimelineEventDTO.from_event(event).model_dump(by_alias=True) for event in shifted],
    }


@router.delete("/{game_id}")
async def delete_game_timeline(game_id: str):
    """Clear a game's timeline."""
    logger.info(f"Deleting timeline for game_id: {game_id}")
    if not has_timeline(game_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Timeline for game {game_id} not found"
        )
    delete_timeline(game_id)
    return {"gameId": game_id, "deleted": True}
