"""Repository for game timeline persistence.

This module abstracts read/write operations for game timelines,
allowing the storage implementation to be changed later without affecting the API layer.
"""
from typing import Optional

from models.event import TimelineEvent
from models.store import GAME_TIMELINES, GameTimeline
from timeline.errors import UnknownEventError


def get_timeline(game_id: str) -> Optional[GameTimeline]:
    """
    Get the timeline for a game.

    Args:
        game_id: ID of the game

    Returns:
        GameTimeline if found, None otherwise
    """
    return GAME_TIMELINES.get(game_id)


def save_timeline(timeline: GameTimeline) -> None:
    """Save (or replace) the timeline for a game."""
    GAME_TIMELINES[timeline.game_id] = timeline


def delete_timeline(game_id: str) -> bool:
    """
    Delete the timeline for a game.

    Returns:
        True if the timeline was deleted, False if it didn't exist
    """
    if game_id in GAME_TIMELINES:
        del GAME_TIMELINES[game_id]
        return True
    return False


def has_timeline(game_id: str) -> bool:
    return game_id in GAME_TIMELINES


def update_event(timeline: GameTimeline, event: TimelineEvent) -> None:
    """
    Replace one event of a stored timeline, keeping its position in paint order.

    Raises:
        UnknownEventError: if the timeline has no event with ``event.id``
    """
    for index, existing in enumerate(timeline.events):
        if existing.id == event.id:
            timeline.events[index] = event
            return
    raise UnknownEventError(event.id)
