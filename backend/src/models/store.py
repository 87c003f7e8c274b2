"""In-memory store for game timelines."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List

from models.event import TimelineEvent, ensure_utc


@dataclass
class GameTimeline:
    """Events for one game and the instant their offsets are relative to."""
    game_id: str
    reference_instant: datetime
    events: List[TimelineEvent] = field(default_factory=list)

    def __post_init__(self):
        """Validate timeline data."""
        if not self.game_id:
            raise ValueError("game_id cannot be empty")
        self.reference_instant = ensure_utc(self.reference_instant)
        ids = [event.id for event in self.events]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate event ids in game {self.game_id}")


# In-memory storage for timelines
# Maps game_id -> GameTimeline
GAME_TIMELINES: Dict[str, GameTimeline] = {}
