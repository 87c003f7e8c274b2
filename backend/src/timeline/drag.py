"""Pointer-drag repositioning of event blocks.

State machine per gesture::

    IDLE --down--> ARMED --move past threshold--> DRAGGING
    ARMED --up--> IDLE (click)
    DRAGGING --up--> IDLE (commit)
    ARMED/DRAGGING --leave--> IDLE (nothing emitted)
"""
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Callable, Optional

from config import DRAG_THRESHOLD_PX
from models.event import TemporalDescriptor, TimelineEvent
from models.view_state import Orientation, TimelineViewState
from timeline.layout import Box
from timeline.time_mapper import to_instant, to_offset
from utils.logger import get_logger

logger = get_logger(__name__)

CommitCallback = Callable[[str, TemporalDescriptor], None]
ClickCallback = Callable[[str], None]


class DragPhase(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    DRAGGING = "dragging"


@dataclass
class DragSession:
    """Ephemeral record of a pointer held on one block."""
    event: TimelineEvent
    origin_x: float
    origin_y: float
    block_start: float  # block edge along the time axis when the gesture began
    dragging: bool = False
    current_x: float = 0.0
    current_y: float = 0.0

    @property
    def event_id(self) -> str:
        return self.event.id


@dataclass(frozen=True)
class DragPreview:
    """Live proposed position of the dragged block."""
    event_id: str
    descriptor: TemporalDescriptor
    offset_seconds: float
    block_start: float


def _along_axis(x: float, y: float, orientation: Orientation) -> float:
    return x if orientation == Orientation.HORIZONTAL else y


def propose_descriptor(
    event: TimelineEvent,
    block_start: float,
    state: TimelineViewState,
) -> TemporalDescriptor:
    """
    Descriptor that places ``event``'s block edge at ``block_start``.

    Offset events get a whole-second offset; absolute events get a start time
    truncated to the second.
    """
    if event.descriptor.start_time is not None:
        instant = to_instant(block_start, state)
        return TemporalDescriptor(start_time=instant - timedelta(microseconds=instant.microsecond))
    return TemporalDescriptor(time_offset=int(round(to_offset(block_start, state))))


def build_preview(session: DragSession, state: TimelineViewState) -> DragPreview:
    """Move the block by the pointer displacement along the time axis."""
    delta = (
        _along_axis(session.current_x, session.current_y, state.orientation)
        - _along_axis(session.origin_x, session.origin_y, state.orientation)
    )
    block_start = session.block_start + delta
    return DragPreview(
        event_id=session.event_id,
        descriptor=propose_descriptor(session.event, block_start, state),
        offset_seconds=to_offset(block_start, state),
        block_start=block_start,
    )


class DragController:
    """
    Tracks at most one drag session and turns it into a click or a commit.

    Args:
        on_commit: Called with (event_id, new descriptor) when a drag is released
        on_click: Called with event_id when the pointer is released without dragging
        threshold: Pixels of movement, in either axis, before a press becomes a drag
    """

    def __init__(
        self,
        on_commit: Optional[CommitCallback] = None,
        on_click: Optional[ClickCallback] = None,
        threshold: float = DRAG_THRESHOLD_PX,
    ):
        self.on_commit = on_commit
        self.on_click = on_click
        self.threshold = threshold
        self._session: Optional[DragSession] = None

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def phase(self) -> DragPhase:
        if self._session is None:
            return DragPhase.IDLE
        return DragPhase.DRAGGING if self._session.dragging else DragPhase.ARMED

    def pointer_down(self, event: TimelineEvent, box: Box, x: float, y: float, state: TimelineViewState) -> bool:
        """
        Arm a session on ``event``.

        Returns:
            False when another session is already active (the press is ignored).
        """
        if self._session is not None:
            logger.warning(
                f"Ignoring pointer down on {event.id}: drag on {self._session.event_id} still active"
            )
            return False

        self._session = DragSession(
            event=event,
            origin_x=x,
            origin_y=y,
            block_start=box.time_start(state.orientation),
            current_x=x,
            current_y=y,
        )
        logger.debug(f"Armed drag on {event.id} at ({x:.1f}, {y:.1f})")
        return True

    def pointer_move(self, x: float, y: float, state: TimelineViewState) -> Optional[DragPreview]:
        """Update the session; returns the live preview once dragging."""
        session = self._session
        if session is None:
            return None

        session.current_x = x
        session.current_y = y
        if not session.dragging:
            if abs(x - session.origin_x) > self.threshold or abs(y - session.origin_y) > self.threshold:
                session.dragging = True
                logger.debug(f"Drag started on {session.event_id}")
            else:
                return None
        return self.preview(state)

    def preview(self, state: TimelineViewState) -> Optional[DragPreview]:
        """Proposed position for the active drag, or None when not dragging."""
        session = self._session
        if session is None or not session.dragging:
            return None
        return build_preview(session, state)

    def pointer_up(self, x: float, y: float, state: TimelineViewState) -> Optional[TemporalDescriptor]:
        """
        Finish the gesture.

        Returns:
            The committed descriptor, or None for a click / no session.
        """
        if self._session is None:
            return None

        self.pointer_move(x, y, state)
        session = self._session
        self._session = None

        if not session.dragging:
            logger.debug(f"Click on {session.event_id}")
            if self.on_click is not None:
                self.on_click(session.event_id)
            return None

        preview = build_preview(session, state)
        logger.info(f"Committing move of {session.event_id} to offset {preview.offset_seconds:.0f}s")
        if self.on_commit is not None:
            self.on_commit(session.event_id, preview.descriptor)
        return preview.descriptor

    def pointer_leave(self) -> None:
        """Abandon any active session without clicking or committing."""
        if self._session is None:
            return
        logger.info(f"Drag on {self._session.event_id} cancelled (pointer left the canvas)")
        self._session = None

