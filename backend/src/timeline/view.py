"""A mounted timeline: events, view state, drag handling and rendering."""
from typing import Dict, Iterable, List, Optional, Tuple, Union

from models.event import TemporalDescriptor, TimelineEvent
from models.view_state import IntervalSpec, Orientation, TimelineViewState
from timeline.drag import ClickCallback, CommitCallback, DragController, DragPreview
from timeline.errors import UnknownEventError
from timeline.layout import TimelineLayout, layout
from timeline.render import DrawingSurface, render_timeline
from timeline.ruler import Gridline, gridlines
from utils.logger import get_logger

logger = get_logger(__name__)


class TimelineView:
    """
    Owns the working copy of the events and the view state for one timeline.

    A committed drag is applied to the working copy immediately and handed to
    ``on_commit``; the host later calls ``confirm`` with the persisted record or
    ``revert`` if persistence failed.

    Args:
        events: Normalized events in paint order
        state: Initial view state
        on_commit: Host callback receiving (event_id, new descriptor)
        on_click: Host callback receiving event_id for plain clicks
    """

    def __init__(
        self,
        events: Iterable[TimelineEvent],
        state: TimelineViewState,
        on_commit: Optional[CommitCallback] = None,
        on_click: Optional[ClickCallback] = None,
    ):
        self._events: List[TimelineEvent] = list(events)
        self._state = state
        self._on_commit = on_commit
        self._pending: Dict[str, TemporalDescriptor] = {}
        self._layout: Optional[TimelineLayout] = None
        self.controller = DragController(on_commit=self._apply_commit, on_click=on_click)

    @property
    def state(self) -> TimelineViewState:
        return self._state

    @property
    def events(self) -> Tuple[TimelineEvent, ...]:
        return tuple(self._events)

    @property
    def pending_ids(self) -> List[str]:
        return list(self._pending)

    def get_event(self, event_id: str) -> TimelineEvent:
        for event in self._events:
            if event.id == event_id:
                return event
        raise UnknownEventError(event_id)

    # Geometry

    def layout(self) -> TimelineLayout:
        if self._layout is None:
            self._layout = layout(self._events, self._state)
        return self._layout

    def gridlines(self) -> List[Gridline]:
        return gridlines(self._state)

    def render(self, surface: DrawingSurface) -> None:
        render_timeline(
            surface,
            self.layout(),
            self.gridlines(),
            self._events,
            self._state,
            drag_preview=self.controller.preview(self._state),
        )

    def hit_test(self, x: float, y: float) -> Optional[str]:
        """Id of the topmost (last painted) block under the point."""
        boxes = self.layout().boxes
        for event in reversed(self._events):
            box = boxes.get(event.id)
            if box is not None and box.contains(x, y):
                return event.id
        return None

    # View state changes

    def _set_state(self, state: TimelineViewState) -> None:
        if self.controller.session is not None:
            self.controller.pointer_leave()
        self._state = state
        self._layout = None

    def set_zoom(self, zoom_level: float) -> None:
        self._set_state(self._state.with_zoom(zoom_level))

    def zoom_in(self) -> None:
        self._set_state(self._state.zoomed_in())

    def zoom_out(self) -> None:
        self._set_state(self._state.zoomed_out())

    def toggle_orientation(self) -> None:
        self._set_state(self._state.toggled())

    def set_orientation(self, orientation: Union[str, Orientation]) -> None:
        self._set_state(self._state.with_orientation(orientation))

    def set_interval(self, interval: Union[str, IntervalSpec]) -> None:
        self._set_state(self._state.with_interval(interval))

    def replace_events(self, events: Iterable[TimelineEvent]) -> None:
        self.controller.pointer_leave()
        self._events = list(events)
        self._pending.clear()
        self._layout = None

    # Pointer input

    def pointer_down(self, x: float, y: float) -> bool:
        event_id = self.hit_test(x, y)
        if event_id is None:
            return False
        return self.controller.pointer_down(
            self.get_event(event_id), self.layout().boxes[event_id], x, y, self._state
        )

    def pointer_move(self, x: float, y: float) -> Optional[DragPreview]:
        return self.controller.pointer_move(x, y, self._state)

    def pointer_up(self, x: float, y: float) -> Optional[TemporalDescriptor]:
        return self.controller.pointer_up(x, y, self._state)

    def pointer_leave(self) -> None:
        self.controller.pointer_leave()

    # Commit lifecycle

    def _apply_commit(self, event_id: str, descriptor: TemporalDescriptor) -> None:
        event = self.get_event(event_id)
        self._pending.setdefault(event_id, event.descriptor)
        self._replace(event.with_descriptor(descriptor))
        if self._on_commit is not None:
            self._on_commit(event_id, descriptor)

    def confirm(self, event: TimelineEvent) -> None:
        """Accept the host's persisted record for a committed move."""
        self.get_event(event.id)
        self._pending.pop(event.id, None)
        self._replace(event)

    def revert(self, event_id: str) -> bool:
        """
        Restore the descriptor an event had before its unconfirmed commit.

        Returns:
            False when there is no pending commit for ``event_id``.
        """
        previous = self._pending.pop(event_id, None)
        if previous is None:
            return False
        self._replace(self.get_event(event_id).with_descriptor(previous))
        logger.info(f"Reverted uncommitted move of {event_id}")
        return True

    def _replace(self, updated: TimelineEvent) -> None:
        self._events = [updated if event.id == updated.id else event for event in self._events]
        self._layout = None
