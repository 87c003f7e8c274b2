"""Bulk time shifts and interval snapping."""
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Union

from models.event import TimelineEvent, ensure_utc
from models.view_state import IntervalSpec
from timeline.errors import InvalidConfiguration, MissingTemporalDescriptor
from utils.logger import get_logger

logger = get_logger(__name__)

SHIFT_SCOPES = ("all", "selected", "after")


def shift_events(
    events: Iterable[TimelineEvent],
    minutes: float,
    scope: str = "all",
    selected_ids: Optional[Iterable[str]] = None,
    after: Optional[datetime] = None,
    reference_instant: Optional[datetime] = None,
) -> List[TimelineEvent]:
    """
    Move a group of events earlier or later.

    Args:
        events: Events in host order
        minutes: Signed shift; negative moves earlier
        scope: "all", "selected" (ids in ``selected_ids``) or "after"
            (events starting at or after ``after``)
        selected_ids: Ids for the "selected" scope
        after: Cut-off instant for the "after" scope
        reference_instant: Needed to resolve offset events for the "after" scope

    Returns:
        New list in the same order; events outside the scope are returned unchanged.

    Raises:
        InvalidConfiguration: unknown scope or missing scope arguments
    """
    if scope not in SHIFT_SCOPES:
        raise InvalidConfiguration(f"shift scope must be one of {SHIFT_SCOPES}, got {scope!r}")
    if scope == "after" and (after is None or reference_instant is None):
        raise InvalidConfiguration("'after' scope needs both an after instant and a reference instant")
    selected = set(selected_ids or [])
    if scope == "selected" and not selected:
        raise InvalidConfiguration("'selected' scope needs at least one event id")

    seconds = minutes * 60.0
    shifted: List[TimelineEvent] = []
    moved = 0
    for event in events:
        if _in_scope(event, scope, selected, after, reference_instant):
            shifted.append(event.with_descriptor(event.descriptor.shifted(seconds)))
            moved += 1
        else:
            shifted.append(event)

    logger.info(f"Shifted {moved} events by {minutes:+g} minutes (scope={scope})")
    return shifted


def _in_scope(
    event: TimelineEvent,
    scope: str,
    selected: set,
    after: Optional[datetime],
    reference_instant: Optional[datetime],
) -> bool:
    if event.descriptor.is_empty:
        return False
    if scope == "all":
        return True
    if scope == "selected":
        return event.id in selected
    try:
        start = event.descriptor.resolve(reference_instant, event.id)
    except MissingTemporalDescriptor:
        return False
    return start >= ensure_utc(after)


def snap_to_interval(instant: datetime, interval: Union[str, IntervalSpec]) -> datetime:
    """
    Round an instant to the nearest interval boundary within its hour.

    Second intervals round the seconds field, minute intervals round the
    minutes field and drop the seconds (e.g. 19:07:40 with "5" -> 19:10:00).
    """
    spec = IntervalSpec.parse(interval)
    instant = ensure_utc(instant).replace(microsecond=0)
    if spec.unit == "seconds":
        base = instant.replace(second=0)
        rounded = round(instant.second / spec.value) * spec.value
        return base + timedelta(seconds=rounded)
    base = instant.replace(minute=0, second=0)
    minutes = instant.minute + instant.second / 60.0
    rounded = round(minutes / spec.value) * spec.value
    return base + timedelta(minutes=rounded)
