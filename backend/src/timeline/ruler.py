"""Ruler generator: time gridlines and labels for the background."""
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Union

import numpy as np

from config import MAX_GRIDLINES
from models.view_state import GAME_SCALE, IntervalSpec, TimelineViewState
from timeline.errors import InvalidConfiguration
from timeline.time_mapper import axis_inset
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Gridline:
    """A single ruler tick."""
    position: float
    is_major: bool
    instant: datetime
    label: Optional[str] = None


def marker_density(zoom_level: float) -> int:
    """
    Number of intervals per labelled (major) gridline.

    Low zoom labels every 5th line so labels do not collide; high zoom labels
    every line.
    """
    if zoom_level < 1.0:
        return 5
    if zoom_level < 3.0:
        return 2
    return 1


def format_label(instant: datetime, interval: IntervalSpec, state: TimelineViewState) -> str:
    local = instant.astimezone(state.reference_instant.tzinfo)
    if state.scale is GAME_SCALE and interval.seconds < 60:
        return local.strftime("%H:%M:%S")
    return local.strftime(state.scale.label_format)


def gridlines(
    state: TimelineViewState,
    interval: Optional[Union[str, IntervalSpec]] = None,
) -> List[Gridline]:
    """
    Gridlines from ``timeline_start`` to ``timeline_end`` (inclusive) every interval.

    Args:
        state: View state (window, zoom, orientation, scale)
        interval: Override for ``state.interval``, e.g. ``"30s"`` or ``"15"``

    Returns:
        Gridlines in axis order; every ``marker_density``-th line is major and labelled.

    Raises:
        InvalidConfiguration: for a zero, negative, unparseable or vanishingly small interval, or when
            the window would need more than ``MAX_GRIDLINES`` lines.
    """
    spec = IntervalSpec.parse(interval if interval is not None else state.interval)

    total_seconds = (state.timeline_end - state.timeline_start).total_seconds()
    raw_count = total_seconds / spec.seconds
    # A subnormal interval overflows the division to inf
    if not math.isfinite(raw_count):
        raise InvalidConfiguration(
            f"interval {spec} is too small for a {total_seconds:.0f}s window "
            f"(limit {MAX_GRIDLINES} gridlines)"
        )
    # Small epsilon so a window that is an exact multiple of the interval keeps its last line
    count = int(math.floor(raw_count + 1e-9)) + 1
    if count > MAX_GRIDLINES:
        raise InvalidConfiguration(
            f"interval {spec} yields {count} gridlines over {total_seconds:.0f}s "
            f"(limit {MAX_GRIDLINES})"
        )

    density = marker_density(state.zoom_level)
    steps = np.arange(count)
    positions = axis_inset(state) + steps * (spec.seconds / state.scale.unit_seconds) * state.pixels_per_unit
    majors = steps % density == 0

    lines: List[Gridline] = []
    for step, position, is_major in zip(steps.tolist(), positions.tolist(), majors.tolist()):
        instant = state.timeline_start + timedelta(seconds=step * spec.seconds)
        lines.append(Gridline(
            position=position,
            is_major=is_major,
            instant=instant,
            label=format_label(instant, spec, state) if is_major else None,
        ))

    logger.debug(f"Generated {len(lines)} gridlines (interval={spec}, density={density})")
    return lines
