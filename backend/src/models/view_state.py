"""View state for a mounted timeline (zoom, orientation, interval, window)."""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Union

from config import (
    DEFAULT_PIXELS_PER_DAY,
    DEFAULT_PIXELS_PER_MINUTE,
    MAX_ZOOM,
    MIN_ZOOM,
    ZOOM_STEP,
)
from models.event import ensure_utc
from timeline.errors import InvalidConfiguration


class Orientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @classmethod
    def parse(cls, value: Union[str, "Orientation"]) -> "Orientation":
        try:
            return cls(str(value.value if isinstance(value, Orientation) else value).lower())
        except ValueError:
            raise InvalidConfiguration(
                f"orientation must be 'horizontal' or 'vertical', got {value!r}"
            ) from None


@dataclass(frozen=True)
class IntervalSpec:
    """
    Gridline spacing.

    Written as ``"30s"`` for seconds or a bare number (``"15"``) for minutes.
    """
    value: float
    unit: str  # "seconds" or "minutes"

    def __post_init__(self):
        """Validate interval data."""
        if self.unit not in ("seconds", "minutes"):
            raise InvalidConfiguration(f"interval unit must be seconds or minutes, got {self.unit!r}")
        if not self.value > 0:
            raise InvalidConfiguration(f"interval must be positive, got {self.value}")

    @classmethod
    def parse(cls, text: Union[str, int, float, "IntervalSpec"]) -> "IntervalSpec":
        """
        Parse an interval string.

        Args:
            text: ``"15s"``, ``"30s"``, ``"1"``, ``"5"``... (numbers mean minutes)

        Returns:
            IntervalSpec

        Raises:
            InvalidConfiguration: for empty, unparseable, zero or negative values
        """
        if isinstance(text, IntervalSpec):
            return text
        if isinstance(text, bool):
            raise InvalidConfiguration(f"unparseable interval: {text!r}")
        if isinstance(text, (int, float)):
            return cls(value=float(text), unit="minutes")

        raw = str(text).strip().lower()
        unit = "minutes"
        if raw.endswith("s"):
            raw = raw[:-1].strip()
            unit = "seconds"
        try:
            value = float(raw)
        except ValueError:
            raise InvalidConfiguration(f"unparseable interval: {text!r}") from None
        if value != value or value in (float("inf"), float("-inf")):
            raise InvalidConfiguration(f"unparseable interval: {text!r}")
        return cls(value=value, unit=unit)

    @property
    def seconds(self) -> float:
        return self.value if self.unit == "seconds" else self.value * 60.0

    def __str__(self) -> str:
        number = f"{self.value:g}"
        return f"{number}s" if self.unit == "seconds" else number


@dataclass(frozen=True)
class TimeScale:
    """Base unit of the time axis and its pixel length at zoom 1.0."""
    name: str
    unit_seconds: float
    pixels_per_unit: float
    label_format: str


GAME_SCALE = TimeScale("game", 60.0, DEFAULT_PIXELS_PER_MINUTE, "%H:%M")
SEASON_SCALE = TimeScale("season", 86400.0, DEFAULT_PIXELS_PER_DAY, "%b %d")


@dataclass(frozen=True)
class TimelineViewState:
    """
    Process-local state of one timeline view.

    Instances are immutable: every mutation returns a new state, so a render
    pass never observes a half-applied change.
    """
    reference_instant: datetime
    zoom_level: float = 1.0
    orientation: Orientation = Orientation.HORIZONTAL
    interval: IntervalSpec = IntervalSpec(5, "minutes")
    timeline_start: Optional[datetime] = None
    timeline_end: Optional[datetime] = None
    scale: TimeScale = GAME_SCALE

    def __post_init__(self):
        """Validate and normalize view state."""
        if not self.zoom_level > 0:
            raise InvalidConfiguration(f"zoom_level must be positive, got {self.zoom_level}")
        object.__setattr__(self, "orientation", Orientation.parse(self.orientation))
        object.__setattr__(self, "interval", IntervalSpec.parse(self.interval))
        object.__setattr__(self, "reference_instant", ensure_utc(self.reference_instant))

        start = ensure_utc(self.timeline_start) if self.timeline_start else self.reference_instant
        end = ensure_utc(self.timeline_end) if self.timeline_end else start + timedelta(hours=3)
        if end <= start:
            raise InvalidConfiguration(f"timeline_end must be after timeline_start, got {start} -> {end}")
        object.__setattr__(self, "timeline_start", start)
        object.__setattr__(self, "timeline_end", end)

    @property
    def pixels_per_unit(self) -> float:
        return self.scale.pixels_per_unit * self.zoom_level

    @property
    def pixels_per_second(self) -> float:
        return self.pixels_per_unit / self.scale.unit_seconds

    @property
    def total_units(self) -> float:
        return (self.timeline_end - self.timeline_start).total_seconds() / self.scale.unit_seconds

    def with_zoom(self, zoom_level: float) -> "TimelineViewState":
        return replace(self, zoom_level=zoom_level)

    def zoomed_in(self) -> "TimelineViewState":
        return self.with_zoom(min(self.zoom_level * ZOOM_STEP, MAX_ZOOM))

    def zoomed_out(self) -> "TimelineViewState":
        return self.with_zoom(max(self.zoom_level / ZOOM_STEP, MIN_ZOOM))

    def toggled(self) -> "TimelineViewState":
        flipped = Orientation.VERTICAL if self.orientation == Orientation.HORIZONTAL else Orientation.HORIZONTAL
        return replace(self, orientation=flipped)

    def with_orientation(self, orientation: Union[str, Orientation]) -> "TimelineViewState":
        return replace(self, orientation=Orientation.parse(orientation))

    def with_interval(self, interval: Union[str, IntervalSpec]) -> "TimelineViewState":
        return replace(self, interval=IntervalSpec.parse(interval))

    def with_window(self, start: datetime, end: datetime) -> "TimelineViewState":
        return replace(self, timeline_start=start, timeline_end=end)
