"""Renderer-agnostic painting of a laid-out timeline.

All drawing goes through the three ``DrawingSurface`` primitives, so the
painting order and geometry can be tested with ``RecordingSurface`` and only
the surface adapter (see ``timeline.svg_surface``) knows about an output format.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol

from config import LANE_HEADER_WIDTH, TIME_HEADER_HEIGHT
from models.event import TimelineEvent
from models.view_state import Orientation, TimelineViewState
from timeline.drag import DragPreview
from timeline.lanes import DRAGGING_PALETTE, BlockPalette, LANES_BY_ID, palette_for
from timeline.layout import Box, TimelineLayout
from timeline.ruler import Gridline

BACKGROUND_COLOR = "#f8f9fa"
TIME_HEADER_COLOR = "#f0f0f0"
LANE_HEADER_COLOR = "#f8f9fa"
SEPARATOR_COLOR = "#dee2e6"
MAJOR_GRID_COLOR = "#adb5bd"
MINOR_GRID_COLOR = "#dee2e6"
TEXT_COLOR = "#212529"
GUIDE_COLOR = "rgba(33, 150, 243, 0.7)"

# Rough glyph width as a fraction of font size, used for title truncation
CHAR_WIDTH_RATIO = 0.6


class DrawingSurface(Protocol):
    """Minimal drawing primitives a renderer needs."""

    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        line_width: float = 1.0,
        radius: float = 0.0,
        shadow: bool = False,
    ) -> None:
        ...

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        color: str = TEXT_COLOR,
        font_size: float = 12.0,
        bold: bool = False,
        align: str = "left",
    ) -> None:
        ...

    def draw_line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        color: str = SEPARATOR_COLOR,
        line_width: float = 1.0,
        dash: Optional[List[float]] = None,
    ) -> None:
        ...


@dataclass
class DrawCommand:
    kind: str  # "rect", "text" or "line"
    params: Dict[str, Any]


@dataclass
class RecordingSurface:
    """Surface that records every primitive call in order."""
    width: float = 0.0
    height: float = 0.0
    commands: List[DrawCommand] = field(default_factory=list)

    def draw_rect(self, x, y, width, height, fill=None, stroke=None, line_width=1.0, radius=0.0, shadow=False):
        self.commands.append(DrawCommand("rect", {
            "x": x, "y": y, "width": width, "height": height, "fill": fill,
            "stroke": stroke, "line_width": line_width, "radius": radius, "shadow": shadow,
        }))

    def draw_text(self, x, y, text, color=TEXT_COLOR, font_size=12.0, bold=False, align="left"):
        self.commands.append(DrawCommand("text", {
            "x": x, "y": y, "text": text, "color": color,
            "font_size": font_size, "bold": bold, "align": align,
        }))

    def draw_line(self, x1, y1, x2, y2, color=SEPARATOR_COLOR, line_width=1.0, dash=None):
        self.commands.append(DrawCommand("line", {
            "x1": x1, "y1": y1, "x2": x2, "y2": y2,
            "color": color, "line_width": line_width, "dash": dash,
        }))

    def of_kind(self, kind: str) -> List[DrawCommand]:
        return [command for command in self.commands if command.kind == kind]

    def texts(self) -> List[str]:
        return [command.params["text"] for command in self.of_kind("text")]


def truncate_title(title: str, max_width: float, font_size: float) -> str:
    """Cut ``title`` with '...' so it fits ``max_width`` at the estimated glyph width."""
    char_width = font_size * CHAR_WIDTH_RATIO
    if len(title) * char_width <= max_width:
        return title
    keep = int(max_width // char_width) - 3
    if keep <= 0:
        return "..."
    return title[:keep] + "..."


def event_caption(event: TimelineEvent, state: TimelineViewState) -> str:
    """'HH:MM (Ns)' caption under the block title."""
    instant = event.descriptor.resolve(state.reference_instant, event.id)
    local = instant.astimezone(state.reference_instant.tzinfo)
    return f"{local.strftime('%H:%M')} ({event.render_duration_seconds}s)"


def draw_ruler(surface: DrawingSurface, lines: Iterable[Gridline], layout: TimelineLayout) -> None:
    for line in lines:
        color = MAJOR_GRID_COLOR if line.is_major else MINOR_GRID_COLOR
        width = 1.0 if line.is_major else 0.5
        if layout.orientation == Orientation.HORIZONTAL:
            surface.draw_line(line.position, 0, line.position, layout.height, color=color, line_width=width)
            if line.label:
                surface.draw_text(line.position, TIME_HEADER_HEIGHT / 2, line.label, align="center")
        else:
            surface.draw_line(0, line.position, layout.width, line.position, color=color, line_width=width)
            if line.label:
                surface.draw_text(LANE_HEADER_WIDTH / 2, line.position, line.label, align="center")


def draw_lane_headers(surface: DrawingSurface, layout: TimelineLayout) -> None:
    for position in layout.lanes:
        if layout.orientation == Orientation.HORIZONTAL:
            surface.draw_rect(0, position.offset, LANE_HEADER_WIDTH, position.size, fill=LANE_HEADER_COLOR)
            surface.draw_text(10, position.offset + position.size / 2, position.lane.display_name)
            surface.draw_line(0, position.offset, layout.width, position.offset)
        else:
            surface.draw_rect(position.offset, 0, position.size, TIME_HEADER_HEIGHT, fill=LANE_HEADER_COLOR)
            surface.draw_text(
                position.offset + position.size / 2, TIME_HEADER_HEIGHT / 2,
                position.lane.display_name, align="center",
            )
            surface.draw_line(position.offset, 0, position.offset, layout.height)


def draw_event_block(
    surface: DrawingSurface,
    event: TimelineEvent,
    box: Box,
    state: TimelineViewState,
    palette: BlockPalette,
    dragged: bool = False,
) -> None:
    surface.draw_rect(
        box.x, box.y, box.width, box.height,
        fill=palette.background,
        stroke=palette.border,
        line_width=3.0 if dragged else 2.0,
        radius=5.0,
        shadow=dragged,
    )

    title_size = 13.0 if dragged else 12.0
    title = truncate_title(event.title or "Untitled", box.width - 10, title_size)
    surface.draw_text(box.x + 5, box.y + 5, title, color=palette.text, font_size=title_size, bold=True)

    # Small vertical blocks only have room for the title
    if state.orientation == Orientation.VERTICAL and box.height <= 40:
        return
    surface.draw_text(
        box.x + 5, box.y + 20, event_caption(event, state),
        color=palette.text, font_size=11.0 if dragged else 10.0,
    )
    if dragged:
        surface.draw_text(box.x + 5, box.y + 35, "Dragging...", color=DRAGGING_PALETTE.border, font_size=10.0)


def render_timeline(
    surface: DrawingSurface,
    layout: TimelineLayout,
    lines: Iterable[Gridline],
    events: Iterable[TimelineEvent],
    state: TimelineViewState,
    drag_preview: Optional[DragPreview] = None,
) -> None:
    """
    Paint gridlines, lane headers, event blocks and the dragged block, in that order.

    Args:
        surface: Drawing target
        layout: Geometry from ``timeline.layout.layout``
        lines: Gridlines from ``timeline.ruler.gridlines``
        events: Same events, in paint order, that produced ``layout``
        state: View state the layout was computed with
        drag_preview: Live proposed position of a dragged block, if any
    """
    surface.draw_rect(0, 0, layout.width, layout.height, fill=BACKGROUND_COLOR)
    if layout.orientation == Orientation.HORIZONTAL:
        surface.draw_rect(0, 0, layout.width, TIME_HEADER_HEIGHT, fill=TIME_HEADER_COLOR)
    else:
        surface.draw_rect(0, 0, LANE_HEADER_WIDTH, layout.height, fill=TIME_HEADER_COLOR)

    draw_ruler(surface, lines, layout)
    draw_lane_headers(surface, layout)

    dragged_id = drag_preview.event_id if drag_preview else None
    dragged_event = None
    for event in events:
        box = layout.boxes.get(event.id)
        if box is None:
            continue
        if event.id == dragged_id:
            dragged_event = event
            continue
        draw_event_block(surface, event, box, state, palette_for(LANES_BY_ID[box.lane_id]))

    if drag_preview is None or dragged_event is None:
        return

    original = layout.boxes[dragged_event.id]
    moved_event = dragged_event.with_descriptor(drag_preview.descriptor)
    if layout.orientation == Orientation.HORIZONTAL:
        moved = Box(drag_preview.block_start, original.y, original.width, original.height, original.lane_id)
        guide = (drag_preview.block_start, 0, drag_preview.block_start, layout.height)
    else:
        moved = Box(original.x, drag_preview.block_start, original.width, original.height, original.lane_id)
        guide = (0, drag_preview.block_start, layout.width, drag_preview.block_start)

    draw_event_block(surface, moved_event, moved, state, DRAGGING_PALETTE, dragged=True)
    surface.draw_line(*guide, color=GUIDE_COLOR, line_width=2.0, dash=[5, 3])
