"""SVG adapter for ``DrawingSurface``."""
import html
from pathlib import Path
from typing import List, Optional, Union

from utils.logger import get_logger

logger = get_logger(__name__)

_ANCHORS = {"left": "start", "center": "middle", "right": "end"}


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


class SvgSurface:
    """Collects drawing primitives and serializes them as a standalone SVG document."""

    def __init__(self, width: float, height: float, font_family: str = "Arial, sans-serif"):
        self.width = width
        self.height = height
        self.font_family = font_family
        self._parts: List[str] = []

    def draw_rect(self, x, y, width, height, fill=None, stroke=None, line_width=1.0, radius=0.0, shadow=False):
        attrs = [
            f"x='{_fmt(x)}'", f"y='{_fmt(y)}'",
            f"width='{_fmt(width)}'", f"height='{_fmt(height)}'",
            f"fill='{html.escape(fill, quote=True) if fill else 'none'}'",
        ]
        if stroke:
            attrs.append(f"stroke='{html.escape(stroke, quote=True)}' stroke-width='{_fmt(line_width)}'")
        if radius:
            attrs.append(f"rx='{_fmt(radius)}' ry='{_fmt(radius)}'")
        if shadow:
            attrs.append("filter='url(#drag-shadow)'")
        self._parts.append(f"<rect {' '.join(attrs)} />")

    def draw_text(self, x, y, text, color="#212529", font_size=12.0, bold=False, align="left"):
        weight = " font-weight='bold'" if bold else ""
        anchor = _ANCHORS.get(align, "start")
        self._parts.append(
            f"<text x='{_fmt(x)}' y='{_fmt(y)}' fill='{html.escape(color, quote=True)}' "
            f"font-size='{_fmt(font_size)}'{weight} text-anchor='{anchor}' "
            f"dominant-baseline='hanging'>{html.escape(text)}</text>"
        )

    def draw_line(self, x1, y1, x2, y2, color="#dee2e6", line_width=1.0, dash: Optional[List[float]] = None):
        dash_attr = f" stroke-dasharray='{','.join(_fmt(d) for d in dash)}'" if dash else ""
        self._parts.append(
            f"<line x1='{_fmt(x1)}' y1='{_fmt(y1)}' x2='{_fmt(x2)}' y2='{_fmt(y2)}' "
            f"stroke='{html.escape(color, quote=True)}' stroke-width='{_fmt(line_width)}'{dash_attr} />"
        )

    def to_svg(self) -> str:
        return "\n".join([
            "<svg xmlns='http://www.w3.org/2000/svg' "
            f"width='{_fmt(self.width)}' height='{_fmt(self.height)}' "
            f"viewBox='0 0 {_fmt(self.width)} {_fmt(self.height)}' "
            f"font-family='{html.escape(self.font_family, quote=True)}'>",
            "<defs>",
            "  <filter id='drag-shadow' x='-10%' y='-10%' width='130%' height='140%'>",
            "    <feDropShadow dx='5' dy='5' stdDeviation='5' flood-color='rgba(0, 0, 0, 0.3)' />",
            "  </filter>",
            "</defs>",
            *self._parts,
            "</svg>",
        ])

    def save(self, output_path: Union[str, Path]) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.to_svg(), encoding="utf-8")
        logger.info(f"Timeline saved to {output_path.resolve()}")
        return output_path
