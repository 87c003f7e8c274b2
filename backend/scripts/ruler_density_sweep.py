"""
Diagnostic script to sweep ruler settings and report gridline density.

For every zoom level and interval in the grid it builds the ruler over a
game-length window and prints a compact tabular row showing:
- total gridlines
- major (labelled) gridlines
- pixel spacing between labels

This helps pick default intervals that keep labels readable at each zoom.
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List

# Add backend/src to path to allow imports
# The script is in backend/scripts/, so parent.parent is backend/, then we need backend/src
backend_dir = Path(__file__).parent.parent
src_dir = backend_dir / "src"
sys.path.insert(0, str(src_dir))

from config import MAX_ZOOM, MIN_ZOOM, ZOOM_STEP
from models.view_state import TimelineViewState
from timeline.ruler import gridlines, marker_density
from utils.logger import get_logger

logger = get_logger("ruler_density_sweep")

INTERVAL_GRID: List[str] = ["15s", "30s", "1", "5", "15", "30", "60"]

# Below this many pixels between labels, "HH:MM" labels start to collide
MIN_LABEL_SPACING_PX = 50.0


def zoom_levels() -> List[float]:
    """Zoom levels reachable with the zoom buttons, from MIN_ZOOM to MAX_ZOOM."""
    levels = []
    zoom = 1.0
    while zoom / ZOOM_STEP >= MIN_ZOOM:
        zoom /= ZOOM_STEP
    while zoom <= MAX_ZOOM + 1e-9:
        levels.append(round(zoom, 3))
        zoom *= ZOOM_STEP
    return levels


def run_sweep(window_hours: float):
    """
    Build the ruler for each (zoom, interval) pair and print one row per pair.

    Args:
        window_hours: Length of the visible window in hours
    """
    reference = datetime(2024, 1, 1, 19, 0, tzinfo=timezone.utc)
    start = reference - timedelta(hours=2)
    end = start + timedelta(hours=window_hours)

    print("=== Ruler Density Sweep ===")
    print(f"Window: {start.isoformat()} -> {end.isoformat()} ({window_hours:g} h)")
    print()

    header = ("zoom", "interval", "density", "lines", "majors", "label_px", "readable")
    print("\t".join(header))

    for zoom in zoom_levels():
        for interval in INTERVAL_GRID:
            try:
                state = TimelineViewState(
                    reference_instant=reference,
                    zoom_level=zoom,
                    interval=interval,
                    timeline_start=start,
                    timeline_end=end,
                )
                lines = gridlines(state)
                majors = [line for line in lines if line.is_major]
                label_px = state.interval.seconds * state.pixels_per_second * marker_density(zoom)
                row = [
                    f"{zoom:.2f}",
                    interval,
                    str(marker_density(zoom)),
                    str(len(lines)),
                    str(len(majors)),
                    f"{label_px:.1f}",
                    "yes" if label_px >= MIN_LABEL_SPACING_PX else "no",
                ]
            except ValueError as e:
                logger.error(f"Error building ruler for zoom={zoom}, interval={interval}: {e}")
                row = [f"{zoom:.2f}", interval, "ERROR", "ERROR", "ERROR", "ERROR", "ERROR"]
            print("\t".join(row))

    print()
    print("Legend:")
    print("  density: Intervals per labelled gridline at this zoom")
    print("  lines/majors: Total and labelled gridlines over the window")
    print(f"  label_px: Pixels between labels; readable when >= {MIN_LABEL_SPACING_PX:g}")


if __name__ == "__main__":
    if len(sys.argv) > 2:
        print("Usage: python scripts/ruler_density_sweep.py [window_hours]")
        print("")
        print("Example:")
        print("  python scripts/ruler_density_sweep.py 6")
        sys.exit(1)

    run_sweep(float(sys.argv[1]) if len(sys.argv) == 2 else 6.0)
