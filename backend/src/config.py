"""Configuration module for the Show Script timeline service."""
import os

from dotenv import load_dotenv

load_dotenv()


APP_NAME = os.environ.get("APP_NAME", "Show Script Timeline")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# Allowed origins for the browser front-end
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]

# Canvas geometry (pixels)
LANE_HEADER_WIDTH = float(os.environ.get("LANE_HEADER_WIDTH", "120"))
TIME_HEADER_HEIGHT = float(os.environ.get("TIME_HEADER_HEIGHT", "40"))
LANE_PADDING = float(os.environ.get("LANE_PADDING", "5"))
LANE_HEIGHT = float(os.environ.get("LANE_HEIGHT", "60"))
MIN_CANVAS_WIDTH = float(os.environ.get("MIN_CANVAS_WIDTH", "1000"))
VERTICAL_CANVAS_WIDTH = float(os.environ.get("VERTICAL_CANVAS_WIDTH", "1200"))

# Minimum block size along the time axis
MIN_BLOCK_WIDTH = float(os.environ.get("MIN_BLOCK_WIDTH", "100"))
MIN_BLOCK_HEIGHT = float(os.environ.get("MIN_BLOCK_HEIGHT", "60"))
DEFAULT_DURATION_SECONDS = int(os.environ.get("DEFAULT_DURATION_SECONDS", "60"))

# Time scale at zoom 1.0
DEFAULT_PIXELS_PER_MINUTE = float(os.environ.get("DEFAULT_PIXELS_PER_MINUTE", "10"))
DEFAULT_PIXELS_PER_DAY = float(os.environ.get("DEFAULT_PIXELS_PER_DAY", "120"))

# Zoom controls
DEFAULT_ZOOM_LEVEL = float(os.environ.get("DEFAULT_ZOOM_LEVEL", "1.0"))
MIN_ZOOM = float(os.environ.get("MIN_ZOOM", "0.5"))
MAX_ZOOM = float(os.environ.get("MAX_ZOOM", "5.0"))
ZOOM_STEP = float(os.environ.get("ZOOM_STEP", "1.2"))

# Ruler
DEFAULT_INTERVAL = os.environ.get("DEFAULT_INTERVAL", "5")
DEFAULT_ORIENTATION = os.environ.get("DEFAULT_ORIENTATION", "horizontal")
MAX_GRIDLINES = int(os.environ.get("MAX_GRIDLINES", "20000"))

# Pointer gestures
DRAG_THRESHOLD_PX = float(os.environ.get("DRAG_THRESHOLD_PX", "5"))

# Visible window padding
GAME_PADDING_BEFORE_MINUTES = float(os.environ.get("GAME_PADDING_BEFORE_MINUTES", "120"))
GAME_PADDING_AFTER_MINUTES = float(os.environ.get("GAME_PADDING_AFTER_MINUTES", "60"))
SEASON_PADDING_DAYS = float(os.environ.get("SEASON_PADDING_DAYS", "14"))


def get_settings() -> dict:
    """Get application settings as a dictionary."""
    return {
        "app_name": APP_NAME,
        "log_level": LOG_LEVEL,
        "default_interval": DEFAULT_INTERVAL,
        "default_orientation": DEFAULT_ORIENTATION,
        "zoom_range": [MIN_ZOOM, MAX_ZOOM],
    }
