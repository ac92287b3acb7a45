"""
Constants and configuration values for Photo Strip Studio.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the image pipeline.
"""

# Raster constants
CHANNELS = 4

# Luma weights (ITU-R BT.601)
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# Adjustment ranges (min, max)
BRIGHTNESS_RANGE = (-100.0, 100.0)
CONTRAST_RANGE = (-100.0, 100.0)
SATURATION_RANGE = (-100.0, 100.0)
HUE_RANGE = (-180.0, 180.0)
EXPOSURE_RANGE = (-2.0, 2.0)
HIGHLIGHTS_RANGE = (-100.0, 100.0)
SHADOWS_RANGE = (-100.0, 100.0)

# Largest shift (in 8-bit units) applied by highlights/shadows at +/-100
TONE_REGION_MAX_SHIFT = 96.0

# Artistic effect defaults
OIL_PAINTING_RADIUS = 3
OIL_PAINTING_LEVELS = 20
WATERCOLOR_RADIUS = 3
WATERCOLOR_LEVELS = 6
SEPIA_MATRIX = (
    (0.393, 0.769, 0.189),
    (0.349, 0.686, 0.168),
    (0.272, 0.534, 0.131),
)

# Parallelism: images smaller than this many rows are processed in one band
MIN_ROWS_PER_BAND = 32

# Filter result cache
DEFAULT_CACHE_MAX_ENTRIES = 128

# Filter ids
FILTER_ID_ORIGINAL = "none"

# Frame compositing
FALLBACK_FRAME_COLOR = (26, 26, 46, 255)
FALLBACK_STRIP_WIDTH = 400
FALLBACK_CORNER_RADIUS = 8

# Frame template JSON field names
FIELD_FRAME = "frame"
FIELD_OVERLAY = "overlay"
FIELD_BACKGROUND_COLOR = "backgroundColor"
FIELD_FRAME_WIDTH = "frameWidth"
FIELD_FRAME_HEIGHT = "frameHeight"
FIELD_WINDOWS = "windows"
FIELD_LEFT = "left"
FIELD_TOP = "top"
FIELD_WIDTH = "width"
FIELD_HEIGHT = "height"
FIELD_CORNER_RADIUS = "cornerRadius"
FIELD_BORDER_RADIUS = "borderRadius"

# Print constants
MM_PER_INCH = 25.4
PRINT_BACKGROUND_COLOR = (255, 255, 255, 255)
BLEED_GUIDE_COLOR = (255, 0, 0, 255)
BLEED_GUIDE_DASH = 5
BORDER_COLOR = (0, 0, 0, 255)
CROP_MARK_COLOR = (0, 0, 0, 255)
CROP_MARK_LENGTH_MM = 5.0
CROP_MARK_OFFSET_MM = 2.0
WATERMARK_TEXT = "BoothieCall Elegancia"
WATERMARK_OPACITY = 0.1
WATERMARK_FONT_MM = 3.0
WATERMARK_ANGLE_DEG = 30.0

# Print validation thresholds
MIN_RECOMMENDED_DPI = 150
MIN_RECOMMENDED_MARGIN_MM = 2.0
MIN_RECOMMENDED_BLEED_MM = 1.0

# Quality tiers -> fidelity value
QUALITY_VALUES = {
    "draft": 0.6,
    "normal": 0.8,
    "high": 0.9,
    "print-ready": 1.0,
}

# Quality tiers -> JPEG quality for lossy export (print-ready is PNG)
QUALITY_JPEG_LEVELS = {
    "draft": 60,
    "normal": 80,
    "high": 92,
}

# File size heuristic: bytes per pixel before quality scaling
ESTIMATED_BYTES_PER_PIXEL = 3.5

# File naming
OUTPUT_FILE_PREFIX = "strip_"
