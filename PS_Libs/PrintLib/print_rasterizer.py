"""
Print Rasterizer.

Turns a finished composite into a print-ready raster at a physical size and
DPI. The canvas covers the trimmed sheet plus bleed on every side:

    +-------------------------------+  <- canvas (format + 2 x bleed)
    |   +-----------------------+   |  <- trim line (dashed bleed guide)
    |   |   +---------------+   |   |
    |   |   |  printable    |   |   |  <- format - 2 x margin
    |   |   +---------------+   |   |
    |   +-----------------------+   |
    +-------------------------------+

Draw order: white fill, bleed guide, image, border, watermark, crop marks.
"""

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from PIL import Image, ImageDraw, ImageFont

from PS_Libs.constants import (
    BLEED_GUIDE_COLOR,
    BLEED_GUIDE_DASH,
    BORDER_COLOR,
    CROP_MARK_COLOR,
    CROP_MARK_LENGTH_MM,
    CROP_MARK_OFFSET_MM,
    ESTIMATED_BYTES_PER_PIXEL,
    MIN_RECOMMENDED_BLEED_MM,
    MIN_RECOMMENDED_DPI,
    MIN_RECOMMENDED_MARGIN_MM,
    MM_PER_INCH,
    PRINT_BACKGROUND_COLOR,
    WATERMARK_ANGLE_DEG,
    WATERMARK_FONT_MM,
    WATERMARK_OPACITY,
    WATERMARK_TEXT,
)
from PS_Libs.errors import InvalidSettings
from PS_Libs.ImageEditingLib.image_io import ImageSource, decode_image, save_raster
from PS_Libs.ImageEditingLib.image_models import RasterImage
from PS_Libs.PrintLib.print_formats import PrintCategory, PrintQuality, PrintSettings

logger = logging.getLogger(__name__)


# ==========================================================================
# Units
# ==========================================================================

def mm_to_px(mm: float, dpi: int) -> int:
    """Millimeters to whole pixels, rounding half up."""
    if dpi <= 0:
        raise ValueError(f"dpi must be positive, got {dpi}")
    value = mm * dpi / MM_PER_INCH
    return math.floor(value + 0.5)


def px_to_mm(px: float, dpi: int) -> float:
    if dpi <= 0:
        raise ValueError(f"dpi must be positive, got {dpi}")
    return px * MM_PER_INCH / dpi


@dataclass(frozen=True)
class PrintDimensions:
    """Pixel geometry of a print canvas.

    Attributes:
        canvas_width, canvas_height: Full canvas including bleed
        printable_width, printable_height: Area inside the margins
        bleed_width, bleed_height: Bleed inset from the canvas edge
        margin: Margin inset from the trim line
    """
    canvas_width: int
    canvas_height: int
    printable_width: int
    printable_height: int
    bleed_width: int
    bleed_height: int
    margin: int

    @property
    def canvas_size(self) -> Tuple[int, int]:
        return self.canvas_width, self.canvas_height

    @property
    def image_origin(self) -> Tuple[int, int]:
        return self.bleed_width + self.margin, self.bleed_height + self.margin

    @property
    def printable_box(self) -> Tuple[int, int, int, int]:
        """(left, top, right, bottom) of the printable rectangle."""
        left, top = self.image_origin
        return left, top, left + self.printable_width, top + self.printable_height


def calculate_print_dimensions(settings: PrintSettings) -> PrintDimensions:
    width_mm, height_mm = settings.effective_size_mm()
    dpi = settings.format.dpi
    return PrintDimensions(
        canvas_width=mm_to_px(width_mm + settings.bleed * 2, dpi),
        canvas_height=mm_to_px(height_mm + settings.bleed * 2, dpi),
        printable_width=mm_to_px(width_mm - settings.margin * 2, dpi),
        printable_height=mm_to_px(height_mm - settings.margin * 2, dpi),
        bleed_width=mm_to_px(settings.bleed, dpi),
        bleed_height=mm_to_px(settings.bleed, dpi),
        margin=mm_to_px(settings.margin, dpi),
    )


# ==========================================================================
# Validation
# ==========================================================================

@dataclass
class ValidationResult:
    is_valid: bool
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def validate_print_settings(settings: PrintSettings) -> ValidationResult:
    """
    Check print settings before rendering.

    Warnings describe settings that print poorly; errors describe settings
    that cannot be printed at all.
    """
    warnings: List[str] = []
    errors: List[str] = []

    if settings.format.dpi < MIN_RECOMMENDED_DPI:
        warnings.append("Low DPI may result in poor print quality")

    if settings.margin < MIN_RECOMMENDED_MARGIN_MM:
        warnings.append("Small margins may result in content being cut off")

    if settings.bleed < MIN_RECOMMENDED_BLEED_MM and settings.format.category is PrintCategory.PHOTO:
        warnings.append("Consider adding bleed for professional printing")

    if settings.margin < 0 or settings.bleed < 0 or settings.border_width < 0:
        errors.append("Margin, bleed and border width must not be negative")

    dimensions = calculate_print_dimensions(settings)
    if dimensions.printable_width <= 0 or dimensions.printable_height <= 0:
        errors.append("Margins are too large for the selected format")

    return ValidationResult(is_valid=not errors, warnings=warnings, errors=errors)


# ==========================================================================
# Quality and size
# ==========================================================================

def quality_value(quality: PrintQuality) -> float:
    return PrintQuality(quality).fidelity


def estimate_file_size(settings: PrintSettings) -> int:
    """Rough encoded size in bytes, for display only."""
    dimensions = calculate_print_dimensions(settings)
    pixels = dimensions.canvas_width * dimensions.canvas_height
    return int(round(pixels * ESTIMATED_BYTES_PER_PIXEL * quality_value(settings.quality)))


def format_file_size(size_bytes: int) -> str:
    if size_bytes < 1024 * 1024:
        return f"{round(size_bytes / 1024)} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


# ==========================================================================
# Drawing helpers
# ==========================================================================

def _dashed_rectangle(draw: ImageDraw.ImageDraw, box: Tuple[int, int, int, int],
                      dash: int, color) -> None:
    left, top, right, bottom = box
    edges = (
        ((left, top), (right, top)),
        ((right, top), (right, bottom)),
        ((right, bottom), (left, bottom)),
        ((left, bottom), (left, top)),
    )
    for (x0, y0), (x1, y1) in edges:
        length = max(abs(x1 - x0), abs(y1 - y0))
        if length == 0:
            continue
        dx = (x1 - x0) / length
        dy = (y1 - y0) / length
        for start in range(0, length, dash * 2):
            end = min(start + dash, length)
            draw.line(
                ((x0 + dx * start, y0 + dy * start), (x0 + dx * end, y0 + dy * end)),
                fill=color,
                width=1,
            )


def _load_font(size: int) -> ImageFont.ImageFont:
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size)
    except OSError:
        return ImageFont.load_default(size=size)


def _watermark_layer(canvas_size: Tuple[int, int], dpi: int) -> Image.Image:
    font = _load_font(max(1, mm_to_px(WATERMARK_FONT_MM, dpi)))
    left, top, right, bottom = font.getbbox(WATERMARK_TEXT)
    text = Image.new("RGBA", (max(1, right - left), max(1, bottom - top)), (0, 0, 0, 0))
    alpha = int(round(255 * WATERMARK_OPACITY))
    ImageDraw.Draw(text).text((-left, -top), WATERMARK_TEXT, font=font, fill=(0, 0, 0, alpha))
    text = text.rotate(WATERMARK_ANGLE_DEG, resample=Image.Resampling.BICUBIC, expand=True)

    layer = Image.new("RGBA", canvas_size, (0, 0, 0, 0))
    position = ((canvas_size[0] - text.width) // 2, (canvas_size[1] - text.height) // 2)
    layer.alpha_composite(text, dest=(max(0, position[0]), max(0, position[1])))
    return layer


def _crop_mark_lines(dimensions: PrintDimensions, dpi: int) -> List[Tuple[int, int, int, int]]:
    """Line segments for the four corner mark pairs, outside the trim line."""
    length = mm_to_px(CROP_MARK_LENGTH_MM, dpi)
    offset = mm_to_px(CROP_MARK_OFFSET_MM, dpi)
    left = dimensions.bleed_width
    top = dimensions.bleed_height
    right = dimensions.canvas_width - dimensions.bleed_width
    bottom = dimensions.canvas_height - dimensions.bleed_height

    lines = []
    for x, y, sx, sy in ((left, top, -1, -1), (right, top, 1, -1),
                         (left, bottom, -1, 1), (right, bottom, 1, 1)):
        lines.append((x + sx * offset, y, x + sx * (offset + length), y))
        lines.append((x, y + sy * offset, x, y + sy * (offset + length)))
    return lines


# ==========================================================================
# Rasterizer
# ==========================================================================

class PrintRasterizer:
    """
    Renders print-ready rasters.

    Example:
        >>> rasterizer = PrintRasterizer()
        >>> sheet = rasterizer.generate_print_image(strip, PrintSettings())
        >>> sheet.size
        (647, 1847)
    """

    def generate_print_image(self, source: ImageSource, settings: PrintSettings) -> RasterImage:
        """
        Render a source image onto a print canvas.

        Args:
            source: Composite to print (RasterImage or anything decode_image accepts)
            settings: Print settings

        Returns:
            RasterImage sized (format + 2 x bleed) at the format's DPI

        Raises:
            InvalidSettings: If validation reports errors; nothing is drawn
        """
        result = validate_print_settings(settings)
        if not result.is_valid:
            raise InvalidSettings(
                f"Invalid print settings: {'; '.join(result.errors)}", result.errors
            )
        for warning in result.warnings:
            logger.warning(f"Print settings for '{settings.format.id}': {warning}")

        image = decode_image(source)
        dpi = settings.format.dpi
        dimensions = calculate_print_dimensions(settings)

        canvas = Image.new("RGBA", dimensions.canvas_size, PRINT_BACKGROUND_COLOR)
        draw = ImageDraw.Draw(canvas)

        if settings.bleed > 0:
            _dashed_rectangle(
                draw,
                (dimensions.bleed_width, dimensions.bleed_height,
                 dimensions.canvas_width - dimensions.bleed_width,
                 dimensions.canvas_height - dimensions.bleed_height),
                BLEED_GUIDE_DASH,
                BLEED_GUIDE_COLOR,
            )

        scaled = image.to_pil().resize(
            (dimensions.printable_width, dimensions.printable_height),
            Image.Resampling.LANCZOS,
        )
        canvas.alpha_composite(scaled, dest=dimensions.image_origin)

        draw = ImageDraw.Draw(canvas)
        if settings.include_border and settings.border_width > 0:
            left, top, right, bottom = dimensions.printable_box
            draw.rectangle(
                (left, top, right - 1, bottom - 1),
                outline=BORDER_COLOR,
                width=max(1, mm_to_px(settings.border_width, dpi)),
            )

        if settings.include_watermark:
            canvas = Image.alpha_composite(canvas, _watermark_layer(dimensions.canvas_size, dpi))
            draw = ImageDraw.Draw(canvas)

        for line in _crop_mark_lines(dimensions, dpi):
            draw.line(line, fill=CROP_MARK_COLOR, width=1)

        logger.info(
            f"Rendered print sheet {dimensions.canvas_width}x{dimensions.canvas_height} "
            f"for '{settings.format.id}' at {dpi} DPI"
        )
        return RasterImage.from_pil(canvas)

    def export_print_image(self, image: RasterImage, path: Path, settings: PrintSettings) -> Path:
        """Encode a rendered sheet using the settings' quality tier."""
        return save_raster(image, path, quality=settings.quality.value)
