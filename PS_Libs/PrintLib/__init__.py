"""
PrintLib - Print formats, validation and print rasterization
"""

from PS_Libs.PrintLib.print_formats import (
    PRINT_FORMATS,
    ColorProfile,
    Orientation,
    PrintCategory,
    PrintFormat,
    PrintQuality,
    PrintSettings,
    get_print_format,
    popular_formats,
)
from PS_Libs.PrintLib.print_rasterizer import (
    PrintDimensions,
    PrintRasterizer,
    ValidationResult,
    calculate_print_dimensions,
    estimate_file_size,
    format_file_size,
    mm_to_px,
    px_to_mm,
    validate_print_settings,
)

__all__ = [
    "PRINT_FORMATS",
    "ColorProfile",
    "Orientation",
    "PrintCategory",
    "PrintFormat",
    "PrintQuality",
    "PrintSettings",
    "get_print_format",
    "popular_formats",
    "PrintDimensions",
    "PrintRasterizer",
    "ValidationResult",
    "calculate_print_dimensions",
    "estimate_file_size",
    "format_file_size",
    "mm_to_px",
    "px_to_mm",
    "validate_print_settings",
]
