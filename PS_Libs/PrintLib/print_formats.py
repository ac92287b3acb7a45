"""
Print formats and print settings.

The format registry is static data describing physical paper sizes. Print
settings are session state chosen by the user and read on each render.

Classes:
    PrintCategory, PrintQuality, ColorProfile, Orientation: Enumerations
    PrintFormat: A named paper size at a target DPI
    PrintSettings: Format plus layout and output options

Functions:
    get_print_format: Look up a registered format by id
    popular_formats: Formats flagged as popular
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Tuple

from PS_Libs.constants import QUALITY_VALUES
from PS_Libs.errors import InvalidSettings


class PrintCategory(Enum):
    STANDARD = "standard"
    PHOTO = "photo"
    CUSTOM = "custom"


class PrintQuality(Enum):
    DRAFT = "draft"
    NORMAL = "normal"
    HIGH = "high"
    PRINT_READY = "print-ready"

    @property
    def fidelity(self) -> float:
        """Output fidelity 0-1; strictly increasing from DRAFT to PRINT_READY."""
        return QUALITY_VALUES[self.value]

    @property
    def is_lossless(self) -> bool:
        return self is PrintQuality.PRINT_READY


class ColorProfile(Enum):
    SRGB = "sRGB"
    ADOBE_RGB = "Adobe RGB"
    CMYK = "CMYK"


class Orientation(Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


@dataclass(frozen=True)
class PrintFormat:
    """A physical output size.

    Attributes:
        id: Registry id (e.g. "strip-2x6")
        name: Display name
        width_mm, height_mm: Paper size in millimeters (portrait)
        dpi: Target dots per inch
        description: Short description
        aspect_ratio: Display string such as "1:3"
        category: Format group
        is_popular: Highlighted in format pickers
    """
    id: str
    name: str
    width_mm: float
    height_mm: float
    dpi: int
    description: str = ""
    aspect_ratio: str = ""
    category: PrintCategory = PrintCategory.STANDARD
    is_popular: bool = False

    def __post_init__(self):
        if self.width_mm <= 0 or self.height_mm <= 0:
            raise ValueError(
                f"Format size must be positive, got {self.width_mm}x{self.height_mm} mm"
            )
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive, got {self.dpi}")


PRINT_FORMATS: Tuple[PrintFormat, ...] = (
    # Photo booth strips
    PrintFormat("strip-2x6", '2" x 6" Strip', 50.8, 152.4, 300,
                "Classic photo booth strip format", "1:3", PrintCategory.PHOTO, True),
    PrintFormat("strip-2x8", '2" x 8" Strip', 50.8, 203.2, 300,
                "Extended photo booth strip", "1:4", PrintCategory.PHOTO),
    # Photo prints
    PrintFormat("photo-4x6", '4" x 6" Photo', 101.6, 152.4, 300,
                "Standard photo print size", "2:3", PrintCategory.PHOTO, True),
    PrintFormat("photo-5x7", '5" x 7" Photo', 127.0, 177.8, 300,
                "Medium photo print size", "5:7", PrintCategory.PHOTO),
    PrintFormat("photo-8x10", '8" x 10" Photo', 203.2, 254.0, 300,
                "Large photo print size", "4:5", PrintCategory.PHOTO),
    # Paper
    PrintFormat("a4", "A4", 210.0, 297.0, 300,
                "Standard A4 paper size", "√2:1", PrintCategory.STANDARD, True),
    PrintFormat("letter", 'Letter (8.5" x 11")', 215.9, 279.4, 300,
                "US Letter size", "8.5:11", PrintCategory.STANDARD),
    PrintFormat("a3", "A3", 297.0, 420.0, 300,
                "Large A3 paper size", "√2:1", PrintCategory.STANDARD),
    # Social
    PrintFormat("instagram-square", "Instagram Square", 88.9, 88.9, 300,
                "Instagram square post format", "1:1", PrintCategory.CUSTOM),
    PrintFormat("instagram-story", "Instagram Story", 60.0, 106.7, 300,
                "Instagram story format", "9:16", PrintCategory.CUSTOM),
)

_FORMATS_BY_ID: Dict[str, PrintFormat] = {fmt.id: fmt for fmt in PRINT_FORMATS}


def get_print_format(format_id: str) -> PrintFormat:
    """
    Look up a format by id.

    Raises:
        InvalidSettings: If the id is not registered
    """
    if format_id not in _FORMATS_BY_ID:
        raise InvalidSettings(
            f"Unknown print format '{format_id}'. "
            f"Available formats: {', '.join(sorted(_FORMATS_BY_ID))}"
        )
    return _FORMATS_BY_ID[format_id]


def list_print_formats() -> List[PrintFormat]:
    return list(PRINT_FORMATS)


def popular_formats() -> List[PrintFormat]:
    return [fmt for fmt in PRINT_FORMATS if fmt.is_popular]


@dataclass
class PrintSettings:
    """Options for a print render.

    Attributes:
        format: Paper format
        orientation: Landscape swaps the format's width and height
        margin: Inset of the printable area from the trim edge, in mm
        bleed: Extra area beyond the trim edge, in mm
        quality: Output quality tier
        color_profile: Color profile tag carried with the output
        include_watermark: Draw the diagonal watermark
        include_border: Stroke a border around the printable area
        border_width: Border stroke width in mm
    """
    format: PrintFormat = _FORMATS_BY_ID["strip-2x6"]
    orientation: Orientation = Orientation.PORTRAIT
    margin: float = 5.0
    bleed: float = 2.0
    quality: PrintQuality = PrintQuality.HIGH
    color_profile: ColorProfile = ColorProfile.SRGB
    include_watermark: bool = False
    include_border: bool = True
    border_width: float = 1.0

    def effective_size_mm(self) -> Tuple[float, float]:
        """(width, height) of the trimmed sheet after orientation."""
        if self.orientation is Orientation.LANDSCAPE:
            return self.format.height_mm, self.format.width_mm
        return self.format.width_mm, self.format.height_mm

    def with_format(self, format_id: str) -> "PrintSettings":
        return replace(self, format=get_print_format(format_id))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (format stored by id)."""
        return {
            "format": self.format.id,
            "orientation": self.orientation.value,
            "margin": self.margin,
            "bleed": self.bleed,
            "quality": self.quality.value,
            "color_profile": self.color_profile.value,
            "include_watermark": self.include_watermark,
            "include_border": self.include_border,
            "border_width": self.border_width,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrintSettings":
        """
        Create from dictionary; unknown keys are ignored.

        Raises:
            InvalidSettings: If the format id or an enum value is unknown
        """
        values: Dict[str, Any] = {}
        try:
            if "format" in data:
                values["format"] = get_print_format(data["format"])
            if "orientation" in data:
                values["orientation"] = Orientation(data["orientation"])
            if "quality" in data:
                values["quality"] = PrintQuality(data["quality"])
            if "color_profile" in data:
                values["color_profile"] = ColorProfile(data["color_profile"])
        except ValueError as e:
            if isinstance(e, InvalidSettings):
                raise
            raise InvalidSettings(f"Invalid print setting: {e}") from e

        for key in ("margin", "bleed", "border_width"):
            if key in data:
                values[key] = float(data[key])
        for key in ("include_watermark", "include_border"):
            if key in data:
                values[key] = bool(data[key])
        return cls(**values)
