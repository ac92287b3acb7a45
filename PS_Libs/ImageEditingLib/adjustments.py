"""
Adjustment Engine.

Slider-driven tone and color adjustments applied to a RasterImage.

Adjustments run in a fixed order, because contrast, saturation and the
tone curves are nonlinear and do not commute:

    exposure -> brightness -> contrast -> highlights -> shadows -> saturation -> hue

Each step quantizes back to 8 bits before the next one runs, so applying
the steps one at a time through the individual ``adjust_*`` functions gives
the same pixels as ``apply_adjustments``. Fields equal to 0 are skipped.

Example:
    >>> params = AdjustmentParameters(brightness=10, contrast=20)
    >>> result = apply_adjustments(image, params)
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Callable, Dict, List, Tuple

import numpy as np

from PS_Libs.constants import (
    BRIGHTNESS_RANGE,
    CONTRAST_RANGE,
    EXPOSURE_RANGE,
    HIGHLIGHTS_RANGE,
    HUE_RANGE,
    SATURATION_RANGE,
    SHADOWS_RANGE,
    TONE_REGION_MAX_SHIFT,
)
from PS_Libs.ImageEditingLib.color_model import (
    hsl_to_rgb_array,
    linear_to_srgb,
    luma,
    rgb_to_hsl_array,
    srgb_to_linear,
)
from PS_Libs.ImageEditingLib.image_models import RasterImage

PARAMETER_RANGES: Dict[str, Tuple[float, float]] = {
    "brightness": BRIGHTNESS_RANGE,
    "contrast": CONTRAST_RANGE,
    "saturation": SATURATION_RANGE,
    "hue": HUE_RANGE,
    "exposure": EXPOSURE_RANGE,
    "highlights": HIGHLIGHTS_RANGE,
    "shadows": SHADOWS_RANGE,
}

ADJUSTMENT_ORDER: Tuple[str, ...] = (
    "exposure",
    "brightness",
    "contrast",
    "highlights",
    "shadows",
    "saturation",
    "hue",
)


@dataclass
class AdjustmentParameters:
    """Seven signed adjustment values; 0 means "leave unchanged".

    Attributes:
        brightness: -100 to 100, additive shift
        contrast: -100 to 100, contrast correction around mid-gray
        saturation: -100 to 100, relative HSL saturation change
        hue: -180 to 180, hue rotation in degrees
        exposure: -2 to 2, stops of gain in linear light
        highlights: -100 to 100, shift weighted toward bright tones
        shadows: -100 to 100, shift weighted toward dark tones
    """
    brightness: float = 0.0
    contrast: float = 0.0
    saturation: float = 0.0
    hue: float = 0.0
    exposure: float = 0.0
    highlights: float = 0.0
    shadows: float = 0.0

    def clamped(self) -> "AdjustmentParameters":
        """Return a copy with every field clamped to its valid range."""
        values = {}
        for name, (low, high) in PARAMETER_RANGES.items():
            values[name] = float(max(low, min(high, float(getattr(self, name)))))
        return AdjustmentParameters(**values)

    def is_identity(self) -> bool:
        return not self.active_fields()

    def active_fields(self) -> List[str]:
        """Names of the non-zero fields, in application order."""
        clamped = self.clamped()
        return [name for name in ADJUSTMENT_ORDER if getattr(clamped, name) != 0]

    def canonical_key(self) -> str:
        """Serialize the clamped values deterministically for cache keys."""
        return json.dumps(asdict(self.clamped()), sort_keys=True)

    def merged(self, other: "AdjustmentParameters") -> "AdjustmentParameters":
        """Sum two parameter sets field by field (result is clamped)."""
        summed = {
            f.name: getattr(self, f.name) + getattr(other, f.name)
            for f in fields(self)
        }
        return AdjustmentParameters(**summed).clamped()

    def with_value(self, name: str, value: float) -> "AdjustmentParameters":
        if name not in PARAMETER_RANGES:
            raise KeyError(f"Unknown adjustment: {name}")
        return replace(self, **{name: value})

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdjustmentParameters":
        """Create from a full or partial dictionary."""
        filtered = {k: float(v) for k, v in data.items()
                   if k in cls.__dataclass_fields__}
        return cls(**filtered)


# ============================================================================
# Per-step operations on float RGB arrays (H, W, 3), values 0-255
# ============================================================================

def _smoothstep(edge0: float, edge1: float, x: np.ndarray) -> np.ndarray:
    t = np.clip((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def _brightness(rgb: np.ndarray, value: float) -> np.ndarray:
    return rgb + (value / 100.0) * 255.0


def _contrast(rgb: np.ndarray, value: float) -> np.ndarray:
    factor = (259.0 * (value + 255.0)) / (255.0 * (259.0 - value))
    return factor * (rgb - 128.0) + 128.0


def _saturation(rgb: np.ndarray, value: float) -> np.ndarray:
    hue, sat, light = rgb_to_hsl_array(rgb)
    sat = np.clip(sat * (1.0 + value / 100.0), 0.0, 100.0)
    return hsl_to_rgb_array(hue, sat, light)


def _hue(rgb: np.ndarray, value: float) -> np.ndarray:
    hue, sat, light = rgb_to_hsl_array(rgb)
    hue = np.mod(hue + value + 360.0, 360.0)
    return hsl_to_rgb_array(hue, sat, light)


def _exposure(rgb: np.ndarray, value: float) -> np.ndarray:
    linear = srgb_to_linear(np.clip(rgb, 0.0, 255.0) / 255.0)
    return linear_to_srgb(linear * (2.0 ** value)) * 255.0


def _highlights(rgb: np.ndarray, value: float) -> np.ndarray:
    weight = _smoothstep(0.5, 1.0, luma(rgb) / 255.0)
    shift = (value / 100.0) * TONE_REGION_MAX_SHIFT * weight
    return rgb + shift[..., np.newaxis]


def _shadows(rgb: np.ndarray, value: float) -> np.ndarray:
    weight = 1.0 - _smoothstep(0.0, 0.5, luma(rgb) / 255.0)
    shift = (value / 100.0) * TONE_REGION_MAX_SHIFT * weight
    return rgb + shift[..., np.newaxis]


_OPERATIONS: Dict[str, Callable[[np.ndarray, float], np.ndarray]] = {
    "exposure": _exposure,
    "brightness": _brightness,
    "contrast": _contrast,
    "highlights": _highlights,
    "shadows": _shadows,
    "saturation": _saturation,
    "hue": _hue,
}


def _quantize(rgb: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(rgb), 0.0, 255.0)


def _apply_steps(image: RasterImage, steps: List[Tuple[str, float]]) -> RasterImage:
    if not steps:
        return image
    array = image.to_array()
    rgb = array[..., :3].astype(np.float64)
    for name, value in steps:
        rgb = _quantize(_OPERATIONS[name](rgb, value))
    array[..., :3] = rgb.astype(np.uint8)
    return RasterImage.from_array(array)


def _single(name: str, image: RasterImage, value: float) -> RasterImage:
    low, high = PARAMETER_RANGES[name]
    value = float(max(low, min(high, float(value))))
    if value == 0:
        return image
    return _apply_steps(image, [(name, value)])


# ============================================================================
# Public API
# ============================================================================

def adjust_brightness(image: RasterImage, value: float) -> RasterImage:
    """Shift R, G and B by (value / 100) * 255, clamped. Alpha untouched."""
    return _single("brightness", image, value)


def adjust_contrast(image: RasterImage, value: float) -> RasterImage:
    """Apply factor * (c - 128) + 128 with the contrast correction factor."""
    return _single("contrast", image, value)


def adjust_saturation(image: RasterImage, value: float) -> RasterImage:
    """Scale HSL saturation by (1 + value / 100)."""
    return _single("saturation", image, value)


def adjust_hue(image: RasterImage, value: float) -> RasterImage:
    """Rotate hue by value degrees."""
    return _single("hue", image, value)


def adjust_exposure(image: RasterImage, value: float) -> RasterImage:
    """Multiply linear light by 2 ** value."""
    return _single("exposure", image, value)


def adjust_highlights(image: RasterImage, value: float) -> RasterImage:
    """Brighten or darken mostly the upper half of the tonal range."""
    return _single("highlights", image, value)


def adjust_shadows(image: RasterImage, value: float) -> RasterImage:
    """Brighten or darken mostly the lower half of the tonal range."""
    return _single("shadows", image, value)


def apply_adjustments(image: RasterImage, params: AdjustmentParameters) -> RasterImage:
    """
    Apply all non-zero adjustments in the fixed order.

    Out-of-range values are clamped rather than rejected.

    Args:
        image: Source raster (left untouched)
        params: Adjustment values

    Returns:
        A new RasterImage, or ``image`` itself when every field is 0
    """
    if not isinstance(image, RasterImage):
        raise TypeError(f"Expected RasterImage, got {type(image)}")

    clamped = params.clamped()
    steps = [(name, getattr(clamped, name)) for name in clamped.active_fields()]
    return _apply_steps(image, steps)
