"""
Color model utilities.

Scalar and vectorized RGB <-> HSL conversion plus the small per-pixel
helpers shared by the adjustment engine and the artistic effects.

HSL is expressed as hue in [0, 360), saturation and lightness in [0, 100].
"""

from typing import Tuple

import numpy as np

from PS_Libs.constants import LUMA_WEIGHTS


def clamp_byte(value: float) -> int:
    return int(max(0, min(255, round(value))))


def rgb_to_hsl(r: float, g: float, b: float) -> Tuple[float, float, float]:
    """
    Convert an 8-bit RGB triple to HSL.

    Args:
        r, g, b: Channel values 0-255

    Returns:
        (hue 0-360, saturation 0-100, lightness 0-100). Achromatic colors
        have hue 0 and saturation 0.
    """
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2.0

    if high == low:
        return 0.0, 0.0, lightness * 100.0

    delta = high - low
    if lightness > 0.5:
        saturation = delta / (2.0 - high - low)
    else:
        saturation = delta / (high + low)

    if high == r:
        hue = (g - b) / delta + (6.0 if g < b else 0.0)
    elif high == g:
        hue = (b - r) / delta + 2.0
    else:
        hue = (r - g) / delta + 4.0

    hue = (hue * 60.0) % 360.0
    return hue, saturation * 100.0, lightness * 100.0


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[int, int, int]:
    """
    Convert HSL back to an 8-bit RGB triple.

    Args:
        h: Hue in degrees (any value, wrapped into [0, 360))
        s: Saturation 0-100
        l: Lightness 0-100

    Returns:
        (r, g, b) rounded to integers 0-255
    """
    h = (h % 360.0) / 360.0
    s = s / 100.0
    l = l / 100.0

    if s == 0:
        r = g = b = l
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_channel(p, q, h + 1 / 3)
        g = _hue_to_channel(p, q, h)
        b = _hue_to_channel(p, q, h - 1 / 3)

    return clamp_byte(r * 255), clamp_byte(g * 255), clamp_byte(b * 255)


def rgb_to_hsl_array(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Vectorized RGB -> HSL for a float array of shape (..., 3) in 0-255.

    Returns three arrays (hue 0-360, saturation 0-100, lightness 0-100).
    """
    unit = rgb.astype(np.float64) / 255.0
    r, g, b = unit[..., 0], unit[..., 1], unit[..., 2]
    high = unit.max(axis=-1)
    low = unit.min(axis=-1)
    delta = high - low
    lightness = (high + low) / 2.0

    chromatic = delta > 0
    safe_delta = np.where(chromatic, delta, 1.0)

    denom = np.where(lightness > 0.5, 2.0 - high - low, high + low)
    saturation = np.where(chromatic, delta / np.where(denom == 0, 1.0, denom), 0.0)

    hue_r = (g - b) / safe_delta + np.where(g < b, 6.0, 0.0)
    hue_g = (b - r) / safe_delta + 2.0
    hue_b = (r - g) / safe_delta + 4.0
    # Same precedence as the scalar version: red wins ties, then green
    hue = np.where(high == r, hue_r, np.where(high == g, hue_g, hue_b))
    hue = np.where(chromatic, (hue * 60.0) % 360.0, 0.0)

    return hue, saturation * 100.0, lightness * 100.0


def _hue_to_channel_array(p: np.ndarray, q: np.ndarray, t: np.ndarray) -> np.ndarray:
    t = np.where(t < 0, t + 1, t)
    t = np.where(t > 1, t - 1, t)
    return np.select(
        [t < 1 / 6, t < 1 / 2, t < 2 / 3],
        [p + (q - p) * 6 * t, q, p + (q - p) * (2 / 3 - t) * 6],
        default=p,
    )


def hsl_to_rgb_array(hue: np.ndarray, saturation: np.ndarray, lightness: np.ndarray) -> np.ndarray:
    """
    Vectorized HSL -> RGB. Returns a float array (..., 3) in 0-255, unrounded.
    """
    h = np.mod(hue, 360.0) / 360.0
    s = saturation / 100.0
    l = lightness / 100.0

    q = np.where(l < 0.5, l * (1 + s), l + s - l * s)
    p = 2 * l - q
    r = _hue_to_channel_array(p, q, h + 1 / 3)
    g = _hue_to_channel_array(p, q, h)
    b = _hue_to_channel_array(p, q, h - 1 / 3)

    achromatic = s == 0
    r = np.where(achromatic, l, r)
    g = np.where(achromatic, l, g)
    b = np.where(achromatic, l, b)
    return np.stack([r, g, b], axis=-1) * 255.0


def luma(rgb: np.ndarray) -> np.ndarray:
    """Weighted grayscale of a (..., 3) array, same scale as the input."""
    wr, wg, wb = LUMA_WEIGHTS
    return rgb[..., 0] * wr + rgb[..., 1] * wg + rgb[..., 2] * wb


def srgb_to_linear(values: np.ndarray) -> np.ndarray:
    """Decode sRGB values in 0-1 to linear light."""
    return np.where(
        values <= 0.04045,
        values / 12.92,
        ((values + 0.055) / 1.055) ** 2.4,
    )


def linear_to_srgb(values: np.ndarray) -> np.ndarray:
    """Encode linear light in 0-1 (clipped) back to sRGB."""
    values = np.clip(values, 0.0, 1.0)
    return np.where(
        values <= 0.0031308,
        values * 12.92,
        1.055 * np.power(values, 1 / 2.4) - 0.055,
    )
