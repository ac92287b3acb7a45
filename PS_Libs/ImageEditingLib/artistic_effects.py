"""
Artistic effects built on the convolution engine.

Provides:
- Oil painting: intensity-mode neighborhood filter
- Pencil sketch: grayscale, edge detection, inversion
- Watercolor: box blur followed by posterization
- Kernel: any predefined convolution kernel

Effects are described by ``ArtisticEffect`` values tagged with an
``EffectKind`` and dispatched through a table that covers every kind.

Example:
    >>> effect = ArtisticEffect(EffectKind.OIL_PAINTING)
    >>> painted = apply_effect(image, effect)
    >>>
    >>> embossed = apply_effect(image, ArtisticEffect.kernel("emboss"))
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

import numpy as np

from PS_Libs.constants import (
    LUMA_WEIGHTS,
    OIL_PAINTING_LEVELS,
    OIL_PAINTING_RADIUS,
    SEPIA_MATRIX,
    WATERCOLOR_LEVELS,
    WATERCOLOR_RADIUS,
)
from PS_Libs.ImageEditingLib.convolution import KERNELS, Kernel, convolve, get_kernel
from PS_Libs.ImageEditingLib.image_models import RasterImage
from PS_Libs.ImageEditingLib.row_bands import run_in_bands

# Rows processed per vectorized step of the oil painting scan
_OIL_CHUNK_ROWS = 16


# ============================================================================
# Pixel primitives
# ============================================================================

def _map_rgb(image: RasterImage, fn: Callable[[np.ndarray], np.ndarray]) -> RasterImage:
    array = image.to_array()
    rgb = fn(array[..., :3].astype(np.float64))
    array[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    return RasterImage.from_array(array)


def grayscale(image: RasterImage) -> RasterImage:
    """Replace R, G and B with the luma value (0.299 / 0.587 / 0.114)."""
    wr, wg, wb = LUMA_WEIGHTS

    def to_gray(rgb: np.ndarray) -> np.ndarray:
        gray = rgb[..., 0] * wr + rgb[..., 1] * wg + rgb[..., 2] * wb
        return np.repeat(gray[..., np.newaxis], 3, axis=-1)

    return _map_rgb(image, to_gray)


def invert(image: RasterImage) -> RasterImage:
    """Replace each color channel v with 255 - v."""
    return _map_rgb(image, lambda rgb: 255.0 - rgb)


def posterize(image: RasterImage, levels: int) -> RasterImage:
    """Snap each color channel down to one of ``levels`` evenly spaced steps."""
    if levels < 2 or levels > 256:
        raise ValueError(f"levels must be 2-256, got {levels}")
    step = 256.0 / levels
    return _map_rgb(image, lambda rgb: np.floor(rgb / step) * step)


def sepia(image: RasterImage, amount: float = 1.0) -> RasterImage:
    """Blend toward the classic sepia tone matrix by ``amount`` (0.0-1.0)."""
    amount = max(0.0, min(1.0, float(amount)))
    if amount == 0:
        return image
    matrix = np.array(SEPIA_MATRIX, dtype=np.float64)

    def tone(rgb: np.ndarray) -> np.ndarray:
        toned = rgb @ matrix.T
        return rgb * (1.0 - amount) + toned * amount

    return _map_rgb(image, tone)


# ============================================================================
# Oil Painting
# ============================================================================

def oil_painting(
    image: RasterImage,
    radius: int = OIL_PAINTING_RADIUS,
    levels: int = OIL_PAINTING_LEVELS,
    workers: Optional[int] = None,
) -> RasterImage:
    """
    Intensity-mode neighborhood filter.

    For each pixel, the (2 * radius + 1)^2 neighborhood is bucketed into
    ``levels`` brightness bins. The pixel takes the average color of the
    most populated bin (lowest bin wins ties). Neighbors outside the image
    clamp to the nearest edge pixel.

    Args:
        image: Source raster
        radius: Neighborhood radius in pixels (>= 1)
        levels: Number of intensity bins (>= 2)
        workers: Optional thread count for row-band parallelism

    Returns:
        New RasterImage with alpha unchanged
    """
    if radius < 1:
        raise ValueError(f"radius must be >= 1, got {radius}")
    if levels < 2:
        raise ValueError(f"levels must be >= 2, got {levels}")

    source = image.to_array()
    width = image.width
    rgb = source[..., :3].astype(np.float64)
    padded = np.pad(rgb, ((radius, radius), (radius, radius), (0, 0)), mode="edge")
    bins = np.floor(padded.sum(axis=-1) / 3.0 * levels / 255.0).astype(np.int64)
    bins = np.clip(bins, 0, levels - 1)
    level_ids = np.arange(levels)
    span = 2 * radius + 1

    def scan(row_start: int, row_end: int) -> np.ndarray:
        rows = row_end - row_start
        counts = np.zeros((rows, width, levels), dtype=np.int32)
        sums = np.zeros((rows, width, levels, 3), dtype=np.float64)
        for dy in range(span):
            for dx in range(span):
                window_bins = bins[row_start + dy:row_end + dy, dx:dx + width]
                window_rgb = padded[row_start + dy:row_end + dy, dx:dx + width]
                one_hot = window_bins[..., np.newaxis] == level_ids
                counts += one_hot
                sums += one_hot[..., np.newaxis] * window_rgb[:, :, np.newaxis, :]
        best = counts.argmax(axis=-1)
        best_count = np.take_along_axis(counts, best[..., np.newaxis], axis=-1)
        best_sum = np.take_along_axis(sums, best[..., np.newaxis, np.newaxis], axis=2)[:, :, 0, :]
        return best_sum / best_count

    def band(row_start: int, row_end: int) -> np.ndarray:
        chunks = [
            scan(start, min(start + _OIL_CHUNK_ROWS, row_end))
            for start in range(row_start, row_end, _OIL_CHUNK_ROWS)
        ]
        return np.concatenate(chunks, axis=0)

    result_rgb = run_in_bands(band, image.height, workers)

    output = source.copy()
    output[..., :3] = np.clip(np.rint(result_rgb), 0, 255).astype(np.uint8)
    return RasterImage.from_array(output)


# ============================================================================
# Pencil Sketch / Watercolor
# ============================================================================

def pencil_sketch(image: RasterImage, workers: Optional[int] = None) -> RasterImage:
    """Grayscale, edge-detect, then invert for dark lines on white."""
    gray = grayscale(image)
    edges = convolve(gray, KERNELS["edge-detect"], workers=workers)
    return invert(edges)


def watercolor(
    image: RasterImage,
    radius: int = WATERCOLOR_RADIUS,
    levels: int = WATERCOLOR_LEVELS,
    workers: Optional[int] = None,
) -> RasterImage:
    """Soft box blur of size 2 * radius + 1, then posterize to ``levels``."""
    if radius < 1:
        raise ValueError(f"radius must be >= 1, got {radius}")
    blurred = convolve(image, Kernel.box(2 * radius + 1), workers=workers)
    return posterize(blurred, levels)


# ============================================================================
# Effect dispatch
# ============================================================================

class EffectKind(Enum):
    OIL_PAINTING = "oil-painting"
    PENCIL_SKETCH = "pencil-sketch"
    WATERCOLOR = "watercolor"
    KERNEL = "kernel"


@dataclass(frozen=True)
class ArtisticEffect:
    """A named effect plus its typed parameters.

    Attributes:
        kind: Which effect implementation to run
        kernel_name: Predefined kernel name (KERNEL kind only)
        params: Keyword parameters passed to the effect function
                (e.g. radius, levels)
    """
    kind: EffectKind
    kernel_name: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.kind is EffectKind.KERNEL:
            if self.kernel_name is None:
                raise ValueError("KERNEL effects require a kernel_name")
            get_kernel(self.kernel_name)
        elif self.kernel_name is not None:
            raise ValueError(f"kernel_name is only valid for KERNEL effects, not {self.kind}")

    def __hash__(self) -> int:
        return hash((self.kind, self.kernel_name, tuple(sorted(self.params.items()))))

    @classmethod
    def kernel(cls, name: str) -> "ArtisticEffect":
        return cls(EffectKind.KERNEL, kernel_name=name)

    def describe(self) -> str:
        if self.kind is EffectKind.KERNEL:
            return f"kernel:{self.kernel_name}"
        return self.kind.value


def _run_oil(image: RasterImage, effect: ArtisticEffect, workers: Optional[int]) -> RasterImage:
    return oil_painting(image, workers=workers, **effect.params)


def _run_sketch(image: RasterImage, effect: ArtisticEffect, workers: Optional[int]) -> RasterImage:
    return pencil_sketch(image, workers=workers, **effect.params)


def _run_watercolor(image: RasterImage, effect: ArtisticEffect, workers: Optional[int]) -> RasterImage:
    return watercolor(image, workers=workers, **effect.params)


def _run_kernel(image: RasterImage, effect: ArtisticEffect, workers: Optional[int]) -> RasterImage:
    return convolve(image, get_kernel(effect.kernel_name), workers=workers, **effect.params)


_EFFECT_RUNNERS: Dict[EffectKind, Callable[[RasterImage, ArtisticEffect, Optional[int]], RasterImage]] = {
    EffectKind.OIL_PAINTING: _run_oil,
    EffectKind.PENCIL_SKETCH: _run_sketch,
    EffectKind.WATERCOLOR: _run_watercolor,
    EffectKind.KERNEL: _run_kernel,
}

_missing = set(EffectKind) - set(_EFFECT_RUNNERS)
if _missing:
    raise RuntimeError(f"No runner for effect kinds: {sorted(k.value for k in _missing)}")


def apply_effect(
    image: RasterImage,
    effect: ArtisticEffect,
    workers: Optional[int] = None,
) -> RasterImage:
    """
    Run an artistic effect on an image.

    Args:
        image: Source raster
        effect: Effect description
        workers: Optional thread count passed to the effect

    Returns:
        New RasterImage
    """
    if not isinstance(image, RasterImage):
        raise TypeError(f"Expected RasterImage, got {type(image)}")
    return _EFFECT_RUNNERS[effect.kind](image, effect, workers)
