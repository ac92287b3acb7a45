"""
Convolution Engine.

Discrete 2D convolution of a RasterImage with a square, odd-sized kernel.

Boundary handling replicates the nearest edge pixel, so borders keep their
brightness instead of fading toward black. The alpha channel is copied
through unchanged. Output is always written to a fresh buffer, which keeps
row bands independent when the work is spread over threads.

Example:
    >>> sharpened = convolve(image, KERNELS["sharpen"])
    >>> blurred = convolve(image, Kernel.box(5))
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from PS_Libs.ImageEditingLib.image_models import RasterImage
from PS_Libs.ImageEditingLib.row_bands import run_in_bands


@dataclass(frozen=True)
class Kernel:
    """A square weight matrix plus the divisor applied to each weighted sum.

    Attributes:
        weights: Rows of weights; must be square with odd size >= 3
        divisor: Sum divisor (non-zero)
    """
    weights: Tuple[Tuple[float, ...], ...]
    divisor: float = 1.0

    def __post_init__(self):
        rows = tuple(tuple(float(w) for w in row) for row in self.weights)
        object.__setattr__(self, "weights", rows)

        size = len(rows)
        if size < 3 or size % 2 == 0:
            raise ValueError(f"Kernel size must be odd and >= 3, got {size}")
        if any(len(row) != size for row in rows):
            raise ValueError("Kernel must be square")
        if self.divisor == 0:
            raise ValueError("Kernel divisor cannot be 0")

    @property
    def size(self) -> int:
        return len(self.weights)

    @property
    def radius(self) -> int:
        return self.size // 2

    def as_array(self) -> np.ndarray:
        return np.array(self.weights, dtype=np.float64)

    @classmethod
    def from_flat(cls, values: Sequence[float], divisor: float = 1.0) -> "Kernel":
        """Build a kernel from a flat row-major list of size*size weights."""
        size = int(round(len(values) ** 0.5))
        if size * size != len(values):
            raise ValueError(f"Flat kernel length {len(values)} is not a perfect square")
        rows = tuple(tuple(values[row * size:(row + 1) * size]) for row in range(size))
        return cls(rows, divisor)

    @classmethod
    def box(cls, size: int) -> "Kernel":
        """Averaging kernel of the given odd size."""
        return cls(tuple((1.0,) * size for _ in range(size)), float(size * size))


KERNELS: Dict[str, Kernel] = {
    "sharpen": Kernel.from_flat([-1, -1, -1, -1, 9, -1, -1, -1, -1]),
    "blur": Kernel.from_flat([1, 1, 1, 1, 1, 1, 1, 1, 1], divisor=9),
    "edge-detect": Kernel.from_flat([-1, -1, -1, -1, 8, -1, -1, -1, -1]),
    "emboss": Kernel.from_flat([-2, -1, 0, -1, 1, 1, 0, 1, 2]),
}


def get_kernel(name: str) -> Kernel:
    """Look up a predefined kernel by name."""
    if name not in KERNELS:
        raise KeyError(
            f"Unknown kernel '{name}'. Valid kernels: {', '.join(sorted(KERNELS))}"
        )
    return KERNELS[name]


def convolve(
    image: RasterImage,
    kernel: Kernel,
    divisor: Optional[float] = None,
    workers: Optional[int] = None,
) -> RasterImage:
    """
    Convolve the RGB channels of an image with a kernel.

    Args:
        image: Source raster
        kernel: Kernel to apply
        divisor: Overrides ``kernel.divisor`` when given
        workers: Optional thread count for row-band parallelism

    Returns:
        New RasterImage of the same size

    Raises:
        TypeError: If image or kernel have the wrong type
        ValueError: If divisor is 0
    """
    if not isinstance(image, RasterImage):
        raise TypeError(f"Expected RasterImage, got {type(image)}")
    if not isinstance(kernel, Kernel):
        raise TypeError(f"Expected Kernel, got {type(kernel)}")

    divisor = kernel.divisor if divisor is None else float(divisor)
    if divisor == 0:
        raise ValueError("divisor cannot be 0")

    source = image.to_array()
    radius = kernel.radius
    size = kernel.size
    weights = kernel.as_array()
    width = image.width

    rgb = source[..., :3].astype(np.float64)
    padded = np.pad(rgb, ((radius, radius), (radius, radius), (0, 0)), mode="edge")

    def band(row_start: int, row_end: int) -> np.ndarray:
        acc = np.zeros((row_end - row_start, width, 3), dtype=np.float64)
        for ky in range(size):
            for kx in range(size):
                weight = weights[ky, kx]
                if weight == 0:
                    continue
                acc += weight * padded[row_start + ky:row_end + ky, kx:kx + width]
        return acc / divisor

    result_rgb = run_in_bands(band, image.height, workers)

    output = np.empty_like(source)
    output[..., :3] = np.clip(np.rint(result_rgb), 0, 255).astype(np.uint8)
    output[..., 3] = source[..., 3]
    return RasterImage.from_array(output)
