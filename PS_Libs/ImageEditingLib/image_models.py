"""
Image data models for Photo Strip Studio.

This module defines core data structures used throughout the image pipeline.

Classes:
    RasterImage: Immutable RGBA pixel buffer passed between pipeline stages

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

import hashlib
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Tuple

import numpy as np
from PIL import Image

from PS_Libs.constants import CHANNELS

RgbaColor = Tuple[int, int, int, int]


@dataclass(frozen=True, eq=False)
class RasterImage:
    """
    A rectangular RGBA pixel buffer.

    Samples are 8-bit, row-major with a top-left origin. Instances are
    immutable; every transform produces a new RasterImage.

    Attributes:
        width: Image width in pixels (> 0)
        height: Image height in pixels (> 0)
        data: Flat RGBA bytes, length width * height * 4
    """
    width: int
    height: int
    data: bytes

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"RasterImage dimensions must be positive, got {self.width}x{self.height}"
            )
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))
        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            raise ValueError(
                f"Buffer length {len(self.data)} does not match "
                f"{self.width}x{self.height}x{CHANNELS} = {expected}"
            )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, RasterImage):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.data == other.data
        )

    def __hash__(self) -> int:
        return hash(self.content_key)

    def __repr__(self) -> str:
        return f"RasterImage({self.width}x{self.height}, key={self.content_key[:10]})"

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @cached_property
    def content_key(self) -> str:
        """Stable digest of dimensions and pixel content."""
        digest = hashlib.sha1()
        digest.update(f"{self.width}x{self.height}:".encode("ascii"))
        digest.update(self.data)
        return digest.hexdigest()

    def pixel(self, x: int, y: int) -> RgbaColor:
        """Return the RGBA sample at (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height}")
        offset = (y * self.width + x) * CHANNELS
        r, g, b, a = self.data[offset:offset + CHANNELS]
        return r, g, b, a

    def to_array(self) -> np.ndarray:
        """Return a fresh writable (height, width, 4) uint8 array."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, CHANNELS
        ).copy()

    def to_pil(self) -> Image.Image:
        """Return the raster as a Pillow RGBA image."""
        return Image.frombytes("RGBA", (self.width, self.height), self.data)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterImage":
        """
        Build a raster from a (height, width, 4) array.

        Values are rounded and clipped to 0-255.
        """
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise ValueError(f"Expected (height, width, 4) array, got shape {array.shape}")
        if array.dtype != np.uint8:
            array = np.clip(np.rint(array), 0, 255).astype(np.uint8)
        height, width = array.shape[:2]
        return cls(width, height, np.ascontiguousarray(array).tobytes())

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RasterImage":
        """Build a raster from any Pillow image (converted to RGBA)."""
        if not hasattr(image, "convert"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return cls(rgba.width, rgba.height, rgba.tobytes())

    @classmethod
    def solid(cls, width: int, height: int, color: RgbaColor) -> "RasterImage":
        """Create a raster filled with a single color."""
        if len(color) == 3:
            color = (color[0], color[1], color[2], 255)
        return cls(width, height, bytes(color) * (width * height))
