"""
Exception types raised by the Photo Strip Studio pipeline.

Each error also derives from the built-in exception callers would
naturally catch for that situation (ValueError, OSError, KeyError).
"""

from typing import List, Optional, Sequence


class PhotoStripError(Exception):
    """Base class for pipeline errors."""


class DecodeError(PhotoStripError, ValueError):
    """Raised when image data cannot be decoded into a raster."""


class SourceUnavailable(PhotoStripError, OSError):
    """Raised when a referenced image source cannot be read."""


class InvalidSettings(PhotoStripError, ValueError):
    """Raised when print settings fail validation."""

    def __init__(self, message: str, errors: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.errors: List[str] = list(errors) if errors else [message]


class UnknownFilter(PhotoStripError, KeyError):
    """Raised when a filter or preset id is not in the catalog."""

    def __init__(self, filter_id: str, available: Sequence[str] = ()):
        self.filter_id = filter_id
        self.available = list(available)
        message = f"Unknown filter '{filter_id}'"
        if self.available:
            message += f". Available filters: {', '.join(self.available)}"
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0])
