"""
Frame Compositor.

Combines N photos with one frame template into a photo strip.

Draw order:
1. Background frame art, stretched to the canvas (or a solid fallback fill)
2. Each photo, center-cropped to its window's aspect ratio, scaled to fill
   the window and clipped to rounded corners when the window asks for them
3. Optional overlay art, stretched to the canvas

Output depends only on the template and the photo buffers.

Example:
    >>> compositor = FrameCompositor(assets_dir=Path("assets"))
    >>> strip = compositor.composite_frame(templates.get("4shot-design1"), photos)
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from PIL import Image, ImageChops, ImageDraw

from PS_Libs.errors import DecodeError, SourceUnavailable
from PS_Libs.FrameLib.frame_templates import FrameTemplate, Window
from PS_Libs.ImageEditingLib.image_io import decode_image
from PS_Libs.ImageEditingLib.image_models import RasterImage

logger = logging.getLogger(__name__)

CropBox = Tuple[float, float, float, float]
FrameLoader = Callable[[str], RasterImage]


def compute_cover_crop(src_width: int, src_height: int,
                       win_width: int, win_height: int) -> CropBox:
    """
    Source rectangle that matches the window's aspect ratio, centered.

    A source wider than the window loses equal strips on the left and
    right; a taller source loses equal strips top and bottom.

    Returns:
        (left, top, width, height) in source pixels
    """
    if min(src_width, src_height, win_width, win_height) <= 0:
        raise ValueError("Source and window sizes must be positive")

    src_aspect = src_width / src_height
    win_aspect = win_width / win_height

    if src_aspect > win_aspect:
        crop_height = float(src_height)
        crop_width = src_height * win_aspect
        return (src_width - crop_width) / 2.0, 0.0, crop_width, crop_height

    crop_width = float(src_width)
    crop_height = src_width / win_aspect
    return 0.0, (src_height - crop_height) / 2.0, crop_width, crop_height


def rounded_mask(width: int, height: int, radius: Optional[float]) -> Optional[Image.Image]:
    """
    L-mode clip mask for a rounded rectangle, or None for square corners.

    A radius of at least half the shorter side yields a full ellipse.
    """
    if not radius or radius <= 0:
        return None

    mask = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(mask)
    if radius * 2 >= min(width, height):
        draw.ellipse((0, 0, width - 1, height - 1), fill=255)
    else:
        draw.rounded_rectangle((0, 0, width - 1, height - 1), radius=radius, fill=255)
    return mask


def fit_photo_to_window(photo: RasterImage, window: Window) -> Image.Image:
    """Crop and scale a photo to exactly cover a window, with corner clipping."""
    left, top, width, height = compute_cover_crop(
        photo.width, photo.height, window.width, window.height
    )
    fitted = photo.to_pil().resize(
        (window.width, window.height),
        Image.Resampling.LANCZOS,
        box=(left, top, left + width, top + height),
    )

    mask = rounded_mask(window.width, window.height, window.corner_radius)
    if mask is not None:
        alpha = ImageChops.multiply(fitted.getchannel("A"), mask)
        fitted.putalpha(alpha)
    return fitted


class FrameCompositor:
    """
    Builds strip composites from templates.

    Args:
        assets_dir: Base directory for relative frame art paths
        frame_loader: Custom loader from frame reference to RasterImage;
                      defaults to decoding files under assets_dir
    """

    def __init__(
        self,
        assets_dir: Optional[Path] = None,
        frame_loader: Optional[FrameLoader] = None,
    ):
        self.assets_dir = Path(assets_dir) if assets_dir is not None else None
        self._frame_loader = frame_loader or self._load_from_disk

    def _load_from_disk(self, reference: str) -> RasterImage:
        path = Path(reference.lstrip("/"))
        if self.assets_dir is not None and not path.is_absolute():
            path = self.assets_dir / path
        return decode_image(path)

    def _load_art(self, reference: Optional[str], template_id: str) -> Optional[Image.Image]:
        if reference is None:
            return None
        try:
            return self._frame_loader(reference).to_pil()
        except (SourceUnavailable, DecodeError) as e:
            logger.warning(f"Frame art {reference!r} for '{template_id}' unavailable: {e}")
            return None

    def window_crops(
        self,
        template: FrameTemplate,
        photos: Sequence[Optional[RasterImage]],
    ) -> List[Optional[CropBox]]:
        """Source crop rectangle used for each window (None where no photo)."""
        crops: List[Optional[CropBox]] = []
        for index, window in enumerate(template.windows):
            photo = photos[index] if index < len(photos) else None
            if photo is None:
                crops.append(None)
            else:
                crops.append(compute_cover_crop(photo.width, photo.height,
                                                window.width, window.height))
        return crops

    def composite_frame(
        self,
        template: FrameTemplate,
        photos: Sequence[Optional[RasterImage]],
    ) -> RasterImage:
        """
        Composite photos into the template's windows.

        Args:
            template: Layout to fill
            photos: Photos in window order; extra photos are ignored, missing
                    or None entries leave their window showing the frame

        Returns:
            RasterImage sized exactly frame_width x frame_height

        Raises:
            TypeError: If a photo entry is neither a RasterImage nor None
        """
        canvas_size = template.size
        canvas = Image.new("RGBA", canvas_size, tuple(template.background_color))

        background = self._load_art(template.frame_image, template.id)
        if background is not None:
            background = background.convert("RGBA").resize(canvas_size, Image.Resampling.LANCZOS)
            canvas = Image.alpha_composite(canvas, background)
        elif template.frame_image is None:
            logger.debug(f"Template '{template.id}' has no frame art; using fallback fill")

        if len(photos) > template.shot_count:
            logger.debug(
                f"Ignoring {len(photos) - template.shot_count} extra photos for '{template.id}'"
            )

        for index, window in enumerate(template.windows):
            photo = photos[index] if index < len(photos) else None
            if photo is None:
                logger.warning(f"No photo for window {index} of '{template.id}'; leaving it empty")
                continue
            if not isinstance(photo, RasterImage):
                raise TypeError(f"Photo {index} is not a RasterImage, got {type(photo)}")

            layer = Image.new("RGBA", canvas_size, (0, 0, 0, 0))
            layer.paste(fit_photo_to_window(photo, window), (window.left, window.top))
            canvas = Image.alpha_composite(canvas, layer)

        overlay = self._load_art(template.overlay_image, template.id)
        if overlay is not None:
            overlay = overlay.convert("RGBA").resize(canvas_size, Image.Resampling.LANCZOS)
            canvas = Image.alpha_composite(canvas, overlay)

        logger.info(
            f"Composited {min(len(photos), template.shot_count)} photos into '{template.id}'"
        )
        return RasterImage.from_pil(canvas)
