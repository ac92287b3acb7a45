"""
Decoding and encoding of rasters.

Functions:
    decode_image: Decode bytes, a file path or a Pillow image into a RasterImage
    get_save_kwargs: Pillow save() arguments for a quality tier
    save_raster: Encode a single RasterImage to disk
    save_session_images: Save a named set of session rasters with a shared prefix
"""

import io
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from PIL import Image, UnidentifiedImageError

from PS_Libs.constants import OUTPUT_FILE_PREFIX, QUALITY_JPEG_LEVELS
from PS_Libs.errors import DecodeError, SourceUnavailable
from PS_Libs.ImageEditingLib.image_models import RasterImage

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, Path, Image.Image, RasterImage]


def decode_image(source: ImageSource) -> RasterImage:
    """
    Decode an image source into an RGBA RasterImage.

    Args:
        source: Encoded bytes, a path to an image file, a Pillow image,
                or an existing RasterImage (returned unchanged)

    Returns:
        RasterImage in RGBA

    Raises:
        SourceUnavailable: If a path does not exist or cannot be read
        DecodeError: If the data is not a decodable image
        TypeError: If source has an unsupported type
    """
    if isinstance(source, RasterImage):
        return source

    if isinstance(source, Image.Image):
        return RasterImage.from_pil(source)

    if isinstance(source, (bytes, bytearray)):
        if not source:
            raise DecodeError("Image data is empty")
        try:
            with Image.open(io.BytesIO(bytes(source))) as img:
                img.load()
                return RasterImage.from_pil(img)
        except (UnidentifiedImageError, OSError) as e:
            raise DecodeError(f"Could not decode image data: {e}") from e

    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise SourceUnavailable(f"Image file not found: {path}")
        try:
            with Image.open(path) as img:
                img.load()
                return RasterImage.from_pil(img)
        except UnidentifiedImageError as e:
            raise DecodeError(f"Could not decode image file {path}: {e}") from e
        except OSError as e:
            raise SourceUnavailable(f"Could not read image file {path}: {e}") from e

    raise TypeError(f"Unsupported image source type: {type(source)}")


def get_save_kwargs(quality: str) -> Dict[str, Any]:
    """
    Get Pillow save() kwargs for a quality tier.

    Lossy tiers (draft, normal, high) encode JPEG at increasing quality;
    print-ready encodes lossless PNG.
    """
    quality = str(quality).lower()
    if quality == "print-ready":
        return {"format": "PNG", "optimize": True}
    if quality not in QUALITY_JPEG_LEVELS:
        raise ValueError(
            f"Unknown quality '{quality}'. "
            f"Valid: {', '.join(list(QUALITY_JPEG_LEVELS) + ['print-ready'])}"
        )
    return {"format": "JPEG", "quality": QUALITY_JPEG_LEVELS[quality]}


def save_raster(image: RasterImage, path: Path, quality: str = "print-ready") -> Path:
    """
    Encode a raster to disk.

    JPEG has no alpha channel, so lossy tiers are flattened to RGB.

    Raises:
        OSError: If the parent directory does not exist
    """
    path = Path(path)
    if not path.parent.is_dir():
        raise OSError(f"Output directory does not exist: {path.parent}")

    kwargs = get_save_kwargs(quality)
    pil_image = image.to_pil()
    if kwargs["format"] == "JPEG":
        pil_image = pil_image.convert("RGB")
    pil_image.save(path, **kwargs)
    logger.debug(f"Saved {image.width}x{image.height} raster to {path} ({kwargs['format']})")
    return path


def save_session_images(
    images: Mapping[str, RasterImage],
    output_dir: Path,
    session_name: str,
    quality: str = "print-ready",
) -> List[Path]:
    """
    Save a session's rasters as ``strip_<session>_<name>.<ext>``.

    Args:
        images: Rasters keyed by output name (e.g. "strip", "print", "shot1")
        output_dir: Existing directory to write into
        session_name: Shared part of every file name
        quality: Quality tier; decides the encoder and file extension

    Returns:
        Paths written, in the order of ``images``

    Raises:
        OSError: If output_dir is missing or not a directory
        ValueError: If quality is unknown
    """
    output_dir = Path(output_dir)
    if not output_dir.exists():
        raise OSError(f"Output directory does not exist: {output_dir}")
    if not output_dir.is_dir():
        raise OSError(f"Output path is not a directory: {output_dir}")

    extension = ".png" if get_save_kwargs(quality)["format"] == "PNG" else ".jpg"
    paths = []
    for name, image in images.items():
        path = output_dir / f"{OUTPUT_FILE_PREFIX}{session_name}_{name}{extension}"
        paths.append(save_raster(image, path, quality))

    logger.info(f"Saved {len(paths)} images for session '{session_name}' to {output_dir}")
    return paths
