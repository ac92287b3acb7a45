"""
Unit tests for the RasterImage model and image I/O helpers.
"""

import io

import numpy as np
import pytest
from PIL import Image

from PS_Libs.errors import DecodeError, SourceUnavailable
from PS_Libs.ImageEditingLib.image_io import (
    decode_image,
    get_save_kwargs,
    save_raster,
    save_session_images,
)
from PS_Libs.ImageEditingLib.image_models import RasterImage


class TestRasterImage:
    """Tests for RasterImage construction and views."""

    def test_rejects_wrong_buffer_length(self):
        with pytest.raises(ValueError):
            RasterImage(2, 2, bytes(15))

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            RasterImage(0, 1, b"")

    def test_solid_fills_every_pixel(self):
        image = RasterImage.solid(3, 2, (10, 20, 30, 40))

        assert image.size == (3, 2)
        assert image.pixel(0, 0) == (10, 20, 30, 40)
        assert image.pixel(2, 1) == (10, 20, 30, 40)

    def test_solid_rgb_gets_opaque_alpha(self):
        image = RasterImage.solid(1, 1, (1, 2, 3))
        assert image.pixel(0, 0) == (1, 2, 3, 255)

    def test_pixel_out_of_bounds(self):
        image = RasterImage.solid(2, 2, (0, 0, 0, 255))
        with pytest.raises(IndexError):
            image.pixel(2, 0)

    def test_to_array_is_a_copy(self):
        image = RasterImage.solid(2, 2, (5, 5, 5, 255))
        array = image.to_array()
        array[0, 0, 0] = 99

        assert image.pixel(0, 0) == (5, 5, 5, 255)

    def test_from_array_rounds_and_clips(self):
        array = np.array([[[300.0, -4.0, 12.6, 255.0]]])
        image = RasterImage.from_array(array)
        assert image.pixel(0, 0) == (255, 0, 13, 255)

    def test_pil_round_trip(self, gradient_image):
        assert RasterImage.from_pil(gradient_image.to_pil()) == gradient_image

    def test_content_key_tracks_pixels(self):
        a = RasterImage.solid(4, 4, (1, 2, 3, 255))
        b = RasterImage.solid(4, 4, (1, 2, 3, 255))
        c = RasterImage.solid(4, 4, (1, 2, 4, 255))

        assert a.content_key == b.content_key
        assert a.content_key != c.content_key
        assert hash(a) == hash(b)

    def test_content_key_includes_dimensions(self):
        wide = RasterImage.solid(4, 1, (0, 0, 0, 255))
        tall = RasterImage.solid(1, 4, (0, 0, 0, 255))
        assert wide.content_key != tall.content_key


class TestDecodeImage:
    """Tests for decode_image."""

    def test_decodes_png_bytes(self):
        buffer = io.BytesIO()
        Image.new("RGB", (5, 4), (9, 8, 7)).save(buffer, format="PNG")

        image = decode_image(buffer.getvalue())

        assert image.size == (5, 4)
        assert image.pixel(4, 3) == (9, 8, 7, 255)

    def test_garbage_bytes_raise_decode_error(self):
        with pytest.raises(DecodeError):
            decode_image(b"definitely not an image")

    def test_empty_bytes_raise_decode_error(self):
        with pytest.raises(DecodeError):
            decode_image(b"")

    def test_missing_path_raises_source_unavailable(self, tmp_path):
        with pytest.raises(SourceUnavailable):
            decode_image(tmp_path / "missing.png")

    def test_source_unavailable_is_an_os_error(self, tmp_path):
        with pytest.raises(OSError):
            decode_image(str(tmp_path / "missing.png"))

    def test_raster_passes_through(self, gradient_image):
        assert decode_image(gradient_image) is gradient_image

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            decode_image(12345)


class TestSaving:
    """Tests for encoding helpers."""

    def test_print_ready_is_lossless_png(self):
        assert get_save_kwargs("print-ready")["format"] == "PNG"

    def test_lossy_tiers_increase_quality(self):
        levels = [get_save_kwargs(tier)["quality"] for tier in ("draft", "normal", "high")]
        assert levels == sorted(levels)
        assert len(set(levels)) == 3

    def test_unknown_quality(self):
        with pytest.raises(ValueError):
            get_save_kwargs("ultra")

    def test_save_raster_png_round_trip(self, tmp_path, gradient_image):
        path = save_raster(gradient_image, tmp_path / "out.png")
        assert decode_image(path) == gradient_image

    def test_save_raster_jpeg(self, tmp_path, gradient_image):
        path = save_raster(gradient_image, tmp_path / "out.jpg", quality="draft")
        with Image.open(path) as saved:
            assert saved.format == "JPEG"

    def test_save_raster_missing_directory(self, tmp_path, gradient_image):
        with pytest.raises(OSError):
            save_raster(gradient_image, tmp_path / "nope" / "out.png")

    def test_save_session_images_names_files(self, temp_output_dir):
        image = RasterImage.solid(2, 2, (1, 1, 1, 255))

        paths = save_session_images({"strip": image, "shot1": image}, temp_output_dir, "party")

        assert paths == [temp_output_dir / "strip_party_strip.png",
                         temp_output_dir / "strip_party_shot1.png"]
        assert all(path.exists() for path in paths)

    def test_save_session_images_lossy_extension(self, temp_output_dir, gradient_image):
        paths = save_session_images({"print": gradient_image}, temp_output_dir, "s1", quality="normal")
        assert paths[0].suffix == ".jpg"
        with Image.open(paths[0]) as saved:
            assert saved.format == "JPEG"

    def test_save_session_images_missing_dir(self, tmp_path):
        with pytest.raises(OSError):
            save_session_images({}, tmp_path / "missing", "s1")
