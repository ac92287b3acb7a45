"""
Tests for print formats, settings validation and the print rasterizer.

Tests cover:
- Unit conversion and print geometry
- Format registry and PrintSettings serialization
- Validation warnings and blocking errors
- Canvas layout: bleed guide, image placement, border, watermark
- Quality tiers, file size estimates and export
"""

import unittest

import pytest
from PIL import Image

from PS_Libs.errors import InvalidSettings
from PS_Libs.ImageEditingLib.image_models import RasterImage
from PS_Libs.PrintLib.print_formats import (
    PRINT_FORMATS,
    Orientation,
    PrintCategory,
    PrintFormat,
    PrintQuality,
    PrintSettings,
    get_print_format,
    popular_formats,
)
from PS_Libs.PrintLib.print_rasterizer import (
    PrintRasterizer,
    calculate_print_dimensions,
    estimate_file_size,
    format_file_size,
    mm_to_px,
    px_to_mm,
    quality_value,
    validate_print_settings,
)

RED = (255, 0, 0, 255)
WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


class TestUnits(unittest.TestCase):

    def test_mm_to_px_rounds(self):
        self.assertEqual(mm_to_px(25.4, 300), 300)
        self.assertEqual(mm_to_px(50.8 + 4, 300), 647)

    def test_round_trip_within_one_pixel(self):
        self.assertAlmostEqual(px_to_mm(mm_to_px(37, 300), 300), 37, delta=25.4 / 300)

    def test_invalid_dpi(self):
        with self.assertRaises(ValueError):
            mm_to_px(10, 0)
        with self.assertRaises(ValueError):
            px_to_mm(10, -1)


class TestFormatsAndSettings(unittest.TestCase):

    def test_registry(self):
        self.assertEqual(len(PRINT_FORMATS), 10)
        strip = get_print_format("strip-2x6")
        self.assertEqual((strip.width_mm, strip.height_mm, strip.dpi), (50.8, 152.4, 300))
        self.assertIs(strip.category, PrintCategory.PHOTO)

    def test_unknown_format(self):
        with self.assertRaises(InvalidSettings):
            get_print_format("poster-xxl")

    def test_popular_formats(self):
        self.assertEqual([f.id for f in popular_formats()], ["strip-2x6", "photo-4x6", "a4"])

    def test_invalid_format_geometry(self):
        with self.assertRaises(ValueError):
            PrintFormat("bad", "Bad", 0, 10, 300)

    def test_defaults(self):
        settings = PrintSettings()
        self.assertEqual(settings.format.id, "strip-2x6")
        self.assertEqual(settings.margin, 5.0)
        self.assertEqual(settings.bleed, 2.0)
        self.assertIs(settings.quality, PrintQuality.HIGH)
        self.assertTrue(settings.include_border)
        self.assertFalse(settings.include_watermark)

    def test_landscape_swaps_size(self):
        settings = PrintSettings(orientation=Orientation.LANDSCAPE)
        self.assertEqual(settings.effective_size_mm(), (152.4, 50.8))

    def test_dict_round_trip(self):
        settings = PrintSettings(format=get_print_format("a4"), margin=8, quality=PrintQuality.DRAFT,
                                 orientation=Orientation.LANDSCAPE, include_watermark=True)
        self.assertEqual(PrintSettings.from_dict(settings.to_dict()), settings)

    def test_from_dict_unknown_values(self):
        with self.assertRaises(InvalidSettings):
            PrintSettings.from_dict({"format": "poster-xxl"})
        with self.assertRaises(InvalidSettings):
            PrintSettings.from_dict({"quality": "ultra"})

    def test_with_format(self):
        self.assertEqual(PrintSettings().with_format("photo-4x6").format.id, "photo-4x6")

    def test_quality_fidelity_strictly_increasing(self):
        values = [quality_value(q) for q in PrintQuality]
        self.assertEqual(values, sorted(values))
        self.assertEqual(len(set(values)), len(values))
        self.assertEqual(quality_value(PrintQuality.PRINT_READY), 1.0)
        self.assertTrue(PrintQuality.PRINT_READY.is_lossless)


class TestValidation(unittest.TestCase):

    def test_default_settings_are_clean(self):
        result = validate_print_settings(PrintSettings())
        self.assertTrue(result.is_valid)
        self.assertEqual(result.warnings, [])
        self.assertEqual(result.errors, [])

    def test_margins_larger_than_format(self):
        tiny = PrintFormat("tiny", "Tiny", 50, 50, 300)
        result = validate_print_settings(PrintSettings(format=tiny, margin=30))
        self.assertFalse(result.is_valid)
        self.assertTrue(result.errors)

    def test_warnings_do_not_block(self):
        low_dpi = PrintFormat("low", "Low", 100, 100, 100, category=PrintCategory.PHOTO)
        result = validate_print_settings(PrintSettings(format=low_dpi, margin=1, bleed=0))
        self.assertTrue(result.is_valid)
        self.assertEqual(len(result.warnings), 3)

    def test_bleed_warning_only_for_photo_formats(self):
        result = validate_print_settings(PrintSettings(format=get_print_format("a4"), bleed=0))
        self.assertEqual(result.warnings, [])

    def test_negative_values(self):
        self.assertFalse(validate_print_settings(PrintSettings(bleed=-1)).is_valid)


class TestPrintDimensions(unittest.TestCase):

    def test_strip_geometry(self):
        dims = calculate_print_dimensions(PrintSettings())
        self.assertEqual(dims.canvas_size, (647, 1847))
        self.assertEqual((dims.printable_width, dims.printable_height), (482, 1682))
        self.assertEqual(dims.bleed_width, 24)
        self.assertEqual(dims.image_origin, (83, 83))

    def test_landscape_geometry(self):
        dims = calculate_print_dimensions(PrintSettings(orientation=Orientation.LANDSCAPE))
        self.assertEqual(dims.canvas_size, (1847, 647))


class TestGeneratePrintImage:
    """Tests for PrintRasterizer.generate_print_image."""

    @pytest.fixture
    def rasterizer(self):
        return PrintRasterizer()

    @pytest.fixture
    def red_strip(self):
        return RasterImage.solid(40, 120, RED)

    def test_canvas_size(self, rasterizer, red_strip):
        sheet = rasterizer.generate_print_image(red_strip, PrintSettings())
        assert sheet.size == (647, 1847)

    def test_invalid_settings_raise_before_drawing(self, rasterizer, red_strip):
        tiny = PrintFormat("tiny", "Tiny", 50, 50, 300)
        with pytest.raises(InvalidSettings) as excinfo:
            rasterizer.generate_print_image(red_strip, PrintSettings(format=tiny, margin=30))
        assert excinfo.value.errors

    def test_image_fills_printable_area(self, rasterizer, red_strip):
        settings = PrintSettings(include_border=False)
        dims = calculate_print_dimensions(settings)
        sheet = rasterizer.generate_print_image(red_strip, settings)

        left, top, right, bottom = dims.printable_box
        assert sheet.pixel((left + right) // 2, (top + bottom) // 2) == RED
        assert sheet.pixel(left + 2, top + 2) == RED
        assert sheet.pixel(left - 2, (top + bottom) // 2) == WHITE

    def test_bleed_guide_is_red_dashes(self, rasterizer, red_strip):
        settings = PrintSettings(include_border=False)
        dims = calculate_print_dimensions(settings)
        sheet = rasterizer.generate_print_image(red_strip, settings)

        assert sheet.pixel(dims.bleed_width + 1, dims.bleed_height) == RED
        assert sheet.pixel(dims.bleed_width + 7, dims.bleed_height) == WHITE

    def test_no_bleed_guide_without_bleed(self, rasterizer):
        settings = PrintSettings(bleed=0, include_border=False)
        sheet = rasterizer.generate_print_image(RasterImage.solid(10, 10, WHITE), settings)
        array = sheet.to_array()
        assert (array[..., 1] == 255).all()

    def test_border_stroke(self, rasterizer, red_strip):
        settings = PrintSettings(include_border=True, border_width=1.0)
        dims = calculate_print_dimensions(settings)
        sheet = rasterizer.generate_print_image(red_strip, settings)

        left, top, right, bottom = dims.printable_box
        middle = (top + bottom) // 2
        assert sheet.pixel(left, middle) == BLACK
        assert sheet.pixel(left + 5, middle) == BLACK
        assert sheet.pixel((left + right) // 2, middle) == RED

    def test_crop_marks_outside_trim(self, rasterizer):
        settings = PrintSettings(bleed=10, include_border=False)
        dims = calculate_print_dimensions(settings)
        sheet = rasterizer.generate_print_image(RasterImage.solid(10, 10, WHITE), settings)

        offset = mm_to_px(2, 300)
        # horizontal mark left of the top-left trim corner
        assert sheet.pixel(dims.bleed_width - offset - 3, dims.bleed_height) == BLACK
        # vertical mark below the bottom-right trim corner
        right = dims.canvas_width - dims.bleed_width
        bottom = dims.canvas_height - dims.bleed_height
        assert sheet.pixel(right, bottom + offset + 3) == BLACK

    def test_watermark_changes_output(self, rasterizer):
        source = RasterImage.solid(10, 10, WHITE)
        plain = rasterizer.generate_print_image(source, PrintSettings(include_border=False))
        marked = rasterizer.generate_print_image(
            source, PrintSettings(include_border=False, include_watermark=True)
        )
        assert plain.size == marked.size
        assert plain != marked

    def test_landscape_sheet(self, rasterizer, red_strip):
        sheet = rasterizer.generate_print_image(
            red_strip, PrintSettings(orientation=Orientation.LANDSCAPE)
        )
        assert sheet.size == (1847, 647)

    def test_accepts_pil_source(self, rasterizer):
        sheet = rasterizer.generate_print_image(Image.new("RGB", (20, 60), "red"), PrintSettings())
        assert sheet.size == (647, 1847)

    def test_export_uses_quality_tier(self, rasterizer, red_strip, tmp_path):
        sheet = rasterizer.generate_print_image(red_strip, PrintSettings())

        png = rasterizer.export_print_image(
            sheet, tmp_path / "sheet.png", PrintSettings(quality=PrintQuality.PRINT_READY)
        )
        jpg = rasterizer.export_print_image(
            sheet, tmp_path / "sheet.jpg", PrintSettings(quality=PrintQuality.DRAFT)
        )

        with Image.open(png) as image:
            assert image.format == "PNG"
        with Image.open(jpg) as image:
            assert image.format == "JPEG"


class TestFileSize:

    def test_estimate_scales_with_quality(self):
        draft = estimate_file_size(PrintSettings(quality=PrintQuality.DRAFT))
        ready = estimate_file_size(PrintSettings(quality=PrintQuality.PRINT_READY))
        assert draft < ready
        assert ready == round(647 * 1847 * 3.5)

    def test_format_file_size(self):
        assert format_file_size(500 * 1024) == "500 KB"
        assert format_file_size(int(3.5 * 1024 * 1024)) == "3.5 MB"
