"""
Tests for the strip pipeline.

Tests cover:
- End-to-end render of a four-shot strip with a print sheet
- Unknown filters and unreadable photos only affecting their own window
- Print settings checked before any photo work
- Capture ordering and template fallback
"""

import io

import pytest
from PIL import Image

from PS_Libs.errors import InvalidSettings
from PS_Libs.FilterLib.filter_engine import create_default_engine
from PS_Libs.FrameLib.frame_compositor import FrameCompositor
from PS_Libs.FrameLib.frame_templates import FrameTemplateCatalog
from PS_Libs.ImageEditingLib.adjustments import AdjustmentParameters
from PS_Libs.ImageEditingLib.image_models import RasterImage
from PS_Libs.PipelineLib.strip_pipeline import (
    PhotoSelection,
    StripPipeline,
    StripRequest,
)
from PS_Libs.PrintLib.print_formats import PrintFormat, PrintSettings

COLORS = [
    (220, 30, 30, 255),
    (30, 200, 40, 255),
    (40, 50, 210, 255),
    (240, 220, 20, 255),
]

# window centers of 4shot-design1
CENTERS = [(200, 110), (200, 260), (200, 410), (200, 560)]


def _png_bytes(color) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", (90, 60), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def pipeline(tmp_path):
    return StripPipeline(
        create_default_engine(),
        FrameTemplateCatalog.default(),
        compositor=FrameCompositor(assets_dir=tmp_path),
        workers=4,
    )


@pytest.fixture
def selections():
    return [PhotoSelection(RasterImage.solid(300, 300, color), order=i) for i, color in enumerate(COLORS)]


class TestRender:

    def test_four_shot_strip(self, pipeline, selections):
        result = pipeline.render(StripRequest("4shot-design1", selections))

        assert result.template_id == "4shot-design1"
        assert result.composite.size == (400, 700)
        assert result.print_image is None
        assert result.is_complete
        for center, color in zip(CENTERS, COLORS):
            assert result.composite.pixel(*center) == color

    def test_print_sheet(self, pipeline, selections):
        result = pipeline.render(StripRequest("4shot-design1", selections, PrintSettings()))
        assert result.print_image.size == (647, 1847)

    def test_encoded_sources(self, pipeline):
        photos = [PhotoSelection(_png_bytes(color), order=i) for i, color in enumerate(COLORS)]
        result = pipeline.render(StripRequest("4shot-design1", photos))
        assert result.composite.pixel(*CENTERS[2]) == COLORS[2]

    def test_photos_follow_capture_order(self, pipeline, selections):
        shuffled = [selections[2], selections[0], selections[3], selections[1]]
        result = pipeline.render(StripRequest("4shot-design1", shuffled))
        for center, color in zip(CENTERS, COLORS):
            assert result.composite.pixel(*center) == color

    def test_filter_applied(self, pipeline, selections):
        selections[0].filter_id = "noir"
        result = pipeline.render(StripRequest("4shot-design1", selections))

        r, g, b, _ = result.composite.pixel(*CENTERS[0])
        assert r == g == b
        assert result.composite.pixel(*CENTERS[1]) == COLORS[1]

    def test_original_filter_is_passthrough(self, pipeline, selections):
        selections[1].filter_id = "none"
        result = pipeline.render(StripRequest("4shot-design1", selections))
        assert result.photos[1] == selections[1].source
        assert result.is_complete

    def test_adjustments_applied_after_filter(self, pipeline, selections):
        selections[3].adjustments = AdjustmentParameters(brightness=-50)
        result = pipeline.render(StripRequest("4shot-design1", selections))

        assert result.photos[3] != selections[3].source
        assert sum(result.photos[3].pixel(0, 0)[:3]) < sum(COLORS[3][:3])

    def test_unknown_filter_skipped(self, pipeline, selections, caplog):
        selections[2].filter_id = "sparkle"

        with caplog.at_level("WARNING", logger="PS_Libs.PipelineLib.strip_pipeline"):
            result = pipeline.render(StripRequest("4shot-design1", selections))

        assert result.skipped_filters == [(2, "sparkle")]
        assert not result.is_complete
        assert result.composite.pixel(*CENTERS[2]) == COLORS[2]
        assert "sparkle" in caplog.text

    def test_unreadable_photo_leaves_window_empty(self, pipeline, selections):
        selections[1] = PhotoSelection(b"not an image", order=1)

        result = pipeline.render(StripRequest("4shot-design1", selections))

        assert result.failed_photos == [1]
        assert result.photos[1] is None
        background = pipeline.templates.get("4shot-design1").background_color
        assert result.composite.pixel(*CENTERS[1]) == background
        assert result.composite.pixel(*CENTERS[0]) == COLORS[0]

    def test_missing_file_counts_as_failed(self, pipeline, selections, tmp_path):
        selections[0] = PhotoSelection(tmp_path / "missing.png", order=0)
        result = pipeline.render(StripRequest("4shot-design1", selections))
        assert result.failed_photos == [0]

    def test_invalid_print_settings_checked_first(self, pipeline, selections):
        calls = []
        original = pipeline.process_photo

        def tracking(selection):
            calls.append(selection)
            return original(selection)

        pipeline.process_photo = tracking
        tiny = PrintFormat("tiny", "Tiny", 50, 50, 300)

        with pytest.raises(InvalidSettings):
            pipeline.render(StripRequest("4shot-design1", selections, PrintSettings(format=tiny, margin=30)))
        assert calls == []

    def test_unknown_template_uses_fallback(self, pipeline, selections):
        result = pipeline.render(StripRequest("9shot-design7", selections[:2]))

        assert result.template_id == "2shot-fallback"
        assert result.composite.size == (400, 400)

    def test_sequential_matches_threaded(self, tmp_path, selections):
        def build(workers):
            return StripPipeline(
                create_default_engine(),
                FrameTemplateCatalog.default(),
                compositor=FrameCompositor(assets_dir=tmp_path),
                workers=workers,
            )

        for selection, filter_id in zip(selections, ("noir", "dream", "polaroid", "blur")):
            selection.filter_id = filter_id

        sequential = build(1).render(StripRequest("4shot-design1", selections))
        threaded = build(4).render(StripRequest("4shot-design1", selections))

        assert sequential.composite == threaded.composite

    def test_default_pipeline(self, selections):
        pipeline = StripPipeline.default(workers=2)
        result = pipeline.render(StripRequest("1shot-design1", selections[:1]))
        assert result.template_id == "1shot-design1"


class TestExport:

    def test_writes_strip_print_and_shots(self, pipeline, selections, temp_output_dir):
        selections[1] = PhotoSelection(b"not an image", order=1)
        result = pipeline.render(StripRequest("4shot-design1", selections, PrintSettings()))

        paths = pipeline.export(result, temp_output_dir, "booth7")

        assert [path.name for path in paths] == [
            "strip_booth7_strip.png",
            "strip_booth7_print.png",
            "strip_booth7_shot1.png",
            "strip_booth7_shot3.png",
            "strip_booth7_shot4.png",
        ]
        with Image.open(paths[1]) as sheet:
            assert sheet.size == (647, 1847)

    def test_lossy_quality(self, pipeline, selections, temp_output_dir):
        result = pipeline.render(StripRequest("4shot-design1", selections))
        paths = pipeline.export(result, temp_output_dir, "s", quality="draft")
        assert all(path.suffix == ".jpg" for path in paths)

    def test_missing_directory(self, pipeline, selections, tmp_path):
        result = pipeline.render(StripRequest("4shot-design1", selections))
        with pytest.raises(OSError):
            pipeline.export(result, tmp_path / "gone", "s")
