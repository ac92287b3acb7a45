"""
Strip pipeline.

Runs one photo strip session end to end:

    decode -> filter + adjust (per photo, in parallel) -> composite -> print

Photos are independent until compositing, so the per-photo stage runs on a
thread pool. A bad filter id or an unreadable photo only affects its own
window; the rest of the strip is still produced.

Example:
    >>> pipeline = StripPipeline.default()
    >>> result = pipeline.render(StripRequest(
    ...     template_id="4shot-design1",
    ...     photos=[PhotoSelection(raw, filter_id="noir") for raw in captures],
    ...     print_settings=PrintSettings(),
    ... ))
    >>> result.print_image.size
    (647, 1847)
"""

import concurrent.futures
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from PS_Libs.constants import FILTER_ID_ORIGINAL
from PS_Libs.errors import DecodeError, InvalidSettings, SourceUnavailable, UnknownFilter
from PS_Libs.FilterLib.filter_engine import FilterEngine, create_default_engine
from PS_Libs.FrameLib.frame_compositor import FrameCompositor
from PS_Libs.FrameLib.frame_templates import FrameTemplateCatalog
from PS_Libs.ImageEditingLib.adjustments import AdjustmentParameters
from PS_Libs.ImageEditingLib.image_io import ImageSource, decode_image, save_session_images
from PS_Libs.ImageEditingLib.image_models import RasterImage
from PS_Libs.PrintLib.print_formats import PrintSettings
from PS_Libs.PrintLib.print_rasterizer import PrintRasterizer, validate_print_settings

logger = logging.getLogger(__name__)


@dataclass
class PhotoSelection:
    """One captured photo and the look chosen for it.

    Attributes:
        source: Captured image (RasterImage, encoded bytes or a file path)
        filter_id: Catalog filter to apply, or None for the original
        adjustments: Extra adjustments applied after the filter
        order: Capture order; photos fill windows in ascending order
    """
    source: ImageSource
    filter_id: Optional[str] = None
    adjustments: Optional[AdjustmentParameters] = None
    order: int = 0


@dataclass
class StripRequest:
    template_id: str
    photos: Sequence[PhotoSelection]
    print_settings: Optional[PrintSettings] = None


@dataclass
class StripResult:
    """Output of one pipeline run.

    Attributes:
        template_id: Template actually used (a fallback id when missing)
        composite: Screen-resolution strip
        print_image: Print sheet, when print settings were given
        photos: Processed photo for each window (None where unreadable)
        skipped_filters: (window index, filter id) pairs that were not found
        failed_photos: Window indices whose source could not be decoded
    """
    template_id: str
    composite: RasterImage
    print_image: Optional[RasterImage] = None
    photos: List[Optional[RasterImage]] = field(default_factory=list)
    skipped_filters: List[Tuple[int, str]] = field(default_factory=list)
    failed_photos: List[int] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.skipped_filters and not self.failed_photos


class StripPipeline:
    """
    Filters, composites and prints photo strips.

    Args:
        engine: Filter engine shared by all photos of a run
        templates: Frame templates to resolve request ids against
        compositor: Compositor for the strip
        rasterizer: Print rasterizer
        workers: Threads for the per-photo stage (None = executor default)
    """

    def __init__(
        self,
        engine: FilterEngine,
        templates: FrameTemplateCatalog,
        compositor: Optional[FrameCompositor] = None,
        rasterizer: Optional[PrintRasterizer] = None,
        workers: Optional[int] = None,
    ):
        self.engine = engine
        self.templates = templates
        self.compositor = compositor or FrameCompositor()
        self.rasterizer = rasterizer or PrintRasterizer()
        self.workers = workers

    @classmethod
    def default(cls, assets_dir: Optional[Path] = None,
                workers: Optional[int] = None) -> "StripPipeline":
        return cls(
            create_default_engine(),
            FrameTemplateCatalog.default(),
            compositor=FrameCompositor(assets_dir=assets_dir),
            workers=workers,
        )

    def process_photo(self, selection: PhotoSelection) -> Tuple[RasterImage, Optional[str]]:
        """
        Decode, filter and adjust one photo.

        Returns:
            (processed image, filter id that was skipped or None)

        Raises:
            DecodeError, SourceUnavailable: If the source cannot be read
        """
        image = decode_image(selection.source)
        skipped = None

        filter_id = selection.filter_id
        if filter_id and filter_id != FILTER_ID_ORIGINAL:
            try:
                image = self.engine.apply_filter(image, filter_id)
            except UnknownFilter as e:
                logger.warning(f"{e}; using the unfiltered photo")
                skipped = filter_id

        if selection.adjustments is not None:
            image = self.engine.apply_adjustments(image, selection.adjustments)
        return image, skipped

    def _process_all(self, selections: Sequence[PhotoSelection]) -> Dict[int, object]:
        """Run process_photo for every selection; values are results or errors."""
        outcomes: Dict[int, object] = {}

        if len(selections) <= 1 or self.workers == 1:
            for index, selection in enumerate(selections):
                try:
                    outcomes[index] = self.process_photo(selection)
                except (DecodeError, SourceUnavailable) as e:
                    outcomes[index] = e
            return outcomes

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures: Dict[concurrent.futures.Future, int] = {
                executor.submit(self.process_photo, selection): index
                for index, selection in enumerate(selections)
            }
            for future in concurrent.futures.as_completed(futures):
                index = futures[future]
                try:
                    outcomes[index] = future.result()
                except (DecodeError, SourceUnavailable) as e:
                    outcomes[index] = e
        return outcomes

    def render(self, request: StripRequest) -> StripResult:
        """
        Produce the strip (and print sheet) for a request.

        Raises:
            InvalidSettings: If print settings fail validation; checked
                             before any photo is processed
        """
        if request.print_settings is not None:
            self._check_print_settings(request.print_settings)

        selections = sorted(request.photos, key=lambda s: s.order)
        template = self.templates.get_or_fallback(request.template_id, max(1, len(selections)))

        outcomes = self._process_all(selections)

        photos: List[Optional[RasterImage]] = []
        skipped: List[Tuple[int, str]] = []
        failed: List[int] = []
        for index in range(len(selections)):
            outcome = outcomes[index]
            if isinstance(outcome, Exception):
                logger.warning(f"Photo {index} could not be read: {outcome}")
                photos.append(None)
                failed.append(index)
                continue
            image, skipped_id = outcome
            photos.append(image)
            if skipped_id is not None:
                skipped.append((index, skipped_id))

        composite = self.compositor.composite_frame(template, photos)

        print_image = None
        if request.print_settings is not None:
            print_image = self.rasterizer.generate_print_image(composite, request.print_settings)

        logger.info(
            f"Rendered strip '{template.id}' with {len(photos)} photos "
            f"({len(skipped)} filters skipped, {len(failed)} photos unreadable)"
        )
        return StripResult(
            template_id=template.id,
            composite=composite,
            print_image=print_image,
            photos=photos,
            skipped_filters=skipped,
            failed_photos=failed,
        )

    def export(
        self,
        result: StripResult,
        output_dir: Path,
        session_name: str,
        quality: str = "print-ready",
    ) -> List[Path]:
        """
        Save a rendered strip, its print sheet and the processed shots.

        Files are named ``strip_<session>_strip``, ``..._print`` and
        ``..._shot<N>`` (1-based window number). Unreadable shots are skipped.

        Args:
            result: Output of render()
            output_dir: Existing directory to write into
            session_name: Shared part of every file name
            quality: Quality tier for every file

        Raises:
            OSError: If output_dir is missing or not a directory
        """
        images: Dict[str, RasterImage] = {"strip": result.composite}
        if result.print_image is not None:
            images["print"] = result.print_image
        for index, photo in enumerate(result.photos):
            if photo is not None:
                images[f"shot{index + 1}"] = photo
        return save_session_images(images, Path(output_dir), session_name, quality)

    def _check_print_settings(self, settings: PrintSettings) -> None:
        result = validate_print_settings(settings)
        if not result.is_valid:
            raise InvalidSettings(
                f"Invalid print settings: {'; '.join(result.errors)}", result.errors
            )
