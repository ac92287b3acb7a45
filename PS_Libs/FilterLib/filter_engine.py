"""
Filter Engine.

Resolves catalog filters against pixel data and memoizes the results.

Each filter runs a fixed pipeline:

    direct pixel transform -> adjustments -> artistic effect

Engines are constructed explicitly and own their cache, so tests and worker
threads can hold independent instances.

Example:
    >>> engine = create_default_engine()
    >>> styled = engine.apply_filter(photo, "vintage-film")
    >>> tuned = engine.apply_adjustments(styled, AdjustmentParameters(shadows=15))
"""

import logging
from typing import Iterable, Optional

from PS_Libs.FilterLib.filter_catalog import (
    FilterCatalog,
    FilterDefinition,
    apply_pixel_transform,
    build_default_catalog,
)
from PS_Libs.FilterLib.result_cache import (
    FilterResultCache,
    adjustment_cache_key,
    filter_cache_key,
)
from PS_Libs.ImageEditingLib.adjustments import AdjustmentParameters, apply_adjustments
from PS_Libs.ImageEditingLib.artistic_effects import apply_effect
from PS_Libs.ImageEditingLib.image_models import RasterImage

logger = logging.getLogger(__name__)


class FilterEngine:
    """
    Applies named filters and adjustment sets to rasters.

    Args:
        catalog: Filter definitions to resolve ids against
        cache: Result cache (a new default-sized one when omitted)
        workers: Thread count handed to convolution-based effects
    """

    def __init__(
        self,
        catalog: FilterCatalog,
        cache: Optional[FilterResultCache] = None,
        workers: Optional[int] = None,
    ):
        self.catalog = catalog
        self.cache = cache if cache is not None else FilterResultCache()
        self.workers = workers

    def render_filter(self, image: RasterImage, definition: FilterDefinition) -> RasterImage:
        """Run a filter definition without touching the cache."""
        result = image
        if definition.pixel_transform is not None:
            result = apply_pixel_transform(result, definition.pixel_transform)
        if definition.adjustments is not None:
            result = apply_adjustments(result, definition.adjustments)
        if definition.effect is not None:
            result = apply_effect(result, definition.effect, workers=self.workers)
        return result

    def apply_filter(self, image: RasterImage, filter_id: str) -> RasterImage:
        """
        Apply one catalog filter.

        Raises:
            UnknownFilter: If filter_id is not in the catalog
            TypeError: If image is not a RasterImage
        """
        if not isinstance(image, RasterImage):
            raise TypeError(f"Expected RasterImage, got {type(image)}")

        definition = self.catalog.get(filter_id)
        key = filter_cache_key(image, definition)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Filter cache hit: {definition.id}")
            return cached

        logger.debug(f"Filter cache miss: {definition.id} on {image.width}x{image.height}")
        result = self.render_filter(image, definition)
        self.cache.put(key, result)
        return result

    def apply_filters(self, image: RasterImage, filter_ids: Iterable[str]) -> RasterImage:
        """Apply several filters in sequence, each on the previous result."""
        result = image
        for filter_id in filter_ids:
            result = self.apply_filter(result, filter_id)
        return result

    def apply_adjustments(self, image: RasterImage, params: AdjustmentParameters) -> RasterImage:
        """Apply an adjustment set, cached by its canonical serialization."""
        if not isinstance(image, RasterImage):
            raise TypeError(f"Expected RasterImage, got {type(image)}")
        if params.is_identity():
            return image

        key = adjustment_cache_key(image, params)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        result = apply_adjustments(image, params)
        self.cache.put(key, result)
        return result

    def apply_preset(self, image: RasterImage, preset_id: str) -> RasterImage:
        """Apply a preset's filters, then its adjustments."""
        preset = self.catalog.get_preset(preset_id)
        result = self.apply_filters(image, preset.filters)
        return self.apply_adjustments(result, preset.adjustments)

    def preview_css(self, filter_id: str) -> str:
        """
        CSS filter string for quick interactive preview.

        Preview strings approximate the look only; exports always go through
        the pixel pipeline.
        """
        return self.catalog.get(filter_id).preview_css or "none"

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_size(self) -> int:
        return self.cache.size()


def create_default_engine(
    cache_size: Optional[int] = None,
    workers: Optional[int] = None,
) -> FilterEngine:
    """Build an engine over the shipped catalog with its own cache."""
    cache = FilterResultCache() if cache_size is None else FilterResultCache(cache_size)
    return FilterEngine(build_default_catalog(), cache=cache, workers=workers)
