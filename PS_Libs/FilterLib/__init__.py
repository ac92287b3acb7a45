"""
FilterLib - Named filters and the caching filter engine
"""

from PS_Libs.FilterLib.filter_catalog import (
    DEFAULT_FILTERS,
    DEFAULT_PRESETS,
    FilterCatalog,
    FilterCategory,
    FilterDefinition,
    FilterPreset,
    PixelTransform,
    PixelTransformKind,
    build_default_catalog,
)
from PS_Libs.FilterLib.result_cache import FilterResultCache
from PS_Libs.FilterLib.filter_engine import FilterEngine, create_default_engine

__all__ = [
    "DEFAULT_FILTERS",
    "DEFAULT_PRESETS",
    "FilterCatalog",
    "FilterCategory",
    "FilterDefinition",
    "FilterPreset",
    "PixelTransform",
    "PixelTransformKind",
    "build_default_catalog",
    "FilterResultCache",
    "FilterEngine",
    "create_default_engine",
]
