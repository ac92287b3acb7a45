"""
Filter Catalog.

Named filters are plain data: each ``FilterDefinition`` combines an optional
direct pixel transform, optional adjustment values and an optional artistic
effect. The catalog is built once and only read afterwards.

Classes:
    FilterCategory: The five catalog groups
    PixelTransformKind / PixelTransform: Direct per-pixel transforms
    FilterDefinition: One named filter
    FilterPreset: A sequence of filters followed by adjustments
    FilterCatalog: Registry of filters and presets keyed by id

Functions:
    apply_pixel_transform: Run a PixelTransform on an image
    build_default_catalog: The filters shipped with the booth
"""

import json
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from PS_Libs.constants import FILTER_ID_ORIGINAL
from PS_Libs.errors import UnknownFilter
from PS_Libs.ImageEditingLib.adjustments import AdjustmentParameters
from PS_Libs.ImageEditingLib.artistic_effects import (
    ArtisticEffect,
    EffectKind,
    grayscale,
    invert,
    sepia,
)
from PS_Libs.ImageEditingLib.image_models import RasterImage

logger = logging.getLogger(__name__)


class FilterCategory(Enum):
    BASIC = "basic"
    ARTISTIC = "artistic"
    VINTAGE = "vintage"
    CREATIVE = "creative"
    BLACK_WHITE = "black-white"


class PixelTransformKind(Enum):
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    INVERT = "invert"


@dataclass(frozen=True)
class PixelTransform:
    """Direct per-pixel transform run before any adjustments.

    Attributes:
        kind: Transform to run
        amount: Strength 0.0-1.0 (used by SEPIA)
    """
    kind: PixelTransformKind
    amount: float = 1.0

    def __post_init__(self):
        if not (0.0 <= self.amount <= 1.0):
            raise ValueError(f"amount must be 0.0-1.0, got {self.amount}")


def apply_pixel_transform(image: RasterImage, transform: PixelTransform) -> RasterImage:
    if transform.kind is PixelTransformKind.GRAYSCALE:
        return grayscale(image)
    if transform.kind is PixelTransformKind.SEPIA:
        return sepia(image, transform.amount)
    if transform.kind is PixelTransformKind.INVERT:
        return invert(image)
    raise ValueError(f"Unsupported pixel transform: {transform.kind}")


@dataclass(frozen=True)
class FilterDefinition:
    """A named filter.

    Attributes:
        id: Unique filter id (e.g. "vintage-film")
        name: Display name
        category: Catalog group
        description: Short human-readable description
        preview_css: Cheap CSS filter string for interactive preview only
        pixel_transform: Optional direct pixel transform
        adjustments: Optional adjustment values
        effect: Optional artistic effect
    """
    id: str
    name: str
    category: FilterCategory
    description: str = ""
    preview_css: Optional[str] = None
    pixel_transform: Optional[PixelTransform] = None
    adjustments: Optional[AdjustmentParameters] = None
    effect: Optional[ArtisticEffect] = None

    def __post_init__(self):
        if self.adjustments is not None:
            object.__setattr__(self, "adjustments", replace(self.adjustments))

    def __hash__(self) -> int:
        return hash(self.id)

    def fingerprint(self) -> str:
        """Canonical serialization of everything that affects the output pixels."""
        transform = self.pixel_transform
        effect = self.effect
        return json.dumps({
            "id": self.id,
            "transform": [transform.kind.value, transform.amount] if transform is not None else None,
            "adjustments": self.adjustments.canonical_key() if self.adjustments is not None else None,
            "effect": [
                effect.kind.value, effect.kernel_name, sorted(effect.params.items())
            ] if effect is not None else None,
        }, sort_keys=True, default=str)

    @property
    def is_identity(self) -> bool:
        return (
            self.pixel_transform is None
            and (self.adjustments is None or self.adjustments.is_identity())
            and self.effect is None
        )


@dataclass(frozen=True)
class FilterPreset:
    """Filters applied in sequence, then a full set of adjustments."""
    id: str
    name: str
    description: str
    filters: Tuple[str, ...] = ()
    adjustments: AdjustmentParameters = field(default_factory=AdjustmentParameters)

    def __post_init__(self):
        object.__setattr__(self, "adjustments", replace(self.adjustments))
        object.__setattr__(self, "filters", tuple(self.filters))

    def __hash__(self) -> int:
        return hash(self.id)


class FilterCatalog:
    """
    Registry of filter definitions and presets keyed by id.

    Example:
        >>> catalog = build_default_catalog()
        >>> catalog.get("noir").category
        <FilterCategory.BLACK_WHITE: 'black-white'>
        >>> catalog.by_category(FilterCategory.VINTAGE)
    """

    def __init__(self):
        """Initialize an empty catalog."""
        self._filters: Dict[str, FilterDefinition] = {}
        self._presets: Dict[str, FilterPreset] = {}

    def register(self, definition: FilterDefinition) -> None:
        """
        Register a filter.

        Raises:
            ValueError: If the id is empty
            RuntimeError: If the id is already registered
        """
        filter_id = str(definition.id).strip()
        if not filter_id:
            raise ValueError("filter id cannot be empty")
        if filter_id in self._filters:
            raise RuntimeError(
                f"Filter '{filter_id}' is already registered. "
                f"Use unregister() first to replace it."
            )
        # each catalog owns its copy of the definition's adjustments
        self._filters[filter_id] = replace(definition)
        logger.debug(f"Registered filter: {filter_id}")

    def unregister(self, filter_id: str) -> bool:
        filter_id = str(filter_id).strip()
        if filter_id in self._filters:
            del self._filters[filter_id]
            logger.debug(f"Unregistered filter: {filter_id}")
            return True
        return False

    def register_preset(self, preset: FilterPreset) -> None:
        """
        Register a preset. Every filter it references must already exist.

        Raises:
            RuntimeError: If the preset id is already registered
            UnknownFilter: If the preset references a missing filter
        """
        if preset.id in self._presets:
            raise RuntimeError(f"Preset '{preset.id}' is already registered.")
        for filter_id in preset.filters:
            self.get(filter_id)
        self._presets[preset.id] = replace(preset)
        logger.debug(f"Registered preset: {preset.id}")

    def get(self, filter_id: str) -> FilterDefinition:
        """
        Get a filter by id.

        Raises:
            UnknownFilter: If the id is not registered
        """
        filter_id = str(filter_id).strip()
        if filter_id not in self._filters:
            raise UnknownFilter(filter_id, self.list_filter_ids())
        return self._filters[filter_id]

    def get_preset(self, preset_id: str) -> FilterPreset:
        if preset_id not in self._presets:
            raise UnknownFilter(preset_id, sorted(self._presets))
        return self._presets[preset_id]

    def has_filter(self, filter_id: str) -> bool:
        return str(filter_id).strip() in self._filters

    def list_filter_ids(self) -> List[str]:
        """Sorted list of registered filter ids."""
        return sorted(self._filters)

    def list_filters(self) -> List[FilterDefinition]:
        """Filters in registration order."""
        return list(self._filters.values())

    def list_presets(self) -> List[FilterPreset]:
        return list(self._presets.values())

    def by_category(self, category: Union[FilterCategory, str]) -> List[FilterDefinition]:
        """Filters in one category, in registration order."""
        category = FilterCategory(category)
        return [f for f in self._filters.values() if f.category is category]

    def categories(self) -> Dict[FilterCategory, List[FilterDefinition]]:
        """All filters grouped by category (every category present)."""
        return {category: self.by_category(category) for category in FilterCategory}

    def __len__(self) -> int:
        return len(self._filters)

    def __contains__(self, filter_id: object) -> bool:
        return isinstance(filter_id, str) and self.has_filter(filter_id)


def _adj(**values: float) -> AdjustmentParameters:
    return AdjustmentParameters(**values)


_GRAY = PixelTransform(PixelTransformKind.GRAYSCALE)

DEFAULT_FILTERS: Tuple[FilterDefinition, ...] = (
    # Basic
    FilterDefinition(FILTER_ID_ORIGINAL, "Original", FilterCategory.BASIC,
                     "No filter applied", preview_css="none"),
    FilterDefinition("brightness", "Brightness", FilterCategory.BASIC,
                     "Adjust image brightness",
                     preview_css="brightness(120%)",
                     adjustments=_adj(brightness=20)),
    FilterDefinition("contrast", "Contrast", FilterCategory.BASIC,
                     "Enhance image contrast",
                     preview_css="contrast(130%)",
                     adjustments=_adj(contrast=30)),
    FilterDefinition("vibrant", "Vibrant", FilterCategory.BASIC,
                     "Boost colors and saturation",
                     preview_css="saturate(150%) contrast(110%)",
                     adjustments=_adj(saturation=40, contrast=10)),
    FilterDefinition("sharpen", "Sharpen", FilterCategory.BASIC,
                     "Crisper edges and detail",
                     preview_css="contrast(110%)",
                     effect=ArtisticEffect.kernel("sharpen")),
    FilterDefinition("blur", "Soft Blur", FilterCategory.BASIC,
                     "Gentle box blur",
                     preview_css="blur(1px)",
                     effect=ArtisticEffect.kernel("blur")),

    # Artistic
    FilterDefinition("oil-painting", "Oil Painting", FilterCategory.ARTISTIC,
                     "Transform photo into oil painting style",
                     preview_css="contrast(130%) saturate(120%) blur(0.5px)",
                     effect=ArtisticEffect(EffectKind.OIL_PAINTING)),
    FilterDefinition("watercolor", "Watercolor", FilterCategory.ARTISTIC,
                     "Soft watercolor painting effect",
                     preview_css="contrast(90%) saturate(110%) blur(0.3px) opacity(0.9)",
                     effect=ArtisticEffect(EffectKind.WATERCOLOR)),
    FilterDefinition("pencil-sketch", "Pencil Sketch", FilterCategory.ARTISTIC,
                     "Convert to pencil drawing style",
                     preview_css="grayscale(100%) contrast(200%) brightness(90%)",
                     effect=ArtisticEffect(EffectKind.PENCIL_SKETCH)),
    FilterDefinition("pop-art", "Pop Art", FilterCategory.ARTISTIC,
                     "Bold pop art colors and contrast",
                     preview_css="contrast(200%) saturate(200%) hue-rotate(15deg)",
                     adjustments=_adj(contrast=60, saturation=100, hue=15)),
    FilterDefinition("edge-detect", "Edge Detect", FilterCategory.ARTISTIC,
                     "Outline the edges of the scene",
                     preview_css="grayscale(100%) contrast(300%)",
                     effect=ArtisticEffect.kernel("edge-detect")),
    FilterDefinition("emboss", "Emboss", FilterCategory.ARTISTIC,
                     "Raised relief look",
                     preview_css="grayscale(60%) contrast(150%)",
                     effect=ArtisticEffect.kernel("emboss")),

    # Vintage
    FilterDefinition("vintage-film", "Vintage Film", FilterCategory.VINTAGE,
                     "Classic film photography look",
                     preview_css="sepia(30%) contrast(120%) brightness(110%) saturate(80%)",
                     pixel_transform=PixelTransform(PixelTransformKind.SEPIA, 0.3),
                     adjustments=_adj(contrast=20, brightness=10, saturation=-20)),
    FilterDefinition("polaroid", "Polaroid", FilterCategory.VINTAGE,
                     "Instant camera aesthetic",
                     preview_css="sepia(20%) contrast(110%) brightness(115%) saturate(90%)",
                     pixel_transform=PixelTransform(PixelTransformKind.SEPIA, 0.2),
                     adjustments=_adj(contrast=10, brightness=8, saturation=-10)),
    FilterDefinition("kodachrome", "Kodachrome", FilterCategory.VINTAGE,
                     "Rich, warm film colors",
                     preview_css="contrast(120%) saturate(130%) hue-rotate(-10deg) brightness(105%)",
                     adjustments=_adj(contrast=20, saturation=30, hue=-10, exposure=0.1)),
    FilterDefinition("cross-process", "Cross Process", FilterCategory.VINTAGE,
                     "Experimental film processing effect",
                     preview_css="contrast(140%) saturate(150%) hue-rotate(30deg)",
                     adjustments=_adj(contrast=40, saturation=50, hue=30)),

    # Creative
    FilterDefinition("neon-glow", "Neon Glow", FilterCategory.CREATIVE,
                     "Electric neon lighting effect",
                     preview_css="contrast(150%) saturate(200%) brightness(120%) hue-rotate(270deg)",
                     adjustments=_adj(contrast=50, saturation=100, brightness=8, hue=-90)),
    FilterDefinition("cyberpunk", "Cyberpunk", FilterCategory.CREATIVE,
                     "Futuristic cyberpunk aesthetic",
                     preview_css="contrast(160%) saturate(140%) hue-rotate(240deg) brightness(90%)",
                     adjustments=_adj(contrast=60, saturation=40, hue=-120, exposure=-0.15)),
    FilterDefinition("dream", "Dream", FilterCategory.CREATIVE,
                     "Soft, dreamy atmosphere",
                     preview_css="contrast(80%) saturate(120%) brightness(115%) blur(0.2px)",
                     adjustments=_adj(contrast=-20, saturation=20, brightness=8, shadows=20)),
    FilterDefinition("infrared", "Infrared", FilterCategory.CREATIVE,
                     "False color infrared effect",
                     preview_css="hue-rotate(180deg) saturate(200%) contrast(120%)",
                     adjustments=_adj(hue=180, saturation=100, contrast=20)),

    # Black & White
    FilterDefinition("noir", "Film Noir", FilterCategory.BLACK_WHITE,
                     "Classic black and white with high contrast",
                     preview_css="grayscale(100%) contrast(130%) brightness(90%)",
                     pixel_transform=_GRAY,
                     adjustments=_adj(contrast=30, exposure=-0.15)),
    FilterDefinition("dramatic-bw", "Dramatic B&W", FilterCategory.BLACK_WHITE,
                     "High contrast dramatic black and white",
                     preview_css="grayscale(100%) contrast(180%) brightness(95%)",
                     pixel_transform=_GRAY,
                     adjustments=_adj(contrast=80, shadows=-20)),
    FilterDefinition("soft-bw", "Soft B&W", FilterCategory.BLACK_WHITE,
                     "Gentle black and white with soft contrast",
                     preview_css="grayscale(100%) contrast(90%) brightness(110%)",
                     pixel_transform=_GRAY,
                     adjustments=_adj(contrast=-10, brightness=5, highlights=-10)),
)

DEFAULT_PRESETS: Tuple[FilterPreset, ...] = (
    FilterPreset(
        "instagram-classic", "Instagram Classic", "Popular social media look",
        filters=("vintage-film",),
        adjustments=_adj(brightness=10, contrast=15, saturation=20,
                         highlights=-10, shadows=10),
    ),
    FilterPreset(
        "portrait-enhance", "Portrait Enhance", "Optimized for portrait photography",
        filters=("vibrant",),
        adjustments=_adj(brightness=5, contrast=20, saturation=15, exposure=0.2,
                         highlights=-15, shadows=20),
    ),
    FilterPreset(
        "landscape-pop", "Landscape Pop", "Make landscapes more vibrant",
        filters=("vibrant",),
        adjustments=_adj(contrast=25, saturation=30, hue=5,
                         highlights=-20, shadows=15),
    ),
)


def build_default_catalog() -> FilterCatalog:
    """Create a catalog holding the shipped filters and presets."""
    catalog = FilterCatalog()
    for definition in DEFAULT_FILTERS:
        catalog.register(definition)
    for preset in DEFAULT_PRESETS:
        catalog.register_preset(preset)
    logger.info(f"Built filter catalog with {len(catalog)} filters")
    return catalog
