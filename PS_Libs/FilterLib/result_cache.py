"""
Filter result cache.

A bounded, thread-safe LRU map from (source content identity, operation,
parameters) to the RasterImage produced. The cache is an optimization: two
threads missing on the same key may both compute the result, and the last
write wins.
"""

import logging
import threading
from collections import OrderedDict
from typing import Optional, Tuple

from PS_Libs.constants import DEFAULT_CACHE_MAX_ENTRIES
from PS_Libs.FilterLib.filter_catalog import FilterDefinition
from PS_Libs.ImageEditingLib.adjustments import AdjustmentParameters
from PS_Libs.ImageEditingLib.image_models import RasterImage

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str, str]


def filter_cache_key(image: RasterImage, definition: FilterDefinition) -> CacheKey:
    """Key on every parameter that shapes the output, not just the filter id."""
    return image.content_key, "filter", definition.fingerprint()


def adjustment_cache_key(image: RasterImage, params: AdjustmentParameters) -> CacheKey:
    return image.content_key, "adjustments", params.canonical_key()


class FilterResultCache:
    """
    LRU cache of filter results.

    Args:
        max_entries: Maximum number of results kept; the least recently
                     used entry is evicted first. 0 disables caching.
    """

    def __init__(self, max_entries: int = DEFAULT_CACHE_MAX_ENTRIES):
        if max_entries < 0:
            raise ValueError(f"max_entries must be >= 0, got {max_entries}")
        self.max_entries = int(max_entries)
        self._entries: "OrderedDict[CacheKey, RasterImage]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: CacheKey) -> Optional[RasterImage]:
        with self._lock:
            result = self._entries.get(key)
            if result is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return result

    def put(self, key: CacheKey, image: RasterImage) -> None:
        if self.max_entries == 0:
            return
        with self._lock:
            self._entries[key] = image
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted cache entry {evicted[1]}:{evicted[2][:40]}")

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self.hits = 0
            self.misses = 0
        logger.debug(f"Cleared {count} cached filter results")

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
