"""
Tests for the filter result cache.
"""

import concurrent.futures

import pytest

from PS_Libs.FilterLib.filter_catalog import (
    FilterCategory,
    FilterDefinition,
    PixelTransform,
    PixelTransformKind,
)
from PS_Libs.FilterLib.result_cache import (
    FilterResultCache,
    adjustment_cache_key,
    filter_cache_key,
)
from PS_Libs.ImageEditingLib.adjustments import AdjustmentParameters
from PS_Libs.ImageEditingLib.image_models import RasterImage


NOIR = FilterDefinition("noir", "Noir", FilterCategory.BLACK_WHITE,
                        pixel_transform=PixelTransform(PixelTransformKind.GRAYSCALE))
ORIGINAL = FilterDefinition("none", "Original", FilterCategory.BASIC)


def _image(value: int) -> RasterImage:
    return RasterImage.solid(2, 2, (value, value, value, 255))


class TestCacheKeys:

    def test_filter_keys_differ_by_filter(self):
        image = _image(10)
        assert filter_cache_key(image, NOIR) != filter_cache_key(image, ORIGINAL)

    def test_filter_and_adjustment_keys_never_collide(self):
        image = _image(10)
        params = AdjustmentParameters(brightness=5)
        warm = FilterDefinition("warm", "Warm", FilterCategory.BASIC, adjustments=params)
        assert filter_cache_key(image, warm) != adjustment_cache_key(image, params)

    def test_filter_keys_follow_definition_parameters(self):
        image = _image(10)
        mild = FilterDefinition("warm", "Warm", FilterCategory.BASIC,
                                adjustments=AdjustmentParameters(brightness=10))
        strong = FilterDefinition("warm", "Warm", FilterCategory.BASIC,
                                  adjustments=AdjustmentParameters(brightness=-50))
        assert filter_cache_key(image, mild) != filter_cache_key(image, strong)
        assert filter_cache_key(image, mild) == filter_cache_key(image, mild)

    def test_keys_follow_content(self):
        assert filter_cache_key(_image(1), NOIR) == filter_cache_key(_image(1), NOIR)
        assert filter_cache_key(_image(1), NOIR) != filter_cache_key(_image(2), NOIR)


class TestFilterResultCache:

    def test_get_miss_and_hit(self):
        cache = FilterResultCache(4)
        key = filter_cache_key(_image(1), NOIR)

        assert cache.get(key) is None
        cache.put(key, _image(9))

        assert cache.get(key) == _image(9)
        assert cache.hits == 1
        assert cache.misses == 1

    def test_lru_eviction(self):
        cache = FilterResultCache(2)
        keys = [filter_cache_key(_image(i), NOIR) for i in range(3)]

        cache.put(keys[0], _image(0))
        cache.put(keys[1], _image(1))
        cache.get(keys[0])  # keys[1] is now least recently used
        cache.put(keys[2], _image(2))

        assert keys[0] in cache
        assert keys[1] not in cache
        assert keys[2] in cache
        assert len(cache) == 2

    def test_put_existing_key_does_not_grow(self):
        cache = FilterResultCache(3)
        key = filter_cache_key(_image(1), NOIR)
        cache.put(key, _image(1))
        cache.put(key, _image(2))
        assert cache.size() == 1
        assert cache.get(key) == _image(2)

    def test_zero_size_disables_cache(self):
        cache = FilterResultCache(0)
        key = filter_cache_key(_image(1), NOIR)
        cache.put(key, _image(1))
        assert cache.get(key) is None

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError):
            FilterResultCache(-1)

    def test_clear_resets_stats(self):
        cache = FilterResultCache(4)
        key = filter_cache_key(_image(1), NOIR)
        cache.put(key, _image(1))
        cache.get(key)
        cache.clear()
        assert cache.size() == 0
        assert cache.hits == 0

    def test_concurrent_access_stays_bounded(self):
        cache = FilterResultCache(16)
        images = [_image(i) for i in range(64)]

        def worker(index: int) -> None:
            for offset in range(50):
                image = images[(index + offset) % len(images)]
                key = filter_cache_key(image, NOIR)
                if cache.get(key) is None:
                    cache.put(key, image)

        with concurrent.futures.ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(worker, range(8)))

        assert cache.size() <= 16
        assert cache.hits + cache.misses == 8 * 50
