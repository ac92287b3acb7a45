"""
Pytest configuration and shared fixtures for Photo Strip Studio tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import numpy as np
import pytest

from PS_Libs.FilterLib.filter_engine import create_default_engine
from PS_Libs.ImageEditingLib.image_models import RasterImage


@pytest.fixture
def temp_output_dir(tmp_path):
    """
    Provide a temporary directory for exported files.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Path object pointing to a temporary directory
    """
    return tmp_path


@pytest.fixture
def gradient_image():
    """A 32x24 raster with distinct values in every pixel and half-transparent alpha."""
    height, width = 24, 32
    ys, xs = np.mgrid[0:height, 0:width]
    array = np.zeros((height, width, 4), dtype=np.uint8)
    array[..., 0] = (xs * 8) % 256
    array[..., 1] = (ys * 10) % 256
    array[..., 2] = ((xs + ys) * 5) % 256
    array[..., 3] = 200
    return RasterImage.from_array(array)


@pytest.fixture
def engine():
    """A filter engine over the shipped catalog with its own cache."""
    return create_default_engine()
