"""
Shared fixtures for the noisemap tests.
"""

import numpy as np
import pytest

from noisemap import PixelBuffer


def make_buffer(width, height, rgb=(200, 200, 200), alpha=255):
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :, :3] = rgb
    pixels[:, :, 3] = alpha
    return pixels


@pytest.fixture
def uniform_buffer():
    """6x4 image where every pixel is the same grey."""
    return PixelBuffer(make_buffer(6, 4, rgb=(120, 80, 40)))


@pytest.fixture
def center_outlier_buffer():
    """3x3 grey image with a black centre pixel."""
    pixels = make_buffer(3, 3)
    pixels[1, 1, :3] = 0
    return PixelBuffer(pixels)


@pytest.fixture
def random_buffer():
    """Reproducible random RGBA image with a non-square shape."""
    rng = np.random.default_rng(1234)
    return PixelBuffer(rng.integers(0, 256, size=(5, 7, 4), dtype=np.uint8))
