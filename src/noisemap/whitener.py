"""
Near-white clamp used as the "cleaned" variant in before/after comparisons.
"""

from __future__ import annotations

import logging

import numpy as np

from .buffers import InvalidDimensions, PixelBuffer

LOGGER = logging.getLogger(__name__)

DEFAULT_WHITE_THRESHOLD = 249


def clean(buffer: PixelBuffer, white_threshold: int = DEFAULT_WHITE_THRESHOLD) -> PixelBuffer:
    """
    Replace near-white pixels with pure white.

    A pixel whose R, G and B are all ``>= white_threshold`` becomes
    ``(255, 255, 255)``; alpha and every other pixel are left untouched.

    Raises
    ------
    InvalidDimensions
        If ``white_threshold`` is outside ``[0, 255]``.
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError("Expected `buffer` to be a PixelBuffer.")
    if not 0 <= white_threshold <= 255:
        raise InvalidDimensions("`white_threshold` must be within the [0, 255] interval.")

    mask = np.all(buffer.rgb >= white_threshold, axis=2)
    cleaned = buffer.pixels.copy()
    cleaned[mask, :3] = 255
    LOGGER.debug("Whitened %s of %s pixels.", int(mask.sum()), mask.size)
    return PixelBuffer(cleaned)
