"""
Local-deviation noise estimator.

Each pixel is compared against the mean colour of its 8-neighbourhood; the
largest per-channel absolute difference is the pixel's noise value.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .buffers import InvalidDimensions, NoiseMap, PixelBuffer

LOGGER = logging.getLogger(__name__)


def _neighbour_counts(length: int, start: int, stop: int) -> np.ndarray:
    """
    Number of in-bounds positions in ``[i - 1, i + 1]`` for ``i`` in ``[start, stop)``.
    """
    idx = np.arange(start, stop)
    return (np.minimum(length - 1, idx + 1) - np.maximum(0, idx - 1) + 1).astype(np.float64)


def _to_uint8(values: np.ndarray) -> np.ndarray:
    # Same conversion as a clamped 8-bit store: clamp, then round half to even.
    return np.rint(np.clip(values, 0.0, 255.0)).astype(np.uint8)


def estimate_rows(buffer: PixelBuffer, row_start: int = 0, row_stop: Optional[int] = None) -> np.ndarray:
    """
    Compute noise values for the horizontal band ``[row_start, row_stop)``.

    The band only reads the input buffer, so disjoint bands can be computed
    independently and stacked with ``np.vstack`` to form the full map.

    Parameters
    ----------
    buffer
        Source RGBA pixels. Alpha is ignored.
    row_start, row_stop
        Row range to compute; ``row_stop`` defaults to the image height.

    Returns
    -------
    np.ndarray
        ``uint8`` array of shape ``(row_stop - row_start, W)``.
    """
    height, width = buffer.height, buffer.width
    if row_stop is None:
        row_stop = height
    if not 0 <= row_start < row_stop <= height:
        raise InvalidDimensions(
            f"Row band [{row_start}, {row_stop}) is outside image height {height}."
        )

    rgb = buffer.rgb.astype(np.float64)
    padded = np.pad(rgb, ((1, 1), (1, 1), (0, 0)), mode="constant")

    band = rgb[row_start:row_stop]
    sums = -band
    for dy in range(3):
        rows = padded[row_start + dy:row_stop + dy]
        for dx in range(3):
            sums = sums + rows[:, dx:dx + width]

    counts = (
        _neighbour_counts(height, row_start, row_stop)[:, None]
        * _neighbour_counts(width, 0, width)[None, :]
        - 1.0
    )
    counts = np.repeat(counts[:, :, None], 3, axis=2)
    # A 1x1 image has no neighbours: the pixel is its own reference.
    means = np.divide(sums, counts, out=band.copy(), where=counts > 0)

    deviation = np.abs(band - means).max(axis=2)
    return _to_uint8(deviation)


def estimate(buffer: PixelBuffer) -> NoiseMap:
    """
    Estimate the per-pixel noise map of an RGBA buffer.

    Parameters
    ----------
    buffer
        Source pixels, any size from 1x1 upwards.

    Returns
    -------
    NoiseMap
        One value in ``[0, 255]`` per pixel, same width and height.
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError("Expected `buffer` to be a PixelBuffer.")
    values = estimate_rows(buffer)
    LOGGER.debug(
        "Estimated noise for %sx%s buffer (mean %.3f, max %s).",
        buffer.width,
        buffer.height,
        float(values.mean()),
        int(values.max()),
    )
    return NoiseMap(values)
