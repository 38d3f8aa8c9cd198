"""
Rendering of noise maps as displayable images.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Union

import cv2
import matplotlib
import numpy as np

from .buffers import InvalidDimensions, NoiseMap, PixelBuffer

LOGGER = logging.getLogger(__name__)

DEFAULT_SENSITIVITY = 50.0
DEFAULT_GAIN = 1.4
DEFAULT_GAMMA = 0.35
DEFAULT_THRESHOLD_MAX = 8.0
FULL_SENSITIVITY = 100.0


@dataclass(frozen=True)
class VisualizationParameters:
    """
    Threshold and contrast settings for :func:`visualize`.

    ``sensitivity`` runs from 0 (suppress values up to ``threshold_max``) to
    100 (threshold 0, show everything). ``gamma`` below 1 lifts small noise
    values; ``gain`` scales the result before clamping to 255.
    """

    sensitivity: float = DEFAULT_SENSITIVITY
    gain: float = DEFAULT_GAIN
    gamma: float = DEFAULT_GAMMA
    threshold_max: float = DEFAULT_THRESHOLD_MAX

    def __post_init__(self) -> None:
        if not 0.0 <= self.sensitivity <= FULL_SENSITIVITY:
            raise InvalidDimensions("`sensitivity` must be within the [0, 100] interval.")
        if self.gamma <= 0.0:
            raise InvalidDimensions("`gamma` must be strictly positive.")
        if self.gain < 0.0:
            raise InvalidDimensions("`gain` must not be negative.")
        if self.threshold_max < 0.0:
            raise InvalidDimensions("`threshold_max` must not be negative.")

    @property
    def threshold(self) -> float:
        return self.threshold_max * (1.0 - self.sensitivity / FULL_SENSITIVITY)

    def full_sensitivity(self) -> "VisualizationParameters":
        """Copy pinned at sensitivity 100, used for before/after maps."""
        return replace(self, sensitivity=FULL_SENSITIVITY)


def intensity(noise_map: NoiseMap, params: Optional[VisualizationParameters] = None) -> np.ndarray:
    """
    Map noise values to display intensities.

    Parameters
    ----------
    noise_map
        Values produced by :func:`noisemap.estimator.estimate`.
    params
        Visualisation settings; defaults to :class:`VisualizationParameters`.

    Returns
    -------
    np.ndarray
        ``uint8`` array of shape ``(H, W)``.
    """
    if not isinstance(noise_map, NoiseMap):
        raise TypeError("Expected `noise_map` to be a NoiseMap.")
    params = params or VisualizationParameters()

    shifted = np.maximum(0.0, noise_map.values.astype(np.float64) - params.threshold)
    boosted = np.power(shifted / 255.0, params.gamma)
    scaled = np.minimum(255.0, boosted * 255.0 * params.gain)
    return np.rint(np.clip(scaled, 0.0, 255.0)).astype(np.uint8)


def visualize(noise_map: NoiseMap, params: Optional[VisualizationParameters] = None) -> PixelBuffer:
    """
    Render a noise map as an opaque grayscale RGBA buffer of the same size.
    """
    gray = intensity(noise_map, params)
    rgba = np.empty(gray.shape + (4,), dtype=np.uint8)
    rgba[:, :, :3] = gray[:, :, None]
    rgba[:, :, 3] = 255
    return PixelBuffer(rgba)


def colorize(
    noise_map: NoiseMap,
    params: Optional[VisualizationParameters] = None,
    cmap: str = "magma",
) -> PixelBuffer:
    """
    Render the visualised intensity through a matplotlib colormap.
    """
    try:
        colormap = matplotlib.colormaps[cmap]
    except KeyError as exc:
        raise InvalidDimensions(f"Unknown colormap {cmap!r}.") from exc
    gray = intensity(noise_map, params)
    colored = colormap(gray.astype(np.float32) / 255.0)
    rgba = np.clip(np.rint(colored * 255.0), 0, 255).astype(np.uint8)
    rgba[:, :, 3] = 255
    return PixelBuffer(rgba)


def save_heatmap(
    noise_map: NoiseMap,
    out_path: Union[str, Path],
    params: Optional[VisualizationParameters] = None,
    cmap: str = "magma",
) -> Path:
    """
    Save a colormapped rendering of ``noise_map`` as an image file.
    """
    path = Path(out_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    heatmap = colorize(noise_map, params, cmap=cmap)
    heatmap_bgr = cv2.cvtColor(np.ascontiguousarray(heatmap.rgb), cv2.COLOR_RGB2BGR)
    if not cv2.imwrite(str(path), heatmap_bgr):
        raise IOError(f"Failed to save heatmap to {path}")
    LOGGER.info("Saved heatmap to %s.", path)
    return path
