"""
Composition of the noise stages into single-image and before/after runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .buffers import NoiseMap, PixelBuffer
from .estimator import estimate
from .visualize import VisualizationParameters, visualize
from .whitener import DEFAULT_WHITE_THRESHOLD, clean

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoiseSummary:
    """Aggregate statistics of a noise map."""

    mean: float
    maximum: int
    above_threshold: float

    def as_dict(self) -> dict:
        return {
            "mean": f"{self.mean:.3f}",
            "max": str(self.maximum),
            "above threshold": f"{self.above_threshold:.2%}",
        }


@dataclass(frozen=True)
class NoiseAnalysis:
    source: PixelBuffer
    noise: NoiseMap
    rendered: PixelBuffer
    params: VisualizationParameters

    def summary(self) -> NoiseSummary:
        values = self.noise.values
        return NoiseSummary(
            mean=float(values.mean()),
            maximum=int(values.max()),
            above_threshold=float(np.mean(values > self.params.threshold)),
        )


@dataclass(frozen=True)
class Comparison:
    before: NoiseAnalysis
    after: NoiseAnalysis
    cleaned: PixelBuffer
    white_threshold: int

    @property
    def changed_pixels(self) -> int:
        return int(np.any(self.before.source.pixels != self.cleaned.pixels, axis=2).sum())

    @property
    def mean_reduction(self) -> float:
        return self.before.summary().mean - self.after.summary().mean


def analyze(buffer: PixelBuffer, params: Optional[VisualizationParameters] = None) -> NoiseAnalysis:
    """
    Estimate and render the noise map of ``buffer``.
    """
    params = params or VisualizationParameters()
    noise = estimate(buffer)
    rendered = visualize(noise, params)
    LOGGER.debug("Rendered noise map with threshold %.3f.", params.threshold)
    return NoiseAnalysis(buffer, noise, rendered, params)


def compare(
    buffer: PixelBuffer,
    params: Optional[VisualizationParameters] = None,
    white_threshold: int = DEFAULT_WHITE_THRESHOLD,
) -> Comparison:
    """
    Measure noise before and after whitening.

    Both maps are rendered at full sensitivity so that every residual value
    is visible; ``params`` still supplies gain, gamma and threshold range.
    """
    pinned = (params or VisualizationParameters()).full_sensitivity()
    cleaned = clean(buffer, white_threshold)
    comparison = Comparison(
        before=analyze(buffer, pinned),
        after=analyze(cleaned, pinned),
        cleaned=cleaned,
        white_threshold=white_threshold,
    )
    LOGGER.info(
        "Whitening changed %s pixels; mean noise %.3f -> %.3f.",
        comparison.changed_pixels,
        comparison.before.summary().mean,
        comparison.after.summary().mean,
    )
    return comparison
