"""
Local noise estimation and visualisation for RGBA images.
"""

from __future__ import annotations

from .buffers import DecodeFailure, InvalidDimensions, NoiseMap, NoiseMapError, PixelBuffer
from .estimator import estimate, estimate_rows
from .pipeline import Comparison, NoiseAnalysis, NoiseSummary, analyze, compare
from .visualize import VisualizationParameters, colorize, save_heatmap, visualize
from .whitener import DEFAULT_WHITE_THRESHOLD, clean

__all__ = [
    "DEFAULT_WHITE_THRESHOLD",
    "Comparison",
    "DecodeFailure",
    "InvalidDimensions",
    "NoiseAnalysis",
    "NoiseMap",
    "NoiseMapError",
    "NoiseSummary",
    "PixelBuffer",
    "VisualizationParameters",
    "analyze",
    "clean",
    "colorize",
    "compare",
    "estimate",
    "estimate_rows",
    "save_heatmap",
    "visualize",
]
