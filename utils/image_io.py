# ================================================================
# PROJECT: NOISEMAP - LOCAL NOISE VISUALIZER
#
# FILE: UTILS/IMAGE_IO.PY - IMAGE INPUT AND OUTPUT
# DESCRIPTION: VALIDATES PATHS, DECODES TO RGBA, DOWNSCALES, DESCRIBES SOURCE, SAVES PNG
# ================================================================
from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Dict, Optional, Union

import cv2
import numpy as np
from PIL import ExifTags, Image, UnidentifiedImageError

from noisemap import DecodeFailure, PixelBuffer

HIGH_BIT_MODES = {"I;16", "I;16B", "I;16L", "I;16N", "I", "F"}
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".gif", ".webp", ".tif", ".tiff", ".ppm"}
MAX_SIDE = 1400
EXIF_FIELDS = ("Make", "Model", "Software", "DateTime")

LOGGER = logging.getLogger(__name__)


# ======================================================
# FUNCTION VALIDATE_IMAGE_PATH: CHECKS EXISTENCE AND EXTENSION
# ======================================================
def validate_image_path(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in ALLOWED_EXTENSIONS


# ==============================================================
# FUNCTION FIT_SIZE: TARGET SIZE WITH THE LONGEST SIDE <= MAX_SIDE
# ==============================================================
def fit_size(width: int, height: int, max_side: Optional[int] = MAX_SIDE) -> tuple[int, int]:
    if not max_side or max_side <= 0:
        return width, height
    scale = min(1.0, max_side / float(max(width, height)))
    return max(1, math.floor(width * scale)), max(1, math.floor(height * scale))


# ==============================================================
# FUNCTION _TO_RGBA: REDUCES ANY PILLOW MODE TO 8-BIT RGBA
# ==============================================================
def _to_rgba(img: Image.Image) -> np.ndarray:
    if img.mode not in HIGH_BIT_MODES:
        return np.array(img.convert("RGBA"))

    # single-channel 16/32-bit or float data: keep the top 8 bits
    values = np.asarray(img)
    if img.mode == "F":
        finite = np.nan_to_num(values.astype(np.float64), nan=0.0, posinf=0.0, neginf=0.0)
        if finite.size and finite.max() <= 1.0:
            gray = np.rint(np.clip(finite, 0.0, 1.0) * 255.0)
        else:
            gray = np.clip(finite, 0.0, 65535.0).astype(np.uint32) >> 8
    else:
        gray = np.clip(values.astype(np.int64), 0, 65535) >> 8
    gray = gray.astype(np.uint8)
    alpha = np.full_like(gray, 255)
    return np.dstack([gray, gray, gray, alpha])


# ==========================================================
# FUNCTION LOAD_PIXELS: DECODES A FILE INTO A DOWNSCALED RGBA BUFFER
# ==========================================================
def load_pixels(path: Union[str, Path], max_side: Optional[int] = MAX_SIDE) -> PixelBuffer:
    """Decodes any Pillow-readable image and fits it to max_side."""
    path = Path(path)
    if not path.is_file():
        raise DecodeFailure(f"Image not found: {path}")
    try:
        with Image.open(path) as img:
            rgba = _to_rgba(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise DecodeFailure(f"Failed to decode image at {path}: {exc}") from exc

    height, width = rgba.shape[:2]
    new_width, new_height = fit_size(width, height, max_side)
    if (new_width, new_height) != (width, height):
        rgba = cv2.resize(rgba, (new_width, new_height), interpolation=cv2.INTER_AREA)
        LOGGER.info(
            "Downscaled %s from %sx%s to %sx%s.", path.name, width, height, new_width, new_height
        )
    return PixelBuffer.from_array(rgba)


# ==============================================================
# FUNCTION DESCRIBE_IMAGE: SOURCE FORMAT, BIT DEPTH, SIZE AND CAMERA TAGS
# ==============================================================
def describe_image(path: Path) -> Dict[str, str]:
    """Metadata of the file as decoded, before any downscaling."""
    try:
        with Image.open(path) as img:
            details = {
                "Format": img.format or "unknown",
                "Mode": img.mode + (" (reduced to 8 bits)" if img.mode in HIGH_BIT_MODES else ""),
                "Original size": f"{img.width} x {img.height}",
            }
            exif = img.getexif()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError):
        return {}
    for tag_id, value in exif.items():
        name = ExifTags.TAGS.get(tag_id)
        if name in EXIF_FIELDS:
            details[name] = str(value).strip("\x00 ")
    return details


# ==========================================================
# FUNCTION SAVE_PIXELS: WRITES AN RGBA BUFFER TO DISK
# ==========================================================
def save_pixels(destination: Path, buffer: PixelBuffer) -> Path:
    destination.parent.mkdir(parents=True, exist_ok=True)
    bgra = cv2.cvtColor(np.ascontiguousarray(buffer.pixels), cv2.COLOR_RGBA2BGRA)
    if not cv2.imwrite(str(destination), bgra):
        raise IOError(f"Failed to save image to {destination}")
    return destination
