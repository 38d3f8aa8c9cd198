"""
Pixel containers and error types shared by the noise-map stages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

CHANNELS = 4


class NoiseMapError(Exception):
    """Base class for every error raised by the noisemap package."""


class InvalidDimensions(NoiseMapError, ValueError):
    """Raised when a buffer, array or parameter violates the caller contract."""


class DecodeFailure(NoiseMapError, IOError):
    """Raised when an image file cannot be found, read or decoded."""


def _check_range(array: np.ndarray) -> None:
    if array.dtype == np.uint8 or array.dtype == np.bool_ or array.size == 0:
        return
    if not np.issubdtype(array.dtype, np.number):
        raise InvalidDimensions(f"Unsupported pixel dtype {array.dtype}.")
    if not np.all(np.isfinite(array)) or array.min() < 0 or array.max() > 255:
        raise InvalidDimensions("Pixel values must be within [0, 255].")


def _frozen(array: np.ndarray) -> np.ndarray:
    _check_range(array)
    arr = np.array(array, dtype=np.uint8, copy=True)
    arr.setflags(write=False)
    return arr


def _check_size(width: int, height: int) -> None:
    if width < 1 or height < 1:
        raise InvalidDimensions(
            f"Image dimensions must be at least 1x1, received {width}x{height}."
        )


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Immutable RGBA image, ``uint8`` array of shape ``(H, W, 4)``.

    Build instances through :meth:`from_flat` or :meth:`from_array`; the
    stored array is a private read-only copy.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        arr = self.pixels
        if not isinstance(arr, np.ndarray):
            raise TypeError("Expected `pixels` to be a numpy.ndarray.")
        if arr.ndim != 3 or arr.shape[2] != CHANNELS:
            raise InvalidDimensions(
                f"Expected RGBA array with shape (H, W, 4), received {arr.shape!r}."
            )
        _check_size(arr.shape[1], arr.shape[0])
        if arr.dtype != np.uint8 or arr.flags.writeable:
            object.__setattr__(self, "pixels", _frozen(arr))

    @classmethod
    def from_flat(
        cls, data: Union[bytes, bytearray, Sequence[int], np.ndarray], width: int, height: int
    ) -> "PixelBuffer":
        """
        Build a buffer from ``width * height * 4`` row-major RGBA values.

        Raises
        ------
        InvalidDimensions
            If the size is below 1x1 or the data length does not match.
        """
        _check_size(width, height)
        if isinstance(data, (bytes, bytearray)):
            flat = np.frombuffer(bytes(data), dtype=np.uint8)
        else:
            flat = np.asarray(data)
        expected = width * height * CHANNELS
        if flat.ndim != 1 or flat.size != expected:
            raise InvalidDimensions(
                f"Buffer length {flat.size} does not match {width}x{height}x{CHANNELS}={expected}."
            )
        _check_range(flat)
        return cls(flat.astype(np.uint8).reshape(height, width, CHANNELS))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """
        Wrap an ``(H, W, 4)`` array; ``(H, W, 3)`` and ``(H, W)`` become opaque RGBA.
        """
        if not isinstance(array, np.ndarray):
            raise TypeError("Expected `array` to be a numpy.ndarray.")
        _check_range(array)
        if array.ndim == 2:
            array = np.repeat(array[:, :, None], 3, axis=2)
        if array.ndim != 3 or array.shape[2] not in (3, CHANNELS):
            raise InvalidDimensions(
                f"Expected image with shape (H, W), (H, W, 3) or (H, W, 4), received {array.shape!r}."
            )
        if array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array.astype(np.uint8), alpha], axis=2)
        return cls(array)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def rgb(self) -> np.ndarray:
        return self.pixels[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    def to_flat(self) -> bytes:
        return self.pixels.tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)


@dataclass(frozen=True, eq=False)
class NoiseMap:
    """One ``uint8`` noise value per pixel, shape ``(H, W)``."""

    values: np.ndarray

    def __post_init__(self) -> None:
        arr = self.values
        if not isinstance(arr, np.ndarray) or arr.ndim != 2:
            raise InvalidDimensions("Noise map must be a 2D numpy array.")
        _check_size(arr.shape[1], arr.shape[0])
        if arr.dtype != np.uint8 or arr.flags.writeable:
            object.__setattr__(self, "values", _frozen(arr))

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def height(self) -> int:
        return int(self.values.shape[0])

    def to_flat(self) -> bytes:
        return self.values.tobytes()

    def __len__(self) -> int:
        return int(self.values.size)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NoiseMap):
            return NotImplemented
        return np.array_equal(self.values, other.values)
