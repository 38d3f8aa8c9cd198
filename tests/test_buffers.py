"""
Tests for the pixel containers.
"""

import numpy as np
import pytest

from noisemap import DecodeFailure, InvalidDimensions, NoiseMap, NoiseMapError, PixelBuffer


class TestPixelBuffer:
    """Construction and immutability of RGBA buffers."""

    def test_from_flat_row_major(self):
        data = bytes(range(2 * 3 * 4))
        buffer = PixelBuffer.from_flat(data, width=2, height=3)
        assert buffer.width == 2
        assert buffer.height == 3
        # second pixel of the second row
        assert tuple(buffer.pixels[1, 1]) == (12, 13, 14, 15)
        assert buffer.to_flat() == data

    def test_from_flat_accepts_int_sequence(self):
        buffer = PixelBuffer.from_flat([10, 20, 30, 255], width=1, height=1)
        assert tuple(buffer.pixels[0, 0]) == (10, 20, 30, 255)

    @pytest.mark.parametrize(
        "length,width,height",
        [(15, 2, 2), (17, 2, 2), (0, 0, 1), (4, 1, 0), (8, -1, 2)],
    )
    def test_from_flat_rejects_bad_dimensions(self, length, width, height):
        with pytest.raises(InvalidDimensions):
            PixelBuffer.from_flat(bytes(length), width=width, height=height)

    def test_from_flat_rejects_out_of_range_values(self):
        with pytest.raises(InvalidDimensions):
            PixelBuffer.from_flat([0, 0, 256, 255], width=1, height=1)

    def test_from_array_promotes_rgb_and_gray(self):
        rgb = np.full((2, 3, 3), 7, dtype=np.uint8)
        gray = np.full((2, 3), 9, dtype=np.uint8)

        from_rgb = PixelBuffer.from_array(rgb)
        from_gray = PixelBuffer.from_array(gray)

        assert from_rgb.pixels.shape == (2, 3, 4)
        assert np.all(from_rgb.alpha == 255)
        assert np.all(from_rgb.rgb == 7)
        assert np.all(from_gray.rgb == 9)

    def test_from_array_rejects_bad_shape(self):
        with pytest.raises(InvalidDimensions):
            PixelBuffer.from_array(np.zeros((2, 2, 2), dtype=np.uint8))
        with pytest.raises(InvalidDimensions):
            PixelBuffer.from_array(np.zeros((0, 2, 4), dtype=np.uint8))

    @pytest.mark.parametrize(
        "array",
        [
            np.full((2, 2, 4), 300, dtype=np.int32),
            np.full((2, 2, 4), -1, dtype=np.int16),
            np.full((2, 2, 3), 256.0),
            np.full((2, 2), np.nan),
        ],
    )
    def test_from_array_rejects_out_of_range_values(self, array):
        with pytest.raises(InvalidDimensions):
            PixelBuffer.from_array(array)

    def test_constructor_rejects_out_of_range_values(self):
        data = np.full((2, 2, 4), 300, dtype=np.int32)
        with pytest.raises(InvalidDimensions):
            PixelBuffer(data)
        with pytest.raises(InvalidDimensions):
            PixelBuffer.from_flat(data.ravel(), width=2, height=2)

    def test_in_range_wider_dtypes_are_accepted(self):
        buffer = PixelBuffer.from_array(np.full((1, 2, 4), 255, dtype=np.int64))
        assert buffer.pixels.dtype == np.uint8
        assert np.all(buffer.pixels == 255)

    def test_buffer_is_read_only_copy(self):
        source = np.zeros((2, 2, 4), dtype=np.uint8)
        buffer = PixelBuffer(source)
        source[0, 0, 0] = 99

        assert buffer.pixels[0, 0, 0] == 0
        with pytest.raises(ValueError):
            buffer.pixels[0, 0, 0] = 1

    def test_equality_compares_pixels(self):
        a = PixelBuffer(np.zeros((1, 2, 4), dtype=np.uint8))
        b = PixelBuffer(np.zeros((1, 2, 4), dtype=np.uint8))
        c = PixelBuffer(np.ones((1, 2, 4), dtype=np.uint8))
        assert a == b
        assert a != c


class TestNoiseMap:
    """Shape checks of the scalar noise map."""

    def test_length_and_flat(self):
        noise = NoiseMap(np.arange(6, dtype=np.uint8).reshape(2, 3))
        assert len(noise) == 6
        assert noise.width == 3
        assert noise.height == 2
        assert noise.to_flat() == bytes(range(6))

    def test_rejects_out_of_range_values(self):
        with pytest.raises(InvalidDimensions):
            NoiseMap(np.array([[0, 256]], dtype=np.int32))

    def test_rejects_non_2d(self):
        with pytest.raises(InvalidDimensions):
            NoiseMap(np.zeros((2, 2, 1), dtype=np.uint8))


class TestErrors:
    """Error categories stay distinct."""

    def test_hierarchy(self):
        assert issubclass(InvalidDimensions, NoiseMapError)
        assert issubclass(InvalidDimensions, ValueError)
        assert issubclass(DecodeFailure, NoiseMapError)
        assert issubclass(DecodeFailure, IOError)
        assert not issubclass(DecodeFailure, InvalidDimensions)
        assert not issubclass(InvalidDimensions, DecodeFailure)
