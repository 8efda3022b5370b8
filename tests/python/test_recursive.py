"""
Tests for recursive Gaussian, integral images and box filters.
"""

import pytest
import numpy as np

import ndmat
from ndmat import Matrix
from ndmat.filtering import block_filter, fast_blur, fast_gaussian, integral_image
from ndmat.core.error import (
    ComplexUnsupportedError,
    InvalidModeError,
    InvalidParameterError,
)


def _box_reference(arr, rows, cols):
    """Brute-force normalized box average with cut windows."""
    h, w = arr.shape
    out = np.empty_like(arr)
    for y in range(h):
        for x in range(w):
            y0, y1 = max(y - (rows - 1) // 2, 0), min(y + rows // 2 + 1, h)
            x0, x1 = max(x - (cols - 1) // 2, 0), min(x + cols // 2 + 1, w)
            out[y, x] = arr[y0:y1, x0:x1].mean()
    return out


class TestFastGaussian:
    """Test the recursive Gaussian approximation."""

    def test_constant_preserved(self):
        """Test a constant image is unchanged."""
        flat = ndmat.ones(9, 13).times(3)
        np.testing.assert_allclose(flat.fast_gaussian(2.0).get_data(), 3.0)

    def test_impulse_response(self):
        """Test the impulse response is centered, symmetric and of unit mass."""
        arr = np.zeros((41, 41))
        arr[20, 20] = 1
        out = fast_gaussian(Matrix.from_array(arr), 3.0).to_array()
        assert out.sum() == pytest.approx(1.0, abs=1e-3)
        assert np.unravel_index(out.argmax(), out.shape) == (20, 20)
        np.testing.assert_allclose(out[20, 10:20], out[20, 30:20:-1], atol=1e-8)
        np.testing.assert_allclose(out[10:20, 20], out[30:20:-1, 20], atol=1e-8)

    def test_anisotropic(self):
        """Test sigma_x spreads along dimension 0 and sigma_y along dimension 1."""
        arr = np.zeros((31, 31))
        arr[15, 15] = 1
        out = Matrix.from_array(arr).fast_gaussian(4.0, 1.0).to_array()
        assert out[20, 15] > out[15, 20]
        out = Matrix.from_array(arr).fast_gaussian(1.0, 4.0).to_array()
        assert out[15, 20] > out[20, 15]

    def test_integer_input(self):
        """Test integer input yields the default type."""
        im = Matrix([4, 4], np.full(16, 10.0), 'uint8')
        out = im.fast_gaussian(1.0)
        assert out.type_name == 'double'
        np.testing.assert_allclose(out.get_data(), 10.0)

    def test_empty(self):
        """Test empty input."""
        assert Matrix([0, 4]).fast_gaussian(1.0).size == [0, 4]

    def test_errors(self, complex_matrix, gray_image):
        """Test parameter validation."""
        with pytest.raises(InvalidParameterError):
            gray_image.fast_gaussian(0)
        with pytest.raises(InvalidParameterError):
            gray_image.fast_gaussian(1.0, numsteps=0)
        with pytest.raises(ComplexUnsupportedError):
            complex_matrix.fast_gaussian(1.0)


class TestIntegralImage:
    """Test cumulative tables."""

    def test_matches_cumsum(self, random_image):
        """Test against numpy per channel."""
        out = integral_image(random_image).to_array()
        np.testing.assert_allclose(out, random_image.to_array().cumsum(0).cumsum(1))

    def test_last_entry_is_total(self, small_matrix):
        """Test the bottom-right entry sums the image."""
        assert small_matrix.integral_image().value([1, 2]) == 21


class TestBlockFilter:
    """Test box averages."""

    def test_constant_image(self):
        """Test a constant image stays constant."""
        flat = ndmat.zeros(8, 8).plus(2)
        np.testing.assert_allclose(flat.block_filter(3).get_data(), 2.0)

    @pytest.mark.parametrize("wx,wy", [(3, 3), (4, 2), (1, 5)])
    def test_matches_reference(self, gray_image, wx, wy):
        """Test against a brute-force box average."""
        out = block_filter(gray_image, wx, wy)
        np.testing.assert_allclose(out.to_array(), _box_reference(gray_image.to_array(), wx, wy))

    def test_window_axes(self):
        """Test wx spans dimension 0 and wy spans dimension 1."""
        arr = np.zeros((7, 7))
        arr[3, 3] = 1
        out = Matrix.from_array(arr).block_filter(3, 1).to_array()
        assert out[2, 3] > 0 and out[4, 3] > 0
        assert out[3, 2] == 0 and out[3, 4] == 0

    def test_constant_edge_mode(self):
        """Test zero-padded averaging darkens the border only."""
        out = ndmat.ones(6, 6).block_filter(3, edge_mode='constant').to_array()
        assert out[0, 0] == pytest.approx(4 / 9)
        assert out[0, 2] == pytest.approx(6 / 9)
        assert out[2, 2] == pytest.approx(1.0)

    def test_cumulative_input(self, gray_image):
        """Test a precomputed integral image gives the same result."""
        table = gray_image.integral_image()
        np.testing.assert_allclose(
            table.block_filter(3, is_cumulative=True).get_data(),
            gray_image.block_filter(3).get_data(),
        )

    def test_channels(self, random_image):
        """Test channels are averaged independently."""
        out = random_image.block_filter(3).to_array()
        for c in range(3):
            np.testing.assert_allclose(out[:, :, c], _box_reference(random_image.to_array()[:, :, c], 3, 3))

    def test_errors(self, gray_image):
        """Test invalid window sizes and edge modes."""
        with pytest.raises(InvalidParameterError):
            gray_image.block_filter(0)
        with pytest.raises(InvalidModeError):
            gray_image.block_filter(3, edge_mode='wrap')


class TestFastBlur:
    """Test repeated box blurs."""

    def test_uint8_converted(self):
        """Test integer images are converted to double first."""
        im = Matrix([6, 6], np.full(36, 255.0), 'uint8')
        out = fast_blur(im, 1.0)
        assert out.type_name == 'double'
        np.testing.assert_allclose(out.get_data(), 1.0)

    def test_repeated_boxes(self, gray_image):
        """Test k passes of the box filter."""
        out = gray_image.fast_blur(1.0, k=2)
        # width = round(sqrt(12 / 2 + 1) / 2) * 2 + 1 = 3
        expected = gray_image.block_filter(3).block_filter(3)
        np.testing.assert_allclose(out.get_data(), expected.get_data())

    def test_invalid(self, gray_image):
        """Test non-positive sigma."""
        with pytest.raises(InvalidParameterError):
            gray_image.fast_blur(0)
