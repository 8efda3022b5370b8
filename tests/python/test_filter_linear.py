"""
Tests for kernels and separable linear filters.
"""

import pytest
import numpy as np
from scipy import ndimage

import ndmat
from ndmat import Matrix
from ndmat.filtering import (
    conv,
    filter1d,
    fspecial,
    gaussian,
    gaussian_gradient,
    gaussian_kernel,
    gaussian_size,
    resolve_origin,
    separable_filter,
)
from ndmat.core.error import (
    ComplexUnsupportedError,
    InvalidModeError,
    InvalidParameterError,
    InvalidShapeError,
    KernelTooLargeError,
)


# =============================================================================
# Kernels
# =============================================================================

class TestGaussianKernel:
    """Test sampled Gaussian kernels."""

    def test_size(self):
        """Test the truncated length."""
        assert gaussian_size(1.0) == 9
        k = gaussian_kernel(1.0)
        assert k.size == [9, 1]

    def test_order0_normalized(self):
        """Test the smoothing kernel sums to one and is symmetric."""
        k = gaussian_kernel(2.0).get_data()
        assert k.sum() == pytest.approx(1.0)
        np.testing.assert_allclose(k, k[::-1])

    def test_order1_normalized(self):
        """Test the derivative kernel is antisymmetric with unit first moment."""
        k = gaussian_kernel(1.5, 1).get_data()
        x = np.arange(k.size) - (k.size - 1) / 2
        assert np.abs(x * k).sum() == pytest.approx(1.0)
        np.testing.assert_allclose(k, -k[::-1], atol=1e-15)

    def test_order2(self):
        """Test the second derivative kernel is symmetric."""
        k = gaussian_kernel(1.5, 2).get_data()
        np.testing.assert_allclose(k, k[::-1])

    def test_invalid(self):
        """Test invalid sigma and order."""
        with pytest.raises(InvalidParameterError):
            gaussian_kernel(0)
        with pytest.raises(InvalidParameterError):
            gaussian_kernel(1.0, 3)


class TestFspecial:
    """Test predefined 2-D kernels."""

    def test_average(self):
        """Test the box kernel."""
        k = fspecial('average', [2, 3])
        assert k.size == [2, 3]
        np.testing.assert_allclose(k.get_data(), np.full(6, 1 / 6))

    def test_gaussian_sums_to_one(self):
        """Test the 2-D Gaussian."""
        k = fspecial('gaussian', 5, 1.0)
        assert k.size == [5, 5]
        assert k.get_data().sum() == pytest.approx(1.0)
        assert k.value([2, 2]) == k.get_data().max()

    def test_zero_sum_kernels(self):
        """Test Laplacian-type kernels have zero sum."""
        assert fspecial('laplacian').get_data().sum() == pytest.approx(0.0, abs=1e-12)
        assert fspecial('log', 5, 1.0).get_data().sum() == pytest.approx(0.0, abs=1e-12)
        assert fspecial('unsharp').get_data().sum() == pytest.approx(1.0)

    def test_gradients(self):
        """Test Sobel and Prewitt layouts."""
        np.testing.assert_array_equal(
            fspecial('sobel').to_array(), [[1, 2, 1], [0, 0, 0], [-1, -2, -1]]
        )
        np.testing.assert_array_equal(
            fspecial('Prewitt').to_array(), [[1, 1, 1], [0, 0, 0], [-1, -1, -1]]
        )

    def test_unknown(self):
        """Test unknown names raise."""
        with pytest.raises(InvalidModeError):
            ndmat.fspecial('motion')


# =============================================================================
# 1-D Filtering
# =============================================================================

class TestResolveOrigin:
    """Test kernel origin names."""

    @pytest.mark.parametrize("origin,expected", [
        ('C', 1), ('CL', 1), ('cr', 2), ('L', 0), ('R', 3), (-1, 3), (2, 2),
    ])
    def test_positions(self, origin, expected):
        """Test origins of a length-4 kernel."""
        assert resolve_origin(origin, 4) == expected

    def test_invalid(self):
        """Test unknown names and out-of-kernel integers."""
        with pytest.raises(InvalidModeError):
            resolve_origin('X', 3)
        with pytest.raises(InvalidParameterError):
            resolve_origin(5, 3)


class TestFilter1d:
    """Test correlation along dimension 0."""

    def test_box(self):
        """Test mirrored boundaries on a short column."""
        out = Matrix([4, 1], [1, 2, 3, 4]).filter1d([1, 1, 1])
        np.testing.assert_array_equal(out.get_data(), [5, 6, 9, 10])

    def test_matches_scipy(self, gray_image, rng):
        """Test against scipy's mirror-mode correlation."""
        taps = rng.random(5)
        out = filter1d(gray_image, taps)
        expected = ndimage.correlate1d(gray_image.to_array(), taps, axis=0, mode='mirror')
        np.testing.assert_allclose(out.to_array(), expected)

    def test_origin(self):
        """Test the origin shifts the output."""
        col = Matrix([6, 1], [1, 2, 3, 4, 5, 6])
        np.testing.assert_array_equal(col.filter1d([1, 0, 0], 'L').get_data(), [1, 2, 3, 4, 5, 6])
        np.testing.assert_array_equal(col.filter1d([1, 0, 0]).get_data(), [2, 1, 2, 3, 4, 5])

    def test_channels_independent(self, random_image, rng):
        """Test every column of every channel is filtered."""
        taps = rng.random(3)
        out = random_image.filter1d(taps)
        assert out.size == random_image.size
        expected = ndimage.correlate1d(random_image.to_array(), taps, axis=0, mode='mirror')
        np.testing.assert_allclose(out.to_array(), expected)

    def test_integer_kind_kept(self):
        """Test the output keeps the input's kind."""
        out = Matrix([4, 1], [10, 20, 30, 40], 'uint8').filter1d([0.5, 0, 0.5])
        assert out.type_name == 'uint8'
        np.testing.assert_array_equal(out.get_data(), [20, 20, 30, 30])

    def test_errors(self, complex_matrix):
        """Test invalid kernels and inputs."""
        col = Matrix([3, 1], [1, 2, 3])
        with pytest.raises(InvalidShapeError):
            col.filter1d(np.ones((2, 2)))
        with pytest.raises(KernelTooLargeError):
            col.filter1d(np.ones(5))
        with pytest.raises(ComplexUnsupportedError):
            complex_matrix.filter1d([1])

    def test_empty(self):
        """Test empty input is returned unchanged."""
        assert Matrix([0, 3]).filter1d([1, 1, 1]).size == [0, 3]


class TestSeparable:
    """Test separable and Gaussian filtering."""

    def test_separable_matches_scipy(self, random_image, rng):
        """Test two passes against scipy."""
        h, v = rng.random(3), rng.random(5)
        out = separable_filter(random_image, h, v)
        arr = ndimage.correlate1d(random_image.to_array(), h, axis=0, mode='mirror')
        arr = ndimage.correlate1d(arr, v, axis=1, mode='mirror')
        np.testing.assert_allclose(out.to_array(), arr)

    def test_gaussian_is_separable(self, gray_image):
        """Test gaussian uses the sampled kernels."""
        k = gaussian_kernel(1.0)
        np.testing.assert_allclose(
            gaussian(gray_image, 1.0).get_data(),
            separable_filter(gray_image, k, k).get_data(),
        )

    def test_gaussian_axes(self, gray_image):
        """Test sigma_x acts along dimension 0 and sigma_y along dimension 1."""
        kx = gaussian_kernel(1.0)
        ky = gaussian_kernel(0.5)
        np.testing.assert_allclose(
            gray_image.gaussian(1.0, 0.5).get_data(),
            separable_filter(gray_image, kx, ky).get_data(),
        )

    def test_gaussian_impulse_spread(self):
        """Test an anisotropic blur spreads an impulse along the larger sigma."""
        arr = np.zeros((41, 41))
        arr[20, 20] = 1
        im = Matrix.from_array(arr)
        out = im.gaussian(1.0, 3.0)
        expected = im.separable_filter(gaussian_kernel(1.0), gaussian_kernel(3.0))
        np.testing.assert_allclose(out.get_data(), expected.get_data())
        spread = out.to_array()
        assert spread[20, 25] > spread[25, 20]

    def test_constant_preserved(self):
        """Test smoothing leaves a constant image unchanged."""
        flat = ndmat.ones(12, 12).times(0.25)
        np.testing.assert_allclose(flat.gaussian(1.0).get_data(), 0.25)


class TestGaussianGradient:
    """Test Gaussian-derivative gradients."""

    @pytest.fixture
    def ramp(self):
        """12x20 image increasing by one per column."""
        return Matrix.from_array(np.tile(np.arange(20.0), (12, 1)))

    def test_ramp(self, ramp):
        """Test a horizontal ramp has unit gradient along x only."""
        grad = ramp.gaussian_gradient(1.0)
        interior = (slice(None), slice(4, 16))
        np.testing.assert_allclose(np.abs(grad.x.to_array()[interior]), 1.0)
        np.testing.assert_allclose(grad.y.to_array(), 0.0, atol=1e-12)
        np.testing.assert_allclose(grad.norm.to_array()[interior], 1.0)

    def test_phase_range(self, gray_image):
        """Test the phase is wrapped into [0, 1)."""
        grad = gaussian_gradient(gray_image, 1.0)
        phase = grad.phase.get_data()
        assert phase.min() >= 0 and phase.max() < 1
        assert grad.norm.size == gray_image.size

    def test_integer_input(self):
        """Test integer images produce float gradients."""
        im = Matrix.from_array(np.tile(np.arange(12.0), (12, 1))).astype('uint8')
        grad = im.gaussian_gradient(1.0)
        assert grad.x.type_name == 'double'


# =============================================================================
# Convolution
# =============================================================================

class TestConv:
    """Test vector convolution."""

    def test_shapes(self):
        """Test output lengths of each shape."""
        a = Matrix([5, 1], [1, 2, 3, 4, 5])
        b = [1, 0, -1]
        full = np.convolve([1, 2, 3, 4, 5], b)
        np.testing.assert_array_equal(a.conv(b).get_data(), full)
        np.testing.assert_array_equal(a.conv(b, 'same').get_data(), full[1:6])
        np.testing.assert_array_equal(conv(a, b, 'valid').get_data(), full[2:5])

    def test_same_even_kernel(self):
        """Test 'same' starts at floor(n2 / 2) for an even-length kernel."""
        a = Matrix([5, 1], [1, 2, 3, 4, 5])
        b = [1, 2, 3, 4]
        full = np.convolve([1, 2, 3, 4, 5], b)
        np.testing.assert_array_equal(a.conv(b, 'same').get_data(), full[2:7])

    def test_row_stays_row(self):
        """Test orientation follows the first operand."""
        out = Matrix([1, 3], [1, 1, 1]).conv([1, 1])
        assert out.size == [1, 4]

    def test_complex(self):
        """Test complex operands."""
        out = Matrix([1, 1], [0, 1], is_complex=True).conv([2, 3])
        np.testing.assert_array_equal(out.get_imag_data(), [2, 3])

    def test_errors(self, small_matrix):
        """Test invalid operands and shapes."""
        with pytest.raises(InvalidShapeError):
            small_matrix.conv([1, 2])
        with pytest.raises(InvalidModeError):
            Matrix([2, 1], [1, 2]).conv([1], 'circular')
