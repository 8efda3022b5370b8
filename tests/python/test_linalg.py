"""
Tests for the linear algebra helpers.
"""

import math

import pytest
import numpy as np

import ndmat
from ndmat import Matrix
from ndmat.math import linalg
from ndmat.core.error import (
    BroadcastShapeError,
    InvalidParameterError,
    InvalidShapeError,
    ShapeMismatchError,
)


class TestProducts:
    """Test transposition and matrix products."""

    def test_mtimes_matches_numpy(self, small_matrix, rng):
        """Test the matrix product."""
        b = Matrix.from_array(rng.random((3, 4)))
        out = small_matrix.mtimes(b)
        assert out.size == [2, 4]
        np.testing.assert_allclose(out.to_array(), small_matrix.to_array() @ b.to_array())
        np.testing.assert_allclose((small_matrix @ b).to_array(), out.to_array())

    def test_mtimes_scalar_fallback(self, small_matrix):
        """Test a scalar operand multiplies elementwise."""
        out = ndmat.mtimes(small_matrix, 2)
        np.testing.assert_array_equal(out.get_data(), [2, 4, 6, 8, 10, 12])

    def test_mtimes_identity(self, small_matrix):
        """Test multiplication by the identity."""
        out = small_matrix.mtimes(ndmat.eye(3))
        np.testing.assert_array_equal(out.get_data(), small_matrix.get_data())

    def test_mtimes_errors(self, small_matrix, cube):
        """Test inner dimensions and 2-D operands."""
        with pytest.raises(ShapeMismatchError):
            small_matrix.mtimes(small_matrix)
        with pytest.raises(InvalidShapeError):
            cube.mtimes(small_matrix)

    def test_complex_mtimes(self, complex_matrix):
        """Test complex matrix products."""
        arr = complex_matrix.to_array()
        np.testing.assert_allclose(complex_matrix.mtimes(complex_matrix).to_array(), arr @ arr)

    def test_ctranspose(self, complex_matrix):
        """Test the conjugate transpose."""
        arr = complex_matrix.to_array()
        np.testing.assert_array_equal(complex_matrix.ctranspose().to_array(), arr.conj().T)
        np.testing.assert_array_equal(complex_matrix.T.to_array(), arr.T)

    def test_transpose_3d(self, cube):
        """Test transposition requires a 2-D matrix."""
        with pytest.raises(InvalidShapeError):
            cube.transpose()


class TestSummaries:
    """Test norm and trace."""

    def test_norms(self):
        """Test vector norms of all elements."""
        m = Matrix([2, 1], [3, -4])
        assert m.norm() == 5.0
        assert m.norm(1) == 7.0
        assert m.norm(math.inf) == 4.0
        assert m.norm(-math.inf) == 3.0
        assert m.norm('fro') == 5.0
        assert m.norm(3) == pytest.approx((27 + 64) ** (1 / 3))

    def test_invalid_norm(self):
        """Test unsupported orders raise."""
        m = Matrix([2, 1], [3, -4])
        with pytest.raises(InvalidParameterError):
            m.norm('nuc')
        with pytest.raises(InvalidParameterError):
            m.norm(0)

    def test_trace(self, complex_matrix):
        """Test trace returns a Python scalar."""
        assert Matrix([2, 2], [1, 2, 3, 4]).trace() == 5.0
        assert complex_matrix.trace() == 5 + 13j


class TestTriangles:
    """Test triangular parts and diagonals."""

    def test_triu_tril(self, rng):
        """Test against numpy."""
        arr = rng.random((4, 5))
        m = Matrix.from_array(arr)
        for k in (-1, 0, 2):
            np.testing.assert_array_equal(m.triu(k).to_array(), np.triu(arr, k))
            np.testing.assert_array_equal(m.tril(k).to_array(), np.tril(arr, k))

    def test_diag_extract(self, small_matrix):
        """Test diagonal extraction returns a column."""
        out = small_matrix.diag()
        assert out.size == [2, 1]
        np.testing.assert_array_equal(out.get_data(), [1, 4])
        np.testing.assert_array_equal(small_matrix.diag(1).get_data(), [3, 6])
        np.testing.assert_array_equal(small_matrix.diag(-1).get_data(), [2])

    def test_diag_of_vector(self):
        """Test a vector builds a diagonal matrix."""
        out = Matrix([1, 3], [1, 2, 3]).diag()
        np.testing.assert_array_equal(out.to_array(), np.diag([1.0, 2.0, 3.0]))

    def test_empty_diagonal(self, small_matrix):
        """Test an empty diagonal raises."""
        with pytest.raises(InvalidParameterError):
            small_matrix.diag(3)


class TestBsxfun:
    """Test singleton expansion."""

    def test_center_columns(self, small_matrix):
        """Test subtracting column means."""
        out = ndmat.bsxfun('minus', small_matrix, small_matrix.mean(0))
        np.testing.assert_array_equal(out.get_data(), [-0.5, 0.5] * 3)

    def test_outer_expansion(self):
        """Test a column against a row expands both."""
        col = Matrix([3, 1], [1, 2, 3])
        row = Matrix([1, 2], [10, 20])
        out = linalg.bsxfun('plus', col, row)
        assert out.size == [3, 2]
        np.testing.assert_array_equal(out.to_array(), [[11, 21], [12, 22], [13, 23]])

    def test_comparison_and_extrema(self):
        """Test logical and min/max functions."""
        col = Matrix([2, 1], [1, 5])
        row = Matrix([1, 2], [2, 4])
        assert linalg.bsxfun('gt', col, row).is_logical()
        np.testing.assert_array_equal(linalg.bsxfun('max', col, row).to_array(), [[2, 4], [5, 5]])

    def test_callable(self):
        """Test a user function over numpy arrays."""
        col = Matrix([2, 1], [1, 2])
        out = linalg.bsxfun(np.subtract, col, Matrix([1, 2], [1, 1]))
        np.testing.assert_array_equal(out.to_array(), [[0, 0], [1, 1]])

    def test_errors(self, small_matrix):
        """Test incompatible sizes and unknown names."""
        with pytest.raises(BroadcastShapeError):
            ndmat.bsxfun('plus', small_matrix, Matrix([3, 1]))
        with pytest.raises(InvalidParameterError):
            ndmat.bsxfun('frobnicate', small_matrix, 1)
