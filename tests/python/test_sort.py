"""
Tests for sorting and median.
"""

import pytest
import numpy as np

from ndmat import Matrix
from ndmat.statistics import sort, asort, median
from ndmat.core.error import (
    ComplexUnsupportedError,
    InvalidModeError,
    InvalidShapeError,
)


class TestSort:
    """Test in-place sorting."""

    def test_sort_in_place(self):
        """Test sort mutates and returns the receiver."""
        m = Matrix([4, 1], [3, 1, 4, 2])
        out = m.sort()
        assert out is m
        np.testing.assert_array_equal(m.get_data(), [1, 2, 3, 4])

    def test_descend(self):
        """Test descending order."""
        m = Matrix([1, 4], [3, 1, 4, 2])
        np.testing.assert_array_equal(m.sort(mode='descend').get_data(), [4, 3, 2, 1])

    def test_sort_along_dims(self, rng):
        """Test sorting each fiber of a matrix."""
        arr = rng.random((4, 5))
        for d in (0, 1):
            m = Matrix.from_array(arr)
            m.sort(d)
            np.testing.assert_array_equal(m.to_array(), np.sort(arr, axis=d))

    def test_nan_placement(self):
        """Test NaN goes last ascending and first descending."""
        data = [2, np.nan, 1]
        up = Matrix([3, 1], data).sort().get_data()
        np.testing.assert_array_equal(up[:2], [1, 2])
        assert np.isnan(up[2])
        down = sort(Matrix([3, 1], data), mode='descend').get_data()
        assert np.isnan(down[0])
        np.testing.assert_array_equal(down[1:], [2, 1])

    def test_mode_validation(self):
        """Test modes are validated case-insensitively."""
        m = Matrix([3, 1], [2, 3, 1])
        m.sort(mode='DESCEND')
        np.testing.assert_array_equal(m.get_data(), [3, 2, 1])
        with pytest.raises(InvalidModeError):
            m.sort(mode='random')

    def test_complex_rejected(self, complex_matrix):
        """Test complex matrices cannot be sorted."""
        with pytest.raises(ComplexUnsupportedError):
            complex_matrix.sort()


class TestAsort:
    """Test sorting permutations."""

    def test_stable_ascend(self):
        """Test equal keys keep index order."""
        out = Matrix([1, 4], [3, 1, 2, 1]).asort()
        assert out.type_name == 'uint32'
        np.testing.assert_array_equal(out.get_data(), [1, 3, 2, 0])

    def test_stable_descend(self):
        """Test descending order is stable too."""
        out = asort(Matrix([1, 4], [3, 1, 2, 1]), mode='descend')
        np.testing.assert_array_equal(out.get_data(), [0, 2, 1, 3])

    def test_fiber_local_indices(self, small_matrix):
        """Test indices are coordinates within each fiber."""
        out = small_matrix.asort(1, 'descend')
        np.testing.assert_array_equal(out.to_array(), [[2, 1, 0], [2, 1, 0]])

    def test_agrees_with_sort(self, rng):
        """Test gathering by asort reproduces sort."""
        arr = rng.integers(0, 5, (6, 3)).astype(float)
        order = Matrix.from_array(arr).asort(0).to_array().astype(int)
        expected = Matrix.from_array(arr).sort(0).to_array()
        np.testing.assert_array_equal(np.take_along_axis(arr, order, axis=0), expected)


class TestMedian:
    """Test medians."""

    def test_median(self, small_matrix):
        """Test global and per-dimension medians."""
        assert small_matrix.median().get_data_scalar() == 3.5
        np.testing.assert_array_equal(small_matrix.median(1).get_data(), [3, 4])
        np.testing.assert_array_equal(median(Matrix([3, 1], [5, 1, 3])).get_data(), [3])

    def test_median_errors(self, complex_matrix):
        """Test empty and complex input."""
        with pytest.raises(InvalidShapeError):
            Matrix([0, 2]).median(0)
        with pytest.raises(ComplexUnsupportedError):
            complex_matrix.median()
