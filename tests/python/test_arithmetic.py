"""
Tests for the broadcast arithmetic engine and elementwise functions.
"""

import pytest
import numpy as np

import ndmat
from ndmat import Matrix
from ndmat.math import arithmetic, elementwise
from ndmat.core.error import (
    BroadcastShapeError,
    ComplexUnsupportedError,
    MatrixNotImplementedError,
)


class TestBinaryCopying:
    """Test copying operators."""

    def test_scalar_operand(self, small_matrix):
        """Test scalar expansion leaves the operand unchanged."""
        out = small_matrix * 2
        np.testing.assert_array_equal(out.get_data(), [2, 4, 6, 8, 10, 12])
        np.testing.assert_array_equal(small_matrix.get_data(), [1, 2, 3, 4, 5, 6])

    def test_reflected(self, small_matrix):
        """Test a plain number on the left."""
        out = 10 - small_matrix
        np.testing.assert_array_equal(out.get_data(), [9, 8, 7, 6, 5, 4])
        assert (1 / Matrix([2, 1], [2, 4])).get_data().tolist() == [0.5, 0.25]

    def test_same_size(self, small_matrix):
        """Test elementwise combination of equal sizes."""
        out = small_matrix + small_matrix
        np.testing.assert_array_equal(out.get_data(), [2, 4, 6, 8, 10, 12])

    def test_ndarray_operand(self, small_matrix):
        """Test a numpy array on the left defers to the Matrix."""
        out = np.ones((2, 3)) + small_matrix
        assert isinstance(out, Matrix)
        assert out.size == [2, 3]

    def test_trailing_dims_ignored(self):
        """Test operands differing only in trailing unit dims combine."""
        a = Matrix([2, 2], [1, 2, 3, 4])
        b = Matrix.from_array(np.ones((2, 2, 1, 1)))
        assert (a + b).size == [2, 2]

    def test_broadcast_error(self, small_matrix):
        """Test mismatched sizes raise."""
        with pytest.raises(BroadcastShapeError):
            small_matrix + Matrix([3, 2])

    def test_kind_of_left_operand(self):
        """Test integer results wrap in the left operand's kind."""
        m = Matrix([2, 1], [1, 2], 'uint8')
        out = m + 300
        assert out.type_name == 'uint8'
        np.testing.assert_array_equal(out.get_data(), [45, 46])

    def test_logical_promotes(self):
        """Test logical operands produce the default type."""
        m = Matrix([2, 1], [1, 0], is_boolean=True)
        assert (m + m).type_name == 'double'

    def test_ldivide(self):
        """Test left division swaps the operands."""
        out = arithmetic.ldivide(Matrix([2, 1], [2, 4]), 8)
        np.testing.assert_array_equal(out.get_data(), [4, 2])

    def test_functional_forms(self, small_matrix):
        """Test the named functions match the operators."""
        np.testing.assert_array_equal(
            arithmetic.power(small_matrix, 2).get_data(),
            (small_matrix ** 2).get_data(),
        )
        np.testing.assert_array_equal(
            arithmetic.rdivide(small_matrix, 2).get_data(),
            (small_matrix / 2).get_data(),
        )


class TestComplexArithmetic:
    """Test the real/complex operator tables."""

    def test_times(self):
        """Test complex multiplication."""
        out = Matrix([1, 1], [1, 2], is_complex=True) * (3 + 4j)
        assert out.value(0) == -5 + 10j

    def test_real_plus_complex(self, small_matrix):
        """Test mixing real and complex operands."""
        out = small_matrix + 1j
        assert out.is_complex()
        np.testing.assert_array_equal(out.get_imag_data(), np.ones(6))

    def test_divide_by_complex(self):
        """Test real over complex division."""
        out = Matrix([1, 1], [1]) / 1j
        assert out.value(0) == -1j

    def test_complex_power(self):
        """Test a complex base with a real exponent."""
        out = Matrix([1, 1], [0, 1], is_complex=True) ** 2
        np.testing.assert_allclose(out.to_array(), [[-1 + 0j]], atol=1e-12)

    def test_complex_exponent_not_implemented(self):
        """Test complex exponents raise."""
        with pytest.raises(MatrixNotImplementedError):
            Matrix([1, 1], [2]) ** 1j


class TestInPlace:
    """Test in-place operators."""

    def test_returns_self(self, small_matrix):
        """Test in-place forms mutate and return the receiver."""
        out = small_matrix.plus(1)
        assert out is small_matrix
        np.testing.assert_array_equal(small_matrix.get_data(), [2, 3, 4, 5, 6, 7])

    def test_augmented_assignment(self, small_matrix):
        """Test augmented assignment is in place."""
        ref = small_matrix
        small_matrix *= 2
        small_matrix -= 1
        assert small_matrix is ref
        np.testing.assert_array_equal(small_matrix.get_data(), [1, 3, 5, 7, 9, 11])

    def test_keeps_kind(self):
        """Test the receiver keeps its integer kind."""
        m = Matrix([1, 1], [250], 'uint8')
        m.plus(10)
        assert m.type_name == 'uint8'
        assert m.value(0) == 4

    def test_scalar_receiver_cannot_grow(self):
        """Test a scalar receiver with a larger operand raises."""
        with pytest.raises(BroadcastShapeError):
            Matrix([1, 1], [1]).plus(Matrix([2, 2]))

    def test_becomes_complex(self, small_matrix):
        """Test a complex result turns the receiver complex."""
        small_matrix.times(1j)
        assert small_matrix.is_complex()
        assert small_matrix.value(0) == 1j

    def test_inplace_ldivide(self):
        """Test in-place left division."""
        m = Matrix([2, 1], [2, 4])
        m.ldivide(8)
        np.testing.assert_array_equal(m.get_data(), [4, 2])


class TestComparisons:
    """Test logical results."""

    def test_compare_scalar(self, small_matrix):
        """Test comparisons produce logical matrices."""
        out = small_matrix > 3
        assert out.type_name == 'logical'
        np.testing.assert_array_equal(out.get_data(), [0, 0, 0, 1, 1, 1])

    def test_combinations(self, small_matrix):
        """Test and/or/not."""
        out = (small_matrix > 1) & (small_matrix < 4)
        np.testing.assert_array_equal(out.get_data(), [0, 1, 1, 0, 0, 0])
        out = (small_matrix < 2) | (small_matrix > 5)
        np.testing.assert_array_equal(out.get_data(), [1, 0, 0, 0, 0, 1])
        np.testing.assert_array_equal((~Matrix([2, 1], [0, 3])).get_data(), [1, 0])

    def test_nan_compares_false(self):
        """Test NaN is unequal to everything."""
        m = Matrix([2, 1], [np.nan, 1])
        np.testing.assert_array_equal((m == m).get_data(), [0, 1])

    def test_complex_rejected(self, complex_matrix):
        """Test complex comparisons raise."""
        with pytest.raises(ComplexUnsupportedError):
            complex_matrix < 1

    def test_uminus(self, small_matrix):
        """Test negation copies."""
        out = -small_matrix
        np.testing.assert_array_equal(out.get_data(), [-1, -2, -3, -4, -5, -6])
        assert small_matrix.value(0) == 1


class TestElementwise:
    """Test elementwise math functions."""

    def test_sqrt(self):
        """Test negative reals give NaN and complex input is supported."""
        out = Matrix([2, 1], [4, -1]).sqrt()
        assert out.value(0) == 2
        assert np.isnan(out.value(1))
        z = Matrix([1, 1], [0, 2], is_complex=True).sqrt()
        np.testing.assert_allclose(z.value(0), 1 + 1j)

    def test_exp_complex(self):
        """Test Euler's identity."""
        z = Matrix([1, 1], [0, np.pi], is_complex=True).exp()
        np.testing.assert_allclose(z.to_array(), [[-1 + 0j]], atol=1e-12)

    def test_abs_keeps_kind(self):
        """Test abs keeps integer kinds and takes complex modulus."""
        m = Matrix([2, 1], [-3, 2], 'int8').abs()
        assert m.type_name == 'int8'
        np.testing.assert_array_equal(m.get_data(), [3, 2])
        assert abs(Matrix([1, 1], [3, 4], is_complex=True)).value(0) == 5

    def test_round_half_away(self):
        """Test rounding halves away from zero."""
        out = Matrix([4, 1], [-2.5, 2.5, 0.5, 1.4]).round()
        np.testing.assert_array_equal(out.get_data(), [-3, 3, 1, 1])
        np.testing.assert_array_equal(Matrix([1, 1], [-1.5]).floor().get_data(), [-2])
        np.testing.assert_array_equal(Matrix([1, 1], [-1.5]).ceil().get_data(), [-1])

    def test_float_result_type(self):
        """Test integer input yields the default type."""
        out = Matrix([2, 1], [1, 100], 'uint8').log10()
        assert out.type_name == 'double'
        np.testing.assert_allclose(out.get_data(), [0, 2])
        assert Matrix([1, 1], [1], 'single').cos().type_name == 'single'

    def test_real_only(self, complex_matrix):
        """Test functions without complex support raise."""
        with pytest.raises(ComplexUnsupportedError):
            complex_matrix.log()
        with pytest.raises(ComplexUnsupportedError):
            complex_matrix.sign()

    def test_binary_functions(self):
        """Test atan2 and hypot with scalar expansion."""
        y = Matrix([2, 1], [1, -1])
        np.testing.assert_allclose(y.atan2(1).get_data(), [np.pi / 4, -np.pi / 4])
        np.testing.assert_allclose(Matrix([1, 1], [3]).hypot(4).get_data(), [5])

    def test_predicates(self):
        """Test isnan/isinf/isfinite."""
        m = Matrix([3, 1], [np.nan, np.inf, 1])
        np.testing.assert_array_equal(m.isnan().get_data(), [1, 0, 0])
        np.testing.assert_array_equal(m.isinf().get_data(), [0, 1, 0])
        np.testing.assert_array_equal(m.isfinite().get_data(), [0, 0, 1])
        assert m.isnan().is_logical()

    def test_conj(self, complex_matrix):
        """Test conjugation negates the imaginary half."""
        np.testing.assert_array_equal(complex_matrix.conj().get_imag_data(), [-5, -6, -7, -8])

    def test_arrayfun(self):
        """Test applying a Python callable."""
        out = Matrix([2, 1], [1, 4]).arrayfun(lambda v: v ** 0.5)
        np.testing.assert_array_equal(out.get_data(), [1, 2])
        out = elementwise.arrayfun(Matrix([1, 1], [2]), lambda v: v * 1j)
        assert out.value(0) == 2j

    def test_module_functions(self, small_matrix):
        """Test the functional forms."""
        np.testing.assert_allclose(ndmat.math.sin(small_matrix).get_data(), np.sin(np.arange(1, 7)))
