"""
Broadcast arithmetic and comparison engine.

Binary operators combine a Matrix with a scalar or with a Matrix of the
same size (trailing unit dimensions ignored per configuration). Each
operator is a table of four closed-form kernels keyed by
``(left_is_complex, right_is_complex)``; every kernel maps the real and
imaginary halves ``(ar, ai, br, bi)`` to ``(re, im)``, with ``im`` None
for a real result.

Copying forms (``plus(A, B)``, ``A + B``) return a new Matrix whose kind
is the left matrix's (the right one's when the left operand is a plain
number). In-place forms (``A.plus(B)``, ``A += B``) overwrite the
receiver's storage and keep its kind.

Example:
    >>> A = Matrix([2, 2], [1, 2, 3, 4])
    >>> (A * 2).get_data()
    array([2., 4., 6., 8.])
    >>> A.plus(1).get_data()            # in place
    array([2., 3., 4., 5.])
    >>> (A > 3).type_name
    'logical'
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Callable, Dict, Optional, Tuple

import numpy as np

from .._dtypes import DType
from ..core.error import (
    BroadcastShapeError,
    ComplexUnsupportedError,
    MatrixNotImplementedError,
    check_mode,
)
from ..dense._matrix import Matrix, to_matrix
from ..dense._tools import check_size_equals

logger = logging.getLogger("ndmat.math")

Parts = Tuple[np.ndarray, Optional[np.ndarray]]
Kernel = Callable[[np.ndarray, Optional[np.ndarray], np.ndarray, Optional[np.ndarray]], Parts]


# =============================================================================
# Operator Tables
# =============================================================================

def _not_implemented(name: str) -> Kernel:
    def kernel(ar, ai, br, bi):
        raise MatrixNotImplementedError(f"{name}: complex exponent is not implemented")
    return kernel


def _complex_power(ar, ai, br, bi):
    r = np.power(np.hypot(ar, ai), br)
    theta = np.arctan2(ai, ar) * br
    return r * np.cos(theta), r * np.sin(theta)


def _divide_by_complex(ar, ai, br, bi):
    c = 1.0 / (br * br + bi * bi)
    if ai is None:
        return ar * br * c, -ar * bi * c
    return (ar * br + ai * bi) * c, (ai * br - ar * bi) * c


_OPERATIONS: Dict[str, Dict[Tuple[bool, bool], Kernel]] = {
    'plus': {
        (False, False): lambda ar, ai, br, bi: (ar + br, None),
        (False, True): lambda ar, ai, br, bi: (ar + br, bi + 0 * ar),
        (True, False): lambda ar, ai, br, bi: (ar + br, ai + 0 * br),
        (True, True): lambda ar, ai, br, bi: (ar + br, ai + bi),
    },
    'minus': {
        (False, False): lambda ar, ai, br, bi: (ar - br, None),
        (False, True): lambda ar, ai, br, bi: (ar - br, -bi + 0 * ar),
        (True, False): lambda ar, ai, br, bi: (ar - br, ai + 0 * br),
        (True, True): lambda ar, ai, br, bi: (ar - br, ai - bi),
    },
    'times': {
        (False, False): lambda ar, ai, br, bi: (ar * br, None),
        (False, True): lambda ar, ai, br, bi: (ar * br, ar * bi),
        (True, False): lambda ar, ai, br, bi: (ar * br, ai * br),
        (True, True): lambda ar, ai, br, bi: (ar * br - ai * bi, ar * bi + ai * br),
    },
    'rdivide': {
        (False, False): lambda ar, ai, br, bi: (ar / br, None),
        (False, True): _divide_by_complex,
        (True, False): lambda ar, ai, br, bi: (ar / br, ai / br),
        (True, True): _divide_by_complex,
    },
    'power': {
        (False, False): lambda ar, ai, br, bi: (np.power(ar, br), None),
        (False, True): _not_implemented('power'),
        (True, False): _complex_power,
        (True, True): _not_implemented('power'),
    },
}

_COMPARISONS: Dict[str, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    'eq': np.equal,
    'ne': np.not_equal,
    'lt': np.less,
    'le': np.less_equal,
    'gt': np.greater,
    'ge': np.greater_equal,
    'and': lambda a, b: (a != 0) & (b != 0),
    'or': lambda a, b: (a != 0) | (b != 0),
}


# =============================================================================
# Operand Handling
# =============================================================================

def _check_operands(a: Matrix, b: Matrix, in_place: bool) -> list:
    """Result size of ``a op b``, or BroadcastShapeError."""
    if b.numel() == 1:
        return a.size
    if a.numel() == 1 and not in_place:
        return b.size
    if check_size_equals(a.size, b.size, a.config.ignore_trailing_dims):
        return a.size
    raise BroadcastShapeError(f"Operands of size {a.size} and {b.size} do not broadcast")


def _apply(name: str, a: Matrix, b: Matrix) -> Parts:
    """Run the kernel of ``name`` on float64 copies of both operands."""
    ar, ai = a._parts_float()
    br, bi = b._parts_float()
    if name == 'ldivide':
        name = 'rdivide'
        ar, ai, br, bi = br, bi, ar, ai
    kernel = _OPERATIONS[name][(ai is not None, bi is not None)]
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        re, im = kernel(ar, ai, br, bi)
    return np.asarray(re, dtype=np.float64), (None if im is None else np.asarray(im, dtype=np.float64))


def _result_type(mat: Matrix) -> DType:
    return mat.config.default_type if mat.is_logical() else mat.dtype


def _broadcast_to(values: np.ndarray, n: int) -> np.ndarray:
    return np.broadcast_to(values, (n,)) if values.size == 1 and n != 1 else values


# =============================================================================
# Binary Arithmetic
# =============================================================================

def binary(name: str, a: Any, b: Any) -> Matrix:
    """
    Copying form of operator ``name``.

    Args:
        name: One of 'plus', 'minus', 'times', 'rdivide', 'ldivide', 'power'.
        a: Left operand (Matrix, array-like or number).
        b: Right operand.

    Raises:
        BroadcastShapeError: If neither operand is scalar and sizes differ.
        MatrixNotImplementedError: For a complex exponent.
    """
    check_mode(name, tuple(_OPERATIONS) + ('ldivide',), "binary")
    base = a if isinstance(a, Matrix) else (b if isinstance(b, Matrix) else None)
    config = base.config if base is not None else None
    a = to_matrix(a, config)
    b = to_matrix(b, config)
    size = _check_operands(a, b, in_place=False)
    re, im = _apply(name, a, b)
    n = int(np.prod(size))
    re = _broadcast_to(re, n)
    if im is not None:
        im = _broadcast_to(im, n)
    base = base if base is not None else a
    return Matrix._from_parts(size, re, im, _result_type(base), base.config)


def plus(a: Any, b: Any) -> Matrix:
    return binary('plus', a, b)


def minus(a: Any, b: Any) -> Matrix:
    return binary('minus', a, b)


def times(a: Any, b: Any) -> Matrix:
    return binary('times', a, b)


def rdivide(a: Any, b: Any) -> Matrix:
    """Elementwise ``a ./ b``."""
    return binary('rdivide', a, b)


def ldivide(a: Any, b: Any) -> Matrix:
    """Elementwise ``a .\\ b``, that is ``b ./ a``."""
    return binary('ldivide', a, b)


def power(a: Any, b: Any) -> Matrix:
    return binary('power', a, b)


# =============================================================================
# In-place Arithmetic
# =============================================================================

def inplace(name: str, mat: Matrix, other: Any) -> Matrix:
    """
    In-place form of operator ``name``: overwrite ``mat`` and return it.

    The receiver keeps its element kind; a logical receiver is first
    promoted to the configured default type. A complex result turns the
    receiver complex.

    Raises:
        BroadcastShapeError: If ``other`` is neither scalar nor of the same size.
    """
    other = to_matrix(other, mat.config)
    _check_operands(mat, other, in_place=True)
    re, im = _apply(name, mat, other)

    dtype = mat.dtype
    if mat.is_logical():
        dtype = mat.config.default_type
        warnings.warn(
            f"In-place {name} promotes a logical matrix to '{dtype.type_name}'",
            stacklevel=3,
        )
    n = mat.numel()
    mat._set_storage(
        _broadcast_to(re, n),
        None if im is None else _broadcast_to(im, n),
        dtype,
    )
    return mat


# =============================================================================
# Unary Operators
# =============================================================================

def uminus(mat: Matrix) -> Matrix:
    """Negation (copy)."""
    re, im = mat._parts_float()
    return mat._new(mat.size, -re, None if im is None else -im, _result_type(mat))


def neg(mat: Matrix) -> Matrix:
    """
    Logical not: 1 where the element is zero, 0 elsewhere.

    Raises:
        ComplexUnsupportedError: If the matrix is complex.
    """
    if not mat.is_real():
        raise ComplexUnsupportedError("neg: complex matrices are not supported")
    return mat._new(mat.size, mat.get_real_data() == 0, dtype=DType.LOGICAL)


# =============================================================================
# Comparisons
# =============================================================================

def compare(name: str, a: Any, b: Any) -> Matrix:
    """
    Elementwise comparison or boolean combination; returns a logical matrix.

    Args:
        name: One of 'eq', 'ne', 'lt', 'le', 'gt', 'ge', 'and', 'or'.

    Raises:
        ComplexUnsupportedError: If an operand is complex.
        BroadcastShapeError: If neither operand is scalar and sizes differ.
    """
    name = check_mode(name, tuple(_COMPARISONS), "compare")
    base = a if isinstance(a, Matrix) else b
    config = base.config if isinstance(base, Matrix) else None
    a = to_matrix(a, config)
    b = to_matrix(b, config)
    if not a.is_real() or not b.is_real():
        raise ComplexUnsupportedError(f"{name}: complex operands are not supported")
    size = _check_operands(a, b, in_place=False)
    with np.errstate(invalid='ignore'):
        out = _COMPARISONS[name](
            a.get_real_data().astype(np.float64),
            b.get_real_data().astype(np.float64),
        )
    out = _broadcast_to(np.asarray(out), int(np.prod(size)))
    return Matrix._from_parts(size, out, None, DType.LOGICAL, a.config)


__all__ = [
    "binary",
    "plus",
    "minus",
    "times",
    "rdivide",
    "ldivide",
    "power",
    "inplace",
    "uminus",
    "neg",
    "compare",
]
