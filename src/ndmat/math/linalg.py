"""
Linear algebra helpers.

Small 2-D utilities on top of the dense Matrix: transposition, matrix
product, vector norms, trace, triangular parts and diagonals, plus
``bsxfun`` for binary operations with singleton-dimension expansion.

Design Philosophy:
    This is not a linear-algebra suite. Everything here is either a
    structural transform or a single numpy call on the materialized 2-D
    array; there are no decompositions or solvers.

Example:
    >>> A = Matrix([2, 2], [1, 2, 3, 4])
    >>> A.transpose().get_data()
    array([1., 3., 2., 4.])
    >>> A.mtimes(eye(2)).get_data()
    array([1., 2., 3., 4.])
    >>> bsxfun('minus', A, A.mean(0)).get_data()
    array([-0.5,  0.5, -0.5,  0.5])
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Callable, Optional, Union

import numpy as np

from .._dtypes import DType
from ..core.error import (
    BroadcastShapeError,
    ComplexUnsupportedError,
    InvalidParameterError,
    InvalidShapeError,
    ShapeMismatchError,
)
from ..dense._matrix import Matrix, to_matrix
from ..dense._tools import is_integer
from .arithmetic import _COMPARISONS, _OPERATIONS, _result_type

logger = logging.getLogger("ndmat.math")


def _check_2d(mat: Matrix, name: str) -> None:
    if not mat.is_matrix():
        raise InvalidShapeError(f"{name}: matrix of size {mat.size} is not 2-D")


def _complex_array(mat: Matrix) -> np.ndarray:
    re, im = mat._parts_float()
    flat = re if im is None else re + 1j * im
    return flat.reshape(mat.size, order='F')


def _from_complex_array(like: Matrix, arr: np.ndarray, dtype: Optional[DType] = None) -> Matrix:
    arr = np.asarray(arr)
    size = [1, 1] if arr.ndim == 0 else list(arr.shape)
    flat = arr.ravel(order='F')
    if np.iscomplexobj(flat):
        return like._new(size, flat.real, flat.imag, dtype)
    return like._new(size, flat, dtype=dtype)


# =============================================================================
# Transposition and Products
# =============================================================================

def transpose(mat: Matrix) -> Matrix:
    """Swap the first two dimensions of a 2-D matrix."""
    _check_2d(mat, 'transpose')
    return mat.permute([1, 0])


def ctranspose(mat: Matrix) -> Matrix:
    """Conjugate transpose."""
    return transpose(mat).conj()


def mtimes(a: Any, b: Any) -> Matrix:
    """
    Matrix product. A scalar operand falls back to the elementwise product.

    Raises:
        InvalidShapeError: If an operand is not 2-D.
        ShapeMismatchError: If the inner dimensions differ.
    """
    base = a if isinstance(a, Matrix) else b
    config = base.config if isinstance(base, Matrix) else None
    a = to_matrix(a, config)
    b = to_matrix(b, config)
    if a.is_scalar() or b.is_scalar():
        from .arithmetic import times
        return times(a, b)
    _check_2d(a, 'mtimes')
    _check_2d(b, 'mtimes')
    if a.get_size(1) != b.get_size(0):
        raise ShapeMismatchError(
            f"mtimes: inner dimensions of {a.size} and {b.size} differ"
        )
    out = _complex_array(a) @ _complex_array(b)
    dtype = a.dtype if a.is_float() else a.config.default_type
    return _from_complex_array(a, out, dtype)


# =============================================================================
# Scalar Summaries
# =============================================================================

def norm(mat: Matrix, p: Union[int, float, str] = 2) -> float:
    """
    Vector p-norm of all elements.

    Args:
        p: 1, 2, ``inf``, ``-inf``, ``'fro'`` or any positive number.

    Raises:
        InvalidParameterError: For any other ``p``.
    """
    values = np.abs(_complex_array(mat).ravel())
    if isinstance(p, str):
        if p.lower() != 'fro':
            raise InvalidParameterError(f"norm: unknown norm '{p}'")
        p = 2
    if not isinstance(p, numbers.Real) or isinstance(p, bool) or math.isnan(p):
        raise InvalidParameterError(f"norm: invalid order {p!r}")
    if values.size == 0:
        return 0.0
    if p == math.inf:
        return float(values.max())
    if p == -math.inf:
        return float(values.min())
    if p <= 0:
        raise InvalidParameterError(f"norm: order must be positive, got {p}")
    if p == 1:
        return float(values.sum())
    if p == 2:
        return float(np.sqrt(np.sum(values * values)))
    return float(np.sum(values ** p) ** (1.0 / p))


def trace(mat: Matrix):
    """Sum of the main diagonal (Python scalar)."""
    _check_2d(mat, 'trace')
    total = np.trace(_complex_array(mat))
    if np.iscomplexobj(total):
        return complex(total)
    return float(total)


# =============================================================================
# Triangles and Diagonals
# =============================================================================

def triu(mat: Matrix, k: int = 0) -> Matrix:
    """Upper triangular part: elements on and above diagonal ``k``."""
    _check_2d(mat, 'triu')
    return _from_complex_array(mat, np.triu(_complex_array(mat), k))


def tril(mat: Matrix, k: int = 0) -> Matrix:
    """Lower triangular part: elements on and below diagonal ``k``."""
    _check_2d(mat, 'tril')
    return _from_complex_array(mat, np.tril(_complex_array(mat), k))


def diag(mat: Matrix, k: int = 0) -> Matrix:
    """
    Diagonal of a matrix, or the diagonal matrix of a vector.

    For a 2-D non-vector matrix, returns diagonal ``k`` as a column. For a
    vector, builds the square matrix with the vector on diagonal ``k``.

    Raises:
        InvalidParameterError: If diagonal ``k`` is empty.
    """
    if mat.is_vector():
        from ..dense._construct import diag as build_diag
        return build_diag(mat, k)
    _check_2d(mat, 'diag')
    if not is_integer(k):
        raise InvalidParameterError(f"diag: shift must be an integer, got {k!r}")
    m, n = mat.size
    length = min(m, n - k) if k >= 0 else min(m + k, n)
    if length <= 0:
        raise InvalidParameterError(f"diag: diagonal {k} is empty for size {mat.size}")
    return _from_complex_array(mat, np.diagonal(_complex_array(mat), int(k)).reshape(-1, 1))


# =============================================================================
# Singleton Expansion
# =============================================================================

def _bsx_reduce(name: str) -> Callable:
    fn = np.minimum if name == 'min' else np.maximum
    return lambda ar, ai, br, bi: (fn(ar, br), None)


def bsxfun(fn: Union[str, Callable], a: Any, b: Any) -> Matrix:
    """
    Binary operation with singleton expansion.

    Each dimension of the two operands must be equal or 1 in one of them;
    unit dimensions are repeated to match.

    Args:
        fn: 'plus', 'minus', 'times', 'rdivide', 'ldivide', 'power',
            'min', 'max', 'hypot', 'atan2', 'eq', 'ne', 'lt', 'le', 'gt',
            'ge', 'and', 'or', or a callable taking two numpy arrays.
        a: First operand.
        b: Second operand.

    Raises:
        BroadcastShapeError: If a dimension pair is neither equal nor 1.
    """
    base = a if isinstance(a, Matrix) else b
    config = base.config if isinstance(base, Matrix) else None
    a = to_matrix(a, config)
    b = to_matrix(b, config)

    ndims = max(a.ndims(), b.ndims())
    sa = a.size + [1] * (ndims - a.ndims())
    sb = b.size + [1] * (ndims - b.ndims())
    for d, (x, y) in enumerate(zip(sa, sb)):
        if x != y and x != 1 and y != 1:
            raise BroadcastShapeError(
                f"bsxfun: dimension {d} has lengths {x} and {y}"
            )

    def parts(mat, shape):
        re, im = mat._parts_float()
        return re.reshape(shape, order='F'), (None if im is None else im.reshape(shape, order='F'))

    ar, ai = parts(a, sa)
    br, bi = parts(b, sb)
    dtype = _result_type(a)

    if callable(fn):
        left = ar if ai is None else ar + 1j * ai
        right = br if bi is None else br + 1j * bi
        out = np.asarray(fn(left, right))
        im = out.imag if np.iscomplexobj(out) else None
        re = out.real if im is not None else out
        if re.dtype == np.bool_:
            dtype = DType.LOGICAL
    else:
        name = fn.lower()
        if name in _COMPARISONS or name in ('min', 'max', 'hypot', 'atan2'):
            if ai is not None or bi is not None:
                raise ComplexUnsupportedError(f"bsxfun: '{name}' does not accept complex operands")
        if name in _COMPARISONS:
            with np.errstate(invalid='ignore'):
                re, im = _COMPARISONS[name](ar, br), None
            dtype = DType.LOGICAL
        elif name in ('min', 'max'):
            re, im = _bsx_reduce(name)(ar, ai, br, bi)
        elif name == 'hypot':
            re, im = np.hypot(ar, br), None
            dtype = a.dtype if a.is_float() else a.config.default_type
        elif name == 'atan2':
            re, im = np.arctan2(ar, br), None
            dtype = a.dtype if a.is_float() else a.config.default_type
        elif name == 'ldivide':
            with np.errstate(divide='ignore', invalid='ignore'):
                re, im = _OPERATIONS['rdivide'][(bi is not None, ai is not None)](br, bi, ar, ai)
        elif name in _OPERATIONS:
            with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
                re, im = _OPERATIONS[name][(ai is not None, bi is not None)](ar, ai, br, bi)
        else:
            raise InvalidParameterError(f"bsxfun: unknown function '{fn}'")

    shape = np.broadcast_shapes(tuple(sa), tuple(sb))
    re = np.broadcast_to(re, shape)
    if im is not None:
        im = np.broadcast_to(im, shape).ravel(order='F')
    logger.debug("bsxfun %s -> size %s", fn, list(shape))
    return a._new(list(shape), re.ravel(order='F'), im, dtype)


__all__ = [
    "transpose",
    "ctranspose",
    "mtimes",
    "norm",
    "trace",
    "triu",
    "tril",
    "diag",
    "bsxfun",
]
