"""
Elementwise mathematical functions.

Every function returns a new Matrix of the same size. Functions with a
floating-point result return the receiver's kind when it is float and
the configured default type otherwise; ``abs``, ``sign`` and the rounding
functions keep the receiver's kind.

Complex input is accepted by ``abs``, ``sqrt``, ``exp``, ``conj``,
``floor``, ``ceil``, ``round`` and the ``is*`` predicates; the other
functions raise ComplexUnsupportedError.
"""

from __future__ import annotations

import builtins
from typing import Any, Callable

import numpy as np

from .._dtypes import DType
from ..core.error import ComplexUnsupportedError
from ..dense._matrix import Matrix, to_matrix
from .arithmetic import _broadcast_to, _check_operands


def _float_type(mat: Matrix) -> DType:
    return mat.dtype if mat.is_float() else mat.config.default_type


def _real_only(mat: Matrix, name: str) -> np.ndarray:
    if not mat.is_real():
        raise ComplexUnsupportedError(f"{name}: complex matrices are not supported")
    return mat.get_real_data().astype(np.float64)


def _unary(name: str, fn: Callable[[np.ndarray], np.ndarray]) -> Callable[[Matrix], Matrix]:
    """Wrap a real numpy function as a float-valued Matrix function."""
    def apply(mat: Matrix) -> Matrix:
        values = _real_only(mat, name)
        with np.errstate(divide='ignore', invalid='ignore'):
            out = fn(values)
        return mat._new(mat.size, out, dtype=_float_type(mat))
    apply.__name__ = name
    apply.__doc__ = f"Elementwise ``{name}`` (real input)."
    return apply


def _binary(name: str, fn: Callable[[np.ndarray, np.ndarray], np.ndarray]) -> Callable[[Any, Any], Matrix]:
    def apply(a: Any, b: Any) -> Matrix:
        base = a if isinstance(a, Matrix) else b
        config = base.config if isinstance(base, Matrix) else None
        a = to_matrix(a, config)
        b = to_matrix(b, config)
        size = _check_operands(a, b, in_place=False)
        out = fn(_real_only(a, name), _real_only(b, name))
        out = _broadcast_to(np.asarray(out), int(np.prod(size)))
        base = base if isinstance(base, Matrix) else a
        return Matrix._from_parts(size, out, None, _float_type(base), base.config)
    apply.__name__ = name
    apply.__doc__ = f"Elementwise ``{name}`` of two real operands (scalar expansion allowed)."
    return apply


# =============================================================================
# Float-valued Functions
# =============================================================================

log = _unary('log', np.log)
log2 = _unary('log2', np.log2)
log10 = _unary('log10', np.log10)
cos = _unary('cos', np.cos)
sin = _unary('sin', np.sin)
tan = _unary('tan', np.tan)
acos = _unary('acos', np.arccos)
asin = _unary('asin', np.arcsin)
atan = _unary('atan', np.arctan)

atan2 = _binary('atan2', np.arctan2)
hypot = _binary('hypot', np.hypot)


def sqrt(mat: Matrix) -> Matrix:
    """Square root; negative real values give NaN, complex input is allowed."""
    if mat.is_real():
        with np.errstate(invalid='ignore'):
            out = np.sqrt(mat.get_real_data().astype(np.float64))
        return mat._new(mat.size, out, dtype=_float_type(mat))
    re, im = mat._parts_float()
    z = np.sqrt(re + 1j * im)
    return mat._new(mat.size, z.real, z.imag, _float_type(mat))


def exp(mat: Matrix) -> Matrix:
    re, im = mat._parts_float()
    with np.errstate(over='ignore'):
        mag = np.exp(re)
    if im is None:
        return mat._new(mat.size, mag, dtype=_float_type(mat))
    return mat._new(mat.size, mag * np.cos(im), mag * np.sin(im), _float_type(mat))


def abs(mat: Matrix) -> Matrix:
    """Absolute value (modulus for complex input); keeps the kind."""
    re, im = mat._parts_float()
    out = np.abs(re) if im is None else np.hypot(re, im)
    dtype = mat.dtype if not mat.is_logical() else mat.config.default_type
    return mat._new(mat.size, out, dtype=dtype)


def sign(mat: Matrix) -> Matrix:
    values = _real_only(mat, 'sign')
    dtype = mat.dtype if not mat.is_logical() else mat.config.default_type
    return mat._new(mat.size, np.sign(values), dtype=dtype)


def conj(mat: Matrix) -> Matrix:
    re, im = mat._parts()
    return mat._new(mat.size, re, None if im is None else -im.astype(np.float64))


# =============================================================================
# Rounding
# =============================================================================

def _round_half_away(values: np.ndarray) -> np.ndarray:
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


def _rounding(name: str, fn: Callable[[np.ndarray], np.ndarray]) -> Callable[[Matrix], Matrix]:
    def apply(mat: Matrix) -> Matrix:
        re, im = mat._parts_float()
        return mat._new(mat.size, fn(re), None if im is None else fn(im))
    apply.__name__ = name
    apply.__doc__ = f"Elementwise ``{name}`` of real and imaginary parts; keeps the kind."
    return apply


floor = _rounding('floor', np.floor)
ceil = _rounding('ceil', np.ceil)
round = _rounding('round', _round_half_away)


# =============================================================================
# Predicates
# =============================================================================

def _predicate(name: str, fn: Callable[[np.ndarray], np.ndarray], combine) -> Callable[[Matrix], Matrix]:
    def apply(mat: Matrix) -> Matrix:
        re, im = mat._parts_float()
        out = fn(re) if im is None else combine(fn(re), fn(im))
        return mat._new(mat.size, out, dtype=DType.LOGICAL)
    apply.__name__ = name
    apply.__doc__ = f"Logical matrix of ``{name}``."
    return apply


isnan = _predicate('isnan', np.isnan, np.logical_or)
isinf = _predicate('isinf', np.isinf, np.logical_or)
isfinite = _predicate('isfinite', np.isfinite, np.logical_and)


# =============================================================================
# Generic Application
# =============================================================================

def arrayfun(mat: Matrix, fn: Callable[[Any], Any]) -> Matrix:
    """
    Apply a Python callable to every element (column-major order).

    The result has the configured default type and is complex when any
    returned value is complex.

    Example:
        >>> arrayfun(Matrix([2, 1], [1, 4]), lambda v: v ** 0.5).get_data()
        array([1., 2.])
    """
    values = [fn(v) for v in mat.tolist()]
    arr = np.asarray(values) if values else np.zeros(0)
    dtype = mat.config.default_type
    if np.iscomplexobj(arr) and builtins.any(v.imag != 0 for v in arr):
        return mat._new(mat.size, arr.real, arr.imag, dtype)
    return mat._new(mat.size, np.real(arr).astype(np.float64), dtype=dtype)


__all__ = [
    "abs",
    "sign",
    "sqrt",
    "exp",
    "log",
    "log2",
    "log10",
    "cos",
    "sin",
    "tan",
    "acos",
    "asin",
    "atan",
    "atan2",
    "hypot",
    "floor",
    "ceil",
    "round",
    "conj",
    "isnan",
    "isinf",
    "isfinite",
    "arrayfun",
]
