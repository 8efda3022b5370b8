"""
Dimension-aware reductions.

Every fold is expressed through ``apply_dim``: the matrix is viewed with
the reduced dimension permuted to the front, the view's offsets are
gathered into an ``(L, F)`` block (one column per fiber of length ``L``)
and a column-wise numpy function is applied.

- ``dim=None`` folds all elements in view order into a ``1x1`` result
  (cumulative folds instead pick the first non-singleton dimension)
- ``dim=d`` folds each fiber along ``d``; the result has the input's size
  with dimension ``d`` collapsed to 1

Design Philosophy:
    Global folds also go through the View, so reducing a permuted or
    selected matrix gives the same result as reducing its materialized
    copy.

Example:
    >>> m = Matrix([2, 3], [1, 2, 3, 4, 5, 6])
    >>> m.sum(0).get_data()
    array([ 3.,  7., 11.])
    >>> m.sum().get_data_scalar()
    21.0
    >>> m.argmax(1).get_data()       # linear indices of row maxima
    array([4, 5], dtype=uint32)
"""

from __future__ import annotations

import builtins
import logging
from typing import Callable, List, Optional, Tuple

import numpy as np

from .._dtypes import DType
from ..core.error import (
    ComplexUnsupportedError,
    InvalidParameterError,
    InvalidShapeError,
    OutOfBoundsError,
)
from ..dense._matrix import Matrix
from ..dense._tools import is_integer, numel

logger = logging.getLogger("ndmat.statistics")


# =============================================================================
# Fiber Gathering
# =============================================================================

def _check_dim(dim) -> Optional[int]:
    if dim is None:
        return None
    if not is_integer(dim, 0):
        raise OutOfBoundsError(f"Dimension must be a non-negative integer, got {dim!r}")
    return int(dim)


def first_non_singleton(mat: Matrix) -> int:
    """First dimension of length other than 1 (0 when there is none)."""
    for d, s in enumerate(mat.size):
        if s != 1:
            return d
    return 0


def fiber_offsets(mat: Matrix, dim: Optional[int]) -> Tuple[np.ndarray, List[int]]:
    """
    Storage offsets arranged as an ``(L, F)`` block, and the reduced size.

    Column ``f`` holds the offsets of fiber ``f`` (fibers in column-major
    order of the remaining dimensions).
    """
    if dim is None:
        n = mat.numel()
        return mat.get_view().offsets().reshape((n, 1)), [1, 1]
    ndims = builtins.max(mat.ndims(), dim + 1)
    order = [dim] + [d for d in range(ndims) if d != dim]
    view = mat.get_view().permute(order)
    length = mat.get_size(dim)
    count = numel([mat.get_size(d) for d in order[1:]])
    offsets = view.offsets().reshape((length, count), order='F')
    out_size = [mat.get_size(d) for d in range(ndims)]
    out_size[dim] = 1
    return offsets, out_size


def _gather(mat: Matrix, offsets: np.ndarray) -> np.ndarray:
    """Values at ``offsets`` (float64, or complex128 for a complex matrix)."""
    re, im = mat._parts_float()
    if im is None:
        return re[offsets]
    return re[offsets] + 1j * im[offsets]


def _float_type(mat: Matrix) -> DType:
    return mat.dtype if mat.is_float() else mat.config.default_type


def _build(mat: Matrix, size: List[int], values: np.ndarray, dtype: DType) -> Matrix:
    values = np.asarray(values).ravel(order='F')
    if np.iscomplexobj(values):
        return mat._new(size, values.real, values.imag, dtype)
    return mat._new(size, values, dtype=dtype)


def apply_dim(
    mat: Matrix,
    fn: Callable[[np.ndarray], np.ndarray],
    dim: Optional[int] = None,
    dtype: Optional[DType] = None,
) -> Matrix:
    """
    Apply a column-wise function to every fiber along ``dim``.

    Args:
        mat: Input matrix.
        fn: Receives an ``(L, F)`` array of fiber values (complex for a
            complex matrix) and returns either ``(F,)`` values (a fold) or
            an ``(L, F)`` array (a scan, written back in place of each fiber).
        dim: Dimension to fold, or None for all elements.
        dtype: Result kind; the float kind of ``mat`` when omitted.

    Example:
        >>> apply_dim(m, lambda v: v.max(axis=0) - v.min(axis=0), 0)   # range
    """
    dim = _check_dim(dim)
    offsets, out_size = fiber_offsets(mat, dim)
    values = _gather(mat, offsets)
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        result = np.asarray(fn(values))
    dtype = dtype or _float_type(mat)

    if result.ndim == 2 and result.shape == values.shape:
        out = np.zeros(mat.numel(), dtype=result.dtype)
        out[offsets.ravel(order='F')] = result.ravel(order='F')
        return _build(mat, mat.size, out, dtype)
    return _build(mat, out_size, result, dtype)


def _scan(mat: Matrix, fn: Callable[[np.ndarray], np.ndarray], dim: Optional[int]) -> Matrix:
    """Cumulative fold along ``dim``; output has the input's size."""
    dim = _check_dim(dim)
    if dim is None:
        dim = first_non_singleton(mat)
    return apply_dim(mat, fn, dim)


def _real_only(mat: Matrix, name: str) -> None:
    if not mat.is_real():
        raise ComplexUnsupportedError(f"{name}: complex matrices are not supported")


# =============================================================================
# Sums and Products
# =============================================================================

def sum(mat: Matrix, dim: Optional[int] = None) -> Matrix:
    """Sum along ``dim`` (all elements when None)."""
    return apply_dim(mat, lambda v: v.sum(axis=0), dim)


def prod(mat: Matrix, dim: Optional[int] = None) -> Matrix:
    return apply_dim(mat, lambda v: v.prod(axis=0), dim)


def mean(mat: Matrix, dim: Optional[int] = None) -> Matrix:
    """Arithmetic mean; NaN for an empty fiber."""
    return apply_dim(mat, lambda v: v.sum(axis=0) / v.shape[0], dim)


def cumsum(mat: Matrix, dim: Optional[int] = None) -> Matrix:
    """Prefix sums along ``dim`` (first non-singleton dimension when None)."""
    return _scan(mat, lambda v: np.cumsum(v, axis=0), dim)


def cumprod(mat: Matrix, dim: Optional[int] = None) -> Matrix:
    return _scan(mat, lambda v: np.cumprod(v, axis=0), dim)


# =============================================================================
# Extrema
# =============================================================================

def _best_index(values: np.ndarray, largest: bool) -> np.ndarray:
    """Row of the extremum in each column; NaN ignored unless the column is all NaN."""
    key = np.abs(values) if np.iscomplexobj(values) else values
    if largest:
        return np.argmax(np.where(np.isnan(key), -np.inf, key), axis=0)
    return np.argmin(np.where(np.isnan(key), np.inf, key), axis=0)


def _extremum(mat: Matrix, dim: Optional[int], largest: bool, name: str) -> Tuple[Matrix, Matrix]:
    dim = _check_dim(dim)
    offsets, out_size = fiber_offsets(mat, dim)
    if offsets.shape[0] == 0:
        raise InvalidShapeError(f"{name}: cannot reduce an empty dimension")
    values = _gather(mat, offsets)
    rows = _best_index(values, largest)
    cols = np.arange(values.shape[1])
    best = values[rows, cols]
    index = offsets[rows, cols]
    return (
        _build(mat, out_size, best, mat.dtype),
        mat._new(out_size, index, dtype=DType.UINT32),
    )


def min(mat: Matrix, dim: Optional[int] = None) -> Matrix:
    """
    Smallest element along ``dim``; keeps the kind.

    NaN values are ignored unless a fiber is entirely NaN. Complex values
    compare by modulus.

    Raises:
        InvalidShapeError: If the reduced dimension is empty.
    """
    return _extremum(mat, dim, False, 'min')[0]


def max(mat: Matrix, dim: Optional[int] = None) -> Matrix:
    return _extremum(mat, dim, True, 'max')[0]


def argmin(mat: Matrix, dim: Optional[int] = None) -> Matrix:
    """Linear storage index (``uint32``) of the first minimum of each fiber."""
    return _extremum(mat, dim, False, 'argmin')[1]


def argmax(mat: Matrix, dim: Optional[int] = None) -> Matrix:
    return _extremum(mat, dim, True, 'argmax')[1]


def amin(mat: Matrix, dim: Optional[int] = None) -> Tuple[Matrix, Matrix]:
    """Minimum values and their linear indices."""
    return _extremum(mat, dim, False, 'amin')


def amax(mat: Matrix, dim: Optional[int] = None) -> Tuple[Matrix, Matrix]:
    return _extremum(mat, dim, True, 'amax')


# =============================================================================
# Dispersion
# =============================================================================

def variance(mat: Matrix, dim: Optional[int] = None, norm: int = 0) -> Matrix:
    """
    Variance along ``dim`` (two-pass: mean then squared deviations).

    Args:
        norm: 0 divides by ``L - 1`` (``1`` when ``L == 1``), 1 divides by ``L``.

    Raises:
        InvalidParameterError: If ``norm`` is not 0 or 1.
        ComplexUnsupportedError: If the matrix is complex.
    """
    _real_only(mat, 'variance')
    if norm not in (0, 1) or isinstance(norm, bool):
        raise InvalidParameterError(f"variance: norm must be 0 or 1, got {norm!r}")

    def fold(v):
        n = v.shape[0]
        mu = v.sum(axis=0) / n
        dev = v - mu
        ssd = (dev * dev).sum(axis=0)
        return ssd / (n if norm == 1 else builtins.max(n - 1, 1))

    return apply_dim(mat, fold, dim)


def std(mat: Matrix, dim: Optional[int] = None, norm: int = 0) -> Matrix:
    """Standard deviation (square root of ``variance``)."""
    out = variance(mat, dim, norm)
    out._set_storage(np.sqrt(out.get_real_data().astype(np.float64)), None)
    return out


__all__ = [
    "apply_dim",
    "fiber_offsets",
    "first_non_singleton",
    "sum",
    "prod",
    "mean",
    "cumsum",
    "cumprod",
    "min",
    "max",
    "argmin",
    "argmax",
    "amin",
    "amax",
    "variance",
    "std",
]
