"""
Sorting along a dimension.

``sort`` reorders values in place, ``asort`` returns the permutation
(fiber-local indices, ``uint32``) and ``median`` folds sorted fibers.

Sorting is stable: equal keys keep increasing index order in both
'ascend' and 'descend' modes. NaN values go last when ascending and
first when descending.

Example:
    >>> v = Matrix([1, 4], [3, 1, 2, 1])
    >>> v.asort().get_data()
    array([1, 3, 2, 0], dtype=uint32)
    >>> v.asort(mode='descend').get_data()
    array([0, 2, 1, 3], dtype=uint32)
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .._dtypes import DType
from ..core.error import (
    ComplexUnsupportedError,
    InvalidShapeError,
    check_mode,
)
from ..dense._matrix import Matrix
from .reduce import _check_dim, apply_dim, fiber_offsets, first_non_singleton

_SORT_MODES = ('ascend', 'descend')


def _prepare(mat: Matrix, dim: Optional[int], mode: str, name: str):
    mode = check_mode(mode, _SORT_MODES, name)
    if not mat.is_real():
        raise ComplexUnsupportedError(f"{name}: complex matrices are not supported")
    dim = _check_dim(dim)
    if dim is None:
        dim = first_non_singleton(mat)
    offsets, _ = fiber_offsets(mat, dim)
    return mode, offsets


def _argsort(values: np.ndarray, mode: str) -> np.ndarray:
    """Stable column-wise argsort of an ``(L, F)`` block."""
    if mode == 'ascend':
        return np.argsort(values, axis=0, kind='stable')
    length = values.shape[0]
    order = np.argsort(values[::-1], axis=0, kind='stable')[::-1]
    return length - 1 - order


def sort(mat: Matrix, dim: Optional[int] = None, mode: str = 'ascend') -> Matrix:
    """
    Sort each fiber along ``dim`` in place and return the matrix.

    Args:
        dim: Dimension to sort (first non-singleton dimension when None).
        mode: 'ascend' or 'descend'.

    Raises:
        InvalidModeError: For any other mode.
        ComplexUnsupportedError: If the matrix is complex.
    """
    mode, offsets = _prepare(mat, dim, mode, 'sort')
    data = mat.get_real_data()
    values = data[offsets]
    order = _argsort(values, mode)
    data[offsets] = np.take_along_axis(values, order, axis=0)
    return mat


def asort(mat: Matrix, dim: Optional[int] = None, mode: str = 'ascend') -> Matrix:
    """
    Sorting permutation of each fiber along ``dim``.

    The result has the size of ``mat``; entry ``k`` of a fiber is the
    fiber coordinate of its ``k``-th smallest (or largest) element.
    """
    mode, offsets = _prepare(mat, dim, mode, 'asort')
    order = _argsort(mat.get_real_data()[offsets], mode)
    out = np.zeros(mat.numel(), dtype=np.int64)
    out[offsets.ravel(order='F')] = order.ravel(order='F')
    return mat._new(mat.size, out, dtype=DType.UINT32)


def median(mat: Matrix, dim: Optional[int] = None) -> Matrix:
    """
    Median along ``dim`` (all elements when None).

    Raises:
        InvalidShapeError: If the reduced dimension is empty.
        ComplexUnsupportedError: If the matrix is complex.
    """
    if not mat.is_real():
        raise ComplexUnsupportedError("median: complex matrices are not supported")
    dim = _check_dim(dim)
    length = mat.numel() if dim is None else mat.get_size(dim)
    if length == 0:
        raise InvalidShapeError("median: cannot reduce an empty dimension")
    return apply_dim(mat, lambda v: np.median(v, axis=0), dim)


__all__ = ["sort", "asort", "median"]
