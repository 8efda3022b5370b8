"""
Selection and structural transforms.

Every function here builds a View over the source matrix and materializes
it into a new Matrix, except ``set_``/``setitem`` which scatter values
into the receiver.

Selectors (per dimension, starting at dimension 0):

- ``int``: a single coordinate (negative counts from the end)
- ``[a, b]`` / ``[a, step, b]``: inclusive colon range
- ``[]``: the whole dimension
- ``[[i, j, ...]]`` or an integer ndarray: explicit indices
- a boolean list or ndarray: mask
- a Python ``slice``: exclusive-stop range

A single Matrix argument selects linearly (column-major): a logical
matrix of the same size as a mask, any other matrix as indices.
"""

from __future__ import annotations

import numbers
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .._dtypes import coerce
from ..core.error import (
    InvalidRangeError,
    OutOfBoundsError,
    ShapeMismatchError,
)
from ._matrix import Matrix, to_matrix
from ._tools import check_size, check_size_equals, is_integer
from ._view import View


# =============================================================================
# Materialization
# =============================================================================

def extract_view(mat: Matrix, view: View) -> Matrix:
    """Copy the elements addressed by ``view`` into a new matrix of its size."""
    re, im = mat._parts()
    re = view.extract_from(re)
    if im is not None:
        im = view.extract_from(im)
    return mat._new(view.size, re, im)


def _nd_parts(mat: Matrix, ndims: int) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """Real/imaginary halves reshaped to ``size`` padded to ``ndims`` dimensions."""
    shape = list(mat.size) + [1] * (ndims - mat.ndims())
    re, im = mat._parts()
    re = re.reshape(shape, order='F')
    if im is not None:
        im = im.reshape(shape, order='F')
    return re, im


def _linear_offsets(mat: Matrix, selector: Matrix) -> Tuple[np.ndarray, List[int]]:
    """Offsets and result size of a linear (single Matrix) selection."""
    if selector.is_logical():
        if not check_size_equals(mat.size, selector.size, mat.config.ignore_trailing_dims):
            raise ShapeMismatchError(
                f"Logical index of size {selector.size} does not match {mat.size}"
            )
        offsets = np.flatnonzero(selector.get_real_data())
        size = [1, offsets.size] if mat.is_row() else [offsets.size, 1]
        return offsets, size

    if not selector.is_real():
        raise OutOfBoundsError("Indices must be real")
    idx = selector.get_real_data()
    if idx.size and np.any(np.mod(idx, 1) != 0):
        raise OutOfBoundsError("Indices must be integers")
    idx = idx.astype(np.int64)
    if idx.size and (idx.min() < 0 or idx.max() >= mat.numel()):
        raise OutOfBoundsError(f"Linear indices must lie in [0, {mat.numel() - 1}]")
    return idx, selector.size


# =============================================================================
# Get / Set
# =============================================================================

def get(mat: Matrix, *selectors) -> Matrix:
    """
    Extract a sub-matrix (copy).

    Example:
        >>> m = Matrix([3, 3], range(9))
        >>> m.get([], 1).size          # second column
        [3, 1]
        >>> m.get([0, 2, 2]).size      # rows 0 and 2
        [2, 3]
        >>> m.get(m > 4).get_data()    # linear logical selection
        array([5., 6., 7., 8.])
    """
    if len(selectors) == 1 and isinstance(selectors[0], Matrix):
        offsets, size = _linear_offsets(mat, selectors[0])
        re, im = mat._parts()
        return mat._new(size, re[offsets], im[offsets] if im is not None else None)
    if not selectors:
        return mat._clone()
    return extract_view(mat, mat.get_view().select(*selectors))


def set_(mat: Matrix, *args) -> Matrix:
    """
    Assign ``value`` into a selection of ``mat`` in place.

    ``set_(mat, sel0, ..., value)``. The value is a scalar or anything with
    as many elements as the selection; it is written in column-major
    selection order. A complex value turns ``mat`` complex.

    Raises:
        ShapeMismatchError: If the value's element count does not match.
    """
    if not args:
        raise ShapeMismatchError("set requires a value")
    *selectors, value = args

    if len(selectors) == 1 and isinstance(selectors[0], Matrix):
        offsets, _ = _linear_offsets(mat, selectors[0])
    elif selectors:
        offsets = mat.get_view().select(*selectors).offsets()
    else:
        offsets = np.arange(mat.numel(), dtype=np.int64)

    value = to_matrix(value, mat.config)
    if value.numel() != offsets.size and value.numel() != 1:
        raise ShapeMismatchError(
            f"Cannot assign {value.numel()} values to a selection of {offsets.size}"
        )

    v_re, v_im = value._parts()
    if v_im is not None and not np.any(v_im != 0):
        v_im = None
    if v_im is not None and not mat.is_complex():
        mat.to_complex()

    n = mat.numel()
    data = mat._data
    data[offsets] = coerce(v_re, mat.dtype)
    if mat.is_complex():
        data[n + offsets] = coerce(v_im, mat.dtype) if v_im is not None else 0
    return mat


def _key_to_selectors(mat: Matrix, key) -> list:
    if not isinstance(key, tuple):
        key = (key,)
        if mat.is_row():
            key = (0,) + key
    selectors = []
    for k in key:
        if isinstance(k, (bool, np.bool_)):
            raise InvalidRangeError(f"Invalid index {k!r}")
        if isinstance(k, numbers.Integral):
            selectors.append([int(k)])
        elif isinstance(k, Matrix):
            selectors.append(k.to_array().ravel())
        elif isinstance(k, (list, tuple)):
            arr = np.asarray(k)
            selectors.append(arr if arr.size else [[]])
        else:
            selectors.append(k)
    return selectors


def getitem(mat: Matrix, key):
    """
    ``mat[key]`` with Python conventions.

    All-integer keys return a Python scalar (negative indices allowed);
    a single integer is linear. Slices have exclusive stops. Lists and
    arrays are indices or masks. A single key on a row vector addresses
    its columns.
    """
    if isinstance(key, Matrix):
        return get(mat, key)
    keys = key if isinstance(key, tuple) else (key,)
    if all(isinstance(k, numbers.Integral) and not isinstance(k, (bool, np.bool_)) for k in keys):
        if len(keys) == 1:
            k = int(keys[0])
            return mat.value(k + mat.numel() if k < 0 else k)
        coords = [
            int(k) + mat.get_size(i) if k < 0 else int(k)
            for i, k in enumerate(keys)
        ]
        return mat.value(coords)
    return get(mat, *_key_to_selectors(mat, key))


def setitem(mat: Matrix, key, value) -> None:
    """``mat[key] = value``; same key rules as ``getitem``."""
    if isinstance(key, Matrix):
        set_(mat, key, value)
        return
    set_(mat, *_key_to_selectors(mat, key), value)


# =============================================================================
# Structural Transforms
# =============================================================================

def permute(mat: Matrix, order: Sequence[int]) -> Matrix:
    """Reorder dimensions (new dimension ``i`` is old dimension ``order[i]``)."""
    return extract_view(mat, mat.get_view().permute(order))


def ipermute(mat: Matrix, order: Sequence[int]) -> Matrix:
    return extract_view(mat, mat.get_view().ipermute(order))


def shiftdim(mat: Matrix, n: Optional[int] = None) -> Tuple[Matrix, int]:
    """Matlab ``shiftdim``; returns the shifted matrix and the shift count."""
    view, n = mat.get_view().shift_dimension(n)
    return extract_view(mat, view), n


def circshift(mat: Matrix, k, dim: Optional[int] = None) -> Matrix:
    return extract_view(mat, mat.get_view().circshift(k, dim))


def flipdim(mat: Matrix, dim: int) -> Matrix:
    return extract_view(mat, mat.get_view().flipdim(dim))


def fliplr(mat: Matrix) -> Matrix:
    return flipdim(mat, 1)


def flipud(mat: Matrix) -> Matrix:
    return flipdim(mat, 0)


def rot90(mat: Matrix, k: int = 1) -> Matrix:
    return extract_view(mat, mat.get_view().rot90(k))


def repmat(mat: Matrix, *size) -> Matrix:
    """
    Tile a matrix: output size is ``size(d) * reps[d]`` in every dimension.

    ``repmat(m, n)`` tiles ``n x n``; ``repmat(m, r, c, ...)`` or
    ``repmat(m, [r, c, ...])`` tile per dimension.
    """
    if len(size) == 1:
        size = size[0]
    reps = check_size(size, 'square')
    ndims = max(len(reps), mat.ndims())
    reps = reps + [1] * (ndims - len(reps))
    re, im = _nd_parts(mat, ndims)
    re = np.tile(re, reps)
    if im is not None:
        im = np.tile(im, reps)
    return mat._new(list(re.shape), re.ravel(order='F'),
                    im.ravel(order='F') if im is not None else None)


def cat(dim: int, *matrices) -> Matrix:
    """
    Concatenate matrices along ``dim``.

    Empty ``0x0`` operands are skipped. The result takes the element kind
    of the first operand and is complex if any operand is.

    Raises:
        ShapeMismatchError: If the sizes differ outside ``dim``.
    """
    if not is_integer(dim, 0):
        raise OutOfBoundsError(f"Dimension must be a non-negative integer, got {dim!r}")
    dim = int(dim)
    mats = [to_matrix(m) for m in matrices]
    if not mats:
        raise ShapeMismatchError("cat requires at least one matrix")
    first = mats[0]
    kept = [m for m in mats if m.size != [0, 0]] or [first]

    ndims = max([dim + 1] + [m.ndims() for m in kept])
    ref = list(kept[0].size) + [1] * (ndims - kept[0].ndims())
    is_complex = any(m.is_complex() for m in kept)
    re_parts, im_parts = [], []
    for m in kept:
        size = list(m.size) + [1] * (ndims - m.ndims())
        if any(size[d] != ref[d] for d in range(ndims) if d != dim):
            raise ShapeMismatchError(
                f"Cannot concatenate size {m.size} with {kept[0].size} along dimension {dim}"
            )
        re, im = _nd_parts(m, ndims)
        re_parts.append(re.astype(np.float64))
        if is_complex:
            im_parts.append(im.astype(np.float64) if im is not None else np.zeros(re.shape))

    re = np.concatenate(re_parts, axis=dim)
    im = np.concatenate(im_parts, axis=dim) if is_complex else None
    return first._new(list(re.shape), re.ravel(order='F'),
                      im.ravel(order='F') if im is not None else None)


def horzcat(*matrices) -> Matrix:
    return cat(1, *matrices)


def vertcat(*matrices) -> Matrix:
    return cat(0, *matrices)


__all__ = [
    "get",
    "set_",
    "getitem",
    "setitem",
    "extract_view",
    "permute",
    "ipermute",
    "shiftdim",
    "circshift",
    "flipdim",
    "fliplr",
    "flipud",
    "rot90",
    "repmat",
    "cat",
    "horzcat",
    "vertcat",
]
