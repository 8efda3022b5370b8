"""
Scatter-add accumulation (Matlab ``accumarray``).
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ..core.config import Config
from ..core.error import InvalidParameterError, OutOfBoundsError, ShapeMismatchError
from ..dense._matrix import Matrix, to_matrix
from ..dense._tools import check_size


def _single_subscript(subs: Matrix, requested) -> bool:
    count = subs.numel()
    return (
        requested is not None
        and count > 1
        and subs.is_row()
        and len(requested) == count
        and requested[-1] > 1
    )


def accumarray(subs: Any, vals: Any, size: Optional[Any] = None, config: Optional[Config] = None) -> Matrix:
    """
    Accumulate ``vals[k]`` into ``out[subs[k, :]]``.

    Args:
        subs: ``K x D`` subscripts (one row per value), or a vector of
            ``K`` subscripts into a column. A ``1 x D`` row is read as
            one ``D``-dimensional subscript only when ``size`` is given
            with ``D`` dimensions and a last dimension larger than one;
            otherwise it is ``D`` subscripts into a column.
        vals: ``K`` values, or a scalar added for every subscript.
        size: Output size; ``max(subs) + 1`` per dimension when omitted.

    Returns:
        Matrix of the configured default type.

    Raises:
        InvalidParameterError: If a subscript is negative or not an integer.
        OutOfBoundsError: If ``size`` is too small for the subscripts.
        ShapeMismatchError: If ``vals`` does not have ``K`` elements.

    Example:
        >>> accumarray([0, 2, 0], [1, 2, 3]).get_data()
        array([4., 0., 2.])
    """
    subs = to_matrix(subs, config)
    vals = to_matrix(vals, subs.config)
    if not subs.is_real() or not vals.is_real():
        raise InvalidParameterError("accumarray: subscripts and values must be real")

    requested = None if size is None else check_size(size)
    idx = subs.to_array().astype(np.float64)
    if _single_subscript(subs, requested):
        idx = idx.reshape(1, -1)
    elif subs.is_vector():
        idx = idx.reshape(-1, 1)
    if idx.ndim != 2:
        raise InvalidParameterError("accumarray: subscripts must be a 2-D matrix")
    if idx.size and (np.any(idx < 0) or np.any(np.mod(idx, 1) != 0)):
        raise InvalidParameterError("accumarray: subscripts must be non-negative integers")
    idx = idx.astype(np.int64)
    count, ndims = idx.shape

    values = vals.get_real_data().astype(np.float64)
    if values.size == 1:
        values = np.full(count, values[0])
    elif values.size != count:
        raise ShapeMismatchError(
            f"accumarray: {values.size} values for {count} subscripts"
        )

    needed = (idx.max(axis=0) + 1).tolist() if count else [0] * ndims
    if requested is None:
        out_size = needed + ([1] if ndims == 1 else [])
    else:
        out_size = requested
        padded = out_size + [1] * (ndims - len(out_size))
        if any(p < n for p, n in zip(padded, needed)):
            raise OutOfBoundsError(
                f"accumarray: size {out_size} is too small for subscripts up to {needed}"
            )
        out_size = padded

    out = np.zeros(out_size, dtype=np.float64)
    zeros = np.zeros(count, dtype=np.int64)
    index = tuple(idx[:, d] for d in range(ndims)) + (zeros,) * (len(out_size) - ndims)
    np.add.at(out, index, values)
    return subs._new(out_size, out.ravel(order='F'), dtype=subs.config.default_type)


__all__ = ["accumarray"]
